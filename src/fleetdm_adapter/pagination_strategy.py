"""
PaginationStrategy module: page-number pagination and the generic paginated-resource fetcher
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .http_client import APIResponse, FleetDMClient
from .records import decode_envelope
from .schema import KeyColumn, Qual


logger = logging.getLogger(__name__)

Params = List[Tuple[str, str]]


class PageBasedPagination:
    """
    Zero-based page/per_page pagination

    A page holding fewer records than per_page ends the listing. The envelope's
    meta.has_next_results flag is only advisory: it has been observed to be
    false on full pages that were followed by more results.
    """

    def __init__(self, per_page: int, page_param: str = 'page', size_param: str = 'per_page'):
        if per_page <= 0:
            raise ValueError(f"per_page must be positive, got {per_page}")
        self.per_page = per_page
        self.page_param = page_param
        self.size_param = size_param

    def get_page_params(self, page_num: int) -> Params:
        """Return the query parameters selecting page `page_num`"""
        return [
            (self.page_param, str(page_num)),
            (self.size_param, str(self.per_page))
        ]

    def is_last_page(self, records_on_page: int, response: Optional[APIResponse] = None) -> bool:
        """
        Decide whether pagination stops after this page

        Args:
            records_on_page: Number of records decoded from the page
            response: Response the records came from, for the has-more flag

        Returns:
            True when the page was short
        """
        if records_on_page < self.per_page:
            return True

        if response is not None and self.extract_has_next_results(response) is False:
            logger.warning(
                f"API reported has_next_results=false on a full page of {records_on_page}; "
                f"continuing to next page"
            )
        return False

    @staticmethod
    def extract_has_next_results(response: APIResponse) -> Optional[bool]:
        """Read meta.has_next_results from the envelope, if present"""
        data = response.raw_data
        if not isinstance(data, dict):
            return None
        meta = data.get('meta')
        if not isinstance(meta, dict):
            return None
        has_next = meta.get('has_next_results')
        return has_next if isinstance(has_next, bool) else None


def params_from_quals(quals: Sequence[Qual], key_columns: Sequence[KeyColumn]) -> Params:
    """
    Translate pushed-down equality predicates into API query parameters

    Only '=' predicates on declared key columns are translated; parameters are
    emitted in key-column declaration order.
    """
    equals: Dict[str, Any] = {}
    for qual in quals:
        if qual.operator == '=' and qual.value is not None:
            equals.setdefault(qual.field_name, qual.value)

    params: Params = []
    for key_column in key_columns:
        if key_column.name in equals:
            params.append((key_column.param_name, key_column.to_param(equals[key_column.name])))
    return params


@dataclass(frozen=True)
class PaginatedResource:
    """
    One listable API resource

    Declares the endpoint, the envelope key holding the resource array, the
    record type and the paging/ordering defaults. With per_page=None the
    resource is fetched with a single request.
    """
    endpoint: str
    envelope_key: str
    record_type: type
    per_page: Optional[int] = None
    order_key: Optional[str] = None
    order_direction: Optional[str] = None
    fixed_params: Tuple[Tuple[str, str], ...] = ()

    def _request_params(self, page_params: Params, params: Sequence[Tuple[str, str]]) -> Params:
        request_params = list(page_params)
        if self.order_key:
            request_params.append(('order_key', self.order_key))
        if self.order_direction:
            request_params.append(('order_direction', self.order_direction))
        request_params.extend(self.fixed_params)
        request_params.extend(params)
        return request_params

    def iter_records(self, client: FleetDMClient, params: Sequence[Tuple[str, str]] = ()) -> Iterator[Any]:
        """
        Yield decoded records page by page

        The next page is only requested once every record of the current page
        has been consumed, so a caller that stops iterating stops pagination.

        Args:
            client: API client for this scan
            params: Extra query parameters (translated predicates)

        Yields:
            Records of type record_type
        """
        if self.per_page is None:
            response = client.get(self.endpoint, self._request_params([], params))
            yield from decode_envelope(response.raw_data, self.envelope_key, self.record_type)
            return

        pagination = PageBasedPagination(self.per_page)
        page = 0
        while True:
            response = client.get(self.endpoint, self._request_params(pagination.get_page_params(page), params))
            records = decode_envelope(response.raw_data, self.envelope_key, self.record_type)

            logger.debug(f"{self.endpoint}: page {page} returned {len(records)} records")

            yield from records

            if pagination.is_last_page(len(records), response):
                logger.debug(f"{self.endpoint}: end of results at page {page}")
                return
            page += 1
