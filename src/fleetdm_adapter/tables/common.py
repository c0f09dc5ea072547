"""
Helpers shared by the table modules
"""

import logging
from typing import Any, Optional, Sequence, Type

from ..errors import RecordDecodeError
from ..pagination_strategy import Params
from ..plugin import ScanContext
from ..records import decode_record
from ..schema import Column, ColumnType, KeyColumn


logger = logging.getLogger(__name__)

# Predicates the vulnerability endpoints only accept together with vulnerable=true
VULNERABILITY_FILTERS = ('min_cvss_score', 'max_cvss_score', 'exploit')


def server_url_column() -> Column:
    return Column('server_url', ColumnType.STRING, "FleetDM server URL from connection config.",
                  from_config=True)


def qual_column(name: str, column_type: ColumnType, description: str) -> Column:
    """A filter-only column whose value echoes the scan's equality predicate"""
    return Column(name, column_type, description, from_qual=True)


def get_single(context: ScanContext, endpoint: str, envelope_key: str, record_type: Type[Any],
               params: Optional[Params] = None) -> Optional[Any]:
    """
    Fetch one object from a {envelope_key: {...}} response

    Returns:
        Decoded record, or None when the envelope holds null

    Raises:
        RecordDecodeError: If the response is not an object envelope
    """
    response = context.client.get(endpoint, params)
    payload = response.raw_data
    if not isinstance(payload, dict):
        raise RecordDecodeError(
            f"Expected JSON object envelope with '{envelope_key}' from {endpoint}, got {type(payload).__name__}"
        )

    item = payload.get(envelope_key)
    if item is None:
        logger.debug(f"{endpoint}: no '{envelope_key}' in response")
        return None
    return decode_record(record_type, item)


def vulnerability_params(context: ScanContext, key_columns: Sequence[KeyColumn]) -> Params:
    """
    Translate predicates for the software endpoints

    CVSS and exploit filters are rejected by the API unless vulnerable=true is
    also sent, so it is added when vulnerable_only was not given explicitly.
    """
    params = context.params(key_columns)
    if context.has_equals('vulnerable_only'):
        return params

    for index, (name, _) in enumerate(params):
        if name in VULNERABILITY_FILTERS:
            params.insert(index, ('vulnerable', 'true'))
            break
    return params
