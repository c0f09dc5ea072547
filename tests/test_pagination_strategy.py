"""
Test suite for PaginationStrategy components
Following TDD approach with AAA pattern and descriptive naming
"""

import logging
import pytest
from unittest.mock import Mock

from fleetdm_adapter.http_client import APIResponse
from fleetdm_adapter.pagination_strategy import PageBasedPagination, PaginatedResource, params_from_quals
from fleetdm_adapter.schema import ColumnType, KeyColumn, Qual
from fleetdm_adapter.tables.host import Host


def _response(payload) -> APIResponse:
    return APIResponse(raw_data=payload, metadata={}, status_code=200)


def _host_page(start: int, count: int):
    return {'hosts': [{'id': start + offset} for offset in range(count)]}


class TestPageBasedPagination:
    """Test suite for zero-based page/per_page pagination"""

    def test_get_page_params_with_first_page_returns_page_zero(self):
        """
        Test that pages are numbered from zero
        """
        # Arrange
        pagination = PageBasedPagination(per_page=100)

        # Act
        result = pagination.get_page_params(0)

        # Assert
        assert result == [('page', '0'), ('per_page', '100')]

    def test_is_last_page_with_short_page_returns_true(self):
        """
        Test that a page with fewer records than per_page ends pagination
        """
        # Arrange
        pagination = PageBasedPagination(per_page=50)

        # Act & Assert
        assert pagination.is_last_page(49) is True
        assert pagination.is_last_page(0) is True

    def test_is_last_page_with_full_page_and_has_next_false_continues_with_warning(self, caplog):
        """
        Test that has_next_results=false on a full page is logged but not trusted
        """
        # Arrange
        pagination = PageBasedPagination(per_page=2)
        response = _response({'hosts': [{}, {}], 'meta': {'has_next_results': False}})

        # Act
        with caplog.at_level(logging.WARNING):
            result = pagination.is_last_page(2, response)

        # Assert
        assert result is False
        assert 'has_next_results=false' in caplog.text

    def test_extract_has_next_results_without_meta_returns_none(self):
        """
        Test that a missing meta object yields no has-more information
        """
        assert PageBasedPagination.extract_has_next_results(_response({'hosts': []})) is None

    def test_init_with_zero_per_page_raises_value_error(self):
        """
        Test that a non-positive page size is rejected
        """
        with pytest.raises(ValueError):
            PageBasedPagination(per_page=0)


class TestParamsFromQuals:
    """Test suite for predicate pushdown translation"""

    def test_params_from_quals_with_key_columns_uses_declaration_order(self):
        """
        Test that parameters follow key-column order, not predicate order
        """
        # Arrange
        key_columns = (KeyColumn('team_id', ColumnType.INT), KeyColumn('status'))
        quals = [Qual('status', '=', 'online'), Qual('team_id', '=', 3)]

        # Act
        result = params_from_quals(quals, key_columns)

        # Assert
        assert result == [('team_id', '3'), ('status', 'online')]

    def test_params_from_quals_with_renamed_key_uses_api_parameter_name(self):
        """
        Test that a key column mapped to another parameter name is renamed
        """
        # Arrange
        key_columns = (KeyColumn('vulnerable_only', ColumnType.BOOL, param='vulnerable'),)

        # Act
        result = params_from_quals([Qual('vulnerable_only', '=', True)], key_columns)

        # Assert
        assert result == [('vulnerable', 'true')]

    def test_params_from_quals_ignores_non_key_and_non_equality_predicates(self):
        """
        Test that only '=' predicates on declared key columns are sent
        """
        # Arrange
        key_columns = (KeyColumn('team_id', ColumnType.INT),)
        quals = [Qual('team_id', '>', 3), Qual('hostname', '=', 'web-1'), Qual('team_id', '=', None)]

        # Act
        result = params_from_quals(quals, key_columns)

        # Assert
        assert result == []


class TestPaginatedResource:
    """Test suite for the generic paginated fetcher"""

    def test_iter_records_with_short_second_page_stops_after_two_requests(self):
        """
        Test that a short page is the last page requested
        """
        # Arrange
        client = Mock()
        client.get.side_effect = [_response(_host_page(0, 3)), _response(_host_page(3, 1))]
        resource = PaginatedResource('hosts', 'hosts', Host, per_page=3)

        # Act
        hosts = list(resource.iter_records(client))

        # Assert
        assert [host.id for host in hosts] == [0, 1, 2, 3]
        assert client.get.call_count == 2

    def test_iter_records_with_order_and_fixed_params_builds_params_in_order(self):
        """
        Test that page, ordering, fixed and translated parameters are sent in that order
        """
        # Arrange
        client = Mock()
        client.get.return_value = _response({'carves': []})
        resource = PaginatedResource('carves', 'carves', Host, per_page=50, order_key='id',
                                     order_direction='desc', fixed_params=(('expired', 'true'),))

        # Act
        list(resource.iter_records(client, [('team_id', '2')]))

        # Assert
        client.get.assert_called_once_with('carves', [
            ('page', '0'), ('per_page', '50'), ('order_key', 'id'), ('order_direction', 'desc'),
            ('expired', 'true'), ('team_id', '2')
        ])

    def test_iter_records_without_per_page_makes_single_request(self):
        """
        Test that unpaginated resources are fetched once without paging parameters
        """
        # Arrange
        client = Mock()
        client.get.return_value = _response(_host_page(0, 5))
        resource = PaginatedResource('hosts', 'hosts', Host)

        # Act
        hosts = list(resource.iter_records(client, [('team_id', '1')]))

        # Assert
        assert len(hosts) == 5
        client.get.assert_called_once_with('hosts', [('team_id', '1')])

    def test_iter_records_when_consumer_stops_does_not_request_next_page(self):
        """
        Test that pagination is lazy: abandoning iteration stops requests
        """
        # Arrange
        client = Mock()
        client.get.return_value = _response(_host_page(0, 10))
        resource = PaginatedResource('hosts', 'hosts', Host, per_page=10)

        # Act
        records = resource.iter_records(client)
        first = next(records)
        records.close()

        # Assert
        assert first.id == 0
        assert client.get.call_count == 1
