"""
Test suite for the fleetdm-query command line interface
Following TDD approach with AAA pattern and descriptive naming
"""

import argparse
import json
import pytest
import tempfile
from pathlib import Path

from fleetdm_adapter.cli import main, parse_table_limit, parse_table_where, parse_where, referenced_tables
from fleetdm_adapter.plugin import Plugin
from fleetdm_adapter.schema import Qual
from conftest import SERVER_URL, API_TOKEN, paged


@pytest.fixture
def config_file():
    with tempfile.TemporaryDirectory() as temp_dir:
        config_path = Path(temp_dir) / "fleetdm.toml"
        config_path.write_text(
            f'[connection]\nserver_url = "{SERVER_URL}"\napi_token = "{API_TOKEN}"\n\n[logging]\nlevel = "WARNING"\n'
        )
        yield str(config_path)


class TestArgumentParsing:
    """Test suite for predicate and limit argument parsers"""

    def test_parse_where_with_column_and_value_returns_equality_qual(self):
        """
        Test that COLUMN=VALUE becomes an '=' predicate, keeping '=' inside the value
        """
        assert parse_where('query=a=b') == Qual('query', '=', 'a=b')

    def test_parse_where_without_separator_raises_argument_type_error(self):
        """
        Test that a malformed predicate is rejected
        """
        with pytest.raises(argparse.ArgumentTypeError):
            parse_where('team_id')

    def test_parse_table_where_with_qualified_column_returns_table_and_qual(self):
        """
        Test that TABLE.COLUMN=VALUE is split into the table and its predicate
        """
        assert parse_table_where('fleetdm_host.team_id=3') == ('fleetdm_host', Qual('team_id', '=', '3'))

    def test_parse_table_limit_with_non_numeric_limit_raises_argument_type_error(self):
        """
        Test that a non-numeric row quota is rejected
        """
        with pytest.raises(argparse.ArgumentTypeError):
            parse_table_limit('fleetdm_host=many')

    def test_referenced_tables_returns_catalog_tables_in_order(self, connection_config):
        """
        Test that only known tables are picked out of the SQL text
        """
        # Arrange
        plugin = Plugin(connection_config)
        sql = "SELECT * FROM fleetdm_team t JOIN fleetdm_host h ON h.team_id = t.id JOIN fleetdm_bogus b ON 1=1"

        # Act
        result = referenced_tables(plugin, sql)

        # Assert
        assert result == ['fleetdm_team', 'fleetdm_host']


class TestMain:
    """Test suite for CLI commands"""

    def test_main_tables_lists_every_table(self, config_file, capsys):
        """
        Test that the tables command prints the catalog
        """
        # Act
        exit_code = main(['--config', config_file, 'tables'])

        # Assert
        output = capsys.readouterr().out
        assert exit_code == 0
        assert 'fleetdm_host\t' in output
        assert 'fleetdm_app_store_app\t' in output

    def test_main_columns_marks_key_columns(self, config_file, capsys):
        """
        Test that the columns command flags pushdown keys
        """
        # Act
        exit_code = main(['--config', config_file, 'columns', 'fleetdm_host'])

        # Assert
        lines = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert any(line.startswith('team_id\tINT\tkey\t') for line in lines)
        assert any(line.startswith('hostname\tSTRING\t\t') for line in lines)

    def test_main_scan_prints_rows_as_json_lines(self, config_file, fake_api, capsys):
        """
        Test that scan prints one JSON object per row honouring --limit and --columns
        """
        # Arrange
        fake_api.add('hosts', paged('hosts', [
            {'id': 1, 'hostname': 'a', 'seen_time': '2024-01-01T00:00:00Z'},
            {'id': 2, 'hostname': 'b'},
        ]))

        # Act
        exit_code = main(['--config', config_file, 'scan', 'fleetdm_host',
                          '--where', 'team_id=3', '--limit', '1', '--columns', 'id,seen_time'])

        # Assert
        lines = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert [json.loads(line) for line in lines] == [{'id': 1, 'seen_time': '2024-01-01T00:00:00+00:00'}]
        assert ('team_id', '3') in fake_api.params_for('hosts')[0]

    def test_main_scan_with_unknown_table_returns_error_code(self, config_file, capsys):
        """
        Test that an unknown table prints an error and exits with 1
        """
        # Act
        exit_code = main(['--config', config_file, 'scan', 'fleetdm_nope'])

        # Assert
        assert exit_code == 1
        assert 'Unknown table' in capsys.readouterr().err

    def test_main_with_missing_config_file_returns_error_code(self, capsys):
        """
        Test that a missing configuration file is reported
        """
        # Act
        exit_code = main(['--config', '/nonexistent/fleetdm.toml', 'tables'])

        # Assert
        assert exit_code == 1
        assert 'Configuration file not found' in capsys.readouterr().err

    def test_main_with_unknown_log_level_in_config_returns_error_code(self, capsys):
        """
        Test that a bad [logging] level is reported as a configuration error
        """
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "fleetdm.toml"
            config_path.write_text('[logging]\nlevel = "VERBOSE"\n')

            # Act
            exit_code = main(['--config', str(config_path), 'tables'])

        # Assert
        assert exit_code == 1
        assert "Key 'level' in section [logging]" in capsys.readouterr().err

    def test_main_sql_joins_scanned_tables_in_duckdb(self, config_file, fake_api, capsys):
        """
        Test that sql scans each referenced table into DuckDB and prints the result
        """
        # Arrange
        fake_api.add('teams', paged('teams', [{'id': 1, 'name': 'Servers'}, {'id': 2, 'name': 'Laptops'}]))
        fake_api.add('hosts', paged('hosts', [
            {'id': 10, 'hostname': 'db', 'team_id': 1},
            {'id': 11, 'hostname': 'web', 'team_id': 1},
            {'id': 12, 'hostname': 'mac', 'team_id': 2},
        ]))
        sql = (
            "SELECT t.name, count(*) AS hosts FROM fleetdm_team t "
            "JOIN fleetdm_host h ON h.team_id = t.id GROUP BY t.name ORDER BY t.name"
        )

        # Act
        exit_code = main(['--config', config_file, 'sql', sql])

        # Assert
        lines = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert [json.loads(line) for line in lines] == [
            {'name': 'Laptops', 'hosts': 1},
            {'name': 'Servers', 'hosts': 2},
        ]
        assert fake_api.endpoints() == ['teams', 'hosts']

    def test_main_sql_with_table_predicate_pushes_it_into_scan(self, config_file, fake_api, capsys):
        """
        Test that --where TABLE.COLUMN=VALUE is pushed into that table's scan
        """
        # Arrange
        fake_api.add('hosts', paged('hosts', [{'id': 10, 'hostname': 'db', 'status': 'offline'}]))

        # Act
        exit_code = main(['--config', config_file, 'sql', "SELECT hostname FROM fleetdm_host",
                          '--where', 'fleetdm_host.status=offline'])

        # Assert
        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == {'hostname': 'db'}
        assert ('status', 'offline') in fake_api.params_for('hosts')[0]
