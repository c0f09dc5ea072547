"""
Test suite for DatabaseManager component
Following TDD approach with AAA pattern and descriptive naming
"""

import pytest
import tempfile
import duckdb
from datetime import datetime, timezone
from pathlib import Path

from fleetdm_adapter.database_manager import DatabaseConnectionError, DatabaseManager
from fleetdm_adapter.schema import Column, ColumnType, Table


def _table() -> Table:
    return Table(
        name='fleetdm_widget',
        description="Widgets",
        list_records=lambda context: iter(()),
        columns=[
            Column('id', ColumnType.INT),
            Column('name', ColumnType.STRING),
            Column('enabled', ColumnType.BOOL),
            Column('seen_time', ColumnType.TIMESTAMP),
            Column('details', ColumnType.JSON),
        ],
    )


class TestDatabaseManager:
    """Test suite for DatabaseManager DuckDB operations functionality"""

    def test_create_connection_without_path_returns_in_memory_connection(self):
        """
        Test that omitting the path opens a working in-memory database
        """
        # Arrange
        db_manager = DatabaseManager()

        # Act
        connection = db_manager.create_connection()

        # Assert
        assert isinstance(connection, duckdb.DuckDBPyConnection)
        assert connection.execute("SELECT 1").fetchone()[0] == 1

        # Cleanup
        db_manager.close_connection()

    def test_create_connection_with_valid_path_creates_database_file(self):
        """
        Test that a file path creates the database and any missing parent directories
        """
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            db_path = Path(temp_dir) / "nested" / "fleet.duckdb"
            db_manager = DatabaseManager()

            # Act
            db_manager.create_connection(db_path)
            db_manager.close_connection()

            # Assert
            assert db_path.exists()

    def test_create_connection_when_already_connected_raises_database_connection_error(self):
        """
        Test that a second connection attempt is rejected
        """
        # Arrange
        db_manager = DatabaseManager()
        db_manager.create_connection()

        # Act & Assert
        with pytest.raises(DatabaseConnectionError, match="Connection already exists"):
            db_manager.create_connection()

        # Cleanup
        db_manager.close_connection()

    def test_query_without_connection_raises_database_connection_error(self):
        """
        Test that querying before connecting fails clearly
        """
        # Arrange
        db_manager = DatabaseManager()

        # Act & Assert
        with pytest.raises(DatabaseConnectionError, match="No active database connection"):
            db_manager.query("SELECT 1")

    def test_create_table_sql_maps_column_types(self):
        """
        Test that column types map onto DuckDB types
        """
        # Act
        sql = DatabaseManager.create_table_sql('fleetdm_widget', _table().columns)

        # Assert
        assert 'CREATE OR REPLACE TABLE "fleetdm_widget"' in sql
        assert '"id" BIGINT' in sql
        assert '"enabled" BOOLEAN' in sql
        assert '"seen_time" TIMESTAMPTZ' in sql
        assert '"details" JSON' in sql

    def test_load_table_with_rows_inserts_typed_values(self):
        """
        Test that scanned rows are queryable with their native types
        """
        # Arrange
        db_manager = DatabaseManager()
        db_manager.create_connection()
        rows = [
            {'id': 1, 'name': 'alpha', 'enabled': True,
             'seen_time': datetime(2024, 1, 1, tzinfo=timezone.utc), 'details': '{"tags": ["a", "b"]}'},
            {'id': 2, 'name': 'beta', 'enabled': False, 'seen_time': None, 'details': None},
        ]

        # Act
        row_count = db_manager.load_table(_table(), rows)
        columns, result = db_manager.query(
            "SELECT id, name, json_array_length(details -> '$.tags') FROM fleetdm_widget WHERE enabled"
        )

        # Assert
        assert row_count == 2
        assert columns[:2] == ['id', 'name']
        assert result == [(1, 'alpha', 2)]

        # Cleanup
        db_manager.close_connection()

    def test_load_table_when_rows_raise_rolls_back_and_reraises(self):
        """
        Test that an error while iterating rows leaves no partial table behind
        """
        # Arrange
        db_manager = DatabaseManager()
        db_manager.create_connection()

        def failing_rows():
            yield {'id': 1, 'name': 'alpha'}
            raise RuntimeError("scan failed")

        # Act & Assert
        with pytest.raises(RuntimeError, match="scan failed"):
            db_manager.load_table(_table(), failing_rows())

        _, tables = db_manager.query(
            "SELECT table_name FROM information_schema.tables WHERE table_name = 'fleetdm_widget'"
        )
        assert tables == []

        # Cleanup
        db_manager.close_connection()

    def test_close_connection_twice_does_not_raise(self):
        """
        Test that closing an already closed manager is a no-op
        """
        # Arrange
        db_manager = DatabaseManager()
        db_manager.create_connection()

        # Act
        db_manager.close_connection()
        db_manager.close_connection()

        # Assert
        with pytest.raises(DatabaseConnectionError):
            db_manager.query("SELECT 1")
