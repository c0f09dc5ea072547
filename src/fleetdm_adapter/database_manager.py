"""
DatabaseManager module for materialising scanned FleetDM rows into DuckDB
"""

import logging
import duckdb
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .schema import Column, ColumnType, Table


logger = logging.getLogger(__name__)

DUCKDB_TYPES: Dict[ColumnType, str] = {
    ColumnType.INT: 'BIGINT',
    ColumnType.STRING: 'VARCHAR',
    ColumnType.IPADDR: 'VARCHAR',
    ColumnType.BOOL: 'BOOLEAN',
    ColumnType.DOUBLE: 'DOUBLE',
    ColumnType.TIMESTAMP: 'TIMESTAMPTZ',
    ColumnType.JSON: 'JSON',
}


class DatabaseConnectionError(Exception):
    """Raised when database connection operations fail"""
    pass


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class DatabaseManager:
    """Manages a DuckDB connection holding one table per scanned FleetDM table"""

    def __init__(self):
        self._connection: Optional[duckdb.DuckDBPyConnection] = None

    def create_connection(self, db_path: Optional[Path] = None) -> duckdb.DuckDBPyConnection:
        """
        Create DuckDB database connection

        Args:
            db_path: Path to the database file; in-memory when omitted

        Returns:
            DuckDB connection object

        Raises:
            DatabaseConnectionError: If connection fails or already exists
        """
        if self._connection is not None:
            raise DatabaseConnectionError("Connection already exists. Close existing connection first.")

        try:
            if db_path is None:
                self._connection = duckdb.connect(':memory:')
            else:
                db_path = Path(db_path)
                db_path.parent.mkdir(parents=True, exist_ok=True)
                self._connection = duckdb.connect(str(db_path))

            return self._connection

        except Exception as e:
            raise DatabaseConnectionError(f"Failed to create database connection: {e}")

    def close_connection(self) -> None:
        """
        Close database connection and release resources
        """
        if self._connection:
            try:
                self._connection.close()
            except Exception:
                pass  # Connection might already be closed
            finally:
                self._connection = None

    def _require_connection(self) -> duckdb.DuckDBPyConnection:
        if not self._connection:
            raise DatabaseConnectionError("No active database connection")
        return self._connection

    @staticmethod
    def create_table_sql(table_name: str, columns: Sequence[Column]) -> str:
        """Build the CREATE OR REPLACE TABLE statement for a set of columns"""
        column_defs = ",\n    ".join(
            f"{quote_identifier(column.name)} {DUCKDB_TYPES[column.type]}" for column in columns
        )
        return f"CREATE OR REPLACE TABLE {quote_identifier(table_name)} (\n    {column_defs}\n)"

    def load_table(self, table: Table, rows: Iterable[Dict[str, Any]],
                   columns: Optional[Sequence[Column]] = None) -> int:
        """
        Create (or replace) a typed DuckDB table and insert scanned rows

        Rows are consumed lazily, so a scan error raised while iterating rolls
        the whole load back.

        Args:
            table: Catalog table the rows were scanned from
            rows: Row dictionaries keyed by column name
            columns: Columns to materialise; defaults to every table column

        Returns:
            Number of rows inserted

        Raises:
            DatabaseConnectionError: If no active connection exists
        """
        connection = self._require_connection()
        columns = list(columns or table.columns)

        insert_sql = (
            f"INSERT INTO {quote_identifier(table.name)} VALUES "
            f"({', '.join('?' for _ in columns)})"
        )

        row_count = 0
        try:
            connection.begin()
            connection.execute(self.create_table_sql(table.name, columns))
            for row in rows:
                connection.execute(insert_sql, [row.get(column.name) for column in columns])
                row_count += 1
            connection.commit()

        except Exception:
            connection.rollback()
            raise

        logger.info(f"Loaded {row_count} rows into DuckDB table {table.name}")
        return row_count

    def query(self, sql: str, params: Tuple = ()) -> Tuple[List[str], List[Tuple[Any, ...]]]:
        """
        Run a SQL statement and fetch every result row

        Returns:
            Tuple of (column names, rows)

        Raises:
            DatabaseConnectionError: If no active connection exists
        """
        connection = self._require_connection()
        cursor = connection.execute(sql, params) if params else connection.execute(sql)
        if cursor.description is None:
            return [], []

        column_names = [description[0] for description in cursor.description]
        return column_names, cursor.fetchall()
