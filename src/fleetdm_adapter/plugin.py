"""
Plugin module: resolves a table scan request into rows streamed back to the host engine
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from .config_loader import ConfigLoader, ConnectionConfig
from .errors import UnknownColumnError, UnknownTableError
from .http_client import FleetDMClient
from .pagination_strategy import Params, params_from_quals
from .schema import Column, ColumnType, KeyColumn, Qual, Table


logger = logging.getLogger(__name__)

_TRUE_VALUES = {'true', 't', '1', 'yes'}
_FALSE_VALUES = {'false', 'f', '0', 'no'}

# Column types that can be compared for a host-side equality recheck
_COMPARABLE_TYPES = {ColumnType.INT, ColumnType.STRING, ColumnType.BOOL, ColumnType.DOUBLE, ColumnType.IPADDR}


def coerce_value(column_type: ColumnType, value: Any) -> Any:
    """
    Convert a textual predicate value to the column's native type

    Non-string values are returned unchanged.

    Raises:
        ValueError: If the text is not a valid value for the column type
    """
    if not isinstance(value, str):
        return value
    if column_type == ColumnType.INT:
        return int(value)
    if column_type == ColumnType.DOUBLE:
        return float(value)
    if column_type == ColumnType.BOOL:
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"invalid boolean value: {value!r}")
    return value


class ScanContext:
    """
    Per-scan state handed to a table's listing routine

    Holds the scan's API client, connection config, pushed-down predicates and
    row quota. Nothing here is shared between scans.
    """

    def __init__(self, client: FleetDMClient, config: ConnectionConfig,
                 quals: Sequence[Qual] = (), limit: Optional[int] = None):
        self.client = client
        self.config = config
        self.quals = list(quals)
        self.limit = limit
        self.rows_emitted = 0

    def equals(self, name: str) -> Any:
        """Value of the first '=' predicate on `name`, or None"""
        for qual in self.quals:
            if qual.field_name == name and qual.operator == '=':
                return qual.value
        return None

    def has_equals(self, name: str) -> bool:
        return self.equals(name) is not None

    def params(self, key_columns: Sequence[KeyColumn]) -> Params:
        return params_from_quals(self.quals, key_columns)

    def rows_remaining(self) -> Optional[int]:
        """Rows still wanted by the host engine; None when there is no quota"""
        if self.limit is None:
            return None
        return max(self.limit - self.rows_emitted, 0)


class Plugin:
    """Catalog of FleetDM tables and the entry point for table scans"""

    def __init__(self, config: Optional[ConnectionConfig] = None,
                 tables: Optional[Mapping[str, Table]] = None):
        if tables is None:
            from .tables import TABLES
            tables = TABLES
        self.config = config or ConnectionConfig()
        self.tables: Dict[str, Table] = dict(tables)

    def table(self, name: str) -> Table:
        """
        Look up a table by name

        Raises:
            UnknownTableError: If the catalog has no such table
        """
        table = self.tables.get(name)
        if table is None:
            raise UnknownTableError(f"Unknown table '{name}'. Available tables: {', '.join(sorted(self.tables))}")
        return table

    def create_client(self, config: ConnectionConfig) -> FleetDMClient:
        return FleetDMClient(config)

    def normalize_quals(self, table: Table, quals: Iterable[Qual]) -> List[Qual]:
        """
        Validate predicate columns and coerce textual values to column types

        Raises:
            UnknownColumnError: If a predicate names a column the table lacks
            ValueError: If a value cannot be converted to the column type
        """
        normalized = []
        for qual in quals:
            column = table.column(qual.field_name)
            if column is None:
                raise UnknownColumnError(f"Table '{table.name}' has no column '{qual.field_name}'")
            normalized.append(Qual(qual.field_name, qual.operator, coerce_value(column.type, qual.value)))
        return normalized

    def select_columns(self, table: Table, columns: Optional[Sequence[str]]) -> List[Column]:
        """
        Resolve requested column names, defaulting to every column

        Raises:
            UnknownColumnError: If a requested column is not declared
        """
        if not columns:
            return list(table.columns)

        selected = []
        for name in columns:
            column = table.column(name)
            if column is None:
                raise UnknownColumnError(f"Table '{table.name}' has no column '{name}'")
            selected.append(column)
        return selected

    def scan(self, table_name: str, quals: Sequence[Qual] = (), columns: Optional[Sequence[str]] = None,
             limit: Optional[int] = None) -> Iterator[Dict[str, Any]]:
        """
        Stream the rows of one table

        Configuration is resolved before any request is issued. Rows already
        yielded stay yielded if a later request fails; the failure is raised
        to the caller unchanged.

        Args:
            table_name: Catalog table name, e.g. 'fleetdm_host'
            quals: Predicates from the host engine; '=' on key columns are pushed down
            columns: Column names to return (all columns when omitted)
            limit: Row quota; the scan stops as soon as it is met

        Yields:
            Row dictionaries keyed by column name
        """
        table = self.table(table_name)
        selected = self.select_columns(table, columns)
        quals = self.normalize_quals(table, quals)

        if limit is not None and limit <= 0:
            return

        config = ConfigLoader.resolve(self.config)

        with self.create_client(config) as client:
            context = ScanContext(client, config, quals, limit)
            logger.info(f"Scanning {table.name} (quals={[(q.field_name, q.operator, q.value) for q in quals]}, limit={limit})")

            try:
                yield from self._scan_rows(table, selected, context)
            except Exception as e:
                logger.error(f"Scan of {table.name} failed after {context.rows_emitted} rows: {e}")
                raise

            logger.info(f"Finished scanning {table.name}: {context.rows_emitted} rows")

    def _scan_rows(self, table: Table, selected: List[Column], context: ScanContext) -> Iterator[Dict[str, Any]]:
        recheck = self._recheck_columns(table, context.quals)
        needed = selected + [column for column in recheck if column not in selected]
        needs_hydrate = table.hydrate_record is not None and any(column.hydrate for column in needed)

        # Predicates on listed columns are checked before the per-row hydrate call
        listed_recheck = [column for column in recheck if not column.hydrate]
        hydrated_recheck = [column for column in recheck if column.hydrate]

        record_id = context.equals('id')
        if table.get_record is not None and record_id is not None:
            record = table.get_record(context, int(record_id))
            records: Iterable[Any] = [record] if record is not None else []
        else:
            records = table.list_records(context)

        try:
            for record in records:
                if listed_recheck and not self._matches(
                        self.build_row(listed_recheck, context, record), listed_recheck, context):
                    continue

                hydrated = table.hydrate_record(context, record) if needs_hydrate else None
                row = self.build_row(needed, context, record, hydrated)

                if not self._matches(row, hydrated_recheck, context):
                    continue

                yield {column.name: row[column.name] for column in selected}
                context.rows_emitted += 1

                if context.rows_remaining() == 0:
                    logger.debug(f"{table.name}: row quota of {context.limit} reached")
                    return
        finally:
            close = getattr(records, 'close', None)
            if close is not None:
                close()

    @staticmethod
    def _recheck_columns(table: Table, quals: Sequence[Qual]) -> List[Column]:
        """Columns with '=' predicates that the API does not filter on"""
        columns = []
        for qual in quals:
            if qual.operator != '=' or table.key_column(qual.field_name) is not None:
                continue
            column = table.column(qual.field_name)
            if column.from_qual or column.type not in _COMPARABLE_TYPES:
                continue
            if column not in columns:
                columns.append(column)
        return columns

    @staticmethod
    def _matches(row: Dict[str, Any], recheck: Sequence[Column], context: ScanContext) -> bool:
        return all(row[column.name] == context.equals(column.name) for column in recheck)

    @staticmethod
    def build_row(columns: Sequence[Column], context: ScanContext, record: Any,
                  hydrated: Any = None) -> Dict[str, Any]:
        """Project a decoded record onto the given columns"""
        row = {}
        for column in columns:
            if column.from_qual:
                row[column.name] = context.equals(column.name)
            elif column.from_config:
                row[column.name] = getattr(context.config, column.source_field, None)
            else:
                source = hydrated if column.hydrate else record
                value = getattr(source, column.source_field, None) if source is not None else None
                row[column.name] = column.convert(value)
        return row
