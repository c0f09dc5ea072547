"""
Command line interface for querying FleetDM tables
"""

import argparse
import json
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import duckdb

from .config_loader import ConfigLoader, ConnectionConfig
from .database_manager import DatabaseConnectionError, DatabaseManager
from .errors import FleetDMError
from .plugin import Plugin
from .schema import Qual


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

TABLE_NAME_PATTERN = re.compile(r'\bfleetdm_[a-z_]+\b')


def parse_where(expression: str) -> Qual:
    """Parse a 'column=value' argument into an equality predicate"""
    column, separator, value = expression.partition('=')
    if not separator or not column.strip():
        raise argparse.ArgumentTypeError(f"expected COLUMN=VALUE, got {expression!r}")
    return Qual(column.strip(), '=', value)


def parse_table_where(expression: str) -> tuple:
    """Parse a 'table.column=value' argument into (table, predicate)"""
    qual = parse_where(expression)
    table_name, separator, column = qual.field_name.partition('.')
    if not separator or not column:
        raise argparse.ArgumentTypeError(f"expected TABLE.COLUMN=VALUE, got {expression!r}")
    return table_name, Qual(column, '=', qual.value)


def parse_table_limit(expression: str) -> tuple:
    """Parse a 'table=N' argument into (table, limit)"""
    table_name, separator, value = expression.partition('=')
    if not separator or not value.strip().isdigit():
        raise argparse.ArgumentTypeError(f"expected TABLE=N, got {expression!r}")
    return table_name.strip(), int(value)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def write_row(row: Dict[str, Any], stream=None) -> None:
    stream = stream or sys.stdout
    stream.write(json.dumps(row, default=_json_default) + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fleetdm-query',
        description="Query the FleetDM REST API as tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List tables
  fleetdm-query tables

  # First five online hosts of team 3
  fleetdm-query scan fleetdm_host --where team_id=3 --where status=online --limit 5

  # SQL over scanned tables (JSON columns work with DuckDB JSON functions)
  fleetdm-query sql "SELECT name, json_array_length(versions) FROM fleetdm_software_title" \\
      --where fleetdm_software_title.vulnerable_only=true
        """
    )
    parser.add_argument("--config", help="Path to TOML or YAML connection configuration file")
    parser.add_argument("--log-level", choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help="Logging level (defaults to the config file's [logging] level)")

    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('tables', help="List available tables")

    columns_parser = subparsers.add_parser('columns', help="List the columns of a table")
    columns_parser.add_argument('table', help="Table name, e.g. fleetdm_host")

    scan_parser = subparsers.add_parser('scan', help="Scan a table and print rows as JSON lines")
    scan_parser.add_argument('table', help="Table name, e.g. fleetdm_host")
    scan_parser.add_argument('--where', action='append', type=parse_where, default=[],
                             metavar='COLUMN=VALUE', help="Equality predicate (repeatable)")
    scan_parser.add_argument('--limit', type=int, help="Maximum number of rows")
    scan_parser.add_argument('--columns', help="Comma-separated column names")

    sql_parser = subparsers.add_parser('sql', help="Run SQL in DuckDB over scanned tables")
    sql_parser.add_argument('query', help="SQL statement referencing fleetdm_* tables")
    sql_parser.add_argument('--where', action='append', type=parse_table_where, default=[],
                            metavar='TABLE.COLUMN=VALUE', help="Predicate pushed down into a table scan (repeatable)")
    sql_parser.add_argument('--limit', action='append', type=parse_table_limit, default=[],
                            metavar='TABLE=N', help="Row quota for a table scan (repeatable)")
    sql_parser.add_argument('--database', help="DuckDB file to load into (in-memory by default)")

    return parser


def load_connection_config(config_path: Optional[str]) -> ConnectionConfig:
    if config_path:
        return ConfigLoader.load_config(Path(config_path))
    return ConnectionConfig()


def list_tables(plugin: Plugin) -> None:
    for name in sorted(plugin.tables):
        print(f"{name}\t{plugin.tables[name].description}")


def list_columns(plugin: Plugin, table_name: str) -> None:
    table = plugin.table(table_name)
    for column in table.columns:
        marker = 'key' if table.key_column(column.name) else ''
        print(f"{column.name}\t{column.type.value}\t{marker}\t{column.description}")


def run_scan(plugin: Plugin, table_name: str, quals: Sequence[Qual], limit: Optional[int],
             columns: Optional[str]) -> int:
    column_names = [name.strip() for name in columns.split(',')] if columns else None
    row_count = 0
    for row in plugin.scan(table_name, quals=quals, columns=column_names, limit=limit):
        write_row(row)
        row_count += 1
    return row_count


def referenced_tables(plugin: Plugin, sql: str) -> List[str]:
    """Catalog tables named in a SQL statement, in order of first appearance"""
    names: List[str] = []
    for name in TABLE_NAME_PATTERN.findall(sql):
        if name in plugin.tables and name not in names:
            names.append(name)
    return names


def run_sql(plugin: Plugin, sql: str, where: Sequence[tuple], limits: Sequence[tuple],
            database: Optional[str] = None) -> int:
    """Scan every referenced table into DuckDB, run the statement and print the result"""
    quals_by_table: Dict[str, List[Qual]] = {}
    for table_name, qual in where:
        quals_by_table.setdefault(table_name, []).append(qual)
    limit_by_table = dict(limits)

    db_manager = DatabaseManager()
    db_manager.create_connection(Path(database) if database else None)
    try:
        for table_name in referenced_tables(plugin, sql):
            table = plugin.table(table_name)
            rows = plugin.scan(table_name, quals=quals_by_table.get(table_name, ()),
                               limit=limit_by_table.get(table_name))
            db_manager.load_table(table, rows)

        column_names, result_rows = db_manager.query(sql)
        for result_row in result_rows:
            write_row(dict(zip(column_names, result_row)))
        return len(result_rows)
    finally:
        db_manager.close_connection()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the fleetdm-query console script"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_connection_config(args.config)
    except (FileNotFoundError, FleetDMError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(level=args.log_level or config.log_level, format=LOG_FORMAT)

    plugin = Plugin(config)

    try:
        if args.command == 'tables':
            list_tables(plugin)
        elif args.command == 'columns':
            list_columns(plugin, args.table)
        elif args.command == 'scan':
            row_count = run_scan(plugin, args.table, args.where, args.limit, args.columns)
            logger.info(f"{row_count} rows returned")
        elif args.command == 'sql':
            row_count = run_sql(plugin, args.query, args.where, args.limit, args.database)
            logger.info(f"{row_count} rows returned")
        return 0

    except (FleetDMError, DatabaseConnectionError, duckdb.Error, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
