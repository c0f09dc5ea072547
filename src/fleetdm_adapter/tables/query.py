"""
fleetdm_query: saved queries
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .common import get_single, qual_column, server_url_column


@dataclass(frozen=True)
class QueryPack:
    id: Optional[int] = None
    name: Optional[str] = None
    type: Optional[str] = None


@dataclass(frozen=True)
class SavedQuery:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    name: Optional[str] = None
    description: Optional[str] = None
    query: Optional[str] = None
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    observer_can_run: Optional[bool] = None
    team_id: Optional[int] = None
    automations_enabled: Optional[bool] = None
    interval: Optional[int] = None
    platform: Optional[str] = None
    min_osquery_version: Optional[str] = None
    logging: Optional[str] = None
    stats: Any = None
    packs: Optional[Tuple[QueryPack, ...]] = None


QUERIES = PaginatedResource('queries', 'queries', SavedQuery, per_page=50)

KEY_COLUMNS = (
    KeyColumn('query_text_filter', param='query'),
    KeyColumn('team_id', ColumnType.INT),
)


def list_queries(context: ScanContext) -> Iterator[SavedQuery]:
    yield from QUERIES.iter_records(context.client, context.params(KEY_COLUMNS))


def get_query(context: ScanContext, query_id: int) -> Optional[SavedQuery]:
    if query_id <= 0:
        return None
    return get_single(context, f"queries/{query_id}", 'query', SavedQuery)


TABLE = Table(
    name='fleetdm_query',
    description="Saved queries in FleetDM.",
    list_records=list_queries,
    get_record=get_query,
    key_columns=KEY_COLUMNS,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the saved query."),
        Column('name', ColumnType.STRING, "Name of the saved query."),
        Column('query_sql', ColumnType.STRING, "The SQL content of the saved query.", field='query'),
        Column('description', ColumnType.STRING, "Description of the saved query."),
        Column('team_id', ColumnType.INT, "ID of the team the query belongs to. Null if it's a global query."),
        Column('author_id', ColumnType.INT, "ID of the user who created the query."),
        Column('author_name', ColumnType.STRING, "Name of the user who created the query."),
        Column('author_email', ColumnType.STRING, "Email of the user who created the query."),
        Column('observer_can_run', ColumnType.BOOL, "Indicates if users with the observer role can run this query."),
        Column('automations_enabled', ColumnType.BOOL, "Indicates if automations (scheduling) are enabled for this query."),
        Column('interval', ColumnType.INT, "Interval in seconds for scheduled execution. Null if not scheduled."),
        Column('platform', ColumnType.STRING, "Target platform(s) for the query (comma-separated, or empty for all)."),
        Column('min_osquery_version', ColumnType.STRING, "Minimum osquery version required to run this query."),
        Column('logging_type', ColumnType.STRING,
               "Type of logging for query results (e.g., snapshot, differential).", field='logging'),
        Column('stats', ColumnType.JSON, "Performance statistics for the query execution."),
        Column('packs', ColumnType.JSON, "Packs this query belongs to."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the query was created."),
        Column('updated_at', ColumnType.TIMESTAMP, "Timestamp when the query was last updated."),
        qual_column('query_text_filter', ColumnType.STRING,
                    "Search query string to filter saved queries by name or SQL. Use in WHERE clause."),
        server_url_column(),
    ],
)
