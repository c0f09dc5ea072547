"""
fleetdm_policy: global policies
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .common import get_single, qual_column, server_url_column


@dataclass(frozen=True)
class Policy:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    name: Optional[str] = None
    query: Optional[str] = None
    description: Optional[str] = None
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    team_id: Optional[int] = None
    resolution: Optional[str] = None
    platform: Optional[str] = None
    passing_host_count: Optional[int] = None
    failing_host_count: Optional[int] = None
    critical: Optional[bool] = None
    calendar_events_enabled: Optional[bool] = None


POLICIES = PaginatedResource('global/policies', 'policies', Policy, per_page=50)

KEY_COLUMNS = (
    KeyColumn('filter_search_query', param='query'),
    KeyColumn('team_id', ColumnType.INT),
)


def list_policies(context: ScanContext) -> Iterator[Policy]:
    yield from POLICIES.iter_records(context.client, context.params(KEY_COLUMNS))


def get_policy(context: ScanContext, policy_id: int) -> Optional[Policy]:
    if policy_id <= 0:
        return None
    return get_single(context, f"global/policies/{policy_id}", 'policy', Policy)


TABLE = Table(
    name='fleetdm_policy',
    description="Information about policies in FleetDM.",
    list_records=list_policies,
    get_record=get_policy,
    key_columns=KEY_COLUMNS,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the policy."),
        Column('name', ColumnType.STRING, "Name of the policy."),
        Column('query_text', ColumnType.STRING, "The osquery query that defines the policy.", field='query'),
        Column('description', ColumnType.STRING, "Description of the policy."),
        Column('platform', ColumnType.STRING,
               "Target platform for the policy (e.g., 'darwin', 'windows', 'linux', or empty for all)."),
        Column('team_id', ColumnType.INT, "ID of the team the policy belongs to. Null if it's a global policy."),
        Column('passing_host_count', ColumnType.INT, "Number of hosts currently passing this policy."),
        Column('failing_host_count', ColumnType.INT, "Number of hosts currently failing this policy."),
        Column('resolution', ColumnType.STRING, "Resolution steps or instructions for hosts failing this policy."),
        Column('author_id', ColumnType.INT, "ID of the user who created the policy."),
        Column('author_name', ColumnType.STRING, "Name of the user who created the policy."),
        Column('author_email', ColumnType.STRING, "Email of the user who created the policy."),
        Column('critical', ColumnType.BOOL, "Whether the policy is marked as critical."),
        Column('calendar_events_enabled', ColumnType.BOOL, "Whether calendar events are enabled for this policy."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the policy was created."),
        Column('updated_at', ColumnType.TIMESTAMP, "Timestamp when the policy was last updated."),
        qual_column('filter_search_query', ColumnType.STRING,
                    "Search query string to filter policies by name or query text. Use in WHERE clause."),
        server_url_column(),
    ],
)
