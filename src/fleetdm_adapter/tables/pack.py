"""
fleetdm_pack: query packs

Targets, scheduled queries and targeted ids are only filled in when a pack is
fetched by id (WHERE id = N).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, Table
from .common import get_single, server_url_column


@dataclass(frozen=True)
class ScheduledQuery:
    id: Optional[int] = None
    name: Optional[str] = None
    query: Optional[str] = None
    description: Optional[str] = None
    interval: Optional[int] = None
    platform: Optional[str] = None
    min_osquery_version: Optional[str] = None
    logging: Optional[str] = None
    removed: Optional[bool] = None
    snapshot: Optional[bool] = None
    shard: Optional[int] = None


@dataclass(frozen=True)
class Pack:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    name: Optional[str] = None
    description: Optional[str] = None
    platform: Optional[str] = None
    disabled: Optional[bool] = None
    type: Optional[str] = None
    team_id: Optional[int] = None
    target_count: Optional[int] = None
    total_scheduled_queries_count: Optional[int] = None
    targets: Any = None
    scheduled_queries: Optional[Tuple[ScheduledQuery, ...]] = None
    agent_options: Any = None
    host_ids: Optional[Tuple[int, ...]] = None
    label_ids: Optional[Tuple[int, ...]] = None
    team_ids_targeted: Optional[Tuple[int, ...]] = field(default=None, metadata={'json': 'team_ids'})


PACKS = PaginatedResource('packs', 'packs', Pack, per_page=50)


def list_packs(context: ScanContext) -> Iterator[Pack]:
    yield from PACKS.iter_records(context.client)


def get_pack(context: ScanContext, pack_id: int) -> Optional[Pack]:
    if pack_id <= 0:
        return None
    return get_single(context, f"packs/{pack_id}", 'pack', Pack)


TABLE = Table(
    name='fleetdm_pack',
    description="Query packs in FleetDM.",
    list_records=list_packs,
    get_record=get_pack,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the pack."),
        Column('name', ColumnType.STRING, "Name of the pack."),
        Column('description', ColumnType.STRING, "Description of the pack."),
        Column('platform', ColumnType.STRING, "Target platform(s) for the pack (comma-separated, or empty for all)."),
        Column('disabled', ColumnType.BOOL, "Indicates if the pack is disabled."),
        Column('type', ColumnType.STRING, "Type of the pack (e.g., 'global', 'team')."),
        Column('team_id', ColumnType.INT, "ID of the team the pack belongs to. Null if it's a global pack."),
        Column('target_count', ColumnType.INT, "Number of targets (hosts/labels/teams) for this pack."),
        Column('total_scheduled_queries_count', ColumnType.INT, "Total number of scheduled queries in this pack."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the pack was created."),
        Column('updated_at', ColumnType.TIMESTAMP, "Timestamp when the pack was last updated."),
        Column('targets', ColumnType.JSON, "Target hosts, labels, and teams for this pack."),
        Column('scheduled_queries', ColumnType.JSON, "Scheduled queries within this pack."),
        Column('agent_options', ColumnType.JSON, "Agent options associated with the pack."),
        Column('host_ids', ColumnType.JSON, "List of host IDs targeted by this pack."),
        Column('label_ids', ColumnType.JSON, "List of label IDs targeted by this pack."),
        Column('team_ids_targeted', ColumnType.JSON, "List of team IDs targeted by this pack, typically for global packs."),
        server_url_column(),
    ],
)
