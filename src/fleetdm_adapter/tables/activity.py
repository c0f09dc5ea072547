"""
fleetdm_activity: audit log activities
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Optional

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table


@dataclass(frozen=True)
class Activity:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    actor_full_name: Optional[str] = None
    actor_id: Optional[int] = None
    actor_gravatar: Optional[str] = None
    actor_email: Optional[str] = None
    actor_type: Optional[str] = None
    type: Optional[str] = None
    details: Any = None
    host_id: Optional[int] = None
    host_display_name: Optional[str] = None


ACTIVITIES = PaginatedResource('activities', 'activities', Activity, per_page=50,
                               order_key='id', order_direction='asc')

KEY_COLUMNS = (
    KeyColumn('type'),
)


def list_activities(context: ScanContext) -> Iterator[Activity]:
    yield from ACTIVITIES.iter_records(context.client, context.params(KEY_COLUMNS))


TABLE = Table(
    name='fleetdm_activity',
    description="Audit log activities in FleetDM.",
    list_records=list_activities,
    key_columns=KEY_COLUMNS,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the activity."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the activity occurred."),
        Column('actor_full_name', ColumnType.STRING, "Full name of the actor who performed the activity."),
        Column('actor_id', ColumnType.INT, "ID of the actor (user). Null for system activities."),
        Column('actor_email', ColumnType.STRING, "Email of the actor."),
        Column('actor_gravatar', ColumnType.STRING, "Gravatar URL for the actor."),
        Column('type', ColumnType.STRING, "Type of activity (e.g., 'created_user', 'ran_live_query')."),
        Column('details', ColumnType.JSON, "JSON object containing details specific to the activity type."),
        Column('host_id', ColumnType.INT, "ID of the host related to this activity, if applicable."),
        Column('host_display_name', ColumnType.STRING, "Display name of the host related to this activity, if applicable."),
    ],
)
