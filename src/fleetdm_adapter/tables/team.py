"""
fleetdm_team: teams and their enrollment secrets, users and agent options
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .common import qual_column


@dataclass(frozen=True)
class TeamSecret:
    secret: Optional[str] = None
    created_at: Optional[datetime] = None
    team_id: Optional[int] = None


@dataclass(frozen=True)
class TeamUser:
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    global_role: Optional[str] = None
    role: Optional[str] = None


@dataclass(frozen=True)
class Team:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    name: Optional[str] = None
    description: Optional[str] = None
    user_count: Optional[int] = None
    host_count: Optional[int] = None
    secrets: Optional[Tuple[TeamSecret, ...]] = None
    users: Optional[Tuple[TeamUser, ...]] = None
    agent_options: Any = None


TEAMS = PaginatedResource('teams', 'teams', Team, per_page=10000)

KEY_COLUMNS = (
    KeyColumn('query'),
)


def list_teams(context: ScanContext) -> Iterator[Team]:
    yield from TEAMS.iter_records(context.client, context.params(KEY_COLUMNS))


TABLE = Table(
    name='fleetdm_team',
    description="Information about teams in FleetDM.",
    list_records=list_teams,
    key_columns=KEY_COLUMNS,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the team."),
        Column('name', ColumnType.STRING, "Name of the team."),
        Column('description', ColumnType.STRING, "Description of the team."),
        Column('user_count', ColumnType.INT, "Number of users in the team."),
        Column('host_count', ColumnType.INT, "Number of hosts assigned to the team."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the team was created."),
        Column('agent_options', ColumnType.JSON, "Agent options configured for this team."),
        Column('secrets', ColumnType.JSON, "Enrollment secrets associated with the team."),
        Column('users', ColumnType.JSON, "Users belonging to this team and their roles."),
        qual_column('query', ColumnType.STRING,
                    "Search query keywords. Searchable field is team name. Set in WHERE clause."),
    ],
)
