"""
fleetdm_user: FleetDM user accounts
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, Table
from .common import server_url_column


@dataclass(frozen=True)
class UserTeam:
    id: Optional[int] = None
    name: Optional[str] = None
    role: Optional[str] = None


@dataclass(frozen=True)
class User:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    name: Optional[str] = None
    email: Optional[str] = None
    admin_forced_password_reset: Optional[bool] = None
    gravatar_url: Optional[str] = None
    sso_enabled: Optional[bool] = None
    global_role: Optional[str] = None
    teams: Optional[Tuple[UserTeam, ...]] = None
    api_only: Optional[bool] = None


USERS = PaginatedResource('users', 'users', User, per_page=50)


def list_users(context: ScanContext) -> Iterator[User]:
    yield from USERS.iter_records(context.client)


TABLE = Table(
    name='fleetdm_user',
    description="Information about users in FleetDM.",
    list_records=list_users,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the user."),
        Column('name', ColumnType.STRING, "Full name of the user."),
        Column('email', ColumnType.STRING, "Email address of the user."),
        Column('global_role', ColumnType.STRING,
               "Global role of the user (e.g., admin, maintainer, observer). Null if not a global role."),
        Column('api_only', ColumnType.BOOL, "Indicates if the user is an API-only user."),
        Column('sso_enabled', ColumnType.BOOL, "Indicates if Single Sign-On is enabled for the user."),
        Column('admin_forced_password_reset', ColumnType.BOOL,
               "Indicates if an admin has forced a password reset for the user."),
        Column('gravatar_url', ColumnType.STRING, "URL for the user's Gravatar image."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the user was created."),
        Column('updated_at', ColumnType.TIMESTAMP, "Timestamp when the user was last updated."),
        Column('teams', ColumnType.JSON, "Teams the user belongs to, including their role in each team."),
        server_url_column(),
    ],
)
