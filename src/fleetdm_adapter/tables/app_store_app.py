"""
fleetdm_app_store_app: Apple App Store (VPP) apps, listed per team

The app store endpoint only answers for one team at a time. Without a team_id
predicate every team is discovered through the teams listing first and the
endpoint is called once per team; each row carries the team it came from.
"""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, List, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .team import TEAMS


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppStoreApp:
    app_store_id: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    icon_url: Optional[str] = None
    platform: Optional[str] = None
    latest_version: Optional[str] = None
    bundle_identifier: Optional[str] = None
    self_service: Optional[bool] = None
    categories: Any = None
    labels_include_any: Any = None
    labels_exclude_any: Any = None
    created_at: Optional[datetime] = None
    # Overwritten with the team the app was listed for
    team_id: Optional[int] = None
    team_name: Optional[str] = None


APP_STORE_APPS = PaginatedResource('software/app_store_apps', 'app_store_apps', AppStoreApp)

KEY_COLUMNS = (
    KeyColumn('team_id', ColumnType.INT),
)


def teams_to_query(context: ScanContext) -> List[Tuple[int, str]]:
    """Team (id, name) pairs to list apps for; the name is empty when the team comes from a predicate"""
    team_id = context.equals('team_id')
    if team_id is not None:
        logger.info(f"Listing app store apps for team {team_id}")
        return [(team_id, "")]

    logger.info("Discovering teams for app store app listing")
    teams = [(team.id, team.name) for team in TEAMS.iter_records(context.client)]
    logger.info(f"Discovered {len(teams)} teams")
    return teams


def list_app_store_apps(context: ScanContext) -> Iterator[AppStoreApp]:
    for team_id, team_name in teams_to_query(context):
        apps = list(APP_STORE_APPS.iter_records(context.client, [('team_id', str(team_id))]))
        logger.info(f"Team {team_id} ({team_name}): {len(apps)} app store apps")

        for app in apps:
            yield dataclasses.replace(app, team_id=team_id, team_name=team_name)


TABLE = Table(
    name='fleetdm_app_store_app',
    description=(
        "Apple App Store apps (VPP) from FleetDM. Lists apps available for install on teams. "
        "The API requires a team_id, so all teams are discovered and queried one by one."
    ),
    list_records=list_app_store_apps,
    key_columns=KEY_COLUMNS,
    columns=[
        Column('app_store_id', ColumnType.STRING, "The Apple App Store ID of the app."),
        Column('name', ColumnType.STRING, "Name of the app."),
        Column('display_name', ColumnType.STRING, "Display name override for the app (null if not set)."),
        Column('icon_url', ColumnType.STRING, "URL of the app icon."),
        Column('platform', ColumnType.STRING, "Platform for the app (e.g., 'darwin', 'ios', 'ipados')."),
        Column('latest_version', ColumnType.STRING, "Latest available version of the app."),
        Column('bundle_identifier', ColumnType.STRING, "Bundle identifier of the app (e.g., 'com.google.chrome.ios')."),
        Column('self_service', ColumnType.BOOL, "Whether the app is available as self-service."),
        Column('categories', ColumnType.JSON, "Categories the app belongs to."),
        Column('labels_include_any', ColumnType.JSON, "Labels to include for targeting."),
        Column('labels_exclude_any', ColumnType.JSON, "Labels to exclude for targeting."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the app was added."),
        Column('team_id', ColumnType.INT,
               "The team ID this app was queried for. Set in WHERE clause to query a specific team."),
        Column('team_name', ColumnType.STRING, "The name of the team this app was queried for."),
    ],
)
