"""
fleetdm_fleet_maintained_app: pre-packaged installers maintained by Fleet
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .common import qual_column


@dataclass(frozen=True)
class FleetMaintainedApp:
    id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    platform: Optional[str] = None
    version: Optional[str] = None
    software_title_id: Optional[int] = None
    categories: Optional[Tuple[str, ...]] = None


FLEET_MAINTAINED_APPS = PaginatedResource('software/fleet_maintained_apps', 'fleet_maintained_apps',
                                          FleetMaintainedApp, per_page=10000)

KEY_COLUMNS = (
    KeyColumn('team_id', ColumnType.INT),
)


def list_fleet_maintained_apps(context: ScanContext) -> Iterator[FleetMaintainedApp]:
    yield from FLEET_MAINTAINED_APPS.iter_records(context.client, context.params(KEY_COLUMNS))


TABLE = Table(
    name='fleetdm_fleet_maintained_app',
    description=(
        "Fleet-maintained apps available in FleetDM. These are pre-packaged software installers "
        "maintained by Fleet."
    ),
    list_records=list_fleet_maintained_apps,
    key_columns=KEY_COLUMNS,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the Fleet-maintained app."),
        Column('name', ColumnType.STRING, "Name of the Fleet-maintained app."),
        Column('slug', ColumnType.STRING, "Slug identifier for the app (e.g., '1password/darwin')."),
        Column('platform', ColumnType.STRING, "Platform for the app (e.g., 'darwin', 'windows')."),
        Column('version', ColumnType.STRING, "Latest available version of the app."),
        Column('software_title_id', ColumnType.INT,
               "Software title ID if the app has been added to the specified team."),
        Column('categories', ColumnType.JSON, "Categories the app belongs to."),
        qual_column('team_id', ColumnType.INT,
                    "Filter by team ID. When specified, each app includes the software_title_id "
                    "if already added to that team. Set in WHERE clause."),
    ],
)
