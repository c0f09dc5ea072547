"""
fleetdm_software_title: software titles, each grouping the versions of one product
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .common import qual_column, vulnerability_params


@dataclass(frozen=True)
class SoftwareTitleVersion:
    id: Optional[int] = None
    version: Optional[str] = None
    vulnerabilities: Optional[Tuple[str, ...]] = None
    hosts_count: Optional[int] = None


@dataclass(frozen=True)
class SoftwareTitle:
    id: Optional[int] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    icon_url: Optional[str] = None
    source: Optional[str] = None
    extension_for: Optional[str] = None
    browser: Optional[str] = None
    hosts_count: Optional[int] = None
    versions_count: Optional[int] = None
    versions: Optional[Tuple[SoftwareTitleVersion, ...]] = None
    software_package: Any = None
    app_store_app: Any = None
    bundle_identifier: Optional[str] = None
    counts_updated_at: Optional[datetime] = None


SOFTWARE_TITLES = PaginatedResource('software/titles', 'software_titles', SoftwareTitle, per_page=10000,
                                    order_key='hosts_count', order_direction='desc')

KEY_COLUMNS = (
    KeyColumn('vulnerable_only', ColumnType.BOOL, param='vulnerable'),
    KeyColumn('team_id', ColumnType.INT),
    KeyColumn('available_for_install', ColumnType.BOOL),
    KeyColumn('query'),
    KeyColumn('self_service', ColumnType.BOOL),
    KeyColumn('packages_only', ColumnType.BOOL),
    KeyColumn('min_cvss_score', ColumnType.INT),
    KeyColumn('max_cvss_score', ColumnType.INT),
    KeyColumn('exploit', ColumnType.BOOL),
    KeyColumn('platform'),
    KeyColumn('exclude_fleet_maintained_apps', ColumnType.BOOL),
)


def list_software_titles(context: ScanContext) -> Iterator[SoftwareTitle]:
    yield from SOFTWARE_TITLES.iter_records(context.client, vulnerability_params(context, KEY_COLUMNS))


TABLE = Table(
    name='fleetdm_software_title',
    description="Software titles from FleetDM. A software title groups multiple versions of the same software.",
    list_records=list_software_titles,
    key_columns=KEY_COLUMNS,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the software title."),
        Column('name', ColumnType.STRING, "Name of the software title."),
        Column('display_name', ColumnType.STRING, "Display name of the software title."),
        Column('icon_url', ColumnType.STRING, "URL of the software icon."),
        Column('source', ColumnType.STRING,
               "Source of the software information (e.g., 'apps', 'deb_packages', 'chrome_extensions')."),
        Column('extension_for', ColumnType.STRING, "If a browser extension, specifies which software it extends."),
        Column('browser', ColumnType.STRING, "Browser name for browser extensions."),
        Column('hosts_count', ColumnType.INT, "Number of hosts where this software title is installed."),
        Column('versions_count', ColumnType.INT, "Number of distinct versions of this software title."),
        Column('bundle_identifier', ColumnType.STRING, "Bundle identifier, typically for macOS and iOS software."),
        Column('counts_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host counts were last updated."),
        Column('versions', ColumnType.JSON,
               "List of versions for this software title, including version IDs and associated vulnerabilities."),
        Column('software_package', ColumnType.JSON, "Software package details if the software was added for install."),
        Column('app_store_app', ColumnType.JSON, "App Store app details if the software is from an app store."),
        qual_column('vulnerable_only', ColumnType.BOOL,
                    "Filter for software titles with known vulnerabilities. Set in WHERE clause."),
        qual_column('team_id', ColumnType.INT,
                    "Filter by team ID (Fleet Premium). Use 0 for hosts assigned to 'No team'. Set in WHERE clause."),
        qual_column('available_for_install', ColumnType.BOOL,
                    "Filter for software available for install (added by the user). Set in WHERE clause."),
        qual_column('query', ColumnType.STRING,
                    "Search query keywords. Searchable fields include title and CVE. Set in WHERE clause."),
        qual_column('self_service', ColumnType.BOOL, "Filter for self-service software only. Set in WHERE clause."),
        qual_column('packages_only', ColumnType.BOOL,
                    "Filter for install packages only, excluding app store apps (Fleet Premium). Set in WHERE clause."),
        qual_column('min_cvss_score', ColumnType.INT,
                    "Filter for software with vulnerabilities having a CVSS v3.x base score higher than this value "
                    "(Fleet Premium). Set in WHERE clause."),
        qual_column('max_cvss_score', ColumnType.INT,
                    "Filter for software with vulnerabilities having a CVSS v3.x base score lower than this value "
                    "(Fleet Premium). Set in WHERE clause."),
        qual_column('exploit', ColumnType.BOOL,
                    "Filter for software with vulnerabilities on the CISA known exploited list (Fleet Premium). "
                    "Set in WHERE clause."),
        qual_column('platform', ColumnType.STRING,
                    "Filter installable titles by platform ('macos', 'darwin', 'windows', 'linux', 'chrome', "
                    "'ios', 'ipados'). Requires team_id. Set in WHERE clause."),
        qual_column('exclude_fleet_maintained_apps', ColumnType.BOOL,
                    "Exclude Fleet-maintained apps from the results. Set in WHERE clause."),
    ],
)
