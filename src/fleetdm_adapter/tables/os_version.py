"""
fleetdm_os_version: operating system versions across managed hosts
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .common import qual_column


@dataclass(frozen=True)
class OSVersionVulnerability:
    cve: Optional[str] = None
    details_link: Optional[str] = None
    created_at: Optional[datetime] = None
    cvss_score: Optional[float] = None
    epss_probability: Optional[float] = None
    cisa_known_exploit: Optional[bool] = None
    cve_published: Optional[datetime] = None
    cve_description: Optional[str] = None
    resolved_in_version: Optional[str] = None


@dataclass(frozen=True)
class OSVersion:
    os_version_id: Optional[int] = None
    hosts_count: Optional[int] = None
    name: Optional[str] = None
    name_only: Optional[str] = None
    version: Optional[str] = None
    platform: Optional[str] = None
    generated_cpes: Optional[Tuple[str, ...]] = None
    vulnerabilities: Optional[Tuple[OSVersionVulnerability, ...]] = None
    vulnerabilities_count: Optional[int] = None


OS_VERSIONS = PaginatedResource('os_versions', 'os_versions', OSVersion, per_page=10000,
                                order_key='hosts_count', order_direction='desc')

KEY_COLUMNS = (
    KeyColumn('team_id', ColumnType.INT),
    KeyColumn('platform'),
    KeyColumn('os_name'),
    KeyColumn('os_version_filter', param='os_version'),
)


def list_os_versions(context: ScanContext) -> Iterator[OSVersion]:
    yield from OS_VERSIONS.iter_records(context.client, context.params(KEY_COLUMNS))


TABLE = Table(
    name='fleetdm_os_version',
    description=(
        "Operating system versions from FleetDM. Lists all OS versions across managed hosts "
        "with vulnerability information."
    ),
    list_records=list_os_versions,
    key_columns=KEY_COLUMNS,
    columns=[
        Column('os_version_id', ColumnType.INT, "Unique ID of the OS version."),
        Column('hosts_count', ColumnType.INT, "Number of hosts running this OS version."),
        Column('name', ColumnType.STRING, "Full name of the OS version (e.g., 'macOS 26.2')."),
        Column('name_only', ColumnType.STRING, "OS name without version (e.g., 'macOS')."),
        Column('version', ColumnType.STRING, "Version string of the OS (e.g., '26.2', '10.0.26100.7623')."),
        Column('platform', ColumnType.STRING, "Platform of the OS (e.g., 'darwin', 'windows', 'ubuntu')."),
        Column('generated_cpes', ColumnType.JSON, "Generated Common Platform Enumeration (CPE) strings for the OS."),
        Column('vulnerabilities', ColumnType.JSON, "Vulnerabilities associated with this OS version."),
        Column('vulnerabilities_count', ColumnType.INT, "Number of known vulnerabilities for this OS version."),
        qual_column('team_id', ColumnType.INT, "Filter by team ID. Set in WHERE clause."),
        qual_column('os_name', ColumnType.STRING,
                    "Filter by OS name (must be used with os_version_filter). Set in WHERE clause."),
        qual_column('os_version_filter', ColumnType.STRING,
                    "Filter by OS version string (must be used with os_name). Set in WHERE clause."),
    ],
)
