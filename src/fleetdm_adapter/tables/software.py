"""
fleetdm_software: software inventory
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .common import qual_column, server_url_column


@dataclass(frozen=True)
class SoftwareVulnerability:
    cve: Optional[str] = None
    details_link: Optional[str] = None
    cvss_score: Optional[float] = None
    epss_probability: Optional[float] = None
    cisa_known_exploit: Optional[bool] = None
    cve_published: Optional[datetime] = None
    cve_description: Optional[str] = None
    resolved_in_version: Optional[str] = None
    # Fleet Premium threat intelligence
    currently_exploited: Optional[bool] = None
    exploitability_7_day: Optional[int] = None
    exploitability_30_day: Optional[int] = None
    exploitability_60_day: Optional[int] = None
    exploitability_90_day: Optional[int] = None
    exploited_activity_7_day: Optional[int] = None
    exploited_activity_30_day: Optional[int] = None
    exploited_activity_60_day: Optional[int] = None
    exploited_activity_90_day: Optional[int] = None
    exploited_malware_7_day: Optional[int] = None
    exploited_malware_30_day: Optional[int] = None
    exploited_malware_60_day: Optional[int] = None
    exploited_malware_90_day: Optional[int] = None
    exploited_network_7_day: Optional[int] = None
    exploited_network_30_day: Optional[int] = None
    exploited_network_60_day: Optional[int] = None
    exploited_network_90_day: Optional[int] = None
    exploited_public_7_day: Optional[int] = None
    exploited_public_30_day: Optional[int] = None
    exploited_public_60_day: Optional[int] = None
    exploited_public_90_day: Optional[int] = None
    exploited_ransomware_7_day: Optional[int] = None
    exploited_ransomware_30_day: Optional[int] = None
    exploited_ransomware_60_day: Optional[int] = None
    exploited_ransomware_90_day: Optional[int] = None
    exploited_remote_7_day: Optional[int] = None
    exploited_remote_30_day: Optional[int] = None
    exploited_remote_60_day: Optional[int] = None
    exploited_remote_90_day: Optional[int] = None
    exploited_unauthenticated_7_day: Optional[int] = None
    exploited_unauthenticated_30_day: Optional[int] = None
    exploited_unauthenticated_60_day: Optional[int] = None
    exploited_unauthenticated_90_day: Optional[int] = None


@dataclass(frozen=True)
class Software:
    id: Optional[int] = None
    name: Optional[str] = None
    version: Optional[str] = None
    source: Optional[str] = None
    bundle_identifier: Optional[str] = None
    generated_cpe: Optional[str] = None
    host_count: Optional[int] = None
    vulnerabilities: Optional[Tuple[SoftwareVulnerability, ...]] = None
    counts_updated_at: Optional[datetime] = None
    last_opened_at: Optional[datetime] = None
    release: Optional[str] = None
    vendor: Optional[str] = None
    arch: Optional[str] = None
    extension_id: Optional[str] = None
    browser: Optional[str] = None
    path: Optional[str] = None
    installed_path: Optional[str] = None


SOFTWARE = PaginatedResource('software', 'software', Software, per_page=10000,
                             order_key='id', order_direction='asc')

KEY_COLUMNS = (
    KeyColumn('vulnerable_only', ColumnType.BOOL, param='vulnerable'),
    KeyColumn('os_id', ColumnType.INT),
    KeyColumn('os_name'),
    KeyColumn('os_version'),
    KeyColumn('team_id', ColumnType.INT),
)


def list_software(context: ScanContext) -> Iterator[Software]:
    yield from SOFTWARE.iter_records(context.client, context.params(KEY_COLUMNS))


TABLE = Table(
    name='fleetdm_software',
    description="Software inventory from FleetDM.",
    list_records=list_software,
    key_columns=KEY_COLUMNS,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the software item."),
        Column('name', ColumnType.STRING, "Name of the software."),
        Column('version', ColumnType.STRING, "Version of the software."),
        Column('source', ColumnType.STRING,
               "Source of the software information (e.g., 'apps', 'deb_packages', 'chrome_extensions')."),
        Column('host_count', ColumnType.INT, "Number of hosts where this software is installed."),
        Column('generated_cpe', ColumnType.STRING, "Generated Common Platform Enumeration (CPE) string for the software."),
        Column('bundle_identifier', ColumnType.STRING, "Bundle identifier, typically for macOS and iOS software."),
        Column('release', ColumnType.STRING, "Release information, e.g., for RPM packages."),
        Column('vendor', ColumnType.STRING, "Vendor information, e.g., for RPM packages."),
        Column('arch', ColumnType.STRING, "Architecture information, e.g., for RPM packages."),
        Column('extension_id', ColumnType.STRING, "Extension ID for browser extensions."),
        Column('browser', ColumnType.STRING, "Browser name for browser extensions."),
        Column('path', ColumnType.STRING, "Install path for certain software types like Programs."),
        Column('installed_path', ColumnType.STRING, "Installed path, e.g., for Homebrew packages."),
        Column('last_opened_at', ColumnType.TIMESTAMP, "Timestamp when the software was last opened."),
        Column('counts_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host_count for this software item was last updated."),
        Column('vulnerabilities', ColumnType.JSON, "Vulnerabilities associated with this software."),
        qual_column('vulnerable_only', ColumnType.BOOL, "Filter for software with known vulnerabilities. Set in WHERE clause."),
        qual_column('os_id', ColumnType.INT, "Filter by OS ID. Set in WHERE clause."),
        qual_column('os_name', ColumnType.STRING, "Filter by OS name. Set in WHERE clause."),
        qual_column('os_version', ColumnType.STRING, "Filter by OS version. Set in WHERE clause."),
        qual_column('team_id', ColumnType.INT, "Filter by team ID. Set in WHERE clause."),
        server_url_column(),
    ],
)
