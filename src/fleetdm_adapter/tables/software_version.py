"""
fleetdm_software_version: software inventory by version
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .common import qual_column, vulnerability_params
from .software import SoftwareVulnerability


@dataclass(frozen=True)
class SoftwareVersion:
    id: Optional[int] = None
    name: Optional[str] = None
    version: Optional[str] = None
    source: Optional[str] = None
    extension_for: Optional[str] = None
    browser: Optional[str] = None
    vendor: Optional[str] = None
    generated_cpe: Optional[str] = None
    bundle_identifier: Optional[str] = None
    host_count: Optional[int] = field(default=None, metadata={'json': 'hosts_count'})
    vulnerabilities: Optional[Tuple[SoftwareVulnerability, ...]] = None
    upgrade_code: Optional[str] = None
    display_name: Optional[str] = None
    last_opened_at: Optional[datetime] = None
    release: Optional[str] = None
    arch: Optional[str] = None
    extension_id: Optional[str] = None


SOFTWARE_VERSIONS = PaginatedResource('software/versions', 'software', SoftwareVersion, per_page=10000,
                                      order_key='id', order_direction='asc')

KEY_COLUMNS = (
    KeyColumn('vulnerable_only', ColumnType.BOOL, param='vulnerable'),
    KeyColumn('team_id', ColumnType.INT),
    KeyColumn('query'),
    KeyColumn('min_cvss_score', ColumnType.INT),
    KeyColumn('max_cvss_score', ColumnType.INT),
    KeyColumn('exploit', ColumnType.BOOL),
)


def list_software_versions(context: ScanContext) -> Iterator[SoftwareVersion]:
    yield from SOFTWARE_VERSIONS.iter_records(context.client, vulnerability_params(context, KEY_COLUMNS))


TABLE = Table(
    name='fleetdm_software_version',
    description="Software versions inventory from FleetDM.",
    list_records=list_software_versions,
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
        Column('upgrade_code', ColumnType.STRING, "Windows installer upgrade code."),
        Column('display_name', ColumnType.STRING, "Display name for the software."),
        Column('extension_for', ColumnType.STRING,
               "For browser extensions, the application the extension is for."),
        Column('release', ColumnType.STRING, "Release information, e.g., for RPM packages."),
        Column('vendor', ColumnType.STRING, "Vendor information, e.g., for RPM packages."),
        Column('arch', ColumnType.STRING, "Architecture information, e.g., for RPM packages."),
        Column('extension_id', ColumnType.STRING, "Extension ID for browser extensions."),
        Column('browser', ColumnType.STRING, "Browser name for browser extensions."),
        Column('last_opened_at', ColumnType.TIMESTAMP, "Timestamp when the software was last opened."),
        Column('vulnerabilities', ColumnType.JSON, "Vulnerabilities associated with this software."),
        qual_column('vulnerable_only', ColumnType.BOOL,
                    "Filter for software with known vulnerabilities. Set in WHERE clause."),
        qual_column('team_id', ColumnType.INT,
                    "Filter by team ID (Fleet Premium). Use 0 for hosts assigned to 'No team'. Set in WHERE clause."),
        qual_column('query', ColumnType.STRING,
                    "Search query keywords. Searchable fields include name, version, and CVE. Set in WHERE clause."),
        qual_column('min_cvss_score', ColumnType.INT,
                    "Filter for software with vulnerabilities having a CVSS v3.x base score higher than this value "
                    "(Fleet Premium). Set in WHERE clause."),
        qual_column('max_cvss_score', ColumnType.INT,
                    "Filter for software with vulnerabilities having a CVSS v3.x base score lower than this value "
                    "(Fleet Premium). Set in WHERE clause."),
        qual_column('exploit', ColumnType.BOOL,
                    "Filter for software with vulnerabilities on the CISA known exploited list (Fleet Premium). "
                    "Set in WHERE clause."),
    ],
)
