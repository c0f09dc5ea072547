"""
fleetdm_host: hosts enrolled in FleetDM
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Optional

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, KeyColumn, Table
from .common import get_single, qual_column, server_url_column


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostIssues:
    failing_policies_count: Optional[int] = None
    critical_vulnerabilities_count: Optional[int] = None
    total_issues_count: Optional[int] = None


@dataclass(frozen=True)
class HostMDM:
    enrollment_status: Optional[str] = None
    dep_profile_error: Optional[bool] = None
    server_url: Optional[str] = None
    name: Optional[str] = None
    encryption_key_available: Optional[bool] = None
    connected_to_fleet: Optional[bool] = None


@dataclass(frozen=True)
class Host:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    software_updated_at: Optional[datetime] = None
    detail_updated_at: Optional[datetime] = None
    label_updated_at: Optional[datetime] = None
    policy_updated_at: Optional[datetime] = None
    last_enrolled_at: Optional[datetime] = None
    seen_time: Optional[datetime] = None
    refetch_requested: Optional[bool] = None
    osquery_host_id: Optional[str] = None
    node_key: Optional[str] = None
    uuid: Optional[str] = None
    hostname: Optional[str] = None
    display_name: Optional[str] = None
    display_text: Optional[str] = None
    computer_name: Optional[str] = None
    platform: Optional[str] = None
    platform_like: Optional[str] = None
    os_version: Optional[str] = None
    build: Optional[str] = None
    code_name: Optional[str] = None
    uptime: Optional[int] = None
    memory: Optional[int] = None
    cpu_type: Optional[str] = None
    cpu_subtype: Optional[str] = None
    cpu_brand: Optional[str] = None
    cpu_physical_cores: Optional[int] = None
    cpu_logical_cores: Optional[int] = None
    hardware_vendor: Optional[str] = None
    hardware_model: Optional[str] = None
    hardware_version: Optional[str] = None
    hardware_serial: Optional[str] = None
    primary_ip: Optional[str] = None
    primary_mac: Optional[str] = None
    public_ip: Optional[str] = None
    orbit_version: Optional[str] = None
    fleet_desktop_version: Optional[str] = None
    scripts_enabled: Optional[bool] = None
    osquery_version: Optional[str] = None
    team_id: Optional[int] = None
    team_name: Optional[str] = None
    distributed_interval: Optional[int] = None
    config_tls_refresh: Optional[int] = None
    logger_tls_period: Optional[int] = None
    pack_stats: Any = None
    gigs_disk_space_available: Optional[float] = None
    percent_disk_space_available: Optional[float] = None
    gigs_total_disk_space: Optional[float] = None
    status: Optional[str] = None
    issues: Optional[HostIssues] = None
    mdm: Optional[HostMDM] = None
    refetch_critical_queries_until: Optional[datetime] = None
    last_restarted_at: Optional[datetime] = None


HOSTS = PaginatedResource('hosts', 'hosts', Host, per_page=100)

KEY_COLUMNS = (
    KeyColumn('team_id', ColumnType.INT),
    KeyColumn('status'),
    KeyColumn('query'),
)


def list_hosts(context: ScanContext) -> Iterator[Host]:
    yield from HOSTS.iter_records(context.client, context.params(KEY_COLUMNS))


def get_host(context: ScanContext, host_id: int) -> Optional[Host]:
    if host_id <= 0:
        logger.debug(f"Skipping host lookup for invalid id {host_id}")
        return None
    return get_single(context, f"hosts/{host_id}", 'host', Host)


TABLE = Table(
    name='fleetdm_host',
    description="Information about hosts managed by FleetDM.",
    list_records=list_hosts,
    get_record=get_host,
    key_columns=KEY_COLUMNS,
    columns=[
        # Identification
        Column('id', ColumnType.INT, "The unique ID of the host."),
        Column('hostname', ColumnType.STRING, "The hostname of the host."),
        Column('uuid', ColumnType.STRING, "The unique UUID of the host."),
        Column('display_name', ColumnType.STRING, "The display name of the host."),
        Column('display_text', ColumnType.STRING, "The display text for the host (often same as hostname or display_name)."),
        Column('computer_name', ColumnType.STRING, "The computer name of the host."),
        Column('osquery_host_id', ColumnType.STRING, "The osquery host identifier."),
        Column('node_key', ColumnType.STRING, "The node key for the host."),

        # Status and timestamps
        Column('status', ColumnType.STRING, "The current status of the host (online, offline, mia)."),
        Column('seen_time', ColumnType.TIMESTAMP, "Timestamp when the host was last seen by Fleet."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the host was created in Fleet."),
        Column('updated_at', ColumnType.TIMESTAMP, "Timestamp when the host record was last updated in Fleet."),
        Column('software_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host software inventory was last updated."),
        Column('detail_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host details were last updated."),
        Column('label_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host labels were last updated."),
        Column('policy_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host policy status was last updated."),
        Column('last_enrolled_at', ColumnType.TIMESTAMP, "Timestamp when the host last enrolled."),
        Column('last_restarted_at', ColumnType.TIMESTAMP, "Timestamp of the last host restart event."),
        Column('refetch_requested', ColumnType.BOOL, "Indicates if a refetch of host details has been requested."),
        Column('refetch_critical_queries_until', ColumnType.TIMESTAMP,
               "Timestamp until which critical queries will be refetched for this host."),

        # OS and platform
        Column('platform', ColumnType.STRING, "The platform of the host (e.g., 'darwin', 'windows', 'linux')."),
        Column('platform_like', ColumnType.STRING, "Platform-like classification (e.g., 'darwin')."),
        Column('os_version', ColumnType.STRING, "The operating system version."),
        Column('build', ColumnType.STRING, "The operating system build string."),
        Column('code_name', ColumnType.STRING, "The OS code name."),
        Column('osquery_version', ColumnType.STRING, "The version of osquery running on the host."),
        Column('orbit_version', ColumnType.STRING, "The version of Orbit running on the host."),
        Column('fleet_desktop_version', ColumnType.STRING, "The version of Fleet Desktop running on the host."),
        Column('scripts_enabled', ColumnType.BOOL, "Indicates if running scripts is enabled for this host via Fleet."),

        # Hardware
        Column('uptime', ColumnType.INT, "Uptime of the host in nanoseconds."),
        Column('memory', ColumnType.INT, "Total physical memory in bytes."),
        Column('cpu_type', ColumnType.STRING, "CPU type."),
        Column('cpu_subtype', ColumnType.STRING, "CPU subtype."),
        Column('cpu_brand', ColumnType.STRING, "CPU brand string."),
        Column('cpu_physical_cores', ColumnType.INT, "Number of physical CPU cores."),
        Column('cpu_logical_cores', ColumnType.INT, "Number of logical CPU cores."),
        Column('hardware_vendor', ColumnType.STRING, "Hardware vendor."),
        Column('hardware_model', ColumnType.STRING, "Hardware model."),
        Column('hardware_version', ColumnType.STRING, "Hardware version."),
        Column('hardware_serial', ColumnType.STRING, "Hardware serial number."),

        # Network
        Column('primary_ip', ColumnType.IPADDR, "The primary IP address of the host."),
        Column('primary_mac', ColumnType.STRING, "The primary MAC address of the host."),
        Column('public_ip', ColumnType.IPADDR, "The public IP address of the host."),

        # Fleet configuration
        Column('team_id', ColumnType.INT, "The ID of the team the host belongs to, if any."),
        Column('team_name', ColumnType.STRING, "The name of the team the host belongs to, if any."),
        Column('distributed_interval', ColumnType.INT, "The distributed query interval for the host."),
        Column('config_tls_refresh', ColumnType.INT, "The config TLS refresh interval."),
        Column('logger_tls_period', ColumnType.INT, "The logger TLS period."),
        Column('pack_stats', ColumnType.JSON, "Statistics for query packs on the host."),

        # Disk space
        Column('gigs_disk_space_available', ColumnType.DOUBLE, "Gigabytes of disk space available."),
        Column('percent_disk_space_available', ColumnType.DOUBLE, "Percentage of disk space available."),
        Column('gigs_total_disk_space', ColumnType.DOUBLE, "Total gigabytes of disk space."),

        Column('issues', ColumnType.JSON, "Host issues summary (failing policies, vulnerabilities)."),
        Column('mdm', ColumnType.JSON, "Mobile Device Management (MDM) information for the host."),

        qual_column('query', ColumnType.STRING,
                    "Search query keywords (hostname, UUID, serial number). Set in WHERE clause."),
        server_url_column(),
    ],
)
