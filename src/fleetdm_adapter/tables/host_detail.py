"""
fleetdm_host_detail: hosts with the full per-host detail object

Listing uses the cheap hosts endpoint. The rich columns (users, policies,
software, mdm and friends) are only on GET hosts/{id}, which is called per
emitted row and only when one of those columns is selected.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Optional, Tuple

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, Table
from .common import get_single
from .host import Host, HostIssues


logger = logging.getLogger(__name__)

# Ask for the software inventory to be included in the detail object
DETAIL_PARAMS = [('exclude_software', 'false')]


@dataclass(frozen=True)
class HostMDMDetail:
    encryption_key_available: Optional[bool] = None
    enrollment_status: Optional[str] = None
    name: Optional[str] = None
    connected_to_fleet: Optional[bool] = None
    server_url: Optional[str] = None
    device_status: Optional[str] = None
    pending_action: Optional[str] = None
    macos_settings: Any = None
    macos_setup: Any = None
    os_settings: Any = None
    profiles: Any = None


@dataclass(frozen=True)
class HostBattery:
    cycle_count: Optional[int] = None
    health: Optional[str] = None


@dataclass(frozen=True)
class HostGeometry:
    type: Optional[str] = None
    coordinates: Optional[Tuple[float, ...]] = None


@dataclass(frozen=True)
class HostGeolocation:
    country_iso: Optional[str] = None
    city_name: Optional[str] = None
    geometry: Optional[HostGeometry] = None


@dataclass(frozen=True)
class HostMaintenanceWindow:
    starts_at: Optional[datetime] = None
    timezone: Optional[str] = None


@dataclass(frozen=True)
class HostOtherEmail:
    email: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class HostEndUser:
    idp_info_updated_at: Optional[datetime] = None
    idp_id: Optional[str] = None
    idp_username: Optional[str] = None
    idp_full_name: Optional[str] = None
    idp_groups: Optional[Tuple[str, ...]] = None
    other_emails: Optional[Tuple[HostOtherEmail, ...]] = None


@dataclass(frozen=True)
class HostSoftware:
    id: Optional[int] = None
    name: Optional[str] = None
    version: Optional[str] = None
    source: Optional[str] = None
    browser: Optional[str] = None
    bundle_identifier: Optional[str] = None
    last_opened_at: Optional[datetime] = None
    generated_cpe: Optional[str] = None
    vulnerabilities: Any = None
    installed_paths: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class HostDetail:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    software_updated_at: Optional[datetime] = None
    detail_updated_at: Optional[datetime] = None
    label_updated_at: Optional[datetime] = None
    policy_updated_at: Optional[datetime] = None
    last_enrolled_at: Optional[datetime] = None
    last_mdm_checked_in_at: Optional[datetime] = None
    last_mdm_enrolled_at: Optional[datetime] = None
    last_restarted_at: Optional[datetime] = None
    seen_time: Optional[datetime] = None
    refetch_requested: Optional[bool] = None
    refetch_critical_queries_until: Optional[datetime] = None
    hostname: Optional[str] = None
    uuid: Optional[str] = None
    platform: Optional[str] = None
    osquery_version: Optional[str] = None
    orbit_version: Optional[str] = None
    fleet_desktop_version: Optional[str] = None
    scripts_enabled: Optional[bool] = None
    os_version: Optional[str] = None
    build: Optional[str] = None
    platform_like: Optional[str] = None
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
    computer_name: Optional[str] = None
    display_name: Optional[str] = None
    public_ip: Optional[str] = None
    primary_ip: Optional[str] = None
    primary_mac: Optional[str] = None
    distributed_interval: Optional[int] = None
    config_tls_refresh: Optional[int] = None
    logger_tls_period: Optional[int] = None
    team_id: Optional[int] = None
    team_name: Optional[str] = None
    gigs_disk_space_available: Optional[float] = None
    percent_disk_space_available: Optional[float] = None
    gigs_total_disk_space: Optional[float] = None
    disk_encryption_enabled: Optional[bool] = None
    status: Optional[str] = None
    display_text: Optional[str] = None
    additional: Any = None
    issues: Optional[HostIssues] = None
    batteries: Optional[Tuple[HostBattery, ...]] = None
    geolocation: Optional[HostGeolocation] = None
    maintenance_window: Optional[HostMaintenanceWindow] = None
    users: Any = None
    end_users: Optional[Tuple[HostEndUser, ...]] = None
    labels: Any = None
    packs: Any = None
    policies: Any = None
    software: Optional[Tuple[HostSoftware, ...]] = None
    mdm: Optional[HostMDMDetail] = None


HOSTS_BY_ID = PaginatedResource('hosts', 'hosts', Host, per_page=100,
                                order_key='id', order_direction='asc')


def list_hosts_for_details(context: ScanContext) -> Iterator[Host]:
    yield from HOSTS_BY_ID.iter_records(context.client)


def get_host_detail(context: ScanContext, host_id: int) -> Optional[HostDetail]:
    if host_id <= 0:
        logger.debug(f"Skipping host detail lookup for invalid id {host_id}")
        return None
    return get_single(context, f"hosts/{host_id}", 'host', HostDetail, DETAIL_PARAMS)


def hydrate_host_detail(context: ScanContext, host: Any) -> Optional[HostDetail]:
    """Detail object for a listed host; records fetched by id are already complete"""
    if isinstance(host, HostDetail):
        return host
    if host.id is None:
        return None
    return get_host_detail(context, host.id)


def _detail(name: str, column_type: ColumnType, description: str) -> Column:
    return Column(name, column_type, description, hydrate=True)


TABLE = Table(
    name='fleetdm_host_detail',
    description="Provides fully detailed information for each host by fetching details individually.",
    list_records=list_hosts_for_details,
    get_record=get_host_detail,
    hydrate_record=hydrate_host_detail,
    columns=[
        # From the host listing
        Column('id', ColumnType.INT, "The unique ID of the host."),
        Column('hostname', ColumnType.STRING, "The hostname of the host."),
        Column('display_name', ColumnType.STRING, "The display name of the host."),
        Column('uuid', ColumnType.STRING, "The unique UUID of the host."),
        Column('status', ColumnType.STRING, "The current status of the host (online, offline, mia)."),
        Column('team_id', ColumnType.INT, "The ID of the team the host belongs to, if any."),
        Column('team_name', ColumnType.STRING, "The name of the team the host belongs to, if any."),
        Column('display_text', ColumnType.STRING, "The display text for the host."),
        Column('computer_name', ColumnType.STRING, "The computer name of the host."),
        Column('seen_time', ColumnType.TIMESTAMP, "Timestamp when the host was last seen by Fleet."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the host was created in Fleet."),
        Column('updated_at', ColumnType.TIMESTAMP, "Timestamp when the host record was last updated in Fleet."),
        Column('platform', ColumnType.STRING, "The platform of the host (e.g., 'darwin', 'windows', 'linux')."),
        Column('os_version', ColumnType.STRING, "The operating system version."),
        Column('osquery_version', ColumnType.STRING, "The version of osquery running on the host."),
        Column('last_enrolled_at', ColumnType.TIMESTAMP, "Timestamp when the host last enrolled."),
        Column('detail_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host details were last updated."),
        Column('label_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host labels were last updated."),
        Column('policy_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host policy status was last updated."),
        Column('software_updated_at', ColumnType.TIMESTAMP, "Timestamp when the host software inventory was last updated."),
        Column('last_restarted_at', ColumnType.TIMESTAMP, "Timestamp of the last host restart event."),
        Column('platform_like', ColumnType.STRING, "Platform-like classification (e.g., 'darwin')."),
        Column('build', ColumnType.STRING, "The operating system build string."),
        Column('code_name', ColumnType.STRING, "The OS code name."),
        Column('orbit_version', ColumnType.STRING, "The version of Orbit running on the host."),
        Column('fleet_desktop_version', ColumnType.STRING, "The version of Fleet Desktop running on the host."),
        Column('scripts_enabled', ColumnType.BOOL, "Indicates if running scripts is enabled for this host via Fleet."),
        Column('refetch_requested', ColumnType.BOOL, "Indicates if a refetch of host details has been requested."),
        Column('hardware_model', ColumnType.STRING, "Hardware model."),
        Column('hardware_serial', ColumnType.STRING, "Hardware serial number."),
        Column('hardware_vendor', ColumnType.STRING, "Hardware vendor."),
        Column('hardware_version', ColumnType.STRING, "Hardware version."),
        Column('uptime', ColumnType.INT, "Uptime of the host in nanoseconds."),
        Column('memory', ColumnType.INT, "Total physical memory in bytes."),
        Column('cpu_type', ColumnType.STRING, "CPU type."),
        Column('cpu_subtype', ColumnType.STRING, "CPU subtype."),
        Column('cpu_brand', ColumnType.STRING, "CPU brand string."),
        Column('cpu_physical_cores', ColumnType.INT, "Number of physical CPU cores."),
        Column('cpu_logical_cores', ColumnType.INT, "Number of logical CPU cores."),
        Column('gigs_disk_space_available', ColumnType.DOUBLE, "Gigabytes of disk space available."),
        Column('percent_disk_space_available', ColumnType.DOUBLE, "Percentage of disk space available."),
        Column('gigs_total_disk_space', ColumnType.DOUBLE, "Total gigabytes of disk space."),
        Column('public_ip', ColumnType.IPADDR, "The public IP address of the host."),
        Column('primary_ip', ColumnType.IPADDR, "The primary IP address of the host."),
        Column('primary_mac', ColumnType.STRING, "The primary MAC address of the host."),
        Column('distributed_interval', ColumnType.INT, "The distributed query interval for the host."),
        Column('config_tls_refresh', ColumnType.INT, "The config TLS refresh interval."),
        Column('logger_tls_period', ColumnType.INT, "The logger TLS period."),

        # Only on GET hosts/{id}
        _detail('last_mdm_checked_in_at', ColumnType.TIMESTAMP, "Timestamp when the host last checked in with MDM."),
        _detail('last_mdm_enrolled_at', ColumnType.TIMESTAMP, "Timestamp when the host was last enrolled in MDM."),
        _detail('disk_encryption_enabled', ColumnType.BOOL, "Indicates if disk encryption is enabled on the host."),
        _detail('refetch_critical_queries_until', ColumnType.TIMESTAMP,
                "Timestamp until which critical queries will be refetched for this host."),
        _detail('users', ColumnType.JSON, "Local users on this host."),
        _detail('end_users', ColumnType.JSON, "End users associated with this device via IdP or other mappings."),
        _detail('policies', ColumnType.JSON, "Policy compliance status for this host."),
        _detail('labels', ColumnType.JSON, "Labels applied to this host."),
        _detail('software', ColumnType.JSON, "Software installed on this host."),
        _detail('mdm', ColumnType.JSON, "Mobile Device Management (MDM) information for the host."),
        _detail('issues', ColumnType.JSON, "Host issues summary."),
        _detail('batteries', ColumnType.JSON, "Battery information for the host."),
        _detail('geolocation', ColumnType.JSON, "Geolocation information for the host."),
        _detail('maintenance_window', ColumnType.JSON, "Configured maintenance window for the host."),
        _detail('additional', ColumnType.JSON, "Additional custom details for the host."),
        _detail('packs', ColumnType.JSON, "Query packs applied to the host."),
    ],
)
