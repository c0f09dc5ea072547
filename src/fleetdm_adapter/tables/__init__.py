"""
Table catalog: every FleetDM resource exposed as a queryable table
"""

from typing import Dict

from ..schema import Table
from . import (
    activity,
    app_store_app,
    carve,
    fleet_maintained_app,
    host,
    host_detail,
    label,
    os_version,
    pack,
    policy,
    query,
    software,
    software_title,
    software_version,
    team,
    user,
)

TABLES: Dict[str, Table] = {
    module.TABLE.name: module.TABLE
    for module in (
        activity,
        app_store_app,
        carve,
        fleet_maintained_app,
        host,
        host_detail,
        label,
        os_version,
        pack,
        policy,
        query,
        software,
        software_title,
        software_version,
        team,
        user,
    )
}

__all__ = ['TABLES']
