"""
fleetdm_carve: file carving sessions, including expired ones
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, Table
from .common import server_url_column


@dataclass(frozen=True)
class Carve:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    host_id: Optional[int] = None
    name: Optional[str] = None
    block_count: Optional[int] = None
    block_size: Optional[int] = None
    carve_size: Optional[int] = None
    carve_id: Optional[str] = None
    request_id: Optional[str] = None
    session_id: Optional[str] = None
    expired: Optional[bool] = None
    max_block: Optional[int] = None
    error: Optional[str] = None


CARVES = PaginatedResource('carves', 'carves', Carve, per_page=50,
                           order_key='id', order_direction='desc',
                           fixed_params=(('expired', 'true'),))


def list_carves(context: ScanContext) -> Iterator[Carve]:
    yield from CARVES.iter_records(context.client)


TABLE = Table(
    name='fleetdm_carve',
    description="Information about file carving sessions in FleetDM.",
    list_records=list_carves,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the carve session."),
        Column('name', ColumnType.STRING, "The name of the carve session, typically including hostname and timestamp."),
        Column('host_id', ColumnType.INT, "The ID of the host from which the file was carved."),
        Column('carve_id', ColumnType.STRING, "The unique identifier for the carve data."),
        Column('session_id', ColumnType.STRING, "The osquery session ID for the carve."),
        Column('request_id', ColumnType.STRING, "The request ID, often from a distributed query."),
        Column('carve_size', ColumnType.INT, "The total size of the carved file in bytes."),
        Column('block_count', ColumnType.INT, "The number of blocks received for the carve."),
        Column('block_size', ColumnType.INT, "The maximum size of each block in bytes."),
        Column('max_block', ColumnType.INT, "The index of the last block received."),
        Column('expired', ColumnType.BOOL, "Indicates if the carve session has expired."),
        Column('error', ColumnType.STRING, "Any error message associated with the carve session."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the carve session was created."),
        server_url_column(),
    ],
)
