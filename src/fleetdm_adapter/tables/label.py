"""
fleetdm_label: labels used to group hosts
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

from ..pagination_strategy import PaginatedResource
from ..plugin import ScanContext
from ..schema import Column, ColumnType, Table
from .common import get_single, server_url_column


@dataclass(frozen=True)
class Label:
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    name: Optional[str] = None
    description: Optional[str] = None
    query: Optional[str] = None
    platform: Optional[str] = None
    label_type: Optional[str] = None
    label_membership_type: Optional[str] = None
    host_count: Optional[int] = None
    display_text: Optional[str] = None
    built_in: Optional[bool] = None


LABELS = PaginatedResource('labels', 'labels', Label, per_page=50)


def list_labels(context: ScanContext) -> Iterator[Label]:
    yield from LABELS.iter_records(context.client)


def get_label(context: ScanContext, label_id: int) -> Optional[Label]:
    if label_id <= 0:
        return None
    return get_single(context, f"labels/{label_id}", 'label', Label)


TABLE = Table(
    name='fleetdm_label',
    description="Labels used for grouping hosts in FleetDM.",
    list_records=list_labels,
    get_record=get_label,
    columns=[
        Column('id', ColumnType.INT, "Unique ID of the label."),
        Column('name', ColumnType.STRING, "Name of the label."),
        Column('display_text', ColumnType.STRING, "Display text for the label, usually the same as the name."),
        Column('description', ColumnType.STRING, "Description of the label."),
        Column('query_sql', ColumnType.STRING, "The SQL query used for dynamic labeling.", field='query'),
        Column('platform', ColumnType.STRING,
               "Target platform(s) for the label (e.g., 'darwin', 'windows', 'linux', or empty for all)."),
        Column('label_type', ColumnType.STRING, "Type of the label, e.g., 'regular' or 'builtin'."),
        Column('label_membership_type', ColumnType.STRING, "Membership type, e.g., 'dynamic' or 'manual'."),
        Column('host_count', ColumnType.INT, "Number of hosts associated with this label."),
        Column('built_in', ColumnType.BOOL, "Indicates if the label is a built-in label."),
        Column('created_at', ColumnType.TIMESTAMP, "Timestamp when the label was created."),
        Column('updated_at', ColumnType.TIMESTAMP, "Timestamp when the label was last updated."),
        server_url_column(),
    ],
)
