"""
Table catalog types: column declarations, key columns and pushed-down predicates
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, TYPE_CHECKING

from .transforms import to_json_text, to_timestamp

if TYPE_CHECKING:
    from .plugin import ScanContext


class ColumnType(Enum):
    """Column types exposed to the host query engine"""
    INT = "INT"
    STRING = "STRING"
    BOOL = "BOOL"
    DOUBLE = "DOUBLE"
    TIMESTAMP = "TIMESTAMP"
    JSON = "JSON"
    IPADDR = "IPADDR"


_DEFAULT_TRANSFORMS: Dict[ColumnType, Callable[[Any], Any]] = {
    ColumnType.JSON: to_json_text,
    ColumnType.TIMESTAMP: to_timestamp,
}


@dataclass(frozen=True)
class Column:
    """
    A column of a table

    Values come from the decoded record by default (attribute `field`, falling
    back to the column name). `from_qual` columns echo the equality predicate
    the scan was called with, `from_config` columns read the connection config
    and `hydrate` columns read the record returned by the table's hydrate call.
    """
    name: str
    type: ColumnType
    description: str = ""
    field: Optional[str] = None
    transform: Optional[Callable[[Any], Any]] = None
    hydrate: bool = False
    from_qual: bool = False
    from_config: bool = False

    @property
    def source_field(self) -> str:
        return self.field or self.name

    def convert(self, value: Any) -> Any:
        transform = self.transform or _DEFAULT_TRANSFORMS.get(self.type)
        if transform is None:
            return value
        return transform(value)


@dataclass(frozen=True)
class KeyColumn:
    """A column usable as an equality predicate, and the API parameter it maps to"""
    name: str
    type: ColumnType = ColumnType.STRING
    param: Optional[str] = None

    @property
    def param_name(self) -> str:
        return self.param or self.name

    def to_param(self, value: Any) -> str:
        """Render a predicate value the way the API expects it in a query string"""
        if isinstance(value, bool):
            return 'true' if value else 'false'
        return str(value)


@dataclass(frozen=True)
class Qual:
    """A predicate pushed down from the host engine's WHERE clause"""
    field_name: str
    operator: str
    value: Any


ListFunction = Callable[["ScanContext"], Iterator[Any]]
GetFunction = Callable[["ScanContext", int], Optional[Any]]
HydrateFunction = Callable[["ScanContext", Any], Optional[Any]]


@dataclass
class Table:
    """Declaration of one table in the catalog"""
    name: str
    description: str
    columns: List[Column]
    list_records: ListFunction
    key_columns: Sequence[KeyColumn] = field(default_factory=tuple)
    get_record: Optional[GetFunction] = None
    hydrate_record: Optional[HydrateFunction] = None

    def __post_init__(self):
        self._columns_by_name = {column.name: column for column in self.columns}

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def column(self, name: str) -> Optional[Column]:
        return self._columns_by_name.get(name)

    def key_column(self, name: str) -> Optional[KeyColumn]:
        for key_column in self.key_columns:
            if key_column.name == name:
                return key_column
        return None
