"""
FleetDM REST API adapter
Exposes FleetDM device-management resources as queryable tables with predicate and limit pushdown
"""

from .config_loader import ConfigLoader, ConnectionConfig
from .errors import (
    FleetDMError,
    ConfigurationError,
    UnknownTableError,
    UnknownColumnError,
    FleetDMAPIError,
    APITransportError,
    APIStatusError,
    APIDecodeError,
    RecordDecodeError,
)
from .http_client import FleetDMClient, APIRequest, APIResponse, normalize_base_url
from .pagination_strategy import PageBasedPagination, PaginatedResource
from .schema import Column, ColumnType, KeyColumn, Qual, Table
from .plugin import Plugin, ScanContext
from .database_manager import DatabaseManager, DatabaseConnectionError
from .tables import TABLES

__all__ = [
    'ConfigLoader',
    'ConnectionConfig',
    'FleetDMError',
    'ConfigurationError',
    'UnknownTableError',
    'UnknownColumnError',
    'FleetDMAPIError',
    'APITransportError',
    'APIStatusError',
    'APIDecodeError',
    'RecordDecodeError',
    'FleetDMClient',
    'APIRequest',
    'APIResponse',
    'normalize_base_url',
    'PageBasedPagination',
    'PaginatedResource',
    'Column',
    'ColumnType',
    'KeyColumn',
    'Qual',
    'Table',
    'Plugin',
    'ScanContext',
    'DatabaseManager',
    'DatabaseConnectionError',
    'TABLES'
]
