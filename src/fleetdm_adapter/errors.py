"""
Exception hierarchy shared by the FleetDM adapter components
"""

from typing import Optional


class FleetDMError(Exception):
    """Base class for all adapter errors surfaced to the caller"""
    pass


class ConfigurationError(FleetDMError):
    """Raised when connection configuration is missing or invalid"""
    pass


class UnknownTableError(ConfigurationError):
    """Raised when a scan names a table that is not in the catalog"""
    pass


class UnknownColumnError(ConfigurationError):
    """Raised when a scan requests a column the table does not declare"""
    pass


class FleetDMAPIError(FleetDMError):
    """Base class for failures talking to the FleetDM API"""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class APITransportError(FleetDMAPIError):
    """Raised on connection, DNS, TLS or timeout failures"""
    pass


class APIStatusError(FleetDMAPIError):
    """Raised when the API answers with a non-2xx status"""

    def __init__(self, message: str, url: str, status_code: int, body: str):
        super().__init__(message, url)
        self.status_code = status_code
        self.body = body


class APIDecodeError(FleetDMAPIError):
    """Raised when a response body is not the JSON we expect"""
    pass


class RecordDecodeError(APIDecodeError):
    """Raised when a JSON object does not match the declared record shape"""
    pass
