"""
HTTPClient module for authenticated, read-only requests against the FleetDM REST API
"""

import logging
import requests
from typing import Dict, Any, Optional, List, Tuple, Union
from datetime import datetime
from dataclasses import dataclass, field

from .config_loader import ConnectionConfig, DEFAULT_TIMEOUT_SECONDS
from .errors import APIDecodeError, APIStatusError, APITransportError


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/fleet/"

# Number of body characters carried by decode errors
BODY_SNIPPET_LENGTH = 500

QueryParams = Union[List[Tuple[str, str]], Dict[str, Any], None]


def normalize_base_url(server_url: str) -> str:
    """
    Derive the API base URL from a configured server URL

    Accepts the bare host or the host plus any prefix of the API path and
    always returns a URL ending in exactly one '/api/v1/fleet/'.

    Args:
        server_url: Server URL as configured by the user

    Returns:
        Base URL ending with '/api/v1/fleet/'
    """
    base_url = server_url.strip().rstrip('/')

    if base_url.endswith('/api/v1/fleet'):
        return base_url + '/'
    if base_url.endswith('/api/v1'):
        return base_url + '/fleet/'
    if base_url.endswith('/api'):
        return base_url + '/v1/fleet/'
    return base_url + API_PREFIX


@dataclass
class APIRequest:
    """Represents a single GET request against the API"""
    url: str
    parameters: List[Tuple[str, str]] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)
    method: str = "GET"


@dataclass
class APIResponse:
    """Standardised API response wrapper"""
    raw_data: Any
    metadata: Dict[str, Any]
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    request_timestamp: datetime = field(default_factory=datetime.now)


class FleetDMClient:
    """HTTP client with bearer authentication and a fixed request timeout"""

    def __init__(self, config: ConnectionConfig, session: Optional[requests.Session] = None):
        self.server_url = config.server_url
        self.base_url = normalize_base_url(config.server_url)
        self.timeout = config.timeout_seconds or DEFAULT_TIMEOUT_SECONDS
        self.headers: Dict[str, str] = {
            'Authorization': f"Bearer {config.api_token}",
            'Accept': 'application/json'
        }
        self.session: Optional[requests.Session] = session

        logger.debug(f"Derived API base URL: {self.base_url}")

    def __enter__(self) -> "FleetDMClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_connection()

    def build_request(self, endpoint: str, params: QueryParams = None) -> APIRequest:
        """
        Build an APIRequest for an endpoint relative to the base URL

        Args:
            endpoint: Path relative to '/api/v1/fleet/', e.g. 'hosts' or 'hosts/12'
            params: Ordered (key, value) pairs or a mapping of query parameters

        Returns:
            APIRequest with the full URL and ordered parameters
        """
        if params is None:
            parameters = []
        elif isinstance(params, dict):
            parameters = [(key, str(value)) for key, value in params.items()]
        else:
            parameters = [(key, str(value)) for key, value in params]

        return APIRequest(
            url=self.base_url + endpoint.lstrip('/'),
            parameters=parameters,
            headers={}
        )

    def get(self, endpoint: str, params: QueryParams = None) -> APIResponse:
        """
        Perform a GET request and decode the JSON body

        Args:
            endpoint: Path relative to the API base URL
            params: Query parameters in the order they should be sent

        Returns:
            APIResponse whose raw_data is the decoded JSON body

        Raises:
            APITransportError: On connection, DNS, TLS or timeout failures
            APIStatusError: For any non-2xx response
            APIDecodeError: When a 2xx body is not valid JSON
        """
        return self.make_request(self.build_request(endpoint, params))

    def make_request(self, request: APIRequest) -> APIResponse:
        """
        Execute a prepared request exactly once

        Args:
            request: APIRequest object containing request details

        Returns:
            APIResponse object with response data
        """
        if self.session is None:
            self.session = requests.Session()

        combined_headers = {**self.headers, **request.headers}
        request_timestamp = datetime.now()

        logger.debug(f"GET {request.url} params={request.parameters}")

        try:
            response = self.session.get(
                request.url,
                params=request.parameters,
                headers=combined_headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"HTTP request to {request.url} failed: {e}")
            raise APITransportError(
                f"Error performing HTTP request to {request.url}: {e}", url=request.url
            ) from e

        if not 200 <= response.status_code < 300:
            status_line = f"{response.status_code} {response.reason or ''}".strip()
            logger.error(f"API request to {request.url} failed with status {status_line}: {response.text}")
            raise APIStatusError(
                f"API request to {request.url} failed with status {status_line}: {response.text}",
                url=request.url,
                status_code=response.status_code,
                body=response.text
            )

        try:
            raw_data = response.json()
        except ValueError as e:
            snippet = response.text[:BODY_SNIPPET_LENGTH]
            logger.error(f"Invalid JSON from {request.url}: {e}. Body snippet: {snippet}")
            raise APIDecodeError(
                f"Error decoding JSON response from {request.url}: {e}. Response body: {snippet}",
                url=request.url
            ) from e

        metadata = {
            'url': request.url,
            'method': request.method,
            'parameters': request.parameters
        }

        return APIResponse(
            raw_data=raw_data,
            metadata=metadata,
            status_code=response.status_code,
            headers=dict(response.headers),
            request_timestamp=request_timestamp
        )

    def close_connection(self) -> None:
        """
        Close HTTP session and release resources
        """
        if self.session:
            self.session.close()
            self.session = None
