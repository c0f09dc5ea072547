"""
Shared fixtures: a fake FleetDM API routed by endpoint path
"""

import json
import pytest
from typing import Any, Callable, Dict, List, Tuple
from unittest.mock import Mock, patch

from fleetdm_adapter.config_loader import ConnectionConfig


SERVER_URL = 'https://fleet.example.com'
API_TOKEN = 'token-123'


def make_response(status_code: int = 200, payload: Any = None, text: str = None, reason: str = None) -> Mock:
    """Build a requests.Response stand-in"""
    response = Mock()
    response.status_code = status_code
    response.reason = reason if reason is not None else ('OK' if status_code < 300 else 'Error')
    response.headers = {}
    response.text = text if text is not None else json.dumps(payload)
    if text is not None:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = payload
    return response


def paged(envelope_key: str, records: List[Dict[str, Any]], has_next: Callable[[int, int], bool] = None):
    """Route handler serving `records` with page/per_page semantics"""
    def handler(params: Dict[str, str]) -> Dict[str, Any]:
        page = int(params.get('page', 0))
        per_page = int(params.get('per_page', len(records) or 1))
        chunk = records[page * per_page:(page + 1) * per_page]
        more = has_next(page, per_page) if has_next else (page + 1) * per_page < len(records)
        return {envelope_key: chunk, 'meta': {'has_next_results': more, 'has_previous_results': page > 0}}
    return handler


class FakeFleetAPI:
    """Callable used as Session.get side effect; records every call"""

    def __init__(self):
        self.routes: Dict[str, Any] = {}
        self.calls: List[Tuple[str, List[Tuple[str, str]], Dict[str, str]]] = []

    def add(self, endpoint: str, route: Any) -> None:
        self.routes[endpoint] = route

    def __call__(self, url, params=None, headers=None, timeout=None):
        endpoint = url.split('/api/v1/fleet/', 1)[1]
        params = list(params or [])
        self.calls.append((endpoint, params, headers))

        route = self.routes.get(endpoint)
        if route is None:
            return make_response(404, {'message': 'Resource Not Found'}, reason='Not Found')

        if isinstance(route, Mock):
            return route

        result = route(dict(params)) if callable(route) else route
        if isinstance(result, Mock):
            return result
        return make_response(200, result)

    def endpoints(self) -> List[str]:
        return [endpoint for endpoint, _, _ in self.calls]

    def params_for(self, endpoint: str) -> List[List[Tuple[str, str]]]:
        return [params for called, params, _ in self.calls if called == endpoint]


@pytest.fixture
def connection_config():
    return ConnectionConfig(server_url=SERVER_URL, api_token=API_TOKEN)


@pytest.fixture
def fake_api():
    """Patch requests.Session so every GET is answered by a FakeFleetAPI"""
    api = FakeFleetAPI()
    with patch('requests.Session') as mock_session_class:
        mock_session_class.return_value.get.side_effect = api
        api.session_class = mock_session_class
        yield api
