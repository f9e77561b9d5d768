"""Global test configuration and fixtures."""
import json
import pytest
import yarl
from collections import defaultdict, deque
from unittest.mock import MagicMock, AsyncMock

from src.utils.api import APIClient, APIConfig
from src.utils.storage import InMemoryTokenStore
from src.accounts import AccountService

BASE_URL = "https://api.example.com"

def build_response(status=200, body=None, headers=None, charset=None):
    """Async context manager standing in for session.request(...)"""
    response = MagicMock()
    response.status = status
    if body is None:
        raw = b""
    elif isinstance(body, bytes):
        raw = body
    elif isinstance(body, str):
        raw = body.encode("utf-8")
    else:
        raw = json.dumps(body).encode("utf-8")
    response.read = AsyncMock(return_value=raw)
    response.charset = charset
    response.headers = headers or {"Content-Type": "application/json"}

    mock_cm = AsyncMock()
    mock_cm.__aenter__.return_value = response
    mock_cm.__aexit__.return_value = None
    return mock_cm

class FakeAccountsAPI:
    """Routes session.request calls to queued responses and records them"""

    def __init__(self):
        self.routes = defaultdict(deque)
        self.calls = []
        self.session = MagicMock()
        self.session.request = MagicMock(side_effect=self._request)

    def queue(self, method, path, status=200, body=None, error=None):
        self.routes[(method, path)].append((status, body, error))

    def _request(self, method, url, **kwargs):
        path = yarl.URL(str(url)).path
        self.calls.append({
            "method": method,
            "path": path,
            "json": kwargs.get("json"),
            "headers": kwargs.get("headers") or {}
        })
        status, body, error = self.routes[(method, path)].popleft()
        if error is not None:
            raise error
        return build_response(status, body)

    def calls_to(self, method, path):
        return [c for c in self.calls if c["method"] == method and c["path"] == path]

@pytest.fixture
def make_response():
    return build_response

@pytest.fixture
def fake_api():
    return FakeAccountsAPI()

@pytest.fixture
def api_config():
    """Fixture for API configuration"""
    return APIConfig(base_url=BASE_URL, timeout=5.0)

@pytest.fixture
def token_store():
    return InMemoryTokenStore()

@pytest.fixture
def account_service(fake_api, api_config, token_store):
    client = APIClient(config=api_config, session=fake_api.session)
    return AccountService(client, token_store)
