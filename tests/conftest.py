"""Pytest shared fixtures for the Keycloak Admin client tests."""
import json
import pathlib
import sys
from http import HTTPStatus
from types import SimpleNamespace
from typing import Any, Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from kcadmin.config.settings import (
    BearerCredentials,
    ClientCredentials,
    KeycloakConfig,
    PasswordCredentials,
)
from kcadmin.core.keycloak import KeycloakAdminClient

BASE_URL = "http://kc.test"
REALM = "demo"


def make_response(
    status_code: int = 200,
    body: Any = b"",
    headers: Optional[dict] = None,
    url: str = f"{BASE_URL}/admin/realms/{REALM}",
    encoding: Optional[str] = "utf-8",
) -> requests.Response:
    """Craft a real requests.Response without touching the network.

    dict/list bodies are JSON-encoded and get an application/json content type.
    Pass encoding=None to let requests guess the charset, as it does for
    responses without one.
    """
    resp = requests.Response()
    resp.status_code = status_code
    resp.reason = HTTPStatus(status_code).phrase
    resp.url = url
    resp.encoding = encoding
    if isinstance(body, (dict, list)):
        resp.headers["Content-Type"] = "application/json"
        body = json.dumps(body)
    resp._content = body.encode("utf-8") if isinstance(body, str) else body
    resp.headers.update(headers or {})
    return resp


class FakeHttp:
    """Records outgoing calls and replays queued responses (or raises queued exceptions)."""

    def __init__(self):
        self.calls = []
        self._queue = []

    def queue(self, *items):
        self._queue.extend(items)
        return self

    def _next(self, method, url, kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, **kwargs))
        if not self._queue:
            raise AssertionError(f"Unexpected HTTP {method} {url}")
        item = self._queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def request(self, method, url, **kwargs):
        return self._next(method, url, kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)

    @property
    def token_calls(self):
        return [call for call in self.calls if call.url.endswith("/protocol/openid-connect/token")]

    @property
    def api_calls(self):
        return [call for call in self.calls if "/admin/" in call.url]


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from hitting a real Keycloak.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _refuse(*args, **kwargs):
        raise RuntimeError(f"Unexpected network access in unit test: {args} {kwargs.get('url', '')}")

    monkeypatch.setattr(requests, "request", _refuse)
    monkeypatch.setattr(requests, "post", _refuse)


@pytest.fixture()
def http(monkeypatch):
    """Replace requests.request / requests.post with a recording fake."""
    fake = FakeHttp()
    monkeypatch.setattr(requests, "request", fake.request)
    monkeypatch.setattr(requests, "post", fake.post)
    return fake


@pytest.fixture()
def bearer_config():
    return KeycloakConfig(BASE_URL, REALM, BearerCredentials("static-token"))


@pytest.fixture()
def password_config():
    return KeycloakConfig(BASE_URL, REALM, PasswordCredentials("admin", "s3cret", "admin-cli"))


@pytest.fixture()
def client_credentials_config():
    return KeycloakConfig(BASE_URL, REALM, ClientCredentials("automation-cli", "svc-secret"))


@pytest.fixture()
def kc(bearer_config):
    """Client authenticated with a static bearer token (no token endpoint traffic)."""
    return KeycloakAdminClient(bearer_config)
