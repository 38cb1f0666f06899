import pytest
import requests

from kcadmin.core.keycloak.auth import TokenCache, TokenProvider, get_token
from kcadmin.core.keycloak.exceptions import (
    AuthenticationFailedError,
    NetworkError,
    ResponseParseError,
)
from tests.conftest import BASE_URL, REALM, make_response

TOKEN_URL = f"{BASE_URL}/realms/{REALM}/protocol/openid-connect/token"


def test_bearer_returns_configured_token_without_network(http, bearer_config):
    """Bearer strategy must never touch the token endpoint."""
    provider = TokenProvider(bearer_config)

    assert provider.get_valid_token() == "static-token"
    assert http.calls == []


def test_password_grant_posts_form_body(http, password_config):
    http.queue(make_response(200, {"access_token": "pw-token", "expires_in": 60}))

    token = TokenProvider(password_config).get_valid_token()

    assert token == "pw-token"
    call = http.token_calls[0]
    assert call.url == TOKEN_URL
    assert call.data == {
        "grant_type": "password",
        "client_id": "admin-cli",
        "username": "admin",
        "password": "s3cret",
    }
    assert call.headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_client_credentials_grant_posts_form_body(http, client_credentials_config):
    http.queue(make_response(200, {"access_token": "svc-token"}))

    token = TokenProvider(client_credentials_config).get_valid_token()

    assert token == "svc-token"
    assert http.token_calls[0].data == {
        "grant_type": "client_credentials",
        "client_id": "automation-cli",
        "client_secret": "svc-secret",
    }


def test_token_is_cached_after_first_call(http, password_config):
    """Second call is a cache hit: exactly one token endpoint request."""
    http.queue(make_response(200, {"access_token": "pw-token"}))
    provider = TokenProvider(password_config)

    first = provider.get_valid_token()
    second = provider.get_valid_token()

    assert first == second == "pw-token"
    assert len(http.token_calls) == 1


def test_invalidate_forces_new_token(http, password_config):
    http.queue(
        make_response(200, {"access_token": "first"}),
        make_response(200, {"access_token": "second"}),
    )
    provider = TokenProvider(password_config)

    assert provider.get_valid_token() == "first"
    provider.invalidate()
    assert provider.get_valid_token() == "second"
    assert len(http.token_calls) == 2


def test_shared_cache_is_used(http, password_config):
    cache = TokenCache()
    cache.set("preloaded")

    assert TokenProvider(password_config, cache).get_valid_token() == "preloaded"
    assert http.calls == []


def test_error_description_is_surfaced(http, password_config):
    body = {"error": "invalid_grant", "error_description": "Invalid user credentials"}
    http.queue(make_response(401, body))

    with pytest.raises(AuthenticationFailedError) as exc:
        TokenProvider(password_config).get_valid_token()

    assert exc.value.message == "Authentication failed: Invalid user credentials"
    assert exc.value.status_code == 401
    assert "invalid_grant" in exc.value.response_body


def test_error_code_used_when_description_missing(http, password_config):
    http.queue(make_response(400, {"error": "unauthorized_client"}))

    with pytest.raises(AuthenticationFailedError, match="Authentication failed: unauthorized_client"):
        get_token(password_config)


def test_non_json_error_is_tagged_with_status(http, password_config):
    http.queue(make_response(502, "<html>Bad Gateway</html>", {"Content-Type": "text/html"}))

    with pytest.raises(AuthenticationFailedError) as exc:
        get_token(password_config)

    assert "Unknown error (Status: 502)" in exc.value.message
    assert exc.value.status_code == 502


def test_success_with_invalid_json_raises_parse_error(http, password_config):
    http.queue(make_response(200, "not json", {"Content-Type": "application/json"}))

    with pytest.raises(ResponseParseError) as exc:
        get_token(password_config)

    assert exc.value.response_body == "not json"


def test_success_without_access_token_is_rejected(http, password_config):
    http.queue(make_response(200, {"token_type": "Bearer"}))

    with pytest.raises(AuthenticationFailedError, match="Expected access_token"):
        get_token(password_config)


def test_failed_resolution_is_not_cached(http, password_config):
    http.queue(
        make_response(401, {"error": "invalid_grant"}),
        make_response(200, {"access_token": "recovered"}),
    )
    provider = TokenProvider(password_config)

    with pytest.raises(AuthenticationFailedError):
        provider.get_valid_token()
    assert not provider.cache
    assert provider.get_valid_token() == "recovered"


@pytest.mark.parametrize(
    "error",
    [requests.ConnectionError("refused"), requests.Timeout("slow"), requests.RequestException("dns")],
)
def test_transport_failure_raises_network_error(http, client_credentials_config, error):
    http.queue(error)

    with pytest.raises(NetworkError) as exc:
        get_token(client_credentials_config)

    assert exc.value.status_code is None
    assert exc.value.is_network_error
    assert isinstance(exc.value.__cause__, requests.RequestException)


def test_timeout_and_tls_settings_are_forwarded(http, password_config):
    http.queue(make_response(200, {"access_token": "t"}))

    get_token(password_config, timeout=3)

    assert http.token_calls[0].timeout == 3
    assert http.token_calls[0].verify is True
