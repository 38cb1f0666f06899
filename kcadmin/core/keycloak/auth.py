"""Token acquisition and caching for the Keycloak Admin API.

Supports three strategies:
- bearer: a pre-issued token, returned verbatim (no network call)
- client: OAuth2 client_credentials grant
- password: OAuth2 password (direct access) grant

The token is cached per client instance and never refreshed automatically.
Callers holding a long-lived client can call ``TokenProvider.invalidate()``
to force a new token on the next request.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import requests

from kcadmin.config.settings import (
    BearerCredentials,
    ClientCredentials,
    KeycloakConfig,
    PasswordCredentials,
)
from .exceptions import (
    AuthenticationFailedError,
    ResponseParseError,
    classify_transport_error,
)

logger = logging.getLogger(__name__)


class TokenCache:
    """Holds the access token for one client instance."""

    def __init__(self) -> None:
        self._token: Optional[str] = None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None

    def __bool__(self) -> bool:
        return self._token is not None


def _grant_payload(config: KeycloakConfig) -> Dict[str, str]:
    """Build the form body for the token endpoint."""
    creds = config.credentials
    if isinstance(creds, ClientCredentials):
        return {
            "grant_type": "client_credentials",
            "client_id": creds.client_id,
            "client_secret": creds.client_secret,
        }
    if isinstance(creds, PasswordCredentials):
        return {
            "grant_type": "password",
            "client_id": creds.client_id,
            "username": creds.username,
            "password": creds.password,
        }
    raise ValueError(f"Invalid authentication method: {config.auth_method}")


def _auth_error_message(data: Any, status_code: int) -> str:
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return f"Authentication failed: {data.get('error_description') or data['error']}"
    return f"Authentication failed: Unknown error (Status: {status_code})"


def get_token(config: KeycloakConfig, timeout: Optional[float] = None) -> str:
    """Resolve an access token for ``config`` (uncached).

    Args:
        config: Client configuration
        timeout: Transport timeout in seconds (defaults to config.timeout)

    Returns:
        Access token

    Raises:
        AuthenticationFailedError: Credentials rejected or token payload invalid
        ResponseParseError: Token endpoint returned non-JSON on success
        NetworkError: No response from the token endpoint
    """
    if isinstance(config.credentials, BearerCredentials):
        return config.credentials.token

    url = config.token_url
    data = _grant_payload(config)
    try:
        resp = requests.post(
            url,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=timeout if timeout is not None else config.timeout,
            verify=config.verify_ssl,
        )
    except requests.RequestException as e:
        logger.error(f"Token request to {url} failed: {e}")
        raise classify_transport_error(e, url) from e

    if not resp.ok:
        try:
            error_payload = resp.json()
        except ValueError:
            error_payload = None
        logger.error(f"Token request failed with status {resp.status_code}")
        raise AuthenticationFailedError(
            _auth_error_message(error_payload, resp.status_code),
            status_code=resp.status_code,
            response_body=resp.text,
        )

    try:
        payload = resp.json()
    except ValueError as e:
        logger.error(f"Failed to parse token response as JSON: {e}")
        raise ResponseParseError(
            f"Failed to parse token response: {e}",
            status_code=resp.status_code,
            response_body=resp.text,
        ) from e

    if not isinstance(payload, dict) or not isinstance(payload.get("access_token"), str):
        logger.error("Invalid token response: access_token missing")
        raise AuthenticationFailedError(
            "Invalid token response: Expected access_token in response",
            status_code=resp.status_code,
            response_body=resp.text,
        )

    logger.debug(f"Obtained {config.auth_method} token for realm '{config.realm}'")
    return payload["access_token"]


class TokenProvider:
    """Resolves and caches the bearer token for one client instance.

    Usage:
        provider = TokenProvider(config)
        token = provider.get_valid_token()  # network call (unless bearer)
        token = provider.get_valid_token()  # cached
    """

    def __init__(self, config: KeycloakConfig, cache: Optional[TokenCache] = None):
        self.config = config
        self.cache = cache if cache is not None else TokenCache()

    def get_valid_token(self) -> str:
        """Return the cached token, resolving it on first use.

        No expiry check is made: a cached token is reused until invalidate()
        is called or the instance is discarded.
        """
        token = self.cache.get()
        if token:
            return token

        token = get_token(self.config)
        self.cache.set(token)
        return token

    def invalidate(self) -> None:
        """Drop the cached token so the next call re-authenticates."""
        self.cache.clear()
