"""Keycloak-specific exceptions for error handling."""
from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, Optional

import requests


class KeycloakError(Exception):
    """Base exception for all Keycloak operations.

    Attributes:
        message: Human readable error message
        status_code: HTTP status code, None when no response was obtained
        response_body: Raw response text, when available
    """

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409

    @property
    def is_network_error(self) -> bool:
        return isinstance(self, NetworkError)

    def body_preview(self, limit: int = 1024) -> Optional[str]:
        """Return a truncated preview of the response body for logging."""
        if self.response_body is None:
            return None
        if len(self.response_body) <= limit:
            return self.response_body
        return f"{self.response_body[:limit]}...<truncated>"

    def with_context(self, prefix: str) -> "KeycloakError":
        """Return a copy of this error with ``prefix`` prepended to the message.

        The copy keeps the concrete type, status code and response body.
        """
        wrapped = type(self).__new__(type(self))
        wrapped.__dict__.update(self.__dict__)
        wrapped.message = f"{prefix}: {self.message}"
        wrapped.args = (wrapped.message,)
        return wrapped

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"[{self.status_code}] {self.message}"
        return self.message


class AuthenticationFailedError(KeycloakError):
    """Token endpoint rejected the credentials or returned a malformed payload."""
    pass


class NetworkError(KeycloakError):
    """No response was obtained (DNS failure, connection refused, timeout)."""
    pass


class KeycloakAPIError(KeycloakError):
    """HTTP error from Keycloak Admin API.

    Attributes:
        status_code: HTTP status code
        response_body: Raw response text
        endpoint: URL that failed
    """

    def __init__(self, status_code: int, message: str, response_body: Optional[str] = None, endpoint: str = ""):
        self.endpoint = endpoint
        super().__init__(message, status_code=status_code, response_body=response_body)


class ResponseParseError(KeycloakError):
    """Response body was declared as JSON but could not be parsed."""
    pass


def classify_transport_error(exc: requests.RequestException, url: str) -> NetworkError:
    """Convert a ``requests`` transport failure into a NetworkError."""
    if isinstance(exc, requests.Timeout):
        reason = "timed out"
    elif isinstance(exc, requests.ConnectionError):
        reason = "connection failed"
    else:
        reason = "request failed"
    return NetworkError(f"Network error: {reason} for {url}: {exc}")


@contextmanager
def wrap_errors(description: str) -> Iterator[None]:
    """Prefix any KeycloakError raised in the block with ``Failed to <description>``.

    Usage:
        with wrap_errors("create client"):
            return self.client.request("/clients", "POST", payload)
    """
    try:
        yield
    except KeycloakError as exc:
        raise exc.with_context(f"Failed to {description}") from exc
