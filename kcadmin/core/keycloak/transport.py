"""HTTP dispatch and response interpretation for the Keycloak Admin API.

``send`` performs one authenticated call and raises on non-2xx.
``interpret_response`` turns a successful response into a ResponseShape:

    CreatedWithId  201 + Location on a create call
    Empty          201 (other), 204, Content-Length: 0, blank JSON body
    Json           parsed application/json body
    RawText        anything else: str for textual content types,
                   raw bytes otherwise (keystores, archives)
"""
from __future__ import annotations
import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests

from .exceptions import KeycloakAPIError, ResponseParseError, classify_transport_error

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

# Collection endpoints whose 201 Location tail is returned as {"id": ...}
ID_COLLECTIONS = frozenset({"users", "groups", "clients", "roles", "client-scopes", "organizations"})

NO_BODY_PLACEHOLDER = "No response body"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Non text/* media types whose bodies are still decoded to str
TEXTUAL_MARKERS = ("json", "xml", "javascript", "x-pem-file", "x-www-form-urlencoded")


class Expect(enum.Enum):
    """Declares which result shape a caller wants from a create call."""
    ID_FROM_LOCATION = "id"
    BODY = "body"


@dataclass(frozen=True)
class CreatedWithId:
    id: str

    def to_value(self) -> Dict[str, str]:
        return {"id": self.id}


@dataclass(frozen=True)
class Empty:
    def to_value(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class Json:
    value: Any

    def to_value(self) -> Any:
        return self.value


@dataclass(frozen=True)
class RawText:
    text: Union[str, bytes]

    def to_value(self) -> Dict[str, Union[str, bytes]]:
        return {"text": self.text}


ResponseShape = Union[CreatedWithId, Empty, Json, RawText]


def _read_body(resp: requests.Response) -> str:
    """Read the response text without letting a read failure mask the HTTP error."""
    try:
        return resp.text
    except (ValueError, requests.RequestException):
        return NO_BODY_PLACEHOLDER


def _header(headers: Dict[str, str], name: str) -> Optional[str]:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def send(
    url: str,
    method: str,
    token: str,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
    verify: bool = True,
) -> requests.Response:
    """Send one authenticated request.

    Args:
        url: Absolute URL
        method: HTTP verb
        token: Bearer token
        body: dict/list (sent as JSON), str/bytes (sent verbatim), or None.
            Any body defaults to ``Content-Type: application/json``.
        headers: Extra headers; these override the defaults
        params: Query parameters (None values are dropped)
        timeout: Transport timeout in seconds
        verify: TLS verification flag passed to requests

    Returns:
        Response object (2xx only)

    Raises:
        KeycloakAPIError: On non-2xx status
        NetworkError: When no response was obtained
    """
    request_headers = {"Authorization": f"Bearer {token}"}
    custom = dict(headers or {})

    data: Any = None
    if body is not None:
        content_type = _header(custom, "Content-Type")
        if isinstance(body, (str, bytes)):
            data = body
        elif content_type and content_type.startswith(FORM_CONTENT_TYPE):
            data = body
        else:
            data = json.dumps(body)
        if content_type is None:
            request_headers["Content-Type"] = "application/json"
    request_headers.update(custom)

    query = {
        key: (str(value).lower() if isinstance(value, bool) else value)
        for key, value in (params or {}).items()
        if value is not None
    }

    try:
        resp = requests.request(
            method,
            url,
            headers=request_headers,
            data=data,
            params=query or None,
            timeout=timeout,
            verify=verify,
        )
    except requests.RequestException as e:
        logger.error(f"Network error during {method} {url}: {e}")
        raise classify_transport_error(e, url) from e

    if not resp.ok:
        error_text = _read_body(resp)
        preview = error_text if len(error_text) <= 1024 else f"{error_text[:1024]}...<truncated>"
        logger.error(f"Request failed with status {resp.status_code}: {method} {url} - {preview}")
        raise KeycloakAPIError(
            resp.status_code,
            resp.reason or f"HTTP {resp.status_code}",
            response_body=error_text,
            endpoint=url,
        )
    return resp


def _is_textual(content_type: str) -> bool:
    """A missing Content-Type or a declared charset counts as text."""
    lowered = content_type.lower()
    if not lowered or "charset=" in lowered:
        return True
    return lowered.startswith("text/") or any(marker in lowered for marker in TEXTUAL_MARKERS)


def created_id(result: Any, status_code: int = 201) -> str:
    """Return the id from a ``{"id": ...}`` create result.

    Raises:
        ResponseParseError: The create call answered without a usable Location header
    """
    resource_id = result.get("id") if isinstance(result, dict) else None
    if not resource_id:
        raise ResponseParseError(
            "Created resource but the response has no Location header with an id",
            status_code=status_code,
        )
    return resource_id


def _path_tail(path: str) -> str:
    return path.split("?", 1)[0].rsplit("/", 1)[-1]


def _wants_id(method: str, path: str, expect: Optional[Expect]) -> bool:
    if method != "POST" or expect is Expect.BODY:
        return False
    if expect is Expect.ID_FROM_LOCATION:
        return True
    return _path_tail(path) in ID_COLLECTIONS


def interpret_response(
    resp: requests.Response,
    method: str,
    path: str,
    expect: Optional[Expect] = None,
) -> ResponseShape:
    """Decide the shape of a successful response.

    Args:
        resp: Completed 2xx response
        method: Originating HTTP verb
        path: Originating request path (used for the id allow-list)
        expect: Explicit shape declaration; None applies the collection allow-list

    Raises:
        ResponseParseError: Body declared as JSON but not parseable
    """
    method = method.upper()
    status = resp.status_code

    if status == 201:
        location = resp.headers.get("Location")
        if location and _wants_id(method, path, expect):
            resource_id = location.rsplit("/", 1)[-1]
            if resource_id:
                return CreatedWithId(resource_id)
        return Empty()

    if status == 204 or resp.headers.get("Content-Length") == "0":
        return Empty()

    content_type = resp.headers.get("Content-Type") or ""
    if not _is_textual(content_type):
        return RawText(resp.content)

    text = resp.text
    if "application/json" in content_type:
        if not text or not text.strip():
            return Empty()
        try:
            return Json(json.loads(text))
        except ValueError as e:
            logger.error(f"Error parsing JSON response from {method} {path}: {e}")
            snippet = text if len(text) <= 200 else f"{text[:200]}..."
            raise ResponseParseError(
                f"Failed to parse JSON response: {e} (body: {snippet!r})",
                status_code=status,
                response_body=text,
            ) from e

    return RawText(text)
