"""Keycloak realm keys (read-only)."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from .exceptions import wrap_errors
from .transport import Expect

if TYPE_CHECKING:
    from .client import KeycloakAdminClient


class KeysService:
    """Service for reading the realm's active keys metadata."""

    def __init__(self, client: KeycloakAdminClient):
        self.client = client

    def list(self) -> dict:
        """Return KeysMetadataRepresentation: {"active": {...}, "keys": [...]}."""
        with wrap_errors("get realm keys"):
            return self.client.request("/keys", "GET", expect=Expect.BODY)

    def active_kid(self, algorithm: str = "RS256") -> Optional[str]:
        """Return the key ID currently active for ``algorithm``, if any."""
        return (self.list().get("active") or {}).get(algorithm)
