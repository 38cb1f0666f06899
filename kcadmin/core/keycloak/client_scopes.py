"""Keycloak client scope management operations."""
from __future__ import annotations
from typing import TYPE_CHECKING, List

from kcadmin.core.validators import require_id, require_payload
from .exceptions import wrap_errors
from .transport import Expect, created_id

if TYPE_CHECKING:
    from .client import KeycloakAdminClient


class ClientScopeService:
    """Service for managing realm client scopes."""

    def __init__(self, client: KeycloakAdminClient):
        self.client = client

    def list(self) -> List[dict]:
        with wrap_errors("list client scopes"):
            return self.client.request("/client-scopes", "GET", expect=Expect.BODY)

    def create(self, scope: dict) -> str:
        """Create a client scope and return its ID.

        Args:
            scope: ClientScopeRepresentation; ``name`` is required
        """
        require_payload(scope, "Client scope", ["name"])
        with wrap_errors("create client scope"):
            result = self.client.request("/client-scopes", "POST", scope, expect=Expect.ID_FROM_LOCATION)
            return created_id(result)

    def get(self, scope_id: str) -> dict:
        scope_id = require_id(scope_id, "Client scope ID")
        with wrap_errors(f"get client scope {scope_id}"):
            return self.client.request(f"/client-scopes/{scope_id}", "GET", expect=Expect.BODY)

    def update(self, scope_id: str, scope: dict) -> None:
        scope_id = require_id(scope_id, "Client scope ID")
        require_payload(scope, "Client scope")
        with wrap_errors(f"update client scope {scope_id}"):
            self.client.request(f"/client-scopes/{scope_id}", "PUT", scope, expect=Expect.BODY)

    def delete(self, scope_id: str) -> None:
        scope_id = require_id(scope_id, "Client scope ID")
        with wrap_errors(f"delete client scope {scope_id}"):
            self.client.request(f"/client-scopes/{scope_id}", "DELETE", expect=Expect.BODY)
