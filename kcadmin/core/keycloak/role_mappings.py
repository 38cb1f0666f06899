"""Role mappings for users and groups.

The same endpoints exist under ``/users/{id}`` and ``/groups/{id}``, so one
service class is bound to a collection:

    client.user_role_mappings.add_realm(user_id, roles)
    client.group_role_mappings.list_client(group_id, client_uuid)
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Optional

from kcadmin.core.validators import require_id
from .exceptions import wrap_errors
from .transport import Expect

if TYPE_CHECKING:
    from .client import KeycloakAdminClient

ROLE_MAPPING_COLLECTIONS = ("users", "groups")


def _role_refs(roles: List[dict]) -> List[Dict[str, str]]:
    """Reduce RoleRepresentations to the id/name pairs Keycloak needs for mapping."""
    if not roles:
        raise ValueError("At least one role is required")
    refs = []
    for role in roles:
        if not role.get("id") or not role.get("name"):
            raise ValueError("Role id and name are required")
        refs.append({"id": role["id"], "name": role["name"]})
    return refs


class RoleMappingService:
    """Realm and client role mappings of a user or a group."""

    def __init__(self, client: KeycloakAdminClient, collection: str):
        """Initialize role mapping service.

        Args:
            client: Keycloak Admin client
            collection: "users" or "groups"
        """
        if collection not in ROLE_MAPPING_COLLECTIONS:
            raise ValueError(f"Unsupported role mapping collection: {collection}")
        self.client = client
        self.collection = collection
        self._label = collection.rstrip("s")

    def _path(self, resource_id: str, suffix: str = "") -> str:
        resource_id = require_id(resource_id, f"{self._label.capitalize()} ID")
        return f"/{self.collection}/{resource_id}/role-mappings{suffix}"

    @staticmethod
    def _brief(brief_representation: bool) -> Optional[Dict[str, bool]]:
        return None if brief_representation else {"briefRepresentation": False}

    def get_all(self, resource_id: str) -> dict:
        """Return the MappingsRepresentation ({"realmMappings": [...], "clientMappings": {...}})."""
        path = self._path(resource_id)
        with wrap_errors(f"get role mappings of {self._label} {resource_id}"):
            return self.client.request(path, "GET", expect=Expect.BODY)

    # ── realm roles ──────────────────────────────────────────────────────────
    def list_realm(self, resource_id: str) -> List[dict]:
        path = self._path(resource_id, "/realm")
        with wrap_errors(f"get realm role mappings of {self._label} {resource_id}"):
            return self.client.request(path, "GET", expect=Expect.BODY)

    def add_realm(self, resource_id: str, roles: List[dict]) -> None:
        path = self._path(resource_id, "/realm")
        payload = _role_refs(roles)
        with wrap_errors(f"add realm role mappings to {self._label} {resource_id}"):
            self.client.request(path, "POST", payload, expect=Expect.BODY)

    def remove_realm(self, resource_id: str, roles: List[dict]) -> None:
        path = self._path(resource_id, "/realm")
        payload = _role_refs(roles)
        with wrap_errors(f"remove realm role mappings from {self._label} {resource_id}"):
            self.client.request(path, "DELETE", payload, expect=Expect.BODY)

    def list_available_realm(self, resource_id: str) -> List[dict]:
        path = self._path(resource_id, "/realm/available")
        with wrap_errors(f"get available realm roles of {self._label} {resource_id}"):
            return self.client.request(path, "GET", expect=Expect.BODY)

    def list_effective_realm(self, resource_id: str, brief_representation: bool = True) -> List[dict]:
        """Realm roles including those inherited through composites and groups."""
        path = self._path(resource_id, "/realm/composite")
        with wrap_errors(f"get effective realm roles of {self._label} {resource_id}"):
            return self.client.request(
                path, "GET", params=self._brief(brief_representation), expect=Expect.BODY
            )

    # ── client roles ─────────────────────────────────────────────────────────
    def list_client(self, resource_id: str, client_uuid: str) -> List[dict]:
        client_uuid = require_id(client_uuid, "Client ID")
        path = self._path(resource_id, f"/clients/{client_uuid}")
        with wrap_errors(f"get client role mappings of {self._label} {resource_id}"):
            return self.client.request(path, "GET", expect=Expect.BODY)

    def add_client(self, resource_id: str, client_uuid: str, roles: List[dict]) -> None:
        client_uuid = require_id(client_uuid, "Client ID")
        path = self._path(resource_id, f"/clients/{client_uuid}")
        payload = _role_refs(roles)
        with wrap_errors(f"add client role mappings to {self._label} {resource_id}"):
            self.client.request(path, "POST", payload, expect=Expect.BODY)

    def remove_client(self, resource_id: str, client_uuid: str, roles: List[dict]) -> None:
        client_uuid = require_id(client_uuid, "Client ID")
        path = self._path(resource_id, f"/clients/{client_uuid}")
        payload = _role_refs(roles)
        with wrap_errors(f"remove client role mappings from {self._label} {resource_id}"):
            self.client.request(path, "DELETE", payload, expect=Expect.BODY)

    def list_available_client(self, resource_id: str, client_uuid: str) -> List[dict]:
        client_uuid = require_id(client_uuid, "Client ID")
        path = self._path(resource_id, f"/clients/{client_uuid}/available")
        with wrap_errors(f"get available client roles of {self._label} {resource_id}"):
            return self.client.request(path, "GET", expect=Expect.BODY)

    def list_effective_client(
        self, resource_id: str, client_uuid: str, brief_representation: bool = True
    ) -> List[dict]:
        client_uuid = require_id(client_uuid, "Client ID")
        path = self._path(resource_id, f"/clients/{client_uuid}/composite")
        with wrap_errors(f"get effective client roles of {self._label} {resource_id}"):
            return self.client.request(
                path, "GET", params=self._brief(brief_representation), expect=Expect.BODY
            )
