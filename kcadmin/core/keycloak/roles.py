"""Keycloak realm role management operations."""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, List

from kcadmin.core.validators import require_id, require_payload
from .exceptions import wrap_errors
from .transport import Expect

if TYPE_CHECKING:
    from .client import KeycloakAdminClient


class RoleService:
    """Service for managing realm-level roles."""

    def __init__(self, client: KeycloakAdminClient):
        """Initialize role service.

        Args:
            client: Keycloak Admin client
        """
        self.client = client

    def list(self, **params: Any) -> List[dict]:
        with wrap_errors("list roles"):
            return self.client.request("/roles", "GET", params=params, expect=Expect.BODY)

    def create(self, role: dict) -> str:
        """Create a realm role.

        Args:
            role: RoleRepresentation; ``name`` is required

        Returns:
            Role name (Keycloak's Location header ends with the role name)
        """
        require_payload(role, "Role", ["name"])
        with wrap_errors(f"create role {role['name']}"):
            result = self.client.request("/roles", "POST", role, expect=Expect.ID_FROM_LOCATION)
        return result.get("id") or role["name"]

    def get_by_name(self, role_name: str) -> dict:
        role_name = require_id(role_name, "Role name")
        with wrap_errors(f"get role {role_name}"):
            return self.client.request(f"/roles/{role_name}", "GET", expect=Expect.BODY)

    def update_by_name(self, role_name: str, role: dict) -> None:
        role_name = require_id(role_name, "Role name")
        require_payload(role, "Role")
        with wrap_errors(f"update role {role_name}"):
            self.client.request(f"/roles/{role_name}", "PUT", role, expect=Expect.BODY)

    def delete_by_name(self, role_name: str) -> None:
        role_name = require_id(role_name, "Role name")
        with wrap_errors(f"delete role {role_name}"):
            self.client.request(f"/roles/{role_name}", "DELETE", expect=Expect.BODY)

    def get_by_id(self, role_id: str) -> dict:
        role_id = require_id(role_id, "Role ID")
        with wrap_errors(f"get role by id {role_id}"):
            return self.client.request(f"/roles-by-id/{role_id}", "GET", expect=Expect.BODY)

    def list_users_with_role(self, role_name: str, **params: Any) -> List[dict]:
        """List users that hold the realm role directly (first, max)."""
        role_name = require_id(role_name, "Role name")
        with wrap_errors(f"list users with role {role_name}"):
            return self.client.request(f"/roles/{role_name}/users", "GET", params=params, expect=Expect.BODY)

    def add_to_user(self, user_id: str, role_names: List[str]) -> None:
        """Grant realm roles to a user (idempotent on the Keycloak side)."""
        user_id = require_id(user_id, "User ID")
        roles = [self.get_by_name(name) for name in role_names]
        payload = [{"id": role["id"], "name": role["name"]} for role in roles]
        with wrap_errors(f"assign realm roles to user {user_id}"):
            self.client.request(f"/users/{user_id}/role-mappings/realm", "POST", payload, expect=Expect.BODY)

    def remove_from_user(self, user_id: str, role_names: List[str]) -> None:
        user_id = require_id(user_id, "User ID")
        roles = [self.get_by_name(name) for name in role_names]
        payload = [{"id": role["id"], "name": role["name"]} for role in roles]
        with wrap_errors(f"remove realm roles from user {user_id}"):
            self.client.request(f"/users/{user_id}/role-mappings/realm", "DELETE", payload, expect=Expect.BODY)

    def list_user_roles(self, user_id: str) -> List[dict]:
        user_id = require_id(user_id, "User ID")
        with wrap_errors(f"list realm roles of user {user_id}"):
            return self.client.request(f"/users/{user_id}/role-mappings/realm", "GET", expect=Expect.BODY)
