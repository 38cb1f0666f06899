"""Keycloak group management operations."""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, List

from kcadmin.core.validators import require_id, require_payload
from .exceptions import wrap_errors
from .transport import Expect, created_id

if TYPE_CHECKING:
    from .client import KeycloakAdminClient


class GroupService:
    """Service for managing Keycloak groups."""

    def __init__(self, client: KeycloakAdminClient):
        """Initialize group service.

        Args:
            client: Keycloak Admin client
        """
        self.client = client

    def list(self, **params: Any) -> List[dict]:
        """List top-level groups (search, first, max, briefRepresentation, ...)."""
        with wrap_errors("list groups"):
            return self.client.request("/groups", "GET", params=params, expect=Expect.BODY)

    def count(self, **params: Any) -> dict:
        """Return {"count": n} for groups matching ``search``/``top``."""
        with wrap_errors("count groups"):
            return self.client.request("/groups/count", "GET", params=params, expect=Expect.BODY)

    def create(self, group: dict) -> str:
        """Create a top-level group and return its ID.

        Args:
            group: GroupRepresentation; ``name`` is required

        Returns:
            Group ID
        """
        require_payload(group, "Group", ["name"])
        with wrap_errors("create group"):
            result = self.client.request("/groups", "POST", group, expect=Expect.ID_FROM_LOCATION)
            return created_id(result)

    def get(self, group_id: str) -> dict:
        group_id = require_id(group_id, "Group ID")
        with wrap_errors(f"get group {group_id}"):
            return self.client.request(f"/groups/{group_id}", "GET", expect=Expect.BODY)

    def update(self, group_id: str, group: dict) -> None:
        group_id = require_id(group_id, "Group ID")
        require_payload(group, "Group")
        with wrap_errors(f"update group {group_id}"):
            self.client.request(f"/groups/{group_id}", "PUT", group, expect=Expect.BODY)

    def delete(self, group_id: str) -> None:
        group_id = require_id(group_id, "Group ID")
        with wrap_errors(f"delete group {group_id}"):
            self.client.request(f"/groups/{group_id}", "DELETE", expect=Expect.BODY)

    def list_children(self, group_id: str, **params: Any) -> List[dict]:
        group_id = require_id(group_id, "Group ID")
        with wrap_errors(f"list children of group {group_id}"):
            return self.client.request(f"/groups/{group_id}/children", "GET", params=params, expect=Expect.BODY)

    def create_child(self, group_id: str, child: dict) -> str:
        """Create (or move) a subgroup under ``group_id`` and return the child ID."""
        group_id = require_id(group_id, "Group ID")
        require_payload(child, "Group", ["name"])
        with wrap_errors(f"create child of group {group_id}"):
            result = self.client.request(
                f"/groups/{group_id}/children", "POST", child, expect=Expect.ID_FROM_LOCATION
            )
        # Moving an existing group answers 204 without a Location header
        return result.get("id") or child.get("id", "")

    def list_members(self, group_id: str, **params: Any) -> List[dict]:
        """List users that belong to the group (first, max, briefRepresentation)."""
        group_id = require_id(group_id, "Group ID")
        with wrap_errors(f"list members of group {group_id}"):
            return self.client.request(f"/groups/{group_id}/members", "GET", params=params, expect=Expect.BODY)
