"""Keycloak organization management operations (Keycloak 25+)."""
from __future__ import annotations
import json
from typing import TYPE_CHECKING, Any, List

from kcadmin.core.validators import require_id, require_payload
from .exceptions import wrap_errors
from .transport import Expect, created_id

if TYPE_CHECKING:
    from .client import KeycloakAdminClient


class OrganizationService:
    """Service for managing organizations and their members."""

    def __init__(self, client: KeycloakAdminClient):
        self.client = client

    def list(self, **params: Any) -> List[dict]:
        """List organizations (search, q, exact, first, max, briefRepresentation)."""
        with wrap_errors("list organizations"):
            return self.client.request("/organizations", "GET", params=params, expect=Expect.BODY)

    def count(self, **params: Any) -> int:
        with wrap_errors("count organizations"):
            return self.client.request("/organizations/count", "GET", params=params, expect=Expect.BODY)

    def create(self, organization: dict) -> str:
        """Create an organization and return its ID.

        Args:
            organization: OrganizationRepresentation; ``name`` is required
        """
        require_payload(organization, "Organization", ["name"])
        with wrap_errors("create organization"):
            result = self.client.request(
                "/organizations", "POST", organization, expect=Expect.ID_FROM_LOCATION
            )
            return created_id(result)

    def get(self, org_id: str) -> dict:
        org_id = require_id(org_id, "Organization ID")
        with wrap_errors(f"get organization {org_id}"):
            return self.client.request(f"/organizations/{org_id}", "GET", expect=Expect.BODY)

    def update(self, org_id: str, organization: dict) -> None:
        org_id = require_id(org_id, "Organization ID")
        require_payload(organization, "Organization")
        with wrap_errors(f"update organization {org_id}"):
            self.client.request(f"/organizations/{org_id}", "PUT", organization, expect=Expect.BODY)

    def delete(self, org_id: str) -> None:
        org_id = require_id(org_id, "Organization ID")
        with wrap_errors(f"delete organization {org_id}"):
            self.client.request(f"/organizations/{org_id}", "DELETE", expect=Expect.BODY)

    def list_members(self, org_id: str, **params: Any) -> List[dict]:
        org_id = require_id(org_id, "Organization ID")
        with wrap_errors(f"list members of organization {org_id}"):
            return self.client.request(
                f"/organizations/{org_id}/members", "GET", params=params, expect=Expect.BODY
            )

    def add_member(self, org_id: str, user_id: str) -> None:
        """Add an existing user as a member.

        Keycloak expects the bare user ID as a JSON string body.
        """
        org_id = require_id(org_id, "Organization ID")
        user_id = require_id(user_id, "User ID")
        with wrap_errors(f"add member {user_id} to organization {org_id}"):
            self.client.request(
                f"/organizations/{org_id}/members",
                "POST",
                json.dumps(user_id),
                headers={"Content-Type": "application/json"},
                expect=Expect.BODY,
            )

    def remove_member(self, org_id: str, user_id: str) -> None:
        org_id = require_id(org_id, "Organization ID")
        user_id = require_id(user_id, "User ID")
        with wrap_errors(f"remove member {user_id} from organization {org_id}"):
            self.client.request(f"/organizations/{org_id}/members/{user_id}", "DELETE", expect=Expect.BODY)
