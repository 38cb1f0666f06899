"""Keycloak user management operations."""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, List, Optional

from kcadmin.core.validators import require_id, require_payload, validate_actions, validate_email
from .exceptions import wrap_errors
from .transport import Expect, created_id

if TYPE_CHECKING:
    from .client import KeycloakAdminClient


class UserService:
    """Service for managing Keycloak users."""

    def __init__(self, client: KeycloakAdminClient):
        """Initialize user service.

        Args:
            client: Keycloak Admin client
        """
        self.client = client

    def list(self, **params: Any) -> List[dict]:
        """List users, optionally filtered (search, username, email, first, max, ...)."""
        with wrap_errors("list users"):
            return self.client.request("/users", "GET", params=params, expect=Expect.BODY)

    def count(self, **params: Any) -> int:
        """Return the number of users matching the given filters."""
        with wrap_errors("count users"):
            return self.client.request("/users/count", "GET", params=params, expect=Expect.BODY)

    def create(self, user: dict) -> str:
        """Create a user and return its ID.

        Args:
            user: UserRepresentation; ``username`` is required

        Returns:
            New user ID (taken from the Location header)
        """
        require_payload(user, "User", ["username"])
        if user.get("email"):
            validate_email(user["email"])
        with wrap_errors("create user"):
            result = self.client.request("/users", "POST", user, expect=Expect.ID_FROM_LOCATION)
            return created_id(result)

    def get(self, user_id: str, user_profile_metadata: Optional[bool] = None) -> dict:
        user_id = require_id(user_id, "User ID")
        with wrap_errors(f"get user {user_id}"):
            return self.client.request(
                f"/users/{user_id}",
                "GET",
                params={"userProfileMetadata": user_profile_metadata},
                expect=Expect.BODY,
            )

    def get_by_username(self, username: str) -> Optional[dict]:
        """Return the user representation that exactly matches the username.

        Args:
            username: Username to search for

        Returns:
            User representation or None if not found
        """
        username = require_id(username, "Username")
        users = self.list(username=username, exact=True)
        for user in users or []:
            if user.get("username") == username:
                return user
        return None

    def update(self, user_id: str, user: dict) -> None:
        user_id = require_id(user_id, "User ID")
        require_payload(user, "User")
        with wrap_errors(f"update user {user_id}"):
            self.client.request(f"/users/{user_id}", "PUT", user, expect=Expect.BODY)

    def delete(self, user_id: str) -> None:
        user_id = require_id(user_id, "User ID")
        with wrap_errors(f"delete user {user_id}"):
            self.client.request(f"/users/{user_id}", "DELETE", expect=Expect.BODY)

    def reset_password(self, user_id: str, password: str, temporary: bool = True) -> None:
        """Set a new password credential for the user.

        Args:
            user_id: User ID
            password: New password value
            temporary: Require a password change on next login
        """
        user_id = require_id(user_id, "User ID")
        if not password:
            raise ValueError("Password is required")
        with wrap_errors(f"reset password for user {user_id}"):
            self.client.request(
                f"/users/{user_id}/reset-password",
                "PUT",
                {"type": "password", "temporary": temporary, "value": password},
                expect=Expect.BODY,
            )

    def execute_actions_email(self, user_id: str, actions: List[str], **params: Any) -> None:
        """Email the user a link to perform required actions (e.g. UPDATE_PASSWORD).

        Accepted params: client_id, lifespan, redirect_uri.
        """
        user_id = require_id(user_id, "User ID")
        actions = validate_actions(actions)
        with wrap_errors(f"send actions email to user {user_id}"):
            self.client.request(
                f"/users/{user_id}/execute-actions-email",
                "PUT",
                actions,
                params=params,
                expect=Expect.BODY,
            )

    def list_groups(self, user_id: str, **params: Any) -> List[dict]:
        user_id = require_id(user_id, "User ID")
        with wrap_errors(f"list groups of user {user_id}"):
            return self.client.request(f"/users/{user_id}/groups", "GET", params=params, expect=Expect.BODY)

    def join_group(self, user_id: str, group_id: str) -> None:
        user_id = require_id(user_id, "User ID")
        group_id = require_id(group_id, "Group ID")
        with wrap_errors(f"add user {user_id} to group {group_id}"):
            self.client.request(f"/users/{user_id}/groups/{group_id}", "PUT", expect=Expect.BODY)

    def leave_group(self, user_id: str, group_id: str) -> None:
        user_id = require_id(user_id, "User ID")
        group_id = require_id(group_id, "Group ID")
        with wrap_errors(f"remove user {user_id} from group {group_id}"):
            self.client.request(f"/users/{user_id}/groups/{group_id}", "DELETE", expect=Expect.BODY)
