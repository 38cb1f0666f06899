"""Keycloak session management operations."""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Dict, List

from kcadmin.core.validators import require_id
from .exceptions import wrap_errors
from .transport import Expect

if TYPE_CHECKING:
    from .client import KeycloakAdminClient

logger = logging.getLogger(__name__)


class SessionService:
    """Service for managing Keycloak user sessions."""

    def __init__(self, client: KeycloakAdminClient):
        """Initialize session service.

        Args:
            client: Keycloak Admin client
        """
        self.client = client

    def list_user_sessions(self, user_id: str) -> List[Dict]:
        """Get all active sessions for a user.

        Args:
            user_id: User ID

        Returns:
            List of active session representations
        """
        user_id = require_id(user_id, "User ID")
        with wrap_errors(f"get sessions for user {user_id}"):
            return self.client.request(f"/users/{user_id}/sessions", "GET", expect=Expect.BODY) or []

    def revoke_user_sessions(self, user_id: str) -> int:
        """Revoke all active sessions for a user.

        Args:
            user_id: User ID

        Returns:
            Number of sessions revoked
        """
        active_sessions = self.list_user_sessions(user_id)
        if not active_sessions:
            return 0

        with wrap_errors(f"log out user {user_id}"):
            self.client.request(f"/users/{user_id}/logout", "POST", expect=Expect.BODY)
        logger.info(f"[sessions] Revoked {len(active_sessions)} active session(s) for user {user_id}")
        return len(active_sessions)

    def list_client_sessions(self, client_uuid: str, **params: Any) -> List[Dict]:
        """List user sessions bound to a client (first, max)."""
        client_uuid = require_id(client_uuid, "Client ID")
        with wrap_errors(f"get user sessions for client {client_uuid}"):
            return self.client.request(
                f"/clients/{client_uuid}/user-sessions", "GET", params=params, expect=Expect.BODY
            )

    def logout_all(self) -> dict:
        """Remove every user session in the realm; returns the GlobalRequestResult."""
        with wrap_errors("log out all sessions"):
            return self.client.request("/logout-all", "POST", expect=Expect.BODY)
