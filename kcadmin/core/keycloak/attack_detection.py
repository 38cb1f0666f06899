"""Brute-force detection status for realm users."""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from kcadmin.core.validators import require_id
from .exceptions import wrap_errors
from .transport import Expect

if TYPE_CHECKING:
    from .client import KeycloakAdminClient

logger = logging.getLogger(__name__)


class AttackDetectionService:
    """Service for reading and clearing brute-force lockouts."""

    def __init__(self, client: KeycloakAdminClient):
        self.client = client

    def get_status(self, user_id: str) -> dict:
        """Return {"disabled", "numFailures", "lastFailure", "lastIPFailure"} for a user."""
        user_id = require_id(user_id, "User ID")
        with wrap_errors(f"get brute force status for user {user_id}"):
            return self.client.request(f"/attack-detection/brute-force/users/{user_id}", "GET", expect=Expect.BODY)

    def clear_user(self, user_id: str) -> None:
        user_id = require_id(user_id, "User ID")
        with wrap_errors(f"clear login failures for user {user_id}"):
            self.client.request(f"/attack-detection/brute-force/users/{user_id}", "DELETE", expect=Expect.BODY)
        logger.info(f"[attack-detection] Cleared login failures for user {user_id}")

    def clear_all(self) -> None:
        with wrap_errors("clear login failures for all users"):
            self.client.request("/attack-detection/brute-force/users", "DELETE", expect=Expect.BODY)
        logger.info("[attack-detection] Cleared login failures for all users")
