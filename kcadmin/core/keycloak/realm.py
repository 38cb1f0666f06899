"""Keycloak realm management operations.

Realm calls target ``/admin/realms`` directly, so they use the
``request_without_realm`` and ``request_for_realm`` entry points instead of
the configured realm.
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, List

from kcadmin.core.validators import require_id, require_payload
from .exceptions import KeycloakError, wrap_errors
from .transport import Expect

if TYPE_CHECKING:
    from .client import KeycloakAdminClient

logger = logging.getLogger(__name__)


class RealmService:
    """Service for managing Keycloak realms."""

    def __init__(self, client: KeycloakAdminClient):
        """Initialize realm service.

        Args:
            client: Keycloak Admin client
        """
        self.client = client

    def list(self, brief_representation: bool | None = None) -> List[dict]:
        with wrap_errors("list realms"):
            return self.client.request_without_realm(
                "", "GET", params={"briefRepresentation": brief_representation}, expect=Expect.BODY
            )

    def create(self, realm: dict) -> None:
        """Create a realm.

        Args:
            realm: RealmRepresentation; ``realm`` (the name) is required
        """
        require_payload(realm, "Realm", ["realm"])
        with wrap_errors(f"create realm {realm['realm']}"):
            self.client.request_without_realm("", "POST", realm, expect=Expect.BODY)
        logger.info(f"[realm] Realm '{realm['realm']}' created")

    def get(self, realm_name: str) -> dict:
        realm_name = require_id(realm_name, "Realm name")
        with wrap_errors(f"get realm {realm_name}"):
            return self.client.request_for_realm(realm_name, "", "GET", expect=Expect.BODY)

    def exists(self, realm_name: str) -> bool:
        """Check whether the given realm exists.

        Returns:
            True if realm exists, False on 404

        Raises:
            KeycloakError: Any failure other than 404
        """
        try:
            self.get(realm_name)
        except KeycloakError as e:
            if e.is_not_found:
                return False
            raise
        return True

    def update(self, realm_name: str, realm: dict) -> None:
        realm_name = require_id(realm_name, "Realm name")
        require_payload(realm, "Realm")
        with wrap_errors(f"update realm {realm_name}"):
            self.client.request_for_realm(realm_name, "", "PUT", realm, expect=Expect.BODY)

    def delete(self, realm_name: str) -> None:
        realm_name = require_id(realm_name, "Realm name")
        with wrap_errors(f"delete realm {realm_name}"):
            self.client.request_for_realm(realm_name, "", "DELETE", expect=Expect.BODY)
        logger.info(f"[realm] Realm '{realm_name}' deleted")

    def get_events_config(self, realm_name: str) -> dict:
        realm_name = require_id(realm_name, "Realm name")
        with wrap_errors(f"get events config for realm {realm_name}"):
            return self.client.request_for_realm(realm_name, "/events/config", "GET", expect=Expect.BODY)

    def update_events_config(self, realm_name: str, config: dict) -> None:
        realm_name = require_id(realm_name, "Realm name")
        require_payload(config, "Events config")
        with wrap_errors(f"update events config for realm {realm_name}"):
            self.client.request_for_realm(realm_name, "/events/config", "PUT", config, expect=Expect.BODY)

    def get_events(self, realm_name: str, **params: Any) -> List[dict]:
        """List login events (type, user, client, dateFrom, dateTo, first, max)."""
        realm_name = require_id(realm_name, "Realm name")
        with wrap_errors(f"get events for realm {realm_name}"):
            return self.client.request_for_realm(realm_name, "/events", "GET", params=params, expect=Expect.BODY)

    def delete_events(self, realm_name: str) -> None:
        realm_name = require_id(realm_name, "Realm name")
        with wrap_errors(f"delete events for realm {realm_name}"):
            self.client.request_for_realm(realm_name, "/events", "DELETE", expect=Expect.BODY)

    def get_admin_events(self, realm_name: str, **params: Any) -> List[dict]:
        realm_name = require_id(realm_name, "Realm name")
        with wrap_errors(f"get admin events for realm {realm_name}"):
            return self.client.request_for_realm(
                realm_name, "/admin-events", "GET", params=params, expect=Expect.BODY
            )
