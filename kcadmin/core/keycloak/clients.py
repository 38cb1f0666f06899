"""Keycloak client (OIDC/SAML application) management operations."""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, List, Optional

from kcadmin.core.validators import require_id, require_payload
from .exceptions import wrap_errors
from .transport import Expect, created_id

if TYPE_CHECKING:
    from .client import KeycloakAdminClient


class ClientService:
    """Service for managing Keycloak clients.

    ``client_uuid`` is the internal ID returned by ``create``, not the
    human-readable ``clientId``.
    """

    def __init__(self, client: KeycloakAdminClient):
        """Initialize client service.

        Args:
            client: Keycloak Admin client
        """
        self.client = client

    def list(self, client_id: Optional[str] = None, first: Optional[int] = None, max: Optional[int] = None) -> List[dict]:
        """List clients, optionally filtered by ``clientId``."""
        params = {"clientId": client_id, "first": first, "max": max}
        with wrap_errors("get clients"):
            return self.client.request("/clients", "GET", params=params, expect=Expect.BODY)

    def create(self, client_rep: dict) -> str:
        """Create a client and return its internal ID.

        Args:
            client_rep: ClientRepresentation; ``clientId`` is required
        """
        require_payload(client_rep, "Client", ["clientId"])
        with wrap_errors("create client"):
            result = self.client.request("/clients", "POST", client_rep, expect=Expect.ID_FROM_LOCATION)
            return created_id(result)

    def get(self, client_uuid: str) -> dict:
        client_uuid = require_id(client_uuid, "Client ID")
        with wrap_errors(f"get client {client_uuid}"):
            return self.client.request(f"/clients/{client_uuid}", "GET", expect=Expect.BODY)

    def update(self, client_uuid: str, client_rep: dict) -> None:
        client_uuid = require_id(client_uuid, "Client ID")
        require_payload(client_rep, "Client")
        with wrap_errors(f"update client {client_uuid}"):
            self.client.request(f"/clients/{client_uuid}", "PUT", client_rep, expect=Expect.BODY)

    def delete(self, client_uuid: str) -> None:
        client_uuid = require_id(client_uuid, "Client ID")
        with wrap_errors(f"delete client {client_uuid}"):
            self.client.request(f"/clients/{client_uuid}", "DELETE", expect=Expect.BODY)

    def get_secret(self, client_uuid: str) -> dict:
        """Return the CredentialRepresentation holding the client secret."""
        client_uuid = require_id(client_uuid, "Client ID")
        with wrap_errors(f"get secret for client {client_uuid}"):
            return self.client.request(f"/clients/{client_uuid}/client-secret", "GET", expect=Expect.BODY)

    def regenerate_secret(self, client_uuid: str) -> dict:
        client_uuid = require_id(client_uuid, "Client ID")
        with wrap_errors(f"regenerate secret for client {client_uuid}"):
            return self.client.request(f"/clients/{client_uuid}/client-secret", "POST", expect=Expect.BODY)

    def get_service_account_user(self, client_uuid: str) -> dict:
        client_uuid = require_id(client_uuid, "Client ID")
        with wrap_errors(f"get service account user for client {client_uuid}"):
            return self.client.request(f"/clients/{client_uuid}/service-account-user", "GET", expect=Expect.BODY)

    # ── client scopes ────────────────────────────────────────────────────────
    def _scopes(self, client_uuid: str, kind: str) -> List[dict]:
        client_uuid = require_id(client_uuid, "Client ID")
        with wrap_errors(f"get {kind} client scopes for client {client_uuid}"):
            return self.client.request(f"/clients/{client_uuid}/{kind}-client-scopes", "GET", expect=Expect.BODY)

    def _set_scope(self, client_uuid: str, kind: str, scope_id: str, method: str) -> None:
        client_uuid = require_id(client_uuid, "Client ID")
        scope_id = require_id(scope_id, "Client scope ID")
        action = "add" if method == "PUT" else "remove"
        with wrap_errors(f"{action} {kind} client scope {scope_id} for client {client_uuid}"):
            self.client.request(
                f"/clients/{client_uuid}/{kind}-client-scopes/{scope_id}", method, expect=Expect.BODY
            )

    def list_default_client_scopes(self, client_uuid: str) -> List[dict]:
        return self._scopes(client_uuid, "default")

    def add_default_client_scope(self, client_uuid: str, scope_id: str) -> None:
        self._set_scope(client_uuid, "default", scope_id, "PUT")

    def remove_default_client_scope(self, client_uuid: str, scope_id: str) -> None:
        self._set_scope(client_uuid, "default", scope_id, "DELETE")

    def list_optional_client_scopes(self, client_uuid: str) -> List[dict]:
        return self._scopes(client_uuid, "optional")

    def add_optional_client_scope(self, client_uuid: str, scope_id: str) -> None:
        self._set_scope(client_uuid, "optional", scope_id, "PUT")

    def remove_optional_client_scope(self, client_uuid: str, scope_id: str) -> None:
        self._set_scope(client_uuid, "optional", scope_id, "DELETE")

    # ── client roles ─────────────────────────────────────────────────────────
    def list_roles(self, client_uuid: str, **params: Any) -> List[dict]:
        client_uuid = require_id(client_uuid, "Client ID")
        with wrap_errors(f"get roles for client {client_uuid}"):
            return self.client.request(f"/clients/{client_uuid}/roles", "GET", params=params, expect=Expect.BODY)

    def create_role(self, client_uuid: str, role: dict) -> str:
        """Create a client role and return its name."""
        client_uuid = require_id(client_uuid, "Client ID")
        require_payload(role, "Role", ["name"])
        with wrap_errors(f"create role for client {client_uuid}"):
            result = self.client.request(
                f"/clients/{client_uuid}/roles", "POST", role, expect=Expect.ID_FROM_LOCATION
            )
        return result.get("id") or role["name"]

    def get_role(self, client_uuid: str, role_name: str) -> dict:
        client_uuid = require_id(client_uuid, "Client ID")
        role_name = require_id(role_name, "Role name")
        with wrap_errors(f"get role {role_name} for client {client_uuid}"):
            return self.client.request(f"/clients/{client_uuid}/roles/{role_name}", "GET", expect=Expect.BODY)

    def delete_role(self, client_uuid: str, role_name: str) -> None:
        client_uuid = require_id(client_uuid, "Client ID")
        role_name = require_id(role_name, "Role name")
        with wrap_errors(f"delete role {role_name} for client {client_uuid}"):
            self.client.request(f"/clients/{client_uuid}/roles/{role_name}", "DELETE", expect=Expect.BODY)

    # ── certificates ─────────────────────────────────────────────────────────
    def get_certificate_info(self, client_uuid: str, attr: str) -> dict:
        client_uuid = require_id(client_uuid, "Client ID")
        attr = require_id(attr, "Certificate attribute")
        with wrap_errors(f"get certificate info for client {client_uuid}"):
            return self.client.request(f"/clients/{client_uuid}/certificates/{attr}", "GET", expect=Expect.BODY)

    def generate_certificate(self, client_uuid: str, attr: str) -> dict:
        """Generate a new key pair and certificate; returns the CertificateRepresentation."""
        client_uuid = require_id(client_uuid, "Client ID")
        attr = require_id(attr, "Certificate attribute")
        with wrap_errors(f"generate certificate for client {client_uuid}"):
            return self.client.request(
                f"/clients/{client_uuid}/certificates/{attr}/generate", "POST", expect=Expect.BODY
            )

    def download_keystore(self, client_uuid: str, attr: str, config: dict) -> bytes:
        """Download the client keystore (JKS or PKCS12).

        Args:
            client_uuid: Client internal ID
            attr: Certificate attribute (e.g. "jwt.credential")
            config: KeyStoreConfig (format, keyAlias, keyPassword, storePassword)

        Returns:
            Keystore bytes exactly as sent by Keycloak
        """
        client_uuid = require_id(client_uuid, "Client ID")
        attr = require_id(attr, "Certificate attribute")
        require_payload(config, "Keystore config", ["format"])
        with wrap_errors(f"download keystore for client {client_uuid}"):
            result = self.client.request(
                f"/clients/{client_uuid}/certificates/{attr}/download",
                "POST",
                config,
                headers={"Accept": "application/octet-stream"},
                expect=Expect.BODY,
            )
        return result.get("text", b"")

    def generate_and_download_keystore(self, client_uuid: str, attr: str, config: dict) -> bytes:
        """Generate a new key pair and return it as a keystore; the private key is not stored."""
        client_uuid = require_id(client_uuid, "Client ID")
        attr = require_id(attr, "Certificate attribute")
        require_payload(config, "Keystore config", ["format"])
        with wrap_errors(f"generate and download keystore for client {client_uuid}"):
            result = self.client.request(
                f"/clients/{client_uuid}/certificates/{attr}/generate-and-download",
                "POST",
                config,
                headers={"Accept": "application/octet-stream"},
                expect=Expect.BODY,
            )
        return result.get("text", b"")
