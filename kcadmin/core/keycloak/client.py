"""Keycloak Admin API client façade.

Composes token handling, request dispatch and response interpretation behind
three entry points that differ only in how the target URL is built:

    request(endpoint, ...)                      {base}/admin/realms/{realm}{endpoint}
    request_for_realm(realm_name, endpoint, ...) {base}/admin/realms/{realm_name}{endpoint}
    request_without_realm(endpoint, ...)         {base}/admin/realms{endpoint}
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from kcadmin.config.settings import KeycloakConfig
from . import transport
from .auth import TokenCache, TokenProvider
from .exceptions import KeycloakError
from .transport import Expect

logger = logging.getLogger(__name__)


class KeycloakAdminClient:
    """HTTP client for the Keycloak Admin REST API.

    Features:
    - Lazy token acquisition, cached for the lifetime of the instance
    - Uniform response shapes ({"id"}, {}, JSON value, {"text"})
    - Typed errors carrying status code and raw body

    Usage:
        client = KeycloakAdminClient(load_settings())
        user_id = client.users.create({"username": "alice"})
        groups = client.request("/groups", "GET", params={"max": 10})
    """

    def __init__(self, config: KeycloakConfig, token_cache: Optional[TokenCache] = None):
        """Initialize client and resource services.

        Args:
            config: Immutable connection settings
            token_cache: Optional cache shared with the token provider
        """
        from .users import UserService
        from .groups import GroupService
        from .roles import RoleService
        from .realm import RealmService
        from .clients import ClientService
        from .client_scopes import ClientScopeService
        from .organizations import OrganizationService
        from .sessions import SessionService
        from .keys import KeysService
        from .identity_providers import IdentityProviderService
        from .role_mappings import RoleMappingService
        from .attack_detection import AttackDetectionService

        self.config = config
        self.admin_url = f"{config.base_url}/admin"
        self.base_url = f"{self.admin_url}/realms/{config.realm}"
        self.token_provider = TokenProvider(config, token_cache)

        self.users = UserService(self)
        self.groups = GroupService(self)
        self.roles = RoleService(self)
        self.realms = RealmService(self)
        self.clients = ClientService(self)
        self.client_scopes = ClientScopeService(self)
        self.organizations = OrganizationService(self)
        self.sessions = SessionService(self)
        self.keys = KeysService(self)
        self.identity_providers = IdentityProviderService(self)
        self.user_role_mappings = RoleMappingService(self, "users")
        self.group_role_mappings = RoleMappingService(self, "groups")
        self.attack_detection = AttackDetectionService(self)

    def get_valid_token(self) -> str:
        """Return a bearer token, authenticating on first use."""
        return self.token_provider.get_valid_token()

    def invalidate_token(self) -> None:
        """Forget the cached token; the next request re-authenticates."""
        self.token_provider.invalidate()

    def request(
        self,
        endpoint: str,
        method: str,
        body: Any = None,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        expect: Optional[Expect] = None,
    ) -> Any:
        """Make an authenticated request against the configured realm.

        Args:
            endpoint: Path relative to the realm (e.g. "/users")
            method: HTTP verb
            body: Optional request body
            params: Optional query parameters
            headers: Optional headers (override defaults, e.g. Accept)
            expect: Declared result shape for create calls

        Returns:
            {"id": ...}, {}, the parsed JSON value, or {"text": ...}

        Raises:
            KeycloakError: Any authentication, network, HTTP or parse failure
        """
        return self._execute(f"{self.base_url}{endpoint}", endpoint, method, body, params, headers, expect)

    def request_for_realm(
        self,
        realm_name: str,
        endpoint: str,
        method: str,
        body: Any = None,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        expect: Optional[Expect] = None,
    ) -> Any:
        """Make an authenticated request against an explicitly named realm."""
        url = f"{self.admin_url}/realms/{realm_name}{endpoint}"
        return self._execute(url, endpoint, method, body, params, headers, expect)

    def request_without_realm(
        self,
        endpoint: str,
        method: str,
        body: Any = None,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        expect: Optional[Expect] = None,
    ) -> Any:
        """Make an authenticated request against the realm collection (/admin/realms)."""
        url = f"{self.admin_url}/realms{endpoint}"
        return self._execute(url, endpoint, method, body, params, headers, expect)

    def _execute(
        self,
        url: str,
        endpoint: str,
        method: str,
        body: Any,
        params: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
        expect: Optional[Expect],
    ) -> Any:
        verb = method.upper()
        if verb not in transport.HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        try:
            token = self.get_valid_token()
            resp = transport.send(
                url,
                verb,
                token,
                body=body,
                headers=headers,
                params=params,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
            shape = transport.interpret_response(resp, verb, url, expect)
        except KeycloakError as e:
            logger.error(f"Request failed for endpoint {endpoint}: {e}")
            raise
        return shape.to_value()
