"""Keycloak Admin API client library.

Architecture:
- auth.py: token acquisition (bearer / client_credentials / password) and caching
- transport.py: authenticated dispatch and response-shape interpretation
- client.py: KeycloakAdminClient façade (request / request_for_realm / request_without_realm)
- exceptions.py: typed exceptions for error handling
- users.py, groups.py, roles.py, realm.py, clients.py, client_scopes.py,
  organizations.py, sessions.py, keys.py, identity_providers.py,
  role_mappings.py, attack_detection.py: resource services

Usage:
    from kcadmin.config import load_settings
    from kcadmin.core.keycloak import KeycloakAdminClient

    client = KeycloakAdminClient(load_settings())
    user_id = client.users.create({"username": "alice", "enabled": True})
"""
from .auth import TokenCache, TokenProvider, get_token
from .client import KeycloakAdminClient
from .exceptions import (
    KeycloakError,
    AuthenticationFailedError,
    NetworkError,
    KeycloakAPIError,
    ResponseParseError,
    wrap_errors,
)
from .transport import (
    Expect,
    CreatedWithId,
    Empty,
    Json,
    RawText,
    ResponseShape,
    created_id,
    interpret_response,
    send,
)
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

__all__ = [
    # Client
    "KeycloakAdminClient",
    "TokenCache",
    "TokenProvider",
    "get_token",

    # Transport
    "Expect",
    "CreatedWithId",
    "Empty",
    "Json",
    "RawText",
    "ResponseShape",
    "created_id",
    "interpret_response",
    "send",

    # Exceptions
    "KeycloakError",
    "AuthenticationFailedError",
    "NetworkError",
    "KeycloakAPIError",
    "ResponseParseError",
    "wrap_errors",

    # Services
    "UserService",
    "GroupService",
    "RoleService",
    "RealmService",
    "ClientService",
    "ClientScopeService",
    "OrganizationService",
    "SessionService",
    "KeysService",
    "IdentityProviderService",
    "RoleMappingService",
    "AttackDetectionService",
]
