"""Python client for the Keycloak Admin REST API.

To use the client:
    from kcadmin import KeycloakAdminClient, load_settings

    client = KeycloakAdminClient(load_settings())
    realms = client.realms.list()
"""
from kcadmin.config import (
    BearerCredentials,
    ClientCredentials,
    PasswordCredentials,
    KeycloakConfig,
    load_settings,
)
from kcadmin.core.keycloak import (
    KeycloakAdminClient,
    Expect,
    KeycloakError,
    AuthenticationFailedError,
    NetworkError,
    KeycloakAPIError,
    ResponseParseError,
)

__version__ = "0.1.0"

__all__ = [
    "BearerCredentials",
    "ClientCredentials",
    "PasswordCredentials",
    "KeycloakConfig",
    "load_settings",
    "KeycloakAdminClient",
    "Expect",
    "KeycloakError",
    "AuthenticationFailedError",
    "NetworkError",
    "KeycloakAPIError",
    "ResponseParseError",
]
