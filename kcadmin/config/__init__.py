"""Configuration module for the Keycloak Admin client."""
from .settings import (
    BearerCredentials,
    ClientCredentials,
    PasswordCredentials,
    KeycloakConfig,
    REQUEST_TIMEOUT,
    load_settings,
)

__all__ = [
    "BearerCredentials",
    "ClientCredentials",
    "PasswordCredentials",
    "KeycloakConfig",
    "REQUEST_TIMEOUT",
    "load_settings",
]
