"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30

AUTH_METHODS = ("bearer", "client", "password")


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
        except OSError as e:
            logger.warning(f"[settings] Failed to read /run/secrets/{secret_name}: {e}")
        else:
            if secret_value:
                logger.info(f"[settings] Loaded {secret_name} from /run/secrets")
                return secret_value

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info(f"[settings] Loaded {env_var} from environment (fallback)")
            return secret_value

    return None


def _require(value: str, field_name: str) -> None:
    if not value or not value.strip():
        raise ValueError(f"{field_name} is required")


@dataclass(frozen=True)
class BearerCredentials:
    """Pre-issued access token, used verbatim."""
    token: str = field(repr=False)

    def __post_init__(self) -> None:
        _require(self.token, "Bearer token")


@dataclass(frozen=True)
class ClientCredentials:
    """Service account credentials for the client_credentials grant."""
    client_id: str
    client_secret: str = field(repr=False)

    def __post_init__(self) -> None:
        _require(self.client_id, "Client ID")
        _require(self.client_secret, "Client secret")


@dataclass(frozen=True)
class PasswordCredentials:
    """User credentials for the password (direct access) grant."""
    username: str
    password: str = field(repr=False)
    client_id: str = "admin-cli"

    def __post_init__(self) -> None:
        _require(self.username, "Username")
        _require(self.password, "Password")
        _require(self.client_id, "Client ID")


Credentials = Union[BearerCredentials, ClientCredentials, PasswordCredentials]


@dataclass(frozen=True)
class KeycloakConfig:
    """Connection settings for one Keycloak Admin client instance."""
    base_url: str
    realm: str
    credentials: Credentials
    timeout: float = REQUEST_TIMEOUT
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        _require(self.base_url, "Base URL")
        _require(self.realm, "Realm")
        if not isinstance(self.credentials, (BearerCredentials, ClientCredentials, PasswordCredentials)):
            raise ValueError(f"Unsupported credentials type: {type(self.credentials).__name__}")
        # frozen dataclass: bypass __setattr__ to normalize the URL
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def auth_method(self) -> str:
        if isinstance(self.credentials, BearerCredentials):
            return "bearer"
        if isinstance(self.credentials, ClientCredentials):
            return "client"
        return "password"

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/realms/{self.realm}/protocol/openid-connect/token"


def _required_secret(secret_name: str, env_var: str) -> str:
    value = _load_secret_from_file(secret_name, env_var)
    if not value:
        raise RuntimeError(f"Environment variable {env_var} (or /run/secrets/{secret_name}) is required.")
    return value


def load_settings(auth_method: Optional[str] = None) -> KeycloakConfig:
    """Load client settings from environment and /run/secrets.

    Args:
        auth_method: Overrides KEYCLOAK_AUTH_METHOD when given

    Raises:
        RuntimeError: If the auth method is unknown or a required secret is missing
    """
    base_url = os.environ.get("KEYCLOAK_URL", "http://localhost:8080")
    realm = os.environ.get("KEYCLOAK_REALM", "master")
    method = (auth_method or os.environ.get("KEYCLOAK_AUTH_METHOD", "password")).strip().lower()
    client_id = os.environ.get("KEYCLOAK_CLIENT_ID", "admin-cli")

    if method == "bearer":
        credentials: Credentials = BearerCredentials(_required_secret("keycloak_token", "KEYCLOAK_TOKEN"))
    elif method == "client":
        credentials = ClientCredentials(
            client_id=client_id,
            client_secret=_required_secret("keycloak_client_secret", "KEYCLOAK_CLIENT_SECRET"),
        )
    elif method == "password":
        credentials = PasswordCredentials(
            username=os.environ.get("KEYCLOAK_ADMIN", "admin"),
            password=_required_secret("keycloak_admin_password", "KEYCLOAK_ADMIN_PASSWORD"),
            client_id=client_id,
        )
    else:
        raise RuntimeError(
            f"KEYCLOAK_AUTH_METHOD must be one of {', '.join(AUTH_METHODS)} (got '{method}')."
        )

    timeout_raw = os.environ.get("KEYCLOAK_REQUEST_TIMEOUT", str(REQUEST_TIMEOUT))
    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise RuntimeError(f"KEYCLOAK_REQUEST_TIMEOUT must be a number (got '{timeout_raw}').") from None

    verify_ssl = os.environ.get("KEYCLOAK_VERIFY_SSL", "true").lower() == "true"

    logger.info(f"[settings] url={base_url}; realm={realm}; auth_method={method}")
    if not verify_ssl:
        logger.warning("[settings] WARNING: TLS verification disabled (KEYCLOAK_VERIFY_SSL=false)")

    return KeycloakConfig(
        base_url=base_url,
        realm=realm,
        credentials=credentials,
        timeout=timeout,
        verify_ssl=verify_ssl,
    )
