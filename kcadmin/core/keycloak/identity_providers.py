"""Keycloak identity provider (brokering) management operations."""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, List

from kcadmin.core.validators import require_id, require_payload
from .exceptions import wrap_errors
from .transport import Expect

if TYPE_CHECKING:
    from .client import KeycloakAdminClient


class IdentityProviderService:
    """Service for managing identity providers and their mappers.

    Identity providers are addressed by ``alias``, not by an internal ID.
    """

    def __init__(self, client: KeycloakAdminClient):
        """Initialize identity provider service.

        Args:
            client: Keycloak Admin client
        """
        self.client = client

    def list(self, **params: Any) -> List[dict]:
        """List identity providers (search, first, max, briefRepresentation, realmOnly)."""
        with wrap_errors("list identity providers"):
            return self.client.request("/identity-provider/instances", "GET", params=params, expect=Expect.BODY)

    def create(self, provider: dict) -> str:
        """Create an identity provider.

        Args:
            provider: IdentityProviderRepresentation; ``alias`` and ``providerId`` are required

        Returns:
            Provider alias
        """
        require_payload(provider, "Identity provider", ["alias", "providerId"])
        with wrap_errors(f"create identity provider {provider['alias']}"):
            self.client.request("/identity-provider/instances", "POST", provider, expect=Expect.BODY)
        return provider["alias"]

    def get(self, alias: str) -> dict:
        alias = require_id(alias, "Identity provider alias")
        with wrap_errors(f"get identity provider {alias}"):
            return self.client.request(f"/identity-provider/instances/{alias}", "GET", expect=Expect.BODY)

    def update(self, alias: str, provider: dict) -> None:
        alias = require_id(alias, "Identity provider alias")
        require_payload(provider, "Identity provider")
        with wrap_errors(f"update identity provider {alias}"):
            self.client.request(f"/identity-provider/instances/{alias}", "PUT", provider, expect=Expect.BODY)

    def delete(self, alias: str) -> None:
        alias = require_id(alias, "Identity provider alias")
        with wrap_errors(f"delete identity provider {alias}"):
            self.client.request(f"/identity-provider/instances/{alias}", "DELETE", expect=Expect.BODY)

    def get_provider_factory(self, provider_id: str) -> dict:
        """Return the factory description for a provider type (e.g. "oidc", "saml")."""
        provider_id = require_id(provider_id, "Provider ID")
        with wrap_errors(f"get identity provider factory {provider_id}"):
            return self.client.request(f"/identity-provider/providers/{provider_id}", "GET", expect=Expect.BODY)

    # ── mappers ──────────────────────────────────────────────────────────────
    def list_mappers(self, alias: str) -> List[dict]:
        alias = require_id(alias, "Identity provider alias")
        with wrap_errors(f"list mappers of identity provider {alias}"):
            return self.client.request(f"/identity-provider/instances/{alias}/mappers", "GET", expect=Expect.BODY)

    def create_mapper(self, alias: str, mapper: dict) -> str:
        """Create a mapper and return its ID (the mapper name when no Location is sent)."""
        alias = require_id(alias, "Identity provider alias")
        require_payload(mapper, "Mapper", ["name", "identityProviderMapper"])
        with wrap_errors(f"create mapper for identity provider {alias}"):
            result = self.client.request(
                f"/identity-provider/instances/{alias}/mappers", "POST", mapper, expect=Expect.ID_FROM_LOCATION
            )
        return result.get("id") or mapper["name"]

    def get_mapper(self, alias: str, mapper_id: str) -> dict:
        alias = require_id(alias, "Identity provider alias")
        mapper_id = require_id(mapper_id, "Mapper ID")
        with wrap_errors(f"get mapper {mapper_id} of identity provider {alias}"):
            return self.client.request(
                f"/identity-provider/instances/{alias}/mappers/{mapper_id}", "GET", expect=Expect.BODY
            )

    def update_mapper(self, alias: str, mapper_id: str, mapper: dict) -> None:
        alias = require_id(alias, "Identity provider alias")
        mapper_id = require_id(mapper_id, "Mapper ID")
        require_payload(mapper, "Mapper")
        with wrap_errors(f"update mapper {mapper_id} of identity provider {alias}"):
            self.client.request(
                f"/identity-provider/instances/{alias}/mappers/{mapper_id}", "PUT", mapper, expect=Expect.BODY
            )

    def delete_mapper(self, alias: str, mapper_id: str) -> None:
        alias = require_id(alias, "Identity provider alias")
        mapper_id = require_id(mapper_id, "Mapper ID")
        with wrap_errors(f"delete mapper {mapper_id} of identity provider {alias}"):
            self.client.request(
                f"/identity-provider/instances/{alias}/mappers/{mapper_id}", "DELETE", expect=Expect.BODY
            )

    def list_mapper_types(self, alias: str) -> dict:
        alias = require_id(alias, "Identity provider alias")
        with wrap_errors(f"list mapper types of identity provider {alias}"):
            return self.client.request(
                f"/identity-provider/instances/{alias}/mapper-types", "GET", expect=Expect.BODY
            )
