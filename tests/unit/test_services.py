"""
Unit tests for the resource services (users, groups, roles, realms, clients, ...).

Services only compose paths, validate input and prefix errors, so these tests
check the request that goes out and the value that comes back.
"""
import json

import pytest

from kcadmin.core.keycloak.exceptions import KeycloakAPIError, KeycloakError, ResponseParseError
from tests.conftest import BASE_URL, REALM, make_response

REALM_URL = f"{BASE_URL}/admin/realms/{REALM}"


# ============================================================================
# UserService
# ============================================================================

def test_create_user_returns_id_from_location(http, kc):
    http.queue(make_response(201, headers={"Location": f"{REALM_URL}/users/u-1"}))

    assert kc.users.create({"username": "alice", "email": "alice@example.com"}) == "u-1"
    assert json.loads(http.calls[0].data)["username"] == "alice"


@pytest.mark.parametrize("payload", [None, {}, {"email": "a@example.com"}])
def test_create_user_requires_username(http, kc, payload):
    with pytest.raises(ValueError):
        kc.users.create(payload)
    assert http.calls == []


def test_create_user_rejects_invalid_email(http, kc):
    with pytest.raises(ValueError, match="Invalid email format"):
        kc.users.create({"username": "alice", "email": "not-an-email"})


def test_create_user_conflict_is_prefixed_and_keeps_status(http, kc):
    http.queue(make_response(409, {"errorMessage": "User exists with same username"}))

    with pytest.raises(KeycloakAPIError) as exc:
        kc.users.create({"username": "alice"})

    assert str(exc.value).startswith("[409] Failed to create user:")
    assert exc.value.is_conflict
    assert "User exists" in exc.value.response_body
    assert isinstance(exc.value.__cause__, KeycloakAPIError)


def test_get_by_username_matches_exactly(http, kc):
    http.queue(make_response(200, [{"id": "1", "username": "alice2"}, {"id": "2", "username": "alice"}]))

    user = kc.users.get_by_username("alice")

    assert user["id"] == "2"
    assert http.calls[0].params == {"username": "alice", "exact": "true"}


def test_get_by_username_returns_none_when_absent(http, kc):
    http.queue(make_response(200, []))

    assert kc.users.get_by_username("ghost") is None


def test_reset_password_sends_credential(http, kc):
    http.queue(make_response(204))

    kc.users.reset_password("u-1", "N3wPass!", temporary=False)

    call = http.calls[0]
    assert call.method == "PUT"
    assert call.url == f"{REALM_URL}/users/u-1/reset-password"
    assert json.loads(call.data) == {"type": "password", "temporary": False, "value": "N3wPass!"}


def test_execute_actions_email_passes_query(http, kc):
    http.queue(make_response(204))

    kc.users.execute_actions_email("u-1", ["UPDATE_PASSWORD"], lifespan=3600)

    call = http.calls[0]
    assert json.loads(call.data) == ["UPDATE_PASSWORD"]
    assert call.params == {"lifespan": 3600}


@pytest.mark.parametrize("user_id", ["", "  ", None, "a/b"])
def test_user_id_is_validated(http, kc, user_id):
    with pytest.raises(ValueError):
        kc.users.delete(user_id)
    assert http.calls == []


def test_join_group_uses_put(http, kc):
    http.queue(make_response(204))

    kc.users.join_group("u-1", "g-1")

    assert http.calls[0].method == "PUT"
    assert http.calls[0].url == f"{REALM_URL}/users/u-1/groups/g-1"


# ============================================================================
# GroupService
# ============================================================================

def test_create_group_returns_id(http, kc):
    http.queue(make_response(201, headers={"Location": f"{REALM_URL}/groups/g-1"}))

    assert kc.groups.create({"name": "ops"}) == "g-1"


def test_create_child_extracts_id_outside_legacy_allow_list(http, kc):
    """Child creation declares its shape explicitly, so the id comes back."""
    http.queue(make_response(201, headers={"Location": f"{REALM_URL}/groups/g-2"}))

    assert kc.groups.create_child("g-1", {"name": "team"}) == "g-2"
    assert http.calls[0].url == f"{REALM_URL}/groups/g-1/children"


def test_group_count_returns_body(http, kc):
    http.queue(make_response(200, {"count": 3}))

    assert kc.groups.count(search="ops") == {"count": 3}


# ============================================================================
# RoleService
# ============================================================================

def test_create_role_returns_name(http, kc):
    http.queue(make_response(201, headers={"Location": f"{REALM_URL}/roles/analyst"}))

    assert kc.roles.create({"name": "analyst"}) == "analyst"


def test_add_roles_to_user_resolves_representations(http, kc):
    http.queue(
        make_response(200, {"id": "r-1", "name": "analyst", "description": "x"}),
        make_response(204),
    )

    kc.roles.add_to_user("u-1", ["analyst"])

    mapping_call = http.calls[1]
    assert mapping_call.url == f"{REALM_URL}/users/u-1/role-mappings/realm"
    assert json.loads(mapping_call.data) == [{"id": "r-1", "name": "analyst"}]


def test_missing_role_error_is_prefixed(http, kc):
    http.queue(make_response(404, {"error": "Could not find role"}))

    with pytest.raises(KeycloakError) as exc:
        kc.roles.get_by_name("nope")

    assert exc.value.message.startswith("Failed to get role nope:")
    assert exc.value.status_code == 404


# ============================================================================
# RealmService
# ============================================================================

def test_list_realms_uses_realm_collection(http, kc):
    http.queue(make_response(200, [{"realm": "master"}, {"realm": "demo"}]))

    realms = kc.realms.list(brief_representation=True)

    assert [r["realm"] for r in realms] == ["master", "demo"]
    assert http.calls[0].url == f"{BASE_URL}/admin/realms"
    assert http.calls[0].params == {"briefRepresentation": "true"}


def test_create_realm_requires_name(http, kc):
    with pytest.raises(ValueError, match="Realm realm is required"):
        kc.realms.create({"enabled": True})


def test_realm_exists_false_on_404(http, kc):
    http.queue(make_response(404, {"error": "Realm not found."}))

    assert kc.realms.exists("ghost") is False


def test_realm_exists_reraises_other_errors(http, kc):
    http.queue(make_response(403, {"error": "unknown_error"}))

    with pytest.raises(KeycloakAPIError) as exc:
        kc.realms.exists("locked")
    assert exc.value.status_code == 403


def test_realm_events_target_named_realm(http, kc):
    http.queue(make_response(200, []))

    kc.realms.get_events("other", type="LOGIN", max=5)

    assert http.calls[0].url == f"{BASE_URL}/admin/realms/other/events"
    assert http.calls[0].params == {"type": "LOGIN", "max": 5}


# ============================================================================
# ClientService
# ============================================================================

def test_create_client_requires_client_id(http, kc):
    with pytest.raises(ValueError, match="Client clientId is required"):
        kc.clients.create({"name": "no id"})


def test_create_client_returns_internal_id(http, kc):
    http.queue(make_response(201, headers={"Location": f"{REALM_URL}/clients/0f1e"}))

    assert kc.clients.create({"clientId": "flask-app"}) == "0f1e"


def test_list_clients_filters_by_client_id(http, kc):
    http.queue(make_response(200, [{"id": "0f1e", "clientId": "flask-app"}]))

    kc.clients.list(client_id="flask-app")

    assert http.calls[0].params == {"clientId": "flask-app"}


def test_add_default_client_scope(http, kc):
    http.queue(make_response(204))

    kc.clients.add_default_client_scope("0f1e", "scope-1")

    assert http.calls[0].method == "PUT"
    assert http.calls[0].url == f"{REALM_URL}/clients/0f1e/default-client-scopes/scope-1"


def test_download_keystore_returns_exact_bytes(http, kc):
    keystore = bytes(range(256)) * 4
    http.queue(make_response(200, keystore, {"Content-Type": "application/octet-stream"}, encoding=None))

    data = kc.clients.download_keystore("0f1e", "jwt.credential", {"format": "PKCS12", "keyAlias": "k"})

    assert data == keystore
    assert http.calls[0].headers["Accept"] == "application/octet-stream"


def test_generate_and_download_keystore(http, kc):
    http.queue(make_response(200, b"\xfe\xed\xfe\xed", {"Content-Type": "application/octet-stream"}, encoding=None))

    data = kc.clients.generate_and_download_keystore("0f1e", "jwt.credential", {"format": "JKS"})

    assert data == b"\xfe\xed\xfe\xed"
    assert http.calls[0].url == f"{REALM_URL}/clients/0f1e/certificates/jwt.credential/generate-and-download"


# ============================================================================
# ClientScopeService / OrganizationService / KeysService
# ============================================================================

def test_create_client_scope_returns_id(http, kc):
    http.queue(make_response(201, headers={"Location": f"{REALM_URL}/client-scopes/cs-1"}))

    assert kc.client_scopes.create({"name": "profile", "protocol": "openid-connect"}) == "cs-1"


def test_add_organization_member_sends_json_string(http, kc):
    http.queue(make_response(201, headers={"Location": f"{REALM_URL}/organizations/o-1/members/u-1"}))

    kc.organizations.add_member("o-1", "u-1")

    call = http.calls[0]
    assert call.data == '"u-1"'
    assert call.headers["Content-Type"] == "application/json"


def test_active_kid(http, kc):
    http.queue(make_response(200, {"active": {"RS256": "kid-1"}, "keys": []}))

    assert kc.keys.active_kid() == "kid-1"


# ============================================================================
# SessionService
# ============================================================================

def test_revoke_user_sessions_logs_out_when_active(http, kc):
    http.queue(make_response(200, [{"id": "s1"}, {"id": "s2"}]), make_response(204))

    assert kc.sessions.revoke_user_sessions("u-1") == 2
    assert http.calls[1].url == f"{REALM_URL}/users/u-1/logout"


def test_revoke_user_sessions_noop_without_sessions(http, kc):
    http.queue(make_response(200, []))

    assert kc.sessions.revoke_user_sessions("u-1") == 0
    assert len(http.calls) == 1


# ============================================================================
# Create calls answered without a Location header
# ============================================================================

@pytest.mark.parametrize(
    "create, description",
    [
        (lambda kc: kc.users.create({"username": "alice"}), "create user"),
        (lambda kc: kc.groups.create({"name": "ops"}), "create group"),
        (lambda kc: kc.clients.create({"clientId": "app"}), "create client"),
        (lambda kc: kc.client_scopes.create({"name": "profile"}), "create client scope"),
        (lambda kc: kc.organizations.create({"name": "acme"}), "create organization"),
    ],
)
def test_create_without_location_raises_prefixed_parse_error(http, kc, create, description):
    http.queue(make_response(201))

    with pytest.raises(ResponseParseError) as exc:
        create(kc)

    assert exc.value.message.startswith(f"Failed to {description}:")
    assert "no Location header" in exc.value.message
    assert exc.value.status_code == 201


# ============================================================================
# IdentityProviderService
# ============================================================================

def test_create_identity_provider_returns_alias(http, kc):
    http.queue(make_response(201, headers={"Location": f"{REALM_URL}/identity-provider/instances/github"}))

    alias = kc.identity_providers.create({"alias": "github", "providerId": "github"})

    assert alias == "github"
    assert http.calls[0].url == f"{REALM_URL}/identity-provider/instances"


def test_create_identity_provider_requires_alias(http, kc):
    with pytest.raises(ValueError, match="Identity provider alias is required"):
        kc.identity_providers.create({"providerId": "oidc"})
    assert http.calls == []


def test_create_identity_provider_mapper_returns_id(http, kc):
    http.queue(
        make_response(201, headers={"Location": f"{REALM_URL}/identity-provider/instances/github/mappers/m-1"})
    )

    mapper_id = kc.identity_providers.create_mapper(
        "github", {"name": "email", "identityProviderMapper": "hardcoded-attribute-idp-mapper"}
    )

    assert mapper_id == "m-1"


def test_delete_identity_provider_is_prefixed_on_404(http, kc):
    http.queue(make_response(404, {"error": "Could not find identity provider"}))

    with pytest.raises(KeycloakAPIError) as exc:
        kc.identity_providers.delete("ghost")

    assert exc.value.message.startswith("Failed to delete identity provider ghost:")


# ============================================================================
# RoleMappingService
# ============================================================================

def test_group_realm_role_mapping_sends_refs(http, kc):
    http.queue(make_response(204))

    kc.group_role_mappings.add_realm("g-1", [{"id": "r-1", "name": "analyst", "composite": False}])

    call = http.calls[0]
    assert call.url == f"{REALM_URL}/groups/g-1/role-mappings/realm"
    assert json.loads(call.data) == [{"id": "r-1", "name": "analyst"}]


def test_user_effective_client_roles_full_representation(http, kc):
    http.queue(make_response(200, []))

    kc.user_role_mappings.list_effective_client("u-1", "c-1", brief_representation=False)

    call = http.calls[0]
    assert call.url == f"{REALM_URL}/users/u-1/role-mappings/clients/c-1/composite"
    assert call.params == {"briefRepresentation": "false"}


def test_role_mapping_requires_role_ids(http, kc):
    with pytest.raises(ValueError, match="Role id and name are required"):
        kc.user_role_mappings.remove_client("u-1", "c-1", [{"name": "viewer"}])
    assert http.calls == []


# ============================================================================
# AttackDetectionService
# ============================================================================

def test_brute_force_status(http, kc):
    http.queue(make_response(200, {"disabled": True, "numFailures": 5}))

    assert kc.attack_detection.get_status("u-1")["numFailures"] == 5
    assert http.calls[0].url == f"{REALM_URL}/attack-detection/brute-force/users/u-1"


def test_clear_all_login_failures(http, kc):
    http.queue(make_response(204))

    kc.attack_detection.clear_all()

    assert http.calls[0].method == "DELETE"
    assert http.calls[0].url == f"{REALM_URL}/attack-detection/brute-force/users"
