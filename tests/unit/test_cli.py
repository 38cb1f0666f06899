"""Unit tests for the kcadmin command-line entry point."""
import json

import pytest

from kcadmin import cli
from tests.conftest import BASE_URL, REALM, make_response

BEARER_ARGS = ["--kc-url", BASE_URL, "--realm", REALM, "--auth-method", "bearer", "--token", "cli-token"]


def test_token_command_prints_token(http, capsys):
    cli.main(BEARER_ARGS + ["token"])

    assert capsys.readouterr().out.strip() == "cli-token"
    assert http.calls == []


def test_password_token_command_uses_token_endpoint(http, capsys, monkeypatch):
    monkeypatch.delenv("KEYCLOAK_ADMIN", raising=False)
    http.queue(make_response(200, {"access_token": "pw-token"}))

    cli.main(["--kc-url", BASE_URL, "--realm", REALM, "--password", "s3cret", "token"])

    assert capsys.readouterr().out.strip() == "pw-token"
    assert http.token_calls[0].data["username"] == "admin"


def test_realms_command_prints_names(http, capsys):
    http.queue(make_response(200, [{"realm": "master"}, {"realm": "demo"}]))

    cli.main(BEARER_ARGS + ["realms"])

    assert json.loads(capsys.readouterr().out) == ["master", "demo"]


def test_request_command_sends_body_and_params(http, capsys):
    http.queue(make_response(201, headers={"Location": f"{BASE_URL}/admin/realms/{REALM}/groups/g-1"}))

    cli.main(BEARER_ARGS + ["request", "post", "/groups", "--data", '{"name": "ops"}', "--param", "x=1"])

    call = http.calls[0]
    assert call.url == f"{BASE_URL}/admin/realms/{REALM}/groups"
    assert json.loads(call.data) == {"name": "ops"}
    assert call.params == {"x": "1"}
    assert json.loads(capsys.readouterr().out) == {"id": "g-1"}


def test_request_command_without_realm(http, capsys):
    http.queue(make_response(200, {"realm": "other"}))

    cli.main(BEARER_ARGS + ["request", "GET", "/other", "--no-realm"])

    assert http.calls[0].url == f"{BASE_URL}/admin/realms/other"


def test_request_command_for_named_realm(http, capsys):
    http.queue(make_response(200, []))

    cli.main(BEARER_ARGS + ["request", "GET", "/users", "--target-realm", "other"])

    assert http.calls[0].url == f"{BASE_URL}/admin/realms/other/users"


def test_api_error_exits_with_status_one(http, capsys):
    http.queue(make_response(404, {"error": "Realm not found."}))

    with pytest.raises(SystemExit) as exc:
        cli.main(BEARER_ARGS + ["users", "--search", "alice"])

    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "[users] Error: [404] Failed to list users: Not Found" in err
    assert "Realm not found." in err


def test_invalid_json_data_is_a_usage_error(http):
    with pytest.raises(SystemExit) as exc:
        cli.main(BEARER_ARGS + ["request", "POST", "/groups", "--data", "{nope"])

    assert exc.value.code == 2
    assert http.calls == []


def test_missing_password_is_a_usage_error(http, monkeypatch):
    monkeypatch.delenv("KEYCLOAK_ADMIN_PASSWORD", raising=False)

    with pytest.raises(SystemExit) as exc:
        cli.main(["--kc-url", BASE_URL, "--auth-method", "password", "token"])

    assert exc.value.code == 2


def test_no_command_prints_help(capsys):
    cli.main([])

    assert "usage: kcadmin" in capsys.readouterr().out


def test_binary_response_is_written_to_output_file(http, capsys, tmp_path):
    keystore = bytes(range(256))
    http.queue(make_response(200, keystore, {"Content-Type": "application/octet-stream"}, encoding=None))
    target = tmp_path / "client.p12"

    cli.main(
        BEARER_ARGS
        + [
            "request", "POST", "/clients/c1/certificates/jwt.credential/download",
            "--data", '{"format": "PKCS12"}',
            "--accept", "application/octet-stream",
            "--output", str(target),
        ]
    )

    assert target.read_bytes() == keystore
    assert "Wrote 256 bytes" in capsys.readouterr().err
