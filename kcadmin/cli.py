"""Command-line access to the Keycloak Admin API.

Examples:
    kcadmin --kc-url http://localhost:8080 --password admin token
    kcadmin realms
    kcadmin users --search alice
    kcadmin request GET /clients --param clientId=account
    kcadmin request POST /groups --data '{"name": "ops"}'
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from kcadmin.config.settings import (
    AUTH_METHODS,
    BearerCredentials,
    ClientCredentials,
    Credentials,
    KeycloakConfig,
    PasswordCredentials,
    REQUEST_TIMEOUT,
)
from kcadmin.core.keycloak import KeycloakAdminClient, KeycloakError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kcadmin", description="Keycloak Admin API helper")
    parser.add_argument("--kc-url", default=os.environ.get("KEYCLOAK_URL", "http://localhost:8080"))
    parser.add_argument("--realm", default=os.environ.get("KEYCLOAK_REALM", "master"))
    parser.add_argument(
        "--auth-method",
        choices=AUTH_METHODS,
        default=os.environ.get("KEYCLOAK_AUTH_METHOD", "password"),
    )
    parser.add_argument("--token", default=os.environ.get("KEYCLOAK_TOKEN"))
    parser.add_argument("--client-id", default=os.environ.get("KEYCLOAK_CLIENT_ID", "admin-cli"))
    parser.add_argument("--client-secret", default=os.environ.get("KEYCLOAK_CLIENT_SECRET"))
    parser.add_argument("--username", default=os.environ.get("KEYCLOAK_ADMIN", "admin"))
    parser.add_argument("--password", default=os.environ.get("KEYCLOAK_ADMIN_PASSWORD"))
    parser.add_argument("--timeout", type=float, default=REQUEST_TIMEOUT)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("token", help="Print an access token")

    sr = sub.add_parser("request", help="Send a raw Admin API request")
    sr.add_argument("method")
    sr.add_argument("path", help="Path relative to the realm, e.g. /users")
    sr.add_argument("--data", help="JSON request body")
    sr.add_argument("--param", action="append", default=[], metavar="KEY=VALUE")
    sr.add_argument("--accept", help="Accept header, e.g. application/octet-stream")
    sr.add_argument("--output", help="Write a binary response body to this file")
    target = sr.add_mutually_exclusive_group()
    target.add_argument("--target-realm", help="Send to this realm instead of --realm")
    target.add_argument("--no-realm", action="store_true", help="Send to /admin/realms{path}")

    sub.add_parser("realms", help="List realm names")

    su = sub.add_parser("users", help="List users")
    su.add_argument("--search")
    su.add_argument("--max", type=int, default=100)

    return parser


def _credentials(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Credentials:
    if args.auth_method == "bearer":
        if not args.token:
            parser.error("--token (or KEYCLOAK_TOKEN) is required for bearer auth")
        return BearerCredentials(args.token)
    if args.auth_method == "client":
        if not args.client_secret:
            parser.error("--client-secret (or KEYCLOAK_CLIENT_SECRET) is required for client auth")
        return ClientCredentials(args.client_id, args.client_secret)
    if not args.password:
        parser.error("--password (or KEYCLOAK_ADMIN_PASSWORD) is required for password auth")
    return PasswordCredentials(args.username, args.password, args.client_id)


def _parse_params(pairs: List[str], parser: argparse.ArgumentParser) -> Dict[str, str]:
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            parser.error(f"Invalid --param '{pair}', expected KEY=VALUE")
        params[key] = value
    return params


def _run_request(client: KeycloakAdminClient, args: argparse.Namespace, parser: argparse.ArgumentParser) -> Any:
    body = None
    if args.data:
        try:
            body = json.loads(args.data)
        except ValueError as e:
            parser.error(f"--data is not valid JSON: {e}")
    params = _parse_params(args.param, parser)
    headers = {"Accept": args.accept} if args.accept else None

    if args.no_realm:
        return client.request_without_realm(args.path, args.method, body, params=params, headers=headers)
    if args.target_realm:
        return client.request_for_realm(
            args.target_realm, args.path, args.method, body, params=params, headers=headers
        )
    return client.request(args.path, args.method, body, params=params, headers=headers)


def _emit(result: Any, output: Optional[str]) -> None:
    """Print JSON results; binary bodies go to --output or raw to stdout."""
    payload = result.get("text") if isinstance(result, dict) else None
    if isinstance(payload, bytes):
        if output:
            with open(output, "wb") as fh:
                fh.write(payload)
            print(f"Wrote {len(payload)} bytes to {output}", file=sys.stderr)
        else:
            sys.stdout.buffer.write(payload)
            sys.stdout.flush()
        return
    print(json.dumps(result, indent=2))


def main(argv: Optional[List[str]] = None) -> None:
    """Command-line entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = KeycloakConfig(
            base_url=args.kc_url,
            realm=args.realm,
            credentials=_credentials(args, parser),
            timeout=args.timeout,
        )
    except ValueError as e:
        parser.error(str(e))
    client = KeycloakAdminClient(config)

    try:
        if args.cmd == "token":
            print(client.get_valid_token())
            return
        if args.cmd == "request":
            result = _run_request(client, args, parser)
        elif args.cmd == "realms":
            result = [realm.get("realm") for realm in client.realms.list(brief_representation=True)]
        elif args.cmd == "users":
            result = client.users.list(search=args.search, max=args.max)
        else:  # pragma: no cover - argparse restricts choices
            parser.error(f"Unknown command {args.cmd}")
    except KeycloakError as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        if e.response_body:
            print(e.body_preview(), file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        parser.error(str(e))

    _emit(result, getattr(args, "output", None))


if __name__ == "__main__":
    main()
