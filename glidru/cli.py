"""
Command-line entry point.

    glidru serve                      Run the API with uvicorn
    glidru audit-owners               Count questions missing an owner tag
    glidru grant-role UID ROLE...     Add roles to an account (admin bootstrap)
    glidru revoke-role UID ROLE...    Remove roles from an account
    glidru issue-token UID            Mint a local development token
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import uvicorn

from glidru.api.app import create_backends
from glidru.auth import claims
from glidru.auth.local import LocalIdentityProvider
from glidru.auth.roles import KNOWN_ROLES, unknown_roles
from glidru.config import configure_logging, get_settings
from glidru.services.questions import QuestionStore


def _serve(args: argparse.Namespace) -> int:
    settings = get_settings()
    uvicorn.run(
        "glidru.api.app:build_default_app",
        factory=True,
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
    )
    return 0


async def _audit_owners(args: argparse.Namespace) -> int:
    settings = get_settings()
    storage, _ = create_backends(settings)
    store = QuestionStore(storage, collection=settings.questions_collection)

    count = await store.count_unowned()
    print(f"{count} question(s) without an owner")
    return 1 if count else 0


async def _change_roles(args: argparse.Namespace) -> int:
    unknown = unknown_roles(args.roles)
    if unknown:
        print(f"Unknown roles: {', '.join(unknown)} (known: {', '.join(sorted(KNOWN_ROLES))})")
        return 2

    settings = get_settings()
    if not settings.use_firebase:
        print("Role changes need Firebase; set FIREBASE_CREDENTIALS_PATH or FIREBASE_PROJECT_ID")
        return 2

    _, identity = create_backends(settings)
    if args.command == "grant-role":
        roles = await claims.add_roles(identity, args.uid, args.roles)
    else:
        roles = await claims.remove_roles(identity, args.uid, args.roles)

    print(f"{args.uid}: {', '.join(roles) or '(no roles)'}")
    return 0


def _issue_token(args: argparse.Namespace) -> int:
    unknown = unknown_roles(args.role)
    if unknown:
        print(f"Unknown roles: {', '.join(unknown)}")
        return 2

    provider = LocalIdentityProvider(get_settings())
    provider.create_user(
        uid=args.uid,
        email=args.email,
        display_name=args.name,
        roles=args.role,
        email_verified=True,
    )
    print(provider.issue_token(args.uid))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="glidru", description="GlidrU API tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    subparsers.add_parser("audit-owners", help="Count questions without an owner")

    for name, help_text in (
        ("grant-role", "Add roles to an account"),
        ("revoke-role", "Remove roles from an account"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("uid")
        sub.add_argument("roles", nargs="+")

    token = subparsers.add_parser("issue-token", help="Mint a local development token")
    token.add_argument("uid")
    token.add_argument("--email", default=None)
    token.add_argument("--name", default=None)
    token.add_argument("--role", action="append", default=[])

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "serve":
        return _serve(args)
    if args.command == "audit-owners":
        return asyncio.run(_audit_owners(args))
    if args.command in ("grant-role", "revoke-role"):
        return asyncio.run(_change_roles(args))
    return _issue_token(args)


if __name__ == "__main__":
    sys.exit(main())
