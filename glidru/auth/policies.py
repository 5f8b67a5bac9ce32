"""
Policies - the interface for route authentication and authorization.

Routes declare what they need and receive the resolved principal:

    principal: Principal = Depends(require_auth())
    principal: Principal | None = Depends(optional_auth())
    principal: Principal = Depends(require_roles("admin"))

The principal is handed to the route as a value; nothing is attached to
shared request state. The plain functions `authenticate_required`,
`authenticate_optional` and `enforce_roles` carry the logic and do not
depend on FastAPI.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, Header, Request

from glidru.auth.context import Principal
from glidru.auth.identity import IdentityProvider
from glidru.auth.roles import Role, has_any, normalize_roles
from glidru.core.errors import Forbidden, Unauthenticated
from glidru.integrations.sentry import set_user

logger = logging.getLogger(__name__)


# =============================================================================
# Credential extraction
# =============================================================================


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


# =============================================================================
# Core checks (transport independent)
# =============================================================================


async def authenticate_required(
    authorization: str | None, identity: IdentityProvider
) -> Principal:
    """
    Resolve the principal or fail.

    Raises Unauthenticated when no bearer token is present or the identity
    provider rejects it. Provider outages propagate as UpstreamFailure.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthenticated("Unauthorized - No token provided")

    try:
        return await identity.verify_token(token)
    except Unauthenticated as e:
        logger.info(f"Token rejected: {e.message}")
        raise


async def authenticate_optional(
    authorization: str | None, identity: IdentityProvider
) -> Principal | None:
    """
    Resolve the principal if possible; never fails the request.

    Any verification error is logged and the request continues anonymously.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return None

    try:
        return await identity.verify_token(token)
    except Exception as e:
        logger.warning(f"Error verifying optional token: {e}")
        return None


def enforce_roles(principal: Principal | None, roles: list[str]) -> Principal:
    """Fail unless the principal holds at least one of `roles`."""
    if principal is None:
        raise Unauthenticated("Unauthorized - Authentication required")
    if not has_any(principal.roles, roles):
        logger.info(f"User {principal.uid} lacks any of roles {roles}")
        raise Forbidden("Forbidden - Insufficient permissions")
    return principal


# =============================================================================
# FastAPI dependencies
# =============================================================================


def get_identity(request: Request) -> IdentityProvider:
    return request.app.state.identity


async def _required_principal(
    authorization: str | None = Header(default=None),
    identity: IdentityProvider = Depends(get_identity),
) -> Principal:
    principal = await authenticate_required(authorization, identity)
    set_user(principal.uid, principal.email)
    return principal


async def _optional_principal(
    authorization: str | None = Header(default=None),
    identity: IdentityProvider = Depends(get_identity),
) -> Principal | None:
    principal = await authenticate_optional(authorization, identity)
    if principal is not None:
        set_user(principal.uid, principal.email)
    return principal


def require_auth() -> Callable:
    """Require a verified bearer token."""
    return _required_principal


def optional_auth() -> Callable:
    """Resolve the principal when a valid token is present, else None."""
    return _optional_principal


def require_roles(*roles: str | Role) -> Callable:
    """
    Require authentication plus ANY of the listed roles.

    Usage:
        @router.get("/all")
        async def list_users(principal: Principal = Depends(require_roles("admin"))):
            ...
    """
    required = normalize_roles(roles)

    async def dependency(
        principal: Principal = Depends(_required_principal),
    ) -> Principal:
        return enforce_roles(principal, required)

    return dependency
