"""
Custom-claim helpers.

Roles live in the `roles` custom claim on the identity provider. Writes go
through `merge_custom_claims`, so claims other than `roles` survive.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from glidru.auth.identity import IdentityProvider
from glidru.auth.roles import Role, normalize_roles

logger = logging.getLogger(__name__)


async def merge_custom_claims(
    identity: IdentityProvider, uid: str, claims: dict[str, Any]
) -> dict[str, Any]:
    """Merge `claims` into the user's existing custom claims."""
    user = await identity.get_user(uid)
    updated = {**user.custom_claims, **claims}
    await identity.set_custom_claims(uid, updated)
    return updated


async def get_roles(identity: IdentityProvider, uid: str) -> list[str]:
    """All roles held by a user."""
    user = await identity.get_user(uid)
    return user.roles


async def add_roles(
    identity: IdentityProvider, uid: str, roles: str | Role | Iterable[str | Role]
) -> list[str]:
    """Add role(s), ignoring ones already held. Returns the new role list."""
    current = await get_roles(identity, uid)
    updated = normalize_roles([*current, *normalize_roles(roles)])

    await merge_custom_claims(identity, uid, {"roles": updated})
    logger.info(f"Roles for {uid} are now {updated}")
    return updated


async def remove_roles(
    identity: IdentityProvider, uid: str, roles: str | Role | Iterable[str | Role]
) -> list[str]:
    """Remove role(s). Returns the new role list."""
    to_remove = set(normalize_roles(roles))
    updated = [role for role in await get_roles(identity, uid) if role not in to_remove]

    await merge_custom_claims(identity, uid, {"roles": updated})
    logger.info(f"Roles for {uid} are now {updated}")
    return updated
