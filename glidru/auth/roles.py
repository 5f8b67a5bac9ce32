"""
Roles.

Roles are flat labels stored as custom claims on the identity provider.
There is no hierarchy: holding "admin" does not imply "premium".
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class Role(str, Enum):
    """Platform-wide role carried in the `roles` custom claim."""

    ADMIN = "admin"
    PREMIUM = "premium"


KNOWN_ROLES: frozenset[str] = frozenset(r.value for r in Role)


def normalize_roles(roles: str | Role | Iterable[str | Role] | None) -> list[str]:
    """
    Turn a role, a list of roles, or nothing into a de-duplicated list.

    Order of first appearance is kept.
    """
    if roles is None:
        return []
    if isinstance(roles, (str, Role)):
        roles = [roles]

    result: list[str] = []
    for role in roles:
        value = role.value if isinstance(role, Role) else str(role)
        if value not in result:
            result.append(value)
    return result


def has_any(
    principal_roles: Iterable[str | Role],
    required: Iterable[str | Role],
) -> bool:
    """True if the principal holds at least one of the required roles."""
    return bool(set(normalize_roles(principal_roles)) & set(normalize_roles(required)))


def unknown_roles(roles: Iterable[str]) -> list[str]:
    """Roles outside the known vocabulary."""
    return [role for role in roles if role not in KNOWN_ROLES]
