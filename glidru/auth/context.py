"""
Principal - the "who" of each request.

This is the lightweight object passed to route handlers once a bearer
credential has been verified. It carries everything needed to make
authorization decisions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from glidru.auth.roles import Role, has_any, normalize_roles


@dataclass
class Principal:
    """
    An authenticated identity.

    Usage in routes:
        async def my_route(principal: Principal = Depends(require_auth())):
            print(f"User {principal.uid} listing questions")
            if principal.has_role("premium"):
                # do something
    """

    uid: str
    email: str | None = None
    email_verified: bool = False
    display_name: str | None = None
    roles: frozenset[str] = frozenset()

    # Raw decoded token claims
    claims: dict[str, Any] = field(default_factory=dict, repr=False)

    def has_role(self, *roles: str | Role) -> bool:
        """Check if the principal holds ANY of the roles."""
        return has_any(self.roles, roles)

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    @property
    def is_premium(self) -> bool:
        return self.has_role(Role.PREMIUM)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Principal:
        """
        Build a principal from decoded token claims.

        Works for Firebase ID tokens (`uid`, `name`, `email_verified`) and
        local development tokens, which use the same claim names.
        """
        uid = claims.get("uid") or claims.get("sub")
        if not uid:
            raise ValueError("Token has no subject")

        roles = claims.get("roles")
        if not isinstance(roles, (list, tuple, set, frozenset)):
            roles = []

        return cls(
            uid=uid,
            email=claims.get("email"),
            email_verified=bool(claims.get("email_verified", False)),
            display_name=claims.get("name"),
            roles=frozenset(normalize_roles(roles)),
            claims=dict(claims),
        )
