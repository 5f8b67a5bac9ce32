"""
Identity provider interface.

Token verification and custom-claim storage are delegated to an external
identity service. The API only ever talks to this interface:

- FirebaseIdentityProvider (glidru.auth.firebase) in production
- LocalIdentityProvider (glidru.auth.local) for development and tests

Implementations raise:
- Unauthenticated when a token is rejected
- NotFound when a uid is unknown
- UpstreamFailure when the service itself fails
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from glidru.auth.context import Principal
from glidru.auth.roles import normalize_roles


@dataclass
class UserRecord:
    """An account as the identity provider stores it."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    email_verified: bool = False
    disabled: bool = False
    custom_claims: dict[str, Any] = field(default_factory=dict)

    @property
    def roles(self) -> list[str]:
        return normalize_roles(self.custom_claims.get("roles"))

    def summary(self) -> dict[str, Any]:
        """Wire representation used by the admin endpoints."""
        return {
            "uid": self.uid,
            "email": self.email,
            "displayName": self.display_name,
            "photoURL": self.photo_url,
            "emailVerified": self.email_verified,
            "disabled": self.disabled,
            "roles": self.roles,
        }


class IdentityProvider(ABC):
    """External identity service: token verification plus user directory."""

    @abstractmethod
    async def verify_token(self, token: str) -> Principal:
        """Verify a bearer token and return its principal."""
        pass

    @abstractmethod
    async def get_user(self, uid: str) -> UserRecord:
        """Look up a user by uid."""
        pass

    @abstractmethod
    async def list_users(self, max_results: int = 1000) -> list[UserRecord]:
        """List users, at most `max_results` of them."""
        pass

    @abstractmethod
    async def update_user(
        self,
        uid: str,
        *,
        display_name: str | None = None,
        photo_url: str | None = None,
        disabled: bool | None = None,
    ) -> UserRecord:
        """Update account attributes. Arguments left as None are unchanged."""
        pass

    @abstractmethod
    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        """Replace the user's custom claims."""
        pass
