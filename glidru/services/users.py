"""
User service - profiles and admin user management.

A profile is the identity provider's account data merged with the user's
document in the `users` collection. Role changes go through custom claims.
"""

from __future__ import annotations

import logging
from typing import Any

from glidru.auth import claims
from glidru.auth.context import Principal
from glidru.auth.identity import IdentityProvider
from glidru.auth.roles import normalize_roles, unknown_roles
from glidru.core.errors import ValidationError
from glidru.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)

# Fields owned by the identity provider; never written to the profile document
PROTECTED_PROFILE_FIELDS = ("id", "uid", "email", "emailVerified", "roles")

ROLE_ACTIONS = ("add", "remove")


class UserService:
    """Profile reads/writes for the caller, plus admin operations."""

    def __init__(
        self,
        identity: IdentityProvider,
        storage: MetadataStorage,
        collection: str = Collections.USERS,
        page_size: int = 1000,
    ):
        self.identity = identity
        self.storage = storage
        self.collection = collection
        self.page_size = page_size

    async def _profile_document(self, uid: str) -> dict[str, Any]:
        doc = await self.storage.get(self.collection, uid) or {}
        # Document stores may add the document id; the uid already names it
        doc.pop("id", None)
        return doc

    # =========================================================================
    # Own profile
    # =========================================================================

    async def get_own_profile(self, principal: Principal) -> dict[str, Any]:
        """Token claims merged with the stored profile document."""
        return {
            "uid": principal.uid,
            "email": principal.email,
            "emailVerified": principal.email_verified,
            "displayName": principal.display_name,
            "roles": sorted(principal.roles),
            **await self._profile_document(principal.uid),
        }

    async def update_own_profile(self, principal: Principal, data: dict[str, Any]) -> None:
        """
        Update the caller's profile.

        `displayName` and `photoURL` go to the identity provider; everything
        else except the protected fields is merged into the profile document.
        """
        data = dict(data)
        display_name = data.pop("displayName", None)
        photo_url = data.pop("photoURL", None)

        if display_name or photo_url:
            await self.identity.update_user(
                principal.uid,
                display_name=display_name or None,
                photo_url=photo_url or None,
            )

        for key in PROTECTED_PROFILE_FIELDS:
            data.pop(key, None)

        await self.storage.merge(self.collection, principal.uid, data)
        logger.info(f"Updated profile for user {principal.uid}")

    # =========================================================================
    # Admin
    # =========================================================================

    async def list_users(self) -> list[dict[str, Any]]:
        """Summaries of up to `page_size` accounts."""
        users = await self.identity.list_users(max_results=self.page_size)
        return [user.summary() for user in users]

    async def get_profile(self, uid: str) -> dict[str, Any]:
        """Account data merged with the stored profile document."""
        user = await self.identity.get_user(uid)
        return {**user.summary(), **await self._profile_document(uid)}

    async def update_roles(self, uid: str, roles: Any, action: Any) -> list[str]:
        """Add or remove roles. Returns the user's roles afterwards."""
        problems: dict[str, str] = {}
        if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
            problems["roles"] = "Must be an array of role names"
        if not action:
            problems["action"] = 'Must be "add" or "remove"'
        if problems:
            raise ValidationError(
                "Invalid request. Provide roles array and action (add/remove)",
                invalid=problems,
            )

        if action not in ROLE_ACTIONS:
            raise ValidationError(
                'Invalid action. Use "add" or "remove"',
                invalid={"action": 'Must be "add" or "remove"'},
            )

        roles = normalize_roles(roles)
        unknown = unknown_roles(roles)
        if unknown:
            raise ValidationError(
                f"Unknown roles: {', '.join(unknown)}",
                invalid={"roles": f"Unknown roles: {', '.join(unknown)}"},
            )

        if action == "add":
            await claims.add_roles(self.identity, uid, roles)
        else:
            await claims.remove_roles(self.identity, uid, roles)

        return await claims.get_roles(self.identity, uid)

    async def set_disabled(self, uid: str, disabled: Any) -> None:
        """Disable or re-enable an account."""
        if not isinstance(disabled, bool):
            raise ValidationError(
                "Invalid request. Provide disabled status (boolean)",
                invalid={"disabled": "Must be a boolean"},
            )
        await self.identity.update_user(uid, disabled=disabled)
        logger.info(f"User {uid} {'disabled' if disabled else 'enabled'}")
