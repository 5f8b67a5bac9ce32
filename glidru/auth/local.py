# =============================================================================
# Local Identity Provider
# =============================================================================
#
# In-process stand-in for Firebase Authentication, for development and tests:
#   - In-memory user directory
#   - HS256 JWT tokens carrying the same claims as Firebase ID tokens
#     (uid, email, email_verified, name, plus custom claims such as roles)
#
# As with Firebase, custom claims are copied into a token when it is issued,
# so a role change is only visible in tokens issued afterwards.
#
# =============================================================================

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

import jwt

from glidru.auth.context import Principal
from glidru.auth.identity import IdentityProvider, UserRecord
from glidru.config import Settings, get_settings
from glidru.core.errors import NotFound, Unauthenticated
from glidru.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)

# Claims the provider owns; custom claims may not override them
_RESERVED_CLAIMS = {"sub", "uid", "iat", "exp", "email", "email_verified", "name"}


class LocalIdentityProvider(IdentityProvider):
    """Identity provider with an in-memory user directory and signed JWTs."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.secret_key = settings.local_token_secret
        self.algorithm = settings.local_token_algorithm
        self.expire_minutes = settings.local_token_expire_minutes
        self._users: dict[str, UserRecord] = {}

    # =========================================================================
    # Directory management (no Firebase counterpart needed by the API)
    # =========================================================================

    def create_user(
        self,
        uid: str | None = None,
        email: str | None = None,
        display_name: str | None = None,
        roles: list[str] | None = None,
        email_verified: bool = False,
    ) -> UserRecord:
        """Register a user. Raises ValueError if the uid is taken."""
        uid = uid or generate_id("user")
        if uid in self._users:
            raise ValueError(f"User already exists: {uid}")

        user = UserRecord(
            uid=uid,
            email=email,
            display_name=display_name,
            email_verified=email_verified,
            custom_claims={"roles": list(roles)} if roles else {},
        )
        self._users[uid] = user
        return user

    def issue_token(self, uid: str, expires_in: timedelta | None = None) -> str:
        """Mint an ID token for a registered user."""
        user = self._users.get(uid)
        if user is None:
            raise ValueError(f"Unknown user: {uid}")

        now = utc_now()
        expire = now + (expires_in or timedelta(minutes=self.expire_minutes))

        payload: dict[str, Any] = {
            key: value
            for key, value in user.custom_claims.items()
            if key not in _RESERVED_CLAIMS
        }
        payload.update({
            "sub": user.uid,
            "uid": user.uid,
            "iat": now,
            "exp": expire,
            "email": user.email,
            "email_verified": user.email_verified,
            "name": user.display_name,
        })

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    # =========================================================================
    # IdentityProvider
    # =========================================================================

    async def verify_token(self, token: str) -> Principal:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise Unauthenticated("Unauthorized - Token expired") from e
        except jwt.InvalidTokenError as e:
            raise Unauthenticated("Unauthorized - Invalid token") from e

        try:
            principal = Principal.from_claims(payload)
        except ValueError as e:
            raise Unauthenticated("Unauthorized - Invalid token") from e

        user = self._users.get(principal.uid)
        if user is None:
            # Signed by us but minted by another process (e.g. the CLI)
            self._register_from_token(principal)
        elif user.disabled:
            raise Unauthenticated("Unauthorized - User disabled")

        return principal

    def _register_from_token(self, principal: Principal) -> None:
        self._users[principal.uid] = UserRecord(
            uid=principal.uid,
            email=principal.email,
            display_name=principal.display_name,
            email_verified=principal.email_verified,
            custom_claims={"roles": sorted(principal.roles)} if principal.roles else {},
        )
        logger.info(f"Registered user {principal.uid} on first sign-in")

    async def get_user(self, uid: str) -> UserRecord:
        user = self._users.get(uid)
        if user is None:
            raise NotFound("User not found")
        return user

    async def list_users(self, max_results: int = 1000) -> list[UserRecord]:
        return list(self._users.values())[:max_results]

    async def update_user(
        self,
        uid: str,
        *,
        display_name: str | None = None,
        photo_url: str | None = None,
        disabled: bool | None = None,
    ) -> UserRecord:
        user = await self.get_user(uid)
        if display_name is not None:
            user.display_name = display_name
        if photo_url is not None:
            user.photo_url = photo_url
        if disabled is not None:
            user.disabled = disabled
        return user

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        user = await self.get_user(uid)
        user.custom_claims = dict(claims)
