# =============================================================================
# Firebase Authentication Integration
# =============================================================================
#
# Setup:
#   1. Create a service account in the Firebase console
#   2. Download the key and point .env at it:
#        FIREBASE_CREDENTIALS_PATH=/path/to/serviceAccountKey.json
#      (or set FIREBASE_PROJECT_ID to use application default credentials)
#
# Usage:
#   init_firebase() is called once at app startup (glidru/api/app.py).
#   The Admin SDK is synchronous, so every call runs in the default
#   thread-pool executor to keep the event loop free.
#
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Callable, TypeVar

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from glidru.auth.context import Principal
from glidru.auth.identity import IdentityProvider, UserRecord
from glidru.config import Settings, get_settings
from glidru.core.errors import NotFound, Unauthenticated, UpstreamFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors that mean "this token is not acceptable", as opposed to an outage
_REJECTED_TOKEN_ERRORS = (
    auth.InvalidIdTokenError,
    auth.ExpiredIdTokenError,
    auth.RevokedIdTokenError,
    auth.UserDisabledError,
    ValueError,
)


def init_firebase(settings: Settings | None = None) -> firebase_admin.App:
    """
    Initialize the process-wide Firebase app.

    Safe to call more than once; later calls return the existing app.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    settings = settings or get_settings()

    if settings.firebase_credentials_path:
        credential = credentials.Certificate(settings.firebase_credentials_path)
    else:
        credential = credentials.ApplicationDefault()

    options = {}
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id

    app = firebase_admin.initialize_app(credential, options or None)
    logger.info(f"Firebase initialized for project {app.project_id}")
    return app


def _to_user_record(user: auth.UserRecord) -> UserRecord:
    return UserRecord(
        uid=user.uid,
        email=user.email,
        display_name=user.display_name,
        photo_url=user.photo_url,
        email_verified=user.email_verified,
        disabled=user.disabled,
        custom_claims=dict(user.custom_claims or {}),
    )


class FirebaseIdentityProvider(IdentityProvider):
    """Identity provider backed by Firebase Authentication."""

    def __init__(self, app: firebase_admin.App | None = None, check_revoked: bool = False):
        self.app = app
        self.check_revoked = check_revoked

    async def _call(self, func: Callable[..., T], *args, **kwargs) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, app=self.app, **kwargs))

    async def verify_token(self, token: str) -> Principal:
        try:
            decoded = await self._call(
                auth.verify_id_token, token, check_revoked=self.check_revoked
            )
        except _REJECTED_TOKEN_ERRORS as e:
            logger.info(f"Rejected ID token: {e}")
            raise Unauthenticated("Unauthorized - Invalid token") from e
        except FirebaseError as e:
            logger.error(f"Token verification failed upstream: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e

        try:
            return Principal.from_claims(decoded)
        except ValueError as e:
            raise Unauthenticated("Unauthorized - Invalid token") from e

    async def get_user(self, uid: str) -> UserRecord:
        try:
            user = await self._call(auth.get_user, uid)
        except auth.UserNotFoundError as e:
            raise NotFound("User not found") from e
        except (FirebaseError, ValueError) as e:
            logger.error(f"Failed to get user {uid}: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e
        return _to_user_record(user)

    async def list_users(self, max_results: int = 1000) -> list[UserRecord]:
        try:
            page = await self._call(auth.list_users, max_results=max_results)
        except FirebaseError as e:
            logger.error(f"Failed to list users: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e
        return [_to_user_record(user) for user in page.users]

    async def update_user(
        self,
        uid: str,
        *,
        display_name: str | None = None,
        photo_url: str | None = None,
        disabled: bool | None = None,
    ) -> UserRecord:
        params: dict[str, Any] = {}
        if display_name is not None:
            params["display_name"] = display_name
        if photo_url is not None:
            params["photo_url"] = photo_url
        if disabled is not None:
            params["disabled"] = disabled

        try:
            user = await self._call(auth.update_user, uid, **params)
        except auth.UserNotFoundError as e:
            raise NotFound("User not found") from e
        except (FirebaseError, ValueError) as e:
            logger.error(f"Failed to update user {uid}: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e
        return _to_user_record(user)

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        try:
            await self._call(auth.set_custom_user_claims, uid, claims)
        except auth.UserNotFoundError as e:
            raise NotFound("User not found") from e
        except (FirebaseError, ValueError) as e:
            logger.error(f"Failed to set custom claims for {uid}: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e
