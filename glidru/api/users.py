"""
User routes.

Endpoints:
    GET  /user/profile       - Caller's merged profile
    PUT  /user/profile       - Update caller's profile
    GET  /user/all           - List accounts (admin)
    GET  /user/{uid}         - One account's merged profile (admin)
    POST /user/{uid}/roles   - Add/remove roles (admin)
    PUT  /user/{uid}/status  - Disable/enable an account (admin)
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel, StrictBool

from glidru.auth import Principal, Role, require_auth, require_roles
from glidru.services.users import UserService

router = APIRouter(prefix="/user", tags=["user"])


def get_user_service(request: Request) -> UserService:
    return request.app.state.users


# =============================================================================
# Request Models
# =============================================================================


class RoleUpdateRequest(BaseModel):
    roles: list[str] | None = None
    action: str | None = None


class StatusUpdateRequest(BaseModel):
    disabled: StrictBool | None = None


# =============================================================================
# Own profile
# =============================================================================


@router.get("/profile")
async def get_profile(
    principal: Principal = Depends(require_auth()),
    users: UserService = Depends(get_user_service),
):
    """Get the caller's profile."""
    return await users.get_own_profile(principal)


@router.put("/profile")
async def update_profile(
    data: dict[str, Any] = Body(...),
    principal: Principal = Depends(require_auth()),
    users: UserService = Depends(get_user_service),
):
    """
    Update the caller's profile.

    uid, email, emailVerified and roles in the body are ignored.
    """
    await users.update_own_profile(principal, data)
    return {"success": True, "message": "Profile updated successfully"}


# =============================================================================
# Admin
# =============================================================================


@router.get("/all")
async def list_users(
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    users: UserService = Depends(get_user_service),
):
    """List accounts (capped at one page)."""
    return await users.list_users()


@router.get("/{uid}")
async def get_user(
    uid: str,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    users: UserService = Depends(get_user_service),
):
    """Get an account's merged profile."""
    return await users.get_profile(uid)


@router.post("/{uid}/roles")
async def update_roles(
    uid: str,
    data: RoleUpdateRequest,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    users: UserService = Depends(get_user_service),
):
    """Add or remove roles."""
    roles = await users.update_roles(uid, data.roles, data.action)
    return {
        "success": True,
        "message": f"Roles {'added' if data.action == 'add' else 'removed'} successfully",
        "roles": roles,
    }


@router.put("/{uid}/status")
async def update_status(
    uid: str,
    data: StatusUpdateRequest,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    users: UserService = Depends(get_user_service),
):
    """Disable or enable an account."""
    await users.set_disabled(uid, data.disabled)
    return {
        "success": True,
        "message": f"User {'disabled' if data.disabled else 'enabled'} successfully",
    }
