"""
Authentication and authorization.

Design principles:
1. Identity is delegated: tokens are verified by the identity provider
2. Roles are flat custom claims checked by set intersection
3. The resolved principal is passed to routes as a dependency value
4. Zero boilerplate in route handlers
"""

from glidru.auth.context import Principal
from glidru.auth.roles import Role, KNOWN_ROLES, has_any, normalize_roles
from glidru.auth.identity import IdentityProvider, UserRecord
from glidru.auth.local import LocalIdentityProvider
from glidru.auth.policies import (
    authenticate_required,
    authenticate_optional,
    enforce_roles,
    extract_bearer_token,
    require_auth,
    optional_auth,
    require_roles,
    get_identity,
)
from glidru.auth.claims import (
    merge_custom_claims,
    get_roles,
    add_roles,
    remove_roles,
)

__all__ = [
    # Main interface
    "require_auth",
    "optional_auth",
    "require_roles",
    "authenticate_required",
    "authenticate_optional",
    "enforce_roles",
    "extract_bearer_token",
    "get_identity",
    # Types
    "Principal",
    "Role",
    "KNOWN_ROLES",
    "has_any",
    "normalize_roles",
    "IdentityProvider",
    "UserRecord",
    "LocalIdentityProvider",
    # Claims
    "merge_custom_claims",
    "get_roles",
    "add_roles",
    "remove_roles",
]
