"""
Shared utility functions.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique ID with optional prefix.

    IDs carry the full uuid4 hex so they are never reissued, even after
    the record they named has been deleted.

    Args:
        prefix: Optional prefix (e.g., "q")

    Returns:
        A unique ID like "q_3f2b8c0d9e6a4b7f8c1d2e3f4a5b6c7d"
    """
    uid = uuid.uuid4().hex
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)
