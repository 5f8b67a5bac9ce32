"""
Storage abstraction layer.

All persistence goes through this interface. This allows swapping
implementations (in-memory -> Firestore) without changing application code.

Integration Points:
- MetadataStorage -> Cloud Firestore (production)
- MetadataStorage -> in-memory dict (development, tests)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# =============================================================================
# Storage Interface
# =============================================================================


class MetadataStorage(ABC):
    """
    Document storage for structured data (questions, user profiles).

    Documents are plain dicts grouped into named collections and keyed by
    an opaque id. Implementations raise UpstreamFailure when the backend
    itself fails; a missing document is never an error at this level.
    """

    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Create or replace a document."""
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Query documents with optional equality filters and ordering."""
        pass

    @abstractmethod
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        """Partial update of an existing document. Returns False if missing."""
        pass

    @abstractmethod
    async def merge(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Merge fields into a document, creating it if needed."""
        pass


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection names."""

    QUESTIONS = "questions"
    USERS = "users"
