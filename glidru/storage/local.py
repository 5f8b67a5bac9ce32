"""
Local storage implementation for development and tests.

Works without any external services. Data lives for the life of the process.
"""

from __future__ import annotations

import copy
from typing import Any

from glidru.storage.base import MetadataStorage


# =============================================================================
# In-Memory Metadata Storage
# =============================================================================


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory document storage."""

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        self._data.setdefault(collection, {})[id] = copy.deepcopy(data)

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self._data.get(collection, {}).get(id)
        return copy.deepcopy(doc) if doc is not None else None

    async def delete(self, collection: str, id: str) -> bool:
        if collection in self._data and id in self._data[collection]:
            del self._data[collection][id]
            return True
        return False

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        if collection not in self._data:
            return []

        results = list(self._data[collection].values())

        # Apply filters
        if filters:
            results = [
                doc for doc in results
                if all(doc.get(key) == value for key, value in filters.items())
            ]

        # Documents missing the order field are dropped, as Firestore does
        if order_by:
            results = [doc for doc in results if doc.get(order_by) is not None]
            results.sort(key=lambda doc: doc[order_by], reverse=descending)

        if limit is not None:
            results = results[:limit]

        return copy.deepcopy(results)

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        if collection in self._data and id in self._data[collection]:
            self._data[collection][id].update(copy.deepcopy(updates))
            return True
        return False

    async def merge(self, collection: str, id: str, data: dict[str, Any]) -> None:
        self._data.setdefault(collection, {}).setdefault(id, {}).update(
            copy.deepcopy(data)
        )

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self._data.clear()
