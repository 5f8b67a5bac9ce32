"""
Cloud Firestore implementation of MetadataStorage.

Uses the async Firestore client bound to the process-wide Firebase app.
Client errors are wrapped in UpstreamFailure so callers see one failure type.
"""

from __future__ import annotations

import logging
from typing import Any

from firebase_admin import App, firestore_async
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from glidru.core.errors import UpstreamFailure
from glidru.storage.base import MetadataStorage

logger = logging.getLogger(__name__)


class FirestoreMetadataStorage(MetadataStorage):
    """Document storage backed by Cloud Firestore."""

    def __init__(self, app: App | None = None, client: Any = None):
        self._client = client or firestore_async.client(app)

    def _collection(self, collection: str):
        return self._client.collection(collection)

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        try:
            await self._collection(collection).document(id).set(data)
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Firestore save failed ({collection}/{id}): {e}")
            raise UpstreamFailure("Document store unavailable") from e

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        try:
            snapshot = await self._collection(collection).document(id).get()
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Firestore get failed ({collection}/{id}): {e}")
            raise UpstreamFailure("Document store unavailable") from e

        if not snapshot.exists:
            return None
        return {"id": snapshot.id, **snapshot.to_dict()}

    async def delete(self, collection: str, id: str) -> bool:
        ref = self._collection(collection).document(id)
        try:
            snapshot = await ref.get()
            if not snapshot.exists:
                return False
            await ref.delete()
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Firestore delete failed ({collection}/{id}): {e}")
            raise UpstreamFailure("Document store unavailable") from e
        return True

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        query = self._collection(collection)

        for key, value in (filters or {}).items():
            query = query.where(filter=FieldFilter(key, "==", value))

        if order_by:
            direction = (
                firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            )
            query = query.order_by(order_by, direction=direction)

        if limit is not None:
            query = query.limit(limit)

        try:
            return [
                {"id": snapshot.id, **snapshot.to_dict()}
                async for snapshot in query.stream()
            ]
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Firestore query failed ({collection}, {filters}): {e}")
            raise UpstreamFailure("Document store unavailable") from e

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        try:
            await self._collection(collection).document(id).update(updates)
        except google_exceptions.NotFound:
            return False
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Firestore update failed ({collection}/{id}): {e}")
            raise UpstreamFailure("Document store unavailable") from e
        return True

    async def merge(self, collection: str, id: str, data: dict[str, Any]) -> None:
        try:
            await self._collection(collection).document(id).set(data, merge=True)
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Firestore merge failed ({collection}/{id}): {e}")
            raise UpstreamFailure("Document store unavailable") from e
