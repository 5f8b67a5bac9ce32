"""
Question store - per-owner CRUD over the document store.

Every operation is scoped to an owner uid supplied by the caller's verified
principal, never by request input. A question that exists but belongs to
someone else is reported exactly like one that does not exist.

Short names are unique per owner. The check-and-write for create and update
runs under a per-owner lock so two concurrent requests from the same owner
cannot both pass the uniqueness check. The lock is in-process only.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from typing import Any

from glidru.core.errors import Conflict, NotFound
from glidru.core.models import Question, QuestionClass, QuestionDraft
from glidru.core.utils import generate_id, utc_now
from glidru.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)


class OwnerLocks:
    """One asyncio.Lock per owner, dropped once nobody holds a reference."""

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def get(self, owner: str) -> asyncio.Lock:
        lock = self._locks.get(owner)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[owner] = lock
        return lock


class QuestionStore:
    """
    Tenant-scoped question storage.

    Usage:
        store = QuestionStore(storage)
        question = await store.create(principal.uid, draft)
        questions = await store.list(principal.uid)
    """

    def __init__(
        self,
        storage: MetadataStorage,
        collection: str = Collections.QUESTIONS,
    ):
        self.storage = storage
        self.collection = collection
        self._locks = OwnerLocks()

    # =========================================================================
    # Reads
    # =========================================================================

    async def list(
        self,
        owner: str,
        question_class: QuestionClass | str | None = None,
    ) -> list[Question]:
        """All of the owner's questions, newest first."""
        filters: dict[str, Any] = {"owner": owner}
        if question_class is not None:
            filters["class"] = QuestionClass(question_class).value

        docs = await self.storage.query(
            self.collection,
            filters=filters,
            order_by="createdAt",
            descending=True,
        )
        questions = [Question.from_document(doc) for doc in docs]
        logger.debug(f"Found {len(questions)} questions for user {owner}")
        return questions

    async def _get_owned(self, owner: str, question_id: str) -> Question:
        doc = await self.storage.get(self.collection, question_id)
        if doc is None:
            logger.info(f"Question {question_id} does not exist (user {owner})")
            raise NotFound("Question not found")
        if doc.get("owner") != owner:
            logger.warning(
                f"User {owner} not authorized for question {question_id} "
                f"owned by {doc.get('owner')}"
            )
            raise NotFound("Question not found")
        return Question.from_document(doc)

    async def get(self, owner: str, question_id: str) -> Question:
        """A single question owned by `owner`."""
        return await self._get_owned(owner, question_id)

    async def _short_name_taken(
        self, owner: str, short_name: str, exclude_id: str | None = None
    ) -> bool:
        docs = await self.storage.query(
            self.collection,
            filters={"owner": owner, "shortName": short_name},
        )
        return any(doc.get("id") != exclude_id for doc in docs)

    # =========================================================================
    # Writes
    # =========================================================================

    async def create(self, owner: str, draft: QuestionDraft) -> Question:
        """Validate, check short-name uniqueness, then persist."""
        valid = draft.validated()

        async with self._locks.get(owner):
            if await self._short_name_taken(owner, valid.short_name):
                logger.info(f"User {owner} already has question '{valid.short_name}'")
                raise Conflict("Question with this short name already exists")

            now = utc_now()
            question = Question(
                id=generate_id("q"),
                owner=owner,
                short_name=valid.short_name,
                question_class=valid.question_class,
                value_type=valid.value_type,
                prompt=valid.prompt,
                created_at=now,
                updated_at=now,
            )
            await self.storage.save(self.collection, question.id, question.to_document())

        logger.info(f"Created question {question.id} for user {owner}")
        return question

    async def update(self, owner: str, question_id: str, draft: QuestionDraft) -> Question:
        """
        Replace the caller-editable fields of an owned question.

        `owner` and `createdAt` are kept; `updatedAt` moves forward.
        """
        async with self._locks.get(owner):
            current = await self._get_owned(owner, question_id)
            valid = draft.validated()

            if valid.short_name != current.short_name and await self._short_name_taken(
                owner, valid.short_name, exclude_id=question_id
            ):
                logger.info(f"User {owner} already has question '{valid.short_name}'")
                raise Conflict("Question with this short name already exists")

            updated = current.model_copy(update={
                "short_name": valid.short_name,
                "question_class": valid.question_class.value,
                "value_type": valid.value_type.value,
                "prompt": valid.prompt,
                "updated_at": max(utc_now(), current.created_at),
            })

            fields = updated.to_document()
            del fields["id"], fields["owner"], fields["createdAt"]
            if not await self.storage.update(self.collection, question_id, fields):
                raise NotFound("Question not found")

        logger.info(f"Updated question {question_id} for user {owner}")
        return updated

    async def delete(self, owner: str, question_id: str) -> None:
        """
        Delete an owned question.

        Deleting an id twice reports NotFound the second time.
        """
        await self._get_owned(owner, question_id)
        if not await self.storage.delete(self.collection, question_id):
            raise NotFound("Question not found")
        logger.info(f"Deleted question {question_id} for user {owner}")

    # =========================================================================
    # Maintenance
    # =========================================================================

    async def count_unowned(self) -> int:
        """Count stored questions with no owner tag (store-wide scan)."""
        unowned = 0
        for doc in await self.storage.query(self.collection):
            if not doc.get("owner"):
                unowned += 1
                logger.warning(f"Question {doc.get('id')} has no owner field")
        if unowned:
            logger.warning(f"Found {unowned} legacy questions without an owner")
        return unowned
