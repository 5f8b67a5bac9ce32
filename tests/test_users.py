"""
Tests for the user service.
"""

import pytest

from glidru.auth.context import Principal
from glidru.services.users import UserService
from glidru.storage.local import InMemoryMetadataStorage


class IdStampingStorage(InMemoryMetadataStorage):
    """In-memory storage that returns the document id like Firestore does."""

    async def get(self, collection, id):
        doc = await super().get(collection, id)
        return {"id": id, **doc} if doc is not None else None


@pytest.fixture
def stamped_service(identity):
    return UserService(identity, IdStampingStorage())


class TestProfileDocument:
    @pytest.mark.asyncio
    async def test_own_profile_has_no_document_id(self, stamped_service):
        principal = Principal(uid="alice", email="alice@example.com")
        await stamped_service.update_own_profile(principal, {"school": "Lincoln High"})

        profile = await stamped_service.get_own_profile(principal)

        assert "id" not in profile
        assert profile["uid"] == "alice"
        assert profile["school"] == "Lincoln High"

    @pytest.mark.asyncio
    async def test_admin_profile_has_no_document_id(self, stamped_service):
        await stamped_service.update_own_profile(Principal(uid="bob"), {"grade": 11})

        profile = await stamped_service.get_profile("bob")

        assert "id" not in profile
        assert profile["grade"] == 11

    @pytest.mark.asyncio
    async def test_id_in_body_is_not_stored(self, user_service, storage):
        await user_service.update_own_profile(Principal(uid="alice"), {"id": "x", "grade": 12})

        assert await storage.get("users", "alice") == {"grade": 12}

    @pytest.mark.asyncio
    async def test_missing_document(self, user_service):
        profile = await user_service.get_profile("alice")

        assert profile["uid"] == "alice"
        assert profile["displayName"] == "Alice"
