"""
Shared fixtures.

Tests run against the in-memory document store and the local identity
provider; nothing talks to Firebase.
"""

import pytest
from fastapi.testclient import TestClient

from glidru.api.app import create_app
from glidru.auth.local import LocalIdentityProvider
from glidru.config import Settings
from glidru.core.models import QuestionDraft
from glidru.services.questions import QuestionStore
from glidru.services.users import UserService
from glidru.storage.local import InMemoryMetadataStorage


@pytest.fixture
def settings():
    return Settings(
        environment="test",
        use_in_memory_backends=True,
        api_prefix="/api",
        sentry_dsn="",
        local_token_secret="test-secret-with-enough-length-for-hs256",
    )


@pytest.fixture
def storage():
    return InMemoryMetadataStorage()


@pytest.fixture
def identity(settings):
    """Identity provider with two regular users and an admin."""
    provider = LocalIdentityProvider(settings)
    provider.create_user(uid="alice", email="alice@example.com", display_name="Alice")
    provider.create_user(uid="bob", email="bob@example.com", display_name="Bob")
    provider.create_user(
        uid="root", email="root@example.com", display_name="Root", roles=["admin"]
    )
    return provider


@pytest.fixture
def store(storage):
    return QuestionStore(storage)


@pytest.fixture
def user_service(identity, storage):
    return UserService(identity, storage)


@pytest.fixture
def app(settings, storage, identity):
    return create_app(settings, storage=storage, identity=identity)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def headers_for(identity):
    """Authorization headers for a registered user."""
    def _headers(uid: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {identity.issue_token(uid)}"}
    return _headers


@pytest.fixture
def gpa_draft():
    return QuestionDraft(
        shortName="gpa",
        **{"class": "Academic"},
        valueType="INTEGER",
        prompt="What is your GPA?",
    )
