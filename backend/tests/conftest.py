"""
Microblog Backend: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests run without a MongoDB server: the repository is tested against
       a mocked collection, the routes against an in-memory repository.

Fixture Hierarchy (all function-scoped):
    ├── mock_collection: AsyncMock stand-in for a pymongo AsyncCollection
    ├── post_repository: InMemoryPostRepository (same interface as PostRepository)
    ├── app: FastAPI app with get_post_repository overridden
    └── test_client: HTTPX AsyncClient talking to `app` over ASGI
"""

import os
import tempfile
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any microblog imports
os.environ["MONGODB_URL"] = "mongodb://localhost:27017/microblog_test"
os.environ["LOG_FILE"] = os.path.join(tempfile.mkdtemp(prefix="microblog_test_"), "test.log")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from microblog.config import Settings
from microblog.database import get_post_repository
from microblog.exceptions import StorageValidationError
from microblog.main import create_app
from microblog.schemas.post import PostFields, PostResponse


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

class InMemoryPostRepository:
    """
    Dict-backed repository with PostRepository's interface and semantics.

    Ids are real ObjectIds, updates merge supplied fields, and a malformed
    id raises StorageValidationError exactly like the MongoDB-backed one.
    """

    def __init__(self):
        self.documents: Dict[ObjectId, dict] = {}

    @staticmethod
    def _object_id(post_id: str) -> ObjectId:
        if not ObjectId.is_valid(post_id):
            raise StorageValidationError(
                message=f"'{post_id}' is not a valid post id", field="post_id"
            )
        return ObjectId(post_id)

    async def create(self, fields: PostFields) -> PostResponse:
        document = {"_id": ObjectId(), **fields.supplied()}
        self.documents[document["_id"]] = document
        return PostResponse.from_document(document)

    async def list_all(self) -> List[PostResponse]:
        return [PostResponse.from_document(doc) for doc in self.documents.values()]

    async def update_by_id(self, post_id: str, fields: PostFields) -> Optional[PostResponse]:
        document = self.documents.get(self._object_id(post_id))
        if document is None:
            return None
        document.update(fields.supplied())
        return PostResponse.from_document(document)

    async def delete_by_id(self, post_id: str) -> Optional[PostResponse]:
        document = self.documents.pop(self._object_id(post_id), None)
        if document is None:
            return None
        return PostResponse.from_document(document)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_collection():
    """
    Provides a mock async MongoDB collection.

    Usage:
        async def test_create(mock_collection):
            mock_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId())
            post = await PostRepository(mock_collection).create(PostFields(title="T"))
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.find_one_and_delete = AsyncMock()

    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    return collection


@pytest.fixture
def sample_post_document():
    """A stored post as MongoDB returns it."""
    return {
        "_id": ObjectId(),
        "title": "Post title",
        "content": "Post text",
    }


@pytest.fixture
def test_settings(tmp_path):
    return Settings(log_file=str(tmp_path / "microblog.log"), log_level="INFO")


@pytest.fixture
def post_repository():
    return InMemoryPostRepository()


@pytest.fixture
def app(test_settings, post_repository):
    """
    FastAPI app wired to the in-memory repository.

    ASGITransport does not run the lifespan, so no MongoDB client is built.
    """
    application = create_app(test_settings)
    application.dependency_overrides[get_post_repository] = lambda: post_repository
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/posts")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
