"""
Microblog Backend: Post Repository Unit Tests
================================================

What:  Tests for PostRepository against a mocked MongoDB collection.
How:   The collection's async methods are AsyncMocks; no server is needed.

What we test:
    ✅ Create stores only supplied fields and returns the new id
    ✅ List converts documents to posts
    ✅ Update merges supplied fields; None for a missing post
    ✅ Delete returns the removed post; None for a missing post
    ✅ Malformed ids and driver errors map to the storage exceptions
"""

import pytest
from unittest.mock import MagicMock
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import (
    AutoReconnect,
    NotPrimaryError,
    OperationFailure,
    ServerSelectionTimeoutError,
    WriteError,
)

from microblog.exceptions import StorageUnavailableError, StorageValidationError
from microblog.schemas.post import PostFields
from microblog.services.post_service import PostRepository


class TestPostRepositoryCreate:
    """Tests for create()."""

    @pytest.mark.asyncio
    async def test_create_returns_assigned_id(self, mock_collection):
        """Inserted post should come back with the store-assigned id."""
        oid = ObjectId()
        mock_collection.insert_one.return_value = MagicMock(inserted_id=oid)

        post = await PostRepository(mock_collection).create(PostFields(title="T", content="C"))

        assert post.id == str(oid)
        assert post.title == "T"
        assert post.content == "C"
        mock_collection.insert_one.assert_awaited_once_with({"title": "T", "content": "C"})

    @pytest.mark.asyncio
    async def test_create_stores_only_supplied_fields(self, mock_collection):
        """Missing fields are left absent from the document."""
        mock_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId())

        post = await PostRepository(mock_collection).create(PostFields(content="only body"))

        mock_collection.insert_one.assert_awaited_once_with({"content": "only body"})
        assert post.title is None

    @pytest.mark.asyncio
    async def test_create_rejected_write_is_validation_error(self, mock_collection):
        mock_collection.insert_one.side_effect = WriteError("Document failed validation", code=121)

        with pytest.raises(StorageValidationError) as exc_info:
            await PostRepository(mock_collection).create(PostFields(title="T"))

        assert exc_info.value.context["code"] == 121

    @pytest.mark.asyncio
    async def test_create_unreachable_store_is_unavailable(self, mock_collection):
        mock_collection.insert_one.side_effect = ServerSelectionTimeoutError("No servers found")

        with pytest.raises(StorageUnavailableError):
            await PostRepository(mock_collection).create(PostFields(title="T"))


class TestPostRepositoryList:
    """Tests for list_all()."""

    @pytest.mark.asyncio
    async def test_list_empty(self, mock_collection):
        posts = await PostRepository(mock_collection).list_all()

        assert posts == []
        mock_collection.find.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_list_preserves_store_order(self, mock_collection):
        documents = [
            {"_id": ObjectId(), "title": f"Post {i}", "content": f"Body {i}"}
            for i in range(3)
        ]
        mock_collection.find.return_value.to_list.return_value = documents

        posts = await PostRepository(mock_collection).list_all()

        assert [p.id for p in posts] == [str(d["_id"]) for d in documents]
        assert posts[2].title == "Post 2"

    @pytest.mark.asyncio
    async def test_list_document_without_fields(self, mock_collection):
        """Posts created with an empty body have neither title nor content."""
        oid = ObjectId()
        mock_collection.find.return_value.to_list.return_value = [{"_id": oid}]

        posts = await PostRepository(mock_collection).list_all()

        assert posts[0].id == str(oid)
        assert posts[0].title is None
        assert posts[0].content is None

    @pytest.mark.asyncio
    async def test_list_connection_lost_is_unavailable(self, mock_collection):
        mock_collection.find.return_value.to_list.side_effect = AutoReconnect("connection reset")

        with pytest.raises(StorageUnavailableError) as exc_info:
            await PostRepository(mock_collection).list_all()

        assert exc_info.value.context["error_type"] == "AutoReconnect"


class TestPostRepositoryUpdate:
    """Tests for update_by_id()."""

    @pytest.mark.asyncio
    async def test_update_sets_only_supplied_fields(self, mock_collection, sample_post_document):
        """Partial body merges into the stored post; title is kept."""
        updated = {**sample_post_document, "content": "new"}
        mock_collection.find_one_and_update.return_value = updated
        post_id = str(sample_post_document["_id"])

        post = await PostRepository(mock_collection).update_by_id(post_id, PostFields(content="new"))

        assert post.id == post_id
        assert post.content == "new"
        assert post.title == "Post title"
        mock_collection.find_one_and_update.assert_awaited_once_with(
            {"_id": sample_post_document["_id"]},
            {"$set": {"content": "new"}},
            return_document=ReturnDocument.AFTER,
        )

    @pytest.mark.asyncio
    async def test_update_explicit_null_is_stored(self, mock_collection, sample_post_document):
        mock_collection.find_one_and_update.return_value = {**sample_post_document, "title": None}

        await PostRepository(mock_collection).update_by_id(
            str(sample_post_document["_id"]), PostFields(title=None)
        )

        _, update = mock_collection.find_one_and_update.await_args.args
        assert update == {"$set": {"title": None}}

    @pytest.mark.asyncio
    async def test_update_missing_post_returns_none(self, mock_collection):
        mock_collection.find_one_and_update.return_value = None

        post = await PostRepository(mock_collection).update_by_id(
            str(ObjectId()), PostFields(title="T")
        )

        assert post is None

    @pytest.mark.asyncio
    async def test_update_empty_body_reads_current_post(self, mock_collection, sample_post_document):
        """An empty body changes nothing; MongoDB refuses an empty $set."""
        mock_collection.find_one.return_value = sample_post_document

        post = await PostRepository(mock_collection).update_by_id(
            str(sample_post_document["_id"]), PostFields()
        )

        assert post.title == "Post title"
        mock_collection.find_one_and_update.assert_not_awaited()
        mock_collection.find_one.assert_awaited_once_with({"_id": sample_post_document["_id"]})

    @pytest.mark.asyncio
    async def test_update_malformed_id_is_validation_error(self, mock_collection):
        with pytest.raises(StorageValidationError) as exc_info:
            await PostRepository(mock_collection).update_by_id("not-an-id", PostFields(title="T"))

        assert exc_info.value.field == "post_id"
        mock_collection.find_one_and_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_rejected_write_is_validation_error(self, mock_collection):
        """findAndModify reports a rejected document as a plain OperationFailure."""
        mock_collection.find_one_and_update.side_effect = OperationFailure(
            "Document failed validation", code=121
        )

        with pytest.raises(StorageValidationError) as exc_info:
            await PostRepository(mock_collection).update_by_id(str(ObjectId()), PostFields(title="T"))

        assert exc_info.value.context["code"] == 121
        assert "Document failed validation" in exc_info.value.context["reason"]

    @pytest.mark.asyncio
    async def test_update_bad_value_is_validation_error(self, mock_collection):
        mock_collection.find_one_and_update.side_effect = OperationFailure("bad update", code=2)

        with pytest.raises(StorageValidationError):
            await PostRepository(mock_collection).update_by_id(str(ObjectId()), PostFields(title="T"))

    @pytest.mark.asyncio
    async def test_update_unauthorized_is_unavailable(self, mock_collection):
        """A command failure that is not about the document is a store failure."""
        mock_collection.find_one_and_update.side_effect = OperationFailure(
            "not authorized on microblog", code=13
        )

        with pytest.raises(StorageUnavailableError) as exc_info:
            await PostRepository(mock_collection).update_by_id(str(ObjectId()), PostFields(title="T"))

        assert exc_info.value.context["error_type"] == "OperationFailure"

    @pytest.mark.asyncio
    async def test_update_not_primary_is_unavailable(self, mock_collection):
        mock_collection.find_one_and_update.side_effect = NotPrimaryError("not primary")

        with pytest.raises(StorageUnavailableError) as exc_info:
            await PostRepository(mock_collection).update_by_id(str(ObjectId()), PostFields(title="T"))

        assert exc_info.value.context["error_type"] == "NotPrimaryError"


class TestPostRepositoryDelete:
    """Tests for delete_by_id()."""

    @pytest.mark.asyncio
    async def test_delete_returns_removed_post(self, mock_collection, sample_post_document):
        mock_collection.find_one_and_delete.return_value = sample_post_document
        post_id = str(sample_post_document["_id"])

        post = await PostRepository(mock_collection).delete_by_id(post_id)

        assert post.id == post_id
        mock_collection.find_one_and_delete.assert_awaited_once_with(
            {"_id": sample_post_document["_id"]}
        )

    @pytest.mark.asyncio
    async def test_delete_missing_post_returns_none(self, mock_collection):
        mock_collection.find_one_and_delete.return_value = None

        assert await PostRepository(mock_collection).delete_by_id(str(ObjectId())) is None

    @pytest.mark.asyncio
    async def test_delete_malformed_id_is_validation_error(self, mock_collection):
        with pytest.raises(StorageValidationError):
            await PostRepository(mock_collection).delete_by_id("12345")

    @pytest.mark.asyncio
    async def test_delete_unreachable_store_is_unavailable(self, mock_collection):
        mock_collection.find_one_and_delete.side_effect = ServerSelectionTimeoutError("timeout")

        with pytest.raises(StorageUnavailableError):
            await PostRepository(mock_collection).delete_by_id(str(ObjectId()))
