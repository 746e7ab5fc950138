"""
Microblog Backend: Post Repository
=====================================

What:  Thin accessor over the MongoDB `posts` collection.
Why:   Keeps driver calls and driver exceptions out of the route handlers.
How:   Each operation is exactly one awaited collection call. Driver errors
       are translated into StorageValidationError / StorageUnavailableError.
Who:   Built once in the application lifespan and injected into the posts
       routes via FastAPI's Depends().

Return conventions:
    create / list_all      → PostResponse / list of PostResponse
    update_by_id           → PostResponse, or None when no post has the id
    delete_by_id           → the deleted PostResponse, or None when absent

    None is the NotFound signal. It is an expected outcome, not an error,
    so the repository never raises for it.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import OperationFailure, PyMongoError, WriteError

from microblog.exceptions import StorageUnavailableError, StorageValidationError
from microblog.schemas.post import PostFields, PostResponse

logger = logging.getLogger(__name__)


def _object_id(post_id: str) -> ObjectId:
    """Parses a path id; anything that is not an ObjectId is a validation error."""
    try:
        return ObjectId(post_id)
    except (InvalidId, TypeError) as e:
        raise StorageValidationError(
            message=f"'{post_id}' is not a valid post id",
            field="post_id",
            context={"reason": str(e)},
        )


# Server error codes that mean "this document or update is not acceptable",
# as opposed to "the server could not do the work". findAndModify reports
# them as a plain OperationFailure, insert_one as a WriteError.
VALIDATION_ERROR_CODES = frozenset({
    2,    # BadValue
    9,    # FailedToParse
    14,   # TypeMismatch
    52,   # DollarPrefixedFieldName
    55,   # InvalidDBRef
    56,   # EmptyFieldName
    57,   # DottedFieldName
    66,   # ImmutableField
    121,  # DocumentValidationFailure
})


def _is_rejected_write(error: PyMongoError) -> bool:
    if isinstance(error, WriteError):
        return True
    return isinstance(error, OperationFailure) and error.code in VALIDATION_ERROR_CODES


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """
    Translates driver exceptions raised inside the block.

    A rejected write means the server received the request and refused the
    document, so it maps to a validation error. insert_one reports that as a
    WriteError; findAndModify (find_one_and_update) reports it as an
    OperationFailure carrying one of VALIDATION_ERROR_CODES. Every other
    driver error (connection failure, server selection timeout, not primary,
    unauthorized, ...) means the store is not usable.
    """
    try:
        yield
    except PyMongoError as e:
        if _is_rejected_write(e):
            raise StorageValidationError(
                message=f"The store rejected the post ({operation})",
                context={"code": e.code, "reason": str(e)},
            )
        raise StorageUnavailableError(
            message=f"Could not {operation}: the post store is unavailable",
            context={"error_type": type(e).__name__, "reason": str(e)},
        )


class PostRepository:
    """
    Insert, list-all, update-by-id and delete-by-id over one collection.

    The repository is stateless apart from the collection handle; concurrent
    requests share it and MongoDB arbitrates concurrent writes (last write
    wins).
    """

    def __init__(self, collection: AsyncCollection, log: Optional[logging.Logger] = None):
        self.collection = collection
        self.log = log or logger

    async def create(self, fields: PostFields) -> PostResponse:
        """
        Inserts a new post holding only the fields the caller supplied.

        Raises:
            StorageValidationError: The server rejected the document
            StorageUnavailableError: The store could not be reached
        """
        document = fields.supplied()
        with _storage_errors("create post"):
            result = await self.collection.insert_one(document)
        self.log.debug("Inserted post %s", result.inserted_id)
        return PostResponse(id=str(result.inserted_id), **fields.supplied())

    async def list_all(self) -> List[PostResponse]:
        """Every stored post in the store's natural order."""
        with _storage_errors("list posts"):
            documents = await self.collection.find({}).to_list()
        return [PostResponse.from_document(doc) for doc in documents]

    async def update_by_id(self, post_id: str, fields: PostFields) -> Optional[PostResponse]:
        """
        Merges the supplied fields into the stored post.

        Omitted fields keep their stored value; explicit nulls are stored as
        null. An empty body changes nothing and returns the current post.

        Returns:
            The updated post, or None if no post has `post_id`
        """
        oid = _object_id(post_id)
        changes = fields.supplied()
        with _storage_errors("update post"):
            if not changes:
                document = await self.collection.find_one({"_id": oid})
            else:
                document = await self.collection.find_one_and_update(
                    {"_id": oid},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
        if document is None:
            return None
        return PostResponse.from_document(document)

    async def delete_by_id(self, post_id: str) -> Optional[PostResponse]:
        """
        Hard-deletes a post.

        Returns:
            The removed post (for the outcome log entry), or None if absent
        """
        oid = _object_id(post_id)
        with _storage_errors("delete post"):
            document = await self.collection.find_one_and_delete({"_id": oid})
        if document is None:
            return None
        return PostResponse.from_document(document)
