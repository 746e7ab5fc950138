"""
Microblog Backend: Posts Route Handlers
==========================================

What:  POST/GET /posts and PUT/DELETE /posts/{post_id}.
How:   Each handler makes one PostRepository call, converts the NotFound
       signal (None) into NotFoundError, and writes exactly one outcome
       entry to the `microblog.posts` logger. The repository and the logger
       are both injected with Depends(); create_app puts the logger on
       app.state.

Outcome logging:
    success           → INFO, with the affected post or list
    not found         → INFO (expected outcome, not an error)
    storage failure   → ERROR, then re-raised for the global handler

    Body validation failures (wrong field types, malformed JSON) are
    rejected by FastAPI before a handler runs; the RequestValidationError
    handler in main.py writes their entry instead.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from microblog.database import get_post_repository
from microblog.exceptions import MicroblogError, NotFoundError
from microblog.schemas.post import ErrorResponse, PostFields, PostResponse
from microblog.services.post_service import PostRepository

POSTS_LOGGER = "microblog.posts"

router = APIRouter(tags=["Posts"])


def get_posts_logger(request: Request) -> logging.Logger:
    """FastAPI dependency returning the outcome logger configured on app.state."""
    return request.app.state.posts_logger


@router.post(
    "/posts",
    status_code=status.HTTP_201_CREATED,
    response_model=PostResponse,
    responses={
        201: {"description": "Post created", "model": PostResponse},
        400: {"description": "Invalid post data", "model": ErrorResponse},
        500: {"description": "Post store unavailable", "model": ErrorResponse},
    },
    summary="Create a new post",
    description="Stores a post with the supplied title and content and returns it with its new id.",
)
async def create_post(
    fields: PostFields,
    repository: PostRepository = Depends(get_post_repository),
    logger: logging.Logger = Depends(get_posts_logger),
) -> PostResponse:
    try:
        post = await repository.create(fields)
    except MicroblogError as e:
        logger.error(
            "Failed to create post: %s | Context: %s", e.message, e.context,
            extra={"details": e.context},
        )
        raise
    logger.info("Created post: %s", post.model_dump(), extra={"post_id": post.id})
    return post


@router.get(
    "/posts",
    response_model=list[PostResponse],
    responses={
        200: {"description": "All stored posts"},
        500: {"description": "Post store unavailable", "model": ErrorResponse},
    },
    summary="List all posts",
    description="Returns every stored post in the store's natural order. No pagination.",
)
async def list_posts(
    repository: PostRepository = Depends(get_post_repository),
    logger: logging.Logger = Depends(get_posts_logger),
) -> list[PostResponse]:
    try:
        posts = await repository.list_all()
    except MicroblogError as e:
        logger.error(
            "Failed to list posts: %s | Context: %s", e.message, e.context,
            extra={"details": e.context},
        )
        raise
    logger.info(
        "Listed %d posts: %s",
        len(posts),
        [post.model_dump() for post in posts],
        extra={"count": len(posts)},
    )
    return posts


@router.put(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={
        200: {"description": "Post updated", "model": PostResponse},
        400: {"description": "Invalid post data or post id", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Post store unavailable", "model": ErrorResponse},
    },
    summary="Update a post by ID",
    description=(
        "Merges the supplied fields into the stored post. Fields left out of the "
        "body keep their current value."
    ),
)
async def update_post(
    post_id: str,
    fields: PostFields,
    repository: PostRepository = Depends(get_post_repository),
    logger: logging.Logger = Depends(get_posts_logger),
) -> PostResponse:
    try:
        post = await repository.update_by_id(post_id, fields)
    except MicroblogError as e:
        logger.error(
            "Failed to update post %s: %s | Context: %s", post_id, e.message, e.context,
            extra={"details": e.context},
        )
        raise
    if post is None:
        logger.info("Post %s not found for update", post_id, extra={"post_id": post_id})
        raise NotFoundError(resource="post", resource_id=post_id)
    logger.info("Updated post: %s", post.model_dump(), extra={"post_id": post.id})
    return post


@router.delete(
    "/posts/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        204: {"description": "Post deleted"},
        400: {
            "description": (
                "Malformed post id. Reported as a validation failure (400) like "
                "on PUT, not as a server error (500)"
            ),
            "model": ErrorResponse,
        },
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Post store unavailable", "model": ErrorResponse},
    },
    summary="Delete a post by ID",
    description="Permanently removes the post. The id is never reused.",
)
async def delete_post(
    post_id: str,
    repository: PostRepository = Depends(get_post_repository),
    logger: logging.Logger = Depends(get_posts_logger),
) -> Response:
    try:
        post = await repository.delete_by_id(post_id)
    except MicroblogError as e:
        logger.error(
            "Failed to delete post %s: %s | Context: %s", post_id, e.message, e.context,
            extra={"details": e.context},
        )
        raise
    if post is None:
        logger.info("Post %s not found for delete", post_id, extra={"post_id": post_id})
        raise NotFoundError(resource="post", resource_id=post_id)
    logger.info("Deleted post: %s", post.model_dump(), extra={"post_id": post.id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
