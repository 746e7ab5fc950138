"""
Microblog Backend: MongoDB Client Management
===============================================

What:  Async MongoDB client construction, teardown and FastAPI dependencies.
Why:   Centralizes all database connection logic in one place.
How:   The lifespan handler builds one AsyncMongoClient and one PostRepository
       per process and stores them on app.state. Routes receive them through
       Depends(); no module holds a global connection.
Who:   main.py (lifespan), the posts and health routes (dependencies).

Architecture Decision:
    PyMongo's native asyncio client is used because every storage call must
    yield to the event loop while it waits on the network, so one slow query
    never blocks other requests. The client owns its own connection pool;
    it connects lazily on the first operation.
"""

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection

from microblog.config import Settings
from microblog.services.post_service import PostRepository


# ── Client Lifecycle ──────────────────────────────────────────────────────
def create_mongo_client(settings: Settings) -> AsyncMongoClient:
    """
    What:  Builds the process-wide client from the connection string.
    When:  Called once during application startup.
    Note:  Does not touch the network; the first query opens the pool.
    """
    return AsyncMongoClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
    )


def get_posts_collection(client: AsyncMongoClient, settings: Settings) -> AsyncCollection:
    """
    Resolves the posts collection.

    The database named in the connection string wins; MONGODB_DATABASE is
    used only when the URL has no path component.
    """
    database = client.get_default_database(default=settings.mongodb_database)
    return database[settings.mongodb_collection]


async def ping(client: AsyncMongoClient) -> None:
    """Round-trips a ping command; raises a driver error if MongoDB is unreachable."""
    await client.admin.command("ping")


async def close_mongo_client(client: AsyncMongoClient) -> None:
    """
    What:  Closes all pooled connections.
    When:  Called during application shutdown (lifespan handler).
    """
    await client.close()


# ── Request Dependencies ──────────────────────────────────────────────────
def get_post_repository(request: Request) -> PostRepository:
    """
    FastAPI dependency returning the repository built at startup.

    Example usage in a route:
        @router.get("/posts")
        async def list_posts(repository: PostRepository = Depends(get_post_repository)):
            return await repository.list_all()
    """
    return request.app.state.post_repository


def get_mongo_client(request: Request) -> AsyncMongoClient:
    """FastAPI dependency returning the client built at startup."""
    return request.app.state.mongo_client
