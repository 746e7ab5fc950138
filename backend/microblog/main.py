"""
Microblog Backend: FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes logging setup, middleware registration, route mounting,
       error mapping and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn microblog.main:app) or `python -m microblog`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌────────────┐ ┌──────┐ ┌──────┐      │
    │  │  Req ID  │→│ Access Log │→│ GZip │→│ CORS │      │
    │  └──────────┘ └────────────┘ └──────┘ └──────┘      │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────────┐ ┌─────────────┐         │
    │  │ POST/GET /posts        │ │ GET /health │         │
    │  │ PUT/DELETE /posts/{id} │ └─────────────┘         │
    │  └────────────────────────┘                         │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Storage→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging (console + append-only file)
    2. Build the MongoDB client and the PostRepository
    3. Build the OpenAPI document
    4. Log startup complete

    Shutdown:
    1. Close the MongoDB client
    2. Log shutdown complete
    3. Flush and close the log handlers
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from microblog import __version__
from microblog.config import Settings, settings as default_settings
from microblog.database import close_mongo_client, create_mongo_client, get_posts_collection
from microblog.exceptions import (
    MicroblogError,
    NotFoundError,
    StorageUnavailableError,
    StorageValidationError,
)
from microblog.middleware.logging import RequestLoggingMiddleware
from microblog.middleware.request_id import RequestIDMiddleware, request_id_var
from microblog.routes import health, posts
from microblog.services.post_service import PostRepository

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> List[logging.Handler]:
    """
    Configure the process-wide log sinks.

    What:    Every record goes to stdout and to an append-only log file.
    When:    Called once during app startup, before any other initialization.
    Returns: The installed handlers, so shutdown can close exactly these.

    The file handler flushes after each record, so an outcome entry is on
    disk before the request handler returns.
    """
    handlers: List[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(settings.log_file, mode="a", encoding="utf-8"),
    ]

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=handlers,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    return handlers


def teardown_logging(handlers: List[logging.Handler]) -> None:
    """Flushes, detaches and closes the handlers installed by setup_logging()."""
    root = logging.getLogger()
    for handler in handlers:
        handler.flush()
        root.removeHandler(handler)
        handler.close()


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the process-wide dependencies on startup and release them on exit.

    The MongoDB client and PostRepository live on app.state and reach the
    routes through Depends(); see microblog.database.
    """
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    log_handlers = setup_logging(settings)
    logger.info("Microblog API starting up...")

    client = create_mongo_client(settings)
    app.state.mongo_client = client
    app.state.post_repository = PostRepository(get_posts_collection(client, settings))

    # Build the API description once; /api-docs serves the cached document
    app.openapi()

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/api-docs", settings.host, settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Microblog API shutting down...")
    await close_mongo_client(client)
    logger.info("Shutdown complete.")
    teardown_logging(log_handlers)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        RequestValidationError  → 400 (body is not a valid PostFields object)
        StorageValidationError  → 400
        NotFoundError           → 404
        StorageUnavailableError → 500
        MicroblogError (base)   → 500
        Exception (fallback)    → 500

    The posts routes already wrote the outcome log entry for the
    application errors, so those handlers only build the response.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body failed PostFields parsing; no handler ran, so log the outcome here."""
        rid = request_id_var.get("")
        details = jsonable_encoder(exc.errors())
        logger.error(
            "[%s] Invalid post data for %s %s: %s",
            rid,
            request.method,
            request.url.path,
            details,
        )
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Invalid post data",
                "details": details,
                "request_id": rid,
            },
        )

    @app.exception_handler(StorageValidationError)
    async def handle_validation_error(request: Request, exc: StorageValidationError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StorageUnavailableError)
    async def handle_storage_unavailable(request: Request, exc: StorageUnavailableError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=500,
            content={
                "error": "storage_unavailable",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(MicroblogError)
    async def handle_microblog_error(request: Request, exc: MicroblogError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the stack trace is logged server-side only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to use; defaults to the environment-derived
                  instance from microblog.config.

    Returns: Fully configured FastAPI instance. Nothing touches the network
             until the lifespan runs.
    """
    app = FastAPI(
        title="Microblog API",
        description="Create, list, update and delete blog posts stored in MongoDB.",
        version=__version__,
        docs_url="/api-docs",
        redoc_url=None,
        openapi_url="/api-docs/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings or default_settings
    # Routes receive their outcome logger through Depends(get_posts_logger)
    app.state.posts_logger = logging.getLogger(posts.POSTS_LOGGER)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app.state.settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(posts.router)
    app.include_router(health.router)

    return app


# Module-level instance for `uvicorn microblog.main:app`
app = create_app()
