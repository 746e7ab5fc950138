"""
Microblog Backend: Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a default `settings` object.
Who:   Read by the application factory, the lifespan handler and the entry point.
When:  Loaded once at module import time; a custom instance can be handed
       to create_app() instead (tests do this).

Environment:
    PORT                 listen port (default 3000)
    HOST                 bind address (default 0.0.0.0)
    MONGODB_URL          connection string for the document store
    MONGODB_DATABASE     database used when the URL does not name one
    MONGODB_COLLECTION   collection holding posts
    MONGODB_TIMEOUT_MS   server selection timeout
    LOG_LEVEL            DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FILE             append-only log file
    CORS_ORIGINS         comma-separated allowed origins
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults for a local MongoDB instance.
    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # What: MongoDB connection string
    # Format: mongodb://[user:password@]host:port/[database]
    mongodb_url: str = Field(
        default="mongodb://localhost:27017/microblog",
        description="MongoDB connection URL",
    )

    # What: Fallback database name when the URL carries no path component
    mongodb_database: str = Field(default="microblog")

    mongodb_collection: str = Field(default="posts")

    # What: How long the driver waits to find a usable server before failing
    # Trade-off: Lower = faster 500s when MongoDB is down; higher = tolerates
    # slow elections in a replica set
    mongodb_timeout_ms: int = Field(default=5000, ge=100, le=120_000)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    # What: File sink that receives every log entry alongside the console
    # Opened in append mode; never rotated or truncated by the service
    log_file: str = Field(default="logfile.log")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PORT and port both work
    }


# Default instance, used when create_app() is called without explicit settings
settings = Settings()
