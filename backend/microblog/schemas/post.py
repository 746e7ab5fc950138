"""
Microblog Backend: Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the API contract for posts.
Why:   Request bodies get a fixed optional-field shape instead of arbitrary
       JSON, and FastAPI builds the OpenAPI document from these models.
Who:   Used by route handlers, by PostRepository and by the docs generator.

Design Decision:
    PostFields keeps track of which fields the client actually sent
    (model_dump(exclude_unset=True)). Create stores only those, and update
    merges only those into the stored document, so `{"content": "new"}`
    leaves the title untouched.
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostFields(BaseModel):
    """
    What:  Body of POST /posts and PUT /posts/{post_id}.

    Both fields are optional. Unknown keys are ignored; a non-string value
    for either field is rejected with 400.
    """
    title: Optional[str] = Field(
        default=None,
        description="Post title",
        examples=["Post title"],
    )
    content: Optional[str] = Field(
        default=None,
        description="Post body text",
        examples=["Post text"],
    )

    def supplied(self) -> dict:
        """Fields present in the request body, explicit nulls included."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    """
    What:  A stored post.
    Who:   Returned by POST /posts, PUT /posts/{post_id} and, as array
           items, by GET /posts.
    """
    id: str = Field(description="Identifier assigned by the store (ObjectId hex)")
    title: Optional[str] = Field(default=None, description="Post title")
    content: Optional[str] = Field(default=None, description="Post body text")

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "PostResponse":
        """Builds a response from a raw MongoDB document."""
        return cls(
            id=str(document["_id"]),
            title=document.get("title"),
            content=document.get("content"),
        )


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failure response.

    Fields:
        error: Machine-readable code ("validation_error", "not_found", ...)
        message: Human-readable description
        details: Raw error detail from the store or the request parser
        request_id: Correlation ID, also sent as the X-Request-ID header
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Raw error detail")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
