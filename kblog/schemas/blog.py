"""
KBlog Backend — Pydantic Entity and Response Schemas
=====================================================

What:  Pydantic models for the two blog entities (Post, Comment) plus the
       error and health response bodies.
Why:   The same models are the repository's stored records and the API
       contract, so FastAPI validates request bodies and serializes responses
       straight from them.
How:   Python attributes are snake_case; JSON uses camelCase aliases
       (postId, createdAt). Both spellings are accepted on input.

Design Decision:
    Entities are frozen. A repository assigns an id by storing a copy
    (model_copy(update={"id": ...})), never by mutating the caller's object,
    and a comment's post_id cannot change once set.

    Comment holds post_id only, never a Post object: "comments of a post" is a
    repository query, not an object-graph traversal.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


ENTITY_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
}


class Post(BaseModel):
    """
    What:  Top-level blog entry.
    Who:   Body of POST /posts; returned by every /posts endpoint.
    """
    id: Optional[int] = Field(
        default=None,
        description="Assigned by the repository on creation; absent before",
    )
    title: str = Field(description="Post title")
    content: str = Field(description="Post body")
    created_at: datetime = Field(description="Creation time supplied by the client")

    model_config = ENTITY_CONFIG


class Comment(BaseModel):
    """
    What:  Comment attached to a post through post_id.
    Who:   Body of POST /comments; returned by /comments and /posts/{id}/comments.

    post_id is not checked against the post repository: a comment may point
    at a post that never existed or was deleted.
    """
    id: Optional[int] = Field(
        default=None,
        description="Assigned by the repository on creation; absent before",
    )
    post_id: int = Field(description="Id of the post this comment belongs to")
    author: str = Field(description="Comment author")
    content: str = Field(description="Comment body")
    created_at: datetime = Field(description="Creation time supplied by the client")

    model_config = ENTITY_CONFIG


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failing endpoint.

    Example:
        {
            "error": "not_found",
            "message": "post with ID '1000' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[list] = Field(default=None, description="Decode problems, if any")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Active storage backend: memory or sql")
    posts: int = Field(description="Number of stored posts")
    comments: int = Field(description="Number of stored comments")
    uptime_seconds: float = Field(description="Seconds since service started")
