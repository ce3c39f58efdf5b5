"""Pydantic schemas for the posts endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.models.post import Post


class PostCreateRequest(BaseModel):
    """Body of POST /posts.

    Both fields are required strings; numbers, booleans and nulls are rejected
    rather than coerced. Unknown fields (including a client-supplied ``id``)
    are ignored.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    title: str = Field(..., description="Post title (HTML is escaped before storage).")
    content: str = Field(..., description="Post body (HTML is escaped before storage).")


class PostResponse(BaseModel):
    """A stored post as returned to clients."""

    id: str = Field(..., description="Server-assigned unique identifier.")
    title: str = Field(..., description="Escaped title.")
    content: str = Field(..., description="Escaped content.")

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(id=post.id, title=post.title, content=post.content)


class ErrorResponse(BaseModel):
    """Error body shared by every failure response."""

    error: str = Field(..., description="Human-readable error message.")


class HealthResponse(BaseModel):
    status: str = Field("ok", description="Liveness status.")
