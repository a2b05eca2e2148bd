"""View models returned by storage backends."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PostSummary(BaseModel):
    """A post as it appears in a listing (no body)."""

    title: str


class PostView(BaseModel):
    """A single post with its body."""

    blog_name: str
    title: str
    body: str


class BlogSummary(BaseModel):
    """A blog as it appears in the blog listing."""

    name: str
    description: str = ""


class BlogView(BaseModel):
    """A blog with its description and post titles."""

    name: str
    description: str = ""
    posts: list[PostSummary] = Field(default_factory=list)
