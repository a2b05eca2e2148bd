"""Blog API endpoints.

JSON counterpart of the HTML pages, backed by the same storage backend.

Endpoints:
    GET /api/v1/blogs - List blogs
    POST /api/v1/blogs - Create a blog
    GET /api/v1/blogs/{name} - Get a blog with its post titles
    GET /api/v1/blogs/{name}/posts - List a blog's post titles
    POST /api/v1/blogs/{name}/posts - Create a post
    GET /api/v1/blogs/{name}/posts/{title} - Get a post

Storage errors are turned into JSON responses by the application's
exception handlers (404 missing, 409 taken, 422 invalid name, 503 retry).

Examples:
    >>> POST /api/v1/blogs
    >>> {"name": "notes", "description": "things I learned"}
    >>>
    >>> # Response (201)
    >>> {"name": "notes", "description": "things I learned"}

Tests:
    - tests/integration/test_api_blogs.py
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from inkwell.dependencies import get_backend
from inkwell.storage.backends.base import StorageBackend
from inkwell.storage.schemas import BlogSummary, BlogView, PostSummary, PostView

router = APIRouter(prefix="/blogs", tags=["blogs"])


# Request/Response Models


class CreateBlogRequest(BaseModel):
    """Request to create a blog.

    Attributes:
        name: Blog name, unique across the site
        description: Optional free text shown on the blog's page
    """

    name: str = Field(..., min_length=1, examples=["notes"])
    description: str | None = Field(default=None, examples=["things I learned"])


class CreatePostRequest(BaseModel):
    """Request to create a post.

    Attributes:
        title: Post title, unique within the blog
        body: Post text
    """

    title: str = Field(..., min_length=1, examples=["Hello"])
    body: str = Field(default="", examples=["First post."])


class BlogListResponse(BaseModel):
    """All blogs, ordered by name."""

    blogs: list[BlogSummary]
    total: int


class PostListResponse(BaseModel):
    """A blog's post titles, ordered by title."""

    blog_name: str
    posts: list[PostSummary]
    total: int


# Endpoints


@router.get("", response_model=BlogListResponse)
async def list_blogs(backend: StorageBackend = Depends(get_backend)) -> BlogListResponse:
    """List every blog with its description."""
    blogs = await backend.list_blogs()
    return BlogListResponse(blogs=blogs, total=len(blogs))


@router.post("", response_model=BlogSummary, status_code=status.HTTP_201_CREATED)
async def create_blog(
    request: CreateBlogRequest,
    backend: StorageBackend = Depends(get_backend),
) -> BlogSummary:
    """Create a blog.

    Raises:
        NameTaken: 409 when the name is in use.
        InvalidName: 422 when the name cannot be stored.
    """
    return await backend.create_blog(request.name, request.description)


@router.get("/{name}", response_model=BlogView)
async def get_blog(name: str, backend: StorageBackend = Depends(get_backend)) -> BlogView:
    """Get a blog's description and post titles."""
    return await backend.get_blog(name)


@router.get("/{name}/posts", response_model=PostListResponse)
async def list_posts(name: str, backend: StorageBackend = Depends(get_backend)) -> PostListResponse:
    """List a blog's post titles."""
    posts = await backend.list_posts(name)
    return PostListResponse(blog_name=name, posts=posts, total=len(posts))


@router.post(
    "/{name}/posts",
    response_model=PostSummary,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    name: str,
    request: CreatePostRequest,
    backend: StorageBackend = Depends(get_backend),
) -> PostSummary:
    """Create a post in a blog.

    Raises:
        BlogNotFound: 404 when the blog does not exist.
        TitleTaken: 409 when the blog already has a post with that title.
        ConcurrentlyDeleted: 503 when the blog vanished mid-create.
    """
    return await backend.create_post(name, request.title, request.body)


@router.get("/{name}/posts/{title}", response_model=PostView)
async def get_post(
    name: str,
    title: str,
    backend: StorageBackend = Depends(get_backend),
) -> PostView:
    """Get a single post."""
    return await backend.get_post(name, title)
