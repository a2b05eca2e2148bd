"""Local filesystem storage backend."""

from __future__ import annotations

import logging
import os

from inkwell.storage.backends.base import StorageBackend
from inkwell.storage.blogs import BlogStore
from inkwell.storage.posts import PostStore
from inkwell.storage.root import StorageRoot
from inkwell.storage.schemas import BlogSummary, BlogView, PostSummary, PostView

logger = logging.getLogger(__name__)


class LocalStorageBackend(StorageBackend):
    """Directory-tree backend built on BlogStore and PostStore.

    Attributes:
        root: Storage root shared by both stores.
        blogs: Blog store.
        posts: Post store.
    """

    name = "filesystem"

    def __init__(self, root: StorageRoot) -> None:
        self.root = root
        self.blogs = BlogStore(root)
        self.posts = PostStore(self.blogs)

    async def startup(self) -> None:
        """Create the directory layout and purge stale staging entries."""
        self.root.ensure()
        self.root.purge_staging()
        logger.info(f"Filesystem storage ready at {self.root.base}")

    async def check(self) -> bool:
        """Check the storage root is a writable directory."""
        base = self.root.base
        return base.is_dir() and os.access(base, os.W_OK | os.X_OK)

    async def blog_exists(self, name: str) -> bool:
        return self.blogs.blog_exists(name)

    async def create_blog(self, name: str, description: str | None = None) -> BlogSummary:
        return self.blogs.create_blog(name, description)

    async def get_blog(self, name: str) -> BlogView:
        return self.blogs.get_blog(name)

    async def list_blogs(self) -> list[BlogSummary]:
        return self.blogs.list_blogs()

    async def create_post(self, blog_name: str, title: str, body: str) -> PostSummary:
        return self.posts.create_post(blog_name, title, body)

    async def get_post(self, blog_name: str, title: str) -> PostView:
        return self.posts.get_post(blog_name, title)

    async def list_posts(self, blog_name: str) -> list[PostSummary]:
        return self.posts.list_posts(blog_name)
