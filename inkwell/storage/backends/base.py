"""Abstract base class for storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from inkwell.storage.schemas import BlogSummary, BlogView, PostSummary, PostView


class StorageBackend(ABC):
    """Abstract storage backend serving the six blog/post operations.

    Implementations raise the exceptions of ``inkwell.storage.errors``;
    they never return error values.
    """

    name: str = "abstract"

    async def startup(self) -> None:
        """Prepare the backend (create directories, tables). Idempotent."""

    async def shutdown(self) -> None:
        """Release resources held by the backend."""

    @abstractmethod
    async def check(self) -> bool:
        """Report whether the backend is reachable and usable.

        Returns:
            True if healthy.
        """

    @abstractmethod
    async def blog_exists(self, name: str) -> bool:
        """Check whether a blog exists.

        Args:
            name: Blog name.
        """

    @abstractmethod
    async def create_blog(self, name: str, description: str | None = None) -> BlogSummary:
        """Create a blog.

        Args:
            name: Unique blog name.
            description: Optional description.

        Raises:
            NameTaken: The name is in use.
        """

    @abstractmethod
    async def get_blog(self, name: str) -> BlogView:
        """Get a blog with its description and post titles.

        Args:
            name: Blog name.

        Raises:
            BlogNotFound: No such blog.
        """

    @abstractmethod
    async def list_blogs(self) -> list[BlogSummary]:
        """List all blogs sorted by name."""

    @abstractmethod
    async def create_post(self, blog_name: str, title: str, body: str) -> PostSummary:
        """Create a post in an existing blog.

        Args:
            blog_name: Owning blog.
            title: Title, unique within the blog.
            body: Post body.

        Raises:
            BlogNotFound: No such blog.
            TitleTaken: The title is in use in this blog.
        """

    @abstractmethod
    async def get_post(self, blog_name: str, title: str) -> PostView:
        """Get a post with its body.

        Args:
            blog_name: Owning blog.
            title: Post title.

        Raises:
            PostNotFound: No such post.
        """

    @abstractmethod
    async def list_posts(self, blog_name: str) -> list[PostSummary]:
        """List a blog's post titles sorted by title.

        Args:
            blog_name: Owning blog.

        Raises:
            BlogNotFound: No such blog.
        """
