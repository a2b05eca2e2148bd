"""Filesystem post store.

Posts live inside their blog's ``posts/`` directory, one directory per post
named by the encoded title, holding a single ``content`` file. Posts are
immutable once published.
"""

from __future__ import annotations

import logging

from inkwell.storage.blogs import BlogStore
from inkwell.storage.errors import (
    BlogNotFound,
    ConcurrentlyDeleted,
    PostNotFound,
    StorageFailure,
    TitleTaken,
)
from inkwell.storage.root import CONTENT_FILENAME
from inkwell.storage.schemas import PostSummary, PostView

logger = logging.getLogger(__name__)


class PostStore:
    """Owns the mapping from post title to post directory within a blog.

    Attributes:
        blogs: Blog store used to locate the parent blog.
    """

    def __init__(self, blogs: BlogStore) -> None:
        self.blogs = blogs
        self.root = blogs.root

    def create_post(self, blog_name: str, title: str, body: str) -> PostSummary:
        """Publish a new post into an existing blog.

        Args:
            blog_name: Owning blog.
            title: Post title, unique within the blog.
            body: Post body, stored byte-exact as UTF-8.

        Returns:
            Summary of the new post.

        Raises:
            InvalidName: Blog name or title cannot be stored.
            BlogNotFound: The blog does not exist (or vanished before publish).
            TitleTaken: The blog already has a post with this title.
            ConcurrentlyDeleted: Staging vanished mid-creation; retry.
            StorageFailure: Any other I/O error.
        """
        posts_dir = self.blogs.posts_location(blog_name)
        destination = posts_dir / self.root.segment(title, "Post title")
        try:
            if not posts_dir.is_dir():
                raise BlogNotFound(blog_name)
            if destination.exists():
                raise TitleTaken(blog_name, title)
            staged = self.root.stage()
        except FileNotFoundError as exc:
            logger.warning(f"Staging for post {title!r} vanished: {exc}")
            raise ConcurrentlyDeleted(
                f"Staging area was removed while creating post {title!r}"
            ) from exc
        except OSError as exc:
            raise StorageFailure(f"Could not stage post {title!r}: {exc}") from exc

        published = False
        try:
            (staged / CONTENT_FILENAME).write_bytes(body.encode("utf-8"))
            self.root.publish(staged, destination)
            published = True
        except FileExistsError as exc:
            raise TitleTaken(blog_name, title) from exc
        except FileNotFoundError as exc:
            if not posts_dir.is_dir():
                raise BlogNotFound(blog_name) from exc
            logger.warning(f"Post {title!r} creation raced with a deletion: {exc}")
            raise ConcurrentlyDeleted(
                f"Storage for post {title!r} was removed during creation"
            ) from exc
        except OSError as exc:
            raise StorageFailure(f"Could not create post {title!r}: {exc}") from exc
        finally:
            if not published:
                self.root.discard(staged)

        logger.info(f"Post created: {title!r} in blog {blog_name!r}")
        return PostSummary(title=title)

    def get_post(self, blog_name: str, title: str) -> PostView:
        """Read a post.

        Raises:
            PostNotFound: The post (or its blog) does not exist, or the post
                has no content.
            StorageFailure: Any other I/O error.
        """
        post_dir = self.root.post_dir(blog_name, title)
        try:
            body = self.root.read_text(post_dir / CONTENT_FILENAME)
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageFailure(f"Could not read post {title!r}: {exc}") from exc

        if body is None:
            raise PostNotFound(blog_name, title)
        return PostView(blog_name=blog_name, title=title, body=body)

    def list_posts(self, blog_name: str) -> list[PostSummary]:
        """List the titles of a blog's posts, sorted by title.

        Raises:
            BlogNotFound: The blog's posts location does not exist.
            StorageFailure: Any other I/O error.
        """
        try:
            entries = self.root.scan(self.blogs.posts_location(blog_name))
        except FileNotFoundError as exc:
            raise BlogNotFound(blog_name) from exc
        except OSError as exc:
            raise StorageFailure(f"Could not list posts of {blog_name!r}: {exc}") from exc
        return [PostSummary(title=title) for title, _ in entries]
