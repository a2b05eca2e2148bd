"""Filesystem blog store.

Creates, looks up and lists blog directories under ``<root>/blogs``.

Examples:
    >>> store = BlogStore(StorageRoot("./state"))
    >>> store.create_blog("My Blog", "desc")
    BlogSummary(name='My Blog', description='desc')
    >>> [b.name for b in store.list_blogs()]
    ['My Blog']
"""

from __future__ import annotations

import logging
from pathlib import Path

from inkwell.storage.errors import (
    BlogNotFound,
    ConcurrentlyDeleted,
    InvalidName,
    NameTaken,
    StorageFailure,
)
from inkwell.storage.root import DESCRIPTION_FILENAME, POSTS_DIRNAME, StorageRoot
from inkwell.storage.schemas import BlogSummary, BlogView, PostSummary

logger = logging.getLogger(__name__)


class BlogStore:
    """Owns the mapping from blog name to blog directory.

    Attributes:
        root: Storage root the blogs live under.
    """

    def __init__(self, root: StorageRoot) -> None:
        self.root = root

    def posts_location(self, blog_name: str) -> Path:
        """Return where the posts of ``blog_name`` live (may not exist)."""
        return self.root.posts_dir(blog_name)

    def blog_exists(self, blog_name: str) -> bool:
        """Check whether a fully published blog exists."""
        try:
            return self.posts_location(blog_name).is_dir()
        except InvalidName:
            return False

    def create_blog(self, name: str, description: str | None = None) -> BlogSummary:
        """Create a new blog.

        The blog is assembled in a staging directory (``posts/`` plus the
        optional ``description``) and published with one atomic rename.

        Args:
            name: Blog name, any non-empty UTF-8 text.
            description: Optional free text, stored verbatim.

        Returns:
            Summary of the new blog.

        Raises:
            InvalidName: Name cannot be stored.
            NameTaken: A blog with this name already exists.
            ConcurrentlyDeleted: Staging vanished mid-creation; retry.
            StorageFailure: Any other I/O error.
        """
        destination = self.root.blog_dir(name)
        try:
            if destination.exists():
                raise NameTaken(name)
            self.root.blogs_dir.mkdir(parents=True, exist_ok=True)
            staged = self.root.stage()
        except FileNotFoundError as exc:
            logger.warning(f"Staging for blog {name!r} vanished: {exc}")
            raise ConcurrentlyDeleted(
                f"Staging area was removed while creating blog {name!r}"
            ) from exc
        except OSError as exc:
            raise StorageFailure(f"Could not stage blog {name!r}: {exc}") from exc

        published = False
        try:
            (staged / POSTS_DIRNAME).mkdir()
            if description is not None:
                (staged / DESCRIPTION_FILENAME).write_bytes(description.encode("utf-8"))
            self.root.publish(staged, destination)
            published = True
        except FileExistsError as exc:
            raise NameTaken(name) from exc
        except FileNotFoundError as exc:
            logger.warning(f"Blog {name!r} creation raced with a deletion: {exc}")
            raise ConcurrentlyDeleted(
                f"Storage for blog {name!r} was removed during creation"
            ) from exc
        except OSError as exc:
            raise StorageFailure(f"Could not create blog {name!r}: {exc}") from exc
        finally:
            if not published:
                self.root.discard(staged)

        logger.info(f"Blog created: {name!r}")
        return BlogSummary(name=name, description=description or "")

    def get_blog(self, name: str) -> BlogView:
        """Look up a blog with its description and post titles.

        Raises:
            BlogNotFound: No such blog.
            StorageFailure: Any other I/O error.
        """
        blog_dir = self.root.blog_dir(name)
        try:
            if not blog_dir.is_dir():
                raise BlogNotFound(name)
            description = self.root.read_text(blog_dir / DESCRIPTION_FILENAME) or ""
            entries = self.root.scan(blog_dir / POSTS_DIRNAME)
        except FileNotFoundError as exc:
            raise BlogNotFound(name) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageFailure(f"Could not read blog {name!r}: {exc}") from exc

        return BlogView(
            name=name,
            description=description,
            posts=[PostSummary(title=title) for title, _ in entries],
        )

    def list_blogs(self) -> list[BlogSummary]:
        """List all blogs, sorted by name.

        Corrupt entries are skipped and logged rather than failing the
        whole listing.

        Raises:
            StorageFailure: The blogs directory cannot be read.
        """
        try:
            entries = self.root.scan(self.root.blogs_dir)
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageFailure(f"Could not list blogs: {exc}") from exc

        summaries: list[BlogSummary] = []
        for name, path in entries:
            try:
                description = self.root.read_text(path / DESCRIPTION_FILENAME) or ""
            except UnicodeDecodeError as exc:
                logger.warning(f"Blog {name!r} has an undecodable description: {exc}")
                description = ""
            except OSError as exc:
                raise StorageFailure(f"Could not read description of {name!r}: {exc}") from exc
            summaries.append(BlogSummary(name=name, description=description))
        return summaries
