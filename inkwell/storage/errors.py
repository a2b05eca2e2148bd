"""Error taxonomy shared by every storage backend.

Each storage failure is classified where it happens into one of these
kinds. The web and API layers map kinds to responses; nothing below them
decides what the user sees.

Kinds:
    NotFound: The requested blog or post does not exist.
    NameTaken / TitleTaken: A creation collided with an existing entry.
    InvalidName: The name or title can never be stored.
    ConcurrentlyDeleted: Something the operation depended on vanished while
        it ran. Safe to retry.
    StorageFailure: Unexpected I/O or database error. Not retried; the
        original exception is chained as ``__cause__``.
"""

from __future__ import annotations


class StorageError(Exception):
    """Base class for all storage errors."""

    kind: str = "storage_error"
    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(StorageError):
    """Requested blog or post does not exist."""

    kind = "not_found"


class BlogNotFound(NotFound):
    """The blog does not exist (or was deleted out of band)."""

    kind = "blog_not_found"

    def __init__(self, blog_name: str) -> None:
        super().__init__(f"Blog not found: {blog_name!r}")
        self.blog_name = blog_name


class PostNotFound(NotFound):
    """The post does not exist in the given blog."""

    kind = "post_not_found"

    def __init__(self, blog_name: str, title: str) -> None:
        super().__init__(f"Post not found: {title!r} in blog {blog_name!r}")
        self.blog_name = blog_name
        self.title = title


class NameTaken(StorageError):
    """A blog with this name already exists."""

    kind = "name_taken"

    def __init__(self, blog_name: str) -> None:
        super().__init__(f"Blog name already taken: {blog_name!r}")
        self.blog_name = blog_name


class TitleTaken(StorageError):
    """A post with this title already exists in the blog."""

    kind = "title_taken"

    def __init__(self, blog_name: str, title: str) -> None:
        super().__init__(f"Post title already taken: {title!r} in blog {blog_name!r}")
        self.blog_name = blog_name
        self.title = title


class InvalidName(StorageError, ValueError):
    """Name or title cannot be stored (empty, too long, not UTF-8)."""

    kind = "invalid_name"


class ConcurrentlyDeleted(StorageError):
    """A dependency vanished mid-operation; the caller should retry shortly."""

    kind = "concurrently_deleted"
    retryable = True


class StorageFailure(StorageError):
    """Unexpected storage error (permissions, exhaustion, corruption)."""

    kind = "storage_failure"
