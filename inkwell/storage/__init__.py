"""Blog and post storage for Inkwell.

Provides the name encoder, the filesystem blog/post stores and the error
taxonomy shared with the database backend. Backends and backend selection
live in ``inkwell.storage.backends`` and ``inkwell.storage.service``.

Examples:
    >>> from inkwell.storage import BlogStore, PostStore, StorageRoot
    >>> blogs = BlogStore(StorageRoot("./state"))
    >>> posts = PostStore(blogs)
    >>> blogs.create_blog("My Blog", "desc")
    >>> posts.create_post("My Blog", "Hello, World!", "body text")
"""

from inkwell.storage.blogs import BlogStore
from inkwell.storage.config import StorageConfig
from inkwell.storage.errors import (
    BlogNotFound,
    ConcurrentlyDeleted,
    InvalidName,
    NameTaken,
    NotFound,
    PostNotFound,
    StorageError,
    StorageFailure,
    TitleTaken,
)
from inkwell.storage.naming import InvalidEncoding, InvalidUtf8, decode_name, encode_name
from inkwell.storage.posts import PostStore
from inkwell.storage.root import StorageRoot
from inkwell.storage.schemas import BlogSummary, BlogView, PostSummary, PostView

__all__ = [
    "BlogNotFound",
    "BlogStore",
    "BlogSummary",
    "BlogView",
    "ConcurrentlyDeleted",
    "InvalidEncoding",
    "InvalidName",
    "InvalidUtf8",
    "NameTaken",
    "NotFound",
    "PostNotFound",
    "PostStore",
    "PostSummary",
    "PostView",
    "StorageConfig",
    "StorageError",
    "StorageFailure",
    "StorageRoot",
    "TitleTaken",
    "decode_name",
    "encode_name",
]
