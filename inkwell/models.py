"""SQLAlchemy models for the database storage backend.

A blog is a row in ``Users`` (the username is the blog name, the bio its
description); a post is a row in ``Posts`` owned by one user.

Examples:
    >>> from inkwell.models import Post, User
    >>> user = User(username="My Blog", bio="desc")
    >>> post = Post(title="Hello, World!", body="body text")
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class User(Base):
    """A blog owner; one user per blog.

    Attributes:
        id: Primary key (``UserID``)
        username: Unique blog name (``Username``)
        bio: Optional blog description (``Bio``)
    """

    __tablename__ = "Users"

    id: Mapped[int] = mapped_column("UserID", Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column("Username", Text, unique=True, nullable=False)
    bio: Mapped[str | None] = mapped_column("Bio", Text, nullable=True, default=None)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"


class Post(Base):
    """A post; titles are unique per author.

    Attributes:
        id: Primary key (``PostID``)
        author_id: Owning user (``AuthorID``)
        title: Post title (``Title``)
        body: Post body (``Body``)
    """

    __tablename__ = "Posts"
    __table_args__ = (UniqueConstraint("AuthorID", "Title", name="uq_posts_author_title"),)

    id: Mapped[int] = mapped_column("PostID", Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        "AuthorID",
        ForeignKey("Users.UserID", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column("Title", Text, nullable=False)
    body: Mapped[str] = mapped_column("Body", Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, author_id={self.author_id}, title={self.title!r})>"
