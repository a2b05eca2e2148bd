"""Relational database storage backend.

Implements the blog/post operations on the ``Users``/``Posts`` tables.
Uniqueness of blog names and of titles within a blog is checked before
inserting and backed by database constraints, so a race between two
writers still ends in ``NameTaken``/``TitleTaken`` rather than a crash.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from inkwell.database import check_db_connection, get_session_factory, init_db, session_scope
from inkwell.models import Post, User
from inkwell.storage.backends.base import StorageBackend
from inkwell.storage.errors import (
    BlogNotFound,
    InvalidName,
    NameTaken,
    PostNotFound,
    StorageFailure,
    TitleTaken,
)
from inkwell.storage.schemas import BlogSummary, BlogView, PostSummary, PostView

logger = logging.getLogger(__name__)


def _require_name(value: str, label: str) -> None:
    if not value:
        raise InvalidName(f"{label} must not be empty")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidName(f"{label} is not valid UTF-8") from exc


class DatabaseStorageBackend(StorageBackend):
    """SQLAlchemy-backed storage.

    Attributes:
        engine: Async engine the backend owns.
    """

    name = "database"

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._factory = get_session_factory(engine)

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncGenerator[AsyncSession, None]:
        """Session scope translating driver errors into StorageFailure."""
        try:
            async with session_scope(self._factory) as session:
                yield session
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            logger.error(f"Database error while trying to {action}: {exc}")
            raise StorageFailure(f"Could not {action}: {exc}") from exc

    async def startup(self) -> None:
        """Create tables if they do not exist."""
        try:
            await init_db(self.engine)
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Could not initialize database: {exc}") from exc

    async def shutdown(self) -> None:
        await self.engine.dispose()

    async def check(self) -> bool:
        return await check_db_connection(self.engine)

    async def _author_id(self, session: AsyncSession, name: str) -> int | None:
        return await session.scalar(select(User.id).where(User.username == name))

    async def blog_exists(self, name: str) -> bool:
        if not name:
            return False
        async with self._session(f"look up blog {name!r}") as session:
            found = await session.scalar(select(User.id).where(User.username == name))
        return found is not None

    async def create_blog(self, name: str, description: str | None = None) -> BlogSummary:
        _require_name(name, "Blog name")
        try:
            async with self._session(f"create blog {name!r}") as session:
                if await self._author_id(session, name) is not None:
                    raise NameTaken(name)
                session.add(User(username=name, bio=description))
        except IntegrityError as exc:
            raise NameTaken(name) from exc

        logger.info(f"Blog created: {name!r}")
        return BlogSummary(name=name, description=description or "")

    async def get_blog(self, name: str) -> BlogView:
        async with self._session(f"read blog {name!r}") as session:
            user = await session.scalar(select(User).where(User.username == name))
            if user is None:
                raise BlogNotFound(name)
            titles = (
                await session.scalars(select(Post.title).where(Post.author_id == user.id))
            ).all()

        return BlogView(
            name=user.username,
            description=user.bio or "",
            posts=[PostSummary(title=title) for title in sorted(titles)],
        )

    async def list_blogs(self) -> list[BlogSummary]:
        async with self._session("list blogs") as session:
            rows = (await session.execute(select(User.username, User.bio))).all()

        return [
            BlogSummary(name=username, description=bio or "")
            for username, bio in sorted(rows, key=lambda row: row[0])
        ]

    async def create_post(self, blog_name: str, title: str, body: str) -> PostSummary:
        _require_name(blog_name, "Blog name")
        _require_name(title, "Post title")
        try:
            async with self._session(f"create post {title!r}") as session:
                author_id = await self._author_id(session, blog_name)
                if author_id is None:
                    raise BlogNotFound(blog_name)
                existing = await session.scalar(
                    select(Post.id).where(Post.author_id == author_id, Post.title == title)
                )
                if existing is not None:
                    raise TitleTaken(blog_name, title)
                session.add(Post(author_id=author_id, title=title, body=body))
        except IntegrityError as exc:
            # Either the title was taken or the author vanished since the lookup
            if not await self.blog_exists(blog_name):
                raise BlogNotFound(blog_name) from exc
            raise TitleTaken(blog_name, title) from exc

        logger.info(f"Post created: {title!r} in blog {blog_name!r}")
        return PostSummary(title=title)

    async def get_post(self, blog_name: str, title: str) -> PostView:
        async with self._session(f"read post {title!r}") as session:
            body = await session.scalar(
                select(Post.body)
                .join(User, Post.author_id == User.id)
                .where(User.username == blog_name, Post.title == title)
            )

        if body is None:
            raise PostNotFound(blog_name, title)
        return PostView(blog_name=blog_name, title=title, body=body)

    async def list_posts(self, blog_name: str) -> list[PostSummary]:
        async with self._session(f"list posts of {blog_name!r}") as session:
            author_id = await self._author_id(session, blog_name)
            if author_id is None:
                raise BlogNotFound(blog_name)
            titles = (
                await session.scalars(select(Post.title).where(Post.author_id == author_id))
            ).all()

        return [PostSummary(title=title) for title in sorted(titles)]
