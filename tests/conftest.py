"""
Pytest configuration and fixtures for Inkwell tests.

Every test gets its own storage root under ``tmp_path`` and, where a
database is involved, its own SQLite file, so tests never share state.
"""
from pathlib import Path
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from inkwell.config import Settings, StorageBackendType
from inkwell.database import build_engine
from inkwell.main import create_app
from inkwell.storage.backends.base import StorageBackend
from inkwell.storage.backends.database import DatabaseStorageBackend
from inkwell.storage.backends.local import LocalStorageBackend
from inkwell.storage.blogs import BlogStore
from inkwell.storage.posts import PostStore
from inkwell.storage.root import StorageRoot


# ============================================
# Filesystem storage
# ============================================

@pytest.fixture
def storage_base(tmp_path: Path) -> Path:
    """Empty base directory for one test."""
    return tmp_path / "state"


@pytest.fixture
def storage_root(storage_base: Path) -> StorageRoot:
    """Storage root over an empty base directory."""
    return StorageRoot(storage_base)


@pytest.fixture
def blog_store(storage_root: StorageRoot) -> BlogStore:
    return BlogStore(storage_root)


@pytest.fixture
def post_store(blog_store: BlogStore) -> PostStore:
    return PostStore(blog_store)


@pytest.fixture
async def local_backend(storage_root: StorageRoot) -> AsyncGenerator[LocalStorageBackend, None]:
    """Started filesystem backend."""
    backend = LocalStorageBackend(storage_root)
    await backend.startup()
    yield backend
    await backend.shutdown()


# ============================================
# Database storage
# ============================================

@pytest.fixture
def test_database_url(tmp_path: Path) -> str:
    """SQLite file private to one test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'inkwell-test.db'}"


@pytest.fixture
async def db_backend(test_database_url: str) -> AsyncGenerator[DatabaseStorageBackend, None]:
    """Started database backend with fresh tables."""
    backend = DatabaseStorageBackend(build_engine(test_database_url))
    await backend.startup()
    yield backend
    await backend.shutdown()


@pytest.fixture(params=["filesystem", "database"])
async def backend(request, storage_root: StorageRoot, test_database_url: str) -> AsyncGenerator[StorageBackend, None]:
    """Each storage backend in turn, for behavior both must share."""
    if request.param == "database":
        instance: StorageBackend = DatabaseStorageBackend(build_engine(test_database_url))
    else:
        instance = LocalStorageBackend(storage_root)
    await instance.startup()
    yield instance
    await instance.shutdown()


# ============================================
# Application
# ============================================

@pytest.fixture
def test_settings(storage_base: Path, test_database_url: str) -> Settings:
    """Settings isolated from the environment and any ``.env`` file."""
    return Settings(
        _env_file=None,
        STORAGE_BACKEND=StorageBackendType.FILESYSTEM,
        STORAGE_ROOT=storage_base,
        DATABASE_URL=test_database_url,
        DEBUG=True,
    )


@pytest.fixture
def app(test_settings: Settings, local_backend: LocalStorageBackend):
    """Application wired to the test's filesystem backend."""
    return create_app(test_settings, local_backend)


@pytest.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Async client talking to the app in-process.

    Redirects are not followed so tests can assert on them; cookies
    (flash messages) persist across requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
