"""Storage root: the capability object every filesystem store is built on.

Layout under the base directory:

    blogs/<encoded-blog-name>/
        description
        posts/<encoded-post-title>/
            content
    .staging/<random>/

New blogs and posts are assembled in ``.staging`` and then published with a
single ``rename`` into ``blogs/``. Staging lives under the same base
directory, so the rename never crosses a filesystem boundary and is atomic:
readers see either nothing or a fully built entry.

Examples:
    >>> root = StorageRoot("/var/lib/inkwell")
    >>> root.posts_dir("My Blog")
    PosixPath('/var/lib/inkwell/blogs/TXkgQmxvZw/posts')
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import time
import uuid
from pathlib import Path

from inkwell.storage.config import StorageConfig
from inkwell.storage.errors import InvalidName
from inkwell.storage.naming import InvalidUtf8, NameDecodeError, decode_name, encode_name

logger = logging.getLogger(__name__)

BLOGS_DIRNAME = "blogs"
STAGING_DIRNAME = ".staging"
POSTS_DIRNAME = "posts"
DESCRIPTION_FILENAME = "description"
CONTENT_FILENAME = "content"


class StorageRoot:
    """Owns the base directory and the stage/publish primitives.

    Attributes:
        base: Base directory.
        max_segment_bytes: Longest encoded name accepted.
    """

    def __init__(self, base: Path | str, max_segment_bytes: int = 255) -> None:
        self.base = Path(base)
        self.max_segment_bytes = max_segment_bytes

    @classmethod
    def from_config(cls, config: StorageConfig) -> "StorageRoot":
        """Create a StorageRoot from config."""
        return cls(config.root, max_segment_bytes=config.max_segment_bytes)

    @property
    def blogs_dir(self) -> Path:
        return self.base / BLOGS_DIRNAME

    @property
    def staging_dir(self) -> Path:
        return self.base / STAGING_DIRNAME

    def segment(self, name: str, label: str = "Name") -> str:
        """Encode a name into a path segment, rejecting unstorable names.

        Raises:
            InvalidName: Empty, not UTF-8, or too long once encoded.
        """
        if not name:
            raise InvalidName(f"{label} must not be empty")
        try:
            encoded = encode_name(name)
        except InvalidUtf8 as exc:
            raise InvalidName(f"{label} is not valid UTF-8") from exc
        if len(encoded) > self.max_segment_bytes:
            raise InvalidName(
                f"{label} is too long ({len(name.encode('utf-8'))} bytes encoded "
                f"to {len(encoded)}, limit {self.max_segment_bytes})"
            )
        return encoded

    def blog_dir(self, blog_name: str) -> Path:
        return self.blogs_dir / self.segment(blog_name, "Blog name")

    def posts_dir(self, blog_name: str) -> Path:
        return self.blog_dir(blog_name) / POSTS_DIRNAME

    def post_dir(self, blog_name: str, title: str) -> Path:
        return self.posts_dir(blog_name) / self.segment(title, "Post title")

    def scan(self, directory: Path) -> list[tuple[str, Path]]:
        """List the decoded names of the subdirectories of ``directory``.

        Entries that are not directories or whose names do not decode are
        skipped and logged; listing stays usable on a partially corrupted
        tree.

        Returns:
            ``(name, path)`` pairs sorted by name.

        Raises:
            FileNotFoundError: ``directory`` does not exist.
        """
        found: list[tuple[str, Path]] = []
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    name = decode_name(entry.name)
                except NameDecodeError as exc:
                    logger.warning(f"Skipping undecodable entry {entry.path}: {exc}")
                    continue
                if not entry.is_dir():
                    logger.warning(f"Skipping non-directory entry {entry.path}")
                    continue
                found.append((name, Path(entry.path)))
        found.sort(key=lambda pair: pair[0])
        return found

    @staticmethod
    def read_text(path: Path) -> str | None:
        """Read a whole UTF-8 file, or return None if it does not exist."""
        try:
            return path.read_bytes().decode("utf-8")
        except FileNotFoundError:
            return None

    def ensure(self) -> None:
        """Create the top-level directories if they are missing."""
        self.blogs_dir.mkdir(parents=True, exist_ok=True)
        self.staging_dir.mkdir(parents=True, exist_ok=True)

    def stage(self) -> Path:
        """Create a fresh, unpublished staging directory."""
        self.staging_dir.mkdir(parents=True, exist_ok=True)
        staged = self.staging_dir / uuid.uuid4().hex
        staged.mkdir()
        return staged

    def publish(self, staged: Path, destination: Path) -> None:
        """Atomically move a staged directory to its final location.

        Raises:
            FileExistsError: The destination already exists.
            FileNotFoundError: The staged directory or the destination's
                parent no longer exists.
        """
        try:
            os.rename(staged, destination)
        except OSError as exc:
            if exc.errno in (errno.EEXIST, errno.ENOTEMPTY):
                raise FileExistsError(
                    errno.EEXIST, "Destination already exists", str(destination)
                ) from exc
            raise

    def discard(self, staged: Path) -> None:
        """Remove an unpublished staging directory."""
        try:
            shutil.rmtree(staged)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning(f"Could not discard staging directory {staged}: {exc}")

    def purge_staging(self, min_age_seconds: float = 3600.0) -> int:
        """Remove staging directories left behind by crashed writers.

        Only entries older than ``min_age_seconds`` are removed so that
        writers in other processes sharing this root are not disturbed.

        Returns:
            Number of staging directories removed.
        """
        if not self.staging_dir.is_dir():
            return 0

        cutoff = time.time() - min_age_seconds
        removed = 0
        for entry in self.staging_dir.iterdir():
            try:
                if entry.stat().st_mtime > cutoff:
                    continue
            except FileNotFoundError:
                continue
            if entry.is_dir():
                shutil.rmtree(entry, ignore_errors=True)
            else:
                entry.unlink(missing_ok=True)
            removed += 1

        if removed:
            logger.info(f"Purged {removed} stale staging entries from {self.staging_dir}")
        return removed
