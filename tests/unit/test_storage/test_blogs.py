"""Tests for inkwell.storage.blogs module.

Covers:
    - create_blog: layout on disk, NameTaken, InvalidName, staging cleanup
    - get_blog: description and posts, BlogNotFound
    - list_blogs: contents, order, tolerance of corrupt entries
"""

import os
import shutil
from unittest.mock import patch

import pytest

from inkwell.storage.errors import (
    BlogNotFound,
    ConcurrentlyDeleted,
    InvalidName,
    NameTaken,
    StorageFailure,
)
from inkwell.storage.naming import encode_name
from inkwell.storage.schemas import BlogSummary


@pytest.mark.fast
class TestCreateBlog:
    """Tests for BlogStore.create_blog()."""

    def test_layout_on_disk(self, blog_store, storage_base):
        blog_store.create_blog("My Blog", "desc")

        blog_dir = storage_base / "blogs" / encode_name("My Blog")
        assert (blog_dir / "posts").is_dir()
        assert (blog_dir / "description").read_bytes() == b"desc"

    def test_without_description(self, blog_store, storage_base):
        summary = blog_store.create_blog("N")

        assert summary == BlogSummary(name="N", description="")
        assert not (storage_base / "blogs" / encode_name("N") / "description").exists()

    def test_empty_description_is_written(self, blog_store, storage_base):
        blog_store.create_blog("N", "")
        assert (storage_base / "blogs" / encode_name("N") / "description").read_bytes() == b""

    def test_name_taken_keeps_first_blog(self, blog_store):
        blog_store.create_blog("N", "first")

        with pytest.raises(NameTaken) as exc_info:
            blog_store.create_blog("N", "second")

        assert exc_info.value.blog_name == "N"
        assert blog_store.get_blog("N").description == "first"

    def test_invalid_names(self, blog_store):
        with pytest.raises(InvalidName):
            blog_store.create_blog("")
        with pytest.raises(InvalidName):
            blog_store.create_blog("x" * 1000)

    def test_path_like_names_stay_inside_root(self, blog_store, storage_base):
        blog_store.create_blog("../escape")
        blog_store.create_blog("/abs/path")

        assert not (storage_base.parent / "escape").exists()
        assert {b.name for b in blog_store.list_blogs()} == {"../escape", "/abs/path"}

    def test_no_staging_leftovers(self, blog_store, storage_root):
        blog_store.create_blog("N", "desc")
        with pytest.raises(NameTaken):
            blog_store.create_blog("N")

        assert list(storage_root.staging_dir.iterdir()) == []

    def test_staging_removed_while_staging(self, blog_store, storage_root):
        """The staging area deleted between its creation and the entry's mkdir."""

        def vanishing_stage():
            storage_root.staging_dir.mkdir(parents=True, exist_ok=True)
            shutil.rmtree(storage_root.staging_dir)
            staged = storage_root.staging_dir / "entry"
            staged.mkdir()
            return staged

        with patch.object(storage_root, "stage", side_effect=vanishing_stage):
            with pytest.raises(ConcurrentlyDeleted) as exc_info:
                blog_store.create_blog("N")

        assert exc_info.value.retryable
        assert not blog_store.blog_exists("N")

    def test_publish_race_reports_name_taken(self, blog_store, storage_root):
        """A blog published between the existence check and the rename."""
        original_publish = storage_root.publish

        def racing_publish(staged, destination):
            destination.mkdir()
            (destination / "posts").mkdir()
            original_publish(staged, destination)

        with patch.object(storage_root, "publish", side_effect=racing_publish):
            with pytest.raises(NameTaken):
                blog_store.create_blog("N")

        assert list(storage_root.staging_dir.iterdir()) == []

    def test_vanished_staging_is_concurrently_deleted(self, blog_store, storage_root):
        def vanishing_publish(staged, destination):
            raise FileNotFoundError(2, "No such file or directory", str(staged))

        with patch.object(storage_root, "publish", side_effect=vanishing_publish):
            with pytest.raises(ConcurrentlyDeleted) as exc_info:
                blog_store.create_blog("N")

        assert exc_info.value.retryable

    def test_other_os_errors_are_storage_failures(self, blog_store, storage_root):
        def denied(staged, destination):
            raise PermissionError(13, "Permission denied", str(destination))

        with patch.object(storage_root, "publish", side_effect=denied):
            with pytest.raises(StorageFailure) as exc_info:
                blog_store.create_blog("N")

        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert not blog_store.blog_exists("N")


@pytest.mark.fast
class TestGetBlog:
    """Tests for BlogStore.get_blog()."""

    def test_fresh_blog_is_empty(self, blog_store):
        blog_store.create_blog("N")
        view = blog_store.get_blog("N")

        assert view.name == "N"
        assert view.description == ""
        assert view.posts == []

    def test_missing_blog(self, blog_store):
        with pytest.raises(BlogNotFound):
            blog_store.get_blog("nope")

    def test_missing_posts_directory(self, blog_store, storage_base):
        blog_dir = storage_base / "blogs" / encode_name("half")
        blog_dir.mkdir(parents=True)

        with pytest.raises(BlogNotFound):
            blog_store.get_blog("half")
        assert not blog_store.blog_exists("half")

    def test_undecodable_description(self, blog_store, storage_base):
        blog_store.create_blog("N")
        (storage_base / "blogs" / encode_name("N") / "description").write_bytes(b"\xff\xfe")

        with pytest.raises(StorageFailure):
            blog_store.get_blog("N")

    def test_multiline_unicode_description(self, blog_store):
        description = "line one\nligne deux: café\n"
        blog_store.create_blog("N", description)
        assert blog_store.get_blog("N").description == description


@pytest.mark.fast
class TestListBlogs:
    """Tests for BlogStore.list_blogs()."""

    def test_empty_root(self, blog_store):
        assert blog_store.list_blogs() == []

    def test_contains_exactly_created_blogs(self, blog_store):
        blog_store.create_blog("a")
        blog_store.create_blog("b")

        assert {b.name for b in blog_store.list_blogs()} == {"a", "b"}

    def test_sorted_by_name(self, blog_store):
        for name in ["zeta", "alpha", "Mu"]:
            blog_store.create_blog(name)

        assert [b.name for b in blog_store.list_blogs()] == ["Mu", "alpha", "zeta"]

    def test_skips_undecodable_directory(self, blog_store, storage_base):
        blog_store.create_blog("ok", "fine")
        os.mkdir(storage_base / "blogs" / "%%%")

        assert blog_store.list_blogs() == [BlogSummary(name="ok", description="fine")]

    def test_undecodable_description_lists_empty(self, blog_store, storage_base):
        blog_store.create_blog("N", "desc")
        (storage_base / "blogs" / encode_name("N") / "description").write_bytes(b"\xff")

        assert blog_store.list_blogs() == [BlogSummary(name="N", description="")]

    def test_ignores_staging(self, blog_store, storage_root):
        storage_root.ensure()
        staged = storage_root.stage()
        (staged / "posts").mkdir()

        assert blog_store.list_blogs() == []


@pytest.mark.fast
class TestConcreteScenario:
    """Create a blog, list it, post to it and read the post back."""

    def test_scenario(self, blog_store, post_store, storage_base):
        assert not storage_base.exists()

        blog_store.create_blog("My Blog", "desc")
        assert blog_store.list_blogs() == [BlogSummary(name="My Blog", description="desc")]

        post_store.create_post("My Blog", "Hello, World!", "body text")
        assert post_store.get_post("My Blog", "Hello, World!").body == "body text"
