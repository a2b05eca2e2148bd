"""Integration tests for the blog JSON API.

Run with:
    pytest tests/integration/test_api_blogs.py -v
"""

from unittest.mock import AsyncMock

import pytest

from inkwell.storage.errors import ConcurrentlyDeleted, StorageFailure


@pytest.mark.integration
class TestBlogsAPI:
    """Tests for /api/v1/blogs."""

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client):
        response = await test_client.get("/api/v1/blogs")

        assert response.status_code == 200
        assert response.json() == {"blogs": [], "total": 0}

    @pytest.mark.asyncio
    async def test_create_and_list(self, test_client):
        response = await test_client.post(
            "/api/v1/blogs", json={"name": "My Blog", "description": "desc"}
        )
        assert response.status_code == 201
        assert response.json() == {"name": "My Blog", "description": "desc"}

        listing = (await test_client.get("/api/v1/blogs")).json()
        assert listing == {"blogs": [{"name": "My Blog", "description": "desc"}], "total": 1}

    @pytest.mark.asyncio
    async def test_name_taken(self, test_client):
        await test_client.post("/api/v1/blogs", json={"name": "N"})

        response = await test_client.post("/api/v1/blogs", json={"name": "N"})

        assert response.status_code == 409
        assert response.json()["detail"] == "name_taken"

    @pytest.mark.asyncio
    async def test_empty_name_rejected(self, test_client):
        response = await test_client.post("/api/v1/blogs", json={"name": ""})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_overlong_name_rejected(self, test_client):
        response = await test_client.post("/api/v1/blogs", json={"name": "x" * 400})

        assert response.status_code == 422
        assert response.json()["detail"] == "invalid_name"

    @pytest.mark.asyncio
    async def test_get_blog(self, test_client):
        await test_client.post("/api/v1/blogs", json={"name": "N"})

        response = await test_client.get("/api/v1/blogs/N")

        assert response.status_code == 200
        assert response.json() == {"name": "N", "description": "", "posts": []}

    @pytest.mark.asyncio
    async def test_get_missing_blog(self, test_client):
        response = await test_client.get("/api/v1/blogs/nope")

        assert response.status_code == 404
        assert response.json() == {
            "error": "Blog not found: 'nope'",
            "detail": "blog_not_found",
        }

    @pytest.mark.asyncio
    async def test_unknown_route_is_json(self, test_client):
        response = await test_client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert response.json()["error"] == "Not Found"


@pytest.mark.integration
class TestPostsAPI:
    """Tests for /api/v1/blogs/{name}/posts."""

    @pytest.mark.asyncio
    async def test_scenario(self, test_client):
        await test_client.post("/api/v1/blogs", json={"name": "My Blog", "description": "desc"})

        created = await test_client.post(
            "/api/v1/blogs/My%20Blog/posts",
            json={"title": "Hello, World!", "body": "body text"},
        )
        assert created.status_code == 201
        assert created.json() == {"title": "Hello, World!"}

        post = await test_client.get("/api/v1/blogs/My%20Blog/posts/Hello%2C%20World%21")
        assert post.status_code == 200
        assert post.json() == {
            "blog_name": "My Blog",
            "title": "Hello, World!",
            "body": "body text",
        }

        posts = (await test_client.get("/api/v1/blogs/My%20Blog/posts")).json()
        assert posts["posts"] == [{"title": "Hello, World!"}]
        assert posts["total"] == 1

    @pytest.mark.asyncio
    async def test_title_containing_slash(self, test_client):
        await test_client.post("/api/v1/blogs", json={"name": "N"})
        await test_client.post("/api/v1/blogs/N/posts", json={"title": "a/b", "body": "slashed"})

        posts = (await test_client.get("/api/v1/blogs/N/posts")).json()
        assert posts["posts"] == [{"title": "a/b"}]

    @pytest.mark.asyncio
    async def test_missing_blog(self, test_client):
        response = await test_client.post(
            "/api/v1/blogs/nope/posts", json={"title": "T", "body": "B"}
        )
        assert response.status_code == 404

        listing = await test_client.get("/api/v1/blogs/nope/posts")
        assert listing.status_code == 404

    @pytest.mark.asyncio
    async def test_title_taken(self, test_client):
        await test_client.post("/api/v1/blogs", json={"name": "N"})
        await test_client.post("/api/v1/blogs/N/posts", json={"title": "T", "body": "original"})

        response = await test_client.post(
            "/api/v1/blogs/N/posts", json={"title": "T", "body": "replacement"}
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "title_taken"

        post = (await test_client.get("/api/v1/blogs/N/posts/T")).json()
        assert post["body"] == "original"

    @pytest.mark.asyncio
    async def test_missing_post(self, test_client):
        await test_client.post("/api/v1/blogs", json={"name": "N"})

        response = await test_client.get("/api/v1/blogs/N/posts/nope")

        assert response.status_code == 404
        assert response.json()["detail"] == "post_not_found"


@pytest.mark.integration
class TestAPIErrors:
    """Tests for storage errors surfacing as JSON."""

    @pytest.mark.asyncio
    async def test_retryable(self, test_client, local_backend, monkeypatch):
        monkeypatch.setattr(
            local_backend,
            "create_post",
            AsyncMock(side_effect=ConcurrentlyDeleted("blog vanished")),
        )

        response = await test_client.post(
            "/api/v1/blogs/N/posts", json={"title": "T", "body": "B"}
        )

        assert response.status_code == 503
        assert response.headers["retry-after"] == "2"
        assert response.json() == {"error": "blog vanished", "detail": "concurrently_deleted"}

    @pytest.mark.asyncio
    async def test_storage_failure(self, test_client, local_backend, monkeypatch):
        monkeypatch.setattr(
            local_backend,
            "get_blog",
            AsyncMock(side_effect=StorageFailure("Could not read blog")),
        )

        response = await test_client.get("/api/v1/blogs/N")

        assert response.status_code == 500
        assert response.json()["detail"] == "storage_failure"
