"""
KBlog Backend — /posts Endpoint Tests
======================================

What:  HTTP-level tests for the post handlers.
How:   httpx AsyncClient over ASGITransport against a fresh app whose
       BlogStore the test can inspect directly.

What we test:
    ✅ List, get, create, delete happy paths (all 200)
    ✅ Missing post → 500 by default, 404 when configured
    ✅ Malformed body / non-integer id → 500
    ✅ GET /posts/{id}/comments filters by postId
"""

from datetime import datetime, timedelta, timezone

import pytest


async def save_post(client, payload: dict) -> dict:
    response = await client.post("/posts", json=payload)
    assert response.status_code == 200
    return response.json()


class TestListPosts:

    @pytest.mark.asyncio
    async def test_list_two_posts(self, test_client, memory_store, post_payload):
        post1 = await save_post(test_client, {**post_payload, "title": "post1", "content": "bla bla bla"})
        post2 = await save_post(test_client, {**post_payload, "title": "post2", "content": "bla bla bla"})

        response = await test_client.get("/posts", headers={"Accept": "application/json"})

        assert response.status_code == 200
        titles = [p["title"] for p in response.json()]
        assert post1["title"] in titles
        assert post2["title"] in titles
        assert memory_store.posts.count() == 2

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/posts")

        assert response.status_code == 200
        assert response.json() == []


class TestCreatePost:

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, test_client, memory_store, post_payload):
        body = await save_post(test_client, post_payload)

        assert body["id"] == 1
        assert body["title"] == "test post"
        assert body["content"] == "post from test"
        assert memory_store.posts.get_by_id(1).title == "test post"

    @pytest.mark.asyncio
    async def test_response_uses_camel_case(self, test_client, post_payload):
        body = await save_post(test_client, post_payload)

        assert "createdAt" in body
        assert "created_at" not in body

    @pytest.mark.asyncio
    async def test_timestamp_round_trip(self, test_client, post_payload):
        created = await save_post(test_client, post_payload)

        response = await test_client.get(f"/posts/{created['id']}")

        assert datetime.fromisoformat(response.json()["createdAt"]) == datetime.fromisoformat(
            post_payload["createdAt"]
        )

    @pytest.mark.asyncio
    async def test_timezone_aware_timestamp_round_trip(self, backend_client, store, post_payload):
        stamp = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)

        created = await save_post(backend_client, {**post_payload, "createdAt": stamp.isoformat()})
        response = await backend_client.get(f"/posts/{created['id']}")

        returned = datetime.fromisoformat(response.json()["createdAt"].replace("Z", "+00:00"))
        assert returned == stamp
        assert returned.utcoffset() == timedelta(0)
        assert store.posts.get_by_id(created["id"]).created_at == stamp

    @pytest.mark.asyncio
    async def test_malformed_json_is_500(self, test_client, memory_store):
        response = await test_client.post(
            "/posts",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json()["error"] == "decode_error"
        assert memory_store.posts.count() == 0

    @pytest.mark.asyncio
    async def test_missing_field_is_500(self, test_client, post_payload):
        payload = {k: v for k, v in post_payload.items() if k != "title"}

        response = await test_client.post("/posts", json=payload)

        assert response.status_code == 500
        assert any(err["loc"][-1] == "title" for err in response.json()["details"])

    @pytest.mark.asyncio
    async def test_null_title_is_500(self, test_client, post_payload):
        response = await test_client.post("/posts", json={**post_payload, "title": None})

        assert response.status_code == 500


class TestGetPost:

    @pytest.mark.asyncio
    async def test_get_post(self, test_client, memory_store, post_payload):
        post = await save_post(test_client, post_payload)

        response = await test_client.get(f"/posts/{post['id']}")

        assert response.status_code == 200
        assert response.json() == post
        assert memory_store.posts.count() == 1

    @pytest.mark.asyncio
    async def test_get_nonexistent_post_is_500(self, test_client):
        response = await test_client.get("/posts/1000", headers={"Accept": "application/json"})

        assert response.status_code == 500
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_get_nonexistent_post_is_404_when_configured(self, strict_client):
        response = await strict_client.get("/posts/1000")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_non_integer_id_is_500(self, test_client):
        response = await test_client.get("/posts/abc")

        assert response.status_code == 500


class TestDeletePost:

    @pytest.mark.asyncio
    async def test_delete_post(self, test_client, memory_store, post_payload):
        post = await save_post(test_client, post_payload)

        response = await test_client.delete(f"/posts/{post['id']}")

        assert response.status_code == 200
        assert memory_store.posts.count() == 0

    @pytest.mark.asyncio
    async def test_delete_nonexistent_post_is_500(self, test_client):
        response = await test_client.delete("/posts/1290")

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_delete_nonexistent_post_is_404_when_configured(self, strict_client):
        response = await strict_client.delete("/posts/1290")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_keeps_comments(self, test_client, memory_store, make_post, make_comment):
        post = memory_store.posts.save(make_post())
        memory_store.comments.save(make_comment(post_id=post.id))

        response = await test_client.delete(f"/posts/{post.id}")

        assert response.status_code == 200
        assert memory_store.comments.count() == 1


class TestPostComments:

    @pytest.mark.asyncio
    async def test_comments_for_post(self, test_client, memory_store, make_post, make_comment):
        post1 = memory_store.posts.save(make_post())
        post2 = memory_store.posts.save(make_post())
        memory_store.comments.save(make_comment(post_id=post1.id, author="testu", content="comment1"))
        memory_store.comments.save(make_comment(post_id=post2.id, author="testu", content="comment2"))
        memory_store.comments.save(make_comment(post_id=post1.id, author="testu", content="comment3"))

        response = await test_client.get(f"/posts/{post1.id}/comments")

        assert response.status_code == 200
        assert [c["content"] for c in response.json()] == ["comment1", "comment3"]
        assert all(c["postId"] == post1.id for c in response.json())
        assert memory_store.comments.count() == 3

    @pytest.mark.asyncio
    async def test_comments_for_unknown_post_is_empty(self, test_client):
        response = await test_client.get("/posts/77/comments")

        assert response.status_code == 200
        assert response.json() == []
