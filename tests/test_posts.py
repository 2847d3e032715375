"""Tests for post CRUD, pagination, search and view counting."""

import pytest
from httpx import AsyncClient


async def _headers(register, name: str = "Ann", email: str = "ann@x.com") -> dict[str, str]:
    token, _ = await register(name=name, email=email)
    return {"Authorization": f"Bearer {token}"}


async def _create_post(client: AsyncClient, headers: dict, **fields) -> dict:
    payload = {"title": "Untitled post", "body": "Some body text for the post."}
    payload.update(fields)
    resp = await client.post("/api/v1/posts", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ── Create / read ──────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_create_post_defaults(async_client: AsyncClient, register):
    headers = await _headers(register)
    post = await _create_post(async_client, headers, tags=["Python", " FastAPI "])

    assert post["category"] == "other"
    assert post["tags"] == ["python", "fastapi"]
    assert post["views"] == 0
    assert post["published"] is True
    assert post["image"] is None
    assert post["author"]["name"] == "Ann"
    assert "password" not in str(post["author"])


@pytest.mark.asyncio
async def test_create_post_validation(async_client: AsyncClient, register):
    headers = await _headers(register)
    resp = await async_client.post(
        "/api/v1/posts",
        json={"title": "Hi", "body": "too short", "category": "gossip"},
        headers=headers,
    )
    assert resp.status_code == 422
    fields = {e["field"] for e in resp.json()["errors"]}
    assert fields == {"title", "body", "category"}


@pytest.mark.asyncio
async def test_create_post_requires_auth(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/posts", json={"title": "Anonymous", "body": "Nobody wrote this post."}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_get_post_counts_each_view(async_client: AsyncClient, register):
    headers = await _headers(register)
    post = await _create_post(async_client, headers)

    first = await async_client.get(f"/api/v1/posts/{post['id']}")
    second = await async_client.get(f"/api/v1/posts/{post['id']}")
    assert first.status_code == second.status_code == 200
    assert first.json()["views"] == 1
    assert second.json()["views"] == 2


@pytest.mark.asyncio
async def test_get_post_marks_author_with_optional_auth(async_client: AsyncClient, register):
    ann = await _headers(register)
    bob = await _headers(register, name="Bob", email="bob@x.com")
    post = await _create_post(async_client, ann)

    anonymous = await async_client.get(f"/api/v1/posts/{post['id']}")
    as_author = await async_client.get(f"/api/v1/posts/{post['id']}", headers=ann)
    as_other = await async_client.get(f"/api/v1/posts/{post['id']}", headers=bob)
    bad_token = await async_client.get(
        f"/api/v1/posts/{post['id']}", headers={"Authorization": "Bearer garbage"}
    )

    assert anonymous.json()["is_author"] is False
    assert as_author.json()["is_author"] is True
    assert as_other.json()["is_author"] is False
    # Optional auth never rejects
    assert bad_token.status_code == 200
    assert bad_token.json()["is_author"] is False


@pytest.mark.asyncio
async def test_unpublished_post_visible_only_to_author(async_client: AsyncClient, register):
    ann = await _headers(register)
    draft = await _create_post(async_client, ann, published=False)

    public = await async_client.get(f"/api/v1/posts/{draft['id']}")
    assert public.status_code == 404

    own = await async_client.get(f"/api/v1/posts/{draft['id']}", headers=ann)
    assert own.status_code == 200


@pytest.mark.asyncio
async def test_get_missing_post(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/posts/424242")
    assert resp.status_code == 404
    assert resp.json()["kind"] == "NOT_FOUND"


# ── Update / delete ────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_author_can_patch_post(async_client: AsyncClient, register):
    headers = await _headers(register)
    post = await _create_post(async_client, headers, image="https://img.example/a.png")

    resp = await async_client.put(
        f"/api/v1/posts/{post['id']}",
        json={"title": "A better title", "tags": ["News"], "image": None},
        headers=headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["title"] == "A better title"
    assert data["body"] == post["body"]
    assert data["tags"] == ["news"]
    assert data["image"] is None
    assert data["author_id"] == post["author_id"]


@pytest.mark.asyncio
async def test_non_author_update_and_delete_look_like_missing(async_client: AsyncClient, register):
    ann = await _headers(register)
    bob = await _headers(register, name="Bob", email="bob@x.com")
    post = await _create_post(async_client, ann)

    foreign_put = await async_client.put(
        f"/api/v1/posts/{post['id']}", json={"title": "Bob was here"}, headers=bob
    )
    missing_put = await async_client.put(
        "/api/v1/posts/999999", json={"title": "Bob was here"}, headers=bob
    )
    assert foreign_put.status_code == missing_put.status_code == 404
    assert foreign_put.json() == missing_put.json()

    foreign_delete = await async_client.delete(f"/api/v1/posts/{post['id']}", headers=bob)
    missing_delete = await async_client.delete("/api/v1/posts/999999", headers=bob)
    assert foreign_delete.status_code == 404
    assert foreign_delete.json() == missing_delete.json()

    still_there = await async_client.get(f"/api/v1/posts/{post['id']}")
    assert still_there.json()["title"] == post["title"]


@pytest.mark.asyncio
async def test_author_can_delete_post(async_client: AsyncClient, register):
    headers = await _headers(register)
    post = await _create_post(async_client, headers)

    resp = await async_client.delete(f"/api/v1/posts/{post['id']}", headers=headers)
    assert resp.status_code == 200
    gone = await async_client.get(f"/api/v1/posts/{post['id']}")
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_my_posts_includes_drafts_and_filters_category(async_client: AsyncClient, register):
    ann = await _headers(register)
    bob = await _headers(register, name="Bob", email="bob@x.com")
    await _create_post(async_client, ann, title="Public tech", category="technology")
    await _create_post(async_client, ann, title="Draft life", category="lifestyle", published=False)
    await _create_post(async_client, bob, title="Bob's post")

    mine = await async_client.get("/api/v1/posts/my/posts", headers=ann)
    assert [p["title"] for p in mine.json()] == ["Draft life", "Public tech"]

    tech = await async_client.get("/api/v1/posts/my/posts?category=technology", headers=ann)
    assert [p["title"] for p in tech.json()] == ["Public tech"]


# ── Pagination ─────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_pagination_windows(async_client: AsyncClient, register):
    headers = await _headers(register)
    for i in range(25):
        await _create_post(async_client, headers, title=f"Post number {i:02d}")

    page1 = (await async_client.get("/api/v1/posts?page=1&limit=10")).json()
    assert len(page1["posts"]) == 10
    assert page1["posts"][0]["title"] == "Post number 24"
    assert page1["pagination"] == {
        "page": 1,
        "limit": 10,
        "total": 25,
        "total_pages": 3,
        "has_more": True,
    }

    page3 = (await async_client.get("/api/v1/posts?page=3&limit=10")).json()
    assert len(page3["posts"]) == 5
    assert page3["pagination"]["has_more"] is False

    page4 = (await async_client.get("/api/v1/posts?page=4&limit=10")).json()
    assert page4["posts"] == []
    assert page4["pagination"]["has_more"] is False
    assert page4["pagination"]["total"] == 25


@pytest.mark.asyncio
async def test_pagination_is_idempotent(async_client: AsyncClient, register):
    headers = await _headers(register)
    for i in range(7):
        await _create_post(async_client, headers, title=f"Stable post {i}")

    first = await async_client.get("/api/v1/posts?page=2&limit=3")
    second = await async_client.get("/api/v1/posts?page=2&limit=3")
    assert first.json() == second.json()


@pytest.mark.asyncio
async def test_listing_excludes_unpublished(async_client: AsyncClient, register):
    headers = await _headers(register)
    await _create_post(async_client, headers, title="Visible post")
    await _create_post(async_client, headers, title="Hidden draft", published=False)

    data = (await async_client.get("/api/v1/posts")).json()
    assert [p["title"] for p in data["posts"]] == ["Visible post"]
    assert data["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_pagination_rejects_bad_window(async_client: AsyncClient):
    assert (await async_client.get("/api/v1/posts?page=0")).status_code == 422
    assert (await async_client.get("/api/v1/posts?limit=0")).status_code == 422


@pytest.mark.asyncio
async def test_empty_collection(async_client: AsyncClient):
    data = (await async_client.get("/api/v1/posts")).json()
    assert data["posts"] == []
    assert data["pagination"]["total_pages"] == 0
    assert data["pagination"]["has_more"] is False


# ── Search ─────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_search_ranks_and_filters(async_client: AsyncClient, register):
    headers = await _headers(register)
    await _create_post(
        async_client, headers,
        title="Python tips",
        body="Python packaging and python typing, all about python.",
    )
    await _create_post(
        async_client, headers,
        title="Weekend cooking",
        body="A slow recipe, with one aside about python the snake.",
    )
    await _create_post(
        async_client, headers,
        title="Gardening notes",
        body="Tomatoes need sun, water and patience.",
    )
    await _create_post(
        async_client, headers,
        title="Python draft",
        body="Unpublished python thoughts that nobody should find.",
        published=False,
    )

    resp = await async_client.get("/api/v1/posts?search=python")
    assert resp.status_code == 200
    data = resp.json()
    assert "pagination" not in data
    assert data["query"] == "python"
    titles = [p["title"] for p in data["posts"]]
    assert titles == ["Python tips", "Weekend cooking"]
    scores = [p["score"] for p in data["posts"]]
    assert scores == sorted(scores, reverse=True)


@pytest.mark.asyncio
async def test_search_matches_plural_forms(async_client: AsyncClient, register):
    headers = await _headers(register)
    await _create_post(async_client, headers, title="Short stories", body="Three short stories for the train.")

    data = (await async_client.get("/api/v1/posts?search=story")).json()
    assert [p["title"] for p in data["posts"]] == ["Short stories"]


@pytest.mark.asyncio
async def test_blank_search_falls_back_to_pagination(async_client: AsyncClient, register):
    headers = await _headers(register)
    await _create_post(async_client, headers)

    data = (await async_client.get("/api/v1/posts?search=%20%20")).json()
    assert "pagination" in data
    assert len(data["posts"]) == 1


@pytest.mark.asyncio
async def test_search_with_wildcards_is_literal(async_client: AsyncClient, register):
    headers = await _headers(register)
    await _create_post(async_client, headers, title="Anything at all", body="Plain words only here.")

    data = (await async_client.get("/api/v1/posts?search=%25")).json()
    assert data["posts"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("title", "query"),
    [
        ("Привет мир", "Привет"),
        ("Привет мир", "привет"),
        ("Café culture downtown", "café"),
        ("東京 travel notes", "東京"),
    ],
)
async def test_search_finds_non_ascii_words(async_client: AsyncClient, register, title: str, query: str):
    headers = await _headers(register)
    await _create_post(async_client, headers, title=title, body="Some body text for the post.")
    await _create_post(async_client, headers, title="Unrelated entry", body="Nothing to see in here.")

    data = (await async_client.get("/api/v1/posts", params={"search": query})).json()
    assert [p["title"] for p in data["posts"]] == [title]
