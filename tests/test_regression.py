"""
Regression tests for issues found during code review.

1. Unique constraint violations must return 409 (not 500)
2. Slug collisions on update must not return 500
3. X-Query-Count header must report the actual query count
4. CORS must not set allow_credentials=true with allow_origins=*
5. A title slugifying to "feed" must not be shadowed by the feed route
6. Blank tag names must not become tags
7. limit=0 must fall back to the default page size
8. The pinned SQLAlchemy must accept lazy="noload" without warnings
"""
import warnings

import pytest
from httpx import AsyncClient
from sqlalchemy import ForeignKey
from sqlalchemy.exc import SADeprecationWarning
from sqlalchemy.orm import DeclarativeBase, Mapped, configure_mappers, mapped_column, relationship


async def _signup(client: AsyncClient, username: str, email: str | None = None):
    return await client.post("/api/users", json={
        "username": username,
        "email": email or f"{username}@example.com",
    })


# ---------------------------------------------------------------------------
# 1. Unique constraint violations -> 409
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_duplicate_username_returns_409(async_client: AsyncClient):
    assert (await _signup(async_client, "dup_user", "dup1@example.com")).status_code == 201
    resp = await _signup(async_client, "dup_user", "dup2@example.com")
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_duplicate_email_returns_409(async_client: AsyncClient):
    await _signup(async_client, "emailuser1", "same@example.com")
    resp = await _signup(async_client, "emailuser2", "same@example.com")
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_update_to_taken_username_returns_409(async_client: AsyncClient):
    await _signup(async_client, "taken")
    mover = (await _signup(async_client, "mover")).json()
    resp = await async_client.put(
        "/api/user", headers={"X-User-Id": str(mover["id"])}, json={"username": "taken"},
    )
    assert resp.status_code == 409


# ---------------------------------------------------------------------------
# 2. Slug collision on update
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_article_slug_collision_handled(async_client: AsyncClient):
    """Retitling an article to another article's title yields a suffixed slug."""
    user_id = (await _signup(async_client, "slug_col")).json()["id"]
    headers = {"X-User-Id": str(user_id)}

    for title in ("First Article", "Second Article"):
        resp = await async_client.post("/api/articles", headers=headers, json={
            "title": title, "body": "Content",
        })
        assert resp.status_code == 201

    resp = await async_client.put("/api/articles/second-article", headers=headers, json={
        "title": "First Article",
    })
    assert resp.status_code == 200
    assert resp.json()["article"]["slug"] == "first-article-2"


@pytest.mark.asyncio
async def test_update_with_same_title_keeps_slug(async_client: AsyncClient):
    user_id = (await _signup(async_client, "same_title")).json()["id"]
    headers = {"X-User-Id": str(user_id)}
    await async_client.post("/api/articles", headers=headers, json={
        "title": "Unchanged", "body": "Content",
    })

    resp = await async_client.put("/api/articles/unchanged", headers=headers, json={
        "title": "Unchanged", "body": "Edited",
    })
    assert resp.json()["article"]["slug"] == "unchanged"


# ---------------------------------------------------------------------------
# 3. X-Query-Count reports actual query count
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_query_count_header_exact_for_anonymous_article_list(async_client: AsyncClient):
    """
    Anonymous article list issues: COUNT + SELECT(joinedload author) +
    selectinload(tags) + favorites count = 4 queries.  No per-row queries.
    """
    user_id = (await _signup(async_client, "qctest")).json()["id"]
    for title in ("QC One", "QC Two", "QC Three"):
        await async_client.post("/api/articles", headers={"X-User-Id": str(user_id)}, json={
            "title": title, "body": "Content", "tagList": ["qc"],
        })

    resp = await async_client.get("/api/articles")
    assert resp.status_code == 200
    count = int(resp.headers["x-query-count"])
    assert count == 4, f"Expected exactly 4 queries for article list, got {count}"
    assert "x-response-time-ms" in resp.headers


# ---------------------------------------------------------------------------
# 4. CORS headers
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_cors_no_credentials_with_wildcard_origin(async_client: AsyncClient):
    resp = await async_client.options(
        "/api/articles",
        headers={
            "Origin": "https://example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    cred_header = resp.headers.get("access-control-allow-credentials", "").lower()
    assert cred_header != "true"


# ---------------------------------------------------------------------------
# 5. A title slugifying to a fixed route name stays fetchable by slug
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_article_titled_feed_is_fetchable_by_slug(async_client: AsyncClient):
    user_id = (await _signup(async_client, "feedwriter")).json()["id"]
    resp = await async_client.post("/api/articles", headers={"X-User-Id": str(user_id)}, json={
        "title": "Feed", "body": "Not the feed route",
    })
    assert resp.status_code == 201
    slug = resp.json()["article"]["slug"]
    assert slug == "feed-2"

    resp = await async_client.get(f"/api/articles/{slug}")
    assert resp.status_code == 200
    assert resp.json()["article"]["title"] == "Feed"


# ---------------------------------------------------------------------------
# 6. Blank tag names are dropped, never stored
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_blank_tag_names_are_dropped(async_client: AsyncClient):
    headers = {"X-User-Id": str((await _signup(async_client, "blanktags")).json()["id"])}
    resp = await async_client.post("/api/articles", headers=headers, json={
        "title": "Blank Tags", "body": "Body", "tagList": ["", "  "],
    })
    assert resp.status_code == 201
    assert resp.json()["article"]["tagList"] == []

    resp = await async_client.put("/api/articles/blank-tags", headers=headers, json={
        "tagList": [" python ", ""],
    })
    assert resp.json()["article"]["tagList"] == ["python"]
    assert (await async_client.get("/api/tags")).json() == {"tags": ["python"]}


# ---------------------------------------------------------------------------
# 7. limit=0 means the default page size, not an empty page
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_zero_limit_uses_default_page_size(async_client: AsyncClient):
    headers = {"X-User-Id": str((await _signup(async_client, "zerolimit")).json()["id"])}
    for title in ("Zero One", "Zero Two", "Zero Three"):
        await async_client.post("/api/articles", headers=headers, json={"title": title, "body": "Body"})

    resp = await async_client.get("/api/articles", params={"limit": "0", "offset": "0"})
    assert resp.status_code == 200
    assert resp.json()["articlesCount"] == 3
    assert len(resp.json()["articles"]) == 3


# ---------------------------------------------------------------------------
# 8. noload relationships configure without deprecation warnings
# ---------------------------------------------------------------------------

def test_noload_relationship_does_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error", SADeprecationWarning)

        class _Base(DeclarativeBase):
            pass

        class Shelf(_Base):
            __tablename__ = "shelf"
            id: Mapped[int] = mapped_column(primary_key=True)
            books: Mapped[list["Book"]] = relationship(back_populates="shelf", lazy="noload")

        class Book(_Base):
            __tablename__ = "book"
            id: Mapped[int] = mapped_column(primary_key=True)
            shelf_id: Mapped[int] = mapped_column(ForeignKey("shelf.id"))
            shelf: Mapped[Shelf] = relationship(back_populates="books", lazy="noload")

        configure_mappers()

    assert Shelf.books.property.lazy == "noload"
