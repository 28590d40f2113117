"""
KBlog Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── memory_store:   BlogStore on InMemoryRepository
    ├── sql_store:      BlogStore on SqlRepository (in-memory SQLite)
    ├── store:          parametrized over both backends
    ├── make_post / make_comment: entity factories
    ├── test_client:    HTTPX AsyncClient, reference error policy (500)
    ├── strict_client:  HTTPX AsyncClient, NOT_FOUND_STATUS=404
    └── backend_client: HTTPX AsyncClient over `store`, once per backend
"""

import os
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any kblog import: kblog.main builds its module-level app on import
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ.pop("NOT_FOUND_STATUS", None)

from kblog.config import Settings  # noqa: E402
from kblog.repositories.store import build_memory_store, build_sql_store  # noqa: E402
from kblog.schemas.blog import Comment, Post  # noqa: E402

SQLITE_MEMORY_URL = "sqlite+pysqlite:///:memory:"

# Naive by default; aware values are covered by dedicated round-trip tests
CREATED_AT = datetime(2017, 12, 16, 10, 30, 15, 123456)


# ══════════════════════════════════════════════════════════════════════════
# Stores
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def memory_store():
    store = build_memory_store()
    yield store
    store.clear()


@pytest.fixture
def sql_store():
    """A store on a private in-memory SQLite database, disposed after the test."""
    store = build_sql_store(SQLITE_MEMORY_URL)
    yield store
    store.close()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """
    Runs a test once per storage backend.

    Usage:
        def test_ids_are_unique(store, make_post):
            saved = store.posts.save(make_post())
    """
    if request.param == "sql":
        built = build_sql_store(SQLITE_MEMORY_URL)
    else:
        built = build_memory_store()
    yield built
    built.close()


# ══════════════════════════════════════════════════════════════════════════
# Entity Factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_post():
    def _make(title: str = "test post", content: str = "post from test", **kwargs) -> Post:
        return Post(title=title, content=content, created_at=kwargs.pop("created_at", CREATED_AT), **kwargs)
    return _make


@pytest.fixture
def make_comment():
    def _make(post_id: int = 1, author: str = "commentator1", content: str = "Bla bla bla", **kwargs) -> Comment:
        return Comment(
            post_id=post_id,
            author=author,
            content=content,
            created_at=kwargs.pop("created_at", CREATED_AT),
            **kwargs,
        )
    return _make


@pytest.fixture
def post_payload():
    """JSON body for POST /posts, as a client would send it."""
    return {"title": "test post", "content": "post from test", "createdAt": CREATED_AT.isoformat()}


@pytest.fixture
def comment_payload():
    def _payload(post_id: int = 1, content: str = "Bla bla bla") -> dict:
        return {
            "postId": post_id,
            "author": "commentator1",
            "content": content,
            "createdAt": CREATED_AT.isoformat(),
        }
    return _payload


# ══════════════════════════════════════════════════════════════════════════
# HTTP Clients
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(memory_store):
    """
    HTTPX AsyncClient talking to a fresh app wired to `memory_store`.

    Usage:
        async def test_list(test_client, memory_store):
            response = await test_client.get("/posts")
            assert response.status_code == 200
    """
    from kblog.main import create_app
    app = create_app(Settings(not_found_status=500), store=memory_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def strict_client(memory_store):
    """Same as test_client, but missing records answer 404."""
    from kblog.main import create_app
    app = create_app(Settings(not_found_status=404), store=memory_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def backend_client(store):
    """HTTPX AsyncClient over the parametrized `store`: runs once per backend."""
    from kblog.main import create_app
    app = create_app(Settings(not_found_status=500), store=store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
