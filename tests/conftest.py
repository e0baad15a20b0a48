"""
Test infrastructure for the Conduit API.

Strategy
--------
- SQLite in-memory via aiosqlite, so no Postgres is needed in CI.
- StaticPool makes every session share the one in-memory connection
  (an in-memory SQLite database is connection-scoped).
- ``PRAGMA foreign_keys=ON`` is installed on the test engine so article
  deletion cascades to comments, favorites and tag links exactly as it
  does on Postgres.
- ``get_db`` is overridden to use the test session factory.
- Tables are created before and dropped after each test.
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from conduit.database import Base, enable_sqlite_foreign_keys, get_db
from conduit.main import app
from conduit.middleware import install_query_counter
from conduit.models import User

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)
enable_sqlite_foreign_keys(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live session for service-level tests (no HTTP layer)."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def make_user(db_session: AsyncSession):
    """Factory fixture: ``await make_user("alice")`` inserts and returns a User."""

    async def _make_user(username: str, **fields) -> User:
        user = User(username=username, email=f"{username}@example.com", **fields)
        db_session.add(user)
        await db_session.flush()
        return user

    return _make_user
