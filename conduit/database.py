from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from conduit.config import settings
from conduit.middleware import install_query_counter


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    Turn on ``PRAGMA foreign_keys`` for every new SQLite connection.

    SQLite ignores ``ON DELETE CASCADE`` unless the pragma is set per
    connection; without it deleting an article would leave its comments,
    favorites and tag links behind.  No-op for other dialects.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Module-level engine variable allows tests to override with a test engine.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

install_query_counter(engine)
enable_sqlite_foreign_keys(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
