import os

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase


def normalize_database_url(url: str) -> str:
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def create_engine(database_url: str) -> AsyncEngine:
    url = normalize_database_url(database_url)

    engine_kwargs: dict = {"echo": False}
    if not _is_sqlite(url):
        engine_kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)

    return create_async_engine(url, **engine_kwargs)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def ensure_sqlite_directory(url: URL) -> None:
    """SQLite creates the database file but not its parent directory."""
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    directory = os.path.dirname(os.path.abspath(database))
    os.makedirs(directory, exist_ok=True)


class Base(DeclarativeBase):
    pass


async def create_tables(engine: AsyncEngine) -> None:
    ensure_sqlite_directory(engine.url)
    async with engine.begin() as conn:
        from floodscout.models import report  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)
