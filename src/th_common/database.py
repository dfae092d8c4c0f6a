from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Shared declarative base: one table per collection (users, trades, notifications)."""

    pass


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine, making sure a SQLite file has a directory to live in."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
        return create_async_engine(url, echo=echo)
    return create_async_engine(url, echo=echo, pool_size=20, max_overflow=10)


engine: AsyncEngine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def create_tables(target: AsyncEngine | None = None) -> None:
    """Create any missing tables. Alembic stays the authoritative DDL for Postgres."""
    # ORM modules register their tables on Base.metadata when imported
    import src.th_gateway.user.db_models  # noqa: F401
    import src.th_notification.infrastructure.db_models  # noqa: F401
    import src.th_trade.infrastructure.db_models  # noqa: F401

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session
