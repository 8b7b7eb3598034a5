"""Async database engine factory."""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Build an async engine for ``database_url``.

    Pool sizing applies to server databases only; SQLite keeps its default pool.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return create_async_engine(database_url, echo=echo)
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create the directory tables (for dev/testing only; use Alembic in production)."""
    import tenantscope.models.database  # noqa: F401  registers the tables

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
