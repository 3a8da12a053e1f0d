"""
Tasklane Backend — Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, declarative Base and the
       per-request session dependency.
When:  The engine is built at import from DATABASE_URL; sessions are opened
       per request (get_db_session) or per startup task (the seed hook).

Transaction model:
    One request = one session = one transaction. Every handler in
    app.services.board_service only flushes; the commit (or rollback)
    happens here, so a handler's reads and writes are applied atomically.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.log_level == "DEBUG",
    }
    # SQLite URLs (local runs, tests) use SQLAlchemy's default SQLite pooling
    if not settings.database_driver.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

# expire_on_commit=False: records stay readable after the dependency commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for boards, columns and items."""


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency: one session per request.

    Commits after the handler returns; rolls back on any exception,
    including a NotFoundError raised after earlier writes in the same
    handler, then re-raises for the exception handlers.

    Example:
        @router.get("/boards")
        async def get_boards(db: AsyncSession = Depends(get_db_session)):
            return await board_service.get_boards(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close every pooled connection (application shutdown)."""
    await engine.dispose()
