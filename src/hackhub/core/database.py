"""
Database Configuration

Async SQLAlchemy engine, session factory and declarative base.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from hackhub.core.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def _import_models() -> None:
    """Import every model module so the metadata knows about all tables."""
    from hackhub.modules.applicant_auth import models as _applicant_auth  # noqa: F401
    from hackhub.modules.applicants import models as _applicants  # noqa: F401
    from hackhub.modules.competitions import models as _competitions  # noqa: F401
    from hackhub.modules.notifications import models as _notifications  # noqa: F401
    from hackhub.modules.settings import models as _settings  # noqa: F401
    from hackhub.modules.submissions import models as _submissions  # noqa: F401
    from hackhub.modules.users import models as _users  # noqa: F401


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields a database session.

    The session is closed when the request finishes. Services commit
    explicitly; anything left uncommitted is rolled back on close.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Create tables that do not exist yet.

    Call this on application startup.
    """
    _import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine connection pool."""
    await engine.dispose()
