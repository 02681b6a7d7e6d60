"""Engine and session factory shared by the API and the maintenance worker."""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from support_desk.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

# Services commit explicitly; loaded rows stay usable after a commit
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def init_db() -> None:
    """Register the models and check that the database answers.

    The schema itself is owned by the Alembic revisions.
    """
    import support_desk.models  # noqa: F401

    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info(f"Database reachable ({engine.url.render_as_string(hide_password=True)})")
