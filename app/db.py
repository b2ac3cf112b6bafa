import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings

logger = logging.getLogger(__name__)

_raw_url = settings.database_url

if _raw_url.startswith("postgres://"):
    _raw_url = _raw_url.replace("postgres://", "postgresql+asyncpg://", 1)
elif _raw_url.startswith("postgresql://"):
    _raw_url = _raw_url.replace("postgresql://", "postgresql+asyncpg://", 1)

engine = create_async_engine(_raw_url, pool_pre_ping=True)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

PLANNER_STATE_DDL = (
    "CREATE TABLE IF NOT EXISTS planner_state ("
    "client_id TEXT NOT NULL, "
    "slot TEXT NOT NULL, "
    "payload TEXT NOT NULL, "
    "updated_at TIMESTAMPTZ NOT NULL DEFAULT now(), "
    "PRIMARY KEY (client_id, slot))"
)


async def get_session() -> AsyncSession:  # type: ignore[misc]
    async with async_session() as session:
        yield session


async def ensure_schema() -> bool:
    """Create the planner_state table if missing.

    The store is best-effort, so an unreachable database is logged and
    reported as False instead of aborting startup.
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text(PLANNER_STATE_DDL))
    except (SQLAlchemyError, OSError):
        logger.warning("Could not create planner_state table; plan store disabled", exc_info=True)
        return False
    return True
