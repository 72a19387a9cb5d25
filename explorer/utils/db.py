# Async SQLite storage for the rate limiter's request slots
# explorer/utils/db.py
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from explorer.models.rate_limit import Base
from explorer.utils.config import settings


def make_session_factory(database_url: str):
    """Returns an async engine for the slot store and a session factory bound to it."""
    slot_engine = create_async_engine(database_url, echo=False)
    session_factory = sessionmaker(bind=slot_engine, class_=AsyncSession, expire_on_commit=False)
    return slot_engine, session_factory


async def create_slot_tables(slot_engine: AsyncEngine) -> None:
    # Idempotent: existing slot rows survive a restart.
    async with slot_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


engine, AsyncSessionLocal = make_session_factory(settings.database_url)
