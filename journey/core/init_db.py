from sqlalchemy.ext.asyncio import AsyncEngine

from journey.core.database import engine as default_engine, Base
from journey.models import Trip, Participant, Activity, Link  # noqa: F401  (register tables)


async def init_db(engine: AsyncEngine = default_engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
