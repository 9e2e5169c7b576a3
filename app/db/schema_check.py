"""
Create any missing tables from the SQLAlchemy models.

Run once against a fresh database:
  DATABASE_URL=postgresql+asyncpg://... python -m app.db.schema_check

Existing tables are left untouched (no migrations).
"""
import asyncio
from typing import List

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

import app.core.models  # noqa: F401  registers every table on Base.metadata
from app.db.session import Base, engine


async def missing_tables(db_engine: AsyncEngine) -> List[str]:
    async with db_engine.connect() as conn:
        existing = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
    return [name for name in Base.metadata.tables if name not in existing]


async def ensure_schema(db_engine: AsyncEngine) -> List[str]:
    """Create missing tables; returns the names that were created."""
    missing = await missing_tables(db_engine)
    if missing:
        async with db_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    return missing


async def main() -> None:
    created = await ensure_schema(engine)
    if created:
        print("Created tables:", ", ".join(created))
    else:
        print("All tables present.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
