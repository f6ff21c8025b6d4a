"""Script to initialize the database without Alembic (development only)."""

import asyncio

from sqlalchemy import text

from app.database import engine
from app.models import metadata

NO_OVERLAP_DDL = """
ALTER TABLE appointments
ADD CONSTRAINT appointments_no_overlap
EXCLUDE USING gist (
    doctor_id WITH =,
    tstzrange(start_time, end_time, '[)') WITH &&
)
WHERE (status <> 'cancelled')
"""


async def init_db() -> None:
    """Initialize the database by creating all tables and constraints."""
    async with engine.begin() as conn:
        await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "pgcrypto"'))
        await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "btree_gist"'))

        # Create all tables
        await conn.run_sync(metadata.create_all)

        exists = await conn.scalar(
            text("SELECT 1 FROM pg_constraint WHERE conname = 'appointments_no_overlap'")
        )
        if not exists:
            await conn.execute(text(NO_OVERLAP_DDL))

    await engine.dispose()
    print("✓ Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_db())
