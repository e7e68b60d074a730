"""
Database connection and initialization.
"""

import aiosqlite
from pathlib import Path
from bottletrail.config import settings
from bottletrail.logging import get_logger

logger = get_logger('database')


async def _table_columns(db: aiosqlite.Connection, table_name: str) -> set[str]:
    cursor = await db.execute(f"PRAGMA table_info({table_name})")
    rows = await cursor.fetchall()
    return {row[1] for row in rows}


async def init_db(db_path: str | None = None):
    """
    Initialize database with schema.

    :param db_path: Database file, defaults to settings.DATABASE_PATH
    :type db_path: str | None
    :return: None
    :rtype: None
    """
    database_path = Path(db_path or settings.DATABASE_PATH)
    database_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(database_path) as db:
        schema_path = Path(__file__).parent / "init_db.sql"
        with open(schema_path) as f:
            await db.executescript(f.read())
        # Rows written before reply threading existed lack parent_reply_id.
        event_columns = await _table_columns(db, "bottle_events")
        if "parent_reply_id" not in event_columns:
            logger.info("Applying migration: add bottle_events.parent_reply_id")
            await db.execute("ALTER TABLE bottle_events ADD COLUMN parent_reply_id TEXT")
        await db.commit()
        logger.info(f"Database initialized at {database_path}")

