"""Read-only access to the bottle tables and the append-only event log."""

import aiosqlite

from bottletrail.logging import get_logger
from bottletrail.models import Bottle, BottleEvent, EventSnapshot, ProfileCounters

logger = get_logger('services.event_store')


def _row_to_bottle(row: dict) -> Bottle:
    return Bottle(
        id=row["id"],
        status=row["status"],
        message=row.get("message"),
        photo_url=row.get("photo_url"),
        created_at=row["created_at"],
        lat=row["lat"],
        lon=row["lon"],
        creator_name=row.get("creator_name"),
        tosser_name=row.get("tosser_name"),
    )


def _row_to_event(row: dict) -> BottleEvent:
    return BottleEvent(
        id=row.get("id"),
        bottle_id=row["bottle_id"],
        event_type=row["event_type"],
        lat=row["lat"],
        lon=row["lon"],
        message=row.get("message"),
        photo_url=row.get("photo_url"),
        created_at=row["created_at"],
        tosser_name=row.get("tosser_name"),
        finder_name=row.get("finder_name"),
        parent_reply_id=row.get("parent_reply_id"),
    )


def _row_to_counters(row: dict) -> ProfileCounters:
    return ProfileCounters(
        username=row["username"],
        total_bottles_created=row["total_bottles_created"],
        total_bottles_found=row["total_bottles_found"],
        total_bottles_retossed=row["total_bottles_retossed"],
    )


class EventStoreService:
    """Snapshot source for the reconstruction engines. Never writes."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def _get_db(self) -> aiosqlite.Connection:
        db = await aiosqlite.connect(self.db_path)
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys = ON")
        return db

    async def list_bottles(self) -> list[Bottle]:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT * FROM bottles ORDER BY created_at ASC, id ASC")
            rows = await cursor.fetchall()
            return [_row_to_bottle(dict(r)) for r in rows]
        finally:
            await db.close()

    async def get_bottle(self, bottle_id: str) -> Bottle | None:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT * FROM bottles WHERE id = ?", (bottle_id,))
            row = await cursor.fetchone()
            return _row_to_bottle(dict(row)) if row else None
        finally:
            await db.close()

    async def list_events(self, bottle_id: str | None = None) -> list[BottleEvent]:
        """
        Events oldest first; rowid breaks timestamp ties in insertion order.

        :param bottle_id: Restrict to one bottle
        :type bottle_id: str | None
        :return: Events sorted by created_at ascending
        :rtype: list[BottleEvent]
        """
        db = await self._get_db()
        try:
            if bottle_id is None:
                cursor = await db.execute(
                    "SELECT * FROM bottle_events ORDER BY created_at ASC, rowid ASC"
                )
            else:
                cursor = await db.execute(
                    """SELECT * FROM bottle_events
                       WHERE bottle_id = ?
                       ORDER BY created_at ASC, rowid ASC""",
                    (bottle_id,),
                )
            rows = await cursor.fetchall()
            return [_row_to_event(dict(r)) for r in rows]
        finally:
            await db.close()

    async def list_profile_counters(self) -> list[ProfileCounters]:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                """SELECT username, total_bottles_created, total_bottles_found, total_bottles_retossed
                   FROM user_profiles
                   ORDER BY username ASC"""
            )
            rows = await cursor.fetchall()
            return [_row_to_counters(dict(r)) for r in rows]
        finally:
            await db.close()

    async def snapshot(self) -> EventSnapshot:
        bottles = await self.list_bottles()
        events = await self.list_events()
        logger.debug(f"Loaded snapshot with {len(bottles)} bottles and {len(events)} events")
        return EventSnapshot(bottles=bottles, events=events)
