"""Builders for bottles, events and seeded databases used across the tests."""

from datetime import datetime, timedelta, timezone

import aiosqlite

from bottletrail.database.db import init_db
from bottletrail.models import Bottle, BottleEvent, ProfileCounters

T0 = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def at(minutes: float) -> datetime:
    return T0 + timedelta(minutes=minutes)


def make_bottle(bottle_id: str = "B1", **overrides) -> Bottle:
    data = {
        "id": bottle_id,
        "status": "adrift",
        "message": "Hello from the sea",
        "photo_url": None,
        "created_at": T0,
        "lat": 40.7128,
        "lon": -74.0060,
        "creator_name": None,
        "tosser_name": None,
    }
    data.update(overrides)
    return Bottle(**data)


def make_event(
    bottle_id: str,
    event_type: str,
    minutes: float,
    event_id: str | None = "auto",
    **overrides,
) -> BottleEvent:
    data = {
        "id": f"{bottle_id}-e{int(minutes * 10)}" if event_id == "auto" else event_id,
        "bottle_id": bottle_id,
        "event_type": event_type,
        "lat": 40.7128,
        "lon": -74.0060,
        "created_at": at(minutes),
    }
    data.update(overrides)
    return BottleEvent(**data)


def cast_away(bottle_id: str, minutes: float, tosser: str | None = None, message: str | None = "Tossed", **kw) -> BottleEvent:
    return make_event(bottle_id, "cast_away", minutes, tosser_name=tosser, message=message, **kw)


def found(bottle_id: str, minutes: float, finder: str | None = None, message: str | None = "Bottle found", **kw) -> BottleEvent:
    return make_event(bottle_id, "found", minutes, finder_name=finder, message=message, **kw)


def reply(bottle_id: str, minutes: float, finder: str | None = None, text: str = "Hi there", **kw) -> BottleEvent:
    return found(bottle_id, minutes, finder=finder, message=f"REPLY: {text}", **kw)


def scenario_b1() -> tuple[Bottle, list[BottleEvent]]:
    """Alice tosses, Bob replies and retosses, Carol replies."""
    bottle = make_bottle("B1", creator_name="Alice", message="Hello from Alice", status="found")
    events = [
        cast_away("B1", 0, tosser="Alice", message="Hello from Alice"),
        reply("B1", 10, finder="Bob", text="Hi Alice, Bob here"),
        cast_away("B1", 20, tosser="Bob", message="Onward from Bob"),
        reply("B1", 30, finder="Carol", text="Carol found it"),
    ]
    return bottle, events


async def seed_database(
    db_path: str,
    bottles: list[Bottle],
    events: list[BottleEvent],
    profiles: list[ProfileCounters] = (),
) -> None:
    await init_db(db_path)
    async with aiosqlite.connect(db_path) as db:
        for bottle in bottles:
            await db.execute(
                """INSERT INTO bottles
                   (id, status, message, photo_url, created_at, lat, lon, creator_name, tosser_name)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    bottle.id,
                    bottle.status.value,
                    bottle.message,
                    bottle.photo_url,
                    bottle.created_at.isoformat(),
                    bottle.lat,
                    bottle.lon,
                    bottle.creator_name,
                    bottle.tosser_name,
                ),
            )
        for event in events:
            await db.execute(
                """INSERT INTO bottle_events
                   (id, bottle_id, event_type, lat, lon, message, photo_url, created_at, tosser_name, finder_name, parent_reply_id)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    event.id,
                    event.bottle_id,
                    event.event_type,
                    event.lat,
                    event.lon,
                    event.message,
                    event.photo_url,
                    event.created_at.isoformat(),
                    event.tosser_name,
                    event.finder_name,
                    event.parent_reply_id,
                ),
            )
        for index, profile in enumerate(profiles):
            await db.execute(
                """INSERT INTO user_profiles
                   (id, username, total_bottles_created, total_bottles_found, total_bottles_retossed, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    f"user-{index}",
                    profile.username,
                    profile.total_bottles_created,
                    profile.total_bottles_found,
                    profile.total_bottles_retossed,
                    T0.isoformat(),
                    T0.isoformat(),
                ),
            )
        await db.commit()
