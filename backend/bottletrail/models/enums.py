"""
Enum definitions for the Bottle Trail API.

Event types stay plain strings on the wire so a malformed row can be skipped
by the engines instead of failing validation for the whole snapshot.
"""
from enum import Enum


class EventType(str, Enum):
    """Kinds of immutable bottle events."""
    CAST_AWAY = "cast_away"
    FOUND = "found"


class BottleStatus(str, Enum):
    """Cached status on the mutable bottle row."""
    ADRIFT = "adrift"
    FOUND = "found"


class TrailAction(str, Enum):
    """Classification of a trail marker."""
    CREATED = "created"
    FOUND = "found"
    RETOSSED = "retossed"


class TrailFilter(str, Enum):
    """Marker subsets a map view may request."""
    ALL = "all"
    CREATED = "created"
    FOUND = "found"
    RETOSSED = "retossed"


def normalize_type(type_str: str) -> str:
    """
    Normalize a type string for consistency.

    - Lowercase
    - Strip whitespace
    - Replace spaces and hyphens with underscores

    Examples:
        "Cast Away" -> "cast_away"
        " found " -> "found"
        "cast-away" -> "cast_away"
    """
    return type_str.lower().strip().replace(" ", "_").replace("-", "_")


def parse_event_type(raw: str | None) -> EventType | None:
    """Return the EventType for a raw value, or None when it is malformed."""
    if not raw:
        return None
    try:
        return EventType(normalize_type(raw))
    except ValueError:
        return None
