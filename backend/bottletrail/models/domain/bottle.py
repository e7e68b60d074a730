"""Bottle and bottle event domain models."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from bottletrail.models.enums import BottleStatus


class Bottle(BaseModel):
    """The mutable bottle row: a cache of the most recent cast_away/found event."""
    id: str
    status: BottleStatus = BottleStatus.ADRIFT
    message: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime
    lat: float
    lon: float
    creator_name: Optional[str] = None
    tosser_name: Optional[str] = None


class BottleEvent(BaseModel):
    """An immutable fact about a bottle. The event log is the only source of history."""
    id: Optional[str] = None
    bottle_id: str
    event_type: str
    lat: float
    lon: float
    message: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime
    tosser_name: Optional[str] = None
    finder_name: Optional[str] = None
    parent_reply_id: Optional[str] = None


class EventSnapshot(BaseModel):
    """Both flat collections as read from the event store in one pass."""
    bottles: list[Bottle] = Field(default_factory=list)
    events: list[BottleEvent] = Field(default_factory=list)

    def bottle_by_id(self, bottle_id: str) -> Bottle | None:
        for bottle in self.bottles:
            if bottle.id == bottle_id:
                return bottle
        return None
