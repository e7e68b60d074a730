"""Trail marker model."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from bottletrail.models.enums import BottleStatus, TrailAction


class TrailMarker(BaseModel):
    """A map point derived from a single bottle event."""
    id: str
    bottle_id: str
    action_type: TrailAction
    status: Optional[BottleStatus] = None
    lat: float
    lon: float
    message: str
    photo_url: Optional[str] = None
    created_at: datetime
    event_id: Optional[str] = None
    tosser_name: Optional[str] = None
    finder_name: Optional[str] = None
    is_offset: bool = False
