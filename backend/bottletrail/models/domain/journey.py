"""Journey view models."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class JourneyReply(BaseModel):
    """A found event shown beneath the journey step whose epoch contains it."""
    id: Optional[str] = None
    message: str
    photo_url: Optional[str] = None
    created_at: datetime
    finder_name: str
    is_reply: bool = False
    parent_reply_id: Optional[str] = None


class JourneyStep(BaseModel):
    """One cast_away of a bottle and the replies of its epoch, newest first."""
    ordinal: int = Field(ge=1)
    event_id: Optional[str] = None
    message: str
    photo_url: Optional[str] = None
    created_at: datetime
    actor_name: str
    is_original: bool = False
    is_synthetic: bool = False
    lat: Optional[float] = None
    lon: Optional[float] = None
    replies: list[JourneyReply] = Field(default_factory=list)


class JourneyView(BaseModel):
    """Everything the journey screen needs for one bottle."""
    bottle_id: str
    steps: list[JourneyStep] = Field(default_factory=list)
    can_retoss: bool = False
