"""Conversation and chat models."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class Conversation(BaseModel):
    """A reply-bearing hop of a bottle's journey."""
    id: str
    bottle_id: str
    hop_number: int = Field(ge=0)
    reply_event_id: Optional[str] = None
    found_event_id: Optional[str] = None
    original_message: str
    original_creator: str
    original_created_at: datetime
    original_photo_url: Optional[str] = None
    last_message: str
    last_message_date: datetime
    last_message_sender: str
    reply_count: int = 1
    has_unread: bool = False


class ChatMessage(BaseModel):
    """One bubble of a bottle's chat thread."""
    id: str
    message: str
    sender: str
    created_at: datetime
    photo_url: Optional[str] = None
    is_original: bool = False


class ChatThread(BaseModel):
    """The original bottle message followed by every reply, oldest first."""
    bottle_id: str
    messages: list[ChatMessage] = Field(default_factory=list)
