"""Domain models: the event log inputs and the views derived from them."""

from bottletrail.models.domain.bottle import Bottle, BottleEvent, EventSnapshot
from bottletrail.models.domain.journey import JourneyReply, JourneyStep, JourneyView
from bottletrail.models.domain.trail import TrailMarker
from bottletrail.models.domain.stats import (
    UserStats,
    GlobalStats,
    ProfileCounters,
    StatsDiscrepancy,
    StatsReconciliation,
)
from bottletrail.models.domain.conversation import Conversation, ChatMessage, ChatThread

__all__ = [
    "Bottle", "BottleEvent", "EventSnapshot",
    "JourneyReply", "JourneyStep", "JourneyView",
    "TrailMarker",
    "UserStats", "GlobalStats", "ProfileCounters", "StatsDiscrepancy", "StatsReconciliation",
    "Conversation", "ChatMessage", "ChatThread",
]
