"""
Bottle Trail models.

Usage:
    from bottletrail.models import Bottle, BottleEvent, EventSnapshot
    from bottletrail.models import EventType, TrailAction, TrailFilter
    from bottletrail.models import JourneyStep, TrailMarker, UserStats, Conversation
"""

# --- Enums & utilities ---
from bottletrail.models.enums import (
    EventType,
    BottleStatus,
    TrailAction,
    TrailFilter,
    normalize_type,
    parse_event_type,
)

# --- Domain models ---
from bottletrail.models.domain import (
    Bottle, BottleEvent, EventSnapshot,
    JourneyReply, JourneyStep, JourneyView,
    TrailMarker,
    UserStats, GlobalStats, ProfileCounters, StatsDiscrepancy, StatsReconciliation,
    Conversation, ChatMessage, ChatThread,
)

__all__ = [
    # Enums
    "EventType", "BottleStatus", "TrailAction", "TrailFilter",
    "normalize_type", "parse_event_type",
    # Domain
    "Bottle", "BottleEvent", "EventSnapshot",
    "JourneyReply", "JourneyStep", "JourneyView",
    "TrailMarker",
    "UserStats", "GlobalStats", "ProfileCounters", "StatsDiscrepancy", "StatsReconciliation",
    "Conversation", "ChatMessage", "ChatThread",
]
