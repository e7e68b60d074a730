"""Read-side service: fetch a snapshot, then run the pure reconstruction engines."""

from bottletrail.logging import get_logger
from bottletrail.models import (
    ChatThread,
    Conversation,
    GlobalStats,
    JourneyView,
    StatsReconciliation,
    TrailFilter,
    TrailMarker,
    UserStats,
)
from bottletrail.services.conversations import build_chat_thread, build_conversations
from bottletrail.services.event_store import EventStoreService
from bottletrail.services.journey import build_journey_view
from bottletrail.services.stats import compute_global_stats, compute_stats, reconcile_stats
from bottletrail.services.trail import build_trail

logger = get_logger('services.reconstruction')


class ReconstructionService:
    """Every call re-reads the store and recomputes from scratch; nothing is cached."""

    def __init__(self, store: EventStoreService):
        self.store = store

    async def get_journey(self, bottle_id: str) -> JourneyView | None:
        bottle = await self.store.get_bottle(bottle_id)
        events = await self.store.list_events(bottle_id)
        if bottle is None and not events:
            return None
        return build_journey_view(bottle_id, events, bottle)

    async def get_chat_thread(self, bottle_id: str) -> ChatThread | None:
        bottle = await self.store.get_bottle(bottle_id)
        if bottle is None:
            return None
        events = await self.store.list_events(bottle_id)
        return build_chat_thread(bottle, events)

    async def get_trail(self, action_filter: TrailFilter = TrailFilter.ALL) -> list[TrailMarker]:
        snapshot = await self.store.snapshot()
        markers = build_trail(snapshot.bottles, snapshot.events, action_filter)
        logger.debug(f"Built trail with {len(markers)} markers for filter {TrailFilter(action_filter).value}")
        return markers

    async def get_user_stats(self, username: str) -> UserStats:
        events = await self.store.list_events()
        return compute_stats(events, username)

    async def get_global_stats(self) -> GlobalStats:
        snapshot = await self.store.snapshot()
        return compute_global_stats(snapshot.bottles, snapshot.events)

    async def get_conversations(self, merge_by_hop: bool = False) -> list[Conversation]:
        snapshot = await self.store.snapshot()
        return build_conversations(snapshot.bottles, snapshot.events, merge_by_hop=merge_by_hop)

    async def reconcile_stats(self) -> StatsReconciliation:
        events = await self.store.list_events()
        counters = await self.store.list_profile_counters()
        result = reconcile_stats(events, counters)
        logger.info(
            f"Stats reconciliation checked {result.checked_users} users, "
            f"{len(result.discrepancies)} divergent"
        )
        return result
