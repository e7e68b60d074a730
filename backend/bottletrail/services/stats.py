"""
Stats recomputation from the event log.

The write path keeps incremental counters on user_profiles. The functions
here rebuild the same numbers from scratch and are the reference those
counters are checked against.
"""

from collections.abc import Iterable

from bottletrail.logging import get_logger
from bottletrail.models import (
    Bottle,
    BottleEvent,
    BottleStatus,
    EventType,
    GlobalStats,
    ProfileCounters,
    StatsDiscrepancy,
    StatsReconciliation,
    TrailAction,
    UserStats,
)
from bottletrail.services.history import group_by_bottle, replay

logger = get_logger('services.stats')


def compute_all_user_stats(events: Iterable[BottleEvent]) -> dict[str, UserStats]:
    """
    Attribute every event to its named actor.

    A cast_away counts as created only when it is the bottle's first
    cast_away and its author's first on that bottle; any other cast_away is
    a retoss. Every found event, reply or not, counts for its finder.
    """
    counters: dict[str, dict[str, int]] = {}

    def _bump(username: str, key: str) -> None:
        counters.setdefault(username, {"created": 0, "found": 0, "retossed": 0})[key] += 1

    for bottle_events in group_by_bottle(events).values():
        for event, state in replay(bottle_events):
            if state.last_event_type == EventType.CAST_AWAY:
                if not event.tosser_name:
                    continue
                if state.last_action == TrailAction.CREATED and state.last_first_by_author:
                    _bump(event.tosser_name, "created")
                else:
                    _bump(event.tosser_name, "retossed")
            elif event.finder_name:
                _bump(event.finder_name, "found")

    return {username: UserStats(**counts) for username, counts in sorted(counters.items())}


def compute_stats(events: Iterable[BottleEvent], username: str) -> UserStats:
    """
    Lifetime created/found/retossed counts for one user.

    :param events: Full event log
    :type events: Iterable[BottleEvent]
    :param username: Display name matched against tosser_name and finder_name
    :type username: str
    :return: Recomputed counters, all zero for an unknown user
    :rtype: UserStats
    """
    return compute_all_user_stats(events).get(username, UserStats())


def compute_global_stats(bottles: Iterable[Bottle], events: Iterable[BottleEvent]) -> GlobalStats:
    bottles = list(bottles)
    total_found = 0
    total_retossed = 0
    for bottle_events in group_by_bottle(events).values():
        for _, state in replay(bottle_events):
            if state.last_action == TrailAction.FOUND:
                total_found += 1
            elif state.last_action == TrailAction.RETOSSED:
                total_retossed += 1
    return GlobalStats(
        total_bottles=len(bottles),
        total_found=total_found,
        total_retossed=total_retossed,
        active_bottles=sum(1 for bottle in bottles if bottle.status == BottleStatus.ADRIFT),
    )


def reconcile_stats(
    events: Iterable[BottleEvent],
    counters: Iterable[ProfileCounters],
) -> StatsReconciliation:
    """
    Compare each profile's incremental counters with the recomputed stats.

    :param events: Full event log
    :type events: Iterable[BottleEvent]
    :param counters: Counters as stored by the write path
    :type counters: Iterable[ProfileCounters]
    :return: Every user whose counters diverge from the log
    :rtype: StatsReconciliation
    """
    recomputed_by_user = compute_all_user_stats(events)
    discrepancies: list[StatsDiscrepancy] = []
    checked = 0
    for profile in counters:
        checked += 1
        recorded = profile.as_stats()
        recomputed = recomputed_by_user.get(profile.username, UserStats())
        if recorded != recomputed:
            logger.warning(
                f"Stats divergence for {profile.username}: "
                f"recorded={recorded.model_dump()} recomputed={recomputed.model_dump()}"
            )
            discrepancies.append(StatsDiscrepancy(
                username=profile.username,
                recorded=recorded,
                recomputed=recomputed,
            ))

    return StatsReconciliation(
        checked_users=checked,
        discrepancies=discrepancies,
        consistent=not discrepancies,
    )
