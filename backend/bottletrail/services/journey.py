"""Journey reconstruction: one step per cast_away, replies grouped by epoch."""

from collections.abc import Iterable
from datetime import datetime

from bottletrail.config import settings
from bottletrail.logging import get_logger
from bottletrail.models import (
    Bottle,
    BottleEvent,
    BottleStatus,
    EventType,
    JourneyReply,
    JourneyStep,
    JourneyView,
)
from bottletrail.services.history import (
    MissingBottleFieldError,
    creator_display_name,
    is_found_sentinel,
    is_reply,
    replay,
    strip_reply_prefix,
)

logger = get_logger('services.journey')


def _in_epoch(moment: datetime, start: datetime | None, end: datetime | None) -> bool:
    # Half-open [start, end); None means unbounded on that side.
    if start is not None and moment < start:
        return False
    if end is not None and moment >= end:
        return False
    return True


def _to_reply(event: BottleEvent) -> JourneyReply:
    return JourneyReply(
        id=event.id,
        message=strip_reply_prefix(event.message),
        photo_url=event.photo_url,
        created_at=event.created_at,
        finder_name=event.finder_name or settings.ANONYMOUS_NAME,
        is_reply=is_reply(event),
        parent_reply_id=event.parent_reply_id,
    )


def _epoch_replies(
    found_events: list[BottleEvent],
    start: datetime | None,
    end: datetime | None,
) -> list[JourneyReply]:
    members = [
        event for event in found_events
        if _in_epoch(event.created_at, start, end) and not is_found_sentinel(event)
    ]
    # Newest first: the latest reaction surfaces at the top of each step.
    members.sort(key=lambda event: event.created_at, reverse=True)
    return [_to_reply(event) for event in members]


def _required_message(bottle_id: str, *candidates: str | None) -> str:
    for candidate in candidates:
        if candidate:
            return candidate
    raise MissingBottleFieldError(bottle_id, "message")


def _synthetic_step(
    bottle_id: str,
    bottle: Bottle | None,
    found_events: list[BottleEvent],
) -> JourneyStep:
    if bottle is None:
        raise MissingBottleFieldError(bottle_id, "message")
    return JourneyStep(
        ordinal=1,
        message=_required_message(bottle_id, bottle.message),
        photo_url=bottle.photo_url,
        created_at=bottle.created_at,
        actor_name=creator_display_name(bottle) or settings.ORIGINAL_CREATOR_LABEL,
        is_original=True,
        is_synthetic=True,
        lat=bottle.lat,
        lon=bottle.lon,
        replies=_epoch_replies(found_events, None, None),
    )


def build_journey(
    bottle_id: str,
    events: Iterable[BottleEvent],
    bottle: Bottle | None = None,
) -> list[JourneyStep]:
    """
    Rebuild a bottle's journey from its event log, oldest step first.

    Events of other bottles are ignored, so the full snapshot may be passed.
    A bottle without any cast_away event (legacy rows, failed logging) yields
    a single synthetic step built from its cached fields.

    :param bottle_id: Bottle to reconstruct
    :type bottle_id: str
    :param events: Event log, any order
    :type events: Iterable[BottleEvent]
    :param bottle: Cached bottle row used as fallback
    :type bottle: Bottle | None
    :return: Journey steps with ordinals 1..n
    :rtype: list[JourneyStep]
    :raises MissingBottleFieldError: If a step has no message anywhere
    """
    history = list(replay(event for event in events if event.bottle_id == bottle_id))
    cast_aways = [(event, state) for event, state in history if state.last_event_type == EventType.CAST_AWAY]
    found_events = [event for event, state in history if state.last_event_type == EventType.FOUND]

    if not cast_aways:
        logger.debug(f"Bottle {bottle_id} has no cast_away events, using cached row")
        return [_synthetic_step(bottle_id, bottle, found_events)]

    steps: list[JourneyStep] = []
    for index, (cast_event, state) in enumerate(cast_aways):
        is_original = index == 0
        # The first epoch is unbounded below so no find can fall outside every step.
        start = None if is_original else cast_event.created_at
        end = cast_aways[index + 1][0].created_at if index + 1 < len(cast_aways) else None

        if is_original:
            message = _required_message(bottle_id, cast_event.message, bottle.message if bottle else None)
            photo_url = cast_event.photo_url or (bottle.photo_url if bottle else None)
            actor_name = creator_display_name(bottle, cast_event) or settings.ORIGINAL_CREATOR_LABEL
        else:
            # The cached row holds the latest toss's text, never an earlier one.
            message = cast_event.message or settings.NO_MESSAGE_PLACEHOLDER
            photo_url = cast_event.photo_url
            actor_name = cast_event.tosser_name or settings.ANONYMOUS_NAME

        steps.append(JourneyStep(
            ordinal=state.hop_number,
            event_id=cast_event.id,
            message=message,
            photo_url=photo_url,
            created_at=cast_event.created_at,
            actor_name=actor_name,
            is_original=is_original,
            lat=cast_event.lat,
            lon=cast_event.lon,
            replies=_epoch_replies(found_events, start, end),
        ))
    return steps


def can_retoss(bottle: Bottle | None, events: Iterable[BottleEvent]) -> bool:
    """A bottle may go back to sea once it is found and nobody has tossed it since."""
    if bottle is None or bottle.status != BottleStatus.FOUND:
        return False
    found_since_last_toss = False
    for _, state in replay(event for event in events if event.bottle_id == bottle.id):
        if state.last_event_type == EventType.CAST_AWAY:
            found_since_last_toss = False
        else:
            found_since_last_toss = True
    return found_since_last_toss


def build_journey_view(
    bottle_id: str,
    events: Iterable[BottleEvent],
    bottle: Bottle | None = None,
) -> JourneyView:
    events = list(events)
    return JourneyView(
        bottle_id=bottle_id,
        steps=build_journey(bottle_id, events, bottle),
        can_retoss=can_retoss(bottle, events),
    )
