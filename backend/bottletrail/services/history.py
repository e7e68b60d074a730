"""
Shared fold over a bottle's event history.

Every read model is derived by replaying a bottle's events oldest first
through `apply_event`. The reducer is the single place that decides which
cast_away created a bottle and which ones retossed it.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace

from bottletrail.config import settings
from bottletrail.logging import get_logger
from bottletrail.models import Bottle, BottleEvent, EventType, TrailAction, parse_event_type

logger = get_logger('services.history')


class MissingBottleFieldError(ValueError):
    """A field required for output is absent from the event and every fallback."""

    def __init__(self, bottle_id: str, field_name: str):
        self.bottle_id = bottle_id
        self.field_name = field_name
        super().__init__(f"Bottle {bottle_id} has no {field_name} in its events or cached row")


@dataclass(frozen=True)
class BottleFold:
    """State of one bottle after replaying a prefix of its events."""

    cast_away_count: int = 0
    found_count: int = 0
    tossers: frozenset[str] = field(default_factory=frozenset)
    last_event_type: EventType | None = None
    last_action: TrailAction | None = None
    last_first_by_author: bool = False

    @property
    def hop_number(self) -> int:
        return self.cast_away_count


def apply_event(state: BottleFold, event: BottleEvent) -> BottleFold:
    """
    Fold one event into the bottle state.

    :param state: State before the event
    :type state: BottleFold
    :param event: Next event in ascending time order
    :type event: BottleEvent
    :return: State after the event
    :rtype: BottleFold
    :raises ValueError: If the event type is not a known EventType
    """
    event_type = parse_event_type(event.event_type)
    if event_type is None:
        raise ValueError(f"Unknown event type: {event.event_type!r}")

    if event_type == EventType.FOUND:
        return replace(
            state,
            found_count=state.found_count + 1,
            last_event_type=event_type,
            last_action=TrailAction.FOUND,
            last_first_by_author=False,
        )

    author = event.tosser_name
    first_by_author = author is not None and author not in state.tossers
    return replace(
        state,
        cast_away_count=state.cast_away_count + 1,
        tossers=(state.tossers | {author}) if author is not None else state.tossers,
        last_event_type=event_type,
        last_action=TrailAction.CREATED if state.cast_away_count == 0 else TrailAction.RETOSSED,
        last_first_by_author=first_by_author,
    )


def sort_events(events: Iterable[BottleEvent]) -> list[BottleEvent]:
    """Oldest first; events sharing a timestamp keep their log order."""
    return sorted(events, key=lambda event: event.created_at)


def valid_events(events: Iterable[BottleEvent]) -> list[BottleEvent]:
    """Drop rows with a malformed event type so one bad row cannot blank a view."""
    kept = []
    for event in events:
        if parse_event_type(event.event_type) is None:
            logger.debug(
                f"Skipping event {event.id or '<no id>'} of bottle {event.bottle_id}: "
                f"malformed event_type {event.event_type!r}"
            )
            continue
        kept.append(event)
    return kept


def group_by_bottle(events: Iterable[BottleEvent]) -> dict[str, list[BottleEvent]]:
    """Valid events per bottle id, each list sorted oldest first."""
    grouped: dict[str, list[BottleEvent]] = {}
    for event in valid_events(events):
        grouped.setdefault(event.bottle_id, []).append(event)
    return {bottle_id: sort_events(bottle_events) for bottle_id, bottle_events in grouped.items()}


def replay(events: Iterable[BottleEvent]) -> Iterator[tuple[BottleEvent, BottleFold]]:
    """
    Replay one bottle's events, yielding each event with the state after it.

    Events are sorted and malformed rows skipped before folding.
    """
    state = BottleFold()
    for event in sort_events(valid_events(events)):
        state = apply_event(state, event)
        yield event, state


def event_kind(event: BottleEvent) -> EventType | None:
    return parse_event_type(event.event_type)


def is_cast_away(event: BottleEvent) -> bool:
    return event_kind(event) == EventType.CAST_AWAY


def is_found(event: BottleEvent) -> bool:
    return event_kind(event) == EventType.FOUND


def is_reply(event: BottleEvent) -> bool:
    """A found event carrying the reply marker is a reply, not a plain find."""
    return is_found(event) and (event.message or "").startswith(settings.REPLY_PREFIX)


def is_found_sentinel(event: BottleEvent) -> bool:
    """System-written 'marked as found' message, never user content."""
    return event.message == settings.FOUND_SENTINEL_MESSAGE


def strip_reply_prefix(message: str | None) -> str:
    text = message or ""
    if text.startswith(settings.REPLY_PREFIX):
        text = text[len(settings.REPLY_PREFIX):]
        if text.startswith(" "):
            text = text[1:]
    return text


def creator_display_name(bottle: Bottle | None, first_cast_away: BottleEvent | None = None) -> str | None:
    """Best known name of whoever created the bottle, or None when nobody signed it."""
    if bottle and bottle.creator_name:
        return bottle.creator_name
    if first_cast_away and first_cast_away.tosser_name:
        return first_cast_away.tosser_name
    if bottle and bottle.tosser_name:
        return bottle.tosser_name
    return None
