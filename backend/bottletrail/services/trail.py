"""Trail aggregation: every event of every bottle as a classified map marker."""

import hashlib
import math
from collections.abc import Iterable

from bottletrail.config import settings
from bottletrail.logging import get_logger
from bottletrail.models import (
    Bottle,
    BottleEvent,
    TrailAction,
    TrailFilter,
    TrailMarker,
    normalize_type,
)
from bottletrail.services.history import group_by_bottle, replay

logger = get_logger('services.trail')


def marker_id(event: BottleEvent, ordinal: int) -> str:
    """
    Stable marker id for an event.

    Legacy rows without an event id get a digest of bottle, type, timestamp
    and position so repeated reconstructions yield the same id.
    """
    event_type = normalize_type(event.event_type)
    if event.id:
        return f"{event.bottle_id}-{event_type}-{event.id}"
    seed = f"{event.bottle_id}|{event_type}|{event.created_at.isoformat()}|{ordinal}"
    digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()[:12]
    return f"{event.bottle_id}-{event_type}-legacy-{digest}"


def _to_marker(bottle: Bottle | None, event: BottleEvent, action: TrailAction, ordinal: int) -> TrailMarker:
    return TrailMarker(
        id=marker_id(event, ordinal),
        bottle_id=event.bottle_id,
        action_type=action,
        status=bottle.status if bottle else None,
        lat=event.lat,
        lon=event.lon,
        message=event.message or (bottle.message if bottle else None) or settings.NO_MESSAGE_PLACEHOLDER,
        photo_url=event.photo_url or (bottle.photo_url if bottle else None),
        created_at=event.created_at,
        event_id=event.id,
        tosser_name=event.tosser_name,
        finder_name=event.finder_name,
    )


def classify_events(
    bottles: Iterable[Bottle],
    events: Iterable[BottleEvent],
) -> list[TrailMarker]:
    """Unfiltered, undeconflicted markers in ascending event time."""
    bottles_by_id = {bottle.id: bottle for bottle in bottles}
    markers: list[TrailMarker] = []
    for bottle_id, bottle_events in group_by_bottle(events).items():
        bottle = bottles_by_id.get(bottle_id)
        if bottle is None:
            logger.debug(f"Bottle {bottle_id} missing from snapshot, {len(bottle_events)} markers have no status")
        for ordinal, (event, state) in enumerate(replay(bottle_events)):
            markers.append(_to_marker(bottle, event, state.last_action, ordinal))
    markers.sort(key=lambda marker: marker.created_at)
    return markers


def filter_markers(markers: list[TrailMarker], action_filter: TrailFilter | str) -> list[TrailMarker]:
    action_filter = TrailFilter(action_filter)
    if action_filter == TrailFilter.ALL:
        return list(markers)
    return [marker for marker in markers if marker.action_type.value == action_filter.value]


def deconflict_markers(
    markers: list[TrailMarker],
    precision: int | None = None,
    radius_step: float | None = None,
    angle_step_degrees: float | None = None,
) -> list[TrailMarker]:
    """
    Fan out markers that share a rounded coordinate so each stays visible.

    The first marker of a group keeps its position; the k-th later one moves
    by radius k * radius_step at angle k * angle_step_degrees. Input markers
    are never modified.
    """
    precision = settings.DECONFLICT_PRECISION if precision is None else precision
    radius_step = settings.DECONFLICT_RADIUS_STEP if radius_step is None else radius_step
    angle_step_degrees = (
        settings.DECONFLICT_ANGLE_STEP_DEGREES if angle_step_degrees is None else angle_step_degrees
    )

    group_sizes: dict[tuple[float, float], int] = {}
    placed: list[TrailMarker] = []
    for marker in markers:
        key = (round(marker.lat, precision), round(marker.lon, precision))
        index = group_sizes.get(key, 0)
        group_sizes[key] = index + 1
        if index == 0:
            placed.append(marker)
            continue

        angle = math.radians(index * angle_step_degrees)
        radius = radius_step * index
        placed.append(marker.model_copy(update={
            "lat": marker.lat + radius * math.cos(angle),
            "lon": marker.lon + radius * math.sin(angle),
            "is_offset": True,
        }))
    return placed


def build_trail(
    bottles: Iterable[Bottle],
    events: Iterable[BottleEvent],
    action_filter: TrailFilter | str = TrailFilter.ALL,
) -> list[TrailMarker]:
    """
    Build the map trail for a snapshot.

    Filtering runs before deconfliction, so offsets depend on which markers
    the active filter leaves visible.

    :param bottles: Cached bottle rows
    :type bottles: Iterable[Bottle]
    :param events: Full event log
    :type events: Iterable[BottleEvent]
    :param action_filter: all, created, found or retossed
    :type action_filter: TrailFilter | str
    :return: Deconflicted markers in ascending event time
    :rtype: list[TrailMarker]
    """
    markers = classify_events(bottles, events)
    visible = filter_markers(markers, action_filter)
    return deconflict_markers(visible)
