"""Conversation threading: replies attached to the hop they were written in."""

from collections.abc import Iterable

from bottletrail.config import settings
from bottletrail.logging import get_logger
from bottletrail.models import (
    Bottle,
    BottleEvent,
    ChatMessage,
    ChatThread,
    Conversation,
)
from bottletrail.services.history import (
    BottleFold,
    MissingBottleFieldError,
    creator_display_name,
    group_by_bottle,
    is_cast_away,
    is_found,
    is_found_sentinel,
    is_reply,
    replay,
    strip_reply_prefix,
)

logger = get_logger('services.conversations')


def _preceding_find(history: list[tuple[BottleEvent, BottleFold]], position: int) -> int | None:
    for index in range(position - 1, -1, -1):
        event = history[index][0]
        if is_found(event) and not is_reply(event):
            return index
    return None


def _preceding_cast_away(history: list[tuple[BottleEvent, BottleFold]], position: int) -> int | None:
    for index in range(position - 1, -1, -1):
        if is_cast_away(history[index][0]):
            return index
    return None


def _thread_reply(
    bottle_id: str,
    bottle: Bottle | None,
    history: list[tuple[BottleEvent, BottleFold]],
    position: int,
) -> Conversation:
    reply, state = history[position]
    find_index = _preceding_find(history, position)
    cast_index = _preceding_cast_away(history, position if find_index is None else find_index)

    if cast_index is not None:
        cast_event = history[cast_index][0]
        is_first_hop = history[cast_index][1].hop_number == 1
        original_message = cast_event.message or (bottle.message if bottle else None)
        if is_first_hop:
            original_creator = creator_display_name(bottle, cast_event)
            original_photo_url = cast_event.photo_url or (bottle.photo_url if bottle else None)
        else:
            original_creator = cast_event.tosser_name
            original_photo_url = cast_event.photo_url
        original_created_at = cast_event.created_at
    else:
        if bottle is None:
            raise MissingBottleFieldError(bottle_id, "message")
        logger.debug(f"Reply {reply.id} on bottle {bottle_id} has no cast_away, using cached row as hop 0")
        original_message = bottle.message
        original_creator = creator_display_name(bottle)
        original_photo_url = bottle.photo_url
        original_created_at = bottle.created_at

    if not original_message:
        raise MissingBottleFieldError(bottle_id, "message")

    hop_number = state.hop_number
    return Conversation(
        id=f"{bottle_id}-hop{hop_number}",
        bottle_id=bottle_id,
        hop_number=hop_number,
        reply_event_id=reply.id,
        found_event_id=history[find_index][0].id if find_index is not None else None,
        original_message=original_message,
        original_creator=original_creator or settings.ANONYMOUS_NAME,
        original_created_at=original_created_at,
        original_photo_url=original_photo_url,
        last_message=strip_reply_prefix(reply.message),
        last_message_date=reply.created_at,
        last_message_sender=reply.finder_name or reply.tosser_name or settings.ANONYMOUS_NAME,
        reply_count=1,
    )


def _merge_hops(conversations: list[Conversation]) -> list[Conversation]:
    merged: dict[str, Conversation] = {}
    for conversation in conversations:
        current = merged.get(conversation.id)
        if current is None:
            merged[conversation.id] = conversation
            continue
        latest = conversation if conversation.last_message_date >= current.last_message_date else current
        merged[conversation.id] = latest.model_copy(update={
            "reply_count": current.reply_count + conversation.reply_count,
        })
    return list(merged.values())


def build_conversations(
    bottles: Iterable[Bottle],
    events: Iterable[BottleEvent],
    merge_by_hop: bool = False,
) -> list[Conversation]:
    """
    One conversation per reply, newest reply first.

    With merge_by_hop the replies of a hop collapse into one entry carrying
    the latest reply and the hop's reply count.

    :param bottles: Cached bottle rows used as hop 0 fallback
    :type bottles: Iterable[Bottle]
    :param events: Full event log
    :type events: Iterable[BottleEvent]
    :param merge_by_hop: Collapse replies sharing a hop
    :type merge_by_hop: bool
    :return: Conversations sorted by reply time, descending
    :rtype: list[Conversation]
    :raises MissingBottleFieldError: If a hop has no message anywhere
    """
    bottles_by_id = {bottle.id: bottle for bottle in bottles}
    conversations: list[Conversation] = []
    for bottle_id, bottle_events in group_by_bottle(events).items():
        history = list(replay(bottle_events))
        for position, (event, _) in enumerate(history):
            if not is_reply(event) or is_found_sentinel(event):
                continue
            conversations.append(_thread_reply(bottle_id, bottles_by_id.get(bottle_id), history, position))

    if merge_by_hop:
        conversations = _merge_hops(conversations)
    conversations.sort(key=lambda conversation: conversation.last_message_date, reverse=True)
    return conversations


def build_chat_thread(bottle: Bottle, events: Iterable[BottleEvent]) -> ChatThread:
    """The bottle's original message followed by all of its replies, oldest first."""
    if not bottle.message:
        raise MissingBottleFieldError(bottle.id, "message")

    messages = [ChatMessage(
        id=f"{bottle.id}-original",
        message=bottle.message,
        sender=creator_display_name(bottle) or settings.ANONYMOUS_NAME,
        created_at=bottle.created_at,
        photo_url=bottle.photo_url,
        is_original=True,
    )]
    for index, (event, _) in enumerate(replay(event for event in events if event.bottle_id == bottle.id)):
        if not is_reply(event):
            continue
        messages.append(ChatMessage(
            id=event.id or f"{bottle.id}-reply-{index}",
            message=strip_reply_prefix(event.message),
            sender=event.finder_name or event.tosser_name or settings.ANONYMOUS_NAME,
            created_at=event.created_at,
            photo_url=event.photo_url,
        ))
    return ChatThread(bottle_id=bottle.id, messages=messages)
