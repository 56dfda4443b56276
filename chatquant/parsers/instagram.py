"""
Instagram DM JSON decoder.

Meta exports Instagram threads in the Messenger layout with the same
Latin-1 string encoding, but ``title`` is optional.
"""

import logging
from typing import Any, List

from ..exceptions import FormatError
from ..models import Participant, ParsedConversation, UnifiedMessage
from .common import finalize_conversation, fix_mojibake, is_link_message, merge_conversations
from .messenger import convert_records, has_media, parse_reactions, to_timestamp_ms

logger = logging.getLogger(__name__)

PLATFORM = "instagram"
FORMAT_HINT = 'Expected an Instagram DM export with "participants" and a non-empty "messages" list.'


def is_instagram_export(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    if not isinstance(data.get("participants"), list):
        return False
    messages = data.get("messages")
    if not isinstance(messages, list) or not messages:
        return False
    first = messages[0]
    return (
        isinstance(first, dict)
        and isinstance(first.get("sender_name"), str)
        and isinstance(first.get("timestamp_ms"), (int, float))
    )


def classify_message(msg: dict) -> str:
    if msg.get("is_unsent"):
        return "unsent"
    if msg.get("call_duration") is not None:
        return "call"
    if msg.get("sticker"):
        return "sticker"
    if (msg.get("share") or {}).get("link"):
        return "link"
    if has_media(msg):
        return "text" if msg.get("content") else "media"
    return "text"


def _convert_message(raw: Any) -> UnifiedMessage:
    if not isinstance(raw, dict):
        raise ValueError(f"record is not an object: {raw!r}")
    content = fix_mojibake(raw.get("content"))
    msg_type = classify_message(raw)
    return UnifiedMessage(
        index=0,
        sender=fix_mojibake(raw.get("sender_name")),
        content=content,
        timestamp=to_timestamp_ms(raw.get("timestamp_ms")),
        type=msg_type,
        reactions=parse_reactions(raw.get("reactions")),
        has_media=has_media(raw),
        has_link=is_link_message(content, msg_type),
        is_unsent=bool(raw.get("is_unsent")),
    )


def parse_instagram(data: Any) -> ParsedConversation:
    """Decode one Instagram DM export file."""
    if not is_instagram_export(data):
        raise FormatError(PLATFORM, FORMAT_HINT)

    names = [fix_mojibake(p.get("name")) for p in data["participants"] if isinstance(p, dict)]
    participants = [Participant(name=name) for name in names]
    messages = convert_records(list(reversed(data["messages"])), _convert_message, "Instagram")

    title = fix_mojibake(data["title"]) if data.get("title") else " & ".join(names)
    return finalize_conversation(PLATFORM, title, participants, messages)


def merge_instagram_files(files: List[Any]) -> ParsedConversation:
    if not files:
        raise FormatError(PLATFORM, "No files provided")
    if len(files) == 1:
        return parse_instagram(files[0])
    return merge_conversations(PLATFORM, [parse_instagram(f) for f in files])
