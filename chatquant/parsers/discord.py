"""
Discord channel decoder for raw API message objects.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..exceptions import FormatError
from ..models import Participant, ParsedConversation, Reaction, UnifiedMessage
from .common import finalize_conversation

logger = logging.getLogger(__name__)

PLATFORM = "discord"
FORMAT_HINT = 'Expected a list of Discord API messages, each with "id", "author" and "timestamp".'

# 0 = DEFAULT, 19 = REPLY
USER_MESSAGE_TYPES = {0, 19}
BARE_URL_RE = re.compile(r"^https?://\S+$", re.IGNORECASE)


def is_discord_message(msg: Any) -> bool:
    return (
        isinstance(msg, dict)
        and "id" in msg
        and isinstance(msg.get("author"), dict)
        and "timestamp" in msg
    )


def display_name(author: Dict[str, Any]) -> str:
    return author.get("global_name") or author.get("username") or str(author.get("id", ""))


def parse_timestamp(value: str) -> int:
    return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp() * 1000)


def classify_message(msg: Dict[str, Any]) -> str:
    if msg.get("sticker_items"):
        return "sticker"
    if msg.get("attachments"):
        return "media"
    content = (msg.get("content") or "").strip()
    if not content and msg.get("embeds"):
        return "link"
    if BARE_URL_RE.match(content):
        return "link"
    return "text"


def _malformed(raw: Dict[str, Any], error: Exception) -> FormatError:
    return FormatError(PLATFORM, f"Malformed message {raw.get('id')!r}: {error}. {FORMAT_HINT}")


def _convert_message(
    index: int,
    timestamp: int,
    raw: Dict[str, Any],
    known_names: set,
    id_to_index: Dict[Any, int],
) -> UnifiedMessage:
    msg_type = classify_message(raw)
    content = raw.get("content") or ""
    if not isinstance(content, str):
        raise ValueError(f"content is not a string: {content!r}")
    if msg_type == "sticker":
        content = raw["sticker_items"][0].get("name", "")

    reactions = [
        Reaction(emoji=r["emoji"]["name"], actor="unknown", count=r.get("count"))
        for r in raw.get("reactions") or []
        if (r.get("emoji") or {}).get("name")
    ]

    mentions = [
        display_name(u) for u in raw.get("mentions") or []
        if not u.get("bot") and display_name(u) in known_names
    ]

    reply_id = (raw.get("message_reference") or {}).get("message_id")

    return UnifiedMessage(
        index=index,
        sender=display_name(raw["author"]),
        content=content,
        timestamp=timestamp,
        type=msg_type,
        reactions=reactions,
        has_media=bool(raw.get("attachments")),
        has_link=msg_type == "link" or "http://" in content or "https://" in content,
        mentions=mentions or None,
        reply_to_index=id_to_index.get(reply_id) if reply_id else None,
        is_edited=bool(raw.get("edited_timestamp")),
    )


def parse_discord(
    messages: Any,
    channel_name: Optional[str] = None,
    channel_id: Optional[str] = None,
) -> ParsedConversation:
    """Decode Discord messages (a list, or a dict with a "messages" list).

    Every record is checked; a malformed one raises FormatError naming its id.
    """
    if isinstance(messages, dict):
        channel_name = channel_name or messages.get("channel_name")
        channel_id = channel_id or messages.get("channel_id")
        messages = messages.get("messages")

    if not isinstance(messages, list) or not messages:
        raise FormatError(PLATFORM, FORMAT_HINT)
    if not is_discord_message(messages[0]):
        raise FormatError(PLATFORM, FORMAT_HINT)

    user_messages = []
    for raw in messages:
        if not is_discord_message(raw):
            raise FormatError(PLATFORM, FORMAT_HINT)
        if raw["author"].get("bot") or raw.get("type", 0) not in USER_MESSAGE_TYPES:
            continue
        try:
            timestamp = parse_timestamp(raw["timestamp"])
        except (AttributeError, TypeError, ValueError) as e:
            raise _malformed(raw, e) from e
        user_messages.append((timestamp, raw))

    dropped = len(messages) - len(user_messages)
    if dropped:
        logger.debug(f"Dropped {dropped} bot or non-user Discord messages")

    user_messages.sort(key=lambda pair: pair[0])

    participants: List[Participant] = []
    seen_ids = set()
    for _, raw in user_messages:
        author = raw["author"]
        if author.get("id") not in seen_ids:
            seen_ids.add(author.get("id"))
            participants.append(Participant(name=display_name(author), platform_id=author.get("id")))
    known_names = {p.name for p in participants}

    id_to_index = {raw["id"]: i for i, (_, raw) in enumerate(user_messages)}

    unified = []
    for i, (timestamp, raw) in enumerate(user_messages):
        try:
            unified.append(_convert_message(i, timestamp, raw, known_names, id_to_index))
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            raise _malformed(raw, e) from e

    return finalize_conversation(
        PLATFORM,
        channel_name or "Discord",
        participants,
        unified,
        discord_channel_id=str(channel_id) if channel_id is not None else None,
    )
