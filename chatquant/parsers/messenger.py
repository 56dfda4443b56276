"""
Facebook Messenger JSON decoder.

Facebook writes every string as UTF-8 bytes mis-read as Latin-1, so each
string field goes through ``fix_mojibake``. Messages arrive newest-first.
"""

import logging
import re
from typing import Any, Dict, List

from ..exceptions import FormatError
from ..models import Participant, ParsedConversation, Reaction, UnifiedMessage
from .common import finalize_conversation, fix_mojibake, is_link_message, merge_conversations

logger = logging.getLogger(__name__)

PLATFORM = "messenger"
FORMAT_HINT = 'Expected a Facebook Messenger export with "participants", "messages", and "title" fields.'

MEDIA_KEYS = ("photos", "videos", "audio_files", "gifs", "files")
THREAD_SUFFIX_RE = re.compile(r"_\d+$")


def is_messenger_export(data: Any) -> bool:
    """Required-field check for the standard Facebook export shape."""
    if not isinstance(data, dict):
        return False
    if not isinstance(data.get("participants"), list):
        return False
    if not isinstance(data.get("messages"), list):
        return False
    if not isinstance(data.get("title"), str):
        return False
    if data["messages"]:
        first = data["messages"][0]
        if not isinstance(first, dict):
            return False
        if not isinstance(first.get("sender_name"), str):
            return False
        if not isinstance(first.get("timestamp_ms"), (int, float)):
            return False
    return True


def is_alternative_export(data: Any) -> bool:
    """Check for the third-party export shape (senderName / threadName)."""
    if not isinstance(data, dict):
        return False
    if not isinstance(data.get("participants"), list):
        return False
    if not isinstance(data.get("messages"), list):
        return False
    if not isinstance(data.get("threadName"), str):
        return False
    if data["messages"]:
        first = data["messages"][0]
        if not isinstance(first, dict):
            return False
        if not isinstance(first.get("senderName"), str):
            return False
        if not isinstance(first.get("timestamp"), (int, float)):
            return False
    return True


def has_media(msg: Dict[str, Any]) -> bool:
    return any(msg.get(key) for key in MEDIA_KEYS)


def classify_message(msg: Dict[str, Any]) -> str:
    """Message type by fixed precedence."""
    if msg.get("is_unsent"):
        return "unsent"
    if msg.get("type") == "Call" or msg.get("call_duration") is not None:
        return "call"
    if msg.get("type") in ("Subscribe", "Unsubscribe"):
        return "system"
    if msg.get("sticker"):
        return "sticker"
    if (msg.get("share") or {}).get("link"):
        return "link"
    if has_media(msg):
        return "text" if msg.get("content") else "media"
    return "text"


def parse_reactions(raw: List[Dict[str, Any]]) -> List[Reaction]:
    reactions = []
    if not isinstance(raw, list):
        return reactions
    for r in raw:
        if not isinstance(r, dict) or "reaction" not in r:
            continue
        reactions.append(Reaction(emoji=fix_mojibake(r.get("reaction")), actor=fix_mojibake(r.get("actor"))))
    return reactions


def to_timestamp_ms(value: Any) -> int:
    """Epoch ms from a JSON number; raises ValueError for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"timestamp is not a number: {value!r}")
    return int(value)


def _convert_alternative(raw: Any) -> UnifiedMessage:
    if not isinstance(raw, dict):
        raise ValueError(f"record is not an object: {raw!r}")
    content = raw.get("text") or ""
    if raw.get("isUnsent"):
        msg_type = "unsent"
    elif raw.get("type") == "call":
        msg_type = "call"
    elif raw.get("type") == "system":
        msg_type = "system"
    elif raw.get("media") and not content:
        msg_type = "media"
    else:
        msg_type = "text"
    return UnifiedMessage(
        index=0,
        sender=raw.get("senderName", ""),
        content=content,
        timestamp=to_timestamp_ms(raw.get("timestamp")),
        type=msg_type,
        reactions=parse_reactions(raw.get("reactions")),
        has_media=bool(raw.get("media")),
        has_link=is_link_message(content, msg_type),
        is_unsent=bool(raw.get("isUnsent")),
    )


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


def convert_records(records: List[Any], convert, platform_label: str) -> List[UnifiedMessage]:
    """Convert raw records, skipping (and logging) the malformed ones."""
    messages = []
    skipped = 0
    for raw in records:
        try:
            messages.append(convert(raw))
        except (AttributeError, TypeError, ValueError) as e:
            skipped += 1
            logger.debug(f"Malformed {platform_label} record: {e}")
    if skipped:
        logger.warning(f"Skipped {skipped} malformed {platform_label} records")
    return messages


def _parse_alternative(data: Dict[str, Any]) -> ParsedConversation:
    participants = [Participant(name=str(name)) for name in data["participants"]]
    messages = convert_records(data["messages"], _convert_alternative, "Messenger")
    title = THREAD_SUFFIX_RE.sub("", data["threadName"])
    return finalize_conversation(PLATFORM, title, participants, messages)


def parse_messenger(data: Any) -> ParsedConversation:
    """Decode one Messenger JSON export file."""
    if is_alternative_export(data):
        return _parse_alternative(data)

    if not is_messenger_export(data):
        raise FormatError(PLATFORM, FORMAT_HINT)

    participants = [
        Participant(name=fix_mojibake(p.get("name")))
        for p in data["participants"]
        if isinstance(p, dict)
    ]

    messages = convert_records(list(reversed(data["messages"])), _convert_message, "Messenger")
    return finalize_conversation(PLATFORM, fix_mojibake(data["title"]), participants, messages)


def merge_messenger_files(files: List[Any]) -> ParsedConversation:
    """Merge a Messenger export split across message_1.json, message_2.json, ..."""
    if not files:
        raise FormatError(PLATFORM, "No files provided")
    if len(files) == 1:
        return parse_messenger(files[0])
    return merge_conversations(PLATFORM, [parse_messenger(f) for f in files])
