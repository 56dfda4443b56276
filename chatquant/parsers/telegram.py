"""
Telegram Desktop JSON export decoder (result.json).
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from .. import config
from ..exceptions import FormatError
from ..models import Participant, ParsedConversation, Reaction, UnifiedMessage
from .common import finalize_conversation

logger = logging.getLogger(__name__)

PLATFORM = "telegram"
FORMAT_HINT = 'Expected a Telegram export (result.json) with "name", "type", "id" and "messages" fields.'

MEDIA_TYPES = {"video_file", "voice_message", "video_message", "animation", "audio_file"}
BARE_URL_RE = re.compile(r"^https?://\S+$", re.IGNORECASE)


def is_telegram_export(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    if not isinstance(data.get("name"), str) or not isinstance(data.get("type"), str):
        return False
    if not isinstance(data.get("id"), (int, float)) or isinstance(data.get("id"), bool):
        return False
    messages = data.get("messages")
    if not isinstance(messages, list):
        return False
    if not messages:
        return True
    first = messages[0]
    return isinstance(first, dict) and ("date" in first or "date_unixtime" in first)


def flatten_text(text: Any) -> str:
    """Join a plain string or a list of strings / {type, text} entities."""
    if text is None:
        return ""
    if isinstance(text, str):
        return text
    if not isinstance(text, list):
        return str(text)
    parts = []
    for part in text:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict):
            parts.append(str(part.get("text", "")))
    return "".join(parts)


def parse_date(value: Optional[str]) -> int:
    """ISO date to epoch ms; naive dates are read in the configured timezone."""
    if not value:
        return 0
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo(config.TIMEZONE))
    return int(dt.timestamp() * 1000)


def parse_timestamp(msg: Dict[str, Any]) -> int:
    if msg.get("date_unixtime"):
        return int(msg["date_unixtime"]) * 1000
    return parse_date(msg.get("date"))


def classify_message(msg: Dict[str, Any], content: str) -> str:
    if msg.get("action"):
        return "system"
    if msg.get("sticker_emoji"):
        return "sticker"
    if msg.get("duration_seconds") is not None:
        return "call"
    if msg.get("photo") or msg.get("file") or msg.get("media_type") in MEDIA_TYPES:
        if not content:
            return "media"
    if BARE_URL_RE.match(content.strip()):
        return "link"
    return "text"


def parse_reactions(raw: Any) -> List[Reaction]:
    reactions = []
    if not isinstance(raw, list):
        return reactions
    for r in raw:
        if not isinstance(r, dict):
            continue
        for person in r.get("recent") or []:
            if not isinstance(person, dict):
                continue
            reactions.append(Reaction(
                emoji=r.get("emoji", ""),
                actor=person.get("from", ""),
                timestamp=parse_date(person.get("date")) or None,
            ))
    return reactions


def parse_telegram(data: Any) -> ParsedConversation:
    """Decode a Telegram chat export."""
    if not is_telegram_export(data):
        raise FormatError(PLATFORM, FORMAT_HINT)

    participants: List[Participant] = []
    messages: List[UnifiedMessage] = []
    seen_names = set()
    skipped = 0

    for raw in data["messages"]:
        if not isinstance(raw, dict):
            skipped += 1
            logger.warning(f"Skipping Telegram entry that is not an object: {raw!r}")
            continue
        try:
            timestamp = parse_timestamp(raw)
            reactions = parse_reactions(raw.get("reactions"))
        except (TypeError, ValueError) as e:
            skipped += 1
            logger.warning(f"Skipping Telegram message {raw.get('id')}: {e}")
            continue

        if raw.get("type") == "service":
            messages.append(UnifiedMessage(
                index=0,
                sender=raw.get("actor") or "System",
                content=flatten_text(raw.get("text")),
                timestamp=timestamp,
                type="system",
            ))
            continue

        if raw.get("type") != "message" or not isinstance(raw.get("from"), str) or not raw["from"]:
            skipped += 1
            continue

        sender = raw["from"]
        if sender not in seen_names:
            seen_names.add(sender)
            participants.append(Participant(name=sender, platform_id=raw.get("from_id")))

        content = flatten_text(raw.get("text"))
        msg_type = classify_message(raw, content)
        if msg_type == "sticker":
            content = raw.get("sticker_emoji", "")

        messages.append(UnifiedMessage(
            index=0,
            sender=sender,
            content=content,
            timestamp=timestamp,
            type=msg_type,
            reactions=reactions,
            has_media=bool(raw.get("photo") or raw.get("file") or raw.get("media_type")),
            has_link=msg_type == "link" or "http://" in content or "https://" in content,
        ))

    if skipped:
        logger.warning(f"Skipped {skipped} Telegram entries that are not user messages")

    return finalize_conversation(PLATFORM, data["name"], participants, messages)
