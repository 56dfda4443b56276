"""
Shared decoding helpers: text repair, ordering, re-indexing and metadata.
"""

import logging
from typing import Any, Iterable, List, Optional

from ..helpers import contains_url
from ..models import ConversationMetadata, Participant, ParsedConversation, UnifiedMessage
from .. import config

logger = logging.getLogger(__name__)


def fix_mojibake(value: Any) -> str:
    """Undo Facebook's UTF-8-as-Latin-1 export encoding.

    "CzeÅ\u009bÄ\u0087" -> "Cześć". Strings that are not
    mis-encoded are returned unchanged.
    """
    if not value:
        return ""
    if not isinstance(value, str):
        return str(value)
    try:
        return value.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return value


def is_link_message(content: str, msg_type: str) -> bool:
    return msg_type == "link" or contains_url(content)


def dedupe_participants(participants: Iterable[Participant]) -> List[Participant]:
    """Keep the first participant for every name."""
    seen = set()
    unique = []
    for p in participants:
        if not p.name or p.name in seen:
            continue
        seen.add(p.name)
        unique.append(p)
    return unique


def build_metadata(
    participants: List[Participant],
    messages: List[UnifiedMessage],
    discord_channel_id: Optional[str] = None,
) -> ConversationMetadata:
    """Metadata over non-system messages only."""
    timestamps = [m.timestamp for m in messages if not m.is_system]
    if timestamps:
        start, end = min(timestamps), max(timestamps)
    else:
        start = end = 0
    duration_days = max(1, round((end - start) / config.DAY_MS))
    return ConversationMetadata(
        total_messages=len(timestamps),
        date_range={"start": start, "end": end},
        is_group=len(participants) >= 3,
        duration_days=duration_days,
        discord_channel_id=discord_channel_id,
    )


def finalize_conversation(
    platform: str,
    title: str,
    participants: List[Participant],
    messages: List[UnifiedMessage],
    discord_channel_id: Optional[str] = None,
) -> ParsedConversation:
    """Sort messages chronologically, assign dense indices and compute metadata.

    Senders that are missing from the export's participant list are appended
    so that every non-system sender is a participant.
    """
    ordered = sorted(messages, key=lambda m: m.timestamp)
    for i, msg in enumerate(ordered):
        msg.index = i

    known = list(participants)
    known_names = {p.name for p in known}
    for msg in ordered:
        if not msg.is_system and msg.sender and msg.sender not in known_names:
            known.append(Participant(name=msg.sender))
            known_names.add(msg.sender)
    unique = dedupe_participants(known)

    conversation = ParsedConversation(
        platform=platform,
        title=title,
        participants=unique,
        messages=ordered,
        metadata=build_metadata(unique, ordered, discord_channel_id),
    )
    logger.info(
        f"Parsed {platform} conversation: {conversation.metadata.total_messages} messages, "
        f"{len(unique)} participants"
    )
    return conversation


def merge_conversations(platform: str, conversations: List[ParsedConversation]) -> ParsedConversation:
    """Merge per-file conversations of one split export.

    Duplicate messages (same sender, timestamp, content and type) that appear
    in more than one file are kept once.
    """
    seen = set()
    merged: List[UnifiedMessage] = []
    participants: List[Participant] = []
    for conv in conversations:
        participants.extend(conv.participants)
        for msg in conv.messages:
            key = (msg.sender, msg.timestamp, msg.content, msg.type)
            if key in seen:
                continue
            seen.add(key)
            merged.append(msg)

    duplicates = sum(len(c.messages) for c in conversations) - len(merged)
    if duplicates:
        logger.info(f"Dropped {duplicates} duplicate messages while merging {len(conversations)} files")

    return finalize_conversation(
        platform,
        conversations[0].title,
        dedupe_participants(participants),
        merged,
    )
