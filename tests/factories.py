"""
Builders for synthetic conversations used across the test suite.

All timestamps are UTC epoch milliseconds; tests run with the default
CHATQUANT_TIMEZONE=UTC.
"""

from chatquant.models import Participant, Reaction, UnifiedMessage
from chatquant.parsers.common import finalize_conversation

MINUTE = 60 * 1000
HOUR = 60 * MINUTE
DAY = 24 * HOUR

# 2024-01-01 12:00 UTC, a Monday
BASE_TS = 1704110400000


def make_message(sender, content="hello there", timestamp=BASE_TS, type="text", **extra):
    """Build a UnifiedMessage; the index is reassigned by make_conversation."""
    return UnifiedMessage(
        index=0,
        sender=sender,
        content=content,
        timestamp=timestamp,
        type=type,
        **extra,
    )


def make_conversation(messages, participants=None, platform="whatsapp", title="Test chat"):
    """Sort, index and wrap messages the same way the decoders do."""
    if participants is None:
        participants = []
        for msg in messages:
            if not msg.is_system and msg.sender not in participants:
                participants.append(msg.sender)
    return finalize_conversation(
        platform,
        title,
        [Participant(name=name) for name in participants],
        list(messages),
    )


def alternating(count, names=("Alice", "Bob"), start=BASE_TS, gap=5 * MINUTE, content="message {i}"):
    """count messages that rotate through names, one every gap ms."""
    return [
        make_message(names[i % len(names)], content.format(i=i), start + i * gap)
        for i in range(count)
    ]


def heart(actor):
    return Reaction(emoji="❤", actor=actor)
