"""
Tests for badge rules
"""

import pytest

from chatquant.accumulator import accumulate
from chatquant.badges import (
    compute_badges,
    find_lowest,
    find_winner,
    format_duration,
    format_silence,
    is_heart,
    longest_streak,
)
from chatquant.pipeline import run_derivers
from factories import BASE_TS, DAY, HOUR, MINUTE, heart, make_conversation, make_message


def badges_for(messages, **kwargs):
    state = accumulate(make_conversation(messages, **kwargs))
    return {badge["id"]: badge for badge in compute_badges(state, run_derivers(state))}


def night_and_day(late_count=20, reactions=False):
    """Bob writes at noon every day, Alice late at night (or at 12:30 when not late)."""
    messages = []
    for day in range(20):
        noon = BASE_TS + day * DAY
        messages.append(make_message("Bob", "lunch time", noon))
        alice_ts = noon + 11 * HOUR if day < late_count else noon + 30 * MINUTE
        extra = {"reactions": [heart("Bob")]} if reactions else {}
        messages.append(make_message("Alice", "still awake", alice_ts, **extra))
    return messages


def test_longest_streak():
    assert longest_streak(["2024-01-01", "2024-01-02", "2024-01-04"]) == 2
    assert longest_streak(["2024-02-28", "2024-02-29", "2024-03-01"]) == 3
    assert longest_streak([]) == 0


def test_find_winner_and_lowest():
    """Test thresholds, ties and non-positive values."""
    assert find_winner({"Alice": 3, "Bob": 3}) == ("Alice", 3)
    assert find_winner({"Alice": 3, "Bob": 5}, minimum=6) is None
    assert find_winner({"Alice": 0}) is None
    assert find_lowest({"Alice": 0, "Bob": 500, "Carol": 200}) == ("Carol", 200)


def test_formatting():
    assert format_duration(45_000) == "45s"
    assert format_duration(3_720_000) == "1h 2m"
    assert format_duration(7_200_000) == "2h"
    assert format_duration(2 * DAY) == "2 days"
    assert format_silence(5 * HOUR) == "5 hours"
    assert format_silence(3 * DAY) == "3 days"
    assert is_heart("❤️")
    assert not is_heart("👍")


def test_night_owl_and_ghost_champion():
    """Test rate-based and silence-based badges."""
    badges = badges_for(night_and_day())

    assert badges["night-owl"]["holder"] == "Alice"
    assert badges["night-owl"]["evidence"] == "100.0% of messages after 22:00"
    assert badges["ghost-champion"]["holder"] == "Alice"
    assert "early-bird" not in badges
    assert "heart-bomber" not in badges
    assert "double-texter" not in badges
    assert "speed-demon" not in badges


def test_badges_are_exclusive_to_threshold():
    """Test that nobody gets the night owl badge below ten late messages."""
    badges = badges_for(night_and_day(late_count=9))
    assert "night-owl" not in badges


def test_heart_bomber():
    badges = badges_for(night_and_day(reactions=True))
    assert badges["heart-bomber"]["holder"] == "Bob"
    assert badges["heart-bomber"]["evidence"] == "20 heart reactions"


def test_double_texter_speed_demon_and_questions():
    """Test Alice double-texting questions and Bob answering within a minute."""
    messages = []
    for i in range(12):
        ts = BASE_TS + i * 20 * MINUTE
        messages.append(make_message("Alice", "hey", ts))
        messages.append(make_message("Alice", "you there?", ts + MINUTE))
        messages.append(make_message("Bob", "yes here", ts + 2 * MINUTE))
    badges = badges_for(messages)

    assert badges["double-texter"]["holder"] == "Alice"
    assert badges["double-texter"]["evidence"] == "Double-texted 12 times"
    assert badges["speed-demon"]["holder"] == "Bob"
    assert badges["speed-demon"]["evidence"] == "Median response: 1m"
    assert badges["question-master"]["holder"] == "Alice"


def test_discord_only_badges():
    """Test mention, reply and edit thresholds."""
    messages = []
    for i in range(12):
        ts = BASE_TS + i * 2 * MINUTE
        messages.append(make_message("Alice", "look @Bob", ts, mentions=["Bob"], is_edited=True))
        messages.append(make_message("Bob", "seen", ts + MINUTE, reply_to_index=2 * i))
    badges = badges_for(messages, platform="discord")

    assert badges["mention-magnet"]["holder"] == "Bob"
    assert badges["reply-king"]["holder"] == "Bob"
    assert badges["edit-lord"]["holder"] == "Alice"
    assert badges["edit-lord"]["evidence"] == "12 edited messages"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
