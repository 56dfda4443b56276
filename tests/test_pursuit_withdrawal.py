"""
Tests for pursuit / withdrawal cycle detection
"""

import pytest

from chatquant.accumulator import accumulate
from chatquant.pursuit_withdrawal import (
    compute_pursuit_withdrawal,
    contains_demand_marker,
    find_cycles,
    is_overnight_gap,
)
from factories import BASE_TS, DAY, HOUR, MINUTE, make_conversation, make_message

TEN_AM = BASE_TS - 2 * HOUR  # 2024-01-01 10:00 UTC


def pursuit_day(start, count=6, content="ping", silence=5 * HOUR):
    """count messages from Alice, a silence, Bob's reply, then ten normal messages."""
    messages = [make_message("Alice", content, start + i * 5 * MINUTE) for i in range(count)]
    reply_ts = messages[-1].timestamp + silence
    messages.append(make_message("Bob", "sorry, was busy", reply_ts))
    for i in range(10):
        sender = "Alice" if i % 2 == 0 else "Bob"
        messages.append(make_message(sender, "all good", reply_ts + (i + 1) * 5 * MINUTE))
    return messages


def test_contains_demand_marker():
    assert contains_demand_marker("hello?")
    assert contains_demand_marker("??")
    assert contains_demand_marker("Answer me please")
    assert not contains_demand_marker("ok")
    assert not contains_demand_marker(None)


def test_is_overnight_gap():
    """Test that likely sleep is not treated as withdrawal."""
    ten_pm = TEN_AM + 12 * HOUR
    assert is_overnight_gap(ten_pm, 5 * HOUR)
    assert is_overnight_gap(TEN_AM, 13 * HOUR)
    assert not is_overnight_gap(TEN_AM, 5 * HOUR)


def test_find_cycles_long_burst():
    """Test that six logical messages always count as a pursuit."""
    cycles = find_cycles(pursuit_day(TEN_AM))

    assert len(cycles) == 1
    assert cycles[0]["sender"] == "Alice"
    assert cycles[0]["pursuit_message_count"] == 6
    assert cycles[0]["withdrawal_duration_ms"] == 5 * HOUR
    assert cycles[0]["resolved"] is True


def test_short_burst_needs_demand():
    """Test four-message bursts with and without a demand marker."""
    assert find_cycles(pursuit_day(TEN_AM, count=4)) == []
    assert len(find_cycles(pursuit_day(TEN_AM, count=4, content="are you there"))) == 1


def test_rapid_messages_count_as_one():
    """Test that messages under two minutes apart merge into one logical message."""
    messages = [make_message("Alice", "ping", TEN_AM + i * MINUTE) for i in range(6)]
    messages.append(make_message("Bob", "hey", TEN_AM + 6 * HOUR))
    assert find_cycles(messages) == []


def test_compute_pursuit_withdrawal():
    """Test the summary over three daily cycles."""
    messages = []
    for day in range(3):
        messages.extend(pursuit_day(TEN_AM + day * DAY))
    result = compute_pursuit_withdrawal(accumulate(make_conversation(messages)))

    assert result["pursuer"] == "Alice"
    assert result["withdrawer"] == "Bob"
    assert result["cycle_count"] == 3
    assert result["avg_cycle_duration_ms"] == 5 * HOUR
    assert result["escalation_trend"] == 0.0
    assert all("sender" not in cycle for cycle in result["cycles"])


def test_requires_enough_messages():
    messages = pursuit_day(TEN_AM) + pursuit_day(TEN_AM + DAY)
    assert compute_pursuit_withdrawal(accumulate(make_conversation(messages))) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
