"""
Tests for chronotype compatibility
"""

import pytest

from chatquant.accumulator import accumulate
from chatquant.chronotype import (
    categorize,
    circular_delta,
    circular_midpoint,
    compute_chronotype,
    jet_lag_level,
    score_from_delta,
)
from factories import BASE_TS, DAY, HOUR, make_conversation, make_message

MIDNIGHT = BASE_TS - 12 * HOUR  # 2024-01-01 00:00 UTC


def daily_messages(name, hour, days=20):
    return [make_message(name, "hi", MIDNIGHT + d * DAY + hour * HOUR) for d in range(days)]


def test_circular_midpoint():
    """Test the circular mean of an hourly histogram."""
    hourly = [0] * 24
    hourly[1] = 5
    hourly[3] = 5
    assert circular_midpoint(hourly) == 2.0

    hourly = [0] * 24
    hourly[23] = 3
    assert circular_midpoint(hourly) == 23.0
    assert circular_midpoint([0] * 24) == 12.0


def test_categories_and_scores():
    assert categorize(9.5) == "early_bird"
    assert categorize(15.0) == "intermediate"
    assert categorize(20.0) == "night_owl"
    assert circular_delta(23.0, 1.0) == 2.0
    assert score_from_delta(1.0) == 95
    assert score_from_delta(2.0) == 80
    assert score_from_delta(2.5) == 60
    assert score_from_delta(7.0) == 5
    assert jet_lag_level(0.5) == "none"
    assert jet_lag_level(3.0) == "moderate"
    assert jet_lag_level(4.0) == "severe"


def test_mismatched_rhythms():
    """Test an early bird paired with a night owl."""
    messages = daily_messages("Alice", 9) + daily_messages("Bob", 23)
    result = compute_chronotype(accumulate(make_conversation(messages)))

    alice, bob = result["persons"]
    assert alice["name"] == "Alice"
    assert alice["category"] == "early_bird"
    assert alice["peak_hour"] == 9
    assert bob["category"] == "night_owl"
    assert bob["label"] == "Night owl"
    assert result["delta_hours"] == 10.0
    assert result["match_score"] == 5
    assert result["is_compatible"] is False
    assert alice["social_jet_lag_level"] == "none"


def test_matching_rhythms():
    messages = daily_messages("Alice", 14) + daily_messages("Bob", 15)
    result = compute_chronotype(accumulate(make_conversation(messages)))

    assert result["match_score"] == 95
    assert result["is_compatible"] is True
    assert result["interpretation"].startswith("Excellent match")


def test_requires_enough_messages_and_two_people():
    """Test the minimum-activity and pair-only guards."""
    few = daily_messages("Alice", 9, days=19) + daily_messages("Bob", 9)
    assert compute_chronotype(accumulate(make_conversation(few))) is None

    group = daily_messages("Alice", 9) + daily_messages("Bob", 9) + daily_messages("Carol", 9)
    assert compute_chronotype(accumulate(make_conversation(group))) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
