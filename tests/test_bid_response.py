"""
Tests for bid / response analysis
"""

import pytest

from chatquant import config
from chatquant.accumulator import accumulate
from chatquant.bid_response import (
    AWAY,
    TOWARD,
    _find_reply,
    classify_bid_response,
    compute_bid_response,
    is_bid,
)
from factories import BASE_TS, HOUR, MINUTE, make_conversation, make_message

SECOND = 1000


def question_and_answer(pairs):
    """Alice asks, Bob answers, ten minutes apart."""
    messages = []
    for i in range(pairs):
        ts = BASE_TS + i * 20 * MINUTE
        messages.append(make_message("Alice", f"did you see episode {i}?", ts))
        messages.append(make_message("Bob", "sounds good to me", ts + 10 * MINUTE))
    return messages


def test_is_bid():
    """Test questions, disclosure openers and links."""
    assert is_bid("what?")
    assert is_bid("Listen, something happened at work")
    assert is_bid("look at this https://example.com")
    assert not is_bid("??")
    assert not is_bid("?")
    assert not is_bid("ok")
    assert not is_bid("")
    assert not is_bid(None)


def test_response_window_boundary():
    """Test the four-hour response window to the second."""
    bid = make_message("Alice", "Are you free tonight?", BASE_TS)
    in_time = make_message("Bob", "yes for sure", BASE_TS + 4 * HOUR - SECOND)
    too_late = make_message("Bob", "yes for sure", BASE_TS + 4 * HOUR + SECOND)

    assert classify_bid_response(bid, in_time) == TOWARD
    assert classify_bid_response(bid, too_late) == AWAY


def test_classify_bid_response_rules():
    """Test dismissals, missing replies and short replies."""
    bid = make_message("Alice", "Guess what happened today", BASE_TS)

    assert classify_bid_response(bid, None) == AWAY
    assert classify_bid_response(bid, make_message("Bob", "whatever", BASE_TS + MINUTE)) == AWAY
    assert classify_bid_response(bid, make_message("Bob", "k", BASE_TS + MINUTE)) == AWAY
    assert classify_bid_response(bid, make_message("Bob", "what?", BASE_TS + MINUTE)) == TOWARD
    assert classify_bid_response(bid, make_message("Bob", "today?", BASE_TS + MINUTE)) == TOWARD
    assert classify_bid_response(bid, make_message("Bob", "happened", BASE_TS + MINUTE)) == TOWARD


def followed_by(extra):
    """Alice's bid, extra follow-ups from Alice, then Bob's reply."""
    messages = [make_message("Alice", "Are you free tonight?", BASE_TS)]
    for i in range(extra):
        messages.append(make_message("Alice", "hello", BASE_TS + (i + 1) * MINUTE))
    messages.append(make_message("Bob", "yes for sure", BASE_TS + (extra + 1) * MINUTE))
    return make_conversation(messages).messages


def test_reply_after_double_text_is_found():
    """Test that a reply behind same-sender follow-ups inside the window counts."""
    messages = followed_by(1)
    reply = _find_reply(messages, 0)

    assert reply.sender == "Bob"
    assert classify_bid_response(messages[0], reply) == TOWARD

    edge = followed_by(config.BID_MESSAGE_WINDOW - 1)
    assert _find_reply(edge, 0).sender == "Bob"


def test_reply_outside_message_window_turns_away():
    """Test a reply pushed past the message window by the bidder's own messages."""
    messages = followed_by(config.BID_MESSAGE_WINDOW)
    reply = _find_reply(messages, 0)

    assert reply is None
    assert classify_bid_response(messages[0], reply) == AWAY


def test_minimum_total_bids():
    """Test that fewer than ten bids yields no result."""
    state = accumulate(make_conversation(question_and_answer(9)))
    assert compute_bid_response(state) is None

    state = accumulate(make_conversation(question_and_answer(10)))
    result = compute_bid_response(state)

    assert result is not None
    assert result["total_bids"] == 10
    assert result["overall_response_rate"] == 100
    assert result["gottman_benchmark"] == 86
    assert "86%" in result["interpretation"]


def test_per_person_requires_five_bids():
    """Test that only people with enough bids are reported."""
    state = accumulate(make_conversation(question_and_answer(10)))
    result = compute_bid_response(state)

    assert list(result["per_person"]) == ["Alice"]
    alice = result["per_person"]["Alice"]
    assert alice["bids_made"] == 10
    assert alice["turned_toward"] == 10
    assert alice["bid_success_rate"] == 100


def test_unanswered_bids_turn_away():
    """Test bids with no reply from anyone else."""
    messages = question_and_answer(5)
    last = messages[-1].timestamp
    for i in range(5):
        messages.append(make_message("Alice", f"hello {i}?", last + (i + 1) * MINUTE))
    result = compute_bid_response(accumulate(make_conversation(messages)))

    alice = result["per_person"]["Alice"]
    assert alice["bids_made"] == 10
    assert alice["turned_away"] == 5
    assert result["overall_response_rate"] == 50
    assert result["interpretation"].startswith("Low responsiveness")


def test_single_participant():
    """Test that a monologue has no bid analysis."""
    messages = [make_message("Alice", f"q{i}?", BASE_TS + i * MINUTE) for i in range(12)]
    assert compute_bid_response(accumulate(make_conversation(messages))) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
