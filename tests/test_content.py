"""
Tests for text-derived metrics: sentiment, conflicts, intimacy, vocabulary
"""

import pytest

from chatquant.accumulator import accumulate
from chatquant.catchphrases import compute_catchphrases
from chatquant.conflicts import compute_conflicts
from chatquant.intimacy import compute_intimacy, slope_label
from chatquant.person_metrics import compute_person_metrics
from chatquant.sentiment import compute_sentiment, score_sentiment
from factories import BASE_TS, DAY, HOUR, MINUTE, alternating, make_conversation, make_message

HEATED = "I really cannot believe you said that to me again"


# ============================================================================
# Sentiment
# ============================================================================

def test_score_sentiment():
    """Test lexicon matching, negation and repeated letters."""
    assert score_sentiment("I love this")["score"] == 1.0
    assert score_sentiment("this is not good")["score"] == -1.0
    assert score_sentiment("nie lubię")["score"] == -1.0
    assert score_sentiment("so gooood")["score"] == 1.0
    assert score_sentiment("great but sad") == {"positive": 1, "negative": 1, "total": 2, "score": 0.0}
    assert score_sentiment("hello there")["total"] == 0


def test_compute_sentiment():
    """Test ratios and the empty-person default."""
    messages = [
        make_message("Alice", "love it", BASE_TS),
        make_message("Alice", "awful day", BASE_TS + MINUTE),
        make_message("Alice", "ok", BASE_TS + 2 * MINUTE),
        make_message("Alice", "amazing", BASE_TS + 3 * MINUTE),
        make_message("Bob", "<Media omitted>", BASE_TS + 4 * MINUTE, type="media"),
    ]
    result = compute_sentiment(accumulate(make_conversation(messages)))["per_person"]

    assert result["Alice"]["positive_ratio"] == 0.5
    assert result["Alice"]["negative_ratio"] == 0.25
    assert result["Alice"]["avg_sentiment"] == 0.25
    assert result["Alice"]["scored_messages"] == 4
    # Fewer than 20 scored messages
    assert result["Alice"]["emotional_volatility"] == 0.0
    assert result["Bob"]["neutral_ratio"] == 1.0
    assert result["Bob"]["scored_messages"] == 0


# ============================================================================
# Conflicts
# ============================================================================

@pytest.fixture
def fight_then_silence():
    """Calm chat, a heated exchange, 30 hours of silence, then short replies."""
    calm = alternating(10, start=BASE_TS, content="ok sure")
    heated = alternating(10, start=BASE_TS + 3 * HOUR, content=HEATED)
    resume_at = heated[-1].timestamp + 30 * HOUR
    after = alternating(5, names=("Bob", "Alice"), start=resume_at, content="hi")
    return accumulate(make_conversation(calm + heated + after))


def test_conflict_events(fight_then_silence):
    """Test escalation, cold silence and resolution detection."""
    result = compute_conflicts(fight_then_silence)
    types = [event["type"] for event in result["events"]]

    assert types == ["escalation", "cold_silence", "resolution"]
    assert result["total_conflicts"] == 2
    assert result["most_conflict_prone"] == "Alice"

    escalation, silence, resolution = result["events"]
    assert escalation["message_range"] == [10, 11]
    assert escalation["severity"] == 2
    assert silence["severity"] == 1
    assert "30h" in silence["description"]
    assert resolution["message_range"] == [20, 24]
    assert resolution["date"] == "2024-01-02"


def test_conflicts_need_enough_messages():
    result = compute_conflicts(accumulate(make_conversation(alternating(10))))
    assert result == {"events": [], "total_conflicts": 0, "most_conflict_prone": None}


# ============================================================================
# Intimacy
# ============================================================================

def test_slope_label():
    assert slope_label(3) == "growing closer"
    assert slope_label(1) == "gradually closer"
    assert slope_label(0) == "stable"
    assert slope_label(-1) == "slowly drifting"
    assert slope_label(-3) == "drifting apart"


def test_compute_intimacy():
    """Test a warm first month followed by a cold one."""
    january = [
        make_message("Alice", "love you so much darling!!", BASE_TS),
        make_message("Bob", "miss you too sweetheart ❤️", BASE_TS + MINUTE),
    ]
    february = [
        make_message("Alice", "ok", BASE_TS + 35 * DAY),
        make_message("Bob", "fine", BASE_TS + 35 * DAY + MINUTE),
    ]
    result = compute_intimacy(accumulate(make_conversation(january + february)))

    assert [point["month"] for point in result["trend"]] == ["2024-01", "2024-02"]
    assert result["trend"][0]["score"] > result["trend"][1]["score"]
    assert result["trend"][0]["components"]["emotional_words_factor"] == 100
    assert result["label"] == "drifting apart"

    single = compute_intimacy(accumulate(make_conversation(january)))
    assert single == {"trend": [], "overall_slope": 0.0, "label": "stable"}


# ============================================================================
# Vocabulary
# ============================================================================

def test_catchphrases_are_personal():
    """Test that shared phrases are not anyone's catchphrase."""
    messages = []
    for i in range(3):
        ts = BASE_TS + i * 10 * MINUTE
        messages.append(make_message("Alice", "banana pancake forever", ts))
        messages.append(make_message("Bob", "pizza tonight", ts + MINUTE))
        messages.append(make_message("Alice", "pizza tonight", ts + 2 * MINUTE))
    result = compute_catchphrases(accumulate(make_conversation(messages)))["per_person"]

    phrases = [c["phrase"] for c in result["Alice"]]
    assert phrases[:2] == ["banana pancake", "pancake forever"]
    assert "banana pancake forever" in phrases
    assert "pizza tonight" not in phrases
    assert result["Alice"][0]["uniqueness"] == 1.0
    assert result["Bob"] == []


def test_person_metrics():
    """Test totals, links and top words."""
    messages = [
        make_message("Alice", "pizza pizza tonight?", BASE_TS),
        make_message("Alice", "see https://example.com", BASE_TS + MINUTE, type="link", has_link=True),
        make_message("Bob", "yes 😂😂", BASE_TS + 2 * MINUTE),
    ]
    metrics = compute_person_metrics(accumulate(make_conversation(messages)))

    alice, bob = metrics["Alice"], metrics["Bob"]
    assert alice["total_messages"] == 2
    assert alice["total_words"] == 5
    assert alice["average_message_length"] == 2.5
    assert alice["questions_asked"] == 1
    assert alice["links_shared"] == 1
    assert alice["top_words"][0] == {"word": "pizza", "count": 2}
    assert alice["longest_message"]["length"] == 3
    assert bob["emoji_count"] == 2
    assert bob["top_emojis"] == [{"emoji": "😂", "count": 2}]
    assert "mentions_made" not in bob


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
