"""
Tests for language style matching and pronoun analysis
"""

import pytest

from chatquant.accumulator import accumulate
from chatquant.lexicons import style_tokens
from chatquant.lsm import compute_lsm, match_score
from chatquant.pronouns import compute_pronoun_analysis, count_pronouns
from factories import BASE_TS, MINUTE, make_conversation, make_message


def exchange(alice_line, alice_count, bob_line, bob_count):
    """Alice's lines first, then Bob's, a minute apart."""
    messages = [make_message("Alice", alice_line, BASE_TS + i * MINUTE) for i in range(alice_count)]
    offset = BASE_TS + alice_count * MINUTE
    messages += [make_message("Bob", bob_line, offset + i * MINUTE) for i in range(bob_count)]
    return accumulate(make_conversation(messages))


# ============================================================================
# Tokens
# ============================================================================


def test_style_tokens_keep_single_letters():
    """Test that one-letter words survive and emoji are dropped."""
    assert style_tokens("Hej! 😂 a to-do") == ["hej", "a", "to", "do"]
    assert style_tokens("") == []


def test_count_pronouns_polish_forms():
    """Test that "my" counts as I before we, and declined forms are matched."""
    assert count_pronouns(["my", "ja", "nasz", "twój", "kot"]) == {"i": 2, "we": 1, "you": 1}


# ============================================================================
# Language style matching
# ============================================================================


def test_identical_styles_match_fully():
    state = exchange("the cat and the dog are in the house", 6, "the cat and the dog are in the house", 6)
    result = compute_lsm(state)

    assert result["overall"] == 1.0
    assert set(result["per_category"]) == {"articles", "conjunctions", "auxiliary_verbs", "prepositions"}
    assert result["interpretation"].startswith("High")


def test_unused_categories_are_excluded():
    """Test that a category only one person uses pulls the mean down."""
    state = exchange("the and the and the and", 10, "the cat the cat the cat", 10)
    result = compute_lsm(state)

    assert set(result["per_category"]) == {"articles", "conjunctions"}
    assert result["per_category"]["articles"] == pytest.approx(1.0)
    assert result["per_category"]["conjunctions"] == pytest.approx(match_score(0.5, 0.0))
    assert result["overall"] == 0.5
    assert result["interpretation"].startswith("Very low")


def test_lsm_needs_fifty_tokens_each():
    # 5 messages x 9 tokens = 45 for Bob
    state = exchange("the cat and the dog are in the house", 6, "the cat and the dog are in the house", 5)
    assert compute_lsm(state) is None


def test_lsm_single_participant():
    """Test that a monologue has no style matching."""
    messages = [make_message("Alice", "the cat and the dog", BASE_TS + i * MINUTE) for i in range(30)]
    assert compute_lsm(accumulate(make_conversation(messages))) is None


# ============================================================================
# Pronouns
# ============================================================================


def test_pronoun_rates_and_orientation():
    """Test counts, per-1000 rates, the I/we share and the we-orientation."""
    state = exchange("i think we should go", 40, "you and my plan", 50)
    result = compute_pronoun_analysis(state)

    alice = result["per_person"]["Alice"]
    assert (alice["i_count"], alice["we_count"], alice["you_count"]) == (40, 40, 0)
    assert alice["i_rate"] == 200.0
    assert alice["we_rate"] == 200.0
    assert alice["i_we_ratio"] == 0.5

    bob = result["per_person"]["Bob"]
    assert (bob["i_count"], bob["we_count"], bob["you_count"]) == (50, 0, 50)
    assert bob["you_rate"] == 250.0
    assert bob["i_we_ratio"] == 1.0

    # 40 we / (90 i + 40 we)
    assert result["relationship_orientation"] == 31


def test_orientation_defaults_to_balanced():
    """Test the neutral orientation when nobody says I or we."""
    state = exchange("hello there good friend", 50, "hello there good friend", 50)
    result = compute_pronoun_analysis(state)

    assert result["relationship_orientation"] == 50
    assert result["per_person"]["Bob"]["i_we_ratio"] == 0.0


def test_pronouns_need_two_hundred_words():
    # Bob has 66 x 3 = 198 words
    state = exchange("i think we should go", 40, "hello good friend", 66)
    assert compute_pronoun_analysis(state) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
