"""
Tests for numeric and text helpers
"""

import pytest

from chatquant.helpers import (
    clamp,
    content_words,
    day_of_week,
    filter_outliers,
    is_question,
    linear_regression_slope,
    median,
    month_key,
    month_label,
    percentile,
    round_half_up,
    safe_divide,
    skewness,
    std_dev,
    strip_url_queries,
    to_local,
    tokenize,
    trimmed_mean,
)

BASE_TS = 1704110400000  # 2024-01-01 12:00 UTC, Monday


def test_percentile_linear_interpolation():
    """Test percentile at rank p/100 * (n - 1)."""
    values = [1, 2, 3, 4]
    assert percentile(values, 50) == 2.5
    assert percentile(values, 25) == 1.75
    assert percentile(values, 100) == 4
    assert percentile([], 50) == 0.0


def test_empty_inputs_are_zero():
    """Test that empty input never yields NaN."""
    assert median([]) == 0.0
    assert std_dev([]) == 0.0
    assert trimmed_mean([]) == 0.0
    assert skewness([1, 2]) == 0.0
    assert linear_regression_slope([5]) == 0.0


def test_std_dev_is_population():
    assert std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == 2.0


def test_trimmed_mean():
    """Test trimming floor(n * 0.1) values from each end."""
    values = list(range(1, 10)) + [1000]
    # n=10 -> one value dropped from each end
    assert trimmed_mean(values) == pytest.approx(sum(range(2, 10)) / 8)
    assert trimmed_mean([1, 2, 3]) == 2.0


def test_filter_outliers():
    """Test IQR fences with the small-sample pass-through."""
    assert filter_outliers([1, 1000, 2]) == [1, 1000, 2]
    values = [10, 12, 11, 13, 12, 11, 5000]
    assert 5000 not in filter_outliers(values)
    assert len(filter_outliers(values)) == 6


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4) == 2
    assert round_half_up(float("nan")) == 0


def test_safe_divide_and_clamp():
    assert safe_divide(1, 0) == 0.0
    assert safe_divide(1, 0, default=50) == 50
    assert clamp(150) == 100
    assert clamp(-3) == 0
    assert clamp(float("inf")) == 0


def test_slope():
    assert linear_regression_slope([1, 2, 3, 4]) == pytest.approx(1.0)
    assert linear_regression_slope([4, 4, 4]) == 0.0


def test_time_helpers():
    """Test local calendar keys in the default UTC zone."""
    local = to_local(BASE_TS)
    assert local.hour == 12
    assert day_of_week(local) == 1
    assert month_key(BASE_TS) == "2024-01"
    assert month_label("2024-03") == "Mar 2024"


def test_tokenize():
    """Test stopwords, URLs and emoji removal."""
    tokens = tokenize("The pizza was great 🍕 https://example.com/menu")
    assert "pizza" in tokens
    assert "great" in tokens
    assert "the" not in tokens
    assert not any("example" in t for t in tokens)
    assert tokenize("") == []


def test_question_detection_ignores_urls():
    assert is_question("are you coming?")
    assert not is_question("https://example.com/search?q=1")
    assert strip_url_queries("see https://x.com/a?b=1") == "see https://x.com/a"


def test_content_words():
    assert content_words("I love this new pizza place") == {"love", "this", "pizza", "place"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
