"""
Outlier-robust response-time statistics.

Raw samples give mean, median, fastest and slowest. Everything else
(trimmed mean, spread, percentiles, skewness) is computed after dropping
samples outside the IQR fences, so a single multi-day gap does not
dominate the result. It still shows up as ``slowest_response_ms``.
"""

from typing import Any, Dict, List, Optional, Sequence

from . import config
from .helpers import (
    filter_outliers,
    iqr_fences,
    linear_regression_slope,
    mean,
    median,
    percentile,
    round_to,
    skewness,
    std_dev,
    trimmed_mean,
)


def response_time_stats(samples: Sequence[float]) -> Dict[str, Any]:
    """Distribution summary for one person's response-time samples."""
    n = len(samples)
    if n == 0:
        return {
            "average_response_time_ms": 0.0,
            "median_response_time_ms": 0.0,
            "fastest_response_ms": 0.0,
            "slowest_response_ms": 0.0,
            "trimmed_mean_ms": 0.0,
            "std_dev_ms": 0.0,
            "q1_ms": 0.0,
            "q3_ms": 0.0,
            "iqr_ms": 0.0,
            "p75_ms": 0.0,
            "p90_ms": 0.0,
            "p95_ms": 0.0,
            "skewness": 0.0,
            "sample_size": 0,
            "filtered_sample_size": 0,
            "outliers_removed": 0,
            "low_confidence": True,
        }

    q1, q3, _, _ = iqr_fences(samples)
    filtered = filter_outliers(samples)

    return {
        "average_response_time_ms": round_to(mean(samples)),
        "median_response_time_ms": round_to(median(samples)),
        "fastest_response_ms": float(min(samples)),
        "slowest_response_ms": float(max(samples)),
        "trimmed_mean_ms": round_to(trimmed_mean(filtered)),
        "std_dev_ms": round_to(std_dev(filtered)),
        "q1_ms": round_to(q1),
        "q3_ms": round_to(q3),
        "iqr_ms": round_to(q3 - q1),
        "p75_ms": round_to(percentile(filtered, 75)),
        "p90_ms": round_to(percentile(filtered, 90)),
        "p95_ms": round_to(percentile(filtered, 95)),
        "skewness": round_to(skewness(filtered), 4),
        "sample_size": n,
        "filtered_sample_size": len(filtered),
        "outliers_removed": n - len(filtered),
        "low_confidence": n < config.MIN_RESPONSE_SAMPLES,
    }


def monthly_filtered_medians(acc, months: List[str]) -> List[Optional[float]]:
    """Median of in-fence samples for each month (None for months without data).

    Fences come from the person's full sample set so every month is judged
    against the same bounds.
    """
    samples = acc.response_times
    if len(samples) >= config.OUTLIER_FILTER_MIN_SAMPLES:
        _, _, low, high = iqr_fences(samples)
    else:
        low, high = float("-inf"), float("inf")

    medians = []
    for month in months:
        kept = [t for t in acc.monthly_response_times.get(month, []) if low <= t <= high]
        medians.append(median(kept) if kept else None)
    return medians


def compute_timing(state) -> Dict[str, Any]:
    months = state.months
    per_person = {}
    for name, acc in state.persons.items():
        stats = response_time_stats(acc.response_times)
        # Slope only over months that actually have samples
        with_data = [m for m in monthly_filtered_medians(acc, months) if m is not None]
        stats["response_time_trend"] = round_to(linear_regression_slope(with_data), 4)
        per_person[name] = stats

    return {
        "per_person": per_person,
        "conversation_initiations": {n: a.initiations for n, a in state.persons.items()},
        "conversation_endings": {n: a.endings for n, a in state.persons.items()},
        "longest_silence": dict(state.longest_silence),
        "late_night_messages": {n: a.late_night_messages for n, a in state.persons.items()},
    }
