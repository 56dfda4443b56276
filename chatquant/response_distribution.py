"""Histogram of raw response times per person."""

from typing import Any, Dict, List

from . import config
from .helpers import round_to, safe_divide


def bin_response_times(samples: List[int]) -> List[Dict[str, Any]]:
    total = len(samples)
    bins = []
    for label, low, high in config.RESPONSE_TIME_BINS:
        count = sum(1 for s in samples if s >= low and (high is None or s < high))
        bins.append({
            "label": label,
            "min_ms": low,
            "max_ms": high,
            "count": count,
            "percentage": round_to(safe_divide(count, total) * 100),
        })
    return bins


def compute_response_time_distribution(state) -> Dict[str, Any]:
    return {
        "per_person": {
            name: bin_response_times(acc.response_times)
            for name, acc in state.persons.items()
        }
    }
