"""
Signature phrases and the best time to reach each person.
"""

from collections import Counter
from typing import Any, Dict, List

from . import config
from .helpers import DAY_NAMES


def compute_catchphrases(state) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    """Bigrams and trigrams a person uses often and mostly on their own."""
    global_counts: Counter = Counter()
    for acc in state.persons.values():
        global_counts.update(acc.bigram_counter)
        global_counts.update(acc.trigram_counter)

    per_person = {}
    for name, acc in state.persons.items():
        candidates = []
        for counter in (acc.bigram_counter, acc.trigram_counter):
            for phrase, count in counter.items():
                if count < config.CATCHPHRASE_MIN_COUNT:
                    continue
                uniqueness = count / global_counts[phrase]
                if uniqueness < config.CATCHPHRASE_MIN_UNIQUENESS:
                    continue
                candidates.append({"phrase": phrase, "count": count, "uniqueness": round(uniqueness, 2)})
        candidates.sort(key=lambda c: -c["count"] * c["uniqueness"])
        per_person[name] = candidates[:config.CATCHPHRASE_LIMIT]

    return {"per_person": per_person}


def _format_hour(hour: int) -> str:
    return f"{hour:02d}:00"


def compute_best_time_to_text(heatmap: Dict[str, Any], timing: Dict[str, Any],
                              names: List[str]) -> Dict[str, Dict[str, Any]]:
    per_person = {}
    for name in names:
        matrix = heatmap["per_person"][name]
        best_count, best_day, best_hour = 0, 0, 0
        for day in range(7):
            for hour in range(24):
                if matrix[day][hour] > best_count:
                    best_count, best_day, best_hour = matrix[day][hour], day, hour

        end = min(best_hour + 2, 24)
        per_person[name] = {
            "best_day": DAY_NAMES[best_day],
            "best_hour": best_hour,
            "best_window": f"{DAY_NAMES[best_day]}s {_format_hour(best_hour)}-{_format_hour(end)}",
            "avg_response_ms": timing["per_person"][name]["median_response_time_ms"],
        }
    return {"per_person": per_person}
