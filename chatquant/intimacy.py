"""
Monthly intimacy progression.

Four monthly factors (message length, emotional word density, informality,
late-night share) are each scaled against their best month, combined into
a 0-100 score, and the slope of that score gives the overall direction.
"""

from typing import Any, Dict

from . import config
from .helpers import linear_regression_slope, round_half_up, round_to, safe_divide

WEIGHTS = {
    "message_length_factor": 0.25,
    "emotional_words_factor": 0.3,
    "informality_factor": 0.25,
    "late_night_factor": 0.2,
}


def _normalize(value: float, best: float) -> int:
    if best <= 0:
        return 0
    return min(100, round_half_up(value / best * 100))


def slope_label(slope: float) -> str:
    if slope > 2:
        return "growing closer"
    if slope > 0.5:
        return "gradually closer"
    if slope > -0.5:
        return "stable"
    if slope > -2:
        return "slowly drifting"
    return "drifting apart"


def compute_intimacy(state) -> Dict[str, Any]:
    months = sorted(state.intimacy_months)
    if len(months) < config.INTIMACY_MIN_MONTHS:
        return {"trend": [], "overall_slope": 0.0, "label": "stable"}

    raw = {
        "message_length_factor": [],
        "emotional_words_factor": [],
        "informality_factor": [],
        "late_night_factor": [],
    }
    for month in months:
        b = state.intimacy_months[month]
        raw["message_length_factor"].append(safe_divide(b.words, b.messages))
        raw["emotional_words_factor"].append(safe_divide(b.emotional_words, b.words))
        raw["informality_factor"].append(safe_divide(b.informality, b.messages))
        raw["late_night_factor"].append(safe_divide(b.late_night, b.messages))

    best = {key: max(max(values), 0.001) for key, values in raw.items()}

    trend = []
    for i, month in enumerate(months):
        components = {key: _normalize(raw[key][i], best[key]) for key in raw}
        score = round_half_up(sum(components[key] * w for key, w in WEIGHTS.items()))
        trend.append({"month": month, "score": score, "components": components})

    slope = linear_regression_slope([point["score"] for point in trend])
    return {
        "trend": trend,
        "overall_slope": round_to(slope, 3),
        "label": slope_label(slope),
    }
