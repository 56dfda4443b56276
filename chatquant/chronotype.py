"""
Chronotype compatibility for two-person conversations.

Each person's activity midpoint is the circular mean of their hourly message
histogram. Social jet-lag is the distance between the weekday and weekend
midpoints, and the match score shrinks as the two midpoints drift apart.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from . import config

CATEGORY_LABELS = {
    "early_bird": "Early bird",
    "intermediate": "Intermediate",
    "night_owl": "Night owl",
}


def circular_midpoint(hourly: List[int]) -> float:
    """Weighted circular mean hour of a 24-bucket histogram, to 0.1h (12 when empty)."""
    counts = np.asarray(hourly, dtype=float)
    total = counts.sum()
    if total == 0:
        return 12.0
    angles = np.arange(24) / 24 * 2 * np.pi
    mean_angle = np.arctan2((np.sin(angles) * counts).sum() / total,
                            (np.cos(angles) * counts).sum() / total)
    hour = (mean_angle / (2 * np.pi) * 24 + 24) % 24
    return round(float(hour), 1)


def peak_hour(hourly: List[int]) -> int:
    best, peak = 0, 12
    for hour, count in enumerate(hourly):
        if count > best:
            best, peak = count, hour
    return peak


def categorize(midpoint: float) -> str:
    if midpoint < 10:
        return "early_bird"
    if midpoint >= 20:
        return "night_owl"
    return "intermediate"


def circular_delta(a: float, b: float) -> float:
    raw = abs(a - b)
    return min(raw, 24 - raw)


def score_from_delta(delta: float) -> int:
    if delta <= 1:
        return 95
    if delta <= 2:
        return 80
    if delta <= 3:
        return 60
    if delta <= 4:
        return 40
    if delta <= 6:
        return 20
    return 5


def jet_lag_level(hours: float) -> str:
    if hours < 1:
        return "none"
    if hours < 2:
        return "mild"
    if hours < 4:
        return "moderate"
    return "severe"


def interpret(score: int, delta: float) -> str:
    d = f"{delta:.1f}"
    if score >= 90:
        return f"Excellent match (delta {d}h): very similar activity rhythms."
    if score >= 75:
        return f"Good match (delta {d}h): rhythms overlap and shared time is easy to find."
    if score >= 55:
        return f"Moderate match (delta {d}h): some differences, but manageable."
    if score >= 35:
        return f"Low match (delta {d}h): clearly different rhythms may cause friction."
    return f"Very low match (delta {d}h): one is active while the other rests."


def _person_profile(acc) -> Dict[str, Any]:
    midpoint = circular_midpoint(acc.hourly)
    weekday = (circular_midpoint(acc.weekday_hourly)
               if sum(acc.weekday_hourly) >= config.CHRONOTYPE_MIN_SPLIT_MESSAGES else midpoint)
    weekend = (circular_midpoint(acc.weekend_hourly)
               if sum(acc.weekend_hourly) >= config.CHRONOTYPE_MIN_SPLIT_MESSAGES else midpoint)
    lag = circular_delta(weekday, weekend)
    category = categorize(midpoint)
    return {
        "name": acc.name,
        "peak_hour": peak_hour(acc.hourly),
        "midpoint": midpoint,
        "weekday_midpoint": round(weekday, 1),
        "weekend_midpoint": round(weekend, 1),
        "social_jet_lag_hours": round(lag, 1),
        "social_jet_lag_level": jet_lag_level(lag),
        "category": category,
        "label": CATEGORY_LABELS[category],
        "hourly_distribution": list(acc.hourly),
    }


def compute_chronotype(state) -> Optional[Dict[str, Any]]:
    if len(state.names) != 2:
        return None
    accs = [state.persons[name] for name in state.names]
    if any(sum(acc.hourly) < config.CHRONOTYPE_MIN_MESSAGES for acc in accs):
        return None

    persons = [_person_profile(acc) for acc in accs]
    delta = circular_delta(persons[0]["midpoint"], persons[1]["midpoint"])
    score = score_from_delta(delta)
    avg_lag = (circular_delta(persons[0]["weekday_midpoint"], persons[0]["weekend_midpoint"])
               + circular_delta(persons[1]["weekday_midpoint"], persons[1]["weekend_midpoint"])) / 2

    return {
        "persons": persons,
        "delta_hours": round(delta, 1),
        "match_score": score,
        "interpretation": interpret(score, delta),
        "is_compatible": score >= config.CHRONOTYPE_COMPATIBLE_SCORE,
        "avg_social_jet_lag": round(avg_lag, 1),
    }
