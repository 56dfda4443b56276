"""
Estimated population percentiles.

Each metric is placed on a log-normal reference distribution (median,
sigma) from ``config.RANKING_DISTRIBUTIONS``. These are heuristic norms,
so every ranking is flagged ``is_estimated``.
"""

import math
from typing import Any, Dict, List

from . import config
from .helpers import clamp, mean, round_half_up, round_to

METRICS = {
    "message_volume": ("Message volume", "💬"),
    "response_time": ("Response speed", "⚡"),
    "ghost_frequency": ("Longest ghosting", "👻"),
    "asymmetry": ("Initiation asymmetry", "⚖️"),
}


def lognormal_cdf(value: float, median: float, sigma: float) -> float:
    """P(X <= value) for a log-normal with the given median; 0 for value <= 0."""
    if value <= 0:
        return 0.0
    z = math.log(value / median) / sigma
    return 0.5 * (1 + math.erf(z / math.sqrt(2)))


def _percentile(metric: str, value: float) -> int:
    median, sigma = config.RANKING_DISTRIBUTIONS[metric]
    return int(clamp(round_half_up(lognormal_cdf(value, median, sigma) * 100)))


def _ranking(metric: str, value: float, percentile: int) -> Dict[str, Any]:
    label, emoji = METRICS[metric]
    return {
        "metric": metric,
        "label": label,
        "value": value,
        "percentile": percentile,
        "emoji": emoji,
        "is_estimated": True,
    }


def compute_rankings(per_person: Dict[str, Dict], timing: Dict[str, Any],
                     names: List[str]) -> Dict[str, List[Dict[str, Any]]]:
    volume = sum(per_person[n]["total_messages"] for n in names)

    medians = [timing["per_person"][n]["median_response_time_ms"] for n in names]
    avg_rt = mean([m for m in medians if m > 0])
    # Faster is better, so the scale is inverted
    rt_percentile = 100 - _percentile("response_time", avg_rt) if avg_rt > 0 else 50

    silence_hours = timing["longest_silence"]["duration_ms"] / config.HOUR_MS

    initiations = timing["conversation_initiations"]
    total_init = sum(initiations.get(n, 0) for n in names)
    asymmetry = 0.0
    if total_init > 0 and names:
        asymmetry = abs(initiations.get(names[0], 0) / total_init - 0.5) * 200

    return {
        "rankings": [
            _ranking("message_volume", volume, _percentile("message_volume", volume)),
            _ranking("response_time", round_to(avg_rt), rt_percentile),
            _ranking("ghost_frequency", round_to(silence_hours, 1), _percentile("ghost_frequency", silence_hours)),
            _ranking("asymmetry", round_to(asymmetry, 1), _percentile("asymmetry", asymmetry)),
        ]
    }
