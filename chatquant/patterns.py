"""
Activity patterns: monthly volume, weekday/weekend split, bursts, heatmap
and monthly trends.
"""

import logging
from typing import Any, Dict, List, Mapping

import pandas as pd

from . import config
from .helpers import linear_regression_slope, mean, median, round_to
from .timing import monthly_filtered_medians

logger = logging.getLogger(__name__)


def detect_bursts(daily_counts: Mapping[str, int]) -> List[Dict[str, Any]]:
    """Find runs of days whose volume exceeds a multiple of the trailing average.

    The baseline for the first week of active days is the overall mean;
    after that it is the mean of the previous seven active days.
    """
    if len(daily_counts) < config.BURST_MIN_DAYS:
        return []

    series = pd.Series(dict(daily_counts), dtype=float).sort_index()
    series.index = pd.to_datetime(series.index)

    window = config.BURST_TRAILING_DAYS
    baseline = series.rolling(window).mean().shift(1)
    baseline.iloc[:window] = series.mean()

    burst_days = series[(series > config.BURST_MULTIPLIER * baseline) & (baseline > 0)]
    if burst_days.empty:
        return []

    day_index = burst_days.index.to_series()
    group_ids = (day_index.diff() != pd.Timedelta(days=1)).cumsum()

    bursts = []
    for _, group in burst_days.groupby(group_ids.values):
        count = int(group.sum())
        bursts.append({
            "start_date": group.index[0].strftime("%Y-%m-%d"),
            "end_date": group.index[-1].strftime("%Y-%m-%d"),
            "message_count": count,
            "avg_daily": round(count / len(group), 2),
        })
    return bursts


def compute_patterns(state) -> Dict[str, Any]:
    months = state.months
    monthly_volume = []
    for month in months:
        per_person = {n: a.monthly_messages.get(month, 0) for n, a in state.persons.items()}
        monthly_volume.append({"month": month, "per_person": per_person, "total": sum(per_person.values())})

    bursts = detect_bursts(state.daily_counts)
    person_bursts = {n: detect_bursts(a.daily_counts) for n, a in state.persons.items()}
    logger.debug(f"Detected {len(bursts)} conversation bursts")

    return {
        "monthly_volume": monthly_volume,
        "weekday_weekend": {
            "weekday": {n: a.weekday_messages for n, a in state.persons.items()},
            "weekend": {n: a.weekend_messages for n, a in state.persons.items()},
        },
        "volume_trend": round_to(linear_regression_slope([m["total"] for m in monthly_volume]), 4),
        "bursts": bursts,
        "person_bursts": person_bursts,
    }


def compute_heatmap(state) -> Dict[str, Any]:
    return {
        "per_person": {n: [list(row) for row in a.heatmap] for n, a in state.persons.items()},
        "combined": [list(row) for row in state.heatmap_combined],
    }


def compute_trends(state) -> Dict[str, Any]:
    """Month-by-month series per person; 0 where a month has no data."""
    months = state.months
    rt_medians = {n: monthly_filtered_medians(a, months) for n, a in state.persons.items()}

    response_time_trend = []
    message_length_trend = []
    initiation_trend = []
    sentiment_trend = []
    for i, month in enumerate(months):
        initiations = state.monthly_initiations.get(month, {})
        response_time_trend.append({
            "month": month,
            "per_person": {n: round_to(rt_medians[n][i] or 0.0) for n in state.persons},
        })
        message_length_trend.append({
            "month": month,
            "per_person": {
                n: round_to(median(a.monthly_word_counts.get(month, [])))
                for n, a in state.persons.items()
            },
        })
        initiation_trend.append({
            "month": month,
            "per_person": {n: initiations.get(n, 0) for n in state.persons},
        })
        sentiment_trend.append({
            "month": month,
            "per_person": {
                n: round_to(mean(a.monthly_sentiment.get(month, [])), 4)
                for n, a in state.persons.items()
            },
        })

    return {
        "response_time_trend": response_time_trend,
        "message_length_trend": message_length_trend,
        "initiation_trend": initiation_trend,
        "sentiment_trend": sentiment_trend,
    }
