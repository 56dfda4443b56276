"""
Shared numeric, time and text helpers.

All statistical helpers return 0.0 for empty input so that no NaN or inf
reaches the analysis output.
"""

import math
import re
from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

import emoji
import numpy as np

from . import config
from .lexicons import STOPWORDS

URL_RE = re.compile(r"https?://\S+|www\.\S+", re.IGNORECASE)
URL_QUERY_RE = re.compile(r"(https?://\S+?)\?\S*", re.IGNORECASE)
WORD_SPLIT_RE = re.compile(r"[^\w']+", re.UNICODE)

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


# ============================================================================
# Time
# ============================================================================

@lru_cache(maxsize=8)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def to_local(ts_ms: int) -> datetime:
    """Convert epoch milliseconds to an aware datetime in the configured zone."""
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc).astimezone(_zone(config.TIMEZONE))


def month_key(ts_ms: int) -> str:
    return to_local(ts_ms).strftime("%Y-%m")


def day_key(ts_ms: int) -> str:
    return to_local(ts_ms).strftime("%Y-%m-%d")


def day_of_week(dt: datetime) -> int:
    """Day index with 0 = Sunday."""
    return (dt.weekday() + 1) % 7


def is_late_night_hour(hour: int) -> bool:
    return hour >= config.LATE_NIGHT_START_HOUR or hour < config.LATE_NIGHT_END_HOUR


def is_early_morning_hour(hour: int) -> bool:
    return config.EARLY_MORNING_START_HOUR <= hour < config.EARLY_MORNING_END_HOUR


def month_label(month: str) -> str:
    """'2024-01' -> 'Jan 2024'."""
    year, mon = month.split("-")
    return f"{MONTH_NAMES[int(mon) - 1]} {year}"


# ============================================================================
# Numbers
# ============================================================================

def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    if not denominator:
        return default
    result = numerator / denominator
    return result if math.isfinite(result) else default


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    if not math.isfinite(value):
        return low
    return max(low, min(high, value))


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def median(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.median(values))


def percentile(values: Sequence[float], p: float) -> float:
    """Linear interpolation at rank p/100 * (n - 1) over the sorted values."""
    if len(values) == 0:
        return 0.0
    return float(np.percentile(np.asarray(values, dtype=float), p))


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def trimmed_mean(values: Sequence[float], fraction: Optional[float] = None) -> float:
    """Mean after dropping floor(n * fraction) values from each end.

    Falls back to the median when trimming would leave nothing.
    """
    if len(values) == 0:
        return 0.0
    if fraction is None:
        fraction = config.TRIM_FRACTION
    ordered = sorted(values)
    n = len(ordered)
    trim = int(math.floor(n * fraction))
    if trim * 2 >= n:
        return median(ordered)
    return mean(ordered[trim:n - trim])


def skewness(values: Sequence[float]) -> float:
    """Fisher-Pearson coefficient of skewness (0 when undefined)."""
    n = len(values)
    if n < 3:
        return 0.0
    arr = np.asarray(values, dtype=float)
    sd = float(np.std(arr))
    if sd == 0:
        return 0.0
    return float(np.mean(((arr - arr.mean()) / sd) ** 3))


def iqr_fences(values: Sequence[float], multiplier: Optional[float] = None) -> Tuple[float, float, float, float]:
    """Return (q1, q3, lower_fence, upper_fence)."""
    if multiplier is None:
        multiplier = config.IQR_MULTIPLIER
    q1 = percentile(values, 25)
    q3 = percentile(values, 75)
    iqr = q3 - q1
    return q1, q3, q1 - multiplier * iqr, q3 + multiplier * iqr


def filter_outliers(values: Sequence[float]) -> List[float]:
    """Drop values outside the IQR fences; small samples pass through unchanged."""
    if len(values) < config.OUTLIER_FILTER_MIN_SAMPLES:
        return list(values)
    _, _, low, high = iqr_fences(values)
    return [v for v in values if low <= v <= high]


def linear_regression_slope(values: Iterable[float]) -> float:
    """Least-squares slope of values against their position (finite values only)."""
    clean = [float(v) for v in values if v is not None and math.isfinite(v)]
    n = len(clean)
    if n < 2:
        return 0.0
    x = np.arange(n, dtype=float)
    y = np.asarray(clean)
    denominator = float(((x - x.mean()) ** 2).sum())
    if denominator == 0:
        return 0.0
    slope = float(((x - x.mean()) * (y - y.mean())).sum()) / denominator
    return slope if math.isfinite(slope) else 0.0


def round_half_up(value: float) -> int:
    """Integer rounding with .5 always going up (round() rounds half to even)."""
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def round_to(value: float, digits: int = 2) -> float:
    return round(float(value), digits) if math.isfinite(value) else 0.0


# ============================================================================
# Text
# ============================================================================

def contains_url(text: str) -> bool:
    return bool(text) and ("http://" in text or "https://" in text)


def strip_urls(text: str) -> str:
    return URL_RE.sub("", text or "")


def strip_url_queries(text: str) -> str:
    """Remove query strings from URLs so '?' in links does not count as a question."""
    return URL_QUERY_RE.sub(r"\1", text or "")


def is_question(text: str) -> bool:
    return "?" in strip_urls(text)


def extract_emojis(text: str) -> List[str]:
    if not text:
        return []
    return [item["emoji"] for item in emoji.emoji_list(text)]


def strip_emoji(text: str) -> str:
    return emoji.replace_emoji(text or "", replace="")


def word_count(text: str) -> int:
    return len(text.split()) if text else 0


def tokenize(text: str) -> List[str]:
    """Lower-case content words: URLs and emoji removed, stopwords dropped."""
    if not text:
        return []
    cleaned = strip_emoji(strip_urls(text)).lower()
    tokens = []
    for raw in WORD_SPLIT_RE.split(cleaned):
        token = raw.strip("'_")
        if len(token) < config.MIN_WORD_LENGTH or token.isdigit():
            continue
        if token in STOPWORDS:
            continue
        tokens.append(token)
    return tokens


def ngrams(tokens: Sequence[str], n: int) -> List[str]:
    return [" ".join(tokens[i:i + n]) for i in range(len(tokens) - n + 1)]


def content_words(text: str, min_length: int = 4) -> set:
    """Lower-cased words longer than three characters, used for topic overlap."""
    words = WORD_SPLIT_RE.split((text or "").lower())
    return {w for w in words if len(w) >= min_length}


def first_tokens(text: str, count: int) -> List[str]:
    words = [w for w in WORD_SPLIT_RE.split((text or "").lower()) if w]
    return words[:count]


def top_items(counter: Dict[str, int], limit: int, key_name: str) -> List[Dict]:
    """Most common entries as [{key_name: item, 'count': n}], ties by first seen."""
    ordered = sorted(counter.items(), key=lambda kv: -kv[1])[:limit]
    return [{key_name: item, "count": count} for item, count in ordered]
