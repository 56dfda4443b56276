"""Peak and quietest months plus the older-vs-recent volume trend."""

from datetime import date
from typing import Any, Dict, Optional

from . import config
from .helpers import month_label, round_to, safe_divide


def _month_start(month: str) -> date:
    year, mon = month.split("-")
    return date(int(year), int(mon), 1)


def compute_year_milestones(patterns: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    volume = patterns["monthly_volume"]
    if len(volume) < config.MILESTONES_MIN_MONTHS:
        return None

    peak = max(volume, key=lambda m: m["total"])
    worst = min(volume, key=lambda m: m["total"])

    first = _month_start(volume[0]["month"])
    last = _month_start(volume[-1]["month"])
    midpoint = first + (last - first) / 2
    older = sum(m["total"] for m in volume if _month_start(m["month"]) < midpoint)
    recent = sum(m["total"] for m in volume if _month_start(m["month"]) >= midpoint)
    yoy = safe_divide(recent, older) - 1 if older > 0 else 0.0

    return {
        "peak_month": {"month": peak["month"], "label": month_label(peak["month"]), "count": peak["total"]},
        "worst_month": {"month": worst["month"], "label": month_label(worst["month"]), "count": worst["total"]},
        "yoy_trend": round_to(yoy, 3),
        "total_months": len(volume),
    }
