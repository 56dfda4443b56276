"""
Composite "viral" scores built from the already-derived bundles.

compatibility   activity overlap, response symmetry, message balance,
                engagement balance and message length match (0-100)
interest        per person, how invested they look (0-100)
ghost_risk      per person, how much their recent activity dropped
delusion        the interest gap between the two most interested people
"""

from typing import Any, Dict, List, Optional

from . import config
from .helpers import clamp, linear_regression_slope, round_half_up, safe_divide

GHOST_WEIGHTS = {"response_time": 0.3, "message_length": 0.25, "initiation": 0.25, "volume": 0.2}
GHOST_FACTOR_MIN = 30


# ============================================================================
# Compatibility
# ============================================================================

def activity_overlap(heatmap: Dict[str, Any], a: str, b: str) -> float:
    hourly_a = [sum(row[h] for row in heatmap["per_person"][a]) for h in range(24)]
    hourly_b = [sum(row[h] for row in heatmap["per_person"][b]) for h in range(24)]
    total_a, total_b = sum(hourly_a), sum(hourly_b)
    if total_a == 0 or total_b == 0:
        return 0.0
    overlap = sum(min(x / total_a, y / total_b) for x, y in zip(hourly_a, hourly_b))
    return clamp(overlap * 100)


def response_symmetry(timing: Dict[str, Any], a: str, b: str) -> float:
    med_a = timing["per_person"][a]["median_response_time_ms"]
    med_b = timing["per_person"][b]["median_response_time_ms"]
    top = max(med_a, med_b)
    if top == 0:
        return 50.0
    return clamp(100 - safe_divide(abs(med_a - med_b), top) * 100)


def message_balance(engagement: Dict[str, Any], a: str) -> float:
    return clamp(100 - abs(engagement["message_ratio"].get(a, 0) - 0.5) * 200)


def _min_max_ratio(x: float, y: float) -> int:
    top = max(x, y)
    return round_half_up(min(x, y) / top * 100) if top > 0 else 50


def engagement_balance(engagement: Dict[str, Any], a: str, b: str) -> float:
    rate_a = engagement["reaction_give_rate"].get(a, 0)
    rate_b = engagement["reaction_give_rate"].get(b, 0)

    if rate_a == 0 and rate_b == 0 and engagement["mention_rate"] and engagement["reply_rate"]:
        mentions = _min_max_ratio(engagement["mention_rate"].get(a, 0), engagement["mention_rate"].get(b, 0))
        replies = _min_max_ratio(engagement["reply_rate"].get(a, 0), engagement["reply_rate"].get(b, 0))
        return float(round_half_up((mentions + replies) / 2))

    return clamp(_min_max_ratio(rate_a, rate_b))


def length_match(per_person: Dict[str, Dict], a: str, b: str) -> float:
    avg_a = per_person[a]["average_message_length"]
    avg_b = per_person[b]["average_message_length"]
    top = max(avg_a, avg_b)
    if top == 0:
        return 50.0
    return clamp(100 - safe_divide(abs(avg_a - avg_b), top) * 100)


def compatibility_score(bundles: Dict[str, Any], names: List[str]) -> int:
    if len(names) < 2:
        return 0
    a, b = names[0], names[1]
    parts = [
        activity_overlap(bundles["heatmap"], a, b),
        response_symmetry(bundles["timing"], a, b),
        message_balance(bundles["engagement"], a),
        engagement_balance(bundles["engagement"], a, b),
        length_match(bundles["per_person"], a, b),
    ]
    return int(clamp(round_half_up(sum(parts) / 5)))


# ============================================================================
# Interest
# ============================================================================

def _series(trend: List[Dict[str, Any]], name: str) -> List[float]:
    return [entry["per_person"].get(name, 0) for entry in trend]


def interest_score(name: str, bundles: Dict[str, Any], total_messages: int) -> int:
    per_person = bundles["per_person"][name]
    if per_person["total_messages"] == 0:
        return 0
    timing, engagement, trends = bundles["timing"], bundles["engagement"], bundles["trends"]

    initiations = timing["conversation_initiations"]
    total_init = sum(initiations.values())
    initiation = clamp(safe_divide(initiations.get(name, 0), total_init) * 100) if total_init > 0 else 50.0

    rt_slope = linear_regression_slope([v for v in _series(trends["response_time_trend"], name) if v > 0])
    response = clamp(50 - safe_divide(rt_slope, 1200))

    ml_slope = linear_regression_slope([v for v in _series(trends["message_length_trend"], name) if v > 0])
    length = clamp(50 + ml_slope * 25)

    receive_rate = engagement["reaction_receive_rate"].get(name, 0)
    if receive_rate > 0:
        engaged = clamp(receive_rate * 500)
    elif engagement["mention_rate"] and engagement["reply_rate"]:
        engaged = clamp(engagement["mention_rate"].get(name, 0) * 200
                        + engagement["reply_rate"].get(name, 0) * 300)
    else:
        engaged = 50.0

    double_texts = engagement["double_texts"].get(name, 0)
    double_text = clamp(safe_divide(double_texts * 1000, total_messages) * 2)

    late = timing["late_night_messages"].get(name, 0)
    late_night = clamp(safe_divide(late, per_person["total_messages"]) * 1000)

    weighted = (
        initiation * 0.25
        + response * 0.2
        + length * 0.15
        + engaged * 0.2
        + double_text * 0.1
        + late_night * 0.1
    )
    return int(clamp(round_half_up(weighted)))


# ============================================================================
# Ghost risk
# ============================================================================

def _avg_nonzero(values: List[float]) -> float:
    return safe_divide(sum(values), len([v for v in values if v > 0]) or 1)


def _relative_change(earlier: float, recent: float) -> float:
    return clamp(safe_divide(abs(recent - earlier), earlier) * 100)


def ghost_risk(name: str, bundles: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Compare the last three months with everything before them."""
    trends, volume = bundles["trends"], bundles["patterns"]["monthly_volume"]
    split = config.GHOST_RISK_RECENT_MONTHS
    if len(volume) <= split:
        return None

    factors = []
    scores = {key: 0.0 for key in GHOST_WEIGHTS}

    rt = _series(trends["response_time_trend"], name)
    rt_recent, rt_earlier = _avg_nonzero(rt[-split:]), _avg_nonzero(rt[:-split])
    if rt_earlier > 0 and rt_recent > rt_earlier:
        scores["response_time"] = _relative_change(rt_earlier, rt_recent)
        if scores["response_time"] > GHOST_FACTOR_MIN:
            factors.append("Response times are getting longer")

    ml = _series(trends["message_length_trend"], name)
    ml_recent, ml_earlier = _avg_nonzero(ml[-split:]), _avg_nonzero(ml[:-split])
    if ml_earlier > 0 and ml_recent < ml_earlier:
        scores["message_length"] = _relative_change(ml_earlier, ml_recent)
        if scores["message_length"] > GHOST_FACTOR_MIN:
            factors.append("Messages are getting shorter")

    init = _series(trends["initiation_trend"], name)
    init_recent = safe_divide(sum(init[-split:]), len(init[-split:]))
    init_earlier = safe_divide(sum(init[:-split]), len(init[:-split]))
    if init_earlier > 0 and init_recent < init_earlier:
        scores["initiation"] = _relative_change(init_earlier, init_recent)
        if scores["initiation"] > GHOST_FACTOR_MIN:
            factors.append("Starts conversations less often")

    vol = [m["per_person"].get(name, 0) for m in volume]
    vol_recent = safe_divide(sum(vol[-split:]), split)
    vol_earlier = safe_divide(sum(vol[:-split]), len(vol) - split)
    if vol_earlier > 0 and vol_recent < vol_earlier:
        scores["volume"] = _relative_change(vol_earlier, vol_recent)
        if scores["volume"] > GHOST_FACTOR_MIN:
            factors.append("Fewer messages in recent months")

    score = int(clamp(round_half_up(sum(scores[k] * w for k, w in GHOST_WEIGHTS.items()))))
    if not factors and score > 0:
        factors.append("Minor changes in activity")
    return {"score": score, "factors": factors}


# ============================================================================
# Entry point
# ============================================================================

def compute_viral_scores(bundles: Dict[str, Any], names: List[str], total_messages: int) -> Dict[str, Any]:
    interest = {name: interest_score(name, bundles, total_messages) for name in names}

    delusion, holder = 0, None
    if len(interest) >= 2:
        ranked = sorted(interest.items(), key=lambda kv: -kv[1])
        delusion = abs(ranked[0][1] - ranked[1][1])
        holder = ranked[1][0] if delusion >= config.DELUSION_MIN_GAP else None

    return {
        "compatibility_score": compatibility_score(bundles, names),
        "interest_scores": interest,
        "ghost_risk": {name: ghost_risk(name, bundles) for name in names},
        "delusion_score": int(clamp(delusion)),
        "delusion_holder": holder,
    }
