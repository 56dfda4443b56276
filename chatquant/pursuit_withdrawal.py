"""
Pursuit / withdrawal cycles.

A pursuit is a burst of at least four logical messages from one person
(messages closer than two minutes count as one), followed by a daytime
silence of four hours or more. Short bursts only count when they contain
a demand such as "hello?" or "answer me".
"""

import logging
from typing import Any, Dict, List, Optional

from . import config
from .helpers import mean, round_to, to_local

logger = logging.getLogger(__name__)


def contains_demand_marker(content: Optional[str]) -> bool:
    text = (content or "").lower().strip()
    if not text:
        return False
    if text in config.DEMAND_PUNCTUATION:
        return True
    return any(marker in text for marker in config.DEMAND_MARKERS)


def is_overnight_gap(start_ts: int, gap_ms: int) -> bool:
    """Silences that are likely sleep (or longer than half a day) are not withdrawal."""
    if gap_ms > config.WITHDRAWAL_OVERNIGHT_MAX_MS:
        return True
    hour = to_local(start_ts).hour
    return hour >= config.OVERNIGHT_START_HOUR or hour < config.OVERNIGHT_END_HOUR


def find_cycles(messages) -> List[Dict[str, Any]]:
    cycles = []
    i = 0
    n = len(messages)
    while i < n:
        sender = messages[i].sender
        start = i
        logical = 0
        last_logical_ts = 0
        while i < n and messages[i].sender == sender and (
            logical == 0 or messages[i].timestamp - messages[i - 1].timestamp < config.PURSUIT_WINDOW_MS
        ):
            if logical == 0 or messages[i].timestamp - last_logical_ts > config.PURSUIT_ENTER_AS_COMMA_MS:
                logical += 1
                last_logical_ts = messages[i].timestamp
            i += 1

        if logical < config.PURSUIT_MIN_CONSECUTIVE or i >= n:
            continue

        last = messages[i - 1]
        silence = messages[i].timestamp - last.timestamp
        if silence < config.WITHDRAWAL_THRESHOLD_MS or is_overnight_gap(last.timestamp, silence):
            continue

        if logical < config.PURSUIT_ALWAYS_FLAG and not any(
            contains_demand_marker(m.content) for m in messages[start:i]
        ):
            continue

        cycles.append({
            "sender": sender,
            "pursuit_timestamp": messages[start].timestamp,
            "withdrawal_duration_ms": silence,
            "pursuit_message_count": logical,
            "resolved": messages[i].sender != sender,
        })
    return cycles


def compute_pursuit_withdrawal(state) -> Optional[Dict[str, Any]]:
    names = state.names
    messages = state.messages
    if len(names) < 2 or len(messages) < config.PURSUIT_MIN_MESSAGES:
        return None

    cycles = find_cycles(messages)
    if len(cycles) < 2:
        return None

    counts = {name: 0 for name in names}
    for cycle in cycles:
        counts[cycle.pop("sender")] += 1
    ranked = sorted(counts.items(), key=lambda kv: -kv[1])
    top, bottom = ranked[0], ranked[-1]

    if (top[1] - bottom[1]) / len(cycles) < config.PURSUIT_MUTUAL_THRESHOLD:
        pursuer = withdrawer = "mutual"
    else:
        pursuer, withdrawer = top[0], bottom[0]

    durations = [c["withdrawal_duration_ms"] for c in cycles]
    mid = len(durations) // 2
    first_half = mean(durations[:mid])
    second_half = mean(durations[mid:])
    trend = second_half / first_half - 1 if first_half > 0 else 0.0
    logger.debug(f"Pursuit/withdrawal: {len(cycles)} cycles, pursuer={pursuer}")

    return {
        "pursuer": pursuer,
        "withdrawer": withdrawer,
        "cycle_count": len(cycles),
        "avg_cycle_duration_ms": round_to(mean(durations)),
        "escalation_trend": round_to(trend, 3),
        "cycles": cycles,
    }
