"""
Heuristic conflict detection.

Three event types:
  escalation    both sides suddenly write much longer messages than usual
  cold_silence  a day-long silence right after an intense back-and-forth
  resolution    the conversation resumes after a cold silence in a calmer tone
"""

import logging
from collections import Counter, deque
from typing import Any, Dict, List, Optional

from . import config
from .helpers import day_key, mean, word_count

logger = logging.getLogger(__name__)


def _event(kind: str, msg_from, msg_to, participants: List[str], description: str,
           severity: int, timestamp: int) -> Dict[str, Any]:
    return {
        "type": kind,
        "timestamp": timestamp,
        "date": day_key(timestamp),
        "participants": participants,
        "description": description,
        "severity": severity,
        "message_range": [msg_from.index, msg_to.index],
    }


def _senders(messages, start: int, end: int) -> List[str]:
    """Distinct senders of messages[start..end] in order of appearance."""
    seen = []
    for msg in messages[start:end + 1]:
        if msg.sender not in seen:
            seen.append(msg.sender)
    return seen


def detect_escalations(messages) -> List[Dict[str, Any]]:
    """Length spikes from two different people within a short window."""
    events = []
    windows: Dict[str, deque] = {}
    spikes: List[Dict[str, Any]] = []
    last_escalation: Optional[int] = None

    for i, msg in enumerate(messages):
        words = word_count(msg.content)
        if words == 0:
            continue

        window = windows.setdefault(msg.sender, deque(maxlen=config.ESCALATION_WINDOW_SIZE))
        avg = mean(window)
        is_spike = (
            len(window) >= config.ESCALATION_MIN_HISTORY
            and avg > 0
            and words > config.ESCALATION_MULTIPLIER * avg
        )
        replied = i > 0 and messages[i - 1].sender != msg.sender
        if is_spike and replied:
            spikes.append({"position": i, "timestamp": msg.timestamp, "sender": msg.sender})
        window.append(words)

        while spikes and msg.timestamp - spikes[0]["timestamp"] > config.ESCALATION_CONFIRM_WINDOW_MS:
            spikes.pop(0)

        if len(spikes) < 2:
            continue
        senders = []
        for spike in spikes:
            if spike["sender"] not in senders:
                senders.append(spike["sender"])
        if len(senders) < 2:
            continue

        first = spikes[0]
        if last_escalation is not None and first["timestamp"] - last_escalation < config.ESCALATION_MIN_GAP_MS:
            spikes.clear()
            continue

        ratio = words / avg if avg > 0 else config.ESCALATION_MULTIPLIER
        events.append(_event(
            "escalation",
            messages[first["position"]],
            msg,
            senders,
            f"Heated exchange between {' & '.join(senders)}: messages {ratio:.1f}x longer than usual",
            3 if len(spikes) >= 3 else 2,
            first["timestamp"],
        ))
        last_escalation = first["timestamp"]
        spikes.clear()

    return events


def _messages_in_last_hour(messages, end: int) -> int:
    start_ts = messages[end].timestamp - config.INTENSITY_LOOKBACK_MS
    count = 0
    for i in range(end, -1, -1):
        if messages[i].timestamp < start_ts:
            break
        count += 1
    return count


def detect_cold_silences(messages) -> List[Dict[str, Any]]:
    """Silences of a day or more that follow an intense two-sided exchange."""
    events = []
    last_silence: Optional[int] = None

    for i in range(1, len(messages)):
        before = messages[i - 1]
        gap = messages[i].timestamp - before.timestamp
        if gap < config.COLD_SILENCE_MS:
            continue
        if last_silence is not None and before.timestamp - last_silence < config.COLD_SILENCE_MIN_GAP_MS:
            continue

        intensity = _messages_in_last_hour(messages, i - 1)
        if intensity < config.INTENSE_MESSAGES_PER_HOUR:
            continue

        lead_start = max(0, i - config.PRE_SILENCE_MESSAGES)
        if len(_senders(messages, lead_start, i - 1)) < 2:
            continue

        hours = round(gap / config.HOUR_MS)
        severity = 3 if hours >= 72 else 2 if hours >= 48 else 1
        events.append(_event(
            "cold_silence",
            messages[lead_start],
            messages[i],
            _senders(messages, lead_start, i - 1),
            f"Cold silence: {hours}h without messages after {intensity} messages in an hour",
            severity,
            before.timestamp,
        ))
        last_silence = before.timestamp

    return events


def detect_resolutions(messages, silences: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """A silence is resolved when the next messages are shorter than the ones before it."""
    positions = {msg.index: i for i, msg in enumerate(messages)}
    window = config.PRE_SILENCE_MESSAGES
    events = []

    for silence in silences:
        start = positions[silence["message_range"][0]]
        resume = positions[silence["message_range"][1]]
        if resume + window > len(messages):
            continue

        pre = [w for w in (word_count(m.content) for m in messages[start:resume]) if w > 0]
        post = [w for w in (word_count(m.content) for m in messages[resume:resume + window]) if w > 0]
        pre_avg, post_avg = mean(pre), mean(post)
        if pre_avg <= 0 or post_avg >= pre_avg:
            continue

        hours = round((messages[resume].timestamp - messages[resume - 1].timestamp) / config.HOUR_MS)
        last = min(resume + window - 1, len(messages) - 1)
        events.append(_event(
            "resolution",
            messages[resume],
            messages[last],
            _senders(messages, resume, last),
            f"{messages[resume].sender} breaks the silence after {hours}h in a calmer tone",
            1,
            messages[resume].timestamp,
        ))

    return events


def most_conflict_prone(events: List[Dict[str, Any]], names: List[str]) -> Optional[str]:
    if not events or not names:
        return None
    counts = Counter({name: 0 for name in names})
    for event in events:
        weight = 2 if event["type"] == "escalation" else 1
        for person in event["participants"]:
            counts[person] += weight
    best, best_count = None, 0
    for name, count in counts.items():
        if count > best_count:
            best, best_count = name, count
    return best


def compute_conflicts(state) -> Dict[str, Any]:
    messages = state.messages
    if len(messages) < config.CONFLICT_MIN_MESSAGES:
        return {"events": [], "total_conflicts": 0, "most_conflict_prone": None}

    escalations = detect_escalations(messages)
    silences = detect_cold_silences(messages)
    resolutions = detect_resolutions(messages, silences)
    events = sorted(escalations + silences + resolutions, key=lambda e: e["timestamp"])
    logger.debug(f"Conflicts: {len(escalations)} escalations, {len(silences)} cold silences")

    return {
        "events": events,
        "total_conflicts": len(escalations) + len(silences),
        "most_conflict_prone": most_conflict_prone(events, state.names),
    }
