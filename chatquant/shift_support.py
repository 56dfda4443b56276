"""
Shift vs. support responses ("conversational narcissism").

A support response stays on the other person's topic; a shift response
turns the conversation back to the responder. CNI is the share of shift
responses among the classified ones, scaled to 0-100.
"""

import re
from typing import Any, Dict, Optional

from . import config
from .helpers import content_words, round_half_up

SHIFT = "shift"
SUPPORT = "support"
AMBIGUOUS = "ambiguous"

_FIRST_TOKEN_SPLIT_RE = re.compile(r"[\s.,!?;:]+")


def first_token(text: str) -> str:
    parts = _FIRST_TOKEN_SPLIT_RE.split(text.lower().strip())
    return parts[0] if parts else ""


def classify_response(previous: str, current: str) -> str:
    token = first_token(current)
    head = current.lower().split()[:4]
    overlap = len(content_words(previous) & content_words(current))
    starts_with_self = token in config.SELF_START_TOKENS
    mentions_partner = any(t in config.PARTNER_REFERENCE_TOKENS for t in head)

    if token in config.QUESTION_START_TOKENS:
        return SUPPORT
    if "?" in current and not starts_with_self:
        return SUPPORT
    if overlap >= 2:
        return SUPPORT
    if token in config.ACKNOWLEDGMENT_TOKENS:
        return SUPPORT
    if mentions_partner:
        return SUPPORT
    if starts_with_self and overlap == 0:
        return SHIFT
    return AMBIGUOUS


def compute_shift_support(state) -> Optional[Dict[str, Any]]:
    names = state.names
    if len(names) < 2:
        return None

    counts = {name: {"shift": 0, "support": 0, "total": 0} for name in names}
    messages = state.messages
    for prev, curr in zip(messages, messages[1:]):
        if prev.sender == curr.sender or not prev.content or not curr.content:
            continue
        if curr.timestamp - prev.timestamp > config.SESSION_GAP_MS:
            continue
        c = counts[curr.sender]
        c["total"] += 1
        kind = classify_response(prev.content, curr.content)
        if kind == SHIFT:
            c["shift"] += 1
        elif kind == SUPPORT:
            c["support"] += 1

    per_person = {}
    for name in names:
        c = counts[name]
        if c["total"] < config.SHIFT_MIN_RESPONSES:
            continue
        classified = c["shift"] + c["support"]
        ratio = c["shift"] / classified if classified else 0.5
        per_person[name] = {
            "shift_count": c["shift"],
            "support_count": c["support"],
            "shift_ratio": round(ratio, 2),
            "cni": round_half_up(ratio * 100),
        }

    if len(per_person) < 2:
        return None

    ranked = sorted(per_person, key=lambda n: -per_person[n]["cni"])
    return {
        "per_person": per_person,
        "higher_cni": ranked[0],
        "cni_gap": per_person[ranked[0]]["cni"] - per_person[ranked[1]]["cni"],
    }
