"""
Language style matching (Ireland & Pennebaker, 2010).

Compares how often the first two participants use each function-word
category. A score of 1.0 means identical rates; the overall value is the
mean over categories that at least one of them actually uses.
"""

import logging
from typing import Any, Dict, List, Optional

from . import config
from .helpers import round_to
from .lexicons import FUNCTION_WORD_CATEGORIES, style_tokens

logger = logging.getLogger(__name__)


def category_rates(tokens: List[str]) -> Dict[str, float]:
    """Share of tokens that fall in each function-word category."""
    total = len(tokens)
    return {
        category: sum(1 for t in tokens if t in words) / total if total else 0.0
        for category, words in FUNCTION_WORD_CATEGORIES.items()
    }


def match_score(rate_a: float, rate_b: float) -> float:
    return 1 - abs(rate_a - rate_b) / (rate_a + rate_b + 0.0001)


def interpret(overall: float) -> str:
    if overall >= 0.85:
        return "High language synchrony: a strongly shared communication style"
    if overall >= 0.70:
        return "Moderate synchrony: compatible styles"
    if overall >= 0.55:
        return "Low synchrony: clear differences in communication style"
    return "Very low synchrony: distinct communication styles"


def compute_lsm(state) -> Optional[Dict[str, Any]]:
    names: List[str] = state.names
    if len(names) < 2:
        return None

    name_a, name_b = names[0], names[1]
    tokens: Dict[str, List[str]] = {name_a: [], name_b: []}
    for msg in state.messages:
        if msg.content and msg.sender in tokens:
            tokens[msg.sender].extend(style_tokens(msg.content))

    if min(len(tokens[name_a]), len(tokens[name_b])) < config.LSM_MIN_TOKENS:
        logger.debug("Style matching skipped: not enough words")
        return None

    rates_a = category_rates(tokens[name_a])
    rates_b = category_rates(tokens[name_b])

    per_category = {}
    for category in FUNCTION_WORD_CATEGORIES:
        a, b = rates_a[category], rates_b[category]
        # Categories neither person uses would read as a perfect match
        if a < config.LSM_MIN_CATEGORY_RATE and b < config.LSM_MIN_CATEGORY_RATE:
            continue
        per_category[category] = match_score(a, b)

    if not per_category:
        return None

    overall = sum(per_category.values()) / len(per_category)
    return {
        "overall": round_to(overall, 2),
        "per_category": per_category,
        "interpretation": interpret(overall),
    }
