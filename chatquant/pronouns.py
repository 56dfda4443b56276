"""
I / we / you pronoun rates per person (Pennebaker, 2011).

Polish drops subject pronouns, so an explicit "ja" or "my" is a marked
choice and rates run lower than English norms. People with fewer than
PRONOUN_MIN_WORDS words are left out.
"""

import logging
from typing import Any, Dict, List, Optional

from . import config
from .helpers import round_half_up, round_to
from .lexicons import I_WORDS, WE_WORDS, YOU_WORDS, style_tokens

logger = logging.getLogger(__name__)


def count_pronouns(tokens: List[str]) -> Dict[str, int]:
    counts = {"i": 0, "we": 0, "you": 0}
    for token in tokens:
        if token in I_WORDS:
            counts["i"] += 1
        elif token in WE_WORDS:
            counts["we"] += 1
        elif token in YOU_WORDS:
            counts["you"] += 1
    return counts


def compute_pronoun_analysis(state) -> Optional[Dict[str, Any]]:
    names: List[str] = state.names
    if len(names) < 2:
        return None

    counts = {name: {"i": 0, "we": 0, "you": 0} for name in names}
    words = {name: 0 for name in names}
    for msg in state.messages:
        if not msg.content or msg.sender not in counts:
            continue
        tokens = style_tokens(msg.content)
        words[msg.sender] += len(tokens)
        for key, n in count_pronouns(tokens).items():
            counts[msg.sender][key] += n

    per_person = {}
    total_i = total_we = 0
    for name in names:
        total = words[name]
        if total < config.PRONOUN_MIN_WORDS:
            continue
        c = counts[name]
        i_rate = c["i"] / total * 1000
        we_rate = c["we"] / total * 1000
        you_rate = c["you"] / total * 1000
        per_person[name] = {
            "i_count": c["i"],
            "we_count": c["we"],
            "you_count": c["you"],
            "i_rate": round_to(i_rate, 1),
            "we_rate": round_to(we_rate, 1),
            "you_rate": round_to(you_rate, 1),
            # Bounded share instead of a raw ratio, which explodes as we_rate -> 0
            "i_we_ratio": round_to(i_rate / (i_rate + we_rate + 0.001), 2),
        }
        total_i += c["i"]
        total_we += c["we"]

    if len(per_person) < 2:
        logger.debug(f"Pronoun analysis skipped: {len(per_person)} people with enough words")
        return None

    denominator = total_i + total_we
    orientation = round_half_up(total_we / denominator * 100) if denominator else 50
    return {"per_person": per_person, "relationship_orientation": orientation}
