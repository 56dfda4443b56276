"""
Reciprocity index: how balanced the first two participants are.

Each sub-score is 100 for a perfect 50/50 split and 0 for a one-sided one;
50 stands for "no data".
"""

from typing import Any, Dict, List

from .helpers import round_half_up


def balance(share: float) -> int:
    return round_half_up(100 * (1 - 2 * abs(share - 0.5)))


def _pair_balance(a: float, b: float) -> int:
    total = a + b
    return balance(a / total) if total > 0 else 50


def compute_reciprocity(per_person: Dict[str, Dict], timing: Dict[str, Any],
                        engagement: Dict[str, Any], names: List[str]) -> Dict[str, int]:
    if len(names) < 2:
        return {
            "overall": 50,
            "message_balance": 50,
            "initiation_balance": 50,
            "response_time_symmetry": 50,
            "reaction_balance": 50,
        }

    a, b = names[0], names[1]
    message_balance = balance(engagement["message_ratio"].get(a, 0.5))

    initiations = timing["conversation_initiations"]
    initiation_balance = _pair_balance(initiations.get(a, 0), initiations.get(b, 0))

    rt_a = timing["per_person"][a]["median_response_time_ms"]
    rt_b = timing["per_person"][b]["median_response_time_ms"]
    rt_symmetry = 50
    if rt_a > 0 and rt_b > 0:
        rt_symmetry = round_half_up(min(rt_a, rt_b) / max(rt_a, rt_b) * 100)

    reaction_balance = _pair_balance(per_person[a]["reactions_given"], per_person[b]["reactions_given"])

    overall = round_half_up(
        (message_balance + initiation_balance + rt_symmetry + reaction_balance) / 4
    )
    return {
        "overall": overall,
        "message_balance": message_balance,
        "initiation_balance": initiation_balance,
        "response_time_symmetry": rt_symmetry,
        "reaction_balance": reaction_balance,
    }
