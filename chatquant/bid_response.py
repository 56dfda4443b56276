"""
Bid-for-connection analysis (Gottman bid/response model).

A bid is a question, a disclosure opener or a shared link. Each bid is
answered by the first message from someone else inside the message window;
that reply either turns toward the bidder or away from them.
"""

import logging
import string
from typing import Any, Dict, List, Optional

from . import config
from .helpers import content_words, round_half_up, strip_url_queries

logger = logging.getLogger(__name__)

TOWARD = "toward"
AWAY = "away"

_PUNCTUATION = set(string.punctuation) | {" "}


def is_bid(content: Optional[str]) -> bool:
    if not content:
        return False
    text = content.strip()
    if len(text) < config.BID_MIN_QUESTION_LENGTH and set(text) <= _PUNCTUATION:
        return False
    lowered = text.lower()
    if "?" in strip_url_queries(text):
        return True
    if any(lowered.startswith(starter) for starter in config.DISCLOSURE_STARTERS):
        return True
    return "http" in lowered or "www." in lowered


def classify_bid_response(bid, response) -> str:
    """Return 'toward' or 'away' for the reply to a bid (None means no reply)."""
    if response is None or not response.content:
        return AWAY
    if response.timestamp - bid.timestamp > config.BID_TIME_WINDOW_MS:
        return AWAY

    text = response.content.lower()
    if len(text) < config.BID_DISMISS_MAX_LENGTH and any(t in text for t in config.DISMISS_TOKENS):
        return AWAY
    if "?" in response.content:
        return TOWARD
    if content_words(bid.content) & content_words(response.content):
        return TOWARD
    if len(response.content.strip()) >= config.BID_MIN_REPLY_LENGTH:
        return TOWARD
    return AWAY


def _find_reply(messages, i: int):
    sender = messages[i].sender
    for j in range(i + 1, min(len(messages), i + config.BID_MESSAGE_WINDOW + 1)):
        if messages[j].sender != sender:
            return messages[j]
    return None


def interpret(rate: int) -> str:
    benchmark = config.GOTTMAN_BENCHMARK
    if rate >= 80:
        return f"High responsiveness ({rate}%), close to the {benchmark}% seen in lasting couples."
    if rate >= 60:
        return f"Moderate responsiveness ({rate}%), below the {benchmark}% benchmark but within reach."
    return f"Low responsiveness ({rate}%), well below the {benchmark}% benchmark for lasting couples."


def compute_bid_response(state) -> Optional[Dict[str, Any]]:
    names: List[str] = state.names
    if len(names) < 2:
        return None

    stats = {
        name: {
            "bids_made": 0,
            "turned_toward": 0,
            "turned_away": 0,
            "bids_received": 0,
            "bids_responded_to": 0,
            "bid_success_rate": 0,
            "response_rate": 0,
        }
        for name in names
    }

    messages = state.messages
    for i, msg in enumerate(messages):
        if not is_bid(msg.content):
            continue
        reply = _find_reply(messages, i)
        outcome = classify_bid_response(msg, reply)

        bidder = stats[msg.sender]
        bidder["bids_made"] += 1
        if outcome == TOWARD:
            bidder["turned_toward"] += 1
        else:
            bidder["turned_away"] += 1

        if reply is not None:
            recipient = stats[reply.sender]
            recipient["bids_received"] += 1
            if outcome == TOWARD:
                recipient["bids_responded_to"] += 1

    for s in stats.values():
        if s["bids_made"]:
            s["bid_success_rate"] = round_half_up(s["turned_toward"] / s["bids_made"] * 100)
        if s["bids_received"]:
            s["response_rate"] = round_half_up(s["bids_responded_to"] / s["bids_received"] * 100)

    total_bids = sum(s["bids_made"] for s in stats.values())
    if total_bids < config.BID_MIN_TOTAL:
        logger.debug(f"Bid analysis skipped: only {total_bids} bids")
        return None

    per_person = {n: s for n, s in stats.items() if s["bids_made"] >= config.BID_MIN_PER_PERSON}
    if not per_person:
        return None

    total_toward = sum(s["turned_toward"] for s in stats.values())
    overall = round_half_up(total_toward / total_bids * 100)
    return {
        "per_person": per_person,
        "overall_response_rate": overall,
        "gottman_benchmark": config.GOTTMAN_BENCHMARK,
        "interpretation": interpret(overall),
        "total_bids": total_bids,
    }
