"""
Badge rules.

Each rule scores every eligible participant and awards the badge to the
single best one. A participant who misses a rule's threshold is not
eligible, so when nobody clears it the badge is simply not awarded.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from . import config

logger = logging.getLogger(__name__)

Winner = Optional[Tuple[str, float]]


def find_winner(values: Dict[str, float], minimum: float = 0) -> Winner:
    """Highest positive value at or above minimum; first name wins ties."""
    best: Winner = None
    for name, value in values.items():
        if value <= 0 or value < minimum:
            continue
        if best is None or value > best[1]:
            best = (name, value)
    return best


def find_lowest(values: Dict[str, float]) -> Winner:
    best: Winner = None
    for name, value in values.items():
        if value <= 0:
            continue
        if best is None or value < best[1]:
            best = (name, value)
    return best


def format_duration(ms: float) -> str:
    seconds = int(ms // 1000)
    if seconds < 60:
        return f"{seconds}s"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m"
    hours, rest = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {rest}m" if rest else f"{hours}h"
    return f"{hours // 24} days"


def format_silence(ms: float) -> str:
    days = round(ms / config.DAY_MS)
    if days == 0:
        return f"{round(ms / config.HOUR_MS)} hours"
    return f"{days} days"


def longest_streak(days: Iterable[str]) -> int:
    """Longest run of consecutive calendar days in a set of YYYY-MM-DD keys."""
    ordered = sorted(date.fromisoformat(d) for d in days)
    if not ordered:
        return 0
    best = current = 1
    for prev, curr in zip(ordered, ordered[1:]):
        current = current + 1 if curr - prev == timedelta(days=1) else 1
        best = max(best, current)
    return best


def is_heart(emoji: str) -> bool:
    return any(emoji.startswith(heart) for heart in config.HEART_EMOJIS)


def _badge(badge_id: str, name: str, emoji: str, description: str,
           holder: str, evidence: str) -> Dict[str, str]:
    return {
        "id": badge_id,
        "name": name,
        "emoji": emoji,
        "description": description,
        "holder": holder,
        "evidence": evidence,
    }


def _share_rule(state, per_person, counts: Dict[str, int], min_messages_key: str,
                min_share_key: str) -> Winner:
    """Winner by share of own messages, among people with enough of both."""
    t = config.BADGE_THRESHOLDS
    shares = {}
    for name in state.names:
        total = per_person[name]["total_messages"]
        if total < t["min_total_messages"] or counts[name] < t[min_messages_key]:
            continue
        share = counts[name] / total * 100
        if share >= t[min_share_key]:
            shares[name] = share
    return find_winner(shares)


def compute_badges(state, bundles: Dict[str, Any]) -> List[Dict[str, str]]:
    t = config.BADGE_THRESHOLDS
    names = state.names
    per_person = bundles["per_person"]
    timing = bundles["timing"]
    engagement = bundles["engagement"]
    badges = []

    enough = [n for n in names if per_person[n]["total_messages"] >= t["min_total_messages"]]

    late = {n: state.persons[n].late_night_messages for n in names}
    winner = _share_rule(state, per_person, late, "night_owl_min_messages", "night_owl_min_share")
    if winner:
        badges.append(_badge("night-owl", "Night Owl", "🦉",
                             "Highest share of messages sent between 22:00 and 4:00",
                             winner[0], f"{winner[1]:.1f}% of messages after 22:00"))

    early = {n: state.persons[n].early_morning_messages for n in names}
    winner = _share_rule(state, per_person, early, "early_bird_min_messages", "early_bird_min_share")
    if winner:
        badges.append(_badge("early-bird", "Early Bird", "🐦",
                             "Highest share of messages sent between 4:00 and 8:00",
                             winner[0], f"{winner[1]:.1f}% of messages before 8:00"))

    silence = timing["longest_silence"]
    if silence["duration_ms"] > 0 and silence["last_sender"]:
        badges.append(_badge("ghost-champion", "Ghosting Champion", "👻",
                             "Sent the last message before the longest silence",
                             silence["last_sender"], f"Silence lasted {format_silence(silence['duration_ms'])}"))

    winner = find_winner(engagement["double_texts"], t["double_texter_min"])
    if winner:
        badges.append(_badge("double-texter", "Double Texter", "💬",
                             "Most often wrote again without getting a reply",
                             winner[0], f"Double-texted {winner[1]} times"))

    winner = find_winner({n: per_person[n]["average_message_length"] for n in enough})
    if winner:
        badges.append(_badge("novelist", "Novelist", "📖",
                             "Highest average message length",
                             winner[0], f"{winner[1]:.1f} words per message on average"))

    fast = {
        n: timing["per_person"][n]["median_response_time_ms"]
        for n in names
        if not timing["per_person"][n]["low_confidence"]
    }
    winner = find_lowest(fast)
    if winner:
        badges.append(_badge("speed-demon", "Speed Demon", "⚡",
                             "Fastest median response time",
                             winner[0], f"Median response: {format_duration(winner[1])}"))

    winner = find_winner({n: per_person[n]["emoji_count"] / per_person[n]["total_messages"] for n in enough})
    if winner:
        badges.append(_badge("emoji-monarch", "Emoji Monarch", "😂",
                             "Most emoji per message",
                             winner[0], f"{winner[1]:.2f} emoji per message"))

    initiations = timing["conversation_initiations"]
    total_init = sum(initiations.values())
    winner = find_winner(initiations, t["initiator_min"])
    if winner and total_init > 0:
        badges.append(_badge("initiator", "Initiator", "🔁",
                             "Started the most conversations",
                             winner[0], f"Started {winner[1] / total_init * 100:.0f}% of conversations"))

    if any(state.persons[n].reactions_given_counter for n in names):
        hearts = {
            n: sum(c for e, c in state.persons[n].reactions_given_counter.items() if is_heart(e))
            for n in names
        }
        winner = find_winner(hearts, t["heart_bomber_min"])
        if winner:
            badges.append(_badge("heart-bomber", "Heart Bomber", "❤️",
                                 "Most heart reactions given",
                                 winner[0], f"{winner[1]} heart reactions"))

    winner = find_winner({n: per_person[n]["links_shared"] for n in names}, t["link_lord_min"])
    if winner:
        badges.append(_badge("link-lord", "Link Lord", "📎",
                             "Shared the most links",
                             winner[0], f"{winner[1]} links shared"))

    streaks = {n: longest_streak(state.persons[n].daily_counts) for n in names}
    winner = find_winner(streaks, t["streak_master_min_days"])
    if winner:
        badges.append(_badge("streak-master", "Streak Master", "🔥",
                             "Longest run of consecutive days with messages",
                             winner[0], f"{winner[1]} days in a row"))

    winner = find_winner({n: per_person[n]["questions_asked"] for n in names}, t["question_master_min"])
    if winner:
        badges.append(_badge("question-master", "Detective", "🔍",
                             "Asked the most questions",
                             winner[0], f"Asked {winner[1]} questions"))

    winner = find_winner({n: state.persons[n].mentions_received for n in names}, t["mention_magnet_min"])
    if winner:
        badges.append(_badge("mention-magnet", "Mention Magnet", "📢",
                             "Mentioned by others the most",
                             winner[0], f"{winner[1]} mentions"))

    winner = find_winner({n: state.persons[n].replies_sent for n in names}, t["reply_king_min"])
    if winner:
        badges.append(_badge("reply-king", "Reply King", "↩️",
                             "Used the reply feature the most",
                             winner[0], f"{winner[1]} replies"))

    winner = find_winner({n: state.persons[n].edited_messages for n in names}, t["edit_lord_min"])
    if winner:
        badges.append(_badge("edit-lord", "Perfectionist", "✏️",
                             "Edited their messages the most",
                             winner[0], f"{winner[1]} edited messages"))

    logger.debug(f"Awarded {len(badges)} badges")
    return badges
