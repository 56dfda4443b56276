"""
Configuration module for chatquant
Loads environment variables and provides heuristic thresholds and token lists
"""

import os
from pathlib import Path
from typing import Dict, Any, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# General
TIMEZONE = os.getenv("CHATQUANT_TIMEZONE", "UTC")
LOG_LEVEL = os.getenv("CHATQUANT_LOG_LEVEL", "INFO").upper()
PARALLEL_DERIVERS = os.getenv("CHATQUANT_PARALLEL", "False").lower() == "true"
PARALLEL_WORKERS = int(os.getenv("CHATQUANT_PARALLEL_WORKERS", "4"))
MAX_CONTENT_CHARS = int(os.getenv("MAX_CONTENT_CHARS", "100000"))

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

# ============================================================================
# Sessions and timing
# ============================================================================

SESSION_GAP_HOURS = float(os.getenv("SESSION_GAP_HOURS", "6"))
SESSION_GAP_MS = int(SESSION_GAP_HOURS * HOUR_MS)

# Late night is [22:00, 04:00)
LATE_NIGHT_START_HOUR = 22
LATE_NIGHT_END_HOUR = 4

# Early bird window [04:00, 08:00), not [00:00, 08:00): it starts where late
# night ends so that no hour belongs to both windows.
EARLY_MORNING_START_HOUR = 4
EARLY_MORNING_END_HOUR = 8

# Response-time statistics
MIN_RESPONSE_SAMPLES = int(os.getenv("MIN_RESPONSE_SAMPLES", "10"))
OUTLIER_FILTER_MIN_SAMPLES = int(os.getenv("OUTLIER_FILTER_MIN_SAMPLES", "4"))
IQR_MULTIPLIER = float(os.getenv("IQR_MULTIPLIER", "1.5"))
TRIM_FRACTION = float(os.getenv("TRIM_FRACTION", "0.1"))

# Response-time histogram: (label, min_ms, max_ms); max None = open-ended
RESPONSE_TIME_BINS = [
    ("<10s", 0, 10_000),
    ("10-30s", 10_000, 30_000),
    ("30s-1m", 30_000, 60_000),
    ("1-5m", 60_000, 300_000),
    ("5-15m", 300_000, 900_000),
    ("15-30m", 900_000, 1_800_000),
    ("30m-1h", 1_800_000, 3_600_000),
    ("1-2h", 3_600_000, 7_200_000),
    ("2-6h", 7_200_000, 21_600_000),
    ("6-24h", 21_600_000, 86_400_000),
    ("24h+", 86_400_000, None),
]

# ============================================================================
# Vocabulary
# ============================================================================

TOP_EMOJIS = 10
TOP_REACTIONS = 5
TOP_WORDS = 20
TOP_PHRASES = 10
MIN_WORD_LENGTH = 2

CATCHPHRASE_MIN_COUNT = 3
CATCHPHRASE_MIN_UNIQUENESS = 0.6
CATCHPHRASE_LIMIT = 8

# ============================================================================
# Patterns
# ============================================================================

BURST_MULTIPLIER = float(os.getenv("BURST_MULTIPLIER", "3.0"))
BURST_TRAILING_DAYS = 7
BURST_MIN_DAYS = 8

# ============================================================================
# Bid-for-connection classifier
# ============================================================================

BID_TIME_WINDOW_HOURS = float(os.getenv("BID_TIME_WINDOW_HOURS", "4"))
BID_TIME_WINDOW_MS = int(BID_TIME_WINDOW_HOURS * HOUR_MS)
BID_MESSAGE_WINDOW = int(os.getenv("BID_MESSAGE_WINDOW", "4"))
BID_MIN_TOTAL = int(os.getenv("BID_MIN_TOTAL", "10"))
BID_MIN_PER_PERSON = int(os.getenv("BID_MIN_PER_PERSON", "5"))
BID_MIN_REPLY_LENGTH = 5
BID_DISMISS_MAX_LENGTH = 30
BID_MIN_QUESTION_LENGTH = 4
GOTTMAN_BENCHMARK = int(os.getenv("GOTTMAN_BENCHMARK", "86"))

DISCLOSURE_STARTERS: List[str] = [
    # Polish
    "słuchaj", "wiesz co", "pamiętasz", "wyobraź", "muszę ci",
    "chciałem powiedzieć", "chciałam powiedzieć", "powiem ci", "właśnie",
    "mam coś", "miałem dzisiaj", "miałam dzisiaj", "coś mi się",
    "śmieszy mnie", "denerwuje mnie", "boli mnie",
    # English
    "listen", "you know what", "i wanted to tell", "i need to tell",
    "guess what", "something happened", "you will not believe",
]

DISMISS_TOKENS: List[str] = [
    "spoko", "nieważne", "zapomnij", "daj spokój", "bez sensu",
    "kogo to obchodzi", "whatever", "forget it", "nevermind", "don't care",
]

# ============================================================================
# Chronotype
# ============================================================================

CHRONOTYPE_MIN_MESSAGES = 20
CHRONOTYPE_MIN_SPLIT_MESSAGES = 10
CHRONOTYPE_COMPATIBLE_SCORE = 60

# ============================================================================
# Shift / support responses (conversational narcissism)
# ============================================================================

SHIFT_MIN_RESPONSES = 10

SELF_START_TOKENS = {
    "ja", "mi", "mnie", "mój", "moja", "moje", "moim", "mojej", "moich",
    "mam", "miałem", "miałam", "u", "też", "tez", "zresztą", "właściwie",
    "swoją", "btw", "nawiasem",
    "me", "my", "mine", "also", "anyway", "i",
}

ACKNOWLEDGMENT_TOKENS = {
    "tak", "no", "aha", "mhm", "dokładnie", "dokladnie", "racja", "okej",
    "faktycznie", "właśnie", "wlasnie", "serio", "naprawdę", "naprawde",
    "wow", "ojej", "omg", "matko", "kurde", "boże", "boze",
    "yeah", "yes", "right", "exactly", "true", "sure", "absolutely",
    "definitely", "totally", "seriously", "really",
}

PARTNER_REFERENCE_TOKENS = {
    "ty", "ci", "ciebie", "tobie", "twój", "twoja", "twoje", "twojej", "twoim",
    "you", "your", "yours", "yourself",
}

QUESTION_START_TOKENS = {
    "co", "jak", "kiedy", "gdzie", "dlaczego", "czemu", "czy", "kto",
    "który", "która", "które", "ile", "skąd", "po",
    "what", "how", "when", "where", "why", "who", "which",
    "did", "do", "does", "is", "are", "was", "were", "will", "have",
    "can", "could", "would", "should",
}

# ============================================================================
# Language style (function-word matching and pronouns)
# ============================================================================

LSM_MIN_TOKENS = 50
LSM_MIN_CATEGORY_RATE = 0.001
PRONOUN_MIN_WORDS = int(os.getenv("PRONOUN_MIN_WORDS", "200"))

# ============================================================================
# Pursuit / withdrawal
# ============================================================================

PURSUIT_MIN_MESSAGES = 50
PURSUIT_WINDOW_MS = 30 * 60 * 1000
PURSUIT_ENTER_AS_COMMA_MS = 2 * 60 * 1000
PURSUIT_MIN_CONSECUTIVE = 4
PURSUIT_ALWAYS_FLAG = 6
WITHDRAWAL_THRESHOLD_MS = 4 * HOUR_MS
WITHDRAWAL_OVERNIGHT_MAX_MS = 12 * HOUR_MS
OVERNIGHT_START_HOUR = 21
OVERNIGHT_END_HOUR = 9
PURSUIT_MUTUAL_THRESHOLD = 0.2

DEMAND_MARKERS = [
    # Polish
    "dlaczego nie odpisujesz", "czemu nie odpisujesz", "halo", "hej?",
    "odpowiedz", "odpisz", "jesteś tam", "ej?", "no hej", "napisz coś", "czekam",
    # English
    "hello?", "are you there", "why aren't you responding", "answer me",
    "respond", "hey?", "you there?",
]
DEMAND_PUNCTUATION = {"??", "???", "????"}

# ============================================================================
# Conflicts
# ============================================================================

CONFLICT_MIN_MESSAGES = 20
ESCALATION_WINDOW_SIZE = 10
ESCALATION_MIN_HISTORY = 5
ESCALATION_MULTIPLIER = 2.0
ESCALATION_CONFIRM_WINDOW_MS = 15 * 60 * 1000
ESCALATION_MIN_GAP_MS = 4 * HOUR_MS
COLD_SILENCE_MS = 24 * HOUR_MS
COLD_SILENCE_MIN_GAP_MS = 12 * HOUR_MS
INTENSITY_LOOKBACK_MS = HOUR_MS
INTENSE_MESSAGES_PER_HOUR = 8
PRE_SILENCE_MESSAGES = 5

# ============================================================================
# Network, rankings, viral scores
# ============================================================================

NETWORK_MIN_PARTICIPANTS = 3
MILESTONES_MIN_MONTHS = 2
INTIMACY_MIN_MONTHS = 2
GHOST_RISK_RECENT_MONTHS = 3
DELUSION_MIN_GAP = 5
SENTIMENT_VOLATILITY_MIN_MESSAGES = 20

# Log-normal reference distributions: (median, sigma)
RANKING_DISTRIBUTIONS: Dict[str, tuple] = {
    "message_volume": (2000.0, 1.2),
    "response_time": (600_000.0, 1.5),
    "ghost_frequency": (24.0, 1.2),
    "asymmetry": (20.0, 0.8),
}

# ============================================================================
# Badges
# ============================================================================

BADGE_THRESHOLDS: Dict[str, float] = {
    "min_total_messages": 20,       # rate-based badges (night owl, early bird, emoji, novelist)
    "night_owl_min_messages": 10,
    "night_owl_min_share": 10.0,    # percent of own messages
    "early_bird_min_messages": 10,
    "early_bird_min_share": 10.0,
    "double_texter_min": 1,
    "initiator_min": 1,
    "link_lord_min": 1,
    "question_master_min": 1,
    "heart_bomber_min": 1,
    "streak_master_min_days": 2,     # longest run of consecutive active days
    "mention_magnet_min": 6,
    "reply_king_min": 11,
    "edit_lord_min": 6,
}

# Emoji treated as hearts for reaction-based badges
HEART_EMOJIS = [
    "❤", "💓", "💖", "💗", "💘", "💙", "💚", "💛", "💜", "🖤", "🤍", "🤎",
    "🩷", "❣", "🧡", "💕", "💞", "😍", "🥰", "😘",
]


def get_config_summary() -> Dict[str, Any]:
    """Return a summary of current configuration."""
    return {
        "general": {
            "timezone": TIMEZONE,
            "log_level": LOG_LEVEL,
            "parallel_derivers": PARALLEL_DERIVERS,
            "parallel_workers": PARALLEL_WORKERS,
            "max_content_chars": MAX_CONTENT_CHARS,
        },
        "timing": {
            "session_gap_hours": SESSION_GAP_HOURS,
            "late_night_hours": [LATE_NIGHT_START_HOUR, LATE_NIGHT_END_HOUR],
            "min_response_samples": MIN_RESPONSE_SAMPLES,
            "outlier_filter_min_samples": OUTLIER_FILTER_MIN_SAMPLES,
            "iqr_multiplier": IQR_MULTIPLIER,
            "trim_fraction": TRIM_FRACTION,
        },
        "patterns": {
            "burst_multiplier": BURST_MULTIPLIER,
            "burst_trailing_days": BURST_TRAILING_DAYS,
        },
        "bids": {
            "time_window_hours": BID_TIME_WINDOW_HOURS,
            "message_window": BID_MESSAGE_WINDOW,
            "min_total": BID_MIN_TOTAL,
            "min_per_person": BID_MIN_PER_PERSON,
            "gottman_benchmark": GOTTMAN_BENCHMARK,
        },
        "style": {
            "lsm_min_tokens": LSM_MIN_TOKENS,
            "pronoun_min_words": PRONOUN_MIN_WORDS,
        },
        "badges": dict(BADGE_THRESHOLDS),
    }


def validate_config() -> tuple[bool, str]:
    """Validate configuration. Returns (is_valid, message)."""
    if SESSION_GAP_MS <= 0:
        return False, f"SESSION_GAP_HOURS must be positive, got {SESSION_GAP_HOURS}"

    if not 0 <= TRIM_FRACTION < 0.5:
        return False, f"TRIM_FRACTION must be in [0, 0.5), got {TRIM_FRACTION}"

    if IQR_MULTIPLIER <= 0:
        return False, f"IQR_MULTIPLIER must be positive, got {IQR_MULTIPLIER}"

    if BID_MIN_PER_PERSON > BID_MIN_TOTAL:
        return False, "BID_MIN_PER_PERSON cannot exceed BID_MIN_TOTAL"

    try:
        ZoneInfo(TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        return False, f"Unknown timezone: {TIMEZONE}"

    return True, "Configuration valid"


if __name__ == "__main__":
    # Print config summary for debugging
    import json
    print("chatquant configuration:")
    print(json.dumps(get_config_summary(), indent=2))
    print()
    valid, msg = validate_config()
    print(f"Validation: {msg}")
