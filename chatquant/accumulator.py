"""
Single forward pass over a conversation.

``accumulate`` is the only place that walks the message list and mutates
running state. The returned ConversationAccumulator is read-only for every
metric module that consumes it.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from . import config
from .helpers import (
    day_of_week,
    extract_emojis,
    is_early_morning_hour,
    is_late_night_hour,
    is_question,
    ngrams,
    to_local,
    tokenize,
    word_count,
)
from .lexicons import EMOTIONAL_WORDS
from .models import ParsedConversation, UnifiedMessage
from .sentiment import score_sentiment

logger = logging.getLogger(__name__)

_TRAILING_PUNCT = ".,!?;:'\"()"


def _empty_heatmap() -> List[List[int]]:
    return [[0] * 24 for _ in range(7)]


@dataclass
class PersonAccumulator:
    """Running aggregates for one participant."""

    name: str
    total_messages: int = 0
    total_words: int = 0
    total_characters: int = 0
    longest_message: Optional[Dict] = None
    shortest_message: Optional[Dict] = None
    messages_with_emoji: int = 0
    emoji_count: int = 0
    emoji_counter: Counter = field(default_factory=Counter)
    questions_asked: int = 0
    media_shared: int = 0
    links_shared: int = 0
    unsent_messages: int = 0
    reactions_given: int = 0
    reactions_received: int = 0
    reactions_given_counter: Counter = field(default_factory=Counter)
    messages_received: int = 0
    word_counter: Counter = field(default_factory=Counter)
    bigram_counter: Counter = field(default_factory=Counter)
    trigram_counter: Counter = field(default_factory=Counter)

    # Discord extras
    mentions_made: int = 0
    mentions_received: int = 0
    replies_sent: int = 0
    replies_received: int = 0
    edited_messages: int = 0

    # Timing and sessions
    response_times: List[int] = field(default_factory=list)
    monthly_response_times: Dict[str, List[int]] = field(default_factory=lambda: defaultdict(list))
    initiations: int = 0
    endings: int = 0
    double_texts: int = 0
    max_consecutive: int = 0
    late_night_messages: int = 0
    early_morning_messages: int = 0

    # Calendar views
    heatmap: List[List[int]] = field(default_factory=_empty_heatmap)
    hourly: List[int] = field(default_factory=lambda: [0] * 24)
    weekday_hourly: List[int] = field(default_factory=lambda: [0] * 24)
    weekend_hourly: List[int] = field(default_factory=lambda: [0] * 24)
    weekday_messages: int = 0
    weekend_messages: int = 0
    monthly_messages: Counter = field(default_factory=Counter)
    monthly_word_counts: Dict[str, List[int]] = field(default_factory=lambda: defaultdict(list))
    daily_counts: Counter = field(default_factory=Counter)

    # Sentiment
    sentiment_scores: List[float] = field(default_factory=list)
    monthly_sentiment: Dict[str, List[float]] = field(default_factory=lambda: defaultdict(list))

    @property
    def active_days(self) -> int:
        return len(self.daily_counts)


@dataclass
class MonthIntimacy:
    words: int = 0
    messages: int = 0
    emotional_words: int = 0
    informality: int = 0
    late_night: int = 0


@dataclass
class ConversationAccumulator:
    """Result of the accumulation pass: per-person state plus shared views."""

    persons: Dict[str, PersonAccumulator]
    messages: List[UnifiedMessage]
    total_messages: int = 0
    total_sessions: int = 0
    session_lengths: List[int] = field(default_factory=list)
    longest_silence: Dict = field(default_factory=lambda: {
        "duration_ms": 0, "start_timestamp": 0, "end_timestamp": 0,
        "last_sender": "", "next_sender": "",
    })
    heatmap_combined: List[List[int]] = field(default_factory=_empty_heatmap)
    daily_counts: Counter = field(default_factory=Counter)
    monthly_initiations: Dict[str, Counter] = field(default_factory=dict)
    intimacy_months: Dict[str, MonthIntimacy] = field(default_factory=dict)
    interactions: Counter = field(default_factory=Counter)
    is_discord: bool = False

    @property
    def names(self) -> List[str]:
        return list(self.persons)

    @property
    def months(self) -> List[str]:
        """Sorted calendar months (YYYY-MM) that contain messages."""
        found = set()
        for acc in self.persons.values():
            found.update(acc.monthly_messages)
        return sorted(found)

    def person(self, name: str) -> PersonAccumulator:
        return self.persons[name]


def _ensure(persons: Dict[str, PersonAccumulator], name: str) -> PersonAccumulator:
    if name not in persons:
        persons[name] = PersonAccumulator(name=name)
    return persons[name]


def _emotional_word_count(text: str) -> int:
    count = 0
    for word in text.lower().split():
        clean = word.rstrip(_TRAILING_PUNCT)
        if len(clean) > 1 and clean in EMOTIONAL_WORDS:
            count += 1
    return count


def accumulate(conversation: ParsedConversation) -> ConversationAccumulator:
    """Build every running aggregate in one O(n) scan."""
    persons: Dict[str, PersonAccumulator] = {}
    for name in conversation.participant_names:
        _ensure(persons, name)

    user_messages = conversation.user_messages
    state = ConversationAccumulator(
        persons=persons,
        messages=user_messages,
        is_discord=conversation.platform == "discord",
    )
    by_index = {m.index: m for m in conversation.messages}

    prev: Optional[UnifiedMessage] = None
    run_sender: Optional[str] = None
    run_length = 0
    session_length = 0

    for msg in user_messages:
        acc = _ensure(persons, msg.sender)
        content = msg.content or ""
        local = to_local(msg.timestamp)
        month = local.strftime("%Y-%m")
        day = local.strftime("%Y-%m-%d")
        hour = local.hour
        dow = day_of_week(local)
        gap = msg.timestamp - prev.timestamp if prev is not None else 0

        # Counts
        state.total_messages += 1
        acc.total_messages += 1
        words = word_count(content)
        acc.total_words += words
        acc.total_characters += len(content)
        acc.monthly_word_counts[month].append(words)

        if content.strip() and words > 0:
            record = {"content": content, "length": words, "timestamp": msg.timestamp}
            if acc.longest_message is None or words > acc.longest_message["length"]:
                acc.longest_message = record
            if acc.shortest_message is None or words < acc.shortest_message["length"]:
                acc.shortest_message = record

        emojis = extract_emojis(content)
        if emojis:
            acc.messages_with_emoji += 1
            acc.emoji_count += len(emojis)
            acc.emoji_counter.update(emojis)

        if is_question(content):
            acc.questions_asked += 1

        if content.strip():
            tokens = tokenize(content)
            acc.word_counter.update(tokens)
            acc.bigram_counter.update(ngrams(tokens, 2))
            acc.trigram_counter.update(ngrams(tokens, 3))

        if msg.has_media:
            acc.media_shared += 1
        if msg.has_link:
            acc.links_shared += 1
        if msg.is_unsent:
            acc.unsent_messages += 1

        # Reactions: the sender receives, a participant actor gives
        for reaction in msg.reactions:
            acc.reactions_received += 1
            actor = persons.get(reaction.actor)
            if actor is not None:
                actor.reactions_given += 1
                actor.reactions_given_counter[reaction.emoji] += 1

        for name, other in persons.items():
            if name != msg.sender:
                other.messages_received += 1

        # Discord extras
        if msg.mentions:
            acc.mentions_made += len(msg.mentions)
            for mentioned in msg.mentions:
                if mentioned in persons and mentioned != msg.sender:
                    persons[mentioned].mentions_received += 1
        if msg.reply_to_index is not None:
            target = by_index.get(msg.reply_to_index)
            acc.replies_sent += 1
            if target is not None and not target.is_system:
                _ensure(persons, target.sender).replies_received += 1
                if target.sender != msg.sender:
                    state.interactions[(msg.sender, target.sender)] += 1
        if msg.is_edited:
            acc.edited_messages += 1

        # Sessions
        if prev is None or gap >= config.SESSION_GAP_MS:
            if prev is not None:
                persons[prev.sender].endings += 1
                state.session_lengths.append(session_length)
            state.total_sessions += 1
            session_length = 0
            acc.initiations += 1
            state.monthly_initiations.setdefault(month, Counter())[msg.sender] += 1
        session_length += 1

        if prev is not None and gap > state.longest_silence["duration_ms"]:
            state.longest_silence = {
                "duration_ms": gap,
                "start_timestamp": prev.timestamp,
                "end_timestamp": msg.timestamp,
                "last_sender": prev.sender,
                "next_sender": msg.sender,
            }

        # Response time and reply pairs
        if prev is not None and prev.sender != msg.sender and gap < config.SESSION_GAP_MS:
            acc.response_times.append(gap)
            acc.monthly_response_times[month].append(gap)
            state.interactions[(msg.sender, prev.sender)] += 1

        # Consecutive runs
        if msg.sender == run_sender:
            run_length += 1
        else:
            if run_sender is not None and run_length >= 2:
                persons[run_sender].double_texts += 1
            run_sender = msg.sender
            run_length = 1
        acc.max_consecutive = max(acc.max_consecutive, run_length)

        # Calendar
        late = is_late_night_hour(hour)
        if late:
            acc.late_night_messages += 1
        if is_early_morning_hour(hour):
            acc.early_morning_messages += 1
        acc.heatmap[dow][hour] += 1
        state.heatmap_combined[dow][hour] += 1
        acc.hourly[hour] += 1
        if dow in (0, 6):
            acc.weekend_messages += 1
            acc.weekend_hourly[hour] += 1
        else:
            acc.weekday_messages += 1
            acc.weekday_hourly[hour] += 1
        acc.monthly_messages[month] += 1
        acc.daily_counts[day] += 1
        state.daily_counts[day] += 1

        # Sentiment on text messages
        if content and msg.type == "text":
            score = score_sentiment(content)["score"]
            acc.sentiment_scores.append(score)
            acc.monthly_sentiment[month].append(score)

        # Intimacy month bucket
        bucket = state.intimacy_months.setdefault(month, MonthIntimacy())
        bucket.words += words
        bucket.messages += 1
        bucket.emotional_words += _emotional_word_count(content)
        bucket.informality += content.count("!") + 2 * len(emojis)
        if late:
            bucket.late_night += 1

        prev = msg

    if prev is not None:
        persons[prev.sender].endings += 1
        state.session_lengths.append(session_length)
    if run_sender is not None and run_length >= 2:
        persons[run_sender].double_texts += 1

    logger.debug(
        f"Accumulated {state.total_messages} messages, {state.total_sessions} sessions, "
        f"{len(persons)} persons"
    )
    return state

