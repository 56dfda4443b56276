"""
Per-person totals, vocabulary and emoji usage.
"""

import math
from typing import Any, Dict

from . import config
from .helpers import safe_divide, top_items


def _per_1k(count: int, total: int) -> float:
    return round(safe_divide(count * 1000, total), 2)


def compute_person_metrics(state) -> Dict[str, Any]:
    per_person = {}
    for name, acc in state.persons.items():
        unique_words = len(acc.word_counter)
        content_words = sum(acc.word_counter.values())

        metrics = {
            "total_messages": acc.total_messages,
            "total_words": acc.total_words,
            "total_characters": acc.total_characters,
            "average_message_length": round(safe_divide(acc.total_words, acc.total_messages), 2),
            "average_message_chars": round(safe_divide(acc.total_characters, acc.total_messages), 2),
            "longest_message": acc.longest_message or {"content": "", "length": 0, "timestamp": 0},
            "shortest_message": acc.shortest_message or {"content": "", "length": 0, "timestamp": 0},
            "messages_with_emoji": acc.messages_with_emoji,
            "emoji_count": acc.emoji_count,
            "top_emojis": top_items(acc.emoji_counter, config.TOP_EMOJIS, "emoji"),
            "questions_asked": acc.questions_asked,
            "media_shared": acc.media_shared,
            "links_shared": acc.links_shared,
            "reactions_given": acc.reactions_given,
            "reactions_received": acc.reactions_received,
            "top_reactions_given": top_items(acc.reactions_given_counter, config.TOP_REACTIONS, "emoji"),
            "unsent_messages": acc.unsent_messages,
            "top_words": top_items(acc.word_counter, config.TOP_WORDS, "word"),
            "top_phrases": top_items(acc.bigram_counter, config.TOP_PHRASES, "phrase"),
            "unique_words": unique_words,
            # Guiraud's index: unique / sqrt(total)
            "vocabulary_richness": round(safe_divide(unique_words, math.sqrt(content_words)), 3),
            "questions_per_1k": _per_1k(acc.questions_asked, acc.total_messages),
            "media_per_1k": _per_1k(acc.media_shared, acc.total_messages),
            "links_per_1k": _per_1k(acc.links_shared, acc.total_messages),
            "emoji_per_1k": _per_1k(acc.emoji_count, acc.total_messages),
        }
        if state.is_discord:
            metrics.update({
                "mentions_made": acc.mentions_made,
                "mentions_received": acc.mentions_received,
                "replies_sent": acc.replies_sent,
                "replies_received": acc.replies_received,
                "edited_messages": acc.edited_messages,
            })
        per_person[name] = metrics
    return per_person
