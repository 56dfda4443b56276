"""
Lexicon-based sentiment scoring.

Each text message gets a score in [-1, 1]: (positive - negative) / matched
words, or 0 when nothing matches. A negation particle flips the first
sentiment word found within the next three tokens.
"""

from typing import Any, Dict

from . import config
from .helpers import mean, std_dev
from .lexicons import NEGATION_WINDOW, negation_set, polarity, sentiment_tokens


def score_sentiment(text: str) -> Dict[str, Any]:
    """Score one message. Returns positive/negative/total counts and score."""
    tokens = sentiment_tokens(text)
    negators = negation_set(text)

    flipped: Dict[int, str] = {}
    consumed = set()
    for i, token in enumerate(tokens):
        if token not in negators:
            continue
        for j in range(1, NEGATION_WINDOW + 1):
            if i + j >= len(tokens):
                break
            found = polarity(tokens[i + j])
            if found is not None:
                flipped[i + j] = "negative" if found == "positive" else "positive"
                consumed.add(i)
                break

    positive = negative = 0
    for i, token in enumerate(tokens):
        if i in consumed:
            continue
        found = flipped.get(i) or polarity(token)
        if found == "positive":
            positive += 1
        elif found == "negative":
            negative += 1

    total = positive + negative
    score = (positive - negative) / total if total else 0.0
    return {"positive": positive, "negative": negative, "total": total, "score": score}


def compute_sentiment(state) -> Dict[str, Any]:
    """Per-person sentiment summary from the accumulated message scores."""
    per_person = {}
    for name, acc in state.persons.items():
        scores = acc.sentiment_scores
        n = len(scores)
        if n == 0:
            per_person[name] = {
                "avg_sentiment": 0.0,
                "positive_ratio": 0.0,
                "negative_ratio": 0.0,
                "neutral_ratio": 1.0,
                "emotional_volatility": 0.0,
                "scored_messages": 0,
            }
            continue

        positive = sum(1 for s in scores if s > 0)
        negative = sum(1 for s in scores if s < 0)
        volatility = std_dev(scores) if n >= config.SENTIMENT_VOLATILITY_MIN_MESSAGES else 0.0
        per_person[name] = {
            "avg_sentiment": round(mean(scores), 4),
            "positive_ratio": round(positive / n, 4),
            "negative_ratio": round(negative / n, 4),
            "neutral_ratio": round((n - positive - negative) / n, 4),
            "emotional_volatility": round(volatility, 4),
            "scored_messages": n,
        }
    return {"per_person": per_person}
