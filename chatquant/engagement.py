"""
Engagement bundle: double texting, message share, reaction rates, sessions.
"""

from typing import Any, Dict

from .helpers import safe_divide


def compute_engagement(state) -> Dict[str, Any]:
    total = state.total_messages
    persons = state.persons

    engagement = {
        "double_texts": {n: a.double_texts for n, a in persons.items()},
        "max_consecutive": {n: a.max_consecutive for n, a in persons.items()},
        "message_ratio": {n: round(safe_divide(a.total_messages, total), 4) for n, a in persons.items()},
        # given / messages received from others
        "reaction_rate": {
            n: round(safe_divide(a.reactions_given, a.messages_received), 4) for n, a in persons.items()
        },
        "reaction_give_rate": {
            n: round(safe_divide(a.reactions_given, a.total_messages), 4) for n, a in persons.items()
        },
        "reaction_receive_rate": {
            n: round(safe_divide(a.reactions_received, a.total_messages), 4) for n, a in persons.items()
        },
        "avg_conversation_length": round(safe_divide(total, state.total_sessions, default=float(total)), 2),
        "total_sessions": state.total_sessions,
        "mention_rate": None,
        "reply_rate": None,
    }

    if state.is_discord:
        engagement["mention_rate"] = {
            n: round(safe_divide(a.mentions_made, a.total_messages), 4) for n, a in persons.items()
        }
        engagement["reply_rate"] = {
            n: round(safe_divide(a.replies_sent, a.total_messages), 4) for n, a in persons.items()
        }
    return engagement
