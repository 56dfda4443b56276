"""
Canonical conversation model shared by every decoder and metric.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict, fields
from typing import Any, Dict, List, Optional

import pandas as pd

from . import config

MESSAGE_TYPES = ("text", "media", "sticker", "link", "call", "system", "unsent")


@dataclass
class Participant:
    name: str
    platform_id: Optional[str] = None


@dataclass
class Reaction:
    emoji: str
    actor: str
    timestamp: Optional[int] = None
    count: Optional[int] = None


@dataclass
class UnifiedMessage:
    """One message in platform-independent form.

    ``timestamp`` is milliseconds since the epoch (UTC). ``index`` is the
    dense position after the final chronological sort.
    """

    index: int
    sender: str
    content: str
    timestamp: int
    type: str = "text"
    reactions: List[Reaction] = field(default_factory=list)
    has_media: bool = False
    has_link: bool = False
    is_unsent: bool = False
    mentions: Optional[List[str]] = None
    reply_to_index: Optional[int] = None
    is_edited: Optional[bool] = None

    @property
    def is_system(self) -> bool:
        return self.type == "system"


@dataclass
class ConversationMetadata:
    total_messages: int
    date_range: Dict[str, int]
    is_group: bool
    duration_days: int
    discord_channel_id: Optional[str] = None


@dataclass
class ParsedConversation:
    platform: str
    title: str
    participants: List[Participant]
    messages: List[UnifiedMessage]
    metadata: ConversationMetadata

    @property
    def participant_names(self) -> List[str]:
        return [p.name for p in self.participants]

    @property
    def user_messages(self) -> List[UnifiedMessage]:
        """Messages excluding platform service events."""
        return [m for m in self.messages if not m.is_system]

    def to_dataframe(self) -> pd.DataFrame:
        """Return messages as a DataFrame with a tz-aware ``datetime`` column."""
        rows = [
            {
                "index": m.index,
                "sender": m.sender,
                "content": m.content,
                "timestamp": m.timestamp,
                "type": m.type,
                "has_media": m.has_media,
                "has_link": m.has_link,
                "is_unsent": m.is_unsent,
                "reaction_count": len(m.reactions),
                "word_count": len(m.content.split()) if m.content else 0,
            }
            for m in self.messages
        ]
        columns = ["index", "sender", "content", "timestamp", "type", "has_media",
                   "has_link", "is_unsent", "reaction_count", "word_count"]
        df = pd.DataFrame(rows, columns=columns)
        df["datetime"] = (
            pd.to_datetime(df["timestamp"], unit="ms", utc=True).dt.tz_convert(config.TIMEZONE)
        )
        return df

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QuantitativeAnalysis:
    """Write-once result of a full quantitative analysis.

    Every bundle is a plain dict (or list, for badges). Optional bundles are
    ``None`` when the conversation does not have enough data for them.
    """

    per_person: Dict[str, Any]
    timing: Dict[str, Any]
    engagement: Dict[str, Any]
    patterns: Dict[str, Any]
    heatmap: Dict[str, Any]
    trends: Dict[str, Any]
    sentiment: Dict[str, Any]
    conflicts: Dict[str, Any]
    intimacy: Dict[str, Any]
    response_time_distribution: Dict[str, Any]
    reciprocity: Dict[str, Any]
    ranking_percentiles: Dict[str, Any]
    catchphrases: Dict[str, Any]
    best_time_to_text: Dict[str, Any]
    viral_scores: Dict[str, Any]
    badges: List[Dict[str, Any]]
    bid_response: Optional[Dict[str, Any]] = None
    chronotype: Optional[Dict[str, Any]] = None
    shift_support: Optional[Dict[str, Any]] = None
    year_milestones: Optional[Dict[str, Any]] = None
    pursuit_withdrawal: Optional[Dict[str, Any]] = None
    lsm: Optional[Dict[str, Any]] = None
    pronoun_analysis: Optional[Dict[str, Any]] = None
    network: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        # Bundles are already plain data; copy through json to detach them
        return json.loads(self.to_json())

    def to_json(self, indent: Optional[int] = None) -> str:
        payload = {f.name: getattr(self, f.name) for f in fields(self)}
        return json.dumps(payload, indent=indent, ensure_ascii=False, allow_nan=False)
