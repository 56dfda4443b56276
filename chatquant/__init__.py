"""
chatquant - Chat Export Normalization and Quantitative Analysis

Decodes Messenger, Instagram, Telegram, WhatsApp and Discord exports into
one message model and computes timing, engagement, bid/response,
chronotype, network and composite metrics without any external service.
"""

__version__ = "1.0.0"
__author__ = "chatquant Team"

from . import config
from .exceptions import ChatQuantError, FormatError
from .models import (
    ConversationMetadata,
    ParsedConversation,
    Participant,
    QuantitativeAnalysis,
    Reaction,
    UnifiedMessage,
)
from .parsers import decode_export, load_export, merge_exports, validate_export
from .pipeline import compute_quantitative_analysis, run_full_analysis

__all__ = [
    "config",
    "ChatQuantError",
    "FormatError",
    "ConversationMetadata",
    "ParsedConversation",
    "Participant",
    "QuantitativeAnalysis",
    "Reaction",
    "UnifiedMessage",
    "decode_export",
    "load_export",
    "merge_exports",
    "validate_export",
    "compute_quantitative_analysis",
    "run_full_analysis",
]
