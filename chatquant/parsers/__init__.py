"""
Platform decoders and dispatch.

Every decoder returns a ParsedConversation and raises FormatError on
input it does not recognise.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from ..exceptions import FormatError
from ..models import ParsedConversation
from .discord import is_discord_message, parse_discord
from .instagram import merge_instagram_files, parse_instagram
from .messenger import merge_messenger_files, parse_messenger
from .telegram import is_telegram_export, parse_telegram
from .whatsapp import WhatsAppParser, parse_whatsapp

logger = logging.getLogger(__name__)

PLATFORMS = ("messenger", "instagram", "telegram", "whatsapp", "discord")

DECODERS = {
    "messenger": parse_messenger,
    "instagram": parse_instagram,
    "telegram": parse_telegram,
    "whatsapp": parse_whatsapp,
    "discord": parse_discord,
}

MERGERS = {
    "messenger": merge_messenger_files,
    "instagram": merge_instagram_files,
}


def detect_platform(raw: Any) -> Optional[str]:
    """Guess the platform of a raw export by probing its required fields."""
    if isinstance(raw, str):
        return "whatsapp"
    if isinstance(raw, list):
        return "discord" if raw and is_discord_message(raw[0]) else None
    if not isinstance(raw, dict):
        return None

    messages = raw.get("messages")
    if isinstance(messages, list) and messages and is_discord_message(messages[0]):
        return "discord"
    if is_telegram_export(raw):
        return "telegram"
    if isinstance(raw.get("participants"), list) and isinstance(messages, list):
        if "title" in raw or "threadName" in raw:
            return "messenger"
        return "instagram"
    return None


def _resolve_platform(raw: Any, platform: Optional[str]) -> str:
    if platform is not None:
        if platform not in PLATFORMS:
            raise FormatError(None, f"Unknown platform '{platform}'. Choose one of: {', '.join(PLATFORMS)}.")
        return platform
    detected = detect_platform(raw)
    if detected is None:
        raise FormatError(
            None,
            "Unrecognised export. Supported: Messenger/Instagram/Telegram JSON, "
            "WhatsApp .txt, Discord message JSON.",
        )
    logger.debug(f"Detected platform: {detected}")
    return detected


def decode_export(raw: Any, platform: Optional[str] = None) -> ParsedConversation:
    """Decode one raw export (parsed JSON or WhatsApp text)."""
    platform = _resolve_platform(raw, platform)
    if platform == "whatsapp" and not isinstance(raw, str):
        raise FormatError("whatsapp", "Expected the WhatsApp chat export as text.")
    return DECODERS[platform](raw)


def merge_exports(raws: List[Any], platform: Optional[str] = None) -> ParsedConversation:
    """Decode a conversation split across several files of the same export."""
    if not raws:
        raise FormatError(platform, "No files provided")
    platform = _resolve_platform(raws[0], platform)
    if len(raws) == 1:
        return decode_export(raws[0], platform)
    if platform not in MERGERS:
        raise FormatError(platform, "Multi-file exports are only supported for Messenger and Instagram.")
    return MERGERS[platform](raws)


def load_export(path: Union[str, Path]) -> Any:
    """Read an export file: .txt as text, anything else as JSON."""
    path = Path(path)
    if path.suffix.lower() == ".txt":
        with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
            return f.read()
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FormatError(None, f"{path.name} is not valid JSON: {e}") from e


def validate_export(path: Union[str, Path], platform: Optional[str] = None) -> tuple[bool, str]:
    """
    Check whether a file decodes.
    Returns (is_valid, reason) and never raises.
    """
    try:
        conversation = decode_export(load_export(path), platform)
    except FormatError as e:
        return False, str(e)
    except OSError as e:
        return False, f"Could not read file: {e}"
    return True, (
        f"{conversation.platform}: {conversation.metadata.total_messages} messages, "
        f"{len(conversation.participants)} participants"
    )


__all__ = [
    "PLATFORMS",
    "WhatsAppParser",
    "decode_export",
    "detect_platform",
    "load_export",
    "merge_exports",
    "merge_messenger_files",
    "merge_instagram_files",
    "parse_discord",
    "parse_instagram",
    "parse_messenger",
    "parse_telegram",
    "parse_whatsapp",
    "validate_export",
]
