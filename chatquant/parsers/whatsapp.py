"""
WhatsApp .txt export decoder.

Handles the common locale variants:
    Android PL:  01.02.2024, 14:23 - Ania: Hej
    Android EN:  [01/02/2024, 2:23 PM] Ania: Hey
    iOS:         [2024-01-02, 14:23:45] Ania: Hey
Lines that do not start with a date continue the previous message.
"""

import re
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from .. import config
from ..exceptions import FormatError
from ..models import Participant, ParsedConversation, UnifiedMessage
from .common import finalize_conversation

logger = logging.getLogger(__name__)

PLATFORM = "whatsapp"
SYSTEM_SENDER = "System"
TRUNCATION_MARKER = "\n[...content truncated]"

# Unicode quirks
NBSP = "\u00A0"
NNBSP = "\u202F"
ZWSP = "\u200B"
LRM = "\u200E"
RLM = "\u200F"
BOM = "\ufeff"

DATE_PART = r"\d{1,4}[./-]\d{1,2}[./-]\d{1,4}"
TIME_PART = r"\d{1,2}[:.]\d{2}(?:[:.]\d{2})?(?:\s*[AaPp]\.?\s?[Mm]\.?)?"

# "[date, time] " with an optional dash, or "date, time - "
BRACKET_LINE_RE = re.compile(
    rf"^\[(?P<date>{DATE_PART}),?\s+(?P<time>{TIME_PART})\]\s*(?:[-–—]\s*)?"
)
PLAIN_LINE_RE = re.compile(
    rf"^(?P<date>{DATE_PART}),?\s+(?P<time>{TIME_PART})\s*[-–—]\s*"
)
SENDER_RE = re.compile(r"^(?P<sender>[^:\n]{1,80}?):\s(?P<message>.*)$", re.DOTALL)
URL_RE = re.compile(r"https?://[^\s<>'\"]+", re.IGNORECASE)

# Notices that WhatsApp writes without a sender
SYSTEM_SNIPPETS = [
    "messages and calls are end-to-end encrypted",
    "wiadomości oraz połączenia są szyfrowane",
    "created group",
    "changed the subject",
    "changed the group description",
    "changed this group",
    "security code changed",
    "you were added",
    "disappearing messages",
    "wiadomości znikające",
]

DELETED_NOTICES = {
    "this message was deleted",
    "you deleted this message",
    "ta wiadomość została usunięta",
    "usunąłeś tę wiadomość",
}

MEDIA_SNIPPETS = {
    "<media omitted>", "<multimedia omitido>", "<archivo omitido>",
    "<medien ausgeschlossen>", "<media weggelaten>", "<multimedia pominięte>",
    "image omitted", "video omitted", "audio omitted", "sticker omitted",
    "gif omitted", "document omitted", "contact card omitted",
}
FILE_ATTACHED_RE = re.compile(
    r"\.(jpg|jpeg|png|gif|webp|mp4|mp3|opus|ogg|pdf|docx?|xlsx?|pptx?|zip|rar)\s*\(file attached\)",
    re.IGNORECASE,
)


def _strip_weird_unicode(s: str) -> str:
    """Normalize WhatsApp quirks: remove invisible chars, unify spaces."""
    if not s:
        return s
    s = s.replace(BOM, "")
    s = s.replace(LRM, "").replace(RLM, "")
    s = s.replace(ZWSP, " ")
    s = s.replace(NBSP, " ").replace(NNBSP, " ")
    return s


def _looks_like_system(text: str) -> bool:
    """Check a sender-less line for a known service notice."""
    low = text.lower()
    return any(snippet in low for snippet in SYSTEM_SNIPPETS)


def _is_media(text: str) -> bool:
    low = text.lower().strip()
    return low in MEDIA_SNIPPETS or bool(FILE_ATTACHED_RE.search(text))


def _cap_content(record: Dict) -> None:
    """Truncate record text so that text plus marker fits MAX_CONTENT_CHARS."""
    limit = config.MAX_CONTENT_CHARS
    if len(record["text"]) <= limit:
        return
    keep = max(0, limit - len(TRUNCATION_MARKER))
    record["text"] = (record["text"][:keep] + TRUNCATION_MARKER)[:limit]
    record["truncated"] = True


def match_line_start(line: str) -> Optional[re.Match]:
    return BRACKET_LINE_RE.match(line) or PLAIN_LINE_RE.match(line)


def parse_date_parts(date_str: str) -> Tuple[int, int, int]:
    """Return (year, month, day).

    ISO dates are read as-is. Otherwise a first component above 12 must be
    the day, a second component above 12 means US month-first order, and
    ambiguous dates default to day-first.
    """
    parts = re.split(r"[./-]", date_str)
    if len(parts) != 3:
        raise ValueError(f"Unrecognized date: '{date_str}'")
    a, b, c = (int(p) for p in parts)

    if len(parts[0]) == 4:
        return a, b, c

    year = c
    if year < 100:
        year = 2000 + year if year < 70 else 1900 + year

    if a > 12:
        return year, b, a
    if b > 12:
        return year, a, b
    return year, b, a


def parse_time_parts(time_str: str) -> Tuple[int, int, int]:
    low = time_str.strip().lower().replace(".", ":")
    is_pm = "pm" in low or "p:m" in low
    is_am = "am" in low or "a:m" in low
    numeric = re.sub(r"\s*[ap]:?\s?m:?\s*$", "", low).strip(": ")
    pieces = [int(p) for p in numeric.split(":") if p]
    hours = pieces[0]
    minutes = pieces[1] if len(pieces) > 1 else 0
    seconds = pieces[2] if len(pieces) > 2 else 0
    if is_pm and hours < 12:
        hours += 12
    if is_am and hours == 12:
        hours = 0
    return hours, minutes, seconds


def parse_timestamp(date_str: str, time_str: str) -> int:
    """Local export date and time to epoch milliseconds."""
    year, month, day = parse_date_parts(date_str)
    hours, minutes, seconds = parse_time_parts(time_str)
    dt = datetime(year, month, day, hours, minutes, seconds, tzinfo=ZoneInfo(config.TIMEZONE))
    return int(dt.timestamp() * 1000)


def build_title(names: List[str]) -> str:
    if not names:
        return "WhatsApp"
    if len(names) <= 3:
        return " & ".join(names)
    return f"{names[0]} & {len(names) - 1} others"


class WhatsAppParser:
    """Parse WhatsApp chat exports into a ParsedConversation."""

    def parse_file(self, file_path: str) -> ParsedConversation:
        """Parse WhatsApp export file from disk."""
        encodings = ["utf-8-sig", "cp1252", "latin1"]
        last_err: Optional[Exception] = None

        for enc in encodings:
            try:
                with open(file_path, "r", encoding=enc) as f:
                    text = f.read()
                return self.parse_text(text)
            except UnicodeDecodeError as e:
                last_err = e
                continue

        raise FormatError(PLATFORM, f"Failed to read {file_path}: {last_err}")

    def parse_text(self, text: str) -> ParsedConversation:
        """Parse WhatsApp export text already loaded in memory."""
        records: List[Dict] = []
        current: Optional[Dict] = None

        for i, raw in enumerate(text.splitlines(), start=1):
            line = _strip_weird_unicode(raw)
            if not line.strip() and current is None:
                continue

            m = match_line_start(line)
            if m:
                try:
                    ts = parse_timestamp(m.group("date"), m.group("time"))
                except ValueError as e:
                    logger.warning(f"Line {i}: {e}; treating as continuation")
                    if current is not None:
                        self._append(current, line)
                    continue

                if current is not None:
                    records.append(current)
                current = self._start_record(line[m.end():], ts)
            elif current is not None:
                self._append(current, line)
            else:
                logger.debug(f"Orphaned line {i}: {line[:80]}")

        if current is not None:
            records.append(current)

        messages = [self._finalize(r) for r in records]
        senders = []
        for msg in messages:
            if not msg.is_system and msg.sender not in senders:
                senders.append(msg.sender)

        if not senders:
            raise FormatError(
                PLATFORM,
                "No user messages found. Expected lines like '01.02.2024, 14:23 - Name: text'.",
            )

        participants = [Participant(name=name) for name in senders]
        return finalize_conversation(PLATFORM, build_title(senders), participants, messages)

    def _start_record(self, rest: str, ts: int) -> Dict:
        m = SENDER_RE.match(rest)
        if m and not _looks_like_system(m.group("sender")):
            record = {"timestamp": ts, "sender": m.group("sender").strip(),
                      "text": m.group("message"), "system": False, "truncated": False}
        else:
            record = {"timestamp": ts, "sender": SYSTEM_SENDER, "text": rest,
                      "system": True, "truncated": False}
        _cap_content(record)
        return record

    def _append(self, record: Dict, line: str) -> None:
        if record["truncated"]:
            return
        record["text"] += "\n" + line
        _cap_content(record)

    def _finalize(self, record: Dict) -> UnifiedMessage:
        content = record["text"].strip()
        if record["system"]:
            return UnifiedMessage(index=0, sender=SYSTEM_SENDER, content=content,
                                  timestamp=record["timestamp"], type="system")

        is_unsent = content.lower() in DELETED_NOTICES
        has_url = bool(URL_RE.search(content))
        if is_unsent:
            msg_type = "unsent"
        elif _is_media(content):
            msg_type = "media"
        elif has_url:
            msg_type = "link"
        else:
            msg_type = "text"

        return UnifiedMessage(
            index=0,
            sender=record["sender"],
            content=content,
            timestamp=record["timestamp"],
            type=msg_type,
            has_media=msg_type == "media",
            has_link=has_url,
            is_unsent=is_unsent,
        )


def parse_whatsapp(text: str) -> ParsedConversation:
    return WhatsAppParser().parse_text(text)


def validate_format(file_path: str, min_hits: int = 3) -> tuple[bool, str]:
    """
    Validate WhatsApp export format.
    Returns (is_valid, reason).
    """
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as e:
        return False, f"Could not read file: {e}"

    hits = 0
    for raw in text.splitlines():
        line = _strip_weird_unicode(raw)
        m = match_line_start(line)
        if m and SENDER_RE.match(line[m.end():]):
            hits += 1
            if hits >= min_hits:
                return True, "Format appears valid"

    return False, "Not enough lines match expected WhatsApp format"
