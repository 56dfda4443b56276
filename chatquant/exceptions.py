"""
Exception hierarchy for chatquant.

Only malformed input raises. Metrics that lack enough data are reported as
``None`` on the analysis record instead.
"""

from typing import Optional


class ChatQuantError(Exception):
    """Base exception for all chatquant errors."""


class FormatError(ChatQuantError):
    """Raised when an export cannot be recognised or decoded.

    ``platform`` names the decoder that rejected the input (``None`` when the
    platform could not be detected) and ``hint`` tells the user what a valid
    export looks like.
    """

    def __init__(self, platform: Optional[str], hint: str):
        self.platform = platform
        self.hint = hint
        prefix = f"[{platform}] " if platform else ""
        super().__init__(f"{prefix}{hint}")
