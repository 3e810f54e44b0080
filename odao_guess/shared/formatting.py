from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def shorten(value: str, head: int = 8, tail: int = 6) -> str:
    """Abbreviate an address or hash as ``0x123456.....abcdef``."""
    if len(value) <= head + tail:
        return value
    return f"{value[:head]}.....{value[-tail:]}"


def format_timestamp(timestamp: int, tz: Optional[timezone] = None) -> str:
    """Render a unix timestamp as ``YYYY-MM-DD HH:MM`` (local time unless tz given)."""
    moment = datetime.fromtimestamp(int(timestamp), tz=tz)
    return moment.strftime("%Y-%m-%d %H:%M")


def format_points(value) -> str:
    """Drop trailing zeros so scores read as 1, 0.25, 7.5."""
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


__all__ = ["shorten", "format_timestamp", "format_points"]
