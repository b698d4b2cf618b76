"""Small text helpers shared by the interactive views."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

from kronos.tui.styles import STYLE_FAIL, STYLE_OK, STYLE_WARN

_ELLIPSIS = "..."


class CheckStatus(str, Enum):
    """Outcome of a health check."""

    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


def truncate(text: str, limit: int) -> str:
    """Flatten newlines and cut text to at most ``limit`` characters."""
    text = text.replace("\n", " ")
    if len(text) <= limit:
        return text
    if limit < len(_ELLIPSIS):
        raise ValueError(f"limit must be at least {len(_ELLIPSIS)}")
    return text[: limit - len(_ELLIPSIS)] + _ELLIPSIS


def format_age(moment: datetime, now: datetime | None = None) -> str:
    """Short age of a moment: 'ahora', minutes, hours or days."""
    if now is None:
        now = datetime.now(timezone.utc) if moment.tzinfo else datetime.now()
    elapsed = now - moment
    if elapsed < timedelta(minutes=1):
        return "ahora"
    seconds = elapsed.total_seconds()
    if elapsed < timedelta(hours=1):
        return f"{int(seconds // 60)}m"
    if elapsed < timedelta(hours=24):
        return f"{int(seconds // 3600)}h"
    return f"{int(seconds // 86400)}d"


def visible_lines(height: int) -> int:
    """Number of list rows that fit in a screen of the given height."""
    return max(height - 6, 5)


def scroll_window(cursor: int, total: int, visible: int) -> tuple[int, int]:
    """Start and end indices of the rows shown around the cursor."""
    start = max(cursor - visible // 2, 0)
    end = start + visible
    if end > total:
        end = total
        start = max(end - visible, 0)
    return start, end


def mask_api_key(value: str) -> str:
    """Hide all but the first and last four characters of a long key."""
    if len(value) <= 8:
        return value
    return value[:4] + "*" * (len(value) - 8) + value[-4:]


def status_icon(status: CheckStatus | str) -> str:
    """Coloured icon for a check status; a blank for unknown ones."""
    if status == CheckStatus.OK:
        return STYLE_OK.render("✓")
    if status == CheckStatus.WARN:
        return STYLE_WARN.render("⚠")
    if status == CheckStatus.FAIL:
        return STYLE_FAIL.render("✗")
    return " "