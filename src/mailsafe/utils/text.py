"""Text helpers for terminal output."""

from __future__ import annotations

import re

_CONTROL = re.compile(r"[\x00-\x1f\x7f]")


def escape_controls(text: str) -> str:
    """Show control characters (newlines, tabs, NUL) as escapes."""
    return _CONTROL.sub(lambda m: m.group().encode("unicode_escape").decode("ascii"), text)


def excerpt(text: str, max_length: int = 80, suffix: str = "...") -> str:
    """Single-line excerpt of text for a table cell."""
    text = escape_controls(text)
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix
