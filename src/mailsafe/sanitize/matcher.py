"""Quote-aware tag matching.

Email HTML routinely carries a literal ``>`` inside attribute values
(``<script data-x="a > b">``), so a tag cannot be assumed to end at the
first ``>``. The matcher reads the attribute list as a run of tokens, each
either a single character other than ``>``, ``"`` and ``'`` or a complete
quoted string, and stops at the first ``>`` outside quotes.

Matching is a forward scan driven by ``str.find`` and simple character-class
searches, so it cannot backtrack and runs in time linear in the span it
covers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

_QUOTE_OR_CLOSE = re.compile(r"[>\"']")

# A tag name ends where the browser's tokenizer ends it
_NAME_BOUNDARY = r"(?=[\s/>]|\Z)"


@dataclass(frozen=True)
class TagMatch:
    start: int
    end: int
    closing: bool


def find_tag_end(html: str, pos: int) -> int:
    """Return the index just past the first unquoted ``>`` at or after *pos*.

    A quote without a partner further on is an ordinary character. When no
    ``>`` follows at all the tag runs to the end of *html*.
    """
    unpaired: set[str] = set()
    while True:
        match = _QUOTE_OR_CLOSE.search(html, pos)
        if match is None:
            return len(html)
        char = match.group()
        if char == ">":
            return match.end()
        partner = -1 if char in unpaired else html.find(char, match.end())
        if partner == -1:
            # Nothing to pair with from here on, so stop looking for one
            unpaired.add(char)
            pos = match.end()
        else:
            pos = partner + 1


class TagMatcher:
    """Finds ``<name ...>``, ``<name .../>`` and ``</name>`` occurrences."""

    def __init__(self, name: str) -> None:
        self.name = name
        escaped = re.escape(name)
        self._any = re.compile(rf"<(/?){escaped}{_NAME_BOUNDARY}", re.IGNORECASE)
        self.closing_pattern = re.compile(rf"</{escaped}{_NAME_BOUNDARY}", re.IGNORECASE)

    def __repr__(self) -> str:
        return f"TagMatcher({self.name!r})"

    def find(self, html: str, pos: int = 0) -> Optional[TagMatch]:
        """Next opening or closing tag at or after *pos*."""
        match = self._any.search(html, pos)
        if match is None:
            return None
        return TagMatch(match.start(), find_tag_end(html, match.end()), bool(match.group(1)))

    def find_closing(self, html: str, pos: int = 0) -> Optional[TagMatch]:
        """Next closing tag at or after *pos*."""
        match = self.closing_pattern.search(html, pos)
        if match is None:
            return None
        return TagMatch(match.start(), find_tag_end(html, match.end()), True)


class ForwardSearch:
    """``pattern.search(html, pos)`` for a scan whose *pos* never moves back.

    A search that found its match at ``m`` also answers every later query up
    to ``m``, and a search that found nothing answers every later query, so
    a scan pays for each stretch of *html* once however often it asks.
    """

    def __init__(self, pattern: re.Pattern, html: str) -> None:
        self.pattern = pattern
        self.html = html
        self._start = -1
        self._match: Optional[re.Match] = None

    def search(self, pos: int) -> Optional[re.Match]:
        if 0 <= self._start <= pos and (self._match is None or self._match.start() >= pos):
            return self._match
        self._match = self.pattern.search(self.html, pos)
        self._start = pos
        return self._match


@lru_cache(maxsize=None)
def tag_matcher(name: str) -> TagMatcher:
    """Shared matcher for *name*; matchers hold no per-call state."""
    return TagMatcher(name)
