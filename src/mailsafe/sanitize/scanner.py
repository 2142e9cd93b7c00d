"""Forward scan over markup, reading it the way a browser's tokenizer does.

Start tags are only found where a tokenizer would start one. Attribute values,
comments, ``<!...>`` and ``<?...>`` declarations, and plain text are passed
over, so a value such as ``href="/online=1"`` or a sentence containing
``src=`` is never read as an attribute.

Elements such as ``<style>`` and ``<title>`` hold text in an HTML document but
markup when they sit inside ``<svg>`` or ``<math>``. Their content is scanned
as markup, and any construct that markup reading would carry past the
element's closing tag turns the rest of the content into text (every ``<``
becomes ``&lt;``). Both readings then end the element at the same place.
``<![CDATA[`` gets the same treatment: text inside ``<svg>``, a bogus comment
ending at the first ``>`` elsewhere.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from mailsafe.sanitize.matcher import ForwardSearch
from mailsafe.sanitize.rules import TEXT_CONTENT_TAGS

# The tokenizer's whitespace; other Unicode spaces belong to names and values
_SPACE = r"\t\n\f\r "

# An unterminated quoted value runs to the end of the input, as it does in a browser
_VALUE = rf"(?:\"[^\"]*(?:\"|\Z)|'[^']*(?:'|\Z)|[^{_SPACE}>]*)"

_ATTRIBUTE = re.compile(
    rf"(?P<lead>[{_SPACE}/]*)(?P<name>[^{_SPACE}/>][^{_SPACE}/>=]*)"
    rf"(?:[{_SPACE}]*=[{_SPACE}]*(?P<value>{_VALUE}))?"
)
_TRAILING = re.compile(rf"[{_SPACE}/]*")
_TAG_NAME = re.compile(rf"[A-Za-z][^{_SPACE}/>]*")

_GT = re.compile(">")
_COMMENT_END = re.compile(r"--!?>")
_CDATA_END = re.compile(r"\]\]>")
_CDATA_OPEN = "[CDATA["

# Nothing ends this one
_PLAINTEXT = "plaintext"


@dataclass(frozen=True)
class Attribute:
    name: str
    value: Optional[str]
    raw: str
    lead: str = ""


@dataclass(frozen=True)
class ScannedTag:
    attributes: list[Attribute]
    trailing: str
    end: int
    closed: bool


def unquote(value: str) -> str:
    if value[:1] in ("\"", "'"):
        quote = value[0]
        value = value[1:]
        if value.endswith(quote):
            value = value[:-1]
    return value


def scan_attributes(html: str, pos: int, endpos: Optional[int] = None) -> ScannedTag:
    """Read the attribute list that starts at *pos*, as a browser would.

    Quotes only count where an attribute value starts, and the tag ends at
    the first ``>`` outside a quoted value. Reading stops at *endpos* (the
    end of *html* by default); a tag that has not closed by then comes back
    with ``closed`` false.
    """
    if endpos is None:
        endpos = len(html)
    attributes: list[Attribute] = []
    while True:
        match = _ATTRIBUTE.match(html, pos, endpos)
        if match is None:
            break
        value = match.group("value")
        attributes.append(Attribute(
            name=match.group("name"),
            value=unquote(value) if value is not None else None,
            raw=match.group(0),
            lead=match.group("lead"),
        ))
        pos = match.end()
    trailing = _TRAILING.match(html, pos, endpos).group()
    pos += len(trailing)
    closed = html.startswith(">", pos, endpos)
    return ScannedTag(attributes, trailing, pos + 1 if closed else pos, closed)


@lru_cache(maxsize=None)
def _closing_tag(name: str) -> re.Pattern:
    # Browsers fold ASCII case only when they look for the end of a text element
    return re.compile(rf"</{re.escape(name)}(?=[{_SPACE}/>])", re.IGNORECASE | re.ASCII)


# Called with the document, the start of the tag, its name and its attributes;
# returns the text that replaces html[start:tag.end]
TagRewriter = Callable[[str, int, str, ScannedTag], str]

# Replacement text, where scanning resumes, and the end of a text region that
# starts there (or None)
_Step = tuple[str, int, Optional[int]]


class _MarkupScanner:
    def __init__(self, html: str, rewrite: TagRewriter) -> None:
        self.html = html
        self.rewrite = rewrite
        self._searches: dict[re.Pattern, ForwardSearch] = {}

    def run(self) -> str:
        html = self.html
        pieces: list[str] = []
        # Ends of the text regions being scanned, innermost last
        bounds: list[int] = []
        pos = 0
        while True:
            bound = bounds[-1] if bounds else len(html)
            start = html.find("<", pos, bound)
            if start == -1:
                pieces.append(html[pos:bound])
                pos = bound
                if not bounds:
                    return "".join(pieces)
                bounds.pop()
                continue
            pieces.append(html[pos:start])
            step = self._construct(start, bound)
            if step is None:
                pieces.append(html[start:bound].replace("<", "&lt;"))
                pos = bound
                continue
            text, pos, region_end = step
            pieces.append(text)
            if region_end is not None and region_end > pos:
                bounds.append(region_end)

    def _search(self, pattern: re.Pattern, pos: int) -> Optional[re.Match]:
        search = self._searches.get(pattern)
        if search is None:
            search = self._searches[pattern] = ForwardSearch(pattern, self.html)
        return search.search(pos)

    def _end_of(self, pattern: re.Pattern, pos: int) -> int:
        match = self._search(pattern, pos)
        return len(self.html) if match is None else match.end()

    def _construct(self, start: int, bound: int) -> Optional[_Step]:
        """Read the construct that begins with the ``<`` at *start*.

        Returns None when it would run past *bound*, the end of the text
        region being scanned.
        """
        html = self.html
        following = html[start + 1:start + 2]
        if following.isascii() and following.isalpha():
            return self._tag(start, start + 1, bound, closing=False)
        if following == "/":
            after = html[start + 2:start + 3]
            if after.isascii() and after.isalpha():
                return self._tag(start, start + 2, bound, closing=True)
            if not after:
                return "<", start + 1, None
            end = start + 3 if after == ">" else self._end_of(_GT, start + 2)
        elif following == "!":
            if html.startswith("--", start + 2):
                end = self._comment_end(start)
            elif html[start + 2:start + 2 + len(_CDATA_OPEN)].upper() == _CDATA_OPEN:
                return self._cdata(start, bound)
            else:
                end = self._end_of(_GT, start + 2)
        elif following == "?":
            end = self._end_of(_GT, start + 2)
        else:
            return "<", start + 1, None
        if end > bound:
            return None
        return html[start:end], end, None

    def _comment_end(self, start: int) -> int:
        html = self.html
        if html.startswith(">", start + 4):
            return start + 5
        if html.startswith("->", start + 4):
            return start + 6
        return self._end_of(_COMMENT_END, start + 4)

    def _cdata(self, start: int, bound: int) -> Optional[_Step]:
        # Outside svg and math the section is a bogus comment ending at the first ">"
        opened = self._end_of(_GT, start + 2)
        match = self._search(_CDATA_END, start + 2 + len(_CDATA_OPEN))
        closed = len(self.html) if match is None else match.start()
        if opened > bound or closed > bound:
            return None
        return self.html[start:opened], opened, closed

    def _tag(self, start: int, name_start: int, bound: int, closing: bool) -> Optional[_Step]:
        html = self.html
        match = _TAG_NAME.match(html, name_start, bound)
        if match is None:
            return None
        tag = scan_attributes(html, match.end(), bound)
        if not tag.closed and bound < len(html):
            return None
        if closing:
            return html[start:tag.end], tag.end, None
        name = match.group()
        region_end = self._region_end(name.lower(), tag.end) if tag.closed else None
        if region_end is not None and region_end > bound:
            return None
        return self.rewrite(html, start, name, tag), tag.end, region_end

    def _region_end(self, name: str, pos: int) -> Optional[int]:
        if name not in TEXT_CONTENT_TAGS:
            return None
        if name == _PLAINTEXT:
            return len(self.html)
        match = self._search(_closing_tag(name), pos)
        return len(self.html) if match is None else match.start()


def rewrite_start_tags(html: str, rewrite: TagRewriter) -> str:
    """Return *html* with every start tag replaced by what *rewrite* makes of it."""
    return _MarkupScanner(html, rewrite).run()
