"""Tag removal stages: content stripping and shell stripping.

Both kinds of tag are removed in one forward scan. Removing a tag can join the
text on either side of it into a new tag (``<scr<form></form>ipt>``), so a
``<`` that could begin one of the stripped names is held back until the
characters after it settle. Held fragments form a stack because such splices
nest. After a removal only the newest fragment is looked at again, so the
scan never returns to text it has already passed.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Optional

from mailsafe.sanitize.matcher import ForwardSearch, find_tag_end, tag_matcher
from mailsafe.sanitize.rules import CONTENT_STRIPPED_TAGS, SHELL_STRIPPED_TAGS

# Same name boundary as the tag matcher
_BOUNDARY = re.compile(r"[\s/>]")


class _TagSet:
    """Lookup tables for one combination of content and shell tags."""

    def __init__(self, content: tuple[str, ...], shell: tuple[str, ...]) -> None:
        self.content = frozenset(name.lower() for name in content)
        self.shell = frozenset(name.lower() for name in shell)
        self.names = self.content | self.shell
        prefixes = set()
        for name in self.names:
            for marker in ("<", "</"):
                spelled = marker + name
                prefixes.update(spelled[:i] for i in range(1, len(spelled) + 1))
        self.prefixes = frozenset(prefixes)
        initials = re.escape("".join(sorted({name[0] for name in self.names})))
        # A "<" is worth holding if a name, or another "<", can follow it
        self.candidate = re.compile(rf"<(?=/?(?:[{initials}<]|\Z))", re.IGNORECASE)


@lru_cache(maxsize=None)
def _tag_set(content: tuple[str, ...], shell: tuple[str, ...]) -> _TagSet:
    return _TagSet(content, shell)


class _Stripper:
    def __init__(self, html: str, tags: _TagSet) -> None:
        self.html = html
        self.tags = tags
        self._closers: dict[str, ForwardSearch] = {}

    def run(self) -> str:
        html, tags = self.html, self.tags
        size = len(html)
        out: list[str] = []
        # Trailing output that may still turn into a tag, innermost last
        held: list[str] = []
        pos = 0
        while True:
            if not held:
                match = tags.candidate.search(html, pos)
                if match is None:
                    out.append(html[pos:])
                    return "".join(out)
                out.append(html[pos:match.start()])
                held.append("<")
                pos = match.end()
                continue

            fragment = held[-1]
            while pos < size and (fragment + html[pos]).lower() in tags.prefixes:
                fragment += html[pos]
                pos += 1
            held[-1] = fragment

            closing = fragment.startswith("</")
            name = fragment[2:].lower() if closing else fragment[1:].lower()
            if name in tags.names and (pos == size or _BOUNDARY.match(html, pos)):
                held.pop()
                pos = self._remove(name, closing, pos)
            elif pos < size and html[pos] == "<":
                held.append("<")
                pos += 1
            else:
                # Whatever follows stays, so none of the held fragments can complete
                out.extend(held)
                held.clear()

    def _remove(self, name: str, closing: bool, name_end: int) -> int:
        """Index just past the markup removed for the tag whose name ends at *name_end*."""
        end = find_tag_end(self.html, name_end)
        if closing or name in self.tags.shell:
            return end
        closer_end = self._closer_end(name, end)
        return end if closer_end is None else closer_end

    def _closer_end(self, name: str, pos: int) -> Optional[int]:
        search = self._closers.get(name)
        if search is None:
            search = self._closers[name] = ForwardSearch(tag_matcher(name).closing_pattern, self.html)
        match = search.search(pos)
        if match is None:
            return None
        return find_tag_end(self.html, match.end())


def strip_tags(
    html: str,
    content: Iterable[str] = CONTENT_STRIPPED_TAGS,
    shell: Iterable[str] = SHELL_STRIPPED_TAGS,
) -> str:
    """Remove *content* elements with everything inside them, and *shell* tags' markers.

    An opening content tag (self-closing or not) swallows everything up to
    and including the first closing tag of the same name after it. Openings
    without a closing tag, stray closing tags and shell tags are removed on
    their own. A tag formed by joining the text around a removal is removed
    too, so the result contains none of the names.
    """
    return _Stripper(html, _tag_set(tuple(content), tuple(shell))).run()


def strip_content(html: str, tag: str) -> str:
    """Remove every *tag* element together with everything inside it."""
    return strip_tags(html, (tag,), ())


def strip_shell(html: str, tag: str) -> str:
    """Remove *tag*'s opening and closing markers, keeping what they wrap."""
    return strip_tags(html, (), (tag,))


def strip_content_tags(html: str) -> str:
    return strip_tags(html, CONTENT_STRIPPED_TAGS, ())


def strip_shell_tags(html: str) -> str:
    return strip_tags(html, (), SHELL_STRIPPED_TAGS)
