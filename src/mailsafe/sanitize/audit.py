"""Check a document against the sanitizer's output guarantees.

The audit parses with BeautifulSoup, independently of the sanitizer's own
scanning, so it can be pointed at sanitizer output to confirm the guarantees
hold the way an HTML parser sees the markup.
"""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup

from mailsafe.sanitize.rules import (
    CONTENT_STRIPPED_TAGS,
    EVENT_HANDLER_NAME,
    LINK_REL,
    LINK_TARGET,
    SHELL_STRIPPED_TAGS,
    URI_ATTRIBUTES,
)
from mailsafe.sanitize.uri import classify_uri, compact_uri

_CONTENT_TAGS = frozenset(tag.lower() for tag in CONTENT_STRIPPED_TAGS)
_SHELL_TAGS = frozenset(SHELL_STRIPPED_TAGS)


@dataclass(frozen=True)
class Violation:
    kind: str
    tag: str
    detail: str = ""


def _attribute_text(value) -> str:
    # bs4 splits multi-valued attributes such as rel and class into lists
    if isinstance(value, list):
        return " ".join(value)
    return value or ""


def find_violations(html: str) -> list[Violation]:
    """List every place *html* breaks a sanitizer guarantee."""
    soup = BeautifulSoup(html or "", "html.parser")
    violations: list[Violation] = []
    for element in soup.find_all(True):
        tag = element.name.lower()
        if tag in _CONTENT_TAGS:
            violations.append(Violation("content_tag", tag))
        elif tag in _SHELL_TAGS:
            violations.append(Violation("shell_tag", tag))

        for name, value in element.attrs.items():
            name = name.lower()
            if EVENT_HANDLER_NAME.fullmatch(name):
                violations.append(Violation("event_handler", tag, name))
            elif name in URI_ATTRIBUTES:
                text = _attribute_text(value)
                if classify_uri(name, compact_uri(text)):
                    violations.append(Violation("dangerous_uri", tag, f"{name}={text}"))

        if tag == "a":
            target = _attribute_text(element.get("target"))
            rel = _attribute_text(element.get("rel"))
            if target != LINK_TARGET or rel != LINK_REL:
                violations.append(Violation("unsafe_link", tag, f"target={target!r} rel={rel!r}"))
    return violations
