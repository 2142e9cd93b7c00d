"""Attribute-level stages: event handlers, URI guarding and link hardening.

All three work on the attribute lists of start tags found by the markup
scanner, never on text or on the inside of attribute values. Attributes that
stay are copied exactly as written.
"""

from __future__ import annotations

from functools import partial

from mailsafe.sanitize.rules import EVENT_HANDLER_NAME, LINK_SAFETY_ATTRIBUTES, URI_ATTRIBUTES
from mailsafe.sanitize.scanner import Attribute, ScannedTag, rewrite_start_tags, scan_attributes
from mailsafe.sanitize.uri import is_dangerous_uri

_LINK_OVERRIDES = frozenset({"target", "rel"})


def is_event_handler(name: str) -> bool:
    return EVENT_HANDLER_NAME.fullmatch(name) is not None


def _dropped(attribute: Attribute, handlers: bool, uris: bool, link: bool) -> bool:
    name = attribute.name.lower()
    if handlers and is_event_handler(name):
        return True
    if uris and name in URI_ATTRIBUTES:
        # A valueless attribute holds the empty string
        return attribute.value is not None and is_dangerous_uri(name, attribute.value)
    return link and name in _LINK_OVERRIDES


def rewrite_tag(
    html: str,
    start: int,
    name: str,
    tag: ScannedTag,
    handlers: bool = True,
    uris: bool = True,
    links: bool = True,
) -> str:
    """New text for the start tag at *start*, whose attributes are *tag*.

    Drops ``on*`` attributes (*handlers*) and URI attributes with a dangerous
    value (*uris*). On ``<a>`` (*links*) it also drops ``target`` and ``rel``
    and appends the link safety attributes.
    """
    link = links and name.lower() == "a"
    pieces = [html[start:start + 1 + len(name)]]
    dropped = False
    for attribute in tag.attributes:
        if _dropped(attribute, handlers, uris, link):
            dropped = True
            continue
        raw = attribute.raw
        if dropped and not attribute.lead:
            # Keep the neighbours of a removed attribute apart
            raw = " " + raw
        pieces.append(raw)
        dropped = False
    if link:
        pieces.append(" " + LINK_SAFETY_ATTRIBUTES)
    pieces.append(tag.trailing)
    if tag.closed:
        pieces.append(">")
    return "".join(pieces)


def rewrite_attributes(html: str) -> str:
    """Run the event-handler filter, the URI guard and the link hardener in one scan."""
    return rewrite_start_tags(html, rewrite_tag)


def strip_event_handlers(html: str) -> str:
    """Remove every ``on*`` attribute, whatever its quoting, spacing or lack of value."""
    return rewrite_start_tags(html, partial(rewrite_tag, uris=False, links=False))


def guard_uris(html: str) -> str:
    """Delete URI-bearing attributes whose value resolves to a dangerous scheme."""
    return rewrite_start_tags(html, partial(rewrite_tag, handlers=False, links=False))


def harden_link(html: str, start: int) -> tuple[str, int]:
    """Rewrite the ``<a`` tag at *start*; returns the new tag text and the old end."""
    tag = scan_attributes(html, start + 2)
    return rewrite_tag(html, start, html[start + 1:start + 2], tag, handlers=False, uris=False), tag.end


def harden_links(html: str) -> str:
    """Force ``target="_blank"`` and ``rel="noopener noreferrer"`` on every anchor."""
    return rewrite_start_tags(html, partial(rewrite_tag, handlers=False, uris=False))
