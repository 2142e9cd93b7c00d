"""Decode-then-classify checks for URI-bearing attribute values.

Normalisation exists only to make the classification decision; the value
written back into the document is always the original text.
"""

from __future__ import annotations

import re
from html import unescape

from mailsafe.sanitize.rules import (
    DATA_IMAGE_ATTRIBUTE,
    DATA_IMAGE_PREFIX,
    DATA_SCHEME,
    SCRIPT_SCHEMES,
)

# Lower-case spellings that html.unescape does not know about
_LOOSE_REFERENCES = re.compile(r"&(tab|newline);", re.IGNORECASE)
_LOOSE_VALUES = {"tab": "\t", "newline": "\n"}

# Whitespace, NUL and the other C0 controls browsers drop from URLs
_IGNORABLE = re.compile(r"[\s\x00-\x20]+")


def decode_references(value: str) -> str:
    """Decode character references the way a browser does for attribute values.

    Covers decimal and hex numeric references (with or without the trailing
    semicolon), the HTML named references and the lower-case ``&tab;`` and
    ``&newline;`` spellings.
    """
    value = _LOOSE_REFERENCES.sub(lambda m: _LOOSE_VALUES[m.group(1).lower()], value)
    return unescape(value)


def compact_uri(value: str) -> str:
    """Drop ignorable characters and lower-case an already decoded value."""
    return _IGNORABLE.sub("", value).lower()


def normalize_uri(value: str) -> str:
    """Canonical form of a raw attribute value, used only for classification."""
    return compact_uri(decode_references(value))


def classify_uri(attribute: str, normalized: str) -> bool:
    """True when *normalized* is a dangerous value for *attribute*."""
    if normalized.startswith(SCRIPT_SCHEMES):
        return True
    if normalized.startswith(DATA_SCHEME):
        return not (
            attribute.lower() == DATA_IMAGE_ATTRIBUTE
            and normalized.startswith(DATA_IMAGE_PREFIX)
        )
    return False


def is_dangerous_uri(attribute: str, value: str) -> bool:
    return classify_uri(attribute, normalize_uri(value))
