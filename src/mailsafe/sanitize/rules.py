"""Tag, attribute and scheme sets consulted by the email sanitizer."""

from __future__ import annotations

import re

# Removed together with everything between their open and close tags
CONTENT_STRIPPED_TAGS: tuple[str, ...] = (
    "script",
    # embeds
    "iframe", "object", "embed", "applet", "noscript",
    # document structure / metadata
    "link", "meta", "base",
    # SVG escape hatch back into HTML
    "foreignObject",
)

# Only the open/close markers are removed; children stay in place
SHELL_STRIPPED_TAGS: tuple[str, ...] = (
    "form", "input", "button", "select", "textarea", "option", "optgroup",
)

# Attribute names of the form on<letters> are event handlers
EVENT_HANDLER_NAME = re.compile(r"on[a-z]+", re.IGNORECASE)

URI_ATTRIBUTES: frozenset[str] = frozenset({
    "href", "src", "srcset", "xlink:href", "formaction", "action", "poster",
})

SCRIPT_SCHEMES: tuple[str, ...] = ("javascript:", "vbscript:")
DATA_SCHEME = "data:"

# data: URIs are only tolerated as inline images
DATA_IMAGE_PREFIX = "data:image/"
DATA_IMAGE_ATTRIBUTE = "src"

LINK_TARGET = "_blank"
LINK_REL = "noopener noreferrer"
LINK_SAFETY_ATTRIBUTES = f'target="{LINK_TARGET}" rel="{LINK_REL}"'

# Elements whose content an HTML parser reads as text, until the matching
# closing tag, instead of as markup
TEXT_CONTENT_TAGS: frozenset[str] = frozenset({
    "style", "title", "textarea", "xmp", "noembed", "noframes", "plaintext",
    "script", "iframe", "noscript",
})
