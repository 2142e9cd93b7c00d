"""Readable-body extraction from Gmail message payloads.

Gmail returns ``format=full`` messages as a MIME part tree whose leaf bodies
are base64url encoded::

    multipart/mixed
      multipart/alternative
        text/plain          <- fallback
        text/html           <- preferred
      application/pdf       <- attachment, ignored

HTML is preferred because most mail relies on ``<style>`` blocks, inline CSS
and images for its layout. Every HTML body leaves this module sanitized;
plain text is returned as-is for the client to show in a ``<pre>`` block.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional, Union

from mailsafe.core.models import BodyType, MessageBody, MessagePart
from mailsafe.sanitize.pipeline import sanitize_html

logger = logging.getLogger(__name__)

HTML_MIME_TYPE = "text/html"
PLAIN_MIME_TYPE = "text/plain"


class MessageDecodeError(ValueError):
    """Body data that is not valid base64url."""


def decode_base64url(data: str) -> str:
    """Decode Gmail's unpadded base64url (RFC 4648 section 5) into text."""
    padded = data + "=" * (-len(data) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise MessageDecodeError(f"Invalid base64url body data: {exc}") from exc
    return raw.decode("utf-8", errors="replace")


def find_body_part(part: MessagePart, mime_type: str) -> Optional[str]:
    """Depth-first search for the first *mime_type* part that carries data."""
    if part.mime_type == mime_type and part.body and part.body.data:
        return part.body.data
    for child in part.parts or []:
        data = find_body_part(child, mime_type)
        if data:
            return data
    return None


def _html_body(data: str) -> MessageBody:
    decoded = decode_base64url(data)
    body = sanitize_html(decoded)
    logger.debug("Sanitized HTML body: %d -> %d chars", len(decoded), len(body))
    return MessageBody(body=body, body_type=BodyType.HTML)


def extract_message_body(payload: Union[MessagePart, dict]) -> MessageBody:
    """Pick the readable body of a message, sanitizing it when it is HTML.

    Order of preference: a single-part payload's own body, the first
    ``text/html`` part, the first ``text/plain`` part, then an empty text body
    (attachment-only messages).
    """
    if not isinstance(payload, MessagePart):
        payload = MessagePart.model_validate(payload)

    if not payload.parts and payload.body and payload.body.data:
        if payload.mime_type == HTML_MIME_TYPE:
            return _html_body(payload.body.data)
        return MessageBody(body=decode_base64url(payload.body.data), body_type=BodyType.TEXT)

    html_data = find_body_part(payload, HTML_MIME_TYPE)
    if html_data:
        return _html_body(html_data)

    plain_data = find_body_part(payload, PLAIN_MIME_TYPE)
    if plain_data:
        return MessageBody(body=decode_base64url(plain_data), body_type=BodyType.TEXT)

    logger.debug("No readable body in %s payload", payload.mime_type or "unknown")
    return MessageBody()
