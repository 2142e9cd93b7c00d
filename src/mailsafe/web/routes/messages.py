"""Sanitizer API: raw HTML, Gmail payloads and a sandboxed preview."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import Environment, FileSystemLoader
from pydantic import ValidationError

from mailsafe.core.models import MessageBody, MessageBodyRequest, SanitizeRequest, SanitizeResponse
from mailsafe.messages.body import MessageDecodeError, extract_message_body
from mailsafe.sanitize.pipeline import sanitize_html

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).parent.parent.parent.parent.parent / "templates" / "web"
_env = Environment(loader=FileSystemLoader(str(_TEMPLATES_DIR)), autoescape=True)

router = APIRouter()


@router.post("/api/sanitize", response_model=SanitizeResponse)
async def sanitize(req: SanitizeRequest) -> SanitizeResponse:
    html = sanitize_html(req.html)
    logger.debug("Sanitized %d -> %d chars", len(req.html or ""), len(html))
    return SanitizeResponse(html=html)


@router.post("/api/messages/body", response_model=MessageBody)
async def message_body(request: Request):
    """Extract the readable body of a Gmail ``format=full`` payload."""
    try:
        data = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid JSON"})

    try:
        req = MessageBodyRequest.model_validate(data)
    except ValidationError as exc:
        return JSONResponse(status_code=400, content={"error": "Invalid message payload", "detail": exc.errors(include_url=False, include_context=False)})

    try:
        return extract_message_body(req.payload)
    except MessageDecodeError as exc:
        logger.warning("Could not decode message body: %s", exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})


@router.post("/preview", response_class=HTMLResponse)
async def preview(req: SanitizeRequest):
    """Render sanitized HTML inside a sandboxed frame."""
    tpl = _env.get_template("preview.html")
    return tpl.render(body=sanitize_html(req.html))
