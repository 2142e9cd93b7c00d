"""FastAPI web application serving the email sanitizer."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mailsafe.core.config import load_config
from mailsafe.core.logger import configure_logging
from mailsafe.web.security import BodySizeLimitMiddleware, SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    config = load_config()
    configure_logging(config.logging.level)

    app = FastAPI(title="mailsafe", docs_url=None, redoc_url=None)

    # Security middleware (order matters: outermost runs first)
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.web.max_body_bytes)
    app.add_middleware(SecurityHeadersMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled server error")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # Health check
    @app.get("/health")
    def health():
        return {"status": "ok"}

    from mailsafe.web.routes import messages

    app.include_router(messages.router)

    logger.info("mailsafe web app ready (max body %d bytes)", config.web.max_body_bytes)
    return app
