"""Pydantic models for the mailsafe platform."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BodyType(str, Enum):
    TEXT = "text"
    HTML = "html"


# --- Gmail message payload (format=full) ---

class MessageHeader(BaseModel):
    name: str
    value: str = ""


class MessagePartBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    size: int = 0
    data: Optional[str] = None
    attachment_id: Optional[str] = Field(default=None, alias="attachmentId")


class MessagePart(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    part_id: str = Field(default="", alias="partId")
    mime_type: str = Field(default="", alias="mimeType")
    filename: str = ""
    headers: list[MessageHeader] = Field(default_factory=list)
    body: Optional[MessagePartBody] = None
    parts: Optional[list[MessagePart]] = None


MessagePart.model_rebuild()


class MessageBody(BaseModel):
    body: str = ""
    body_type: BodyType = BodyType.TEXT


# --- API payloads ---

class SanitizeRequest(BaseModel):
    html: Optional[str] = None


class SanitizeResponse(BaseModel):
    html: str


class MessageBodyRequest(BaseModel):
    payload: MessagePart


# --- Config models ---

class LoggingConfig(BaseModel):
    level: str = "INFO"


class WebConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    max_body_bytes: int = 25 * 1024 * 1024


class AppConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    web: WebConfig = Field(default_factory=WebConfig)
