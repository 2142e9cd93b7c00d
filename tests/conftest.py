"""Shared pytest fixtures for mailsafe tests."""

import base64

import pytest


def encode_body(text: str) -> str:
    """Encode text the way Gmail encodes body data (base64url, unpadded)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


@pytest.fixture
def encode():
    return encode_body


@pytest.fixture
def alternative_payload():
    """A typical multipart/mixed message with both bodies and an attachment."""
    return {
        "mimeType": "multipart/mixed",
        "parts": [
            {
                "mimeType": "multipart/alternative",
                "parts": [
                    {"mimeType": "text/plain", "body": {"size": 5, "data": encode_body("Hello")}},
                    {
                        "mimeType": "text/html",
                        "body": {
                            "size": 60,
                            "data": encode_body('<p onclick="steal()">Hello</p><script>evil()</script>'),
                        },
                    },
                ],
            },
            {
                "mimeType": "application/pdf",
                "filename": "invoice.pdf",
                "body": {"size": 1024, "attachmentId": "att-1"},
            },
        ],
    }


@pytest.fixture
def env_override(monkeypatch):
    """Helper fixture to override environment variables."""

    def _override(key: str, value: str | None):
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)

    return _override
