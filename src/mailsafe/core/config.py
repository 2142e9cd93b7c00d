"""Configuration loader: YAML files + environment variables."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from mailsafe.core.models import AppConfig, LoggingConfig, WebConfig


def _find_project_root() -> Path:
    """Walk up from cwd to find a directory containing pyproject.toml."""
    cwd = Path.cwd()
    for p in [cwd, *cwd.parents]:
        if (p / "pyproject.toml").exists():
            return p
    return cwd


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML + environment variables.

    Priority: env vars > .env file > YAML defaults.
    """
    root = _find_project_root()
    load_dotenv(root / ".env")

    yaml_path = Path(config_path) if config_path else root / "config" / "default.yaml"
    yaml_data: dict = {}
    if yaml_path.exists():
        with open(yaml_path) as f:
            yaml_data = yaml.safe_load(f) or {}

    log_data = yaml_data.get("logging", {})
    logging_cfg = LoggingConfig(
        level=os.getenv("MAILSAFE_LOG_LEVEL", log_data.get("level", "INFO")).upper(),
    )

    web_data = yaml_data.get("web", {})
    web = WebConfig(
        host=os.getenv("MAILSAFE_HOST", web_data.get("host", "127.0.0.1")),
        port=int(os.getenv("MAILSAFE_PORT", web_data.get("port", 8000))),
        max_body_bytes=int(
            os.getenv("MAILSAFE_MAX_BODY_BYTES", web_data.get("max_body_bytes", 25 * 1024 * 1024))
        ),
    )

    return AppConfig(logging=logging_cfg, web=web)
