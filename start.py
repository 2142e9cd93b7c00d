"""Container entrypoint: reads PORT and starts uvicorn."""
import os

from mailsafe.core.config import load_config
from mailsafe.core.logger import configure_logging

cfg = load_config()
configure_logging(cfg.logging.level)
port = int(os.environ.get("PORT", cfg.web.port))

import uvicorn
uvicorn.run(
    "mailsafe.web.app:create_app",
    host="0.0.0.0",
    port=port,
    factory=True,
    log_level=cfg.logging.level.lower(),
)
