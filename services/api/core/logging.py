"""
Logging Setup

Configures the standard library root logger from settings. Modules obtain
their loggers with ``logging.getLogger(__name__)``.
"""

import logging
import sys
from typing import Optional

from .config import Settings, settings as default_settings

_configured = False


def configure_logging(config: Optional[Settings] = None) -> None:
    """Install a stream handler on the root logger at ``LOG_LEVEL``.

    Calling it again only updates the level.
    """
    global _configured
    config = config or default_settings

    root = logging.getLogger()
    root.setLevel(config.LOG_LEVEL.upper())

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    root.addHandler(handler)

    # uvicorn ships its own access log; ours comes from RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True
