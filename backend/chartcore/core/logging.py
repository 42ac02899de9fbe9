"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this only wires the
root handler once at startup.
"""

import logging

from chartcore.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def configure_logging(level: str = None) -> None:
    """Configure root logging from settings (idempotent)."""
    level_name = (level or settings.log_level).upper()
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    root.setLevel(getattr(logging, level_name, logging.INFO))

    # aiohttp access logs are noisy at INFO
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
