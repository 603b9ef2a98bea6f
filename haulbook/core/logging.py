"""Logging configuration."""

import logging

from haulbook.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)

    # SQL echo is controlled by the engine; keep driver chatter down
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
