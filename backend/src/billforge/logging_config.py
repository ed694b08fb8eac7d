"""Logging setup for hosts embedding the billing pipeline."""

import logging

from billforge.config import get_settings

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging and set the billforge logger level.

    When ``level`` is None the level comes from Settings, i.e. the
    ``BILLFORGE_LOG_LEVEL`` environment variable.
    """
    if level is None:
        level = get_settings().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    logging.getLogger("billforge").setLevel(log_level)
