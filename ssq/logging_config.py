"""Logging configuration."""

from __future__ import annotations

import logging

from flask import Flask

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Per-request SQL and connection-pool chatter drowns the pipeline logs.
_QUIET_LOGGERS = ("sqlalchemy.engine", "urllib3", "charset_normalizer")


def configure_logging(app: Flask) -> None:
    """Configure stdlib logging from LOG_LEVEL."""

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
