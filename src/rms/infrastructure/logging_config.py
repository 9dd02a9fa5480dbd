"""Logging setup for the CLI entry point.

Library modules only create ``logging.getLogger(__name__)`` loggers;
handlers and levels are applied once here.
"""

from __future__ import annotations

import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "rms": {"handlers": ["stderr"], "level": level.upper(), "propagate": False},
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
