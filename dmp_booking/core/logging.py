"""Logging setup shared by the API process and the maintenance scripts."""

from __future__ import annotations

import logging.config

from dmp_booking.core.config import Settings


def build_logging_config(settings: Settings) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if settings.log_json else "standard",
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": settings.log_level},
            "dmp_booking": {"handlers": ["console"], "level": settings.log_level, "propagate": False},
            "sqlalchemy.engine": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        },
    }


def configure_logging(settings: Settings) -> None:
    logging.config.dictConfig(build_logging_config(settings))
