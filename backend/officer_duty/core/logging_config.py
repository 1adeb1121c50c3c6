"""
Logging setup for the API process.

Console-only: the deployment target collects stdout. ``LOG_FORMAT=json``
switches the console formatter to structured JSON lines.
"""

import logging
import logging.config
from datetime import datetime, timezone

from pythonjsonlogger import jsonlogger

from officer_duty.config import settings


class ApiJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        if hasattr(record, "user_id"):
            log_record["user_id"] = record.user_id


def build_logging_config(level: str, fmt: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": ApiJsonFormatter,
                "format": "%(timestamp)s %(level)s %(logger)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": fmt,
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": level},
            "officer_duty": {"handlers": [], "level": level, "propagate": True},
            "sqlalchemy.engine": {"level": "WARNING", "propagate": True},
        },
    }


def setup_logging() -> None:
    level = settings.LOG_LEVEL.upper()
    logging.config.dictConfig(build_logging_config(level, settings.LOG_FORMAT))
    logging.getLogger(__name__).debug("Logging configured (level=%s, format=%s)", level, settings.LOG_FORMAT)
