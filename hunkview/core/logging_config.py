"""
Logging setup for hunkview.

Human-readable lines go to stdout. Records from the hunkview loggers are also
written as JSON lines to a rotating file under settings.LOG_DIR, so webhook
processing can be followed per pull request through the `extra=` fields.
"""

import json
import logging
import logging.config
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from hunkview.core.config import get_settings

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}

JSON_LOG_FILE = "hunkview.json.log"


class StructuredJSONFormatter(logging.Formatter):
    """Formats a record as one JSON object, including any `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RESERVED_RECORD_ATTRS
        )
        return json.dumps(payload, default=str)


def get_logging_config() -> Dict[str, Any]:
    """
    Builds the dictConfig mapping for the current settings.

    Creates settings.LOG_DIR if it does not exist yet.
    """
    settings = get_settings()
    level = settings.LOG_LEVEL
    Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    def _logger(*handlers: str) -> Dict[str, Any]:
        return {"handlers": list(handlers), "level": level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {"()": StructuredJSONFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "plain",
                "stream": sys.stdout,
            },
            "json_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": "json",
                "filename": os.path.join(settings.LOG_DIR, JSON_LOG_FILE),
                "maxBytes": 5 * 1024 * 1024,  # 5 MB
                "backupCount": 5,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "uvicorn": _logger("console"),
            "hunkview": _logger("console", "json_file"),
        },
        "root": {"level": level, "handlers": ["console"]},
    }


def setup_logging() -> None:
    logging.config.dictConfig(get_logging_config())
    get_logger("hunkview").debug("Logging configured")


def get_logger(name: str) -> logging.Logger:
    """Returns `name` as a child of the "hunkview" logger."""
    if name == "hunkview" or name.startswith("hunkview."):
        return logging.getLogger(name)
    return logging.getLogger(f"hunkview.{name}")
