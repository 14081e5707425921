"""
Logging for jsondoctor.

Every module logs to a child of the ``jsondoctor`` logger.  Nothing is
emitted unless the application configures logging, or ``JSON_REPAIR_DEBUG``
is set, in which case one JSON line per record goes to stderr.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Iterable, Optional

from .actions import RepairAction
from .config import env_flag

LOGGER_NAME = "jsondoctor"

logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


class JsonFormatter(logging.Formatter):
    """JSON formatter that copies every ``extra`` field onto the line."""

    # Standard LogRecord attributes to exclude
    STANDARD_ATTRS = {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "asctime", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS and not key.startswith("_"):
                try:
                    json.dumps(value)
                    log_record[key] = value
                except (TypeError, ValueError):
                    log_record[key] = str(value)

        if record.exc_info:
            log_record["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False)


def enable_debug(stream=None) -> logging.Handler:
    """Attach a DEBUG-level JSON-line handler to the package logger."""
    for h in logger.handlers:
        if getattr(h, "_jsondoctor_debug", False):
            return h
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    handler.setLevel(logging.DEBUG)
    handler._jsondoctor_debug = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return handler


def disable_debug() -> None:
    for h in list(logger.handlers):
        if getattr(h, "_jsondoctor_debug", False):
            logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


def log_repairs(actions: Iterable[RepairAction], log: Optional[logging.Logger] = None) -> None:
    log = log or logger
    if not log.isEnabledFor(logging.DEBUG):
        return
    for action in actions:
        log.debug(
            "repair: %s", action.description,
            extra={
                "layer": action.layer.value,
                "offset": action.offset,
                "kind": action.kind.value,
            },
        )


# Debug logging (disabled by default). Enable by setting JSON_REPAIR_DEBUG=1
if env_flag("DEBUG"):
    enable_debug()
