import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

ROOT_LOGGER_NAME = "structured_forms"


class StructuredFormatter(logging.Formatter):
    """JSON formatter that lifts ctx_ prefixed record attributes into the entry"""

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_timestamp:
            log_entry["timestamp"] = (
                datetime.fromtimestamp(record.created, tz=timezone.utc)
                .isoformat()
                .replace("+00:00", "Z")
            )

        for key, value in record.__dict__.items():
            if key.startswith("ctx_"):
                log_entry[key[4:]] = value

        return json.dumps(log_entry, default=str, separators=(",", ":"))


def get_logger(name: str) -> logging.Logger:
    """Get a child of the package logger"""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: Optional[str] = None, stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Attach a JSON stream handler to the package logger

    Calling it again replaces the handler installed by the previous call.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    level = level or os.getenv("STRUCTURED_FORMS_LOG_LEVEL", "WARNING")
    root.setLevel(getattr(logging, level.upper()))

    for handler in list(root.handlers):
        if getattr(handler, "_structured_forms_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    handler._structured_forms_handler = True
    root.addHandler(handler)
    return root


def log_with_context(
    logger: logging.Logger, level: str, message: str, **context: Any
) -> None:
    """Log with context values passed as ctx_ prefixed extras"""
    ctx_context = {f"ctx_{k}": v for k, v in context.items() if v is not None}
    getattr(logger, level)(message, extra=ctx_context)
