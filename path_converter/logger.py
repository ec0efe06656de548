"""Logging setup, project exceptions and environment value parsing.

All handlers write to stderr; stdout is reserved for command output.
Set ``PATH_CONVERTER_LOG_JSON=1`` for one JSON object per record.
"""
import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOG_LEVEL = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})

_configured: Dict[str, logging.Logger] = {}


class JSONFormatter(logging.Formatter):
    """One JSON object per record; context fields are merged at top level."""

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        exc_type, exc, tb = record.exc_info or (None, None, None)
        if exc_type is not None:
            data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc) if exc is not None else None,
                "traceback": traceback.format_exception(exc_type, exc, tb),
            }
        data.update(getattr(record, "extra_fields", None) or {})
        return json.dumps(data, default=str)


def get_logger(name: str, json_format: Optional[bool] = None) -> logging.Logger:
    """Return the logger ``name``, attaching a JSON stderr handler when asked.

    ``json_format=None`` defers to ``PATH_CONVERTER_LOG_JSON``.
    """
    if json_format is None:
        json_format = safe_bool(os.environ.get("PATH_CONVERTER_LOG_JSON"), False)
    key = f"{name}:{int(json_format)}"
    logger = _configured.get(key)
    if logger is not None:
        return logger

    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)
    if json_format and not any(isinstance(h.formatter, JSONFormatter) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    _configured[key] = logger
    return logger


class ContextLogger:
    """Binds fixed fields (such as a sweep id) to every record it emits."""

    __slots__ = ("logger", "context")

    def __init__(self, logger: logging.Logger, **context):
        self.logger = logger
        self.context = context

    def _log(self, level: int, msg: str, exc_info: Any = None, **fields):
        merged = {**self.context, **fields}
        self.logger.log(level, msg, exc_info=exc_info, extra={"extra_fields": merged})

    def info(self, msg: str, **fields):
        self._log(logging.INFO, msg, **fields)

    def error(self, msg: str, exc_info: Any = None, **fields):
        self._log(logging.ERROR, msg, exc_info=exc_info, **fields)


class PathConverterError(Exception):
    """Base class for errors raised by the path converter."""


class StoreError(PathConverterError):
    """A vault document could not be read or written."""


class ConfigurationError(PathConverterError):
    """A setting or environment value is invalid."""


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def safe_int(value: Any, default: int, logger: Optional[logging.Logger] = None, context: str = "") -> int:
    """``int(value)``, or ``default`` when blank or unparsable (with a warning)."""
    if _blank(value):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        if logger:
            logger.warning("Invalid integer for %s: %r, using %r", context, value, default)
        return default


def safe_bool(value: Any, default: bool, logger: Optional[logging.Logger] = None, context: str = "") -> bool:
    """Parse yes/no style flags; anything unrecognised yields ``default``."""
    if _blank(value):
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    if logger:
        logger.warning("Invalid boolean for %s: %r, using %r", context, value, default)
    return default


def safe_print(*args: Any, **kwargs: Any) -> None:
    """print() that ignores a closed or broken stream."""
    try:
        print(*args, **kwargs)
    except (OSError, ValueError):
        pass
