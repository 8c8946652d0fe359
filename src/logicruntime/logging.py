"""logicruntime.logging

Structured logger used across the runtime.

Call sites follow one convention:

    logger = get_logger(__name__)
    logger.warning("Dropped connection", actor_id="Ball", index=3)

Keyword fields are rendered as `key=value` pairs after the message and are also
attached to the record as `record.fields` so hosts can route them to their own
handlers. Records go through the standard `logging` module.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "logicruntime"


def _render_fields(fields: Dict[str, Any]) -> str:
    return " ".join(f"{k}={v!r}" for k, v in fields.items())


class StructuredLogger:
    """Thin adapter over a stdlib logger that accepts keyword fields."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _log(self, level: int, message: str, fields: Dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if fields:
            self._logger.log(level, "%s %s", message, _render_fields(fields), extra={"fields": dict(fields)})
        else:
            self._logger.log(level, "%s", message, extra={"fields": {}})

    def debug(self, message: str, **fields: Any) -> None:
        self._log(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, fields)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(name))


def configure_logging(level: int = logging.INFO, *, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """Attach a handler to the `logicruntime` logger namespace (host convenience)."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s %(message)s"))
    if handler not in root.handlers:
        root.addHandler(handler)
    return root
