"""Structured logging for the bulletin board.

One stdout handler on the root logger. Records are rendered as JSON lines
(or plain text) carrying the current request id and the record's ``extra``
fields. Post text never reaches the output: keys such as ``title`` and
``content`` are masked wherever they appear in the extras.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from app.core.config import LogSettings, settings

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

REDACTED = "[REDACTED]"

# Post bodies are user content; log sizes and ids, never the text itself
SENSITIVE_KEYS_DEFAULT = frozenset(
    {"title", "content", "body", "request_body", "authorization", "cookie", "set-cookie"}
)

# Attributes every LogRecord has; anything else on a record came from ``extra``
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


def set_request_id(request_id: str | None) -> None:
    _request_id_var.set(request_id)


def get_request_id() -> str | None:
    return _request_id_var.get()


def clear_request_id() -> None:
    _request_id_var.set(None)


def _mask(key: Any, value: Any, sensitive_keys: frozenset[str]) -> Any:
    if str(key).lower() in sensitive_keys:
        return REDACTED
    if isinstance(value, Mapping):
        return {k: _mask(k, v, sensitive_keys) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_mask(None, v, sensitive_keys) for v in value]
    return value


class RequestIdFilter(logging.Filter):
    """Stamp records with the request id of the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, extras included and masked."""

    def __init__(self, *, sensitive_keys: Iterable[str] | None = None) -> None:
        super().__init__()
        keys = SENSITIVE_KEYS_DEFAULT if sensitive_keys is None else sensitive_keys
        self.sensitive_keys = frozenset(k.lower() for k in keys)

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_") or value is None:
                continue
            data[key] = _mask(key, value, self.sensitive_keys)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def configure_logging(log_settings: LogSettings | None = None, *, debug: bool = False) -> None:
    """Install the stdout handler on the root logger.

    Args:
        log_settings: Log settings; the global settings when omitted.
        debug: Force DEBUG level regardless of the configured level.
    """

    cfg = log_settings or settings.log
    level = logging.DEBUG if debug else getattr(logging, cfg.level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    if cfg.format.lower() == "plain":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # uvicorn installs its own handlers
    logging.getLogger("uvicorn").propagate = False
    logging.getLogger("uvicorn.access").propagate = False
