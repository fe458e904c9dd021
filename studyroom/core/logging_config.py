"""Logging setup for the Study Room API.

One stdout handler for the whole process. Every record is stamped with the
current request id and owner (both held in context variables set by the
request context middleware), so study events such as "Review recorded" or
"Todo completed" can be traced back to the request and owner that caused
them. ``LOG_FORMAT=json`` emits one JSON object per line; ``text`` is meant
for a terminal.
"""

import contextvars
import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

SERVICE_NAME = "studyroom"

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
owner_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("owner_id", default="")

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s %(owner_id)s] %(name)s: %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "request_id", "owner_id"}


class _RequestContextFilter(logging.Filter):
    """Copy the request id and owner from context variables onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = request_id_var.get() or "-"
        if not getattr(record, "owner_id", None):
            record.owner_id = owner_id_var.get() or "-"
        return True


class _RedactingFilter(logging.Filter):
    """Render the message once and strip bearer tokens and credentials from it."""

    _patterns = (
        re.compile(r"(?i)(bearer\s+)[\w.\-]{20,}"),
        re.compile(r"(?i)((?:secret|password|token|authorization)\s*[=:]\s*)[^\s,'\"]{8,}"),
        re.compile(r"(://[^:/\s]+:)[^@\s]+(?=@)"),
    )

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self.redact(record.getMessage())
        record.args = ()
        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)
        return True

    @classmethod
    def redact(cls, text: str) -> str:
        for pattern in cls._patterns:
            text = pattern.sub(r"\1***", text)
        return text


class _JsonFormatter(logging.Formatter):
    """Serialize a record, its request context and its ``extra`` fields as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if getattr(record, "request_id", "-") != "-":
            entry["request_id"] = record.request_id
        if getattr(record, "owner_id", "-") != "-":
            entry["owner_id"] = record.owner_id

        entry.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and key not in entry
        )
        if record.exc_info:
            entry["exc_info"] = _RedactingFilter.redact(self.formatException(record.exc_info))
        return json.dumps(entry, default=str)


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Install the stdout handler on the root logger.

    Args:
        log_level: Standard level name. Defaults to INFO.
        log_format: ``"json"`` (default) or ``"text"``.
    """
    level = (log_level or "INFO").upper()
    fmt = (log_format or "json").lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_RequestContextFilter())
    handler.addFilter(_RedactingFilter())
    if fmt == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ("uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured", extra={"log_level": level, "log_format": fmt}
    )
