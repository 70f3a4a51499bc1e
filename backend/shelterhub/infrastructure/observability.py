"""Logging — one JSON object per line, carrying the shelter context fields.

Invariants:
    - Every line has timestamp, level, logger and message
    - Context passed via `extra=` (user, group, access level, purge table, email
      counts) is copied to top-level keys; absent keys are omitted, never null
    - setup_logging() is safe to call twice: it replaces its own handler

Design Decisions:
    - stdlib logging with a small Formatter subclass; LOG_FORMAT=text switches to a
      plain line format for local runs
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    # access decisions
    "user_id", "group_id", "required_level",
    # error envelope
    "error_code", "path",
    # maintenance
    "table", "days", "deleted_count",
    # announcement email
    "recipient_count", "sent_count", "failed_count",
)

_HANDLER_NAME = "shelterhub"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key])
            for key in CONTEXT_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
