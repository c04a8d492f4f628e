"""Structured Logging — JSON lines for production, plain text for local runs.

Invariants:
    - Every JSON line has timestamp, level, logger, message
    - Known extras (user_id, entity_type, entity_id, log_type, error_code, path,
      reason, event_created_at) are copied through when set on the record
    - setup_logging() replaces its own handler instead of stacking a new one

Design Decisions:
    - The activity fallback logger is a normal logger name, so the same handler
      (and whatever log shipping sits behind stdout) captures dropped audit entries
"""

import json
import logging
from datetime import datetime, timezone

ACTIVITY_FALLBACK_LOGGER = "worksite.activity.fallback"

EXTRA_FIELDS = (
    "user_id", "entity_type", "entity_id", "log_type", "error_code",
    "path", "reason", "event_created_at",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
_HANDLER_NAME = "worksite"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the root handler. Called from the lifespan."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # SQL echo is configured on the engine, not through the root level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
