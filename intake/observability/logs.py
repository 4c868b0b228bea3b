import json
import logging
from datetime import datetime, timezone
from typing import Any

_LOGGER_NAME = "intake"

class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", record.getMessage()[:30] or "log"),
        }
        # Structured fields arrive via extra={"fields": {...}}
        fields = getattr(record, "fields", {})
        if isinstance(fields, dict):
            base.update(fields)
        # The raw message is never emitted; complaint text is patient data
        return json.dumps(base, ensure_ascii=False, default=str)

def get_logger() -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        h = logging.StreamHandler()
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.propagate = False
    return logger

def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """
    Log one structured JSON line.
    Pass derived values only (ids, lengths, scores), never the complaint text.
    """
    get_logger().log(level, "", extra={"event": event, "fields": fields})
