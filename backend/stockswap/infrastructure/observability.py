"""Structured Logging — JSON formatter and setup for service observability.

Invariants:
    - All logs include timestamp, level, logger name, service, pid and message
    - Extra fields (record_id, from_owner, error_code, ...) surfaced when present
    - JSON format by default, human-readable when log_format=text

Design Decisions:
    - JSONFormatter on stdlib logging: modules keep logging.getLogger(__name__)
    - setup_logging called once per process (lifespan or CLI entry point)
"""

import logging
import json
import os
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "record_id", "from_owner", "to_owner", "error_code", "path",
    "method", "duration_ms", "system", "step", "batch_size",
)


class JSONFormatter(logging.Formatter):
    """Format logs as one JSON object per line."""

    def __init__(self, service: str = "stockswap"):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "pid": os.getpid(),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json", service: str = "stockswap"):
    """Configure root logging for the process, replacing earlier handlers."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter(service))
    else:
        handler.setFormatter(logging.Formatter(
            f"%(asctime)s %(levelname)s {service} %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if getattr(existing, "_stockswap", False):
            logging.root.removeHandler(existing)
    handler._stockswap = True
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
