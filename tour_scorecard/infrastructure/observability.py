"""Structured Logging - game-context log records in JSON or key=value text.

Invariants:
    - Every record carries timestamp, level, logger name and message
    - Game context passed via `extra` (game_id, operation, error_code, ...) is
      rendered by both formats, in CONTEXT_FIELDS order; unknown extras are dropped
    - setup_logging is idempotent: calling it again replaces its own handler

Design Decisions:
    - JSON for hosted deployments, key=value text for local play and tests
    - httpx / httpcore request lines held at WARNING: the course search client
      already logs one line per attempt with its own context
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS: tuple[str, ...] = (
    "game_id", "operation", "player_id", "hole_number", "error_code",
    "attempt", "path", "query", "cache_hit",
)

_QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "sqlalchemy.engine")


def record_context(record: logging.LogRecord) -> dict:
    """Game context fields present on a record, in CONTEXT_FIELDS order."""
    return {
        key: record.__dict__[key]
        for key in CONTEXT_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class ContextTextFormatter(logging.Formatter):
    """`<time> LEVEL logger - message [game_id=... error_code=...]`"""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in context.items())
        head, sep, tail = line.partition("\n")  # keep tracebacks below the context
        return f"{head} [{pairs}]{sep}{tail}"


class _ScorecardHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the app's root handler (once) and set levels."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _ScorecardHandler)]:
        root.removeHandler(existing)

    handler = _ScorecardHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
