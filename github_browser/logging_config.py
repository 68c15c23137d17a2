"""
JSON-lines logging tagged with the view-model command being run.

``begin_command()`` stores the command name and a fresh short id in
``contextvars``; ``CommandContextFilter`` copies both onto every record, so
all lines logged while one command runs (including the network layer's)
share a ``command_id``. Call ``setup_logging()`` once at startup.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import uuid
from datetime import datetime, timezone

command_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar(
    "command_id", default="-"
)
command_name_ctx: contextvars.ContextVar[str] = contextvars.ContextVar(
    "command_name", default="-"
)


class CommandContextFilter(logging.Filter):
    """Attach ``command`` and ``command_id`` to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.command = command_name_ctx.get()
        record.command_id = command_id_ctx.get()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "command": getattr(record, "command", command_name_ctx.get()),
            "command_id": getattr(record, "command_id", command_id_ctx.get()),
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Replace root handlers with a single JSON handler on stdout."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CommandContextFilter())
    handler.setFormatter(JSONFormatter())
    root.addHandler(handler)


def begin_command(name: str, logger: logging.Logger) -> str:
    """Mark the current context as running command ``name``; returns its id."""
    cid = uuid.uuid4().hex[:12]
    command_name_ctx.set(name)
    command_id_ctx.set(cid)
    logger.debug("Command started")
    return cid
