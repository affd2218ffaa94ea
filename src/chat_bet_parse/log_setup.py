"""JSON console logging for parse runs.

Rejected messages and legs are logged at INFO with their error kind, so a
batch run can be filtered by ``error_kind`` or ``leg_index`` downstream.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import IO, Any

# Record attributes copied into the JSON event when a caller passes them via ``extra``.
_EXTRA_FIELDS = ("error_kind", "leg_index", "contract_type")


class JsonConsoleFormatter(logging.Formatter):
    """One JSON object per record, carrying parse context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                event[field] = value
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, default=str)


def setup_logger(
    name: str = "chat_bet_parse",
    level: int | str = logging.INFO,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach a JSON stderr handler to the parser logger once.

    Later calls only update the level, so the CLI can apply the configured
    level after settings load without stacking handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonConsoleFormatter())
    logger.addHandler(handler)
    return logger
