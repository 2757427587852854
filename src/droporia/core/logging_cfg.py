"""JSON logging for the service and the uvicorn server.

Every record, including uvicorn's own, is written to stdout as one JSON object
per line. Context passed with ``extra=`` (``url``, ``kind``, ``formats``...) is
kept as top-level keys so log lines can be filtered per request URL.
"""
from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

# Keys present on every LogRecord; anything else arrived through ``extra=``.
_STANDARD_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

_UVICORN_LOGGERS: tuple[str, ...] = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """Render a ``LogRecord`` as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_KEYS and key not in entry
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        # Values such as Path or Enum fall back to str()
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(debug: bool) -> None:
    """Install the JSON handler on the root logger.

    Parameters
    ----------
    debug: bool
        Log at DEBUG instead of INFO. Access logs are only shown in debug mode.

    Notes
    -----
    - Replaces any handlers already on the root logger, so repeated calls (one per
      ``create_app``) do not duplicate output.
    - uvicorn's loggers lose their own handlers and propagate to the root, so server
      and application lines share one format.
    """

    level: str = "DEBUG" if debug else "INFO"
    loggers: dict[str, dict[str, Any]] = {name: {"level": level, "propagate": True} for name in _UVICORN_LOGGERS}
    if not debug:
        loggers["uvicorn.access"]["level"] = "WARNING"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": JsonFormatter}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                }
            },
            "root": {"level": level, "handlers": ["stdout"]},
            "loggers": loggers,
        }
    )
