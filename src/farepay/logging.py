"""Logging setup shared by the CLI and the HTTP server."""

from __future__ import annotations

import json
import logging
import os


# Tap context passed through ``extra=`` and copied into JSON records
TAP_FIELDS = ("card_id", "card_uid", "vehicle_id", "transaction_id", "error_code")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        for field in TAP_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def setup_logging(level: str | None = None, json_output: bool = False) -> None:
    """Install a single stream handler on the root logger.

    The level comes from the argument, then LOG_LEVEL, then INFO.
    """
    lvl = getattr(logging, (level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(lvl)
