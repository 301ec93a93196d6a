"""Logging setup for parcel-engine: console text or one JSON object per line."""

import json
import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes the engine attaches through ``extra=`` and JSON output surfaces
CONTEXT_FIELDS = ("mode", "batch", "piece_count", "total_surface", "wasted_surface")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Route all records to stdout through a single handler.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        ``"standard"`` for pipe-separated text, ``"json"`` for
        :class:`JsonFormatter`.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter: logging.Formatter = (
        JsonFormatter() if format_type == "json" else logging.Formatter(STANDARD_FORMAT, DATE_FORMAT)
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)

    logging.getLogger("parcel_engine").setLevel(log_level)
    # Faker logs every locale provider lookup at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """Render a record as a JSON object.

    Engine context passed with ``extra=`` (see ``CONTEXT_FIELDS``) becomes
    top-level keys, and an ``extra`` mapping attribute is merged as is.
    Decimals are written as strings.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)

        return json.dumps(payload, default=_json_default, ensure_ascii=False)


def _json_default(value: Any) -> str:
    if isinstance(value, Decimal):
        return str(value)
    return repr(value)


def get_logger(name: str) -> logging.Logger:
    """Module logger under the ``parcel_engine`` hierarchy (pass ``__name__``)."""
    return logging.getLogger(name)
