"""
Log formatting for directory records.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

# fields the logger attaches to records, in display order
DIRECTORY_FIELDS = (
    "operation",
    "person_id",
    "principal_id",
    "account_id",
    "principal_kind",
    "accounts_deleted",
    "contacts_deleted",
    "outcome",
    "duration_ms",
    "error_code",
)


class DirectoryFormatter(logging.Formatter):
    """
    Render records either as one JSON object per line or as text.

    Text lines put the operation and a short correlation id after the logger
    name, then append any directory fields::

        ... INFO orgdir.services [delete_person 3f2a9c1d] Deleted person_id=p1
    """

    def __init__(self, structured: bool = False) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s%(scope)s %(message)s")
        self.structured = structured

    def format(self, record: logging.LogRecord) -> str:
        if self.structured:
            return self._format_json(record)

        parts = [
            getattr(record, "operation", None),
            (getattr(record, "correlation_id", None) or "")[:8],
        ]
        scope = " ".join(p for p in parts if p)
        record.scope = f" [{scope}]" if scope else ""
        line = super().format(record)

        extras = [
            f"{key}={_display(getattr(record, key))}"
            for key in DIRECTORY_FIELDS
            if key != "operation" and getattr(record, key, None) is not None
        ]
        return " ".join([line, *extras]) if extras else line

    def _format_json(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            payload["correlation_id"] = correlation_id
        for key in DIRECTORY_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(payload, default=str, separators=(",", ":"))


def _display(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)
