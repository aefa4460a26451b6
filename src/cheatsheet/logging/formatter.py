"""Structured plaintext log formatter."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from ..constants import LOG_EVENT_KEY_ORDER


class StructuredTextFormatter(logging.Formatter):
    """Format log records as `=== event ===` blocks of `key: value` lines."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        # Blank line between entries, none before the first.
        self._first_entry = True

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, (dict, list)):
            value = json.dumps(value, ensure_ascii=False)
        return str(value).replace("\n", "\\n")

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }

        message = record.getMessage()
        parsed = None
        if message.startswith("{") and message.endswith("}"):
            try:
                parsed = json.loads(message)
            except json.JSONDecodeError:
                parsed = None

        if isinstance(parsed, dict):
            base.update(parsed)
        else:
            base["event"] = record.name
            base["message"] = message

        event_name = str(base.pop("event", record.name))
        lines = [f"=== {event_name} ==="]

        preferred = [k for k in LOG_EVENT_KEY_ORDER if k in base]
        remaining = [k for k in base if k not in LOG_EVENT_KEY_ORDER]
        for key in preferred + remaining:
            if base[key] is None:
                continue
            lines.append(f"{key}: {self._format_value(base[key])}")

        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        body = "\n".join(lines)
        if self._first_entry:
            self._first_entry = False
            return body
        return "\n" + body
