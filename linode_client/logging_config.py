"""Logging setup for API calls: JSON lines for machines, annotated text for people.

Client modules attach request context through ``extra=``:
``resource``, ``resource_id``, ``parent_id`` (what was touched),
``method``, ``status_code`` (the HTTP exchange) and
``page``, ``pages``, ``results`` (list progress).
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from .config import LoggingConfig

_GROUPS = {
    "target": ("resource", "resource_id", "parent_id"),
    "http": ("method", "status_code"),
    "paging": ("page", "pages", "results"),
}


def _context(record: logging.LogRecord) -> dict[str, dict]:
    """Collect the extras present on *record*, grouped as in _GROUPS."""
    groups: dict[str, dict] = {}
    for group, keys in _GROUPS.items():
        values = {k: getattr(record, k) for k in keys if getattr(record, k, None) is not None}
        if values:
            groups[group] = values
    return groups


class JSONFormatter(logging.Formatter):
    """One JSON object per line; request context nested under target/http/paging."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if record.exc_info and record.exc_info[1]:
            payload["error"] = {
                "type": type(record.exc_info[1]).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """``<time> <level> [<logger>] <resource>#<id> <METHOD> <status> <message>``."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(context)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        record.context = _text_prefix(_context(record))
        return super().format(record)


def _text_prefix(groups: dict[str, dict]) -> str:
    parts: list[str] = []
    target = groups.get("target", {})
    if "resource" in target:
        label = target["resource"]
        if "parent_id" in target:
            label = f"{label}@{target['parent_id']}"
        if "resource_id" in target:
            label = f"{label}#{target['resource_id']}"
        parts.append(label)
    http = groups.get("http", {})
    if "method" in http:
        parts.append(str(http["method"]))
    if "status_code" in http:
        parts.append(str(http["status_code"]))
    paging = groups.get("paging", {})
    if "page" in paging:
        parts.append(f"page {paging['page']}/{paging.get('pages', '?')}")
    return " ".join(parts) + " " if parts else ""


def configure_logging(config: LoggingConfig) -> None:
    """Route all logs to stderr in the configured format; urllib3 only at WARNING and up."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if config.format == "json" else TextFormatter())
    root.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
