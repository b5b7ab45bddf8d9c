"""JSON field mapping shared by resource records and option sets.

Dataclass fields map one-to-one onto JSON keys. Field metadata adjusts the
mapping:

- ``json``: the JSON key when it differs from the attribute name
  (``in`` is a keyword, ``created`` holds the raw timestamp string).
- ``nested``: a ``JSONMapped`` type to decode a nested object into.
- ``computed``: set after decode; never read from or written to JSON.

``None`` always means "absent". Absent fields are left out of encoded
payloads so the API keeps its own value for them.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, ClassVar, TypeVar

from ..exceptions import DecodeError, SerializationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="JSONMapped")


def parse_date(value: Any) -> datetime | None:
    """Parse an API timestamp, returning None for empty or malformed input.

    The API sends naive ISO-8601 strings in UTC (``2018-01-01T00:01:01``).
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        logger.debug("Ignoring unparseable timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class JSONMapped:
    """Mixin for dataclasses that travel as JSON objects."""

    @classmethod
    def from_dict(cls: type[T], data: Any) -> T:
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object for {cls.__name__}, got {type(data).__name__}")
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            if f.metadata.get("computed") or not f.init:
                continue
            key = f.metadata.get("json", f.name)
            if key not in data:
                continue
            value = data[key]
            nested = f.metadata.get("nested")
            if nested is not None and value is not None:
                value = nested.from_dict(value)
            kwargs[f.name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Encode to a JSON-ready dict, omitting absent (None) fields."""
        out: dict[str, Any] = {}
        for f in fields(self):
            if f.metadata.get("computed"):
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, JSONMapped):
                value = value.to_dict()
            out[f.metadata.get("json", f.name)] = value
        return out


class OptionSet(JSONMapped):
    """Fields accepted by a create or update call."""

    def to_json(self) -> str:
        try:
            return json.dumps(self.to_dict())
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Cannot encode {type(self).__name__}: {exc}") from exc


@dataclass
class Record(JSONMapped):
    """A remote entity. Subclasses list their timestamp fields in DATE_FIELDS.

    For every name in DATE_FIELDS the subclass declares ``<name>_str``
    (raw, mapped to the JSON key ``<name>``) and ``<name>`` (computed).
    """

    DATE_FIELDS: ClassVar[tuple[str, ...]] = ()

    id: int

    @classmethod
    def from_dict(cls: type[T], data: Any) -> T:
        if isinstance(data, dict):
            ident = data.get("id")
            if not isinstance(ident, int) or isinstance(ident, bool):
                raise DecodeError(f"{cls.__name__} payload has no integer 'id'")
        record = super().from_dict(data)
        return record.fix_dates()

    def fix_dates(self: T) -> T:
        """Convert raw timestamp strings into datetimes; bad input leaves None."""
        for name in self.DATE_FIELDS:
            setattr(self, name, parse_date(getattr(self, f"{name}_str")))
        return self


def raw_date(name: str) -> Any:
    return field(default=None, metadata={"json": name})


def computed() -> Any:
    return field(default=None, metadata={"computed": True})


def nested(cls: type) -> Any:
    return field(default=None, metadata={"nested": cls})
