"""List options and the paged response envelope."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from ..exceptions import DecodeError
from ..resources.base import Record

RecordT = TypeVar("RecordT", bound=Record)


@dataclass(frozen=True)
class ListOptions:
    """Paging and filtering for list calls.

    ``page`` set: fetch that single page. ``page`` unset: fetch every page.
    ``filter`` is passed through untouched as the X-Filter header.
    """

    page: int | None = None
    page_size: int | None = None
    filter: dict[str, Any] | None = None

    def for_page(self, page: int) -> ListOptions:
        return replace(self, page=page)

    def params(self) -> dict[str, int]:
        params: dict[str, int] = {}
        if self.page is not None:
            params["page"] = self.page
        if self.page_size is not None:
            params["page_size"] = self.page_size
        return params

    def headers(self) -> dict[str, str]:
        if self.filter:
            return {"X-Filter": json.dumps(self.filter)}
        return {}


@dataclass
class PagedResponse(Generic[RecordT]):
    """One page of a list call, or the accumulation of several."""

    page: int
    pages: int
    results: int
    data: list[RecordT] = field(default_factory=list)

    @classmethod
    def from_dict(cls, body: Any, record_type: type[RecordT], requested_page: int = 1) -> PagedResponse[RecordT]:
        if not isinstance(body, dict):
            raise DecodeError(f"Expected a list envelope for {record_type.__name__}, got {type(body).__name__}")
        raw = body.get("data", [])
        if not isinstance(raw, list):
            raise DecodeError(f"List envelope 'data' for {record_type.__name__} is not an array")
        try:
            page = int(body.get("page", requested_page))
            pages = int(body.get("pages", page))
            results = int(body.get("results", len(raw)))
        except (TypeError, ValueError) as exc:
            raise DecodeError(f"Malformed paging fields in list envelope: {exc}") from exc
        return cls(
            page=page,
            pages=pages,
            results=results,
            data=[record_type.from_dict(item) for item in raw],
        )

    def append(self, other: PagedResponse[RecordT]) -> None:
        """Add the next page; paging fields follow the server's latest answer."""
        self.data.extend(other.data)
        self.page = other.page
        self.pages = other.pages
        self.results = other.results
