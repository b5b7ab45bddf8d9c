"""Generic list/get/create/update/delete client for one resource family."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Generic

from ..exceptions import NotFoundError
from ..resources.base import OptionSet
from .endpoints import EndpointPolicy
from .pagination import ListOptions, PagedResponse, RecordT
from .transport import Transport

logger = logging.getLogger(__name__)


class ResourceClient(Generic[RecordT]):
    """CRUD and paginated listing for records of one type behind one endpoint policy.

    Nested families (configs under a NodeBalancer or a Linode) take the
    parent's id as ``parent_id``; top-level families leave it unset.
    No call is retried.
    """

    def __init__(
        self,
        transport: Transport,
        record_type: type[RecordT],
        endpoint: EndpointPolicy,
        default_page_size: int | None = None,
    ):
        self._transport = transport
        self._record_type = record_type
        self._endpoint = endpoint
        self._default_page_size = default_page_size

    @property
    def endpoint(self) -> EndpointPolicy:
        return self._endpoint

    @property
    def record_type(self) -> type[RecordT]:
        return self._record_type

    # ── Listing ─────────────────────────────────────────────────────

    def list(
        self,
        parent_id: int | None = None,
        options: ListOptions | None = None,
        cancel: threading.Event | None = None,
    ) -> list[RecordT]:
        """Return every record, in server order, across all pages.

        With ``options.page`` set only that page is fetched. Otherwise
        pages are requested until the envelope reports no more pages or a
        page comes back shorter than the requested page size.
        """
        path = self._endpoint.resolve(parent_id)
        options = options or ListOptions()
        if options.page_size is None and self._default_page_size is not None:
            options = replace(options, page_size=self._default_page_size)

        page_number = options.page or 1
        page = self._fetch_page(path, options.for_page(page_number), cancel)
        response = page
        if options.page is None:
            while self._has_more(page, page_number, options.page_size):
                page_number += 1
                page = self._fetch_page(path, options.for_page(page_number), cancel)
                response.append(page)

        logger.info(
            "Listed %d %s", len(response.data), self._endpoint.name,
            extra={"resource": self._endpoint.name, "parent_id": parent_id,
                   "page": response.page, "pages": response.pages,
                   "results": len(response.data)},
        )
        return response.data

    def _fetch_page(self, path: str, options: ListOptions, cancel: threading.Event | None) -> PagedResponse[RecordT]:
        body = self._transport.get(path, params=options.params(), headers=options.headers(), cancel=cancel)
        page = PagedResponse.from_dict(body, self._record_type, requested_page=options.page or 1)
        logger.debug(
            "Fetched page %d/%d of %s (%d records)", page.page, page.pages, self._endpoint.name, len(page.data),
            extra={"resource": self._endpoint.name, "page": page.page, "pages": page.pages},
        )
        return page

    @staticmethod
    def _has_more(page: PagedResponse[RecordT], page_number: int, page_size: int | None) -> bool:
        if not page.data or page_number >= page.pages:
            return False
        if page_size is not None and len(page.data) < page_size:
            return False
        return True

    # ── Single records ──────────────────────────────────────────────

    def get(self, item_id: int, parent_id: int | None = None, cancel: threading.Event | None = None) -> RecordT:
        """Fetch one record. Raises NotFoundError when it does not exist."""
        path = self._endpoint.resolve_item(item_id, parent_id)
        body = self._transport.get(path, cancel=cancel)
        return self._record_type.from_dict(body)

    def create(self, options: OptionSet, parent_id: int | None = None,
               cancel: threading.Event | None = None) -> RecordT:
        path = self._endpoint.resolve(parent_id)
        body = self._transport.post(path, body=options.to_json(), cancel=cancel)
        record = self._record_type.from_dict(body)
        logger.info(
            "Created %s %d", self._endpoint.name, record.id,
            extra={"resource": self._endpoint.name, "resource_id": record.id, "parent_id": parent_id},
        )
        return record

    def update(self, item_id: int, options: OptionSet, parent_id: int | None = None,
               cancel: threading.Event | None = None) -> RecordT:
        """PUT only the fields present in *options*; the API keeps the rest."""
        path = self._endpoint.resolve_item(item_id, parent_id)
        body = self._transport.put(path, body=options.to_json(), cancel=cancel)
        record = self._record_type.from_dict(body)
        logger.info(
            "Updated %s %d", self._endpoint.name, item_id,
            extra={"resource": self._endpoint.name, "resource_id": item_id, "parent_id": parent_id},
        )
        return record

    def delete(self, item_id: int, parent_id: int | None = None, cancel: threading.Event | None = None) -> None:
        """Delete one record. Deleting an absent record raises NotFoundError."""
        path = self._endpoint.resolve_item(item_id, parent_id)
        self._transport.delete(path, cancel=cancel)
        logger.info(
            "Deleted %s %d", self._endpoint.name, item_id,
            extra={"resource": self._endpoint.name, "resource_id": item_id, "parent_id": parent_id},
        )

    # ── Existence checks ────────────────────────────────────────────

    def exists(self, item_id: int, parent_id: int | None = None, cancel: threading.Event | None = None) -> bool:
        """False when the API answers 404; any other failure propagates."""
        try:
            self.get(item_id, parent_id, cancel=cancel)
        except NotFoundError:
            return False
        return True

    def delete_if_exists(self, item_id: int, parent_id: int | None = None,
                         cancel: threading.Event | None = None) -> bool:
        """Delete, treating 404 as already gone. Returns whether a delete happened."""
        try:
            self.delete(item_id, parent_id, cancel=cancel)
        except NotFoundError:
            logger.debug(
                "%s %d already absent", self._endpoint.name, item_id,
                extra={"resource": self._endpoint.name, "resource_id": item_id, "parent_id": parent_id},
            )
            return False
        return True
