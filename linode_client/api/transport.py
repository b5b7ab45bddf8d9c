"""HTTP transport for the Linode REST API."""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

import requests

from ..config import APIConfig
from ..exceptions import APIError, CancelledError, DecodeError, NotFoundError, RequestError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192
_CANCEL_POLL_SECONDS = 0.05


class Transport:
    """Thin wrapper around a requests session: auth, error normalization, cancellation.

    Holds no per-call state, so one instance may serve several resource clients.
    """

    def __init__(self, config: APIConfig, session: requests.Session | None = None):
        self._base = config.root_url
        self._session = session or requests.Session()
        if config.token:
            self._session.headers["Authorization"] = f"Bearer {config.token}"
        self._session.headers["Content-Type"] = "application/json"
        self._session.headers["Accept"] = "application/json"
        self._session.headers["User-Agent"] = config.user_agent
        self._session.verify = config.verify_ssl
        self._timeout = config.timeout

    def close(self) -> None:
        self._session.close()

    def get(self, path: str, params: dict | None = None, headers: dict | None = None,
            cancel: threading.Event | None = None) -> Any:
        return self.request("GET", path, params=params, headers=headers, cancel=cancel)

    def post(self, path: str, body: str | None = None, cancel: threading.Event | None = None) -> Any:
        return self.request("POST", path, body=body, cancel=cancel)

    def put(self, path: str, body: str | None = None, cancel: threading.Event | None = None) -> Any:
        return self.request("PUT", path, body=body, cancel=cancel)

    def delete(self, path: str, cancel: threading.Event | None = None) -> Any:
        return self.request("DELETE", path, cancel=cancel)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        body: str | None = None,
        headers: dict | None = None,
        cancel: threading.Event | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (None when empty)."""
        url = f"{self._base}/{path.lstrip('/')}"
        _raise_if_cancelled(cancel, method, path)

        kwargs: dict[str, Any] = {"params": params, "data": body, "headers": headers, "stream": True}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        logger.debug("%s %s params=%s", method, path, params, extra={"method": method})

        if cancel is None:
            resp, text = self._exchange(method, url, path, kwargs, None, [])
        else:
            resp, text = self._exchange_cancellable(method, url, path, kwargs, cancel)

        if not 200 <= resp.status_code < 300:
            raise _api_error(resp, text, method, path)

        logger.debug("%s %s -> %d", method, path, resp.status_code,
                     extra={"method": method, "status_code": resp.status_code})
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON in response to {method} {path}: {exc}", response_body=text) from exc

    def _exchange(
        self,
        method: str,
        url: str,
        path: str,
        kwargs: dict[str, Any],
        cancel: threading.Event | None,
        in_flight: list[requests.Response],
    ) -> tuple[requests.Response, str]:
        """Send the request and read the whole body. The response is closed on return."""
        try:
            resp = self._session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise RequestError(f"{method} {path} failed: {exc}") from exc

        in_flight.append(resp)
        try:
            return resp, self._read_body(resp, cancel, method, path)
        finally:
            resp.close()

    def _exchange_cancellable(
        self,
        method: str,
        url: str,
        path: str,
        kwargs: dict[str, Any],
        cancel: threading.Event,
    ) -> tuple[requests.Response, str]:
        """Run the exchange on a worker thread and give up as soon as *cancel* is set.

        A worker still blocked on the server is abandoned; it closes its own
        response once the server answers or the transport timeout fires.
        """
        future: Future = Future()
        in_flight: list[requests.Response] = []

        def work() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(self._exchange(method, url, path, kwargs, cancel, in_flight))
            except BaseException as exc:
                future.set_exception(exc)

        threading.Thread(target=work, name=f"linode-{method.lower()}", daemon=True).start()
        while True:
            try:
                return future.result(timeout=_CANCEL_POLL_SECONDS)
            except FutureTimeoutError:
                if cancel.is_set():
                    for resp in in_flight:
                        resp.close()
                    raise CancelledError(f"{method} {path} cancelled") from None

    def _read_body(self, resp: requests.Response, cancel: threading.Event | None, method: str, path: str) -> str:
        """Stream the body, checking for cancellation between chunks."""
        chunks: list[bytes] = []
        try:
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                _raise_if_cancelled(cancel, method, path)
                chunks.append(chunk)
        except requests.RequestException as exc:
            raise RequestError(f"{method} {path} failed while reading response: {exc}") from exc
        _raise_if_cancelled(cancel, method, path)
        return b"".join(chunks).decode(resp.encoding or "utf-8", errors="replace")


def _raise_if_cancelled(cancel: threading.Event | None, method: str, path: str) -> None:
    if cancel is not None and cancel.is_set():
        raise CancelledError(f"{method} {path} cancelled")


def _api_error(resp: requests.Response, text: str, method: str, path: str) -> APIError:
    """Build a typed error from a non-2xx response and its error envelope."""
    errors: list[dict] = []
    try:
        payload = json.loads(text) if text else None
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("errors"), list):
        errors = [e for e in payload["errors"] if isinstance(e, dict)]

    if errors:
        detail = "; ".join(
            f"{e['field']}: {e.get('reason', '')}" if e.get("field") else str(e.get("reason", ""))
            for e in errors
        )
    else:
        detail = text.strip() or resp.reason or "no response body"

    message = f"HTTP {resp.status_code} on {method} {path}: {detail}"
    if resp.status_code == 404:
        return NotFoundError(message, errors=errors, response_body=text)
    return APIError(message, status_code=resp.status_code, errors=errors, response_body=text)
