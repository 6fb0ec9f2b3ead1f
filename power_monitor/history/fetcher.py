"""Historical dataset retrieval over HTTP."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Protocol

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

from power_monitor.history.models import DatasetDecodeError, HistoricalDataset, parse_dataset

logger = logging.getLogger(__name__)


class DatasetFetchError(RuntimeError):
    """Raised when a dataset request fails at the transport, HTTP or protocol level."""


@dataclass(frozen=True)
class DatasetResponse:
    """Raw outcome of one dataset request.

    ``status`` is ``None`` when no HTTP response was received, in which case
    ``error`` carries the transport's description.
    """

    status: Optional[int]
    body: bytes = b""
    error: Optional[str] = None


ResponseCallback = Callable[[DatasetResponse], None]


class DatasetTransport(Protocol):
    """Minimal interface for issuing the dataset GET request."""

    def get(self, url: str, callback: ResponseCallback) -> None:
        ...


class QtDatasetTransport(QObject):
    """Dataset transport using ``QNetworkAccessManager`` on the GUI event loop."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._manager = QNetworkAccessManager(self)

    def get(self, url: str, callback: ResponseCallback) -> None:
        request = QNetworkRequest(QUrl(url))
        reply = self._manager.get(request)
        reply.finished.connect(lambda: self._finish(reply, callback))

    @staticmethod
    def _finish(reply: QNetworkReply, callback: ResponseCallback) -> None:
        response = response_from_reply(reply)
        reply.deleteLater()
        callback(response)


def response_from_reply(reply: QNetworkReply) -> DatasetResponse:
    """Map a finished reply onto a :class:`DatasetResponse`.

    HTTP error statuses keep their status and body; only a reply without any
    status is reported as a transport failure.
    """
    status = reply.attribute(QNetworkRequest.Attribute.HttpStatusCodeAttribute)
    body = bytes(reply.readAll().data())
    if status is None:
        error = None
        if reply.error() != QNetworkReply.NetworkError.NoError:
            error = reply.errorString()
        return DatasetResponse(status=None, body=body, error=error)
    return DatasetResponse(status=int(status), body=body)


def decode_response(response: DatasetResponse) -> HistoricalDataset:
    """Turn a raw response into a dataset or raise :class:`DatasetFetchError`."""
    if response.status is None:
        raise DatasetFetchError(response.error or "Network request failed")
    if not 200 <= response.status < 300:
        raise DatasetFetchError(f"HTTP error! status: {response.status}")

    try:
        payload = json.loads(response.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DatasetFetchError(f"Invalid response body: {exc}") from exc

    if not isinstance(payload, dict) or payload.get("success") is not True:
        raise DatasetFetchError("Failed to fetch data")

    try:
        return parse_dataset(payload.get("data"))
    except DatasetDecodeError as exc:
        raise DatasetFetchError(str(exc)) from exc


@dataclass(frozen=True)
class FetchStatus:
    """Dataset plus retrieval status exposed to the view."""

    dataset: Optional[HistoricalDataset] = None
    loading: bool = False
    refreshing: bool = False
    error: Optional[str] = None
    generation: int = 0


class HistoricalDatasetFetcher(QObject):
    """Retrieves the three-window dataset on demand.

    Every request gets a generation number; a response is applied only if it
    belongs to the most recent request, so an older reply can never overwrite
    a newer one.
    """

    status_changed = Signal(object)

    def __init__(self, url: str, transport: Optional[DatasetTransport] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.url = url
        self._transport = transport if transport is not None else QtDatasetTransport(self)
        self._status = FetchStatus()
        self._in_flight = 0

    @property
    def status(self) -> FetchStatus:
        return self._status

    @property
    def in_flight(self) -> bool:
        return self._in_flight > 0

    def load(self) -> int:
        return self._request(refreshing=False)

    def refresh(self) -> int:
        return self._request(refreshing=True)

    # ------------------------------------------------------------------
    def _update(self, **changes) -> None:
        self._status = replace(self._status, **changes)
        self.status_changed.emit(self._status)

    def _request(self, refreshing: bool) -> int:
        generation = self._status.generation + 1
        self._update(loading=not refreshing, refreshing=refreshing, error=None, generation=generation)
        self._in_flight += 1
        logger.info("Requesting historical dataset from %s (%s)", self.url, "refresh" if refreshing else "load")
        self._transport.get(self.url, lambda response: self._on_response(generation, response))
        return generation

    def _on_response(self, generation: int, response: DatasetResponse) -> None:
        self._in_flight = max(self._in_flight - 1, 0)
        if generation != self._status.generation:
            logger.debug("Dropping stale dataset response (generation %d, current %d)", generation, self._status.generation)
            return
        try:
            dataset = decode_response(response)
        except DatasetFetchError as exc:
            logger.error("Error fetching data: %s", exc)
            self._update(dataset=None, error=str(exc), loading=False, refreshing=False)
            return
        self._update(dataset=dataset, error=None, loading=False, refreshing=False)
