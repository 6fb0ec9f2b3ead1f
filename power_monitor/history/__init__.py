"""Historical dataset models and retrieval."""

from .fetcher import (
    DatasetFetchError,
    DatasetResponse,
    DatasetTransport,
    FetchStatus,
    HistoricalDatasetFetcher,
    QtDatasetTransport,
    decode_response,
    response_from_reply,
)
from .models import WINDOW_NAMES, Bucket, DatasetDecodeError, HistoricalDataset, parse_dataset

__all__ = [
    "WINDOW_NAMES",
    "Bucket",
    "DatasetDecodeError",
    "DatasetFetchError",
    "DatasetResponse",
    "DatasetTransport",
    "FetchStatus",
    "HistoricalDataset",
    "HistoricalDatasetFetcher",
    "QtDatasetTransport",
    "decode_response",
    "parse_dataset",
    "response_from_reply",
]
