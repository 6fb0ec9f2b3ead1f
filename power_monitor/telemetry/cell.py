"""Single-slot latest-value cell used between socket callbacks and ingestion."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class LatestValueCell(Generic[T]):
    """Holds at most one unconsumed value; a new ``put`` overwrites the old one."""

    def __init__(self) -> None:
        self._value: Optional[T] = None
        self._pending = False
        self.overwritten = 0

    @property
    def pending(self) -> bool:
        return self._pending

    def put(self, value: T) -> None:
        if self._pending:
            self.overwritten += 1
        self._value = value
        self._pending = True

    def take(self) -> Optional[T]:
        if not self._pending:
            return None
        value = self._value
        self._value = None
        self._pending = False
        return value
