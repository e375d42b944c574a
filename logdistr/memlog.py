"""In-memory log of records used by the HTTP API."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace


class OffsetNotFoundError(LookupError):
    """Raised when no record exists at the requested offset."""

    def __init__(self, offset: int | None = None) -> None:
        super().__init__("offset not found")
        self.offset = offset

    def __reduce__(self):
        return (type(self), (self.offset,))


@dataclass
class Record:
    """A value stored in the in-memory log and the offset it was given."""

    value: bytes = b""
    offset: int = 0


class MemoryLog:
    """A thread-safe, append-only list of records."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[Record] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def append(self, record: Record) -> int:
        """Store a copy of ``record`` at the next offset and return that offset."""
        with self._lock:
            stored = replace(record, offset=len(self._records))
            self._records.append(stored)
            return stored.offset

    def read(self, offset: int) -> Record:
        """Return the record at ``offset``; raise OffsetNotFoundError if absent."""
        with self._lock:
            if offset < 0 or offset >= len(self._records):
                raise OffsetNotFoundError(offset)
            return replace(self._records[offset])