"""Commit log made of segments kept in one directory."""

from __future__ import annotations

import io
import os
import shutil
import threading
from collections import deque
from dataclasses import replace
from typing import Iterable

from .errors import OffsetOutOfRangeError
from .index import LogConfig
from .segment import Record, Segment
from .store import Store

DEFAULT_MAX_BYTES = 1024
_SEGMENT_SUFFIXES = (".store", ".index")


class _StoresReader(io.RawIOBase):
    """Raw reader over the full contents of several stores, one after another."""

    def __init__(self, stores: Iterable[Store]) -> None:
        super().__init__()
        self._stores = deque(stores)
        self._pos = 0

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        if not len(view):
            return 0
        while self._stores:
            data = self._stores[0].read_at(len(view), self._pos)
            if data:
                view[: len(data)] = data
                self._pos += len(data)
                return len(data)
            self._stores.popleft()
            self._pos = 0
        return 0


class Log:
    """An ordered, append-only sequence of records split across segments."""

    def __init__(
        self, directory: str | os.PathLike, config: LogConfig | None = None
    ) -> None:
        config = replace(config) if config is not None else LogConfig()
        if not config.max_store_bytes:
            config.max_store_bytes = DEFAULT_MAX_BYTES
        if not config.max_index_bytes:
            config.max_index_bytes = DEFAULT_MAX_BYTES
        self.directory = os.fspath(directory)
        self.config = config
        self._lock = threading.Lock()
        self._segments: list[Segment] = []
        self._active: Segment | None = None
        self._setup()

    def __enter__(self) -> "Log":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _setup(self) -> None:
        bases = set()
        for name in os.listdir(self.directory):
            stem, ext = os.path.splitext(name)
            if ext in _SEGMENT_SUFFIXES and stem.isdigit():
                bases.add(int(stem))
        self._segments = []
        self._active = None
        for base in sorted(bases):
            self._new_segment(base)
        if not self._segments:
            self._new_segment(self.config.initial_offset)

    def _new_segment(self, offset: int) -> None:
        segment = Segment(self.directory, offset, self.config)
        self._segments.append(segment)
        self._active = segment

    def append(self, record: Record) -> int:
        """Append ``record`` and return the offset it was given."""
        with self._lock:
            offset = self._active.append(record)
            if self._active.is_maxed():
                self._new_segment(offset + 1)
            return offset

    def read(self, offset: int) -> Record:
        """Return the record at ``offset``; raise OffsetOutOfRangeError if absent."""
        with self._lock:
            for segment in self._segments:
                if segment.base_offset <= offset < segment.next_offset:
                    return segment.read(offset)
        raise OffsetOutOfRangeError(offset)

    def close(self) -> None:
        """Close every segment."""
        with self._lock:
            for segment in self._segments:
                segment.close()

    def remove(self) -> None:
        """Close the log and delete its directory."""
        self.close()
        shutil.rmtree(self.directory, ignore_errors=True)

    def reset(self) -> None:
        """Delete all data and start again with an empty log."""
        self.remove()
        os.makedirs(self.directory, exist_ok=True)
        with self._lock:
            self._setup()

    def lowest_offset(self) -> int:
        with self._lock:
            return self._segments[0].base_offset

    def highest_offset(self) -> int:
        with self._lock:
            offset = self._segments[-1].next_offset
            return 0 if offset == 0 else offset - 1

    def truncate(self, lowest: int) -> None:
        """Remove every segment whose records all lie at or below ``lowest``."""
        with self._lock:
            kept = []
            for segment in self._segments:
                if segment.next_offset <= lowest + 1:
                    segment.remove()
                else:
                    kept.append(segment)
            self._segments = kept

    def reader(self) -> io.BufferedReader:
        """Return a reader over the raw bytes of every segment's store."""
        with self._lock:
            stores = [segment.store for segment in self._segments]
        return io.BufferedReader(_StoresReader(stores))