"""Memory-mapped index mapping relative offsets to store positions."""

from __future__ import annotations

import mmap
import os
from dataclasses import dataclass
import struct

OFF_WIDTH = 4
POS_WIDTH = 8
ENT_WIDTH = OFF_WIDTH + POS_WIDTH
_ENTRY = struct.Struct(">IQ")


@dataclass
class LogConfig:
    """Segment limits for a commit log."""

    max_store_bytes: int = 0
    max_index_bytes: int = 0
    initial_offset: int = 0


class Index:
    """Fixed-width entries of (relative offset, store position)."""

    def __init__(self, path: str | os.PathLike, config: LogConfig) -> None:
        self._path = os.fspath(path)
        fd = os.open(self._path, os.O_RDWR | os.O_CREAT, 0o644)
        self._file = os.fdopen(fd, "r+b")
        try:
            self.size = os.fstat(self._file.fileno()).st_size
            self._file.truncate(config.max_index_bytes)
            self._mmap = mmap.mmap(self._file.fileno(), config.max_index_bytes)
        except Exception:
            self._file.close()
            raise
        self._closed = False

    @property
    def name(self) -> str:
        return self._path

    def __enter__(self) -> "Index":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def read(self, rel: int) -> tuple[int, int]:
        """Return (relative offset, position) of entry ``rel``; -1 is the last."""
        if self.size == 0:
            raise EOFError("index is empty")
        if rel == -1:
            out = self.size // ENT_WIDTH - 1
        elif rel < 0:
            raise EOFError(f"no index entry {rel}")
        else:
            out = rel
        pos = out * ENT_WIDTH
        if self.size < pos + ENT_WIDTH:
            raise EOFError(f"no index entry {rel}")
        return _ENTRY.unpack_from(self._mmap, pos)

    def write(self, off: int, pos: int) -> None:
        """Append an entry; raise EOFError when the index is full."""
        if len(self._mmap) < self.size + ENT_WIDTH:
            raise EOFError("index is full")
        _ENTRY.pack_into(self._mmap, self.size, off, pos)
        self.size += ENT_WIDTH

    def close(self) -> None:
        """Sync the mapping, trim the file to its used size and close it."""
        if self._closed:
            return
        self._closed = True
        self._mmap.flush()
        self._mmap.close()
        self._file.flush()
        os.fsync(self._file.fileno())
        self._file.truncate(self.size)
        self._file.close()