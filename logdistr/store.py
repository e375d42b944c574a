"""Append-only file of length-prefixed records."""

from __future__ import annotations

import os
import struct
import threading

LEN_WIDTH = 8
_BUFFER_SIZE = 4096
_LEN = struct.Struct(">Q")


class Store:
    """A file holding records, each preceded by its 8-byte big-endian length.

    Appends are buffered; the buffer is flushed before every read and on close.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self._path = os.fspath(path)
        self._file = open(self._path, "a+b")
        self._lock = threading.Lock()
        self._buf = bytearray()
        self.size = os.fstat(self._file.fileno()).st_size

    @property
    def name(self) -> str:
        return self._path

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _flush(self) -> None:
        if self._buf:
            self._file.write(self._buf)
            self._buf.clear()
        self._file.flush()

    def _pread(self, offset: int, size: int) -> bytes:
        self._file.seek(offset)
        return self._file.read(size)

    def append(self, data: bytes) -> tuple[int, int]:
        """Append ``data``; return the bytes written and the record's position."""
        with self._lock:
            pos = self.size
            self._buf += _LEN.pack(len(data))
            self._buf += data
            if len(self._buf) >= _BUFFER_SIZE:
                self._flush()
            written = LEN_WIDTH + len(data)
            self.size += written
            return written, pos

    def read(self, pos: int) -> bytes:
        """Return the record stored at ``pos``."""
        with self._lock:
            self._flush()
            header = self._pread(pos, LEN_WIDTH)
            if len(header) < LEN_WIDTH:
                raise EOFError(f"no record at position {pos}")
            (length,) = _LEN.unpack(header)
            data = self._pread(pos + LEN_WIDTH, length)
            if len(data) < length:
                raise EOFError(f"record at position {pos} is truncated")
            return data

    def read_at(self, size: int, offset: int) -> bytes:
        """Return up to ``size`` raw bytes starting at ``offset``."""
        with self._lock:
            self._flush()
            return self._pread(offset, size)

    def close(self) -> None:
        """Flush buffered data and close the file."""
        with self._lock:
            if self._file.closed:
                return
            self._flush()
            self._file.close()