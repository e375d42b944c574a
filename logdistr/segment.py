"""A segment pairs a store with its index."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass

from .index import Index, LogConfig
from .store import Store

_OFFSET = struct.Struct(">Q")


@dataclass
class Record:
    """A log record: its value and the offset it was stored at."""

    value: bytes = b""
    offset: int = 0

    def to_bytes(self) -> bytes:
        """Encode as an 8-byte big-endian offset followed by the value."""
        return _OFFSET.pack(self.offset) + bytes(self.value)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Record":
        """Decode a record produced by :meth:`to_bytes`."""
        if len(data) < _OFFSET.size:
            raise ValueError("record data is too short")
        (offset,) = _OFFSET.unpack_from(data)
        return cls(value=bytes(data[_OFFSET.size:]), offset=offset)


class Segment:
    """Records from ``base_offset`` onwards, kept in ``<base>.store``/``<base>.index``."""

    def __init__(
        self, directory: str | os.PathLike, base_offset: int, config: LogConfig
    ) -> None:
        self.base_offset = base_offset
        self.config = config
        self.store = Store(os.path.join(directory, f"{base_offset}.store"))
        try:
            self.index = Index(
                os.path.join(directory, f"{base_offset}.index"), config
            )
        except Exception:
            self.store.close()
            raise
        try:
            off, _ = self.index.read(-1)
        except EOFError:
            self.next_offset = base_offset
        else:
            self.next_offset = base_offset + off + 1

    def __enter__(self) -> "Segment":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def append(self, record: Record) -> int:
        """Store ``record`` at the next offset, which is set on it and returned."""
        cur = self.next_offset
        record.offset = cur
        _, pos = self.store.append(record.to_bytes())
        self.index.write(cur - self.base_offset, pos)
        self.next_offset += 1
        return cur

    def read(self, offset: int) -> Record:
        """Return the record at absolute ``offset``."""
        _, pos = self.index.read(offset - self.base_offset)
        return Record.from_bytes(self.store.read(pos))

    def is_maxed(self) -> bool:
        """Whether the store or the index has reached its configured limit."""
        return (
            self.store.size >= self.config.max_store_bytes
            or self.index.size >= self.config.max_index_bytes
        )

    def remove(self) -> None:
        """Close the segment and delete its files."""
        self.close()
        os.remove(self.index.name)
        os.remove(self.store.name)

    def close(self) -> None:
        self.index.close()
        self.store.close()


def nearest_multiple(j: int, k: int) -> int:
    """Return the largest multiple of ``k`` not greater than ``j``."""
    return (j // k) * k