"""Log service: authorized produce and consume operations over a commit log."""

from __future__ import annotations

import threading
from typing import Iterable, Iterator, Protocol

from .errors import OffsetOutOfRangeError
from .segment import Record

OBJECT_WILDCARD = "*"
PRODUCE_ACTION = "produce"
CONSUME_ACTION = "consume"


class CommitLog(Protocol):
    def append(self, record: Record) -> int: ...

    def read(self, offset: int) -> Record: ...


class Authorizer(Protocol):
    def authorize(self, subject: str, obj: str, action: str) -> None: ...


class LogService:
    """Checks each request against the authorizer before touching the log."""

    def __init__(
        self,
        commit_log: CommitLog,
        authorizer: Authorizer,
        poll_interval: float = 0.01,
    ) -> None:
        self.commit_log = commit_log
        self.authorizer = authorizer
        self.poll_interval = poll_interval

    def produce(self, subject: str, record: Record) -> int:
        """Append ``record`` on behalf of ``subject``; return its offset."""
        self.authorizer.authorize(subject, OBJECT_WILDCARD, PRODUCE_ACTION)
        return self.commit_log.append(record)

    def consume(self, subject: str, offset: int) -> Record:
        """Read the record at ``offset`` on behalf of ``subject``."""
        self.authorizer.authorize(subject, OBJECT_WILDCARD, CONSUME_ACTION)
        return self.commit_log.read(offset)

    def produce_stream(
        self, subject: str, records: Iterable[Record]
    ) -> Iterator[int]:
        """Produce each record in turn, yielding the offset of each."""
        for record in records:
            yield self.produce(subject, record)

    def consume_stream(
        self,
        subject: str,
        offset: int,
        stop: threading.Event | None = None,
    ) -> Iterator[Record]:
        """Yield records from ``offset`` on, waiting for new ones until ``stop`` is set."""
        if stop is None:
            stop = threading.Event()
        while not stop.is_set():
            try:
                record = self.consume(subject, offset)
            except OffsetOutOfRangeError:
                stop.wait(self.poll_interval)
                continue
            yield record
            offset += 1