import threading
from itertools import islice

import pytest

from logdistr.auth import Authorizer, PermissionDeniedError
from logdistr.commitlog import Log
from logdistr.errors import OffsetOutOfRangeError
from logdistr.segment import Record
from logdistr.service import LogService


@pytest.fixture
def service(tmp_path):
    policy = tmp_path / "policy.csv"
    policy.write_text("p, root, *, produce\np, root, *, consume\n")
    data = tmp_path / "data"
    data.mkdir()
    commit_log = Log(data)
    yield LogService(commit_log, Authorizer(policy))
    commit_log.close()


def test_produce_consume_a_message_succeeds(service):
    want = Record(value=b"hello world")
    offset = service.produce("root", want)
    consumed = service.consume("root", offset)
    assert consumed.value == want.value
    assert consumed.offset == want.offset


def test_consume_past_log_boundary_fails(service):
    offset = service.produce("root", Record(value=b"hello world"))
    with pytest.raises(OffsetOutOfRangeError) as info:
        service.consume("root", offset + 1)
    assert info.value.offset == offset + 1
    assert info.value.code == 404


def test_produce_consume_stream_succeeds(service):
    records = [
        Record(value=b"first message", offset=0),
        Record(value=b"second message", offset=1),
    ]
    offsets = list(service.produce_stream("root", records))
    assert offsets == [0, 1]

    stop = threading.Event()
    stream = service.consume_stream("root", 0, stop)
    received = list(islice(stream, 2))
    assert received == [
        Record(value=b"first message", offset=0),
        Record(value=b"second message", offset=1),
    ]
    stop.set()
    assert list(stream) == []


def test_consume_stream_waits_for_new_records(service):
    stop = threading.Event()
    stream = service.consume_stream("root", 0, stop)
    timer = threading.Timer(0.05, service.produce, ("root", Record(value=b"late")))
    timer.start()
    try:
        record = next(stream)
    finally:
        timer.join()
        stop.set()
    assert record == Record(value=b"late", offset=0)


def test_unauthorized_fails(service):
    with pytest.raises(PermissionDeniedError):
        service.produce("nobody", Record(value=b"hello world"))
    with pytest.raises(PermissionDeniedError):
        service.consume("nobody", 0)


def test_unauthorized_stream_fails(service):
    with pytest.raises(PermissionDeniedError):
        next(service.consume_stream("nobody", 0, threading.Event()))
    with pytest.raises(PermissionDeniedError):
        list(service.produce_stream("nobody", [Record(value=b"x")]))