"""JSON over HTTP front end for an in-memory log."""

from __future__ import annotations

import argparse
import base64
import binascii
import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

from .memlog import MemoryLog, OffsetNotFoundError, Record

DEFAULT_ADDR = ":8080"
_MAX_UINT64 = 2**64 - 1

_logger = logging.getLogger(__name__)


class _LogHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address, handler) -> None:
        super().__init__(address, handler)
        self.log = MemoryLog()


def _decode_json(body: bytes) -> dict:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"invalid character in request body: {exc}") from exc
    text = text.lstrip()
    if not text:
        raise ValueError("EOF")
    obj, _ = json.JSONDecoder().raw_decode(text)
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(
            f"json: cannot unmarshal {type(obj).__name__} into request object"
        )
    return obj


def _uint(value, name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"json: cannot unmarshal {value!r} into field {name}")
    if value < 0 or value > _MAX_UINT64:
        raise ValueError(f"json: cannot unmarshal number {value} into field {name}")
    return value


def _record_from_json(obj) -> Record:
    if obj is None:
        return Record()
    if not isinstance(obj, dict):
        raise ValueError("json: cannot unmarshal value into field record")
    raw = obj.get("value")
    if raw is None:
        value = b""
    elif isinstance(raw, str):
        try:
            value = base64.b64decode(raw, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"illegal base64 data in field value: {exc}") from exc
    else:
        raise ValueError("json: cannot unmarshal value into field value")
    return Record(value=value, offset=_uint(obj.get("offset"), "offset"))


def _record_to_json(record: Record) -> dict:
    return {
        "value": base64.b64encode(record.value).decode("ascii"),
        "offset": record.offset,
    }


class _Handler(BaseHTTPRequestHandler):
    server: _LogHTTPServer

    def log_message(self, format, *args) -> None:
        _logger.debug("%s - " + format, self.address_string(), *args)

    def _body(self) -> bytes:
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length) if length > 0 else b""

    def _send(self, status: int, body: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _error(self, message: str, status: int) -> None:
        body = (message + "\n").encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("X-Content-Type-Options", "nosniff")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _json(self, payload: dict) -> None:
        body = (json.dumps(payload, separators=(",", ":")) + "\n").encode("utf-8")
        self._send(200, body, "application/json")

    def _produce(self) -> None:
        try:
            request = _decode_json(self._body())
            record = _record_from_json(request.get("record"))
        except ValueError as exc:
            self._error(str(exc), 400)
            return
        offset = self.server.log.append(record)
        self._json({"offset": offset})

    def _consume(self) -> None:
        try:
            request = _decode_json(self._body())
            offset = _uint(request.get("offset"), "offset")
        except ValueError as exc:
            self._error(str(exc), 400)
            return
        try:
            record = self.server.log.read(offset)
        except OffsetNotFoundError as exc:
            self._error(str(exc), 404)
            return
        self._json({"record": _record_to_json(record)})

    def _get(self) -> None:
        self._send(200, b"get", "text/plain; charset=utf-8")

    _ROUTES = {
        ("/", "POST"): _produce,
        ("/", "GET"): _consume,
        ("/get", "GET"): _get,
    }

    def _dispatch(self, method: str) -> None:
        path = urlsplit(self.path).path
        handler = self._ROUTES.get((path, method))
        if handler is not None:
            handler(self)
        elif any(route_path == path for route_path, _ in self._ROUTES):
            self._body()
            self._send(405, b"", "text/plain; charset=utf-8")
        else:
            self._body()
            self._error("404 page not found", 404)

    def do_GET(self) -> None:
        self._dispatch("GET")

    def do_POST(self) -> None:
        self._dispatch("POST")

    def do_PUT(self) -> None:
        self._dispatch("PUT")

    def do_DELETE(self) -> None:
        self._dispatch("DELETE")

    def do_PATCH(self) -> None:
        self._dispatch("PATCH")


def _parse_addr(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ValueError(f"address {addr}: missing port in address")
    host = host.strip("[]")
    if not port:
        return host, 80
    if not port.isascii() or not port.isdigit() or int(port) > 65535:
        raise ValueError(f"address {addr}: invalid port")
    return host, int(port)


def new_http_server(addr: str) -> ThreadingHTTPServer:
    """Create an HTTP server bound to ``addr`` ("host:port") serving a fresh log.

    POST / appends a record, GET / reads one by offset, GET /get answers "get".
    """
    return _LogHTTPServer(_parse_addr(addr), _Handler)


def main(argv=None) -> int:
    """Run the HTTP log server until interrupted."""
    parser = argparse.ArgumentParser(description="Serve a log over HTTP.")
    parser.add_argument("--addr", default=DEFAULT_ADDR, help="listen address")
    args = parser.parse_args(argv)
    try:
        server = new_http_server(args.addr)
    except (OSError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc
    print("start")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0