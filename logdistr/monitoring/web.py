"""HTTP endpoints serving system monitoring data as JSON."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import socket
from dataclasses import dataclass, field
from functools import partial
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable
from urllib.parse import urlsplit

from .network import check_network_bandwidth, check_network_devices
from .settings import MonitorConfig
from .system import (
    check_cpu,
    check_disks,
    check_host_info,
    check_processes,
    check_ram,
)

DEFAULT_PORT = "3000"
_MAX_PORT = 65535
_JSON = "application/json"
_TEXT = "text/plain; charset=utf-8"

_logger = logging.getLogger(__name__)


@dataclass
class _Response:
    status: int
    body: bytes = b""
    headers: dict = field(default_factory=dict)


def _jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.metadata.get("json", f.name): _jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    return value


def _cors() -> dict:
    return {"Access-Control-Allow-Origin": "*"}


def _json_response(payload: Any) -> _Response:
    body = json.dumps(_jsonable(payload), separators=(",", ":")).encode("utf-8")
    return _Response(200, body, {**_cors(), "Content-Type": _JSON})


def _disabled(module: str, headers: dict) -> _Response:
    message = f"Error 500 - set {module} to 'true' in config.yml file"
    return _Response(500, message.encode("utf-8"), {**headers, "Content-Type": _TEXT})


def collect_data(config: MonitorConfig) -> dict:
    """Gather every module's data into one JSON-ready mapping."""
    return _jsonable(
        {
            "hostInfo": check_host_info(config),
            "cpu": check_cpu(config),
            "ram": check_ram(config),
            "disks": check_disks(config),
            "networkDevices": check_network_devices(config),
            "networkBandwidth": check_network_bandwidth(config),
            "processes": check_processes(config),
        }
    )


class MonitorServer:
    """Routes request paths to monitoring handlers.

    Paths without a handler of their own are answered by ``/``.
    """

    def __init__(self, config: MonitorConfig) -> None:
        self.config = config
        self._routes: dict[str, Callable[[], _Response]] = {
            "/": self._all,
            "/favicon.ico": lambda: _Response(204),
            "/host": partial(self._module, check_host_info, "hostInfo"),
            "/cpu": partial(self._module, check_cpu, "cpu"),
            "/ram": partial(self._module, check_ram, "ram"),
            "/disks": partial(self._module, check_disks, "disks"),
            "/networks": partial(
                self._module, check_network_devices, "networkDevices"
            ),
            "/bandwidth": partial(
                self._module, check_network_bandwidth, "networkBandwidth"
            ),
            "/processes": partial(self._module, check_processes, "processes"),
        }

    def _all(self) -> _Response:
        return _json_response(collect_data(self.config))

    def _module(self, check: Callable, module: str) -> _Response:
        if self.config.available(module):
            return _json_response(check(self.config))
        return _disabled(module, _cors())

    def add_endpoint(self, module: str, payload: Any) -> None:
        """Serve ``payload`` at ``/<module>`` when the module is switched on."""
        path = "/" + module
        if path in self._routes:
            raise ValueError(f"multiple registrations for {path}")
        if self.config.available(module):
            self._routes[path] = lambda: _json_response(payload)
        else:
            self._routes[path] = lambda: _disabled(module, {})

    def route(self, path: str) -> _Response:
        """Answer a request for ``path``."""
        handler = self._routes.get(path, self._routes["/"])
        return handler()

    def _make_server(self, port) -> ThreadingHTTPServer:
        monitor = self

        class _Handler(BaseHTTPRequestHandler):
            def log_message(self, format, *args) -> None:
                _logger.debug("%s - " + format, self.address_string(), *args)

            def _respond(self) -> None:
                length = int(self.headers.get("Content-Length") or 0)
                if length > 0:
                    self.rfile.read(length)
                response = monitor.route(urlsplit(self.path).path)
                self.send_response(response.status)
                for key, value in response.headers.items():
                    self.send_header(key, value)
                self.send_header("Content-Length", str(len(response.body)))
                self.end_headers()
                if response.body:
                    self.wfile.write(response.body)

            do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = _respond

        server = ThreadingHTTPServer(("", int(port)), _Handler)
        server.daemon_threads = True
        return server

    def serve(self, port) -> None:
        """Serve HTTP on ``port`` until interrupted."""
        with self._make_server(port) as httpd:
            httpd.serve_forever()


def port_from_config(config: MonitorConfig) -> str:
    """Return the configured integer port as text, or the default port."""
    port = config.values.get("port")
    if isinstance(port, int) and not isinstance(port, bool):
        return str(port)
    return DEFAULT_PORT


def find_available_port(port) -> str:
    """Return the first port from ``port`` upwards that can be listened on."""
    candidate = str(port)
    while True:
        print("Setting port to " + candidate)
        number = int(candidate)
        if not 0 <= number <= _MAX_PORT:
            raise ValueError(f"invalid port {candidate}")
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
                sock.bind(("", number))
                sock.listen()
        except OSError:
            print("Can't listen on port " + candidate)
            candidate = str(number + 1)
        else:
            return candidate


def main(argv=None) -> int:
    """Run the monitoring server."""
    parser = argparse.ArgumentParser(description="Serve system monitoring data.")
    parser.add_argument(
        "--dir", default=None, help="directory holding config.yml (default: cwd)"
    )
    args = parser.parse_args(argv)
    config = MonitorConfig.load(args.dir)
    port = find_available_port(port_from_config(config))
    print("Starting Server at port " + port)
    server = MonitorServer(config)
    server.add_endpoint("mode", "")
    try:
        server.serve(port)
    except OSError as exc:
        print(exc)
    except KeyboardInterrupt:
        pass
    return 0