"""Locations of certificate and ACL files, and TLS context setup."""

from __future__ import annotations

import os
import ssl
from dataclasses import dataclass
from pathlib import Path

_CONFIG_DIR_NAME = ".godistrserv"
_PEM_CERTIFICATE = "-----BEGIN CERTIFICATE-----"


def config_file(filename: str) -> str:
    """Return the path of ``filename`` in ``$CONFIG_DIR`` or ``~/.godistrserv``."""
    directory = os.environ.get("CONFIG_DIR")
    if directory:
        return os.path.join(directory, filename)
    return os.path.join(str(Path.home()), _CONFIG_DIR_NAME, filename)


CA_FILE = config_file("ca.pem")
SERVER_CERT_FILE = config_file("server.pem")
SERVER_KEY_FILE = config_file("server-key.pem")
ROOT_CLIENT_CERT_FILE = config_file("root-client.pem")
ROOT_CLIENT_KEY_FILE = config_file("root-client-key.pem")
NOBODY_CLIENT_CERT_FILE = config_file("nobody-client.pem")
NOBODY_CLIENT_KEY_FILE = config_file("nobody-client-key.pem")
ACL_MODEL_FILE = config_file("model.conf")
ACL_POLICY_FILE = config_file("policy.csv")


@dataclass
class TLSConfig:
    """Files and role for building a TLS context.

    ``server_address`` is the name a client verifies the server against; pass
    it as ``server_hostname`` when wrapping a socket.
    """

    cert_file: str = ""
    key_file: str = ""
    ca_file: str = ""
    server_address: str = ""
    server: bool = False


def _load_ca(context: ssl.SSLContext, ca_file: str) -> None:
    with open(ca_file, encoding="ascii", errors="replace") as handle:
        pem = handle.read()
    error = ValueError(f'failed to parse root certificate: "{ca_file}"')
    if _PEM_CERTIFICATE not in pem:
        raise error
    try:
        context.load_verify_locations(cadata=pem)
    except ssl.SSLError as exc:
        raise error from exc


def setup_tls_config(cfg: TLSConfig) -> ssl.SSLContext:
    """Build a server or client TLS context from ``cfg``.

    A server given a CA requires and verifies client certificates; a client
    given a CA trusts only that CA, otherwise the system roots.
    """
    protocol = ssl.PROTOCOL_TLS_SERVER if cfg.server else ssl.PROTOCOL_TLS_CLIENT
    context = ssl.SSLContext(protocol)
    if cfg.cert_file and cfg.key_file:
        context.load_cert_chain(cfg.cert_file, cfg.key_file)
    if cfg.ca_file:
        _load_ca(context, cfg.ca_file)
        if cfg.server:
            context.verify_mode = ssl.CERT_REQUIRED
    elif not cfg.server:
        context.load_default_certs()
    return context