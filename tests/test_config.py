import os
import ssl

import pytest

from logdistr.config import TLSConfig, config_file, setup_tls_config


def test_config_file_uses_config_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("CONFIG_DIR", str(tmp_path))
    assert config_file("ca.pem") == os.path.join(str(tmp_path), "ca.pem")


def test_config_file_defaults_to_home(monkeypatch, tmp_path):
    monkeypatch.delenv("CONFIG_DIR", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert config_file("policy.csv") == os.path.join(
        str(tmp_path), ".godistrserv", "policy.csv"
    )


def test_client_context_verifies_server():
    context = setup_tls_config(TLSConfig())
    assert context.protocol == ssl.PROTOCOL_TLS_CLIENT
    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.check_hostname is True


def test_server_context_without_ca_does_not_require_client_cert():
    context = setup_tls_config(TLSConfig(server=True))
    assert context.protocol == ssl.PROTOCOL_TLS_SERVER
    assert context.verify_mode == ssl.CERT_NONE


def test_unparsable_ca_is_rejected(tmp_path):
    ca_file = tmp_path / "ca.pem"
    ca_file.write_text("not a certificate")
    with pytest.raises(ValueError, match="failed to parse root certificate"):
        setup_tls_config(TLSConfig(ca_file=str(ca_file)))


def test_malformed_pem_block_is_rejected(tmp_path):
    ca_file = tmp_path / "ca.pem"
    ca_file.write_text(
        "-----BEGIN CERTIFICATE-----\nAAAA\n-----END CERTIFICATE-----\n"
    )
    with pytest.raises(ValueError, match="failed to parse root certificate"):
        setup_tls_config(TLSConfig(ca_file=str(ca_file), server=True))


def test_missing_ca_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        setup_tls_config(TLSConfig(ca_file=str(tmp_path / "missing.pem")))


def test_missing_certificate_raises(tmp_path):
    with pytest.raises(OSError):
        setup_tls_config(
            TLSConfig(
                cert_file=str(tmp_path / "server.pem"),
                key_file=str(tmp_path / "server-key.pem"),
                server=True,
            )
        )