"""Shared fixtures: generated certificates, archives and a local TLS server."""

import socket
from datetime import datetime

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs12

from .helpers import P12_PASSPHRASE, LocalTLSServer, corrupt_mac, make_certificate, remove_mac


@pytest.fixture
def write_pem(tmp_path):
    """Write a PEM certificate expiring at the given time and return its path."""
    def _write(not_after: datetime, name: str = "cert.pem"):
        cert, _ = make_certificate(not_after)
        path = tmp_path / name
        path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
        return path
    return _write


@pytest.fixture
def write_pkcs12(tmp_path):
    """Write a PKCS#12 archive holding a certificate (and key) expiring at the given time.

    ``mac`` is "valid", "none" (no macData) or "corrupt" (digest does not verify).
    """
    def _write(
        not_after: datetime,
        passphrase: str = P12_PASSPHRASE,
        name: str = "cert.p12",
        with_key: bool = True,
        mac: str = "valid",
    ):
        cert, key = make_certificate(not_after)
        encryption = serialization.BestAvailableEncryption(passphrase.encode())
        if with_key:
            data = pkcs12.serialize_key_and_certificates(b"test", key, cert, None, encryption)
        else:
            data = pkcs12.serialize_key_and_certificates(b"test", None, None, [cert], encryption)
        if mac == "none":
            data = remove_mac(data)
        elif mac == "corrupt":
            data = corrupt_mac(data)
        path = tmp_path / name
        path.write_bytes(data)
        return path
    return _write


@pytest.fixture
def tls_server(tmp_path):
    """Start a local TLS server presenting a certificate expiring at the given time."""
    servers = []

    def _start(not_after: datetime) -> LocalTLSServer:
        cert, key = make_certificate(not_after, common_name="localhost")
        server = LocalTLSServer(cert, key, tmp_path)
        servers.append(server)
        return server

    yield _start

    for server in servers:
        server.close()


@pytest.fixture
def closed_port():
    """A localhost port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return port


@pytest.fixture
def silent_server():
    """A localhost listener that accepts TCP but never answers the TLS handshake."""
    listener = socket.create_server(("127.0.0.1", 0))
    yield listener.getsockname()[1]
    listener.close()
