"""Certificate builders and a local TLS server for tests."""

import socket
import ssl
import threading
from datetime import datetime, timedelta, timezone

from asn1crypto import algos
from asn1crypto import pkcs12 as asn1_pkcs12
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

P12_PASSPHRASE = "s3cret"


def make_certificate(
    not_after: datetime,
    common_name: str = "test.example.com",
) -> tuple[x509.Certificate, ec.EllipticCurvePrivateKey]:
    """Build a self-signed certificate expiring at ``not_after``."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    not_before = min(datetime.now(timezone.utc), not_after) - timedelta(days=30)

    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(
            x509.SubjectAlternativeName([x509.DNSName(common_name)]),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    return cert, key


def expiring_in(**kwargs) -> datetime:
    """Expiry date relative to now, truncated to whole seconds like notAfter."""
    return (datetime.now(timezone.utc) + timedelta(**kwargs)).replace(microsecond=0)


def remove_mac(data: bytes) -> bytes:
    """Re-encode a PFX without macData, as `openssl pkcs12 -export -nomac` writes it."""
    pfx = asn1_pkcs12.Pfx.load(data)
    return asn1_pkcs12.Pfx({"version": pfx["version"], "auth_safe": pfx["auth_safe"]}).dump()


def corrupt_mac(data: bytes) -> bytes:
    """Flip a byte of the MAC digest, leaving the encrypted contents intact."""
    pfx = asn1_pkcs12.Pfx.load(data)
    mac_data = pfx["mac_data"]
    digest = bytearray(mac_data["mac"]["digest"].native)
    digest[0] ^= 0xFF
    return asn1_pkcs12.Pfx({
        "version": pfx["version"],
        "auth_safe": pfx["auth_safe"],
        "mac_data": asn1_pkcs12.MacData({
            "mac": algos.DigestInfo({
                "digest_algorithm": mac_data["mac"]["digest_algorithm"],
                "digest": bytes(digest),
            }),
            "mac_salt": mac_data["mac_salt"],
            "iterations": mac_data["iterations"],
        }),
    }).dump()


class LocalTLSServer:
    """One-shot TLS server on localhost recording the SNI it was sent."""

    def __init__(self, cert: x509.Certificate, key, directory):
        cert_file = directory / "server.pem"
        key_file = directory / "server.key"
        cert_file.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
        key_file.write_bytes(
            key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )

        self.server_names: list[str | None] = []
        self.context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        self.context.load_cert_chain(cert_file, key_file)
        self.context.sni_callback = self._record_sni

        self.listener = socket.create_server(("127.0.0.1", 0))
        self.listener.settimeout(5)
        self.port = self.listener.getsockname()[1]
        self.thread = threading.Thread(target=self._serve, daemon=True)
        self.thread.start()

    def _record_sni(self, sslobj, server_name, context):
        self.server_names.append(server_name)

    def _serve(self):
        try:
            conn, _ = self.listener.accept()
        except OSError:
            return
        with conn:
            try:
                with self.context.wrap_socket(conn, server_side=True) as tls:
                    tls.recv(1)
            except (ssl.SSLError, OSError):
                pass

    def close(self):
        self.listener.close()
        self.thread.join(timeout=5)
