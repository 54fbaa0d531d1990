"""Certificate presented by a live TLS endpoint."""

import logging
import socket
import ssl
from datetime import datetime
from typing import Literal

from cryptography import x509
from pydantic import Field

from ..errors import CertConnectionError, ParseError
from .base import BaseSource

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def fetch_peer_certificate(
    host: str,
    port: int,
    servername: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """Complete a TLS handshake and return the server's leaf certificate in DER form.

    The chain and hostname are not verified; only the presented certificate
    is of interest.

    Args:
        host: Host to connect to.
        port: Port number.
        servername: SNI value. Defaults to ``host``.
        timeout: Bound on the TCP connect and on the handshake, in seconds.

    Returns:
        DER encoded certificate.

    Raises:
        CertConnectionError: Connect, DNS, timeout or handshake failure.
        ParseError: The server presented no certificate.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE

    try:
        with socket.create_connection((host, port), timeout=timeout) as sock:
            with context.wrap_socket(sock, server_hostname=servername or host) as ssock:
                logger.debug("Handshake with %s:%d done (%s)", host, port, ssock.version())
                cert_der = ssock.getpeercert(binary_form=True)
    except socket.timeout as exc:
        raise CertConnectionError(f"Connection to {host}:{port} timed out after {timeout}s") from exc
    except socket.gaierror as exc:
        raise CertConnectionError(f"DNS resolution failed for {host}: {exc}") from exc
    except ConnectionRefusedError as exc:
        raise CertConnectionError(f"Connection refused on {host}:{port}") from exc
    except ssl.SSLError as exc:
        raise CertConnectionError(f"SSL error with {host}:{port}: {exc}") from exc
    except OSError as exc:
        raise CertConnectionError(f"Unable to connect to {host}:{port}: {exc}") from exc

    if not cert_der:
        raise ParseError(f"No certificate received from {host}:{port}")
    return cert_der


class LiveConnectionSource(BaseSource):
    """Read the expiry of the certificate a TLS server presents."""
    kind: Literal["live"] = "live"
    host: str
    port: int = Field(ge=1, le=65535)
    servername: str | None = None
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @property
    def sni(self) -> str:
        return self.servername or self.host

    def describe(self) -> str:
        if self.sni != self.host:
            return f"{self.host}:{self.port} (SNI {self.sni})"
        return f"{self.host}:{self.port}"

    def fetch_expiry(self) -> datetime:
        cert_der = fetch_peer_certificate(self.host, self.port, self.sni, self.timeout)
        try:
            cert = x509.load_der_x509_certificate(cert_der)
        except ValueError as exc:
            raise ParseError(f"Invalid certificate from {self.describe()}: {exc}") from exc
        return cert.not_valid_after_utc
