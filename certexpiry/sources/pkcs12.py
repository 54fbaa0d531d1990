"""PKCS#12 archive."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Literal

from asn1crypto import pkcs12 as asn1_pkcs12
from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12

from ..errors import ConfigError, NotFoundError, ParseError
from .base import BaseSource, require_file

logger = logging.getLogger(__name__)


def strip_mac(data: bytes) -> bytes | None:
    """Re-encode a PFX without its macData.

    Returns None when the archive has no MAC or is not a PFX structure.
    """
    try:
        pfx = asn1_pkcs12.Pfx.load(data)
        if pfx["mac_data"].native is None:
            return None
        return asn1_pkcs12.Pfx({"version": pfx["version"], "auth_safe": pfx["auth_safe"]}).dump()
    except (ValueError, TypeError):
        return None


def load_archive(data: bytes, passphrase: bytes) -> pkcs12.PKCS12KeyAndCertificates:
    """Decrypt a PKCS#12 archive without relying on its MAC.

    OpenSSL checks the MAC whenever one is present, so an archive whose MAC
    fails is loaded again with the MAC removed. A wrong pass phrase still
    fails decryption.

    Raises:
        ValueError: The archive cannot be decrypted or parsed.
    """
    try:
        return pkcs12.load_pkcs12(data, passphrase)
    except (ValueError, TypeError):
        stripped = strip_mac(data)
        if stripped is None:
            raise
    logger.debug("PKCS#12 MAC check failed, loading without MAC")
    return pkcs12.load_pkcs12(stripped, passphrase)


def leaf_certificate(archive: pkcs12.PKCS12KeyAndCertificates) -> x509.Certificate | None:
    """Pick the end-entity certificate out of a decrypted archive.

    The certificate paired with the private key wins. Archives holding only
    CA bags fall back to the first of those.
    """
    if archive.cert is not None:
        return archive.cert.certificate
    if archive.additional_certs:
        return archive.additional_certs[0].certificate
    return None


class Pkcs12FileSource(BaseSource):
    """Read the expiry of the leaf certificate in a passphrase-protected PKCS#12 file."""
    kind: Literal["pkcs12"] = "pkcs12"
    path: Path
    passphrase: str | None = None

    def describe(self) -> str:
        return f"pkcs12:{self.path}"

    def validate_passphrase(self) -> None:
        if not self.passphrase:
            raise ConfigError("No pass phrase specified for PKCS#12 certificate")

    def fetch_expiry(self) -> datetime:
        self.validate_passphrase()
        require_file(self.path)

        try:
            data = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError(f"No such cert: {self.path}") from exc
        except OSError as exc:
            raise ParseError(f"Unable to read {self.path}: {exc.strerror or exc}") from exc

        try:
            archive = load_archive(data, self.passphrase.encode("utf-8"))
        except (ValueError, TypeError) as exc:
            raise ParseError(
                f"Unable to decrypt PKCS#12 certificate {self.path} "
                "(wrong pass phrase or corrupt archive)"
            ) from exc

        cert = leaf_certificate(archive)
        if cert is None:
            raise ParseError(f"No certificate found in PKCS#12 archive {self.path}")

        logger.debug(
            "Loaded PKCS#12 certificate %s (%d additional)",
            self.path,
            len(archive.additional_certs),
        )
        return cert.not_valid_after_utc
