"""PEM encoded certificate file."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Literal

from cryptography import x509

from ..errors import NotFoundError, ParseError
from .base import BaseSource, require_file

logger = logging.getLogger(__name__)


class PemFileSource(BaseSource):
    """Read the expiry of the first certificate in a PEM file."""
    kind: Literal["pem"] = "pem"
    path: Path

    def describe(self) -> str:
        return f"pem:{self.path}"

    def fetch_expiry(self) -> datetime:
        require_file(self.path)

        try:
            data = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError(f"No such cert: {self.path}") from exc
        except OSError as exc:
            raise ParseError(f"Unable to read {self.path}: {exc.strerror or exc}") from exc

        try:
            cert = x509.load_pem_x509_certificate(data)
        except ValueError as exc:
            raise ParseError(f"Invalid PEM certificate {self.path}: {exc}") from exc

        logger.debug("Loaded PEM certificate %s (serial %x)", self.path, cert.serial_number)
        return cert.not_valid_after_utc
