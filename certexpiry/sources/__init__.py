"""Places a certificate's expiry can be read from."""

from typing import Annotated, Union

from pydantic import Field, TypeAdapter

from .base import BaseSource, require_file
from .live import LiveConnectionSource, fetch_peer_certificate
from .pem import PemFileSource
from .pkcs12 import Pkcs12FileSource

CertificateSource = Annotated[
    Union[PemFileSource, Pkcs12FileSource, LiveConnectionSource],
    Field(discriminator="kind"),
]

source_adapter: TypeAdapter[CertificateSource] = TypeAdapter(CertificateSource)


def parse_source(options: dict) -> CertificateSource:
    """Build the source variant named by the ``kind`` key of ``options``."""
    return source_adapter.validate_python(options)


__all__ = [
    "BaseSource",
    "CertificateSource",
    "LiveConnectionSource",
    "PemFileSource",
    "Pkcs12FileSource",
    "fetch_peer_certificate",
    "parse_source",
    "require_file",
]
