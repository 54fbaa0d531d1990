"""Exceptions raised while acquiring and evaluating a certificate."""


class CertExpiryError(Exception):
    """Base class for every error that ends a check as UNKNOWN."""


class ConfigError(CertExpiryError):
    """Options are missing, invalid, or inconsistent."""


class NotFoundError(CertExpiryError):
    """A referenced certificate file does not exist."""


class ParseError(CertExpiryError):
    """Content is not a certificate in the expected encoding, or could not be decrypted."""


class CertConnectionError(CertExpiryError):
    """The TCP connection or TLS handshake with a live host failed."""
