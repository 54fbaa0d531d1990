"""CertExpiry - check how long until an X.509 certificate expires."""

__version__ = "0.1.0"
