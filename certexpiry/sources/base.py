"""Shared behaviour for certificate sources."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from ..errors import NotFoundError


class BaseSource(BaseModel):
    """A place a single certificate's expiry can be read from."""
    model_config = ConfigDict(frozen=True)

    def fetch_expiry(self) -> datetime:
        """Return the certificate's notAfter as a timezone-aware UTC datetime."""
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError


def require_file(path: Path) -> None:
    """Raise NotFoundError unless ``path`` is an existing file."""
    if not path.is_file():
        raise NotFoundError(f"No such cert: {path}")
