"""Configuration loader for CertExpiry."""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .sources import CertificateSource, Pkcs12FileSource, parse_source, require_file
from .sources.live import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class CheckConfig(BaseModel):
    """Options for a single expiry check."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    critical: int = Field(description="Time left (hours or days) below which the check is critical")
    warning: int = Field(description="Time left (hours or days) below which the check warns")
    pem: Path | None = None
    pkcs12: Path | None = None
    pkcs12_pass: str | None = None
    host: str | None = None
    port: int | None = Field(default=None, ge=1, le=65535)
    servername: str | None = None
    hours: bool = False
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @property
    def unit(self) -> str:
        return "hours" if self.hours else "days"

    def build_source(self) -> CertificateSource:
        """Validate the source options and build the one source they select.

        Precedence when several are given: pem, then pkcs12, then host/port.

        Raises:
            ConfigError: Host/port or the PKCS#12 pass phrase is missing.
            NotFoundError: The PEM or PKCS#12 file does not exist.
        """
        if self.pem is None and self.pkcs12 is None:
            if not self.host or self.port is None:
                raise ConfigError("Host and port required")
        elif self.pem is not None:
            require_file(self.pem)
        else:
            source = Pkcs12FileSource(path=self.pkcs12, passphrase=self.pkcs12_pass)
            source.validate_passphrase()
            require_file(self.pkcs12)

        if self.pem is not None:
            if self.pkcs12 is not None or self.host:
                logger.warning("Several certificate sources given, using PEM file %s", self.pem)
            options = {"kind": "pem", "path": self.pem}
        elif self.pkcs12 is not None:
            if self.host:
                logger.warning("Both PKCS#12 file and host given, using %s", self.pkcs12)
            options = {"kind": "pkcs12", "path": self.pkcs12, "passphrase": self.pkcs12_pass}
        else:
            options = {
                "kind": "live",
                "host": self.host,
                "port": self.port,
                "servername": self.servername or self.host,
                "timeout": self.timeout,
            }

        try:
            return parse_source(options)
        except ValidationError as exc:
            raise ConfigError(f"Invalid source options: {_format_validation_error(exc)}") from exc


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR} patterns with environment variables."""
    if isinstance(value, str):
        pattern = r'\$\{(\w+)\}'
        for match in re.findall(pattern, value):
            value = value.replace(f"${{{match}}}", os.environ.get(match, ""))
        return value
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read option defaults from a YAML file.

    Keys are the CheckConfig field names. ``${VAR}`` references are expanded
    from the environment.

    Raises:
        ConfigError: The file is missing or is not a YAML mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")

    return substitute_env_vars(raw_config)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "config"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def build_config(path: str | Path | None = None, **overrides: Any) -> CheckConfig:
    """Build the check configuration from an optional file and explicit options.

    Options that are None are ignored so file values survive.

    Args:
        path: Optional YAML file with defaults.
        **overrides: Option values, typically from the command line.

    Returns:
        Validated, immutable configuration.

    Raises:
        ConfigError: File problems or invalid option values.
    """
    raw_config = load_config_file(path) if path is not None else {}
    raw_config.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return CheckConfig.model_validate(raw_config)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {_format_validation_error(exc)}") from exc
