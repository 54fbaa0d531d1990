"""Pydantic models for CertExpiry check results."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

CHECK_NAME = "CertExpiry"


class Severity(str, Enum):
    """Monitoring severity reported for a check."""
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    @property
    def exit_code(self) -> int:
        """Plugin exit code (Nagios/Sensu convention)."""
        return {
            Severity.OK: 0,
            Severity.WARNING: 1,
            Severity.CRITICAL: 2,
            Severity.UNKNOWN: 3,
        }[self]


class ExpiryStatus(str, Enum):
    """Classification of the time left before expiry."""
    EXPIRED = "expired"
    CRITICAL = "critical"
    WARNING = "warning"
    OK = "ok"


class ExpiryResult(BaseModel):
    """Time left before a certificate expires, floored to a unit and classified."""
    model_config = ConfigDict(frozen=True)

    status: ExpiryStatus = Field(description="Classification against the thresholds")
    value: int = Field(description="Signed time left, floored to the unit")
    unit: str = Field(description="'hours' or 'days'")
    expiry: datetime = Field(description="Certificate notAfter timestamp")

    @property
    def message(self) -> str:
        """Human-readable summary of the time left."""
        if self.status == ExpiryStatus.EXPIRED:
            return f"Expired {self.value} {self.unit} ago"
        return f"{self.value} {self.unit} left"


class CheckResult(BaseModel):
    """Outcome of one invocation, ready to be reported."""
    severity: Severity = Field(description="Severity to report")
    message: str = Field(description="Single-line human-readable message")
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: str | None = Field(default=None, description="Where the certificate came from")
    expiry: datetime | None = Field(default=None, description="Certificate expiration date")
    value: int | None = Field(default=None, description="Time left in the reported unit")
    unit: str | None = Field(default=None, description="Unit of value")
    error: str | None = Field(default=None, description="Error type if the check failed")

    @property
    def is_error(self) -> bool:
        """Check if the result is an error rather than an expiry classification."""
        return self.error is not None

    @property
    def exit_code(self) -> int:
        return self.severity.exit_code

    def status_line(self) -> str:
        """Format the plugin output line, e.g. ``CertExpiry OK: 42 days left``."""
        return f"{CHECK_NAME} {self.severity.value.upper()}: {self.message}"
