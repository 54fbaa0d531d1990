"""Map expiry classifications to reported severities."""

from .models import ExpiryStatus, Severity


def status_to_severity(status: ExpiryStatus) -> Severity:
    """Get the severity reported for an expiry classification.

    An expired certificate is reported as critical.
    """
    return {
        ExpiryStatus.EXPIRED: Severity.CRITICAL,
        ExpiryStatus.CRITICAL: Severity.CRITICAL,
        ExpiryStatus.WARNING: Severity.WARNING,
        ExpiryStatus.OK: Severity.OK,
    }[status]


def get_severity_color(severity: Severity) -> str:
    """Get a Rich color name for a severity level.

    Args:
        severity: Severity level.

    Returns:
        Rich color name.
    """
    return {
        Severity.CRITICAL: "red",
        Severity.WARNING: "yellow",
        Severity.UNKNOWN: "magenta",
        Severity.OK: "green",
    }.get(severity, "white")
