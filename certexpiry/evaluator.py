"""Classify the time left before a certificate expires."""

from datetime import datetime, timedelta, timezone

from .models import ExpiryResult, ExpiryStatus

HOUR = timedelta(hours=1)
DAY = timedelta(days=1)


def time_left(expiry: datetime, hours: bool = False, now: datetime | None = None) -> tuple[int, str]:
    """Floor the time between now and ``expiry`` to whole hours or days.

    Flooring goes toward negative infinity, so one second past expiry is
    already -1.

    Returns:
        Tuple of (value, unit label).
    """
    if now is None:
        now = datetime.now(timezone.utc)
    delta = expiry - now
    if hours:
        return delta // HOUR, "hours"
    return delta // DAY, "days"


def evaluate_expiry(
    expiry: datetime,
    critical: int,
    warning: int,
    hours: bool = False,
    now: datetime | None = None,
) -> ExpiryResult:
    """Classify a certificate expiry against warning and critical thresholds.

    Thresholds are in the same unit as the result (hours when ``hours`` is
    set, days otherwise). Checks run in order and the first match wins:
    expired, below critical, below warning, ok.

    Args:
        expiry: Certificate notAfter, timezone-aware.
        critical: Time left below which the result is critical.
        warning: Time left below which the result is a warning.
        hours: Count in hours instead of days.
        now: Reference time. Defaults to the current UTC time.

    Returns:
        ExpiryResult with status, value and unit.
    """
    value, unit = time_left(expiry, hours, now)

    if value < 0:
        status = ExpiryStatus.EXPIRED
    elif value < critical:
        status = ExpiryStatus.CRITICAL
    elif value < warning:
        status = ExpiryStatus.WARNING
    else:
        status = ExpiryStatus.OK

    return ExpiryResult(status=status, value=value, unit=unit, expiry=expiry)
