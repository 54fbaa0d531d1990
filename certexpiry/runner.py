"""Run one expiry check end to end."""

import logging
from datetime import datetime

from .config import CheckConfig
from .errors import CertExpiryError
from .evaluator import evaluate_expiry
from .models import CheckResult, Severity
from .severity import status_to_severity

logger = logging.getLogger(__name__)


def error_result(exc: CertExpiryError, source: str | None = None) -> CheckResult:
    """Wrap a failed check as an UNKNOWN result."""
    return CheckResult(
        severity=Severity.UNKNOWN,
        message=str(exc),
        source=source,
        error=type(exc).__name__,
    )


def run_check(config: CheckConfig, now: datetime | None = None) -> CheckResult:
    """Acquire the configured certificate and classify its expiry.

    Errors from option validation, file access, parsing and the network are
    reported as UNKNOWN results; nothing is retried.

    Args:
        config: Validated check configuration.
        now: Reference time for the evaluation. Defaults to the current time.

    Returns:
        Result carrying severity and message.
    """
    try:
        source = config.build_source()
    except CertExpiryError as exc:
        logger.debug("Invalid source options: %s", exc)
        return error_result(exc)

    description = source.describe()
    logger.debug("Reading certificate expiry from %s", description)

    try:
        expiry = source.fetch_expiry()
    except CertExpiryError as exc:
        logger.debug("Reading %s failed: %s", description, exc)
        return error_result(exc, description)

    result = evaluate_expiry(
        expiry,
        critical=config.critical,
        warning=config.warning,
        hours=config.hours,
        now=now,
    )
    logger.debug("Certificate expires %s: %s", expiry.isoformat(), result.status.value)

    return CheckResult(
        severity=status_to_severity(result.status),
        message=result.message,
        source=description,
        expiry=expiry,
        value=result.value,
        unit=result.unit,
    )
