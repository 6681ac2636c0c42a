"""Centralized error normalization for client-facing messages.

Every store or unexpected failure surfaced to an API client passes through
this module to ensure:
- Consistent structure (user_message, error_category, retryable)
- No stack traces, SQL, or connection strings in responses
- Detailed info logged for debugging
"""

import logging
from dataclasses import dataclass

from blog_api.core.logging import EVENT_UNKNOWN_ERROR, log_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedError:
    """Standardized error representation for API responses."""

    user_message: str
    error_category: str
    retryable: bool
    http_status: int = 500


def normalize_store_error(
    exc: Exception,
    *,
    operation: str,
    retryable: bool = False,
) -> NormalizedError:
    """Normalize a document store failure into a safe message.

    Busy/locked stores map to 503 so clients know a retry may succeed.
    """
    if retryable:
        error = NormalizedError(
            user_message=(
                "The post store is temporarily busy. Please try again in a moment."
            ),
            error_category="store",
            retryable=True,
            http_status=503,
        )
    else:
        error = NormalizedError(
            user_message="A storage error occurred. Please try again.",
            error_category="store",
            retryable=False,
            http_status=500,
        )

    log_event(
        logger, "error", "store_error_normalized",
        operation=operation,
        error_category=error.error_category,
        retryable=error.retryable,
        detail=str(exc),
    )
    return error


def normalize_validation_error(
    messages: list[str],
) -> NormalizedError:
    """Normalize validation errors into a single client-facing message."""
    joined = "; ".join(messages)
    return NormalizedError(
        user_message=f"Validation failed: {joined}",
        error_category="validation",
        retryable=False,
        http_status=400,
    )


def normalize_unknown_error(
    exc: Exception,
    *,
    operation: str,
) -> NormalizedError:
    """Normalize an unexpected error into a safe generic message."""
    log_event(
        logger, "exception", EVENT_UNKNOWN_ERROR,
        operation=operation,
        error_category="unknown",
        detail=f"{type(exc).__name__}: {exc}",
    )
    return NormalizedError(
        user_message="An unexpected error occurred. Please try again.",
        error_category="unknown",
        retryable=False,
        http_status=500,
    )
