"""Structured log events and error categories for review event handling.

Every handled webhook event produces exactly one ``review.event.*`` line so
operators can follow outcomes per pull request and alert on failures by
category.

Usage
-----
>>> event_logger = ReviewEventLogger()
>>> event_logger.log_event_handled(
...     pr_ref="openeuler/community#7",
...     event_kind="comment",
...     outcome=ReviewOutcome.LGTM_ADDED,
... )

"""

from __future__ import annotations

import enum

from lgtmbot.config import ConfigNotFoundError, ConfigValidationError
from lgtmbot.logging import get_logger, log_error, log_info, log_warning
from lgtmbot.platform.errors import (
    PlatformAPIError,
    PlatformConfigError,
    PlatformResponseShapeError,
)

from .models import ReviewOutcome

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class ReviewEventType(enum.StrEnum):
    """Structured log event types for review handling."""

    EVENT_HANDLED = "review.event.handled"
    EVENT_SKIPPED = "review.event.skipped"
    EVENT_FAILED = "review.event.failed"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in alerts."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (PlatformResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (PlatformConfigError, ErrorCategory.CONFIGURATION),
    (ConfigNotFoundError, ErrorCategory.CONFIGURATION),
    (ConfigValidationError, ErrorCategory.CONFIGURATION),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for alert routing.

    Platform errors without a status code never reached the server and are
    treated as transient, as are 5xx responses.
    """
    if isinstance(exc, PlatformAPIError):
        if exc.status_code is None or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class ReviewEventLogger:
    """Emit structured review events via femtologging."""

    def log_event_handled(
        self, *, pr_ref: str, event_kind: str, outcome: ReviewOutcome
    ) -> None:
        """Log an event that completed, including policy denials."""
        log_info(
            logger,
            "[%s] pr=%s event_kind=%s outcome=%s",
            ReviewEventType.EVENT_HANDLED,
            pr_ref,
            event_kind,
            outcome,
        )

    def log_event_skipped(self, *, pr_ref: str, event_kind: str, reason: str) -> None:
        """Log an event that required no decision."""
        log_info(
            logger,
            "[%s] pr=%s event_kind=%s reason=%s",
            ReviewEventType.EVENT_SKIPPED,
            pr_ref,
            event_kind,
            reason,
        )

    def log_event_failed(
        self, *, pr_ref: str, event_kind: str, error: BaseException
    ) -> None:
        """Log an aborted event with its error category."""
        category = categorize_error(error)
        template = (
            "[%s] pr=%s event_kind=%s error_type=%s error_category=%s "
            "error_message=%s"
        )
        args = (
            ReviewEventType.EVENT_FAILED,
            pr_ref,
            event_kind,
            type(error).__name__,
            category,
            str(error),
        )
        if category is ErrorCategory.TRANSIENT:
            log_warning(logger, template, *args, exc_info=error)
            return
        log_error(logger, template, *args, exc_info=error)
