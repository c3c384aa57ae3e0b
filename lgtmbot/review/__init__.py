"""Review decision core: commands, permissions and the lgtm label lifecycle.

Wire the core together::

    from lgtmbot.review import (
        PermissionResolver,
        ReviewDispatcher,
        ReviewService,
        ReviewServiceDependencies,
    )

    permissions = PermissionResolver(client, cache)
    service = ReviewService(
        ReviewServiceDependencies(
            client=client, permissions=permissions, bot_login="review-bot"
        )
    )
    dispatcher = ReviewDispatcher(configuration, service)
    dispatcher.dispatch(event)
"""

from __future__ import annotations

from .commands import ReviewCommand, classify_comment
from .dispatch import ReviewDispatcher
from .labels import LABEL_LENGTH_LIMIT, LGTM_LABEL, lgtm_label_for, lgtm_labels_on
from .models import (
    BranchUpdateEvent,
    CommentEvent,
    PullRequestContext,
    ReviewEvent,
    ReviewOutcome,
)
from .observability import ErrorCategory, ReviewEventLogger, categorize_error
from .permission import PermissionResolver
from .service import ReviewService, ReviewServiceDependencies
from .staleness import extract_fingerprint, latest_fingerprint, render_fingerprint

__all__ = [
    "LABEL_LENGTH_LIMIT",
    "LGTM_LABEL",
    "BranchUpdateEvent",
    "CommentEvent",
    "ErrorCategory",
    "PermissionResolver",
    "PullRequestContext",
    "ReviewCommand",
    "ReviewDispatcher",
    "ReviewEvent",
    "ReviewEventLogger",
    "ReviewOutcome",
    "ReviewService",
    "ReviewServiceDependencies",
    "categorize_error",
    "classify_comment",
    "extract_fingerprint",
    "latest_fingerprint",
    "lgtm_label_for",
    "lgtm_labels_on",
    "render_fingerprint",
]
