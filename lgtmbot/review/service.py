"""Apply lgtm commands and source-branch updates to pull request labels.

:class:`ReviewService` owns the label lifecycle. Every mutation is an
explicit call on the platform client; the event's pull request snapshot is
never modified. Policy denials post a notice and return an outcome, while
platform failures propagate so the caller can abort the event.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from lgtmbot.logging import get_logger, log_info

from .labels import (
    LGTM_LABEL,
    LGTM_SELF_OWN_MESSAGE,
    added_notice,
    lgtm_label_for,
    lgtm_labels_on,
    no_permission_notice,
)
from .models import ReviewOutcome
from .staleness import latest_fingerprint, render_fingerprint

if typ.TYPE_CHECKING:
    from lgtmbot.config import BotConfig
    from lgtmbot.platform import PlatformClient

    from .models import BranchUpdateEvent, CommentEvent, PullRequestContext
    from .permission import PermissionResolver

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class ReviewServiceDependencies:
    """Collaborators required by :class:`ReviewService`.

    Attributes
    ----------
    client
        Platform client used for labels, comments and commits.
    permissions
        Resolver consulted before any non-author mutation.
    bot_login
        Login the bot posts comments as; only its comments are trusted as
        fingerprint sources.

    """

    client: PlatformClient
    permissions: PermissionResolver
    bot_login: str


class ReviewService:
    """Label state manager for lgtm labels."""

    def __init__(self, dependencies: ReviewServiceDependencies) -> None:
        """Bind the service to its collaborators."""
        self._client = dependencies.client
        self._permissions = dependencies.permissions
        self._bot_login = dependencies.bot_login

    def add_lgtm(self, event: CommentEvent, config: BotConfig) -> ReviewOutcome:
        """Attach the commenter's lgtm label when they are allowed to."""
        pr = event.pull_request
        actor = event.commenter
        if pr.is_author(actor):
            self._comment(pr, LGTM_SELF_OWN_MESSAGE)
            return ReviewOutcome.SELF_OWN_REJECTED

        if not self._permissions.is_authorized(actor, pr, config):
            self._comment(pr, no_permission_notice(actor, "add"))
            return ReviewOutcome.PERMISSION_DENIED

        # The fingerprint lookup precedes any mutation.
        fingerprint: str | None = None
        if not config.close_store_sha:
            tree_sha = self._client.get_commit_tree_sha(pr.org, pr.repo, pr.head_sha)
            fingerprint = render_fingerprint(tree_sha)

        label = lgtm_label_for(actor, multiple=config.multiple_lgtm_label)
        if label != LGTM_LABEL:
            self._ensure_repo_label(pr, label)
        self._client.add_pr_labels(pr.org, pr.repo, pr.number, [label])
        self._comment(pr, added_notice(actor, fingerprint))

        log_info(logger, "Added %s to %s for %s", label, pr.ref, actor)
        return ReviewOutcome.LGTM_ADDED

    def remove_lgtm(self, event: CommentEvent, config: BotConfig) -> ReviewOutcome:
        """Remove lgtm labels on request.

        The pull request author may drop every lgtm label at once without a
        permission check. Anyone else needs permission and only removes the
        label derived from their own login.
        """
        pr = event.pull_request
        actor = event.commenter
        if pr.is_author(actor):
            return self._remove_all(pr)

        if not self._permissions.is_authorized(actor, pr, config):
            self._comment(pr, no_permission_notice(actor, "remove"))
            return ReviewOutcome.PERMISSION_DENIED

        label = lgtm_label_for(actor, multiple=config.multiple_lgtm_label)
        self._client.remove_pr_labels(pr.org, pr.repo, pr.number, [label])
        log_info(logger, "Removed %s from %s for %s", label, pr.ref, actor)
        return ReviewOutcome.LGTM_REMOVED

    def clear_on_source_change(
        self, event: BranchUpdateEvent, config: BotConfig
    ) -> ReviewOutcome:
        """Invalidate lgtm labels after new commits reach the source branch.

        Labels survive only when the newest trusted fingerprint equals the
        tree of the new head commit, i.e. the push did not change content.
        """
        pr = event.pull_request
        if not lgtm_labels_on(pr.labels):
            return ReviewOutcome.NO_LGTM_LABELS

        if config.close_store_sha:
            return self._remove_all(pr)

        comments = self._client.list_pr_comments(pr.org, pr.repo, pr.number)
        fingerprint = latest_fingerprint(comments, self._bot_login)
        if fingerprint is not None:
            tree_sha = self._client.get_commit_tree_sha(pr.org, pr.repo, pr.head_sha)
            if tree_sha == fingerprint:
                log_info(
                    logger,
                    "Kept lgtm labels on %s: tree %s unchanged",
                    pr.ref,
                    tree_sha,
                )
                return ReviewOutcome.LABELS_RETAINED

        return self._remove_all(pr)

    def _remove_all(self, pr: PullRequestContext) -> ReviewOutcome:
        labels = lgtm_labels_on(pr.labels)
        if not labels:
            return ReviewOutcome.NO_LGTM_LABELS
        self._client.remove_pr_labels(pr.org, pr.repo, pr.number, labels)
        log_info(logger, "Removed %s from %s", ",".join(labels), pr.ref)
        return ReviewOutcome.LABELS_CLEARED

    def _ensure_repo_label(self, pr: PullRequestContext, label: str) -> None:
        if label in self._client.list_repo_labels(pr.org, pr.repo):
            return
        self._client.create_repo_label(pr.org, pr.repo, label)

    def _comment(self, pr: PullRequestContext, body: str) -> None:
        self._client.create_pr_comment(pr.org, pr.repo, pr.number, body)
