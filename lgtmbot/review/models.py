"""Typed records for review events and their outcomes."""

from __future__ import annotations

import dataclasses
import enum

from lgtmbot.common.slug import pull_request_ref, repo_slug


@dataclasses.dataclass(frozen=True, slots=True)
class PullRequestContext:
    """Read-only snapshot of a pull request taken from one webhook event.

    The snapshot is never updated; label changes are sent to the platform as
    explicit add and remove calls.
    """

    org: str
    repo: str
    number: int
    author: str
    head_sha: str
    base_ref: str
    labels: frozenset[str] = frozenset()

    @property
    def slug(self) -> str:
        """Return ``org/repo``."""
        return repo_slug(self.org, self.repo)

    @property
    def ref(self) -> str:
        """Return ``org/repo#number`` for log lines."""
        return pull_request_ref(self.org, self.repo, self.number)

    def is_author(self, login: str) -> bool:
        """Return True when ``login`` opened the pull request."""
        return same_identity(self.author, login)


@dataclasses.dataclass(frozen=True, slots=True)
class CommentEvent:
    """A comment was created on a pull request."""

    pull_request: PullRequestContext
    commenter: str
    body: str
    pr_state: str = "open"

    @property
    def is_open(self) -> bool:
        """Return True when the pull request accepts review commands."""
        return self.pr_state.lower() == "open"


@dataclasses.dataclass(frozen=True, slots=True)
class BranchUpdateEvent:
    """New commits were pushed to a pull request's source branch."""

    pull_request: PullRequestContext


type ReviewEvent = CommentEvent | BranchUpdateEvent


class ReviewOutcome(enum.StrEnum):
    """What handling one event did to the pull request."""

    IGNORED = "ignored"
    LGTM_ADDED = "lgtm_added"
    LGTM_REMOVED = "lgtm_removed"
    SELF_OWN_REJECTED = "self_own_rejected"
    PERMISSION_DENIED = "permission_denied"
    LABELS_CLEARED = "labels_cleared"
    LABELS_RETAINED = "labels_retained"
    NO_LGTM_LABELS = "no_lgtm_labels"


def normalize_identity(login: str) -> str:
    """Return the case-insensitive form of a platform login."""
    return login.strip().lower()


def same_identity(left: str, right: str) -> bool:
    """Return True when two logins name the same account."""
    return normalize_identity(left) == normalize_identity(right)
