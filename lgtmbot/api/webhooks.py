"""Decode Gitee webhook deliveries into review events.

Only two deliveries matter to the review bot:

* ``Note Hook`` with ``action == "comment"`` on a pull request becomes a
  :class:`~lgtmbot.review.models.CommentEvent`;
* ``Merge Request Hook`` with ``action == "update"`` and
  ``action_desc == "source_branch_changed"`` becomes a
  :class:`~lgtmbot.review.models.BranchUpdateEvent`.

Everything else, including metadata-only pull request edits, decodes to
``None`` and is acknowledged without further work.
"""

from __future__ import annotations

import enum

import msgspec

from lgtmbot.review.models import (
    BranchUpdateEvent,
    CommentEvent,
    PullRequestContext,
    ReviewEvent,
)

from .errors import InvalidInputError

EVENT_HEADER = "X-Gitee-Event"
_NOTEABLE_PULL_REQUEST = "PullRequest"
_ACTION_COMMENT = "comment"
_ACTION_UPDATE = "update"
_ACTION_DESC_SOURCE_BRANCH_CHANGED = "source_branch_changed"


class GiteeEventType(enum.StrEnum):
    """Values of the ``X-Gitee-Event`` header handled by the bot."""

    NOTE = "Note Hook"
    MERGE_REQUEST = "Merge Request Hook"


class HookUser(msgspec.Struct, kw_only=True):
    """User reference in webhook payloads."""

    login: str


class HookLabel(msgspec.Struct, kw_only=True):
    """Label attached to the pull request."""

    name: str


class HookBranch(msgspec.Struct, kw_only=True):
    """Head or base branch of the pull request."""

    ref: str = ""
    sha: str = ""


class HookPullRequest(msgspec.Struct, kw_only=True):
    """Pull request section of a webhook payload."""

    number: int
    state: str = ""
    user: HookUser
    head: HookBranch
    base: HookBranch
    labels: list[HookLabel] = msgspec.field(default_factory=list)


class HookRepository(msgspec.Struct, kw_only=True):
    """Repository section of a webhook payload."""

    namespace: str
    path: str


class HookComment(msgspec.Struct, kw_only=True):
    """Comment section of a note payload."""

    body: str = ""
    user: HookUser


class NoteHook(msgspec.Struct, kw_only=True):
    """``Note Hook`` delivery."""

    action: str = ""
    noteable_type: str = ""
    comment: HookComment | None = None
    pull_request: HookPullRequest | None = None
    repository: HookRepository


class MergeRequestHook(msgspec.Struct, kw_only=True):
    """``Merge Request Hook`` delivery."""

    action: str = ""
    action_desc: str = ""
    pull_request: HookPullRequest
    repository: HookRepository


def _context(repository: HookRepository, pr: HookPullRequest) -> PullRequestContext:
    return PullRequestContext(
        org=repository.namespace,
        repo=repository.path,
        number=pr.number,
        author=pr.user.login,
        head_sha=pr.head.sha,
        base_ref=pr.base.ref,
        labels=frozenset(label.name for label in pr.labels),
    )


def _decode[T](body: bytes, type_: type[T]) -> T:
    try:
        return msgspec.json.decode(body, type=type_)
    except msgspec.DecodeError as exc:
        raise InvalidInputError(f"malformed webhook payload: {exc}") from exc


def decode_note_hook(body: bytes) -> CommentEvent | None:
    """Return the comment event carried by a ``Note Hook`` delivery."""
    hook = _decode(body, NoteHook)
    if hook.action != _ACTION_COMMENT or hook.noteable_type != _NOTEABLE_PULL_REQUEST:
        return None
    if hook.pull_request is None or hook.comment is None:
        raise InvalidInputError("pull request comment without pull_request or comment")
    return CommentEvent(
        pull_request=_context(hook.repository, hook.pull_request),
        commenter=hook.comment.user.login,
        body=hook.comment.body,
        pr_state=hook.pull_request.state,
    )


def decode_merge_request_hook(body: bytes) -> BranchUpdateEvent | None:
    """Return the branch-update event carried by a ``Merge Request Hook``."""
    hook = _decode(body, MergeRequestHook)
    if (
        hook.action != _ACTION_UPDATE
        or hook.action_desc != _ACTION_DESC_SOURCE_BRANCH_CHANGED
    ):
        return None
    return BranchUpdateEvent(pull_request=_context(hook.repository, hook.pull_request))


def decode_webhook(event_type: str | None, body: bytes) -> ReviewEvent | None:
    """Decode a delivery by its ``X-Gitee-Event`` header value."""
    match event_type:
        case GiteeEventType.NOTE:
            return decode_note_hook(body)
        case GiteeEventType.MERGE_REQUEST:
            return decode_merge_request_hook(body)
        case _:
            return None
