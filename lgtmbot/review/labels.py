"""LGTM label naming and notice texts."""

from __future__ import annotations

import collections.abc as cabc

from .models import normalize_identity

LGTM_LABEL = "lgtm"
# Gitee rejects label names longer than 20 characters.
LABEL_LENGTH_LIMIT = 20

LGTM_ADDED_MESSAGE = "***lgtm*** is added in this pull request by: ***{actor}***. :wave:"
LGTM_SELF_OWN_MESSAGE = (
    "***lgtm*** can not be added in your self-own pull request. :astonished:"
)
LGTM_NO_PERMISSION_MESSAGE = (
    "***@{actor}*** has no permission to {action} ***lgtm*** in this pull request."
    " :astonished:\nPlease contact to the collaborators in this repository."
)


def lgtm_label_for(actor: str, *, multiple: bool) -> str:
    """Return the label ``actor`` attaches when approving.

    With ``multiple`` off every reviewer shares the bare ``lgtm`` label.
    Otherwise the label is ``lgtm-<login>``, cut to the platform's length
    limit.

    Examples
    --------
    >>> lgtm_label_for("Alice", multiple=True)
    'lgtm-alice'
    >>> lgtm_label_for("Alice", multiple=False)
    'lgtm'
    >>> lgtm_label_for("verylongusername123456", multiple=True)
    'lgtm-verylongusernam'

    """
    if not multiple:
        return LGTM_LABEL
    return f"{LGTM_LABEL}-{normalize_identity(actor)}"[:LABEL_LENGTH_LIMIT]


def lgtm_labels_on(labels: cabc.Iterable[str]) -> list[str]:
    """Return the lgtm labels among ``labels``, sorted for stable batch calls."""
    return sorted(label for label in set(labels) if label.startswith(LGTM_LABEL))


def added_notice(actor: str, fingerprint: str | None = None) -> str:
    """Return the confirmation posted after an lgtm label is attached."""
    notice = LGTM_ADDED_MESSAGE.format(actor=actor)
    if fingerprint is None:
        return notice
    return f"{notice}{fingerprint}"


def no_permission_notice(actor: str, action: str) -> str:
    """Return the notice posted when ``actor`` may not ``action`` the label."""
    return LGTM_NO_PERMISSION_MESSAGE.format(actor=actor, action=action)
