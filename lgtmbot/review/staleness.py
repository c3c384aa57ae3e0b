"""Tree fingerprints hidden in the bot's lgtm confirmations.

When an lgtm label is added, the confirmation comment carries the tree SHA
of the head commit in a hidden HTML input. After a push, a head commit with
the same tree (a rebase or an empty merge) keeps existing approvals.
"""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ

from .models import same_identity

if typ.TYPE_CHECKING:
    from lgtmbot.platform.models import PullRequestComment

FINGERPRINT_TEMPLATE = "<input type=hidden value={tree_sha} />"
_FINGERPRINT = re.compile(r"<input type=hidden value=([0-9A-Fa-f]+) />")


def render_fingerprint(tree_sha: str) -> str:
    """Return the hidden marker that records ``tree_sha``."""
    return FINGERPRINT_TEMPLATE.format(tree_sha=tree_sha)


def extract_fingerprint(body: str) -> str | None:
    """Return the tree SHA hidden in ``body``, if any."""
    match = _FINGERPRINT.search(body)
    if match is None:
        return None
    return match.group(1)


def latest_fingerprint(
    comments: cabc.Sequence[PullRequestComment], bot_login: str
) -> str | None:
    """Return the fingerprint of the newest trustworthy bot confirmation.

    Comments are walked newest first. Only comments written by ``bot_login``
    and never edited count; the first one carrying a marker ends the search.
    None means no approval was recorded, so labels must be cleared.
    """
    for comment in reversed(comments):
        if not same_identity(comment.author, bot_login) or comment.edited:
            continue
        fingerprint = extract_fingerprint(comment.body)
        if fingerprint is not None:
            return fingerprint
    return None
