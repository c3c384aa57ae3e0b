"""Classify pull request comments into review commands.

Only two commands are recognised, each on a line of its own and in any
case::

    /lgtm
    /lgtm cancel

The ``/lgtm`` pattern ends right after the keyword (apart from trailing
whitespace), so a ``/lgtm cancel`` line can never match it.
"""

from __future__ import annotations

import enum
import re

_ADD_LGTM = re.compile(r"^/lgtm\s*$", re.IGNORECASE | re.MULTILINE)
_REMOVE_LGTM = re.compile(r"^/lgtm[ \t]+cancel\s*$", re.IGNORECASE | re.MULTILINE)


class ReviewCommand(enum.StrEnum):
    """Intent expressed by a comment."""

    ADD = "add"
    REMOVE = "remove"
    NONE = "none"


def classify_comment(body: str) -> ReviewCommand:
    """Return the review command carried by ``body``.

    Examples
    --------
    >>> classify_comment("/LGTM  ")
    <ReviewCommand.ADD: 'add'>
    >>> classify_comment("/lgtm cancel")
    <ReviewCommand.REMOVE: 'remove'>
    >>> classify_comment("please lgtm")
    <ReviewCommand.NONE: 'none'>

    """
    if _ADD_LGTM.search(body):
        return ReviewCommand.ADD
    if _REMOVE_LGTM.search(body):
        return ReviewCommand.REMOVE
    return ReviewCommand.NONE
