"""Decode base64 ``OWNERS`` payloads into sets of authorised identities.

Ownership files come straight from repositories and may be corrupt. A payload
that cannot be decoded grants nobody: the failure is logged and an empty set
is returned so the permission check carries on and denies.
"""

from __future__ import annotations

import base64

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from lgtmbot.logging import get_logger, log_warning

from .models import OwnersFile

OWNERS_FILE_NAME = "OWNERS"
YAML_VERSION = (1, 2)

logger = get_logger(__name__)


def decode_ownership_file(
    content: str | None, *, source: str = OWNERS_FILE_NAME
) -> frozenset[str]:
    """Return the lowercase identities listed in a base64 ``OWNERS`` payload.

    Parameters
    ----------
    content
        Base64 payload as returned by the platform or the file cache. ``None``
        or an empty string means the file does not exist.
    source
        Path of the file, used only in log messages.

    Returns
    -------
    frozenset[str]
        Union of ``maintainers`` and ``committers``; empty on any decode
        failure.

    """
    if not content or not content.strip():
        return frozenset()

    try:
        raw = base64.b64decode("".join(content.split()), validate=True)
        text = raw.decode("utf-8")
    except ValueError as exc:
        log_warning(logger, "Failed to decode ownership file %s: %s", source, exc)
        return frozenset()

    try:
        loaded = _yaml().load(text)
    except (YAMLError, ValueError) as exc:
        log_warning(logger, "Failed to parse ownership file %s: %s", source, exc)
        return frozenset()

    if loaded is None:
        return frozenset()

    try:
        owners = msgspec.convert(loaded, type=OwnersFile)
    except msgspec.ValidationError as exc:
        log_warning(logger, "Ownership file %s has an invalid layout: %s", source, exc)
        return frozenset()

    return owners.identities()


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    return yaml
