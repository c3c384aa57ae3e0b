"""Decide whether an actor may change the lgtm label of a pull request.

The checks run in order and stop at the first grant:

1. the actor's repository role is ``admin`` or ``write``;
2. the actor is listed in the root ``OWNERS`` file of the base branch;
3. the repository is governed by subdirectory ownership, every changed file
   lives under a SIG directory, and the actor is listed in the ``OWNERS``
   file of every one of those directories.

A platform or cache failure at any step is not a denial: it propagates so
the event is aborted without touching labels.
"""

from __future__ import annotations

import typing as typ

from lgtmbot.logging import get_logger, log_debug, log_info
from lgtmbot.ownership import OWNERS_FILE_NAME, decode_ownership_file
from lgtmbot.platform.models import Branch

from .models import normalize_identity

if typ.TYPE_CHECKING:
    from lgtmbot.config import BotConfig, SigOwnership
    from lgtmbot.platform import OwnershipFileCache, PlatformClient

    from .models import PullRequestContext

WRITE_ROLES = frozenset({"admin", "write"})

logger = get_logger(__name__)


class PermissionResolver:
    """Evaluate lgtm permissions against live platform data.

    Nothing is cached between calls; each check reads roles and ownership
    files afresh.
    """

    def __init__(self, client: PlatformClient, cache: OwnershipFileCache) -> None:
        """Bind the resolver to its platform client and ownership-file cache."""
        self._client = client
        self._cache = cache

    def is_authorized(
        self, actor: str, pr: PullRequestContext, config: BotConfig
    ) -> bool:
        """Return True when ``actor`` may add or remove lgtm on ``pr``.

        Raises
        ------
        PlatformAPIError
            If a role, file, change list or cache lookup fails.

        """
        role = self._client.get_user_permission(pr.org, pr.repo, actor)
        if role.lower() in WRITE_ROLES:
            log_debug(logger, "Granted %s on %s by role %s", actor, pr.ref, role)
            return True

        login = normalize_identity(actor)
        if login in self._root_owners(pr):
            log_debug(
                logger, "Granted %s on %s by root %s", actor, pr.ref, OWNERS_FILE_NAME
            )
            return True

        sig = config.sig_ownership
        if not sig.governs(pr.org, pr.repo):
            return False

        return self._owns_every_sig_directory(login, pr, sig)

    def _root_owners(self, pr: PullRequestContext) -> frozenset[str]:
        content = self._client.get_file_content(
            pr.org, pr.repo, OWNERS_FILE_NAME, pr.base_ref
        )
        return decode_ownership_file(content, source=f"{pr.slug}:{OWNERS_FILE_NAME}")

    def _owning_directories(
        self, pr: PullRequestContext, sig: SigOwnership
    ) -> set[str] | None:
        """Return the SIG directories touched by ``pr``.

        None means at least one change falls outside every SIG directory, or
        nothing changed at all.
        """
        directories: set[str] = set()
        for changed in self._client.list_changed_files(pr.org, pr.repo, pr.number):
            directory = sig.owning_directory(changed.filename)
            if directory is None:
                return None
            directories.add(directory)
        return directories or None

    def _owns_every_sig_directory(
        self, login: str, pr: PullRequestContext, sig: SigOwnership
    ) -> bool:
        directories = self._owning_directories(pr, sig)
        if directories is None:
            return False

        files = self._cache.get_files(
            Branch(org=pr.org, repo=pr.repo, branch=pr.base_ref),
            OWNERS_FILE_NAME,
            recursive=True,
        )
        if not files:
            log_info(
                logger,
                "No cached %s files for %s on branch %s; denying",
                OWNERS_FILE_NAME,
                pr.slug,
                pr.base_ref,
            )
            return False

        owners_by_directory = {
            file.directory: file for file in files if file.directory in directories
        }
        for directory in sorted(directories):
            owners_file = owners_by_directory.get(directory)
            if owners_file is None:
                return False
            owners = decode_ownership_file(
                owners_file.content, source=f"{pr.slug}:{owners_file.path}"
            )
            if login not in owners:
                return False
        return True
