"""Typed per-repository configuration for the review bot."""

from __future__ import annotations

import functools
import re

import msgspec

from lgtmbot.common.slug import repo_slug

DEFAULT_SIG_PATH_PATTERN = r"^(?P<owner_dir>sig/[-\w]+)/.+"
OWNER_DIR_GROUP = "owner_dir"
_OWNER_DIR_DEPTH = 2


@functools.cache
def compile_path_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a subdirectory path pattern once per process."""
    return re.compile(pattern)


class SigOwnership(msgspec.Struct, kw_only=True, frozen=True):
    """Subdirectory ownership governance.

    When a repository is governed, an actor missing from the root ``OWNERS``
    file may still approve a pull request whose changes all live under
    directories (SIG directories) whose own ``OWNERS`` files list them.

    Attributes
    ----------
    enabled
        Master switch for subdirectory governance.
    path_pattern
        Regular expression every changed path must match. A named group
        ``owner_dir`` selects the owning directory; without it the first two
        path segments are used.
    repos
        Governed repositories, as ``org/repo`` slugs or bare repository names.

    """

    enabled: bool = False
    path_pattern: str = DEFAULT_SIG_PATH_PATTERN
    repos: list[str] = msgspec.field(default_factory=list)

    def governs(self, org: str, repo: str) -> bool:
        """Return True when subdirectory ownership applies to ``org/repo``."""
        if not self.enabled:
            return False
        return repo_slug(org, repo) in self.repos or repo in self.repos

    def owning_directory(self, path: str) -> str | None:
        """Return the owning directory for ``path`` or None when it does not match."""
        match = compile_path_pattern(self.path_pattern).match(path)
        if match is None:
            return None
        if OWNER_DIR_GROUP in match.re.groupindex:
            return match.group(OWNER_DIR_GROUP)
        return "/".join(path.split("/")[:_OWNER_DIR_DEPTH])


class BotConfig(msgspec.Struct, kw_only=True, frozen=True):
    """Review bot settings for a set of organisations or repositories.

    Attributes
    ----------
    repos
        ``org`` or ``org/repo`` entries this item applies to.
    excluded_repos
        ``org/repo`` entries excluded from an organisation-wide item.
    multiple_lgtm_label
        Give every reviewer a personal ``lgtm-<login>`` label instead of the
        shared ``lgtm`` label.
    close_store_sha
        Do not record the tree fingerprint when approving; any later source
        branch update then clears every lgtm label.
    sig_ownership
        Subdirectory ownership governance.

    """

    repos: list[str]
    excluded_repos: list[str] = msgspec.field(default_factory=list)
    multiple_lgtm_label: bool = False
    close_store_sha: bool = False
    sig_ownership: SigOwnership = msgspec.field(default_factory=SigOwnership)


class Configuration(msgspec.Struct, kw_only=True, frozen=True):
    """All configured items, loaded once at start-up."""

    config_items: list[BotConfig] = msgspec.field(default_factory=list)

    def config_for(self, org: str, repo: str) -> BotConfig | None:
        """Return the item that applies to ``org/repo``.

        An item naming the repository explicitly wins over one naming its
        organisation; an organisation-wide item is skipped when it excludes
        the repository.
        """
        slug = repo_slug(org, repo)
        org_match: BotConfig | None = None
        for item in self.config_items:
            if slug in item.repos:
                return item
            if (
                org_match is None
                and org in item.repos
                and slug not in item.excluded_repos
            ):
                org_match = item
        return org_match
