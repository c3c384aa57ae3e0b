"""Typed records exchanged with the hosting platform and the file cache.

Wire structs (``msgspec.Struct``) mirror the JSON bodies returned by the
Gitee v5 REST API and the repo-file-cache service. Clients decode into them
and hand the review core the frozen dataclasses defined at the top of this
module, so nothing outside :mod:`lgtmbot.platform` depends on response shape.
"""

from __future__ import annotations

import dataclasses
import datetime as dt  # noqa: TC003 - msgspec resolves annotations at runtime
from pathlib import PurePosixPath

import msgspec

DEFAULT_PLATFORM = "gitee"


@dataclasses.dataclass(frozen=True, slots=True)
class ChangedFile:
    """A file touched by a pull request."""

    filename: str


@dataclasses.dataclass(frozen=True, slots=True)
class PullRequestComment:
    """A comment on a pull request as needed for fingerprint lookups."""

    body: str
    author: str
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def edited(self) -> bool:
        """Return True when the comment was modified after creation."""
        return self.created_at != self.updated_at


@dataclasses.dataclass(frozen=True, slots=True)
class Branch:
    """Identifies one branch of one repository on one platform."""

    org: str
    repo: str
    branch: str
    platform: str = DEFAULT_PLATFORM


@dataclasses.dataclass(frozen=True, slots=True)
class RepositoryFile:
    """A file returned by the ownership-file cache."""

    path: str
    content: str

    @property
    def directory(self) -> str:
        """Return the POSIX directory that contains the file."""
        return str(PurePosixPath(self.path.lstrip("/")).parent)


class GiteeUser(msgspec.Struct, kw_only=True):
    """User reference embedded in Gitee payloads."""

    login: str


class GiteePermission(msgspec.Struct, kw_only=True):
    """Body of ``GET /repos/{owner}/{repo}/collaborators/{user}/permission``."""

    permission: str = ""


class GiteeContent(msgspec.Struct, kw_only=True):
    """Body of ``GET /repos/{owner}/{repo}/contents/{path}``."""

    content: str | None = None
    encoding: str | None = None


class GiteePullFile(msgspec.Struct, kw_only=True):
    """One entry of ``GET /repos/{owner}/{repo}/pulls/{number}/files``."""

    filename: str


class GiteeLabel(msgspec.Struct, kw_only=True):
    """Repository or pull request label."""

    name: str


class GiteeComment(msgspec.Struct, kw_only=True):
    """One entry of ``GET /repos/{owner}/{repo}/pulls/{number}/comments``."""

    body: str = ""
    user: GiteeUser
    created_at: dt.datetime
    updated_at: dt.datetime

    def to_domain(self) -> PullRequestComment:
        """Convert the wire struct into the domain record."""
        return PullRequestComment(
            body=self.body,
            author=self.user.login,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class GiteeTree(msgspec.Struct, kw_only=True):
    """Tree reference of a commit."""

    sha: str


class GiteeCommitDetail(msgspec.Struct, kw_only=True):
    """Inner ``commit`` object of a repository commit."""

    tree: GiteeTree


class GiteeRepoCommit(msgspec.Struct, kw_only=True):
    """Body of ``GET /repos/{owner}/{repo}/commits/{sha}``."""

    sha: str = ""
    commit: GiteeCommitDetail


class CachedFile(msgspec.Struct, kw_only=True):
    """A file entry served by the repo-file-cache service."""

    path: str
    content: str = ""


class CachedFiles(msgspec.Struct, kw_only=True):
    """Files stored for one branch."""

    files: list[CachedFile] = msgspec.field(default_factory=list)


class CacheResponse(msgspec.Struct, kw_only=True):
    """Envelope returned by the repo-file-cache service."""

    data: CachedFiles = msgspec.field(default_factory=CachedFiles)
