"""Hosting platform and ownership-file cache clients."""

from __future__ import annotations

from .cache import FileCacheClient, FileCacheConfig, OwnershipFileCache
from .client import GiteeClient, GiteeClientConfig, PlatformClient
from .errors import PlatformAPIError, PlatformConfigError, PlatformResponseShapeError
from .models import Branch, ChangedFile, PullRequestComment, RepositoryFile

__all__ = [
    "Branch",
    "ChangedFile",
    "FileCacheClient",
    "FileCacheConfig",
    "GiteeClient",
    "GiteeClientConfig",
    "OwnershipFileCache",
    "PlatformAPIError",
    "PlatformClient",
    "PlatformConfigError",
    "PlatformResponseShapeError",
    "PullRequestComment",
    "RepositoryFile",
]
