"""Client for the repo-file-cache service.

The cache stores selected files (``OWNERS`` in particular) for every branch
it tracks, so the permission resolver can read all subdirectory ownership
files of a branch in one round trip.
"""

from __future__ import annotations

import dataclasses
import os
import typing as typ
from urllib.parse import quote

import httpx
import msgspec

from .errors import PlatformAPIError, PlatformConfigError, PlatformResponseShapeError
from .models import Branch, CacheResponse, RepositoryFile

_HTTP_ERROR_STATUS_THRESHOLD = 400


class OwnershipFileCache(typ.Protocol):
    """Batch lookup of same-named files across a branch tree."""

    def get_files(
        self, branch: Branch, file_name: str, *, recursive: bool = True
    ) -> list[RepositoryFile]:
        """Return every file called ``file_name`` stored for ``branch``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class FileCacheConfig:
    """Configuration for the repo-file-cache client."""

    endpoint: str
    timeout_s: float = 20.0

    @classmethod
    def from_env(cls) -> FileCacheConfig:
        """Build configuration from ``LGTMBOT_CACHE_ENDPOINT``."""
        endpoint = os.environ.get("LGTMBOT_CACHE_ENDPOINT", "").strip()
        if not endpoint:
            raise PlatformConfigError.missing_setting("LGTMBOT_CACHE_ENDPOINT")
        return cls(endpoint=endpoint.rstrip("/"))


class FileCacheClient:
    """httpx implementation of :class:`OwnershipFileCache`."""

    def __init__(
        self,
        config: FileCacheConfig,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialise the client against the configured cache endpoint."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=config.timeout_s)

    def close(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            self._client.close()

    def get_files(
        self, branch: Branch, file_name: str, *, recursive: bool = True
    ) -> list[RepositoryFile]:
        """Fetch every cached ``file_name`` beneath ``branch``'s tree."""
        url = "/".join(
            (
                self._config.endpoint,
                "v1/file",
                branch.platform,
                branch.org,
                branch.repo,
                quote(branch.branch, safe=""),
                quote(file_name, safe=""),
            )
        )
        try:
            response = self._client.get(
                url, params={"recursive": "true" if recursive else "false"}
            )
        except httpx.HTTPError as exc:
            raise PlatformAPIError.transport_error("get cached files", exc) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise PlatformAPIError.http_error("get cached files", response.status_code)

        try:
            payload = msgspec.json.decode(response.content, type=CacheResponse)
        except msgspec.DecodeError as exc:
            raise PlatformResponseShapeError.undecodable("get cached files", exc) from exc

        return [
            RepositoryFile(path=item.path, content=item.content)
            for item in payload.data.files
        ]
