"""Gitee REST client used by the review core.

The review core only depends on :class:`PlatformClient`; the httpx-backed
:class:`GiteeClient` is the production implementation. Every call is a
blocking request and every failure surfaces as :class:`PlatformAPIError` so
callers can abort the current event without guessing at transport details.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import os
import typing as typ
from urllib.parse import quote

import httpx
import msgspec

from .errors import PlatformAPIError, PlatformConfigError, PlatformResponseShapeError
from .models import (
    ChangedFile,
    GiteeComment,
    GiteeContent,
    GiteeLabel,
    GiteePermission,
    GiteePullFile,
    GiteeRepoCommit,
    PullRequestComment,
)

_HTTP_NOT_FOUND = 404
_HTTP_ERROR_STATUS_THRESHOLD = 400
_COMMENTS_PAGE_SIZE = 100
_DEFAULT_LABEL_COLOR = "0e8a16"


class PlatformClient(typ.Protocol):
    """Operations the review core needs from the hosting platform."""

    def get_user_permission(self, org: str, repo: str, login: str) -> str:
        """Return the actor's repository role (``admin``, ``write``, ...)."""
        ...

    def get_file_content(self, org: str, repo: str, path: str, ref: str) -> str | None:
        """Return base64 file content at ``ref``, or None when absent."""
        ...

    def list_changed_files(self, org: str, repo: str, number: int) -> list[ChangedFile]:
        """Return the files touched by a pull request."""
        ...

    def add_pr_labels(
        self, org: str, repo: str, number: int, labels: cabc.Sequence[str]
    ) -> None:
        """Attach labels to a pull request."""
        ...

    def remove_pr_labels(
        self, org: str, repo: str, number: int, labels: cabc.Sequence[str]
    ) -> None:
        """Detach labels from a pull request in one call."""
        ...

    def list_repo_labels(self, org: str, repo: str) -> list[str]:
        """Return the label names defined on a repository."""
        ...

    def create_repo_label(self, org: str, repo: str, name: str) -> None:
        """Define a label on a repository."""
        ...

    def create_pr_comment(self, org: str, repo: str, number: int, body: str) -> None:
        """Post a comment on a pull request."""
        ...

    def list_pr_comments(
        self, org: str, repo: str, number: int
    ) -> list[PullRequestComment]:
        """Return pull request comments, oldest first."""
        ...

    def get_commit_tree_sha(self, org: str, repo: str, sha: str) -> str:
        """Return the tree SHA of a commit."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GiteeClientConfig:
    """Configuration for the Gitee v5 REST API client."""

    token: str
    endpoint: str = "https://gitee.com/api/v5"
    timeout_s: float = 20.0
    user_agent: str = "lgtmbot/0.1"

    @classmethod
    def from_env(cls) -> GiteeClientConfig:
        """Build configuration from ``LGTMBOT_GITEE_*`` environment variables."""
        token = os.environ.get("LGTMBOT_GITEE_TOKEN", "").strip()
        if not token:
            raise PlatformConfigError.missing_setting("LGTMBOT_GITEE_TOKEN")
        endpoint = os.environ.get("LGTMBOT_GITEE_ENDPOINT", "").strip()
        if endpoint:
            return cls(token=token, endpoint=endpoint.rstrip("/"))
        return cls(token=token)


class GiteeClient:
    """httpx implementation of :class:`PlatformClient` for Gitee."""

    def __init__(
        self,
        config: GiteeClientConfig,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise PlatformConfigError.empty_token()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=config.timeout_s,
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
        )

    def close(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            self._client.close()

    def get_user_permission(self, org: str, repo: str, login: str) -> str:
        """Return the repository role of ``login``."""
        response = self._request(
            "get user permission",
            "GET",
            f"/repos/{org}/{repo}/collaborators/{quote(login, safe='')}/permission",
        )
        return self._decode("get user permission", response, GiteePermission).permission

    def get_file_content(self, org: str, repo: str, path: str, ref: str) -> str | None:
        """Return base64 content of ``path`` at ``ref``; None when the file is absent."""
        response = self._request(
            "get file content",
            "GET",
            f"/repos/{org}/{repo}/contents/{quote(path)}",
            params={"ref": ref},
            allow_not_found=True,
        )
        if response is None:
            return None
        # Gitee answers an empty list for missing files and a listing for directories.
        body = self._decode(
            "get file content", response, GiteeContent | list[GiteeContent]
        )
        if isinstance(body, list):
            return None
        return body.content

    def list_changed_files(self, org: str, repo: str, number: int) -> list[ChangedFile]:
        """Return the files touched by pull request ``number``."""
        response = self._request(
            "list changed files", "GET", f"/repos/{org}/{repo}/pulls/{number}/files"
        )
        files = self._decode("list changed files", response, list[GiteePullFile])
        return [ChangedFile(filename=item.filename) for item in files]

    def add_pr_labels(
        self, org: str, repo: str, number: int, labels: cabc.Sequence[str]
    ) -> None:
        """Attach ``labels`` to pull request ``number``."""
        if not labels:
            return
        self._request(
            "add pull request labels",
            "POST",
            f"/repos/{org}/{repo}/pulls/{number}/labels",
            json=list(labels),
        )

    def remove_pr_labels(
        self, org: str, repo: str, number: int, labels: cabc.Sequence[str]
    ) -> None:
        """Detach ``labels`` from pull request ``number`` in one request."""
        if not labels:
            return
        names = quote(",".join(labels), safe=",")
        self._request(
            "remove pull request labels",
            "DELETE",
            f"/repos/{org}/{repo}/pulls/{number}/labels/{names}",
        )

    def list_repo_labels(self, org: str, repo: str) -> list[str]:
        """Return label names defined on the repository."""
        response = self._request("list repo labels", "GET", f"/repos/{org}/{repo}/labels")
        labels = self._decode("list repo labels", response, list[GiteeLabel])
        return [label.name for label in labels]

    def create_repo_label(self, org: str, repo: str, name: str) -> None:
        """Define label ``name`` on the repository."""
        self._request(
            "create repo label",
            "POST",
            f"/repos/{org}/{repo}/labels",
            json={"name": name, "color": _DEFAULT_LABEL_COLOR},
        )

    def create_pr_comment(self, org: str, repo: str, number: int, body: str) -> None:
        """Post ``body`` as a comment on pull request ``number``."""
        self._request(
            "create pull request comment",
            "POST",
            f"/repos/{org}/{repo}/pulls/{number}/comments",
            json={"body": body},
        )

    def list_pr_comments(
        self, org: str, repo: str, number: int
    ) -> list[PullRequestComment]:
        """Return every comment on pull request ``number``, oldest first."""
        comments: list[PullRequestComment] = []
        page = 1
        while True:
            response = self._request(
                "list pull request comments",
                "GET",
                f"/repos/{org}/{repo}/pulls/{number}/comments",
                params={"page": page, "per_page": _COMMENTS_PAGE_SIZE},
            )
            batch = self._decode(
                "list pull request comments", response, list[GiteeComment]
            )
            comments.extend(item.to_domain() for item in batch)
            if len(batch) < _COMMENTS_PAGE_SIZE:
                return comments
            page += 1

    def get_commit_tree_sha(self, org: str, repo: str, sha: str) -> str:
        """Return the tree SHA of commit ``sha``."""
        response = self._request("get commit", "GET", f"/repos/{org}/{repo}/commits/{sha}")
        return self._decode("get commit", response, GiteeRepoCommit).commit.tree.sha

    @typ.overload
    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, typ.Any] | None = None,
        json: object | None = None,
        allow_not_found: typ.Literal[False] = False,
    ) -> httpx.Response: ...

    @typ.overload
    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, typ.Any] | None = None,
        json: object | None = None,
        allow_not_found: bool,
    ) -> httpx.Response | None: ...

    def _request(  # noqa: PLR0913
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, typ.Any] | None = None,
        json: object | None = None,
        allow_not_found: bool = False,
    ) -> httpx.Response | None:
        """Send a request and map failures onto :class:`PlatformAPIError`."""
        query: dict[str, typ.Any] = {"access_token": self._config.token}
        if params:
            query.update(params)
        try:
            response = self._client.request(
                method,
                f"{self._config.endpoint}{path}",
                params=query,
                json=json,
            )
        except httpx.HTTPError as exc:
            raise PlatformAPIError.transport_error(operation, exc) from exc

        if allow_not_found and response.status_code == _HTTP_NOT_FOUND:
            return None
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise PlatformAPIError.http_error(operation, response.status_code)
        return response

    @staticmethod
    def _decode[T](operation: str, response: httpx.Response, type_: type[T]) -> T:
        try:
            return msgspec.json.decode(response.content, type=type_)
        except (msgspec.DecodeError, msgspec.ValidationError) as exc:
            raise PlatformResponseShapeError.undecodable(operation, exc) from exc
