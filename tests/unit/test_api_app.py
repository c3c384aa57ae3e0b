"""Unit tests for lgtmbot.api.app application factory.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_app.py

"""

from __future__ import annotations

import json
import typing as typ

import falcon
import falcon.testing
import pytest

from lgtmbot.api.app import AppDependencies, create_app
from lgtmbot.config import BotConfig, Configuration
from lgtmbot.review import (
    PermissionResolver,
    ReviewDispatcher,
    ReviewService,
    ReviewServiceDependencies,
)
from tests.helpers.review_doubles import FakeOwnershipCache, FakePlatformClient

NOTE_HOOK = "Note Hook"
MERGE_REQUEST_HOOK = "Merge Request Hook"


def _pull_request(*, labels: list[str] | None = None) -> dict[str, typ.Any]:
    return {
        "number": 7,
        "state": "open",
        "user": {"login": "author"},
        "head": {"ref": "feature", "sha": "headsha"},
        "base": {"ref": "master", "sha": "basesha"},
        "labels": [{"name": name} for name in labels or []],
    }


def _note(body: str, *, commenter: str = "reviewer", repo: str = "community") -> bytes:
    payload = {
        "action": "comment",
        "noteable_type": "PullRequest",
        "comment": {"body": body, "user": {"login": commenter}},
        "pull_request": _pull_request(),
        "repository": {"namespace": "openeuler", "path": repo},
    }
    return json.dumps(payload).encode("utf-8")


def _merge_request(action_desc: str, *, labels: list[str]) -> bytes:
    payload = {
        "action": "update",
        "action_desc": action_desc,
        "pull_request": _pull_request(labels=labels),
        "repository": {"namespace": "openeuler", "path": "community"},
    }
    return json.dumps(payload).encode("utf-8")


@pytest.fixture
def platform() -> FakePlatformClient:
    """Return a platform double where ``reviewer`` has write access."""
    return FakePlatformClient(permissions={"reviewer": "write"})


@pytest.fixture
def health_client() -> falcon.testing.TestClient:
    """Build a test client for health-only mode."""
    return falcon.testing.TestClient(create_app())


@pytest.fixture
def full_client(platform: FakePlatformClient) -> falcon.testing.TestClient:
    """Build a test client wired to the review core."""
    service = ReviewService(
        ReviewServiceDependencies(
            client=platform,
            permissions=PermissionResolver(platform, FakeOwnershipCache()),
            bot_login="review-bot",
        )
    )
    configuration = Configuration(config_items=[BotConfig(repos=["openeuler"])])
    dispatcher = ReviewDispatcher(configuration, service)
    return falcon.testing.TestClient(create_app(AppDependencies(dispatcher)))


class TestCreateAppHealthOnly:
    """Tests for create_app() without a dispatcher."""

    def test_returns_falcon_app(self) -> None:
        """create_app() returns a Falcon WSGI App."""
        app = create_app()
        assert isinstance(app, falcon.App), "expected Falcon WSGI App"

    def test_has_health_route(self, health_client: falcon.testing.TestClient) -> None:
        """Health-only app responds to /health."""
        result = health_client.simulate_get("/health")
        assert result.status == falcon.HTTP_200, "expected HTTP 200 from /health"
        assert result.json == {"status": "ok"}, "wrong /health body"

    def test_ready_reports_unconfigured(
        self, health_client: falcon.testing.TestClient
    ) -> None:
        """Health-only app is not ready for webhook traffic."""
        result = health_client.simulate_get("/ready")
        assert result.status == falcon.HTTP_503, "expected HTTP 503 from /ready"
        assert result.json == {"status": "unconfigured"}, "wrong /ready body"

    def test_webhook_not_registered(
        self, health_client: falcon.testing.TestClient
    ) -> None:
        """Without a dispatcher the webhook endpoint returns 404."""
        result = health_client.simulate_post("/webhook", body=b"{}")
        assert result.status == falcon.HTTP_404, "expected HTTP 404"


class TestWebhook:
    """Tests for POST /webhook with the review core wired in."""

    def test_ready(self, full_client: falcon.testing.TestClient) -> None:
        """The wired app reports ready."""
        result = full_client.simulate_get("/ready")
        assert result.json == {"status": "ready"}, "wrong /ready body"

    def test_lgtm_comment_is_handled(
        self, full_client: falcon.testing.TestClient, platform: FakePlatformClient
    ) -> None:
        """A ``/lgtm`` note adds the label and reports the outcome."""
        result = full_client.simulate_post(
            "/webhook", body=_note("/lgtm"), headers={"X-Gitee-Event": NOTE_HOOK}
        )

        assert result.status == falcon.HTTP_200, "expected HTTP 200"
        assert result.json == {"status": "handled", "outcome": "lgtm_added"}
        assert platform.called("add_pr_labels") == [
            ("openeuler", "community", 7, ["lgtm"])
        ]

    def test_plain_comment_is_handled_as_ignored(
        self, full_client: falcon.testing.TestClient
    ) -> None:
        """Comments without a command still decode and report ``ignored``."""
        result = full_client.simulate_post(
            "/webhook", body=_note("thanks"), headers={"X-Gitee-Event": NOTE_HOOK}
        )

        assert result.status == falcon.HTTP_200, "expected HTTP 200"
        assert result.json == {"status": "handled", "outcome": "ignored"}

    def test_source_branch_change_clears_labels(
        self, full_client: falcon.testing.TestClient, platform: FakePlatformClient
    ) -> None:
        """A source-branch update without a fingerprint clears labels."""
        result = full_client.simulate_post(
            "/webhook",
            body=_merge_request("source_branch_changed", labels=["lgtm"]),
            headers={"X-Gitee-Event": MERGE_REQUEST_HOOK},
        )

        assert result.json == {"status": "handled", "outcome": "labels_cleared"}
        assert platform.called("remove_pr_labels") == [
            ("openeuler", "community", 7, ["lgtm"])
        ]

    @pytest.mark.parametrize(
        ("event", "body"),
        [
            pytest.param("Push Hook", b"{}", id="other-event"),
            pytest.param(
                MERGE_REQUEST_HOOK,
                _merge_request("title_changed", labels=["lgtm"]),
                id="metadata-edit",
            ),
        ],
    )
    def test_unhandled_deliveries_are_accepted(
        self,
        full_client: falcon.testing.TestClient,
        platform: FakePlatformClient,
        event: str,
        body: bytes,
    ) -> None:
        """Deliveries the bot does not act on answer 202."""
        result = full_client.simulate_post(
            "/webhook", body=body, headers={"X-Gitee-Event": event}
        )

        assert result.status == falcon.HTTP_202, "expected HTTP 202"
        assert result.json == {"status": "ignored"}, "wrong body"
        assert platform.calls == [], "platform consulted"

    def test_malformed_payload_is_bad_request(
        self, full_client: falcon.testing.TestClient
    ) -> None:
        """Undecodable bodies answer 400."""
        result = full_client.simulate_post(
            "/webhook", body=b"{not json", headers={"X-Gitee-Event": NOTE_HOOK}
        )

        assert result.status == falcon.HTTP_400, "expected HTTP 400"
        assert result.json["title"] == "Invalid input", "wrong error title"

    def test_unconfigured_repository_is_not_found(
        self, full_client: falcon.testing.TestClient
    ) -> None:
        """Repositories without configuration answer 404."""
        config_free = _note("/lgtm").replace(b"openeuler", b"elsewhere")

        result = full_client.simulate_post(
            "/webhook", body=config_free, headers={"X-Gitee-Event": NOTE_HOOK}
        )

        assert result.status == falcon.HTTP_404, "expected HTTP 404"
        assert result.json["title"] == "Repository not configured"

    def test_platform_failure_is_bad_gateway(
        self, full_client: falcon.testing.TestClient, platform: FakePlatformClient
    ) -> None:
        """Platform failures answer 502 so the delivery can be retried."""
        platform.failing.add("get_user_permission")

        result = full_client.simulate_post(
            "/webhook", body=_note("/lgtm"), headers={"X-Gitee-Event": NOTE_HOOK}
        )

        assert result.status == falcon.HTTP_502, "expected HTTP 502"
        assert platform.called("add_pr_labels") == [], "label added"
