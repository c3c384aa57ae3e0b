"""Unit tests for the lgtmbot.runtime module."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon.testing
import pytest

from lgtmbot import runtime
from lgtmbot.config import ConfigValidationError
from lgtmbot.platform.errors import PlatformConfigError
from lgtmbot.runtime import RuntimeSettings, _parse_port, create_app

if typ.TYPE_CHECKING:
    from pathlib import Path

CONFIG = """\
config_items:
  - repos: [openeuler]
"""


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every lgtmbot setting from the environment."""
    for name in (
        "LGTMBOT_CONFIG_PATH",
        "LGTMBOT_BOT_LOGIN",
        "LGTMBOT_GITEE_TOKEN",
        "LGTMBOT_GITEE_ENDPOINT",
        "LGTMBOT_CACHE_ENDPOINT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestRuntimeSettings:
    """Tests for RuntimeSettings.from_env."""

    def test_no_config_path_means_health_only(
        self, clean_env: pytest.MonkeyPatch
    ) -> None:
        """Without a configuration path no settings are produced."""
        assert RuntimeSettings.from_env() is None

    def test_bot_login_is_required(self, clean_env: pytest.MonkeyPatch) -> None:
        """A configuration path without a bot login is rejected."""
        clean_env.setenv("LGTMBOT_CONFIG_PATH", "/etc/lgtmbot/config.yaml")

        with pytest.raises(PlatformConfigError, match="LGTMBOT_BOT_LOGIN"):
            RuntimeSettings.from_env()

    def test_reads_settings(self, clean_env: pytest.MonkeyPatch) -> None:
        """Both settings are read and stripped."""
        clean_env.setenv("LGTMBOT_CONFIG_PATH", " /etc/lgtmbot/config.yaml ")
        clean_env.setenv("LGTMBOT_BOT_LOGIN", "review-bot")

        assert RuntimeSettings.from_env() == RuntimeSettings(
            config_path="/etc/lgtmbot/config.yaml", bot_login="review-bot"
        )


class TestCreateApp:
    """Tests for the Granian application factory."""

    def test_health_only_mode(self, clean_env: pytest.MonkeyPatch) -> None:
        """Without configuration only health probes are served."""
        client = falcon.testing.TestClient(create_app())

        assert client.simulate_get("/health").status_code == HTTPStatus.OK
        ready = client.simulate_get("/ready")
        assert ready.status_code == HTTPStatus.SERVICE_UNAVAILABLE
        webhook = client.simulate_post("/webhook", body=b"{}")
        assert webhook.status_code == HTTPStatus.NOT_FOUND

    def test_configured_mode_serves_webhook(
        self, clean_env: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """With configuration the webhook endpoint is registered."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(CONFIG, encoding="utf-8")
        clean_env.setenv("LGTMBOT_CONFIG_PATH", str(config_path))
        clean_env.setenv("LGTMBOT_BOT_LOGIN", "review-bot")
        clean_env.setenv("LGTMBOT_GITEE_TOKEN", "token")
        clean_env.setenv("LGTMBOT_CACHE_ENDPOINT", "https://cache.example")

        client = falcon.testing.TestClient(create_app())

        assert client.simulate_get("/ready").json == {"status": "ready"}
        result = client.simulate_post(
            "/webhook", body=b"{}", headers={"X-Gitee-Event": "Push Hook"}
        )
        assert result.status_code == HTTPStatus.ACCEPTED

    def test_missing_token_fails_start_up(
        self, clean_env: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """A configured process without a platform token does not start."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(CONFIG, encoding="utf-8")
        clean_env.setenv("LGTMBOT_CONFIG_PATH", str(config_path))
        clean_env.setenv("LGTMBOT_BOT_LOGIN", "review-bot")

        with pytest.raises(PlatformConfigError, match="LGTMBOT_GITEE_TOKEN"):
            create_app()

    def test_invalid_configuration_is_logged(
        self, clean_env: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """A configuration that fails validation is logged before start-up aborts."""
        recorded: list[tuple[str, str, object | None]] = []

        class _Logger:
            def log(
                self,
                level: str,
                message: str,
                /,
                *,
                exc_info: object | None = None,
                stack_info: bool = False,
            ) -> None:
                recorded.append((level, message, exc_info))

        config_path = tmp_path / "config.yaml"
        config_path.write_text("config_items:\n  - repos: []\n", encoding="utf-8")
        clean_env.setenv("LGTMBOT_CONFIG_PATH", str(config_path))
        clean_env.setenv("LGTMBOT_BOT_LOGIN", "review-bot")
        clean_env.setattr(runtime, "logger", _Logger())

        with pytest.raises(ConfigValidationError) as excinfo:
            create_app()

        assert recorded == [
            ("ERROR", "Failed to wire the review core", excinfo.value)
        ], "expected one ERROR line carrying the validation error"


class TestParsePort:
    """Tests for _parse_port."""

    def test_valid_port(self) -> None:
        """A port inside the range is returned as an int."""
        assert _parse_port("8080") == 8080

    @pytest.mark.parametrize("raw", ["0", "65536", "http", ""])
    def test_invalid_port_exits(self, raw: str) -> None:
        """Invalid ports terminate start-up."""
        with pytest.raises(SystemExit):
            _parse_port(raw)
