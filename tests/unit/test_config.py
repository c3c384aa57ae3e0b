"""Unit tests for review bot configuration loading and resolution."""

from __future__ import annotations

import typing as typ

import pytest

from lgtmbot.config import (
    BotConfig,
    ConfigValidationError,
    Configuration,
    SigOwnership,
    load_configuration,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

VALID_CONFIG = """\
config_items:
  - repos:
      - openeuler/community
    multiple_lgtm_label: true
    sig_ownership:
      enabled: true
      repos:
        - openeuler/community
  - repos:
      - openeuler
      - src-openeuler
    excluded_repos:
      - openeuler/kernel
    close_store_sha: true
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfiguration:
    """Tests for load_configuration."""

    def test_loads_items_with_defaults(self, tmp_path: Path) -> None:
        """Omitted fields take their documented defaults."""
        configuration = load_configuration(_write(tmp_path, VALID_CONFIG))

        first, second = configuration.config_items
        assert first.multiple_lgtm_label is True, "flag not loaded"
        assert first.close_store_sha is False, "default not applied"
        assert first.sig_ownership.enabled is True, "sig ownership not loaded"
        assert first.sig_ownership.path_pattern.startswith("^(?P<owner_dir>sig/")
        assert second.excluded_repos == ["openeuler/kernel"]
        assert second.sig_ownership.enabled is False, "default not applied"

    @pytest.mark.parametrize(
        ("text", "fragment"),
        [
            pytest.param("", "empty", id="empty-file"),
            pytest.param("config_items: [\n", "failed to parse YAML", id="bad-yaml"),
            pytest.param(
                "config_items:\n  - repos: openeuler\n",
                "schema validation failed",
                id="wrong-type",
            ),
            pytest.param(
                "config_items:\n  - repos: []\n",
                "repos must list",
                id="no-repos",
            ),
            pytest.param(
                "config_items:\n  - repos: ['a/b/c']\n",
                "invalid repos entry",
                id="bad-slug",
            ),
            pytest.param(
                "config_items:\n  - repos: [a]\n    sig_ownership:\n"
                "      path_pattern: '(['\n",
                "path_pattern",
                id="bad-pattern",
            ),
            pytest.param(
                "config_items:\n  - repos: [openeuler]\n    since: 2020-13-45\n",
                "failed to parse YAML",
                id="invalid-timestamp",
            ),
            pytest.param(
                "config_items:\n  - repos: [openeuler]\n    excluded_repos: [kernel]\n",
                "expected 'org/repo'",
                id="bare-exclusion",
            ),
            pytest.param(
                "config_items: []\nconfig_items: []\n",
                "failed to parse YAML",
                id="duplicate-key",
            ),
        ],
    )
    def test_rejects_invalid_files(
        self, tmp_path: Path, text: str, fragment: str
    ) -> None:
        """Invalid files raise ConfigValidationError describing the issue."""
        with pytest.raises(ConfigValidationError) as excinfo:
            load_configuration(_write(tmp_path, text))

        assert fragment in str(excinfo.value), f"{fragment!r} not reported"

    def test_missing_file(self, tmp_path: Path) -> None:
        """An unreadable file is a validation error."""
        with pytest.raises(ConfigValidationError):
            load_configuration(tmp_path / "absent.yaml")


class TestConfigFor:
    """Tests for Configuration.config_for."""

    @pytest.fixture
    def configuration(self) -> Configuration:
        """Return an org-wide item after a repository-specific one."""
        return Configuration(
            config_items=[
                BotConfig(repos=["openeuler"], excluded_repos=["openeuler/kernel"]),
                BotConfig(repos=["openeuler/community"], multiple_lgtm_label=True),
            ]
        )

    def test_explicit_repository_wins(self, configuration: Configuration) -> None:
        """An ``org/repo`` entry beats an earlier org-wide item."""
        item = configuration.config_for("openeuler", "community")

        assert item is configuration.config_items[1], "org item chosen"

    def test_org_item_applies(self, configuration: Configuration) -> None:
        """Other repositories fall back to the org-wide item."""
        item = configuration.config_for("openeuler", "docs")

        assert item is configuration.config_items[0], "org item not chosen"

    def test_excluded_repository_is_unconfigured(
        self, configuration: Configuration
    ) -> None:
        """Exclusions remove a repository from the org-wide item."""
        assert configuration.config_for("openeuler", "kernel") is None

    def test_unknown_org_is_unconfigured(self, configuration: Configuration) -> None:
        """Unlisted organisations have no configuration."""
        assert configuration.config_for("other", "community") is None


class TestSigOwnership:
    """Tests for SigOwnership helpers."""

    def test_governs_slug_or_bare_name(self) -> None:
        """Governed repositories may be named with or without the org."""
        sig = SigOwnership(enabled=True, repos=["openeuler/community", "docs"])

        assert sig.governs("openeuler", "community")
        assert sig.governs("src-openeuler", "docs")
        assert not sig.governs("openeuler", "kernel")

    def test_disabled_governs_nothing(self) -> None:
        """The master switch turns governance off."""
        sig = SigOwnership(enabled=False, repos=["openeuler/community"])

        assert not sig.governs("openeuler", "community")

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("sig/infra/OWNERS", "sig/infra"),
            ("sig/infra/docs/guide.md", "sig/infra"),
            ("sig/README.md", None),
            ("README.md", None),
        ],
    )
    def test_owning_directory_default_pattern(
        self, path: str, expected: str | None
    ) -> None:
        """The default pattern selects ``sig/<name>``."""
        assert SigOwnership().owning_directory(path) == expected
