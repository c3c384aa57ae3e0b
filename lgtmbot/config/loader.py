"""YAML loading and validation for the review bot configuration."""

from __future__ import annotations

import re
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from lgtmbot.common.slug import parse_repo_slug

from .errors import ConfigValidationError
from .models import Configuration, compile_path_pattern

YAML_VERSION = (1, 2)
_REPO_ENTRY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+(?:/[A-Za-z0-9_.-]+)?$")


def load_configuration(path: Path | str) -> Configuration:
    """Parse and validate a YAML configuration file."""
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError, ValueError) as exc:
        raise ConfigValidationError([f"failed to parse YAML: {exc}"]) from exc

    if loaded is None:
        raise ConfigValidationError(["configuration file is empty"])

    try:
        configuration = msgspec.convert(loaded, type=Configuration)
    except msgspec.ValidationError as exc:
        raise ConfigValidationError([f"schema validation failed: {exc}"]) from exc

    return validate_configuration(configuration)


def validate_configuration(configuration: Configuration) -> Configuration:
    """Return ``configuration`` when every item is usable.

    Path patterns are compiled here so an invalid expression fails start-up
    instead of the first event that needs it.
    """
    issues: list[str] = []
    for index, item in enumerate(configuration.config_items):
        label = f"config_items[{index}]"
        if not item.repos:
            issues.append(f"{label}: repos must list at least one org or org/repo")
        issues.extend(
            f"{label}: invalid repos entry {entry!r}"
            for entry in (*item.repos, *item.excluded_repos)
            if not _REPO_ENTRY_PATTERN.match(entry)
        )
        issues.extend(
            f"{label}: {exc}" for exc in _excluded_slug_errors(item.excluded_repos)
        )
        try:
            compile_path_pattern(item.sig_ownership.path_pattern)
        except re.error as exc:
            issues.append(f"{label}: invalid sig_ownership.path_pattern: {exc}")

    if issues:
        raise ConfigValidationError(issues)
    return configuration


def _excluded_slug_errors(entries: list[str]) -> list[ValueError]:
    """Return the errors for exclusions that do not name a single repository."""
    errors: list[ValueError] = []
    for entry in entries:
        try:
            parse_repo_slug(entry)
        except ValueError as exc:
            errors.append(exc)
    return errors


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
