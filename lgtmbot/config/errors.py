"""Configuration errors."""

from __future__ import annotations


class ConfigValidationError(ValueError):
    """Raised when the configuration file fails structural validation."""

    def __init__(self, issues: list[str]) -> None:
        """Capture validation issues whilst preserving the aggregated message."""
        message = "\n".join(issues)
        super().__init__(message)
        self.issues = issues


class ConfigNotFoundError(LookupError):
    """Raised when no configuration item applies to a repository."""

    def __init__(self, org: str, repo: str) -> None:
        """Record the repository that has no configuration."""
        self.org = org
        self.repo = repo
        super().__init__(f"no review bot configuration for {org}/{repo}")
