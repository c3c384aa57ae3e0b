"""lgtmbot runtime entrypoint.

This module builds the Falcon WSGI application served by Granian. When
``LGTMBOT_CONFIG_PATH`` is set the review core is wired in and ``/webhook``
is served; otherwise the process starts in health-only mode.

Configuration is driven by environment variables:

- ``LGTMBOT_HOST``: Bind address (default ``0.0.0.0``)
- ``LGTMBOT_PORT``: Listen port (default ``8080``)
- ``LGTMBOT_LOG_LEVEL``: Log level (default ``INFO``)
- ``LGTMBOT_CONFIG_PATH``: YAML configuration file (enables webhooks)
- ``LGTMBOT_BOT_LOGIN``: Login the bot comments as (required with a config)
- ``LGTMBOT_GITEE_TOKEN`` / ``LGTMBOT_GITEE_ENDPOINT``: Platform API access
- ``LGTMBOT_CACHE_ENDPOINT``: repo-file-cache service base URL

Run the service directly with ``python -m lgtmbot.runtime``.
"""

from __future__ import annotations

import dataclasses
import os
import typing as typ

from lgtmbot.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_exception,
    log_info,
    log_warning,
)
from lgtmbot.config.errors import ConfigValidationError
from lgtmbot.platform.errors import PlatformConfigError

if typ.TYPE_CHECKING:
    import falcon

    from lgtmbot.api.app import AppDependencies

__all__ = ["RuntimeSettings", "build_dependencies", "create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535


@dataclasses.dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Settings needed to wire the review core at start-up."""

    config_path: str
    bot_login: str

    @classmethod
    def from_env(cls) -> RuntimeSettings | None:
        """Read settings from the environment; None means health-only mode."""
        config_path = os.environ.get("LGTMBOT_CONFIG_PATH", "").strip()
        if not config_path:
            return None
        bot_login = os.environ.get("LGTMBOT_BOT_LOGIN", "").strip()
        if not bot_login:
            raise PlatformConfigError.missing_setting("LGTMBOT_BOT_LOGIN")
        return cls(config_path=config_path, bot_login=bot_login)


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid LGTMBOT_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def build_dependencies(settings: RuntimeSettings) -> AppDependencies:
    """Load configuration and construct the review core."""
    from lgtmbot.api.app import AppDependencies
    from lgtmbot.config import load_configuration
    from lgtmbot.platform import (
        FileCacheClient,
        FileCacheConfig,
        GiteeClient,
        GiteeClientConfig,
    )
    from lgtmbot.review import (
        PermissionResolver,
        ReviewDispatcher,
        ReviewService,
        ReviewServiceDependencies,
    )

    configuration = load_configuration(settings.config_path)
    client = GiteeClient(GiteeClientConfig.from_env())
    cache = FileCacheClient(FileCacheConfig.from_env())
    service = ReviewService(
        ReviewServiceDependencies(
            client=client,
            permissions=PermissionResolver(client, cache),
            bot_login=settings.bot_login,
        )
    )
    log_info(
        logger,
        "Loaded %d review configuration item(s) from %s",
        len(configuration.config_items),
        settings.config_path,
    )
    return AppDependencies(dispatcher=ReviewDispatcher(configuration, service))


def create_app() -> falcon.App:
    """Create the Falcon WSGI application for Granian's factory mode."""
    from lgtmbot.api.app import create_app as _create_api_app

    settings = RuntimeSettings.from_env()
    if settings is None:
        log_warning(logger, "LGTMBOT_CONFIG_PATH is not set; serving health only")
        return _create_api_app()
    try:
        dependencies = build_dependencies(settings)
    except (ConfigValidationError, PlatformConfigError) as exc:
        log_exception(logger, "Failed to wire the review core", exc)
        raise
    return _create_api_app(dependencies)


def main() -> None:
    """Start the lgtmbot runtime server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("LGTMBOT_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("LGTMBOT_PORT", "8080"))
    log_level_str = os.environ.get("LGTMBOT_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid LGTMBOT_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting lgtmbot on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "lgtmbot.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.WSGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
