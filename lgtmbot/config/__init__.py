"""Per-repository review bot configuration.

Load and resolve configuration::

    from lgtmbot.config import load_configuration

    configuration = load_configuration("config.yaml")
    item = configuration.config_for("openeuler", "community")
"""

from __future__ import annotations

from .errors import ConfigNotFoundError, ConfigValidationError
from .loader import load_configuration, validate_configuration
from .models import (
    DEFAULT_SIG_PATH_PATTERN,
    BotConfig,
    Configuration,
    SigOwnership,
    compile_path_pattern,
)

__all__ = [
    "DEFAULT_SIG_PATH_PATTERN",
    "BotConfig",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "Configuration",
    "SigOwnership",
    "compile_path_pattern",
    "load_configuration",
    "validate_configuration",
]
