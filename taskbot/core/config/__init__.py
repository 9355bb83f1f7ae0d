"""Configuration package for taskbot.

Pydantic configuration models and loading utilities, re-exported at the
package level.
"""

from taskbot.core.config.loader import (
    check_unexpanded_vars,
    expand_env_vars,
    expand_env_vars_recursive,
    load_config,
)
from taskbot.core.config.models import (
    BasecampConfig,
    Config,
    DirectoryConfig,
    LLMConfig,
    LoggingConfig,
    ServerConfig,
    SlackConfig,
    TelegramConfig,
)

__all__ = [
    # Models
    "BasecampConfig",
    "Config",
    "DirectoryConfig",
    "LLMConfig",
    "LoggingConfig",
    "ServerConfig",
    "SlackConfig",
    "TelegramConfig",
    # Loaders
    "check_unexpanded_vars",
    "expand_env_vars",
    "expand_env_vars_recursive",
    "load_config",
]
