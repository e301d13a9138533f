"""設定管理モジュール"""

from eventq.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    create_queue,
    expand_env_vars,
    load_config,
    resolve_handler,
)
from eventq.config.logging_setup import configure_logging
from eventq.config.models import Config, LoggingConfig, QueueConfig

__all__ = [
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "EnvironmentVariableError",
    "LoggingConfig",
    "QueueConfig",
    "configure_logging",
    "create_queue",
    "expand_env_vars",
    "load_config",
    "resolve_handler",
]
