"""ログ設定の適用"""

import logging

from eventq.config.models import LoggingConfig

logger = logging.getLogger(__name__)


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, logging is left untouched.
    """
    if config is None:
        return

    root_logger = logging.getLogger()

    level = getattr(logging, config.level.upper(), logging.INFO)
    root_logger.setLevel(level)

    # Update handler format if specified
    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            individual_logger = logging.getLogger(logger_name)
            individual_level = getattr(logging, logger_level.upper(), logging.INFO)
            individual_logger.setLevel(individual_level)
            logger.debug(
                "Set logger '%s' to level %s", logger_name, logger_level.upper()
            )
