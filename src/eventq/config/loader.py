"""YAML設定ファイルの読み込みと環境変数展開"""

import importlib
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from eventq.config.models import Config, LoggingConfig, QueueConfig
from eventq.infrastructure.events.queue import EventListener, EventQueue

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """設定関連の基底例外"""


class ConfigValidationError(ConfigError):
    """設定値のバリデーションエラー"""


class EnvironmentVariableError(ConfigError):
    """環境変数が見つからないエラー"""


# 環境変数パターン: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """文字列中の ${VAR_NAME} を環境変数の値に置換する

    Args:
        value: 置換対象の文字列

    Returns:
        環境変数が展開された文字列

    Raises:
        EnvironmentVariableError: 環境変数が未設定
    """
    if not value:
        return value

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise EnvironmentVariableError(
                f"Environment variable '{var_name}' is not set"
            )
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


def _expand_recursive(data: Any) -> Any:
    """データ構造を再帰的に走査し、文字列中の環境変数を展開する"""
    if isinstance(data, dict):
        return {key: _expand_recursive(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _validate_mapping(data: Any, path: str) -> dict[str, Any]:
    """値が dict であることを検証する

    Raises:
        ConfigValidationError: dict ではない
    """
    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"'{path}' must be a mapping, got {type(data).__name__}"
        )
    return data


def _validate_string(value: Any, path: str) -> str:
    """値が文字列であることを検証する

    Raises:
        ConfigValidationError: 文字列ではない
    """
    if not isinstance(value, str):
        raise ConfigValidationError(
            f"'{path}' must be a string, got {type(value).__name__}"
        )
    return value


def _load_queue_config(data: dict[str, Any]) -> QueueConfig:
    queue_data = data.get("queue")
    if queue_data is None:
        return QueueConfig()
    queue_data = _validate_mapping(queue_data, "queue")

    defaults_data = queue_data.get("defaults") or {}
    defaults_data = _validate_mapping(defaults_data, "queue.defaults")

    defaults: dict[str, str] = {}
    for event_name, handler_path in defaults_data.items():
        # YAML 1.1 では on/off/yes/no が bool として読み込まれる
        if not isinstance(event_name, str):
            raise ConfigValidationError(
                f"'queue.defaults' key {event_name!r} must be a string"
            )
        if not isinstance(handler_path, str) or not handler_path:
            raise ConfigValidationError(
                f"'queue.defaults.{event_name}' must be an import path string"
            )
        defaults[event_name] = handler_path
    return QueueConfig(defaults=defaults)


def _load_logging_config(data: dict[str, Any]) -> LoggingConfig | None:
    logging_data = data.get("logging")
    if not logging_data:
        return None
    logging_data = _validate_mapping(logging_data, "logging")

    level = _validate_string(logging_data.get("level", "INFO"), "logging.level")
    log_format = _validate_string(
        logging_data.get(
            "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ),
        "logging.format",
    )

    loggers = logging_data.get("loggers")
    if loggers is not None:
        _validate_mapping(loggers, "logging.loggers")
        for logger_name, logger_level in loggers.items():
            _validate_string(logger_name, "logging.loggers")
            _validate_string(logger_level, f"logging.loggers.{logger_name}")

    return LoggingConfig(level=level, format=log_format, loggers=loggers)


def load_config(path: str | Path) -> Config:
    """設定ファイルを読み込む

    Args:
        path: config.yaml のパス

    Returns:
        Config オブジェクト

    Raises:
        FileNotFoundError: ファイルが存在しない
        ConfigValidationError: 設定値が不正
        EnvironmentVariableError: 環境変数が未設定
        yaml.YAMLError: YAML構文エラー
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f)

    # 空ファイルは全てデフォルト
    if raw_data is None:
        raw_data = {}
    _validate_mapping(raw_data, "<root>")

    # 環境変数を展開
    data = _expand_recursive(raw_data)

    return Config(
        queue=_load_queue_config(data),
        logging=_load_logging_config(data),
    )


def resolve_handler(path: str) -> EventListener:
    """インポートパスからリスナー関数を解決する

    "package.module:function" と "package.module.function" の両方の形式に対応。
    コロン形式ではクラス属性など "module:Class.method" も指定できる。

    Args:
        path: インポートパス

    Returns:
        呼び出し可能なオブジェクト

    Raises:
        ConfigValidationError: インポート失敗、属性が存在しない、呼び出し不可
    """
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise ConfigValidationError(f"Invalid handler path '{path}'")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigValidationError(
            f"Cannot import module '{module_name}' for handler '{path}'"
        ) from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise ConfigValidationError(
                f"Handler '{path}' not found: no attribute '{attr}'"
            ) from e

    if not callable(target):
        raise ConfigValidationError(f"Handler '{path}' is not callable")
    return target


def create_queue(config: Config, target: Any = None) -> EventQueue:
    """設定からイベントキューを生成する

    Args:
        config: 読み込み済みの設定
        target: キューを取り付けるオブジェクト（省略時はキュー自身）

    Returns:
        デフォルトリスナーが登録された EventQueue

    Raises:
        ConfigValidationError: ハンドラーが解決できない
        QueueConfigurationError: target に取り付けできない
    """
    defaults = {
        event_name: resolve_handler(handler_path)
        for event_name, handler_path in config.queue.defaults.items()
    }
    logger.debug("Resolved %d default listeners", len(defaults))
    return EventQueue(defaults, target)
