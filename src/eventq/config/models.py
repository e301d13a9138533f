"""設定データクラス"""

from dataclasses import dataclass, field


@dataclass
class QueueConfig:
    """イベントキュー設定

    Attributes:
        defaults: イベント名 -> デフォルトリスナーのインポートパス
            ("package.module:function" または "package.module.function")
    """

    defaults: dict[str, str] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """ログ設定"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    loggers: dict[str, str] | None = None


@dataclass
class Config:
    """アプリケーション設定"""

    queue: QueueConfig = field(default_factory=QueueConfig)
    logging: LoggingConfig | None = None
