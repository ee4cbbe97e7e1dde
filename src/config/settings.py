import os
from enum import Enum
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any


class LogLevel(str, Enum):
    """ログレベル

    Attributes:
        DEBUG: デバッグ情報
        INFO: 通常情報
        WARNING: 警告
        ERROR: エラー
    """

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class TransportKind(str, Enum):
    """トランスポート種別

    Attributes:
        SERIAL: pyserialによる実シリアルポート
        MOCK: メモリ上のモック (開発/テスト用)
    """

    SERIAL = "serial"
    MOCK = "mock"


class ResolutionMode(str, Enum):
    """シグナル解決スコープ

    Attributes:
        PANEL: 受信したパネル自身のシグナルのみを検索
        MODULE: 同じモジュールに登録された全パネルのシグナルを検索
    """

    PANEL = "panel"
    MODULE = "module"


class Settings(BaseSettings):
    """アプリケーション設定 (Pydantic Settings)

    .envファイルから環境変数を読み込み、型安全な設定管理を提供する。

    Attributes:
        MODULES_CONFIG_PATH: モジュール/パネル定義JSONのパス
        TRANSPORT: トランスポート種別 (TransportKind Enum)
        SERIAL_BAUDRATE: シリアル通信速度
        SERIAL_TIMEOUT: シリアル読み書きタイムアウト(秒)
        WRITE_RETRY: 書き込み失敗時の追加試行回数 (0-10)
        WRITE_RETRY_DELAY: 書き込みリトライの初期待機時間(秒)
        WRITE_BACKOFF_MAX: 書き込みリトライ待機時間の上限(秒)
        RESOLUTION_MODE: シグナル解決スコープ (ResolutionMode Enum)
        LOG_LEVEL: ログレベル (LogLevel Enum)
        API_HOST: APIサーバーホスト (デフォルト: 127.0.0.1)
        API_PORT: APIサーバーポート (デフォルト: 8000)
        API_STARTUP_TIMEOUT: ランチャーがAPI起動を待つ最大秒数
    """

    MODULES_CONFIG_PATH: str = "config/oids.json"
    TRANSPORT: TransportKind = TransportKind.MOCK
    SERIAL_BAUDRATE: int = Field(default=9600, gt=0)
    SERIAL_TIMEOUT: float = Field(default=1.0, ge=0.05, le=10.0)

    # 書き込みリトライ設定 (指数バックオフ)
    WRITE_RETRY: int = Field(default=3, ge=0, le=10)
    WRITE_RETRY_DELAY: float = Field(default=0.2, ge=0.0, le=10.0)
    WRITE_BACKOFF_MAX: float = Field(default=2.0, ge=0.0, le=60.0)

    RESOLUTION_MODE: ResolutionMode = ResolutionMode.PANEL
    LOG_LEVEL: LogLevel = LogLevel.INFO

    API_HOST: str = "127.0.0.1"
    API_PORT: int = Field(default=8000, gt=0, le=65535)
    API_STARTUP_TIMEOUT: int = Field(default=30, ge=5, le=60)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self: Any, **kwargs: Any) -> None:
        # 環境変数プレセット: DEBUG_LOG が真なら LOG_LEVEL を DEBUG にする
        # ユーザーが明示的に LOG_LEVEL を設定している場合は上書きしない
        if "LOG_LEVEL" not in kwargs and os.getenv("LOG_LEVEL") is None:
            debug_env = os.getenv("DEBUG_LOG")
            if isinstance(debug_env, str) and debug_env.lower() in (
                "1",
                "true",
                "yes",
                "on",
            ):
                kwargs.setdefault("LOG_LEVEL", LogLevel.DEBUG)

        # .envファイルの存在チェック
        if not os.path.exists(".env") and not kwargs:
            raise FileNotFoundError(
                "\n❌ .env file not found.\n"
                "Please copy .env.example to .env and configure it:\n"
                "  cp .env.example .env  (Linux/Mac)\n"
                "  Copy-Item .env.example .env  (Windows)\n"
            )

        super().__init__(**kwargs)
