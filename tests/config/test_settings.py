"""config.settingsのテスト"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from config.settings import LogLevel, ResolutionMode, Settings, TransportKind


class TestSettings:
    """Settings設定クラスのテスト"""

    def test_settings_loads_from_env(self):
        """環境変数から正しく設定を読み込めるか"""
        settings = Settings()

        assert settings.MODULES_CONFIG_PATH == "config/oids.json"
        assert settings.TRANSPORT == TransportKind.MOCK  # conftest.pyで設定
        assert settings.RESOLUTION_MODE == ResolutionMode.PANEL
        assert settings.WRITE_RETRY == 2
        assert settings.WRITE_RETRY_DELAY == 0.0
        assert settings.LOG_LEVEL == LogLevel.INFO

    def test_settings_enum_values_from_strings(self):
        """文字列からEnumへ変換されるか"""
        settings = Settings(TRANSPORT="serial", RESOLUTION_MODE="module")

        assert settings.TRANSPORT is TransportKind.SERIAL
        assert settings.RESOLUTION_MODE is ResolutionMode.MODULE

    def test_settings_invalid_port_raises_error(self):
        """不正なポート番号でValidationErrorが発生するか"""
        with pytest.raises(ValidationError):
            Settings(API_PORT=99999)  # 65535を超えている

    def test_settings_invalid_retry_raises_error(self):
        """不正なリトライ回数でValidationErrorが発生するか"""
        with pytest.raises(ValidationError):
            Settings(WRITE_RETRY=20)  # 10を超えている

    def test_settings_invalid_baudrate_raises_error(self):
        with pytest.raises(ValidationError):
            Settings(SERIAL_BAUDRATE=0)

    def test_settings_invalid_transport_raises_error(self):
        """未知のトランスポート種別でValidationErrorが発生するか"""
        with pytest.raises(ValidationError):
            Settings(TRANSPORT="tcp")

    def test_settings_invalid_resolution_mode_raises_error(self):
        with pytest.raises(ValidationError):
            Settings(RESOLUTION_MODE="global")

    def test_settings_invalid_log_level_raises_error(self):
        """不正なログレベルでValidationErrorが発生するか"""
        with pytest.raises(ValidationError):
            Settings(LOG_LEVEL="INVALID")


class TestDebugLogPreset:
    """DEBUG_LOGプリセットのテスト"""

    def test_debug_log_enables_debug_level(self):
        """DEBUG_LOG=trueでLOG_LEVELがDEBUGになるか"""
        env = {k: v for k, v in os.environ.items() if k != "LOG_LEVEL"}
        env["DEBUG_LOG"] = "true"
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()

        assert settings.LOG_LEVEL == LogLevel.DEBUG

    def test_explicit_log_level_wins(self):
        """LOG_LEVELが明示されていればDEBUG_LOGより優先されるか"""
        with patch.dict(os.environ, {"DEBUG_LOG": "1", "LOG_LEVEL": "WARNING"}):
            settings = Settings()

        assert settings.LOG_LEVEL == LogLevel.WARNING


class TestSettingsEnvFileNotFound:
    """環境変数ファイルが見つからない場合のテスト"""

    @patch("os.path.exists")
    def test_settings_raises_error_when_env_file_missing(self, mock_exists):
        """環境変数ファイルが見つからない場合にFileNotFoundErrorが発生するか"""
        mock_exists.return_value = False

        with pytest.raises(FileNotFoundError, match=r".env file not found"):
            Settings()

    @patch("os.path.exists")
    def test_settings_with_kwargs_skips_env_check(self, mock_exists):
        """引数を渡した場合は.envがなくても生成できるか"""
        mock_exists.return_value = False

        settings = Settings(TRANSPORT="mock")

        assert settings.TRANSPORT is TransportKind.MOCK
