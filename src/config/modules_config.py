"""モジュール構成管理モジュール

責務:
- MODULES_CONFIG_PATHに基づくJSONファイル読み込み
- ModulesConfigスキーマによる検証
- シングルトンパターンによる一元管理
"""

from pathlib import Path
from typing import ClassVar
import json
import os

from pydantic import ValidationError

from schemas.modules_config import ModulesConfig, PanelConfig

# src/config/modules_config.py → 2つ上がプロジェクトルート
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_PATH = "config/oids.json"


class ModulesConfigManager:
    """モジュール構成管理クラス (シングルトン)

    JSONファイルからモジュール/パネル定義を読み込み、
    アプリケーション全体で一元管理する。

    使用例:
        >>> manager = ModulesConfigManager()
        >>> panel = manager.get_panel_config("Pedestal", "Trim")
        >>> print(panel.port)  # "COM3"
    """

    _instance: ClassVar["ModulesConfigManager | None"] = None
    _config: ModulesConfig
    _config_path: Path

    def __new__(cls, config_path: str | None = None) -> "ModulesConfigManager":
        """シングルトンインスタンスを返す

        Args:
            config_path: 定義ファイルのパス
                (Noneの場合は環境変数MODULES_CONFIG_PATHを使用。
                相対パスはプロジェクトルート基準)

        Returns:
            ModulesConfigManager: シングルトンインスタンス
        """
        if cls._instance is None:
            instance = super().__new__(cls)
            if config_path is None:
                config_path = os.getenv("MODULES_CONFIG_PATH", DEFAULT_CONFIG_PATH)
            instance._config_path = resolve_config_path(config_path)
            instance._config = instance._load_config()
            cls._instance = instance
        return cls._instance

    def _load_config(self) -> ModulesConfig:
        """JSONファイルからモジュール構成を読み込み

        Returns:
            ModulesConfig: 検証済みのモジュール構成

        Raises:
            FileNotFoundError: 定義ファイルが見つからない場合
            ValueError: JSON形式またはスキーマが不正な場合
        """
        return load_modules_config(self._config_path)

    def get_config(self) -> ModulesConfig:
        """モジュール構成全体を取得

        Returns:
            ModulesConfig: モジュール構成
        """
        return self._config

    def get_panel_config(self, module_name: str, panel_name: str) -> PanelConfig:
        """モジュール名とパネル名からパネル設定を取得

        Args:
            module_name: モジュール名 (例: "Pedestal")
            panel_name: パネル名 (例: "Trim")

        Returns:
            PanelConfig: パネル設定

        Raises:
            ValueError: モジュールまたはパネルが未定義の場合
        """
        panels = self._config.modules.get(module_name)
        if panels is None:
            raise ValueError(
                f"module {module_name} is not configured in {self._config_path}"
            )
        if panel_name not in panels:
            raise ValueError(
                f"panel {panel_name} is not configured under module {module_name}"
            )
        return panels[panel_name]

    @property
    def config_path(self) -> Path:
        """読み込んだ定義ファイルのパス"""
        return self._config_path


def resolve_config_path(config_path: str | Path) -> Path:
    """定義ファイルのパスを解決する

    Args:
        config_path: 絶対パス、またはプロジェクトルートからの相対パス

    Returns:
        Path: 絶対パス
    """
    path = Path(config_path)
    if not path.is_absolute():
        path = _PROJECT_ROOT / path
    return path


def load_modules_config(config_file: Path) -> ModulesConfig:
    """JSONファイルを読み込みModulesConfigとして検証する

    Args:
        config_file: 定義ファイルのパス

    Returns:
        ModulesConfig: 検証済みのモジュール構成

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: JSON形式またはスキーマが不正な場合
    """
    if not config_file.exists():
        raise FileNotFoundError(
            f"Modules config not found: {config_file}\n"
            f"Please create {config_file.name} or set MODULES_CONFIG_PATH"
        )

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
        # Pydanticで検証
        return ModulesConfig.model_validate(data)

    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON format in {config_file}: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid modules config in {config_file}: {e}")
