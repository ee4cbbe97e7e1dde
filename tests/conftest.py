"""pytest設定とフィクスチャ"""

import os
import sys
from pathlib import Path
import shutil

import pytest

# srcディレクトリをパスに追加
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
sys.path.insert(0, str(src_dir))

# テスト実行前に.envファイルを準備(.env.exampleからコピー)
env_file = project_root / ".env"
env_example = project_root / ".env.example"
if not env_file.exists() and env_example.exists():
    shutil.copy(env_example, env_file)

# テスト用環境変数を設定
os.environ["MODULES_CONFIG_PATH"] = "config/oids.json"
os.environ["TRANSPORT"] = "mock"
os.environ["RESOLUTION_MODE"] = "panel"
os.environ["WRITE_RETRY"] = "2"
os.environ["WRITE_RETRY_DELAY"] = "0.0"
os.environ["LOG_LEVEL"] = "INFO"


@pytest.fixture
def project_root_path():
    """プロジェクトルートのパスを返す"""
    return Path(__file__).parent.parent


@pytest.fixture
def oids_config_path(project_root_path):
    """テスト用のモジュール構成ファイルパスを返す"""
    return project_root_path / "config" / "oids.json"


@pytest.fixture
def reporter():
    """イベントを記録するReporter"""
    from backend.panel.reporter import ListReporter

    return ListReporter()


@pytest.fixture
def mock_transport():
    """メモリ上のトランスポート"""
    from backend.transport.mock_transport import MockTransport

    return MockTransport()


@pytest.fixture(autouse=True)
def reset_singletons():
    """シングルトンをテストごとにリセット

    テストがシングルトンを汚染して、後続テストに
    別の構成が残るのを防ぐ。
    """
    yield
    try:
        from config.modules_config import ModulesConfigManager

        ModulesConfigManager._instance = None
    except ImportError:
        pass
    try:
        from api.services.module_service import ModuleService

        ModuleService._instance = None
        ModuleService._initialized = False
    except ImportError:
        pass  # インポートできない場合はスキップ
