#!/usr/bin/env python3
"""コントロールパネル ディスパッチャ ランチャー

FastAPI (uvicorn) サーバーを起動し、起動完了まで待機してプロセスを監視する。
モジュール/パネルの構成は .env の MODULES_CONFIG_PATH で指定する。

使い方:
    python main.py
    または
    uv run python main.py
"""

import atexit
import signal
import subprocess
import sys
import time
from pathlib import Path
from typing import Optional
from logging import Logger

import httpx

# プロジェクトルートをPythonパスに追加（インポートパス解決のため）
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from dotenv import load_dotenv

load_dotenv()

from config.settings import Settings

MONITOR_INTERVAL = 2  # 秒
SHUTDOWN_TIMEOUT = 5  # 秒


# --------------------------
#  プロセス管理
# --------------------------
class ProcessManager:
    """APIサーバープロセスのライフサイクルを管理"""

    def __init__(self, logger: Logger, settings: Settings) -> None:
        self.logger = logger
        self.settings = settings
        self.api_process: Optional[subprocess.Popen] = None

    @property
    def base_url(self) -> str:
        return f"http://{self.settings.API_HOST}:{self.settings.API_PORT}"

    def cleanup(self) -> None:
        """APIサーバーを安全に停止 (パネル切断はAPI側のシャットダウンで行う)"""
        if self.api_process is None or self.api_process.poll() is not None:
            return

        self.logger.info("APIサーバーを停止中...")
        try:
            httpx.post(f"{self.base_url}/api/shutdown", timeout=3.0)
            time.sleep(1)
        except httpx.HTTPError as e:
            self.logger.warning(f"シャットダウン要求に失敗しました: {e}")

        self._stop_process(self.api_process, "APIサーバー")
        self.logger.info("シャットダウン完了")

    def _stop_process(self, process: Optional[subprocess.Popen], name: str) -> None:
        """プロセスを安全に終了"""
        if process and process.poll() is None:
            self.logger.info(f"{name}を停止中...")
            process.terminate()
            try:
                process.wait(timeout=SHUTDOWN_TIMEOUT)
            except subprocess.TimeoutExpired:
                self.logger.warning(f"{name}の停止がタイムアウト、強制終了します")
                process.kill()
                process.wait()


def start_api_server(logger: Logger, settings: Settings) -> subprocess.Popen:
    """FastAPI サーバーを起動

    Returns:
        subprocess.Popen: APIサーバープロセス
    """
    logger.info(f"APIサーバーを起動中... ({settings.API_HOST}:{settings.API_PORT})")

    return subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "api.main:app",
            "--app-dir",
            str(project_root / "src"),
            "--host",
            settings.API_HOST,
            "--port",
            str(settings.API_PORT),
        ],
        cwd=str(project_root),
    )


def wait_for_api_ready(logger: Logger, settings: Settings) -> bool:
    """APIサーバーの起動を待機

    /health が ready=true を返すまで1秒間隔で確認する。

    Returns:
        bool: 起動成功ならTrue
    """
    logger.info("APIサーバーの起動を待機中...")
    url = f"http://{settings.API_HOST}:{settings.API_PORT}/health"

    for _ in range(settings.API_STARTUP_TIMEOUT):
        try:
            response = httpx.get(url, timeout=2.0)
            if response.status_code == 200 and response.json().get("ready"):
                logger.info("✓ APIサーバー正常起動")
                return True
        except httpx.HTTPError:
            pass
        time.sleep(1)

    logger.error("APIサーバーの起動がタイムアウトしました")
    return False


def main() -> None:
    """メインエントリーポイント"""
    from backend.logging import launcher_logger as logger

    settings = Settings()

    print("=" * 50)
    print("コントロールパネル ディスパッチャ起動スクリプト")
    print(f"(構成: {settings.MODULES_CONFIG_PATH}, トランスポート: {settings.TRANSPORT.value})")
    print("=" * 50)
    print()

    manager = ProcessManager(logger, settings)

    # シグナルハンドラとatexit登録
    def signal_handler(signum: int, frame: object) -> None:
        manager.cleanup()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    atexit.register(manager.cleanup)

    try:
        manager.api_process = start_api_server(logger, settings)

        if not wait_for_api_ready(logger, settings):
            logger.error("APIサーバーの起動に失敗しました")
            manager.cleanup()
            sys.exit(1)

        print()
        print("=" * 50)
        print("起動完了!")
        print("=" * 50)
        print()
        print(f"  API:   {manager.base_url}")
        print(f"  Docs:  {manager.base_url}/docs")
        print()
        print("Ctrl+C で終了")
        print()

        # プロセス監視ループ
        while True:
            if manager.api_process.poll() is not None:
                logger.error("APIサーバーが予期せず停止しました")
                break
            time.sleep(MONITOR_INTERVAL)

    except KeyboardInterrupt:
        logger.info("ユーザーによる停止")

    finally:
        manager.cleanup()
        sys.exit(0)


if __name__ == "__main__":
    main()
