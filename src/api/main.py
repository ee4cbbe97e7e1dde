"""FastAPI メインアプリケーション

コントロールパネル ディスパッチャAPI。
モジュール/パネルのライフサイクルを一元管理し、状態参照と受信行の投入を提供。

起動方法:
    uvicorn api.main:app --app-dir src --host 127.0.0.1 --port 8000
"""

import os
import platform
import signal
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from dotenv import load_dotenv

# srcディレクトリをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

# .envファイルを読み込む
load_dotenv()

from api.routes import panels, system
from api.services.module_service import module_service
from backend.logging import api_logger as logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """アプリケーションのライフサイクル管理

    起動時: 構成を読み込み全パネルを接続
    終了時: 全パネルを切断
    """
    logger.info("API Server starting...")
    module_service.initialize()

    yield

    logger.info("API Server shutting down...")
    module_service.shutdown()
    logger.info("API Server shutdown complete")


app = FastAPI(
    title="Dynamic Module System API",
    description="コントロールパネル シグナルディスパッチャ API",
    version="0.1.0",
    lifespan=lifespan,
)

# ルーター登録
app.include_router(panels.router, prefix="/api", tags=["panels"])
app.include_router(system.router, prefix="/api", tags=["system"])


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """ルートパス

    APIサーバーの情報を返す。
    """
    return {
        "name": "Dynamic Module System API",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str | int | bool]:
    """ヘルスチェック (軽量)

    パネル通信は行わず、プロセスの生存とサービスの準備状態のみ返す。

    Returns:
        {"status": "ok", "pid": <プロセスID>, "ready": <bool>}
    """
    return {"status": "ok", "pid": os.getpid(), "ready": module_service.is_ready()}


# シャットダウンシグナルハンドラ (Linux/Raspberry Pi用)
# Windows環境ではuvicornのデフォルト処理に任せる
if platform.system() != "Windows":

    def handle_shutdown_signal(signum: int, frame: object) -> None:
        """シグナル受信時のクリーンアップ"""
        logger.info(f"Received signal {signum}, initiating shutdown...")
        module_service.shutdown()
        sys.exit(0)

    signal.signal(signal.SIGTERM, handle_shutdown_signal)
    signal.signal(signal.SIGINT, handle_shutdown_signal)
