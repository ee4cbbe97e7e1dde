"""システム関連エンドポイント

/api/shutdown - 全パネルを切断して安全にシャットダウン
/api/reload   - 構成ファイルを読み直してパネルを再接続
"""

import asyncio
import os
import signal

from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from api.services.module_service import module_service
from backend.exceptions import RegistrationError
from backend.logging import api_logger as logger

router = APIRouter()


class ShutdownResponse(BaseModel):
    """シャットダウンレスポンス"""

    status: str
    message: str


class ReloadResponse(BaseModel):
    """構成再読み込みレスポンス"""

    success: bool
    module_count: int
    failed_panels: list[str]


@router.post("/shutdown", response_model=ShutdownResponse)
async def shutdown_server() -> ShutdownResponse:
    """APIサーバーを安全にシャットダウン

    1. 全パネルを切断
    2. ログ出力
    3. プロセス終了シグナル送信

    Returns:
        ShutdownResponse: シャットダウン開始通知
    """
    logger.info("Shutdown requested via API")

    # 切断は受信スレッドのjoinでブロックするためスレッドプールで実行
    await run_in_threadpool(module_service.shutdown)

    # レスポンスを返した後に終了するため、バックグラウンドで実行
    async def delayed_shutdown() -> None:
        try:
            await asyncio.sleep(0.5)  # レスポンス送信を待つ
            logger.info("Sending SIGTERM to self...")
            os.kill(os.getpid(), signal.SIGTERM)
        except Exception as e:
            logger.error(f"Error during delayed shutdown: {e}")

    asyncio.create_task(delayed_shutdown())

    return ShutdownResponse(
        status="shutting_down",
        message="シャットダウンを開始しました。全パネルを切断しました。",
    )


@router.post("/reload", response_model=ReloadResponse)
def reload_config() -> ReloadResponse:
    """構成ファイルを読み直す

    既存のパネルを切断してから、構成ファイルに従って再構築・接続する。
    ポートの開閉でブロックするため同期関数としてスレッドプールで実行させる。

    Returns:
        ReloadResponse: 再読み込み結果

    Raises:
        HTTPException: 構成ファイルが見つからない、または不正な場合 (500)
    """
    try:
        reports = module_service.initialize()
    except (FileNotFoundError, ValueError, RegistrationError) as e:
        logger.error(f"Config reload failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    failed = [name for report in reports for name in report.failed]
    logger.info(f"Config reloaded via API (failed panels: {failed})")
    return ReloadResponse(
        success=not failed,
        module_count=len(module_service.modules),
        failed_panels=failed,
    )
