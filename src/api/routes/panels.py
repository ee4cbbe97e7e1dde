"""モジュール/パネル関連エンドポイント

/api/modules                      - モジュールとパネル記述子の一覧
/api/panels/{name}                - パネルの状態
/api/panels/{name}/messages       - 受信行の投入 (シリアル受信の代替)
/api/state                        - ステートストアの現在値
/api/status                       - サービス状態
/api/events                       - 直近のディスパッチイベント
"""

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from api.services.module_service import module_service
from backend.logging import api_logger as logger
from schemas.registry import PanelDescriptor

router = APIRouter()


class ModuleResponse(BaseModel):
    """モジュールレスポンス"""

    name: str
    resolution_mode: str
    panels: list[PanelDescriptor]


class PanelStatusResponse(BaseModel):
    """パネル状態レスポンス"""

    name: str
    port: str
    enabled: bool
    connected: bool
    signals: list[str]
    last_raw_message: str | None
    previous_raw_message: str | None
    last_resolved_signal: str


class MessageRequest(BaseModel):
    """受信行の投入リクエスト"""

    line: str = Field(..., description="受信行 (例: 'oid1 F 12.5')")


class MessageResponse(BaseModel):
    """受信行の処理結果"""

    panel: str
    outcome: str
    succeeded: bool


@router.get("/modules", response_model=list[ModuleResponse])
async def get_modules() -> list[ModuleResponse]:
    """モジュールとパネル記述子の一覧を取得

    Returns:
        list[ModuleResponse]: 構成の記述順
    """
    return [
        ModuleResponse(
            name=module.name,
            resolution_mode=module.resolution.value,
            panels=list(module.registry.values()),
        )
        for module in module_service.modules
    ]


@router.get("/panels/{name}", response_model=PanelStatusResponse)
async def get_panel(name: str) -> PanelStatusResponse:
    """パネルの状態を取得

    Raises:
        HTTPException: パネルが存在しない場合 (404)
    """
    panel = module_service.find_panel(name)
    if panel is None:
        raise HTTPException(status_code=404, detail=f"Unknown panel: {name}")

    return PanelStatusResponse(
        name=panel.name,
        port=panel.port,
        enabled=panel.enabled,
        connected=panel.connected,
        signals=[oid.value for oid in panel.signals],
        last_raw_message=panel.last_raw_message,
        previous_raw_message=panel.previous_raw_message,
        last_resolved_signal=panel.last_resolved_signal.value,
    )


@router.post("/panels/{name}/messages", response_model=MessageResponse)
def post_message(name: str, request: MessageRequest) -> MessageResponse:
    """受信行をパネルへ投入する

    ディスパッチの失敗 (フォーマット不正など) はエラーではなく結果として返す。
    転送はシリアル書き込みとリトライ待機でブロックするため、同期関数として
    スレッドプールで実行させる。

    Raises:
        HTTPException: パネルが存在しない場合 (404)
    """
    try:
        outcome = module_service.submit(name, request.line)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown panel: {name}")

    logger.debug(f"Message to {name}: {request.line!r} -> {outcome.value}")
    return MessageResponse(
        panel=name, outcome=outcome.value, succeeded=outcome.succeeded
    )


@router.get("/state")
async def get_state() -> dict[str, dict[str, Any]]:
    """ステートストアの現在値を取得

    Returns:
        dict: {"oid1": {"type": "F", "value": 12.5}, ...}
    """
    return module_service.get_state()


@router.get("/status")
async def get_status() -> dict[str, Any]:
    """サービス状態を取得"""
    return module_service.get_status()


@router.get("/events")
async def get_events() -> list[dict[str, Any]]:
    """直近のディスパッチイベントを取得 (古い順)"""
    return module_service.get_recent_events()
