from pydantic import BaseModel, ConfigDict, Field

from .oid import Oid


class PanelDescriptor(BaseModel):
    """モジュールのレジストリに登録されるパネル記述子

    Attributes:
        name: パネル名 (モジュール内で一意)
        signals: 登録シグナル (登録順)
        port: 論理ポート名
        enabled: 有効フラグ
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="パネル名")
    signals: tuple[Oid, ...] = Field(default=(), description="登録シグナル")
    port: str = Field(..., description="論理ポート名")
    enabled: bool = Field(default=True, description="有効フラグ")


class LifecycleReport(BaseModel):
    """ライフサイクル一括呼び出しの結果

    モジュール単位の結果とパネルごとの結果を保持する。
    1枚のパネルが失敗しても残りのパネルは呼び出される。

    Attributes:
        stage: "initialize" / "connect" / "disconnect"
        module: モジュール名
        module_ok: モジュール自身の処理結果
        panels: パネル名 → 結果 (登録順)
        skipped: 無効のため呼び出さなかったパネル名
    """

    stage: str
    module: str
    module_ok: bool
    panels: dict[str, bool] = Field(default_factory=dict)
    skipped: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """モジュールと全パネルが成功していればTrue"""
        return self.module_ok and all(self.panels.values())

    @property
    def failed(self) -> list[str]:
        """失敗したパネル名のリスト"""
        return [name for name, ok in self.panels.items() if not ok]
