from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PanelConfig(BaseModel):
    """パネル1枚分の設定

    config/oids.jsonのパネルエントリに対応する。
    キーは "Oids" / "oids" のどちらの表記でも読み込める。

    Attributes:
        oids: シグナル名のリスト (記述順を保持)
        port: 論理ポート名 (例: "COM3", "/dev/ttyUSB0")
        status: 有効フラグ (Falseのパネルにはディスパッチしない)
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "oids": ["OverheadBrightForOledStep"],
                "port": "COM3",
                "status": True,
            }
        },
    )

    oids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("oids", "Oids"),
        description="シグナル名のリスト",
    )
    port: str = Field(
        ..., validation_alias=AliasChoices("port", "Port"), description="論理ポート名"
    )
    status: bool = Field(
        default=True,
        validation_alias=AliasChoices("status", "Status"),
        description="有効フラグ",
    )


class ModulesConfig(BaseModel):
    """モジュール構成全体

    モジュール名 → パネル名 → PanelConfig の階層。
    dictの挿入順 (= JSONの記述順) がパネル登録順になる。

    Examples:
        >>> config = ModulesConfig.model_validate(
        ...     {"Modules": {"Pedestal": {"Trim": {"Oids": ["oid1"], "Port": "COM3"}}}}
        ... )
        >>> config.modules["Pedestal"]["Trim"].port
        'COM3'
    """

    model_config = ConfigDict(populate_by_name=True)

    modules: dict[str, dict[str, PanelConfig]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("modules", "Modules"),
        description="モジュール名 → パネル名 → パネル設定",
    )

    def panel_count(self) -> int:
        """全モジュールのパネル総数を返す"""
        return sum(len(panels) for panels in self.modules.values())
