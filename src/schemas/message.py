from pydantic import BaseModel, ConfigDict, Field


class ParsedMessage(BaseModel):
    """受信行を分割したメッセージ

    シリアルから受信した1行を半角スペースで3つに分割したもの。
    型変換前の文字列のまま保持し、転送時はJSONにシリアライズする。

    Attributes:
        link: シグナル名 (例: "oid1")
        type: 型タグ ("I" / "F" / "B")
        value: 値の文字列表現

    Examples:
        >>> msg = ParsedMessage(link="oid1", type="F", value="12.5")
        >>> msg.to_payload()
        '{"link":"oid1","type":"F","value":"12.5"}'
    """

    model_config = ConfigDict(frozen=True)

    link: str = Field(..., description="シグナル名")
    type: str = Field(..., description="型タグ")
    value: str = Field(..., description="値の文字列")

    def to_payload(self) -> str:
        """トランスポートへ渡すJSON文字列を生成する

        Returns:
            str: {"link", "type", "value"} を持つJSON
        """
        return self.model_dump_json()

    def __str__(self) -> str:
        return f"{self.link} {self.type} {self.value}"
