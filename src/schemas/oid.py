from enum import Enum


class Oid(str, Enum):
    """シグナル識別子 (OID)

    コントロールパネル上でアドレス可能なシグナルの閉じた集合。
    Undefinedは「解決できなかった」ことを示す番兵値。

    Attributes:
        Undefined: 未定義 (番兵値)
        OverheadBrightForOledStep: オーバーヘッドOLED輝度ステップ
        OverheadBrightForLedStep: オーバーヘッドLED輝度ステップ
    """

    Undefined = "Undefined"
    OverheadBrightForOledStep = "OverheadBrightForOledStep"
    OverheadBrightForLedStep = "OverheadBrightForLedStep"
    oid1 = "oid1"
    oid2 = "oid2"
    oidA1 = "oidA1"
    oidA2 = "oidA2"
    oidB1 = "oidB1"
    oidB2 = "oidB2"
    Takis = "Takis"

    @classmethod
    def resolve(cls, name: str) -> "Oid":
        """名前からOIDを解決する

        大文字小文字を区別した完全一致で検索する。
        未知の名前はエラーではなくUndefinedを返すので、呼び出し側で確認すること。

        Args:
            name: シグナル名 (例: "oid1")

        Returns:
            Oid: 解決したOID (未知の名前はOid.Undefined)

        Examples:
            >>> Oid.resolve("oid1")
            <Oid.oid1: 'oid1'>
            >>> Oid.resolve("OID1")
            <Oid.Undefined: 'Undefined'>
        """
        member = cls.__members__.get(name)
        return member if member is not None else cls.Undefined

    @property
    def is_defined(self) -> bool:
        """番兵値でなければTrue"""
        return self is not Oid.Undefined

    def __str__(self) -> str:
        return self.value
