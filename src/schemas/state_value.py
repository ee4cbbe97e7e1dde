from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt


class ValueType(str, Enum):
    """メッセージの型タグ

    Attributes:
        INT: 整数 ("I")
        FLOAT: 浮動小数点 ("F")
        BOOL: 真偽値 ("B")
    """

    INT = "I"
    FLOAT = "F"
    BOOL = "B"


class IntValue(BaseModel):
    """整数のステート値"""

    model_config = ConfigDict(frozen=True)

    type: Literal[ValueType.INT] = ValueType.INT
    value: StrictInt


class FloatValue(BaseModel):
    """浮動小数点のステート値"""

    model_config = ConfigDict(frozen=True)

    type: Literal[ValueType.FLOAT] = ValueType.FLOAT
    value: StrictFloat


class BoolValue(BaseModel):
    """真偽値のステート値"""

    model_config = ConfigDict(frozen=True)

    type: Literal[ValueType.BOOL] = ValueType.BOOL
    value: StrictBool


# 型タグで判別するステート値 (タグ付き共用体)
StateValue = Annotated[
    Union[IntValue, FloatValue, BoolValue], Field(discriminator="type")
]
