"""受信行の解析と型変換

受信フォーマット: "<シグナル名> <型タグ> <値>" (半角スペース1個区切り)

例:
    "OverheadBrightForOledStep I 100"
    "oid1 F 12.5"
    "oidB1 B true"
"""

import math
import re

from backend.exceptions import InvalidValueError, MessageFormatError, UnknownTypeError
from schemas.message import ParsedMessage
from schemas.state_value import BoolValue, FloatValue, IntValue, StateValue, ValueType

FIELD_SEPARATOR = " "
FIELD_COUNT = 3

# 符号付き32ビット整数の範囲
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def tokenize(raw_line: str) -> ParsedMessage:
    """受信行を3つのフィールドに分割する

    区切りは半角スペース1個のみ。連続スペースは空フィールドとして数える。

    Args:
        raw_line: 受信した1行 (改行を含まない)

    Returns:
        ParsedMessage: 分割結果

    Raises:
        MessageFormatError: フィールド数が3でない場合
    """
    parts = raw_line.split(FIELD_SEPARATOR)
    if len(parts) != FIELD_COUNT:
        raise MessageFormatError(
            f"expected {FIELD_COUNT} fields, got {len(parts)}: {raw_line!r}"
        )
    link, type_tag, value = parts
    return ParsedMessage(link=link, type=type_tag, value=value)


def parse_int(raw: str) -> int:
    """整数リテラルを解析する (符号付き32ビット)

    前後の空白 (タブ、CR等) は無視する。

    Raises:
        InvalidValueError: 数字以外を含む、または範囲外の場合
    """
    literal = raw.strip()
    if not _INT_PATTERN.fullmatch(literal):
        raise InvalidValueError(f"not an integer literal: {raw!r}")
    value = int(literal)
    if not INT_MIN <= value <= INT_MAX:
        raise InvalidValueError(f"integer out of range: {raw!r}")
    return value


def parse_float(raw: str) -> float:
    """浮動小数点リテラルを解析する

    前後の空白は無視する。NaN と ±inf は受け付けない
    (ステートはJSONで参照・転送されるため有限値のみ)。

    Raises:
        InvalidValueError: 解析できない、または有限値でない場合
    """
    literal = raw.strip()
    # "1_0" のようなPython固有表記は受け付けない
    if "_" in literal:
        raise InvalidValueError(f"not a float literal: {raw!r}")
    try:
        value = float(literal)
    except ValueError:
        raise InvalidValueError(f"not a float literal: {raw!r}") from None
    if not math.isfinite(value):
        raise InvalidValueError(f"non-finite float is not accepted: {raw!r}")
    return value


def parse_bool(raw: str) -> bool:
    """真偽値リテラル ("true" / "false"、大文字小文字無視) を解析する

    前後の空白は無視する。

    Raises:
        InvalidValueError: true/false以外の場合
    """
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise InvalidValueError(f"not a boolean literal: {raw!r}")


def coerce_value(type_tag: str, raw_value: str) -> StateValue:
    """型タグに従って値を変換する

    Args:
        type_tag: "I" / "F" / "B"
        raw_value: 値の文字列

    Returns:
        StateValue: 型タグ付きの値

    Raises:
        UnknownTypeError: 型タグが I/F/B 以外の場合
        InvalidValueError: 値が解析できない場合

    Examples:
        >>> coerce_value("I", "100")
        IntValue(type=<ValueType.INT: 'I'>, value=100)
    """
    try:
        value_type = ValueType(type_tag)
    except ValueError:
        raise UnknownTypeError(f"unknown type tag: {type_tag!r}") from None

    if value_type is ValueType.INT:
        return IntValue(value=parse_int(raw_value))
    if value_type is ValueType.FLOAT:
        return FloatValue(value=parse_float(raw_value))
    return BoolValue(value=parse_bool(raw_value))
