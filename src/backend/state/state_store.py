"""ステートストア

シグナル識別子 → 型付きの値 (整数/浮動小数点/真偽値) を保持する。
パネル間で共有される場合もあるため、書き込みはロックで直列化する
(同一シグナルへの同時書き込みは後勝ち)。
"""

import threading
from typing import Any

from pydantic import TypeAdapter

from backend.exceptions import SignalNotSetError, WrongTypeError
from schemas.oid import Oid
from schemas.state_value import (
    BoolValue,
    FloatValue,
    IntValue,
    StateValue,
    ValueType,
)

_state_value_adapter: TypeAdapter[StateValue] = TypeAdapter(StateValue)


class StateStore:
    """型安全なステートストア

    使用例:
        >>> store = StateStore()
        >>> store.set_int(Oid.oid1, 100)
        >>> store.get_int(Oid.oid1)
        100
        >>> store.get_float(Oid.oid1)  # WrongTypeError
    """

    def __init__(self) -> None:
        self._data: dict[Oid, StateValue] = {}
        self._lock = threading.Lock()

    def set(self, oid: Oid, value: StateValue) -> None:
        """型タグ付きの値を書き込む

        Args:
            oid: シグナル識別子
            value: IntValue / FloatValue / BoolValue
        """
        with self._lock:
            self._data[oid] = value

    def set_int(self, oid: Oid, value: int) -> None:
        self.set(oid, IntValue(value=value))

    def set_float(self, oid: Oid, value: float) -> None:
        self.set(oid, FloatValue(value=float(value)))

    def set_bool(self, oid: Oid, value: bool) -> None:
        self.set(oid, BoolValue(value=value))

    def get(self, oid: Oid) -> StateValue:
        """型タグ付きの値を読み出す

        Args:
            oid: シグナル識別子

        Returns:
            StateValue: 最後に適用された値

        Raises:
            SignalNotSetError: 一度も書き込まれていない場合
        """
        with self._lock:
            try:
                return self._data[oid]
            except KeyError:
                raise SignalNotSetError(f"No value stored for {oid}") from None

    def _get_typed(self, oid: Oid, expected: ValueType) -> Any:
        stored = self.get(oid)
        if stored.type != expected:
            raise WrongTypeError(
                f"{oid} holds type {ValueType(stored.type).value}, "
                f"requested {expected.value}"
            )
        return stored.value

    def get_int(self, oid: Oid) -> int:
        """整数として読み出す

        Raises:
            WrongTypeError: 整数以外が格納されている場合
            SignalNotSetError: 未設定の場合
        """
        return self._get_typed(oid, ValueType.INT)

    def get_float(self, oid: Oid) -> float:
        """浮動小数点として読み出す

        Raises:
            WrongTypeError: 浮動小数点以外が格納されている場合
            SignalNotSetError: 未設定の場合
        """
        return self._get_typed(oid, ValueType.FLOAT)

    def get_bool(self, oid: Oid) -> bool:
        """真偽値として読み出す

        Raises:
            WrongTypeError: 真偽値以外が格納されている場合
            SignalNotSetError: 未設定の場合
        """
        return self._get_typed(oid, ValueType.BOOL)

    def contains(self, oid: Oid) -> bool:
        with self._lock:
            return oid in self._data

    def snapshot(self) -> dict[Oid, StateValue]:
        """現在の全ステートのコピーを返す

        Returns:
            dict[Oid, StateValue]: OID → 値 (値はイミュータブル)
        """
        with self._lock:
            return dict(self._data)

    def dump(self) -> dict[str, dict[str, Any]]:
        """JSON化しやすい形式でステートを返す

        Returns:
            dict[str, dict]: {"oid1": {"type": "F", "value": 12.5}, ...}
        """
        return {
            oid.value: _state_value_adapter.dump_python(value, mode="json")
            for oid, value in self.snapshot().items()
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
