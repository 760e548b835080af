"""フラグ値の JSON エンベロープ変換"""

from __future__ import annotations

import json
from dataclasses import dataclass

from .exceptions import SerializationError
from .models import FlagType, FlagValue


@dataclass(frozen=True)
class FlagSerializer:
    """単一型のシリアライザー。

    保存形式は {"type": <判別子>, "value": <値>} の JSON 文字列。
    """

    flag_type: FlagType

    def encode(self, value: FlagValue) -> str:
        """値を保存用文字列に変換する。"""
        if not self.flag_type.accepts(value):
            raise SerializationError(
                f"Cannot encode {type(value).__name__} as {self.flag_type.value}"
            )
        return json.dumps(
            {"type": self.flag_type.value, "value": value},
            separators=(",", ":"),
        )

    def decode(self, data: str) -> FlagValue:
        """保存用文字列から値を復元する。"""
        try:
            envelope = json.loads(data)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Malformed flag data: {data!r}", e) from e
        if not isinstance(envelope, dict) or "value" not in envelope:
            raise SerializationError(f"Missing flag value: {data!r}")
        if envelope.get("type") != self.flag_type.value:
            raise SerializationError(
                f"Expected type {self.flag_type.value}, got {envelope.get('type')!r}"
            )
        value = envelope["value"]
        if not self.flag_type.accepts(value):
            raise SerializationError(
                f"Value {value!r} is not a valid {self.flag_type.value}"
            )
        return value


BOOLEAN_SERIALIZER = FlagSerializer(FlagType.BOOLEAN)
INT_SERIALIZER = FlagSerializer(FlagType.INTEGER)
STRING_SERIALIZER = FlagSerializer(FlagType.STRING)

_SERIALIZERS: dict[FlagType, FlagSerializer] = {
    FlagType.BOOLEAN: BOOLEAN_SERIALIZER,
    FlagType.INTEGER: INT_SERIALIZER,
    FlagType.STRING: STRING_SERIALIZER,
}


def serializer_for(flag_type: FlagType) -> FlagSerializer:
    """型タグに対応するシリアライザーを返す。"""
    return _SERIALIZERS[flag_type]


def encode(flag_type: FlagType, value: FlagValue) -> str:
    return serializer_for(flag_type).encode(value)


def decode(flag_type: FlagType, data: str) -> FlagValue:
    return serializer_for(flag_type).decode(data)
