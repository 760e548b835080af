"""フラグ宣言のデータモデル"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

FlagValue = bool | int | str

DEFAULT_NAMESPACE = "systemui"


class FlagType(str, Enum):
    """フラグ値の型タグ。シリアライズ時の判別子を兼ねる。"""

    BOOLEAN = "boolean"
    INTEGER = "int"
    STRING = "string"

    def accepts(self, value: object) -> bool:
        """value の実行時型がこの型タグと完全に一致するか判定する。

        bool は int のサブクラスだが、INTEGER としては受け付けない。
        """
        if self is FlagType.BOOLEAN:
            return type(value) is bool
        if self is FlagType.INTEGER:
            return type(value) is int
        return type(value) is str


class FlagCategory(str, Enum):
    """ベース値の決まり方を表すカテゴリ。"""

    RELEASED = "released"
    UNRELEASED = "unreleased"
    RESOURCE = "resource"
    SYSPROP = "sysprop"
    PLAIN = "plain"


@dataclass(frozen=True)
class FlagDeclaration:
    """フラグの静的宣言。"""

    id: int
    name: str
    namespace: str
    flag_type: FlagType
    category: FlagCategory
    default: FlagValue
    resource_id: int | None = None
    teamfood: bool = False
    system_property: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("flag name cannot be empty")
        if self.category is FlagCategory.RESOURCE and self.resource_id is None:
            raise ValueError(f"resource flag requires resource_id: {self.name}")
        if self.teamfood and self.flag_type is not FlagType.BOOLEAN:
            raise ValueError(f"only boolean flags can be teamfood: {self.name}")

    @property
    def property_name(self) -> str:
        """sysprop フラグが参照するシステムプロパティ名。"""
        return self.system_property or self.name


def released_flag(
    id: int, name: str, namespace: str = DEFAULT_NAMESPACE, teamfood: bool = False
) -> FlagDeclaration:
    """リリース済みフラグ（既定値 True）を宣言する。"""
    return FlagDeclaration(
        id, name, namespace, FlagType.BOOLEAN, FlagCategory.RELEASED, True, teamfood=teamfood
    )


def unreleased_flag(
    id: int, name: str, namespace: str = DEFAULT_NAMESPACE, teamfood: bool = False
) -> FlagDeclaration:
    """未リリースフラグ（既定値 False）を宣言する。"""
    return FlagDeclaration(
        id, name, namespace, FlagType.BOOLEAN, FlagCategory.UNRELEASED, False, teamfood=teamfood
    )


def resource_boolean_flag(
    id: int, name: str, namespace: str, resource_id: int
) -> FlagDeclaration:
    """リソースから既定値を読む真偽値フラグを宣言する。"""
    return FlagDeclaration(
        id, name, namespace, FlagType.BOOLEAN, FlagCategory.RESOURCE, False,
        resource_id=resource_id,
    )


def sysprop_boolean_flag(
    id: int,
    name: str,
    namespace: str = DEFAULT_NAMESPACE,
    default: bool = False,
    system_property: str | None = None,
) -> FlagDeclaration:
    """システムプロパティから値を読む真偽値フラグを宣言する。"""
    return FlagDeclaration(
        id, name, namespace, FlagType.BOOLEAN, FlagCategory.SYSPROP, default,
        system_property=system_property,
    )


def string_flag(
    id: int, name: str, namespace: str = DEFAULT_NAMESPACE, default: str = ""
) -> FlagDeclaration:
    """文字列フラグを宣言する。"""
    return FlagDeclaration(id, name, namespace, FlagType.STRING, FlagCategory.PLAIN, default)


def resource_string_flag(
    id: int, name: str, namespace: str, resource_id: int
) -> FlagDeclaration:
    """リソースから既定値を読む文字列フラグを宣言する。"""
    return FlagDeclaration(
        id, name, namespace, FlagType.STRING, FlagCategory.RESOURCE, "",
        resource_id=resource_id,
    )


def int_flag(
    id: int, name: str, namespace: str = DEFAULT_NAMESPACE, default: int = 0
) -> FlagDeclaration:
    """整数フラグを宣言する。"""
    return FlagDeclaration(id, name, namespace, FlagType.INTEGER, FlagCategory.PLAIN, default)


def resource_int_flag(
    id: int, name: str, namespace: str, resource_id: int
) -> FlagDeclaration:
    """リソースから既定値を読む整数フラグを宣言する。"""
    return FlagDeclaration(
        id, name, namespace, FlagType.INTEGER, FlagCategory.RESOURCE, 0,
        resource_id=resource_id,
    )


# teamfood グループフラグ。id 1 は予約済み。
TEAMFOOD = unreleased_flag(1, "teamfood")
