"""フラグ宣言とテーブルのユニットテスト"""

from __future__ import annotations

import dataclasses

import pytest
from k1s0_flags import (
    TEAMFOOD,
    FlagCategory,
    FlagDeclaration,
    FlagErrorCodes,
    FlagRegistry,
    FlagType,
    UnknownFlagError,
    int_flag,
    released_flag,
    resource_int_flag,
    string_flag,
    sysprop_boolean_flag,
    unreleased_flag,
)


def test_factory_defaults() -> None:
    """各ファクトリの既定値とカテゴリ。"""
    assert released_flag(1, "r").default is True
    assert released_flag(1, "r").category is FlagCategory.RELEASED
    assert unreleased_flag(2, "u").default is False
    assert string_flag(3, "s").default == ""
    assert int_flag(4, "i", default=5).default == 5
    assert resource_int_flag(5, "ri", "test", 1001).resource_id == 1001
    assert unreleased_flag(6, "u").namespace == "systemui"


def test_teamfood_flag() -> None:
    """teamfood フラグは id 1 の未リリースフラグ。"""
    assert TEAMFOOD.id == 1
    assert TEAMFOOD.name == "teamfood"
    assert TEAMFOOD.default is False


def test_declaration_is_frozen() -> None:
    flag = released_flag(1, "r")
    with pytest.raises(dataclasses.FrozenInstanceError):
        flag.name = "x"  # type: ignore[misc]


def test_declaration_validation() -> None:
    """不正な宣言は ValueError。"""
    with pytest.raises(ValueError):
        released_flag(1, "")
    with pytest.raises(ValueError):
        FlagDeclaration(1, "r", "test", FlagType.INTEGER, FlagCategory.RESOURCE, 0)
    with pytest.raises(ValueError):
        FlagDeclaration(1, "s", "test", FlagType.STRING, FlagCategory.PLAIN, "", teamfood=True)


def test_property_name() -> None:
    """システムプロパティ名の既定はフラグ名。"""
    assert sysprop_boolean_flag(1, "p").property_name == "p"
    assert sysprop_boolean_flag(1, "p", system_property="debug.p").property_name == "debug.p"


def test_flag_type_accepts_exact_types() -> None:
    """bool は INTEGER として受け付けないこと。"""
    assert FlagType.BOOLEAN.accepts(True)
    assert not FlagType.BOOLEAN.accepts(1)
    assert FlagType.INTEGER.accepts(1)
    assert not FlagType.INTEGER.accepts(True)
    assert FlagType.STRING.accepts("")
    assert not FlagType.STRING.accepts(None)


def test_registry_lookup() -> None:
    """名前・名前空間での検索と ID 順の一覧。"""
    registry = FlagRegistry.of(string_flag(3, "c", "test"), TEAMFOOD, int_flag(2, "b", "test"))
    assert registry.get("c") is not None
    assert registry.get("missing") is None
    assert registry.find("test", "b") is not None
    assert registry.find("other", "b") is None
    assert "teamfood" in registry
    assert len(registry) == 3
    assert [f.id for f in registry.sorted_by_id()] == [1, 2, 3]


def test_registry_duplicate_name() -> None:
    """名前の重複登録は UnknownFlagError。"""
    with pytest.raises(UnknownFlagError) as exc_info:
        FlagRegistry.of(released_flag(1, "a"), unreleased_flag(2, "a"))
    assert exc_info.value.code == FlagErrorCodes.UNKNOWN_FLAG


def test_registry_duplicate_id() -> None:
    """ID の重複登録は UnknownFlagError。"""
    with pytest.raises(UnknownFlagError):
        FlagRegistry.of(released_flag(1, "a"), unreleased_flag(1, "b"))
