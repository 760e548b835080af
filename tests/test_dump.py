"""ダンプ出力のユニットテスト"""

from __future__ import annotations

import io

import pytest
from conftest import put_override
from k1s0_flags import (
    FeatureFlags,
    FlagsConfig,
    FlagType,
    InMemoryResources,
    InMemorySettingsStore,
    ResourceNotFoundError,
    format_flag_line,
    int_flag,
    released_flag,
    resource_boolean_flag,
    resource_string_flag,
    string_flag,
    unreleased_flag,
)

FLAG1 = released_flag(1, "1", "test")
FLAG2 = resource_boolean_flag(2, "2", "test", 1002)
FLAG3 = unreleased_flag(3, "3", "test")
FLAG4 = string_flag(4, "4", "test", "")
FLAG5 = string_flag(5, "5", "test", "flag5default")
FLAG6 = resource_string_flag(6, "6", "test", 1006)
FLAG7 = resource_string_flag(7, "7", "test", 1007)


@pytest.fixture
def dump_resources() -> InMemoryResources:
    return InMemoryResources(
        booleans={1002: True},
        strings={1006: "resource1006", 1007: "resource1007"},
    )


def test_dump_format(settings: InMemorySettingsStore, dump_resources: InMemoryResources) -> None:
    """読み取り済みフラグの実効値が決められた形式で出力されること。"""
    put_override(settings, "7", FlagType.STRING, "override7")
    flags = FeatureFlags(
        [FLAG7, FLAG6, FLAG5, FLAG4, FLAG3, FLAG2, FLAG1],
        settings=settings,
        resources=dump_resources,
    )
    flags.init()

    assert flags.is_enabled(FLAG1) is True
    assert flags.is_enabled(FLAG2) is True
    assert flags.is_enabled(FLAG3) is False
    assert flags.get_string(FLAG4) == ""
    assert flags.get_string(FLAG5) == "flag5default"
    assert flags.get_string(FLAG6) == "resource1006"
    assert flags.get_string(FLAG7) == "override7"

    dump = flags.dump_to_string()
    assert " sysui_flag_1: true\n" in dump
    assert " sysui_flag_2: true\n" in dump
    assert " sysui_flag_3: false\n" in dump
    assert ' sysui_flag_4: [length=0] ""\n' in dump
    assert ' sysui_flag_5: [length=12] "flag5default"\n' in dump
    assert ' sysui_flag_6: [length=12] "resource1006"\n' in dump
    assert ' sysui_flag_7: [length=9] "override7"\n' in dump
    # ID 順に 1 フラグ 1 行
    keys = [line.split(":")[0].strip() for line in dump.splitlines()]
    assert keys == [f"sysui_flag_{i}" for i in range(1, 8)]


def test_dump_resolves_unread_flags(
    settings: InMemorySettingsStore, dump_resources: InMemoryResources
) -> None:
    """未読のフラグもダンプ時に解決してキャッシュすること。"""
    flags = FeatureFlags(
        [FLAG2, int_flag(8, "8", "test", 42)],
        settings=settings,
        resources=dump_resources,
    )
    out = io.StringIO()
    flags.dump(out)
    assert out.getvalue() == " sysui_flag_2: true\n sysui_flag_8: 42\n"
    assert flags.resolver.cached("8") is not None


def test_dump_propagates_resource_errors(settings: InMemorySettingsStore) -> None:
    """ダンプでもリソース参照エラーを送出すること。"""
    flags = FeatureFlags([FLAG6], settings=settings, resources=InMemoryResources())
    with pytest.raises(ResourceNotFoundError):
        flags.dump_to_string()


def test_dump_key_prefix_from_config(settings: InMemorySettingsStore) -> None:
    """キー接頭辞を設定で変更できること。"""
    flags = FeatureFlags([FLAG3], settings=settings, config=FlagsConfig(dump_key_prefix="f_"))
    assert flags.dump_to_string() == " f_3: false\n"


def test_format_flag_line() -> None:
    """型ごとの行形式。"""
    assert format_flag_line("k", FLAG1, True) == " k: true\n"
    assert format_flag_line("k", int_flag(9, "9"), -3) == " k: -3\n"
    assert format_flag_line("k", FLAG5, "ab") == ' k: [length=2] "ab"\n'
