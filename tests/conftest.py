"""flags ライブラリのテスト共通フィクスチャ"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from k1s0_flags import (
    TEAMFOOD,
    FeatureFlags,
    FlagDeclaration,
    FlagsConfig,
    FlagType,
    FlagValue,
    InMemoryResources,
    InMemoryServerFlagSource,
    InMemorySettingsStore,
    InMemorySystemProperties,
    RecordingRestarter,
    encode,
    released_flag,
    unreleased_flag,
)

TEAMFOODABLE_A = unreleased_flag(500, name="a", namespace="test", teamfood=True)
TEAMFOODABLE_B = released_flag(501, name="b", namespace="test", teamfood=True)

MakeFlags = Callable[..., FeatureFlags]


def settings_key(name: str) -> str:
    return f"systemui/flags/{name}"


def put_override(
    settings: InMemorySettingsStore, name: str, flag_type: FlagType, value: FlagValue
) -> None:
    """設定ストアへ直接ローカルオーバーライドを書き込む。"""
    settings.put_string(settings_key(name), encode(flag_type, value), "current")


@pytest.fixture
def settings() -> InMemorySettingsStore:
    return InMemorySettingsStore()


@pytest.fixture
def resources() -> InMemoryResources:
    return InMemoryResources()


@pytest.fixture
def system_properties() -> InMemorySystemProperties:
    return InMemorySystemProperties()


@pytest.fixture
def restarter() -> RecordingRestarter:
    return RecordingRestarter()


@pytest.fixture
def server_source() -> InMemoryServerFlagSource:
    return InMemoryServerFlagSource()


@pytest.fixture
def make_flags(
    settings: InMemorySettingsStore,
    resources: InMemoryResources,
    system_properties: InMemorySystemProperties,
    restarter: RecordingRestarter,
    server_source: InMemoryServerFlagSource,
) -> MakeFlags:
    """TEAMFOOD と teamfood 対象フラグ a/b に extra を加えたエンジンを作る。"""

    def _make(
        *extra: FlagDeclaration,
        config: FlagsConfig | None = None,
        with_teamfood: bool = True,
    ) -> FeatureFlags:
        table = [TEAMFOOD, TEAMFOODABLE_A, TEAMFOODABLE_B] if with_teamfood else []
        flags = FeatureFlags(
            [*table, *extra],
            settings=settings,
            resources=resources,
            system_properties=system_properties,
            restarter=restarter,
            server_source=server_source,
            config=config,
        )
        flags.init()
        return flags

    return _make
