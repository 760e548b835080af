"""フラグ解決エンジンの組み立て"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TextIO

import structlog

from .bridge import ServerOverrideBridge
from .config import FlagsConfig
from .controller import LocalOverrideController, OverrideCommand
from .dump import dump_flags, dump_to_string
from .listeners import FlagListener, FlagListenerRegistry
from .models import TEAMFOOD, FlagDeclaration, FlagValue
from .registry import FlagRegistry
from .resolver import FlagResolver
from .restarter import RecordingRestarter, Restarter
from .server import ServerFlagSource, ServerOverrides
from .sources import (
    InMemoryResources,
    InMemorySystemProperties,
    ResourceSource,
    SystemProperties,
)
from .store import OverrideStore, SettingsStore

logger = structlog.stdlib.get_logger(__name__)


class FeatureFlags:
    """フラグ宣言テーブルと外部コラボレーターから解決エンジン一式を組み立てる。

    使用例:
        flags = FeatureFlags([TEAMFOOD, MY_FLAG], settings=store, restarter=restarter)
        flags.init()
        if flags.is_enabled(MY_FLAG):
            ...
    """

    def __init__(
        self,
        flags: FlagRegistry | Iterable[FlagDeclaration],
        settings: SettingsStore,
        resources: ResourceSource | None = None,
        system_properties: SystemProperties | None = None,
        restarter: Restarter | None = None,
        server_source: ServerFlagSource | None = None,
        config: FlagsConfig | None = None,
        teamfood_flag: FlagDeclaration = TEAMFOOD,
    ) -> None:
        self.config = config or FlagsConfig()
        self.registry = flags if isinstance(flags, FlagRegistry) else FlagRegistry(flags)
        self.restarter = restarter or RecordingRestarter()
        self.override_store = OverrideStore(
            settings,
            prefix=self.config.settings_prefix,
            owner_scope=self.config.owner_scope,
        )
        self.resolver = FlagResolver(
            self.override_store,
            resources or InMemoryResources(),
            system_properties or InMemorySystemProperties(),
            ServerOverrides(),
            teamfood_flag=teamfood_flag,
            local_override_wins=self.config.local_override_wins,
        )
        self.listeners = FlagListenerRegistry()
        self.controller = LocalOverrideController(
            self.resolver,
            self.registry,
            self.override_store,
            self.listeners,
            self.restarter,
            restart_on_change=self.config.restart_on_local_change,
        )
        self.bridge = ServerOverrideBridge(self.resolver, self.restarter)
        self._server_source = server_source
        self._initialized = False

    def init(self) -> None:
        """設定ストアの変更監視とサーバー通知の購読を開始する。2 回目以降は何もしない。"""
        if self._initialized:
            return
        self.override_store.clear_cache_action = self.resolver.clear_cache
        if self._server_source is not None:
            self.bridge.listen(self._server_source)
        self._initialized = True
        logger.info("feature_flags_initialized", flags=len(self.registry))

    def is_enabled(self, flag: FlagDeclaration) -> bool:
        return self.resolver.is_enabled(flag)

    def get_string(self, flag: FlagDeclaration) -> str:
        return self.resolver.get_string(flag)

    def get_int(self, flag: FlagDeclaration) -> int:
        return self.resolver.get_int(flag)

    def add_listener(self, flag: FlagDeclaration, listener: FlagListener) -> None:
        self.listeners.add_listener(flag, listener)

    def remove_listener(self, listener: FlagListener) -> None:
        self.listeners.remove_listener(listener)

    def apply_command(self, name: str | None, raw_value: FlagValue | None = None) -> bool:
        return self.controller.apply_command(name, raw_value)

    def handle_command(self, command: OverrideCommand | None) -> bool:
        return self.controller.handle_command(command)

    def handle_event(self, event: Any) -> bool:  # noqa: ANN401
        return self.controller.handle_event(event)

    def on_server_value_changed(
        self, namespace: str, name: str, new_value: FlagValue | None
    ) -> bool:
        return self.bridge.on_server_value_changed(namespace, name, new_value)

    def dump(self, out: TextIO) -> None:
        dump_flags(self.resolver, self.registry, out, self.config.dump_key_prefix)

    def dump_to_string(self) -> str:
        return dump_to_string(self.resolver, self.registry, self.config.dump_key_prefix)
