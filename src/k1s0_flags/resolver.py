"""フラグ実効値の解決"""

from __future__ import annotations

import threading
from typing import cast

import structlog

from .cache import CacheEntry, ResolutionCache
from .exceptions import FlagTypeError, NullResourceError
from .models import TEAMFOOD, FlagCategory, FlagDeclaration, FlagType, FlagValue
from .server import ServerOverrides
from .sources import ResourceSource, SystemProperties
from .store import OverrideStore

logger = structlog.stdlib.get_logger(__name__)


class FlagResolver:
    """宣言・リソース・ローカル/サーバーオーバーライドから実効値を求める。

    解決順序:
        1. キャッシュ済みならその値を返す（外部参照なし）
        2. ベース値を求める（既定値 / リソース / システムプロパティ）。
           リソース参照はオーバーライドの有無にかかわらず毎回検証する
        3. ローカル → サーバー（local_override_wins=False なら逆順）の
           オーバーライドを適用する。どちらもなく既定値が False の
           teamfood フラグは teamfood フラグの値に従う
        4. 結果をキャッシュして返す。失敗時はキャッシュしない

    すべての解決と変更は lock（再入可能）の下で直列化される。
    """

    def __init__(
        self,
        override_store: OverrideStore,
        resources: ResourceSource,
        system_properties: SystemProperties,
        server_overrides: ServerOverrides | None = None,
        teamfood_flag: FlagDeclaration = TEAMFOOD,
        local_override_wins: bool = True,
    ) -> None:
        self._override_store = override_store
        self._resources = resources
        self._system_properties = system_properties
        self._server_overrides = (
            server_overrides if server_overrides is not None else ServerOverrides()
        )
        self._teamfood_flag = teamfood_flag
        self._local_override_wins = local_override_wins
        self.cache = ResolutionCache()
        self.lock = threading.RLock()

    @property
    def server_overrides(self) -> ServerOverrides:
        return self._server_overrides

    def is_enabled(self, flag: FlagDeclaration) -> bool:
        return self._read(flag, FlagType.BOOLEAN)  # type: ignore[return-value]

    def get_string(self, flag: FlagDeclaration) -> str:
        return self._read(flag, FlagType.STRING)  # type: ignore[return-value]

    def get_int(self, flag: FlagDeclaration) -> int:
        return self._read(flag, FlagType.INTEGER)  # type: ignore[return-value]

    def get_value(self, flag: FlagDeclaration) -> FlagValue:
        """型タグに応じてフラグを読む。"""
        return self._read(flag, flag.flag_type)

    def cached(self, name: str) -> CacheEntry | None:
        with self.lock:
            return self.cache.get(name)

    def clear_cache(self, name: str) -> None:
        """フラグのキャッシュを破棄する。次回読み取りで再解決される。

        teamfood フラグの場合は、その値に従う teamfood 対象フラグも破棄する。
        """
        with self.lock:
            if self.cache.remove(name):
                logger.debug("flag_cache_cleared", flag=name)
            if name == self._teamfood_flag.name:
                self.clear_teamfood_dependents()

    def clear_teamfood_dependents(self) -> None:
        """teamfood 対象フラグのキャッシュをすべて破棄する。"""
        with self.lock:
            for entry in self.cache:
                if entry.flag.teamfood and entry.flag.name != self._teamfood_flag.name:
                    self.cache.remove(entry.flag.name)
                    logger.debug("flag_cache_cleared", flag=entry.flag.name, reason="teamfood")

    def is_teamfood_flag(self, name: str) -> bool:
        return name == self._teamfood_flag.name

    def clear_all(self) -> None:
        with self.lock:
            self.cache.clear()

    def _read(self, flag: FlagDeclaration, expected: FlagType) -> FlagValue:
        if flag.flag_type is not expected:
            raise FlagTypeError(
                f"Flag {flag.name} is {flag.flag_type.value}, not {expected.value}"
            )
        with self.lock:
            entry = self.cache.get(flag.name)
            if entry is not None and entry.flag.flag_type is flag.flag_type:
                return entry.value
            value = self.compute(flag)
            self.cache.put(flag, value)
            return value

    def compute(self, flag: FlagDeclaration) -> FlagValue:
        """キャッシュを使わずに実効値を計算する。キャッシュは更新しない。

        Raises:
            ResourceNotFoundError: リソース参照が存在しない場合
            NullResourceError: 文字列リソースの内容が None の場合
            SerializationError: ローカルオーバーライドを復元できない場合
        """
        with self.lock:
            base = self._base_value(flag)
            local = self._override_store.read_flag_value(flag.name, flag.flag_type)
            server = self._server_value(flag)

            layers = [("local", local), ("server", server)]
            if not self._local_override_wins:
                layers.reverse()
            for source, value in layers:
                if value is not None:
                    logger.debug("flag_resolved", flag=flag.name, source=source, value=value)
                    return value

            if self._follows_teamfood(flag, base):
                value = self.is_enabled(self._teamfood_flag)
                logger.debug("flag_resolved", flag=flag.name, source="teamfood", value=value)
                return value

            logger.debug("flag_resolved", flag=flag.name, source="base", value=base)
            return base

    def _base_value(self, flag: FlagDeclaration) -> FlagValue:
        if flag.category is FlagCategory.RESOURCE:
            # 宣言時に resource_id の存在を検証済み
            resource_id = cast(int, flag.resource_id)
            if flag.flag_type is FlagType.BOOLEAN:
                return self._resources.get_bool(resource_id)
            if flag.flag_type is FlagType.INTEGER:
                return self._resources.get_int(resource_id)
            content = self._resources.get_string(resource_id)
            if content is None:
                raise NullResourceError(resource_id)
            return content
        if flag.category is FlagCategory.SYSPROP:
            return self._system_properties.get_boolean(flag.property_name, bool(flag.default))
        return flag.default

    def _server_value(self, flag: FlagDeclaration) -> FlagValue | None:
        value = self._server_overrides.get(flag.namespace, flag.name)
        if value is None:
            return None
        if not flag.flag_type.accepts(value):
            logger.warning(
                "server_override_type_mismatch",
                flag=flag.name,
                namespace=flag.namespace,
                expected=flag.flag_type.value,
            )
            return None
        return value

    def _follows_teamfood(self, flag: FlagDeclaration, base: FlagValue) -> bool:
        return (
            flag.teamfood
            and flag.flag_type is FlagType.BOOLEAN
            and flag.name != self._teamfood_flag.name
            and base is False
        )
