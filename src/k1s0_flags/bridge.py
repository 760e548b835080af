"""サーバー変更通知の反映と再起動判定"""

from __future__ import annotations

import structlog

from .exceptions import FlagError
from .models import FlagValue
from .resolver import FlagResolver
from .restarter import Restarter
from .server import ServerFlagSource

logger = structlog.stdlib.get_logger(__name__)


class ServerOverrideBridge:
    """サーバーからのフラグ変更をキャッシュへ反映し、必要なら再起動する。

    まだ読まれていないフラグは記録のみ行う。読まれたフラグは新しい
    記録で実効値を再計算し、値が変わった場合だけ再起動を要求する。
    """

    def __init__(self, resolver: FlagResolver, restarter: Restarter) -> None:
        self._resolver = resolver
        self._restarter = restarter

    def listen(self, source: ServerFlagSource) -> None:
        source.listen_for_changes(self.on_server_value_changed)

    def server_override(self, namespace: str, name: str) -> FlagValue | None:
        """記録済みのサーバー値を返す。なければ None。"""
        with self._resolver.lock:
            return self._resolver.server_overrides.get(namespace, name)

    def has_override(self, namespace: str, name: str) -> bool:
        with self._resolver.lock:
            return self._resolver.server_overrides.has_override(namespace, name)

    def on_server_value_changed(
        self, namespace: str, name: str, new_value: FlagValue | None
    ) -> bool:
        """サーバー値の変更を処理する。

        Args:
            namespace: フラグの名前空間
            name: フラグ名
            new_value: 新しい値。None はサーバーオーバーライドの解除

        Returns:
            再起動を要求したら True
        """
        resolver = self._resolver
        with resolver.lock:
            entry = resolver.cache.get(name)
            if entry is not None and entry.flag.namespace != namespace:
                entry = None
            if (
                entry is not None
                and new_value is not None
                and not entry.flag.flag_type.accepts(new_value)
            ):
                logger.warning(
                    "server_flag_type_mismatch",
                    flag=name,
                    namespace=namespace,
                    expected=entry.flag.flag_type.value,
                )
                return False

            resolver.server_overrides.set(namespace, name, new_value)
            if entry is None:
                logger.debug("server_flag_recorded", flag=name, namespace=namespace)
                return False

            try:
                value = resolver.compute(entry.flag)
            except FlagError as e:
                resolver.clear_cache(name)
                logger.error(
                    "server_flag_recompute_failed",
                    flag=name,
                    namespace=namespace,
                    error=str(e),
                )
                return False
            if value == entry.value:
                logger.debug("server_flag_unchanged", flag=name, namespace=namespace)
                return False
            resolver.cache.put(entry.flag, value)
            if resolver.is_teamfood_flag(name):
                resolver.clear_teamfood_dependents()

        reason = f"Server flag change: {namespace}.{name}"
        logger.info("server_flag_changed", flag=name, namespace=namespace, value=value)
        self._restarter.restart(reason)
        return True
