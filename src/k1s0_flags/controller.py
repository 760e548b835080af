"""ローカルオーバーライドコマンドの検証と適用"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import partial
from typing import Any, Literal

import structlog
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
)

from .exceptions import SerializationError
from .listeners import FlagListenerRegistry
from .models import FlagValue
from .registry import FlagRegistry
from .resolver import FlagResolver
from .restarter import Restarter
from .serializer import serializer_for
from .store import OverrideStore

logger = structlog.stdlib.get_logger(__name__)


class OverrideCommand(BaseModel):
    """外部チャネルから届くオーバーライドコマンド。"""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    action: Literal["set", "clear"] = "set"
    flag_name: StrictStr = Field(alias="flagName")
    value: StrictBool | StrictInt | StrictStr | None = None

    @classmethod
    def parse(cls, event: Any) -> OverrideCommand | None:  # noqa: ANN401
        """イベントを検証してコマンドに変換する。不正なイベントは None。"""
        if not isinstance(event, Mapping):
            return None
        try:
            return cls.model_validate(dict(event))
        except ValidationError:
            return None


class LocalOverrideController:
    """ローカルオーバーライドの設定・解除コマンドを処理する。

    不正なコマンド（未知のフラグ名、型不一致など）はエラーにせず無視する。
    有効なコマンドは 永続化 → キャッシュ破棄 → リスナー通知 の順に処理する。
    """

    def __init__(
        self,
        resolver: FlagResolver,
        registry: FlagRegistry,
        override_store: OverrideStore,
        listeners: FlagListenerRegistry,
        restarter: Restarter,
        restart_on_change: bool = True,
    ) -> None:
        self._resolver = resolver
        self._registry = registry
        self._override_store = override_store
        self._listeners = listeners
        self._restarter = restarter
        self._restart_on_change = restart_on_change

    def handle_event(self, event: Any) -> bool:  # noqa: ANN401
        """生のイベント {action, flagName, value} を処理する。"""
        command = OverrideCommand.parse(event)
        if command is None:
            logger.debug("flag_command_malformed")
            return False
        return self.handle_command(command)

    def handle_command(self, command: OverrideCommand | None) -> bool:
        if command is None:
            return False
        if command.action == "clear":
            return self.apply_command(command.flag_name)
        return self.apply_command(command.flag_name, command.value)

    def apply_command(self, name: str | None, raw_value: FlagValue | None = None) -> bool:
        """オーバーライドを設定する。raw_value が None の場合は解除する。

        Returns:
            ストアへ書き込んだら True
        """
        if not name:
            return False
        flag = self._registry.get(name)
        if flag is None:
            logger.info("flag_override_ignored", flag=name, reason="unknown flag")
            return False
        if raw_value is None:
            with self._resolver.lock:
                self._override_store.erase(name)
                self._commit(name)
            logger.info("flag_override_cleared", flag=name)
            return True
        if not flag.flag_type.accepts(raw_value):
            logger.info(
                "flag_override_ignored",
                flag=name,
                reason="type mismatch",
                expected=flag.flag_type.value,
                actual=type(raw_value).__name__,
            )
            return False

        serializer = serializer_for(flag.flag_type)
        with self._resolver.lock:
            try:
                current = self._override_store.read_flag_value(name, flag.flag_type)
            except SerializationError:
                logger.warning("flag_override_corrupt", flag=name)
                current = None
            if current == raw_value:
                logger.info("flag_override_unchanged", flag=name)
                return False
            self._override_store.write_flag_value(name, serializer.encode(raw_value))
            self._commit(name)
        logger.info("flag_override_set", flag=name, value=raw_value)
        return True

    def _commit(self, name: str) -> None:
        self._resolver.clear_cache(name)
        restart_action: Callable[[], None] | None = None
        if self._restart_on_change:
            restart_action = partial(self._restarter.restart, f"Flag changed: {name}")
        self._listeners.dispatch_and_maybe_restart(name, restart_action)
