"""サーバー側オーバーライドの保持と変更通知元"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

from .models import FlagValue

ServerChangeCallback = Callable[[str, str, FlagValue | None], None]


class ServerOverrides:
    """(namespace, name) をキーにしたサーバーオーバーライド値。メモリ上のみ。"""

    def __init__(self) -> None:
        self._values: dict[tuple[str, str], FlagValue] = {}

    def get(self, namespace: str, name: str) -> FlagValue | None:
        return self._values.get((namespace, name))

    def has_override(self, namespace: str, name: str) -> bool:
        return (namespace, name) in self._values

    def set(self, namespace: str, name: str, value: FlagValue | None) -> None:
        """値を記録する。None はオーバーライドの解除。"""
        if value is None:
            self._values.pop((namespace, name), None)
        else:
            self._values[(namespace, name)] = value

    def __len__(self) -> int:
        return len(self._values)


class ServerFlagSource(ABC):
    """リモートのフラグ変更通知元の抽象基底クラス。"""

    @abstractmethod
    def listen_for_changes(self, callback: ServerChangeCallback) -> None:
        """変更時に callback(namespace, name, value) を呼ぶよう登録する。"""
        ...


class InMemoryServerFlagSource(ServerFlagSource):
    """テスト用インメモリ通知元。set_flag_value で購読者へ即時通知する。"""

    def __init__(self) -> None:
        self._callbacks: list[ServerChangeCallback] = []
        self._lock = threading.Lock()

    def listen_for_changes(self, callback: ServerChangeCallback) -> None:
        with self._lock:
            self._callbacks.append(callback)

    def set_flag_value(self, namespace: str, name: str, value: FlagValue | None) -> None:
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(namespace, name, value)
