"""フラグ変更リスナー"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from .models import FlagDeclaration


@dataclass
class FlagEvent:
    """フラグ変更イベント。"""

    flag_name: str
    should_restart: bool = field(default=True, init=False)

    def request_no_restart(self) -> None:
        """この変更に対する再起動を不要と申告する。"""
        self.should_restart = False


class FlagListener(Protocol):
    """フラグ変更を受け取るリスナープロトコル。"""

    def on_flag_changed(self, event: FlagEvent) -> None: ...


class FlagListenerRegistry:
    """フラグ名ごとのリスナー一覧。"""

    def __init__(self) -> None:
        self._listeners: list[tuple[str, FlagListener]] = []
        self._lock = threading.Lock()

    def add_listener(self, flag: FlagDeclaration, listener: FlagListener) -> None:
        with self._lock:
            self._listeners.append((flag.name, listener))

    def remove_listener(self, listener: FlagListener) -> None:
        """listener をすべてのフラグから外す。"""
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry[1] is not listener]

    def dispatch_and_maybe_restart(
        self, name: str, restart_action: Callable[[], None] | None
    ) -> bool:
        """リスナーへ通知し、必要なら restart_action を呼ぶ。

        リスナーがいない場合は再起動する。全リスナーが
        request_no_restart() を呼んだ場合のみ再起動を抑止する。

        Returns:
            再起動を要求したら True
        """
        with self._lock:
            targets = [lsn for flag_name, lsn in self._listeners if flag_name == name]
        restart = not targets
        for listener in targets:
            event = FlagEvent(name)
            listener.on_flag_changed(event)
            if event.should_restart:
                restart = True
        if restart and restart_action is not None:
            restart_action()
            return True
        return False
