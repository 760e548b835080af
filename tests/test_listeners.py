"""FlagListenerRegistry のユニットテスト"""

from __future__ import annotations

from k1s0_flags import FlagEvent, FlagListenerRegistry, string_flag

FLAG = string_flag(1, "one", "test")


class Suppressor:
    def __init__(self) -> None:
        self.calls = 0

    def on_flag_changed(self, event: FlagEvent) -> None:
        self.calls += 1
        event.request_no_restart()


def test_no_listeners_restarts() -> None:
    """リスナーがいなければ再起動すること。"""
    restarts: list[int] = []
    registry = FlagListenerRegistry()
    assert registry.dispatch_and_maybe_restart("one", lambda: restarts.append(1)) is True
    assert restarts == [1]


def test_suppressed_restart() -> None:
    """全リスナーが抑止すれば再起動しないこと。"""
    restarts: list[int] = []
    registry = FlagListenerRegistry()
    first, second = Suppressor(), Suppressor()
    registry.add_listener(FLAG, first)
    registry.add_listener(FLAG, second)
    assert registry.dispatch_and_maybe_restart("one", lambda: restarts.append(1)) is False
    assert (first.calls, second.calls) == (1, 1)
    assert restarts == []


def test_no_restart_action() -> None:
    """restart_action が None なら何も呼ばないこと。"""
    registry = FlagListenerRegistry()
    assert registry.dispatch_and_maybe_restart("one", None) is False


def test_event_defaults() -> None:
    event = FlagEvent("one")
    assert event.should_restart is True
    event.request_no_restart()
    assert event.should_restart is False
