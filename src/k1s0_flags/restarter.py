"""プロセス再起動の抽象"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Restarter(ABC):
    """プロセス再起動を要求する抽象基底クラス。完了は待たない。"""

    @abstractmethod
    def restart(self, reason: str) -> None:
        """再起動を要求する。"""
        ...


class RecordingRestarter(Restarter):
    """テスト用の再起動要求を記録するだけの実装。"""

    def __init__(self) -> None:
        self.reasons: list[str] = []

    def restart(self, reason: str) -> None:
        self.reasons.append(reason)

    @property
    def count(self) -> int:
        return len(self.reasons)
