"""解決済みフラグ値のキャッシュ"""

from __future__ import annotations

from collections.abc import Iterator

from .models import FlagDeclaration, FlagValue


class CacheEntry:
    __slots__ = ("flag", "value")

    def __init__(self, flag: FlagDeclaration, value: FlagValue) -> None:
        self.flag = flag
        self.value = value

    def __repr__(self) -> str:
        return f"CacheEntry({self.flag.name!r}, {self.value!r})"


class ResolutionCache:
    """フラグ名をキーに最後に解決した実効値を保持するキャッシュ。

    スレッド安全性は呼び出し側のロックに委ねる。
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def get(self, name: str) -> CacheEntry | None:
        return self._entries.get(name)

    def put(self, flag: FlagDeclaration, value: FlagValue) -> None:
        self._entries[flag.name] = CacheEntry(flag, value)

    def remove(self, name: str) -> bool:
        """エントリを削除する。削除できたら True。"""
        return self._entries.pop(name, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[CacheEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
