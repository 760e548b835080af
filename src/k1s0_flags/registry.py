"""宣言済みフラグのテーブル"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .exceptions import UnknownFlagError
from .models import FlagDeclaration


class FlagRegistry:
    """名前と ID で引ける不変のフラグテーブル。

    生成時に名前・ID の重複を検出し UnknownFlagError を送出する。
    """

    def __init__(self, flags: Iterable[FlagDeclaration]) -> None:
        by_name: dict[str, FlagDeclaration] = {}
        by_id: dict[int, FlagDeclaration] = {}
        for flag in flags:
            if flag.name in by_name:
                raise UnknownFlagError(f"Flag {flag.name} already registered")
            if flag.id in by_id:
                raise UnknownFlagError(
                    f"Flag id {flag.id} already registered by {by_id[flag.id].name}"
                )
            by_name[flag.name] = flag
            by_id[flag.id] = flag
        self._by_name: Mapping[str, FlagDeclaration] = MappingProxyType(by_name)
        self._by_id: Mapping[int, FlagDeclaration] = MappingProxyType(by_id)

    @classmethod
    def of(cls, *flags: FlagDeclaration) -> FlagRegistry:
        return cls(flags)

    def get(self, name: str) -> FlagDeclaration | None:
        """名前でフラグを取得する。存在しなければ None。"""
        return self._by_name.get(name)

    def find(self, namespace: str, name: str) -> FlagDeclaration | None:
        """名前空間と名前でフラグを取得する。"""
        flag = self._by_name.get(name)
        if flag is None or flag.namespace != namespace:
            return None
        return flag

    def sorted_by_id(self) -> list[FlagDeclaration]:
        """ID 昇順のフラグ一覧を返す。"""
        return [self._by_id[flag_id] for flag_id in sorted(self._by_id)]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[FlagDeclaration]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)
