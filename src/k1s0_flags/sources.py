"""リソースおよびシステムプロパティの参照元"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Mapping

from .exceptions import ResourceNotFoundError


class ResourceSource(ABC):
    """リソース ID から既定値を引く抽象基底クラス。

    参照が存在しない場合は ResourceNotFoundError を送出する。
    """

    @abstractmethod
    def get_bool(self, resource_id: int) -> bool: ...

    @abstractmethod
    def get_string(self, resource_id: int) -> str | None: ...

    @abstractmethod
    def get_int(self, resource_id: int) -> int: ...


class InMemoryResources(ResourceSource):
    """辞書で保持するリソース。テストや固定構成向け。"""

    def __init__(
        self,
        booleans: Mapping[int, bool] | None = None,
        strings: Mapping[int, str | None] | None = None,
        integers: Mapping[int, int] | None = None,
    ) -> None:
        self.booleans: dict[int, bool] = dict(booleans or {})
        self.strings: dict[int, str | None] = dict(strings or {})
        self.integers: dict[int, int] = dict(integers or {})

    def get_bool(self, resource_id: int) -> bool:
        try:
            return self.booleans[resource_id]
        except KeyError as e:
            raise ResourceNotFoundError(resource_id, e) from e

    def get_string(self, resource_id: int) -> str | None:
        try:
            return self.strings[resource_id]
        except KeyError as e:
            raise ResourceNotFoundError(resource_id, e) from e

    def get_int(self, resource_id: int) -> int:
        try:
            return self.integers[resource_id]
        except KeyError as e:
            raise ResourceNotFoundError(resource_id, e) from e


class SystemProperties(ABC):
    """システムプロパティ参照の抽象基底クラス。"""

    @abstractmethod
    def get_boolean(self, name: str, default: bool) -> bool:
        """プロパティを真偽値として読む。未設定・解釈不能なら default。"""
        ...


_TRUE_VALUES = frozenset({"1", "y", "yes", "on", "true"})
_FALSE_VALUES = frozenset({"0", "n", "no", "off", "false"})


def parse_boolean(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


class InMemorySystemProperties(SystemProperties):
    """辞書で保持するシステムプロパティ。"""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def get_boolean(self, name: str, default: bool) -> bool:
        return parse_boolean(self.values.get(name), default)


class EnvironSystemProperties(SystemProperties):
    """環境変数をシステムプロパティとして扱う。

    プロパティ名は大文字化し "." を "_" に置き換えて prefix を付ける。
    例: prefix="K1S0_" のとき "debug.flag" -> "K1S0_DEBUG_FLAG"
    """

    def __init__(self, prefix: str = "", environ: Mapping[str, str] | None = None) -> None:
        self._prefix = prefix
        self._environ = environ if environ is not None else os.environ

    def env_name(self, name: str) -> str:
        return self._prefix + name.upper().replace(".", "_")

    def get_boolean(self, name: str, default: bool) -> bool:
        return parse_boolean(self._environ.get(self.env_name(name)), default)
