"""ローカルオーバーライドの永続化"""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

import structlog

from .exceptions import FlagError, FlagErrorCodes
from .models import FlagType, FlagValue
from .serializer import serializer_for

logger = structlog.stdlib.get_logger(__name__)

SettingsObserver = Callable[[str], None]


class SettingsStore(ABC):
    """キーと文字列値を保存する設定ストア抽象基底クラス。"""

    def __init__(self) -> None:
        self._observers: list[SettingsObserver] = []

    @abstractmethod
    def get_string(self, key: str) -> str | None:
        """キーに対応する値を取得する。存在しなければ None。"""
        ...

    @abstractmethod
    def put_string(self, key: str, value: str, owner_scope: str) -> None:
        """キーと値を保存する。owner_scope は書き込み主体のスコープ。"""
        ...

    def add_observer(self, observer: SettingsObserver) -> None:
        """変更されたキーを受け取るオブザーバーを登録する。"""
        self._observers.append(observer)

    def _notify(self, key: str) -> None:
        for observer in list(self._observers):
            observer(key)


class InMemorySettingsStore(SettingsStore):
    """テスト用インメモリ設定ストア。"""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__()
        self._values: dict[str, str] = dict(initial or {})
        self.owners: dict[str, str] = {}

    def get_string(self, key: str) -> str | None:
        return self._values.get(key)

    def put_string(self, key: str, value: str, owner_scope: str) -> None:
        self._values[key] = value
        self.owners[key] = owner_scope
        self._notify(key)


class JsonFileSettingsStore(SettingsStore):
    """JSON ファイルに保存する設定ストア。

    書き込みごとにファイル全体を一時ファイル経由で置き換える。
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self._path = path
        self._lock = threading.Lock()
        self._values: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise FlagError(
                code=FlagErrorCodes.READ_FILE,
                message=f"Failed to read settings file: {self._path}",
                cause=e,
            ) from e
        try:
            data = json.loads(text) if text.strip() else {}
        except ValueError as e:
            raise FlagError(
                code=FlagErrorCodes.SERIALIZATION_ERROR,
                message=f"Failed to parse settings file: {self._path}",
                cause=e,
            ) from e
        if not isinstance(data, dict):
            raise FlagError(
                code=FlagErrorCodes.SERIALIZATION_ERROR,
                message=f"Settings file must contain an object: {self._path}",
            )
        invalid = sorted(key for key, value in data.items() if not isinstance(value, str))
        if invalid:
            raise FlagError(
                code=FlagErrorCodes.SERIALIZATION_ERROR,
                message=f"Settings values must be strings: {', '.join(invalid)} in {self._path}",
            )
        return dict(data)

    def get_string(self, key: str) -> str | None:
        return self._values.get(key)

    def put_string(self, key: str, value: str, owner_scope: str) -> None:
        with self._lock:
            self._values[key] = value
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")
            tmp.replace(self._path)
        logger.debug("settings_written", key=key, owner_scope=owner_scope)
        self._notify(key)


class OverrideStore:
    """設定ストア上のローカルオーバーライドを読み書きするアダプター。

    キーは "<prefix>/<フラグ名>"。空文字列はオーバーライドなしを表す。
    """

    def __init__(
        self,
        settings: SettingsStore,
        prefix: str = "systemui/flags",
        owner_scope: str = "current",
    ) -> None:
        self._settings = settings
        self._prefix = prefix.rstrip("/")
        self._owner_scope = owner_scope
        self.clear_cache_action: Callable[[str], None] | None = None
        settings.add_observer(self._on_settings_changed)

    def name_to_settings_key(self, name: str) -> str:
        return f"{self._prefix}/{name}"

    def settings_key_to_name(self, key: str) -> str | None:
        head = self._prefix + "/"
        if not key.startswith(head) or len(key) == len(head):
            return None
        return key[len(head):]

    def read_flag_value(self, name: str, flag_type: FlagType) -> FlagValue | None:
        """保存済みオーバーライドを復元する。未設定なら None。

        Raises:
            SerializationError: 保存値がフラグ型として解釈できない場合
        """
        data = self._settings.get_string(self.name_to_settings_key(name))
        if not data:
            return None
        return serializer_for(flag_type).decode(data)

    def write_flag_value(self, name: str, data: str) -> None:
        """エンコード済みの値を保存する。"""
        self._settings.put_string(self.name_to_settings_key(name), data, self._owner_scope)

    def erase(self, name: str) -> None:
        """オーバーライドを削除する。"""
        self.write_flag_value(name, "")

    def _on_settings_changed(self, key: str) -> None:
        name = self.settings_key_to_name(key)
        if name is not None and self.clear_cache_action is not None:
            self.clear_cache_action(name)
