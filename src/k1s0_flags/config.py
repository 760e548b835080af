"""flags 設定（pydantic BaseModel）と YAML ローダー"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import FlagError, FlagErrorCodes


class LogSection(BaseModel):
    """ログ設定。"""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class FlagsConfig(BaseModel):
    """フラグ解決エンジンの設定。"""

    settings_prefix: str = Field(default="systemui/flags", min_length=1)
    dump_key_prefix: str = "sysui_flag_"
    owner_scope: str = "current"
    # ローカルとサーバーの両オーバーライドがある場合にローカルを優先する
    local_override_wins: bool = True
    restart_on_local_change: bool = True
    log: LogSection = Field(default_factory=LogSection)


def load_config(path: Path) -> FlagsConfig:
    """YAML ファイルを読み込んで FlagsConfig を返す。

    ファイル直下、または "flags" セクション配下の設定を受け付ける。
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FlagError(
            code=FlagErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: Any = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise FlagError(
            code=FlagErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if isinstance(data, dict) and isinstance(data.get("flags"), dict):
        data = data["flags"]
    try:
        return FlagsConfig.model_validate(data)
    except ValidationError as e:
        raise FlagError(
            code=FlagErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
