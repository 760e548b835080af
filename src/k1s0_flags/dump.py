"""フラグ実効値のダンプ"""

from __future__ import annotations

import io
from typing import TextIO

from .models import FlagDeclaration, FlagType, FlagValue
from .registry import FlagRegistry
from .resolver import FlagResolver


def format_flag_line(key: str, flag: FlagDeclaration, value: FlagValue) -> str:
    """1 フラグ分の出力行を整形する。

    文字列は ` <key>: [length=<n>] "<value>"`、それ以外は ` <key>: <value>`。
    """
    if flag.flag_type is FlagType.STRING:
        text = str(value)
        return f' {key}: [length={len(text)}] "{text}"\n'
    if flag.flag_type is FlagType.BOOLEAN:
        return f" {key}: {'true' if value else 'false'}\n"
    return f" {key}: {value}\n"


def dump_flags(
    resolver: FlagResolver,
    registry: FlagRegistry,
    out: TextIO,
    key_prefix: str = "sysui_flag_",
) -> None:
    """宣言済みの全フラグを ID 順に out へ書き出す。

    通常の読み取りと同じ解決経路を使うため、未解決のフラグはここで
    キャッシュされ、リソース参照エラーもそのまま送出される。
    """
    for flag in registry.sorted_by_id():
        value = resolver.get_value(flag)
        out.write(format_flag_line(f"{key_prefix}{flag.id}", flag, value))


def dump_to_string(
    resolver: FlagResolver, registry: FlagRegistry, key_prefix: str = "sysui_flag_"
) -> str:
    buf = io.StringIO()
    dump_flags(resolver, registry, buf, key_prefix)
    return buf.getvalue()
