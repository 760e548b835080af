"""k1s0 flags library."""

from .bridge import ServerOverrideBridge
from .cache import CacheEntry, ResolutionCache
from .config import FlagsConfig, LogSection, load_config
from .controller import LocalOverrideController, OverrideCommand
from .dump import dump_flags, dump_to_string, format_flag_line
from .exceptions import (
    FlagError,
    FlagErrorCodes,
    FlagTypeError,
    NullResourceError,
    ResourceNotFoundError,
    SerializationError,
    UnknownFlagError,
)
from .flags import FeatureFlags
from .listeners import FlagEvent, FlagListener, FlagListenerRegistry
from .logger import configure_logging
from .models import (
    TEAMFOOD,
    FlagCategory,
    FlagDeclaration,
    FlagType,
    FlagValue,
    int_flag,
    released_flag,
    resource_boolean_flag,
    resource_int_flag,
    resource_string_flag,
    string_flag,
    sysprop_boolean_flag,
    unreleased_flag,
)
from .registry import FlagRegistry
from .resolver import FlagResolver
from .restarter import RecordingRestarter, Restarter
from .serializer import FlagSerializer, decode, encode, serializer_for
from .server import InMemoryServerFlagSource, ServerFlagSource, ServerOverrides
from .sources import (
    EnvironSystemProperties,
    InMemoryResources,
    InMemorySystemProperties,
    ResourceSource,
    SystemProperties,
)
from .store import InMemorySettingsStore, JsonFileSettingsStore, OverrideStore, SettingsStore

__all__ = [
    "FeatureFlags",
    "FlagsConfig",
    "LogSection",
    "load_config",
    "configure_logging",
    "FlagDeclaration",
    "FlagType",
    "FlagCategory",
    "FlagValue",
    "TEAMFOOD",
    "released_flag",
    "unreleased_flag",
    "resource_boolean_flag",
    "sysprop_boolean_flag",
    "string_flag",
    "resource_string_flag",
    "int_flag",
    "resource_int_flag",
    "FlagRegistry",
    "FlagSerializer",
    "serializer_for",
    "encode",
    "decode",
    "SettingsStore",
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    "OverrideStore",
    "ResourceSource",
    "InMemoryResources",
    "SystemProperties",
    "InMemorySystemProperties",
    "EnvironSystemProperties",
    "CacheEntry",
    "ResolutionCache",
    "FlagResolver",
    "FlagEvent",
    "FlagListener",
    "FlagListenerRegistry",
    "Restarter",
    "RecordingRestarter",
    "LocalOverrideController",
    "OverrideCommand",
    "ServerOverrides",
    "ServerFlagSource",
    "InMemoryServerFlagSource",
    "ServerOverrideBridge",
    "dump_flags",
    "dump_to_string",
    "format_flag_line",
    "FlagError",
    "FlagErrorCodes",
    "ResourceNotFoundError",
    "NullResourceError",
    "SerializationError",
    "UnknownFlagError",
    "FlagTypeError",
]
