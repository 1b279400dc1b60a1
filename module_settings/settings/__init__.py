"""Per-module persistent settings.

Each module (feature) keeps its settings in its own JSON file under the
user's local app-data folder. This package loads those files into typed
settings objects and writes them back.

Design goals:
  * Self-healing loads (a missing file is created from defaults)
  * Durable upgrades (an upgraded object is written back on first load)
  * Tolerant of trailing NUL padding left behind by some file systems
  * Best-effort saves (failures are logged, never raised at the caller)
"""

from .contract import JsonSettingsConfig, SettingsConfig
from .errors import SettingsDeserializationError, SettingsError, SettingsPathError
from .paths import DEFAULT_FILE_NAME, DEFAULT_NAMESPACE, PathResolver, get_settings_path, local_app_data_dir
from .store import SaveResult, SettingsStore

__all__ = [
    "DEFAULT_FILE_NAME",
    "DEFAULT_NAMESPACE",
    "JsonSettingsConfig",
    "PathResolver",
    "SaveResult",
    "SettingsConfig",
    "SettingsDeserializationError",
    "SettingsError",
    "SettingsPathError",
    "SettingsStore",
    "get_settings_path",
    "local_app_data_dir",
]
