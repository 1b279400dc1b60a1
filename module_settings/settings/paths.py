from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .errors import SettingsPathError

DEFAULT_FILE_NAME = "settings.json"
DEFAULT_MODULE_NAME = ""
DEFAULT_NAMESPACE: Tuple[str, ...] = ("Microsoft", "PowerToys")


def local_app_data_dir() -> Path:
    """Per-user local application-data directory.

    Looked up on every call so environment changes are picked up.

    - Windows: %LOCALAPPDATA% (fallback ~/AppData/Local)
    - elsewhere: $XDG_DATA_HOME (fallback ~/.local/share)
    """

    if sys.platform.startswith("win"):
        base = os.environ.get("LOCALAPPDATA")
        if base:
            return Path(base)
        return Path.home() / "AppData" / "Local"

    base = os.environ.get("XDG_DATA_HOME")
    if base:
        return Path(base)
    return Path.home() / ".local" / "share"


@dataclass(frozen=True)
class PathResolver:
    """Maps (module, file name) to a settings file location.

    Layout::

      <root>/<namespace...>/<file_name>            (root scope, module "")
      <root>/<namespace...>/<module>/<file_name>

    ``root=None`` means the local app-data directory, resolved per call.
    Names that would land outside the namespace folder (absolute paths,
    ``..``) raise SettingsPathError.
    """

    namespace: Tuple[str, ...] = DEFAULT_NAMESPACE
    root: Optional[Path] = None

    def root_dir(self) -> Path:
        if self.root is not None:
            return Path(self.root)
        return local_app_data_dir()

    def base_dir(self) -> Path:
        return self.root_dir().joinpath(*self.namespace)

    def module_dir(self, module: str = DEFAULT_MODULE_NAME) -> Path:
        base = _normalize(self.base_dir())
        if _is_blank(module):
            return base
        folder = _normalize(base.joinpath(module))
        if not _is_within(folder, base, allow_equal=True):
            raise SettingsPathError(f"Module {module!r} resolves outside {base}", folder)
        return folder

    def resolve(self, module: str = DEFAULT_MODULE_NAME, file_name: str = DEFAULT_FILE_NAME) -> Path:
        folder = self.module_dir(module)
        path = _normalize(folder.joinpath(file_name))
        if not _is_within(path, folder, allow_equal=False):
            raise SettingsPathError(f"Settings file name {file_name!r} resolves outside {folder}", path)
        return path


def get_settings_path(module: str = DEFAULT_MODULE_NAME, file_name: str = DEFAULT_FILE_NAME) -> Path:
    return PathResolver().resolve(module, file_name)


def _is_blank(module: Optional[str]) -> bool:
    return module is None or not str(module).strip()


def _normalize(path: Path) -> Path:
    # Lexical only (collapses "..", "."); never touches the disk
    return Path(os.path.normpath(path))


def _is_within(path: Path, folder: Path, allow_equal: bool) -> bool:
    if path == folder:
        return allow_equal
    return folder in path.parents
