from __future__ import annotations

import errno
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Type, TypeVar

from ..io_provider import DiskIOProvider, IOProvider
from .contract import SettingsConfig
from .errors import SettingsDeserializationError
from .paths import DEFAULT_FILE_NAME, DEFAULT_MODULE_NAME, PathResolver

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=SettingsConfig)

DEBUG_ENV_VAR = "MODULE_SETTINGS_DEBUG"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def _is_programmer_error(exc: BaseException) -> bool:
    # invalid argument / invalid null / path too long
    if isinstance(exc, (ValueError, TypeError)):
        return True
    return isinstance(exc, OSError) and exc.errno == errno.ENAMETOOLONG


@dataclass(frozen=True)
class SaveResult:
    """Outcome of SettingsStore.save.

    Saves never raise in normal operation; a failed save is reported here
    (and in the log) instead.
    """

    module: str
    path: Optional[Path] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


class SettingsStore:
    """Load/create/upgrade/save settings objects, one JSON file per module.

    ``load`` always leaves a settings file behind: a missing file is created
    from the type's defaults, and an object that upgrades itself on load is
    written back straight away. ``save`` is best effort and never raises
    unless ``debug`` is on and the failure looks like a programming mistake.
    """

    def __init__(
        self,
        io_provider: Optional[IOProvider] = None,
        resolver: Optional[PathResolver] = None,
        log: Optional[logging.Logger] = None,
        debug: Optional[bool] = None,
    ):
        self.io_provider = io_provider if io_provider is not None else DiskIOProvider()
        self.resolver = resolver if resolver is not None else PathResolver()
        self._log = log if log is not None else logger
        self.debug = _env_flag(DEBUG_ENV_VAR) if debug is None else bool(debug)

    def path(self, module: str = DEFAULT_MODULE_NAME, file_name: str = DEFAULT_FILE_NAME) -> Path:
        return self.resolver.resolve(module, file_name)

    def exists(self, module: str = DEFAULT_MODULE_NAME, file_name: str = DEFAULT_FILE_NAME) -> bool:
        return self.io_provider.file_exists(self.path(module, file_name))

    def load(
        self,
        settings_type: Type[T],
        module: str = DEFAULT_MODULE_NAME,
        file_name: str = DEFAULT_FILE_NAME,
    ) -> T:
        if self.exists(module, file_name):
            settings = self._read(settings_type, module, file_name)
            if settings.upgrade_settings_configuration():
                self._log.info("Upgraded %s settings in %s", module or "root", file_name)
                self.save(settings.to_json_string(), module, file_name)
            return settings

        settings = settings_type()
        self._log.info("Creating default %s settings in %s", module or "root", file_name)
        self.save(settings.to_json_string(), module, file_name)
        return settings

    def _read(self, settings_type: Type[T], module: str, file_name: str) -> T:
        path = self.path(module, file_name)
        self._log.debug("Reading settings from %s", path)

        # Some file systems pad the last written block with NULs; only the
        # tail is affected.
        text = self.io_provider.read_all_text(path).rstrip("\0")
        try:
            return settings_type.from_json_string(text)
        except SettingsDeserializationError as exc:
            if exc.path is None:
                exc.path = path
            raise
        except json.JSONDecodeError as exc:
            raise SettingsDeserializationError(f"Invalid settings JSON: {exc}", path) from exc

    def save(
        self,
        json_text: Optional[str],
        module: str = DEFAULT_MODULE_NAME,
        file_name: str = DEFAULT_FILE_NAME,
    ) -> SaveResult:
        if json_text is None:
            return SaveResult(module=module)

        path: Optional[Path] = None
        try:
            path = self.path(module, file_name)
            folder = path.parent
            if not self.io_provider.directory_exists(folder):
                self.io_provider.create_directory(folder)
            self.io_provider.write_all_text(path, json_text)
        except Exception as exc:
            self._log.error("Exception encountered while saving %s settings.", module, exc_info=exc)
            if self.debug and _is_programmer_error(exc):
                raise
            return SaveResult(module=module, path=path, error=exc)

        return SaveResult(module=module, path=path)

    def save_config(
        self,
        config: SettingsConfig,
        module: str = DEFAULT_MODULE_NAME,
        file_name: str = DEFAULT_FILE_NAME,
    ) -> SaveResult:
        return self.save(config.to_json_string(), module, file_name)

    def delete_settings(self, module: str = DEFAULT_MODULE_NAME) -> None:
        """Remove the module's whole settings folder (all files in it).

        Raises SettingsPathError for a module name pointing outside the
        settings namespace; nothing is deleted in that case.
        """
        self.io_provider.delete_directory(self.resolver.module_dir(module))
