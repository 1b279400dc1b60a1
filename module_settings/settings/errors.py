from __future__ import annotations

from pathlib import Path
from typing import Optional


class SettingsError(Exception):
    """Base class for settings errors."""


class SettingsDeserializationError(SettingsError, ValueError):
    """A settings document could not be turned into a settings object.

    Raised for malformed JSON, a non-object root, or values the settings type
    rejects. ``path`` is set when the document came from a settings file.
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        msg = super().__str__()
        if self.path is not None:
            return f"{msg} ({self.path})"
        return msg


class SettingsPathError(SettingsError, ValueError):
    """A module or file name that would place settings outside their folder."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path
