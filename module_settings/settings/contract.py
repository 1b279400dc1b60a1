"""The capability contract every persisted settings type satisfies.

A settings type is anything that

  * can be built with no arguments (defaults),
  * can render itself as JSON (``to_json_string``),
  * can be parsed back from JSON (``from_json_string``),
  * can upgrade an older on-disk shape in place
    (``upgrade_settings_configuration`` returns True when it changed something).

``JsonSettingsConfig`` implements the JSON half for dataclasses, so a typical
settings type only needs ``@dataclass`` plus an upgrade hook.
"""

from __future__ import annotations

import dataclasses
import json
import types
import typing
from pathlib import Path
from typing import Any, Dict, Protocol, Type, TypeVar, Union, runtime_checkable

from .errors import SettingsDeserializationError

T = TypeVar("T")

# PEP 604 unions (X | None) have their own origin on 3.10+
_UnionType = getattr(types, "UnionType", None)


@runtime_checkable
class SettingsConfig(Protocol):
    def to_json_string(self) -> str: ...

    def upgrade_settings_configuration(self) -> bool: ...

    @classmethod
    def from_json_string(cls: Type[T], text: str) -> T: ...


class JsonSettingsConfig:
    """Mixin for ``@dataclass`` settings types.

    Parsing is lenient the same way across versions: unknown keys are
    ignored, missing keys keep their defaults, nested dataclass fields are
    built from nested objects, also inside Optional, List, Tuple and Dict
    fields.
    """

    def to_json_string(self) -> str:
        return json.dumps(dataclasses.asdict(self), indent=2, default=_json_default)

    def upgrade_settings_configuration(self) -> bool:
        return False

    @classmethod
    def from_json_string(cls: Type[T], text: str) -> T:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SettingsDeserializationError(f"Invalid settings JSON: {exc}") from exc
        return _from_mapping(cls, data)

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        return _from_mapping(cls, data)


def _from_mapping(cls: Type[T], data: Any) -> T:
    if not isinstance(data, dict):
        raise SettingsDeserializationError(
            f"{cls.__name__} settings root must be a JSON object, got {type(data).__name__}"
        )

    hints = _field_types(cls)
    kwargs: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not f.init or f.name not in data:
            continue
        value = data[f.name]
        hint = hints.get(f.name)
        if hint is not None:
            value = _coerce(hint, value)
        kwargs[f.name] = value

    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as exc:
        raise SettingsDeserializationError(f"Cannot build {cls.__name__} from settings: {exc}") from exc


def _coerce(hint: Any, value: Any) -> Any:
    """Rebuild dataclasses inside ``value`` according to the field's type hint."""

    if value is None:
        return None
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return _from_mapping(hint, value) if isinstance(value, dict) else value

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin is Union or (_UnionType is not None and origin is _UnionType):
        members = [a for a in args if a is not type(None)]
        if len(members) == 1:
            return _coerce(members[0], value)
        # Ambiguous unions: only an object value can pick a dataclass member
        if isinstance(value, dict):
            for member in members:
                if isinstance(member, type) and dataclasses.is_dataclass(member):
                    return _from_mapping(member, value)
        return value
    if origin is list and args and isinstance(value, list):
        return [_coerce(args[0], v) for v in value]
    if origin is tuple and args and isinstance(value, list):
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_coerce(args[0], v) for v in value)
        if len(args) == len(value):
            return tuple(_coerce(a, v) for a, v in zip(args, value))
        return value
    if origin is dict and len(args) == 2 and isinstance(value, dict):
        return {k: _coerce(args[1], v) for k, v in value.items()}
    return value


def _field_types(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # Locally defined classes can't always resolve string annotations
        return {f.name: f.type for f in dataclasses.fields(cls) if isinstance(f.type, type)}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
