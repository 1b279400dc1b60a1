from __future__ import annotations

import sys
from pathlib import Path

import pytest

from module_settings.settings import PathResolver, SettingsPathError, get_settings_path, local_app_data_dir


def _point_app_data_at(monkeypatch, target: Path) -> None:
    monkeypatch.setenv("LOCALAPPDATA", str(target))
    monkeypatch.setenv("XDG_DATA_HOME", str(target))


def test_module_segment_is_only_difference(tmp_path: Path):
    resolver = PathResolver(root=tmp_path)

    root_path = resolver.resolve("", "settings.json")
    module_path = resolver.resolve("MyModule", "settings.json")

    assert root_path == tmp_path / "Microsoft" / "PowerToys" / "settings.json"
    assert module_path == tmp_path / "Microsoft" / "PowerToys" / "MyModule" / "settings.json"
    assert module_path.parent.parent == root_path.parent
    assert module_path.name == root_path.name


def test_resolve_is_deterministic(tmp_path: Path):
    resolver = PathResolver(root=tmp_path)

    assert str(resolver.resolve("Awake")) == str(resolver.resolve("Awake"))
    assert str(PathResolver(root=tmp_path).resolve("Awake")) == str(resolver.resolve("Awake"))


def test_whitespace_module_is_root_scope(tmp_path: Path):
    resolver = PathResolver(root=tmp_path)

    assert resolver.resolve("   ") == resolver.resolve("")
    assert resolver.module_dir("\t") == resolver.base_dir()


def test_resolve_does_not_touch_disk(tmp_path: Path):
    root = tmp_path / "does-not-exist"

    PathResolver(root=root).resolve("Awake", "x.json")

    assert not root.exists()


def test_custom_namespace(tmp_path: Path):
    resolver = PathResolver(namespace=("Contoso", "Tools"), root=tmp_path)

    assert resolver.resolve("Awake") == tmp_path / "Contoso" / "Tools" / "Awake" / "settings.json"


def test_app_data_root_follows_environment(monkeypatch, tmp_path: Path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    resolver = PathResolver()

    _point_app_data_at(monkeypatch, first)
    assert resolver.resolve("Awake") == first / "Microsoft" / "PowerToys" / "Awake" / "settings.json"

    _point_app_data_at(monkeypatch, second)
    assert resolver.resolve("Awake") == second / "Microsoft" / "PowerToys" / "Awake" / "settings.json"
    assert get_settings_path("Awake") == resolver.resolve("Awake")


def test_app_data_fallback_without_environment(monkeypatch):
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)

    if sys.platform.startswith("win"):
        expected = Path.home() / "AppData" / "Local"
    else:
        expected = Path.home() / ".local" / "share"
    assert local_app_data_dir() == expected


def test_absolute_module_is_rejected(tmp_path: Path):
    resolver = PathResolver(root=tmp_path / "appdata")

    with pytest.raises(SettingsPathError):
        resolver.resolve(str(tmp_path / "outside"))
    with pytest.raises(SettingsPathError):
        resolver.module_dir(str(tmp_path / "outside"))


@pytest.mark.parametrize("module", ["..", "../..", "Awake/../../Other"])
def test_parent_segments_cannot_leave_namespace(tmp_path: Path, module: str):
    resolver = PathResolver(root=tmp_path)

    with pytest.raises(SettingsPathError) as info:
        resolver.resolve(module)
    assert isinstance(info.value, ValueError)


def test_parent_segments_inside_namespace_are_normalized(tmp_path: Path):
    resolver = PathResolver(root=tmp_path)

    assert resolver.resolve("Awake/../FancyZones") == resolver.resolve("FancyZones")


@pytest.mark.parametrize("file_name", ["../settings.json", "../Other/settings.json", "", "."])
def test_file_name_must_stay_in_module_folder(tmp_path: Path, file_name: str):
    resolver = PathResolver(root=tmp_path)

    with pytest.raises(SettingsPathError):
        resolver.resolve("Awake", file_name)


def test_absolute_file_name_is_rejected(tmp_path: Path):
    resolver = PathResolver(root=tmp_path / "appdata")

    with pytest.raises(SettingsPathError):
        resolver.resolve("Awake", str(tmp_path / "elsewhere.json"))
