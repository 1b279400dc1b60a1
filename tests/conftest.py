from __future__ import annotations

from pathlib import Path

import pytest

from module_settings.io_provider import DiskIOProvider, MemoryIOProvider
from module_settings.settings import PathResolver, SettingsStore


@pytest.fixture
def disk_store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(io_provider=DiskIOProvider(), resolver=PathResolver(root=tmp_path), debug=False)


@pytest.fixture
def memory_io() -> MemoryIOProvider:
    return MemoryIOProvider()


@pytest.fixture
def memory_store(memory_io: MemoryIOProvider) -> SettingsStore:
    return SettingsStore(io_provider=memory_io, resolver=PathResolver(root=Path("/appdata")), debug=False)
