"""File-system access used by the settings store.

The store never touches the disk directly; it goes through an ``IOProvider``.
``DiskIOProvider`` is the real implementation, ``MemoryIOProvider`` keeps
everything in a dict so tests (and tools that want a dry run) can swap it in.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path, PurePath
from typing import Dict, Protocol, Set, Union, runtime_checkable

PathLike = Union[str, PurePath]


@runtime_checkable
class IOProvider(Protocol):
    """Six-operation file-system contract consumed by SettingsStore."""

    def file_exists(self, path: PathLike) -> bool: ...

    def directory_exists(self, path: PathLike) -> bool: ...

    def create_directory(self, path: PathLike) -> None: ...

    def delete_directory(self, path: PathLike) -> None: ...

    def read_all_text(self, path: PathLike) -> str: ...

    def write_all_text(self, path: PathLike, content: str) -> None: ...


class DiskIOProvider:
    """Real disk access via pathlib.

    Writes go to a uniquely named temp file in the same folder which is then
    ``os.replace``d over the target, so a reader sees either the old document
    or the new one.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def file_exists(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def directory_exists(self, path: PathLike) -> bool:
        return Path(path).is_dir()

    def create_directory(self, path: PathLike) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def delete_directory(self, path: PathLike) -> None:
        p = Path(path)
        if not p.exists():
            return
        shutil.rmtree(p)

    def read_all_text(self, path: PathLike) -> str:
        return Path(path).read_text(encoding=self.encoding)

    def write_all_text(self, path: PathLike, content: str) -> None:
        path = Path(path)
        # Unique scratch name so sibling settings files are never clobbered
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding=self.encoding) as f:
                f.write(content)
            os.replace(tmp, path)
        except BaseException:
            # Don't leave a stray temp file next to the settings
            try:
                tmp.unlink()
            except OSError:
                pass
            raise


class MemoryIOProvider:
    """In-memory IOProvider.

    ``files`` maps normalized paths to their text content; ``directories``
    holds every directory that has been created (parents included).
    """

    def __init__(self) -> None:
        self.files: Dict[PurePath, str] = {}
        self.directories: Set[PurePath] = set()

    @staticmethod
    def _key(path: PathLike) -> PurePath:
        return PurePath(path)

    def file_exists(self, path: PathLike) -> bool:
        return self._key(path) in self.files

    def directory_exists(self, path: PathLike) -> bool:
        return self._key(path) in self.directories

    def create_directory(self, path: PathLike) -> None:
        p = self._key(path)
        self.directories.add(p)
        self.directories.update(p.parents)

    def delete_directory(self, path: PathLike) -> None:
        root = self._key(path)
        self.directories = {d for d in self.directories if d != root and root not in d.parents}
        self.files = {f: c for f, c in self.files.items() if root not in f.parents}

    def read_all_text(self, path: PathLike) -> str:
        p = self._key(path)
        try:
            return self.files[p]
        except KeyError:
            raise FileNotFoundError(f"No such file: '{p}'") from None

    def write_all_text(self, path: PathLike, content: str) -> None:
        if not isinstance(content, str):
            raise TypeError(f"content must be str, not {type(content).__name__}")
        p = self._key(path)
        if p.parent not in self.directories:
            raise FileNotFoundError(f"No such directory: '{p.parent}'")
        self.files[p] = content
