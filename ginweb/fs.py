"""File-system views used for serving static files and loading templates."""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass
from typing import Any, Protocol


class FileSystem(Protocol):
    """Anything that opens files by slash-separated name."""

    def open(self, name: str) -> Any: ...


class _LocalFile:
    """A file or directory opened from a :class:`DirFileSystem`."""

    def __init__(self, path: str):
        self.path = path
        self._handle = None if os.path.isdir(path) else open(path, "rb")

    def read(self, size: int = -1) -> bytes:
        if self._handle is None:
            raise IsADirectoryError(self.path)
        return self._handle.read(size)

    def stat(self) -> os.stat_result:
        return os.stat(self.path)

    def readdir(self, count: int = 0) -> list[os.DirEntry]:
        """List directory entries; all of them when ``count`` is not positive."""
        if self._handle is not None:
            raise NotADirectoryError(self.path)
        with os.scandir(self.path) as entries:
            listing = sorted(entries, key=lambda entry: entry.name)
        return listing[:count] if count > 0 else listing

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()

    def __enter__(self) -> _LocalFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass(frozen=True)
class DirFileSystem:
    """Files under a local directory, addressed by slash-separated names."""

    root: str

    def open(self, name: str) -> _LocalFile:
        """Open ``name`` relative to the root; names cannot escape the root."""
        if os.sep != "/" and os.sep in name:
            raise ValueError("invalid character in file path")
        relative = posixpath.normpath("/" + name).lstrip("/")
        root = self.root or "."
        full = os.path.join(root, *relative.split("/")) if relative else root
        return _LocalFile(full)


class NeutralizedReaddirFile:
    """A file wrapper whose directory listing is always empty."""

    def __init__(self, file: Any):
        self.file = file

    def readdir(self, count: int = 0) -> list:
        """Return no entries, which disables directory listing."""
        return []

    def __getattr__(self, name: str) -> Any:
        return getattr(self.file, name)

    def __enter__(self) -> NeutralizedReaddirFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.file.close()


@dataclass(frozen=True)
class OnlyFilesFS:
    """A file system view that refuses to list directories."""

    file_system: FileSystem

    def open(self, name: str) -> NeutralizedReaddirFile:
        """Open ``name`` upstream and hide its directory listing."""
        return NeutralizedReaddirFile(self.file_system.open(name))


@dataclass(frozen=True)
class TemplateFileSystem:
    """Adapts a file system for template loading."""

    file_system: FileSystem

    def open(self, name: str) -> Any:
        """Open ``name`` upstream."""
        return self.file_system.open(name)


def dir_fs(root: str, list_directory: bool) -> DirFileSystem | OnlyFilesFS:
    """Return a file system rooted at ``root``, listing directories only if asked."""
    file_system = DirFileSystem(root)
    if list_directory:
        return file_system
    return OnlyFilesFS(file_system)