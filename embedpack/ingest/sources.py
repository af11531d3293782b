"""
Input expansion.

Turns command-line arguments (files or directories) into an ordered list
of files to embed. Directories are expanded recursively, entries sorted by
name at each level, so the same tree always yields the same order.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator


@dataclass(frozen=True, slots=True)
class SourceFile:
    """
    A file on disk selected for embedding.

    Attributes:
        path: Path as given/expanded (not yet normalized)
        size: Size in bytes at expansion time
        mod_time_ns: Modification time in Unix nanoseconds
    """

    path: str
    size: int
    mod_time_ns: int

    @property
    def mod_time(self) -> datetime:
        """Modification time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.mod_time_ns / 1e9, tz=timezone.utc)

    def read_bytes(self) -> bytes:
        """Read the file content."""
        return Path(self.path).read_bytes()


def list_entries(path: str) -> list[tuple[str, bool]]:
    """
    List the immediate entries of a directory.

    Returns:
        (path, is_directory) pairs sorted by entry name
    """
    with os.scandir(path) as it:
        entries = sorted(it, key=lambda e: e.name)
    return [(os.path.join(path, e.name), e.is_dir()) for e in entries]


def expand(path: str) -> list[str]:
    """
    Convert path into a list of all files within it.

    If path is a file, it is returned as the only element.

    Raises:
        FileNotFoundError: If path doesn't exist
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Path not found: {path}")
    if not os.path.isdir(path):
        return [path]

    expanded: list[str] = []
    for entry, is_dir in list_entries(path):
        if is_dir:
            expanded.extend(expand(entry))
        else:
            expanded.append(entry)
    return expanded


def expand_all(paths: Iterable[str]) -> list[str]:
    """Expand every argument in order and concatenate the results."""
    expanded: list[str] = []
    for path in paths:
        expanded.extend(expand(path))
    return expanded


def iter_source_files(paths: Iterable[str]) -> Iterator[SourceFile]:
    """
    Expand paths and yield a SourceFile for each file found.

    Yields:
        SourceFile with size and modification time from stat
    """
    for path in expand_all(paths):
        st = os.stat(path)
        yield SourceFile(
            path=path,
            size=st.st_size,
            mod_time_ns=st.st_mtime_ns,
        )
