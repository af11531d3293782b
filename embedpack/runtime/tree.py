"""
Directory tree reconstruction.

The embedded manifest is a flat list of records. Directories are derived
from their paths once, into an arena of nodes addressed by list index.
Node 0 is always the root.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence

from embedpack.errors import CorruptManifestError
from embedpack.ingest.paths import is_canonical

from .records import FileInfo, FileRecord

ROOT = 0


@dataclass(slots=True)
class DirectoryNode:
    """
    A synthesized directory.

    Attributes:
        name: Last path element ("" for the root)
        path: Logical path ("" for the root)
        parent: Index of the parent node, None for the root
        dirs: Child directory name -> node index
        files: Child file name -> record index
        mod_time_ns: Newest modification time of any file below
    """

    name: str
    path: str
    parent: int | None
    dirs: dict[str, int] = field(default_factory=dict)
    files: dict[str, int] = field(default_factory=dict)
    mod_time_ns: int = 0


@dataclass(frozen=True, slots=True)
class Entry:
    """Result of a tree lookup."""

    is_dir: bool
    index: int


class Tree:
    """Immutable view over the node arena and the record table."""

    def __init__(self, nodes: list[DirectoryNode], records: Sequence[FileRecord]) -> None:
        self._nodes = nodes
        self._records = records

    def __len__(self) -> int:
        return len(self._records)

    def lookup(self, path: str) -> Entry | None:
        """Find a normalized query path, "" being the root."""
        if not path:
            return Entry(is_dir=True, index=ROOT)

        node = self._nodes[ROOT]
        parts = path.split("/")
        for part in parts[:-1]:
            index = node.dirs.get(part)
            if index is None:
                return None
            node = self._nodes[index]

        last = parts[-1]
        if last in node.dirs:
            return Entry(is_dir=True, index=node.dirs[last])
        if last in node.files:
            return Entry(is_dir=False, index=node.files[last])
        return None

    def record(self, index: int) -> FileRecord:
        return self._records[index]

    def dir_info(self, index: int) -> FileInfo:
        node = self._nodes[index]
        return FileInfo(
            name=node.name,
            path=node.path,
            size=0,
            mod_time_ns=node.mod_time_ns,
            is_dir=True,
        )

    def file_info(self, index: int) -> FileInfo:
        return FileInfo.from_record(self._records[index])

    def children(self, index: int) -> list[FileInfo]:
        """Immediate children of a directory, sorted by name."""
        node = self._nodes[index]
        infos = [self.dir_info(i) for i in node.dirs.values()]
        infos.extend(self.file_info(i) for i in node.files.values())
        infos.sort(key=lambda info: info.name)
        return infos

    def iter_files(self) -> Iterator[FileInfo]:
        """All files, sorted by path."""
        for record in sorted(self._records, key=lambda r: r.path):
            yield FileInfo.from_record(record)


def build_tree(records: Sequence[FileRecord]) -> Tree:
    """
    Build the directory arena from flat records.

    Records are inserted in path order; intermediate directories are
    created as needed.

    Raises:
        CorruptManifestError: If a path is not canonical, appears twice,
            or is used both as a file and as a directory
    """
    nodes = [DirectoryNode(name="", path="", parent=None)]

    order = sorted(range(len(records)), key=lambda i: records[i].path)
    for record_index in order:
        record = records[record_index]
        if not is_canonical(record.path):
            raise CorruptManifestError(f"Invalid record path: {record.path!r}")

        parts = record.path.split("/")
        current = ROOT
        for depth, part in enumerate(parts[:-1]):
            node = nodes[current]
            if part in node.files:
                raise CorruptManifestError(
                    f"{'/'.join(parts[: depth + 1])!r} is both a file and a directory"
                )
            child = node.dirs.get(part)
            if child is None:
                child = len(nodes)
                prefix = "/".join(parts[: depth + 1])
                nodes.append(DirectoryNode(name=part, path=prefix, parent=current))
                node.dirs[part] = child
            current = child

        node = nodes[current]
        name = parts[-1]
        if name in node.dirs:
            raise CorruptManifestError(f"{record.path!r} is both a file and a directory")
        if name in node.files:
            raise CorruptManifestError(f"Duplicate record path: {record.path!r}")
        node.files[name] = record_index

        # Propagate the newest modification time up to the root
        index: int | None = current
        while index is not None:
            parent = nodes[index]
            if record.mod_time_ns > parent.mod_time_ns:
                parent.mod_time_ns = record.mod_time_ns
            index = parent.parent

    return Tree(nodes, records)
