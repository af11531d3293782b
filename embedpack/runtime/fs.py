"""
Read-only virtual filesystem over embedded records.

A generated module builds one EmbeddedFS from its record tuple. The
directory tree is derived on first use; every open() returns an independent
handle with its own offset and its own decompressed buffer.
"""

from __future__ import annotations

import gzip
import io
import threading
import zlib
from typing import Iterator, Sequence

from embedpack.errors import (
    CorruptManifestError,
    InvalidOffsetError,
    InvalidPathError,
    NotFoundError,
    UnsupportedOperationError,
)
from embedpack.ingest.paths import normalize_query

from .records import FileInfo, FileRecord
from .tree import Tree, build_tree


# -----------------------------------------------------------------------------
# Handles
# -----------------------------------------------------------------------------


class File(io.RawIOBase):
    """
    Seekable, read-only handle over one embedded file.

    Compressed content is decompressed on the first read and kept only for
    the lifetime of this handle.

    Usage:
        with fs.open("templates/index.html") as f:
            head = f.read(128)
            f.seek(0)
            whole = f.read()
    """

    def __init__(self, record: FileRecord) -> None:
        super().__init__()
        self._record = record
        self._data: bytes | None = None
        self._offset = 0

    def __repr__(self) -> str:
        return f"<embedpack.File {self._record.path!r}>"

    @property
    def name(self) -> str:
        return self._record.path

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed file.")

    def _content(self) -> bytes:
        if self._data is None:
            self._data = decode_record(self._record)
        return self._data

    def read(self, size: int | None = -1) -> bytes:
        """
        Read up to size bytes from the current offset.

        Returns b"" at or beyond the end of the content.
        """
        self._check_open()
        data = self._content()
        if self._offset >= len(data):
            return b""
        if size is None or size < 0:
            end = len(data)
        else:
            end = min(len(data), self._offset + size)
        chunk = data[self._offset:end]
        self._offset = end
        return chunk

    def readall(self) -> bytes:
        return self.read(-1)

    def readinto(self, buffer) -> int:  # noqa: ANN001
        view = memoryview(buffer).cast("B")
        chunk = self.read(len(view))
        view[: len(chunk)] = chunk
        return len(chunk)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """
        Move the read offset.

        Seeking past the end is allowed; reads there return b"".

        Raises:
            InvalidOffsetError: If the resulting offset would be negative
            ValueError: If whence is not SEEK_SET, SEEK_CUR or SEEK_END
        """
        self._check_open()
        if whence == io.SEEK_SET:
            base = 0
        elif whence == io.SEEK_CUR:
            base = self._offset
        elif whence == io.SEEK_END:
            # Size is known from the record, no decompression needed
            base = self._record.original_size
        else:
            raise ValueError(f"Invalid whence: {whence}")

        target = base + offset
        if target < 0:
            raise InvalidOffsetError(f"Negative seek position {target} in {self.name!r}")
        self._offset = target
        return target

    def tell(self) -> int:
        self._check_open()
        return self._offset

    def stat(self) -> FileInfo:
        return FileInfo.from_record(self._record)

    def write(self, data) -> int:  # noqa: ANN001
        raise UnsupportedOperationError(f"{self.name!r} is read-only")

    def truncate(self, size: int | None = None) -> int:
        raise UnsupportedOperationError(f"{self.name!r} is read-only")

    def close(self) -> None:
        self._data = None
        super().close()


class Directory:
    """
    Handle over a synthesized directory.

    Usage:
        with fs.open("static") as d:
            for info in d.readdir():
                print(info.name, info.is_dir)
    """

    def __init__(self, tree: Tree, index: int) -> None:
        self._tree = tree
        self._index = index
        self._info = tree.dir_info(index)
        self.closed = False

    def __repr__(self) -> str:
        return f"<embedpack.Directory {self._info.path!r}>"

    def __enter__(self) -> "Directory":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def name(self) -> str:
        return self._info.path

    def readdir(self) -> list[FileInfo]:
        """Immediate children (files and directories), sorted by name."""
        if self.closed:
            raise ValueError("I/O operation on closed directory.")
        return self._tree.children(self._index)

    def stat(self) -> FileInfo:
        return self._info

    def read(self, size: int | None = -1) -> bytes:
        raise IsADirectoryError(f"Is a directory: {self.name!r}")

    def write(self, data) -> int:  # noqa: ANN001
        raise UnsupportedOperationError(f"{self.name!r} is read-only")

    def close(self) -> None:
        self.closed = True


def decode_record(record: FileRecord) -> bytes:
    """
    Return the original bytes of a record.

    Raises:
        CorruptManifestError: If compressed data is invalid or either size
            doesn't match the recorded one
    """
    if len(record.content) != record.stored_size:
        raise CorruptManifestError(
            f"{record.path!r} stores {len(record.content)} bytes, expected {record.stored_size}"
        )
    if not record.compressed:
        data = record.content
    else:
        try:
            data = gzip.decompress(record.content)
        except (OSError, EOFError, zlib.error) as e:
            raise CorruptManifestError(f"Cannot decompress {record.path!r}: {e}") from e

    if len(data) != record.original_size:
        raise CorruptManifestError(
            f"{record.path!r} holds {len(data)} bytes, expected {record.original_size}"
        )
    return data


# -----------------------------------------------------------------------------
# Filesystem
# -----------------------------------------------------------------------------


class EmbeddedFS:
    """
    Read-only filesystem backed by in-process records.

    Safe for concurrent readers: the tree is built once under a lock and
    never mutated afterwards.

    Usage:
        fs = EmbeddedFS(records)
        with fs.open("a/b.txt") as f:
            data = f.read()
        names = fs.listdir("a")
    """

    def __init__(self, records: Sequence[FileRecord]) -> None:
        self._records = tuple(records)
        self._tree: Tree | None = None
        self._error: CorruptManifestError | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"<embedpack.EmbeddedFS {len(self._records)} files>"

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, path: str) -> bool:
        return self.exists(path)

    def _get_tree(self) -> Tree:
        tree = self._tree
        if tree is not None:
            return tree
        with self._lock:
            if self._error is not None:
                raise self._error
            if self._tree is None:
                try:
                    self._tree = build_tree(self._records)
                except CorruptManifestError as e:
                    self._error = e
                    raise
            return self._tree

    def init(self) -> None:
        """
        Build the directory tree now instead of on first use.

        Repeated calls are no-ops.

        Raises:
            CorruptManifestError: If the records are inconsistent
        """
        self._get_tree()

    def open(self, path: str) -> File | Directory:
        """
        Open a file or directory.

        Args:
            path: Logical path; "", "/" and "." name the root

        Returns:
            File for file leaves, Directory for directories

        Raises:
            NotFoundError: If nothing exists at path
            InvalidPathError: If path escapes the root
        """
        tree = self._get_tree()
        query = normalize_query(path)
        entry = tree.lookup(query)
        if entry is None:
            raise NotFoundError(f"File not found: {path}")
        if entry.is_dir:
            return Directory(tree, entry.index)
        return File(tree.record(entry.index))

    def stat(self, path: str) -> FileInfo:
        """Metadata for path without opening or decompressing it."""
        tree = self._get_tree()
        entry = tree.lookup(normalize_query(path))
        if entry is None:
            raise NotFoundError(f"File not found: {path}")
        if entry.is_dir:
            return tree.dir_info(entry.index)
        return tree.file_info(entry.index)

    def readdir(self, path: str = "") -> list[FileInfo]:
        """Metadata of the immediate children of a directory."""
        handle = self.open(path)
        if not isinstance(handle, Directory):
            handle.close()
            raise NotADirectoryError(f"Not a directory: {path}")
        with handle:
            return handle.readdir()

    def listdir(self, path: str = "") -> list[str]:
        """Names of the immediate children of a directory, sorted."""
        return [info.name for info in self.readdir(path)]

    def read_file(self, path: str) -> bytes:
        """Read the whole decompressed content of a file."""
        handle = self.open(path)
        if not isinstance(handle, File):
            handle.close()
            raise IsADirectoryError(f"Is a directory: {path}")
        with handle:
            return handle.read()

    def exists(self, path: str) -> bool:
        tree = self._get_tree()
        try:
            query = normalize_query(path)
        except InvalidPathError:
            return False
        return tree.lookup(query) is not None

    def walk(self) -> Iterator[FileInfo]:
        """
        Iterate over all files.

        Yields:
            FileInfo for each file, sorted by path
        """
        yield from self._get_tree().iter_files()

    # Write-class operations exist only to fail loudly

    def write_file(self, path: str, data: bytes) -> None:
        raise UnsupportedOperationError("Embedded filesystem is read-only")

    def remove(self, path: str) -> None:
        raise UnsupportedOperationError("Embedded filesystem is read-only")

    def rename(self, src: str, dst: str) -> None:
        raise UnsupportedOperationError("Embedded filesystem is read-only")

    def mkdir(self, path: str) -> None:
        raise UnsupportedOperationError("Embedded filesystem is read-only")
