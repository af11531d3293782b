"""Record and metadata types shared by generated modules and the runtime."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True, slots=True)
class FileRecord:
    """
    One embedded file, exactly as the encoder wrote it.

    Attributes:
        path: Canonical logical path (forward slashes, relative)
        content: Stored bytes, gzip-compressed when ``compressed`` is set
        compressed: Whether content holds gzip data
        original_size: Size of the decompressed content
        stored_size: Size of ``content``
        mod_time_ns: Modification time in Unix nanoseconds
    """

    path: str
    content: bytes
    compressed: bool = False
    original_size: int = 0
    stored_size: int = 0
    mod_time_ns: int = 0

    @property
    def name(self) -> str:
        """Filename without directory."""
        return self.path.rsplit("/", 1)[-1]


def ns_to_datetime(ns: int) -> datetime:
    """Convert Unix nanoseconds to an aware UTC datetime."""
    seconds, remainder = divmod(ns, 1_000_000_000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(
        microsecond=remainder // 1000
    )


@dataclass(frozen=True, slots=True)
class FileInfo:
    """
    Stat-like metadata for a file or directory.

    Attributes:
        name: Last path element ("" for the root)
        path: Logical path ("" for the root)
        size: Decompressed size in bytes, 0 for directories
        mod_time_ns: Modification time in Unix nanoseconds; for directories
            the newest modification time below them
        is_dir: Whether this entry is a directory
        compressed: Whether the file is stored gzip-compressed
        stored_size: Embedded size in bytes, 0 for directories
    """

    name: str
    path: str
    size: int
    mod_time_ns: int
    is_dir: bool = False
    compressed: bool = False
    stored_size: int = 0

    @property
    def mod_time(self) -> datetime:
        return ns_to_datetime(self.mod_time_ns)

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileInfo":
        return cls(
            name=record.name,
            path=record.path,
            size=record.original_size,
            mod_time_ns=record.mod_time_ns,
            compressed=record.compressed,
            stored_size=record.stored_size,
        )
