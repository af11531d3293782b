"""
Generated module emitter.

Streams a Python module into a text sink: a header, one FileRecord per
embedded file, and a footer that builds the runtime filesystem. Only the
current file's content is held in memory; what was written is tracked in a
content-free manifest.

The output is a pure function of the input sequence and the options, so
identical input always yields byte-identical modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TextIO

from embedpack import FORMAT_VERSION
from embedpack.config import EncoderOptions, get_encoder_options
from embedpack.errors import DuplicatePathError, EmitterClosedError, InvalidPathError
from embedpack.ingest.paths import is_canonical

from .compress import decide, space_savings

# Raw bytes per literal line; escaping can widen a line up to 4x
BYTES_PER_LINE = 48

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

BANNER = "# Code generated by embedpack. DO NOT EDIT.\n"
BUILD_TAG_PREFIX = "# embedpack:build "

FOOTER = '''\
)

FS = EmbeddedFS(_RECORDS)


def open(path):
    """Open an embedded file or directory."""
    return FS.open(path)


def stat(path):
    """Metadata of an embedded file or directory."""
    return FS.stat(path)


def listdir(path=""):
    """Names of the entries directly below path."""
    return FS.listdir(path)


def read_file(path):
    """Whole decompressed content of an embedded file."""
    return FS.read_file(path)
'''


# -----------------------------------------------------------------------------
# Manifest
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """What was written for one file (no content)."""

    path: str
    compressed: bool
    original_size: int
    stored_size: int
    mod_time_ns: int

    @property
    def savings(self) -> float:
        return space_savings(self.original_size, self.stored_size)


@dataclass
class GenerationManifest:
    """
    Records written during one encoder run.

    Attributes:
        package: Package name written into the header
        tags: Build tags written into the header
        entries: ManifestEntry per file, in write order
    """

    package: str
    tags: tuple[str, ...] = ()
    entries: list[ManifestEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, path: str) -> bool:
        return any(entry.path == path for entry in self.entries)

    @property
    def total_original_size(self) -> int:
        return sum(entry.original_size for entry in self.entries)

    @property
    def total_stored_size(self) -> int:
        return sum(entry.stored_size for entry in self.entries)

    @property
    def compressed_count(self) -> int:
        return sum(1 for entry in self.entries if entry.compressed)


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------


def to_unix_nanos(mod_time: datetime | int | float) -> int:
    """
    Convert a modification time to Unix nanoseconds.

    Accepts an int (already nanoseconds), a float (seconds) or a datetime
    (naive values are taken as UTC).
    """
    if isinstance(mod_time, bool):
        raise TypeError("Modification time must not be a bool")
    if isinstance(mod_time, int):
        return mod_time
    if isinstance(mod_time, float):
        return int(round(mod_time * 1_000_000_000))
    if isinstance(mod_time, datetime):
        if mod_time.tzinfo is None:
            mod_time = mod_time.replace(tzinfo=timezone.utc)
        delta = mod_time - EPOCH
        seconds = delta.days * 86_400 + delta.seconds
        return seconds * 1_000_000_000 + delta.microseconds * 1_000
    raise TypeError(f"Unsupported modification time: {mod_time!r}")


def render_bytes(data: bytes, indent: str) -> str:
    """Render data as implicitly concatenated bytes literals."""
    if not data:
        return "b''"
    lines = [
        f"{indent}    {data[i:i + BYTES_PER_LINE]!r}\n"
        for i in range(0, len(data), BYTES_PER_LINE)
    ]
    return "(\n" + "".join(lines) + f"{indent})"


def render_header(package: str, tags: tuple[str, ...]) -> str:
    parts = [BANNER]
    if tags:
        # The comment must stay on one line; BUILD_TAGS keeps the exact values
        line = ",".join(tags).replace("\r", "\\r").replace("\n", "\\n")
        parts.append(BUILD_TAG_PREFIX + line + "\n")
    parts.append(
        "\n"
        "from embedpack.runtime import EmbeddedFS, FileRecord\n"
        "\n"
        f"PACKAGE = {package!r}\n"
        f"BUILD_TAGS = {tags!r}\n"
        f"FORMAT_VERSION = {FORMAT_VERSION}\n"
        "\n"
        "_RECORDS = (\n"
    )
    return "".join(parts)


def render_record(
    path: str,
    data: bytes,
    compressed: bool,
    original_size: int,
    mod_time_ns: int,
) -> str:
    return (
        "    FileRecord(\n"
        f"        path={path!r},\n"
        f"        content={render_bytes(data, '        ')},\n"
        f"        compressed={compressed!r},\n"
        f"        original_size={original_size},\n"
        f"        stored_size={len(data)},\n"
        f"        mod_time_ns={mod_time_ns},\n"
        "    ),\n"
    )


# -----------------------------------------------------------------------------
# Encoder
# -----------------------------------------------------------------------------


class Encoder:
    """
    Streaming writer for one generated module.

    The header is written before the first record (or by the footer when
    no file was added). After write_footer() or abort() the encoder is
    closed and refuses further calls.

    Usage:
        with open("assets.py", "w", encoding="utf-8") as out:
            with Encoder(out, "assets", EncoderOptions(gzip=True)) as encoder:
                encoder.add_file("index.html", data, mod_time)
            # footer written on clean exit, skipped if the block raised
    """

    def __init__(
        self,
        sink: TextIO,
        package: str,
        options: EncoderOptions | None = None,
    ) -> None:
        self._sink = sink
        self.options = options or EncoderOptions()
        self._manifest = GenerationManifest(package=package, tags=self.options.tags)
        self._paths: set[str] = set()
        self._header_written = False
        self._closed = False
        self._aborted = False

    def __repr__(self) -> str:
        return f"<embedpack.Encoder {self._manifest.package!r} {len(self._manifest)} files>"

    def __enter__(self) -> "Encoder":
        return self

    def __exit__(self, exc_type: object, *args: object) -> None:
        if exc_type is not None:
            self.abort()
        elif not self._closed:
            self.write_footer()

    @property
    def manifest(self) -> GenerationManifest:
        return self._manifest

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def aborted(self) -> bool:
        return self._aborted

    def _check_open(self, operation: str) -> None:
        if self._closed:
            state = "aborted" if self._aborted else "footer already written"
            raise EmitterClosedError(f"Cannot {operation}: encoder is closed ({state})")

    def _ensure_header(self) -> None:
        if not self._header_written:
            self._sink.write(render_header(self._manifest.package, self._manifest.tags))
            self._header_written = True

    def add_file(
        self,
        path: str,
        content: bytes,
        mod_time: datetime | int | float,
    ) -> ManifestEntry:
        """
        Emit one file record.

        Args:
            path: Canonical logical path (see normalize_path)
            content: Original file bytes
            mod_time: Modification time (datetime, Unix ns int, or Unix s float)

        Returns:
            ManifestEntry describing what was written

        Raises:
            EmitterClosedError: If the footer was already written
            InvalidPathError: If path is not canonical
            DuplicatePathError: If path was already added
        """
        self._check_open("add file")
        if not is_canonical(path):
            raise InvalidPathError(f"Path is not normalized: {path!r}")
        if path in self._paths:
            raise DuplicatePathError(f"File with path '{path}' already added")

        mod_time_ns = to_unix_nanos(mod_time)
        decision = decide(
            bytes(content),
            enabled=self.options.gzip,
            min_savings=self.options.min_gzip_space_savings,
        )

        try:
            self._ensure_header()
            self._sink.write(
                render_record(
                    path,
                    decision.data,
                    decision.compressed,
                    decision.original_size,
                    mod_time_ns,
                )
            )
        except BaseException:
            self.abort()
            raise

        entry = ManifestEntry(
            path=path,
            compressed=decision.compressed,
            original_size=decision.original_size,
            stored_size=decision.stored_size,
            mod_time_ns=mod_time_ns,
        )
        self._paths.add(path)
        self._manifest.entries.append(entry)
        return entry

    def write_footer(self) -> GenerationManifest:
        """
        Close the record tuple and emit the filesystem entry points.

        Legal with zero records (produces an empty filesystem).

        Raises:
            EmitterClosedError: If already closed
        """
        self._check_open("write footer")
        try:
            self._ensure_header()
            self._sink.write(FOOTER)
        except BaseException:
            self.abort()
            raise
        self._closed = True
        return self._manifest

    def abort(self) -> None:
        """
        Close without a footer.

        The sink then holds an incomplete module the caller must discard.
        Idempotent; a no-op after a successful footer.
        """
        if self._closed:
            return
        self._closed = True
        self._aborted = True


def new(
    sink: TextIO,
    package: str,
    *,
    tags: list[str] | tuple[str, ...] | None = None,
    gzip: bool = False,
    min_gzip_space_savings: float | None = None,
) -> Encoder:
    """
    Create an encoder writing a module for package into sink.

    Args:
        sink: Text stream receiving the generated source
        package: Package name written into the header
        tags: Build tags written into the header (empty disables)
        gzip: Consider gzip compression per file
        min_gzip_space_savings: Minimal savings in percent (default 5.0)

    Returns:
        Encoder ready for add_file()
    """
    options = get_encoder_options(
        tags=tags,
        gzip=gzip,
        min_gzip_space_savings=min_gzip_space_savings,
    )
    return Encoder(sink, package, options)
