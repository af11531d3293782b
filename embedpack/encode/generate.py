"""
Generate command implementation.

Expands input paths into files, normalizes their logical paths and streams
them through the encoder into a Python module. This is the whole build-time
pipeline; the runtime half lives in embedpack.runtime.
"""

from __future__ import annotations

import os
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from embedpack.config import EncoderOptions, get_global_options
from embedpack.ingest import PathNormalizer, iter_source_files

from .emitter import Encoder, GenerationManifest


# -----------------------------------------------------------------------------
# Output handling
# -----------------------------------------------------------------------------


def current_umask() -> int:
    """Return the process umask (it can only be read by setting it)."""
    mask = os.umask(0)
    os.umask(mask)
    return mask


@contextmanager
def atomic_output(output: str | Path) -> Iterator[TextIO]:
    """
    Open a temporary file next to output and move it into place on success.

    If the block raises, the temporary file is removed and any existing
    output is left untouched.
    """
    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(
        prefix=f".{output_path.name}.",
        suffix=".tmp",
        dir=output_path.parent,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            yield f
        # mkstemp creates 0600; give the output the mode a plain open() would
        os.chmod(temp_path, 0o666 & ~current_umask())
        os.replace(temp_path, output_path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


@contextmanager
def working_directory(path: str | Path | None) -> Iterator[None]:
    """Temporarily change the working directory (no-op for None)."""
    if path is None:
        yield
        return
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(previous)


# -----------------------------------------------------------------------------
# Generate
# -----------------------------------------------------------------------------


def encode_files(
    encoder: Encoder,
    paths: Iterable[str],
    *,
    strip: int = 0,
    verbose: bool = False,
) -> None:
    """
    Add every file below paths to encoder.

    Args:
        encoder: Open encoder
        paths: Files or directories (expanded recursively)
        strip: Leading path elements to remove from each logical path
        verbose: Print one line per file

    Raises:
        InvalidPathError: If a path can't be normalized
        DuplicatePathError: If two files map to the same logical path
        OSError: If a file can't be read
    """
    normalizer = PathNormalizer(strip=strip)

    for source in iter_source_files(paths):
        key = normalizer.normalize(source.path)
        entry = encoder.add_file(key, source.read_bytes(), source.mod_time_ns)

        if verbose:
            status = "gzip" if entry.compressed else "raw"
            print(
                f"  [{status}] {entry.path} ({entry.original_size:,} -> {entry.stored_size:,} bytes)",
                file=sys.stderr,
            )


def generate(
    package: str,
    paths: Iterable[str],
    output: str | Path | None = None,
    *,
    strip: int = 0,
    options: EncoderOptions | None = None,
    cwd: str | Path | None = None,
    verbose: bool = False,
) -> GenerationManifest:
    """
    Generate a Python module embedding the given files.

    Args:
        package: Package name written into the generated header
        paths: Files or directories to embed (directories recursively)
        output: Output module path (default: write to stdout)
        strip: Remove this many leading elements from each logical path
        options: Encoder options (default: global options)
        cwd: Change to this directory while reading inputs; a relative
            output path is resolved against the original directory
        verbose: Print progress information to stderr

    Returns:
        Manifest of the written records

    Example:
        # Embed ./static as "static/..." paths
        generate("assets", ["static"], "assets.py", options=EncoderOptions(gzip=True))

        # Embed ./static as top-level paths
        generate("assets", ["static"], "assets.py", strip=1)
    """
    options = options or get_global_options()
    paths = list(paths)

    if output is not None:
        output = Path(output).resolve()

    with working_directory(cwd):
        if output is None:
            encoder = Encoder(sys.stdout, package, options)
            with encoder:
                encode_files(encoder, paths, strip=strip, verbose=verbose)
        else:
            with atomic_output(output) as sink:
                encoder = Encoder(sink, package, options)
                with encoder:
                    encode_files(encoder, paths, strip=strip, verbose=verbose)

    manifest = encoder.manifest
    if verbose:
        print(
            f"\nEmbedded {len(manifest)} files "
            f"({manifest.total_original_size:,} bytes, "
            f"{manifest.total_stored_size:,} stored, "
            f"{manifest.compressed_count} compressed)",
            file=sys.stderr,
        )
        if output is not None:
            print(f"Output: {output}", file=sys.stderr)

    return manifest
