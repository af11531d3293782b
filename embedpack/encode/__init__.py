"""
Embedpack encode layer.

Turns files into a generated Python module: per-file compression decision,
streaming emitter, and the generate pipeline that ties them to the ingest
layer.

Usage:
    from embedpack.encode import generate, new

    # Whole pipeline
    generate("assets", ["./static"], "assets.py", strip=1)

    # Or drive the encoder directly
    with open("assets.py", "w", encoding="utf-8") as out:
        with new(out, "assets", gzip=True) as encoder:
            encoder.add_file("index.html", b"<html></html>", 0)
"""

from .compress import CompressionDecision, decide, gzip_bytes, space_savings
from .emitter import Encoder, GenerationManifest, ManifestEntry, new, to_unix_nanos
from .generate import atomic_output, encode_files, generate

__all__ = [
    # Compression
    "CompressionDecision",
    "decide",
    "gzip_bytes",
    "space_savings",
    # Emitter
    "Encoder",
    "GenerationManifest",
    "ManifestEntry",
    "new",
    "to_unix_nanos",
    # Generate
    "generate",
    "encode_files",
    "atomic_output",
]
