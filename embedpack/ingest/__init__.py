"""
Embedpack ingest layer.

Expands input arguments into files and turns their paths into canonical
logical keys before anything reaches the encoder.

Usage:
    from embedpack.ingest import PathNormalizer, iter_source_files

    normalizer = PathNormalizer(strip=1)
    for source in iter_source_files(["static"]):
        print(normalizer.normalize(source.path), source.size)
"""

from .paths import (
    PathNormalizer,
    clean,
    is_canonical,
    normalize_path,
    normalize_query,
    to_slash,
)
from .sources import SourceFile, expand, expand_all, iter_source_files, list_entries

__all__ = [
    # Paths
    "PathNormalizer",
    "normalize_path",
    "normalize_query",
    "is_canonical",
    "clean",
    "to_slash",
    # Sources
    "SourceFile",
    "expand",
    "expand_all",
    "iter_source_files",
    "list_entries",
]
