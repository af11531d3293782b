"""
Embedpack: embed files into a generated Python module.

The encoder writes files (optionally gzip-compressed) into a Python source
file; importing that module gives a read-only, in-memory filesystem.

Usage:
    from embedpack import generate

    generate("assets", ["./static"], "assets.py", strip=1)

    import assets
    with assets.open("css/site.css") as f:
        css = f.read()
"""

__version__ = "0.1.0"
FORMAT_VERSION = 1

from .config import EncoderOptions, get_global_options, set_global_options  # noqa: E402
from .encode import Encoder, GenerationManifest, ManifestEntry, generate, new  # noqa: E402
from .errors import (  # noqa: E402
    CorruptManifestError,
    DuplicatePathError,
    EmbedpackError,
    EmitterClosedError,
    InvalidOffsetError,
    InvalidPathError,
    NotFoundError,
    UnsupportedOperationError,
)
from .ingest import PathNormalizer, normalize_path  # noqa: E402
from .runtime import Directory, EmbeddedFS, File, FileInfo, FileRecord  # noqa: E402

__all__ = [
    "__version__",
    "FORMAT_VERSION",
    # Config
    "EncoderOptions",
    "get_global_options",
    "set_global_options",
    # Encoder
    "Encoder",
    "GenerationManifest",
    "ManifestEntry",
    "generate",
    "new",
    # Paths
    "PathNormalizer",
    "normalize_path",
    # Runtime
    "EmbeddedFS",
    "File",
    "Directory",
    "FileInfo",
    "FileRecord",
    # Exceptions
    "EmbedpackError",
    "InvalidPathError",
    "DuplicatePathError",
    "EmitterClosedError",
    "CorruptManifestError",
    "NotFoundError",
    "InvalidOffsetError",
    "UnsupportedOperationError",
]
