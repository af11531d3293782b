"""Exceptions shared by the encoder and the runtime filesystem."""

from __future__ import annotations

import io


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class EmbedpackError(Exception):
    """Base exception for embedpack operations."""

    pass


# -----------------------------------------------------------------------------
# Encoder side
# -----------------------------------------------------------------------------


class InvalidPathError(EmbedpackError):
    """Raised when a path is malformed, empty, or escapes the root."""

    pass


class DuplicatePathError(EmbedpackError):
    """Raised when two files normalize to the same logical path."""

    pass


class EmitterClosedError(EmbedpackError):
    """Raised when the encoder is used after its footer was written."""

    pass


# -----------------------------------------------------------------------------
# Runtime side
# -----------------------------------------------------------------------------


class CorruptManifestError(EmbedpackError):
    """Raised when embedded records are inconsistent with the encoding."""

    pass


class NotFoundError(EmbedpackError, FileNotFoundError):
    """Raised when a path has no file or directory behind it."""

    pass


class InvalidOffsetError(EmbedpackError, ValueError):
    """Raised when a seek would move before the start of a file."""

    pass


class UnsupportedOperationError(EmbedpackError, io.UnsupportedOperation):
    """Raised for write-class operations on the read-only filesystem."""

    pass
