"""
Compression decision.

Each file is considered on its own: gzip a candidate copy and keep it only
when it saves at least the configured share of the original size.
"""

from __future__ import annotations

import gzip
from dataclasses import dataclass

from embedpack.config import DEFAULT_MIN_GZIP_SPACE_SAVINGS

# Fixed header timestamp keeps gzip output identical across runs
GZIP_MTIME = 0


@dataclass(frozen=True, slots=True)
class CompressionDecision:
    """
    Stored representation chosen for one file.

    Attributes:
        data: Bytes to embed (raw or gzip)
        compressed: Whether data is gzip-compressed
        original_size: Size of the original content
        savings: Percent saved by the gzip candidate, None if not attempted
    """

    data: bytes
    compressed: bool
    original_size: int
    savings: float | None = None

    @property
    def stored_size(self) -> int:
        return len(self.data)


def gzip_bytes(content: bytes) -> bytes:
    """Gzip content with a fixed header timestamp."""
    return gzip.compress(content, mtime=GZIP_MTIME)


def space_savings(original_size: int, stored_size: int) -> float:
    """
    Percentage reduction of stored_size relative to original_size.

    Returns 0.0 for empty originals.
    """
    if original_size == 0:
        return 0.0
    return (1 - stored_size / original_size) * 100


def decide(
    content: bytes,
    *,
    enabled: bool,
    min_savings: float = DEFAULT_MIN_GZIP_SPACE_SAVINGS,
) -> CompressionDecision:
    """
    Choose between raw and gzip storage for content.

    Args:
        content: Original file bytes
        enabled: Whether compression may be used at all
        min_savings: Minimal savings in percent (inclusive)

    Returns:
        CompressionDecision with the bytes to store
    """
    original_size = len(content)

    # Empty input never shrinks, and gzip would turn it into ~20 bytes
    if not enabled or original_size == 0:
        return CompressionDecision(data=content, compressed=False, original_size=original_size)

    candidate = gzip_bytes(content)
    savings = space_savings(original_size, len(candidate))

    if savings >= min_savings:
        return CompressionDecision(
            data=candidate,
            compressed=True,
            original_size=original_size,
            savings=savings,
        )
    return CompressionDecision(
        data=content,
        compressed=False,
        original_size=original_size,
        savings=savings,
    )
