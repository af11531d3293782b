"""
Logical path normalization.

Every file embedded by the encoder is keyed by a canonical, slash-separated,
relative path. The same cleaning rules are applied to runtime lookups so
that callers can pass platform paths or slightly untidy strings.
"""

from __future__ import annotations

import os

from embedpack.errors import DuplicatePathError, InvalidPathError


def to_slash(path: str) -> str:
    """Convert Windows backslashes and the platform separator to '/'."""
    converted = path.replace("\\", "/")
    if os.sep != "/":
        converted = converted.replace(os.sep, "/")
    return converted


def clean(path: str) -> list[str]:
    """
    Resolve '.' and '..' segments and collapse repeated separators.

    A leading slash is dropped, so absolute paths are treated as relative
    to the root.

    Args:
        path: Slash-separated path

    Returns:
        List of remaining path segments (empty for the root)

    Raises:
        InvalidPathError: If a '..' would climb above the root
    """
    segments: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if not segments:
                raise InvalidPathError(f"Path escapes the root: {path!r}")
            segments.pop()
            continue
        segments.append(part)
    return segments


def normalize_path(path: str, strip: int = 0) -> str:
    """
    Produce the canonical logical path for a file.

    Args:
        path: Raw filesystem path (any separator style)
        strip: Number of leading path elements to remove

    Returns:
        Non-empty, slash-separated, relative path

    Raises:
        InvalidPathError: If the path is empty, escapes the root, or has
            fewer elements than ``strip`` requires

    Example:
        >>> normalize_path("a/./b/../c")
        'a/c'
        >>> normalize_path("static\\\\css\\\\site.css", strip=1)
        'css/site.css'
    """
    if strip < 0:
        raise InvalidPathError(f"Strip count must not be negative: {strip}")

    segments = clean(to_slash(path))
    if not segments:
        raise InvalidPathError(f"Path is empty after cleaning: {path!r}")

    if strip:
        if strip >= len(segments):
            raise InvalidPathError(
                f"Cannot strip {strip} leading elements from {path!r} "
                f"({len(segments)} elements)"
            )
        segments = segments[strip:]

    return "/".join(segments)


def normalize_query(path: str) -> str:
    """
    Normalize a runtime lookup path.

    Same cleaning as :func:`normalize_path`, except the root is allowed and
    maps to the empty string.
    """
    return "/".join(clean(to_slash(path)))


def is_canonical(path: str) -> bool:
    """Check if path is already a valid logical path key."""
    if not path or path.startswith("/") or "\\" in path:
        return False
    return all(part not in ("", ".", "..") for part in path.split("/"))


class PathNormalizer:
    """
    Stateful normalizer for one generation run.

    Remembers every path it produced and rejects collisions.

    Usage:
        normalizer = PathNormalizer(strip=1)
        key = normalizer.normalize("public/index.html")  # "index.html"
    """

    def __init__(self, strip: int = 0) -> None:
        if strip < 0:
            raise InvalidPathError(f"Strip count must not be negative: {strip}")
        self.strip = strip
        self._seen: dict[str, str] = {}

    def __contains__(self, path: str) -> bool:
        return path in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def normalize(self, path: str) -> str:
        """
        Normalize path and record it for collision detection.

        Raises:
            InvalidPathError: See :func:`normalize_path`
            DuplicatePathError: If another input produced the same key
        """
        key = normalize_path(path, self.strip)
        if key in self._seen:
            raise DuplicatePathError(
                f"{path!r} and {self._seen[key]!r} both map to {key!r}"
            )
        self._seen[key] = path
        return key
