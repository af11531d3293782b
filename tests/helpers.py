"""Helpers to render a generated module in memory and import it."""

from __future__ import annotations

import io
import types

from embedpack.encode import new

MTIME_NS = 1_700_000_000_123_456_789


def render(files, package: str = "assets", **options) -> str:
    """Run the encoder over (path, content[, mod_time]) tuples and return the source."""
    sink = io.StringIO()
    with new(sink, package, **options) as encoder:
        for item in files:
            path, content = item[0], item[1]
            mod_time = item[2] if len(item) > 2 else MTIME_NS
            encoder.add_file(path, content, mod_time)
    return sink.getvalue()


def load(source: str, name: str = "generated") -> types.ModuleType:
    """Execute generated source as a fresh module."""
    module = types.ModuleType(name)
    exec(compile(source, f"<{name}>", "exec"), module.__dict__)
    return module
