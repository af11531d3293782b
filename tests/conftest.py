"""Shared fixtures."""

from __future__ import annotations

import types
from typing import Callable

import pytest

from .helpers import load, render


@pytest.fixture
def embed() -> Callable[..., types.ModuleType]:
    """Render files and import the result in one step."""

    def _embed(files, **options) -> types.ModuleType:
        return load(render(files, **options))

    return _embed


@pytest.fixture
def source_tree(tmp_path):
    """
    A small directory tree on disk:

        site/index.html
        site/css/site.css
        site/js/app.js
    """
    root = tmp_path / "site"
    (root / "css").mkdir(parents=True)
    (root / "js").mkdir()
    (root / "index.html").write_bytes(b"<html><body>hello</body></html>\n" * 20)
    (root / "css" / "site.css").write_bytes(b"body { color: red; }\n")
    (root / "js" / "app.js").write_bytes(b"console.log('hi');\n")
    return root
