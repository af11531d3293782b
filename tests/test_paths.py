"""Tests for logical path normalization."""

from __future__ import annotations

import pytest

from embedpack.errors import DuplicatePathError, InvalidPathError
from embedpack.ingest.paths import (
    PathNormalizer,
    is_canonical,
    normalize_path,
    normalize_query,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a/./b/../c", "a/c"),
        ("a//b///c.txt", "a/b/c.txt"),
        ("./a/b", "a/b"),
        ("/abs/path.txt", "abs/path.txt"),
        ("static\\css\\site.css", "static/css/site.css"),
        ("a/b/", "a/b"),
    ],
)
def test_normalize_path(raw, expected):
    assert normalize_path(raw) == expected


@pytest.mark.parametrize("path", ["a/c", "x.txt", "deep/er/than/that.bin"])
def test_normalize_is_idempotent(path):
    once = normalize_path(path)
    assert once == path
    assert normalize_path(once) == once


@pytest.mark.parametrize("raw", ["../a", "a/../../b", "..", "/.."])
def test_escaping_path_is_rejected(raw):
    with pytest.raises(InvalidPathError):
        normalize_path(raw)


@pytest.mark.parametrize("raw", ["", ".", "/", "a/..", "./"])
def test_empty_path_is_rejected(raw):
    with pytest.raises(InvalidPathError):
        normalize_path(raw)


def test_strip_leading_elements():
    assert normalize_path("public/css/site.css", strip=1) == "css/site.css"
    assert normalize_path("public/css/site.css", strip=2) == "site.css"


@pytest.mark.parametrize("strip", [3, 4, 10])
def test_strip_overflow_is_rejected(strip):
    with pytest.raises(InvalidPathError):
        normalize_path("public/css/site.css", strip=strip)


def test_strip_applies_after_cleaning():
    assert normalize_path("./public/./css/../img/a.png", strip=1) == "img/a.png"


def test_negative_strip_is_rejected():
    with pytest.raises(InvalidPathError):
        normalize_path("a/b", strip=-1)
    with pytest.raises(InvalidPathError):
        PathNormalizer(strip=-1)


def test_normalizer_rejects_collisions():
    normalizer = PathNormalizer(strip=1)
    assert normalizer.normalize("one/x.txt") == "x.txt"
    with pytest.raises(DuplicatePathError):
        normalizer.normalize("two/x.txt")
    assert "x.txt" in normalizer
    assert len(normalizer) == 1


def test_normalizer_rejects_equivalent_spellings():
    normalizer = PathNormalizer()
    normalizer.normalize("a/b.txt")
    with pytest.raises(DuplicatePathError):
        normalizer.normalize("a/./b.txt")


@pytest.mark.parametrize("raw", ["", "/", ".", "./", "a/.."])
def test_query_root(raw):
    assert normalize_query(raw) == ""


def test_query_matches_file_normalization():
    assert normalize_query("/a/./b/../c") == "a/c"
    with pytest.raises(InvalidPathError):
        normalize_query("../etc/passwd")


@pytest.mark.parametrize(
    "path, expected",
    [
        ("a/b.txt", True),
        ("a", True),
        ("", False),
        ("/a", False),
        ("a/", False),
        ("a//b", False),
        ("a/./b", False),
        ("a/../b", False),
        ("a\\b", False),
    ],
)
def test_is_canonical(path, expected):
    assert is_canonical(path) is expected
