"""Tests for input expansion and the generate pipeline."""

from __future__ import annotations

import os
import stat

import pytest

from embedpack.config import EncoderOptions
from embedpack.encode.generate import atomic_output, generate
from embedpack.errors import DuplicatePathError, InvalidPathError
from embedpack.ingest.sources import expand, expand_all, iter_source_files, list_entries

from .helpers import load


def test_expand_file_returns_itself(source_tree):
    path = str(source_tree / "index.html")
    assert expand(path) == [path]


def test_expand_directory_is_sorted_and_recursive(source_tree):
    rel = [os.path.relpath(p, source_tree) for p in expand(str(source_tree))]
    assert rel == [
        os.path.join("css", "site.css"),
        "index.html",
        os.path.join("js", "app.js"),
    ]


def test_expand_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        expand(str(tmp_path / "missing"))


def test_expand_all_keeps_argument_order(source_tree):
    js = str(source_tree / "js")
    css = str(source_tree / "css")
    names = [os.path.basename(p) for p in expand_all([js, css])]
    assert names == ["app.js", "site.css"]


def test_list_entries(source_tree):
    entries = [(os.path.basename(p), is_dir) for p, is_dir in list_entries(str(source_tree))]
    assert entries == [("css", True), ("index.html", False), ("js", True)]


def test_source_files_carry_stat(source_tree):
    css = source_tree / "css" / "site.css"
    os.utime(css, ns=(1_600_000_000_000_000_000, 1_600_000_000_000_000_000))
    (source,) = list(iter_source_files([str(css)]))
    assert source.size == css.stat().st_size
    assert source.mod_time_ns == 1_600_000_000_000_000_000
    assert source.mod_time.year == 2020
    assert source.read_bytes() == css.read_bytes()


def test_generate_round_trip(source_tree, tmp_path):
    output = tmp_path / "out" / "assets.py"
    manifest = generate(
        "assets",
        ["site"],
        output,
        options=EncoderOptions(gzip=True),
        cwd=tmp_path,
    )
    assert output.exists()
    assert len(manifest) == 3

    module = load(output.read_text(encoding="utf-8"))
    assert module.PACKAGE == "assets"
    assert module.read_file("site/index.html") == (source_tree / "index.html").read_bytes()
    assert module.listdir("site") == ["css", "index.html", "js"]
    assert module.stat("site/index.html").compressed


def test_generate_relative_paths_with_cwd_and_strip(source_tree, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    generate("assets", ["css", "js"], "assets.py", strip=1, cwd=source_tree)

    module = load((tmp_path / "assets.py").read_text(encoding="utf-8"))
    assert module.listdir() == ["app.js", "site.css"]
    assert os.path.realpath(os.getcwd()) == os.path.realpath(tmp_path)


def test_generate_is_reproducible(source_tree, tmp_path):
    first, second = tmp_path / "a.py", tmp_path / "b.py"
    options = EncoderOptions(gzip=True, tags=("prod",))
    generate("assets", ["site"], first, options=options, cwd=tmp_path)
    generate("assets", ["site"], second, options=options, cwd=tmp_path)
    assert first.read_bytes() == second.read_bytes()


def test_duplicate_after_strip_leaves_no_output(tmp_path):
    (tmp_path / "one").mkdir()
    (tmp_path / "two").mkdir()
    (tmp_path / "one" / "x.txt").write_bytes(b"1")
    (tmp_path / "two" / "x.txt").write_bytes(b"2")
    output = tmp_path / "assets.py"

    with pytest.raises(DuplicatePathError):
        generate("assets", ["one", "two"], output, strip=1, cwd=tmp_path)

    assert not output.exists()
    assert [p.name for p in tmp_path.iterdir() if p.suffix == ".tmp"] == []


def test_failed_run_keeps_previous_output(source_tree, tmp_path):
    output = tmp_path / "assets.py"
    output.write_text("previous", encoding="utf-8")

    with pytest.raises(InvalidPathError):
        generate("assets", [str(source_tree / "index.html")], output, strip=99)

    assert output.read_text(encoding="utf-8") == "previous"


def test_generate_to_stdout(source_tree, capsys):
    generate("assets", [str(source_tree / "js")], strip=0)
    out = capsys.readouterr().out
    assert "FS = EmbeddedFS(_RECORDS)" in out


def test_verbose_progress_goes_to_stderr(source_tree, tmp_path, capsys):
    generate(
        "assets",
        ["site"],
        tmp_path / "assets.py",
        options=EncoderOptions(gzip=True),
        cwd=source_tree.parent,
        verbose=True,
    )
    err = capsys.readouterr().err
    assert "[gzip] site/index.html" in err
    assert "[raw] site/js/app.js" in err
    assert "Embedded 3 files" in err


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
@pytest.mark.parametrize("umask, expected", [(0o022, 0o644), (0o077, 0o600), (0o002, 0o664)])
def test_output_mode_follows_umask(source_tree, tmp_path, umask, expected):
    output = tmp_path / "assets.py"
    previous = os.umask(umask)
    try:
        generate("assets", ["site"], output, cwd=tmp_path)
    finally:
        os.umask(previous)
    assert stat.S_IMODE(output.stat().st_mode) == expected


def test_atomic_output_cleans_up(tmp_path):
    output = tmp_path / "x.py"
    with pytest.raises(RuntimeError):
        with atomic_output(output) as f:
            f.write("partial")
            raise RuntimeError("boom")
    assert list(tmp_path.iterdir()) == []
