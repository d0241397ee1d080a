# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-08-27
# Description: test_code_file_loader.py
# -----------------------------------------------------------------------------
from pathlib import Path

import pytest

from ingestion.CodeFileLoader import CodeFileLoader


def test_loads_matching_files_in_sorted_order(go_corpus: Path):
    files = CodeFileLoader(go_corpus, [".go"]).load_files()

    names = [Path(p).name for p, _ in files]
    assert names == ["a.go", "b.go"]
    assert files[0][1].startswith("package main")


def test_vendor_and_hidden_folders_are_skipped(go_corpus: Path):
    paths = [p.relative_to(go_corpus).as_posix() for p in CodeFileLoader(go_corpus).iter_paths()]

    assert "vendor/dep.go" not in paths
    assert ".git/config.go" not in paths
    assert "README.md" in paths


def test_extensions_without_dot_and_override(go_corpus: Path):
    loader = CodeFileLoader(go_corpus, ["GO"])
    assert len(loader.load_files()) == 2
    assert [Path(p).name for p, _ in loader.load_files(extensions=["md"])] == ["README.md"]


def test_undecodable_file_is_skipped(go_corpus: Path):
    (go_corpus / "c.go").write_bytes(b"\xff\xfe\x00bad")

    names = [Path(p).name for p, _ in CodeFileLoader(go_corpus).load_files()]

    assert names == ["a.go", "b.go"]


def test_missing_root_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        CodeFileLoader(tmp_path / "nope").load_files()


def test_file_root_raises(go_corpus: Path):
    with pytest.raises(NotADirectoryError):
        CodeFileLoader(go_corpus / "a.go").load_files()
