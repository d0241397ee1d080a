# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-08-27
# Description: test_code_chunker.py
# -----------------------------------------------------------------------------
import pytest

from chunking.CodeChunker import CodeChunker, language_for

SMALL_GO = "package main\n\nfunc Add(a, b int) int {\n\treturn a + b\n}\n"


def _many_funcs(n: int) -> str:
    body = "\n\n".join(f"func F{i}() int {{\n\treturn {i}\n}}" for i in range(n))
    return f"package main\n\n{body}\n"


def test_language_for_known_and_unknown_extensions():
    assert language_for("x/y/main.go") == "go"
    assert language_for("lib.PY") == "python"
    assert language_for("notes.txt") is None


def test_small_file_is_a_single_chunk():
    chunks = CodeChunker(max_chars=1000).chunk_file("a.go", SMALL_GO)

    assert len(chunks) == 1
    assert chunks[0].text == SMALL_GO.strip()
    assert chunks[0].source_id == "a.go"
    assert chunks[0].language == "go"
    assert chunks[0].start_line == 1
    assert chunks[0].end_line == 5


def test_chunks_respect_max_chars_and_keep_functions_whole():
    source = _many_funcs(20)
    chunks = CodeChunker(max_chars=120).chunk_file("many.go", source)

    assert len(chunks) > 1
    assert all(len(c.text) <= 120 for c in chunks)

    for i in range(20):
        fn = f"func F{i}() int {{\n\treturn {i}\n}}"
        assert sum(fn in c.text for c in chunks) == 1

    joined = "".join(c.text for c in chunks)
    assert joined.index("func F0(") < joined.index("func F19(")


def test_oversized_function_is_split_below_the_limit():
    statements = "\n".join(f"\tx{i} := {i}" for i in range(40))
    source = f"package main\n\nfunc Big() {{\n{statements}\n}}\n"

    chunks = CodeChunker(max_chars=100).chunk_file("big.go", source)

    assert len(chunks) > 1
    assert all(len(c.text) <= 100 for c in chunks)
    assert any("x39 := 39" in c.text for c in chunks)


def test_unknown_language_falls_back_to_lines_and_characters():
    long_line = "z" * 250
    chunks = CodeChunker(max_chars=100).chunk_file("notes.txt", f"short line\n{long_line}\n")

    assert all(len(c.text) <= 100 for c in chunks)
    assert "".join(c.text for c in chunks).replace("\n", "") == "short line" + long_line
    assert all(c.language is None for c in chunks)


def test_whitespace_only_file_has_no_chunks():
    assert CodeChunker().chunk_file("empty.go", "  \n\n\t\n") == []


def test_chunk_files_keeps_file_order():
    chunker = CodeChunker(max_chars=1000)
    chunks = chunker.chunk_files([("b.go", SMALL_GO), ("a.go", SMALL_GO.replace("Add", "Sub"))])

    assert [c.source_id for c in chunks] == ["b.go", "a.go"]
    assert chunks[0].to_metadata().file == "b.go"
    assert chunks[1].short_preview(20).startswith("[a.go L1-5]")


def test_invalid_max_chars():
    with pytest.raises(ValueError):
        CodeChunker(max_chars=0)
