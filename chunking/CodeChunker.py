# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-11
# Updated: 2026-08-27
# Description: CodeChunker
# -----------------------------------------------------------------------------
import logging
import os
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from tree_sitter_language_pack import get_parser

from chunking.CodeChunk import ChunkRecord
from errors.HydeErrors import ChunkingError
from utility.logging_utils import get_class_logger

EXTENSION_LANGUAGES: Dict[str, str] = {
    ".go": "go",
    ".py": "python",
    ".rs": "rust",
    ".js": "javascript",
    ".ts": "typescript",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".rb": "ruby",
}

Span = Tuple[int, int]  # [start_byte, end_byte)


def language_for(path: str) -> Optional[str]:
    return EXTENSION_LANGUAGES.get(os.path.splitext(path)[1].lower())


class CodeChunker:
    """
    Splits source files into chunks of at most `max_chars` characters along
    syntax boundaries.

    Consecutive top-level nodes are packed together while they fit. A node
    that is too large on its own is split through its children; a leaf that
    is still too large is split on line boundaries, and a single over-long
    line by characters. Chunk text is the exact source slice.
    """

    def __init__(
            self,
            max_chars: int = 1000,
            *,
            logger: logging.Logger | None = None,
    ):
        if max_chars < 1:
            raise ValueError(f"max_chars must be >= 1, got {max_chars}")
        self.max_chars = max_chars
        self.logger = logger or get_class_logger(self.__class__)
        self._parsers: Dict[str, object] = {}

    def _get_parser(self, language: str):
        if language not in self._parsers:
            self._parsers[language] = get_parser(language)
        return self._parsers[language]

    def chunk_files(self, files: Iterable[Tuple[str, str]]) -> List[ChunkRecord]:
        """Chunk (path, text) pairs in order. The first ChunkingError aborts."""
        out: List[ChunkRecord] = []
        total_files = 0
        for path, text in files:
            file_chunks = self.chunk_file(path, text)
            if file_chunks:
                self.logger.debug("File %s: %d chunks, first %s", path, len(file_chunks), file_chunks[0].short_preview())
            out.extend(file_chunks)
            total_files += 1

        self.logger.info(
            "Chunking complete: files=%d chunks=%d (max_chars=%d)",
            total_files, len(out), self.max_chars,
        )
        return out

    def chunk_file(self, source_id: str, text: str, language: Optional[str] = None) -> List[ChunkRecord]:
        language = language or language_for(source_id)
        try:
            source = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ChunkingError(f"Cannot encode {source_id} as UTF-8: {e}", source_id=source_id) from e

        if not source.strip():
            return []

        if language is None:
            self.logger.warning("No parser for %s; falling back to line-based chunks", source_id)
            spans = list(self._split_lines(source, 0, len(source)))
        else:
            try:
                tree = self._get_parser(language).parse(source)
            except Exception as e:
                raise ChunkingError(f"Failed to parse {source_id} as {language}: {e}", source_id=source_id) from e
            if tree.root_node.has_error:
                self.logger.debug("Syntax errors in %s; chunking the recovered tree", source_id)
            spans = list(self._segments(source, tree.root_node))

        records: List[ChunkRecord] = []
        for start, end in self._pack(source, spans):
            try:
                snippet = source[start:end].decode("utf-8")
            except UnicodeDecodeError as e:
                raise ChunkingError(f"Invalid UTF-8 in {source_id}: {e}", source_id=source_id) from e
            if not snippet.strip():
                continue
            records.append(ChunkRecord(
                source_id=source_id,
                text=snippet,
                language=language,
                start_line=source.count(b"\n", 0, start) + 1,
                end_line=source.count(b"\n", 0, max(start, end - 1)) + 1,
            ))
        return records

    # ---- helpers ----
    def _size(self, source: bytes, start: int, end: int) -> int:
        return len(source[start:end].decode("utf-8", errors="replace"))

    def _segments(self, source: bytes, node) -> Iterator[Span]:
        children = node.children
        if not children:
            yield from self._split_lines(source, node.start_byte, node.end_byte)
            return
        for child in children:
            if self._size(source, child.start_byte, child.end_byte) <= self.max_chars:
                yield child.start_byte, child.end_byte
            else:
                yield from self._segments(source, child)

    def _pack(self, source: bytes, spans: List[Span]) -> Iterator[Span]:
        """Greedily merge consecutive spans while the merged slice fits."""
        cur: Optional[Span] = None
        for start, end in spans:
            if start >= end:
                continue
            if cur is None:
                cur = (start, end)
            elif self._size(source, cur[0], end) <= self.max_chars:
                cur = (cur[0], end)
            else:
                yield cur
                cur = (start, end)
        if cur is not None:
            yield cur

    def _split_lines(self, source: bytes, start: int, end: int) -> Iterator[Span]:
        pos = start
        for line in source[start:end].splitlines(keepends=True):
            line_end = pos + len(line)
            if self._size(source, pos, line_end) <= self.max_chars:
                yield pos, line_end
            else:
                yield from self._split_chars(source, pos, line_end)
            pos = line_end

    def _split_chars(self, source: bytes, start: int, end: int) -> Iterator[Span]:
        text = source[start:end].decode("utf-8", errors="replace")
        pos = start
        for i in range(0, len(text), self.max_chars):
            piece_len = len(text[i:i + self.max_chars].encode("utf-8"))
            yield pos, min(pos + piece_len, end)
            pos += piece_len
