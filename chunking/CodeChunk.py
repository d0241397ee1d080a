# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-10
# Updated: 2026-08-18
# Description: CodeChunk
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Optional

from embedding.EmbeddingRecord import Metadata


@dataclass(frozen=True)
class ChunkRecord:
    """
    One bounded-size excerpt of a source file, the unit of embedding and retrieval.
    `source_id` is the originating file path and repeats across the chunks of a file.
    Line numbers are 1-based and only used for diagnostics.
    """

    source_id: str
    text: str
    language: Optional[str] = None
    start_line: Optional[int] = None
    end_line: Optional[int] = None

    def to_metadata(self) -> Metadata:
        return Metadata(file=self.source_id, code=self.text)

    def short_preview(self, n: int = 80) -> str:
        """Return a compact text preview for logging/debugging."""
        clean = " ".join(self.text.split())
        preview = (clean[:n] + "...") if len(clean) > n else clean
        lines = f"L{self.start_line}-{self.end_line}" if self.start_line else "L?"
        return f"[{self.source_id} {lines}] {preview}"
