# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-09-03
# Description: conftest.py
# -----------------------------------------------------------------------------

import asyncio
import sys
from pathlib import Path
from typing import AsyncIterator, Dict, List, Optional, Sequence

import numpy as np
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from embedding.EmbeddingGateway import EMBEDDING_DIM  # noqa: E402


def unit_vector(i: int, dim: int = EMBEDDING_DIM) -> np.ndarray:
    v = np.zeros(dim, dtype=np.float32)
    v[i % dim] = 1.0
    return v


class FakeEmbedder:
    """
    In-memory EmbeddingGateway. Texts found in `table` get that vector, all
    others get a vector derived from the text length. `delays` gives a
    per-text sleep so batches can finish out of order. Records every batch
    and the order batches completed in.
    """

    def __init__(
        self,
        table: Optional[Dict[str, np.ndarray]] = None,
        *,
        fail_on: Optional[str] = None,
        delay: float = 0.0,
        delays: Optional[Dict[str, float]] = None,
        dim: int = EMBEDDING_DIM,
    ):
        self.table = table or {}
        self.fail_on = fail_on
        self.delay = delay
        self.delays = delays or {}
        self.dim = dim
        self.batches: List[List[str]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.completed: List[List[str]] = []
        self.closed = False

    def _vector(self, text: str) -> np.ndarray:
        if text in self.table:
            return self.table[text]
        v = np.zeros(self.dim, dtype=np.float32)
        v[len(text) % self.dim] = 1.0
        return v

    async def embed(self, text: str) -> np.ndarray:
        return (await self.embed_batch([text]))[0]

    async def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        self.batches.append(list(texts))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            wait = max([self.delay] + [self.delays.get(t, 0.0) for t in texts])
            if wait:
                await asyncio.sleep(wait)
            if self.fail_on is not None and any(self.fail_on in t for t in texts):
                raise RuntimeError(f"embedding backend refused {self.fail_on!r}")
            self.completed.append(list(texts))
            return [self._vector(t) for t in texts]
        finally:
            self.in_flight -= 1

    async def close(self) -> None:
        self.closed = True

    @property
    def calls(self) -> int:
        return len(self.batches)


class FakeChat:
    """
    In-memory ChatGateway. chat() returns `hypothetical`; chat_stream() yields
    `tokens` and raises `stream_error` after `fail_after` tokens if given.
    """

    def __init__(
        self,
        hypothetical: str = "func Add(a, b int) int { return a + b }",
        tokens: Sequence[str] = ("The ", "answer."),
        *,
        chat_error: Optional[Exception] = None,
        stream_error: Optional[Exception] = None,
        fail_after: int = 0,
    ):
        self.hypothetical = hypothetical
        self.tokens = list(tokens)
        self.chat_error = chat_error
        self.stream_error = stream_error
        self.fail_after = fail_after
        self.chat_calls: List[tuple] = []
        self.stream_calls: List[tuple] = []
        self.stream_closed = False
        self.closed = False

    async def chat(self, system: str, user: str) -> str:
        self.chat_calls.append((system, user))
        if self.chat_error is not None:
            raise self.chat_error
        return self.hypothetical

    async def chat_stream(self, system: str, user: str) -> AsyncIterator[str]:
        self.stream_calls.append((system, user))
        try:
            for i, token in enumerate(self.tokens):
                if self.stream_error is not None and i == self.fail_after:
                    raise self.stream_error
                yield token
            if self.stream_error is not None and self.fail_after >= len(self.tokens):
                raise self.stream_error
        finally:
            self.stream_closed = True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def go_corpus(tmp_path: Path) -> Path:
    """Two small Go files plus noise the loader should skip."""
    (tmp_path / "a.go").write_text(
        "package main\n\nfunc Add(a, b int) int {\n\treturn a + b\n}\n", encoding="utf-8"
    )
    (tmp_path / "b.go").write_text(
        "package main\n\nfunc Sub(a, b int) int {\n\treturn a - b\n}\n", encoding="utf-8"
    )
    (tmp_path / "README.md").write_text("# not code\n", encoding="utf-8")
    vendor = tmp_path / "vendor"
    vendor.mkdir()
    (vendor / "dep.go").write_text("package dep\n", encoding="utf-8")
    hidden = tmp_path / ".git"
    hidden.mkdir()
    (hidden / "config.go").write_text("package git\n", encoding="utf-8")
    return tmp_path
