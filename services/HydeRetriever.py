# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-08-24
# Description: HydeRetriever.py
# -----------------------------------------------------------------------------
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import AsyncIterator, List, Optional, Sequence, Tuple

import numpy as np

from chat.ChatGateway import ChatGateway
from embedding.EmbeddingGateway import EmbeddingGateway, to_embedding_vector
from errors.HydeErrors import (
    HydeStage,
    HypotheticalGenerationError,
    RetrievalError,
    StreamError,
)
from utility.logging_utils import get_class_logger
from vectorstore.SimilarityIndex import RetrievalResult, SimilarityIndex


@dataclass
class HydeResponse:
    """
    Result of one retrieval. code_refs is final when this object exists;
    answer is produced lazily as it is pulled and may end in StreamError.
    """
    answer: AsyncIterator[str]
    code_refs: List[RetrievalResult] = field(default_factory=list)

    async def collect_answer(self) -> str:
        """Drain the answer stream. Raises StreamError if it fails part-way."""
        parts: List[str] = []
        async for delta in self.answer:
            parts.append(delta)
        return "".join(parts)


class HydeRetriever:
    """
    Hypothetical Document Embedding retrieval:
        generate hypothetical doc -> embed it -> search the index -> stream a synthesized answer

    Stages run strictly in order; the first failure aborts with a RetrievalError
    naming the stage. The index is only read, so one retriever can serve
    concurrent calls.
    """

    def __init__(
            self,
            *,
            chat: ChatGateway,
            embedder: EmbeddingGateway,
            index: SimilarityIndex,
            chunk_size: int = 1000,
            language: str = "Go",
            default_k: int = 5,
            logger: logging.Logger | None = None,
    ) -> None:
        self.chat = chat
        self.embedder = embedder
        self.index = index
        self.chunk_size = chunk_size
        self.language = language
        self.default_k = default_k
        self.logger = logger or get_class_logger(self.__class__)

    # ---- prompts ----
    def _hypothetical_prompt(self, query: str) -> Tuple[str, str]:
        system = (
            f"You are a {self.language} code generator. Given a query, generate a {self.language} "
            f"code snippet or document that would answer it. The output must not exceed the "
            f"specified chunk size."
        )
        user = (
            f"Generate a hypothetical {self.language} code snippet or document that would answer the "
            f"following query as if it existed in a codebase. The generated document must fit within "
            f"{self.chunk_size} characters.\n\n"
            f"Query: {query}\n\n"
            f"Hypothetical Document:"
        )
        return system, user

    def _synthesis_prompt(self, query: str, code_refs: Sequence[RetrievalResult]) -> Tuple[str, str]:
        system = f"You are a {self.language} expert. Explain the code clearly and concisely."
        snippets = [
            f"File: {ref.metadata.file}\nCode:\n{ref.metadata.code}\n"
            for ref in code_refs
        ]
        context = "\n---\n".join(snippets)
        user = (
            f"Explain the following {self.language} code in detail:\n\n"
            f"Given the following user query:\n{query}\n\n"
            f"and these relevant code snippets:\n{context}\n\n"
            f"Provide a detailed answer, referencing the code where appropriate."
        )
        return system, user

    # ---- public API ----
    async def retrieve(self, query: str, k: Optional[int] = None) -> HydeResponse:
        """
        Run generate -> embed -> search, then hand back the code_refs together
        with a lazy answer stream. Nothing is streamed until the caller pulls.
        """
        k = self.default_k if k is None else k
        if k <= 0:
            raise ValueError(f"k must be >= 1, got {k}")
        q = (query or "").strip()
        if not q:
            raise ValueError("query must not be empty")

        run_id = uuid.uuid4().hex[:8]
        start = time.perf_counter()
        self.logger.info("retrieve[%s]: query=%r k=%d (start)", run_id, q[:120], k)

        try:
            self._enter(run_id, HydeStage.GENERATING)
            hypothetical = await self.generate_hypothetical_document(q)

            self._enter(run_id, HydeStage.EMBEDDING)
            embedding = await self._embed_hypothetical(hypothetical)

            self._enter(run_id, HydeStage.SEARCHING)
            code_refs = self._search(embedding, k)
        except RetrievalError as e:
            self.logger.error("retrieve[%s]: %s failed: %s", run_id, e.stage.value, e)
            self._enter(run_id, HydeStage.ERROR)
            raise

        self.logger.info(
            "retrieve[%s]: %d code refs in %.1f ms",
            run_id, len(code_refs), (time.perf_counter() - start) * 1000.0,
        )
        self._enter(run_id, HydeStage.SYNTHESIZING)
        return HydeResponse(
            answer=self.synthesize_answer_stream(q, code_refs, run_id=run_id),
            code_refs=code_refs,
        )

    async def generate_hypothetical_document(self, query: str) -> str:
        system, user = self._hypothetical_prompt(query)
        try:
            doc = await self.chat.chat(system, user)
        except Exception as e:
            raise HypotheticalGenerationError(f"Hypothetical document generation failed: {e}") from e

        if not doc or not doc.strip():
            raise HypotheticalGenerationError("Hypothetical document generation returned no content.")

        if len(doc) > self.chunk_size:
            self.logger.warning(
                "Hypothetical document exceeds budget (%d > %d chars); using it as-is",
                len(doc), self.chunk_size,
            )
        self.logger.debug("Hypothetical document (%d chars): %r", len(doc), doc[:200])
        return doc

    async def similarity_search(self, text: str, k: int) -> List[RetrievalResult]:
        """Embed `text` and return its k nearest chunks. Used by retrieve() on the hypothetical document."""
        if k <= 0:
            raise ValueError(f"k must be >= 1, got {k}")
        embedding = await self._embed_hypothetical(text)
        return self._search(embedding, k)

    async def synthesize_answer_stream(
            self,
            query: str,
            code_refs: Sequence[RetrievalResult],
            *,
            run_id: str = "-",
    ) -> AsyncIterator[str]:
        system, user = self._synthesis_prompt(query, code_refs)
        self.logger.debug("synthesis[%s]: prompt_chars=%d", run_id, len(user))

        stream = self.chat.chat_stream(system, user)
        chars = 0
        try:
            async for delta in stream:
                chars += len(delta)
                yield delta
        except StreamError as e:
            self.logger.error("synthesis[%s]: stream failed after %d chars: %s", run_id, chars, e)
            self._enter(run_id, HydeStage.ERROR)
            raise
        except Exception as e:
            self.logger.error("synthesis[%s]: stream failed after %d chars: %s", run_id, chars, e)
            self._enter(run_id, HydeStage.ERROR)
            raise StreamError(f"Answer stream failed after {chars} chars: {e}") from e
        finally:
            # Abandons the upstream request if the consumer stopped early
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

        self._enter(run_id, HydeStage.DONE)
        self.logger.info("synthesis[%s]: answer complete (%d chars)", run_id, chars)

    # ---- stage helpers ----
    def _enter(self, run_id: str, stage: HydeStage) -> None:
        level = logging.ERROR if stage is HydeStage.ERROR else logging.DEBUG
        self.logger.log(level, "retrieve[%s]: -> %s", run_id, stage.value)

    async def _embed_hypothetical(self, text: str) -> np.ndarray:
        try:
            return to_embedding_vector(await self.embedder.embed(text))
        except Exception as e:
            raise RetrievalError(f"Embedding the hypothetical document failed: {e}", HydeStage.EMBEDDING) from e

    def _search(self, embedding: np.ndarray, k: int) -> List[RetrievalResult]:
        try:
            return self.index.query(embedding, k)
        except Exception as e:
            raise RetrievalError(f"Index search failed: {e}", HydeStage.SEARCHING) from e
