# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-08-20
# Description: BatchEmbeddingPipeline
# -----------------------------------------------------------------------------
import asyncio
import logging
import time
from typing import List, Optional, Sequence

from chunking.CodeChunk import ChunkRecord
from embedding.EmbeddingGateway import EmbeddingGateway, to_embedding_vector
from embedding.EmbeddingRecord import EmbeddingRecord
from errors.HydeErrors import EmbeddingBuildError, EmbeddingError
from utility.logging_utils import get_class_logger


def partition(records: Sequence[ChunkRecord], batch_size: int) -> List[List[ChunkRecord]]:
    """Contiguous batches of at most batch_size records, original order kept."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    return [list(records[i:i + batch_size]) for i in range(0, len(records), batch_size)]


class BatchEmbeddingPipeline:
    """
    Turns an ordered list of ChunkRecords into an ordered list of
    EmbeddingRecords:
      - partition into contiguous batches
      - embed every batch concurrently, at most `max_concurrency` in flight
      - reassemble in batch order once all batches are done

    Fail-fast: the first batch to fail cancels the rest and the build raises
    EmbeddingBuildError. Nothing partial is returned.
    """

    def __init__(
            self,
            embedder: EmbeddingGateway,
            *,
            batch_size: int = 32,
            max_concurrency: Optional[int] = 4,
            logger: logging.Logger | None = None,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1 or None, got {max_concurrency}")

        self.embedder = embedder
        self.batch_size = batch_size
        # None means unbounded fan-out; only sensible for small corpora
        self.max_concurrency = max_concurrency
        self.logger = logger or get_class_logger(self.__class__)

    async def embed_corpus(
            self,
            records: Sequence[ChunkRecord],
            batch_size: Optional[int] = None,
    ) -> List[EmbeddingRecord]:
        size = self.batch_size if batch_size is None else batch_size
        batches = partition(records, size)

        if not batches:
            self.logger.info("embed_corpus: no records, nothing to embed")
            return []

        self.logger.info(
            "embed_corpus: %d records in %d batches (batch_size=%d, max_concurrency=%s)",
            len(records), len(batches), size, self.max_concurrency,
        )
        start = time.perf_counter()

        limit = self.max_concurrency or len(batches)
        gate = asyncio.Semaphore(limit)

        tasks = [
            asyncio.create_task(self._embed_one_batch(idx, batch, gate), name=f"embed-batch-{idx}")
            for idx, batch in enumerate(batches)
        ]

        try:
            per_batch = await self._await_all_or_first_failure(tasks)
        finally:
            # Covers both the failure path and cancellation of embed_corpus itself
            for t in tasks:
                if not t.done():
                    t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        # Sequential reassembly: batch order restores record order
        out: List[EmbeddingRecord] = []
        for batch_records in per_batch:
            out.extend(batch_records)

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        self.logger.info(
            "embed_corpus: %d embeddings collected in %.1f ms", len(out), elapsed_ms
        )
        return out

    async def _await_all_or_first_failure(
            self, tasks: List["asyncio.Task[List[EmbeddingRecord]]"]
    ) -> List[List[EmbeddingRecord]]:
        pending = set(tasks)
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_EXCEPTION)

            # Several batches can fail within the same wake-up; report the earliest batch
            failed = [t for t in tasks if t in done and not t.cancelled() and t.exception() is not None]
            if failed:
                first = failed[0]
                batch_index = tasks.index(first)
                err = first.exception()
                self.logger.error(
                    "embed_corpus: batch %d failed, aborting build (%d batches still pending): %s",
                    batch_index, len(pending), err,
                )
                raise EmbeddingBuildError(
                    f"Error in batch {batch_index}: {err}", batch_index=batch_index
                ) from err

        return [t.result() for t in tasks]

    async def _embed_one_batch(
            self,
            batch_index: int,
            batch: List[ChunkRecord],
            gate: asyncio.Semaphore,
    ) -> List[EmbeddingRecord]:
        async with gate:
            texts = [r.text for r in batch]
            self.logger.debug("batch %d: embedding %d texts", batch_index, len(texts))

            try:
                vectors = await self.embedder.embed_batch(texts)
            except EmbeddingError:
                raise
            except Exception as e:
                raise EmbeddingError(f"Embedding backend failed: {e}") from e

            if len(vectors) != len(batch):
                raise EmbeddingError(
                    f"Embedding count mismatch: sent {len(batch)} texts, got {len(vectors)} vectors"
                )

            # Pair by batch-local position
            return [
                EmbeddingRecord(vector=to_embedding_vector(vec), metadata=rec.to_metadata())
                for rec, vec in zip(batch, vectors)
            ]
