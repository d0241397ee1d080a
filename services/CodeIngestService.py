# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-21
# Updated: 2026-08-28
# Description: CodeIngestService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from chunking.CodeChunk import ChunkRecord
from chunking.CodeChunker import CodeChunker
from config.Config import Config
from embedding.BatchEmbeddingPipeline import BatchEmbeddingPipeline
from embedding.EmbeddingGateway import EmbeddingGateway
from ingestion.CodeFileLoader import CodeFileLoader
from utility.logging_utils import get_class_logger
from vectorstore.IndexFactory import build_index_from_records
from vectorstore.SimilarityIndex import SimilarityIndex


class CodeIngestService:
    """
    Owns the ingest/index pipeline:
      - discover and read source files (CodeFileLoader)
      - chunk along syntax boundaries (CodeChunker)
      - embed all chunks concurrently (BatchEmbeddingPipeline)
      - build the similarity index

    All or nothing: any failure raises and no index is returned.
    """

    def __init__(
        self,
        *,
        pipeline: BatchEmbeddingPipeline,
        chunker: CodeChunker,
        corpus_root: str | Path,
        extensions: Iterable[str] = (".go",),
        index_backend: str = "exact",
        logger: logging.Logger | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.chunker = chunker
        self.corpus_root = Path(corpus_root)
        self.extensions = tuple(extensions)
        self.index_backend = index_backend
        self.logger = logger or get_class_logger(self.__class__)

    @classmethod
    def from_config(cls, cfg: Config, embedder: EmbeddingGateway) -> "CodeIngestService":
        pipeline = BatchEmbeddingPipeline(
            embedder,
            batch_size=cfg.embed_batch_size,
            max_concurrency=cfg.embed_max_concurrency,
        )
        return cls(
            pipeline=pipeline,
            chunker=CodeChunker(max_chars=cfg.chunk_max_chars),
            corpus_root=cfg.corpus_root,
            extensions=cfg.file_extensions,
            index_backend=cfg.index_backend,
        )

    async def build_index(
        self,
        root: Optional[str | Path] = None,
        extensions: Optional[Iterable[str]] = None,
    ) -> SimilarityIndex:
        corpus_root = Path(root) if root is not None else self.corpus_root
        exts = tuple(extensions) if extensions is not None else self.extensions

        self.logger.info(
            "Building %s index from %s (extensions=%s)", self.index_backend, corpus_root, list(exts)
        )
        start = time.perf_counter()

        # File IO, parsing and index construction are blocking; keep them off the event loop
        files, records = await asyncio.to_thread(self._load_and_chunk, corpus_root, exts)
        embedded = await self.pipeline.embed_corpus(records)

        if not embedded:
            self.logger.warning("No embeddings were generated. Index will be empty.")

        index = await asyncio.to_thread(build_index_from_records, embedded, self.index_backend)

        self.logger.info(
            "Index ready: files=%d chunks=%d backend=%s in %.1f ms",
            len(files),
            len(index),
            index.backend,
            (time.perf_counter() - start) * 1000.0,
        )
        return index

    def _load_and_chunk(
        self, corpus_root: Path, extensions: Tuple[str, ...]
    ) -> Tuple[List[Tuple[str, str]], List[ChunkRecord]]:
        files = CodeFileLoader(corpus_root, extensions).load_files()
        return files, self.chunker.chunk_files(files)
