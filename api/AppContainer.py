# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-09-02
# Description: AppContainer.py
# -----------------------------------------------------------------------------
import asyncio
from pathlib import Path
from typing import Iterable, Optional

from chat.OpenAIChat import OpenAIChat
from config.Config import Config
from embedding.OpenAIEmbedder import OpenAIEmbedder
from health.ChatHealth import ChatHealth
from health.EmbeddingHealth import EmbeddingHealth
from services.CodeIngestService import CodeIngestService
from services.HealthService import HealthService
from services.HydeRetriever import HydeRetriever
from utility.logging_utils import get_class_logger
from vectorstore.SimilarityIndex import SimilarityIndex


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.

    The current index is replaced only after a build succeeds, so queries
    keep reading the previous index while a rebuild is running.
    """

    def __init__(self, cfg: Optional[Config] = None) -> None:
        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger = get_class_logger(self.__class__)

        # Gateways
        self.embedder = OpenAIEmbedder(self.cfg)
        self.chat = OpenAIChat(self.cfg)

        # Ingest pipeline
        self.ingest_service = CodeIngestService.from_config(self.cfg, self.embedder)

        # Smoke tests / health
        self.health_service = HealthService(
            embedding_health=EmbeddingHealth(self.embedder),
            chat_health=ChatHealth(self.chat),
        )

        self._index: Optional[SimilarityIndex] = None
        self._build_lock = asyncio.Lock()

    @property
    def index(self) -> Optional[SimilarityIndex]:
        return self._index

    async def rebuild_index(
        self,
        root: Optional[str | Path] = None,
        extensions: Optional[Iterable[str]] = None,
    ) -> SimilarityIndex:
        async with self._build_lock:
            index = await self.ingest_service.build_index(root=root, extensions=extensions)
            previous, self._index = self._index, index
            self.logger.info("Swapped in new %s index with %d chunks", index.backend, len(index))
            if previous is not None:
                previous.close()
            return index

    def retriever(self) -> Optional[HydeRetriever]:
        """Retriever bound to the current index, or None before the first build."""
        if self._index is None:
            return None
        return HydeRetriever(
            chat=self.chat,
            embedder=self.embedder,
            index=self._index,
            chunk_size=self.cfg.chunk_max_chars,
            language=self.cfg.corpus_language,
            default_k=self.cfg.default_k,
        )

    async def close(self) -> None:
        if self._index is not None:
            self._index.close()
        await self.embedder.close()
        await self.chat.close()


# Singleton container instance
app_container = AppContainer()
