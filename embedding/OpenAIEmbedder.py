# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-09-04
# Description: OpenAIEmbedder
# -----------------------------------------------------------------------------
import asyncio
import logging
from typing import Any, List, Optional, Sequence

import numpy as np
import openai
from openai import AsyncOpenAI

from config.Config import Config
from embedding.EmbeddingGateway import EMBEDDING_DIM, to_embedding_vector
from errors.HydeErrors import EmbeddingError
from utility.logging_utils import get_class_logger

# Transport-level failures worth another attempt; anything else fails at once
_RETRYABLE_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class OpenAIEmbedder:
    """
    EmbeddingGateway over any OpenAI-compatible /v1/embeddings endpoint
    (OpenAI, Azure via base_url, Ollama, vLLM...).

    Vectors are validated to EMBEDDING_DIM components. Retries with backoff
    live here, not in the pipeline that calls it.
    """

    def __init__(
            self,
            cfg: Config,
            *,
            client: Optional[Any] = None,
            retry_delay: float = 0.8,
            logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self.model = cfg.embed_model
        self.max_retries = cfg.embed_max_retries
        self.retry_delay = retry_delay
        self.logger = logger or get_class_logger(self.__class__)

        # Retries are ours; the SDK's own retry loop is switched off
        self.client = client or AsyncOpenAI(
            api_key=cfg.embed_api_key,
            base_url=cfg.embed_base_url,
            max_retries=0,
        )

        # Only the text-embedding-3 family can shorten its output on request
        self._send_dimensions = self.model.startswith("text-embedding-3")
        self.logger.info(
            "OpenAIEmbedder initialised (model=%s, base_url=%s, dim=%d)",
            self.model,
            cfg.embed_base_url,
            EMBEDDING_DIM,
        )

    async def embed(self, text: str) -> np.ndarray:
        vectors = await self.embed_batch([text])
        if not vectors:
            raise EmbeddingError("Embedding failed for text: no vector returned")
        return vectors[0]

    async def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        if not texts:
            return []

        resp = await self._create_with_retries(list(texts))

        # Sort by index; servers are not obliged to keep input order
        data = sorted(resp.data, key=lambda d: d.index)
        if len(data) != len(texts):
            raise EmbeddingError(
                f"Embedding count mismatch: sent {len(texts)} texts, got {len(data)} vectors"
            )

        return [to_embedding_vector(d.embedding) for d in data]

    async def _create_with_retries(self, texts: List[str]) -> Any:
        params = {"model": self.model, "input": texts}
        if self._send_dimensions:
            params["dimensions"] = EMBEDDING_DIM

        delay = self.retry_delay
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await self.client.embeddings.create(**params)
            except _RETRYABLE_ERRORS as e:
                self.logger.warning(
                    "Embedding request failed (attempt %d/%d, batch=%d): %s",
                    attempt, attempts, len(texts), e,
                )
                if attempt == attempts:
                    raise EmbeddingError(f"Embedding request failed after {attempts} attempts: {e}") from e
                await asyncio.sleep(delay)
                delay *= 1.7  # backoff
            except openai.OpenAIError as e:
                self.logger.error("Embedding request rejected: %s", e)
                raise EmbeddingError(f"Embedding request rejected: {e}") from e

        # Unreachable and include for type checkers
        raise EmbeddingError("Embedding request was not attempted")

    async def close(self) -> None:
        await self.client.close()
