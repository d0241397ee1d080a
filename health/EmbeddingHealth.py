# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-06
# Updated: 2026-09-01
# Description: EmbeddingHealth
# -----------------------------------------------------------------------------
import time
import logging
from typing import Optional

from embedding.EmbeddingGateway import EMBEDDING_DIM, EmbeddingGateway
from utility.logging_utils import get_logger


class EmbeddingHealth:
    """
    Smoke test for the embedding gateway.

    Verifies:
      - The embedding call completes successfully
      - The vector has the EMBEDDING_DIM components the index expects
    """

    def __init__(
        self,
        embedder: EmbeddingGateway,
        expected_dim: int = EMBEDDING_DIM,
        logger: Optional[logging.Logger] = None,
    ):
        self.embedder = embedder
        self.expected_dim = expected_dim
        self.logger = logger or get_logger(__name__)

    async def run(self) -> bool:
        """
        Run the embedding smoke test.

        Returns:
            True if the embedding call succeeds and the dimension matches.
        """
        test_text = "func HealthCheck() bool { return true }"
        self.logger.info("Running embedding healthcheck")

        try:
            start = time.time()
            vector = await self.embedder.embed(test_text)
            elapsed_ms = (time.time() - start) * 1000.0

            dim = len(vector)
            self.logger.info(
                "Embedding call succeeded in %.1f ms. Returned dimension: %d",
                elapsed_ms,
                dim,
            )

            if dim != self.expected_dim:
                self.logger.warning("Dimension mismatch: expected %d, got %d.", self.expected_dim, dim)
                return False

            self.logger.info("Embedding healthcheck PASSED.")
            return True

        except Exception as e:
            self.logger.exception("Embedding healthcheck FAILED: %s", e)
            return False
