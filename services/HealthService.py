# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-09-01
# Description: HealthService.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Dict

from api.schemas.health import DeepHealthResponse, SmokeTestSummary
from health.ChatHealth import ChatHealth
from health.EmbeddingHealth import EmbeddingHealth


@dataclass
class HealthService:
    """
    Runs the gateway smoke tests and shapes the result for the API layer.
    """

    embedding_health: EmbeddingHealth
    chat_health: ChatHealth

    async def deep_health(self, run_chat: bool = True) -> DeepHealthResponse:
        results: Dict[str, bool] = {"embedding": await self.embedding_health.run()}
        if run_chat:
            results["chat"] = await self.chat_health.run()

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed

        return DeepHealthResponse(
            status="ok" if failed == 0 else "error",
            results=results,
            summary=SmokeTestSummary(total=total, passed=passed, failed=failed),
        )
