# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-09-02
# Description: health.py
# -----------------------------------------------------------------------------
from typing import Dict

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    message: str
    index_ready: bool
    indexed_chunks: int = 0


class SmokeTestSummary(BaseModel):
    total: int
    passed: int
    failed: int


class DeepHealthResponse(BaseModel):
    status: str
    results: Dict[str, bool]
    summary: SmokeTestSummary
