# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-02
# Description: index.py
# -----------------------------------------------------------------------------
from typing import List, Optional

from pydantic import BaseModel


class IndexRequest(BaseModel):
    root: Optional[str] = None
    extensions: Optional[List[str]] = None


class IndexResponse(BaseModel):
    chunks: int
    backend: str
    duration_ms: float
