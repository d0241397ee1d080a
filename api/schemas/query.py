# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-09-02
# Description: query.py
# -----------------------------------------------------------------------------
from typing import List, Optional

from pydantic import Field, BaseModel


class QueryRequest(BaseModel):
    query: str = Field(..., min_length=1)
    k: Optional[int] = Field(None, ge=1, le=50)
    stream: bool = False


class CodeRef(BaseModel):
    rank_index: int
    distance: float
    file: str
    code: str


class QueryResponse(BaseModel):
    query: str
    answer: str
    code_refs: List[CodeRef]
