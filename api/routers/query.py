# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-09-02
# Description: query router
# -----------------------------------------------------------------------------
import json
from typing import Any, AsyncIterator, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from api.dependencies import get_retriever
from api.schemas.query import CodeRef, QueryRequest, QueryResponse
from errors.HydeErrors import RetrievalError, StreamError
from services.HydeRetriever import HydeResponse, HydeRetriever
from utility.logging_utils import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


def _event(payload: Dict[str, Any]) -> str:
    return json.dumps(payload) + "\n"


async def generate_ndjson_stream(response: HydeResponse) -> AsyncIterator[str]:
    """
    One JSON object per line: code_refs first, then token deltas, then a
    terminal done or error event.
    """
    yield _event({"type": "code_refs", "code_refs": [r.to_dict() for r in response.code_refs]})
    try:
        async for delta in response.answer:
            yield _event({"type": "token", "text": delta})
    except StreamError as e:
        logger.error("Answer stream failed: %s", e)
        yield _event({"type": "error", "message": str(e)})
        return
    yield _event({"type": "done"})


@router.post("", response_model=QueryResponse)
async def post_query(
    req: QueryRequest,
    retriever: HydeRetriever = Depends(get_retriever),
):
    query_text = req.query.strip()
    if not query_text:
        raise HTTPException(status_code=400, detail="query must not be empty")

    try:
        response = await retriever.retrieve(query_text, k=req.k)
    except RetrievalError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if req.stream:
        return StreamingResponse(
            generate_ndjson_stream(response),
            media_type="application/x-ndjson",
        )

    try:
        answer = await response.collect_answer()
    except StreamError as e:
        logger.error("Answer synthesis failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))

    return QueryResponse(
        query=query_text,
        answer=answer,
        code_refs=[CodeRef(**r.to_dict()) for r in response.code_refs],
    )
