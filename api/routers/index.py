# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-02
# Description: index router
# -----------------------------------------------------------------------------
import time

from fastapi import APIRouter, Depends, HTTPException

from api.AppContainer import AppContainer
from api.dependencies import get_container
from api.schemas.index import IndexRequest, IndexResponse
from errors.HydeErrors import CodeHydeError
from utility.logging_utils import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/index", tags=["index"])


@router.post("", response_model=IndexResponse)
async def post_index(
    req: IndexRequest,
    container: AppContainer = Depends(get_container),
) -> IndexResponse:
    start = time.perf_counter()
    try:
        index = await container.rebuild_index(root=req.root, extensions=req.extensions)
    except (FileNotFoundError, NotADirectoryError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CodeHydeError as e:
        logger.error("Index build failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Index build failed: {e}")

    return IndexResponse(
        chunks=len(index),
        backend=index.backend,
        duration_ms=(time.perf_counter() - start) * 1000.0,
    )
