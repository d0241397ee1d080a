# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-09-02
# Description: health.py
# -----------------------------------------------------------------------------
from fastapi import APIRouter, Depends, HTTPException, Query

from api.AppContainer import AppContainer
from api.dependencies import get_container, get_health_service
from api.schemas.health import HealthResponse, DeepHealthResponse
from services.HealthService import HealthService
from utility.logging_utils import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(container: AppContainer = Depends(get_container)) -> HealthResponse:
    index = container.index
    return HealthResponse(
        status="ok",
        message="code-hyde API running",
        index_ready=index is not None,
        indexed_chunks=len(index) if index is not None else 0,
    )


@router.get("/deep", response_model=DeepHealthResponse)
async def deep_health_check(
    svc: HealthService = Depends(get_health_service),
    run_chat: bool = Query(True, description="Also run the chat completion smoke test"),
) -> DeepHealthResponse:
    logger.info("GET /health/deep called (run_chat=%s)", run_chat)
    try:
        result = await svc.deep_health(run_chat=run_chat)
    except Exception as e:
        logger.exception("GET /health/deep failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Deep health check failed: {e}")

    logger.info("GET /health/deep completed: %s", result.status)
    return result
