# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-09-02
# Description: dependencies.py
# -----------------------------------------------------------------------------
from fastapi import Depends, HTTPException

from api.AppContainer import AppContainer, app_container
from services.HealthService import HealthService
from services.HydeRetriever import HydeRetriever


def get_container() -> AppContainer:
    return app_container


def get_health_service(container: AppContainer = Depends(get_container)) -> HealthService:
    # use the singleton service from the container
    return container.health_service


def get_retriever(container: AppContainer = Depends(get_container)) -> HydeRetriever:
    retriever = container.retriever()
    if retriever is None:
        raise HTTPException(status_code=409, detail="No index has been built yet. POST /index first.")
    return retriever
