# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-09-02
# Description: main.py
# -----------------------------------------------------------------------------
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.AppContainer import app_container
from api.routers import health, index, query
from utility.logging_utils import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Starting code-hyde API: %s", app_container.cfg.summary())
    yield
    await app_container.close()


app = FastAPI(title="code-hyde API", lifespan=lifespan)
app.include_router(health.router)
app.include_router(index.router)
app.include_router(query.router)


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=os.getenv("HYDE_API_HOST", "127.0.0.1"),
        port=int(os.getenv("HYDE_API_PORT", "8000")),
        log_level="info",
        reload=False,
    )
