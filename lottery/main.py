# lottery/main.py
"""
Application entrypoint. Includes routers and mounts.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lottery.api.routers import health, matching, runs
from lottery.config.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Lottery Matching Backend")

# Basic CORS (adjust origins in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routers
app.include_router(health.router, prefix="/api/v1/health", tags=["health"])
app.include_router(matching.router, prefix="/api/v1/matching", tags=["matching"])
app.include_router(runs.router, prefix="/api/v1/runs", tags=["runs"])

logger.info(f"{settings.SERVICE_NAME} ready (env={settings.ENV})")
