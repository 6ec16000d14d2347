# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Coach Partner - FastAPI + LangChain coaching thinking-partner service
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from coach_partner.config import settings
from coach_partner.routers import coaching

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Background synthesis still in flight is awaited on shutdown.

    Args:
        app (FastAPI): The FastAPI application instance.

    Yields:
        None: Control is yielded to the application between startup
            and shutdown.
    """
    logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
    logger.info("Starting %s...", settings.APP_NAME)
    yield
    await coaching.conversation_service.drain()
    logger.info("Shutting down %s...", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="Coaching thinking-partner service with FastAPI and LangChain",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(coaching.router, prefix="/api/v1", tags=["coaching"])


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status (str): Current service health status.
        version (str): Application version string.
    """

    status: str
    version: str


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version="0.1.0")


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint.

    Returns:
        dict[str, str]: A welcome message and links to documentation and
            health endpoints.
    """
    return {
        "message": "Coach Partner Service",
        "docs": "/docs",
        "health": "/health",
    }
