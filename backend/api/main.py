"""
ModelRoute FastAPI Application.

This module provides the REST API layer for the multi-model router.
All routing logic is delegated to backend.llm_router; no LLM logic here.

Endpoints:
- POST /ai/route - Route a prompt across the free model registry
- POST /assistant/generate - Run an assistant task through the provider chain
- GET /ai/health - Per-model circuit status
- GET /ai/setup - Provider credential summary
- GET /health - Health check
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from configs import ConfigurationError, get_provider_mode, validate_configuration

from .deps import get_model_router, logger
from .routers import assistant, system


# ============================================================
# APP LIFECYCLE
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    try:
        validate_configuration(skip_api_check=get_provider_mode() == "mock")
    except ConfigurationError as e:
        # Mock fallback still serves requests, so warn instead of refusing to start
        logger.warning("Configuration incomplete: %s", e)

    model_router = get_model_router()
    logger.info("ModelRoute API started. Mode: %s, router enabled: %s, models: %d",
                get_provider_mode(), model_router.enabled, len(model_router.registry))
    yield
    # Shutdown
    logger.info("ModelRoute API shutting down.")


# ============================================================
# FASTAPI APP
# ============================================================

app = FastAPI(
    title="ModelRoute API",
    description="Multi-model LLM router with fallback and circuit breaking",
    version=system.API_VERSION,
    lifespan=lifespan
)

# CORS for admin UI - configurable via environment
allowed_origins = os.getenv("ALLOWED_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system.router)
app.include_router(assistant.router)


# ============================================================
# RUN DIRECTLY (for development)
# ============================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
