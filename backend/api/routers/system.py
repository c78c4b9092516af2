"""
System router — health and coordinator endpoints.

Endpoints:
- GET /health    — API health check (always available)
- GET /ai/health — Per-model circuit status for the coordinator view
- GET /ai/setup  — Which provider credentials are configured
- POST /ai/test-connection — Check a provider credential against its API
"""

import os

import httpx
from fastapi import APIRouter, HTTPException, status

from configs import (
    PLACEHOLDER_VALUES,
    find_provider,
    get_ai_setup_summary,
    get_provider_mode,
    get_provider_models_url,
)

from ..schemas import (
    ConnectionTestRequest,
    ConnectionTestResponse,
    HealthResponse,
    ModelHealthAPI,
    ModelHealthResponse,
    SetupSummaryResponse,
)
from ..deps import get_model_router, logger


router = APIRouter(tags=["System"])

API_VERSION = "1.0.0"

CONNECTION_TEST_TIMEOUT_SECONDS = 10.0


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Check API health and router configuration."""
    model_router = get_model_router()
    open_circuits = [h.id for h in model_router.get_model_health() if h.circuit_open]

    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        provider_mode=get_provider_mode(),
        router_enabled=model_router.enabled,
        open_circuits=open_circuits,
    )


@router.get("/ai/health", response_model=ModelHealthResponse)
async def model_health():
    """
    Circuit status for every registered model.

    Computed fresh from the shared circuit store on every call.
    """
    health = get_model_router().get_model_health()
    logger.debug("Model health requested: %d models", len(health))
    return ModelHealthResponse(
        ok=True,
        models=[ModelHealthAPI(**h.to_dict()) for h in health],
    )


@router.get("/ai/setup", response_model=SetupSummaryResponse)
async def ai_setup():
    """Provider setup summary. Never includes key values."""
    return SetupSummaryResponse(**get_ai_setup_summary())


@router.post("/ai/test-connection", response_model=ConnectionTestResponse)
async def check_connection(request: ConnectionTestRequest):
    """
    Check a provider credential by listing the provider's models.

    400 for a missing or unknown provider. Everything else answers 200
    with success=false and a reason; the key value is never echoed.
    """
    if not request.provider_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="provider_id required")

    provider = find_provider(request.provider_id)
    url = get_provider_models_url(request.provider_id)
    if provider is None or url is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown provider: {request.provider_id}",
        )

    env_var = provider["env_var"]
    key = os.getenv(env_var, "").strip()
    if key in PLACEHOLDER_VALUES:
        return ConnectionTestResponse(
            success=False,
            error=f"{env_var} not set. Add it to your environment variables.",
        )

    try:
        async with httpx.AsyncClient(timeout=CONNECTION_TEST_TIMEOUT_SECONDS) as client:
            response = await client.get(url, headers={"Authorization": f"Bearer {key}"})
    except httpx.HTTPError as e:
        logger.warning("Connection test for %s failed: %s", provider["id"], type(e).__name__)
        return ConnectionTestResponse(success=False, error=str(e) or "Connection failed")

    if response.is_success:
        return ConnectionTestResponse(
            success=True,
            message=f"{provider['id']} connection successful.",
            status_code=response.status_code,
        )

    return ConnectionTestResponse(
        success=False,
        error=f"{provider['id']} returned HTTP {response.status_code}.",
        status_code=response.status_code,
    )
