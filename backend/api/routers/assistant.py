"""
Assistant router — prompt routing and assistant generation.

Endpoints:
- POST /ai/route            — Route a raw prompt across the model registry
- POST /assistant/generate  — Run an assistant task through the provider chain
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, status

from backend.assistant import AssistantTask
from backend.llm_router import RouterTelemetry

from ..schemas import (
    AssistantResultResponse,
    AssistantTaskRequest,
    RouteRequest,
    RouteResponse,
    RouterTelemetryAPI,
)
from ..deps import get_model_router, get_provider, logger


router = APIRouter(tags=["Assistant"])


# =============================================================================
# HELPERS
# =============================================================================

def _convert_telemetry(telemetry: Optional[RouterTelemetry]) -> Optional[RouterTelemetryAPI]:
    """Convert router telemetry to the API model."""
    if telemetry is None:
        return None
    return RouterTelemetryAPI(**telemetry.to_dict())


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/ai/route", response_model=RouteResponse)
async def route_prompt(request: RouteRequest):
    """
    Route a prompt to the best available free model.

    Always answers 200: when every candidate fails the content is the
    degraded message and telemetry.success is false.
    """
    result = await get_model_router().route_request(
        request.prompt,
        mode=request.mode.value,
        task_class=request.task_class.value if request.task_class else None,
    )
    return RouteResponse(
        content=result.content,
        telemetry=_convert_telemetry(result.telemetry),
    )


@router.post("/assistant/generate", response_model=AssistantResultResponse)
async def generate(request: AssistantTaskRequest):
    """
    Run an assistant task through the provider chain.

    Returns 503 only when every adapter in the chain is disabled or fails.
    """
    task = AssistantTask(
        type=request.type.value,
        prompt=request.prompt,
        context=request.context,
    )

    try:
        result = await get_provider().generate(task)
    except Exception:
        # Log the full error internally, return sanitized message to client
        logger.exception("Assistant generation failed for task type %s", task.type)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No assistant provider is available. Please try again later.",
        )

    return AssistantResultResponse(
        provider=result.provider,
        content=result.content,
        router_telemetry=_convert_telemetry(result.router_telemetry),
    )
