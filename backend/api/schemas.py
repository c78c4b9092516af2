"""
Pydantic schemas for the ModelRoute API.

These models define the request/response structure for all API endpoints.
"""

from typing import Any, Dict, List, Optional
from enum import Enum

from pydantic import AliasChoices, BaseModel, Field


# ============================================================
# ENUMS
# ============================================================

class TaskClassAPI(str, Enum):
    """Task class used to pick suitable models."""
    CODING = "coding"
    SUMMARY = "summary"
    GENERAL = "general"


class RouterModeAPI(str, Enum):
    """fast = at most 3 candidates, best = every suitable candidate."""
    FAST = "fast"
    BEST = "best"


class AssistantTaskTypeAPI(str, Enum):
    """Assistant features that can request generation."""
    SUMMARIZE_TABLE = "summarize_table"
    AUTOMATION_DRAFT = "automation_draft"
    KPI_LAYOUT = "kpi_layout"


# ============================================================
# REQUEST MODELS
# ============================================================

class RouteRequest(BaseModel):
    """Request body for POST /ai/route."""
    prompt: str = Field(..., description="Prompt to route", min_length=1, max_length=8000)
    mode: RouterModeAPI = Field(default=RouterModeAPI.FAST, description="Candidate breadth")
    task_class: Optional[TaskClassAPI] = Field(
        default=None,
        description="Skip classification and route as this task class"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"prompt": "Fix this SQL bug"},
                {"prompt": "Summarize the daily report", "mode": "best"},
            ]
        }
    }


class AssistantTaskRequest(BaseModel):
    """Request body for POST /assistant/generate."""
    type: AssistantTaskTypeAPI = Field(..., description="Assistant feature")
    prompt: str = Field(..., description="Task prompt", min_length=1, max_length=8000)
    context: Optional[Dict[str, Any]] = Field(None, description="Extra structured context")


class ConnectionTestRequest(BaseModel):
    """Request body for POST /ai/test-connection."""
    provider_id: Optional[str] = Field(
        default=None,
        description="Provider to check, e.g. openrouter",
        validation_alias=AliasChoices("provider_id", "providerId"),
    )


# ============================================================
# RESPONSE MODELS
# ============================================================

class RouterTelemetryAPI(BaseModel):
    """Per-request routing telemetry."""
    model_used: str
    latency_ms: int
    success: bool
    fallback_chain: List[str] = Field(default_factory=list)
    task_class: TaskClassAPI

    model_config = {"protected_namespaces": ()}


class RouteResponse(BaseModel):
    """Response from POST /ai/route."""
    content: str
    telemetry: RouterTelemetryAPI


class AssistantResultResponse(BaseModel):
    """Response from POST /assistant/generate."""
    provider: str
    content: str
    router_telemetry: Optional[RouterTelemetryAPI] = None


class ModelHealthAPI(BaseModel):
    """Circuit status of one registered model."""
    id: str
    circuit_open: bool
    failures: int
    cooldown_remaining_ms: int


class ModelHealthResponse(BaseModel):
    """Response from GET /ai/health."""
    ok: bool = True
    models: List[ModelHealthAPI]


class ProviderStatusAPI(BaseModel):
    """Whether a provider credential is configured (never the value)."""
    id: str
    name: str
    env_var: str
    is_configured: bool
    description: str


class SetupSummaryResponse(BaseModel):
    """Response from GET /ai/setup."""
    is_ready: bool
    configured_count: int
    total_count: int
    providers: List[ProviderStatusAPI]
    message: str


class HealthResponse(BaseModel):
    """Response from GET /health."""
    status: str
    version: str
    provider_mode: str
    router_enabled: bool
    open_circuits: List[str] = Field(default_factory=list)


class ConnectionTestResponse(BaseModel):
    """Response from POST /ai/test-connection."""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    status_code: Optional[int] = None
