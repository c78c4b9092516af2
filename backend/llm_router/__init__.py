"""
LLM Router module.

Handles task classification, prompt redaction, model selection,
fallback chains and per-model circuit breaking across the free
model registry.
"""

from .classifier import classify_task
from .redaction import redact_secrets
from .registry import (
    FREE_MODELS,
    ROUTER_MODES,
    TASK_CLASSES,
    FreeModel,
    RouterMode,
    TaskClass,
    get_model,
)
from .circuit_breaker import (
    CIRCUIT_COOLDOWN_SECONDS,
    CIRCUIT_FAIL_THRESHOLD,
    CIRCUIT_WINDOW_SECONDS,
    CircuitBreakerStore,
    CircuitState,
)
from .selector import FAST_MODE_LIMIT, select_models
from .llm_client import BackendError, RateLimitError, RouterError, call_model
from .telemetry import ModelHealth, RouterResult, RouterTelemetry, build_model_health
from .router import DEGRADED_CONTENT, MAX_FALLBACKS, ModelRouter

__all__ = [
    "classify_task",
    "redact_secrets",
    "FREE_MODELS",
    "ROUTER_MODES",
    "TASK_CLASSES",
    "FreeModel",
    "RouterMode",
    "TaskClass",
    "get_model",
    "CIRCUIT_COOLDOWN_SECONDS",
    "CIRCUIT_FAIL_THRESHOLD",
    "CIRCUIT_WINDOW_SECONDS",
    "CircuitBreakerStore",
    "CircuitState",
    "FAST_MODE_LIMIT",
    "select_models",
    "BackendError",
    "RateLimitError",
    "RouterError",
    "call_model",
    "ModelHealth",
    "RouterResult",
    "RouterTelemetry",
    "build_model_health",
    "DEGRADED_CONTENT",
    "MAX_FALLBACKS",
    "ModelRouter",
]
