"""
ModelRoute Backend Package

This package contains the multi-model LLM router:
- llm_router: classification, redaction, selection, circuit breaking, fallback
- assistant: provider adapters and the fallback provider chain
- api: FastAPI application exposing routing and model health
"""

from backend.llm_router import (
    ModelRouter,
    RouterResult,
    RouterTelemetry,
    ModelHealth,
    CircuitBreakerStore,
)
from backend.assistant import (
    AssistantTask,
    AssistantResult,
    FallbackProviderChain,
)

__all__ = [
    "ModelRouter",
    "RouterResult",
    "RouterTelemetry",
    "ModelHealth",
    "CircuitBreakerStore",
    "AssistantTask",
    "AssistantResult",
    "FallbackProviderChain",
]
