"""
Assistant provider adapters and fallback composition.

ARCHITECTURE:
=============
- ProviderAdapter: capability interface (id, enabled, generate)
- RouterProvider: multi-model router behind the adapter interface
- MockLocalProvider: static templates, always enabled
- FallbackProviderChain: try primary, fall back on failure or when disabled

Chains nest, so the router's per-model fallback sits inside a second,
per-backend-family fallback layer.

USAGE:
======
    provider = get_assistant_provider(ModelRouter())
    result = await provider.generate(AssistantTask(type="summarize_table", prompt="..."))
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Protocol, runtime_checkable

from backend.llm_router import ModelRouter, RouterError, RouterTelemetry
from configs import get_provider_mode


logger = logging.getLogger("modelroute.provider")

AssistantTaskType = Literal["summarize_table", "automation_draft", "kpi_layout"]


# ============================================================
# DATA MODELS
# ============================================================

@dataclass
class AssistantTask:
    """A unit of assistant work requested by the surrounding application."""
    type: AssistantTaskType
    prompt: str
    context: Optional[Dict[str, Any]] = None


@dataclass
class AssistantResult:
    """Standardized adapter response."""
    provider: str
    content: str
    router_telemetry: Optional[RouterTelemetry] = None


class ProviderDisabledError(RouterError):
    """Raised when a disabled adapter is asked to generate."""
    pass


@runtime_checkable
class ProviderAdapter(Protocol):
    """Anything with an id, a dynamic enabled flag and async generate()."""

    @property
    def id(self) -> str: ...

    @property
    def enabled(self) -> bool: ...

    async def generate(self, task: AssistantTask) -> AssistantResult: ...


# ============================================================
# ADAPTERS
# ============================================================

class RouterProvider:
    """
    Multi-model router as an assistant provider.

    Enabled while the router credential is configured. Degraded router
    responses are returned as-is (success=False in the telemetry), not
    raised.
    """

    id = "free-cloud-router"

    def __init__(self, router: ModelRouter, mode: str = "fast"):
        self.router = router
        self.mode = mode

    @property
    def enabled(self) -> bool:
        return self.router.enabled

    async def generate(self, task: AssistantTask) -> AssistantResult:
        if not self.enabled:
            raise ProviderDisabledError(
                "Router provider is disabled. Set OPENROUTER_API_KEY to enable."
            )

        result = await self.router.route_request(build_prompt(task), mode=self.mode)
        return AssistantResult(
            provider=self.id,
            content=result.content,
            router_telemetry=result.telemetry,
        )


class MockLocalProvider:
    """Static templated responses; the last line of defence in a chain."""

    id = "mock-local"
    enabled = True

    async def generate(self, task: AssistantTask) -> AssistantResult:
        if task.type == "automation_draft":
            content = json.dumps(
                {
                    "trigger": {"type": "record.updated", "table": "Incidents"},
                    "actions": [
                        {
                            "type": "create_notification",
                            "title": "Incident updated",
                            "body": "Review changes and assign owner.",
                        },
                        {"type": "write_audit_log", "action": "automation.generated"},
                    ],
                    "notes": task.prompt,
                },
                indent=2,
            )
        elif task.type == "kpi_layout":
            content = (
                "Layout suggestion: top row (Revenue, Active Incidents, SLA), "
                "middle row (trend line + owner load), bottom row "
                "(automation health + latest audit events)."
            )
        else:
            content = (
                "Summary: prioritize high-severity records, monitor unresolved items "
                "older than 24h, and trigger owner reminders for stale tickets."
            )
        return AssistantResult(provider=self.id, content=content)


# ============================================================
# COMPOSITION
# ============================================================

@dataclass
class FallbackProviderChain:
    """
    Two-adapter composition.

    enabled is true if either side is enabled. generate() uses the
    primary when it is enabled and falls back on any exception; when the
    primary is disabled the fallback is used directly. If the fallback
    raises too, the error reaches the caller.
    """
    primary: ProviderAdapter
    fallback: ProviderAdapter
    id: str = field(default="")

    def __post_init__(self):
        if not self.id:
            self.id = f"{self.primary.id}>{self.fallback.id}"

    @property
    def enabled(self) -> bool:
        return self.primary.enabled or self.fallback.enabled

    async def generate(self, task: AssistantTask) -> AssistantResult:
        if self.primary.enabled:
            try:
                return await self.primary.generate(task)
            except Exception as e:
                logger.warning("⚠️ Provider %s failed, falling back to %s: %s",
                               self.primary.id, self.fallback.id, e)
        else:
            logger.debug("Provider %s disabled, using %s", self.primary.id, self.fallback.id)

        return await self.fallback.generate(task)


# ============================================================
# HELPERS
# ============================================================

def build_prompt(task: AssistantTask) -> str:
    """Flatten a task into a single user message."""
    if not task.context:
        return task.prompt
    context = json.dumps(task.context, indent=2, default=str)
    return f"{task.prompt}\n\nContext:\n{context}"


def get_assistant_provider(router: ModelRouter) -> ProviderAdapter:
    """
    Provider for the active AI_PROVIDER_MODE.

    "mock" pins the static provider; otherwise the router is tried first
    with the static provider behind it.
    """
    mock = MockLocalProvider()
    if get_provider_mode() == "mock":
        return mock
    return FallbackProviderChain(primary=RouterProvider(router), fallback=mock)
