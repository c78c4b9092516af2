"""Assistant provider adapters and the fallback provider chain."""

from .provider import (
    AssistantResult,
    AssistantTask,
    FallbackProviderChain,
    MockLocalProvider,
    ProviderAdapter,
    ProviderDisabledError,
    RouterProvider,
    build_prompt,
    get_assistant_provider,
)

__all__ = [
    "AssistantResult",
    "AssistantTask",
    "FallbackProviderChain",
    "MockLocalProvider",
    "ProviderAdapter",
    "ProviderDisabledError",
    "RouterProvider",
    "build_prompt",
    "get_assistant_provider",
]
