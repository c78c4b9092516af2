"""
Shared dependencies for the ModelRoute API.

Provides:
- Structured logging
- Singleton router (one circuit store shared by every request)
- Assistant provider chain built around that router
"""

import logging
from typing import Optional

from backend.assistant import ProviderAdapter, get_assistant_provider
from backend.llm_router import CircuitBreakerStore, ModelRouter
from configs import LOG_LEVEL, RouterSettings


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

def setup_logging() -> logging.Logger:
    """Configure structured logging for the API."""
    logger = logging.getLogger("modelroute")

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    return logger


logger = setup_logging()


# =============================================================================
# SINGLETON ROUTER
# =============================================================================

_router: Optional[ModelRouter] = None


def get_model_router() -> ModelRouter:
    """
    Get or create the singleton router.

    Circuit state only protects anything if every request sees the same
    store, so the router is created once per process.
    """
    global _router
    if _router is None:
        settings = RouterSettings.from_env(strict=False)
        logger.info("Creating singleton ModelRouter (gateway: %s, enabled: %s)",
                    settings.base_url, settings.enabled)
        _router = ModelRouter(breaker=CircuitBreakerStore(), settings=settings)
    return _router


def get_provider() -> ProviderAdapter:
    """Provider chain for the current AI_PROVIDER_MODE."""
    return get_assistant_provider(get_model_router())


def reset_router() -> None:
    """Drop the router and its circuit state (useful for testing)."""
    global _router
    _router = None
