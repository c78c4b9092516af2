"""
Multi-model router with task-based routing, fallback and circuit breaking.

FLOW:
=====
1. Classify the prompt (unless the caller supplied a task class)
2. Redact secrets and PII from the prompt
3. Select candidate models for the task class and mode
4. Try candidates in order, at most MAX_FALLBACKS + 1 attempts:
   - success  -> record_success, return content + telemetry
   - failure  -> record_failure, move on to the next candidate
5. If every attempt failed, return DEGRADED_CONTENT with success=False

CONTRACT:
=========
route_request() never raises an Exception to its caller. Backend
exhaustion is a normal return. Only caller cancellation
(asyncio.CancelledError) propagates, and no further attempts are made
after it.
"""

import functools
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from configs import RouterSettings

from .circuit_breaker import CircuitBreakerStore
from .classifier import classify_task
from .llm_client import call_model
from .redaction import redact_secrets
from .registry import FREE_MODELS, ROUTER_MODES, FreeModel
from .selector import select_models
from .telemetry import ModelHealth, RouterResult, RouterTelemetry, build_model_health


logger = logging.getLogger("modelroute.router")

MAX_FALLBACKS = 2

DEGRADED_CONTENT = "I'm temporarily unable to process this request. Please try again in a moment."

Invoker = Callable[[str, str], Awaitable[str]]


class ModelRouter:
    """
    Routes prompts across the free model registry.

    All collaborators are injected so tests (and tenants) get isolated
    circuit state and can swap the network call for a fake.
    """

    def __init__(
        self,
        registry: Sequence[FreeModel] = FREE_MODELS,
        breaker: Optional[CircuitBreakerStore] = None,
        invoker: Optional[Invoker] = None,
        settings: Optional[RouterSettings] = None,
    ):
        self.registry = tuple(registry)
        self.breaker = breaker if breaker is not None else CircuitBreakerStore()
        self.settings = settings or RouterSettings.from_env()
        self.invoker = invoker or functools.partial(call_model, settings=self.settings)

        self.stats = {
            "total_requests": 0,
            "successes": 0,
            "fallbacks": 0,
            "degraded": 0,
        }

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    async def route_request(
        self,
        prompt: str,
        mode: str = "fast",
        task_class: Optional[str] = None,
    ) -> RouterResult:
        """
        Serve one prompt from the best available model.

        Args:
            prompt: Raw user prompt (redacted here before transmission)
            mode: "fast" (at most 3 candidates) or "best" (all candidates)
            task_class: Skip classification when the caller already knows

        Returns:
            RouterResult; telemetry.success is False when all attempts failed
        """
        if mode not in ROUTER_MODES:
            logger.warning("Unknown router mode %r, using fast", mode)
            mode = "fast"

        self.stats["total_requests"] += 1
        task_class = task_class or classify_task(prompt)
        safe_prompt = redact_secrets(prompt)
        candidates = select_models(task_class, mode, self.breaker, self.registry)
        fallback_chain: List[str] = []

        logger.debug("Routing %s request (%s mode) over %d candidates", task_class, mode, len(candidates))

        for model_id in candidates:
            if len(fallback_chain) > MAX_FALLBACKS:
                break
            if model_id in fallback_chain:
                continue
            fallback_chain.append(model_id)

            start = time.perf_counter()
            try:
                content = await self.invoker(model_id, safe_prompt)
            except Exception as e:
                self.breaker.record_failure(model_id)
                logger.warning("✗ %s failed: %s", model_id, e)
                continue

            latency_ms = int((time.perf_counter() - start) * 1000)
            self.breaker.record_success(model_id)
            telemetry = RouterTelemetry(
                model_used=model_id,
                latency_ms=latency_ms,
                success=True,
                fallback_chain=fallback_chain,
                task_class=task_class,
            )

            self.stats["successes"] += 1
            if telemetry.fallback_occurred:
                self.stats["fallbacks"] += 1

            logger.info("✓ %s served %s request in %dms (chain: %s)",
                        model_id, task_class, latency_ms, " → ".join(fallback_chain))

            return RouterResult(content=content, telemetry=telemetry)

        self.stats["degraded"] += 1
        logger.error("✗ All candidates failed for %s request (tried: %s)",
                     task_class, ", ".join(fallback_chain) or "none available")

        return RouterResult(
            content=DEGRADED_CONTENT,
            telemetry=RouterTelemetry(
                model_used="none",
                latency_ms=0,
                success=False,
                fallback_chain=fallback_chain,
                task_class=task_class,
            ),
        )

    def get_model_health(self) -> List[ModelHealth]:
        """Circuit status for every registered model."""
        return build_model_health(self.registry, self.breaker)

    def get_stats(self) -> Dict[str, Any]:
        return {
            **self.stats,
            "open_circuits": [h.id for h in self.get_model_health() if h.circuit_open],
        }
