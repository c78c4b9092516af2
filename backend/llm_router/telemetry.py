"""
Router telemetry and model health views.

RouterTelemetry is produced once per request and handed back to the
caller. ModelHealth is computed on demand from the circuit store and
holds no state of its own.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence

from .circuit_breaker import CircuitBreakerStore
from .registry import FreeModel


@dataclass
class RouterTelemetry:
    """What happened while serving one request."""
    model_used: str
    latency_ms: int
    success: bool
    fallback_chain: List[str] = field(default_factory=list)
    task_class: str = "general"

    @property
    def fallback_occurred(self) -> bool:
        return len(self.fallback_chain) > 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RouterResult:
    """Content plus telemetry; the router's only return type."""
    content: str
    telemetry: RouterTelemetry


@dataclass(frozen=True)
class ModelHealth:
    """Circuit status of one registered model, for the coordinator view."""
    id: str
    circuit_open: bool
    failures: int
    cooldown_remaining_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_model_health(
    registry: Sequence[FreeModel],
    breaker: CircuitBreakerStore,
) -> List[ModelHealth]:
    """
    Health snapshot for every registered model.

    Models that never failed are reported closed with zero failures
    and zero cooldown.
    """
    health = []
    for model in registry:
        state, now = breaker.snapshot(model.id)
        circuit_open = state is not None and now < state.open_until

        failures = state.failures if state else 0
        cooldown_ms = 0
        if circuit_open:
            cooldown_ms = max(1, int(round((state.open_until - now) * 1000)))

        health.append(ModelHealth(
            id=model.id,
            circuit_open=circuit_open,
            failures=failures,
            cooldown_remaining_ms=cooldown_ms,
        ))
    return health
