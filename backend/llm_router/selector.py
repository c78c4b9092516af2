"""Candidate selection: task class + mode -> ordered model ids."""

from typing import List, Sequence

from .circuit_breaker import CircuitBreakerStore
from .registry import FREE_MODELS, FreeModel


FAST_MODE_LIMIT = 3


def select_models(
    task_class: str,
    mode: str,
    breaker: CircuitBreakerStore,
    registry: Sequence[FreeModel] = FREE_MODELS,
) -> List[str]:
    """
    Return ids of models suited to task_class whose circuit is closed.

    Sorted by ascending priority (stable, so registry order breaks ties).
    "best" keeps everything; any other mode is treated as "fast" and
    keeps the first FAST_MODE_LIMIT.
    """
    candidates = [
        model for model in registry
        if model.handles(task_class) and not breaker.is_open(model.id)
    ]
    candidates = sorted(candidates, key=lambda m: m.priority)

    if mode != "best":
        candidates = candidates[:FAST_MODE_LIMIT]

    return [model.id for model in candidates]
