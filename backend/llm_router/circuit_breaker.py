"""
Per-model circuit breaker.

PURPOSE:
========
Stop hammering a misbehaving backend. After CIRCUIT_FAIL_THRESHOLD
failures inside a rolling CIRCUIT_WINDOW_SECONDS window the model is
locked out for CIRCUIT_COOLDOWN_SECONDS, then becomes fully eligible
again on its own.

STATES:
=======
- CLOSED: no entry, or the lockout has elapsed
- OPEN:   open_until is in the future

There is no half-open probe: once the cooldown elapses the entry is
deleted and the model receives normal traffic.

CONCURRENCY:
============
One store is shared by every in-flight request. A threading.Lock guards
the mapping so entries are never torn.
"""

import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple


logger = logging.getLogger("modelroute.circuit")

CIRCUIT_FAIL_THRESHOLD = 3
CIRCUIT_WINDOW_SECONDS = 2 * 60
CIRCUIT_COOLDOWN_SECONDS = 10 * 60


@dataclass
class CircuitState:
    """Failure bookkeeping for one model. Timestamps are epoch seconds."""
    failures: int = 0
    last_failure_at: float = 0.0
    open_until: float = 0.0


class CircuitBreakerStore:
    """
    Process-local circuit state keyed by model id.

    Owned by the router that uses it; create one per tenant if tenants
    must not share backend health.
    """

    def __init__(
        self,
        fail_threshold: int = CIRCUIT_FAIL_THRESHOLD,
        window_seconds: float = CIRCUIT_WINDOW_SECONDS,
        cooldown_seconds: float = CIRCUIT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.fail_threshold = fail_threshold
        self.window_seconds = window_seconds
        self.cooldown_seconds = cooldown_seconds
        self.clock = clock
        self._circuits: Dict[str, CircuitState] = {}
        self._lock = threading.Lock()

    def _current_locked(self, model_id: str, now: float) -> Optional[CircuitState]:
        # Caller holds self._lock
        state = self._circuits.get(model_id)
        if state is not None and 0 < state.open_until <= now:
            del self._circuits[model_id]
            logger.info("Circuit for %s closed after cooldown", model_id)
            return None
        return state

    def is_open(self, model_id: str) -> bool:
        """True while the model is locked out. Expired entries are dropped."""
        with self._lock:
            now = self.clock()
            state = self._current_locked(model_id, now)
            return state is not None and now < state.open_until

    def snapshot(self, model_id: str) -> Tuple[Optional[CircuitState], float]:
        """
        Copy of the state plus the time it was read at, under one lock.

        Expired lockouts are dropped first, so a returned state with
        open_until > 0 is always still open at the returned time.
        """
        with self._lock:
            now = self.clock()
            state = self._current_locked(model_id, now)
            return (replace(state) if state is not None else None), now

    def record_success(self, model_id: str) -> None:
        with self._lock:
            self._circuits.pop(model_id, None)

    def record_failure(self, model_id: str) -> None:
        with self._lock:
            now = self.clock()
            state = self._circuits.get(model_id) or CircuitState()

            # Failures outside the window don't accumulate
            if now - state.last_failure_at > self.window_seconds:
                state.failures = 0

            state.failures += 1
            state.last_failure_at = now

            if state.failures >= self.fail_threshold:
                state.open_until = now + self.cooldown_seconds
                logger.warning(
                    "Circuit OPEN for %s after %d failures (cooldown %ds)",
                    model_id, state.failures, self.cooldown_seconds,
                )

            self._circuits[model_id] = state

    def get_state(self, model_id: str) -> Optional[CircuitState]:
        """Copy of the stored state, or None when the model has none."""
        with self._lock:
            state = self._circuits.get(model_id)
            return replace(state) if state is not None else None

    def reset(self) -> None:
        with self._lock:
            self._circuits.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._circuits)
