"""
Conftest for ModelRoute tests.

Ensures the project root is on sys.path so that 'backend' and 'configs'
resolve correctly, and provides a controllable clock and an isolated
circuit store per test.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from backend.llm_router import CircuitBreakerStore, FreeModel
from configs import RouterSettings


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return CircuitBreakerStore(clock=clock)


@pytest.fixture
def settings():
    return RouterSettings(api_key="sk-or-v1-test", base_url="https://gateway.test/api/v1")


@pytest.fixture
def ab_registry():
    """A (priority 1, coding) and B (priority 2, coding + general)."""
    return (
        FreeModel(id="A", strengths=frozenset({"coding"}), priority=1),
        FreeModel(id="B", strengths=frozenset({"coding", "general"}), priority=2),
    )
