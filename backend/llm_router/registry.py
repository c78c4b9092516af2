"""
Free model registry.

Backends are reached through an OpenRouter-compatible gateway.
The registry is loaded once at import time and never mutated.
"""

from dataclasses import dataclass
from typing import FrozenSet, Literal, Optional, Sequence


TaskClass = Literal["coding", "summary", "general"]
RouterMode = Literal["fast", "best"]

TASK_CLASSES = ("coding", "summary", "general")
ROUTER_MODES = ("fast", "best")


@dataclass(frozen=True)
class FreeModel:
    """A backend model and the task classes it handles well."""
    id: str
    strengths: FrozenSet[str]
    # Lower = preferred
    priority: int

    def handles(self, task_class: str) -> bool:
        return task_class in self.strengths


FREE_MODELS: Sequence[FreeModel] = (
    FreeModel(
        id="qwen/qwen3-coder:free",
        strengths=frozenset({"coding", "general"}),
        priority=1,
    ),
    FreeModel(
        id="meta-llama/llama-3.3-70b-instruct:free",
        strengths=frozenset({"general", "summary"}),
        priority=1,
    ),
    FreeModel(
        id="openai/gpt-oss-120b:free",
        strengths=frozenset({"general", "coding", "summary"}),
        priority=2,
    ),
    FreeModel(
        id="arcee-ai/trinity-large-preview:free",
        strengths=frozenset({"summary", "general"}),
        priority=2,
    ),
)


def get_model(model_id: str, registry: Sequence[FreeModel] = FREE_MODELS) -> Optional[FreeModel]:
    for model in registry:
        if model.id == model_id:
            return model
    return None
