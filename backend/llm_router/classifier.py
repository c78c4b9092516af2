"""
Task classifier.

Maps a raw prompt to the task class used to pick suitable backends.
Pure keyword matching: no LLM call, no side effects.
"""

import re

from .registry import TaskClass


CODE_SIGNALS = re.compile(
    r"\b(code|function|bug|error|regex|sql|script|api|endpoint|debug|refactor"
    r"|json|schema|prisma|typescript|javascript|python|css|html)\b",
    re.IGNORECASE,
)

SUMMARY_SIGNALS = re.compile(
    r"\b(summarize|summary|overview|recap|digest|report|brief|tldr|highlights|key points)\b",
    re.IGNORECASE,
)


def classify_task(prompt: str) -> TaskClass:
    """
    Classify a prompt as coding, summary or general.

    Coding signals are checked first, so a prompt matching both sets
    ("summarize this SQL error") is coding.
    """
    if CODE_SIGNALS.search(prompt):
        return "coding"
    if SUMMARY_SIGNALS.search(prompt):
        return "summary"
    return "general"
