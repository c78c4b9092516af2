"""Secret and PII redaction for outbound prompts."""

import re
from typing import List, Pattern, Tuple


# Order matters: each pattern runs on the output of the previous one.
# Key-like tokens go first so the generic long-secret rule never sees them.
_REDACTION_PATTERNS: List[Tuple[Pattern[str], str]] = [
    # API keys / bearer tokens
    (re.compile(r"\b(?:sk-|pk-|ghp_|gho_|xox[bpsa]-|Bearer\s+)[A-Za-z0-9_\-/.=]{20,}\b"), "[REDACTED_KEY]"),
    # Connection strings
    (re.compile(r"(?:postgres(?:ql)?|mysql|mongodb(?:\+srv)?)://[^\s\"']+", re.IGNORECASE), "[REDACTED_CONN_STRING]"),
    # Email addresses
    (re.compile(r"\b[\w.+-]+@[\w-]+\.[\w.-]+\b"), "[EMAIL]"),
    # Phone numbers (leading + required to avoid eating ids and dates)
    (re.compile(r"\+\d[\d\s\-().]{7,}\d"), "[PHONE]"),
    # Generic long secrets
    (re.compile(r"\b[A-Za-z0-9/+=]{40,}\b"), "[REDACTED_SECRET]"),
]


def redact_secrets(text: str) -> str:
    """Strip credentials and contact details from a prompt before it leaves the process."""
    result = text
    for pattern, replacement in _REDACTION_PATTERNS:
        result = pattern.sub(replacement, result)
    return result
