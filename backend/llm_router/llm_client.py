"""
Single backend call with a hard deadline.

PURPOSE:
========
Send one prompt to one model on the OpenRouter-compatible gateway and
return the generated text, or raise BackendError. Nothing here retries:
fallback across models is the router's job.

WIRE FORMAT:
============
POST {base_url}/chat/completions (via LiteLLM)
    {"model": <id>, "messages": [{"role": "user", "content": <prompt>}],
     "max_tokens": <budget>}
    Authorization: Bearer <OPENROUTER_API_KEY>

The text is read from choices[0].message.content.

CANCELLATION:
=============
The call is awaited under asyncio.wait_for; on deadline the request task
is cancelled and BackendError is raised. If the *caller* is cancelled
(client disconnect), CancelledError propagates untouched.
"""

import asyncio
import logging
from typing import Any, Optional

from litellm import acompletion

from configs import RouterSettings


logger = logging.getLogger("modelroute.llm_client")


# ============================================================
# ERRORS
# ============================================================

class RouterError(Exception):
    """Base exception for router errors."""
    pass


class BackendError(RouterError):
    """A backend call failed: bad status, timeout, or empty content."""

    def __init__(self, model_id: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"Model {model_id} {message}")
        self.model_id = model_id
        self.status_code = status_code


class RateLimitError(BackendError):
    """Raised when the gateway answers 429 for a model."""
    pass


# ============================================================
# BACKEND CALL
# ============================================================

def _extract_content(response: Any) -> Optional[str]:
    try:
        return response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError):
        return None


async def call_model(
    model_id: str,
    prompt: str,
    settings: Optional[RouterSettings] = None,
    timeout: Optional[float] = None,
) -> str:
    """
    Generate a completion from one model.

    Args:
        model_id: Gateway model identifier (e.g. "qwen/qwen3-coder:free")
        prompt: Already-redacted prompt text
        settings: Credentials, base URL and budgets (defaults to env)
        timeout: Deadline in seconds (defaults to settings.timeout_seconds)

    Returns:
        The generated text

    Raises:
        RateLimitError: When the gateway rate-limits this model
        BackendError: Non-success status, timeout, or empty content
    """
    settings = settings or RouterSettings.from_env()
    deadline = timeout if timeout is not None else settings.timeout_seconds

    try:
        response = await asyncio.wait_for(
            acompletion(
                model=f"openrouter/{model_id}",
                messages=[{"role": "user", "content": prompt}],
                max_tokens=settings.max_tokens,
                api_key=settings.api_key or None,
                api_base=settings.base_url,
                extra_headers={
                    "HTTP-Referer": settings.app_url,
                    "X-Title": settings.app_title,
                },
                timeout=deadline,
                max_retries=0,
            ),
            timeout=deadline,
        )
    except asyncio.TimeoutError:
        raise BackendError(model_id, f"timed out after {deadline:g}s")
    except Exception as e:
        status_code = getattr(e, "status_code", None)
        if status_code == 429:
            raise RateLimitError(model_id, f"returned 429: {e}", status_code=429) from e
        if status_code is not None:
            raise BackendError(model_id, f"returned {status_code}: {e}", status_code=status_code) from e
        raise BackendError(model_id, f"request failed: {e}") from e

    content = _extract_content(response)
    if not content:
        raise BackendError(model_id, "returned empty content")

    logger.debug("Model %s returned %d chars", model_id, len(content))
    return content
