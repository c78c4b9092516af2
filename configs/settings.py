"""
Configuration management for the ModelRoute LLM router.

This module handles all configuration loading and validation.
It fails fast on invalid configuration to prevent runtime errors
and provide clear error messages.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
# interpolate=False prevents $VAR expansion in values (API keys may contain $)
load_dotenv(interpolate=False)

logger = logging.getLogger("modelroute.config")


# =============================================================================
# CONFIGURATION VALIDATION
# =============================================================================

class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


PLACEHOLDER_VALUES = [
    "your_openrouter_api_key_here",
    "sk-or-v1-XXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXX",
    "",
    None,
]


# Raw values that failed lenient parsing, keyed by env var
INVALID_ENV_VALUES: Dict[str, str] = {}


def _invalid_env(key: str, raw: str, default: Any, message: str, strict: bool) -> Any:
    if strict:
        raise ConfigurationError(message)
    INVALID_ENV_VALUES[key] = raw
    logger.warning("Ignoring invalid %s=%r, using default %s", key, raw, default)
    return default


def _get_int_env(key: str, default: int, strict: bool = True) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return _invalid_env(key, raw, default, f"❌ {key} must be an integer, got: {raw!r}", strict)


def _get_float_env(key: str, default: float, strict: bool = True) -> float:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return _invalid_env(key, raw, default, f"❌ {key} must be a number, got: {raw!r}", strict)


# =============================================================================
# BASE PATHS
# =============================================================================

BASE_DIR = Path(__file__).parent.parent


# =============================================================================
# ROUTER CONFIGURATION
# =============================================================================

DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# Credential enabling the router family
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "").strip()

# Optional gateway override (any chat-completions compatible endpoint)
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL).strip().rstrip("/")

# Which outer provider family is active: "router" (default) or "mock"
AI_PROVIDER_MODE = os.getenv("AI_PROVIDER_MODE", "router").lower()
SUPPORTED_PROVIDER_MODES = ["router", "mock"]

# Sent as HTTP-Referer / X-Title so the gateway can attribute traffic
APP_URL = os.getenv("APP_URL", "https://localhost")
APP_TITLE = os.getenv("APP_TITLE", "ModelRoute")

# Token budget and per-call deadline for every backend call.
# Parsed leniently here; validate_configuration() reports bad values.
ROUTER_MAX_TOKENS = _get_int_env("ROUTER_MAX_TOKENS", 2048, strict=False)
ROUTER_REQUEST_TIMEOUT_SECONDS = _get_float_env("ROUTER_REQUEST_TIMEOUT_SECONDS", 15.0, strict=False)

# =============================================================================
# SYSTEM SETTINGS
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE = os.getenv("VERBOSE", "false").lower() == "true"


# =============================================================================
# SETTINGS SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class RouterSettings:
    """
    Immutable snapshot of everything a backend call needs.

    Built from the environment by default; tests construct it directly
    so they never depend on a developer's .env file.
    """
    api_key: str = ""
    base_url: str = DEFAULT_OPENROUTER_BASE_URL
    max_tokens: int = 2048
    timeout_seconds: float = 15.0
    app_url: str = "https://localhost"
    app_title: str = "ModelRoute"

    @property
    def enabled(self) -> bool:
        return self.api_key not in PLACEHOLDER_VALUES

    @classmethod
    def from_env(cls, strict: bool = True) -> "RouterSettings":
        """
        Snapshot the current environment.

        With strict=False a malformed number falls back to its default
        instead of raising ConfigurationError, so a server in mock mode
        can still start.
        """
        return cls(
            api_key=os.getenv("OPENROUTER_API_KEY", OPENROUTER_API_KEY).strip(),
            base_url=os.getenv("OPENROUTER_BASE_URL", OPENROUTER_BASE_URL).strip().rstrip("/"),
            max_tokens=_get_int_env("ROUTER_MAX_TOKENS", ROUTER_MAX_TOKENS, strict),
            timeout_seconds=_get_float_env(
                "ROUTER_REQUEST_TIMEOUT_SECONDS", ROUTER_REQUEST_TIMEOUT_SECONDS, strict
            ),
            app_url=os.getenv("APP_URL", APP_URL),
            app_title=os.getenv("APP_TITLE", APP_TITLE),
        )


def get_provider_mode() -> str:
    """Current outer provider family, read live so tests can flip it."""
    return os.getenv("AI_PROVIDER_MODE", AI_PROVIDER_MODE).lower()


def validate_configuration(skip_api_check: bool = False) -> dict:
    """
    Validate all configuration and return validated config dict.

    Args:
        skip_api_check: If True, skip API key validation (mock mode, CI)

    Returns:
        Dictionary with validated configuration values

    Raises:
        ConfigurationError: If any configuration is missing or invalid
    """
    errors = []
    config = {}

    config['provider_mode'] = get_provider_mode()
    if config['provider_mode'] not in SUPPORTED_PROVIDER_MODES:
        errors.append(
            f"AI_PROVIDER_MODE must be one of {SUPPORTED_PROVIDER_MODES}, "
            f"got: {config['provider_mode']}"
        )

    try:
        settings = RouterSettings.from_env()
    except ConfigurationError as e:
        errors.append(str(e))
        settings = None

    if settings is not None:
        config['base_url'] = settings.base_url
        config['max_tokens'] = settings.max_tokens
        config['timeout_seconds'] = settings.timeout_seconds

        if not settings.base_url.startswith(("http://", "https://")):
            errors.append(f"❌ OPENROUTER_BASE_URL must be an http(s) URL, got: {settings.base_url}")
        if settings.max_tokens <= 0:
            errors.append("❌ ROUTER_MAX_TOKENS must be positive")
        if settings.timeout_seconds <= 0:
            errors.append("❌ ROUTER_REQUEST_TIMEOUT_SECONDS must be positive")

        if not skip_api_check and config['provider_mode'] == "router" and not settings.enabled:
            errors.append(
                "❌ OPENROUTER_API_KEY is not configured!\n"
                "   1. Get a free API key at: https://openrouter.ai/keys\n"
                "   2. Add it to your .env file: OPENROUTER_API_KEY=sk-or-v1-your_actual_key\n"
                "   Or set AI_PROVIDER_MODE=mock to run without a backend."
            )

    if errors:
        error_msg = "\n\nConfiguration Errors:\n" + "\n".join(f"  • {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return config


# =============================================================================
# PROVIDER KEY DETECTION
# =============================================================================

# Key values never leave this module; only presence is reported.
PROVIDER_KEYS = [
    {
        "id": "openrouter",
        "name": "OpenRouter",
        "env_var": "OPENROUTER_API_KEY",
        "description": "Required for multi-model AI routing (free models via OpenRouter).",
    },
]


def detect_provider_keys() -> List[Dict[str, Any]]:
    """Report which provider credentials are configured."""
    return [
        {**provider, "is_configured": os.getenv(provider["env_var"], "").strip() not in PLACEHOLDER_VALUES}
        for provider in PROVIDER_KEYS
    ]


def is_any_ai_configured() -> bool:
    return any(p["is_configured"] for p in detect_provider_keys())


def get_ai_setup_summary() -> Dict[str, Any]:
    """Safe summary for admin display. Never includes key values."""
    providers = detect_provider_keys()
    configured = [p for p in providers if p["is_configured"]]
    missing = [p for p in providers if not p["is_configured"]]

    if not configured:
        message = "AI not configured. Set OPENROUTER_API_KEY to enable model routing."
    elif missing:
        message = f"AI partially configured ({len(configured)}/{len(providers)} providers)."
    else:
        message = "AI fully configured."

    return {
        "is_ready": bool(configured),
        "configured_count": len(configured),
        "total_count": len(providers),
        "providers": providers,
        "message": message,
    }


def find_provider(provider_id: str) -> Optional[Dict[str, Any]]:
    """Entry from PROVIDER_KEYS, or None for an unknown id."""
    for provider in PROVIDER_KEYS:
        if provider["id"] == provider_id:
            return provider
    return None


def get_provider_models_url(provider_id: str) -> Optional[str]:
    """Model listing endpoint used to check a provider credential."""
    if provider_id == "openrouter":
        base_url = os.getenv("OPENROUTER_BASE_URL", OPENROUTER_BASE_URL).strip().rstrip("/")
        return f"{base_url}/models"
    return None
