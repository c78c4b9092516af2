"""Config module initialization."""
from .settings import (
    # Router configuration
    OPENROUTER_API_KEY,
    OPENROUTER_BASE_URL,
    DEFAULT_OPENROUTER_BASE_URL,
    AI_PROVIDER_MODE,
    SUPPORTED_PROVIDER_MODES,
    APP_URL,
    APP_TITLE,
    ROUTER_MAX_TOKENS,
    ROUTER_REQUEST_TIMEOUT_SECONDS,
    RouterSettings,
    get_provider_mode,
    # System settings
    LOG_LEVEL,
    VERBOSE,
    # Provider key detection
    detect_provider_keys,
    is_any_ai_configured,
    get_ai_setup_summary,
    find_provider,
    get_provider_models_url,
    # Validation
    ConfigurationError,
    PLACEHOLDER_VALUES,
    validate_configuration,
)

__all__ = [
    # Router configuration
    "OPENROUTER_API_KEY",
    "OPENROUTER_BASE_URL",
    "DEFAULT_OPENROUTER_BASE_URL",
    "AI_PROVIDER_MODE",
    "SUPPORTED_PROVIDER_MODES",
    "APP_URL",
    "APP_TITLE",
    "ROUTER_MAX_TOKENS",
    "ROUTER_REQUEST_TIMEOUT_SECONDS",
    "RouterSettings",
    "get_provider_mode",
    # System settings
    "LOG_LEVEL",
    "VERBOSE",
    # Provider key detection
    "detect_provider_keys",
    "is_any_ai_configured",
    "get_ai_setup_summary",
    "find_provider",
    "get_provider_models_url",
    # Validation
    "ConfigurationError",
    "PLACEHOLDER_VALUES",
    "validate_configuration",
]
