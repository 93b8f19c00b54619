"""
Utility modules for the education agent orchestrator.
"""

from .logging import setup_logging, get_logger, AgentLogger
from .config_manager import ConfigManager, apply_agent_overrides, validate_agent_config
from .error_handling import (
    EduOrchestratorError,
    ConfigurationError,
    ValidationError,
    AgentNotFoundError,
    RateLimitExceededError,
    ProviderError,
    FallbackExhaustedError,
    handle_error,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "AgentLogger",
    "ConfigManager",
    "apply_agent_overrides",
    "validate_agent_config",
    "EduOrchestratorError",
    "ConfigurationError",
    "ValidationError",
    "AgentNotFoundError",
    "RateLimitExceededError",
    "ProviderError",
    "FallbackExhaustedError",
    "handle_error",
]
