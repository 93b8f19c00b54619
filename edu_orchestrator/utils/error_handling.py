"""
Error handling utilities and custom exceptions for the education agent orchestrator.
"""

from typing import Optional, Dict, Any, List


class EduOrchestratorError(Exception):
    """Base exception for all orchestrator errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}


class ConfigurationError(EduOrchestratorError):
    """Raised when there are configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="CONFIG_ERROR", **kwargs)
        self.config_key = config_key


class ValidationError(EduOrchestratorError):
    """Raised when an incoming request is malformed."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="VALIDATION_ERROR", **kwargs)
        self.field = field


class AgentNotFoundError(EduOrchestratorError):
    """Raised when no agent is registered for an agent type."""

    def __init__(self, message: str, agent_type: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="AGENT_NOT_FOUND", **kwargs)
        self.agent_type = agent_type


class RateLimitExceededError(EduOrchestratorError):
    """Raised when an agent's request ceiling has been reached."""

    def __init__(self, message: str, agent_type: Optional[str] = None,
                 limits: Optional[Dict[str, int]] = None, **kwargs):
        super().__init__(message, error_code="RATE_LIMIT_EXCEEDED", **kwargs)
        self.agent_type = agent_type
        self.limits = limits or {}


class ProviderError(EduOrchestratorError):
    """Raised when an LLM provider call fails."""

    def __init__(self, message: str, provider: Optional[str] = None, model: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="PROVIDER_ERROR", **kwargs)
        self.provider = provider
        self.model = model


class FallbackExhaustedError(EduOrchestratorError):
    """Raised internally when neither the primary nor the fallback provider answered."""

    def __init__(self, message: str, attempted_providers: Optional[List[str]] = None, **kwargs):
        super().__init__(message, error_code="FALLBACK_EXHAUSTED", **kwargs)
        self.attempted_providers = attempted_providers or []


def handle_error(error: Exception, logger=None, context: Optional[Dict[str, Any]] = None) -> EduOrchestratorError:
    """
    Convert generic exceptions to EduOrchestratorError instances.

    Args:
        error: The original exception
        logger: Optional AgentLogger for error reporting
        context: Additional context information

    Returns:
        EduOrchestratorError instance
    """
    if isinstance(error, EduOrchestratorError):
        orchestrator_error = error
    elif isinstance(error, ValueError):
        orchestrator_error = ValidationError(str(error), context=context)
    elif isinstance(error, (ConnectionError, TimeoutError)):
        orchestrator_error = ProviderError(f"Provider unreachable: {str(error)}", context=context)
    else:
        orchestrator_error = EduOrchestratorError(str(error), context=context)

    if logger:
        logger.log_error(orchestrator_error, context)

    return orchestrator_error
