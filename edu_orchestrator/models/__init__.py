"""
Core data models for the education agent orchestrator.
"""

from .core import (
    AIRequest,
    AIResponse,
    UsageInfo,
    ConversationContext,
    ConversationTurn,
    CompletionResult,
    RateLimitCounter,
)

from .config import (
    SystemConfig,
    AgentConfig,
    RateLimitConfig,
    ProviderSettings,
    PricingRate,
    LoggingConfig,
)

from .enums import (
    AgentType,
    AIProvider,
)

__all__ = [
    # Core models
    "AIRequest",
    "AIResponse",
    "UsageInfo",
    "ConversationContext",
    "ConversationTurn",
    "CompletionResult",
    "RateLimitCounter",
    # Configuration models
    "SystemConfig",
    "AgentConfig",
    "RateLimitConfig",
    "ProviderSettings",
    "PricingRate",
    "LoggingConfig",
    # Enums
    "AgentType",
    "AIProvider",
]
