"""
Configuration models for the education agent orchestrator.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import logging

from .enums import AIProvider


@dataclass(frozen=True)
class RateLimitConfig:
    """Per-agent request ceilings."""
    requests_per_minute: int
    requests_per_hour: int


@dataclass(frozen=True)
class AgentConfig:
    """Provider binding and generation settings for one agent."""
    provider: AIProvider
    model: str
    temperature: float = 0.7
    max_tokens: int = 1000
    system_prompt: str = ""
    fallback_provider: Optional[AIProvider] = None
    fallback_model: Optional[str] = None
    rate_limiting: Optional[RateLimitConfig] = None


@dataclass
class PricingRate:
    """USD per 1000 tokens."""
    input_per_1k: float
    output_per_1k: float

    def cost(self, input_tokens: int, output_tokens: int) -> float:
        return (input_tokens / 1000) * self.input_per_1k + (output_tokens / 1000) * self.output_per_1k


@dataclass
class ProviderSettings:
    """Client settings for one LLM provider."""
    api_key_env: str
    default_model: str
    health_model: str = ""
    api_key: str = ""
    timeout_seconds: float = 60.0
    max_retries: int = 3

    def resolve_api_key(self) -> str:
        return self.api_key or os.environ.get(self.api_key_env, "")


def default_provider_settings() -> Dict[str, ProviderSettings]:
    return {
        AIProvider.OPENAI.value: ProviderSettings(
            api_key_env="OPENAI_API_KEY",
            default_model="gpt-4",
            health_model="gpt-3.5-turbo",
        ),
        AIProvider.GEMINI.value: ProviderSettings(
            api_key_env="GEMINI_API_KEY",
            default_model="gemini-pro",
            health_model="gemini-pro",
        ),
        AIProvider.ANTHROPIC.value: ProviderSettings(
            api_key_env="ANTHROPIC_API_KEY",
            default_model="claude-3-sonnet-20240229",
            health_model="claude-3-haiku-20240307",
        ),
    }


def default_pricing() -> Dict[str, PricingRate]:
    return {
        # GPT-4 averaged over a 50/50 input/output split
        AIProvider.OPENAI.value: PricingRate(input_per_1k=0.045, output_per_1k=0.045),
        AIProvider.ANTHROPIC.value: PricingRate(input_per_1k=0.003, output_per_1k=0.015),
        AIProvider.GEMINI.value: PricingRate(input_per_1k=0.0005, output_per_1k=0.0005),
    }


@dataclass
class LoggingConfig:
    """Configuration for system logging."""
    level: int = logging.INFO
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = "edu_orchestrator.log"
    max_file_size_mb: int = 100
    backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = True


@dataclass
class SystemConfig:
    """Main system configuration."""
    providers: Dict[str, ProviderSettings] = field(default_factory=default_provider_settings)
    pricing: Dict[str, PricingRate] = field(default_factory=default_pricing)
    agents: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    logging_config: LoggingConfig = field(default_factory=LoggingConfig)
    debug_mode: bool = False
    enable_fallback: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)

    def provider_settings(self, provider: AIProvider) -> ProviderSettings:
        settings = self.providers.get(provider.value)
        if settings is None:
            settings = default_provider_settings()[provider.value]
        return settings

    def pricing_for(self, provider: AIProvider) -> PricingRate:
        rate = self.pricing.get(provider.value)
        if rate is None:
            rate = default_pricing()[provider.value]
        return rate
