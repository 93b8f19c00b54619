"""
Configuration management for the education agent orchestrator.
"""

import dataclasses
import json
import os
from pathlib import Path
from typing import Optional, Dict, Any
import logging

from ..models.config import (
    SystemConfig, AgentConfig, RateLimitConfig, ProviderSettings, PricingRate, LoggingConfig,
    default_provider_settings, default_pricing,
)
from ..models.enums import AgentType, AIProvider
from ..variants import VARIANTS
from .error_handling import ConfigurationError

CONFIG_PATH_ENV = "EDU_ORCHESTRATOR_CONFIG"

_AGENT_OVERRIDE_KEYS = {
    "provider", "model", "temperature", "max_tokens", "system_prompt",
    "fallback_provider", "fallback_model", "rate_limiting",
}


def apply_agent_overrides(base: AgentConfig, overrides: Optional[Dict[str, Any]]) -> AgentConfig:
    """
    Build an agent configuration from variant defaults plus overrides.

    A new fallback provider without a ``fallback_model`` drops the inherited
    fallback model, so the fallback call uses that provider's default model.

    Args:
        base: Default configuration declared by the agent variant
        overrides: Partial settings from SystemConfig.agents

    Returns:
        New AgentConfig (the base is left untouched)

    Raises:
        ConfigurationError: If an override key or value is invalid
    """
    if not overrides:
        return base

    unknown = set(overrides) - _AGENT_OVERRIDE_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown agent settings: {sorted(unknown)}", config_key="agents")

    changes: Dict[str, Any] = {}
    try:
        for key, value in overrides.items():
            if key in ("provider", "fallback_provider"):
                changes[key] = AIProvider.parse(value) if value is not None else None
            elif key == "rate_limiting":
                changes[key] = RateLimitConfig(**value) if value is not None else None
            elif key == "temperature":
                changes[key] = float(value)
            elif key == "max_tokens":
                changes[key] = int(value)
            else:
                changes[key] = value
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid agent setting: {str(e)}", config_key="agents")

    # Model names belong to one provider
    if "model" not in overrides and changes.get("provider", base.provider) != base.provider:
        raise ConfigurationError("A provider override must name a model for that provider", config_key="model")
    if "fallback_model" not in overrides and \
            changes.get("fallback_provider", base.fallback_provider) != base.fallback_provider:
        changes["fallback_model"] = None

    config = dataclasses.replace(base, **changes)
    validate_agent_config(config)
    return config


def validate_agent_config(config: AgentConfig) -> None:
    """
    Validate a single agent configuration.

    Raises:
        ConfigurationError: If validation fails
    """
    if not config.model:
        raise ConfigurationError("Agent model must not be empty", config_key="model")

    if not 0 <= config.temperature <= 2:
        raise ConfigurationError("Temperature must be between 0 and 2", config_key="temperature")

    if config.max_tokens <= 0:
        raise ConfigurationError("Max tokens must be positive", config_key="max_tokens")

    if config.fallback_provider is not None and config.fallback_provider == config.provider:
        raise ConfigurationError("Fallback provider must differ from the primary provider",
                                 config_key="fallback_provider")

    limits = config.rate_limiting
    if limits is not None and (limits.requests_per_minute <= 0 or limits.requests_per_hour <= 0):
        raise ConfigurationError("Rate limits must be positive", config_key="rate_limiting")


class ConfigManager:
    """
    Manages system configuration loading, validation, and updates.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or os.environ.get(CONFIG_PATH_ENV) or "config.json"
        self._config: Optional[SystemConfig] = None
        self.logger = logging.getLogger(__name__)

    def load_config(self) -> SystemConfig:
        """
        Load configuration from file or create default configuration.

        Returns:
            SystemConfig instance

        Raises:
            ConfigurationError: If configuration loading fails
        """
        try:
            if Path(self.config_path).exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)
                self._config = self._dict_to_config(config_data)
                self.logger.info(f"Configuration loaded from {self.config_path}")
            else:
                self._config = SystemConfig()
                self.save_config()  # Save default config
                self.logger.info("Default configuration created")

            self._validate_config(self._config)
            return self._config

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}")

    def save_config(self, config: Optional[SystemConfig] = None) -> None:
        """
        Save configuration to file.

        Args:
            config: Configuration to save (uses current config if None)

        Raises:
            ConfigurationError: If configuration saving fails
        """
        config_to_save = config or self._config
        if not config_to_save:
            raise ConfigurationError("No configuration to save")

        try:
            config_dict = self._config_to_dict(config_to_save)

            Path(self.config_path).parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, default=str)

            self.logger.info(f"Configuration saved to {self.config_path}")

        except Exception as e:
            raise ConfigurationError(f"Failed to save configuration: {str(e)}")

    def get_config(self) -> SystemConfig:
        """
        Get current configuration, loading if necessary.

        Returns:
            SystemConfig instance
        """
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def update_config(self, updates: Dict[str, Any]) -> SystemConfig:
        """
        Update configuration with new values.

        Args:
            updates: Dictionary of configuration updates

        Returns:
            Updated SystemConfig instance
        """
        current_config = self.get_config()
        config_dict = self._config_to_dict(current_config)

        self._deep_update(config_dict, updates)

        updated_config = self._dict_to_config(config_dict)
        self._validate_config(updated_config)

        self._config = updated_config
        self.save_config()

        return updated_config

    def _validate_config(self, config: SystemConfig) -> None:
        """
        Validate configuration settings.

        Args:
            config: Configuration to validate

        Raises:
            ConfigurationError: If validation fails
        """
        for name, settings in config.providers.items():
            if not self._is_provider(name):
                raise ConfigurationError(f"Unknown provider: {name}", config_key="providers")
            if settings.timeout_seconds <= 0:
                raise ConfigurationError(f"Timeout for {name} must be positive", config_key="providers")
            if settings.max_retries < 0:
                raise ConfigurationError(f"Max retries for {name} must not be negative", config_key="providers")
            if not settings.resolve_api_key():
                self.logger.warning(f"No API key configured for {name} (set {settings.api_key_env})")

        for name, rate in config.pricing.items():
            if not self._is_provider(name):
                raise ConfigurationError(f"Unknown provider in pricing: {name}", config_key="pricing")
            if rate.input_per_1k < 0 or rate.output_per_1k < 0:
                raise ConfigurationError(f"Pricing for {name} must not be negative", config_key="pricing")

        for name, overrides in config.agents.items():
            if not AgentType.is_member(name):
                raise ConfigurationError(f"Unknown agent type: {name}", config_key="agents")
            variant = VARIANTS[AgentType.parse(name)]
            apply_agent_overrides(variant.default_config(), overrides)

    @staticmethod
    def _is_provider(name: str) -> bool:
        try:
            AIProvider.parse(name)
            return True
        except ValueError:
            return False

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> SystemConfig:
        """Convert dictionary to SystemConfig object."""
        providers = default_provider_settings()
        for name, settings in (config_dict.get('providers') or {}).items():
            base = dataclasses.asdict(providers[name]) if name in providers else {}
            base.update(settings)
            providers[name] = ProviderSettings(**base)

        pricing = default_pricing()
        for name, rate in (config_dict.get('pricing') or {}).items():
            pricing[name] = PricingRate(**rate)

        return SystemConfig(
            providers=providers,
            pricing=pricing,
            agents={name: dict(values) for name, values in (config_dict.get('agents') or {}).items()},
            logging_config=LoggingConfig(**config_dict.get('logging_config', {})),
            debug_mode=config_dict.get('debug_mode', False),
            enable_fallback=config_dict.get('enable_fallback', True),
            metadata=config_dict.get('metadata', {})
        )

    def _config_to_dict(self, config: SystemConfig) -> Dict[str, Any]:
        """Convert SystemConfig object to dictionary."""
        providers = {}
        for name, settings in config.providers.items():
            settings_dict = dataclasses.asdict(settings)
            # Keys loaded from the environment are never written back to disk
            if not settings.api_key:
                settings_dict.pop('api_key')
            providers[name] = settings_dict

        return {
            'providers': providers,
            'pricing': {name: dataclasses.asdict(rate) for name, rate in config.pricing.items()},
            'agents': config.agents,
            'logging_config': dataclasses.asdict(config.logging_config),
            'debug_mode': config.debug_mode,
            'enable_fallback': config.enable_fallback,
            'metadata': config.metadata
        }

    def _deep_update(self, base_dict: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Recursively update nested dictionary."""
        for key, value in updates.items():
            if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                self._deep_update(base_dict[key], value)
            else:
                base_dict[key] = value
