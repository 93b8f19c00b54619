"""
Agent: one variant bound to its configuration, the provider gateway and the fallback chain.
"""

import time
from typing import Any, Dict, Optional

from ..models import (
    AIRequest, AIResponse, ConversationContext, AgentConfig, AgentType, AIProvider,
    CompletionResult, PricingRate, SystemConfig,
)
from ..utils import AgentLogger
from ..utils.error_handling import FallbackExhaustedError, handle_error
from ..variants import AgentVariant
from .normalizer import clamp_confidence, degraded_response, normalize_response
from .providers import ProviderGateway

FALLBACK_DISCOUNT = 0.9


class Agent:
    """
    Serves requests for one agent type.

    ``process_request`` always returns an AIResponse: a primary provider
    failure goes to the fallback provider, and a fallback failure (or no
    fallback at all) produces the variant's degraded apology.
    """

    def __init__(self, variant: AgentVariant, config: Optional[AgentConfig] = None,
                 gateway: Optional[ProviderGateway] = None, system_config: Optional[SystemConfig] = None,
                 enable_fallback: bool = True, logger: Optional[AgentLogger] = None):
        self.variant = variant
        self.config = config or variant.default_config()
        self.gateway = gateway or ProviderGateway()
        self.system_config = system_config or SystemConfig()
        self.enable_fallback = enable_fallback
        self.logger = logger or AgentLogger()

    @property
    def agent_type(self) -> AgentType:
        return self.variant.agent_type

    def build_prompt(self, request: AIRequest, context: Optional[ConversationContext] = None,
                     structured: Optional[bool] = None) -> str:
        if structured is None:
            structured = request.json_mode
        return self.variant.build_prompt(request, context, structured)

    def calculate_confidence(self, content: str, request: AIRequest) -> float:
        return clamp_confidence(self.variant.score_confidence(content, request))

    def pricing_for(self, provider: AIProvider) -> PricingRate:
        return self.system_config.pricing_for(provider)

    def calculate_cost(self, provider: AIProvider, input_tokens: int, output_tokens: int = 0) -> float:
        return self.pricing_for(provider).cost(input_tokens, output_tokens)

    def fallback_model(self) -> Optional[str]:
        if self.config.fallback_provider is None:
            return None
        return self.config.fallback_model or self.gateway.default_model(self.config.fallback_provider)

    async def process_request(self, request: AIRequest, context: Optional[ConversationContext] = None) -> AIResponse:
        """
        Build the prompt, call the primary provider and normalize the answer.

        Args:
            request: Learner request
            context: Optional conversation context (read only)

        Returns:
            AIResponse from the primary, the fallback, or the degraded path
        """
        start_time = time.time()
        structured = request.json_mode

        try:
            prompt = self.build_prompt(request, context, structured)
            result = await self._complete(self.config.provider, self.config.model, prompt, structured)
            return self._normalize(request, result, prompt, start_time)
        except Exception as e:
            return await self._handle_fallback(request, context, start_time, e)

    async def _complete(self, provider: AIProvider, model: str, prompt: str, structured: bool) -> CompletionResult:
        return await self.gateway.text_completion(
            provider=provider,
            model=model,
            system_prompt=self.config.system_prompt,
            user_prompt=prompt,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            structured_output=structured,
        )

    def _normalize(self, request: AIRequest, result: CompletionResult, prompt: str, start_time: float,
                   fallback: bool = False) -> AIResponse:
        confidence = self.calculate_confidence(result.text, request)
        metadata: Dict[str, Any] = dict(self.variant.extract_metadata(result.text, request))
        if fallback:
            confidence *= FALLBACK_DISCOUNT
            metadata["fallback"] = True
            metadata["original_provider"] = self.config.provider.value

        return normalize_response(
            agent_type=self.agent_type,
            result=result,
            prompt=prompt,
            rate=self.pricing_for(result.provider),
            confidence=confidence,
            metadata=metadata,
            start_time=start_time,
        )

    async def _handle_fallback(self, request: AIRequest, context: Optional[ConversationContext],
                               start_time: float, primary_error: Exception) -> AIResponse:
        fallback_provider = self.config.fallback_provider
        attempted = [self.config.provider.value]

        if not self.enable_fallback or fallback_provider is None:
            return self._degrade(request, start_time, primary_error, attempted)

        self.logger.log_fallback(self.agent_type.value, self.config.provider.value,
                                 fallback_provider.value, str(primary_error))
        attempted.append(fallback_provider.value)

        try:
            # Structured mode stays off for the fallback call
            prompt = self.build_prompt(request, context, structured=False)
            result = await self._complete(fallback_provider, self.fallback_model(), prompt, structured=False)
            return self._normalize(request, result, prompt, start_time, fallback=True)
        except Exception as e:
            return self._degrade(request, start_time, e, attempted)

    def _degrade(self, request: AIRequest, start_time: float, error: Exception, attempted: list) -> AIResponse:
        exhausted = FallbackExhaustedError(
            f"No provider answered for {self.agent_type.value}: {str(error)}",
            attempted_providers=attempted,
        )
        handle_error(exhausted, self.logger, {"agent_type": self.agent_type.value, "user_id": request.user_id})
        self.logger.log_degraded(self.agent_type.value, attempted, str(error))
        return degraded_response(self.agent_type, self.config.provider, self.variant.apology, start_time)

    def describe(self) -> Dict[str, Any]:
        """Summary used by AgentManager.get_agent_configs."""
        limits = self.config.rate_limiting
        return {
            "type": self.agent_type.value,
            "provider": self.config.provider.value,
            "model": self.config.model,
            "fallback_provider": self.config.fallback_provider.value if self.config.fallback_provider else None,
            "rate_limiting": {
                "requests_per_minute": limits.requests_per_minute,
                "requests_per_hour": limits.requests_per_hour,
            } if limits else None,
        }
