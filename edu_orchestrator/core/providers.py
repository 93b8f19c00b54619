"""
Provider gateway: async text completion and health probes for the LLM backends.
"""

import asyncio
from typing import Any, Dict, Optional

import anthropic
from google import genai
from google.genai import types as genai_types
from openai import AsyncOpenAI

from ..models import AIProvider, CompletionResult, SystemConfig
from ..models.config import ProviderSettings
from ..utils import get_logger
from ..utils.error_handling import ProviderError


class ProviderGateway:
    """
    Holds one lazily-created async client per provider.

    Every failure coming out of a provider SDK is re-raised as ProviderError so
    that agents only ever have one exception type to fall back on.
    """

    def __init__(self, config: Optional[SystemConfig] = None):
        self.config = config or SystemConfig()
        self.logger = get_logger(__name__)
        self._clients: Dict[AIProvider, Any] = {}

    def settings(self, provider: AIProvider) -> ProviderSettings:
        return self.config.provider_settings(provider)

    def is_configured(self, provider: AIProvider) -> bool:
        """True when an API key is available for the provider."""
        return bool(self.settings(provider).resolve_api_key())

    def default_model(self, provider: AIProvider) -> str:
        return self.settings(provider).default_model

    def _get_client(self, provider: AIProvider) -> Any:
        client = self._clients.get(provider)
        if client is not None:
            return client

        settings = self.settings(provider)
        api_key = settings.resolve_api_key()
        if not api_key:
            raise ProviderError(
                f"{provider.value} API key not configured (set {settings.api_key_env})",
                provider=provider.value,
            )

        if provider == AIProvider.OPENAI:
            client = AsyncOpenAI(api_key=api_key, timeout=settings.timeout_seconds,
                                 max_retries=settings.max_retries)
        elif provider == AIProvider.ANTHROPIC:
            client = anthropic.AsyncAnthropic(api_key=api_key, timeout=settings.timeout_seconds,
                                              max_retries=settings.max_retries)
        elif provider == AIProvider.GEMINI:
            client = genai.Client(
                api_key=api_key,
                http_options=genai_types.HttpOptions(timeout=int(settings.timeout_seconds * 1000)),
            )
        else:
            raise ProviderError(f"Unsupported provider: {provider}", provider=str(provider))

        self._clients[provider] = client
        self.logger.info(f"Initialized {provider.value} client")
        return client

    async def text_completion(self, provider: AIProvider, model: str, system_prompt: str, user_prompt: str,
                              temperature: float, max_tokens: int,
                              structured_output: bool = False) -> CompletionResult:
        """
        Generate text from a single system + user prompt pair.

        Args:
            provider: Backend to call
            model: Provider model name
            system_prompt: Instructions for the model
            user_prompt: Rendered request prompt
            temperature: Sampling temperature
            max_tokens: Output token budget
            structured_output: Ask the provider for a JSON object where it supports it

        Returns:
            CompletionResult with token counts when the provider reports them

        Raises:
            ProviderError: If the client cannot be created or the call fails
        """
        client = self._get_client(provider)
        try:
            if provider == AIProvider.OPENAI:
                return await self._openai_completion(client, model, system_prompt, user_prompt,
                                                     temperature, max_tokens, structured_output)
            if provider == AIProvider.ANTHROPIC:
                return await self._anthropic_completion(client, model, system_prompt, user_prompt,
                                                        temperature, max_tokens)
            return await self._gemini_completion(client, model, system_prompt, user_prompt,
                                                 temperature, max_tokens, structured_output)
        except ProviderError:
            raise
        except Exception as e:
            self.logger.error(f"{provider.value} completion failed for {model}: {str(e)}")
            raise ProviderError(f"{provider.value} request failed: {str(e)}",
                                provider=provider.value, model=model) from e

    async def _openai_completion(self, client: AsyncOpenAI, model: str, system_prompt: str, user_prompt: str,
                                 temperature: float, max_tokens: int, structured_output: bool) -> CompletionResult:
        params: Dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if structured_output:
            params["response_format"] = {"type": "json_object"}

        response = await client.chat.completions.create(**params)

        text = response.choices[0].message.content if response.choices else None
        usage = response.usage
        return CompletionResult(
            text=text or "",
            provider=AIProvider.OPENAI,
            model=model,
            input_tokens=usage.prompt_tokens if usage else None,
            output_tokens=usage.completion_tokens if usage else None,
        )

    async def _anthropic_completion(self, client: anthropic.AsyncAnthropic, model: str, system_prompt: str,
                                    user_prompt: str, temperature: float, max_tokens: int) -> CompletionResult:
        response = await client.messages.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )

        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        return CompletionResult(
            text=text,
            provider=AIProvider.ANTHROPIC,
            model=model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )

    async def _gemini_completion(self, client: genai.Client, model: str, system_prompt: str, user_prompt: str,
                                 temperature: float, max_tokens: int, structured_output: bool) -> CompletionResult:
        config = genai_types.GenerateContentConfig(
            system_instruction=system_prompt or None,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if structured_output else None,
        )
        response = await client.aio.models.generate_content(
            model=model,
            contents=user_prompt,
            config=config,
        )

        # Token counts are left unset; the normalizer estimates them from the text
        return CompletionResult(text=response.text or "", provider=AIProvider.GEMINI, model=model)

    async def health_probe(self, provider: AIProvider) -> bool:
        """
        Cheap live call against the provider.

        Returns:
            bool: False when no key is configured or the call fails; never raises
        """
        if not self.is_configured(provider):
            return False

        settings = self.settings(provider)
        model = settings.health_model or settings.default_model
        try:
            client = self._get_client(provider)
            if provider == AIProvider.OPENAI:
                await client.models.list()
            elif provider == AIProvider.ANTHROPIC:
                await client.messages.create(
                    model=model,
                    max_tokens=10,
                    messages=[{"role": "user", "content": "Hello"}],
                )
            else:
                await client.aio.models.generate_content(
                    model=model,
                    contents="Hello",
                    config=genai_types.GenerateContentConfig(max_output_tokens=10),
                )
            return True
        except Exception as e:
            self.logger.warning(f"{provider.value} health probe failed: {str(e)}")
            return False

    async def health_check(self) -> Dict[str, bool]:
        """Probe every provider concurrently."""
        providers = list(AIProvider)
        results = await asyncio.gather(*(self.health_probe(provider) for provider in providers))
        return {provider.value: healthy for provider, healthy in zip(providers, results)}
