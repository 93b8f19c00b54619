"""
Shared fixtures: a scripted provider gateway and a manual clock.
"""

from typing import Any, Dict, List, Optional

import pytest

from edu_orchestrator.core import AgentManager, ProviderGateway
from edu_orchestrator.models import AIProvider, CompletionResult, SystemConfig
from edu_orchestrator.utils.error_handling import ProviderError

DEFAULT_TEXT = "Step 1: first understand the concept. For example, consider a simple case."


class FakeGateway(ProviderGateway):
    """ProviderGateway that answers from a script and records every call."""

    def __init__(self, config: Optional[SystemConfig] = None):
        super().__init__(config)
        self.scripts: Dict[AIProvider, CompletionResult] = {}
        self.failures: Dict[AIProvider, Exception] = {}
        self.health: Dict[AIProvider, bool] = {provider: True for provider in AIProvider}
        self.calls: List[Dict[str, Any]] = []

    def script(self, provider: AIProvider, text: str, input_tokens: Optional[int] = None,
               output_tokens: Optional[int] = None) -> None:
        self.scripts[provider] = CompletionResult(
            text=text, provider=provider, model="", input_tokens=input_tokens, output_tokens=output_tokens,
        )

    def fail(self, provider: AIProvider, error: Optional[Exception] = None) -> None:
        self.failures[provider] = error or ProviderError(f"{provider.value} is down", provider=provider.value)

    def providers_called(self) -> List[AIProvider]:
        return [call["provider"] for call in self.calls]

    async def text_completion(self, provider, model, system_prompt, user_prompt, temperature, max_tokens,
                              structured_output=False):
        self.calls.append({
            "provider": provider,
            "model": model,
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "structured_output": structured_output,
        })
        if provider in self.failures:
            raise self.failures[provider]

        scripted = self.scripts.get(provider)
        if scripted is None:
            reported = provider != AIProvider.GEMINI
            return CompletionResult(
                text=DEFAULT_TEXT,
                provider=provider,
                model=model,
                input_tokens=100 if reported else None,
                output_tokens=50 if reported else None,
            )
        return CompletionResult(
            text=scripted.text,
            provider=provider,
            model=model,
            input_tokens=scripted.input_tokens,
            output_tokens=scripted.output_tokens,
        )

    async def health_probe(self, provider):
        return self.health[provider]


class ManualClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def system_config():
    return SystemConfig()


@pytest.fixture
def gateway(system_config):
    return FakeGateway(system_config)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def manager(system_config, gateway, clock):
    return AgentManager(system_config, gateway=gateway, clock=clock)
