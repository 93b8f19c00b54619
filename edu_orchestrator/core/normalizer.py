"""
Response normalization: usage, cost and the AIResponse envelope.
"""

import math
import time
import uuid
from datetime import datetime
from typing import Any, Dict

from ..models import AIResponse, AgentType, AIProvider, CompletionResult, PricingRate, UsageInfo

DEGRADED_CONFIDENCE = 0.1


def estimate_tokens(text: str) -> int:
    """Rough token count for providers that do not report usage (1 token per 4 characters)."""
    return math.ceil(len(text) / 4)


def clamp_confidence(value: float) -> float:
    return max(0.0, min(1.0, value))


def generate_response_id(agent_type: AgentType) -> str:
    return f"{agent_type.value}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def elapsed_ms(start_time: float) -> float:
    return (time.time() - start_time) * 1000


def build_usage(result: CompletionResult, prompt: str, rate: PricingRate) -> UsageInfo:
    """
    Fold a provider result into UsageInfo.

    Reported counts are priced per side; otherwise the estimated total of
    prompt plus completion is priced at the input rate.
    """
    if result.reports_usage:
        return UsageInfo(
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            total_tokens=result.input_tokens + result.output_tokens,
            cost=rate.cost(result.input_tokens, result.output_tokens),
        )

    total = estimate_tokens(prompt + result.text)
    return UsageInfo(total_tokens=total, cost=rate.cost(total, 0), estimated=True)


def normalize_response(agent_type: AgentType, result: CompletionResult, prompt: str, rate: PricingRate,
                       confidence: float, metadata: Dict[str, Any], start_time: float) -> AIResponse:
    return AIResponse(
        id=generate_response_id(agent_type),
        agent_type=agent_type,
        provider=result.provider,
        content=result.text,
        confidence=clamp_confidence(confidence),
        metadata=metadata,
        usage=build_usage(result, prompt, rate),
        timestamp=datetime.now(),
        processing_time=elapsed_ms(start_time),
    )


def degraded_response(agent_type: AgentType, provider: AIProvider, content: str, start_time: float) -> AIResponse:
    """Static low-confidence answer used when no provider responded."""
    return AIResponse(
        id=generate_response_id(agent_type),
        agent_type=agent_type,
        provider=provider,
        content=content,
        confidence=DEGRADED_CONFIDENCE,
        metadata={"error": True},
        usage=UsageInfo(total_tokens=0, cost=0.0),
        timestamp=datetime.now(),
        processing_time=elapsed_ms(start_time),
    )
