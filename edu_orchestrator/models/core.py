"""
Core data models for request processing and routing.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional, List
from .enums import AgentType, AIProvider


@dataclass
class ConversationTurn:
    """A single message in a conversation history."""
    role: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ConversationContext:
    """Context for multi-turn conversations, supplied by the caller."""
    user_id: str
    session_id: str
    history: List[ConversationTurn] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def recent_turns(self, limit: int = 3) -> List[ConversationTurn]:
        if limit <= 0:
            return []
        return self.history[-limit:]

    @property
    def learning_objectives(self) -> List[str]:
        return list(self.metadata.get("learning_objectives") or [])


@dataclass
class AIRequest:
    """A learner request to be routed to an agent."""
    user_id: str
    prompt: str
    session_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def requested_agent_type(self) -> Optional[Any]:
        """Explicit agent type override carried in the request context."""
        return self.context.get("agent_type") if self.context else None

    @property
    def json_mode(self) -> bool:
        return bool(self.metadata) and self.metadata.get("json_mode") is True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AIRequest":
        return cls(
            user_id=data.get("user_id") or "anonymous",
            prompt=data.get("prompt") or "",
            session_id=data.get("session_id"),
            metadata=dict(data.get("metadata") or {}),
            context=dict(data.get("context") or {}),
        )


@dataclass
class UsageInfo:
    """Token usage and cost for a single response."""
    total_tokens: int
    cost: float
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    estimated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "cost": self.cost,
            "estimated": self.estimated,
        }


@dataclass
class AIResponse:
    """Normalized response returned by every agent."""
    id: str
    agent_type: AgentType
    provider: AIProvider
    content: str
    confidence: float
    metadata: Dict[str, Any] = field(default_factory=dict)
    usage: Optional[UsageInfo] = None
    timestamp: datetime = field(default_factory=datetime.now)
    processing_time: float = 0.0

    @property
    def is_fallback(self) -> bool:
        return self.metadata.get("fallback") is True

    @property
    def is_degraded(self) -> bool:
        return self.metadata.get("error") is True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "agent_type": self.agent_type.value,
            "provider": self.provider.value,
            "content": self.content,
            "confidence": self.confidence,
            "metadata": self.metadata,
            "usage": self.usage.to_dict() if self.usage else None,
            "timestamp": self.timestamp.isoformat(),
            "processing_time": self.processing_time,
        }


@dataclass
class CompletionResult:
    """Raw text completion returned by the provider gateway."""
    text: str
    provider: AIProvider
    model: str
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None

    @property
    def reports_usage(self) -> bool:
        return self.input_tokens is not None and self.output_tokens is not None


@dataclass
class RateLimitCounter:
    """Per-agent request counters for the minute and hour windows."""
    minute_count: int = 0
    hour_count: int = 0
    last_reset: float = 0.0
