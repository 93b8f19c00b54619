"""
Shared interface and prompt helpers for agent variants.

A variant is the data + behaviour pair that makes an agent a tutor, a mentor,
an assessment designer and so on: its default provider configuration, the way
it phrases the prompt, the surface signals it scores confidence on and the
annotations it attaches to a response. The provider plumbing, fallback chain
and normalization live in ``core.agent.Agent`` and are identical for all of them.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from ..models import AIRequest, ConversationContext, AgentConfig, AgentType

JSON_INSTRUCTION = (
    "Your response MUST be a valid JSON object matching the structure requested by the user. "
    "Do NOT include any conversational text or markdown outside the JSON."
)

DEFAULT_APOLOGY = (
    "I apologize, but I'm currently experiencing technical difficulties. "
    "Please try again in a moment."
)


class AgentVariant(ABC):
    """Capabilities every agent variant provides."""

    agent_type: AgentType
    baseline_confidence: float = 0.7
    history_turns: int = 3
    apology: str = DEFAULT_APOLOGY

    @abstractmethod
    def default_config(self) -> AgentConfig:
        """Provider binding, generation settings and limits for this variant."""

    @abstractmethod
    def build_prompt(self, request: AIRequest, context: Optional[ConversationContext] = None,
                     structured: bool = False) -> str:
        """Render the user prompt sent to the provider."""

    @abstractmethod
    def score_confidence(self, content: str, request: AIRequest) -> float:
        """Heuristic quality score; the caller clamps it to [0, 1]."""

    def extract_metadata(self, content: str, request: AIRequest) -> Dict[str, Any]:
        return {}

    def output_instruction(self, structured: bool, prose: str) -> str:
        return JSON_INSTRUCTION if structured else prose


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def matches(pattern: str, text: str) -> bool:
    return re.search(pattern, text, re.IGNORECASE) is not None


def first_match(indicators: Dict[str, str], text: str, default: str) -> str:
    """Return the first label whose pattern matches, in declaration order."""
    for label, pattern in indicators.items():
        if matches(pattern, text):
            return label
    return default


def all_matches(indicators: Dict[str, str], text: str) -> List[str]:
    return [label for label, pattern in indicators.items() if matches(pattern, text)]


def count_matches(patterns: Iterable[str], text: str) -> int:
    return sum(1 for pattern in patterns if matches(pattern, text))


def format_request_details(request: AIRequest, fields: Iterable[tuple]) -> str:
    """Render ``label: value`` lines for the metadata fields present on the request."""
    lines = []
    metadata = request.metadata or {}
    for key, label in fields:
        value = metadata.get(key)
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(item) for item in value)
        lines.append(f"{label}: {value}")
    return "\n".join(lines)


def format_learning_objectives(context: Optional[ConversationContext], heading: str) -> str:
    if context is None or not context.learning_objectives:
        return ""
    items = "\n".join(f"- {objective}" for objective in context.learning_objectives)
    return f"{heading}\n{items}\n"


def format_history(context: Optional[ConversationContext], limit: int,
                   heading: str = "Previous Conversation:", truncate: Optional[int] = None,
                   upper_roles: bool = False) -> str:
    if context is None or not context.history:
        return ""
    lines = [heading]
    for turn in context.recent_turns(limit):
        role = turn.role.upper() if upper_roles else turn.role
        content = turn.content
        if truncate is not None and len(content) > truncate:
            content = content[:truncate] + "..."
        lines.append(f"{role}: {content}")
    return "\n".join(lines) + "\n"


def non_english_language(request: AIRequest) -> Optional[str]:
    language = (request.metadata or {}).get("language")
    if language and str(language).lower() != "english":
        return str(language)
    return None
