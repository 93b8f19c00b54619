"""
Education Agent Orchestrator

Routes learner requests to specialised education agents (tutor, content
creator, assessment, analytics, mentor, study planner, doubt solver), each
backed by an LLM provider with a fallback provider and per-agent rate limits.
"""

__version__ = "0.1.0"
__author__ = "Education Agent Orchestrator"

from .models import (
    AIRequest,
    AIResponse,
    ConversationContext,
    AgentType,
    AIProvider,
    SystemConfig,
    AgentConfig,
)
from .core import AgentManager, determine_agent_type

__all__ = [
    "AIRequest",
    "AIResponse",
    "ConversationContext",
    "AgentType",
    "AIProvider",
    "SystemConfig",
    "AgentConfig",
    "AgentManager",
    "determine_agent_type",
]
