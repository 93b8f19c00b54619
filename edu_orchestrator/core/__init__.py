"""
Core components of the education agent orchestrator.
"""

from .providers import ProviderGateway
from .agent import Agent
from .rate_limiter import RateLimiter
from .routing import ROUTING_RULES, RoutingRule, determine_agent_type, explain_agent_type
from .registry import AgentRegistry
from .manager import AgentManager

__all__ = [
    "ProviderGateway",
    "Agent",
    "RateLimiter",
    "ROUTING_RULES",
    "RoutingRule",
    "determine_agent_type",
    "explain_agent_type",
    "AgentRegistry",
    "AgentManager",
]
