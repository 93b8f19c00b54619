"""
Agent manager: the orchestration facade callers talk to.
"""

import time
from typing import Any, Callable, Dict, List, Optional

from ..models import AIRequest, AIResponse, ConversationContext, AgentType, SystemConfig
from ..utils import AgentLogger, get_logger
from ..utils.error_handling import RateLimitExceededError, ValidationError
from .agent import Agent
from .providers import ProviderGateway
from .rate_limiter import RateLimiter
from .registry import AgentRegistry
from .routing import explain_agent_type


class AgentManager:
    """
    Routes learner requests to agents under per-agent rate limits.

    Construct one per process and pass it to whatever serves requests. The
    clock is injectable so rate-limit windows can be driven by tests.
    """

    def __init__(self, config: Optional[SystemConfig] = None, gateway: Optional[ProviderGateway] = None,
                 clock: Callable[[], float] = time.time):
        self.config = config or SystemConfig()
        self.logger = get_logger(__name__)
        self.agent_logger = AgentLogger()

        self.gateway = gateway or ProviderGateway(self.config)
        self.registry = AgentRegistry.from_config(self.config, self.gateway, logger=self.agent_logger)
        self.rate_limiter = RateLimiter(self.registry.agent_types(), clock=clock)

        # Recent request summaries
        self.request_log: List[Dict[str, Any]] = []
        self._max_log_entries = 1000

        self._routing_stats = {
            'total_requests': 0,
            'rate_limited': 0,
            'fallback_responses': 0,
            'degraded_responses': 0,
            'agent_usage': {agent_type.value: 0 for agent_type in AgentType},
        }

        self.logger.info("AgentManager initialized")

    async def route_request(self, request: AIRequest, context: Optional[ConversationContext] = None) -> AIResponse:
        """
        Route a request to an agent and return its response.

        Args:
            request: Learner request
            context: Optional conversation context passed through to the agent

        Returns:
            AIResponse: Provider failures come back as fallback or degraded responses

        Raises:
            ValidationError: If the request has no user id or prompt
            AgentNotFoundError: If the routed agent type is not registered
            RateLimitExceededError: If the agent's request ceiling has been reached
        """
        self._validate_request(request)

        agent_type, reason = explain_agent_type(request)
        self.agent_logger.log_routing_decision(agent_type.value, reason, request.user_id)

        agent = self.get_agent(agent_type)
        limits = agent.config.rate_limiting
        if not self.rate_limiter.admit(agent_type, limits):
            self._routing_stats['rate_limited'] += 1
            raise RateLimitExceededError(
                f"Rate limit exceeded for {agent_type.value} agent",
                agent_type=agent_type.value,
                limits={
                    'requests_per_minute': limits.requests_per_minute,
                    'requests_per_hour': limits.requests_per_hour,
                } if limits else None,
            )

        response = await agent.process_request(request, context)
        self._record(request, response)
        return response

    def _validate_request(self, request: AIRequest) -> None:
        if not isinstance(request, AIRequest):
            raise ValidationError("Request must be an AIRequest", field="request")
        if not isinstance(request.prompt, str) or not request.prompt.strip():
            raise ValidationError("Prompt is required", field="prompt")
        if not request.user_id or not str(request.user_id).strip():
            raise ValidationError("User id is required", field="user_id")

    def _record(self, request: AIRequest, response: AIResponse) -> None:
        self._routing_stats['total_requests'] += 1
        self._routing_stats['agent_usage'][response.agent_type.value] += 1
        if response.is_fallback:
            self._routing_stats['fallback_responses'] += 1
        if response.is_degraded:
            self._routing_stats['degraded_responses'] += 1

        summary = {
            'timestamp': response.timestamp.isoformat(),
            'agent_type': response.agent_type.value,
            'user_id': request.user_id,
            'session_id': request.session_id,
            'response_id': response.id,
            'provider': response.provider.value,
            'confidence': response.confidence,
            'processing_time': response.processing_time,
            'cost': response.usage.cost if response.usage else 0.0,
        }
        self.request_log.append(summary)
        if len(self.request_log) > self._max_log_entries:
            self.request_log = self.request_log[-self._max_log_entries // 2:]  # Keep last half

        self.agent_logger.log_request(response.agent_type.value, request.user_id, summary)

    def get_agent(self, agent_type: AgentType) -> Agent:
        """
        Raises:
            AgentNotFoundError: If no agent is registered for the type
        """
        return self.registry.get(agent_type)

    def health_check(self) -> Dict[str, bool]:
        """In-memory health of every registered agent; no network calls."""
        return self.registry.health_check()

    async def provider_health(self) -> Dict[str, bool]:
        """Live probe of every provider."""
        return await self.gateway.health_check()

    def check_rate_limit(self, agent_type: AgentType) -> bool:
        return self.rate_limiter.check_rate_limit(agent_type, self.get_agent(agent_type).config.rate_limiting)

    def increment_request_count(self, agent_type: AgentType) -> None:
        self.rate_limiter.increment_request_count(agent_type)

    def get_request_counts(self) -> Dict[str, Dict[str, int]]:
        return self.rate_limiter.get_request_counts()

    def get_agent_configs(self) -> Dict[str, Dict[str, Any]]:
        return {agent_type.value: agent.describe() for agent_type, agent in self.registry.agents().items()}

    def reset_rate_limits(self) -> None:
        self.rate_limiter.reset_rate_limits()

    def get_routing_statistics(self) -> Dict[str, Any]:
        """Get routing statistics and response quality counters."""
        total_requests = self._routing_stats['total_requests']

        stats = {
            'total_requests': total_requests,
            'rate_limited': self._routing_stats['rate_limited'],
            'fallback_responses': self._routing_stats['fallback_responses'],
            'degraded_responses': self._routing_stats['degraded_responses'],
            'fallback_rate': (self._routing_stats['fallback_responses'] / total_requests * 100)
            if total_requests > 0 else 0,
            'agent_usage': self._routing_stats['agent_usage'].copy(),
            'recent_requests': len(self.request_log),
            'log_capacity': self._max_log_entries,
        }

        if total_requests > 0:
            stats['agent_usage_percentages'] = {
                agent: (count / total_requests * 100)
                for agent, count in self._routing_stats['agent_usage'].items()
            }

        return stats

    def get_recent_requests(self, limit: int = 10) -> List[Dict[str, Any]]:
        if limit <= 0:
            return []
        return [dict(entry) for entry in self.request_log[-limit:]]
