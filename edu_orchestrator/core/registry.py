"""
Agent registry: one live Agent per agent type.
"""

from typing import Dict, List, Mapping, Optional

from ..models import AgentType, SystemConfig
from ..utils import AgentLogger, apply_agent_overrides, get_logger
from ..utils.error_handling import AgentNotFoundError
from ..variants import VARIANTS, AgentVariant
from .agent import Agent
from .providers import ProviderGateway


class AgentRegistry:
    """Maps each agent type to its agent instance."""

    def __init__(self, agents: Optional[Dict[AgentType, Agent]] = None):
        self._agents: Dict[AgentType, Agent] = dict(agents or {})
        self.logger = get_logger(__name__)

    @classmethod
    def from_config(cls, config: SystemConfig, gateway: ProviderGateway,
                    variants: Optional[Mapping[AgentType, AgentVariant]] = None,
                    logger: Optional[AgentLogger] = None) -> "AgentRegistry":
        """
        Build one agent per variant, applying ``config.agents`` overrides.

        Raises:
            ConfigurationError: If an override is invalid
        """
        logger = logger or AgentLogger()
        agents = {}
        for agent_type, variant in (variants if variants is not None else VARIANTS).items():
            agent_config = apply_agent_overrides(variant.default_config(), config.agents.get(agent_type.value))
            agents[agent_type] = Agent(
                variant=variant,
                config=agent_config,
                gateway=gateway,
                system_config=config,
                enable_fallback=config.enable_fallback,
                logger=logger,
            )
        registry = cls(agents)
        registry.logger.info(f"Registered {len(agents)} agents: {[t.value for t in agents]}")
        return registry

    def get(self, agent_type: AgentType) -> Agent:
        agent = self._agents.get(agent_type)
        if agent is None:
            name = agent_type.value if isinstance(agent_type, AgentType) else str(agent_type)
            raise AgentNotFoundError(f"Agent not found for type: {name}", agent_type=name)
        return agent

    def agent_types(self) -> List[AgentType]:
        return list(self._agents)

    def agents(self) -> Dict[AgentType, Agent]:
        return dict(self._agents)

    def health_check(self) -> Dict[str, bool]:
        """In-memory check only: every agent has a config and a readable type."""
        health = {}
        for agent_type, agent in self._agents.items():
            try:
                health[agent_type.value] = agent.config is not None and agent.agent_type == agent_type
            except AttributeError as e:
                self.logger.error(f"Health check failed for {agent_type.value}: {str(e)}")
                health[agent_type.value] = False
        return health
