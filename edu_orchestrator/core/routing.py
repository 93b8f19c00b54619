"""
Keyword routing of learner requests to agent types.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..models import AIRequest, AgentType


@dataclass(frozen=True)
class RoutingRule:
    """A named predicate over the lower-cased prompt and the agent it selects."""
    name: str
    predicate: Callable[[str], bool]
    agent_type: AgentType


def _any(*keywords: str) -> Callable[[str], bool]:
    return lambda text: any(keyword in text for keyword in keywords)


def _all_of(first: str, alternatives: Tuple[str, ...]) -> Callable[[str], bool]:
    return lambda text: first in text and any(keyword in text for keyword in alternatives)


# Evaluated top to bottom; the first match wins
ROUTING_RULES: List[RoutingRule] = [
    RoutingRule("create_lesson_or_content", _all_of("create", ("lesson", "content")), AgentType.CONTENT_CREATOR),
    RoutingRule("quiz_test_assessment", _any("quiz", "test", "assessment"), AgentType.ASSESSMENT),
    RoutingRule("plan_study_or_schedule", _all_of("plan", ("study", "schedule")), AgentType.STUDY_PLANNER),
    RoutingRule("career_guidance_future", _any("career", "guidance", "future"), AgentType.MENTOR),
    RoutingRule("doubt_help_solve", _any("doubt", "help", "solve"), AgentType.DOUBT_SOLVER),
    RoutingRule("analytics_progress_performance", _any("analytics", "progress", "performance"),
                AgentType.ANALYTICS),
]

DEFAULT_AGENT_TYPE = AgentType.TUTOR


def explain_agent_type(request: AIRequest, rules: Optional[List[RoutingRule]] = None) -> Tuple[AgentType, str]:
    """
    Decide which agent serves the request and why.

    Returns:
        (agent_type, reason) where reason is "override", a rule name or "default"
    """
    override = request.requested_agent_type
    if override is not None and AgentType.is_member(override):
        return AgentType.parse(override), "override"

    text = (request.prompt or "").lower()
    for rule in (rules if rules is not None else ROUTING_RULES):
        if rule.predicate(text):
            return rule.agent_type, rule.name

    return DEFAULT_AGENT_TYPE, "default"


def determine_agent_type(request: AIRequest) -> AgentType:
    """Pure function of the request: explicit override, then the keyword cascade, then tutor."""
    return explain_agent_type(request)[0]
