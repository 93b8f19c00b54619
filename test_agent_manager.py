"""
Tests for the AgentManager facade.
"""

import pytest

from conftest import FakeGateway, ManualClock
from edu_orchestrator.core import AgentManager, AgentRegistry
from edu_orchestrator.core.agent import Agent
from edu_orchestrator.models import (
    AIRequest, AgentType, AIProvider, ConversationContext, ConversationTurn, SystemConfig,
)
from edu_orchestrator.utils.error_handling import (
    AgentNotFoundError, ConfigurationError, RateLimitExceededError, ValidationError,
)


def make_request(prompt, user_id="student_1", **context):
    return AIRequest(user_id=user_id, prompt=prompt, context=context)


def limited_manager(rpm, rph, clock=None):
    config = SystemConfig(agents={
        "tutor": {"rate_limiting": {"requests_per_minute": rpm, "requests_per_hour": rph}},
    })
    gateway = FakeGateway(config)
    return AgentManager(config, gateway=gateway, clock=clock or ManualClock()), gateway


@pytest.mark.asyncio
async def test_route_request_dispatches_to_routed_agent(manager, gateway):
    response = await manager.route_request(make_request("I need a quiz on photosynthesis"))

    assert response.agent_type == AgentType.ASSESSMENT
    assert response.provider == AIProvider.GEMINI
    assert gateway.providers_called() == [AIProvider.GEMINI]
    assert manager.get_request_counts()["assessment"] == {"minute": 1, "hour": 1}


@pytest.mark.asyncio
async def test_override_routes_to_requested_agent(manager):
    response = await manager.route_request(make_request("I need a quiz", agent_type="mentor"))
    assert response.agent_type == AgentType.MENTOR


@pytest.mark.asyncio
async def test_context_reaches_the_prompt(manager, gateway):
    context = ConversationContext(
        user_id="student_1",
        session_id="s1",
        history=[ConversationTurn(role="assistant", content="Gravity pulls objects together.")],
    )

    await manager.route_request(make_request("tell me more about gravity"), context)

    assert "Gravity pulls objects together." in gateway.calls[0]["user_prompt"]


@pytest.mark.asyncio
@pytest.mark.parametrize("request_kwargs", [
    {"user_id": "student_1", "prompt": ""},
    {"user_id": "student_1", "prompt": "   "},
    {"user_id": "", "prompt": "tell me about gravity"},
])
async def test_invalid_requests_raise_validation_error(manager, gateway, request_kwargs):
    with pytest.raises(ValidationError):
        await manager.route_request(AIRequest(**request_kwargs))

    assert gateway.calls == []
    assert all(value == {"minute": 0, "hour": 0} for value in manager.get_request_counts().values())


@pytest.mark.asyncio
async def test_rate_limit_raises_without_side_effects():
    clock = ManualClock()
    manager, gateway = limited_manager(rpm=2, rph=10, clock=clock)

    await manager.route_request(make_request("tell me about gravity"))
    await manager.route_request(make_request("tell me about magnets"))

    with pytest.raises(RateLimitExceededError) as excinfo:
        await manager.route_request(make_request("tell me about light"))

    assert excinfo.value.agent_type == "tutor"
    assert excinfo.value.limits == {"requests_per_minute": 2, "requests_per_hour": 10}
    assert len(gateway.calls) == 2
    assert manager.get_request_counts()["tutor"] == {"minute": 2, "hour": 2}
    assert manager.get_routing_statistics()["rate_limited"] == 1

    clock.advance(60)
    response = await manager.route_request(make_request("tell me about light"))
    assert response.agent_type == AgentType.TUTOR


@pytest.mark.asyncio
async def test_rate_limit_is_per_agent():
    manager, _ = limited_manager(rpm=1, rph=10)

    await manager.route_request(make_request("tell me about gravity"))
    with pytest.raises(RateLimitExceededError):
        await manager.route_request(make_request("tell me about gravity"))

    response = await manager.route_request(make_request("help me solve this"))
    assert response.agent_type == AgentType.DOUBT_SOLVER


@pytest.mark.asyncio
async def test_reset_rate_limits_readmits():
    manager, _ = limited_manager(rpm=1, rph=1)

    await manager.route_request(make_request("tell me about gravity"))
    assert not manager.check_rate_limit(AgentType.TUTOR)

    manager.reset_rate_limits()

    assert manager.check_rate_limit(AgentType.TUTOR)
    assert all(value == {"minute": 0, "hour": 0} for value in manager.get_request_counts().values())


def test_check_and_increment_are_exposed(manager):
    assert manager.check_rate_limit(AgentType.MENTOR)
    manager.increment_request_count(AgentType.MENTOR)
    assert manager.get_request_counts()["mentor"] == {"minute": 1, "hour": 1}


@pytest.mark.asyncio
async def test_provider_failures_never_escape(manager, gateway):
    for provider in AIProvider:
        gateway.fail(provider)

    response = await manager.route_request(make_request("tell me about gravity"))

    assert response.is_degraded
    assert response.confidence == 0.1
    stats = manager.get_routing_statistics()
    assert stats["degraded_responses"] == 1
    assert stats["fallback_responses"] == 0


@pytest.mark.asyncio
async def test_fallback_is_counted(manager, gateway):
    gateway.fail(AIProvider.OPENAI)

    response = await manager.route_request(make_request("tell me about gravity"))

    assert response.provider == AIProvider.GEMINI
    assert manager.get_routing_statistics()["fallback_responses"] == 1


@pytest.mark.asyncio
async def test_disabled_fallback_in_system_config():
    config = SystemConfig(enable_fallback=False)
    gateway = FakeGateway(config)
    gateway.fail(AIProvider.OPENAI)
    manager = AgentManager(config, gateway=gateway, clock=ManualClock())

    response = await manager.route_request(make_request("tell me about gravity"))

    assert response.is_degraded
    assert gateway.providers_called() == [AIProvider.OPENAI]


def test_get_agent_returns_registered_agent(manager):
    agent = manager.get_agent(AgentType.ANALYTICS)
    assert isinstance(agent, Agent)
    assert agent.agent_type == AgentType.ANALYTICS


@pytest.mark.asyncio
async def test_missing_agent_raises_agent_not_found(manager):
    manager.registry = AgentRegistry({})

    with pytest.raises(AgentNotFoundError):
        manager.get_agent(AgentType.TUTOR)
    with pytest.raises(AgentNotFoundError):
        await manager.route_request(make_request("tell me about gravity"))


def test_health_check_covers_every_agent(manager):
    assert manager.health_check() == {agent_type.value: True for agent_type in AgentType}


@pytest.mark.asyncio
async def test_provider_health_reports_each_provider(manager, gateway):
    gateway.health[AIProvider.ANTHROPIC] = False
    assert await manager.provider_health() == {"openai": True, "gemini": True, "anthropic": False}


def test_agent_configs_summary(manager):
    configs = manager.get_agent_configs()
    assert set(configs) == {agent_type.value for agent_type in AgentType}
    assert configs["content_creator"]["provider"] == "anthropic"
    assert configs["content_creator"]["model"] == "claude-3-sonnet-20240229"
    assert configs["tutor"]["rate_limiting"] == {"requests_per_minute": 30, "requests_per_hour": 500}


def test_agent_overrides_apply_from_system_config():
    config = SystemConfig(agents={"tutor": {"model": "gpt-4o", "temperature": 0.1}})
    manager = AgentManager(config, gateway=FakeGateway(config), clock=ManualClock())

    agent = manager.get_agent(AgentType.TUTOR)
    assert agent.config.model == "gpt-4o"
    assert agent.config.temperature == 0.1
    assert agent.config.max_tokens == 1000


@pytest.mark.asyncio
async def test_overridden_fallback_provider_gets_its_own_model():
    config = SystemConfig(agents={"assessment": {"fallback_provider": "anthropic"}})
    gateway = FakeGateway(config)
    gateway.fail(AIProvider.GEMINI)
    manager = AgentManager(config, gateway=gateway, clock=ManualClock())

    response = await manager.route_request(make_request("I need a quiz on cells"))

    assert response.provider == AIProvider.ANTHROPIC
    assert response.is_fallback
    fallback_call = gateway.calls[-1]
    assert fallback_call["provider"] == AIProvider.ANTHROPIC
    assert fallback_call["model"] == "claude-3-sonnet-20240229"


def test_invalid_agent_override_is_rejected():
    config = SystemConfig(agents={"tutor": {"temperature": 5}})
    with pytest.raises(ConfigurationError):
        AgentManager(config, gateway=FakeGateway(config))


@pytest.mark.asyncio
async def test_statistics_and_recent_requests(manager):
    await manager.route_request(make_request("tell me about gravity", user_id="a"))
    await manager.route_request(make_request("I need a quiz", user_id="b"))
    await manager.route_request(make_request("help me solve this", user_id="c"))

    stats = manager.get_routing_statistics()
    assert stats["total_requests"] == 3
    assert stats["agent_usage"]["tutor"] == 1
    assert stats["agent_usage"]["assessment"] == 1
    assert stats["agent_usage"]["doubt_solver"] == 1
    assert stats["agent_usage_percentages"]["tutor"] == pytest.approx(100 / 3)

    recent = manager.get_recent_requests(limit=2)
    assert [entry["user_id"] for entry in recent] == ["b", "c"]
    assert recent[-1]["agent_type"] == "doubt_solver"
    assert recent[-1]["provider"] == "openai"
    assert recent[-1]["cost"] > 0
    assert manager.get_recent_requests(limit=0) == []


@pytest.mark.asyncio
async def test_request_log_is_bounded(manager):
    manager._max_log_entries = 4
    for i in range(5):
        await manager.route_request(make_request(f"tell me about topic {i}"))

    assert len(manager.request_log) == 2
    assert manager.get_routing_statistics()["total_requests"] == 5
