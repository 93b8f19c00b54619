"""
Tests for the command-line demo.
"""

import json
import logging

import pytest

from conftest import FakeGateway
from edu_orchestrator import demo
from edu_orchestrator.core import AgentManager
from edu_orchestrator.models import AIProvider


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("EDU_ORCHESTRATOR_CONFIG", raising=False)
    package_logger = logging.getLogger("edu_orchestrator")
    saved_handlers = list(package_logger.handlers)
    saved_level = package_logger.level
    saved_propagate = package_logger.propagate
    yield tmp_path
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers[:] = saved_handlers
    package_logger.setLevel(saved_level)
    package_logger.propagate = saved_propagate


def test_route_only_prints_decisions(capsys, isolated_workspace):
    exit_code = demo.main(["--route-only", "I need a quiz on photosynthesis", "tell me about gravity"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "I need a quiz on photosynthesis -> assessment (quiz_test_assessment)" in out
    assert "tell me about gravity -> tutor (default)" in out
    assert (isolated_workspace / "config.json").exists()


def test_route_only_with_agent_override(capsys):
    exit_code = demo.main(["--route-only", "--agent", "mentor", "I need a quiz"])

    assert exit_code == 0
    assert "I need a quiz -> mentor (override)" in capsys.readouterr().out


def test_invalid_config_returns_error_code(capsys, isolated_workspace):
    path = isolated_workspace / "bad.json"
    path.write_text(json.dumps({"agents": {"librarian": {}}}), encoding="utf-8")

    assert demo.main(["--config", str(path), "--route-only"]) == 2
    assert "Configuration error" in capsys.readouterr().err


def test_debug_mode_lowers_log_level(isolated_workspace):
    path = isolated_workspace / "debug.json"
    path.write_text(json.dumps({"debug_mode": True}), encoding="utf-8")

    assert demo.main(["--config", str(path), "--route-only", "tell me about gravity"]) == 0
    assert logging.getLogger("edu_orchestrator").level == logging.DEBUG


def test_build_requests_carries_metadata():
    args = demo.parse_arguments(["--subject", "physics", "--level", "grade 9", "--json", "--agent", "tutor", "why?"])

    [request] = demo.build_requests(args)

    assert request.prompt == "why?"
    assert request.metadata == {"subject": "physics", "level": "grade 9", "json_mode": True}
    assert request.context == {"agent_type": "tutor"}
    assert request.json_mode


def test_sample_prompts_used_when_none_given():
    requests = demo.build_requests(demo.parse_arguments([]))
    assert [request.prompt for request in requests] == demo.SAMPLE_PROMPTS


def test_full_run_prints_responses(capsys, monkeypatch):
    gateways = []

    def fake_manager(config):
        gateway = FakeGateway(config)
        gateway.fail(AIProvider.ANTHROPIC)
        gateways.append(gateway)
        return AgentManager(config, gateway=gateway)

    monkeypatch.setattr(demo, "AgentManager", fake_manager)

    exit_code = demo.main(["tell me about gravity", "create a lesson on fractions"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Agent: tutor via openai" in out
    assert "Agent: content_creator via openai" in out
    assert "Fallback from: anthropic" in out
    assert gateways[0].providers_called() == [AIProvider.OPENAI, AIProvider.ANTHROPIC, AIProvider.OPENAI]
