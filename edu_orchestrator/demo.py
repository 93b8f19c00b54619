"""
Command-line demo for the education agent orchestrator.

Routes one or more prompts through an AgentManager built from a config file
and prints each response.

Examples:
    edu-orchestrator "Can you create a lesson on fractions?"
    edu-orchestrator --route-only "I need a quiz on photosynthesis" "tell me about gravity"
    edu-orchestrator --agent mentor --subject physics "What should I study next?"
"""

import argparse
import asyncio
import dataclasses
import logging
import sys
from typing import List, Optional

from .core import AgentManager, explain_agent_type
from .models import AIRequest, AgentType
from .utils import ConfigManager, get_logger, setup_logging
from .utils.error_handling import EduOrchestratorError

SAMPLE_PROMPTS = [
    "Can you create a lesson on fractions?",
    "I need a quiz on photosynthesis",
    "Please help me solve 2x + 3 = 11",
    "tell me about gravity",
]


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="edu-orchestrator",
        description="Route learner prompts to education agents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "prompts",
        nargs="*",
        help="Prompts to route (sample prompts are used when none are given)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the JSON configuration file",
    )
    parser.add_argument(
        "--agent",
        choices=[agent_type.value for agent_type in AgentType],
        help="Force an agent type instead of keyword routing",
    )
    parser.add_argument(
        "--route-only",
        action="store_true",
        help="Print the routing decision without calling any provider",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Ask agents for a JSON-only answer",
    )
    parser.add_argument("--user-id", default="demo_user", help="User id attached to each request")
    parser.add_argument("--subject", help="Subject metadata for the request")
    parser.add_argument("--level", help="Academic level metadata for the request")
    return parser.parse_args(argv)


def build_requests(args: argparse.Namespace) -> List[AIRequest]:
    metadata = {}
    if args.subject:
        metadata["subject"] = args.subject
    if args.level:
        metadata["level"] = args.level
    if args.json:
        metadata["json_mode"] = True
    context = {"agent_type": args.agent} if args.agent else {}

    return [
        AIRequest(user_id=args.user_id, prompt=prompt, metadata=dict(metadata), context=dict(context))
        for prompt in (args.prompts or SAMPLE_PROMPTS)
    ]


async def run_requests(manager: AgentManager, requests: List[AIRequest]) -> int:
    exit_code = 0
    for i, request in enumerate(requests, 1):
        try:
            response = await manager.route_request(request)
        except EduOrchestratorError as e:
            print(f"\nRequest {i}: {request.prompt}")
            print(f"Error [{e.error_code}]: {e.message}")
            exit_code = 1
            continue

        print(f"\nRequest {i}: {request.prompt}")
        print(f"Agent: {response.agent_type.value} via {response.provider.value}")
        print(f"Confidence: {response.confidence:.2f}")
        if response.is_fallback:
            print(f"Fallback from: {response.metadata.get('original_provider')}")
        print(f"Response: {response.content}")
        print("-" * 50)
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)

    try:
        config = ConfigManager(args.config).load_config()
    except EduOrchestratorError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2

    logging_config = config.logging_config
    if config.debug_mode:
        logging_config = dataclasses.replace(logging_config, level=logging.DEBUG)
    setup_logging(logging_config)
    logger = get_logger(__name__)

    requests = build_requests(args)

    if args.route_only:
        for request in requests:
            agent_type, reason = explain_agent_type(request)
            print(f"{request.prompt} -> {agent_type.value} ({reason})")
        return 0

    logger.info(f"Routing {len(requests)} request(s)")
    manager = AgentManager(config)
    exit_code = asyncio.run(run_requests(manager, requests))
    logger.info("Demo completed")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
