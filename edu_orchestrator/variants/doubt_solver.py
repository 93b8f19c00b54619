"""
Doubt solver: worked, step-by-step solutions to specific problems.
"""

import re
from typing import Any, Dict, Optional

from ..models import AIRequest, ConversationContext, AgentConfig, AgentType, AIProvider, RateLimitConfig
from .base import AgentVariant, contains_any, format_history, format_request_details

SYSTEM_PROMPT = """You are an expert doubt solver and problem-solving assistant for Indian students. Your role is to:
1. Solve academic doubts and questions across all subjects
2. Provide step-by-step problem solutions
3. Explain concepts clearly when students are confused
4. Help with homework and assignment questions
5. Clarify misunderstandings and misconceptions
6. Provide multiple solution approaches when applicable
7. Encourage independent thinking and learning

Always be patient, clear, and educational in your responses."""

STEP_PATTERNS = [
    re.compile(r"step \d+", re.IGNORECASE),
    re.compile(r"\d+\."),
    re.compile(r"first|second|third|finally", re.IGNORECASE),
]

EXPLANATION_KEYWORDS = ("because", "reason", "explanation", "why", "therefore")


class DoubtSolverVariant(AgentVariant):
    agent_type = AgentType.DOUBT_SOLVER
    apology = "Doubt solving service temporarily unavailable. Please try again later."

    def default_config(self) -> AgentConfig:
        return AgentConfig(
            provider=AIProvider.OPENAI,
            model="gpt-4",
            temperature=0.6,
            max_tokens=1200,
            system_prompt=SYSTEM_PROMPT,
            fallback_provider=AIProvider.GEMINI,
            rate_limiting=RateLimitConfig(requests_per_minute=40, requests_per_hour=600),
        )

    def build_prompt(self, request: AIRequest, context: Optional[ConversationContext] = None,
                     structured: bool = False) -> str:
        prompt = f"Student Doubt: {request.prompt}\n\n"

        details = format_request_details(request, (
            ("subject", "Subject"),
            ("level", "Academic Level"),
            ("language", "Preferred Language"),
        ))
        if details:
            prompt += details + "\n"

        history = format_history(context, self.history_turns)
        if history:
            prompt += "\n" + history

        prompt += "\n" + self.output_instruction(
            structured, "Please provide a clear, step-by-step solution and explanation.")
        return prompt

    def score_confidence(self, content: str, request: AIRequest) -> float:
        confidence = self.baseline_confidence
        if contains_any(content, ("step", "solution")):
            confidence += 0.1
        if contains_any(content, ("answer", "result")):
            confidence += 0.1
        if contains_any(content, ("explanation", "because")):
            confidence += 0.1
        return confidence

    def extract_metadata(self, content: str, request: AIRequest) -> Dict[str, Any]:
        return {
            "problem_type": self.detect_problem_type(content),
            "solution_steps": self.count_solution_steps(content),
            "has_explanation": contains_any(content, EXPLANATION_KEYWORDS),
        }

    @staticmethod
    def detect_problem_type(content: str) -> str:
        if "math" in content or "equation" in content:
            return "mathematical"
        if "concept" in content or "theory" in content:
            return "conceptual"
        if "practical" in content or "experiment" in content:
            return "practical"
        return "general"

    @staticmethod
    def count_solution_steps(content: str) -> int:
        return max(len(pattern.findall(content)) for pattern in STEP_PATTERNS)
