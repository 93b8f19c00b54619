"""
Mentor: career guidance, course selection and exam strategy.
"""

from typing import Any, Dict, Optional

from ..models import AIRequest, ConversationContext, AgentConfig, AgentType, AIProvider, RateLimitConfig
from .base import AgentVariant, contains_any, format_history, format_request_details

SYSTEM_PROMPT = """You are an expert career mentor and guidance counselor for Indian students. Your role is to:
1. Provide career guidance and counseling
2. Help students explore career options based on their interests and skills
3. Advise on educational pathways and course selections
4. Guide students through competitive exam preparation strategies
5. Provide insights about job market trends in India
6. Help with college admissions and scholarship guidance
7. Support personal development and soft skills building

Always be supportive, encouraging, and provide practical, actionable advice."""

GUIDANCE_KEYWORDS = (
    ("career", ("career",)),
    ("academic", ("college", "admission")),
    ("skill_development", ("skill",)),
)

CAREER_FIELDS = ("engineering", "medical", "business", "arts")


class MentorVariant(AgentVariant):
    agent_type = AgentType.MENTOR
    apology = "Mentoring service temporarily unavailable. Please try again later."

    def default_config(self) -> AgentConfig:
        return AgentConfig(
            provider=AIProvider.ANTHROPIC,
            model="claude-3-sonnet-20240229",
            temperature=0.7,
            max_tokens=1500,
            system_prompt=SYSTEM_PROMPT,
            fallback_provider=AIProvider.OPENAI,
            rate_limiting=RateLimitConfig(requests_per_minute=20, requests_per_hour=300),
        )

    def build_prompt(self, request: AIRequest, context: Optional[ConversationContext] = None,
                     structured: bool = False) -> str:
        prompt = f"Career Guidance Request: {request.prompt}\n\n"

        details = format_request_details(request, (
            ("subject", "Subject"),
            ("level", "Academic Level"),
            ("interests", "Interests"),
            ("language", "Preferred Language"),
        ))
        if details:
            prompt += details + "\n"

        history = format_history(context, self.history_turns)
        if history:
            prompt += "\n" + history

        prompt += "\n" + self.output_instruction(structured, "Provide thoughtful career mentoring and guidance.")
        return prompt

    def score_confidence(self, content: str, request: AIRequest) -> float:
        confidence = self.baseline_confidence
        if contains_any(content, ("career", "guidance")):
            confidence += 0.1
        if contains_any(content, ("recommend", "suggest")):
            confidence += 0.1
        if contains_any(content, ("pathway", "option")):
            confidence += 0.1
        return confidence

    def extract_metadata(self, content: str, request: AIRequest) -> Dict[str, Any]:
        return {
            "guidance_type": self.detect_guidance_type(content),
            "career_field": self.detect_career_field(content),
        }

    @staticmethod
    def detect_guidance_type(content: str) -> str:
        for label, keywords in GUIDANCE_KEYWORDS:
            if any(keyword in content for keyword in keywords):
                return label
        return "general"

    @staticmethod
    def detect_career_field(content: str) -> str:
        for field in CAREER_FIELDS:
            if field in content:
                return field
        return "general"
