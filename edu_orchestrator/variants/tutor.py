"""
Tutor: personalised explanations of concepts.
"""

from typing import Any, Dict, Optional

from ..models import AIRequest, ConversationContext, AgentConfig, AgentType, AIProvider, RateLimitConfig
from .base import AgentVariant, contains_any, format_history, non_english_language

SYSTEM_PROMPT = """You are an expert AI tutor for Indian students. Your role is to:
1. Provide personalized explanations based on student's learning level
2. Use relatable examples from Indian context
3. Break down complex concepts into simple steps
4. Encourage active learning and critical thinking
5. Adapt teaching style to individual learning preferences
6. Support multiple languages (English, Hindi, regional languages)
7. Follow Indian education standards (CBSE, ICSE, State boards)

Always be encouraging, patient, and culturally sensitive."""


class TutorVariant(AgentVariant):
    agent_type = AgentType.TUTOR
    baseline_confidence = 0.6

    def default_config(self) -> AgentConfig:
        return AgentConfig(
            provider=AIProvider.OPENAI,
            model="gpt-4",
            temperature=0.7,
            max_tokens=1000,
            system_prompt=SYSTEM_PROMPT,
            fallback_provider=AIProvider.GEMINI,
            rate_limiting=RateLimitConfig(requests_per_minute=30, requests_per_hour=500),
        )

    def build_prompt(self, request: AIRequest, context: Optional[ConversationContext] = None,
                     structured: bool = False) -> str:
        prompt = f"Student Question: {request.prompt}\n\n"

        metadata = request.metadata or {}
        if metadata.get("subject"):
            prompt += f"Subject: {metadata['subject']}\n"
        if metadata.get("level"):
            prompt += f"Academic Level: {metadata['level']}\n"
        language = non_english_language(request)
        if language:
            prompt += f"Preferred Language: {language}\n"

        if context is not None and context.learning_objectives:
            prompt += f"Learning Objectives: {', '.join(context.learning_objectives)}\n"

        history = format_history(context, self.history_turns)
        if history:
            prompt += "\n" + history

        prompt += "\n" + self.output_instruction(
            structured,
            "Please provide a clear, step-by-step explanation that helps the student understand "
            "the concept. Use examples relevant to Indian context when applicable.",
        )
        return prompt

    def score_confidence(self, content: str, request: AIRequest) -> float:
        confidence = self.baseline_confidence
        if contains_any(content, ("step", "first", "next")):
            confidence += 0.15
        if contains_any(content, ("example", "for instance")):
            confidence += 0.1
        if contains_any(content, ("understand", "concept")):
            confidence += 0.1
        if len(content) > 200:
            confidence += 0.05
        if (request.metadata or {}).get("subject"):
            confidence += 0.1
        return confidence

    def extract_metadata(self, content: str, request: AIRequest) -> Dict[str, Any]:
        metadata = request.metadata or {}
        return {
            "subject": metadata.get("subject"),
            "level": metadata.get("level"),
            "explanation_type": self.detect_explanation_type(content),
            "learning_approach": self.detect_learning_approach(content),
        }

    @staticmethod
    def detect_explanation_type(content: str) -> str:
        lowered = content.lower()
        if "step" in lowered and "solve" in lowered:
            return "problem_solving"
        if contains_any(lowered, ("concept", "theory")):
            return "conceptual"
        if contains_any(lowered, ("example", "practice")):
            return "practical"
        if contains_any(lowered, ("formula", "equation")):
            return "mathematical"
        return "general"

    @staticmethod
    def detect_learning_approach(content: str) -> str:
        if contains_any(content, ("visual", "diagram")):
            return "visual"
        if contains_any(content, ("practice", "exercise")):
            return "kinesthetic"
        if contains_any(content, ("listen", "repeat")):
            return "auditory"
        if contains_any(content, ("read", "text")):
            return "reading"
        return "mixed"
