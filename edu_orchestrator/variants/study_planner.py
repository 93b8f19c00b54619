"""
Study planner: timetables, revision schedules and exam preparation plans.
"""

from typing import Any, Dict, List, Optional

from ..models import AIRequest, ConversationContext, AgentConfig, AgentType, AIProvider, RateLimitConfig
from .base import AgentVariant, contains_any, format_history, format_request_details

SYSTEM_PROMPT = """You are an expert study planner and schedule optimizer for Indian students. Your role is to:
1. Create personalized study schedules and timetables
2. Plan exam preparation strategies and timelines
3. Balance academic studies with extracurricular activities
4. Optimize study sessions based on learning science principles
5. Account for Indian academic calendar and examination patterns
6. Create revision schedules and milestone tracking
7. Adapt plans based on student progress and feedback

Always create realistic, achievable plans that promote effective learning."""

COMMON_SUBJECTS = (
    "math", "science", "english", "history", "geography", "physics", "chemistry", "biology",
)


class StudyPlannerVariant(AgentVariant):
    agent_type = AgentType.STUDY_PLANNER
    apology = "Study planning service temporarily unavailable. Please try again later."

    def default_config(self) -> AgentConfig:
        return AgentConfig(
            provider=AIProvider.GEMINI,
            model="gemini-pro",
            temperature=0.5,
            max_tokens=1800,
            system_prompt=SYSTEM_PROMPT,
            fallback_provider=AIProvider.OPENAI,
            rate_limiting=RateLimitConfig(requests_per_minute=25, requests_per_hour=400),
        )

    def build_prompt(self, request: AIRequest, context: Optional[ConversationContext] = None,
                     structured: bool = False) -> str:
        prompt = f"Study Planning Request: {request.prompt}\n\n"

        details = format_request_details(request, (
            ("subject", "Subjects"),
            ("level", "Academic Level"),
            ("exam_date", "Exam Date"),
            ("hours_per_day", "Available Hours per Day"),
            ("language", "Preferred Language"),
        ))
        if details:
            prompt += details + "\n"

        history = format_history(context, self.history_turns)
        if history:
            prompt += "\n" + history

        prompt += "\n" + self.output_instruction(structured, "Create a detailed, practical study plan.")
        return prompt

    def score_confidence(self, content: str, request: AIRequest) -> float:
        confidence = self.baseline_confidence
        if contains_any(content, ("schedule", "timetable")):
            confidence += 0.1
        if contains_any(content, ("week", "day")):
            confidence += 0.1
        if contains_any(content, ("subject", "topic")):
            confidence += 0.1
        return confidence

    def extract_metadata(self, content: str, request: AIRequest) -> Dict[str, Any]:
        return {
            "plan_type": self.detect_plan_type(content),
            "duration": self.detect_duration(content),
            "subjects": self.extract_subjects(content),
        }

    @staticmethod
    def detect_plan_type(content: str) -> str:
        if "exam" in content:
            return "exam_preparation"
        if "daily" in content or "routine" in content:
            return "daily_schedule"
        if "revision" in content:
            return "revision_plan"
        return "general"

    @staticmethod
    def detect_duration(content: str) -> str:
        # "week" before "day": a weekly plan nearly always mentions days too
        if "week" in content:
            return "weekly"
        if "month" in content:
            return "monthly"
        if "day" in content:
            return "daily"
        return "flexible"

    @staticmethod
    def extract_subjects(content: str) -> List[str]:
        lowered = content.lower()
        return [subject for subject in COMMON_SUBJECTS if subject in lowered]
