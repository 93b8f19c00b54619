"""
Enumerations for the education agent orchestrator.
"""

from enum import Enum


class AgentType(Enum):
    """Closed set of agents a request can be routed to."""
    TUTOR = "tutor"
    CONTENT_CREATOR = "content_creator"
    ASSESSMENT = "assessment"
    ANALYTICS = "analytics"
    MENTOR = "mentor"
    STUDY_PLANNER = "study_planner"
    DOUBT_SOLVER = "doubt_solver"

    @classmethod
    def parse(cls, value) -> "AgentType":
        """Accept an AgentType or its string value."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())

    @classmethod
    def is_member(cls, value) -> bool:
        try:
            cls.parse(value)
            return True
        except ValueError:
            return False


class AIProvider(Enum):
    """External LLM backends."""
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"

    @classmethod
    def parse(cls, value) -> "AIProvider":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())
