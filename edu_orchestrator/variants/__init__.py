"""
Agent variants, keyed by the agent type they implement.
"""

from typing import Dict

from ..models import AgentType
from .base import AgentVariant
from .tutor import TutorVariant
from .content_creator import ContentCreatorVariant
from .assessment import AssessmentVariant
from .analytics import AnalyticsVariant
from .mentor import MentorVariant
from .study_planner import StudyPlannerVariant
from .doubt_solver import DoubtSolverVariant

VARIANTS: Dict[AgentType, AgentVariant] = {
    AgentType.TUTOR: TutorVariant(),
    AgentType.CONTENT_CREATOR: ContentCreatorVariant(),
    AgentType.ASSESSMENT: AssessmentVariant(),
    AgentType.ANALYTICS: AnalyticsVariant(),
    AgentType.MENTOR: MentorVariant(),
    AgentType.STUDY_PLANNER: StudyPlannerVariant(),
    AgentType.DOUBT_SOLVER: DoubtSolverVariant(),
}

__all__ = [
    "VARIANTS",
    "AgentVariant",
    "TutorVariant",
    "ContentCreatorVariant",
    "AssessmentVariant",
    "AnalyticsVariant",
    "MentorVariant",
    "StudyPlannerVariant",
    "DoubtSolverVariant",
]
