"""
Learning analytics: performance, engagement, learning path and predictive reports.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models import AIRequest, ConversationContext, AgentConfig, AgentType, AIProvider, RateLimitConfig
from .base import (
    AgentVariant, count_matches, first_match, format_history, format_request_details, matches,
)

SYSTEM_PROMPT = """You are an expert learning analytics specialist for Indian education with deep expertise in:

LEARNING ANALYTICS:
- Educational data mining and pattern recognition
- Predictive modeling for academic success
- Learning path optimization and personalization
- Competency-based progression tracking

INDIAN EDUCATION CONTEXT:
- CBSE/ICSE/State board performance standards
- Multilingual learning analytics
- Competitive exam preparation analytics (JEE, NEET, etc.)

ACTIONABLE INSIGHTS:
- Evidence-based intervention recommendations
- Personalized learning pathway suggestions
- Parent and teacher engagement strategies

Respect student privacy and ethical data use. Always provide scientifically grounded, ethically sound,
and practically useful learning analytics."""

ANALYTICS_REQUIREMENTS = [
    "Provide quantitative metrics with statistical significance",
    "Include qualitative insights and interpretations",
    "Show trends, patterns, and comparative analysis",
    "Identify specific learning gaps and strengths",
    "Generate actionable, evidence-based recommendations",
    "Consider Indian educational context and standards",
    "Structure findings for different stakeholders",
    "Ensure ethical and privacy-conscious analysis",
]


@dataclass(frozen=True)
class AnalyticsFramework:
    methodology: str
    metrics: List[str]
    dimensions: List[str]


@dataclass(frozen=True)
class PerformanceIndicator:
    name: str
    unit: str
    interpretation: str


FRAMEWORKS: Dict[str, AnalyticsFramework] = {
    "performance": AnalyticsFramework(
        methodology="Multi-dimensional Performance Analysis",
        metrics=["Academic Achievement", "Skill Development", "Engagement Level", "Progress Rate"],
        dimensions=["Cognitive", "Behavioral", "Affective", "Social"],
    ),
    "learning_path": AnalyticsFramework(
        methodology="Adaptive Learning Path Analytics",
        metrics=["Completion Rate", "Time Efficiency", "Mastery Level", "Retention Rate"],
        dimensions=["Content Mastery", "Learning Velocity", "Difficulty Progression", "Knowledge Transfer"],
    ),
    "engagement": AnalyticsFramework(
        methodology="Multi-modal Engagement Analysis",
        metrics=["Attention Duration", "Interaction Frequency", "Content Preference", "Participation Quality"],
        dimensions=["Cognitive Engagement", "Behavioral Engagement", "Emotional Engagement",
                    "Social Engagement"],
    ),
    "predictive": AnalyticsFramework(
        methodology="Predictive Learning Analytics",
        metrics=["Success Probability", "Risk Indicators", "Intervention Points", "Outcome Forecasts"],
        dimensions=["Academic Trajectory", "Skill Development", "Motivation Trends", "Support Needs"],
    ),
}

PERFORMANCE_INDICATORS: Dict[str, List[PerformanceIndicator]] = {
    "performance": [
        PerformanceIndicator("Overall Academic Performance", "percentage",
                             "Share of marks obtained across all assessed subjects"),
        PerformanceIndicator("Subject Mastery Rate", "percentage",
                             "Share of curriculum topics at or above the mastery threshold"),
        PerformanceIndicator("Assessment Success Rate", "percentage",
                             "Share of assessments passed on the first attempt"),
    ],
    "engagement": [
        PerformanceIndicator("Learning Session Duration", "minutes",
                             "Average focused time per study session"),
        PerformanceIndicator("Content Interaction Rate", "percentage",
                             "Share of assigned material opened and worked through"),
        PerformanceIndicator("Discussion Participation", "posts per week",
                             "Contributions to collaborative activities"),
    ],
}

REQUESTED_TYPE_PATTERNS = {
    "performance": r"performance|achievement|scores|grades",
    "engagement": r"engagement|participation|interaction|activity",
    "learning_path": r"learning path|progress|trajectory|journey",
    "predictive": r"predict|forecast|risk|probability|future",
    "comparative": r"compare|benchmark|peer|cohort",
    "diagnostic": r"diagnose|gap|weakness|strength|assessment",
}

STATISTICAL_PATTERNS = [
    r"statistical significance|p-value|confidence interval",
    r"correlation|regression|analysis",
    r"sample size|data points|observations",
    r"variance|standard deviation|mean",
    r"trend analysis|time series",
]

QUALITY_PATTERNS = [
    r"learning analytics|educational data",
    r"performance metrics|kpi|indicators",
    r"benchmark|comparison|baseline",
    r"prediction|forecast|projection",
    r"pattern|trend|correlation",
    r"insight|finding|discovery",
]

ACTION_PATTERNS = [
    r"recommendation|suggest|should",
    r"intervention|strategy|approach",
    r"next steps|action plan",
    r"improve|enhance|optimize",
]

ACTIONABILITY_PATTERNS = [
    r"specific|concrete|detailed",
    r"recommend|suggest|should",
    r"next steps|action plan|implementation",
    r"timeline|deadline|schedule",
    r"resources|support|tools",
    r"measurable|trackable|observable",
]

DATA_QUALITY_PATTERNS = [
    r"large sample|significant data|comprehensive analysis",
    r"multiple sources|diverse data|triangulation",
    r"validated|verified|reliable|accurate",
    r"longitudinal|time series|historical",
    r"statistical significance|confidence",
]

TREND_PATTERNS = [
    r"pattern|trend|correlation|relationship",
    r"increasing|decreasing|improving|declining",
    r"consistent|inconsistent|variable|stable",
    r"peak|valley|plateau|spike",
]

STAKEHOLDERS = (
    "student", "teacher", "parent", "administrator", "counselor",
    "tutor", "mentor", "peer", "instructor", "guardian",
)

METRIC_PATTERN = re.compile(r"(\w[\w ]*?)\s*:\s*(\d+(?:\.\d+)?)\s*(%|points|minutes|hours)", re.IGNORECASE)


class AnalyticsVariant(AgentVariant):
    agent_type = AgentType.ANALYTICS
    baseline_confidence = 0.6
    history_turns = 2
    apology = "Analytics service temporarily unavailable. Please try again later."

    def default_config(self) -> AgentConfig:
        return AgentConfig(
            provider=AIProvider.OPENAI,
            model="gpt-4",
            temperature=0.2,
            max_tokens=3000,
            system_prompt=SYSTEM_PROMPT,
            fallback_provider=AIProvider.GEMINI,
            rate_limiting=RateLimitConfig(requests_per_minute=15, requests_per_hour=200),
        )

    def build_prompt(self, request: AIRequest, context: Optional[ConversationContext] = None,
                     structured: bool = False) -> str:
        analysis_type = self.detect_requested_analysis_type(request.prompt)
        framework = FRAMEWORKS.get(analysis_type)
        indicators = PERFORMANCE_INDICATORS.get(analysis_type)

        sections = [f"LEARNING ANALYTICS REQUEST\nRequest: {request.prompt}\n"]

        details = format_request_details(request, (
            ("student_id", "Student ID"),
            ("timeframe", "Analysis Timeframe"),
            ("subject", "Subject Focus"),
            ("level", "Academic Level"),
            ("board", "Curriculum Board"),
            ("language", "Language"),
        ))
        if details:
            sections.append(f"ANALYTICS CONTEXT:\n{details}\n")

        data_sources = (request.metadata or {}).get("data_sources")
        if data_sources:
            sections.append("AVAILABLE DATA SOURCES:\n" + "\n".join(f"- {s}" for s in data_sources) + "\n")

        if framework is not None:
            sections.append(
                f"ANALYTICS FRAMEWORK ({analysis_type.upper()}):\n"
                f"Methodology: {framework.methodology}\n"
                f"Key Metrics: {', '.join(framework.metrics)}\n"
                f"Analysis Dimensions: {', '.join(framework.dimensions)}\n"
            )

        if indicators:
            lines = ["KEY PERFORMANCE INDICATORS:"]
            for index, indicator in enumerate(indicators, 1):
                lines.append(f"{index}. {indicator.name} ({indicator.unit}): {indicator.interpretation}")
            sections.append("\n".join(lines) + "\n")

        sections.append("ANALYTICS REQUIREMENTS:\n" + "\n".join(
            f"{index}. {item}" for index, item in enumerate(ANALYTICS_REQUIREMENTS, 1)) + "\n")

        history = format_history(context, self.history_turns, heading="PREVIOUS ANALYTICS CONTEXT:",
                                 truncate=150, upper_roles=True)
        if history:
            sections.append(history)

        sections.append(self.output_instruction(
            structured,
            "Conduct comprehensive learning analytics that provides deep insights and actionable "
            "recommendations for improving educational outcomes.",
        ))
        return "\n".join(sections)

    def score_confidence(self, content: str, request: AIRequest) -> float:
        confidence = self.baseline_confidence
        confidence += 0.08 * count_matches(STATISTICAL_PATTERNS, content)
        confidence += 0.06 * count_matches(QUALITY_PATTERNS, content)
        confidence += 0.05 * count_matches(ACTION_PATTERNS, content)

        if len(content) > 1500:
            confidence += 0.1
        if len(content.split("\n")) > 25:
            confidence += 0.08

        metadata = request.metadata or {}
        if metadata.get("timeframe"):
            confidence += 0.04
        if len(metadata.get("data_sources") or []) > 2:
            confidence += 0.06
        return confidence

    def extract_metadata(self, content: str, request: AIRequest) -> Dict[str, Any]:
        return {
            "analysis_type": self.detect_analysis_type(content),
            "insights": self.lines_mentioning(content, ("insight", "finding")),
            "recommendations": self.lines_mentioning(content, ("recommend", "suggest")),
            "metrics": self.extract_metrics(content),
            "patterns": self.identify_patterns(content),
            "stakeholders": self.identify_stakeholders(content),
            "data_quality": min(0.5 + 0.1 * count_matches(DATA_QUALITY_PATTERNS, content), 1.0),
            "actionability_score": count_matches(ACTIONABILITY_PATTERNS, content) / len(ACTIONABILITY_PATTERNS),
        }

    @staticmethod
    def detect_requested_analysis_type(prompt: str) -> str:
        return first_match(REQUESTED_TYPE_PATTERNS, prompt, "performance")

    @staticmethod
    def detect_analysis_type(content: str) -> str:
        if "performance" in content:
            return "performance"
        if "progress" in content:
            return "progress"
        if "comparison" in content:
            return "comparative"
        return "general"

    @staticmethod
    def lines_mentioning(content: str, keywords) -> List[str]:
        return [line.strip() for line in content.split("\n") if any(keyword in line for keyword in keywords)]

    @staticmethod
    def extract_metrics(content: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Pull ``name: value unit`` figures out of the report."""
        metrics = []
        for name, value, unit in METRIC_PATTERN.findall(content):
            metrics.append({"name": name.strip(), "value": float(value), "unit": unit})
            if len(metrics) >= limit:
                break
        return metrics

    @staticmethod
    def identify_patterns(content: str, per_pattern: int = 2, limit: int = 8) -> List[str]:
        found = []
        for pattern in TREND_PATTERNS:
            sentences = re.findall(rf"[^.]*(?:{pattern})[^.]*", content, re.IGNORECASE)
            found.extend(sentence.strip() for sentence in sentences[:per_pattern])
        return found[:limit]

    @staticmethod
    def identify_stakeholders(content: str) -> List[str]:
        return [keyword.capitalize() for keyword in STAKEHOLDERS if matches(keyword, content)]
