"""
Assessment designer: quizzes, tests, assignments and their marking schemes.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models import AIRequest, ConversationContext, AgentConfig, AgentType, AIProvider, RateLimitConfig
from .base import (
    AgentVariant, all_matches, count_matches, first_match, format_history, format_learning_objectives,
    format_request_details, matches,
)

SYSTEM_PROMPT = """You are an expert educational assessment specialist for Indian students with expertise in:

ASSESSMENT DESIGN:
- Bloom's Taxonomy-based question creation
- Formative and summative assessment strategies
- Authentic and performance-based assessments
- Multiple assessment formats (MCQ, Short answer, Essay, Practical)

MEASUREMENT & EVALUATION:
- Learning outcome alignment
- Reliability and validity principles
- Fair and unbiased assessment practices
- Rubric development and scoring guides

INDIAN EDUCATION CONTEXT:
- CBSE/ICSE/State board assessment patterns
- Continuous and Comprehensive Evaluation (CCE)
- National Education Policy (NEP) 2020 guidelines

Always create fair, valid, reliable, and educationally meaningful assessments."""

ASSESSMENT_REQUIREMENTS = [
    "Align questions to specific learning objectives",
    "Include multiple cognitive levels (Bloom's taxonomy)",
    "Provide clear marking schemes and rubrics",
    "Use Indian cultural context and examples",
    "Ensure accessibility and fairness for diverse learners",
    "Include both formative and summative elements",
    "Provide constructive feedback opportunities",
]


@dataclass(frozen=True)
class AssessmentTemplate:
    structure: List[str]
    guidelines: List[str]
    question_types: List[str]
    blooms_levels: List[str]


@dataclass(frozen=True)
class RubricCriterion:
    criteria: str
    levels: Dict[int, str]
    weightage: int


ASSESSMENT_TEMPLATES: Dict[str, AssessmentTemplate] = {
    "quiz": AssessmentTemplate(
        structure=[
            "Assessment Overview and Learning Objectives",
            "Instructions and Guidelines",
            "Multiple Choice Questions (MCQs)",
            "True/False Questions",
            "Fill-in-the-blanks",
            "Short Answer Questions",
            "Answer Key with Explanations",
            "Scoring Rubric",
        ],
        guidelines=[
            "Keep questions clear and unambiguous",
            "Include distractors that test common misconceptions",
            "Vary difficulty levels across questions",
            "Ensure cultural appropriateness of examples",
        ],
        question_types=["Multiple Choice", "True/False", "Fill-in-blanks", "Short Answer"],
        blooms_levels=["Remember", "Understand", "Apply"],
    ),
    "test": AssessmentTemplate(
        structure=[
            "Assessment Cover Page with Instructions",
            "Learning Objectives and Competencies",
            "Section A: Objective Questions (MCQ, T/F)",
            "Section B: Short Answer Questions",
            "Section C: Long Answer/Essay Questions",
            "Section D: Problem Solving/Application",
            "Detailed Marking Scheme",
            "Time Management Guidelines",
        ],
        guidelines=[
            "Balance different cognitive levels",
            "Include real-world application problems",
            "Provide choice in essay questions",
            "Ensure progressive difficulty",
        ],
        question_types=["Multiple Choice", "Short Answer", "Essay", "Problem Solving", "Case Study"],
        blooms_levels=["Remember", "Understand", "Apply", "Analyze", "Evaluate"],
    ),
    "assignment": AssessmentTemplate(
        structure=[
            "Assignment Brief and Context",
            "Learning Outcomes and Assessment Criteria",
            "Task Description and Requirements",
            "Submission Format and Timeline",
            "Assessment Rubric with Criteria",
            "Peer Review Component",
            "Self-Reflection Questions",
        ],
        guidelines=[
            "Design for authentic real-world application",
            "Provide scaffolding for complex tasks",
            "Include formative checkpoints",
        ],
        question_types=["Research Project", "Case Study", "Portfolio", "Presentation", "Creative Work"],
        blooms_levels=["Apply", "Analyze", "Evaluate", "Create"],
    ),
}

WRITTEN_WORK_RUBRIC = [
    RubricCriterion(
        criteria="Content Knowledge and Understanding",
        levels={
            4: "Demonstrates comprehensive understanding with detailed examples",
            3: "Shows good understanding with relevant examples",
            2: "Basic understanding with some gaps",
            1: "Limited understanding with significant gaps",
        },
        weightage=40,
    ),
    RubricCriterion(
        criteria="Critical Thinking and Analysis",
        levels={
            4: "Excellent analysis with original insights",
            3: "Good analysis with some original thinking",
            2: "Basic analysis with limited depth",
            1: "Minimal analysis or original thought",
        },
        weightage=30,
    ),
    RubricCriterion(
        criteria="Organization and Structure",
        levels={
            4: "Clear, logical structure with smooth transitions",
            3: "Well-organized with good flow",
            2: "Adequate organization with some issues",
            1: "Poor organization, difficult to follow",
        },
        weightage=20,
    ),
    RubricCriterion(
        criteria="Language and Communication",
        levels={
            4: "Excellent language use, clear and engaging",
            3: "Good language use with minor errors",
            2: "Adequate communication with some errors",
            1: "Poor language use affecting clarity",
        },
        weightage=10,
    ),
]

# Assessment types whose answers are long-form and get the written-work rubric
RUBRICS: Dict[str, List[RubricCriterion]] = {
    "test": WRITTEN_WORK_RUBRIC,
    "assignment": WRITTEN_WORK_RUBRIC,
    "rubric": WRITTEN_WORK_RUBRIC,
}

REQUESTED_TYPE_PATTERNS = {
    "quiz": r"quiz|quick assessment|short test",
    "test": r"test|exam|examination",
    "assignment": r"assignment|project|task",
    "rubric": r"rubric|scoring guide|evaluation criteria",
    "portfolio": r"portfolio|collection|showcase",
    "performance": r"performance|practical|demonstration",
}

QUESTION_TYPE_PATTERNS = {
    "Multiple Choice": r"multiple choice|mcq|choose the best",
    "True/False": r"true.*false|t/f|correct.*incorrect",
    "Short Answer": r"short answer|brief|explain briefly",
    "Essay": r"essay|long answer|discuss|elaborate",
    "Fill-in-blanks": r"fill.*blank|complete.*sentence",
    "Matching": r"match|pair|connect",
    "Problem Solving": r"solve|calculate|find|determine",
    "Case Study": r"case study|scenario|situation",
}

BLOOMS_PATTERNS = {
    "Remember": r"remember|recall|list|identify|define|describe|state",
    "Understand": r"understand|explain|interpret|summarize|classify|compare",
    "Apply": r"apply|demonstrate|solve|use|implement|show|calculate",
    "Analyze": r"analyze|examine|investigate|categorize|distinguish",
    "Evaluate": r"evaluate|assess|judge|critique|defend|justify|argue",
    "Create": r"create|design|develop|compose|construct|formulate|plan",
}

FORMATIVE_PATTERNS = {
    "Feedback": r"feedback|comment|suggestion",
    "Self-Assessment": r"self.assessment|self.evaluation",
    "Peer Review": r"peer review|peer evaluation",
    "Reflection": r"reflection|think about",
    "Progress Monitoring": r"checkpoint|milestone|progress",
}

SENSITIVITY_PATTERNS = [
    r"indian|india",
    r"cultural|diverse|inclusive",
    r"fair|equity|bias",
    r"accommodat",
    r"accessible",
    r"multilingual",
]

QUESTION_COUNT_PATTERNS = [
    re.compile(r"Question \d+", re.IGNORECASE),
    re.compile(r"Q\.\d+", re.IGNORECASE),
    re.compile(r"\d+\."),
    re.compile(r"\d+\)"),
]

RUBRIC_KEYWORDS = ("rubric", "criteria", "marking scheme", "evaluation", "grading")


class AssessmentVariant(AgentVariant):
    agent_type = AgentType.ASSESSMENT
    baseline_confidence = 0.6
    history_turns = 2
    apology = "I apologize, but I'm currently unable to generate assessments. Please try again later."

    def default_config(self) -> AgentConfig:
        return AgentConfig(
            provider=AIProvider.GEMINI,
            model="gemini-pro",
            temperature=0.3,
            max_tokens=2500,
            system_prompt=SYSTEM_PROMPT,
            fallback_provider=AIProvider.OPENAI,
            fallback_model="gpt-3.5-turbo",
            rate_limiting=RateLimitConfig(requests_per_minute=25, requests_per_hour=400),
        )

    def build_prompt(self, request: AIRequest, context: Optional[ConversationContext] = None,
                     structured: bool = False) -> str:
        assessment_type = self.detect_requested_assessment_type(request.prompt)
        template = ASSESSMENT_TEMPLATES.get(assessment_type)
        rubric = RUBRICS.get(assessment_type)

        sections = [f"ASSESSMENT CREATION REQUEST\nRequest: {request.prompt}\n"]

        details = format_request_details(request, (
            ("subject", "Subject"),
            ("level", "Academic Level"),
            ("topic", "Topic/Chapter"),
            ("duration", "Assessment Duration"),
            ("board", "Curriculum Board"),
            ("language", "Language"),
        ))
        if details:
            sections.append(f"CONTEXT:\n{details}\n")

        objectives = format_learning_objectives(context, "LEARNING OBJECTIVES TO ASSESS:")
        if objectives:
            sections.append(objectives)

        if template is not None:
            structure = "\n".join(f"{index}. {item}" for index, item in enumerate(template.structure, 1))
            sections.append(
                f"ASSESSMENT STRUCTURE ({assessment_type.upper()}):\n{structure}\n\n"
                f"ASSESSMENT GUIDELINES:\n" + "\n".join(f"- {g}" for g in template.guidelines) + "\n\n"
                f"QUESTION TYPES TO INCLUDE:\n" + "\n".join(f"- {t}" for t in template.question_types) + "\n\n"
                f"BLOOM'S TAXONOMY LEVELS:\n" + "\n".join(f"- {b}" for b in template.blooms_levels) + "\n"
            )

        if rubric is not None:
            lines = ["RUBRIC CRITERIA:"]
            for index, criterion in enumerate(rubric, 1):
                lines.append(f"{index}. {criterion.criteria} (Weight: {criterion.weightage}%)")
                for score, description in criterion.levels.items():
                    lines.append(f"   - Score {score}: {description}")
            sections.append("\n".join(lines) + "\n")

        sections.append("ASSESSMENT REQUIREMENTS:\n" + "\n".join(
            f"{index}. {item}" for index, item in enumerate(ASSESSMENT_REQUIREMENTS, 1)) + "\n")

        history = format_history(context, self.history_turns, heading="PREVIOUS CONVERSATION CONTEXT:",
                                 truncate=150, upper_roles=True)
        if history:
            sections.append(history)

        sections.append(self.output_instruction(
            structured,
            "Create a comprehensive, pedagogically sound assessment that measures student learning "
            "effectively and provides meaningful feedback for improvement.",
        ))
        return "\n".join(sections)

    def score_confidence(self, content: str, request: AIRequest) -> float:
        confidence = self.baseline_confidence
        if matches(r"question|\bq\.", content):
            confidence += 0.15
        if matches(r"answer|\bans\b", content):
            confidence += 0.1
        if matches(r"marks|points", content):
            confidence += 0.1
        if matches(r"rubric|criteria", content):
            confidence += 0.1
        if matches(r"mcq|multiple choice", content):
            confidence += 0.05
        if matches(r"essay|explain", content):
            confidence += 0.05
        return confidence

    def extract_metadata(self, content: str, request: AIRequest) -> Dict[str, Any]:
        metadata = request.metadata or {}
        return {
            "assessment_type": self.detect_assessment_type(content),
            "question_count": self.count_questions(content),
            "difficulty": self.detect_difficulty(content),
            "subject": metadata.get("subject"),
            "level": metadata.get("level"),
            "question_types": all_matches(QUESTION_TYPE_PATTERNS, content),
            "blooms_levels": all_matches(BLOOMS_PATTERNS, content),
            "difficulty_level": self.assess_difficulty_level(content),
            "cultural_sensitivity": count_matches(SENSITIVITY_PATTERNS, content) / len(SENSITIVITY_PATTERNS),
            "formative_elements": all_matches(FORMATIVE_PATTERNS, content),
            "has_rubric": self.has_rubric(content),
        }

    @staticmethod
    def detect_requested_assessment_type(prompt: str) -> str:
        return first_match(REQUESTED_TYPE_PATTERNS, prompt, "quiz")

    @staticmethod
    def detect_assessment_type(content: str) -> str:
        if "quiz" in content or "quick" in content:
            return "quiz"
        if "test" in content or "exam" in content:
            return "test"
        if "assignment" in content or "homework" in content:
            return "assignment"
        if "project" in content or "presentation" in content:
            return "project"
        if "practice" in content or "drill" in content:
            return "practice"
        return "general"

    @staticmethod
    def count_questions(content: str) -> int:
        """Largest number of hits among the question numbering styles."""
        return max(len(pattern.findall(content)) for pattern in QUESTION_COUNT_PATTERNS)

    @staticmethod
    def detect_difficulty(content: str) -> str:
        lowered = content.lower()
        easy = sum(1 for word in ("basic", "simple", "fundamental", "define", "list") if word in lowered)
        medium = sum(1 for word in ("explain", "analyze", "compare", "describe") if word in lowered)
        hard = sum(1 for word in ("evaluate", "synthesize", "create", "justify", "critique") if word in lowered)

        if hard > medium and hard > easy:
            return "hard"
        if medium > easy:
            return "medium"
        return "easy"

    @staticmethod
    def assess_difficulty_level(content: str) -> str:
        complexity = 0
        if matches(r"basic|simple|easy|recall|identify", content):
            complexity += 1
        if matches(r"explain|understand|apply|demonstrate", content):
            complexity += 2
        if matches(r"analyze|evaluate|create|synthesize|critique", content):
            complexity += 3
        if matches(r"design|formulate|compose|develop.*original", content):
            complexity += 4

        if complexity <= 2:
            return "Easy"
        if complexity <= 4:
            return "Moderate"
        if complexity <= 6:
            return "Challenging"
        return "Advanced"

    @staticmethod
    def has_rubric(content: str) -> bool:
        lowered = content.lower()
        return any(keyword in lowered for keyword in RUBRIC_KEYWORDS)
