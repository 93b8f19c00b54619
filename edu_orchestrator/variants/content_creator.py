"""
Content creator: lessons, lesson plans, activities and other teaching material.

Prompts are assembled from a content template chosen by what the learner asked
for, plus curriculum alignment when the subject is one we carry standards for.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models import AIRequest, ConversationContext, AgentConfig, AgentType, AIProvider, RateLimitConfig
from .base import (
    AgentVariant, all_matches, count_matches, first_match, format_history, format_learning_objectives,
    format_request_details, matches,
)

SYSTEM_PROMPT = """You are an expert educational content creator for Indian students with deep knowledge of:

PEDAGOGICAL EXPERTISE:
- Bloom's Taxonomy for cognitive development
- Multiple Intelligence Theory (Gardner)
- Constructivist learning principles
- Culturally Responsive Teaching
- Universal Design for Learning (UDL)

CURRICULUM MASTERY:
- CBSE/ICSE/State board standards and competencies
- National Education Policy (NEP) 2020 guidelines
- Learning outcome frameworks
- Assessment and evaluation methodologies

CULTURAL INTEGRATION:
- Indian educational context and values
- Regional examples and case studies
- Multilingual learning approaches
- Inclusive content for diverse backgrounds

Always create pedagogically sound, engaging, and culturally relevant educational content."""


@dataclass(frozen=True)
class ContentTemplate:
    structure: List[str]
    guidelines: List[str]
    blooms_levels: List[str]


@dataclass(frozen=True)
class CurriculumAlignment:
    board: str
    grade: str
    subject: str
    topics: List[str]
    learning_outcomes: List[str]


CONTENT_TEMPLATES: Dict[str, ContentTemplate] = {
    "lesson_plan": ContentTemplate(
        structure=[
            "Learning Objectives (aligned to Bloom's taxonomy)",
            "Prerequisites and Prior Knowledge Assessment",
            "Materials and Resources Required",
            "Lesson Introduction (Hook/Engagement)",
            "Direct Instruction with Scaffolding",
            "Guided Practice Activities",
            "Independent Practice/Application",
            "Assessment and Evaluation (Formative & Summative)",
            "Closure and Reflection",
            "Differentiation Strategies",
        ],
        guidelines=[
            "Use 5E Model (Engage, Explore, Explain, Elaborate, Evaluate)",
            "Ensure gradual release of responsibility",
            "Include culturally responsive teaching elements",
            "Plan for different learning paces",
        ],
        blooms_levels=["Remember", "Understand", "Apply", "Analyze", "Evaluate", "Create"],
    ),
    "lesson": ContentTemplate(
        structure=[
            "Learning Objectives",
            "Key Concepts Introduction",
            "Content Explanation with Examples",
            "Interactive Activities",
            "Practice Exercises",
            "Real-world Applications",
            "Summary and Key Takeaways",
            "Assessment Questions",
        ],
        guidelines=[
            "Use clear, age-appropriate language",
            "Provide multiple examples and non-examples",
            "Connect to students' prior knowledge",
            "Use Indian cultural context and examples",
        ],
        blooms_levels=["Remember", "Understand", "Apply"],
    ),
    "assessment": ContentTemplate(
        structure=[
            "Assessment Overview and Purpose",
            "Learning Objectives Being Assessed",
            "Question Types and Distribution",
            "Rubric/Scoring Criteria",
            "Sample Questions by Difficulty Level",
            "Feedback Mechanisms",
        ],
        guidelines=[
            "Align questions to learning objectives",
            "Design for different cognitive levels",
            "Ensure cultural fairness and sensitivity",
        ],
        blooms_levels=["Remember", "Understand", "Apply", "Analyze", "Evaluate"],
    ),
    "activity": ContentTemplate(
        structure=[
            "Activity Overview and Learning Goals",
            "Materials and Setup Instructions",
            "Step-by-step Procedure",
            "Student Roles and Responsibilities",
            "Discussion Questions/Reflection",
            "Assessment Criteria",
        ],
        guidelines=[
            "Design for active student participation",
            "Include collaborative elements",
            "Provide clear success criteria",
        ],
        blooms_levels=["Apply", "Analyze", "Evaluate", "Create"],
    ),
}

CURRICULUM_STANDARDS: Dict[str, List[CurriculumAlignment]] = {
    "mathematics": [
        CurriculumAlignment(
            board="CBSE", grade="Class 10", subject="Mathematics",
            topics=["Real Numbers", "Polynomials", "Linear Equations", "Quadratic Equations",
                    "Arithmetic Progressions"],
            learning_outcomes=["Solve real-world problems using mathematical concepts",
                               "Apply logical reasoning", "Demonstrate computational skills"],
        ),
        CurriculumAlignment(
            board="CBSE", grade="Class 12", subject="Mathematics",
            topics=["Relations and Functions", "Inverse Trigonometric Functions", "Matrices",
                    "Determinants", "Calculus"],
            learning_outcomes=["Apply mathematical concepts to solve complex problems",
                               "Demonstrate analytical thinking", "Use mathematical modeling"],
        ),
    ],
    "science": [
        CurriculumAlignment(
            board="CBSE", grade="Class 10", subject="Science",
            topics=["Light", "Human Eye", "Natural Resource Management", "Life Processes",
                    "Control and Coordination"],
            learning_outcomes=["Understand scientific principles", "Conduct scientific investigations",
                               "Apply scientific knowledge to daily life"],
        ),
    ],
}

# Order matters: the first matching label wins
REQUESTED_TYPE_PATTERNS = {
    "lesson_plan": r"lesson plan|teaching plan|class plan",
    "lesson": r"lesson|chapter|unit|explain|teach",
    "assessment": r"quiz|test|exam|assessment|evaluate",
    "activity": r"activity|exercise|practice|worksheet",
    "project": r"project|assignment|investigation",
    "curriculum": r"curriculum|syllabus|course",
    "rubric": r"rubric|grading criteria|evaluation matrix",
}

CONTENT_TYPE_PATTERNS = {
    "lesson_plan": r"lesson plan|teaching plan|class plan",
    "lesson": r"lesson|chapter|unit",
    "assessment": r"quiz|test|exam|evaluation|assessment",
    "activity": r"activity|exercise|practice|worksheet",
    "project": r"project|assignment|investigation",
    "explanation": r"explanation|concept|theory|introduction",
    "curriculum": r"curriculum|syllabus|course outline",
}

FORMAT_PATTERNS = {
    "multimedia": r"video|audio|animation|multimedia|podcast",
    "interactive": r"interactive|simulation|virtual lab|gamification",
    "visual": r"diagram|chart|infographic|mind map|visual",
    "structured_text": r"#|\*\*|markdown|formatted",
    "presentation": r"slide|presentation|ppt|powerpoint",
    "hands_on": r"hands.?on|practical|experiment|lab",
}

INTERACTIVITY_PATTERNS = [
    r"activity|exercise|practice",
    r"discussion|group work|collaboration",
    r"simulation|interactive|virtual",
    r"project|hands.?on|experiment",
    r"game|gamification|quiz",
    r"peer review|feedback|reflection",
    r"role.?play|case study|scenario",
    r"create|design|build|construct",
]

PEDAGOGY_PATTERNS = {
    "Scaffolding": r"scaffolding|guided practice|gradual release",
    "Constructivism": r"hands.?on|experiment|activity|practice",
    "Differentiation": r"different|various|multiple|diverse",
    "Culturally Responsive": r"cultural|indian|local|regional",
    "Inquiry-based": r"inquiry|investigate|explore|discover",
    "Collaborative Learning": r"collaborate|group|team|peer",
}

BLOOMS_PATTERNS = {
    "Remember": r"remember|recall|list|identify|define|describe",
    "Understand": r"understand|explain|interpret|summarize|classify",
    "Apply": r"apply|demonstrate|solve|use|implement|practice",
    "Analyze": r"analyze|compare|contrast|examine|categorize",
    "Evaluate": r"evaluate|assess|judge|critique|defend|justify",
    "Create": r"create|design|develop|compose|construct|formulate",
}

CULTURAL_PATTERNS = [
    r"indian|india",
    r"hindi|tamil|bengali|marathi|gujarati|punjabi",
    r"festival|tradition|culture",
    r"local|regional|community",
    r"cbse|icse|ncert",
    r"rupee|cricket|bollywood",
]

MODALITY_PATTERNS = {
    "Visual": r"visual|diagram|chart|image|graphic|video",
    "Auditory": r"audio|listen|music|sound|podcast",
    "Kinesthetic": r"hands.?on|kinesthetic|movement|gesture|tactile",
    "Reading/Writing": r"read|text|written|literature",
    "Digital": r"digital|online|interactive|technology",
}


class ContentCreatorVariant(AgentVariant):
    agent_type = AgentType.CONTENT_CREATOR
    baseline_confidence = 0.6
    history_turns = 2
    apology = "I apologize, but I'm currently unable to generate content. Please try again later."

    def default_config(self) -> AgentConfig:
        return AgentConfig(
            provider=AIProvider.ANTHROPIC,
            model="claude-3-sonnet-20240229",
            temperature=0.8,
            max_tokens=2000,
            system_prompt=SYSTEM_PROMPT,
            fallback_provider=AIProvider.OPENAI,
            fallback_model="gpt-4",
            rate_limiting=RateLimitConfig(requests_per_minute=20, requests_per_hour=300),
        )

    def build_prompt(self, request: AIRequest, context: Optional[ConversationContext] = None,
                     structured: bool = False) -> str:
        content_type = self.detect_requested_content_type(request.prompt)
        template = CONTENT_TEMPLATES.get(content_type)
        curriculum = self.curriculum_alignment(request.metadata)

        sections = [f"CONTENT CREATION REQUEST\nRequest: {request.prompt}\n"]

        details = format_request_details(request, (
            ("subject", "Subject"),
            ("level", "Academic Level"),
            ("language", "Language"),
            ("board", "Curriculum Board"),
        ))
        if details:
            sections.append(f"CONTEXT:\n{details}\n")

        objectives = format_learning_objectives(context, "LEARNING OBJECTIVES:")
        if objectives:
            sections.append(objectives)

        if template is not None:
            structure = "\n".join(f"{index}. {item}" for index, item in enumerate(template.structure, 1))
            guidelines = "\n".join(f"- {item}" for item in template.guidelines)
            levels = "\n".join(f"- {level}" for level in template.blooms_levels)
            sections.append(
                f"CONTENT STRUCTURE ({content_type.upper()}):\n{structure}\n\n"
                f"PEDAGOGICAL GUIDELINES:\n{guidelines}\n\n"
                f"BLOOM'S TAXONOMY LEVELS TO ADDRESS:\n{levels}\n"
            )

        if curriculum is not None:
            sections.append(
                f"CURRICULUM ALIGNMENT ({curriculum.board}):\n"
                f"Grade: {curriculum.grade}\n"
                f"Topics: {', '.join(curriculum.topics)}\n"
                f"Learning Outcomes: {', '.join(curriculum.learning_outcomes)}\n"
            )

        history = format_history(context, self.history_turns, heading="PREVIOUS CONVERSATION CONTEXT:",
                                 truncate=200, upper_roles=True)
        if history:
            sections.append(history)

        sections.append(self.output_instruction(
            structured,
            "Create comprehensive, pedagogically sound educational content with clear learning "
            "objectives, scaffolded progression, Indian cultural context, assessment strategies "
            "and clear headings.",
        ))
        return "\n".join(sections)

    def score_confidence(self, content: str, request: AIRequest) -> float:
        confidence = self.baseline_confidence
        confidence += 0.08 * count_matches([
            r"learning objectives?", r"assessment", r"activity|exercise", r"bloom'?s taxonomy",
            r"scaffolding", r"differentiat",
        ], content)
        confidence += 0.05 * count_matches([
            r"prior knowledge", r"formative assessment", r"summative assessment",
            r"real-world application", r"constructivist",
        ], content)
        confidence += 0.04 * count_matches([r"indian context", r"cbse|icse", r"cultural"], content)

        if len(content) > 800:
            confidence += 0.1
        if len(content.split("\n")) > 15:
            confidence += 0.08
        if "#" in content or "**" in content:
            confidence += 0.05

        metadata = request.metadata or {}
        if metadata.get("subject"):
            confidence += 0.06
        if metadata.get("level"):
            confidence += 0.04
        return confidence

    def extract_metadata(self, content: str, request: AIRequest) -> Dict[str, Any]:
        metadata = request.metadata or {}
        return {
            "content_type": first_match(CONTENT_TYPE_PATTERNS, content, "general"),
            "subject": metadata.get("subject"),
            "level": metadata.get("level"),
            "format": first_match(FORMAT_PATTERNS, content, "text"),
            "interactivity": self.detect_interactivity_level(content),
            "pedagogical_approach": all_matches(PEDAGOGY_PATTERNS, content),
            "blooms_levels": all_matches(BLOOMS_PATTERNS, content),
            "cultural_relevance": count_matches(CULTURAL_PATTERNS, content) / len(CULTURAL_PATTERNS),
            "assessment_integration": matches(r"assessment|evaluate|quiz|test|rubric|formative|summative", content),
            "multimodal_elements": all_matches(MODALITY_PATTERNS, content),
        }

    @staticmethod
    def detect_requested_content_type(prompt: str) -> str:
        return first_match(REQUESTED_TYPE_PATTERNS, prompt, "lesson")

    @staticmethod
    def curriculum_alignment(metadata: Optional[Dict[str, Any]]) -> Optional[CurriculumAlignment]:
        if not metadata or not metadata.get("subject"):
            return None
        standards = CURRICULUM_STANDARDS.get(str(metadata["subject"]).lower())
        if not standards:
            return None
        level = str(metadata.get("level") or "").lower()
        if level:
            for standard in standards:
                if level in standard.grade.lower():
                    return standard
        return standards[0]

    @staticmethod
    def detect_interactivity_level(content: str) -> str:
        score = count_matches(INTERACTIVITY_PATTERNS, content)
        if score >= 5:
            return "very_high"
        if score >= 3:
            return "high"
        if score >= 2:
            return "medium"
        if score >= 1:
            return "low"
        return "passive"
