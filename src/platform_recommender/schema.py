"""Pydantic models for the Platform Recommendation Engine.

Input schemas for the candidate catalog, the questionnaire and the user's
answers, and output schemas for scored recommendations.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================


class Capability(str, Enum):
    """Capability dimensions scored 0-10 for every candidate."""
    CODE_GENERATION = "code_generation"
    CREATIVE_WRITING = "creative_writing"
    DATA_ANALYSIS = "data_analysis"
    CUSTOMER_SERVICE = "customer_service"
    COMPLIANCE_WORK = "compliance_work"
    AGENT_CAPABILITIES = "agent_capabilities"
    API_ACCESS = "api_access"
    CUSTOMIZATION = "customization"
    MULTILINGUAL = "multilingual"
    REASONING = "reasoning"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'data analysis'."""
        return self.value.replace("_", " ")


class QuestionCategory(str, Enum):
    """Which sub-score a question feeds."""
    REQUIREMENTS = "requirements"
    CONSTRAINTS = "constraints"
    PRIORITIES = "priorities"


class QuestionType(str, Enum):
    """Shape of the answer value a question expects."""
    SINGLE_SELECT = "single-select"
    MULTI_SELECT = "multi-select"
    NUMERIC_RANGE = "numeric-range"
    BOOLEAN = "boolean"
    RANKED_LIST = "ranked-list"


class MatchLevel(str, Enum):
    """Label for a total score."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ConfidenceLevel(str, Enum):
    """Label for a confidence estimate."""
    VERY_HIGH = "very_high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# =============================================================================
# Candidate Catalog
# =============================================================================


class Candidate(BaseModel):
    """A platform being ranked. Read-only to the engine."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    provider: Optional[str] = None
    category: str
    price: float = Field(..., description="Monthly price per user")
    certifications: list[str] = Field(default_factory=list)
    market_share: float = Field(0.0, description="Market share percentage (0-100)")
    context_tokens: int = 0
    growth_rate: float = Field(0.0, description="Growth rate percentage")
    implementation_time: str = ""
    scores: dict[str, float] = Field(
        default_factory=dict,
        description="Capability name -> score (0-10)"
    )

    # Descriptive metadata used by the explainer only
    tier: Optional[str] = None
    multimodal: Optional[str] = None
    strengths: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def capability(self, name: str) -> float:
        """Score for a capability dimension; absent dimensions read as 0."""
        if not isinstance(name, str):
            return 0.0
        return float(self.scores.get(name, 0.0))

    def has_certification(self, certification: Any) -> bool:
        return certification in self.certifications


class CandidateCatalog(BaseModel):
    """Ordered candidate catalog as stored on disk."""
    version: str = "1.0.0"
    candidates: list[Candidate]

    @property
    def total_candidates(self) -> int:
        return len(self.candidates)


# =============================================================================
# Questionnaire
# =============================================================================


class QuestionOption(BaseModel):
    """An option for a select or ranked-list question."""
    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    description: Optional[str] = None


class RangeConfig(BaseModel):
    """Bounds for a numeric-range question."""
    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    step: float = 1
    unit: str = ""


class Question(BaseModel):
    """A questionnaire question. The weight is informational only."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    help_text: Optional[str] = None
    category: QuestionCategory
    type: QuestionType
    weight: float = 1.0
    options: list[QuestionOption] = Field(default_factory=list)
    range: Optional[RangeConfig] = None

    def option_label(self, value: Any) -> Optional[str]:
        """Label for an option value, if the question defines one."""
        for option in self.options:
            if option.value == value:
                return option.label
        return None


class Answer(BaseModel):
    """A user's answer to one question.

    The value shape follows the question type: a string for single-select,
    a list for multi-select and ranked-list, a number for numeric-range and
    a bool for boolean questions.
    """
    model_config = ConfigDict(frozen=True)

    question_id: str
    value: Any


# Question id -> answer. Partial answer sets are expected.
AnswerSet = dict[str, Answer]


def build_answer_set(values: dict[str, Any]) -> AnswerSet:
    """Build an AnswerSet from raw values or Answer objects."""
    answers: AnswerSet = {}
    for question_id, value in values.items():
        if isinstance(value, Answer):
            answers[question_id] = value
        else:
            answers[question_id] = Answer(question_id=question_id, value=value)
    return answers


# =============================================================================
# Scoring Output
# =============================================================================


class ScoreBreakdown(BaseModel):
    """The three weighted sub-scores."""
    model_config = ConfigDict(frozen=True)

    requirements: float = Field(..., ge=0, le=100)
    constraints: float = Field(..., ge=0, le=100)
    priorities: float = Field(..., ge=0, le=100)

    @property
    def average(self) -> float:
        return (self.requirements + self.constraints + self.priorities) / 3


class RecommendationReasons(BaseModel):
    """Short statements explaining a score."""
    model_config = ConfigDict(frozen=True)

    strengths: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    differentiators: list[str] = Field(default_factory=list)


class ScoreResult(BaseModel):
    """A scored and ranked candidate."""
    model_config = ConfigDict(frozen=True)

    candidate: Candidate
    total_score: float = Field(..., ge=0, le=100)
    confidence: float = Field(..., ge=0, le=100)
    breakdown: ScoreBreakdown
    reasons: RecommendationReasons = Field(default_factory=RecommendationReasons)
    rank: int = Field(0, ge=0, description="1-based rank; 0 until ranked")
    match_level: MatchLevel = MatchLevel.POOR
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW
