"""Serialization of recommendation results.

Builds the document downstream export and report tooling consumes:
a generation timestamp, the answers echoed back with option labels,
and every ranked result with its breakdown and reasons.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from . import __version__
from .questions import get_question
from .schema import (
    AnswerSet,
    ConfidenceLevel,
    MatchLevel,
    Question,
    QuestionCategory,
    ScoreBreakdown,
    ScoreResult,
    build_answer_set,
)


class AnswerEcho(BaseModel):
    """An answer as it appears in an export."""
    question_id: str
    question_text: Optional[str] = None
    category: Optional[QuestionCategory] = None
    value: Any
    labels: list[str] = Field(default_factory=list)


class ExportedRecommendation(BaseModel):
    """One ranked result, flattened for reports."""
    rank: int
    candidate_id: str
    candidate_name: str
    total_score: float
    match_level: MatchLevel
    confidence: float
    confidence_level: ConfidenceLevel
    breakdown: ScoreBreakdown
    strengths: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    differentiators: list[str] = Field(default_factory=list)


class RecommendationExport(BaseModel):
    """Complete export document."""
    engine_version: str = Field(default=__version__)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    answers: list[AnswerEcho] = Field(default_factory=list)
    recommendations: list[ExportedRecommendation] = Field(default_factory=list)


def _labels(question: Optional[Question], value: Any) -> list[str]:
    if question is None or not question.options:
        return []
    items = value if isinstance(value, (list, tuple)) else [value]
    labels = []
    for item in items:
        label = question.option_label(item)
        if label is not None:
            labels.append(label)
    return labels


def echo_answers(
    answers: AnswerSet,
    questions: Optional[list[Question]] = None,
) -> list[AnswerEcho]:
    """Answers with question text and option labels where known."""
    echoed = []
    for question_id, answer in answers.items():
        question = get_question(question_id, questions)
        echoed.append(AnswerEcho(
            question_id=question_id,
            question_text=question.text if question else None,
            category=question.category if question else None,
            value=answer.value,
            labels=_labels(question, answer.value),
        ))
    return echoed


def export_recommendation(result: ScoreResult) -> ExportedRecommendation:
    return ExportedRecommendation(
        rank=result.rank,
        candidate_id=result.candidate.id,
        candidate_name=result.candidate.display_name,
        total_score=result.total_score,
        match_level=result.match_level,
        confidence=result.confidence,
        confidence_level=result.confidence_level,
        breakdown=result.breakdown,
        strengths=list(result.reasons.strengths),
        concerns=list(result.reasons.concerns),
        differentiators=list(result.reasons.differentiators),
    )


def build_export(
    results: list[ScoreResult],
    answers: dict[str, Any],
    questions: Optional[list[Question]] = None,
    generated_at: Optional[datetime] = None,
) -> RecommendationExport:
    """Build the export document for a ranked result list.

    Args:
        results: Ranked results from the engine
        answers: The AnswerSet (or raw mapping) the results were computed from
        questions: Question catalog used for labels; defaults to the bundled one
        generated_at: Timestamp override; defaults to now (UTC)

    Returns:
        RecommendationExport ready for JSON serialization
    """
    export = RecommendationExport(
        answers=echo_answers(build_answer_set(answers), questions),
        recommendations=[export_recommendation(r) for r in results],
    )
    if generated_at is not None:
        export = export.model_copy(update={"generated_at": generated_at})
    return export


def export_json(
    results: list[ScoreResult],
    answers: dict[str, Any],
    questions: Optional[list[Question]] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """Export document as indented JSON."""
    return build_export(results, answers, questions, generated_at).model_dump_json(indent=2)


def export_csv_rows(results: list[ScoreResult]) -> list[dict[str, Any]]:
    """Flatten ranked results to one row per candidate."""
    rows = []
    for result in results:
        rows.append({
            "rank": result.rank,
            "candidate_id": result.candidate.id,
            "candidate_name": result.candidate.display_name,
            "total_score": round(result.total_score, 1),
            "match_level": result.match_level.value,
            "confidence": round(result.confidence, 1),
            "confidence_level": result.confidence_level.value,
            "requirements": round(result.breakdown.requirements, 1),
            "constraints": round(result.breakdown.constraints, 1),
            "priorities": round(result.breakdown.priorities, 1),
            "strengths": "; ".join(result.reasons.strengths),
            "concerns": "; ".join(result.reasons.concerns),
            "differentiators": "; ".join(result.reasons.differentiators),
        })
    return rows
