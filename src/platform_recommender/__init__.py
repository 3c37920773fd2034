"""Platform Recommendation Engine.

Ranks a catalog of candidate platforms against questionnaire answers.
"""

__version__ = "1.0.0"

from platform_recommender.engine import (
    RecommendationEngine,
    calculate_recommendations,
    rank_results,
)
from platform_recommender.export import build_export, export_json
from platform_recommender.rules import QuestionId
from platform_recommender.schema import (
    Answer,
    AnswerSet,
    Candidate,
    ScoreResult,
    build_answer_set,
)

__all__ = [
    "RecommendationEngine",
    "calculate_recommendations",
    "rank_results",
    "build_export",
    "export_json",
    "QuestionId",
    "Answer",
    "AnswerSet",
    "Candidate",
    "ScoreResult",
    "build_answer_set",
]
