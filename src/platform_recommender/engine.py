"""Recommendation engine.

Scores every candidate in the catalog against an answer set, explains
each score and returns the candidates ranked best first.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from .catalog import CatalogLoadError, load_catalog, load_default_catalog
from .config import RecommenderConfig, get_config
from .explainer import RecommendationExplainer
from .questions import pending_questions
from .rules import QuestionId
from .schema import (
    AnswerSet,
    Candidate,
    CandidateCatalog,
    Question,
    ScoreResult,
    build_answer_set,
)
from .scorer import PlatformScorer, count_answered

logger = logging.getLogger(__name__)


def rank_results(results: list[ScoreResult]) -> list[ScoreResult]:
    """Sort by total score descending and assign 1-based ranks.

    The sort is stable: exact ties keep catalog order.
    """
    ordered = sorted(results, key=lambda r: r.total_score, reverse=True)
    return [
        result.model_copy(update={"rank": position})
        for position, result in enumerate(ordered, start=1)
    ]


class RecommendationEngine:
    """Ranks a candidate catalog against questionnaire answers.

    The engine holds no state between calls apart from the loaded catalog;
    identical inputs always produce identical results.
    """

    def __init__(self, config: Optional[RecommenderConfig] = None):
        self.config = config or get_config()
        self.scorer = PlatformScorer(self.config)
        self.explainer = RecommendationExplainer(self.config)
        self.catalog: Optional[CandidateCatalog] = None

    def load_catalog(self, path: Optional[Union[str, Path]] = None) -> CandidateCatalog:
        """Load a catalog file, or the bundled catalog when no path is given."""
        self.catalog = load_catalog(path) if path else load_default_catalog()
        return self.catalog

    def score_candidate(
        self,
        candidate: Candidate,
        answers: AnswerSet,
        answer_count: Optional[int] = None,
    ) -> ScoreResult:
        """Score and explain a single candidate (unranked)."""
        if answer_count is None:
            answer_count = count_answered(answers)

        breakdown = self.scorer.breakdown(candidate, answers)
        total = self.scorer.total_score(breakdown)
        confidence = self.scorer.confidence(candidate, breakdown, answer_count)

        return ScoreResult(
            candidate=candidate,
            total_score=total,
            confidence=confidence,
            breakdown=breakdown,
            reasons=self.explainer.explain(candidate, answers),
            match_level=self.scorer.match_level(total),
            confidence_level=self.scorer.confidence_level(confidence),
        )

    def recommend(
        self,
        answers: dict[str, Any],
        candidates: Optional[list[Candidate]] = None,
        limit: Optional[int] = None,
    ) -> list[ScoreResult]:
        """Score, explain and rank candidates.

        Args:
            answers: AnswerSet, or a plain mapping of question id -> value
            candidates: Candidates to rank; defaults to the loaded catalog
            limit: Keep only the top N results after ranking

        Returns:
            One ScoreResult per candidate, best first
        """
        if candidates is None:
            if self.catalog is None:
                raise CatalogLoadError("No catalog loaded; call load_catalog() or pass candidates")
            candidates = self.catalog.candidates

        answer_set = build_answer_set(answers)
        for key in answer_set:
            if QuestionId.from_string(key) is None:
                logger.debug("Ignoring answer to unrecognized question: %s", key)

        answer_count = count_answered(answer_set)
        results = [
            self.score_candidate(candidate, answer_set, answer_count)
            for candidate in candidates
        ]
        ranked = rank_results(results)

        if limit is not None:
            ranked = ranked[:limit]
        return ranked

    def get_questions(self, answers: dict[str, Any]) -> list[Question]:
        """Questions not yet answered, in questionnaire order."""
        return pending_questions(build_answer_set(answers))


def calculate_recommendations(
    candidates: list[Candidate],
    answers: dict[str, Any],
    config: Optional[RecommenderConfig] = None,
) -> list[ScoreResult]:
    """Rank candidates against answers with a one-off engine."""
    return RecommendationEngine(config).recommend(answers, candidates=candidates)
