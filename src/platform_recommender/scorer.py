"""Scorer - sub-scores, total score and confidence.

Scores one candidate against an answer set. Requirements and priorities
use an accumulate/maximum pattern so partially completed questionnaires
are normalized over the questions actually answered; constraints start at
100 and only apply penalties and bonuses.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from .config import RecommenderConfig, get_config
from .rules import (
    CONSTRAINT_RULES,
    MAX_CONTRIBUTION,
    PRIORITY_RULES,
    REQUIREMENT_RULES,
    QuestionId,
    RuleFunction,
)
from .schema import (
    AnswerSet,
    Candidate,
    ConfidenceLevel,
    MatchLevel,
    ScoreBreakdown,
)


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp to [low, high]; NaN reads as low."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def count_answered(answers: AnswerSet) -> int:
    """Number of answers to recognized questions."""
    return sum(1 for key in answers if QuestionId.from_string(key) is not None)


@dataclass
class NormalizedScore:
    """Accumulated points against the maximum achievable for a category."""
    accumulated: float = 0.0
    maximum: float = 0.0
    contributions: dict[QuestionId, float] = field(default_factory=dict)

    def add(self, question_id: QuestionId, contribution: float) -> None:
        self.contributions[question_id] = contribution
        self.accumulated += contribution
        self.maximum += MAX_CONTRIBUTION

    @property
    def value(self) -> float:
        """Percentage of the maximum, or 0 when nothing was answered."""
        if self.maximum == 0:
            return 0.0
        return self.accumulated / self.maximum * 100


class PlatformScorer:
    """Scores candidates against a questionnaire answer set.

    Scoring principles:
    - Only answered, recognized questions count
    - An answer the rules cannot interpret still consumes its slot
    - Constraints are deal-breakers: they start perfect and only adjust
    - Scores never depend on anything but the candidate and the answers

    Configuration:
    - Weights, confidence rules and lookup tables come from
      recommender-config.yaml or the injected RecommenderConfig
    """

    def __init__(self, config: Optional[RecommenderConfig] = None):
        """Initialize scorer with optional configuration."""
        self.config = config or get_config()
        self.tables = self.config.rule_tables
        self.weights = self.config.scoring_weights

    def _accumulate(
        self,
        rules: dict[QuestionId, RuleFunction],
        candidate: Candidate,
        answers: AnswerSet,
    ) -> NormalizedScore:
        result = NormalizedScore()
        for question_id, rule in rules.items():
            answer = answers.get(question_id.value)
            if answer is None:
                continue
            result.add(question_id, rule(answer.value, candidate, self.tables))
        return result

    def requirements(self, candidate: Candidate, answers: AnswerSet) -> NormalizedScore:
        """Capability fit for the answered requirements questions."""
        return self._accumulate(REQUIREMENT_RULES, candidate, answers)

    def priorities(self, candidate: Candidate, answers: AnswerSet) -> NormalizedScore:
        """Fit against the answered priorities questions."""
        return self._accumulate(PRIORITY_RULES, candidate, answers)

    def constraint_adjustments(self, candidate: Candidate, answers: AnswerSet) -> dict[QuestionId, float]:
        """Penalty/bonus per answered constraint question."""
        adjustments = {}
        for question_id, rule in CONSTRAINT_RULES.items():
            answer = answers.get(question_id.value)
            if answer is None:
                continue
            adjustments[question_id] = rule(answer.value, candidate, self.tables)
        return adjustments

    def score_requirements(self, candidate: Candidate, answers: AnswerSet) -> float:
        # Out-of-range catalog scores or table overrides can exceed 100
        return _clamp(self.requirements(candidate, answers).value)

    def score_constraints(self, candidate: Candidate, answers: AnswerSet) -> float:
        """Running score from 100; may exceed 100 before the final clamp."""
        running = 100.0
        for delta in self.constraint_adjustments(candidate, answers).values():
            running += delta
        return _clamp(running)

    def score_priorities(self, candidate: Candidate, answers: AnswerSet) -> float:
        # Long ranked lists can carry negative rank weights
        return _clamp(self.priorities(candidate, answers).value)

    def breakdown(self, candidate: Candidate, answers: AnswerSet) -> ScoreBreakdown:
        """All three sub-scores for a candidate."""
        return ScoreBreakdown(
            requirements=self.score_requirements(candidate, answers),
            constraints=self.score_constraints(candidate, answers),
            priorities=self.score_priorities(candidate, answers),
        )

    def total_score(self, breakdown: ScoreBreakdown) -> float:
        """Weighted sum of the sub-scores."""
        total = (
            breakdown.requirements * self.weights.requirements
            + breakdown.constraints * self.weights.constraints
            + breakdown.priorities * self.weights.priorities
        )
        # Float drift only; the weights sum to 1
        return _clamp(total)

    def confidence(
        self,
        candidate: Candidate,
        breakdown: ScoreBreakdown,
        answer_count: int,
    ) -> float:
        """Heuristic trust in the total score, independent of its size."""
        cfg = self.config.confidence
        confidence = cfg.base

        average = breakdown.average
        if average >= cfg.high_average_threshold:
            confidence += cfg.high_average_bonus
        elif average >= cfg.good_average_threshold:
            confidence += cfg.good_average_bonus
        elif average < cfg.low_average_threshold:
            confidence -= cfg.low_average_penalty

        # Likely deal-breaker
        if breakdown.constraints < cfg.deal_breaker_threshold:
            confidence -= cfg.deal_breaker_penalty

        if candidate.market_share > cfg.market_share_threshold:
            confidence += cfg.market_share_bonus

        if answer_count < cfg.few_answers_threshold:
            confidence -= cfg.few_answers_penalty
        elif answer_count >= cfg.many_answers_threshold:
            confidence += cfg.many_answers_bonus

        return _clamp(confidence)

    def match_level(self, total_score: float) -> MatchLevel:
        levels = self.config.match_levels
        if total_score >= levels.excellent:
            return MatchLevel.EXCELLENT
        if total_score >= levels.good:
            return MatchLevel.GOOD
        if total_score >= levels.fair:
            return MatchLevel.FAIR
        return MatchLevel.POOR

    def confidence_level(self, confidence: float) -> ConfidenceLevel:
        levels = self.config.confidence_levels
        if confidence >= levels.very_high:
            return ConfidenceLevel.VERY_HIGH
        if confidence >= levels.high:
            return ConfidenceLevel.HIGH
        if confidence >= levels.medium:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW
