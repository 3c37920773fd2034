"""Explainer - human-readable reasons for each recommendation.

Re-runs the checks behind the scoring rules and turns the ones that
fired into short strengths, concerns and differentiators.
"""

from typing import Optional

from .config import RecommenderConfig, get_config
from .rules import (
    URGENCY_FAST,
    URGENCY_IMMEDIATE,
    QuestionId,
    budget_overage,
    missing_certifications,
    preferred_platforms,
    score_implementation_urgency,
    team_size_bucket,
    unsupported_regions,
    use_case_capability,
)
from .schema import AnswerSet, Candidate, Capability, RecommendationReasons

STRONG_CAPABILITY = 8.0
BROAD_COMPLIANCE = 4
TIMELINE_FIT_SCORE = 90.0
MARKET_LEADER_SHARE = 50.0
RAPID_GROWTH = 50.0
LARGE_CONTEXT = 200_000
HIGH_CUSTOMIZATION = 9.0
HIGH_API_ACCESS = 9.0

ENTERPRISE_CATEGORIES = ("enterprise", "crm")
DEVELOPER_CATEGORIES = ("developer",)


class RecommendationExplainer:
    """Generates strengths, concerns and differentiators for a candidate.

    Principles:
    - Every statement is backed by a rule check that fired
    - No placeholders: a statement type is omitted when its check fails
    - Each list is capped independently

    Configuration:
    - List caps can be customized via recommender-config.yaml
    """

    def __init__(self, config: Optional[RecommenderConfig] = None):
        """Initialize explainer with configuration."""
        self.config = config or get_config()
        self.tables = self.config.rule_tables
        self.limits = self.config.reason_limits

    def explain(self, candidate: Candidate, answers: AnswerSet) -> RecommendationReasons:
        """Build the capped reason lists for one candidate."""
        values = {key: answer.value for key, answer in answers.items()}

        return RecommendationReasons(
            strengths=self._strengths(candidate, values)[:self.limits.max_strengths],
            concerns=self._concerns(candidate, values)[:self.limits.max_concerns],
            differentiators=self._differentiators(candidate)[:self.limits.max_differentiators],
        )

    def _strengths(self, candidate: Candidate, values: dict) -> list[str]:
        strengths = []

        # Primary use case
        use_case = values.get(QuestionId.PRIMARY_USE_CASE.value)
        dimension = use_case_capability(use_case, self.tables)
        if dimension is not None:
            score = candidate.capability(dimension)
            if score >= STRONG_CAPABILITY:
                label = dimension.replace("_", " ")
                strengths.append(f"Excellent {label} capabilities ({score:g}/10)")

        if len(candidate.certifications) >= BROAD_COMPLIANCE:
            strengths.append(
                f"Strong compliance coverage ({len(candidate.certifications)} certifications)"
            )

        # Only when the urgency rule awarded its immediate or fast tier
        urgency = values.get(QuestionId.IMPLEMENTATION_URGENCY.value)
        if urgency in (URGENCY_IMMEDIATE, URGENCY_FAST):
            if score_implementation_urgency(urgency, candidate, self.tables) >= TIMELINE_FIT_SCORE:
                strengths.append(
                    f"Fast implementation ({candidate.implementation_time}) fits your timeline"
                )

        if candidate.market_share >= MARKET_LEADER_SHARE:
            strengths.append(f"Proven market leader ({candidate.market_share:g}% market share)")

        if candidate.growth_rate > RAPID_GROWTH:
            strengths.append(f"Rapid growth momentum ({candidate.growth_rate:g}% year over year)")

        strengths.extend(candidate.strengths[:self.limits.max_generic_strengths])
        return strengths

    def _concerns(self, candidate: Candidate, values: dict) -> list[str]:
        concerns = []

        ceiling = values.get(QuestionId.BUDGET_CEILING.value)
        overage = budget_overage(candidate.price, ceiling)
        if overage is not None:
            if overage == float("inf"):
                concerns.append(f"Exceeds budget (${candidate.price:g}/user vs ${float(ceiling):g})")
            else:
                concerns.append(
                    f"Exceeds budget by {overage * 100:.0f}% "
                    f"(${candidate.price:g}/user vs ${float(ceiling):g})"
                )

        missing = missing_certifications(
            values.get(QuestionId.REQUIRED_CERTIFICATES.value), candidate, self.tables
        )
        if missing:
            concerns.append(f"Missing required certifications: {', '.join(str(m) for m in missing)}")

        bucket = team_size_bucket(values.get(QuestionId.TEAM_SIZE.value), self.tables)
        if bucket == "large" and candidate.category in DEVELOPER_CATEGORIES:
            concerns.append("Developer-focused; may not scale to a large organization")
        elif bucket == "small" and candidate.category in ENTERPRISE_CATEGORIES:
            concerns.append("Enterprise-focused; may be more than a small team needs")

        ecosystem = values.get(QuestionId.ECOSYSTEM.value)
        preferred = preferred_platforms(ecosystem, self.tables)
        if preferred and candidate.id not in preferred:
            concerns.append(f"Limited native integration with the {ecosystem} ecosystem")

        regions = unsupported_regions(values.get(QuestionId.DATA_RESIDENCY.value), self.tables)
        if regions:
            concerns.append(
                f"Data residency not natively supported: {', '.join(str(r) for r in regions)}"
            )

        return concerns

    def _differentiators(self, candidate: Candidate) -> list[str]:
        differentiators = []

        if candidate.context_tokens >= LARGE_CONTEXT:
            differentiators.append(f"Large context window ({candidate.context_tokens:,} tokens)")

        if candidate.tier:
            differentiators.append(f"{candidate.tier} platform")

        if candidate.multimodal and candidate.multimodal.lower().startswith("yes"):
            differentiators.append("Full multimodal support")

        if candidate.capability(Capability.CUSTOMIZATION.value) >= HIGH_CUSTOMIZATION:
            differentiators.append("Highly customizable")
        elif candidate.capability(Capability.API_ACCESS.value) >= HIGH_API_ACCESS:
            differentiators.append("Best-in-class API access")

        return differentiators
