"""Scoring rules table.

Maps the closed set of recognized question identifiers to pure scoring
functions. Every rule has the signature ``(value, candidate, tables)`` and
returns a float:

- requirement and priority rules return a contribution in 0-100 that is
  accumulated against a 100-point maximum per answered question;
- constraint rules return a delta applied to a running score that starts
  at 100.

Rules never raise on odd answer values; anything they cannot interpret
contributes 0.
"""

from enum import Enum
from typing import Any, Callable, Optional

from .config import RuleTables
from .schema import Candidate, Capability, QuestionCategory


class QuestionId(str, Enum):
    """Question identifiers the rules table recognizes."""
    # Requirements
    PRIMARY_USE_CASE = "primary-use-case"
    TEAM_SIZE = "team-size"
    INTEGRATION_NEEDS = "integration-needs"
    # Constraints
    BUDGET_CEILING = "budget-ceiling"
    REQUIRED_CERTIFICATES = "required-certificates"
    ECOSYSTEM = "ecosystem"
    DATA_RESIDENCY = "data-residency"
    # Priorities
    PRIORITY_RANKING = "priority-ranking"
    IMPLEMENTATION_URGENCY = "implementation-urgency"
    CONTEXT_IMPORTANCE = "context-importance"
    MARKET_POSITION = "market-position"

    @classmethod
    def from_string(cls, value: Any) -> Optional["QuestionId"]:
        """Parse a question id; unrecognized ids return None."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


RuleFunction = Callable[[Any, Candidate, RuleTables], float]

MAX_CONTRIBUTION = 100.0

# Constraint constants
BUDGET_MAX_PENALTY = 50.0
BUDGET_OVERAGE_FACTOR = 30.0
BUDGET_UNDER_HALF_BONUS = 5.0
MISSING_CERTIFICATE_PENALTY = 15.0
ECOSYSTEM_MATCH_BONUS = 20.0
ECOSYSTEM_MISMATCH_PENALTY = 10.0
RESIDENCY_PENALTY = 20.0

# Priority constants
RANK_BASE_WEIGHT = 100.0
RANK_WEIGHT_STEP = 15.0
API_ACCESS_THRESHOLD = 8.0

URGENCY_IMMEDIATE = "immediate"
URGENCY_FAST = "fast"
URGENCY_STANDARD = "standard"

# Tier -> (minimum context tokens, contribution)
CONTEXT_TIERS = {
    "critical": (100_000, 100.0),
    "important": (50_000, 90.0),
    "nice": (10_000, 80.0),
}
CONTEXT_FALLBACK = 60.0

# Tier -> (minimum market share %, contribution)
MARKET_TIERS = {
    "critical": (30.0, 100.0),
    "important": (15.0, 90.0),
}
MARKET_NEUTRAL = "neutral"
MARKET_NEUTRAL_SCORE = 80.0
MARKET_UNDERDOG = "underdog"
MARKET_UNDERDOG_CEILING = 10.0
MARKET_FALLBACK = 60.0


# =============================================================================
# Value coercion
# =============================================================================


def _as_list(value: Any) -> list:
    """Normalize a multi-select or ranked-list value to a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _as_number(value: Any) -> Optional[float]:
    """Interpret a numeric answer; non-numeric values return None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _lookup(table: dict, key: Any, default: Any = None) -> Any:
    """dict.get that tolerates unhashable keys."""
    if not isinstance(key, str):
        return default
    return table.get(key, default)


# =============================================================================
# Shared lookups (also used by the explainer)
# =============================================================================


def use_case_capability(use_case: Any, tables: RuleTables) -> Optional[str]:
    """Capability dimension for a primary use case."""
    return _lookup(tables.use_case_capabilities, use_case)


def preferred_platforms(ecosystem: Any, tables: RuleTables) -> list[str]:
    """Preferred candidate ids for an ecosystem (empty when none)."""
    return _lookup(tables.ecosystem_platforms, ecosystem, [])


def team_size_bucket(size: Any, tables: RuleTables) -> Optional[str]:
    """Bucket a team size into 'large', 'mid' or 'small'."""
    number = _as_number(size)
    if number is None:
        return None
    if number > tables.large_team_threshold:
        return "large"
    if number > tables.mid_team_threshold:
        return "mid"
    return "small"


def implementation_speed(label: str, tables: RuleTables) -> float:
    """Speed rating for an implementation-time label."""
    return _lookup(tables.implementation_speed, label, tables.default_implementation_speed)


def required_certifications(value: Any, tables: RuleTables) -> list[str]:
    """Required certificate names, without the 'none' sentinel or repeats."""
    required = []
    for item in _as_list(value):
        if item == tables.no_requirement or item in required:
            continue
        required.append(item)
    return required


def missing_certifications(value: Any, candidate: Candidate, tables: RuleTables) -> list[str]:
    """Required certificates the candidate does not hold."""
    return [c for c in required_certifications(value, tables) if not candidate.has_certification(c)]


def budget_overage(price: float, ceiling: Any) -> Optional[float]:
    """Overage ratio (price - ceiling) / ceiling, or None when within budget."""
    limit = _as_number(ceiling)
    if limit is None or price <= limit:
        return None
    if limit <= 0:
        return float("inf")
    return (price - limit) / limit


def unsupported_regions(value: Any, tables: RuleTables) -> list[str]:
    """Residency selections outside the natively supported regions.

    Empty when any selection is the flexible/global sentinel.
    """
    selections = _as_list(value)
    if tables.flexible_region in selections:
        return []
    return [s for s in selections if s not in tables.supported_regions]


# =============================================================================
# Requirements rules (contribution 0-100)
# =============================================================================


def score_primary_use_case(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Candidate's score on the use case's capability, rescaled to 0-100."""
    dimension = use_case_capability(value, tables)
    if dimension is None:
        return 0.0
    return candidate.capability(dimension) * 10


def score_team_size(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Fixed contribution per (team-size bucket, candidate category)."""
    bucket = team_size_bucket(value, tables)
    if bucket is None:
        return 0.0
    row = tables.team_size_scores.get(bucket, {})
    return float(row.get(candidate.category, row.get("default", 0.0)))


def score_integration_needs(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Average fit across the selected integrations, capped at 100."""
    selections = _as_list(value)
    if not selections:
        return 0.0

    total = 0.0
    for option in selections:
        if candidate.id in preferred_platforms(option, tables):
            total += 100
        elif option == tables.api_option:
            total += 90 if candidate.capability(Capability.API_ACCESS.value) >= API_ACCESS_THRESHOLD else 50
        elif option == tables.no_requirement:
            total += 70
        else:
            total += 50

    return min(MAX_CONTRIBUTION, total / len(selections))


# =============================================================================
# Constraint rules (delta on a running score)
# =============================================================================


def adjust_budget(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Penalty proportional to overage, or a bonus when well under budget."""
    ceiling = _as_number(value)
    if ceiling is None:
        return 0.0

    overage = budget_overage(candidate.price, ceiling)
    if overage is not None:
        return -min(BUDGET_MAX_PENALTY, overage * BUDGET_OVERAGE_FACTOR)
    if candidate.price < ceiling / 2:
        return BUDGET_UNDER_HALF_BONUS
    return 0.0


def adjust_certificates(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Fixed penalty per missing required certificate."""
    return -MISSING_CERTIFICATE_PENALTY * len(missing_certifications(value, candidate, tables))


def adjust_ecosystem(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Bonus for a preferred candidate, penalty for the rest.

    Ecosystems without a preferred list have no effect.
    """
    preferred = preferred_platforms(value, tables)
    if not preferred:
        return 0.0
    if candidate.id in preferred:
        return ECOSYSTEM_MATCH_BONUS
    return -ECOSYSTEM_MISMATCH_PENALTY


def adjust_data_residency(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Flat penalty when any required region is not supported natively."""
    if unsupported_regions(value, tables):
        return -RESIDENCY_PENALTY
    return 0.0


# =============================================================================
# Priority rules (contribution 0-100)
# =============================================================================


def score_priority_ranking(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Rank-weighted capability scores, averaged over the list.

    Rank i gets weight 100 - 15*i; long lists reach negative weights.
    """
    ranked = _as_list(value)
    if not ranked:
        return 0.0

    total = 0.0
    for index, capability in enumerate(ranked):
        weight = RANK_BASE_WEIGHT - RANK_WEIGHT_STEP * index
        total += weight * (candidate.capability(capability) / 10)
    return total / len(ranked)


def score_implementation_urgency(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Combine the urgency tier with the candidate's speed rating."""
    speed = implementation_speed(candidate.implementation_time, tables)
    if value == URGENCY_IMMEDIATE and speed >= 90:
        return 100.0
    if value == URGENCY_FAST and speed >= 70:
        return 90.0
    if value == URGENCY_STANDARD:
        return 80.0
    return 70.0


def score_context_importance(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Threshold context capacity against the tier's cutoff."""
    tier = _lookup(CONTEXT_TIERS, value)
    if tier is not None:
        cutoff, score = tier
        if candidate.context_tokens >= cutoff:
            return score
    return CONTEXT_FALLBACK


def score_market_position(value: Any, candidate: Candidate, tables: RuleTables) -> float:
    """Threshold market share; 'underdog' rewards small players instead."""
    share = candidate.market_share
    if value == MARKET_NEUTRAL:
        return MARKET_NEUTRAL_SCORE
    if value == MARKET_UNDERDOG:
        return 100.0 if share < MARKET_UNDERDOG_CEILING else MARKET_FALLBACK

    tier = _lookup(MARKET_TIERS, value)
    if tier is None:
        return 0.0
    cutoff, score = tier
    return score if share >= cutoff else MARKET_FALLBACK


# =============================================================================
# Registry
# =============================================================================


REQUIREMENT_RULES: dict[QuestionId, RuleFunction] = {
    QuestionId.PRIMARY_USE_CASE: score_primary_use_case,
    QuestionId.TEAM_SIZE: score_team_size,
    QuestionId.INTEGRATION_NEEDS: score_integration_needs,
}

CONSTRAINT_RULES: dict[QuestionId, RuleFunction] = {
    QuestionId.BUDGET_CEILING: adjust_budget,
    QuestionId.REQUIRED_CERTIFICATES: adjust_certificates,
    QuestionId.ECOSYSTEM: adjust_ecosystem,
    QuestionId.DATA_RESIDENCY: adjust_data_residency,
}

PRIORITY_RULES: dict[QuestionId, RuleFunction] = {
    QuestionId.PRIORITY_RANKING: score_priority_ranking,
    QuestionId.IMPLEMENTATION_URGENCY: score_implementation_urgency,
    QuestionId.CONTEXT_IMPORTANCE: score_context_importance,
    QuestionId.MARKET_POSITION: score_market_position,
}

RULES_BY_CATEGORY: dict[QuestionCategory, dict[QuestionId, RuleFunction]] = {
    QuestionCategory.REQUIREMENTS: REQUIREMENT_RULES,
    QuestionCategory.CONSTRAINTS: CONSTRAINT_RULES,
    QuestionCategory.PRIORITIES: PRIORITY_RULES,
}


def category_of(question_id: QuestionId) -> QuestionCategory:
    """Category whose sub-score a recognized question feeds."""
    for category, rules in RULES_BY_CATEGORY.items():
        if question_id in rules:
            return category
    raise KeyError(question_id)
