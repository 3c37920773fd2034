"""Centralized configuration management for the platform recommender."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ScoringWeightsConfig(BaseModel):
    """Weights for the three sub-scores.

    These weights control how much each sub-score contributes to the total
    match score. They must sum to 1.0 so the total stays within 0-100.
    """
    model_config = ConfigDict(frozen=True)

    requirements: float = Field(
        0.4,
        description="Weight for capability fit against stated requirements"
    )
    constraints: float = Field(
        0.4,
        description="Weight for deal-breaker constraints (budget, compliance, ecosystem, residency)"
    )
    priorities: float = Field(
        0.2,
        description="Weight for ranked priorities (capabilities, speed, context, market position)"
    )


class ConfidenceConfig(BaseModel):
    """Additive adjustments for the confidence estimate.

    Confidence starts at ``base`` and every rule below is applied once.
    """
    model_config = ConfigDict(frozen=True)

    base: float = Field(80.0, description="Starting confidence before adjustments")
    high_average_threshold: float = Field(85.0, description="Average sub-score for the high bonus")
    high_average_bonus: float = Field(10.0, description="Bonus when the average sub-score is high")
    good_average_threshold: float = Field(70.0, description="Average sub-score for the good bonus")
    good_average_bonus: float = Field(5.0, description="Bonus when the average sub-score is good")
    low_average_threshold: float = Field(50.0, description="Average sub-score below which a penalty applies")
    low_average_penalty: float = Field(10.0, description="Penalty when the average sub-score is low")
    deal_breaker_threshold: float = Field(60.0, description="Constraint sub-score below which a deal-breaker is likely")
    deal_breaker_penalty: float = Field(15.0, description="Penalty for a likely deal-breaker")
    market_share_threshold: float = Field(20.0, description="Market share (%) above which the platform is established")
    market_share_bonus: float = Field(5.0, description="Bonus for an established platform")
    few_answers_threshold: int = Field(5, description="Answer count below which confidence drops")
    few_answers_penalty: float = Field(10.0, description="Penalty for too few answers")
    many_answers_threshold: int = Field(10, description="Answer count at which confidence rises")
    many_answers_bonus: float = Field(5.0, description="Bonus for a thorough questionnaire")


class MatchLevelConfig(BaseModel):
    """Total-score thresholds for the match level label."""
    model_config = ConfigDict(frozen=True)

    excellent: float = Field(90.0, description="Minimum total score for an excellent match")
    good: float = Field(75.0, description="Minimum total score for a good match")
    fair: float = Field(60.0, description="Minimum total score for a fair match")


class ConfidenceLevelConfig(BaseModel):
    """Confidence thresholds for the confidence level label."""
    model_config = ConfigDict(frozen=True)

    very_high: float = Field(90.0, description="Minimum confidence for very high")
    high: float = Field(75.0, description="Minimum confidence for high")
    medium: float = Field(60.0, description="Minimum confidence for medium")


class ReasonLimitsConfig(BaseModel):
    """Caps on the explanation lists."""
    model_config = ConfigDict(frozen=True)

    max_strengths: int = Field(5, description="Maximum strengths per recommendation")
    max_concerns: int = Field(4, description="Maximum concerns per recommendation")
    max_differentiators: int = Field(3, description="Maximum differentiators per recommendation")
    max_generic_strengths: int = Field(2, description="Maximum catalog-supplied strengths included")


def _default_team_size_scores() -> dict[str, dict[str, float]]:
    return {
        "large": {"enterprise": 100, "crm": 90, "specialized": 70, "research": 60, "developer": 50, "default": 60},
        "mid": {"enterprise": 85, "crm": 85, "specialized": 85, "research": 75, "developer": 75, "default": 75},
        "small": {"enterprise": 60, "crm": 65, "specialized": 85, "research": 90, "developer": 100, "default": 80},
    }


class RuleTables(BaseModel):
    """Lookup tables behind the scoring rules.

    Bundled defaults reproduce the recommendation heuristics exactly;
    override them only to tune a deployment, not per request.
    """
    model_config = ConfigDict(frozen=True)

    use_case_capabilities: dict[str, str] = Field(
        default_factory=lambda: {
            "code": "code_generation",
            "creative": "creative_writing",
            "data-analysis": "data_analysis",
            "customer-service": "customer_service",
            "automation": "agent_capabilities",
            "research": "reasoning",
            "compliance": "compliance_work",
            "multilingual": "multilingual",
        },
        description="Primary use case -> capability dimension"
    )
    ecosystem_platforms: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "microsoft": ["copilot", "github-copilot", "copilot-studio"],
            "google": ["gemini"],
            "salesforce": ["salesforce-agentforce"],
            "slack": ["chatgpt", "claude"],
            "mixed": [],
            "other": [],
        },
        description="Ecosystem -> preferred candidate identifiers"
    )
    team_size_scores: dict[str, dict[str, float]] = Field(
        default_factory=_default_team_size_scores,
        description="Team-size bucket -> candidate category -> contribution"
    )
    large_team_threshold: int = Field(1000, description="Team size above which a team is large")
    mid_team_threshold: int = Field(100, description="Team size above which a team is mid-sized")
    implementation_speed: dict[str, float] = Field(
        default_factory=lambda: {
            "1 week": 100,
            "1-2 weeks": 100,
            "2-3 weeks": 90,
            "2-4 weeks": 80,
            "1-2 months": 60,
            "2-3 months": 45,
            "3-6 months": 30,
        },
        description="Implementation-time label -> speed rating"
    )
    default_implementation_speed: float = Field(60, description="Speed rating for unrecognized labels")
    supported_regions: list[str] = Field(
        default_factory=lambda: ["us", "eu", "uk"],
        description="Data-residency regions supported natively"
    )
    flexible_region: str = Field("global", description="Residency selection meaning no restriction")
    no_requirement: str = Field("none", description="Multi-select sentinel meaning no requirement")
    api_option: str = Field("api", description="Integration option for generic API access")


class RecommenderConfig(BaseModel):
    """Complete configuration for the platform recommender."""
    model_config = ConfigDict(frozen=True)

    scoring_weights: ScoringWeightsConfig = Field(default_factory=ScoringWeightsConfig)
    confidence: ConfidenceConfig = Field(default_factory=ConfidenceConfig)
    match_levels: MatchLevelConfig = Field(default_factory=MatchLevelConfig)
    confidence_levels: ConfidenceLevelConfig = Field(default_factory=ConfidenceLevelConfig)
    reason_limits: ReasonLimitsConfig = Field(default_factory=ReasonLimitsConfig)
    rule_tables: RuleTables = Field(default_factory=RuleTables)


CONFIG_ENV_VAR = "PLATFORM_RECOMMENDER_CONFIG"
LOCAL_CONFIG_NAMES = ("recommender-config.yaml", "recommender-config.yml")

CONFIG_HEADER = """\
# Platform Recommender Configuration
# ==================================
#
# Sub-score weights, the confidence model, match/confidence level labels,
# explanation limits and the lookup tables behind the scoring rules.
# Omitted keys keep their defaults.
#
# Discovery order:
#   1. ${env_var}
#   2. ./recommender-config.yaml or ./recommender-config.yml
#   3. ~/.config/platform-recommender/config.yaml

"""

_active: Optional[RecommenderConfig] = None


def user_config_path() -> Path:
    """Per-user configuration file location."""
    return Path.home() / ".config" / "platform-recommender" / "config.yaml"


def get_config() -> RecommenderConfig:
    """Active configuration; defaults until a file is loaded."""
    global _active
    if _active is None:
        _active = RecommenderConfig()
    return _active


def reset_config() -> None:
    """Drop any loaded file and return to the defaults."""
    global _active
    _active = RecommenderConfig()


def load_config(path: Union[str, Path]) -> RecommenderConfig:
    """Load a YAML configuration file and make it the active configuration.

    An empty file yields the defaults. Raises ValueError when the document
    is not a mapping, and pydantic's ValidationError for bad values.
    """
    global _active

    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration in {path} must be a YAML mapping, got {type(data).__name__}")

    _active = RecommenderConfig.model_validate(data)
    logger.info("Loaded configuration from %s", path)
    return _active


def _candidate_paths() -> list[Path]:
    paths = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        paths.append(Path(env_path))
    paths.extend(Path(name) for name in LOCAL_CONFIG_NAMES)
    paths.append(user_config_path())
    return paths


def find_config_file() -> Optional[Path]:
    """First existing configuration file in discovery order, if any."""
    return next((path for path in _candidate_paths() if path.exists()), None)


def save_default_config(path: Union[str, Path]) -> None:
    """Write the default configuration, with a commented header, as YAML."""
    path = Path(path)
    body = yaml.safe_dump(RecommenderConfig().model_dump(), default_flow_style=False, sort_keys=False)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(CONFIG_HEADER.replace("${env_var}", CONFIG_ENV_VAR) + body, encoding="utf-8")
