"""Shared fixtures for the platform recommender tests."""

import pytest

from platform_recommender.config import reset_config
from platform_recommender.schema import Candidate


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Every test starts from the default configuration."""
    monkeypatch.delenv("PLATFORM_RECOMMENDER_CONFIG", raising=False)
    reset_config()
    yield
    reset_config()


def make_candidate(candidate_id: str = "test-platform", **overrides) -> Candidate:
    """Build a candidate with neutral defaults."""
    base = {
        "id": candidate_id,
        "name": candidate_id.replace("-", " ").title(),
        "category": "specialized",
        "price": 30,
        "certifications": [],
        "market_share": 0,
        "context_tokens": 0,
        "growth_rate": 0,
        "implementation_time": "",
        "scores": {},
    }
    base.update(overrides)
    return Candidate(**base)


@pytest.fixture
def worked_candidate() -> Candidate:
    """A Microsoft-preferred candidate with strong data analysis."""
    return make_candidate(
        "copilot",
        name="Microsoft Copilot",
        category="enterprise",
        price=30,
        certifications=["SOC2", "HIPAA", "GDPR", "ISO27001"],
        market_share=85,
        scores={"data_analysis": 10},
    )


@pytest.fixture
def worked_answers() -> dict:
    return {
        "primary-use-case": "data-analysis",
        "budget-ceiling": 50,
        "required-certificates": ["SOC2", "HIPAA"],
        "ecosystem": "microsoft",
    }
