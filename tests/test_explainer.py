"""Tests for the recommendation explainer."""

import pytest

from conftest import make_candidate
from platform_recommender.config import ReasonLimitsConfig, RecommenderConfig
from platform_recommender.explainer import RecommendationExplainer
from platform_recommender.schema import build_answer_set


@pytest.fixture
def explainer():
    return RecommendationExplainer()


def explain(explainer, candidate, **values):
    answers = build_answer_set({key.replace("_", "-"): value for key, value in values.items()})
    return explainer.explain(candidate, answers)


class TestStrengths:
    """Tests for strength statements."""

    def test_worked_example(self, explainer, worked_candidate, worked_answers):
        reasons = explainer.explain(worked_candidate, build_answer_set(worked_answers))
        assert reasons.strengths == [
            "Excellent data analysis capabilities (10/10)",
            "Strong compliance coverage (4 certifications)",
            "Proven market leader (85% market share)",
        ]
        assert reasons.concerns == []

    def test_weak_capability_not_mentioned(self, explainer):
        candidate = make_candidate(scores={"code_generation": 7.5})
        reasons = explain(explainer, candidate, primary_use_case="code")
        assert reasons.strengths == []

    def test_fast_implementation_only_when_urgent(self, explainer):
        candidate = make_candidate(implementation_time="1-2 weeks")
        urgent = explain(explainer, candidate, implementation_urgency="immediate")
        relaxed = explain(explainer, candidate, implementation_urgency="flexible")
        assert urgent.strengths == ["Fast implementation (1-2 weeks) fits your timeline"]
        assert relaxed.strengths == []

    def test_immediate_needs_the_fastest_rollout(self, explainer):
        candidate = make_candidate(implementation_time="2-4 weeks")
        assert explain(explainer, candidate, implementation_urgency="immediate").strengths == []
        assert explain(explainer, candidate, implementation_urgency="fast").strengths == [
            "Fast implementation (2-4 weeks) fits your timeline"
        ]

    def test_slow_rollout_never_fits_fast_timeline(self, explainer):
        candidate = make_candidate(implementation_time="3-6 months")
        assert explain(explainer, candidate, implementation_urgency="fast").strengths == []

    def test_rapid_growth(self, explainer):
        candidate = make_candidate(growth_rate=60)
        reasons = explain(explainer, candidate)
        assert reasons.strengths == ["Rapid growth momentum (60% year over year)"]

    def test_catalog_strengths_limited(self, explainer):
        candidate = make_candidate(strengths=["Fast", "Cheap", "Friendly"])
        reasons = explain(explainer, candidate)
        assert reasons.strengths == ["Fast", "Cheap"]

    def test_strengths_capped(self):
        config = RecommenderConfig(reason_limits=ReasonLimitsConfig(max_strengths=2))
        explainer = RecommendationExplainer(config)
        candidate = make_candidate(market_share=60, growth_rate=80, strengths=["Fast"])
        reasons = explain(explainer, candidate)
        assert len(reasons.strengths) == 2


class TestConcerns:
    """Tests for concern statements."""

    def test_budget_overage(self, explainer):
        candidate = make_candidate(price=60)
        reasons = explain(explainer, candidate, budget_ceiling=40)
        assert reasons.concerns == ["Exceeds budget by 50% ($60/user vs $40)"]

    def test_budget_zero_ceiling(self, explainer):
        candidate = make_candidate(price=10)
        reasons = explain(explainer, candidate, budget_ceiling=0)
        assert reasons.concerns == ["Exceeds budget ($10/user vs $0)"]

    def test_missing_certifications(self, explainer):
        candidate = make_candidate(certifications=["SOC2"])
        reasons = explain(explainer, candidate, required_certificates=["SOC2", "HIPAA", "FedRAMP"])
        assert reasons.concerns == ["Missing required certifications: HIPAA, FedRAMP"]

    def test_developer_tool_for_large_team(self, explainer):
        candidate = make_candidate(category="developer")
        reasons = explain(explainer, candidate, team_size=5000)
        assert reasons.concerns == ["Developer-focused; may not scale to a large organization"]

    def test_enterprise_tool_for_small_team(self, explainer):
        candidate = make_candidate(category="crm")
        reasons = explain(explainer, candidate, team_size=12)
        assert reasons.concerns == ["Enterprise-focused; may be more than a small team needs"]

    def test_mid_team_no_concern(self, explainer):
        candidate = make_candidate(category="developer")
        assert explain(explainer, candidate, team_size=500).concerns == []

    def test_ecosystem_mismatch(self, explainer):
        reasons = explain(explainer, make_candidate("gemini"), ecosystem="microsoft")
        assert reasons.concerns == ["Limited native integration with the microsoft ecosystem"]

    def test_mixed_ecosystem_no_concern(self, explainer):
        assert explain(explainer, make_candidate("gemini"), ecosystem="mixed").concerns == []

    def test_data_residency(self, explainer):
        reasons = explain(explainer, make_candidate(), data_residency=["us", "apac"])
        assert reasons.concerns == ["Data residency not natively supported: apac"]

    def test_concerns_capped(self, explainer):
        candidate = make_candidate("gemini", category="developer", price=100)
        reasons = explain(
            explainer,
            candidate,
            budget_ceiling=40,
            required_certificates=["HIPAA"],
            team_size=5000,
            ecosystem="microsoft",
            data_residency=["apac"],
        )
        assert len(reasons.concerns) == 4
        assert reasons.concerns[0].startswith("Exceeds budget by 150%")


class TestDifferentiators:
    """Tests for differentiator statements."""

    def test_all_differentiators_capped_at_three(self, explainer):
        candidate = make_candidate(
            context_tokens=2_000_000,
            tier="Primary",
            multimodal="Yes (Best-in-Class)",
            scores={"customization": 10},
        )
        reasons = explain(explainer, candidate)
        assert reasons.differentiators == [
            "Large context window (2,000,000 tokens)",
            "Primary platform",
            "Full multimodal support",
        ]

    def test_customization_preferred_over_api(self, explainer):
        candidate = make_candidate(scores={"customization": 9, "api_access": 10})
        assert explain(explainer, candidate).differentiators == ["Highly customizable"]

    def test_api_access(self, explainer):
        candidate = make_candidate(scores={"api_access": 9})
        assert explain(explainer, candidate).differentiators == ["Best-in-class API access"]

    def test_limited_multimodal_not_mentioned(self, explainer):
        candidate = make_candidate(multimodal="Limited")
        assert explain(explainer, candidate).differentiators == []


class TestBareCandidate:

    def test_no_reasons(self, explainer):
        reasons = explain(explainer, make_candidate())
        assert reasons.strengths == []
        assert reasons.concerns == []
        assert reasons.differentiators == []
