"""Tests for the scoring rules table."""

import pytest

from conftest import make_candidate
from platform_recommender.config import RuleTables
from platform_recommender.rules import (
    CONSTRAINT_RULES,
    PRIORITY_RULES,
    REQUIREMENT_RULES,
    QuestionId,
    adjust_budget,
    adjust_certificates,
    adjust_data_residency,
    adjust_ecosystem,
    category_of,
    implementation_speed,
    missing_certifications,
    score_context_importance,
    score_implementation_urgency,
    score_integration_needs,
    score_market_position,
    score_primary_use_case,
    score_priority_ranking,
    score_team_size,
    team_size_bucket,
)
from platform_recommender.schema import Capability, QuestionCategory


TABLES = RuleTables()


class TestQuestionId:
    """Tests for the closed question id set."""

    def test_from_string_recognized(self):
        assert QuestionId.from_string("budget-ceiling") is QuestionId.BUDGET_CEILING

    def test_from_string_unrecognized(self):
        assert QuestionId.from_string("favourite-colour") is None

    def test_from_string_unhashable(self):
        assert QuestionId.from_string(["budget-ceiling"]) is None

    def test_every_id_has_exactly_one_rule(self):
        registered = list(REQUIREMENT_RULES) + list(CONSTRAINT_RULES) + list(PRIORITY_RULES)
        assert sorted(registered) == sorted(QuestionId)
        assert len(registered) == len(set(registered))

    def test_category_of(self):
        assert category_of(QuestionId.TEAM_SIZE) == QuestionCategory.REQUIREMENTS
        assert category_of(QuestionId.ECOSYSTEM) == QuestionCategory.CONSTRAINTS
        assert category_of(QuestionId.MARKET_POSITION) == QuestionCategory.PRIORITIES


class TestRequirementRules:
    """Tests for requirement contributions."""

    def test_primary_use_case_rescales_capability(self):
        candidate = make_candidate(scores={"code_generation": 9})
        assert score_primary_use_case("code", candidate, TABLES) == 90

    def test_primary_use_case_unmapped_value(self):
        candidate = make_candidate(scores={"code_generation": 9})
        assert score_primary_use_case("poetry", candidate, TABLES) == 0

    def test_primary_use_case_missing_capability(self):
        candidate = make_candidate(scores={})
        assert score_primary_use_case("research", candidate, TABLES) == 0

    @pytest.mark.parametrize("size,bucket", [
        (5000, "large"),
        (1001, "large"),
        (1000, "mid"),
        (101, "mid"),
        (100, "small"),
        (1, "small"),
        ("250", "mid"),
    ])
    def test_team_size_bucket(self, size, bucket):
        assert team_size_bucket(size, TABLES) == bucket

    def test_team_size_bucket_not_a_number(self):
        assert team_size_bucket("lots", TABLES) is None

    @pytest.mark.parametrize("size,category,expected", [
        (5000, "enterprise", 100),
        (5000, "crm", 90),
        (5000, "developer", 50),
        (20, "developer", 100),
        (20, "enterprise", 60),
        (500, "specialized", 85),
    ])
    def test_team_size_lookup(self, size, category, expected):
        candidate = make_candidate(category=category)
        assert score_team_size(size, candidate, TABLES) == expected

    def test_team_size_unknown_category_uses_bucket_default(self):
        candidate = make_candidate(category="hardware")
        assert score_team_size(5000, candidate, TABLES) == 60

    def test_integration_preferred_and_api(self):
        candidate = make_candidate("copilot", scores={"api_access": 9})
        assert score_integration_needs(["microsoft", "api"], candidate, TABLES) == 95

    def test_integration_api_below_threshold(self):
        candidate = make_candidate(scores={"api_access": 7})
        assert score_integration_needs(["api"], candidate, TABLES) == 50

    def test_integration_none_is_neutral(self):
        assert score_integration_needs(["none"], make_candidate(), TABLES) == 70

    def test_integration_other_is_low(self):
        candidate = make_candidate("gemini")
        assert score_integration_needs(["microsoft"], candidate, TABLES) == 50

    def test_integration_empty_selection(self):
        assert score_integration_needs([], make_candidate(), TABLES) == 0

    def test_integration_single_string_value(self):
        candidate = make_candidate("gemini")
        assert score_integration_needs("google", candidate, TABLES) == 100


class TestConstraintRules:
    """Tests for constraint adjustments."""

    def test_budget_overage_penalty(self):
        candidate = make_candidate(price=60)
        assert adjust_budget(40, candidate, TABLES) == pytest.approx(-15)

    def test_budget_penalty_capped(self):
        candidate = make_candidate(price=200)
        assert adjust_budget(40, candidate, TABLES) == -50

    def test_budget_under_half_bonus(self):
        candidate = make_candidate(price=15)
        assert adjust_budget(40, candidate, TABLES) == 5

    def test_budget_exactly_half_no_bonus(self):
        candidate = make_candidate(price=20)
        assert adjust_budget(40, candidate, TABLES) == 0

    def test_budget_zero_ceiling(self):
        candidate = make_candidate(price=10)
        assert adjust_budget(0, candidate, TABLES) == -50

    def test_budget_not_a_number(self):
        assert adjust_budget("cheap", make_candidate(), TABLES) == 0

    def test_certificates_penalty_per_missing(self):
        candidate = make_candidate(certifications=["SOC2"])
        assert adjust_certificates(["SOC2", "HIPAA", "GDPR"], candidate, TABLES) == -30

    def test_certificates_none_sentinel(self):
        candidate = make_candidate(certifications=[])
        assert adjust_certificates(["none"], candidate, TABLES) == 0

    def test_missing_certifications_ignores_repeats(self):
        candidate = make_candidate(certifications=[])
        assert missing_certifications(["HIPAA", "HIPAA", "none"], candidate, TABLES) == ["HIPAA"]

    def test_ecosystem_bonus(self):
        assert adjust_ecosystem("microsoft", make_candidate("copilot"), TABLES) == 20

    def test_ecosystem_penalty(self):
        assert adjust_ecosystem("microsoft", make_candidate("gemini"), TABLES) == -10

    @pytest.mark.parametrize("ecosystem", ["mixed", "other", "oracle"])
    def test_ecosystem_without_preferences_has_no_effect(self, ecosystem):
        assert adjust_ecosystem(ecosystem, make_candidate("copilot"), TABLES) == 0

    @pytest.mark.parametrize("regions,expected", [
        (["us", "eu"], 0),
        (["us", "apac"], -20),
        (["apac", "canada"], -20),
        (["apac", "global"], 0),
        ([], 0),
    ])
    def test_data_residency(self, regions, expected):
        assert adjust_data_residency(regions, make_candidate(), TABLES) == expected


class TestPriorityRules:
    """Tests for priority contributions."""

    def test_ranking_linear_weights(self):
        candidate = make_candidate(scores={"code_generation": 10, "reasoning": 8})
        score = score_priority_ranking(["code_generation", "reasoning"], candidate, TABLES)
        assert score == pytest.approx((100 + 85 * 0.8) / 2)

    def test_ranking_weights_go_negative(self):
        ranked = [c.value for c in Capability]
        assert ranked[-1] == "reasoning"
        candidate = make_candidate(scores={"reasoning": 10})
        assert score_priority_ranking(ranked, candidate, TABLES) == pytest.approx(-3.5)

    def test_ranking_unknown_capability(self):
        candidate = make_candidate(scores={"reasoning": 10})
        assert score_priority_ranking(["telepathy"], candidate, TABLES) == 0

    def test_implementation_speed_lookup(self):
        assert implementation_speed("1-2 weeks", TABLES) == 100
        assert implementation_speed("3-6 months", TABLES) == 30
        assert implementation_speed("someday", TABLES) == 60

    @pytest.mark.parametrize("urgency,time,expected", [
        ("immediate", "1-2 weeks", 100),
        ("immediate", "2-4 weeks", 70),
        ("fast", "2-4 weeks", 90),
        ("fast", "3-6 months", 70),
        ("fast", "someday", 70),
        ("standard", "3-6 months", 80),
        ("flexible", "1 week", 70),
    ])
    def test_implementation_urgency(self, urgency, time, expected):
        candidate = make_candidate(implementation_time=time)
        assert score_implementation_urgency(urgency, candidate, TABLES) == expected

    @pytest.mark.parametrize("tier,tokens,expected", [
        ("critical", 128000, 100),
        ("critical", 64000, 60),
        ("important", 64000, 90),
        ("nice", 32000, 80),
        ("nice", 8000, 60),
        ("unimportant", 2000000, 60),
    ])
    def test_context_importance(self, tier, tokens, expected):
        candidate = make_candidate(context_tokens=tokens)
        assert score_context_importance(tier, candidate, TABLES) == expected

    @pytest.mark.parametrize("preference,share,expected", [
        ("critical", 85, 100),
        ("critical", 20, 60),
        ("important", 15, 90),
        ("important", 10, 60),
        ("neutral", 0, 80),
        ("neutral", 95, 80),
        ("underdog", 5, 100),
        ("underdog", 45, 60),
        ("bogus", 50, 0),
    ])
    def test_market_position(self, preference, share, expected):
        candidate = make_candidate(market_share=share)
        assert score_market_position(preference, candidate, TABLES) == expected
