"""
Unit tests for tier scoring, report summaries and rounding.

Tests the deterministic scoring functions with exact expected outputs.
"""

from datetime import date

import pytest

from evaluators.scoring import (
    compute_tier_score,
    generate_report_filename,
    generate_report_summary,
    identify_recommendations,
    tier_impacting_questions,
    tier_level_for,
)
from models.enums import ReportType
from models.schemas import Assessment, AssessmentResponse, Category, Question
from utils.rounding import completion_percentage, round_half_up, share_percentage

ASSESSMENT_ID = "a1"


def _assessment(**overrides):
    data = {"id": ASSESSMENT_ID, "agency_id": "ag1", "agency_name": "Metro SWAT", "progress_percentage": 95}
    data.update(overrides)
    return Assessment(**data)


def _tier_catalog(count, impacts_tier=True):
    categories = [
        Category(id="t1", name="Personnel & Leadership", order_index=1),
        Category(id="g1", name="Supervisor-to-Operator Ratio", order_index=1),
    ]
    questions = [
        Question(id=f"q{i}", category_id="t1", text=f"Requirement {i}", order_index=i, impacts_tier=impacts_tier)
        for i in range(count)
    ]
    questions.append(Question(id="gq", category_id="g1", text="Gap question"))
    return categories, questions


def _yes(*question_ids):
    return [AssessmentResponse(assessment_id=ASSESSMENT_ID, question_id=q, response=True) for q in question_ids]


class TestRoundHalfUp:
    """Tests for round_half_up function."""

    def test_round_half_up_rounds_up_on_half(self):
        """0.5 should round up to 1."""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(62.5) == 63

    def test_round_half_up_normal_rounding(self):
        """Normal rounding behavior."""
        assert round_half_up(2.4) == 2
        assert round_half_up(2.6) == 3
        assert round_half_up(0.0) == 0
        assert round_half_up(100.0) == 100

    def test_round_half_up_negative(self):
        """Negative numbers round away from zero (standard HALF_UP)."""
        assert round_half_up(-2.5) == -3
        assert round_half_up(-2.4) == -2

    def test_round_half_up_returns_int(self):
        """Result is always an int, never a float."""
        assert isinstance(round_half_up(62.5), int)
        assert isinstance(round_half_up(0.4), int)


class TestPercentages:
    """Tests for completion_percentage and share_percentage."""

    def test_completion_percentage(self):
        assert completion_percentage(1, 2) == 50
        assert completion_percentage(1, 3) == 33
        assert completion_percentage(2, 3) == 67

    def test_zero_total(self):
        assert completion_percentage(0, 0) == 0
        assert share_percentage(0, 0) == 0.0

    def test_share_is_unrounded(self):
        assert share_percentage(9, 10) == pytest.approx(90.0)
        assert share_percentage(89, 100) == pytest.approx(89.0)


class TestTierLevel:
    """Tests for tier_level_for."""

    @pytest.mark.parametrize("percentage,expected", [
        (100, 1),
        (90, 1),
        (89.9, 2),
        (75, 2),
        (74.99, 3),
        (50, 3),
        (49.9, 4),
        (0, 4),
    ])
    def test_thresholds(self, percentage, expected):
        assert tier_level_for(percentage) == expected


class TestComputeTierScore:
    """Tests for compute_tier_score."""

    def test_all_yes_is_tier_one(self):
        categories, questions = _tier_catalog(4)
        score = compute_tier_score(categories, questions, _yes("q0", "q1", "q2", "q3"))

        assert score.tier_level == 1
        assert (score.positive, score.total) == (4, 4)
        assert score.unmet_questions == []

    def test_three_of_four_is_tier_two(self):
        categories, questions = _tier_catalog(4)
        score = compute_tier_score(categories, questions, _yes("q0", "q1", "q3"))

        assert score.tier_level == 2
        assert score.percentage == pytest.approx(75.0)
        assert [q.id for q in score.unmet_questions] == ["q2"]

    def test_no_answer_counts_as_unmet(self):
        categories, questions = _tier_catalog(2)
        responses = [AssessmentResponse(assessment_id=ASSESSMENT_ID, question_id="q0", response=False)]
        score = compute_tier_score(categories, questions, responses)

        assert score.positive == 0
        assert score.tier_level == 4

    def test_gap_questions_do_not_count(self):
        categories, questions = _tier_catalog(2)
        score = compute_tier_score(categories, questions, _yes("q0", "q1", "gq"))
        assert score.total == 2

    def test_only_impacting_questions_count(self):
        categories, questions = _tier_catalog(2, impacts_tier=False)
        assert tier_impacting_questions(categories, questions) == []

        score = compute_tier_score(categories, questions, _yes("q0", "q1"))
        assert score.total == 0
        assert score.tier_level == 4


class TestRecommendations:
    """Tests for identify_recommendations."""

    def test_at_most_three_in_order(self):
        categories, questions = _tier_catalog(6)
        score = compute_tier_score(categories, questions, _yes("q0"))
        assert identify_recommendations(score) == ["Requirement 1", "Requirement 2", "Requirement 3"]

    def test_none_for_tier_one(self):
        categories, questions = _tier_catalog(10)
        score = compute_tier_score(categories, questions, _yes(*[f"q{i}" for i in range(9)]))
        assert score.tier_level == 1
        assert identify_recommendations(score) == []


class TestReportSummary:
    """Tests for generate_report_summary."""

    def test_tier_summary(self):
        categories, questions = _tier_catalog(4)
        score = compute_tier_score(categories, questions, _yes("q0", "q1", "q3"))
        summary = generate_report_summary(
            ReportType.TIER_ASSESSMENT, _assessment(), score, date(2024, 5, 1)
        )

        assert "Agency: Metro SWAT" in summary
        assert "Tier Classification: 2" in summary
        assert "Assessment Date: May 01, 2024" in summary
        assert "3 out of 4 critical capability requirements" in summary
        assert "- Requirement 2" in summary

    def test_tier_one_summary_has_maintenance_recommendation(self):
        categories, questions = _tier_catalog(1)
        score = compute_tier_score(categories, questions, _yes("q0"))
        summary = generate_report_summary(ReportType.TIER_ASSESSMENT, _assessment(), score)
        assert "sustain Tier 1 status" in summary

    def test_gap_summary(self):
        summary = generate_report_summary(ReportType.GAP_ANALYSIS, _assessment(), generated_on=date(2024, 5, 1))
        assert "SWAT Gap Analysis Report" in summary
        assert "Prepared for: Metro SWAT" in summary

    def test_tier_summary_requires_score(self):
        with pytest.raises(ValueError):
            generate_report_summary(ReportType.TIER_ASSESSMENT, _assessment())


class TestReportFilename:
    """Tests for generate_report_filename."""

    def test_tier_filename(self):
        name = generate_report_filename(_assessment(), ReportType.TIER_ASSESSMENT, 2, date(2024, 5, 1))
        assert name == "TierAssessment-Metro-SWAT-Tier2-2024-05-01.pdf"

    def test_gap_filename(self):
        name = generate_report_filename(_assessment(), ReportType.GAP_ANALYSIS, generated_on=date(2024, 5, 1))
        assert name == "GapAnalysis-Metro-SWAT-2024-05-01.pdf"

    def test_unsafe_characters_removed(self):
        assessment = _assessment(agency_name="County / City SWAT")
        name = generate_report_filename(assessment, ReportType.GAP_ANALYSIS, generated_on=date(2024, 5, 1))
        assert name == "GapAnalysis-County--City-SWAT-2024-05-01.pdf"

    def test_missing_agency_name(self):
        assessment = _assessment(agency_name=None)
        name = generate_report_filename(assessment, ReportType.GAP_ANALYSIS, generated_on=date(2024, 5, 1))
        assert name == "GapAnalysis-Agency-2024-05-01.pdf"
