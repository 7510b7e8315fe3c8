"""Tests for per-category scoring."""

import itertools

import pytest

from design_audit.models import CATEGORY_ORDER, Category, Severity
from design_audit.scoring import (
    STATIC_GUIDANCE,
    build_recommendations,
    calculate_score,
    penalty,
    score_issues,
)

SEVERITIES = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]


class TestPenalty:

    @pytest.mark.parametrize("category,expected", [
        (Category.ACCESSIBILITY, 2.5),
        (Category.PERFORMANCE, 2.5),
        (Category.MOBILE_UX, 3.0),
        (Category.VISUAL_CONSISTENCY, 3.0),
        (Category.INTERACTION_DESIGN, 3.0),
    ])
    def test_critical_penalty_by_category(self, category, expected):
        assert penalty(category, Severity.CRITICAL) == expected

    def test_other_penalties(self):
        assert penalty(Category.ACCESSIBILITY, Severity.HIGH) == 2.0
        assert penalty(Category.ACCESSIBILITY, Severity.MEDIUM) == 1.0
        assert penalty(Category.ACCESSIBILITY, Severity.LOW) == 0.5


class TestCalculateScore:

    def test_no_issues_is_perfect(self):
        assert calculate_score(Category.ACCESSIBILITY, []) == 10.0

    def test_mixed_issues(self, make_issue):
        issues = [make_issue(Severity.CRITICAL), make_issue(Severity.HIGH), make_issue(Severity.LOW)]
        assert calculate_score(Category.ACCESSIBILITY, issues) == 5.0

    def test_clamped_at_one(self, make_issue):
        issues = [make_issue(Severity.CRITICAL, Category.MOBILE_UX)] * 5
        assert calculate_score(Category.MOBILE_UX, issues) == 1.0

    @pytest.mark.parametrize("category", CATEGORY_ORDER)
    def test_bounded_for_all_distributions(self, make_issue, category):
        for combo in itertools.combinations_with_replacement(SEVERITIES, 4):
            for count in range(len(combo) + 1):
                score = calculate_score(category, [make_issue(s, category) for s in combo[:count]])
                assert 1.0 <= score <= 10.0
                assert round(score, 1) == score

    @pytest.mark.parametrize("category", CATEGORY_ORDER)
    def test_monotonic_in_severity(self, make_issue, category):
        others = [make_issue(Severity.MEDIUM, category), make_issue(Severity.LOW, category)]
        scores = [calculate_score(category, others + [make_issue(s, category)]) for s in SEVERITIES]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.parametrize("severity", SEVERITIES)
    def test_monotonic_in_count(self, make_issue, severity):
        scores = [
            calculate_score(Category.PERFORMANCE, [make_issue(severity, Category.PERFORMANCE)] * n)
            for n in range(12)
        ]
        assert scores == sorted(scores, reverse=True)


class TestRecommendations:

    def test_static_only_without_issues(self):
        assert build_recommendations(Category.MOBILE_UX, []) == STATIC_GUIDANCE[Category.MOBILE_UX]

    def test_conditional_items_come_first(self, make_issue):
        issues = [make_issue(Severity.MEDIUM, type_="contrast")]
        recommendations = build_recommendations(Category.ACCESSIBILITY, issues)
        assert recommendations[0] == "Improve color contrast ratios to meet WCAG AA standards (4.5:1 for normal text)"
        assert "Address critical accessibility issues immediately" not in recommendations

    def test_contrast_item_only_with_contrast_issue(self, make_issue):
        issues = [make_issue(Severity.MEDIUM, type_="semantic-structure")]
        recommendations = build_recommendations(Category.ACCESSIBILITY, issues)
        assert not any("contrast" in r for r in recommendations)

    def test_extra_items_deduplicated(self, make_issue):
        extra = ["Test with screen readers", "Audit third-party widgets"]
        recommendations = build_recommendations(Category.ACCESSIBILITY, [], extra)
        assert recommendations[0] == "Test with screen readers"
        assert recommendations.count("Test with screen readers") == 1
        assert "Audit third-party widgets" in recommendations


class TestScoreIssues:

    def test_result_shape(self, make_issue):
        issue = make_issue(Severity.HIGH, description="Button missing accessible name")
        result = score_issues(Category.ACCESSIBILITY, [issue])
        assert result.score == 8.0
        assert result.issues == ("HIGH: Button missing accessible name",)
        assert result.findings == (issue,)
        assert result.count(Severity.HIGH) == 1
        assert result.count(Severity.LOW) == 0
