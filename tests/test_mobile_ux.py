"""Tests for the mobile UX analyzer."""

import pytest

from design_audit.checks.mobile_ux import (
    analyze_font_sizes,
    analyze_horizontal_scroll,
    analyze_mobile_interactions,
    analyze_responsiveness,
    analyze_touch_targets,
    audit_mobile_ux,
)
from design_audit.inspector import HtmlPageInspector, NullInspector
from design_audit.models import Severity


class TestTouchTargets:

    def test_small_target_flagged(self, make_page):
        page = make_page('<button style="width: 30px; height: 30px">x</button>')
        issues = analyze_touch_targets(page)
        assert len(issues) == 1
        assert issues[0].severity == Severity.HIGH
        assert "30x30px" in issues[0].description

    def test_minimum_size_not_flagged(self, make_page):
        page = make_page('<button style="width: 44px; height: 44px">x</button>')
        assert analyze_touch_targets(page) == []

    def test_one_short_side_is_enough(self, make_page):
        page = make_page('<a href="/" style="width: 120px; height: 20px">link</a>')
        assert "120x20px" in analyze_touch_targets(page)[0].description

    def test_unknown_size_not_flagged(self, make_page):
        assert analyze_touch_targets(make_page("<button>Go</button>")) == []

    def test_hidden_inputs_ignored(self, make_page):
        page = make_page('<input type="hidden" style="width: 1px; height: 1px">')
        assert analyze_touch_targets(page) == []


class TestResponsiveness:

    def test_missing_viewport_is_critical(self):
        page = HtmlPageInspector("<html><head></head><body><p>x</p></body></html>")
        issues = analyze_responsiveness(page)
        assert [(i.description, i.severity) for i in issues] == [
            ("Missing or incorrect viewport meta tag", Severity.CRITICAL),
        ]

    def test_malformed_viewport(self):
        page = HtmlPageInspector('<html><head><meta name="viewport" content="width=1024"></head><body></body></html>')
        assert analyze_responsiveness(page)[0].severity == Severity.CRITICAL

    def test_fixed_width(self, make_page):
        page = make_page('<div style="width: 800px">wide</div><div style="width: 300px">ok</div>')
        issues = analyze_responsiveness(page)
        assert [i.description for i in issues] == [
            "Element has fixed width of 800px (may cause horizontal scroll on mobile)",
        ]
        assert issues[0].severity == Severity.MEDIUM


class TestHorizontalScroll:

    def test_overflowing_element(self, make_page):
        page = make_page('<div style="width: 500px">wide</div>')
        issues = analyze_horizontal_scroll(page)
        assert [i.severity for i in issues] == [Severity.HIGH, Severity.MEDIUM]
        assert issues[0].description == "Page content (500px) exceeds viewport width (375px)"
        assert issues[1].description == "Element extends beyond right edge of viewport"

    def test_fitting_page(self, make_page):
        page = make_page('<div style="width: 100%">fluid</div><div style="max-width: 1200px">x</div>')
        assert analyze_horizontal_scroll(page) == []

    def test_offset_pushes_element_out(self, make_page):
        page = make_page('<div style="position: absolute; left: 300px; width: 100px">x</div>')
        assert len(analyze_horizontal_scroll(page)) == 2


class TestFontSizes:

    def test_small_text(self, make_page):
        page = make_page('<p style="font-size: 12px">tiny</p><p>normal</p><h1>big</h1>')
        issues = analyze_font_sizes(page)
        assert [i.description for i in issues] == [
            "Text size is 12px (below 16px minimum for mobile readability)",
        ]

    def test_elements_without_text_ignored(self, make_page):
        page = make_page('<div style="font-size: 10px"><p style="font-size: 16px">x</p></div>')
        assert analyze_font_sizes(page) == []


class TestMobileInteractions:

    def test_hover_classes(self, make_page):
        page = make_page('<div class="hover-card">x</div>')
        issues = analyze_mobile_interactions(page)
        assert [i.severity for i in issues] == [Severity.LOW]

    def test_crowded_targets_flagged_once(self, make_page):
        body = "".join(
            f'<a href="/{n}" style="position: absolute; top: {n * 46}px; height: 44px">{n}</a>'
            for n in range(4)
        )
        issues = analyze_mobile_interactions(make_page(body))
        assert [i.description for i in issues] == ["Clickable elements are too close together (2px spacing)"]

    def test_spaced_targets(self, make_page):
        body = "".join(
            f'<a href="/{n}" style="position: absolute; top: {n * 60}px; height: 44px">{n}</a>'
            for n in range(3)
        )
        assert analyze_mobile_interactions(make_page(body)) == []


class TestAuditMobileUx:

    @pytest.mark.parametrize("analyzer", [
        analyze_touch_targets,
        analyze_responsiveness,
        analyze_horizontal_scroll,
        analyze_font_sizes,
        analyze_mobile_interactions,
    ])
    def test_no_inspector_yields_no_issues(self, analyzer):
        assert analyzer() == []
        assert analyzer(NullInspector()) == []

    def test_no_inspector_scores_ten(self):
        assert audit_mobile_ux().score == 10.0

    def test_critical_costs_three(self):
        page = HtmlPageInspector("<html><body><p>Readable text</p></body></html>")
        result = audit_mobile_ux(page)
        assert result.score == 7.0
        assert result.recommendations[0] == "Fix critical mobile UX issues immediately"

    def test_clean_page(self, make_page):
        page = make_page('<main><p>Hello</p><button style="width: 48px; height: 48px; font-size: 16px">Go</button></main>')
        result = audit_mobile_ux(page)
        assert result.issues == ()
        assert result.score == 10.0
