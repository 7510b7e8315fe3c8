"""Tests for the visual consistency analyzer."""

import pytest

from design_audit.checks.visual_consistency import (
    analyze_color_palette,
    analyze_design_patterns,
    analyze_layout,
    analyze_spacing,
    analyze_typography,
    audit_visual_consistency,
    count_similar_colors,
    extract_spacing_values,
    get_visual_consistency_data,
)
from design_audit.inspector import NullInspector
from design_audit.models import Severity


def divs(style_for, count):
    return "".join(f'<div style="{style_for(n)}">x</div>' for n in range(count))


class TestSpacing:

    def test_extract(self, make_page):
        page = make_page('<div style="margin: 8px 16px; padding: 4px">x</div><p style="margin: 0">y</p>')
        values = extract_spacing_values(page)
        assert values["margin"] == {8, 16}
        assert values["padding"] == {4}

    def test_within_scale(self, make_page):
        page = make_page(divs(lambda n: f"margin: {4 * (n + 1)}px", 12))
        assert analyze_spacing(page) == []

    def test_too_many_margins_is_medium(self, make_page):
        page = make_page(divs(lambda n: f"margin-top: {n + 1}px", 13))
        issues = analyze_spacing(page)
        assert [(i.description, i.severity) for i in issues] == [
            ("Found 13 different margin values (suggests inconsistent spacing system)", Severity.MEDIUM),
        ]

    def test_far_too_many_is_high(self, make_page):
        page = make_page(divs(lambda n: f"padding-left: {n + 1}px", 25))
        assert analyze_spacing(page)[0].severity == Severity.HIGH

    def test_fractional_values(self, make_page):
        page = make_page('<div style="margin-top: 7.5px">x</div>')
        issues = analyze_spacing(page)
        assert [(i.description, i.severity) for i in issues] == [
            ("Found fractional margin values: 7.5px", Severity.LOW),
        ]


class TestTypography:

    def test_too_many_font_sizes(self, make_page):
        page = make_page("".join(f'<p style="font-size: {10 + n}px">x</p>' for n in range(9)))
        issues = analyze_typography(page)
        assert issues[0].description.startswith("Found 9 different font sizes")
        assert issues[0].severity == Severity.MEDIUM

    def test_too_many_families(self, make_page):
        fonts = ["Arial", "Georgia", "Verdana", "Courier"]
        page = make_page("".join(f'<p style="font-family: {f}; font-size: 16px">x</p>' for f in fonts))
        issues = analyze_typography(page)
        assert [(i.description, i.severity) for i in issues] == [
            ("Found 4 different font families (too many for visual consistency)", Severity.HIGH),
        ]

    def test_line_heights(self, make_page):
        page = make_page("".join(f'<p style="line-height: {18 + n}px">x</p>' for n in range(5)))
        issues = analyze_typography(page)
        assert [i.severity for i in issues] == [Severity.LOW]


class TestColorPalette:

    def test_similar_colors(self):
        assert count_similar_colors(["rgb(0, 0, 0)", "rgb(10, 10, 10)", "rgb(200, 0, 0)"]) == 1
        assert count_similar_colors(["rgb(0, 0, 0)", "rgb(0, 0, 0)"]) == 0

    def test_similar_text_colors_flagged(self, make_page):
        page = make_page('<p style="color: #333">a</p><p style="color: #383838">b</p>')
        issues = analyze_color_palette(page)
        assert [(i.description, i.severity) for i in issues] == [
            ("Found 1 pairs of similar but not identical colors", Severity.LOW),
        ]

    def test_too_many_backgrounds(self, make_page):
        page = make_page(divs(lambda n: f"background-color: rgb({n * 25}, 0, 200)", 9))
        issues = analyze_color_palette(page)
        assert issues[0].description == "Found 9 different background colors"
        assert issues[0].severity == Severity.MEDIUM


class TestLayout:

    def test_floats(self, make_page):
        page = make_page('<div style="float: left">a</div><img style="float: right" src="a.png">')
        issues = analyze_layout(page)
        assert [i.description for i in issues] == ["Found 2 elements using CSS float for layout"]

    def test_mixed_grid_and_flex(self, make_page):
        page = make_page(divs(lambda n: "display: grid" if n % 2 else "display: flex", 12))
        issues = analyze_layout(page)
        assert [i.description for i in issues] == ["Both CSS Grid and Flexbox are used extensively"]

    def test_container_widths(self, make_page):
        page = make_page(divs(lambda n: f"max-width: {600 + n * 100}px", 5))
        issues = analyze_layout(page)
        assert issues[0].description == "Found 5 different max-width values for containers"


class TestDesignPatterns:

    def test_inconsistent_buttons(self, make_page):
        colors = ["red", "blue", "green", "navy", "teal"]
        page = make_page("".join(f'<button style="background: {c}">b</button>' for c in colors))
        issues = analyze_design_patterns(page)
        assert [(i.description, i.severity) for i in issues] == [
            ("Found 5 different button style combinations across 5 buttons", Severity.MEDIUM),
        ]

    def test_consistent_buttons(self, make_page):
        page = make_page("".join('<button class="btn">b</button>' for _ in range(6)), css=".btn { background: #06f }")
        assert analyze_design_patterns(page) == []

    def test_card_shadows(self, make_page):
        shadows = ["0 1px 2px #000", "0 2px 4px #000", "0 4px 8px #000"]
        page = make_page("".join(f'<div class="card" style="box-shadow: {s}">c</div>' for s in shadows))
        issues = analyze_design_patterns(page)
        assert [i.description for i in issues] == ["Found 3 different box-shadow styles on cards"]


class TestAuditVisualConsistency:

    @pytest.mark.parametrize("analyzer", [
        analyze_spacing,
        analyze_typography,
        analyze_color_palette,
        analyze_layout,
        analyze_design_patterns,
    ])
    def test_no_inspector_yields_no_issues(self, analyzer):
        assert analyzer() == []
        assert analyzer(NullInspector()) == []

    def test_no_inspector_scores_ten(self):
        result = audit_visual_consistency()
        assert result.score == 10.0
        assert result.recommendations[0].startswith("Create and document a design system")

    def test_data_summary(self, make_page):
        page = make_page('<p style="font-size: 14px; margin: 8px">x</p>')
        data = get_visual_consistency_data(page)
        assert data["margins"] == [8]
        assert 14 in data["font_sizes"]
        assert data["text_colors"] == ["rgb(0, 0, 0)"]
