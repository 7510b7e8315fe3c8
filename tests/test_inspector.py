"""Tests for the static HTML page inspector."""

import pytest

from design_audit.inspector import (
    HtmlPageInspector,
    NullInspector,
    ResourceEntry,
    VitalsSample,
    ensure_inspector,
)


class TestCascade:

    def test_specificity_beats_source_order(self, make_page):
        page = make_page(
            '<p id="intro" class="lead">Hi</p>',
            css="#intro { color: red } .lead { color: blue } p { color: green }",
        )
        assert page.style(page.query_one("p")).get("color") == "rgb(255, 0, 0)"

    def test_later_rule_wins_on_equal_specificity(self, make_page):
        page = make_page('<p class="a b">Hi</p>', css=".a { color: red } .b { color: blue }")
        assert page.style(page.query_one("p")).get("color") == "rgb(0, 0, 255)"

    def test_inline_style_wins(self, make_page):
        page = make_page('<p id="x" style="color: #000">Hi</p>', css="#x { color: white }")
        assert page.style(page.query_one("p")).get("color") == "rgb(0, 0, 0)"

    def test_text_properties_inherit(self, make_page):
        page = make_page('<div style="color: navy; font-size: 20px"><span>Hi</span></div>')
        style = page.style(page.query_one("span"))
        assert style.get("color") == "rgb(0, 0, 128)"
        assert style.font_size == 20

    def test_background_does_not_inherit(self, make_page):
        page = make_page('<div style="background: #eee"><span>Hi</span></div>')
        assert page.style(page.query_one("span")).get("background-color") == "rgba(0, 0, 0, 0)"

    def test_relative_font_sizes(self, make_page):
        page = make_page('<div style="font-size: 20px"><p style="font-size: 1.5em">x</p><small>y</small></div>')
        assert page.style(page.query_one("p")).font_size == 30
        assert page.style(page.query_one("small")).font_size == pytest.approx(13.33)

    def test_zero_font_size_is_kept(self, make_page):
        page = make_page('<p style="font-size: 0px">x</p><span>y</span>')
        assert page.style(page.query_one("p")).font_size == 0
        assert page.style(page.query_one("span")).font_size == 16

    def test_font_weight_keywords(self, make_page):
        page = make_page('<p style="font-weight: bold">x</p><h2>y</h2>')
        assert page.style(page.query_one("p")).get("font-weight") == "700"
        assert page.style(page.query_one("h2")).get("font-weight") == "700"

    def test_hover_and_focus_rules_kept_separately(self, make_page):
        page = make_page("<a href='/'>x</a>", css="a { outline: none } a:focus { outline: 2px solid blue }")
        style = page.style(page.query_one("a"))
        assert style.get("outline") == "none"
        assert style.state("focus")["outline"] == "2px solid blue"

    def test_unsupported_selector_is_skipped(self, make_page):
        page = make_page("<p>x</p>", css="p:unknown-thing(1) { color: red } p { color: blue }")
        assert page.style(page.query_one("p")).get("color") == "rgb(0, 0, 255)"


class TestLayout:

    def test_box_from_styles(self, make_page):
        page = make_page('<div style="padding-left: 10px"><button style="width: 30px; height: 30px; margin-left: 5px">x</button></div>')
        box = page.box(page.query_one("button"))
        assert (box.x, box.width, box.height) == (15, 30, 30)
        assert box.right == 45

    def test_box_from_attributes(self, make_page):
        page = make_page('<img src="a.png" width="120" height="80" alt="">')
        box = page.box(page.query_one("img"))
        assert (box.width, box.height) == (120, 80)

    def test_min_size_applies(self, make_page):
        page = make_page('<a href="/" style="min-width: 44px; min-height: 44px">x</a>')
        box = page.box(page.query_one("a"))
        assert (box.width, box.height) == (44, 44)

    def test_hidden_elements_have_no_box(self, make_page):
        page = make_page('<div style="display: none"><p>x</p></div>')
        assert page.box(page.query_one("p")) is None

    def test_unknown_size(self, make_page):
        page = make_page("<button>Go</button>")
        box = page.box(page.query_one("button"))
        assert box.width is None and box.height is None

    def test_absolute_position(self, make_page):
        page = make_page('<div style="position: absolute; left: 300px; top: 10px; width: 200px">x</div>')
        box = page.box(page.query_one("div"))
        assert (box.x, box.y, box.right) == (300, 10, 500)

    def test_scroll_width(self, make_page):
        page = make_page('<div style="width: 600px">wide</div>')
        assert page.viewport_width == 375
        assert page.scroll_width == 600

    def test_viewport_override(self, make_page):
        page = make_page('<div style="width: 50vw">x</div>', viewport_width=1000)
        assert page.style(page.query_one("div")).px("width") == 500


class TestPageFacts:

    def test_landmarks(self, make_page):
        page = make_page("<main><h1>Title</h1></main>")
        assert page.has_root_heading()
        assert page.has_main_landmark()

        bare = make_page("<div>x</div>")
        assert not bare.has_root_heading()
        assert not bare.has_main_landmark()

    def test_exclude_removes_elements(self, make_page):
        page = make_page('<p>a</p><p class="hidden">b</p><p aria-hidden="true">c</p>',
                         exclude=(".hidden", '[aria-hidden="true"]'))
        assert [p.text for p in page.query("p")] == ["a"]

    def test_external_stylesheets(self, make_page):
        page = make_page("<p>x</p>", stylesheets=["p { color: red }"])
        assert page.style(page.query_one("p")).get("color") == "rgb(255, 0, 0)"

    def test_resources_and_keyframes(self, make_page):
        resources = [ResourceEntry("app.js", "script", 1000)]
        page = make_page("<p>x</p>", css="@keyframes pulse { to { opacity: 0 } }", resources=resources)
        assert page.resources() == resources
        assert page.keyframes()["pulse"] == frozenset({"opacity"})

    @pytest.mark.asyncio
    async def test_observe_vitals_returns_supplied_sample(self, make_page):
        sample = VitalsSample(lcp=1000)
        page = make_page("<p>x</p>", vitals=sample)
        assert await page.observe_vitals(0.1) == sample


class TestElements:

    def test_element_accessors(self, make_page):
        page = make_page('<button id="save" class="btn primary" aria-label="Save">Save <b>now</b></button>')
        button = page.query_one("button")
        assert button.tag == "button"
        assert button.classes == ["btn", "primary"]
        assert button.get("aria-label") == "Save"
        assert button.own_text == "Save"
        assert button.text == "Save now"
        assert button.child_count == 1
        assert button.parent.tag == "body"
        assert button.describe() == "button#save.btn.primary"

    def test_query_within(self, make_page):
        page = make_page("<form><input></form><input>")
        form = page.query_one("form")
        assert len(page.query_within(form, "input")) == 1
        assert len(page.query("input")) == 2


class TestNullInspector:

    def test_everything_is_empty(self):
        page = NullInspector()
        assert page.available is False
        assert page.query("*") == []
        assert page.query_one("body") is None
        assert page.scroll_width == 0
        assert not page.has_root_heading()

    def test_ensure_inspector(self):
        assert isinstance(ensure_inspector(None), NullInspector)
        page = HtmlPageInspector("<p>x</p>")
        assert ensure_inspector(page) is page
