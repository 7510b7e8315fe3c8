"""Tests for the performance analyzer."""

import asyncio

import pytest

from design_audit.checks.performance import (
    analyze_bundle_size,
    analyze_image_optimization,
    audit_performance,
    measure_core_web_vitals,
)
from design_audit.inspector import HtmlPageInspector, NullInspector, ResourceEntry, VitalsSample
from design_audit.models import Severity


class SlowInspector(HtmlPageInspector):
    """Inspector whose vitals never arrive in time."""

    async def observe_vitals(self, window):
        await asyncio.sleep(10)
        return VitalsSample(lcp=9999)


class TestImageOptimization:

    def test_well_optimized_images(self, make_page):
        images = "".join(
            f'<img src="/img/{n}.webp" alt="Photo {n}" width="100" height="100"{" loading=lazy" if n >= 3 else ""}>'
            for n in range(5)
        )
        assert analyze_image_optimization(make_page(images)) == []

    def test_each_problem_flagged(self, make_page):
        page = make_page('<img src="/hero.jpg">')
        issues = analyze_image_optimization(page)
        assert [i.description for i in issues] == [
            "Image missing width/height attributes (causes layout shift)",
            "Image not using modern format (WebP/AVIF)",
            "Image missing alt text",
        ]
        assert all(i.severity == Severity.MEDIUM for i in issues)

    def test_lazy_loading_from_fourth_image(self, make_page):
        images = "".join(f'<img src="/{n}.avif" alt="" width="1" height="1">' for n in range(5))
        issues = analyze_image_optimization(make_page(images))
        assert [i.severity for i in issues] == [Severity.LOW, Severity.LOW]

    def test_picture_with_modern_source(self, make_page):
        page = make_page(
            '<picture><source srcset="/a.webp" type="image/webp">'
            '<img src="/a.jpg" alt="A" width="10" height="10"></picture>'
        )
        assert analyze_image_optimization(page) == []

    def test_query_string_does_not_hide_format(self, make_page):
        page = make_page('<img src="/a.webp?v=2" alt="A" width="10" height="10">')
        assert analyze_image_optimization(page) == []


class TestBundleSize:

    def test_thresholds(self, make_page):
        page = make_page("<p>x</p>", resources=[
            ResourceEntry("https://cdn.example.com/vendor.js", "script", 600_000),
            ResourceEntry("https://cdn.example.com/app.js", "script", 300_000),
            ResourceEntry("https://cdn.example.com/small.js", "script", 200_000),
            ResourceEntry("https://cdn.example.com/site.css", "stylesheet", 150_000),
        ])
        issues = analyze_bundle_size(page)
        summary = [(i.description, i.severity) for i in issues]
        assert summary == [
            ("Large JavaScript chunk: vendor.js", Severity.HIGH),
            ("Large JavaScript chunk: app.js", Severity.MEDIUM),
            ("JavaScript bundle size is too large", Severity.CRITICAL),
            ("CSS bundle size is large", Severity.MEDIUM),
        ]
        total = issues[2]
        assert total.metric == "Total JavaScript"
        assert total.current_value == "1074KB"

    def test_small_bundles(self, make_page):
        page = make_page("<p>x</p>", resources=[ResourceEntry("app.js", "script", 100_000)])
        assert analyze_bundle_size(page) == []

    def test_css_too_large(self, make_page):
        page = make_page("<p>x</p>", resources=[ResourceEntry("a.css", "stylesheet", 250_000)])
        issues = analyze_bundle_size(page)
        assert [(i.description, i.severity) for i in issues] == [("CSS bundle size is too large", Severity.HIGH)]


class TestCoreWebVitals:

    @pytest.mark.asyncio
    async def test_thresholds(self, make_page):
        page = make_page("<p>x</p>", vitals=VitalsSample(lcp=3000, cls=0.15, fid=50, fcp=1000))
        issues = await measure_core_web_vitals(page)
        assert [(i.metric, i.severity) for i in issues] == [
            ("Largest Contentful Paint", Severity.HIGH),
            ("Cumulative Layout Shift", Severity.MEDIUM),
        ]
        assert issues[0].current_value == "3000ms"
        assert issues[0].target_value == "<1200ms"

    @pytest.mark.asyncio
    async def test_no_sample(self, make_page):
        assert await measure_core_web_vitals(make_page("<p>x</p>")) == []

    @pytest.mark.asyncio
    async def test_timeout_yields_no_issues(self):
        page = SlowInspector("<p>x</p>")
        assert await measure_core_web_vitals(page, window=0.01, timeout=0.05) == []

    @pytest.mark.asyncio
    async def test_no_inspector(self):
        assert await measure_core_web_vitals() == []
        assert await measure_core_web_vitals(NullInspector()) == []


class TestAuditPerformance:

    @pytest.mark.asyncio
    async def test_no_inspector_scores_ten(self):
        result = await audit_performance()
        assert result.score == 10.0
        assert result.issues == ()

    @pytest.mark.asyncio
    async def test_scoring_and_recommendations(self, make_page):
        page = make_page("<p>x</p>", resources=[ResourceEntry("app.js", "script", 1_200_000)])
        result = await audit_performance(page)
        # chunk high (-2) + total critical (-2.5)
        assert result.score == 5.5
        assert result.recommendations[:2] == (
            "Run Lighthouse audit for detailed performance insights",
            "Implement code splitting and remove unused dependencies",
        )
