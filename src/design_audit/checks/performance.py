"""Performance checks: images, bundle sizes and Core Web Vitals."""

import asyncio
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from ..config import settings
from ..inspector import PageInspector, ResourceEntry, ensure_inspector
from ..logger import logger
from ..models import AuditScore, Category, Issue, Severity
from ..scoring import score_issues

MODERN_IMAGE_FORMATS = (".webp", ".avif", ".svg")
MODERN_IMAGE_TYPES = {"image/webp", "image/avif", "image/svg+xml"}
# Images beyond this many are expected to load lazily.
EAGER_IMAGE_LIMIT = 3

# Byte thresholds, highest first.
JS_TOTAL_LIMITS = ((1_000_000, Severity.CRITICAL), (500_000, Severity.HIGH))
JS_CHUNK_LIMITS = ((500_000, Severity.HIGH), (250_000, Severity.MEDIUM))
CSS_TOTAL_LIMITS = ((200_000, Severity.HIGH), (100_000, Severity.MEDIUM))


@dataclass(frozen=True)
class VitalThreshold:
    field: str
    metric: str
    unit: str
    limits: tuple[tuple[float, Severity], ...]  # highest first
    description: str
    recommendation: str


VITAL_THRESHOLDS = (
    VitalThreshold(
        "lcp", "Largest Contentful Paint", "ms",
        ((2500, Severity.HIGH), (1200, Severity.MEDIUM)),
        "Largest Contentful Paint is too slow",
        "Optimize largest content element loading",
    ),
    VitalThreshold(
        "cls", "Cumulative Layout Shift", "",
        ((0.25, Severity.HIGH), (0.1, Severity.MEDIUM)),
        "Cumulative Layout Shift is too high",
        "Reserve space for images, embeds and late-loading content",
    ),
    VitalThreshold(
        "fid", "First Input Delay", "ms",
        ((300, Severity.HIGH), (100, Severity.MEDIUM)),
        "First Input Delay is too long",
        "Break up long JavaScript tasks and defer non-critical scripts",
    ),
    VitalThreshold(
        "fcp", "First Contentful Paint", "ms",
        ((1800, Severity.HIGH),),
        "First Contentful Paint is too slow",
        "Optimize initial page load performance",
    ),
)


def _issue(type_: str, severity: Severity, description: str, recommendation: str, **extra) -> Issue:
    return Issue(
        category=Category.PERFORMANCE,
        type=type_,
        severity=severity,
        description=description,
        recommendation=recommendation,
        **extra,
    )


def _kb(size: int) -> str:
    return f"{round(size / 1024)}KB"


def _graded(value: float, limits) -> Optional[Severity]:
    for limit, severity in limits:
        if value > limit:
            return severity
    return None


def _is_modern_format(src: str) -> bool:
    if src.startswith("data:"):
        return any(t in src[:40] for t in MODERN_IMAGE_TYPES)
    return urlparse(src).path.lower().endswith(MODERN_IMAGE_FORMATS)


def analyze_image_optimization(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    for index, img in enumerate(page.query("img")):
        if not img.get("width") or not img.get("height"):
            issues.append(_issue(
                "image-optimization", Severity.MEDIUM,
                "Image missing width/height attributes (causes layout shift)",
                "Add explicit width and height attributes to prevent CLS",
                element="img",
            ))

        src = img.get("src") or ""
        parent = img.parent
        has_modern_source = parent is not None and parent.tag == "picture" and any(
            (source.get("type") or "").lower() in MODERN_IMAGE_TYPES
            for source in page.query_within(parent, "source")
        )
        if src and not has_modern_source and not _is_modern_format(src):
            issues.append(_issue(
                "image-optimization", Severity.MEDIUM,
                "Image not using modern format (WebP/AVIF)",
                "Convert images to WebP or AVIF format for better compression",
                element="img",
            ))

        if img.get("alt") is None:
            issues.append(_issue(
                "image-optimization", Severity.MEDIUM,
                "Image missing alt text",
                "Add alt text so the image has a text fallback while loading",
                element="img",
            ))

        if index >= EAGER_IMAGE_LIMIT and not img.get("loading"):
            issues.append(_issue(
                "image-optimization", Severity.LOW,
                "Image not using lazy loading",
                'Add loading="lazy" attribute for images below the fold',
                element="img",
            ))

    return issues


def _resource_name(resource: ResourceEntry) -> str:
    path = urlparse(resource.name).path
    return path.rsplit("/", 1)[-1] or resource.name


def analyze_bundle_size(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    resources = page.resources()
    scripts = [r for r in resources if r.kind == "script"]
    stylesheets = [r for r in resources if r.kind == "stylesheet"]

    for script in scripts:
        severity = _graded(script.transfer_size, JS_CHUNK_LIMITS)
        if severity:
            issues.append(_issue(
                "bundle-size", severity,
                f"Large JavaScript chunk: {_resource_name(script)}",
                "Consider code splitting or compression for large resources",
                metric="JavaScript Chunk",
                current_value=_kb(script.transfer_size),
                target_value="<250KB",
                element=script.name,
            ))

    total_js = sum(r.transfer_size for r in scripts)
    severity = _graded(total_js, JS_TOTAL_LIMITS)
    if severity:
        issues.append(_issue(
            "bundle-size", severity,
            "JavaScript bundle size is too large",
            "Implement code splitting and remove unused dependencies",
            metric="Total JavaScript",
            current_value=_kb(total_js),
            target_value="<500KB",
        ))

    total_css = sum(r.transfer_size for r in stylesheets)
    severity = _graded(total_css, CSS_TOTAL_LIMITS)
    if severity:
        issues.append(_issue(
            "bundle-size", severity,
            "CSS bundle size is too large" if severity == Severity.HIGH else "CSS bundle size is large",
            "Remove unused CSS and optimize stylesheets",
            metric="Total CSS",
            current_value=_kb(total_css),
            target_value="<100KB",
        ))

    return issues


def _format_vital(value: float, unit: str) -> str:
    if unit == "ms":
        return f"{round(value)}ms"
    return f"{value:.3f}"


async def measure_core_web_vitals(
    inspector: Optional[PageInspector] = None,
    window: Optional[float] = None,
    timeout: Optional[float] = None,
) -> list[Issue]:
    """Observe Core Web Vitals for ``window`` seconds, waiting at most ``timeout``.

    A timeout yields no vitals issues rather than an error.
    """
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    window = settings.VITALS_WINDOW if window is None else window
    timeout = settings.VITALS_TIMEOUT if timeout is None else timeout

    try:
        sample = await asyncio.wait_for(page.observe_vitals(window), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Core Web Vitals not observed within {timeout}s")
        return issues

    if sample is None:
        return issues

    for threshold in VITAL_THRESHOLDS:
        value = getattr(sample, threshold.field)
        if value is None:
            continue
        severity = _graded(value, threshold.limits)
        if severity is None:
            continue
        good = threshold.limits[-1][0]
        issues.append(_issue(
            "core-web-vitals", severity,
            threshold.description,
            threshold.recommendation,
            metric=threshold.metric,
            current_value=_format_vital(value, threshold.unit),
            target_value=f"<{good:g}{threshold.unit}",
        ))

    return issues


async def audit_performance(
    inspector: Optional[PageInspector] = None,
    window: Optional[float] = None,
    timeout: Optional[float] = None,
) -> AuditScore:
    """Run every performance check and score the result."""
    issues: list[Issue] = []
    issues.extend(analyze_image_optimization(inspector))
    issues.extend(analyze_bundle_size(inspector))
    issues.extend(await measure_core_web_vitals(inspector, window=window, timeout=timeout))
    return score_issues(Category.PERFORMANCE, issues)
