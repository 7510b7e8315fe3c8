"""Mobile usability checks."""

from typing import Optional

from ..inspector import PageInspector, ensure_inspector
from ..models import AuditScore, Category, Issue, Severity, round_half_up
from ..scoring import score_issues

MIN_TOUCH_TARGET = 44
MOBILE_VIEWPORT_WIDTH = 375
MIN_FONT_SIZE = 16
MIN_TARGET_SPACING = 8

TOUCH_TARGET_SELECTOR = (
    'button, a, input:not([type="hidden"]), textarea, select, [onclick], [role="button"]'
)
TEXT_SELECTOR = "p, span, div, a, button, input, textarea, li, td, th, h1, h2, h3, h4, h5, h6"
CLICKABLE_SELECTOR = 'a, button, input[type="submit"], input[type="button"]'


def _px(value: float) -> int:
    return int(round_half_up(value, 0))


def _issue(type_: str, severity: Severity, description: str, recommendation: str,
           element: Optional[str] = None) -> Issue:
    return Issue(
        category=Category.MOBILE_UX,
        type=type_,
        severity=severity,
        description=description,
        recommendation=recommendation,
        element=element,
    )


def analyze_touch_targets(inspector: Optional[PageInspector] = None) -> list[Issue]:
    """Flag interactive elements smaller than 44x44px.

    Elements whose size cannot be determined are not flagged.
    """
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    for el in page.query(TOUCH_TARGET_SELECTOR):
        box = page.box(el)
        if box is None or box.width is None or box.height is None:
            continue
        if box.width < MIN_TOUCH_TARGET or box.height < MIN_TOUCH_TARGET:
            issues.append(_issue(
                "touch-targets", Severity.HIGH,
                f"Touch target is {_px(box.width)}x{_px(box.height)}px (below 44x44px minimum)",
                "Increase touch target size to at least 44x44px with padding or min-width/height",
                element=el.tag,
            ))

    return issues


def analyze_responsiveness(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    viewport = page.query_one('meta[name="viewport"]')
    if viewport is None or "width=device-width" not in (viewport.get("content") or "").replace(" ", ""):
        issues.append(_issue(
            "responsive", Severity.CRITICAL,
            "Missing or incorrect viewport meta tag",
            'Add <meta name="viewport" content="width=device-width, initial-scale=1"> to <head>',
        ))

    for el in page.query("body *"):
        width = page.style(el).px("width")
        if width is not None and width > MOBILE_VIEWPORT_WIDTH:
            issues.append(_issue(
                "responsive", Severity.MEDIUM,
                f"Element has fixed width of {_px(width)}px (may cause horizontal scroll on mobile)",
                "Use responsive units (%, vw, rem) or max-width instead of fixed widths",
                element=el.tag,
            ))

    return issues


def analyze_horizontal_scroll(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    viewport_width = page.viewport_width
    if page.scroll_width > viewport_width:
        issues.append(_issue(
            "horizontal-scroll", Severity.HIGH,
            f"Page content ({_px(page.scroll_width)}px) exceeds viewport width ({_px(viewport_width)}px)",
            "Ensure all content fits within viewport width using responsive design",
        ))

    for el in page.query("body *"):
        box = page.box(el)
        if box is not None and box.right is not None and box.right > viewport_width:
            issues.append(_issue(
                "horizontal-scroll", Severity.MEDIUM,
                "Element extends beyond right edge of viewport",
                "Use responsive layout or overflow handling to prevent horizontal scroll",
                element=el.tag,
            ))

    return issues


def analyze_font_sizes(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    for el in page.query(TEXT_SELECTOR):
        if not el.own_text or page.box(el) is None:
            continue
        size = page.style(el).font_size
        if size < MIN_FONT_SIZE:
            issues.append(_issue(
                "font-size", Severity.MEDIUM,
                f"Text size is {size:g}px (below 16px minimum for mobile readability)",
                "Increase font size to at least 16px for body text on mobile devices",
                element=el.tag,
            ))

    return issues


def analyze_mobile_interactions(inspector: Optional[PageInspector] = None) -> list[Issue]:
    """Flag hover-dependent elements and crowded tap targets."""
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    for el in page.query('[class*="hover"], [style*="hover"]'):
        issues.append(_issue(
            "responsive", Severity.LOW,
            "Element may rely on hover interactions not available on mobile",
            "Ensure interactive elements work with touch and provide touch-friendly alternatives",
            element=el.tag,
        ))

    clickable = page.query(CLICKABLE_SELECTOR)
    for current, following in zip(clickable, clickable[1:]):
        a, b = page.box(current), page.box(following)
        if a is None or b is None or a.bottom is None or b.y is None:
            continue
        distance = abs(a.bottom - b.y)
        if distance < MIN_TARGET_SPACING:
            issues.append(_issue(
                "touch-targets", Severity.MEDIUM,
                f"Clickable elements are too close together ({_px(distance)}px spacing)",
                "Add more spacing between interactive elements to prevent accidental taps",
            ))
            # once per page
            break

    return issues


def audit_mobile_ux(inspector: Optional[PageInspector] = None) -> AuditScore:
    """Run every mobile UX check and score the result."""
    issues: list[Issue] = []
    issues.extend(analyze_touch_targets(inspector))
    issues.extend(analyze_responsiveness(inspector))
    issues.extend(analyze_horizontal_scroll(inspector))
    issues.extend(analyze_font_sizes(inspector))
    issues.extend(analyze_mobile_interactions(inspector))
    return score_issues(Category.MOBILE_UX, issues)
