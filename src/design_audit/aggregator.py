"""Cross-category aggregation: merge, prioritize and group audit issues."""

import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from .models import (
    CATEGORY_ORDER,
    SEVERITY_ORDER,
    AuditScore,
    Category,
    ComprehensiveAudit,
    ComprehensiveIssue,
    DesignAudit,
    Issue,
    Severity,
    round_half_up,
)

TOP_ISSUE_COUNT = 5

SEVERITY_WEIGHT = {
    Severity.CRITICAL: 100,
    Severity.HIGH: 75,
    Severity.MEDIUM: 50,
    Severity.LOW: 25,
}

# Accessibility and performance outrank equally severe visual issues.
CATEGORY_WEIGHT = {
    Category.ACCESSIBILITY: Decimal("1.0"),
    Category.PERFORMANCE: Decimal("0.9"),
    Category.MOBILE_UX: Decimal("0.8"),
    Category.INTERACTION_DESIGN: Decimal("0.7"),
    Category.VISUAL_CONSISTENCY: Decimal("0.6"),
}

# (pattern, issue type); first match wins
TYPE_PATTERNS = [
    (re.compile(r"contrast", re.I), "contrast"),
    (re.compile(r"keyboard|tab ?order|tabindex|focusable", re.I), "keyboard-navigation"),
    (re.compile(r"aria|accessible (name|label|text)|label|screen reader|alt (text|attribute)", re.I), "aria"),
    (re.compile(r"focus", re.I), "focus-indicators"),
    (re.compile(r"image|webp|avif|lazy", re.I), "image-optimization"),
    (re.compile(r"bundle|javascript|css bundle|chunk|code splitting", re.I), "bundle-size"),
    (re.compile(r"touch target|tap|clickable elements", re.I), "touch-targets"),
    (re.compile(r"viewport|responsive|horizontal scroll|fixed width", re.I), "responsive"),
    (re.compile(r"font size|text size|font-size", re.I), "font-size"),
    (re.compile(r"spacing|margin|padding|typography|font famil|color|palette|max-width|grid|flexbox|float", re.I),
     "visual-consistency"),
    (re.compile(r"loading|empty state|error|success|hover|transition|animation|progress|undo|feedback", re.I),
     "interaction-design"),
]

# (pattern, location); first match wins
LOCATION_PATTERNS = [
    (re.compile(r"dashboard", re.I), "Dashboard"),
    (re.compile(r"header", re.I), "Header"),
    (re.compile(r"footer", re.I), "Footer"),
    (re.compile(r"\bnav(igation)?\b|menu|\blinks?\b", re.I), "Navigation"),
    (re.compile(r"\bforms?\b|input|textarea|select|fieldset|label", re.I), "Forms"),
    (re.compile(r"button", re.I), "Buttons"),
    (re.compile(r"image|\bimg\b|alt text|picture", re.I), "Images"),
]

DEFAULT_TYPE = "general"
DEFAULT_LOCATION = "General"

IMPACT = {
    ("contrast", Severity.CRITICAL): "Text is unreadable for many users, including those with low vision",
    ("contrast", Severity.HIGH): "Text is difficult to read for users with visual impairments",
    ("aria", Severity.HIGH): "Screen reader users cannot identify or operate these controls",
    ("aria", Severity.MEDIUM): "Screen reader users get unclear or misleading information",
    ("alt-text", Severity.HIGH): "Screen reader users miss the content of images",
    ("alt-text", Severity.MEDIUM): "Image descriptions are unhelpful for assistive technology users",
    ("keyboard-nav", Severity.HIGH): "Keyboard users cannot reach or activate these elements",
    ("keyboard-navigation", Severity.HIGH): "Keyboard users cannot reach or activate these elements",
    ("keyboard-nav", Severity.MEDIUM): "Unexpected tab order makes keyboard navigation difficult",
    ("keyboard-navigation", Severity.MEDIUM): "Unexpected tab order makes keyboard navigation difficult",
    ("focus-indicators", Severity.MEDIUM): "Keyboard users lose track of where they are on the page",
    ("semantic-structure", Severity.HIGH): "Assistive technology users cannot grasp the page structure",
    ("semantic-structure", Severity.MEDIUM): "Page structure is harder to navigate with assistive technology",
    ("bundle-size", Severity.CRITICAL): "Site fails to load on slow connections",
    ("bundle-size", Severity.HIGH): "Pages load slowly, especially on mobile networks",
    ("bundle-size", Severity.MEDIUM): "Extra download weight slows down page load",
    ("image-optimization", Severity.HIGH): "Significant loading delays for most users",
    ("image-optimization", Severity.MEDIUM): "Images slow down page load and shift layout",
    ("image-optimization", Severity.LOW): "Off-screen images compete with visible content while loading",
    ("core-web-vitals", Severity.HIGH): "Users perceive the site as slow and may leave before it loads",
    ("core-web-vitals", Severity.MEDIUM): "Page load feels sluggish to users",
    ("touch-targets", Severity.HIGH): "Difficult mobile interaction reduces usability",
    ("touch-targets", Severity.MEDIUM): "Users may tap the wrong element on touch screens",
    ("responsive", Severity.CRITICAL): "Page renders at desktop width on phones and is hard to use",
    ("responsive", Severity.MEDIUM): "Layout may break on small screens",
    ("horizontal-scroll", Severity.HIGH): "Mobile users must scroll sideways to read content",
    ("horizontal-scroll", Severity.MEDIUM): "Content is cut off on narrow screens",
    ("font-size", Severity.MEDIUM): "Text is hard to read on mobile devices",
    ("spacing", Severity.MEDIUM): "Reduces visual cohesion and professional appearance",
    ("typography", Severity.HIGH): "Too many typefaces make the interface look inconsistent",
    ("typography", Severity.MEDIUM): "Inconsistent text hierarchy reduces readability",
    ("color", Severity.MEDIUM): "An inconsistent palette weakens brand and visual hierarchy",
    ("loading-states", Severity.HIGH): "Users unsure if actions are processing, leading to confusion",
    ("loading-states", Severity.MEDIUM): "Users unsure if content is still loading",
    ("empty-states", Severity.MEDIUM): "Users see blank areas with no guidance on what to do next",
    ("error-states", Severity.HIGH): "Users cannot tell what went wrong or how to fix form input",
    ("error-states", Severity.MEDIUM): "Unexpected failures leave users on a broken page",
    ("micro-interactions", Severity.HIGH): "Keyboard users cannot see which element is active",
    ("micro-interactions", Severity.MEDIUM): "Interface feels unresponsive to user actions",
    ("feedback", Severity.MEDIUM): "Users cannot tell whether their action succeeded",
}


@dataclass(frozen=True)
class ParsedIssue:
    """An issue string split back into severity and description."""
    severity: Severity
    description: str


def parse_issue_string(text: str) -> ParsedIssue:
    """Split "SEVERITY: description" on the first ": ".

    Strings without a recognised severity prefix are kept whole as ``low``.
    """
    prefix, sep, rest = text.partition(": ")
    if sep:
        severity = Severity.parse(prefix)
        if severity is not None:
            return ParsedIssue(severity=severity, description=rest)
    return ParsedIssue(severity=Severity.LOW, description=text)


def infer_issue_type(description: str) -> str:
    for pattern, issue_type in TYPE_PATTERNS:
        if pattern.search(description):
            return issue_type
    return DEFAULT_TYPE


def infer_location(description: str, element: Optional[str] = None) -> str:
    """Location keyword found in the description, else in the element pointer."""
    for text in (description, element or ""):
        for pattern, location in LOCATION_PATTERNS:
            if pattern.search(text):
                return location
    return DEFAULT_LOCATION


def calculate_priority(severity: Severity, category: Category) -> int:
    """round(severity weight x category weight), halves rounded up."""
    value = SEVERITY_WEIGHT[severity] * CATEGORY_WEIGHT[category]
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def generate_impact(issue_type: str, severity: Severity) -> str:
    return IMPACT.get(
        (issue_type, severity),
        f"{severity.value.capitalize()} impact on user experience",
    )


def _issues_for(category: Category, result: AuditScore) -> list[Issue]:
    """Structured findings when the category kept them, else re-parsed strings."""
    if result.findings:
        return list(result.findings)
    issues = []
    for text in result.issues:
        parsed = parse_issue_string(text)
        issues.append(Issue(
            category=category,
            type=infer_issue_type(parsed.description),
            severity=parsed.severity,
            description=parsed.description,
            recommendation="",
        ))
    return issues


def _default_recommendation(result: AuditScore) -> str:
    return result.recommendations[0] if result.recommendations else "Review and address this issue"


def enrich_issues(audit: DesignAudit) -> list[ComprehensiveIssue]:
    """Every issue of every available category, with id, priority, location and impact."""
    enriched: list[ComprehensiveIssue] = []
    for category, result in audit.scores().items():
        for n, issue in enumerate(_issues_for(category, result), start=1):
            enriched.append(ComprehensiveIssue(
                id=f"{category.prefix}-{n}",
                category=category,
                type=issue.type,
                severity=issue.severity,
                priority=calculate_priority(issue.severity, category),
                location=infer_location(issue.description, issue.element),
                description=issue.description,
                impact=generate_impact(issue.type, issue.severity),
                recommendation=issue.recommendation or _default_recommendation(result),
                page=issue.page,
            ))
    return enriched


def overall_score(audit_scores) -> float:
    """Mean of the available category scores; 10.0 when none are available."""
    scores = [s.score for s in audit_scores]
    if not scores:
        return 10.0
    return round_half_up(sum(scores) / len(scores))


def aggregate(audit: DesignAudit) -> ComprehensiveAudit:
    """Build the comprehensive audit from a five-category design audit."""
    all_issues = sorted(enrich_issues(audit), key=lambda i: i.priority, reverse=True)

    by_category: dict[Category, list[ComprehensiveIssue]] = {c: [] for c in CATEGORY_ORDER}
    by_severity: dict[Severity, list[ComprehensiveIssue]] = {s: [] for s in SEVERITY_ORDER}
    for issue in all_issues:
        by_category[issue.category].append(issue)
        by_severity[issue.severity].append(issue)

    return ComprehensiveAudit(
        accessibility=audit.accessibility,
        performance=audit.performance,
        mobile_ux=audit.mobile_ux,
        visual_consistency=audit.visual_consistency,
        interaction_design=audit.interaction_design,
        overall_score=audit.overall_score,
        timestamp=audit.timestamp,
        errors=dict(audit.errors),
        all_issues=tuple(all_issues),
        top_issues=tuple(all_issues[:TOP_ISSUE_COUNT]),
        issues_by_category={c: tuple(v) for c, v in by_category.items() if v},
        issues_by_severity={s: tuple(v) for s, v in by_severity.items() if v},
    )
