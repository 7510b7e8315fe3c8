"""Per-category scoring of audit issues."""

from dataclasses import dataclass
from typing import Iterable, Sequence

from .models import AuditScore, Category, Issue, Severity, round_half_up

MAX_SCORE = 10.0
MIN_SCORE = 1.0

# Points subtracted per issue. Critical issues cost more outside the
# accessibility and performance categories.
SEVERITY_PENALTY = {
    Severity.HIGH: 2.0,
    Severity.MEDIUM: 1.0,
    Severity.LOW: 0.5,
}

CRITICAL_PENALTY = {
    Category.ACCESSIBILITY: 2.5,
    Category.PERFORMANCE: 2.5,
    Category.MOBILE_UX: 3.0,
    Category.VISUAL_CONSISTENCY: 3.0,
    Category.INTERACTION_DESIGN: 3.0,
}


@dataclass(frozen=True)
class Guidance:
    """A recommendation added when any issue matches one of the triggers."""
    text: str
    severities: frozenset[Severity] = frozenset()
    types: frozenset[str] = frozenset()

    def applies(self, issues: Sequence[Issue]) -> bool:
        return any(i.severity in self.severities or i.type in self.types for i in issues)


def _on(*severities: Severity, types: Iterable[str] = ()) -> dict:
    return {"severities": frozenset(severities), "types": frozenset(types)}


CONDITIONAL_GUIDANCE: dict[Category, tuple[Guidance, ...]] = {
    Category.ACCESSIBILITY: (
        Guidance("Address critical accessibility issues immediately", **_on(Severity.CRITICAL)),
        Guidance("Fix high-priority accessibility barriers", **_on(Severity.HIGH)),
        Guidance(
            "Improve color contrast ratios to meet WCAG AA standards (4.5:1 for normal text)",
            **_on(types=["contrast"]),
        ),
        Guidance(
            "Add proper ARIA labels and semantic markup for screen readers",
            **_on(types=["aria", "semantic-structure"]),
        ),
        Guidance("Ensure all interactive elements are keyboard accessible", **_on(types=["keyboard-nav"])),
        Guidance(
            "Add visible focus indicators for better keyboard navigation",
            **_on(types=["focus-indicators"]),
        ),
        Guidance("Provide descriptive alt text for all meaningful images", **_on(types=["alt-text"])),
    ),
    Category.PERFORMANCE: (
        Guidance(
            "Run Lighthouse audit for detailed performance insights",
            **_on(Severity.CRITICAL, Severity.HIGH),
        ),
        Guidance(
            "Implement code splitting and remove unused dependencies",
            **_on(types=["bundle-size"]),
        ),
    ),
    Category.MOBILE_UX: (
        Guidance("Fix critical mobile UX issues immediately", **_on(Severity.CRITICAL)),
    ),
    Category.VISUAL_CONSISTENCY: (),
    Category.INTERACTION_DESIGN: (),
}

STATIC_GUIDANCE: dict[Category, tuple[str, ...]] = {
    Category.ACCESSIBILITY: (
        "Run automated accessibility testing with axe-core",
        "Conduct manual keyboard navigation testing",
        "Test with screen readers",
    ),
    Category.PERFORMANCE: (
        "Optimize images with modern formats (WebP, AVIF)",
        "Implement proper lazy loading for below-fold content",
        "Monitor Core Web Vitals regularly",
        "Consider implementing service worker for caching",
    ),
    Category.MOBILE_UX: (
        "Test on real mobile devices across different screen sizes",
        "Ensure all touch targets are at least 44x44px",
        "Verify no horizontal scrolling occurs on mobile viewports",
        "Use minimum 16px font size for body text",
        "Test navigation and interactions with touch input",
    ),
    Category.VISUAL_CONSISTENCY: (
        "Create and document a design system with consistent spacing, typography, and color scales",
        "Use CSS custom properties (variables) for consistent values",
        "Implement a typography scale with defined font sizes and line heights",
        "Establish a limited color palette with semantic naming",
        "Use consistent spacing values based on a modular scale (e.g., 4px base)",
        "Create reusable component library for consistent UI patterns",
    ),
    Category.INTERACTION_DESIGN: (
        "Implement comprehensive loading states for all async operations",
        "Design helpful empty states with clear next actions",
        "Add robust error handling with recovery options",
        "Include subtle micro-interactions for better user feedback",
        "Ensure all interactive elements have hover and focus states",
        "Add progress indicators for multi-step processes",
        "Implement success confirmations for completed actions",
    ),
}


def penalty(category: Category, severity: Severity) -> float:
    if severity == Severity.CRITICAL:
        return CRITICAL_PENALTY[category]
    return SEVERITY_PENALTY[severity]


def calculate_score(category: Category, issues: Iterable[Issue]) -> float:
    """10 minus the summed penalties, clamped to [1, 10] with one decimal."""
    score = MAX_SCORE - sum(penalty(category, i.severity) for i in issues)
    score = max(MIN_SCORE, min(MAX_SCORE, score))
    return round_half_up(score)


def build_recommendations(
    category: Category,
    issues: Sequence[Issue],
    extra: Iterable[str] = (),
) -> tuple[str, ...]:
    """Triggered guidance first, then extra items, then the static list; duplicates dropped."""
    triggered = [g.text for g in CONDITIONAL_GUIDANCE[category] if g.applies(issues)]
    ordered = [*triggered, *extra, *STATIC_GUIDANCE[category]]
    return tuple(dict.fromkeys(ordered))


def score_issues(
    category: Category,
    issues: Sequence[Issue],
    recommendations: Iterable[str] = (),
) -> AuditScore:
    """Turn one category's issues into its AuditScore."""
    return AuditScore(
        score=calculate_score(category, issues),
        issues=tuple(i.label() for i in issues),
        recommendations=build_recommendations(category, issues, recommendations),
        findings=tuple(issues),
    )
