"""Data models for design audit results."""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union


class Severity(Enum):
    """Severity level for audit issues, ordered low < medium < high < critical."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, token: str) -> Optional["Severity"]:
        """Return the severity named by token (any case), or None."""
        try:
            return cls(token.strip().lower())
        except ValueError:
            return None


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}

# Highest first, the order reports list severities in.
SEVERITY_ORDER = (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)


class Category(Enum):
    """Audit category an issue belongs to."""
    ACCESSIBILITY = "accessibility"
    PERFORMANCE = "performance"
    MOBILE_UX = "mobile-ux"
    VISUAL_CONSISTENCY = "visual-consistency"
    INTERACTION_DESIGN = "interaction-design"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @property
    def prefix(self) -> str:
        """Short prefix used for issue ids."""
        return _CATEGORY_PREFIXES[self]


_CATEGORY_LABELS = {
    Category.ACCESSIBILITY: "Accessibility",
    Category.PERFORMANCE: "Performance",
    Category.MOBILE_UX: "Mobile UX",
    Category.VISUAL_CONSISTENCY: "Visual Consistency",
    Category.INTERACTION_DESIGN: "Interaction Design",
}

_CATEGORY_PREFIXES = {
    Category.ACCESSIBILITY: "acc",
    Category.PERFORMANCE: "perf",
    Category.MOBILE_UX: "mob",
    Category.VISUAL_CONSISTENCY: "vis",
    Category.INTERACTION_DESIGN: "int",
}

# Report order of the five categories.
CATEGORY_ORDER = (
    Category.ACCESSIBILITY,
    Category.PERFORMANCE,
    Category.MOBILE_UX,
    Category.VISUAL_CONSISTENCY,
    Category.INTERACTION_DESIGN,
)


def round_half_up(value: float, places: int = 1) -> float:
    """Round like Math.round(x * 10) / 10 rather than banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Issue:
    """A single audit finding."""
    category: Category
    type: str
    severity: Severity
    description: str
    recommendation: str
    element: Optional[str] = None  # tag name, page path or "various"
    metric: Optional[str] = None
    current_value: Optional[Union[str, float]] = None
    target_value: Optional[Union[str, float]] = None
    page: Optional[str] = None

    def label(self) -> str:
        """Render as the "{SEVERITY}: {description}" string used in scores."""
        return f"{self.severity.value.upper()}: {self.description}"


@dataclass(frozen=True)
class AuditScore:
    """Result of one audit category."""
    score: float  # 1.0-10.0
    issues: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    findings: tuple[Issue, ...] = ()

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)


@dataclass(frozen=True)
class DesignAudit:
    """Five-category audit of one page.

    A category is None when its analyzer raised; the message is kept in
    ``errors`` and the category is left out of ``overall_score``.
    """
    accessibility: Optional[AuditScore]
    performance: Optional[AuditScore]
    mobile_ux: Optional[AuditScore]
    visual_consistency: Optional[AuditScore]
    interaction_design: Optional[AuditScore]
    overall_score: float
    timestamp: str
    errors: dict[str, str] = field(default_factory=dict)

    def category(self, category: Category) -> Optional[AuditScore]:
        return getattr(self, category.name.lower())

    def scores(self) -> dict[Category, AuditScore]:
        """Available category results in report order."""
        results = {}
        for category in CATEGORY_ORDER:
            result = self.category(category)
            if result is not None:
                results[category] = result
        return results


@dataclass(frozen=True)
class ComprehensiveIssue:
    """An issue enriched with id, priority and impact for cross-category ranking."""
    id: str
    category: Category
    type: str
    severity: Severity
    priority: int  # 1-100
    location: str
    description: str
    impact: str
    recommendation: str
    page: Optional[str] = None


@dataclass(frozen=True)
class ComprehensiveAudit(DesignAudit):
    """Design audit plus the merged, prioritized and grouped issue lists."""
    all_issues: tuple[ComprehensiveIssue, ...] = ()
    top_issues: tuple[ComprehensiveIssue, ...] = ()
    issues_by_category: dict[Category, tuple[ComprehensiveIssue, ...]] = field(default_factory=dict)
    issues_by_severity: dict[Severity, tuple[ComprehensiveIssue, ...]] = field(default_factory=dict)

    def severity_count(self, severity: Severity) -> int:
        return len(self.issues_by_severity.get(severity, ()))

    def category_count(self, category: Category) -> int:
        return len(self.issues_by_category.get(category, ()))


@dataclass
class UrlAuditResult:
    """Complete audit result for a URL."""
    url: str
    final_url: str
    audit: Optional[ComprehensiveAudit] = None
    fetch_time_ms: int = 0
    error: Optional[str] = None
