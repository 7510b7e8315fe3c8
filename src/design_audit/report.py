"""Markdown rendering of design audit results."""

from datetime import datetime
from typing import Optional, Sequence

from .models import (
    CATEGORY_ORDER,
    SEVERITY_ORDER,
    AuditScore,
    Category,
    ComprehensiveAudit,
    ComprehensiveIssue,
    DesignAudit,
    Severity,
)
from .scanner import ScanResult

GOOD_SCORE = 7

SEVERITY_BADGE = {
    Severity.CRITICAL: "🚨 Critical",
    Severity.HIGH: "🔴 High",
    Severity.MEDIUM: "🟡 Medium",
    Severity.LOW: "🟢 Low",
}

CATEGORY_INTRO = {
    Category.ACCESSIBILITY: (
        "Accessibility ensures the platform is usable by people with disabilities and meets WCAG standards."
    ),
    Category.PERFORMANCE: (
        "Performance analysis focuses on loading speed, Core Web Vitals, and optimization opportunities."
    ),
    Category.MOBILE_UX: (
        "Mobile user experience evaluation covering touch targets, responsive design, "
        "and mobile-specific usability."
    ),
    Category.VISUAL_CONSISTENCY: (
        "Visual consistency analysis of spacing systems, typography, color usage, and design patterns."
    ),
    Category.INTERACTION_DESIGN: (
        "Interaction design evaluation covering loading states, error handling, micro-interactions, "
        "and user feedback."
    ),
}

NEXT_STEPS = (
    "**Review and Prioritize**: Stakeholders should review the top 5 issues and Phase 1 critical items",
    "**Create Tickets**: Break down issues into actionable development tasks",
    "**Implement Fixes**: Address issues in order of priority",
    "**Re-test**: Validate fixes and run focused audits on changed areas",
    "**Monitor**: Set up ongoing monitoring for performance and accessibility metrics",
)

METHODOLOGY = (
    "**Rule-based Analyzers**: Five independent category analyzers over the page's markup and styles",
    "**Accessibility Testing**: WCAG 2.1 contrast ratios, accessible names, keyboard and focus checks",
    "**Performance Monitoring**: Core Web Vitals thresholds, bundle and image analysis",
    "**Mobile Testing**: Viewport configuration, touch target and font size analysis",
    "**Visual Analysis**: CSS property extraction, design pattern consistency checks",
    "**Interaction Review**: Loading, empty, error and feedback state detection",
)

MEDIUM_ROADMAP_LIMIT = 5


def format_score(score: float) -> str:
    if score >= 9:
        return f"🟢 {score}/10 (Excellent)"
    if score >= 7:
        return f"🟡 {score}/10 (Good)"
    if score >= 5:
        return f"🟠 {score}/10 (Fair)"
    return f"🔴 {score}/10 (Needs Improvement)"


def _status(result: Optional[AuditScore]) -> str:
    if result is None:
        return "❌ Failed"
    return "✅ Good" if result.score >= GOOD_SCORE else "⚠️ Needs Work"


def _score_cell(result: Optional[AuditScore]) -> str:
    return "n/a" if result is None else f"{result.score}/10"


def _generated(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return timestamp


def _bullets(items: Sequence[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _title(text: str) -> str:
    return text.replace("_", " ").replace("-", " ").title()


# Per-category report

def _category_section(audit: DesignAudit, category: Category) -> str:
    result = audit.category(category)
    if result is None:
        error = audit.errors.get(category.value, "unknown error")
        return f"## {category.label} ❌ Not available\n\nThis category could not be audited: {error}"

    issues = _bullets(result.issues) if result.issues else "✅ No issues found"
    return (
        f"## {category.label} {format_score(result.score)}\n\n"
        f"### Issues Found\n{issues}\n\n"
        f"### Recommendations\n{_bullets(result.recommendations)}"
    )


def generate_audit_report(audit: DesignAudit) -> str:
    """Markdown report of a five-category design audit."""
    rows = "\n".join(
        f"| {c.label} | {_score_cell(audit.category(c))} | {_status(audit.category(c))} |"
        for c in CATEGORY_ORDER
    )
    sections = "\n\n---\n\n".join(_category_section(audit, c) for c in CATEGORY_ORDER)

    return f"""# Design Audit Report

**Generated:** {_generated(audit.timestamp)}
**Overall Score:** {format_score(audit.overall_score)}

## Summary

| Category | Score | Status |
|----------|-------|--------|
{rows}

{sections}

---

## Next Steps

1. **Priority 1 (Critical)**: Address any issues marked as CRITICAL
2. **Priority 2 (High)**: Fix HIGH severity issues that impact user experience
3. **Priority 3 (Medium)**: Improve MEDIUM severity issues for better consistency
4. **Priority 4 (Low)**: Polish LOW severity issues when time permits

## Tools Used

- Rule-based audit analyzers for comprehensive design analysis
- Static style resolution for accessibility and visual consistency checks
- Resource and Core Web Vitals data for performance checks
- DOM inspection for mobile UX and interactions

*This audit was generated automatically. For more detailed analysis, consider running specialized tools like axe-core, Lighthouse, and manual testing.*
"""


# Comprehensive report

def _top_issue(index: int, issue: ComprehensiveIssue) -> str:
    page = f"\n**Page:** {issue.page}" if issue.page else ""
    return f"""
### {index}. {SEVERITY_BADGE[issue.severity]} - {_title(issue.type)}

**Location:** {issue.location}
**Category:** {issue.category.label}
**Priority Score:** {issue.priority}/100{page}

**Description:** {issue.description}

**Impact:** {issue.impact}

**Recommendation:** {issue.recommendation}
"""


def format_top_issues(issues: Sequence[ComprehensiveIssue]) -> str:
    if not issues:
        return "✅ No high-priority issues found"
    return "\n---\n".join(_top_issue(i, issue) for i, issue in enumerate(issues, start=1))


def format_category_issues(issues: Sequence[ComprehensiveIssue]) -> str:
    if not issues:
        return "✅ No issues found"
    lines = []
    for severity in SEVERITY_ORDER:
        matching = [i for i in issues if i.severity == severity]
        if not matching:
            continue
        lines.append(f"\n#### {SEVERITY_BADGE[severity]} Issues")
        lines.extend(f"- **{i.location}**: {i.description}" for i in matching)
    return "\n".join(lines)


def _roadmap(audit: ComprehensiveAudit) -> str:
    critical = audit.issues_by_severity.get(Severity.CRITICAL, ())
    high = audit.issues_by_severity.get(Severity.HIGH, ())
    medium = audit.issues_by_severity.get(Severity.MEDIUM, ())
    low = audit.issues_by_severity.get(Severity.LOW, ())

    phase1 = _bullets([i.description for i in critical]) or "✅ No critical issues to address"
    phase2 = _bullets([i.description for i in high]) or "✅ No high priority issues to address"
    if medium:
        phase3 = _bullets([i.description for i in medium[:MEDIUM_ROADMAP_LIMIT]])
        if len(medium) > MEDIUM_ROADMAP_LIMIT:
            phase3 += f"\n- And {len(medium) - MEDIUM_ROADMAP_LIMIT} more medium priority issues"
    else:
        phase3 = "✅ No medium priority issues to address"
    phase4 = (
        f"{len(low)} low priority issues for continuous improvement"
        if low else "✅ No low priority issues to address"
    )

    return f"""## Implementation Roadmap

### Phase 1: Critical Issues (Immediate - Week 1)
{phase1}

### Phase 2: High Priority (Week 2-3)
{phase2}

### Phase 3: Medium Priority (Month 2)
{phase3}

### Phase 4: Low Priority (Ongoing)
{phase4}"""


def _detailed_section(audit: ComprehensiveAudit, category: Category) -> str:
    result = audit.category(category)
    heading = f"### {category.label} " + (format_score(result.score) if result else "❌ Not available")
    body = format_category_issues(audit.issues_by_category.get(category, ()))
    if result is None:
        body = f"This category could not be audited: {audit.errors.get(category.value, 'unknown error')}"
    parts = [heading, CATEGORY_INTRO[category], body]
    if result is not None and result.recommendations:
        parts.append("**Key Recommendations:**\n" + _bullets(result.recommendations[:5]))
    return "\n\n".join(parts)


def generate_comprehensive_audit_report(audit: ComprehensiveAudit) -> str:
    """Full markdown report: summary, top issues, per-category detail and roadmap."""
    total = len(audit.all_issues)
    rows = "\n".join(
        f"| {c.label} | {_score_cell(audit.category(c))} | {_status(audit.category(c))} "
        f"| {audit.category_count(c)} |"
        for c in CATEGORY_ORDER
    )
    details = "\n\n---\n\n".join(_detailed_section(audit, c) for c in CATEGORY_ORDER)

    return f"""# Comprehensive Design Audit Report

**Generated:** {_generated(audit.timestamp)}
**Overall Score:** {format_score(audit.overall_score)}
**Total Issues Found:** {total}

## Executive Summary

This comprehensive design audit evaluated the page across five key categories: Accessibility, Performance, Mobile UX, Visual Consistency, and Interaction Design. The audit identified **{total} total issues** across all categories, with **{len(audit.top_issues)} high-priority items** requiring immediate attention.

### Issue Breakdown by Severity
- 🚨 **Critical:** {audit.severity_count(Severity.CRITICAL)} issues
- 🔴 **High:** {audit.severity_count(Severity.HIGH)} issues
- 🟡 **Medium:** {audit.severity_count(Severity.MEDIUM)} issues
- 🟢 **Low:** {audit.severity_count(Severity.LOW)} issues

## Category Scores Overview

| Category | Score | Status | Issues Found |
|----------|-------|--------|--------------|
{rows}

## Top 5 Highest-Priority Issues

These are the most critical issues that should be addressed first based on severity, user impact, and business importance:

{format_top_issues(audit.top_issues)}

---

## Detailed Category Analysis

{details}

---

{_roadmap(audit)}

## Tools and Methodology

This audit was conducted using:
{_bullets(METHODOLOGY)}

## Next Steps

{chr(10).join(f"{n}. {step}" for n, step in enumerate(NEXT_STEPS, start=1))}

---

*This comprehensive audit provides a foundation for systematic design improvements. Regular audits (monthly/quarterly) are recommended to maintain high standards and catch regressions early.*
"""


# Multi-page accessibility report

A11Y_NEXT_STEPS = (
    "**Address Critical Issues** - Fix all critical accessibility barriers immediately",
    "**Implement Testing** - Add automated accessibility testing to CI/CD pipeline",
    "**Team Training** - Ensure development team understands WCAG guidelines",
    "**User Testing** - Conduct testing with real users using assistive technologies",
    "**Continuous Monitoring** - Establish regular accessibility audits",
)


def generate_accessibility_report(result: ScanResult, timestamp: str) -> str:
    """Markdown summary of a multi-page accessibility scan."""
    summary = result.summary
    pages = "\n".join(f"- {page}: {r.score}/10" for page, r in result.page_results.items())
    if result.errors:
        pages += "\n" + "\n".join(f"- {page}: ❌ {error}" for page, error in result.errors.items())

    critical = (
        "\n".join(f"- **{i.page}**: {i.description}" for i in result.critical_issues)
        or "✅ No critical issues found"
    )
    recommendations = dict.fromkeys(
        rec for r in result.page_results.values() for rec in r.recommendations
    )

    return f"""# Accessibility Audit Summary

**Generated:** {_generated(timestamp)}
**Overall Score:** {format_score(result.overall_score)}

## Executive Summary

This accessibility audit evaluated the application across {len(result.page_results)} pages, analyzing color contrast ratios, keyboard navigation, ARIA labels, focus indicators, and alt text coverage.

## Key Findings

- **Total Issues Found:** {summary.total_issues}
- **Critical Issues:** {summary.critical_count} 🚨
- **High Priority Issues:** {summary.high_count} ⚠️
- **Medium Issues:** {summary.medium_count} 🟡
- **Low Issues:** {summary.low_count} ℹ️

## Page Scores

{pages or "No pages scanned"}

## Critical Issues

{critical}

## Recommendations

{_bullets(list(recommendations))}

## Next Steps

{chr(10).join(f"{n}. {step}" for n, step in enumerate(A11Y_NEXT_STEPS, start=1))}

---

*For detailed technical findings, see the accompanying JSON report.*
"""
