"""Interaction design checks: loading, empty and error states, micro-interactions, feedback."""

import re
from typing import Optional

from ..inspector import PageInspector, ensure_inspector
from ..models import AuditScore, Category, Issue, Severity
from ..scoring import score_issues

LOADING_CLASS_HINTS = ("loading", "spinner", "disabled")
INTERACTIVE_SELECTOR = 'button, a, input[type="submit"], [onclick]'
NO_TRANSITION = {"", "none", "all 0s ease 0s", "all 0s ease 0s 0s"}

# Properties that trigger layout when animated
LAYOUT_PROPERTIES = {
    "width", "height", "top", "left", "right", "bottom",
    "margin", "margin-top", "margin-right", "margin-bottom", "margin-left",
    "padding", "padding-top", "padding-right", "padding-bottom", "padding-left",
    "min-width", "min-height", "max-width", "max-height", "font-size",
}

# Selector groups for state UI the page should carry
ASYNC_REGION = '[data-async], [class*="async"], [id*="content"]'
LOADER = '[class*="loader"], [class*="loading"], [class*="spinner"], [class*="skeleton"], [aria-busy="true"]'
EMPTY_CANDIDATES = 'ul, ol, table tbody, [class*="list"], [class*="grid"]'
EMPTY_STATE = '[class*="empty"], [class*="no-"], [data-empty]'
SEARCH_INPUT = 'input[type="search"], input[placeholder*="search" i]'
NO_RESULTS = '[class*="no-results"], [class*="empty-search"]'
FORM_FIELD = "input, textarea, select"
ERROR_MESSAGE = '[class*="error"], [role="alert"], [class*="invalid"]'
ERROR_BOUNDARY = '[class*="error-boundary"], [id*="error"]'
OFFLINE_STATE = '[class*="offline"], [class*="network-error"]'
SUCCESS_MESSAGE = '[class*="success"], [class*="confirmation"], [role="status"]'
STEP_INDICATOR = '[class*="stepper"], [class*="progress"], [class*="breadcrumb"], [role="progressbar"]'
STEP = '[class*="step-"], [data-step]'
COMPLEX_INPUT = 'input[type="password"], input[type="email"], textarea'
HELP_TEXT = '[title], [class*="tooltip"], [aria-describedby]'
DESTRUCTIVE = '[class*="delete"], [class*="remove"], button[class*="danger"]'
UNDO = '[class*="undo"], [data-undo], [data-confirm]'


def _issue(type_: str, severity: Severity, description: str, recommendation: str,
           element: Optional[str] = None) -> Issue:
    return Issue(
        category=Category.INTERACTION_DESIGN,
        type=type_,
        severity=severity,
        description=description,
        recommendation=recommendation,
        element=element,
    )


def analyze_loading_states(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    for form in page.query("form"):
        for button in page.query_within(form, 'button[type="submit"], input[type="submit"]'):
            class_name = button.class_name.lower()
            signalled = (
                any(hint in class_name for hint in LOADING_CLASS_HINTS)
                or button.get("aria-busy")
                or button.get("aria-disabled")
                or button.has("disabled")
            )
            if not signalled:
                issues.append(_issue(
                    "loading-states", Severity.HIGH,
                    "Submit button lacks loading state indicators",
                    "Add loading spinner and disable button during form submission",
                    element=button.tag,
                ))

    if page.exists(ASYNC_REGION) and not page.exists(LOADER):
        issues.append(_issue(
            "loading-states", Severity.MEDIUM,
            "No visible loading indicators found for async content",
            "Implement loading spinners or skeleton screens for dynamic content",
        ))

    return issues


def analyze_empty_states(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    for container in page.query(EMPTY_CANDIDATES):
        if container.child_count or container.text:
            continue
        # an empty-state block usually sits next to the list it stands in for
        parent = container.parent
        if parent is not None and page.query_within(parent, EMPTY_STATE):
            continue
        issues.append(_issue(
            "empty-states", Severity.MEDIUM,
            "Empty container lacks empty state messaging",
            "Add helpful empty state with illustration and clear action",
            element=container.tag,
        ))

    if page.exists(SEARCH_INPUT) and not page.exists(NO_RESULTS):
        issues.append(_issue(
            "empty-states", Severity.LOW,
            'Search functionality lacks "no results" state design',
            "Design empty state for when search returns no results",
            element="input",
        ))

    return issues


def analyze_error_states(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    if page.exists(FORM_FIELD) and not page.exists(ERROR_MESSAGE):
        issues.append(_issue(
            "error-states", Severity.HIGH,
            "Forms lack error message display areas",
            "Add error message containers and validation feedback",
            element="form",
        ))

    if not page.exists(ERROR_BOUNDARY):
        issues.append(_issue(
            "error-states", Severity.MEDIUM,
            "No global error handling UI detected",
            "Implement error boundary component for graceful error handling",
        ))

    if not page.exists(OFFLINE_STATE):
        issues.append(_issue(
            "error-states", Severity.LOW,
            "No offline/network error state detected",
            "Add offline state and network error handling",
        ))

    return issues


def _animated_properties(page: PageInspector, animation: str) -> set[str]:
    """Properties touched by the @keyframes an animation value refers to."""
    keyframes = page.keyframes()
    animated: set[str] = set()
    for token in re.split(r"[\s,]+", animation):
        animated |= keyframes.get(token.strip("\"'"), frozenset())
    return animated


def _transitioned_properties(transition: str) -> set[str]:
    return {part.split()[0].lower() for part in transition.split(",") if part.strip()}


def analyze_micro_interactions(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    interactive = page.query(INTERACTIVE_SELECTOR)
    has_transitions = False
    has_focus_styles = False

    for el in interactive:
        style = page.style(el)
        hover = style.state("hover")
        focus = style.state("focus")

        transition = style.get("transition", "none").strip().lower()
        if transition not in NO_TRANSITION or "transition" in hover or "transition" in focus:
            has_transitions = True

        if style.get("outline", "none") != "none" or focus.get("outline", "none") != "none" \
                or focus.get("box-shadow", "none") != "none":
            has_focus_styles = True

        if style.get("cursor") != "pointer" and el.tag != "input":
            issues.append(_issue(
                "micro-interactions", Severity.LOW,
                "Interactive element lacks pointer cursor",
                "Add cursor: pointer to interactive elements for better UX",
                element=el.tag,
            ))

    if interactive and not has_transitions:
        issues.append(_issue(
            "micro-interactions", Severity.MEDIUM,
            "Interactive elements lack hover/focus transition effects",
            "Add subtle transitions to buttons and links for better feedback",
            element="various",
        ))

    if interactive and not has_focus_styles:
        issues.append(_issue(
            "micro-interactions", Severity.HIGH,
            "Interactive elements lack visible focus states",
            "Add clear focus indicators for keyboard navigation",
            element="various",
        ))

    for el in page.query("*"):
        style = page.style(el)
        animation = " ".join(filter(None, (style.get("animation"), style.get("animation-name"))))
        touched = _animated_properties(page, animation)
        transition = style.get("transition", "none")
        if transition.strip().lower() not in NO_TRANSITION:
            touched |= _transitioned_properties(transition)
        if touched & LAYOUT_PROPERTIES:
            issues.append(_issue(
                "micro-interactions", Severity.MEDIUM,
                "Detected potentially performance-heavy animations",
                "Use transform and opacity for animations instead of layout properties",
                element="various",
            ))
            break

    return issues


def analyze_feedback(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    if page.exists("form") and not page.exists(SUCCESS_MESSAGE):
        issues.append(_issue(
            "feedback", Severity.MEDIUM,
            "Forms lack success confirmation messaging",
            "Add success messages to confirm completed actions",
            element="form",
        ))

    if len(page.query(STEP)) > 1 and not page.exists(STEP_INDICATOR):
        issues.append(_issue(
            "feedback", Severity.MEDIUM,
            "Multi-step process lacks progress indicators",
            "Add step indicators to show progress in multi-step flows",
        ))

    if page.exists(COMPLEX_INPUT) and not page.exists(HELP_TEXT):
        issues.append(_issue(
            "feedback", Severity.LOW,
            "Complex form fields lack helpful tooltips or descriptions",
            "Add tooltips or help text for complex form fields",
            element="input",
        ))

    if page.exists(DESTRUCTIVE) and not page.exists(UNDO):
        issues.append(_issue(
            "feedback", Severity.LOW,
            "Destructive actions lack undo capability or confirmation",
            "Add confirmation dialogs or undo functionality for destructive actions",
            element="button",
        ))

    return issues


def audit_interaction_design(inspector: Optional[PageInspector] = None) -> AuditScore:
    """Run every interaction design check and score the result."""
    issues: list[Issue] = []
    issues.extend(analyze_loading_states(inspector))
    issues.extend(analyze_empty_states(inspector))
    issues.extend(analyze_error_states(inspector))
    issues.extend(analyze_micro_interactions(inspector))
    issues.extend(analyze_feedback(inspector))
    return score_issues(Category.INTERACTION_DESIGN, issues)
