"""Shared fixtures for design-audit tests."""

import pytest

from design_audit.inspector import HtmlPageInspector
from design_audit.models import Category, Issue, Severity


def page_html(body: str, head: str = "", css: str = "") -> str:
    """Minimal mobile-ready document around a body fragment."""
    style = f"<style>{css}</style>" if css else ""
    return (
        "<!DOCTYPE html><html><head>"
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"{head}{style}</head><body>{body}</body></html>"
    )


@pytest.fixture
def make_page():
    """Build an HtmlPageInspector from a body fragment."""
    def _make(body: str, head: str = "", css: str = "", **kwargs) -> HtmlPageInspector:
        return HtmlPageInspector(page_html(body, head=head, css=css), **kwargs)
    return _make


@pytest.fixture
def make_issue():
    def _make(
        severity: Severity = Severity.MEDIUM,
        category: Category = Category.ACCESSIBILITY,
        description: str = "Something is off",
        type_: str = "general",
        **kwargs,
    ) -> Issue:
        return Issue(
            category=category,
            type=type_,
            severity=severity,
            description=description,
            recommendation="Fix it",
            **kwargs,
        )
    return _make
