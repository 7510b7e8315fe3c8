"""Page inspection: element lookup, resolved styles and page-level facts."""

from .base import (
    Box,
    Element,
    NullInspector,
    PageInspector,
    ResolvedStyle,
    ResourceEntry,
    VitalsSample,
    ensure_inspector,
)
from .html import HtmlElement, HtmlPageInspector

__all__ = [
    "Box",
    "Element",
    "HtmlElement",
    "HtmlPageInspector",
    "NullInspector",
    "PageInspector",
    "ResolvedStyle",
    "ResourceEntry",
    "VitalsSample",
    "ensure_inspector",
]
