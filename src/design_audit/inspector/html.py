"""Static page inspector over an HTML document."""

import asyncio
from collections import defaultdict
from typing import Iterable, Mapping, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString
from soupsieve import SelectorSyntaxError

from ..config import settings
from ..logger import logger
from .base import Box, Element, PageInspector, ResolvedStyle, ResourceEntry, VitalsSample
from .css import (
    FONT_WEIGHT_KEYWORDS,
    CssRule,
    StyleSheet,
    format_px,
    normalize_color,
    parse_declarations,
    parse_px,
)

# Properties that inherit from the parent when not declared
INHERITED = {
    "color", "font-size", "font-family", "font-weight", "font-style",
    "line-height", "cursor", "visibility", "text-align", "letter-spacing",
}

ROOT_DEFAULTS = {
    "color": "rgb(0, 0, 0)",
    "font-size": "16px",
    "font-family": "serif",
    "font-weight": "400",
    "line-height": "normal",
    "cursor": "auto",
    "visibility": "visible",
}

# Initial values of the non-inherited properties the analyzers read
INITIAL = {
    "background-color": "rgba(0, 0, 0, 0)",
    "display": "inline",
    "position": "static",
    "float": "none",
    "outline": "none",
    "box-shadow": "none",
    "border": "none",
    "transition": "all 0s ease 0s",
    "animation": "none",
    "transform": "none",
    "max-width": "none",
    "width": "auto",
    "height": "auto",
}

BLOCK_TAGS = {
    "html", "body", "div", "p", "section", "article", "main", "header", "footer",
    "nav", "aside", "form", "fieldset", "ul", "ol", "li", "dl", "dt", "dd",
    "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "figure", "figcaption",
    "pre", "address", "hr", "details", "summary", "dialog",
}

# Subset of browser UA stylesheet defaults
UA_DEFAULTS = {
    "h1": {"font-size": "32px", "font-weight": "700"},
    "h2": {"font-size": "24px", "font-weight": "700"},
    "h3": {"font-size": "18.72px", "font-weight": "700"},
    "h4": {"font-size": "16px", "font-weight": "700"},
    "h5": {"font-size": "13.28px", "font-weight": "700"},
    "h6": {"font-size": "10.72px", "font-weight": "700"},
    "strong": {"font-weight": "700"},
    "b": {"font-weight": "700"},
    "small": {"font-size": "13.33px"},
    "a": {"cursor": "pointer"},
    "button": {"border": "2px outset", "display": "inline-block", "font-size": "13.33px"},
    "input": {"border": "2px inset", "display": "inline-block", "font-size": "13.33px"},
    "textarea": {"border": "1px solid", "display": "inline-block", "font-size": "13.33px"},
    "select": {"border": "1px solid", "display": "inline-block", "font-size": "13.33px"},
    "img": {"display": "inline-block"},
    "table": {"display": "table"},
    "tbody": {"display": "table-row-group"},
    "tr": {"display": "table-row"},
    "td": {"display": "table-cell"},
    "th": {"display": "table-cell", "font-weight": "700"},
    "script": {"display": "none"},
    "style": {"display": "none"},
    "template": {"display": "none"},
    "head": {"display": "none"},
}

LENGTH_PROPS = {
    "width", "height", "min-width", "min-height", "max-width", "max-height",
    "left", "top", "right", "bottom",
    "margin-top", "margin-right", "margin-bottom", "margin-left",
    "padding-top", "padding-right", "padding-bottom", "padding-left",
}

# Elements whose width/height attributes size the rendered box
SIZED_BY_ATTRIBUTES = {"img", "svg", "canvas", "video", "iframe", "embed", "object"}


class HtmlElement(Element):
    """Element handle wrapping a BeautifulSoup tag."""

    __slots__ = ("node",)

    def __init__(self, node: Tag):
        self.node = node

    @property
    def tag(self) -> str:
        return self.node.name.lower()

    def get(self, name: str) -> Optional[str]:
        value = self.node.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    @property
    def text(self) -> str:
        return self.node.get_text(" ", strip=True)

    @property
    def own_text(self) -> str:
        parts = [
            s.strip()
            for s in self.node.find_all(string=True, recursive=False)
            if isinstance(s, NavigableString) and not isinstance(s, PreformattedString)
        ]
        return " ".join(p for p in parts if p)

    @property
    def child_count(self) -> int:
        return len(self.node.find_all(True, recursive=False))

    @property
    def parent(self) -> Optional["HtmlElement"]:
        parent = self.node.parent
        if isinstance(parent, Tag) and parent.name != "[document]":
            return HtmlElement(parent)
        return None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HtmlElement) and other.node is self.node

    def __hash__(self) -> int:
        return id(self.node)

    def __repr__(self) -> str:
        return f"<HtmlElement {self.describe()}>"


class HtmlPageInspector(PageInspector):
    """Inspector for a static HTML document.

    Styles are resolved from UA defaults, ``<style>`` blocks (plus any
    ``stylesheets`` passed in) and inline ``style`` attributes, with a
    specificity/source-order cascade and inheritance of text properties.
    Layout is approximated: widths and heights come from px values and
    size attributes, horizontal offsets from accumulated margins and
    padding, vertical offsets only from absolutely positioned elements.

    Resource sizes and Core Web Vitals cannot be observed in a static
    document, so callers pass them in.
    """

    def __init__(
        self,
        html: str,
        url: str = "",
        viewport_width: Optional[int] = None,
        stylesheets: Iterable[str] = (),
        resources: Iterable[ResourceEntry] = (),
        vitals: Optional[VitalsSample] = None,
        exclude: Iterable[str] = (),
    ):
        self.url = url
        self.soup = BeautifulSoup(html, "lxml")
        for selector in exclude:
            for tag in self.soup.select(selector):
                tag.decompose()
        self._viewport_width = float(viewport_width or settings.VIEWPORT_WIDTH)
        self._resources = list(resources)
        self._vitals = vitals

        self._sheet = StyleSheet()
        for style_tag in self.soup.find_all("style"):
            self._sheet.add_source(style_tag.get_text())
        for source in stylesheets:
            self._sheet.add_source(source)

        self._matched: Optional[dict[int, list[CssRule]]] = None
        self._styles: dict[int, ResolvedStyle] = {}
        self._content_left: dict[int, float] = {}
        self._scroll_width: Optional[float] = None

    # Element lookup

    def query(self, selector: str) -> list[Element]:
        return [HtmlElement(tag) for tag in self.soup.select(selector)]

    def query_within(self, element: Element, selector: str) -> list[Element]:
        return [HtmlElement(tag) for tag in _node(element).select(selector)]

    # Style resolution

    def _rules_for(self, node: Tag) -> list[CssRule]:
        if self._matched is None:
            matched: dict[int, list[CssRule]] = defaultdict(list)
            for rule in self._sheet.rules:
                try:
                    targets = self.soup.select(rule.selector)
                except (SelectorSyntaxError, NotImplementedError):
                    logger.debug(f"Skipping unsupported selector {rule.selector!r}")
                    continue
                for target in targets:
                    matched[id(target)].append(rule)
            for rules in matched.values():
                rules.sort(key=lambda r: (r.specificity, r.order))
            self._matched = dict(matched)
        return self._matched.get(id(node), [])

    def style(self, element: Element) -> ResolvedStyle:
        node = _node(element)
        key = id(node)
        if key not in self._styles:
            self._styles[key] = self._compute_style(node)
        return self._styles[key]

    def _compute_style(self, node: Tag) -> ResolvedStyle:
        parent = node.parent if isinstance(node.parent, Tag) and node.parent.name != "[document]" else None
        parent_props: Mapping[str, str] = (
            self.style(HtmlElement(parent)).properties if parent is not None else ROOT_DEFAULTS
        )

        props = dict(INITIAL)
        props.update({k: v for k, v in parent_props.items() if k in INHERITED})
        if node.name in BLOCK_TAGS:
            props["display"] = "block"
        props.update(UA_DEFAULTS.get(node.name, {}))

        states: dict[str, dict[str, str]] = defaultdict(dict)
        for rule in self._rules_for(node):
            if rule.state:
                states[rule.state].update(rule.declarations)
            else:
                props.update(rule.declarations)

        inline = node.get("style")
        if inline:
            props.update(parse_declarations(inline if isinstance(inline, str) else " ".join(inline)))

        self._resolve(props, parent_props)
        return ResolvedStyle(properties=props, states=dict(states))

    def _resolve(self, props: dict[str, str], parent_props: Mapping[str, str]) -> None:
        """Turn declared values into computed values in place."""
        for prop, value in list(props.items()):
            keyword = value.strip().lower()
            if keyword == "inherit":
                props[prop] = parent_props.get(prop, ROOT_DEFAULTS.get(prop, INITIAL.get(prop, "")))
            elif keyword in ("initial", "unset"):
                props[prop] = ROOT_DEFAULTS.get(prop, INITIAL.get(prop, ""))

        parent_size = parse_px(parent_props.get("font-size"))
        if parent_size is None:
            parent_size = 16.0
        font_size = parse_px(props.get("font-size"), base=parent_size, percent_of=parent_size)
        props["font-size"] = format_px(font_size if font_size is not None else parent_size)
        font_size = parse_px(props["font-size"])

        weight = props.get("font-weight", "400").strip().lower()
        props["font-weight"] = FONT_WEIGHT_KEYWORDS.get(weight, weight)
        props["font-family"] = " ".join(props.get("font-family", "").split())

        for prop in ("color", "background-color"):
            if prop in props:
                props[prop] = normalize_color(props[prop])

        parent_width = parse_px(parent_props.get("width"))
        for prop in LENGTH_PROPS & props.keys():
            percent_of = parent_width if prop in ("width", "min-width", "max-width") else None
            px = parse_px(props[prop], base=font_size, percent_of=percent_of, viewport=self._viewport_width)
            if px is not None:
                props[prop] = format_px(px)

        line_height = props.get("line-height", "normal")
        if line_height.endswith(("em", "rem", "pt")):
            px = parse_px(line_height, base=font_size)
            if px is not None:
                props["line-height"] = format_px(px)

    # Layout

    def box(self, element: Element) -> Optional[Box]:
        node = _node(element)
        style = self.style(element)
        if style.get("display") == "none" or self._hidden(node):
            return None

        width = style.px("width")
        height = style.px("height")
        if node.name in SIZED_BY_ATTRIBUTES:
            if width is None:
                width = parse_px(_attr(node, "width"))
            if height is None:
                height = parse_px(_attr(node, "height"))
        min_width = style.px("min-width")
        min_height = style.px("min-height")
        if min_width is not None:
            width = max(width or 0.0, min_width)
        if min_height is not None:
            height = max(height or 0.0, min_height)

        position = style.get("position")
        left = style.px("left")
        if position in ("absolute", "fixed") and left is not None:
            x = left
        else:
            x = self._parent_content_left(node) + (style.px("margin-left") or 0.0)
            if position == "relative" and left is not None:
                x += left

        y = style.px("top") if position in ("absolute", "fixed") else None
        return Box(x=x, y=y, width=width, height=height)

    def _hidden(self, node: Tag) -> bool:
        parent = node.parent
        while isinstance(parent, Tag) and parent.name != "[document]":
            if self.style(HtmlElement(parent)).get("display") == "none":
                return True
            parent = parent.parent
        return False

    def _parent_content_left(self, node: Tag) -> float:
        parent = node.parent
        if not isinstance(parent, Tag) or parent.name == "[document]":
            return 0.0
        key = id(parent)
        if key not in self._content_left:
            style = self.style(HtmlElement(parent))
            self._content_left[key] = (
                self._parent_content_left(parent)
                + (style.px("margin-left") or 0.0)
                + (style.px("padding-left") or 0.0)
            )
        return self._content_left[key]

    @property
    def viewport_width(self) -> float:
        return self._viewport_width

    @property
    def scroll_width(self) -> float:
        if self._scroll_width is None:
            widest = self._viewport_width
            body = self.soup.body
            if body is not None:
                for node in body.find_all(True):
                    box = self.box(HtmlElement(node))
                    if box is not None and box.right is not None:
                        widest = max(widest, box.right)
            self._scroll_width = widest
        return self._scroll_width

    # Page-level facts

    def keyframes(self) -> Mapping[str, frozenset[str]]:
        return self._sheet.keyframes

    def resources(self) -> list[ResourceEntry]:
        return list(self._resources)

    async def observe_vitals(self, window: float) -> Optional[VitalsSample]:
        # Nothing to observe in a static document; the sample was supplied.
        await asyncio.sleep(0)
        return self._vitals


def _node(element: Element) -> Tag:
    if not isinstance(element, HtmlElement):
        raise TypeError(f"HtmlPageInspector cannot inspect {type(element).__name__}")
    return element.node


def _attr(node: Tag, name: str) -> Optional[str]:
    value = node.get(name)
    return " ".join(value) if isinstance(value, list) else value
