"""CSS value and stylesheet parsing for the static inspector."""

import colorsys
import math
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

RGBA = tuple[int, int, int, float]

# Common subset of CSS named colors
NAMED_COLORS = {
    "black": "#000000", "white": "#ffffff", "red": "#ff0000",
    "green": "#008000", "blue": "#0000ff", "yellow": "#ffff00",
    "orange": "#ffa500", "gray": "#808080", "grey": "#808080",
    "silver": "#c0c0c0", "navy": "#000080", "teal": "#008080",
    "purple": "#800080", "maroon": "#800000", "lime": "#00ff00",
    "aqua": "#00ffff", "fuchsia": "#ff00ff", "darkgray": "#a9a9a9",
    "darkgrey": "#a9a9a9", "lightgray": "#d3d3d3", "lightgrey": "#d3d3d3",
    "whitesmoke": "#f5f5f5", "gainsboro": "#dcdcdc", "dimgray": "#696969",
    "dimgrey": "#696969", "crimson": "#dc143c", "tomato": "#ff6347",
    "gold": "#ffd700", "indigo": "#4b0082", "violet": "#ee82ee",
    "pink": "#ffc0cb", "brown": "#a52a2a", "coral": "#ff7f50",
    "olive": "#808000", "cyan": "#00ffff", "magenta": "#ff00ff",
    "beige": "#f5f5dc", "ivory": "#fffff0", "khaki": "#f0e68c",
}

FONT_SIZE_KEYWORDS = {
    "xx-small": 9.0, "x-small": 10.0, "small": 13.0, "medium": 16.0,
    "large": 18.0, "x-large": 24.0, "xx-large": 32.0,
}

FONT_WEIGHT_KEYWORDS = {"normal": "400", "bold": "700", "bolder": "700", "lighter": "300"}

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.S)
_RGB_RE = re.compile(r"rgba?\(([^)]*)\)")
_HSL_RE = re.compile(r"hsla?\(([^)]*)\)")
_LENGTH_RE = re.compile(r"^(-?\d*\.?\d+)(px|em|rem|pt|%|vw)?$")
_COLOR_TOKEN_RE = re.compile(r"rgba?\([^)]*\)|hsla?\([^)]*\)|#[0-9a-fA-F]{3,8}\b|\b[a-zA-Z]+\b")
_FONT_RE = re.compile(
    r"(?P<size>[\d.]+(?:px|em|rem|pt|%)|x{0,2}-?(?:small|large)|medium)"
    r"(?:\s*/\s*(?P<line>\S+))?\s+(?P<family>.+)$"
)

_STATE_PSEUDO_RE = re.compile(r":(hover|focus-visible|focus-within|focus|active)\b")
_PSEUDO_ELEMENT_RE = re.compile(r"::|:(before|after|first-line|first-letter|placeholder)\b")

_SIDES = ("top", "right", "bottom", "left")


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    """Parse a CSS color into (r, g, b, alpha). Returns None when unrecognised."""
    if not value:
        return None
    v = value.strip().lower()
    if v == "transparent":
        return (0, 0, 0, 0.0)
    v = NAMED_COLORS.get(v, v)

    if v.startswith("#"):
        h = v[1:]
        if len(h) in (3, 4):
            h = "".join(c * 2 for c in h)
        if len(h) not in (6, 8):
            return None
        try:
            r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
            alpha = int(h[6:8], 16) / 255 if len(h) == 8 else 1.0
        except ValueError:
            return None
        return (r, g, b, round(alpha, 3))

    match = _RGB_RE.fullmatch(v)
    if match:
        parts = [p for p in re.split(r"[\s,/]+", match.group(1).strip()) if p]
        if len(parts) < 3:
            return None
        try:
            r, g, b = (_channel(p) for p in parts[:3])
            alpha = _alpha(parts[3]) if len(parts) > 3 else 1.0
        except ValueError:
            return None
        return (r, g, b, alpha)

    match = _HSL_RE.fullmatch(v)
    if match:
        parts = [p for p in re.split(r"[\s,/]+", match.group(1).strip()) if p]
        if len(parts) < 3:
            return None
        try:
            hue = float(parts[0].replace("deg", "")) % 360 / 360
            sat = float(parts[1].rstrip("%")) / 100
            light = float(parts[2].rstrip("%")) / 100
            alpha = _alpha(parts[3]) if len(parts) > 3 else 1.0
        except ValueError:
            return None
        r, g, b = colorsys.hls_to_rgb(hue, light, sat)
        return (round(r * 255), round(g * 255), round(b * 255), alpha)

    return None


def _channel(token: str) -> int:
    if token.endswith("%"):
        value = float(token[:-1]) * 255 / 100
    else:
        value = float(token)
    return max(0, min(255, round(value)))


def _alpha(token: str) -> float:
    if token.endswith("%"):
        value = float(token[:-1]) / 100
    else:
        value = float(token)
    return max(0.0, min(1.0, round(value, 3)))


def format_color(rgba: RGBA) -> str:
    r, g, b, alpha = rgba
    if alpha >= 1:
        return f"rgb({r}, {g}, {b})"
    return f"rgba({r}, {g}, {b}, {alpha:g})"


def normalize_color(value: str) -> str:
    """Normalize any parseable color to the rgb()/rgba() form browsers report."""
    parsed = parse_color(value)
    return format_color(parsed) if parsed else value.strip()


def is_transparent(value: Optional[str]) -> bool:
    parsed = parse_color(value)
    return parsed is None or parsed[3] == 0


def blend(foreground: RGBA, background: RGBA) -> RGBA:
    """Composite a possibly translucent color over an opaque background."""
    alpha = foreground[3]
    if alpha >= 1:
        return foreground
    mixed = tuple(
        round(alpha * f + (1 - alpha) * b) for f, b in zip(foreground[:3], background[:3])
    )
    return (mixed[0], mixed[1], mixed[2], 1.0)


def color_distance(a: RGBA, b: RGBA) -> float:
    """Euclidean distance between two colors in RGB space."""
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a[:3], b[:3])))


def _relative_luminance(r: int, g: int, b: int) -> float:
    """sRGB relative luminance per WCAG 2.x."""
    def _ch(c: int) -> float:
        v = c / 255.0
        return v / 12.92 if v <= 0.04045 else ((v + 0.055) / 1.055) ** 2.4
    return 0.2126 * _ch(r) + 0.7152 * _ch(g) + 0.0722 * _ch(b)


def contrast_ratio(foreground: RGBA, background: RGBA) -> float:
    """WCAG contrast ratio between two colors (1.0 to 21.0)."""
    l1 = _relative_luminance(*foreground[:3])
    l2 = _relative_luminance(*background[:3])
    lighter = max(l1, l2)
    darker = min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def parse_px(
    value: Optional[str],
    base: float = 16.0,
    percent_of: Optional[float] = None,
    viewport: Optional[float] = None,
) -> Optional[float]:
    """Convert a CSS length to pixels.

    ``base`` is the font size em units resolve against. Percentages need
    ``percent_of`` and vw units need ``viewport``; otherwise they yield None,
    as do keywords like ``auto``. Bare numbers are taken as pixels, the way
    HTML width/height attributes are written.
    """
    if value is None:
        return None
    v = value.strip().lower()
    if v in FONT_SIZE_KEYWORDS:
        return FONT_SIZE_KEYWORDS[v]
    match = _LENGTH_RE.match(v)
    if not match:
        return None
    number = float(match.group(1))
    unit = match.group(2) or "px"
    if unit == "px":
        return number
    if unit == "em":
        return number * base
    if unit == "rem":
        return number * 16.0
    if unit == "pt":
        return number * 4 / 3
    if unit == "%":
        return number * percent_of / 100 if percent_of is not None else None
    if unit == "vw":
        return number * viewport / 100 if viewport is not None else None
    return None


def format_px(value: float) -> str:
    return f"{round(value, 2):g}px"


def expand_shorthand(prop: str, value: str) -> dict[str, str]:
    """Expand the shorthands the analyzers read into their longhands."""
    expanded = {prop: value}

    if prop in ("margin", "padding"):
        parts = value.split()
        if 1 <= len(parts) <= 4:
            top = parts[0]
            right = parts[1] if len(parts) > 1 else top
            bottom = parts[2] if len(parts) > 2 else top
            left = parts[3] if len(parts) > 3 else right
            for side, side_value in zip(_SIDES, (top, right, bottom, left)):
                expanded[f"{prop}-{side}"] = side_value

    elif prop == "background":
        for token in _COLOR_TOKEN_RE.findall(value):
            if token.lower() != "none" and parse_color(token) is not None:
                expanded["background-color"] = token
                break

    elif prop == "font":
        match = _FONT_RE.search(value)
        if match:
            expanded["font-size"] = match.group("size")
            if match.group("line"):
                expanded["line-height"] = match.group("line")
            expanded["font-family"] = match.group("family").strip()
            prefix = value[:match.start()]
            for token in prefix.split():
                if token in FONT_WEIGHT_KEYWORDS or token.isdigit():
                    expanded["font-weight"] = token

    return expanded


def parse_declarations(text: str) -> dict[str, str]:
    """Parse a declaration block (or inline style attribute) into a dict."""
    declarations: dict[str, str] = {}
    for chunk in text.split(";"):
        prop, sep, value = chunk.partition(":")
        if not sep:
            continue
        prop = prop.strip().lower()
        value = value.replace("!important", "").strip()
        if not prop or not value:
            continue
        declarations.update(expand_shorthand(prop, value))
    return declarations


def specificity(selector: str) -> tuple[int, int, int]:
    """(ids, classes/attributes/pseudo-classes, type selectors) for one selector."""
    attributes = re.findall(r"\[[^\]]*\]", selector)
    s = re.sub(r"\[[^\]]*\]", "", selector)
    s = re.sub(r":(?:not|is|where|has)\(", " ", s)
    ids = len(re.findall(r"#[\w-]+", s))
    classes = len(re.findall(r"\.[\w-]+", s)) + len(attributes)
    classes += len(re.findall(r"(?<!:):[\w-]+", s))
    types = len(re.findall(r"(?:^|[\s>+~(])([a-zA-Z][\w-]*)", s))
    return (ids, classes, types)


def split_selector_list(prelude: str) -> list[str]:
    """Split "a, b:is(c, d)" on top-level commas."""
    selectors = []
    depth = 0
    current = []
    for ch in prelude:
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
        if ch == "," and depth == 0:
            selectors.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    selectors.append("".join(current).strip())
    return [s for s in selectors if s]


@dataclass(frozen=True)
class CssRule:
    """A single-selector style rule.

    ``state`` is "hover", "focus" or "active" when the rule only applies in
    that interaction state; the selector then has the pseudo-class removed.
    """
    selector: str
    declarations: dict[str, str]
    specificity: tuple[int, int, int]
    order: int
    state: Optional[str] = None


@dataclass
class StyleSheet:
    """Rules and keyframes collected from one or more CSS sources."""
    rules: list[CssRule] = field(default_factory=list)
    keyframes: dict[str, frozenset[str]] = field(default_factory=dict)

    def add_source(self, text: str) -> None:
        self._add_blocks(_COMMENT_RE.sub("", text))

    def _add_blocks(self, text: str) -> None:
        for prelude, body in _blocks(text):
            lowered = prelude.lower()
            if re.match(r"@(-\w+-)?keyframes\b", lowered):
                name = prelude.split(None, 1)[1].strip().strip("\"'") if " " in prelude else ""
                props: set[str] = set()
                for _, frame in _blocks(body):
                    props.update(parse_declarations(frame))
                self.keyframes[name] = frozenset(props)
            elif lowered.startswith(("@media", "@supports", "@layer", "@container")):
                self._add_blocks(body)
            elif lowered.startswith("@"):
                continue
            else:
                declarations = parse_declarations(body)
                for selector in split_selector_list(prelude):
                    self._add_rule(selector, declarations)

    def _add_rule(self, selector: str, declarations: dict[str, str]) -> None:
        if _PSEUDO_ELEMENT_RE.search(selector):
            return
        state = None
        states = _STATE_PSEUDO_RE.findall(selector)
        if states:
            # Only state pseudo-classes on the subject itself are kept.
            last_compound = re.split(r"[\s>+~]+", selector.strip())[-1]
            if not _STATE_PSEUDO_RE.search(last_compound) or len(states) > 1:
                return
            state = "focus" if states[0].startswith("focus") else states[0]
            selector = _STATE_PSEUDO_RE.sub("", selector).strip()
            if not selector or selector[-1] in ">+~":
                selector = (selector + " *").strip() if selector else "*"
        self.rules.append(CssRule(
            selector=selector,
            declarations=declarations,
            specificity=specificity(selector),
            order=len(self.rules),
            state=state,
        ))


def _blocks(text: str) -> Iterator[tuple[str, str]]:
    """Yield (prelude, body) for each top-level {...} block in text."""
    depth = 0
    prelude_start = 0
    body_start = 0
    prelude = ""
    for i, ch in enumerate(text):
        if ch == "{":
            if depth == 0:
                prelude = text[prelude_start:i].strip()
                body_start = i + 1
            depth += 1
        elif ch == "}":
            if depth == 0:
                prelude_start = i + 1
                continue
            depth -= 1
            if depth == 0:
                yield prelude, text[body_start:i]
                prelude_start = i + 1
        elif ch == ";" and depth == 0:
            # statement at-rules such as @import
            prelude_start = i + 1
