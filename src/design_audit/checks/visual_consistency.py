"""Visual consistency checks over spacing, typography, color and layout."""

from itertools import combinations
from typing import Optional

from ..inspector import PageInspector, ensure_inspector
from ..inspector.css import color_distance, is_transparent, parse_color, parse_px
from ..models import AuditScore, Category, Issue, Severity
from ..scoring import score_issues

MAX_SPACING_VALUES = 12
MAX_FONT_SIZES = 8
MAX_FONT_FAMILIES = 3
MAX_LINE_HEIGHTS = 4
MAX_TEXT_COLORS = 12
MAX_BACKGROUND_COLORS = 8
MAX_CONTAINER_WIDTHS = 4
MAX_LAYOUT_MIX = 5
SIMILAR_COLOR_DISTANCE = 30

SIDES = ("top", "right", "bottom", "left")
TYPOGRAPHY_SELECTOR = "h1, h2, h3, h4, h5, h6, p, span, a, button, input, textarea, li"
CONTAINER_SELECTOR = "div, section, article, main"


def _issue(type_: str, severity: Severity, description: str, recommendation: str,
           element: Optional[str] = "various") -> Issue:
    return Issue(
        category=Category.VISUAL_CONSISTENCY,
        type=type_,
        severity=severity,
        description=description,
        recommendation=recommendation,
        element=element,
    )


def _over(count: int, limit: int) -> Optional[Severity]:
    """medium above the limit, high at twice the limit."""
    if count > 2 * limit:
        return Severity.HIGH
    if count > limit:
        return Severity.MEDIUM
    return None


def _fmt(values) -> str:
    return ", ".join(f"{v:g}" for v in sorted(values))


# Data extraction

def extract_spacing_values(inspector: Optional[PageInspector] = None) -> dict[str, set[float]]:
    """Distinct positive margin and padding values in px."""
    page = ensure_inspector(inspector)
    values: dict[str, set[float]] = {"margin": set(), "padding": set()}
    for el in page.query("*"):
        style = page.style(el)
        for kind in values:
            for side in SIDES:
                px = style.px(f"{kind}-{side}")
                if px is not None and px > 0:
                    values[kind].add(px)
    return values


def extract_typography_values(inspector: Optional[PageInspector] = None) -> dict[str, set]:
    """Distinct font sizes, font families and line heights of text elements."""
    page = ensure_inspector(inspector)
    values: dict[str, set] = {"font_sizes": set(), "font_families": set(), "line_heights": set()}
    for el in page.query(TYPOGRAPHY_SELECTOR):
        style = page.style(el)
        values["font_sizes"].add(style.font_size)
        family = style.get("font-family").strip().lower()
        if family:
            values["font_families"].add(family)
        line_height = style.get("line-height", "normal")
        if line_height != "normal" and "%" not in line_height:
            parsed = parse_px(line_height)
            if parsed is not None:
                values["line_heights"].add(parsed)
    return values


def extract_color_values(inspector: Optional[PageInspector] = None) -> dict[str, set[str]]:
    """Distinct non-transparent text and background colors."""
    page = ensure_inspector(inspector)
    values: dict[str, set[str]] = {"text": set(), "background": set()}
    for el in page.query("*"):
        style = page.style(el)
        color = style.get("color")
        if color and not is_transparent(color):
            values["text"].add(color)
        background = style.get("background-color")
        if background and not is_transparent(background):
            values["background"].add(background)
    return values


def get_visual_consistency_data(inspector: Optional[PageInspector] = None) -> dict:
    """All extracted values in one dict, for reporting or custom checks."""
    spacing = extract_spacing_values(inspector)
    typography = extract_typography_values(inspector)
    colors = extract_color_values(inspector)
    return {
        "margins": sorted(spacing["margin"]),
        "paddings": sorted(spacing["padding"]),
        "font_sizes": sorted(typography["font_sizes"]),
        "font_families": sorted(typography["font_families"]),
        "line_heights": sorted(typography["line_heights"]),
        "text_colors": sorted(colors["text"]),
        "background_colors": sorted(colors["background"]),
    }


# Checks

def analyze_spacing(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    spacing = extract_spacing_values(page)
    for kind, values in spacing.items():
        severity = _over(len(values), MAX_SPACING_VALUES)
        if severity:
            issues.append(_issue(
                "spacing", severity,
                f"Found {len(values)} different {kind} values (suggests inconsistent spacing system)",
                "Use a consistent spacing scale (e.g., 4px, 8px, 16px, 24px, 32px, 48px)",
            ))

    for kind, values in spacing.items():
        fractional = [v for v in values if v != int(v)]
        if fractional:
            issues.append(_issue(
                "spacing", Severity.LOW,
                f"Found fractional {kind} values: {_fmt(fractional[:5])}px",
                "Round spacing to whole pixels on a consistent scale",
            ))

    return issues


def analyze_typography(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    typography = extract_typography_values(page)

    sizes = typography["font_sizes"]
    severity = _over(len(sizes), MAX_FONT_SIZES)
    if severity:
        issues.append(_issue(
            "typography", severity,
            f"Found {len(sizes)} different font sizes (suggests inconsistent typography scale)",
            "Use a consistent typographic scale (e.g., 12px, 14px, 16px, 18px, 20px, 24px, 32px, 48px)",
        ))

    families = typography["font_families"]
    if len(families) > MAX_FONT_FAMILIES:
        issues.append(_issue(
            "typography", Severity.HIGH,
            f"Found {len(families)} different font families (too many for visual consistency)",
            "Limit to 1-2 font families maximum (one for headers, one for body text)",
        ))

    line_heights = typography["line_heights"]
    if len(line_heights) > MAX_LINE_HEIGHTS:
        issues.append(_issue(
            "typography", Severity.LOW,
            f"Found {len(line_heights)} different line height values",
            "Use consistent line height values (e.g., 1.2 for headers, 1.5-1.6 for body text)",
        ))

    return issues


def count_similar_colors(colors) -> int:
    """Pairs of colors closer than the similarity distance but not identical."""
    parsed = [c for c in (parse_color(color) for color in colors) if c is not None]
    return sum(
        1 for a, b in combinations(parsed, 2)
        if 0 < color_distance(a, b) < SIMILAR_COLOR_DISTANCE
    )


def analyze_color_palette(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    colors = extract_color_values(page)

    severity = _over(len(colors["text"]), MAX_TEXT_COLORS)
    if severity:
        issues.append(_issue(
            "color", severity,
            f"Found {len(colors['text'])} different text colors (suggests inconsistent color system)",
            "Use a limited color palette with semantic color names (primary, secondary, success, warning, error)",
        ))

    severity = _over(len(colors["background"]), MAX_BACKGROUND_COLORS)
    if severity:
        issues.append(_issue(
            "color", severity,
            f"Found {len(colors['background'])} different background colors",
            "Limit background colors to essential ones (primary, secondary, neutral shades)",
        ))

    similar = count_similar_colors(colors["text"])
    if similar:
        issues.append(_issue(
            "color", Severity.LOW,
            f"Found {similar} pairs of similar but not identical colors",
            "Consolidate similar colors into a consistent color palette",
        ))

    return issues


def analyze_layout(inspector: Optional[PageInspector] = None) -> list[Issue]:
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    max_widths = set()
    for container in page.query(CONTAINER_SELECTOR):
        width = page.style(container).px("max-width")
        if width is not None:
            max_widths.add(width)
    if len(max_widths) > MAX_CONTAINER_WIDTHS:
        issues.append(_issue(
            "layout", Severity.LOW,
            f"Found {len(max_widths)} different max-width values for containers",
            "Use consistent container widths (e.g., 320px, 768px, 1024px, 1280px)",
        ))

    grid = flex = floats = 0
    for el in page.query("*"):
        style = page.style(el)
        display = style.get("display")
        if "grid" in display:
            grid += 1
        if "flex" in display:
            flex += 1
        if style.get("float", "none") in ("left", "right", "inline-start", "inline-end"):
            floats += 1

    if grid > MAX_LAYOUT_MIX and flex > MAX_LAYOUT_MIX:
        issues.append(_issue(
            "layout", Severity.LOW,
            "Both CSS Grid and Flexbox are used extensively",
            "Consider standardizing on one layout method where possible for consistency",
        ))

    if floats:
        issues.append(_issue(
            "layout", Severity.LOW,
            f"Found {floats} elements using CSS float for layout",
            "Replace float-based layout with Flexbox or Grid",
        ))

    return issues


def _too_varied(variants: int, elements: int, floor: int) -> bool:
    return elements > 1 and variants > max(floor, elements // 2)


def analyze_design_patterns(inspector: Optional[PageInspector] = None) -> list[Issue]:
    """Compare style combinations of buttons, form inputs and cards."""
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    buttons = page.query('button, [role="button"], input[type="submit"], input[type="button"]')
    combos = set()
    for button in buttons:
        style = page.style(button)
        combos.add((
            style.get("background-color"),
            style.get("color"),
            style.get("border-radius"),
            style.get("font-size"),
            style.get("padding-top"),
            style.get("padding-left"),
        ))
    if _too_varied(len(combos), len(buttons), 3):
        issues.append(_issue(
            "design-patterns", Severity.MEDIUM,
            f"Found {len(combos)} different button style combinations across {len(buttons)} buttons",
            "Define primary, secondary and tertiary button variants and reuse them",
            element="button",
        ))

    inputs = page.query('input:not([type="hidden"]):not([type="submit"]):not([type="button"]), textarea, select')
    borders = {(page.style(i).get("border"), page.style(i).get("border-radius")) for i in inputs}
    if _too_varied(len(borders), len(inputs), 2):
        issues.append(_issue(
            "design-patterns", Severity.LOW,
            f"Found {len(borders)} different border styles for form inputs",
            "Use one border style for all form inputs",
            element="input",
        ))

    cards = page.query('[class*="card"]')
    shadows = {page.style(card).get("box-shadow", "none") for card in cards}
    if _too_varied(len(shadows), len(cards), 2):
        issues.append(_issue(
            "design-patterns", Severity.LOW,
            f"Found {len(shadows)} different box-shadow styles on cards",
            "Define an elevation scale and use it for all cards",
            element="div",
        ))

    return issues


def audit_visual_consistency(inspector: Optional[PageInspector] = None) -> AuditScore:
    """Run every visual consistency check and score the result."""
    issues: list[Issue] = []
    issues.extend(analyze_spacing(inspector))
    issues.extend(analyze_typography(inspector))
    issues.extend(analyze_color_palette(inspector))
    issues.extend(analyze_layout(inspector))
    issues.extend(analyze_design_patterns(inspector))
    return score_issues(Category.VISUAL_CONSISTENCY, issues)
