"""Accessibility checks: contrast, ARIA names, keyboard access, focus, semantics."""

from typing import Optional

from ..inspector import Element, PageInspector, ensure_inspector
from ..inspector.css import RGBA, blend, contrast_ratio, parse_color
from ..models import AuditScore, Category, Issue, Severity
from ..scoring import score_issues

WHITE: RGBA = (255, 255, 255, 1.0)

NORMAL_TEXT_RATIO = 4.5
LARGE_TEXT_RATIO = 3.0
# Below this the text is effectively invisible.
INVISIBLE_RATIO = 1.5

GENERIC_ALT_TEXT = {"image", "picture", "photo", "graphic", "click here", "read more"}
MAX_ALT_LENGTH = 125
MAX_FIELDS_WITHOUT_FIELDSET = 5

NATIVELY_FOCUSABLE = {"a", "button", "input", "textarea", "select"}
UNLABELLED_INPUT_TYPES = {"hidden", "submit", "button", "reset", "image"}

FOCUSABLE_SELECTOR = (
    'a[href], button, input:not([type="hidden"]), textarea, select, '
    '[tabindex]:not([tabindex="-1"])'
)


def _issue(type_: str, severity: Severity, description: str, recommendation: str,
           element: Optional[str] = None) -> Issue:
    return Issue(
        category=Category.ACCESSIBILITY,
        type=type_,
        severity=severity,
        description=description,
        recommendation=recommendation,
        element=element,
    )


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" + ("" if count == 1 else "s")


def effective_background(page: PageInspector, element: Element) -> RGBA:
    """Background the element's text is drawn on.

    Walks up from the element compositing translucent backgrounds until an
    opaque one is found; the canvas below everything is white.
    """
    layers: list[RGBA] = []
    current: Optional[Element] = element
    while current is not None:
        color = parse_color(page.style(current).get("background-color"))
        if color is not None and color[3] > 0:
            layers.append(color)
            if color[3] >= 1:
                break
        current = current.parent

    background = WHITE
    for layer in reversed(layers):
        background = blend(layer, background)
    return background


def _is_large_text(font_size: float, font_weight: str) -> bool:
    try:
        weight = int(float(font_weight))
    except ValueError:
        weight = 400
    return font_size >= 18 or (font_size >= 14 and weight >= 700)


def analyze_color_contrast(
    inspector: Optional[PageInspector] = None,
    element: Optional[Element] = None,
) -> list[Issue]:
    """Check text against its background using the WCAG contrast ratio.

    Large text (18px, or 14px bold) needs 3:1, everything else 4.5:1.
    Without an element, every rendered element with its own text is checked.
    """
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    if element is not None:
        targets = [element]
    else:
        targets = [
            el for el in page.query("body *")
            if el.own_text and page.box(el) is not None
        ]

    for target in targets:
        style = page.style(target)
        foreground = parse_color(style.get("color"))
        if foreground is None:
            continue
        background = effective_background(page, target)
        ratio = contrast_ratio(blend(foreground, background), background)
        required = (
            LARGE_TEXT_RATIO
            if _is_large_text(style.font_size, style.get("font-weight", "400"))
            else NORMAL_TEXT_RATIO
        )
        if ratio >= required:
            continue
        issues.append(_issue(
            "contrast",
            Severity.CRITICAL if ratio < INVISIBLE_RATIO else Severity.HIGH,
            f"Low color contrast ({ratio:.2f}:1) on {target.tag} - requires {required:g}:1",
            "Ensure sufficient color contrast (4.5:1 for normal text, 3:1 for large text)",
            element=target.tag,
        ))

    return issues


def _has_label(page: PageInspector, control: Element) -> bool:
    if control.get("aria-label") or control.get("aria-labelledby"):
        return True
    if control.id and any(label.get("for") == control.id for label in page.query("label[for]")):
        return True
    parent = control.parent
    while parent is not None:
        if parent.tag == "label":
            return True
        parent = parent.parent
    return False


def _accessible_name(element: Element) -> str:
    return (
        element.get("aria-label")
        or element.get("aria-labelledby")
        or element.text
        or element.get("title")
        or ""
    ).strip()


def analyze_aria(inspector: Optional[PageInspector] = None) -> list[Issue]:
    """Check alt text, form labels and accessible names."""
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    # Images
    missing_alt = 0
    generic_alt = 0
    for img in page.query("img"):
        alt = img.get("alt")
        src = img.get("src") or ""
        if alt is None:
            missing_alt += 1
        elif not alt.strip():
            if src and "decoration" not in src and "background" not in src:
                issues.append(_issue(
                    "alt-text", Severity.MEDIUM,
                    f"Image may need descriptive alt text: {src[:50]}",
                    'Describe the image in alt text, or keep alt="" only for decorative images',
                    element="img",
                ))
        else:
            if alt.strip().lower() in GENERIC_ALT_TEXT:
                generic_alt += 1
            if len(alt) > MAX_ALT_LENGTH:
                issues.append(_issue(
                    "alt-text", Severity.LOW,
                    f"Image alt text very long ({len(alt)} chars) - consider shortening",
                    f"Keep alt text under {MAX_ALT_LENGTH} characters; use a caption for longer descriptions",
                    element="img",
                ))

    if missing_alt:
        issues.append(_issue(
            "alt-text", Severity.HIGH,
            f"{_plural(missing_alt, 'image')} missing alt attribute",
            'Add descriptive alt text or alt="" for decorative images',
            element="img",
        ))
    if generic_alt:
        issues.append(_issue(
            "alt-text", Severity.MEDIUM,
            f"{_plural(generic_alt, 'image')} with generic/unhelpful alt text",
            "Replace generic alt text with a description of what the image shows",
            element="img",
        ))

    for el in page.query('[style*="background-image"]'):
        if not (el.text or el.get("aria-label") or el.get("title")):
            issues.append(_issue(
                "alt-text", Severity.MEDIUM,
                "Element with background image lacks accessible text content",
                "Add aria-label or visually hidden text describing the background image",
                element=el.tag,
            ))

    # Form controls
    for control in page.query("input, textarea, select"):
        if (control.get("type") or "").lower() in UNLABELLED_INPUT_TYPES:
            continue
        if not _has_label(page, control):
            issues.append(_issue(
                "aria", Severity.HIGH,
                f"Form {control.tag} missing accessible label",
                "Associate a <label> with the control or add aria-label / aria-labelledby",
                element=control.tag,
            ))

    # Buttons and links
    for button in page.query("button"):
        if not _accessible_name(button):
            issues.append(_issue(
                "aria", Severity.HIGH,
                "Button missing accessible name",
                "Add aria-label, aria-labelledby, or visible text content",
                element="button",
            ))

    for link in page.query("a"):
        if not _accessible_name(link):
            issues.append(_issue(
                "aria", Severity.HIGH,
                "Link missing accessible text",
                "Add link text or aria-label describing the destination",
                element="a",
            ))
        href = (link.get("href") or "").strip()
        if not href or href == "#":
            issues.append(_issue(
                "aria", Severity.MEDIUM,
                "Link missing proper href or should be button",
                "Give links a real destination, or use <button> for in-page actions",
                element="a",
            ))

    for el in page.query('[role="button"]'):
        if el.tag != "button" and not _accessible_name(el):
            issues.append(_issue(
                "aria", Severity.HIGH,
                "Interactive element lacks accessible name",
                "Add aria-label, aria-labelledby, or visible text content",
                element=el.tag,
            ))

    return issues


def analyze_keyboard_navigation(inspector: Optional[PageInspector] = None) -> list[Issue]:
    """Check tab order and keyboard reachability of clickable elements."""
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    positive = []
    for el in page.query("[tabindex]"):
        try:
            if int(el.get("tabindex") or "0") > 0:
                positive.append(el)
        except ValueError:
            continue
    if positive:
        issues.append(_issue(
            "keyboard-nav", Severity.MEDIUM,
            f"{_plural(len(positive), 'element')} use positive tabindex, may disrupt tab order",
            "Remove positive tabindex values and order elements in the DOM instead",
            element="various",
        ))

    for el in page.query('[onclick], [role="button"]'):
        if el.tag not in NATIVELY_FOCUSABLE and not el.has("tabindex"):
            issues.append(_issue(
                "keyboard-nav", Severity.HIGH,
                f"Clickable element ({el.tag}) not keyboard accessible",
                'Use a <button>, or add tabindex="0" and key handlers',
                element=el.tag,
            ))

    return issues


def _draws_line(value: str) -> bool:
    """True when an outline/border value paints something."""
    tokens = value.lower().split()
    if not tokens or "none" in tokens or "hidden" in tokens:
        return False
    return tokens[0] not in ("0", "0px")


def _has_focus_indicator(base: dict, focused: dict) -> bool:
    for declarations in (base, focused):
        if _draws_line(declarations.get("outline", "none")):
            return True
        if declarations.get("box-shadow", "none").strip().lower() != "none":
            return True
        if _draws_line(declarations.get("border", "none")):
            return True
    return False


def analyze_focus_indicators(inspector: Optional[PageInspector] = None) -> list[Issue]:
    """Flag focusable elements with no outline, box-shadow or border in any focus state."""
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    missing = 0
    for el in page.query(FOCUSABLE_SELECTOR):
        style = page.style(el)
        if not _has_focus_indicator(dict(style.properties), dict(style.state("focus"))):
            missing += 1

    if missing:
        issues.append(_issue(
            "focus-indicators", Severity.MEDIUM,
            f"{_plural(missing, 'focusable element')} lack visible focus indicators",
            "Add focus styles with outline, box-shadow, or border changes",
            element="various",
        ))
    return issues


def analyze_semantic_structure(inspector: Optional[PageInspector] = None) -> list[Issue]:
    """Check heading order, landmarks and semantic elements."""
    page = ensure_inspector(inspector)
    issues: list[Issue] = []
    if not page.available:
        return issues

    previous = 0
    for heading in page.query("h1, h2, h3, h4, h5, h6"):
        level = int(heading.tag[1])
        if previous and level > previous + 1:
            issues.append(_issue(
                "semantic-structure", Severity.MEDIUM,
                f"Heading hierarchy skip from h{previous} to h{level}",
                "Maintain proper heading hierarchy (H1 → H2 → H3, etc.)",
                element=heading.tag,
            ))
        previous = level

    if not page.has_root_heading():
        issues.append(_issue(
            "semantic-structure", Severity.HIGH,
            "Page missing h1 heading",
            "Add a single <h1> describing the page",
            element="h1",
        ))

    if not page.has_main_landmark():
        issues.append(_issue(
            "semantic-structure", Severity.MEDIUM,
            "Page missing main landmark",
            "Wrap the primary content in a <main> element",
            element="main",
        ))

    clickable = page.query("div[onclick], span[onclick]")
    if clickable:
        issues.append(_issue(
            "semantic-structure", Severity.MEDIUM,
            f"{_plural(len(clickable), 'div/span element')} used for buttons - use button element instead",
            "Replace clickable div/span elements with <button>",
            element="various",
        ))

    for form in page.query("form"):
        fields = page.query_within(form, "input, textarea, select")
        if len(fields) > MAX_FIELDS_WITHOUT_FIELDSET and not page.query_within(form, "fieldset"):
            issues.append(_issue(
                "semantic-structure", Severity.MEDIUM,
                "Large form without fieldset organization",
                "Group related fields with <fieldset> and <legend>",
                element="form",
            ))

    return issues


def audit_accessibility(inspector: Optional[PageInspector] = None) -> AuditScore:
    """Run every accessibility check and score the result."""
    issues: list[Issue] = []
    issues.extend(analyze_color_contrast(inspector))
    issues.extend(analyze_aria(inspector))
    issues.extend(analyze_keyboard_navigation(inspector))
    issues.extend(analyze_focus_indicators(inspector))
    issues.extend(analyze_semantic_structure(inspector))
    return score_issues(Category.ACCESSIBILITY, issues)
