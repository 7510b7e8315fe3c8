"""Page inspector interface consumed by the analyzers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .css import parse_px


class Element(ABC):
    """Opaque handle to one element of the inspected page."""

    @property
    @abstractmethod
    def tag(self) -> str:
        """Lower-case tag name."""

    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        """Attribute value, or None when the attribute is absent."""

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    @property
    def class_name(self) -> str:
        return self.get("class") or ""

    @property
    def classes(self) -> list[str]:
        return self.class_name.split()

    @property
    def id(self) -> Optional[str]:
        return self.get("id")

    @property
    @abstractmethod
    def text(self) -> str:
        """All descendant text, whitespace-collapsed."""

    @property
    @abstractmethod
    def own_text(self) -> str:
        """Text of the element's direct text nodes only."""

    @property
    @abstractmethod
    def child_count(self) -> int:
        """Number of child elements."""

    @property
    @abstractmethod
    def parent(self) -> Optional["Element"]:
        """Parent element, None at the document root."""

    def describe(self) -> str:
        """Short pointer like ``button#save.primary`` used as an issue location."""
        label = self.tag
        if self.id:
            label += f"#{self.id}"
        if self.classes:
            label += "." + ".".join(self.classes[:2])
        return label


@dataclass(frozen=True)
class ResolvedStyle:
    """Computed style of one element.

    ``properties`` holds the resolved values (lengths in px, colors as
    rgb()/rgba()); ``states`` holds the extra declarations that apply in the
    hover/focus/active states.
    """
    properties: Mapping[str, str] = field(default_factory=dict)
    states: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def get(self, name: str, default: str = "") -> str:
        return self.properties.get(name, default)

    def px(self, name: str) -> Optional[float]:
        value = self.properties.get(name)
        if value is None or not value.endswith("px"):
            return None
        return parse_px(value)

    def state(self, name: str) -> Mapping[str, str]:
        return self.states.get(name, {})

    @property
    def font_size(self) -> float:
        size = self.px("font-size")
        return 16.0 if size is None else size


@dataclass(frozen=True)
class Box:
    """Layout box of an element, in CSS pixels.

    Each dimension is None when the inspector cannot determine it.
    """
    x: float = 0.0
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def right(self) -> Optional[float]:
        return self.x + self.width if self.width is not None else None

    @property
    def bottom(self) -> Optional[float]:
        if self.y is None or self.height is None:
            return None
        return self.y + self.height


@dataclass(frozen=True)
class ResourceEntry:
    """A network resource the page loads."""
    name: str
    kind: str  # script, stylesheet, image or other
    transfer_size: int = 0


@dataclass(frozen=True)
class VitalsSample:
    """Core Web Vitals observed for the page (milliseconds, CLS unitless)."""
    lcp: Optional[float] = None
    cls: Optional[float] = None
    fid: Optional[float] = None
    fcp: Optional[float] = None


class PageInspector(ABC):
    """Element lookup, resolved style and page-level facts for one page.

    Implementations must never raise for "nothing there": queries return
    empty lists, and an inspector with ``available = False`` stands for a
    missing rendering context.
    """

    available: bool = True

    @abstractmethod
    def query(self, selector: str) -> list[Element]:
        """Elements matching a CSS selector, in document order."""

    @abstractmethod
    def query_within(self, element: Element, selector: str) -> list[Element]:
        """Descendants of element matching a CSS selector."""

    def query_one(self, selector: str) -> Optional[Element]:
        found = self.query(selector)
        return found[0] if found else None

    def exists(self, selector: str) -> bool:
        return self.query_one(selector) is not None

    @abstractmethod
    def style(self, element: Element) -> ResolvedStyle:
        """Resolved visual style of element."""

    @abstractmethod
    def box(self, element: Element) -> Optional[Box]:
        """Layout box of element, None when it is not rendered."""

    @property
    @abstractmethod
    def viewport_width(self) -> float:
        ...

    @property
    @abstractmethod
    def scroll_width(self) -> float:
        """Total scrollable width of the page."""

    def has_root_heading(self) -> bool:
        return self.exists("h1")

    def has_main_landmark(self) -> bool:
        return self.exists('main, [role="main"]')

    def keyframes(self) -> Mapping[str, frozenset[str]]:
        """Animated properties per @keyframes name."""
        return {}

    def resources(self) -> list[ResourceEntry]:
        return []

    async def observe_vitals(self, window: float) -> Optional[VitalsSample]:
        """Collect paint/layout-shift/input samples over ``window`` seconds."""
        return None


class NullInspector(PageInspector):
    """Inspector used when no rendering context is available."""

    available = False

    def query(self, selector: str) -> list[Element]:
        return []

    def query_within(self, element: Element, selector: str) -> list[Element]:
        return []

    def style(self, element: Element) -> ResolvedStyle:
        return ResolvedStyle()

    def box(self, element: Element) -> Optional[Box]:
        return None

    @property
    def viewport_width(self) -> float:
        return 0.0

    @property
    def scroll_width(self) -> float:
        return 0.0

    def has_root_heading(self) -> bool:
        return False

    def has_main_landmark(self) -> bool:
        return False


def ensure_inspector(inspector: Optional[PageInspector]) -> PageInspector:
    """Fall back to the null inspector when none is given."""
    return inspector if inspector is not None else NullInspector()
