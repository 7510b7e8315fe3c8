"""Multi-page accessibility scanner."""

import dataclasses
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence
from urllib.parse import urljoin

import httpx

from .aggregator import overall_score
from .auditor import fetch_page, make_client, normalize_url
from .checks import audit_accessibility
from .inspector import NullInspector, PageInspector
from .logger import logger
from .models import AuditScore, Issue, Severity


@dataclass(frozen=True)
class ScanConfig:
    """Pages to scan and elements to leave out of the scan."""
    pages: tuple[str, ...]
    base_url: Optional[str] = None
    exclude_selectors: tuple[str, ...] = ()


DEFAULT_SCAN_CONFIG = ScanConfig(
    pages=(
        "/dashboard",
        "/projects",
        "/templates",
        "/",  # home page
    ),
    exclude_selectors=(
        "[data-test]",
        ".hidden",
        '[aria-hidden="true"]',
    ),
)


@dataclass(frozen=True)
class ScanSummary:
    total_issues: int = 0
    critical_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0


@dataclass(frozen=True)
class ScanResult:
    """Accessibility results for every scanned page.

    Pages that could not be loaded are listed in ``errors`` and left out
    of ``overall_score``.
    """
    page_results: dict[str, AuditScore]
    overall_score: float
    critical_issues: tuple[Issue, ...]
    summary: ScanSummary
    issues: tuple[Issue, ...] = ()
    errors: dict[str, str] = field(default_factory=dict)


PageLoader = Callable[[str], PageInspector]


def summarize(issues: Sequence[Issue]) -> ScanSummary:
    def count(severity: Severity) -> int:
        return sum(1 for i in issues if i.severity == severity)

    return ScanSummary(
        total_issues=len(issues),
        critical_count=count(Severity.CRITICAL),
        high_count=count(Severity.HIGH),
        medium_count=count(Severity.MEDIUM),
        low_count=count(Severity.LOW),
    )


class AccessibilityScanner:
    """Runs the accessibility audit over a list of routes.

    Pages come from ``loader`` when one is given, otherwise they are fetched
    from ``config.base_url``. Without either there is nothing to inspect and
    every page scans clean.
    """

    def __init__(
        self,
        config: ScanConfig,
        loader: Optional[PageLoader] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.loader = loader
        self.transport = transport

    def page_url(self, page: str) -> str:
        base = normalize_url(self.config.base_url).rstrip("/") + "/"
        return urljoin(base, page.lstrip("/"))

    def scan_page(self, page: str, inspector: Optional[PageInspector]) -> AuditScore:
        """Accessibility result for one page, with every finding tagged with the page."""
        result = audit_accessibility(inspector)
        findings = tuple(dataclasses.replace(f, page=page) for f in result.findings)
        return dataclasses.replace(result, findings=findings)

    async def _load(self, client: Optional[httpx.AsyncClient], page: str) -> PageInspector:
        if self.loader is not None:
            return self.loader(page)
        if client is None:
            return NullInspector()
        return await fetch_page(
            client,
            self.page_url(page),
            fetch_resources=False,
            exclude=self.config.exclude_selectors,
        )

    async def scan_all_pages(self) -> ScanResult:
        page_results: dict[str, AuditScore] = {}
        errors: dict[str, str] = {}
        all_issues: list[Issue] = []

        client = None
        if self.loader is None and self.config.base_url:
            client = make_client(transport=self.transport)

        try:
            # dict.fromkeys drops repeated pages, first occurrence wins
            for page in dict.fromkeys(self.config.pages):
                try:
                    inspector = await self._load(client, page)
                    result = self.scan_page(page, inspector)
                except httpx.HTTPStatusError as e:
                    errors[page] = f"HTTP {e.response.status_code}"
                except httpx.RequestError as e:
                    errors[page] = f"Request failed: {e}"
                except Exception as e:
                    logger.exception(f"Accessibility scan of {page} failed")
                    errors[page] = str(e) or type(e).__name__

                if page in errors:
                    logger.error(f"Could not scan {page}: {errors[page]}")
                    continue

                page_results[page] = result
                all_issues.extend(result.findings)
        finally:
            if client is not None:
                await client.aclose()

        logger.info(f"Scanned {len(page_results)} page(s), {len(all_issues)} accessibility issue(s)")

        return ScanResult(
            page_results=page_results,
            overall_score=overall_score(page_results.values()),
            critical_issues=tuple(i for i in all_issues if i.severity == Severity.CRITICAL),
            summary=summarize(all_issues),
            issues=tuple(all_issues),
            errors=errors,
        )


async def run_accessibility_audit(
    config: ScanConfig = DEFAULT_SCAN_CONFIG,
    loader: Optional[PageLoader] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ScanResult:
    """Create and run a scanner, by default over the main application pages."""
    scanner = AccessibilityScanner(config, loader=loader, transport=transport)
    return await scanner.scan_all_pages()
