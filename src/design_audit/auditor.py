"""Main auditor that runs all category audits."""

import asyncio
import time
from datetime import datetime, timezone
from typing import Iterable, Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from .aggregator import aggregate, overall_score
from .checks import (
    audit_accessibility,
    audit_performance,
    audit_mobile_ux,
    audit_visual_consistency,
    audit_interaction_design,
)
from .config import settings
from .inspector import HtmlPageInspector, PageInspector, ResourceEntry, VitalsSample
from .logger import logger
from .models import (
    CATEGORY_ORDER,
    AuditScore,
    Category,
    ComprehensiveAudit,
    DesignAudit,
    UrlAuditResult,
)

__all__ = [
    "audit_accessibility",
    "audit_performance",
    "audit_mobile_ux",
    "audit_visual_consistency",
    "audit_interaction_design",
    "run_design_audit",
    "run_comprehensive_audit",
    "fetch_page",
    "audit_url",
    "audit_routes",
    "normalize_url",
]


DEFAULT_HEADERS = {
    "User-Agent": settings.USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def normalize_url(url: str) -> str:
    """Ensure URL has a scheme."""
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url


async def _run_category(
    category: Category,
    inspector: Optional[PageInspector],
    window: Optional[float],
    timeout: Optional[float],
) -> AuditScore:
    if category == Category.ACCESSIBILITY:
        return audit_accessibility(inspector)
    if category == Category.PERFORMANCE:
        return await audit_performance(inspector, window=window, timeout=timeout)
    if category == Category.MOBILE_UX:
        return audit_mobile_ux(inspector)
    if category == Category.VISUAL_CONSISTENCY:
        return audit_visual_consistency(inspector)
    return audit_interaction_design(inspector)


async def run_design_audit(
    inspector: Optional[PageInspector] = None,
    window: Optional[float] = None,
    timeout: Optional[float] = None,
) -> DesignAudit:
    """Run all five category audits on one page.

    A category that raises is logged and left as None; the remaining
    categories still run and make up the overall score.
    """
    results: dict[Category, Optional[AuditScore]] = {}
    errors: dict[str, str] = {}

    for category in CATEGORY_ORDER:
        try:
            results[category] = await _run_category(category, inspector, window, timeout)
        except Exception as e:
            logger.exception(f"{category.label} audit failed")
            errors[category.value] = str(e) or type(e).__name__
            results[category] = None

    return DesignAudit(
        accessibility=results[Category.ACCESSIBILITY],
        performance=results[Category.PERFORMANCE],
        mobile_ux=results[Category.MOBILE_UX],
        visual_consistency=results[Category.VISUAL_CONSISTENCY],
        interaction_design=results[Category.INTERACTION_DESIGN],
        overall_score=overall_score(r for r in results.values() if r is not None),
        timestamp=datetime.now(timezone.utc).isoformat(),
        errors=errors,
    )


async def run_comprehensive_audit(
    inspector: Optional[PageInspector] = None,
    window: Optional[float] = None,
    timeout: Optional[float] = None,
) -> ComprehensiveAudit:
    """Run all category audits and merge their issues into one ranked list."""
    audit = await run_design_audit(inspector, window=window, timeout=timeout)
    return aggregate(audit)


async def _check_resource(client: httpx.AsyncClient, url: str, kind: str) -> Optional[tuple[ResourceEntry, str]]:
    """Size (and stylesheet text) of one linked resource; None when it cannot be fetched."""
    try:
        if kind == "stylesheet":
            response = await client.get(url)
            response.raise_for_status()
            size = int(response.headers.get("content-length") or len(response.content))
            return ResourceEntry(name=url, kind=kind, transfer_size=size), response.text

        response = await client.head(url)
        response.raise_for_status()
        size = int(response.headers.get("content-length") or 0)
        return ResourceEntry(name=url, kind=kind, transfer_size=size), ""
    except (httpx.HTTPError, ValueError) as e:
        logger.debug(f"Skipping resource {url}: {e}")
        return None


def _linked_resources(html: str, base_url: str) -> list[tuple[str, str]]:
    soup = BeautifulSoup(html, "lxml")
    linked = []
    for link in soup.select('link[rel~="stylesheet"][href]'):
        linked.append((urljoin(base_url, link["href"]), "stylesheet"))
    for script in soup.select("script[src]"):
        linked.append((urljoin(base_url, script["src"]), "script"))
    return linked


async def fetch_page(
    client: httpx.AsyncClient,
    url: str,
    viewport_width: Optional[int] = None,
    fetch_resources: Optional[bool] = None,
    vitals: Optional[VitalsSample] = None,
    exclude: Iterable[str] = (),
) -> HtmlPageInspector:
    """Fetch a page (and its scripts and stylesheets) into an inspector.

    Raises httpx errors when the page itself cannot be fetched.
    """
    if fetch_resources is None:
        fetch_resources = settings.FETCH_RESOURCES

    response = await client.get(url)
    response.raise_for_status()
    final_url = str(response.url)

    resources: list[ResourceEntry] = []
    stylesheets: list[str] = []
    if fetch_resources:
        fetches = [_check_resource(client, href, kind) for href, kind in _linked_resources(response.text, final_url)]
        for fetched in await asyncio.gather(*fetches):
            if fetched is None:
                continue
            entry, css = fetched
            resources.append(entry)
            if css:
                stylesheets.append(css)

    return HtmlPageInspector(
        response.text,
        url=final_url,
        viewport_width=viewport_width,
        stylesheets=stylesheets,
        resources=resources,
        vitals=vitals,
        exclude=exclude,
    )


def make_client(timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers=DEFAULT_HEADERS,
        timeout=settings.HTTP_TIMEOUT if timeout is None else timeout,
        follow_redirects=True,
        transport=transport,
    )


async def _audit_with_client(
    client: httpx.AsyncClient,
    url: str,
    viewport_width: Optional[int],
    fetch_resources: Optional[bool],
    vitals: Optional[VitalsSample],
) -> UrlAuditResult:
    url = normalize_url(url)
    start_time = time.time()

    result = UrlAuditResult(url=url, final_url=url)

    try:
        inspector = await fetch_page(
            client, url,
            viewport_width=viewport_width,
            fetch_resources=fetch_resources,
            vitals=vitals,
        )
        result.final_url = inspector.url
        result.fetch_time_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Fetched {result.final_url} in {result.fetch_time_ms}ms")

        result.audit = await run_comprehensive_audit(inspector)

    except httpx.TimeoutException:
        result.error = f"Timeout after {client.timeout.read}s"
    except httpx.HTTPStatusError as e:
        result.error = f"HTTP {e.response.status_code}"
    except httpx.RequestError as e:
        result.error = f"Request failed: {e}"

    if result.error:
        logger.error(f"Audit of {url} failed: {result.error}")
    return result


async def audit_url(
    url: str,
    timeout: Optional[float] = None,
    viewport_width: Optional[int] = None,
    fetch_resources: Optional[bool] = None,
    vitals: Optional[VitalsSample] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UrlAuditResult:
    """Run a complete design audit on a URL.

    Args:
        url: The URL to audit
        timeout: Request timeout in seconds
        viewport_width: Viewport width the page is inspected at
        fetch_resources: Whether to fetch linked scripts and stylesheets
        vitals: Core Web Vitals measured elsewhere (e.g. Lighthouse)

    Returns:
        UrlAuditResult with the comprehensive audit, or an error
    """
    async with make_client(timeout, transport) as client:
        return await _audit_with_client(client, url, viewport_width, fetch_resources, vitals)


async def audit_routes(
    base_url: str,
    routes: Iterable[str],
    timeout: Optional[float] = None,
    viewport_width: Optional[int] = None,
    fetch_resources: Optional[bool] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[UrlAuditResult]:
    """Audit several routes of one site concurrently, in route order."""
    base_url = normalize_url(base_url).rstrip("/") + "/"
    async with make_client(timeout, transport) as client:
        return list(await asyncio.gather(*(
            _audit_with_client(client, urljoin(base_url, route.lstrip("/")), viewport_width, fetch_resources, None)
            for route in routes
        )))
