"""CLI interface for design-audit."""

import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from . import __version__
from .auditor import audit_url
from .models import CATEGORY_ORDER, SEVERITY_ORDER, ComprehensiveIssue, Issue, Severity, UrlAuditResult
from .report import generate_accessibility_report, generate_comprehensive_audit_report
from .scanner import DEFAULT_SCAN_CONFIG, ScanConfig, ScanResult, run_accessibility_audit
from .vitals import load_vitals


console = Console()


def severity_style(severity: Severity) -> str:
    """Get Rich style for severity level."""
    return {
        Severity.CRITICAL: "bold red",
        Severity.HIGH: "red",
        Severity.MEDIUM: "yellow",
        Severity.LOW: "blue",
    }.get(severity, "white")


def severity_icon(severity: Severity) -> str:
    """Get icon for severity level."""
    return {
        Severity.CRITICAL: "🚨",
        Severity.HIGH: "✗",
        Severity.MEDIUM: "⚠",
        Severity.LOW: "ℹ",
    }.get(severity, "•")


def score_color(score: float) -> str:
    """Get color for a 1-10 score."""
    if score >= 9:
        return "green"
    elif score >= 7:
        return "yellow"
    elif score >= 5:
        return "orange1"
    else:
        return "red"


def print_score_bar(score: float, width: int = 20) -> Text:
    """Create a visual score bar."""
    filled = int((score / 10) * width)
    empty = width - filled
    color = score_color(score)

    bar = Text()
    bar.append("█" * filled, style=color)
    bar.append("░" * empty, style="dim")
    bar.append(f" {score}/10", style=f"bold {color}")
    return bar


def print_result(result: UrlAuditResult, verbose: bool = False) -> None:
    """Print audit result to console."""

    if result.error:
        console.print(f"\n[red]Error:[/red] {result.error}")
        return

    audit = result.audit

    # Header
    console.print()
    console.print(Panel(
        f"[bold]{result.final_url}[/bold]\n"
        f"[dim]Fetched in {result.fetch_time_ms}ms[/dim]",
        title="🎨 Design Audit",
        border_style="blue"
    ))

    # Overall score
    console.print()
    console.print("  Design Score: ", end="")
    console.print(print_score_bar(audit.overall_score, width=25))
    console.print()

    # Category table
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Status")

    for category in CATEGORY_ORDER:
        category_result = audit.category(category)
        if category_result is None:
            table.add_row(category.label, "[dim]n/a[/dim]", f"[red]failed: {audit.errors.get(category.value, '')}[/red]")
            continue

        status_parts = []
        for severity in SEVERITY_ORDER:
            count = category_result.count(severity)
            if count:
                status_parts.append(f"[{severity_style(severity)}]{count} {severity.value}[/]")
        if not status_parts:
            status_parts.append("[green]OK[/green]")

        table.add_row(
            category.label,
            f"[{score_color(category_result.score)}]{category_result.score}/10[/]",
            ", ".join(status_parts)
        )

    console.print(table)

    # Issues (verbose mode shows all, otherwise the top ones)
    issues = audit.all_issues if verbose else audit.top_issues
    if issues:
        title = "All Issues" if verbose else "🎯 Top Issues"
        console.print(f"\n[bold]{title}:[/bold]\n")
        for i, issue in enumerate(issues, 1):
            style = severity_style(issue.severity)
            console.print(
                f"  {i}. [{style}]{severity_icon(issue.severity)}[/] [bold]{issue.description}[/bold] "
                f"[dim]({issue.category.label}, {issue.location}, priority {issue.priority})[/dim]"
            )
            console.print(f"     [cyan]→ {issue.recommendation}[/cyan]")
    else:
        console.print("\n[green]✓ No issues found[/green]")

    # Footer
    console.print()
    console.print("[dim]─" * 50 + "[/dim]")
    console.print(f"[dim]design-audit v{__version__}[/dim]")
    console.print()


def _issue_json(issue: ComprehensiveIssue) -> dict:
    return {
        "id": issue.id,
        "category": issue.category.value,
        "type": issue.type,
        "severity": issue.severity.value,
        "priority": issue.priority,
        "location": issue.location,
        "description": issue.description,
        "impact": issue.impact,
        "recommendation": issue.recommendation,
        "page": issue.page,
    }


def _finding_json(issue: Issue) -> dict:
    return {
        "category": issue.category.value,
        "type": issue.type,
        "severity": issue.severity.value,
        "element": issue.element,
        "description": issue.description,
        "recommendation": issue.recommendation,
        "page": issue.page,
    }


def result_json(result: UrlAuditResult) -> dict:
    output = {
        "url": result.url,
        "final_url": result.final_url,
        "fetch_time_ms": result.fetch_time_ms,
        "error": result.error,
    }
    audit = result.audit
    if audit is None:
        return output

    categories = {}
    for category in CATEGORY_ORDER:
        category_result = audit.category(category)
        categories[category.value] = None if category_result is None else {
            "score": category_result.score,
            "issues": list(category_result.issues),
            "recommendations": list(category_result.recommendations),
        }

    output.update({
        "overall_score": audit.overall_score,
        "timestamp": audit.timestamp,
        "categories": categories,
        "errors": audit.errors,
        "top_issues": [i.id for i in audit.top_issues],
        "issues": [_issue_json(i) for i in audit.all_issues],
    })
    return output


def scan_json(result: ScanResult, timestamp: str) -> dict:
    summary = result.summary
    return {
        "timestamp": timestamp,
        "overall_score": result.overall_score,
        "summary": {
            "total_issues": summary.total_issues,
            "critical_count": summary.critical_count,
            "high_count": summary.high_count,
            "medium_count": summary.medium_count,
            "low_count": summary.low_count,
        },
        "page_scores": {page: r.score for page, r in result.page_results.items()},
        "critical_issues": [_finding_json(i) for i in result.critical_issues],
        "issues": [_finding_json(i) for i in result.issues],
        "errors": result.errors,
    }


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx):
    """Design Audit - accessibility, performance, mobile UX, visual consistency
    and interaction design audit of a page.

    \b
    Quick start:
        design-audit scan example.com
        design-audit a11y https://app.example.com

    \b
    Commands:
        scan    Audit a URL across all five categories
        a11y    Accessibility scan over several routes
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("url")
@click.option("-v", "--verbose", is_flag=True, help="Show all issues, not just the top ones")
@click.option("-t", "--timeout", type=float, default=None, help="Request timeout in seconds")
@click.option("--viewport", type=int, default=None, help="Viewport width in px (default: 375)")
@click.option("--vitals", "vitals_file", type=click.Path(exists=True, dir_okay=False),
              help="Lighthouse / PageSpeed JSON with Core Web Vitals")
@click.option("--no-resources", is_flag=True, help="Don't fetch linked scripts and stylesheets")
@click.option("--report", "report_path", is_flag=False, flag_value="DESIGN_AUDIT.md", default=None,
              type=click.Path(dir_okay=False), help="Write a markdown report (default: DESIGN_AUDIT.md)")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def scan(url: str, verbose: bool, timeout: Optional[float], viewport: Optional[int],
         vitals_file: Optional[str], no_resources: bool, report_path: Optional[str], json_output: bool):
    """Audit a URL across all five design categories.

    \b
    Examples:
        design-audit scan example.com
        design-audit scan example.com --verbose
        design-audit scan example.com --vitals lighthouse.json --report
        design-audit scan example.com --json
    """
    vitals = None
    if vitals_file:
        try:
            vitals = load_vitals(vitals_file)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--vitals")

    with console.status(f"[bold blue]Auditing {url}...[/bold blue]"):
        result = asyncio.run(audit_url(
            url,
            timeout=timeout,
            viewport_width=viewport,
            fetch_resources=False if no_resources else None,
            vitals=vitals,
        ))

    if json_output:
        click.echo(json.dumps(result_json(result), indent=2))
    else:
        print_result(result, verbose=verbose)

    if report_path and result.audit is not None:
        Path(report_path).write_text(generate_comprehensive_audit_report(result.audit), encoding="utf-8")
        if not json_output:
            console.print(f"[green]✓[/green] Report written to [cyan]{report_path}[/cyan]\n")

    if result.error:
        sys.exit(1)


@cli.command()
@click.argument("base_url")
@click.option("-p", "--page", "pages", multiple=True,
              help="Route to scan (repeatable; default: /dashboard /projects /templates /)")
@click.option("-o", "--output", type=click.Path(file_okay=False), help="Output directory (default: current dir)")
def a11y(base_url: str, pages: tuple[str, ...], output: Optional[str]):
    """Accessibility scan over several routes of one site.

    \b
    Examples:
        design-audit a11y https://app.example.com
        design-audit a11y localhost:5173 -p / -p /settings -o ./audit
    """
    config = ScanConfig(
        pages=pages or DEFAULT_SCAN_CONFIG.pages,
        base_url=base_url,
        exclude_selectors=DEFAULT_SCAN_CONFIG.exclude_selectors,
    )

    with console.status(f"[bold blue]Scanning {len(config.pages)} page(s)...[/bold blue]"):
        result = asyncio.run(run_accessibility_audit(config))
    timestamp = datetime.now(timezone.utc).isoformat()

    output_dir = Path(output) if output else Path.cwd()
    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / "accessibility-audit.json"
    json_path.write_text(json.dumps(scan_json(result, timestamp), indent=2), encoding="utf-8")
    summary_path = output_dir / "accessibility-audit.md"
    summary_path.write_text(generate_accessibility_report(result, timestamp), encoding="utf-8")

    console.print()
    console.print(Panel(
        f"[bold]{base_url}[/bold]\n"
        f"[dim]{len(result.page_results)} page(s) scanned[/dim]",
        title="♿ Accessibility Scan",
        border_style="blue"
    ))
    console.print()
    console.print("  Accessibility Score: ", end="")
    console.print(print_score_bar(result.overall_score, width=25))

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Page", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Issues", justify="right")
    for page, page_result in result.page_results.items():
        table.add_row(page, f"[{score_color(page_result.score)}]{page_result.score}/10[/]", str(len(page_result.issues)))
    for page, error in result.errors.items():
        table.add_row(page, "[dim]n/a[/dim]", f"[red]{error}[/red]")
    console.print(table)

    summary = result.summary
    console.print(
        f"  {summary.total_issues} issues: "
        f"[bold red]{summary.critical_count} critical[/], [red]{summary.high_count} high[/], "
        f"[yellow]{summary.medium_count} medium[/], [blue]{summary.low_count} low[/]"
    )
    console.print(f"\n[bold]Files saved to:[/bold] {output_dir.absolute()}")
    console.print(f"  [green]✓[/green] [cyan]{json_path.name}[/cyan] + [cyan]{summary_path.name}[/cyan]\n")


# Convenience: allow `design-audit URL` as shortcut for `design-audit scan URL`
def main():
    """Entry point that handles both `design-audit URL` and `design-audit scan URL`."""
    args = sys.argv[1:]

    # If first arg looks like a URL (not a command), insert 'scan'
    if args and not args[0].startswith('-') and args[0] not in ['scan', 'a11y', '--help', '--version']:
        # Check if it looks like a URL/domain
        if '.' in args[0] or args[0].startswith('localhost'):
            sys.argv.insert(1, 'scan')

    cli()


if __name__ == "__main__":
    main()
