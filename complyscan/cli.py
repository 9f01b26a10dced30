"""ComplyScan CLI — Entry point for the compliance auditors."""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from complyscan import __app_name__, __version__
from complyscan.config import (
    DEFAULT_CHECK_TIMEOUT,
    DEFAULT_MAX_FILES,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_TIMEOUT,
    AuditConfig,
    ConfigError,
)
from complyscan.core.auditor import OwaspAuditor, WcagAuditor
from complyscan.log import setup_logging
from complyscan.models import AuditReport, OverallStatus, Severity, Status, Taxonomy
from complyscan.utils import validate_path

# ---------------------------------------------------------------------------
# App & Console
# ---------------------------------------------------------------------------

app = typer.Typer(
    name=__app_name__,
    help="🛡️ ComplyScan — OWASP Top 10 and WCAG 2.1 compliance audits for web projects.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

# ---------------------------------------------------------------------------
# Status / severity → Rich color mapping
# ---------------------------------------------------------------------------

_STATUS_STYLES: dict[Status, str] = {
    Status.PASS: "green",
    Status.FAIL: "red",
    Status.WARNING: "yellow",
    Status.NOT_APPLICABLE: "dim",
}

_OVERALL_STYLES: dict[OverallStatus, str] = {
    OverallStatus.COMPLIANT: "green",
    OverallStatus.NON_COMPLIANT: "red",
    OverallStatus.NEEDS_REVIEW: "yellow",
}


def _severity_color(severity: Severity) -> str:
    return {4: "red", 3: "magenta", 2: "yellow", 1: "blue"}.get(severity.rank, "white")


# ---------------------------------------------------------------------------
# Version callback
# ---------------------------------------------------------------------------


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] v{__version__}")
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------


@app.callback()
def main(
    version: Optional[bool] = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-v",
        help="Show the application version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ComplyScan — audit a web project against OWASP Top 10 or WCAG 2.1."""


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def owasp(
    path: str = typer.Argument(..., help="Path to the project directory to audit."),
    app_name: Optional[str] = typer.Option(  # noqa: UP007
        None, "--app-name", help="Application name shown in the report."
    ),
    skip: Optional[List[str]] = typer.Option(  # noqa: UP006, UP007
        None,
        "--skip",
        help="Category to skip, e.g. A04 or A10_SSRF. Repeat or comma-separate.",
    ),
    max_files: int = typer.Option(DEFAULT_MAX_FILES, "--max-files", help="Maximum files to read."),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Audit time budget (s)."),
    check_timeout: float = typer.Option(
        DEFAULT_CHECK_TIMEOUT, "--check-timeout", help="Per-check time budget (s)."
    ),
    save_report: bool = typer.Option(
        False, "--save-report", help="Write JSON and Markdown reports."
    ),
    output_dir: str = typer.Option(
        DEFAULT_OUTPUT_DIR, "--output-dir", help="Directory for saved reports."
    ),
    output_json: bool = typer.Option(
        False, "--json", help="Output results as JSON instead of Rich tables."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Audit a project against the OWASP Top 10 (2021)."""
    _run(
        Taxonomy.OWASP,
        path,
        app_name=app_name,
        skip=skip,
        max_files=max_files,
        timeout=timeout,
        check_timeout=check_timeout,
        save_report=save_report,
        output_dir=output_dir,
        output_json=output_json,
        verbose=verbose,
    )


@app.command()
def wcag(
    path: str = typer.Argument(..., help="Path to the project directory to audit."),
    app_name: Optional[str] = typer.Option(  # noqa: UP007
        None, "--app-name", help="Application name shown in the report."
    ),
    skip: Optional[List[str]] = typer.Option(  # noqa: UP006, UP007
        None,
        "--skip",
        help="Principle to skip, e.g. robust. Repeat or comma-separate.",
    ),
    level: str = typer.Option("AA", "--level", help="Highest conformance level: A, AA or AAA."),
    max_files: int = typer.Option(DEFAULT_MAX_FILES, "--max-files", help="Maximum files to read."),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Audit time budget (s)."),
    check_timeout: float = typer.Option(
        DEFAULT_CHECK_TIMEOUT, "--check-timeout", help="Per-check time budget (s)."
    ),
    save_report: bool = typer.Option(
        False, "--save-report", help="Write JSON and Markdown reports."
    ),
    output_dir: str = typer.Option(
        DEFAULT_OUTPUT_DIR, "--output-dir", help="Directory for saved reports."
    ),
    output_json: bool = typer.Option(
        False, "--json", help="Output results as JSON instead of Rich tables."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """Audit a project against WCAG 2.1."""
    _run(
        Taxonomy.WCAG,
        path,
        app_name=app_name,
        skip=skip,
        level=level,
        max_files=max_files,
        timeout=timeout,
        check_timeout=check_timeout,
        save_report=save_report,
        output_dir=output_dir,
        output_json=output_json,
        verbose=verbose,
    )


def _split_skip(values: Optional[List[str]]) -> list[str]:  # noqa: UP006, UP007
    """Flatten repeated and comma-separated ``--skip`` values."""
    items: list[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def _run(
    taxonomy: Taxonomy,
    path: str,
    *,
    app_name: Optional[str],  # noqa: UP007
    skip: Optional[List[str]],  # noqa: UP006, UP007
    max_files: int,
    timeout: float,
    check_timeout: float,
    save_report: bool,
    output_dir: str,
    output_json: bool,
    verbose: bool,
    level: str = "AA",
) -> None:
    setup_logging(verbose, quiet=output_json)

    # --- Validate path ---
    try:
        target = validate_path(path)
    except (FileNotFoundError, NotADirectoryError) as exc:
        console.print(f"[bold red]✗[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from None

    config = AuditConfig(
        root_dir=target,
        application_name=app_name or target.name,
        max_files=max_files,
        timeout=timeout,
        check_timeout=check_timeout,
        skip_categories=_split_skip(skip),
        generate_report=save_report,
        output_dir=Path(output_dir),
        verbose=verbose,
        level=level,
    )

    auditor_cls = OwaspAuditor if taxonomy is Taxonomy.OWASP else WcagAuditor
    try:
        auditor = auditor_cls(config)
    except ConfigError as exc:
        console.print(f"[bold red]✗[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from None

    if not output_json:
        console.print(
            Panel(
                f"[bold green]{taxonomy.title_for(auditor.config.level)}[/bold green]",
                title="🛡️ ComplyScan",
                subtitle=f"v{__version__}",
                border_style="cyan",
            )
        )
        console.print(f"[dim]Target:[/dim] {target}\n")
        console.print("[bold]Auditing…[/bold]\n")

    report = asyncio.run(auditor.audit())

    # --- Output ---
    if output_json:
        _print_json(report)
    else:
        _print_rich(report)
        if save_report:
            console.print(f"\n[dim]Reports written to[/dim] {Path(output_dir).resolve()}")

    if report.overall_status is OverallStatus.NON_COMPLIANT:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _print_json(report: AuditReport) -> None:
    """Print the audit report as structured JSON."""
    print(json.dumps(report.to_dict(), indent=2))


def _print_rich(report: AuditReport) -> None:
    """Render the audit report using Rich tables and panels."""
    _print_checks_table(report)
    _print_categories_table(report)
    _print_summary(report)
    _print_next_steps(report)


def _print_checks_table(report: AuditReport) -> None:
    table = Table(
        title="🔍 Check Results",
        show_lines=True,
        header_style="bold magenta",
    )
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Check", style="bold", max_width=30)
    table.add_column("Severity", justify="center")
    table.add_column("Status", justify="center")
    table.add_column("Findings", max_width=60)

    for check in report.checks:
        sev_color = _severity_color(check.severity)
        status_color = _STATUS_STYLES[check.status]
        findings = "\n".join(escape(f) for f in check.findings[:3])
        if len(check.findings) > 3:
            findings += f"\n[dim](+{len(check.findings) - 3} more)[/dim]"
        table.add_row(
            check.id,
            check.name,
            f"[bold {sev_color}]{check.severity.value}[/bold {sev_color}]",
            f"[{status_color}]{check.status.value}[/{status_color}]",
            findings,
        )

    console.print(table)
    console.print()


def _print_categories_table(report: AuditReport) -> None:
    table = Table(title="📂 Categories", header_style="bold magenta")
    table.add_column("Category", style="cyan")
    table.add_column("Passed", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Warnings", justify="right")
    table.add_column("N/A", justify="right", style="dim")
    table.add_column("Score", justify="right")

    for result in report.category_results.values():
        color = _STATUS_STYLES[result.status]
        table.add_row(
            f"[{color}]{result.display_name}[/{color}]",
            str(result.passed),
            str(result.failed),
            str(result.warnings),
            str(result.not_applicable),
            f"{result.compliance_score}%",
        )

    console.print(table)
    console.print()


def _print_summary(report: AuditReport) -> None:
    """Print the audit summary with the issue breakdown."""
    s = report.summary
    color = _OVERALL_STYLES[report.overall_status]

    summary_lines = [
        f"[bold]Files scanned:[/bold]    {report.files_scanned}",
        f"[bold]Checks run:[/bold]       {s.total_checks}",
        f"[bold]Compliance score:[/bold] {s.compliance_score}%",
        f"[bold]Overall status:[/bold]   [bold {color}]"
        f"{report.overall_status.value.replace('_', ' ').upper()}[/bold {color}]",
        "",
    ]
    for rank, style in ((4, "red"), (3, "magenta"), (2, "yellow"), (1, "blue")):
        label = report.taxonomy.severity_for_rank(rank).value.upper()
        summary_lines.append(f"[bold {style}]{label}:[/bold {style}] {s.issues.get(rank, 0)}")

    console.print(
        Panel(
            "\n".join(summary_lines),
            title="📊 Audit Summary",
            border_style=color,
        )
    )


def _print_next_steps(report: AuditReport) -> None:
    console.print("\n[bold]Next steps[/bold]")
    for step in report.next_steps:
        console.print(f"  • {step}", markup=False)
