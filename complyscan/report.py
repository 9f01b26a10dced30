"""JSON and Markdown report artifacts."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from complyscan.models import AuditReport, CheckResult, Status, Taxonomy

logger = logging.getLogger(__name__)

_STATUS_ICON: dict[Status, str] = {
    Status.PASS: "✅",
    Status.FAIL: "❌",
    Status.WARNING: "⚠️",
    Status.NOT_APPLICABLE: "➖",
}

_OVERALL_ICON = {
    "compliant": "✅",
    "non_compliant": "❌",
    "needs_review": "⚠️",
}


def report_basename(taxonomy: Taxonomy) -> str:
    return f"latest-{taxonomy.value}-audit"


def _references_line(check: CheckResult) -> str | None:
    refs = check.definition.references
    if not refs:
        return None
    label = "CWE IDs" if check.definition.category in Taxonomy.OWASP.categories else "WCAG"
    return f"**{label}**: {', '.join(refs)}"


def render_markdown(report: AuditReport) -> str:
    """Render *report* as a Markdown document.

    Sections: Executive Summary, Category Results, Next Steps, Detailed
    Findings.
    """
    s = report.summary
    taxonomy = report.taxonomy
    overall = report.overall_status.value
    lines: list[str] = [
        f"# {taxonomy.title_for(report.level)} Report",
        "",
        f"**Application**: {report.application_name}",
        f"**Root Directory**: {report.root_dir}",
        f"**Audit Date**: {report.timestamp}",
    ]
    if report.level is not None:
        lines.append(f"**Conformance Level**: {report.level.value}")
    lines += [
        f"**Status**: {_OVERALL_ICON[overall]} {overall.replace('_', ' ').upper()}",
        f"**Compliance Score**: {s.compliance_score}%",
        f"**Files Scanned**: {report.files_scanned}",
        "",
        "## Executive Summary",
        "",
        "| Metric | Count |",
        "|--------|-------|",
        f"| Total Checks | {s.total_checks} |",
        f"| Passed | {s.passed} |",
        f"| Failed | {s.failed} |",
        f"| Warnings | {s.warnings} |",
        f"| Not Applicable | {s.not_applicable} |",
    ]
    for rank in (4, 3, 2, 1):
        label = taxonomy.severity_for_rank(rank).value.capitalize()
        lines.append(f"| {label} Issues | {s.issues.get(rank, 0)} |")
    lines.append("")

    lines += ["## Category Results", ""]
    for result in report.category_results.values():
        lines.append(f"### {_STATUS_ICON[result.status]} {result.display_name}")
        lines.append("")
        lines.append(f"**Description**: {result.description}")
        lines.append("")
        priority = result.priority.value.upper() if result.priority else "N/A"
        lines.append(f"**Priority**: {priority}")
        lines.append("")
        summary = f"**Results**: {result.passed}/{result.total_checks} passed"
        if result.failed:
            summary += f", {result.failed} failed"
        if result.warnings:
            summary += f", {result.warnings} warnings"
        if result.not_applicable:
            summary += f", {result.not_applicable} not applicable"
        lines.append(f"{summary} (score {result.compliance_score}%)")
        lines.append("")
        members = [c for c in report.checks if c.category == result.category]
        for check in members:
            lines.append(f"- {_STATUS_ICON[check.status]} **{check.name}** ({check.id})")
            detail = f"  - **Severity**: {check.severity.value.upper()}"
            if check.definition.level is not None:
                detail += f" | **Level**: {check.definition.level.value}"
            lines.append(detail)
            refs = _references_line(check)
            if refs:
                lines.append(f"  - {refs}")
            lines.extend(f"  - {finding}" for finding in check.findings)
            if check.recommendations:
                lines.append(f"  - **Recommendations**: {'; '.join(check.recommendations)}")
        if members:
            lines.append("")

    lines += ["## Next Steps", ""]
    lines.extend(f"- {step}" for step in report.next_steps)
    lines.append("")

    lines += ["## Detailed Findings", ""]
    failed = report.checks_with_status(Status.FAIL)
    warnings = report.checks_with_status(Status.WARNING)
    if not failed and not warnings:
        lines += ["No failed checks or warnings.", ""]
    for title, icon, group in (
        ("Failed Checks", _STATUS_ICON[Status.FAIL], failed),
        ("Warnings", _STATUS_ICON[Status.WARNING], warnings),
    ):
        if not group:
            continue
        lines += [f"### {title} ({len(group)})", ""]
        for check in group:
            lines.append(f"#### {icon} {check.name} ({check.id})")
            lines.append("")
            lines.append(f"**Category**: {check.category.display_name}")
            lines.append(f"**Severity**: {check.severity.value.upper()}")
            if check.definition.level is not None:
                lines.append(f"**Level**: {check.definition.level.value}")
            lines.append("")
            if check.findings:
                lines.append("**Findings**:")
                lines.extend(f"- {finding}" for finding in check.findings)
                lines.append("")
            if check.recommendations:
                lines.append("**Recommendations**:")
                lines.extend(f"- {rec}" for rec in check.recommendations)
                lines.append("")
            refs = _references_line(check)
            if refs:
                lines += [refs, ""]
            if check.definition.help_url:
                lines += [f"**Reference**: {check.definition.help_url}", ""]

    lines += ["---", "", f"*Report generated by ComplyScan v{report.audit_version}*", ""]
    return "\n".join(lines)


def write_report(report: AuditReport, output_dir: Path | str) -> list[Path]:
    """Write ``latest-<taxonomy>-audit.json`` and ``.md`` into *output_dir*.

    Write failures are logged, never raised.

    Returns:
        Paths actually written, possibly empty.
    """
    out = Path(output_dir)
    base = report_basename(report.taxonomy)
    artifacts = (
        (out / f"{base}.json", lambda: json.dumps(report.to_dict(), indent=2) + "\n"),
        (out / f"{base}.md", lambda: render_markdown(report)),
    )

    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Could not create report directory %s: %s", out, exc)
        return []

    written: list[Path] = []
    for path, render in artifacts:
        try:
            path.write_text(render(), encoding="utf-8")
        except OSError as exc:
            logger.error("Could not write report %s: %s", path, exc)
            continue
        written.append(path)
        logger.debug("Wrote %s", path)
    return written
