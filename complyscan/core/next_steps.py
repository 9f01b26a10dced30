"""Prioritized remediation guidance derived from audit results."""

from __future__ import annotations

from collections.abc import Sequence

from complyscan.models import CheckResult, Status, Summary, Taxonomy

# Below this score the next steps call for a broader effort
LOW_SCORE_THRESHOLD: int = 70

_SUBJECT = {
    Taxonomy.OWASP: "security",
    Taxonomy.WCAG: "accessibility",
}

_MAINTENANCE = {
    Taxonomy.OWASP: (
        "Schedule regular security audits (quarterly recommended)",
        "Keep dependencies updated and monitor security advisories",
    ),
    Taxonomy.WCAG: (
        "Consider running manual tests with screen readers (NVDA, JAWS, VoiceOver)",
        "Test keyboard navigation throughout the application",
    ),
}


def _first_recommendation(check: CheckResult) -> str:
    return check.recommendations[0] if check.recommendations else check.definition.description


def generate_next_steps(
    checks: Sequence[CheckResult],
    summary: Summary,
    taxonomy: Taxonomy,
) -> list[str]:
    """Return remediation steps, most urgent first.

    The list is never empty: a clean audit yields an affirmative message
    followed by maintenance reminders.
    """
    subject = _SUBJECT[taxonomy]
    steps: list[str] = []

    for check in checks:
        if check.severity.rank == 4 and check.status is Status.FAIL:
            steps.append(
                f"URGENT: Fix {check.name} ({check.id}) - {_first_recommendation(check)}"
            )

    for check in checks:
        rank = check.severity.rank
        urgent = rank == 4 and check.status is Status.FAIL
        if rank >= 3 and check.is_issue and not urgent:
            label = check.severity.value
            steps.append(
                f"Fix {label} {subject} issue: {check.name} ({check.id}) - "
                f"{_first_recommendation(check)}"
            )

    if summary.medium_issues:
        label = taxonomy.severity_for_rank(2).value
        steps.append(f"Review and address {summary.medium_issues} {label}-severity issue(s)")
    if summary.low_issues:
        label = taxonomy.severity_for_rank(1).value
        steps.append(f"Work through {summary.low_issues} {label} issue(s) and manual review item(s)")

    if summary.total_checks and summary.compliance_score < LOW_SCORE_THRESHOLD:
        steps.append(
            f"Compliance score is below {LOW_SCORE_THRESHOLD}% - prioritize {subject} improvements"
        )

    if not steps:
        steps.append("All checks passed. Continue monitoring and maintain current practices")
        steps.extend(_MAINTENANCE[taxonomy])
        return steps

    steps.append("Re-run the audit after implementing fixes to verify improvements")
    steps.append("Integrate the audit into the CI/CD pipeline for continuous monitoring")
    return steps
