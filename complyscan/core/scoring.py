"""Aggregation of check results into category results and a summary."""

from __future__ import annotations

from collections.abc import Sequence

from complyscan.models import (
    Category,
    CategoryResult,
    CheckResult,
    OverallStatus,
    Status,
    Summary,
    Taxonomy,
)

# Minimum compliance score for a compliant audit
COMPLIANT_SCORE: int = 80


def compliance_score(passed: int, total: int) -> int:
    """Percentage of checks that passed; 100 when nothing ran."""
    if total == 0:
        return 100
    return round(passed / total * 100)


def _counts(checks: Sequence[CheckResult]) -> dict[Status, int]:
    counts = {status: 0 for status in Status}
    for check in checks:
        counts[check.status] += 1
    return counts


def _category_status(counts: dict[Status, int]) -> Status:
    if counts[Status.FAIL]:
        return Status.FAIL
    if counts[Status.WARNING]:
        return Status.WARNING
    return Status.PASS


def summarize_category(category: Category, checks: Sequence[CheckResult]) -> CategoryResult:
    counts = _counts(checks)
    priority = max((c.severity for c in checks), key=lambda s: s.rank, default=None)
    return CategoryResult(
        category=category,
        total_checks=len(checks),
        passed=counts[Status.PASS],
        failed=counts[Status.FAIL],
        warnings=counts[Status.WARNING],
        not_applicable=counts[Status.NOT_APPLICABLE],
        status=_category_status(counts),
        priority=priority,
        compliance_score=compliance_score(counts[Status.PASS], len(checks)),
    )


def summarize(checks: Sequence[CheckResult]) -> Summary:
    """Global counts, score and issue tallies.

    Critical issues count failures only; every lower rank counts failures
    and warnings alike.
    """
    counts = _counts(checks)
    issues = {4: 0, 3: 0, 2: 0, 1: 0}
    for check in checks:
        rank = check.severity.rank
        if rank == 4:
            if check.status is Status.FAIL:
                issues[4] += 1
        elif rank in issues and check.is_issue:
            issues[rank] += 1

    return Summary(
        total_checks=len(checks),
        passed=counts[Status.PASS],
        failed=counts[Status.FAIL],
        warnings=counts[Status.WARNING],
        not_applicable=counts[Status.NOT_APPLICABLE],
        compliance_score=compliance_score(counts[Status.PASS], len(checks)),
        issues=issues,
    )


def aggregate(
    checks: Sequence[CheckResult],
    taxonomy: Taxonomy,
) -> tuple[dict[Category, CategoryResult], Summary]:
    """Group *checks* by category and compute the audit summary.

    Every category of *taxonomy* appears in the result, in taxonomy order,
    even when all its checks were skipped.
    """
    grouped: dict[Category, list[CheckResult]] = {c: [] for c in taxonomy.categories}
    for check in checks:
        grouped.setdefault(check.category, []).append(check)

    category_results = {
        category: summarize_category(category, members)
        for category, members in grouped.items()
    }
    return category_results, summarize(checks)


def overall_status(summary: Summary) -> OverallStatus:
    """Any critical failure overrides the score."""
    if summary.critical_issues > 0:
        return OverallStatus.NON_COMPLIANT
    if summary.compliance_score >= COMPLIANT_SCORE:
        return OverallStatus.COMPLIANT
    return OverallStatus.NEEDS_REVIEW
