"""ComplyScan data models for check definitions, results and reports."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from complyscan.config import AuditConfig
    from complyscan.utils import ScanData


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Status(str, Enum):
    """Outcome of a single check."""

    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"
    NOT_APPLICABLE = "not_applicable"


class Severity(str, Enum):
    """Ranked impact level.

    OWASP checks use ``critical/high/medium/low/info``; WCAG checks use the
    axe vocabulary ``critical/serious/moderate/minor``.  Both map onto the
    same ``rank`` scale so they can be ordered and tallied together.
    """

    CRITICAL = "critical"
    HIGH = "high"
    SERIOUS = "serious"
    MEDIUM = "medium"
    MODERATE = "moderate"
    LOW = "low"
    MINOR = "minor"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.SERIOUS: 3,
    Severity.MEDIUM: 2,
    Severity.MODERATE: 2,
    Severity.LOW: 1,
    Severity.MINOR: 1,
    Severity.INFO: 0,
}


class Level(str, Enum):
    """WCAG conformance level."""

    A = "A"
    AA = "AA"
    AAA = "AAA"

    @property
    def rank(self) -> int:
        return {Level.A: 1, Level.AA: 2, Level.AAA: 3}[self]


class OverallStatus(str, Enum):
    COMPLIANT = "compliant"
    NON_COMPLIANT = "non_compliant"
    NEEDS_REVIEW = "needs_review"


class OwaspCategory(str, Enum):
    """OWASP Top 10 (2021) categories."""

    A01_BROKEN_ACCESS_CONTROL = "A01_Broken_Access_Control"
    A02_CRYPTOGRAPHIC_FAILURES = "A02_Cryptographic_Failures"
    A03_INJECTION = "A03_Injection"
    A04_INSECURE_DESIGN = "A04_Insecure_Design"
    A05_SECURITY_MISCONFIGURATION = "A05_Security_Misconfiguration"
    A06_VULNERABLE_COMPONENTS = "A06_Vulnerable_Components"
    A07_AUTHENTICATION_FAILURES = "A07_Authentication_Failures"
    A08_DATA_INTEGRITY_FAILURES = "A08_Data_Integrity_Failures"
    A09_LOGGING_MONITORING_FAILURES = "A09_Logging_Monitoring_Failures"
    A10_SSRF = "A10_SSRF"

    @property
    def code(self) -> str:
        """Short category code, e.g. ``A04``."""
        return self.value.split("_", 1)[0]

    @property
    def display_name(self) -> str:
        return _OWASP_INFO[self][0]

    @property
    def description(self) -> str:
        return _OWASP_INFO[self][1]


_OWASP_INFO: dict[OwaspCategory, tuple[str, str]] = {
    OwaspCategory.A01_BROKEN_ACCESS_CONTROL: (
        "A01:2021 - Broken Access Control",
        "Restrictions on authenticated users not properly enforced",
    ),
    OwaspCategory.A02_CRYPTOGRAPHIC_FAILURES: (
        "A02:2021 - Cryptographic Failures",
        "Failures related to cryptography leading to sensitive data exposure",
    ),
    OwaspCategory.A03_INJECTION: (
        "A03:2021 - Injection",
        "Injection flaws such as SQL, NoSQL, OS command injection",
    ),
    OwaspCategory.A04_INSECURE_DESIGN: (
        "A04:2021 - Insecure Design",
        "Missing or ineffective control design",
    ),
    OwaspCategory.A05_SECURITY_MISCONFIGURATION: (
        "A05:2021 - Security Misconfiguration",
        "Insecure default configurations, incomplete configs, open cloud storage",
    ),
    OwaspCategory.A06_VULNERABLE_COMPONENTS: (
        "A06:2021 - Vulnerable and Outdated Components",
        "Using vulnerable, outdated, or unsupported components",
    ),
    OwaspCategory.A07_AUTHENTICATION_FAILURES: (
        "A07:2021 - Identification and Authentication Failures",
        "Authentication and session management implementation flaws",
    ),
    OwaspCategory.A08_DATA_INTEGRITY_FAILURES: (
        "A08:2021 - Software and Data Integrity Failures",
        "Code and infrastructure that do not protect against integrity violations",
    ),
    OwaspCategory.A09_LOGGING_MONITORING_FAILURES: (
        "A09:2021 - Security Logging and Monitoring Failures",
        "Insufficient logging and monitoring, ineffective incident response",
    ),
    OwaspCategory.A10_SSRF: (
        "A10:2021 - Server-Side Request Forgery",
        "Fetching remote resources without validating user-supplied URLs",
    ),
}


class WcagPrinciple(str, Enum):
    """WCAG 2.1 principles (POUR)."""

    PERCEIVABLE = "perceivable"
    OPERABLE = "operable"
    UNDERSTANDABLE = "understandable"
    ROBUST = "robust"

    @property
    def code(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        return _WCAG_INFO[self]


_WCAG_INFO: dict[WcagPrinciple, str] = {
    WcagPrinciple.PERCEIVABLE: (
        "Information and UI components must be presentable to users "
        "in ways they can perceive"
    ),
    WcagPrinciple.OPERABLE: "UI components and navigation must be operable",
    WcagPrinciple.UNDERSTANDABLE: (
        "Information and operation of UI must be understandable"
    ),
    WcagPrinciple.ROBUST: (
        "Content must be robust enough to be interpreted by assistive technologies"
    ),
}

Category = Union[OwaspCategory, WcagPrinciple]


class Taxonomy(str, Enum):
    """A family of checks sharing a registry, id scheme and vocabulary."""

    OWASP = "owasp"
    WCAG = "wcag"

    def title_for(self, level: Level | None = None) -> str:
        """Report heading; WCAG titles name the target conformance level."""
        if self is Taxonomy.OWASP:
            return "OWASP Top 10 2021 Security Audit"
        return f"WCAG 2.1 {(level or Level.AA).value} Accessibility Audit"

    @property
    def id_pattern(self) -> re.Pattern[str]:
        if self is Taxonomy.OWASP:
            return re.compile(r"^[A-Z]\d{2}-\d{3}$")
        return re.compile(r"^WCAG-\d+\.\d+\.\d+")

    @property
    def categories(self) -> tuple[Category, ...]:
        if self is Taxonomy.OWASP:
            return tuple(OwaspCategory)
        return tuple(WcagPrinciple)

    @property
    def severities(self) -> tuple[Severity, ...]:
        """Severity vocabulary, most severe first."""
        if self is Taxonomy.OWASP:
            return (
                Severity.CRITICAL,
                Severity.HIGH,
                Severity.MEDIUM,
                Severity.LOW,
                Severity.INFO,
            )
        return (Severity.CRITICAL, Severity.SERIOUS, Severity.MODERATE, Severity.MINOR)

    def severity_for_rank(self, rank: int) -> Severity:
        for severity in self.severities:
            if severity.rank == rank:
                return severity
        raise ValueError(f"No {self.value} severity with rank {rank}")


# ---------------------------------------------------------------------------
# Check definitions & detector outcomes
# ---------------------------------------------------------------------------

Detector = Callable[["ScanData", "AuditConfig"], "DetectorOutcome"]


@dataclass(frozen=True)
class CheckDefinition:
    """Immutable description of one compliance rule.

    Attributes:
        id: Stable identifier (``A03-001`` or ``WCAG-1.1.1``).
        category: OWASP category or WCAG principle the check belongs to.
        name: Short human-readable title.
        description: What the check verifies.
        severity: Impact when the check does not pass.
        detector: Function deciding the check outcome from scanned data.
        level: WCAG conformance level (accessibility checks only).
        automated: ``False`` when the outcome needs manual review.
        references: CWE ids or WCAG success-criterion ids.
        guideline: WCAG guideline the criterion belongs to.
        help_url: Link to the reference documentation.
    """

    id: str
    category: Category
    name: str
    description: str
    severity: Severity
    detector: Detector = field(compare=False, repr=False)
    level: Level | None = None
    automated: bool = True
    references: tuple[str, ...] = ()
    guideline: str | None = None
    help_url: str | None = None


@dataclass(frozen=True)
class DetectorOutcome:
    """Raw result returned by a detector."""

    status: Status
    findings: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.status is Status.NOT_APPLICABLE and self.findings:
            raise ValueError("A not_applicable outcome must not carry findings")

    @classmethod
    def passed(cls, *findings: str) -> DetectorOutcome:
        return cls(Status.PASS, tuple(findings))

    @classmethod
    def failed(cls, findings: list[str] | tuple[str, ...],
               recommendations: list[str] | tuple[str, ...] = ()) -> DetectorOutcome:
        return cls(Status.FAIL, tuple(findings), tuple(recommendations))

    @classmethod
    def warning(cls, findings: list[str] | tuple[str, ...],
                recommendations: list[str] | tuple[str, ...] = ()) -> DetectorOutcome:
        return cls(Status.WARNING, tuple(findings), tuple(recommendations))

    @classmethod
    def not_applicable(cls) -> DetectorOutcome:
        return cls(Status.NOT_APPLICABLE)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CheckResult:
    """Outcome of running one :class:`CheckDefinition`."""

    definition: CheckDefinition
    status: Status
    findings: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.status is Status.NOT_APPLICABLE and self.findings:
            raise ValueError(
                f"{self.definition.id}: not_applicable result must not carry findings"
            )

    @classmethod
    def from_outcome(cls, definition: CheckDefinition, outcome: DetectorOutcome) -> CheckResult:
        return cls(definition, outcome.status, outcome.findings, outcome.recommendations)

    # --- definition snapshot ---

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def category(self) -> Category:
        return self.definition.category

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def severity(self) -> Severity:
        return self.definition.severity

    @property
    def is_issue(self) -> bool:
        """``True`` when the check failed or warned."""
        return self.status in (Status.FAIL, Status.WARNING)

    def __str__(self) -> str:
        return f"[{self.status.value}] {self.id} {self.name} ({self.severity.value})"

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary representation."""
        d = self.definition
        data: dict[str, Any] = {
            "id": d.id,
            "category": d.category.value,
            "name": d.name,
            "description": d.description,
            "status": self.status.value,
            "severity": d.severity.value,
            "findings": list(self.findings),
            "recommendations": list(self.recommendations),
            "references": list(d.references),
            "automated": d.automated,
        }
        if d.level is not None:
            data["level"] = d.level.value
        if d.guideline:
            data["guideline"] = d.guideline
        if d.help_url:
            data["helpUrl"] = d.help_url
        return data


@dataclass(frozen=True)
class CategoryResult:
    """Aggregate of all checks sharing a category or principle."""

    category: Category
    total_checks: int = 0
    passed: int = 0
    failed: int = 0
    warnings: int = 0
    not_applicable: int = 0
    status: Status = Status.PASS
    priority: Severity | None = None
    compliance_score: int = 100

    @property
    def display_name(self) -> str:
        return self.category.display_name

    @property
    def description(self) -> str:
        return self.category.description

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "displayName": self.display_name,
            "description": self.description,
            "totalChecks": self.total_checks,
            "passed": self.passed,
            "failed": self.failed,
            "warnings": self.warnings,
            "notApplicable": self.not_applicable,
            "status": self.status.value,
            "priority": self.priority.value if self.priority else None,
            "complianceScore": self.compliance_score,
        }


@dataclass(frozen=True)
class Summary:
    """Global counts for an audit.

    Attributes:
        issues: Issue counts keyed by severity rank (4 = critical ... 1 = low).
    """

    total_checks: int = 0
    passed: int = 0
    failed: int = 0
    warnings: int = 0
    not_applicable: int = 0
    compliance_score: int = 100
    issues: dict[int, int] = field(default_factory=lambda: {4: 0, 3: 0, 2: 0, 1: 0})

    @property
    def critical_issues(self) -> int:
        return self.issues.get(4, 0)

    @property
    def high_issues(self) -> int:
        return self.issues.get(3, 0)

    @property
    def medium_issues(self) -> int:
        return self.issues.get(2, 0)

    @property
    def low_issues(self) -> int:
        return self.issues.get(1, 0)

    def to_dict(self, taxonomy: Taxonomy) -> dict[str, Any]:
        data: dict[str, Any] = {
            "totalChecks": self.total_checks,
            "passed": self.passed,
            "failed": self.failed,
            "warnings": self.warnings,
            "notApplicable": self.not_applicable,
            "complianceScore": self.compliance_score,
        }
        for rank in (4, 3, 2, 1):
            label = taxonomy.severity_for_rank(rank).value
            data[f"{label}Issues"] = self.issues.get(rank, 0)
        return data


@dataclass(frozen=True)
class AuditReport:
    """Top-level result of one ``audit()`` invocation."""

    taxonomy: Taxonomy
    timestamp: str
    application_name: str
    root_dir: str
    checks: tuple[CheckResult, ...]
    category_results: dict[Category, CategoryResult]
    summary: Summary
    overall_status: OverallStatus
    next_steps: tuple[str, ...]
    files_scanned: int
    audit_version: str = ""
    level: Level | None = None
    duration_ms: int = 0

    def checks_with_status(self, status: Status) -> list[CheckResult]:
        return [c for c in self.checks if c.status is status]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary of the full report."""
        data: dict[str, Any] = {
            "taxonomy": self.taxonomy.value,
            "timestamp": self.timestamp,
            "applicationName": self.application_name,
            "rootDir": self.root_dir,
            "auditVersion": self.audit_version,
            "summary": self.summary.to_dict(self.taxonomy),
            "categoryResults": {
                cat.value: result.to_dict()
                for cat, result in self.category_results.items()
            },
            "checks": [check.to_dict() for check in self.checks],
            "overallStatus": self.overall_status.value,
            "nextSteps": list(self.next_steps),
            "filesScanned": self.files_scanned,
            "durationMs": self.duration_ms,
        }
        if self.level is not None:
            data["level"] = self.level.value
        return data
