"""Programmatic audit API.

Typical use::

    report = asyncio.run(OwaspAuditor(AuditConfig(root_dir="./app")).audit())

Each :meth:`Auditor.audit` call scans the tree once, evaluates the selected
checks, aggregates them and optionally writes report artifacts.  Auditor
instances hold no per-run state, so concurrent audits are independent.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from complyscan import __version__
from complyscan.config import (
    ACCESSIBILITY_SCAN_EXTENSIONS,
    SECURITY_SCAN_EXTENSIONS,
    AuditConfig,
)
from complyscan.core.next_steps import generate_next_steps
from complyscan.core.pipeline import evaluate
from complyscan.core.registry import CheckRegistry, get_registry
from complyscan.core.scoring import aggregate, overall_status
from complyscan.models import AuditReport, Taxonomy
from complyscan.report import write_report
from complyscan.utils import scan_project

logger = logging.getLogger(__name__)


class Auditor:
    """Base auditor; subclasses pick the taxonomy and file extensions."""

    taxonomy: Taxonomy
    scan_extensions: frozenset[str]

    def __init__(self, config: AuditConfig | None = None,
                 registry: CheckRegistry | None = None) -> None:
        # Fail fast on bad configuration, before any scanning
        self.config = (config or AuditConfig()).validate(self.taxonomy)
        self.registry = registry or get_registry(self.taxonomy)

    @property
    def uses_level(self) -> bool:
        return self.taxonomy is Taxonomy.WCAG

    async def audit(self) -> AuditReport:
        """Run the audit and return its report."""
        config = self.config
        started = time.monotonic()
        deadline = started + config.timeout
        level = config.level if self.uses_level else None

        definitions = self.registry.list_checks(config.skip_categories, level)
        logger.info(
            "Starting %s audit of %s (%d checks)",
            self.taxonomy.value, config.root_dir, len(definitions),
        )

        scan = await asyncio.to_thread(
            scan_project,
            config.root_dir,
            max_files=config.max_files,
            scan_extensions=self.scan_extensions,
            deadline=deadline,
        )
        logger.debug("Scanned %d files", scan.files_scanned)

        checks = await evaluate(definitions, scan, config, deadline)
        category_results, summary = aggregate(checks, self.taxonomy)

        report = AuditReport(
            taxonomy=self.taxonomy,
            timestamp=datetime.now(timezone.utc).isoformat(),
            application_name=config.application_name,
            root_dir=str(config.root_dir),
            checks=tuple(checks),
            category_results=category_results,
            summary=summary,
            overall_status=overall_status(summary),
            next_steps=tuple(generate_next_steps(checks, summary, self.taxonomy)),
            files_scanned=scan.files_scanned,
            audit_version=__version__,
            level=level,
            duration_ms=round((time.monotonic() - started) * 1000),
        )
        logger.info(
            "%s audit finished: score %d%%, %s",
            self.taxonomy.value.upper(),
            summary.compliance_score,
            report.overall_status.value,
        )

        if config.generate_report:
            written = await asyncio.to_thread(write_report, report, config.output_dir)
            for path in written:
                logger.info("Report saved to %s", path)
        return report


class OwaspAuditor(Auditor):
    """OWASP Top 10 (2021) security auditor."""

    taxonomy = Taxonomy.OWASP
    scan_extensions = frozenset(SECURITY_SCAN_EXTENSIONS)


class WcagAuditor(Auditor):
    """WCAG 2.1 accessibility auditor."""

    taxonomy = Taxonomy.WCAG
    scan_extensions = frozenset(ACCESSIBILITY_SCAN_EXTENSIONS)


async def run_owasp_audit(config: AuditConfig | None = None) -> AuditReport:
    return await OwaspAuditor(config).audit()


async def run_wcag_audit(config: AuditConfig | None = None) -> AuditReport:
    return await WcagAuditor(config).audit()
