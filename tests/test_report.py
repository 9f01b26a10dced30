"""Unit tests for JSON and Markdown report artifacts."""

import asyncio
import json
import os
import tempfile
from pathlib import Path

from complyscan.config import AuditConfig
from complyscan.core.auditor import OwaspAuditor, WcagAuditor
from complyscan.models import AuditReport
from complyscan.report import render_markdown, report_basename, write_report
from complyscan.scanners.vulnerabilities import VulnReport


def _create_test_project(files: dict[str, str]) -> str:
    """Create a temporary project with the given files."""
    tmpdir = tempfile.mkdtemp(prefix="complyscan_report_")
    for path, content in files.items():
        full_path = os.path.join(tmpdir, path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "w") as f:
            f.write(content)
    return tmpdir


class _CleanScanner:
    def scan(self, path: Path) -> VulnReport:
        return VulnReport()


def _owasp_report() -> AuditReport:
    project = _create_test_project(
        {
            "package.json": "{}",
            "src/app.js": 'eval(input);\ncrypto.createHash("md5");\n',
        }
    )
    config = AuditConfig(root_dir=project, vulnerability_scanner=_CleanScanner())
    return asyncio.run(OwaspAuditor(config).audit())


def _wcag_report() -> AuditReport:
    project = _create_test_project({"index.html": '<html><body><img src="a.png"></body></html>'})
    return asyncio.run(WcagAuditor(AuditConfig(root_dir=project)).audit())


class TestMarkdown:
    """Tests for the Markdown rendering."""

    def test_section_order(self) -> None:
        md = render_markdown(_owasp_report())
        sections = ["## Executive Summary", "## Category Results", "## Next Steps", "## Detailed Findings"]
        positions = [md.index(section) for section in sections]

        assert md.startswith("# OWASP Top 10 2021 Security Audit Report")
        assert positions == sorted(positions)

    def test_lists_every_check_and_cwe(self) -> None:
        """Passing checks keep their severity and CWE ids too."""
        report = _owasp_report()
        md = render_markdown(report)
        categories = md.split("## Category Results", 1)[1].split("## Next Steps", 1)[0]

        for check in report.checks:
            assert f"({check.id})" in categories
            assert f"**Severity**: {check.severity.value.upper()}" in categories
            for ref in check.definition.references:
                assert ref in categories
        assert "  - **CWE IDs**: CWE-256, CWE-916" in categories
        assert "**CWE IDs**: CWE-327, CWE-328" in md

    def test_failed_checks_section(self) -> None:
        md = render_markdown(_owasp_report())

        assert "### Failed Checks (" in md
        assert "#### ❌ Weak Cryptography Detection (A02-004)" in md

    def test_wcag_details(self) -> None:
        md = render_markdown(_wcag_report())

        assert md.startswith("# WCAG 2.1 AA Accessibility Audit Report")
        assert "**Conformance Level**: AA" in md
        assert "**WCAG**: 1.1.1 Non-text Content" in md
        assert "https://www.w3.org/WAI/WCAG21/Understanding/" in md
        assert "**Severity**: CRITICAL | **Level**: A" in md

    def test_title_follows_level(self) -> None:
        project = _create_test_project({"index.html": "<html><body></body></html>"})
        report = asyncio.run(WcagAuditor(AuditConfig(root_dir=project, level="AAA")).audit())
        md = render_markdown(report)

        assert md.startswith("# WCAG 2.1 AAA Accessibility Audit Report")
        assert "**Conformance Level**: AAA" in md


class TestWriteReport:
    """Tests for writing artifacts to disk."""

    def test_writes_json_and_markdown(self) -> None:
        report = _owasp_report()
        out = tempfile.mkdtemp(prefix="complyscan_out_")
        written = write_report(report, out)

        assert [p.name for p in written] == ["latest-owasp-audit.json", "latest-owasp-audit.md"]
        data = json.loads(written[0].read_text(encoding="utf-8"))
        assert data["taxonomy"] == "owasp"
        assert data["summary"]["totalChecks"] == 41
        assert "criticalIssues" in data["summary"]
        assert len(data["checks"]) == 41
        assert data["checks"][0]["references"]
        assert written[1].read_text(encoding="utf-8") == render_markdown(report)

    def test_wcag_json_vocabulary(self) -> None:
        out = tempfile.mkdtemp(prefix="complyscan_out_")
        written = write_report(_wcag_report(), out)
        data = json.loads(written[0].read_text(encoding="utf-8"))

        assert data["level"] == "AA"
        assert "seriousIssues" in data["summary"]
        assert data["checks"][0]["helpUrl"].startswith("https://www.w3.org/")

    def test_unwritable_directory_returns_nothing(self) -> None:
        """A write failure is logged and reported as an empty list."""
        blocker = os.path.join(tempfile.mkdtemp(prefix="complyscan_out_"), "file")
        with open(blocker, "w") as f:
            f.write("not a directory")

        assert write_report(_owasp_report(), blocker) == []

    def test_basename(self) -> None:
        report = _wcag_report()

        assert report_basename(report.taxonomy) == "latest-wcag-audit"
