"""Dependency vulnerability scanning through an external tool.

The dependency check only depends on the :class:`VulnerabilityScanner`
protocol; :class:`NpmAuditScanner` is the default implementation and shells
out to ``npm audit --json``.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess  # nosec B404
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class VulnerabilityScanError(RuntimeError):
    """The vulnerability tool could not be run or its output not parsed."""


@dataclass(frozen=True)
class VulnReport:
    """Vulnerability counts by advisory severity."""

    critical: int = 0
    high: int = 0
    moderate: int = 0
    low: int = 0
    info: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.high + self.moderate + self.low + self.info


class VulnerabilityScanner(Protocol):
    """Anything able to report dependency vulnerabilities for a project."""

    def scan(self, path: Path) -> VulnReport:
        """Scan the project at *path*.

        Raises:
            VulnerabilityScanError: If the scan could not be completed.
        """


def parse_npm_audit(output: str) -> VulnReport:
    """Parse ``npm audit --json`` output (npm 6 and npm 7+ layouts)."""
    try:
        data = json.loads(output)
    except json.JSONDecodeError as exc:
        raise VulnerabilityScanError(f"npm audit returned invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise VulnerabilityScanError("npm audit returned an unexpected payload")

    if "error" in data:
        err = data["error"]
        summary = err.get("summary") if isinstance(err, dict) else err
        raise VulnerabilityScanError(f"npm audit error: {summary}")

    counts = data.get("metadata", {}).get("vulnerabilities")
    if not isinstance(counts, dict):
        raise VulnerabilityScanError("npm audit output has no vulnerability metadata")

    def _count(key: str) -> int:
        try:
            return int(counts.get(key, 0))
        except (TypeError, ValueError):
            return 0

    return VulnReport(
        critical=_count("critical"),
        high=_count("high"),
        moderate=_count("moderate"),
        low=_count("low"),
        info=_count("info"),
    )


class NpmAuditScanner:
    """Run ``npm audit`` in a project directory."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def scan(self, path: Path) -> VulnReport:
        npm = shutil.which("npm")
        if not npm:
            raise VulnerabilityScanError("npm not found; install Node.js to audit dependencies")

        logger.debug("Running npm audit in %s", path)
        try:
            proc = subprocess.run(  # nosec B603
                [npm, "audit", "--json"],
                cwd=str(path),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise VulnerabilityScanError(
                f"npm audit timed out after {self.timeout:g}s"
            ) from exc
        except OSError as exc:
            raise VulnerabilityScanError(f"npm audit could not be started: {exc}") from exc

        # npm audit exits non-zero whenever vulnerabilities exist, so the
        # exit code alone does not signal a failure.
        if not proc.stdout.strip():
            stderr = proc.stderr.strip().splitlines()
            detail = stderr[-1] if stderr else f"exit code {proc.returncode}"
            raise VulnerabilityScanError(f"npm audit produced no output ({detail})")

        return parse_npm_audit(proc.stdout)
