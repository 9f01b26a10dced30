"""ComplyScan configuration constants and per-run audit configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from complyscan import __app_name__, __version__
from complyscan.models import Category, Level, OwaspCategory, Taxonomy, WcagPrinciple

if TYPE_CHECKING:
    from complyscan.scanners.vulnerabilities import VulnerabilityScanner

APP_NAME: str = __app_name__
VERSION: str = __version__

# Directories / files to skip during scanning
DEFAULT_IGNORE_DIRS: list[str] = [
    "node_modules",
    ".git",
    "dist",
    "build",
    "coverage",
    ".next",
    ".astro",
    ".svelte-kit",
    ".turbo",
    ".cache",
    ".venv",
    "venv",
    "__pycache__",
    "vendor",
]

DEFAULT_IGNORE_FILES: list[str] = [
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "npm-shrinkwrap.json",
]

# Source files inspected by the security (OWASP) audit
SECURITY_SCAN_EXTENSIONS: list[str] = [
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".mjs",
    ".cjs",
    ".astro",
    ".vue",
    ".svelte",
]

# Markup- and style-bearing files inspected by the accessibility (WCAG) audit
ACCESSIBILITY_SCAN_EXTENSIONS: list[str] = [
    ".html",
    ".htm",
    ".astro",
    ".jsx",
    ".tsx",
    ".vue",
    ".svelte",
    ".css",
    ".scss",
]

# Project-level paths whose existence some checks depend on
PROJECT_MARKERS: list[str] = [
    ".env",
    ".gitignore",
    "SECURITY.md",
    "docs/security.md",
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "renovate.json",
    ".github/renovate.json",
    ".github/dependabot.yml",
    ".github/dependabot.yaml",
    ".github/workflows",
    ".gitlab-ci.yml",
]

# Marker files whose text is captured for detectors
MANIFEST_FILES: list[str] = [
    "package.json",
    "package-lock.json",
    ".gitignore",
    "renovate.json",
    ".github/renovate.json",
    ".github/dependabot.yml",
    ".github/dependabot.yaml",
]

# Read at most this many bytes per file
MAX_FILE_BYTES: int = 512 * 1024

DEFAULT_MAX_FILES: int = 500
DEFAULT_TIMEOUT: float = 120.0
DEFAULT_CHECK_TIMEOUT: float = 30.0
DEFAULT_CONCURRENCY: int = 8
DEFAULT_OUTPUT_DIR: str = "./security-reports"
DEFAULT_APPLICATION_NAME: str = "Web Application"


class ConfigError(ValueError):
    """Raised when an audit configuration is invalid."""


@dataclass
class AuditConfig:
    """Configuration for a single audit run.

    Attributes:
        root_dir: Project directory to scan.
        application_name: Name shown in reports.
        max_files: Upper bound on the number of files read.
        timeout: Wall-time budget for the whole audit, in seconds.
        check_timeout: Wall-time budget for one check, in seconds.
        concurrency: Maximum number of checks running at once.
        skip_categories: Categories (or principles) to leave out entirely.
            Accepts enum members or strings such as ``"A04"`` and
            ``"A04_Insecure_Design"``.
        generate_report: Write JSON and Markdown artifacts after the audit.
        output_dir: Directory receiving the artifacts.
        verbose: Emit per-check progress logging.
        level: Highest WCAG level audited (accessibility only).
        vulnerability_scanner: Dependency scanner used by the component
            check; defaults to ``npm audit``.
    """

    root_dir: Path | str = "."
    application_name: str = DEFAULT_APPLICATION_NAME
    max_files: int = DEFAULT_MAX_FILES
    timeout: float = DEFAULT_TIMEOUT
    check_timeout: float = DEFAULT_CHECK_TIMEOUT
    concurrency: int = DEFAULT_CONCURRENCY
    skip_categories: tuple[Category | str, ...] | list[Category | str] = ()
    generate_report: bool = False
    output_dir: Path | str = DEFAULT_OUTPUT_DIR
    verbose: bool = False
    level: Level | str = Level.AA
    vulnerability_scanner: VulnerabilityScanner | None = field(default=None, repr=False)

    def validate(self, taxonomy: Taxonomy) -> AuditConfig:
        """Return a normalised copy of this config for *taxonomy*.

        Raises:
            ConfigError: If any value is out of range or names an unknown
                category for the taxonomy.
        """
        if isinstance(self.max_files, bool) or not isinstance(self.max_files, int):
            raise ConfigError(f"max_files must be an integer, got {self.max_files!r}")
        if self.max_files < 1:
            raise ConfigError(f"max_files must be positive, got {self.max_files}")
        for name in ("timeout", "check_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError(f"{name} must be a positive number, got {value!r}")
        if isinstance(self.concurrency, bool) or not isinstance(self.concurrency, int) \
                or self.concurrency < 1:
            raise ConfigError(f"concurrency must be a positive integer, got {self.concurrency!r}")
        if isinstance(self.skip_categories, str):
            raise ConfigError("skip_categories must be a sequence, not a string")

        skip = tuple(parse_category(taxonomy, c) for c in self.skip_categories)

        return AuditConfig(
            root_dir=Path(self.root_dir),
            application_name=self.application_name or DEFAULT_APPLICATION_NAME,
            max_files=self.max_files,
            timeout=float(self.timeout),
            check_timeout=float(self.check_timeout),
            concurrency=self.concurrency,
            skip_categories=tuple(dict.fromkeys(skip)),
            generate_report=bool(self.generate_report),
            output_dir=Path(self.output_dir),
            verbose=bool(self.verbose),
            level=parse_level(self.level),
            vulnerability_scanner=self.vulnerability_scanner,
        )


def parse_level(value: Level | str) -> Level:
    """Parse a WCAG level such as ``"AA"``."""
    if isinstance(value, Level):
        return value
    try:
        return Level(str(value).strip().upper())
    except ValueError:
        raise ConfigError(
            f"Invalid WCAG level: {value!r}. Must be one of: A, AA, AAA"
        ) from None


def parse_category(taxonomy: Taxonomy, value: Category | str) -> Category:
    """Resolve *value* to a category of *taxonomy*.

    Accepts the enum member itself, its full value (``A10_SSRF``) or its
    short code (``A10``), case-insensitively.
    """
    if isinstance(value, (OwaspCategory, WcagPrinciple)):
        if value in taxonomy.categories:
            return value
        raise ConfigError(f"{value.value} is not a {taxonomy.value} category")

    text = str(value).strip().lower()
    for category in taxonomy.categories:
        if text in (category.value.lower(), category.code.lower()):
            return category
    valid = ", ".join(c.code for c in taxonomy.categories)
    raise ConfigError(
        f"Unknown {taxonomy.value} category: {value!r}. Must be one of: {valid}"
    )
