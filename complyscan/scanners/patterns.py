"""Source pattern matching shared by the security detectors.

Holds the regex tables for dangerous calls (eval, new Function,
child_process.exec/spawn) and the route-parameter (IDOR) heuristic, plus
helpers that run patterns over every scanned file.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from complyscan.utils import ScanData, SourceFile

# ---------------------------------------------------------------------------
# 1. Dangerous code execution patterns
# ---------------------------------------------------------------------------

DANGEROUS_EXEC_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(?<![\w.])eval\s*\("), "eval()"),
    (re.compile(r"\bnew\s+Function\s*\("), "new Function()"),
    (re.compile(r"child_process\s*\.\s*exec(?:Sync)?\s*\("), "child_process.exec()"),
    (re.compile(r"child_process\s*\.\s*spawn(?:Sync)?\s*\("), "child_process.spawn()"),
    (re.compile(r"""require\(\s*["']child_process["']\s*\)|from\s+["'](?:node:)?child_process["']"""),
     "child_process import"),
    (re.compile(r"(?<![\w.])exec(?:Sync)?\s*\(\s*[`'\"][^`'\"]*\$\{"), "exec() with interpolated command"),
]

# ---------------------------------------------------------------------------
# 2. IDOR heuristic helpers
# ---------------------------------------------------------------------------

_ROUTE_PARAM_RE = re.compile(
    r"""((app|router)\.(get|post|put|patch|delete)\s*\(\s*["'][^"']*:[a-zA-Z]+|\[[a-zA-Z]+\]\.(ts|js)$)"""
)
_REQ_PARAMS_RE = re.compile(r"(req\.params|params)\.\w+")
_VALIDATION_KEYWORDS = re.compile(
    r"(?i)(joi|zod|validate|parseInt|Number\(|parseFloat|celebrate|express-validator|isUUID|uuid)"
)
_OWNERSHIP_KEYWORDS = re.compile(r"(?i)(user_?id|owner_?id|session\.user|locals\.user|authorize)")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def files_matching(files: Iterable[SourceFile], pattern: re.Pattern[str]) -> list[str]:
    """Return the paths of *files* whose content matches *pattern*."""
    return [f.path for f in files if pattern.search(f.content)]


def any_file_matches(scan: ScanData, pattern: re.Pattern[str]) -> bool:
    return any(pattern.search(f.content) for f in scan.files)


def match_rules(
    files: Iterable[SourceFile],
    rules: list[tuple[re.Pattern[str], str]],
) -> dict[str, list[str]]:
    """Map each matched rule label to the files it occurs in.

    Every distinct rule is reported, not just the first one found.  Labels
    keep rule order; paths keep file order.
    """
    hits: dict[str, list[str]] = {}
    files = list(files)
    for pattern, label in rules:
        for path in files_matching(files, pattern):
            paths = hits.setdefault(label, [])
            if path not in paths:
                paths.append(path)
    return hits


def describe_hits(hits: dict[str, list[str]], limit: int = 5) -> list[str]:
    """Render ``match_rules`` output as finding strings."""
    findings: list[str] = []
    for label, paths in hits.items():
        shown = ", ".join(paths[:limit])
        more = f" (+{len(paths) - limit} more)" if len(paths) > limit else ""
        findings.append(f"{label} found in {len(paths)} file(s): {shown}{more}")
    return findings


def find_idor_risks(files: Iterable[SourceFile]) -> list[str]:
    """Return files reading route parameters without validation or ownership checks."""
    risky: list[str] = []
    for f in files:
        routed = _ROUTE_PARAM_RE.search(f.content) or _ROUTE_PARAM_RE.search(f.path)
        if not routed or not _REQ_PARAMS_RE.search(f.content):
            continue
        if _VALIDATION_KEYWORDS.search(f.content) or _OWNERSHIP_KEYWORDS.search(f.content):
            continue
        risky.append(f.path)
    return risky
