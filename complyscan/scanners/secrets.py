"""Hardcoded secret detection.

Detects API keys, AWS credentials, JWTs and high-entropy string literals
using regex rules and Shannon entropy.  Used by the hardcoded-secrets check.
"""

import math
import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Regex rules: each tuple is (compiled_pattern, secret_kind)
# ---------------------------------------------------------------------------

_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"AKIA[0-9A-Z]{16}"), "AWS access key"),
    (
        re.compile(
            r"eyJ[A-Za-z0-9\-_]{10,}\.[A-Za-z0-9\-_]{10,}\.[A-Za-z0-9\-_]{10,}"
        ),
        "JWT token",
    ),
    (
        re.compile(r"-----BEGIN (?:RSA |EC |OPENSSH |DSA )?PRIVATE KEY-----"),
        "private key",
    ),
    (
        re.compile(
            r"""(?i)(api_?key|secret|token|passwd|password)["'\s]*[:=]\s*["'][A-Za-z0-9\-_/+]{16,}["']"""
        ),
        "generic API key or secret",
    ),
]

# ---------------------------------------------------------------------------
# Entropy helpers
# ---------------------------------------------------------------------------

# Regex to find quoted string literals: '...' or "..."
_STRING_LITERAL_RE = re.compile(r"""(["'])(.*?)\1""")

# Safe patterns to exclude from entropy checks
_SAFE_PATTERNS: list[re.Pattern[str]] = [
    # UUID v4
    re.compile(
        r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
    ),
    # Pure hex string (hashes, object IDs)
    re.compile(r"^[a-fA-F0-9]{32,}$"),
    # URLs and paths
    re.compile(r"^(https?://|/|\./|\.\./)"),
]

# Keywords that suggest the string is NOT a secret (e.g. hash context)
_SAFE_KEYWORDS: set[str] = {"sha", "integrity", "checksum", "md5", "import ", "require("}

# High entropy threshold (bits/char)
_ENTROPY_THRESHOLD: float = 4.5
_MIN_LENGTH: int = 20


@dataclass(frozen=True)
class SecretMatch:
    """A probable secret found in a file."""

    line_number: int
    kind: str


def calculate_entropy(text: str) -> float:
    """Calculate Shannon entropy of *text*.

    Uses the standard formula::

        H = -Σ (p_i × log₂(p_i))

    where *p_i* is the frequency of each unique character.

    Args:
        text: The input string.

    Returns:
        Entropy value in bits.  Higher values indicate more randomness.
    """
    if not text:
        return 0.0

    length = len(text)
    freq: dict[str, int] = {}
    for ch in text:
        freq[ch] = freq.get(ch, 0) + 1

    entropy = 0.0
    for count in freq.values():
        p = count / length
        entropy -= p * math.log2(p)

    return entropy


def _has_high_entropy_literal(line: str) -> bool:
    """Return ``True`` if a quoted literal on *line* looks random."""
    matches = _STRING_LITERAL_RE.findall(line)
    if not matches:
        return False

    line_lower = line.lower()
    if any(k in line_lower for k in _SAFE_KEYWORDS):
        return False

    for _, content in matches:
        if len(content) < _MIN_LENGTH or " " in content:
            continue
        if any(p.match(content) for p in _SAFE_PATTERNS):
            continue
        if calculate_entropy(content) > _ENTROPY_THRESHOLD:
            return True
    return False


def find_secrets(content: str) -> list[SecretMatch]:
    """Scan a file's content for hardcoded secrets.

    At most one match is reported per line: the first regex rule that
    matches, falling back to the entropy heuristic.

    Args:
        content: Full text content of the file.

    Returns:
        List of :class:`SecretMatch` in line order.
    """
    found: list[SecretMatch] = []
    for line_num, line in enumerate(content.splitlines(), start=1):
        for pattern, kind in _RULES:
            if pattern.search(line):
                found.append(SecretMatch(line_num, kind))
                break
        else:
            if _has_high_entropy_literal(line):
                found.append(SecretMatch(line_num, "high-entropy string"))
    return found
