"""OWASP Top 10 detectors.

Every detector is a pure function ``(scan, config) -> DetectorOutcome`` over
the immutable :class:`~complyscan.utils.ScanData`.  Detectors look for
structural signals in source text; they approximate, they do not prove.

Families:

* presence checks: one boolean signal decides the outcome;
* coverage checks: ratio of relevant files carrying a signal;
* negative-pattern checks: every distinct risky pattern is reported;
* the dependency check, which delegates to a
  :class:`~complyscan.scanners.vulnerabilities.VulnerabilityScanner`.
"""

from __future__ import annotations

import functools
import re
from typing import TYPE_CHECKING

from complyscan.models import Detector, DetectorOutcome, Status
from complyscan.scanners.patterns import (
    DANGEROUS_EXEC_RULES,
    describe_hits,
    files_matching,
    find_idor_risks,
    match_rules,
)
from complyscan.scanners.secrets import find_secrets
from complyscan.scanners.vulnerabilities import NpmAuditScanner, VulnerabilityScanError

if TYPE_CHECKING:
    from complyscan.config import AuditConfig
    from complyscan.utils import ScanData

# Coverage thresholds (percent)
COVERAGE_PASS: float = 70.0
COVERAGE_WARN: float = 40.0

_LOCK_FILES = ("package-lock.json", "yarn.lock", "pnpm-lock.yaml")
_UPDATE_BOTS = (
    "renovate.json",
    ".github/renovate.json",
    ".github/dependabot.yml",
    ".github/dependabot.yaml",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def requires_source(detector: Detector) -> Detector:
    """Report ``not_applicable`` when the scan found no source files."""

    @functools.wraps(detector)
    def wrapper(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
        if not scan.files:
            return DetectorOutcome.not_applicable()
        return detector(scan, config)

    return wrapper


def requires_project(detector: Detector) -> Detector:
    """Report ``not_applicable`` when there is nothing at all to audit."""

    @functools.wraps(detector)
    def wrapper(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
        if not scan.files and not scan.markers:
            return DetectorOutcome.not_applicable()
        return detector(scan, config)

    return wrapper


def requires_package_json(detector: Detector) -> Detector:
    @functools.wraps(detector)
    def wrapper(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
        if not scan.has_marker("package.json"):
            return DetectorOutcome.not_applicable()
        return detector(scan, config)

    return wrapper


def _where(paths: list[str], limit: int = 5) -> str:
    shown = ", ".join(paths[:limit])
    if len(paths) > limit:
        shown += f" (+{len(paths) - limit} more)"
    return f"{len(paths)} file(s): {shown}"


def _presence(
    scan: ScanData,
    pattern: re.Pattern[str],
    *,
    found: str,
    missing: str,
    recommendations: list[str],
    missing_status: Status = Status.FAIL,
) -> DetectorOutcome:
    """Pass when any file matches *pattern*, else *missing_status*."""
    paths = files_matching(scan.files, pattern)
    if paths:
        return DetectorOutcome.passed(f"{found} in {_where(paths)}")
    return DetectorOutcome(missing_status, (missing,), tuple(recommendations))


def coverage_outcome(
    matched: int,
    total: int,
    *,
    subject: str,
    signal: str,
    recommendations: list[str],
) -> DetectorOutcome:
    """Grade a coverage ratio: >= 70 % pass, >= 40 % warning, else fail."""
    if total == 0:
        return DetectorOutcome.not_applicable()
    rate = matched / total * 100
    findings = (
        f"{matched}/{total} {subject} contain {signal}",
        f"Coverage: {rate:.1f}%",
    )
    if rate >= COVERAGE_PASS:
        return DetectorOutcome(Status.PASS, findings)
    status = Status.WARNING if rate >= COVERAGE_WARN else Status.FAIL
    return DetectorOutcome(status, findings, tuple(recommendations))


def _negative(
    hits: dict[str, list[str]],
    *,
    clean: str,
    recommendations: list[str],
    status: Status = Status.FAIL,
) -> DetectorOutcome:
    if not hits:
        return DetectorOutcome.passed(clean)
    return DetectorOutcome(status, tuple(describe_hits(hits)), tuple(recommendations))


def _rx(pattern: str, flags: int = re.IGNORECASE) -> re.Pattern[str]:
    return re.compile(pattern, flags)


# ---------------------------------------------------------------------------
# A01 – Broken Access Control
# ---------------------------------------------------------------------------

_AUTH_SIGNAL = _rx(r"auth|session|protect|jwt|bearer|requireUser|getUser|currentUser")
_MIDDLEWARE_PATH = _rx(r"(^|/)(middleware|middlewares|guards?|hooks\.server)([/.]|$)")
_RBAC_RE = _rx(
    r"\b(rbac|hasRole|requireRole|checkRole|requireAdmin|isAdmin|hasPermission|"
    r"permissions?|roles?\s*(===?|:|\.includes))"
)
_API_PATH = _rx(r"(^|/)(api|routes|controllers|handlers)/")
_CORS_RE = _rx(r"\bcors\b|allowedOrigins?|Access-Control-Allow-Origin")
_CORS_WILDCARD = _rx(
    r"""Access-Control-Allow-Origin['"]?\s*[:,]\s*['"]\*['"]|origin\s*:\s*['"]\*['"]|origin\s*:\s*true"""
)


@requires_source
def check_authorization_middleware(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    paths = [
        f.path for f in scan.files
        if _MIDDLEWARE_PATH.search(f.path) and _AUTH_SIGNAL.search(f.content)
    ]
    if paths:
        return DetectorOutcome.passed(f"Authentication middleware found in {_where(paths)}")
    return DetectorOutcome.failed(
        ["No authentication middleware found"],
        ["Implement authentication middleware for protected routes"],
    )


@requires_source
def check_role_based_access(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _RBAC_RE,
        found="Role/permission checks found",
        missing="No RBAC implementation found",
        recommendations=["Implement role-based access control for authorization"],
        missing_status=Status.WARNING,
    )


@requires_source
def check_api_endpoint_protection(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    api_files = [f for f in scan.files if _API_PATH.search(f.path)]
    protected = files_matching(api_files, _AUTH_SIGNAL)
    return coverage_outcome(
        len(protected), len(api_files),
        subject="API files",
        signal="authentication checks",
        recommendations=[
            "Ensure all API endpoints verify authentication before processing requests"
        ],
    )


@requires_source
def check_cors_configuration(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    wildcard = files_matching(scan.files, _CORS_WILDCARD)
    if wildcard:
        return DetectorOutcome.failed(
            [f"Wildcard CORS origin in {_where(wildcard)}"],
            ["Restrict allowed origins to an explicit allowlist"],
        )
    return _presence(
        scan, _CORS_RE,
        found="CORS configuration found",
        missing="No CORS configuration detected",
        recommendations=["Implement CORS policy to restrict cross-origin requests"],
        missing_status=Status.WARNING,
    )


@requires_source
def check_route_parameter_validation(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    risky = find_idor_risks(scan.files)
    if not risky:
        return DetectorOutcome.passed("No unvalidated route parameters found")
    return DetectorOutcome.warning(
        [f"Route parameters used without validation or ownership checks in {_where(risky)}"],
        [
            "Validate route parameters before use",
            "Verify the requesting user owns the referenced resource",
        ],
    )


# ---------------------------------------------------------------------------
# A02 – Cryptographic Failures
# ---------------------------------------------------------------------------

_HTTPS_RE = _rx(
    r"secure\s*:\s*true|https.?only|Strict-Transport-Security|\bhsts\b|forceHttps|"
    r"redirectToHttps|x-forwarded-proto"
)
_HASHING_RE = _rx(r"\b(bcrypt\w*|argon2\w*|scrypt|pbkdf2\w*)\b")
_ENCRYPTION_RE = _rx(r"encrypt|createCipheriv|crypto\.subtle|\bAES\b")
_WEAK_CRYPTO_RULES: list[tuple[re.Pattern[str], str]] = [
    (_rx(r"\bmd5\b"), "MD5"),
    (_rx(r"\bsha-?1\b"), "SHA1"),
    (_rx(r"""['"](des|des-ede3?|des-cbc|des-ede3-cbc|3des)['"]|\bTripleDES\b"""), "DES"),
    (_rx(r"\brc4\b"), "RC4"),
    (re.compile(r"crypto\.createCipher\("), "crypto.createCipher() without IV"),
    (_rx(r"(token|secret|password|salt|nonce)\w*\s*[:=][^;\n]*Math\.random\("),
     "Math.random() for security values"),
]
_GITIGNORE_ENV = re.compile(r"(?m)^\s*/?\.env(\*|\..*)?\s*$")


@requires_source
def check_https_enforcement(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _HTTPS_RE,
        found="HTTPS enforcement detected",
        missing="No HTTPS enforcement found",
        recommendations=["Enforce HTTPS for all connections", "Set Secure flag on all cookies"],
    )


@requires_source
def check_password_hashing(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _HASHING_RE,
        found="Strong password hashing library detected",
        missing="No password hashing implementation found",
        recommendations=["Use bcrypt, Argon2, or scrypt for password hashing"],
    )


@requires_source
def check_data_encryption(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _ENCRYPTION_RE,
        found="Encryption implementation found",
        missing="No encryption implementation detected",
        recommendations=["Encrypt sensitive data at rest and in transit"],
        missing_status=Status.WARNING,
    )


@requires_source
def check_weak_cryptography(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _negative(
        match_rules(scan.files, _WEAK_CRYPTO_RULES),
        clean="No weak cryptographic algorithms found",
        recommendations=[
            "Replace MD5/SHA1 with SHA-256 or higher",
            "Use AES-GCM instead of DES/RC4",
            "Use crypto.randomBytes() for security-sensitive random values",
        ],
    )


@requires_project
def check_env_protection(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    env_exists = scan.has_marker(".env")
    ignored = bool(_GITIGNORE_ENV.search(scan.manifest(".gitignore")))
    if ignored:
        return DetectorOutcome.passed(".env files excluded from git")
    if not env_exists:
        return DetectorOutcome.passed("No .env file found")
    return DetectorOutcome.failed(
        [".env file exists but is not listed in .gitignore"],
        ["Add .env to .gitignore immediately", "Rotate any exposed secrets"],
    )


@requires_source
def check_hardcoded_secrets(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    by_kind: dict[str, list[str]] = {}
    for f in scan.files:
        for match in find_secrets(f.content):
            by_kind.setdefault(match.kind, []).append(f"{f.path}:{match.line_number}")
    if not by_kind:
        return DetectorOutcome.passed("No hardcoded secrets detected")
    findings = [
        f"Possible {kind} at {', '.join(locs[:5])}"
        + (f" (+{len(locs) - 5} more)" if len(locs) > 5 else "")
        for kind, locs in by_kind.items()
    ]
    return DetectorOutcome.failed(
        findings,
        [
            "Move secrets to environment variables or a secret manager",
            "Rotate any credential that was committed",
        ],
    )


# ---------------------------------------------------------------------------
# A03 – Injection
# ---------------------------------------------------------------------------

_PARAMETERIZED_RE = _rx(
    r"db\.query|db\.execute|\.prepare\(|parameterized|\bprisma\b|\bknex\b|"
    r"\bsequelize\b|\bdrizzle\b|\bkysely\b|\bsql`"
)
_RAW_SQL_RULES: list[tuple[re.Pattern[str], str]] = [
    (_rx(r"\.(raw|rawQuery|\$queryRawUnsafe|\$executeRawUnsafe|unsafe)\("), "Raw SQL execution API"),
    (_rx(r"""(query|execute)\s*\(\s*['"][^'"\n]*\b(select|insert|update|delete)\b[^'"\n]*['"]\s*\+"""),
     "String-concatenated SQL"),
    (_rx(r"""(query|execute)\s*\(\s*`[^`]*\b(select|insert|update|delete)\b[^`]*\$\{"""),
     "Interpolated SQL template"),
]
_AUTO_ESCAPING_FRAMEWORK = re.compile(r'"(react|preact|vue|svelte|astro|@angular/core|solid-js)"\s*:')
_SANITIZER_RE = _rx(r"sanitize|escapeHtml|DOMPurify|xss-filters|he\.encode|escape\(")
_XSS_SINK_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"dangerouslySetInnerHTML"), "dangerouslySetInnerHTML"),
    (re.compile(r"\.innerHTML\s*="), "innerHTML assignment"),
    (re.compile(r"\bset:html="), "Astro set:html"),
    (re.compile(r"\bv-html="), "Vue v-html"),
    (re.compile(r"\{@html\b"), "Svelte {@html}"),
    (re.compile(r"document\.write\("), "document.write()"),
]
_INPUT_VALIDATION_RE = _rx(
    r"\b(validate\w*|zod|yup|joi|ajv|superstruct|valibot|class-validator|express-validator)\b"
)


@requires_source
def check_sql_injection(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    parameterized = files_matching(scan.files, _PARAMETERIZED_RE)
    raw = match_rules(scan.files, _RAW_SQL_RULES)
    findings = [
        "Parameterized queries detected" if parameterized else "No parameterized queries found",
    ]
    if raw:
        findings.extend(describe_hits(raw))
        return DetectorOutcome.failed(
            findings,
            ["Replace all raw SQL with parameterized queries", "Use an ORM or query builder"],
        )
    findings.append("No raw SQL execution found")
    if parameterized:
        return DetectorOutcome(Status.PASS, tuple(findings))
    return DetectorOutcome.warning(
        findings, ["Implement parameterized queries for all database operations"]
    )


@requires_source
def check_xss_protection(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    framework = bool(_AUTO_ESCAPING_FRAMEWORK.search(scan.manifest("package.json")))
    sanitized = bool(files_matching(scan.files, _SANITIZER_RE))
    sinks = match_rules(scan.files, _XSS_SINK_RULES)
    findings = [
        "Auto-escaping UI framework detected" if framework else "No auto-escaping UI framework detected",
        "XSS sanitization found" if sanitized else "No explicit sanitization found",
    ]
    findings.extend(describe_hits(sinks))
    if sanitized or (framework and not sinks):
        return DetectorOutcome(Status.PASS, tuple(findings))
    return DetectorOutcome.warning(
        findings,
        ["Sanitize HTML before rendering it raw (e.g. DOMPurify)", "Escape all user input"],
    )


@requires_source
def check_command_injection(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _negative(
        match_rules(scan.files, DANGEROUS_EXEC_RULES),
        clean="No command execution found",
        recommendations=[
            "Validate and sanitize all inputs to exec/spawn",
            "Use allowlists for commands",
            "Avoid eval() and new Function()",
        ],
        status=Status.WARNING,
    )


@requires_source
def check_input_validation(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _INPUT_VALIDATION_RE,
        found="Input validation detected",
        missing="No input validation implementation found",
        recommendations=[
            "Implement input validation for all user inputs",
            "Use validation libraries like Zod or Yup",
        ],
    )


# ---------------------------------------------------------------------------
# A04 – Insecure Design
# ---------------------------------------------------------------------------

_RATE_LIMIT_RE = _rx(r"rateLimit|rate-limit|rate_limit|throttle|limiter")
_ERROR_HANDLING_RE = _rx(r"try\s*\{|\.catch\(|catch\s*\(|errorHandler|onError")
_STACK_LEAK_RE = _rx(r"(res\.(json|send)|Response\.json|new Response)\([^)\n]*\b(err|error|e)\.stack")
_BUSINESS_RULES_RE = _rx(
    r"business.?rule|workflow|state.?machine|invariant|\btransaction\b|\bassert[A-Z]\w*"
)


@requires_project
def check_security_documentation(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    if scan.has_marker("SECURITY.md", "docs/security.md"):
        return DetectorOutcome.passed("Security documentation found")
    return DetectorOutcome.warning(
        ["No security documentation found"],
        ["Create SECURITY.md documenting security requirements and policies"],
    )


@requires_source
def check_rate_limiting(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _RATE_LIMIT_RE,
        found="Rate limiting implementation found",
        missing="No rate limiting detected",
        recommendations=["Implement rate limiting to prevent abuse"],
    )


@requires_source
def check_error_handling(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    leaks = files_matching(scan.files, _STACK_LEAK_RE)
    if leaks:
        return DetectorOutcome.warning(
            [f"Stack traces returned to clients in {_where(leaks)}"],
            ["Avoid exposing sensitive error details"],
        )
    return _presence(
        scan, _ERROR_HANDLING_RE,
        found="Error handling detected",
        missing="No error handling found",
        recommendations=[
            "Implement comprehensive error handling",
            "Avoid exposing sensitive error details",
        ],
        missing_status=Status.WARNING,
    )


@requires_source
def check_business_logic_validation(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _BUSINESS_RULES_RE,
        found="Business logic validation detected",
        missing="No explicit business logic validation found",
        recommendations=[
            "Implement server-side business logic validation",
            "Prevent logic bypass attacks",
        ],
        missing_status=Status.WARNING,
    )


# ---------------------------------------------------------------------------
# A05 – Security Misconfiguration
# ---------------------------------------------------------------------------

_SECURITY_HEADERS_RE = _rx(
    r"helmet|content-security-policy|X-Frame-Options|Strict-Transport-Security|"
    r"X-Content-Type-Options|securityHeaders"
)
_DEFAULT_CREDENTIAL_RULES: list[tuple[re.Pattern[str], str]] = [
    (_rx(r"""['"](admin|root|user|test)['"]\s*[,:]\s*['"](admin|root|password|test|123456|changeme)['"]"""),
     "Default username/password pair"),
    (_rx(r"""pass(word)?\s*[:=]\s*['"](password|admin|123456|changeme|secret|letmein|qwerty)['"]"""),
     "Well-known password literal"),
    (_rx(r"://(admin|root|postgres|user|sa):(admin|root|password|postgres|changeme)@"),
     "Default credentials in connection string"),
]
_DEBUG_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\bconsole\.(log|debug|trace)\("), "console.log()"),
    (re.compile(r"(?m)^\s*debugger\s*;?\s*$"), "debugger statement"),
    (_rx(r"\bdebug\s*[:=]\s*true\b"), "debug mode enabled"),
]
_UNNECESSARY_FEATURE_RULES: list[tuple[re.Pattern[str], str]] = [
    (_rx(r"autoIndex\s*:\s*true|directory.?listing|serveIndex\("), "Directory listing"),
    (_rx(r"introspection\s*:\s*true"), "GraphQL introspection"),
    (_rx(r"productionSourceMap\s*:\s*true"), "Production source maps"),
]


@requires_source
def check_security_headers(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _SECURITY_HEADERS_RE,
        found="Security headers configuration found",
        missing="No security headers detected",
        recommendations=["Implement security headers (CSP, HSTS, X-Frame-Options, etc.)"],
    )


@requires_source
def check_default_credentials(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _negative(
        match_rules(scan.files, _DEFAULT_CREDENTIAL_RULES),
        clean="No default credentials detected",
        recommendations=[
            "Remove all default credentials",
            "Use environment variables for credentials",
        ],
    )


@requires_source
def check_debug_code(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _negative(
        match_rules(scan.files, _DEBUG_RULES),
        clean="No debug code found",
        recommendations=[
            "Remove console.log and debugger statements",
            "Disable debug mode in production",
        ],
        status=Status.WARNING,
    )


@requires_source
def check_unnecessary_features(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _negative(
        match_rules(scan.files, _UNNECESSARY_FEATURE_RULES),
        clean="No unnecessary features found",
        recommendations=["Disable directory listing", "Remove unused features"],
        status=Status.WARNING,
    )


# ---------------------------------------------------------------------------
# A06 – Vulnerable and Outdated Components
# ---------------------------------------------------------------------------


@requires_package_json
def check_dependency_vulnerabilities(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    scanner = config.vulnerability_scanner or NpmAuditScanner(timeout=config.check_timeout)
    try:
        report = scanner.scan(scan.root)
    except (VulnerabilityScanError, OSError) as exc:
        return DetectorOutcome.failed(
            [f"Unable to run vulnerability scan: {exc}"],
            ["Run npm audit manually", "Check for outdated dependencies"],
        )

    findings = (
        f"Critical: {report.critical}",
        f"High: {report.high}",
        f"Moderate: {report.moderate}",
        f"Low: {report.low}",
        f"Total: {report.total}",
    )
    recommendations = (
        "Run npm audit fix",
        "Update vulnerable dependencies",
        "Review security advisories",
    )
    if report.critical or report.high:
        return DetectorOutcome(Status.FAIL, findings, recommendations)
    if report.moderate or report.low:
        return DetectorOutcome(Status.WARNING, findings, recommendations)
    return DetectorOutcome(Status.PASS, findings)


@requires_package_json
def check_lock_file(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    present = [name for name in _LOCK_FILES if scan.has_marker(name)]
    if present:
        return DetectorOutcome.passed(f"{', '.join(present)} found")
    return DetectorOutcome.failed(
        ["No dependency lock file found"],
        ["Generate package-lock.json to lock dependency versions"],
    )


@requires_project
def check_automated_updates(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    findings = []
    if scan.has_marker("renovate.json", ".github/renovate.json"):
        findings.append("Renovate configured")
    if scan.has_marker(".github/dependabot.yml", ".github/dependabot.yaml"):
        findings.append("Dependabot configured")
    if findings:
        return DetectorOutcome(Status.PASS, tuple(findings))
    return DetectorOutcome.warning(
        ["No automated updates configured"],
        ["Configure Renovate or Dependabot for automated updates"],
    )


# ---------------------------------------------------------------------------
# A07 – Identification and Authentication Failures
# ---------------------------------------------------------------------------

_PASSWORD_POLICY_RE = _rx(
    r"password.?(strength|policy|rules|requirements)|validatePassword|zxcvbn|"
    r"password\w*\W[^\n]{0,40}min(Length)?\W+(8|1\d)"
)
_MFA_RE = _rx(r"\b(mfa|2fa|two.?factor|totp|otp|authenticator|webauthn|passkeys?)\b")
_SESSION_RE = _rx(r"\bsession|\bjwt\b|jsonwebtoken|token.?refresh|refresh.?token|\bcookies?\b")
_BRUTE_FORCE_RE = _rx(
    r"rate.?limit|throttle|attempt.?count|failed.?attempts|lockout|max.?attempts|login.?attempts"
)


@requires_source
def check_password_policy(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _PASSWORD_POLICY_RE,
        found="Password policy implementation found",
        missing="No password policy detected",
        recommendations=[
            "Implement password strength requirements",
            "Enforce minimum length and complexity",
        ],
    )


@requires_source
def check_multi_factor_auth(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _MFA_RE,
        found="MFA implementation found",
        missing="No MFA implementation detected",
        recommendations=["Consider implementing MFA for enhanced security"],
        missing_status=Status.WARNING,
    )


@requires_source
def check_session_management(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _SESSION_RE,
        found="Session management found",
        missing="No session management detected",
        recommendations=["Implement secure session management"],
    )


@requires_source
def check_brute_force_protection(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _BRUTE_FORCE_RE,
        found="Brute force protection detected",
        missing="No brute force protection found",
        recommendations=["Implement rate limiting on authentication endpoints"],
    )


# ---------------------------------------------------------------------------
# A08 – Software and Data Integrity Failures
# ---------------------------------------------------------------------------

_INTEGRITY_RE = re.compile(r'"integrity"\s*:|\bintegrity\b|\bchecksum\b|resolution:')
_DESERIALIZATION_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"JSON\.parse\(\s*(req|request)\.[\w.]*"), "JSON.parse() on raw request data"),
    (_rx(r"\bunserialize\(|node-serialize"), "unserialize()"),
    (re.compile(r"(?<![\w.])eval\s*\("), "eval()"),
    (re.compile(r"\byaml\.load\("), "yaml.load() without safe schema"),
]


@requires_project
def check_ci_pipeline(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    if scan.has_marker(".github/workflows", ".gitlab-ci.yml"):
        return DetectorOutcome.passed("CI/CD pipeline configuration found")
    return DetectorOutcome.warning(
        ["No CI/CD pipeline detected"],
        ["Implement CI/CD with security checks"],
    )


@requires_package_json
def check_package_integrity(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    lock = scan.manifest("package-lock.json")
    if lock and _INTEGRITY_RE.search(lock):
        return DetectorOutcome.passed("Lock file carries package integrity hashes")
    if scan.has_marker("yarn.lock", "pnpm-lock.yaml"):
        return DetectorOutcome.passed("Lock file with checksums found")
    return DetectorOutcome.warning(
        ["No integrity checks detected"],
        ["Use package-lock.json with integrity hashes"],
    )


@requires_source
def check_safe_deserialization(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _negative(
        match_rules(scan.files, _DESERIALIZATION_RULES),
        clean="No unsafe deserialization found",
        recommendations=[
            "Validate all deserialized data",
            "Avoid eval() and unsafe parsing",
        ],
        status=Status.WARNING,
    )


@requires_project
def check_secure_updates(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    configs = [
        name for name in _UPDATE_BOTS
        if scan.manifest(name).strip()
    ]
    if configs:
        return DetectorOutcome.passed(f"Automated update mechanism configured in {', '.join(configs)}")
    return DetectorOutcome.warning(
        ["No automated updates configured"],
        ["Configure automated dependency updates"],
    )


# ---------------------------------------------------------------------------
# A09 – Security Logging and Monitoring Failures
# ---------------------------------------------------------------------------

_LOGGING_RE = _rx(r"\b(logger|winston|pino|bunyan|log4js|loglevel)\b|\blog\.(info|warn|error|debug)\(")
_SECURITY_LOGGING_RE = _rx(
    r"\blog\w*\.\w+\([^)\n]*(login|auth|security|failed|unauthori[sz]ed|forbidden|denied)|audit.?log"
)
_SENSITIVE_LOG_RE = _rx(
    r"(console|log\w*|logger)\.\w+\([^)\n]*\b(password|passwd|token|secret|api_?key|credit.?card)\b"
)
_MONITORING_RE = _rx(r"sentry|newrelic|datadog|prometheus|opentelemetry|\balert\w*|\bmonitor\w*")


@requires_source
def check_logging(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _LOGGING_RE,
        found="Logging implementation found",
        missing="No logging detected",
        recommendations=["Implement comprehensive logging", "Log security events"],
    )


@requires_source
def check_security_event_logging(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _SECURITY_LOGGING_RE,
        found="Security event logging found",
        missing="No security event logging detected",
        recommendations=[
            "Log authentication attempts",
            "Log authorization failures",
            "Log security exceptions",
        ],
        missing_status=Status.WARNING,
    )


@requires_source
def check_sensitive_data_in_logs(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    paths = files_matching(scan.files, _SENSITIVE_LOG_RE)
    if not paths:
        return DetectorOutcome.passed("No sensitive data in logs detected")
    return DetectorOutcome.failed(
        [f"Potential sensitive data logging in {_where(paths)}"],
        ["Remove password/token logging", "Implement log sanitization"],
    )


@requires_source
def check_monitoring(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _presence(
        scan, _MONITORING_RE,
        found="Monitoring/alerting system detected",
        missing="No monitoring system detected",
        recommendations=["Implement application monitoring", "Set up security alerts"],
        missing_status=Status.WARNING,
    )


# ---------------------------------------------------------------------------
# A10 – Server-Side Request Forgery
# ---------------------------------------------------------------------------

_EXTERNAL_REQUEST_RE = re.compile(
    r"\bfetch\(|\baxios\b|https?\.request\(|https?\.get\(|\bgot\(|node-fetch|\bundici\b"
)
_URL_VALIDATION_RE = _rx(
    r"url\w*valid|valid\w*url|allow.?list|isValidUrl|allowedHosts|allowed.?domains|new URL\("
)
_DNS_PROTECTION_RE = _rx(
    r"dns\.(resolve|lookup)|private.?ip|isPrivate|ip.?validat|\bipaddr\b|is-ip|ssrf"
)


@requires_source
def check_external_requests(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    paths = files_matching(scan.files, _EXTERNAL_REQUEST_RE)
    if not paths:
        return DetectorOutcome.passed("No external HTTP requests found")
    return DetectorOutcome.warning(
        [f"External HTTP requests in {_where(paths)} - verify URL validation"],
        ["Validate all URLs", "Use allowlist for allowed domains", "Block internal IP ranges"],
    )


@requires_source
def check_url_validation(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    if not files_matching(scan.files, _EXTERNAL_REQUEST_RE):
        return DetectorOutcome.not_applicable()
    return _presence(
        scan, _URL_VALIDATION_RE,
        found="URL validation detected",
        missing="External requests without URL validation",
        recommendations=["Implement URL validation", "Use domain allowlists"],
        missing_status=Status.WARNING,
    )


@requires_source
def check_dns_rebinding(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    if not files_matching(scan.files, _EXTERNAL_REQUEST_RE):
        return DetectorOutcome.not_applicable()
    return _presence(
        scan, _DNS_PROTECTION_RE,
        found="DNS protection measures detected",
        missing="No DNS protection detected",
        recommendations=["Block requests to private IP ranges", "Validate resolved IPs"],
        missing_status=Status.WARNING,
    )
