"""OWASP Top 10 (2021) check catalog.

Order here is registry order, and registry order is report order.
"""

from complyscan.models import CheckDefinition, Detector, OwaspCategory, Severity
from complyscan.scanners import security as s

_C = OwaspCategory


def _check(
    check_id: str,
    category: OwaspCategory,
    name: str,
    description: str,
    severity: Severity,
    detector: Detector,
    *cwe_ids: str,
) -> CheckDefinition:
    return CheckDefinition(
        id=check_id,
        category=category,
        name=name,
        description=description,
        severity=severity,
        detector=detector,
        references=cwe_ids,
    )


OWASP_CHECKS: tuple[CheckDefinition, ...] = (
    # A01 - Broken Access Control
    _check("A01-001", _C.A01_BROKEN_ACCESS_CONTROL, "Authorization Middleware",
           "Verify authentication middleware is implemented",
           Severity.CRITICAL, s.check_authorization_middleware, "CWE-284", "CWE-285"),
    _check("A01-002", _C.A01_BROKEN_ACCESS_CONTROL, "Role-Based Access Control",
           "Verify RBAC implementation exists",
           Severity.HIGH, s.check_role_based_access, "CWE-639"),
    _check("A01-003", _C.A01_BROKEN_ACCESS_CONTROL, "API Endpoint Protection",
           "Verify API endpoints have authentication checks",
           Severity.HIGH, s.check_api_endpoint_protection, "CWE-306"),
    _check("A01-004", _C.A01_BROKEN_ACCESS_CONTROL, "CORS Configuration",
           "Verify CORS is properly configured",
           Severity.MEDIUM, s.check_cors_configuration, "CWE-346"),
    _check("A01-005", _C.A01_BROKEN_ACCESS_CONTROL, "Route Parameter Validation",
           "Check route parameters are validated before use (IDOR)",
           Severity.MEDIUM, s.check_route_parameter_validation, "CWE-639", "CWE-20"),

    # A02 - Cryptographic Failures
    _check("A02-001", _C.A02_CRYPTOGRAPHIC_FAILURES, "HTTPS Enforcement",
           "Verify HTTPS is enforced for all connections",
           Severity.CRITICAL, s.check_https_enforcement, "CWE-319", "CWE-311"),
    _check("A02-002", _C.A02_CRYPTOGRAPHIC_FAILURES, "Password Hashing",
           "Verify passwords are hashed with strong algorithms",
           Severity.CRITICAL, s.check_password_hashing, "CWE-256", "CWE-916"),
    _check("A02-003", _C.A02_CRYPTOGRAPHIC_FAILURES, "Data Encryption",
           "Verify sensitive data is encrypted",
           Severity.HIGH, s.check_data_encryption, "CWE-311", "CWE-327"),
    _check("A02-004", _C.A02_CRYPTOGRAPHIC_FAILURES, "Weak Cryptography Detection",
           "Check for weak cryptographic algorithms",
           Severity.HIGH, s.check_weak_cryptography, "CWE-327", "CWE-328"),
    _check("A02-005", _C.A02_CRYPTOGRAPHIC_FAILURES, "Environment Variable Protection",
           "Verify .env files are not committed to git",
           Severity.CRITICAL, s.check_env_protection, "CWE-312", "CWE-798"),
    _check("A02-006", _C.A02_CRYPTOGRAPHIC_FAILURES, "Hardcoded Secrets",
           "Check for API keys, tokens and other secrets in source code",
           Severity.CRITICAL, s.check_hardcoded_secrets, "CWE-798", "CWE-540"),

    # A03 - Injection
    _check("A03-001", _C.A03_INJECTION, "SQL Injection Protection",
           "Verify parameterized queries are used",
           Severity.CRITICAL, s.check_sql_injection, "CWE-89"),
    _check("A03-002", _C.A03_INJECTION, "XSS Protection",
           "Verify XSS protection mechanisms are in place",
           Severity.HIGH, s.check_xss_protection, "CWE-79"),
    _check("A03-003", _C.A03_INJECTION, "Command Injection Protection",
           "Check for unsafe command execution",
           Severity.HIGH, s.check_command_injection, "CWE-78", "CWE-94"),
    _check("A03-004", _C.A03_INJECTION, "Input Validation",
           "Verify input validation is implemented",
           Severity.HIGH, s.check_input_validation, "CWE-20"),

    # A04 - Insecure Design
    _check("A04-001", _C.A04_INSECURE_DESIGN, "Security Documentation",
           "Verify security requirements are documented",
           Severity.MEDIUM, s.check_security_documentation, "CWE-1008"),
    _check("A04-002", _C.A04_INSECURE_DESIGN, "Rate Limiting",
           "Verify rate limiting is implemented",
           Severity.HIGH, s.check_rate_limiting, "CWE-770", "CWE-307"),
    _check("A04-003", _C.A04_INSECURE_DESIGN, "Error Handling",
           "Verify proper error handling exists",
           Severity.MEDIUM, s.check_error_handling, "CWE-209", "CWE-755"),
    _check("A04-004", _C.A04_INSECURE_DESIGN, "Business Logic Validation",
           "Check for business logic validation",
           Severity.MEDIUM, s.check_business_logic_validation, "CWE-840"),

    # A05 - Security Misconfiguration
    _check("A05-001", _C.A05_SECURITY_MISCONFIGURATION, "Security Headers",
           "Verify security headers are configured",
           Severity.HIGH, s.check_security_headers, "CWE-16", "CWE-693"),
    _check("A05-002", _C.A05_SECURITY_MISCONFIGURATION, "Default Credentials",
           "Check for default credentials in code",
           Severity.CRITICAL, s.check_default_credentials, "CWE-798"),
    _check("A05-003", _C.A05_SECURITY_MISCONFIGURATION, "Debug Code",
           "Check for debug code that should be removed",
           Severity.MEDIUM, s.check_debug_code, "CWE-489"),
    _check("A05-004", _C.A05_SECURITY_MISCONFIGURATION, "Unnecessary Features",
           "Check for unnecessary features that should be disabled",
           Severity.MEDIUM, s.check_unnecessary_features, "CWE-16"),

    # A06 - Vulnerable and Outdated Components
    _check("A06-001", _C.A06_VULNERABLE_COMPONENTS, "Dependency Vulnerabilities",
           "Scan for vulnerabilities in dependencies",
           Severity.CRITICAL, s.check_dependency_vulnerabilities, "CWE-1104"),
    _check("A06-002", _C.A06_VULNERABLE_COMPONENTS, "Dependency Lock File",
           "Verify a dependency lock file exists",
           Severity.HIGH, s.check_lock_file, "CWE-1104"),
    _check("A06-003", _C.A06_VULNERABLE_COMPONENTS, "Automated Dependency Updates",
           "Check for automated dependency update tools",
           Severity.MEDIUM, s.check_automated_updates, "CWE-1104"),

    # A07 - Identification and Authentication Failures
    _check("A07-001", _C.A07_AUTHENTICATION_FAILURES, "Password Policy",
           "Verify password strength requirements",
           Severity.HIGH, s.check_password_policy, "CWE-521"),
    _check("A07-002", _C.A07_AUTHENTICATION_FAILURES, "Multi-Factor Authentication",
           "Check for MFA implementation",
           Severity.MEDIUM, s.check_multi_factor_auth, "CWE-287"),
    _check("A07-003", _C.A07_AUTHENTICATION_FAILURES, "Session Management",
           "Verify session management is implemented",
           Severity.CRITICAL, s.check_session_management, "CWE-384"),
    _check("A07-004", _C.A07_AUTHENTICATION_FAILURES, "Brute Force Protection",
           "Verify brute force protection is in place",
           Severity.HIGH, s.check_brute_force_protection, "CWE-307"),

    # A08 - Software and Data Integrity Failures
    _check("A08-001", _C.A08_DATA_INTEGRITY_FAILURES, "CI/CD Pipeline",
           "Verify CI/CD pipeline exists",
           Severity.MEDIUM, s.check_ci_pipeline, "CWE-494"),
    _check("A08-002", _C.A08_DATA_INTEGRITY_FAILURES, "Package Integrity",
           "Verify package integrity checks",
           Severity.MEDIUM, s.check_package_integrity, "CWE-345"),
    _check("A08-003", _C.A08_DATA_INTEGRITY_FAILURES, "Safe Deserialization",
           "Check for unsafe deserialization",
           Severity.HIGH, s.check_safe_deserialization, "CWE-502"),
    _check("A08-004", _C.A08_DATA_INTEGRITY_FAILURES, "Secure Update Mechanism",
           "Verify secure automated updates",
           Severity.MEDIUM, s.check_secure_updates, "CWE-494"),

    # A09 - Security Logging and Monitoring Failures
    _check("A09-001", _C.A09_LOGGING_MONITORING_FAILURES, "Logging Implementation",
           "Verify logging is implemented",
           Severity.HIGH, s.check_logging, "CWE-778"),
    _check("A09-002", _C.A09_LOGGING_MONITORING_FAILURES, "Security Event Logging",
           "Verify security events are logged",
           Severity.MEDIUM, s.check_security_event_logging, "CWE-778"),
    _check("A09-003", _C.A09_LOGGING_MONITORING_FAILURES, "Sensitive Data in Logs",
           "Check for sensitive data being logged",
           Severity.HIGH, s.check_sensitive_data_in_logs, "CWE-532"),
    _check("A09-004", _C.A09_LOGGING_MONITORING_FAILURES, "Monitoring and Alerting",
           "Check for monitoring/alerting tools",
           Severity.MEDIUM, s.check_monitoring, "CWE-778"),

    # A10 - Server-Side Request Forgery
    _check("A10-001", _C.A10_SSRF, "External HTTP Requests",
           "Check for external HTTP requests that could be vulnerable to SSRF",
           Severity.MEDIUM, s.check_external_requests, "CWE-918"),
    _check("A10-002", _C.A10_SSRF, "URL Validation",
           "Verify URL validation for external requests",
           Severity.HIGH, s.check_url_validation, "CWE-918"),
    _check("A10-003", _C.A10_SSRF, "DNS Rebinding Protection",
           "Check for DNS rebinding protection",
           Severity.MEDIUM, s.check_dns_rebinding, "CWE-350"),
)
