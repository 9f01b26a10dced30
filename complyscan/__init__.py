"""ComplyScan — OWASP Top 10 and WCAG 2.1 compliance auditor."""

__app_name__ = "complyscan"
__version__ = "1.0.0"
