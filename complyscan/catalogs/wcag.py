"""WCAG 2.1 check catalog, grouped by principle."""

from complyscan.models import CheckDefinition, Detector, Level, Severity, WcagPrinciple
from complyscan.scanners import accessibility as a

_P = WcagPrinciple
_UNDERSTANDING = "https://www.w3.org/WAI/WCAG21/Understanding/"


def _check(
    check_id: str,
    principle: WcagPrinciple,
    guideline: str,
    criterion: str,
    level: Level,
    name: str,
    description: str,
    severity: Severity,
    detector: Detector,
    doc: str,
    automated: bool = True,
) -> CheckDefinition:
    return CheckDefinition(
        id=check_id,
        category=principle,
        name=name,
        description=description,
        severity=severity,
        detector=detector,
        level=level,
        automated=automated,
        references=(criterion,),
        guideline=guideline,
        help_url=f"{_UNDERSTANDING}{doc}.html",
    )


WCAG_CHECKS: tuple[CheckDefinition, ...] = (
    # Perceivable
    _check("WCAG-1.1.1", _P.PERCEIVABLE, "1.1 Text Alternatives", "1.1.1 Non-text Content",
           Level.A, "Text Alternatives", "All non-text content must have a text alternative",
           Severity.CRITICAL, a.check_text_alternatives, "non-text-content"),
    _check("WCAG-1.1.1-ENHANCED", _P.PERCEIVABLE, "1.1 Text Alternatives",
           "1.1.1 Non-text Content (Enhanced)",
           Level.AA, "Quality Alt Text", "Alt text should be meaningful and concise",
           Severity.MODERATE, a.check_alt_text_quality, "non-text-content"),
    _check("WCAG-1.4.3", _P.PERCEIVABLE, "1.4 Distinguishable", "1.4.3 Contrast (Minimum)",
           Level.AA, "Color Contrast", "Text must have sufficient contrast against background",
           Severity.SERIOUS, a.check_color_contrast, "contrast-minimum", automated=False),
    _check("WCAG-1.3.1", _P.PERCEIVABLE, "1.3 Adaptable", "1.3.1 Info and Relationships",
           Level.A, "Semantic HTML",
           "Information and relationships must be programmatically determined",
           Severity.SERIOUS, a.check_semantic_html, "info-and-relationships"),
    _check("WCAG-1.3.1-HEADINGS", _P.PERCEIVABLE, "1.3 Adaptable",
           "1.3.1 Info and Relationships (Headings)",
           Level.A, "Heading Structure", "Headings must be properly structured and hierarchical",
           Severity.SERIOUS, a.check_heading_structure, "info-and-relationships"),
    _check("WCAG-1.2.1", _P.PERCEIVABLE, "1.2 Time-based Media",
           "1.2.1 Audio-only and Video-only",
           Level.A, "Media Alternatives", "Provide alternatives for time-based media",
           Severity.MODERATE, a.check_media_alternatives,
           "audio-only-and-video-only-prerecorded"),

    # Operable
    _check("WCAG-2.1.1", _P.OPERABLE, "2.1 Keyboard Accessible", "2.1.1 Keyboard",
           Level.A, "Keyboard Navigation", "All functionality must be available via keyboard",
           Severity.CRITICAL, a.check_keyboard_accessible, "keyboard"),
    _check("WCAG-2.4.7", _P.OPERABLE, "2.4 Navigable", "2.4.7 Focus Visible",
           Level.AA, "Focus Indicator", "Keyboard focus must be clearly visible",
           Severity.SERIOUS, a.check_focus_visible, "focus-visible"),
    _check("WCAG-2.4.1", _P.OPERABLE, "2.4 Navigable", "2.4.1 Bypass Blocks",
           Level.A, "Skip Links", "Provide a way to skip repeated content blocks",
           Severity.MODERATE, a.check_skip_links, "bypass-blocks"),
    _check("WCAG-2.4.2", _P.OPERABLE, "2.4 Navigable", "2.4.2 Page Titled",
           Level.A, "Page Titles", "Web pages must have descriptive titles",
           Severity.SERIOUS, a.check_page_title, "page-titled"),
    _check("WCAG-2.4.4", _P.OPERABLE, "2.4 Navigable", "2.4.4 Link Purpose (In Context)",
           Level.A, "Link Purpose",
           "The purpose of each link must be clear from link text or context",
           Severity.MODERATE, a.check_link_purpose, "link-purpose-in-context"),
    _check("WCAG-2.4.5", _P.OPERABLE, "2.4 Navigable", "2.4.5 Multiple Ways",
           Level.AA, "Multiple Ways", "Provide multiple ways to locate pages",
           Severity.MINOR, a.check_multiple_ways, "multiple-ways", automated=False),

    # Understandable
    _check("WCAG-3.1.1", _P.UNDERSTANDABLE, "3.1 Readable", "3.1.1 Language of Page",
           Level.A, "Language Attribute",
           "The default language of each page must be programmatically determined",
           Severity.SERIOUS, a.check_language_attribute, "language-of-page"),
    _check("WCAG-3.3.2", _P.UNDERSTANDABLE, "3.3 Input Assistance",
           "3.3.2 Labels or Instructions",
           Level.A, "Form Labels", "Labels or instructions must be provided for user input",
           Severity.CRITICAL, a.check_form_labels, "labels-or-instructions"),
    _check("WCAG-3.3.1", _P.UNDERSTANDABLE, "3.3 Input Assistance", "3.3.1 Error Identification",
           Level.A, "Error Identification",
           "Input errors must be identified and described to the user",
           Severity.MODERATE, a.check_error_identification, "error-identification"),
    _check("WCAG-3.2.3", _P.UNDERSTANDABLE, "3.2 Predictable", "3.2.3 Consistent Navigation",
           Level.AA, "Consistent Navigation",
           "Navigation mechanisms must be consistent across pages",
           Severity.MINOR, a.check_consistent_navigation, "consistent-navigation",
           automated=False),
    _check("WCAG-3.2.4", _P.UNDERSTANDABLE, "3.2 Predictable", "3.2.4 Consistent Identification",
           Level.AA, "Consistent Identification",
           "Components with same functionality must be identified consistently",
           Severity.MINOR, a.check_consistent_identification, "consistent-identification",
           automated=False),

    # Robust
    _check("WCAG-4.1.1", _P.ROBUST, "4.1 Compatible", "4.1.1 Parsing",
           Level.A, "Valid HTML", "HTML must be valid and well-formed",
           Severity.MODERATE, a.check_valid_html, "parsing"),
    _check("WCAG-4.1.2-ARIA", _P.ROBUST, "4.1 Compatible", "4.1.2 Name, Role, Value (ARIA)",
           Level.A, "ARIA Usage", "ARIA attributes must be used correctly",
           Severity.MODERATE, a.check_aria_usage, "name-role-value"),
    _check("WCAG-4.1.2", _P.ROBUST, "4.1 Compatible", "4.1.2 Name, Role, Value",
           Level.A, "Name, Role, Value",
           "UI components must have programmatically determinable name, role, and value",
           Severity.CRITICAL, a.check_name_role_value, "name-role-value"),
)
