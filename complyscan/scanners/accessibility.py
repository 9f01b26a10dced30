"""WCAG 2.1 detectors.

Detectors read :class:`~complyscan.scanners.markup.MarkupFacts` for every
markup file in the scan and report one finding per problem, prefixed with
the file it occurs in.  Page-level checks (title, language) only look at
full documents; component fragments have neither.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from complyscan.models import Detector, DetectorOutcome, Status
from complyscan.scanners.markup import MarkupFacts, parse_markup

if TYPE_CHECKING:
    from complyscan.config import AuditConfig
    from complyscan.utils import ScanData, SourceFile

MARKUP_SUFFIXES = frozenset({".html", ".htm", ".astro", ".jsx", ".tsx", ".vue", ".svelte"})
STYLE_SUFFIXES = frozenset({".css", ".scss"})

# Findings kept per check
MAX_FINDINGS = 25

_GENERIC_LINK_TEXT = frozenset({"click here", "read more", "more", "link", "here", "learn more"})
_FILENAME_ALT = re.compile(r"\.(jpe?g|png|gif|svg|webp|avif)\b", re.IGNORECASE)
_OUTLINE_NONE = re.compile(r"outline\s*:\s*(none|0)\b", re.IGNORECASE)
_LIGHT_TEXT_COLOR = re.compile(r"(?<![\w-])color\s*:\s*#[c-f][0-9a-f]{5}\b", re.IGNORECASE)

# WAI-ARIA 1.2 roles (abstract roles excluded)
VALID_ROLES = frozenset({
    "alert", "alertdialog", "application", "article", "banner", "blockquote",
    "button", "caption", "cell", "checkbox", "code", "columnheader", "combobox",
    "complementary", "contentinfo", "definition", "deletion", "dialog",
    "directory", "document", "emphasis", "feed", "figure", "form", "generic",
    "grid", "gridcell", "group", "heading", "img", "insertion", "link", "list",
    "listbox", "listitem", "log", "main", "marquee", "math", "menu", "menubar",
    "menuitem", "menuitemcheckbox", "menuitemradio", "meter", "navigation",
    "none", "note", "option", "paragraph", "presentation", "progressbar",
    "radio", "radiogroup", "region", "row", "rowgroup", "rowheader",
    "scrollbar", "search", "searchbox", "separator", "slider", "spinbutton",
    "status", "strong", "subscript", "superscript", "switch", "tab", "table",
    "tablist", "tabpanel", "term", "textbox", "time", "timer", "toolbar",
    "tooltip", "tree", "treegrid", "treeitem",
})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def markup_files(scan: ScanData) -> list[SourceFile]:
    return scan.files_with_suffix(MARKUP_SUFFIXES)


def requires_markup(detector: Detector) -> Detector:
    """Report ``not_applicable`` when the scan holds no markup files."""

    @functools.wraps(detector)
    def wrapper(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
        if not markup_files(scan):
            return DetectorOutcome.not_applicable()
        return detector(scan, config)

    return wrapper


def cap_findings(findings: list[str], limit: int = MAX_FINDINGS) -> tuple[str, ...]:
    if len(findings) <= limit:
        return tuple(findings)
    return (*findings[:limit], f"... and {len(findings) - limit} more")


def _per_file(
    scan: ScanData,
    inspect: Callable[[MarkupFacts], list[str]],
    *,
    documents_only: bool = False,
) -> tuple[int, list[str]]:
    """Run *inspect* over every markup file.

    Returns the number of files inspected and the problems found, each
    prefixed with its file path.
    """
    inspected = 0
    problems: list[str] = []
    for f in markup_files(scan):
        facts = parse_markup(f.content)
        if documents_only and not facts.is_document:
            continue
        inspected += 1
        problems.extend(f"{f.path}: {p}" for p in inspect(facts))
    return inspected, problems


def _outcome(
    problems: list[str],
    *,
    status: Status,
    clean: str,
    recommendations: list[str],
) -> DetectorOutcome:
    if not problems:
        return DetectorOutcome.passed(clean)
    return DetectorOutcome(status, cap_findings(problems), tuple(recommendations))


def _manual(finding: str, recommendation: str) -> DetectorOutcome:
    return DetectorOutcome.warning([finding], [recommendation])


# ---------------------------------------------------------------------------
# Perceivable
# ---------------------------------------------------------------------------


@requires_markup
def check_text_alternatives(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        problems = [
            f"Image missing alt attribute ({img.src or 'img'})"
            for img in facts.images if img.alt is None
        ]
        problems.extend(
            ["Image button missing alt attribute"] * facts.image_inputs_without_alt
        )
        return problems

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="All images have text alternatives",
        recommendations=[
            'Add alt attribute to describe the image content or use alt="" for decorative images',
            "Add alt attribute describing the button action",
        ],
    )


@requires_markup
def check_alt_text_quality(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        problems = []
        for img in facts.images:
            if not img.alt:
                continue
            alt = img.alt.strip()
            lowered = alt.lower()
            if "image" in lowered or "picture" in lowered:
                problems.append(f'Alt text should not contain "image" or "picture": "{alt}"')
            if _FILENAME_ALT.search(alt):
                problems.append(f'Alt text appears to be a filename: "{alt}"')
            if len(alt) > 150:
                problems.append(f"Alt text is too long ({len(alt)} characters)")
        return problems

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.WARNING,
        clean="Alt text is concise and descriptive",
        recommendations=[
            "Describe what the image shows, not that it is an image",
            "Use descriptive text instead of filename",
            "Keep alt text concise (under 150 characters)",
        ],
    )


@requires_markup
def check_color_contrast(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    findings = ["Color contrast needs manual verification with a rendering tool"]
    for f in scan.files:
        if f.suffix in STYLE_SUFFIXES or f.suffix in MARKUP_SUFFIXES:
            if len(_LIGHT_TEXT_COLOR.findall(f.content)) > 3:
                findings.append(f"{f.path}: Potential low contrast color usage detected")
    return DetectorOutcome.warning(
        cap_findings(findings),
        [
            "Verify color contrast ratios meet WCAG AA standards "
            "(4.5:1 for normal text, 3:1 for large text)"
        ],
    )


@requires_markup
def check_semantic_html(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        problems = [
            f"{target.tag} used as interactive element with onclick"
            for target in facts.click_targets if target.tag in {"div", "span"}
        ]
        if facts.is_document and not facts.has_main and facts.container_count:
            problems.append("No <main> landmark found")
        if facts.has_header and not facts.has_nav:
            problems.append("No <nav> landmark found")
        return problems

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="Semantic landmarks and elements used",
        recommendations=[
            "Use semantic <button> element instead of div/span with onclick",
            "Add <main> element to identify main content area",
            "Use <nav> element for navigation menus",
        ],
    )


@requires_markup
def check_heading_structure(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        problems = []
        if facts.is_document and facts.headings and facts.h1_count == 0:
            problems.append("No <h1> found on page")
        if facts.h1_count > 1:
            problems.append(f"Multiple <h1> elements found ({facts.h1_count})")
        prev = 0
        for level in facts.headings:
            if prev and level > prev + 1:
                problems.append(f"Heading level skipped: jumped from h{prev} to h{level}")
            prev = level
        return problems

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="Heading hierarchy is consistent",
        recommendations=[
            "Each page should have exactly one <h1> element",
            "Use consecutive heading levels (don't skip from h2 to h4)",
        ],
    )


@requires_markup
def check_media_alternatives(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        return (
            ["Video missing captions/subtitles track"] * facts.videos_without_captions
            + ["Audio element found - verify transcript is provided"] * facts.audio_count
        )

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.WARNING,
        clean="No media without alternatives found",
        recommendations=[
            'Add <track kind="captions"> element for video captions',
            "Provide a text transcript for audio content",
        ],
    )


# ---------------------------------------------------------------------------
# Operable
# ---------------------------------------------------------------------------


@requires_markup
def check_keyboard_accessible(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        problems = [
            f"{target.tag} has onclick but no keyboard event handler"
            for target in facts.click_targets
            if target.tag not in {"button", "a"} and not target.has_keyboard_handler
        ]
        problems.extend(
            f"{tag} with role=button has no tabindex"
            for tag in facts.role_buttons_without_tabindex
        )
        return problems

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="Interactive elements are keyboard accessible",
        recommendations=[
            "Add onkeydown handler, or use semantic button/link elements",
            'Add tabindex="0" to make element keyboard accessible',
        ],
    )


@requires_markup
def check_focus_visible(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    problems = [
        f"{f.path}: outline: none used without alternative focus indicator"
        for f in scan.files
        if _OUTLINE_NONE.search(f.content) and "focus-visible" not in f.content
    ]
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="No suppressed focus indicators found",
        recommendations=[
            "If removing outline, provide alternative focus indicator using :focus-visible"
        ],
    )


@requires_markup
def check_skip_links(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        if facts.has_main and facts.has_header and not facts.has_skip_link:
            return ["No skip link found"]
        return []

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="Skip links present where needed",
        recommendations=['Add a "Skip to main content" link at the beginning of the page'],
    )


@requires_markup
def check_page_title(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        if facts.title is None:
            return ["Page missing <title> element"]
        if not facts.title:
            return ["Page title is empty"]
        if len(facts.title) < 3:
            return [f'Page title is too short: "{facts.title}"']
        return []

    documents, problems = _per_file(scan, inspect, documents_only=True)
    if not documents:
        return DetectorOutcome.not_applicable()
    return _outcome(
        problems,
        status=Status.FAIL,
        clean=f"All {documents} page(s) have descriptive titles",
        recommendations=["Add <title> element in <head> with descriptive page title"],
    )


@requires_markup
def check_link_purpose(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        problems = []
        for link in facts.links:
            if not link.text and not link.aria_label and not link.title:
                problems.append(f"Link has no accessible text ({link.href or 'a'})")
            elif link.text.lower() in _GENERIC_LINK_TEXT:
                problems.append(f'Generic link text: "{link.text}"')
        return problems

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.WARNING,
        clean="Link purpose is clear",
        recommendations=[
            "Add text content, aria-label, or title attribute to describe link purpose",
            "Use descriptive link text that makes sense out of context",
        ],
    )


@requires_markup
def check_multiple_ways(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _manual(
        "Multiple ways to access pages needs manual verification",
        "Ensure users can find pages through: navigation menu, search, sitemap, or related links",
    )


# ---------------------------------------------------------------------------
# Understandable
# ---------------------------------------------------------------------------


@requires_markup
def check_language_attribute(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        if not facts.has_html:
            return []
        if facts.html_lang is None:
            return ["Missing lang attribute on <html> element"]
        if len(facts.html_lang) < 2:
            return [f'Invalid lang attribute: "{facts.html_lang}"']
        return []

    documents, problems = _per_file(scan, inspect, documents_only=True)
    if not documents:
        return DetectorOutcome.not_applicable()
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="Page language is declared",
        recommendations=['Add lang="en" (or appropriate language code) to <html> element'],
    )


@requires_markup
def check_form_labels(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        problems = []
        for control in facts.form_controls:
            labelled = control.in_label or (
                control.id is not None and control.id in facts.label_targets
            )
            named = labelled or control.aria_label or control.aria_labelledby
            if not named and not control.title:
                problems.append(f"Form {control.type} missing label")
            if not named and control.placeholder:
                problems.append("Form input uses only placeholder (not accessible)")
        return problems

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="All form controls are labelled",
        recommendations=[
            "Add <label> element, aria-label, or aria-labelledby attribute",
            "Use <label> element or aria-label in addition to placeholder",
        ],
    )


@requires_markup
def check_error_identification(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        return [
            "Form with required fields has no error message container"
            for form in facts.forms
            if form.required_fields and not form.novalidate and not form.error_containers
        ]

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.WARNING,
        clean="Forms provide error message containers",
        recommendations=[
            'Add error message elements with role="alert" or aria-live="polite"'
        ],
    )


@requires_markup
def check_consistent_navigation(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _manual(
        "Consistent navigation needs manual verification across pages",
        "Ensure navigation menus appear in the same order on all pages",
    )


@requires_markup
def check_consistent_identification(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    return _manual(
        "Consistent identification needs manual verification across pages",
        "Ensure components with same functionality are identified consistently",
    )


# ---------------------------------------------------------------------------
# Robust
# ---------------------------------------------------------------------------


@requires_markup
def check_valid_html(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        if facts.duplicate_ids:
            return [f"Duplicate IDs found: {', '.join(facts.duplicate_ids)}"]
        return []

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="No duplicate ids found",
        recommendations=["Ensure all id attributes are unique within the page"],
    )


@requires_markup
def check_aria_usage(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        problems = []
        for tag, role in facts.roles:
            # Dynamic JSX values cannot be checked
            if role.startswith("{"):
                continue
            if not all(r in VALID_ROLES for r in role.split()):
                problems.append(f'Potentially invalid ARIA role on <{tag}>: "{role}"')
        return problems

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.WARNING,
        clean="ARIA roles are valid",
        recommendations=["Verify role is valid and used correctly per ARIA specification"],
    )


@requires_markup
def check_name_role_value(scan: ScanData, config: AuditConfig) -> DetectorOutcome:
    def inspect(facts: MarkupFacts) -> list[str]:
        problems = [
            "Button has no accessible name"
            for button in facts.buttons
            if not button.text and not button.aria_label and not button.aria_labelledby
        ]
        problems.extend(
            f"Interactive <{target.tag}> without role attribute"
            for target in facts.click_targets
            if target.tag not in {"button", "a"} and not target.role
        )
        return problems

    _, problems = _per_file(scan, inspect)
    return _outcome(
        problems,
        status=Status.FAIL,
        clean="UI components expose name and role",
        recommendations=[
            "Add text content, aria-label, or aria-labelledby",
            'Add appropriate role attribute (e.g., role="button")',
        ],
    )
