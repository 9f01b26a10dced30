"""Unit tests for the WCAG 2.1 detectors."""

from pathlib import Path

from complyscan.config import AuditConfig
from complyscan.models import Status
from complyscan.scanners import accessibility as a11y
from complyscan.utils import ScanData, SourceFile

_CONFIG = AuditConfig()

_GOOD_PAGE = (
    '<!DOCTYPE html><html lang="en"><head><title>Home page</title></head><body>'
    '<header><nav><a href="#main">Skip to main content</a></nav></header>'
    '<main id="main"><h1>Welcome</h1><img src="logo.png" alt="Company logo"></main>'
    "</body></html>"
)


def _scan(files: dict[str, str]) -> ScanData:
    return ScanData(
        root=Path("."),
        files=tuple(SourceFile(p, c) for p, c in files.items()),
    )


class TestApplicability:
    """Tests for the markup guard and page-level applicability."""

    def test_no_markup_is_not_applicable(self) -> None:
        scan = _scan({"styles.css": "body { color: #333; }"})

        assert a11y.check_text_alternatives(scan, _CONFIG).status is Status.NOT_APPLICABLE
        assert a11y.check_multiple_ways(scan, _CONFIG).status is Status.NOT_APPLICABLE

    def test_page_checks_skip_fragments(self) -> None:
        """Components without <html>/<head> have no title or lang to check."""
        scan = _scan({"Card.tsx": "<div><h2>Card</h2></div>"})

        assert a11y.check_page_title(scan, _CONFIG).status is Status.NOT_APPLICABLE
        assert a11y.check_language_attribute(scan, _CONFIG).status is Status.NOT_APPLICABLE

    def test_good_page_passes_automated_checks(self) -> None:
        scan = _scan({"index.html": _GOOD_PAGE})
        detectors = [
            a11y.check_text_alternatives,
            a11y.check_alt_text_quality,
            a11y.check_semantic_html,
            a11y.check_heading_structure,
            a11y.check_keyboard_accessible,
            a11y.check_skip_links,
            a11y.check_page_title,
            a11y.check_link_purpose,
            a11y.check_language_attribute,
            a11y.check_form_labels,
            a11y.check_valid_html,
            a11y.check_name_role_value,
        ]
        for detector in detectors:
            assert detector(scan, _CONFIG).status is Status.PASS, detector.__name__


class TestPerceivable:
    def test_image_without_alt(self) -> None:
        scan = _scan({"index.html": '<img src="logo.png">'})
        outcome = a11y.check_text_alternatives(scan, _CONFIG)

        assert outcome.status is Status.FAIL
        assert outcome.findings == ("index.html: Image missing alt attribute (logo.png)",)

    def test_redundant_alt_text(self) -> None:
        scan = _scan({"index.html": '<img src="cat.jpg" alt="Image of a cat">'})
        outcome = a11y.check_alt_text_quality(scan, _CONFIG)

        assert outcome.status is Status.WARNING

    def test_heading_level_skipped(self) -> None:
        scan = _scan({"index.html": "<h1>A</h1><h3>B</h3>"})
        outcome = a11y.check_heading_structure(scan, _CONFIG)

        assert outcome.status is Status.FAIL
        assert "jumped from h1 to h3" in outcome.findings[0]

    def test_color_contrast_needs_manual_review(self) -> None:
        outcome = a11y.check_color_contrast(_scan({"index.html": _GOOD_PAGE}), _CONFIG)

        assert outcome.status is Status.WARNING
        assert "manual verification" in outcome.findings[0]

    def test_findings_are_capped(self) -> None:
        scan = _scan({"gallery.html": '<img src="x.png">' * 30})
        outcome = a11y.check_text_alternatives(scan, _CONFIG)

        assert len(outcome.findings) == a11y.MAX_FINDINGS + 1
        assert outcome.findings[-1] == "... and 5 more"


class TestOperable:
    def test_click_without_keyboard_handler(self) -> None:
        scan = _scan({"index.html": '<div onclick="go()">Go</div>'})
        outcome = a11y.check_keyboard_accessible(scan, _CONFIG)

        assert outcome.status is Status.FAIL
        assert outcome.findings == ("index.html: div has onclick but no keyboard event handler",)

    def test_outline_removed_without_alternative(self) -> None:
        scan = _scan(
            {"index.html": "<main></main>", "app.css": "button:focus { outline: none; }"}
        )
        outcome = a11y.check_focus_visible(scan, _CONFIG)

        assert outcome.status is Status.FAIL
        assert outcome.findings[0].startswith("app.css:")

    def test_outline_removed_with_focus_visible(self) -> None:
        css = "button:focus { outline: none; }\nbutton:focus-visible { outline: 2px solid; }"
        scan = _scan({"index.html": "<main></main>", "app.css": css})

        assert a11y.check_focus_visible(scan, _CONFIG).status is Status.PASS

    def test_missing_title(self) -> None:
        scan = _scan({"index.html": '<html lang="en"><head></head><body></body></html>'})
        outcome = a11y.check_page_title(scan, _CONFIG)

        assert outcome.status is Status.FAIL
        assert outcome.findings == ("index.html: Page missing <title> element",)

    def test_generic_link_text(self) -> None:
        scan = _scan({"index.html": '<a href="/more">Click here</a>'})

        assert a11y.check_link_purpose(scan, _CONFIG).status is Status.WARNING

    def test_manual_check_is_a_warning(self) -> None:
        outcome = a11y.check_multiple_ways(_scan({"index.html": _GOOD_PAGE}), _CONFIG)

        assert outcome.status is Status.WARNING
        assert len(outcome.findings) == 1


class TestUnderstandable:
    def test_missing_lang(self) -> None:
        scan = _scan({"index.html": "<html><head><title>Home</title></head></html>"})
        outcome = a11y.check_language_attribute(scan, _CONFIG)

        assert outcome.status is Status.FAIL

    def test_placeholder_only_input(self) -> None:
        scan = _scan({"form.html": '<input type="text" placeholder="Name">'})
        outcome = a11y.check_form_labels(scan, _CONFIG)

        assert outcome.status is Status.FAIL
        assert outcome.findings == (
            "form.html: Form text missing label",
            "form.html: Form input uses only placeholder (not accessible)",
        )

    def test_input_wrapped_in_label(self) -> None:
        scan = _scan({"form.html": '<label>Name <input type="text"></label>'})

        assert a11y.check_form_labels(scan, _CONFIG).status is Status.PASS

    def test_form_without_error_container(self) -> None:
        scan = _scan({"form.html": '<form><input name="q" aria-label="Search" required></form>'})

        assert a11y.check_error_identification(scan, _CONFIG).status is Status.WARNING


class TestRobust:
    def test_duplicate_ids(self) -> None:
        scan = _scan({"index.html": '<div id="x"></div><div id="x"></div>'})
        outcome = a11y.check_valid_html(scan, _CONFIG)

        assert outcome.status is Status.FAIL
        assert outcome.findings == ("index.html: Duplicate IDs found: x",)

    def test_invalid_aria_role(self) -> None:
        scan = _scan({"index.html": '<div role="buton"></div>'})

        assert a11y.check_aria_usage(scan, _CONFIG).status is Status.WARNING

    def test_valid_aria_roles(self) -> None:
        scan = _scan({"index.html": '<div role="presentation"></div><ul role="list"></ul>'})

        assert a11y.check_aria_usage(scan, _CONFIG).status is Status.PASS

    def test_button_without_name(self) -> None:
        scan = _scan({"App.jsx": "<button onClick={close}><svg /></button>"})
        outcome = a11y.check_name_role_value(scan, _CONFIG)

        assert outcome.status is Status.FAIL
        assert outcome.findings == ("App.jsx: Button has no accessible name",)
