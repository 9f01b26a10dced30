"""Unit tests for markup fact extraction."""

from complyscan.scanners.markup import parse_markup


class TestImagesAndMedia:
    """Tests for image and media facts."""

    def test_alt_attribute_presence(self) -> None:
        """A missing alt differs from an empty (decorative) alt."""
        facts = parse_markup('<img src="a.png"><img src="b.png" alt="">')

        assert [img.alt for img in facts.images] == [None, ""]
        assert facts.images[0].src == "a.png"

    def test_video_without_captions(self) -> None:
        facts = parse_markup('<video src="intro.mp4"></video>')

        assert facts.videos_without_captions == 1

    def test_video_with_captions(self) -> None:
        facts = parse_markup(
            '<video src="intro.mp4"><track kind="captions" src="intro.vtt"></video>'
        )

        assert facts.videos_without_captions == 0

    def test_unclosed_video_is_counted(self) -> None:
        facts = parse_markup('<video src="intro.mp4">')

        assert facts.videos_without_captions == 1


class TestDocumentStructure:
    """Tests for page-level facts."""

    def test_full_document(self) -> None:
        facts = parse_markup(
            '<!DOCTYPE html><html lang="en"><head><title>Home page</title></head>'
            "<body><main><h1>Hi</h1></main></body></html>"
        )

        assert facts.is_document
        assert facts.title == "Home page"
        assert facts.html_lang == "en"
        assert facts.has_main
        assert facts.h1_count == 1

    def test_fragment_is_not_a_document(self) -> None:
        facts = parse_markup("<div><h2>Section</h2></div>")

        assert not facts.is_document
        assert facts.title is None
        assert facts.headings == (2,)
        assert facts.container_count == 1

    def test_duplicate_ids(self) -> None:
        facts = parse_markup('<div id="a"></div><span id="a"></span><p id="b"></p>')

        assert facts.duplicate_ids == ("a",)

    def test_jsx_expression_ids_are_ignored(self) -> None:
        facts = parse_markup("<div id={id}></div><div id={id}></div>")

        assert facts.duplicate_ids == ()

    def test_script_content_is_ignored(self) -> None:
        facts = parse_markup('<script>const html = "<img src=x>";</script><p>ok</p>')

        assert facts.images == ()


class TestInteractiveElements:
    """Tests for links, buttons and click targets."""

    def test_jsx_click_handler(self) -> None:
        """JSX onClick is recognised because attribute names are lower-cased."""
        facts = parse_markup("<div onClick={open}>Open</div>")

        assert len(facts.click_targets) == 1
        assert facts.click_targets[0].tag == "div"
        assert not facts.click_targets[0].has_keyboard_handler

    def test_keyboard_handler_and_tabindex(self) -> None:
        facts = parse_markup('<div onclick="go()" onkeydown="go()" tabindex="0">Go</div>')

        target = facts.click_targets[0]
        assert target.has_keyboard_handler
        assert target.has_tabindex

    def test_link_text_includes_nested_elements(self) -> None:
        facts = parse_markup('<a href="/docs"><span>Read the</span> docs</a>')

        assert facts.links[0].href == "/docs"
        assert facts.links[0].text == "Read the docs"

    def test_skip_link(self) -> None:
        facts = parse_markup('<a href="#main">Skip to content</a>')

        assert facts.has_skip_link

    def test_empty_button(self) -> None:
        facts = parse_markup("<button><svg></svg></button>")

        assert facts.buttons[0].text == ""
        assert not facts.buttons[0].aria_label

    def test_roles_are_recorded(self) -> None:
        facts = parse_markup('<div role="Navigation"></div>')

        assert facts.roles == (("div", "navigation"),)


class TestForms:
    """Tests for form control facts."""

    def test_explicit_label(self) -> None:
        facts = parse_markup('<label for="email">Email</label><input id="email" type="email">')

        assert len(facts.form_controls) == 1
        assert facts.form_controls[0].type == "email"
        assert "email" in facts.label_targets

    def test_jsx_html_for(self) -> None:
        facts = parse_markup('<label htmlFor="name">Name</label>')

        assert facts.label_targets == frozenset({"name"})

    def test_implicit_label(self) -> None:
        facts = parse_markup("<label>Name <input></label>")

        assert facts.form_controls[0].in_label
        assert facts.form_controls[0].type == "text"

    def test_hidden_and_submit_inputs_need_no_label(self) -> None:
        facts = parse_markup('<input type="hidden" name="t"><input type="submit">')

        assert facts.form_controls == ()

    def test_form_required_fields_and_error_containers(self) -> None:
        facts = parse_markup(
            '<form><input name="q" required><div role="alert"></div></form>'
        )

        assert facts.forms[0].required_fields == 1
        assert facts.forms[0].error_containers == 1
        assert not facts.forms[0].novalidate


class TestParseCache:
    def test_same_content_is_parsed_once(self) -> None:
        content = "<main><h1>Cached</h1></main>"

        assert parse_markup(content) is parse_markup(content)
