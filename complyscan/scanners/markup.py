"""Markup fact extraction for the accessibility detectors.

Each markup file (HTML, Astro, JSX/TSX, Vue, Svelte) is parsed once with the
standard-library :class:`html.parser.HTMLParser` into a :class:`MarkupFacts`
record.  Attribute names are lower-cased by the parser, so JSX spellings such
as ``onClick``, ``tabIndex`` and ``htmlFor`` are recognised too.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Any

logger = logging.getLogger(__name__)

_HEADINGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
_FORM_CONTROLS = frozenset({"input", "textarea", "select"})
_UNLABELLED_INPUT_TYPES = frozenset({"hidden", "submit", "button", "reset", "image"})


@dataclass(frozen=True)
class Image:
    src: str | None
    alt: str | None


@dataclass(frozen=True)
class ClickTarget:
    """An element carrying an ``onclick`` handler."""

    tag: str
    has_keyboard_handler: bool
    has_tabindex: bool
    role: str | None


@dataclass(frozen=True)
class Link:
    href: str | None
    text: str
    aria_label: str | None
    title: str | None


@dataclass(frozen=True)
class FormControl:
    tag: str
    type: str
    id: str | None
    aria_label: bool
    aria_labelledby: bool
    title: bool
    placeholder: bool
    in_label: bool


@dataclass(frozen=True)
class Form:
    novalidate: bool
    required_fields: int
    error_containers: int


@dataclass(frozen=True)
class Button:
    text: str
    aria_label: bool
    aria_labelledby: bool


@dataclass(frozen=True)
class MarkupFacts:
    """Accessibility-relevant facts about one markup file."""

    images: tuple[Image, ...] = ()
    image_inputs_without_alt: int = 0
    click_targets: tuple[ClickTarget, ...] = ()
    role_buttons_without_tabindex: tuple[str, ...] = ()
    has_main: bool = False
    has_nav: bool = False
    has_header: bool = False
    container_count: int = 0
    headings: tuple[int, ...] = ()
    videos_without_captions: int = 0
    audio_count: int = 0
    has_skip_link: bool = False
    has_html: bool = False
    has_head: bool = False
    title: str | None = None
    html_lang: str | None = None
    links: tuple[Link, ...] = ()
    form_controls: tuple[FormControl, ...] = ()
    label_targets: frozenset[str] = frozenset()
    forms: tuple[Form, ...] = ()
    duplicate_ids: tuple[str, ...] = ()
    roles: tuple[tuple[str, str], ...] = ()
    buttons: tuple[Button, ...] = ()

    @property
    def is_document(self) -> bool:
        """``True`` for full pages (an ``<html>`` or ``<head>`` element)."""
        return self.has_html or self.has_head

    @property
    def h1_count(self) -> int:
        return sum(1 for level in self.headings if level == 1)


class _MarkupParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.images: list[Image] = []
        self.image_inputs_without_alt = 0
        self.click_targets: list[ClickTarget] = []
        self.role_buttons_without_tabindex: list[str] = []
        self.has_main = False
        self.has_nav = False
        self.has_header = False
        self.container_count = 0
        self.headings: list[int] = []
        self.videos_without_captions = 0
        self.audio_count = 0
        self.has_html = False
        self.has_head = False
        self.html_lang: str | None = None
        self.title: str | None = None
        self.links: list[Link] = []
        self.form_controls: list[FormControl] = []
        self.label_targets: set[str] = set()
        self.forms: list[Form] = []
        self.ids: dict[str, int] = {}
        self.dup_ids: list[str] = []
        self.roles: list[tuple[str, str]] = []
        self.buttons: list[Button] = []
        self._label_depth = 0
        self._in_script_style = False
        self._capture: list[dict[str, Any]] = []
        self._video_stack: list[dict[str, bool]] = []
        self._form_stack: list[dict[str, Any]] = []

    # --- HTMLParser hooks ---

    def handle_starttag(self, tag: str, attrs_in: list[tuple[str, str | None]]) -> None:
        self._tag(tag, attrs_in, self_closing=False)

    def handle_startendtag(self, tag: str, attrs_in: list[tuple[str, str | None]]) -> None:
        self._tag(tag, attrs_in, self_closing=True)

    def handle_endtag(self, tag: str) -> None:
        t = tag.lower()
        if t in {"script", "style"}:
            self._in_script_style = False
        elif t == "label" and self._label_depth > 0:
            self._label_depth -= 1
        elif t == "video" and self._video_stack:
            if not self._video_stack.pop()["captions"]:
                self.videos_without_captions += 1
        elif t == "form" and self._form_stack:
            self._close_form(self._form_stack.pop())
        self._close_capture(t)

    def handle_data(self, data: str) -> None:
        if self._in_script_style:
            return
        for item in self._capture:
            item["chunks"].append(data)

    def close(self) -> None:
        super().close()
        # Unclosed elements at EOF
        while self._capture:
            self._close_capture(self._capture[-1]["tag"])
        while self._video_stack:
            if not self._video_stack.pop()["captions"]:
                self.videos_without_captions += 1
        while self._form_stack:
            self._close_form(self._form_stack.pop())

    # --- internals ---

    def _tag(self, tag: str, attrs_in: list[tuple[str, str | None]], self_closing: bool) -> None:
        t = tag.lower()
        present = {k.lower() for k, _ in attrs_in}
        attrs = {k.lower(): (v or "") for k, v in attrs_in}
        role = attrs.get("role", "").strip().lower() or None

        if t == "html":
            self.has_html = True
            self.html_lang = attrs.get("lang", "").strip() or None
        elif t == "head":
            self.has_head = True
        elif t in {"script", "style"} and not self_closing:
            self._in_script_style = True
        elif t == "main":
            self.has_main = True
        elif t == "nav":
            self.has_nav = True
        elif t == "header":
            self.has_header = True
        elif t in {"div", "section"}:
            self.container_count += 1
        elif t in _HEADINGS:
            self.headings.append(_HEADINGS[t])
        elif t == "img":
            self.images.append(
                Image(src=attrs.get("src") or None, alt=attrs["alt"] if "alt" in present else None)
            )
        elif t == "audio":
            self.audio_count += 1
        elif t == "video":
            if self_closing:
                self.videos_without_captions += 1
            else:
                self._video_stack.append({"captions": False})
        elif t == "track" and self._video_stack:
            if attrs.get("kind", "").strip().lower() in {"captions", "subtitles"}:
                self._video_stack[-1]["captions"] = True
        elif t == "label":
            target = (attrs.get("for") or attrs.get("htmlfor") or "").strip()
            if target:
                self.label_targets.add(target)
            if not self_closing:
                self._label_depth += 1
        elif t == "form":
            state = {"novalidate": "novalidate" in present, "required": 0, "errors": 0}
            if self_closing:
                self._close_form(state)
            else:
                self._form_stack.append(state)

        if t in _FORM_CONTROLS:
            self._form_control(t, attrs, present)
        if self._form_stack and _is_error_container(attrs, role):
            self._form_stack[-1]["errors"] += 1

        if "onclick" in present:
            self.click_targets.append(ClickTarget(
                tag=t,
                has_keyboard_handler=any(
                    h in present for h in ("onkeydown", "onkeyup", "onkeypress")
                ),
                has_tabindex="tabindex" in present,
                role=role,
            ))
        if role == "button" and t in {"div", "span"} and "tabindex" not in present:
            self.role_buttons_without_tabindex.append(t)
        if role:
            self.roles.append((t, role))

        node_id = attrs.get("id", "").strip()
        # JSX expressions are not real ids
        if node_id and not node_id.startswith("{"):
            self.ids[node_id] = self.ids.get(node_id, 0) + 1
            if self.ids[node_id] == 2:
                self.dup_ids.append(node_id)

        if t in {"a", "button", "title"}:
            item = {"tag": t, "attrs": attrs, "present": present, "chunks": []}
            self._capture.append(item)
            if self_closing:
                self._close_capture(t)

    def _form_control(self, tag: str, attrs: dict[str, str], present: set[str]) -> None:
        input_type = attrs.get("type", "").strip().lower() or ("text" if tag == "input" else tag)
        if tag == "input" and input_type == "image" and not attrs.get("alt", "").strip():
            self.image_inputs_without_alt += 1
        if self._form_stack and "required" in present:
            self._form_stack[-1]["required"] += 1
        if tag == "input" and input_type in _UNLABELLED_INPUT_TYPES:
            return
        self.form_controls.append(FormControl(
            tag=tag,
            type=input_type,
            id=attrs.get("id", "").strip() or None,
            aria_label=bool(attrs.get("aria-label", "").strip()),
            aria_labelledby=bool(attrs.get("aria-labelledby", "").strip()),
            title=bool(attrs.get("title", "").strip()),
            placeholder=bool(attrs.get("placeholder", "").strip()),
            in_label=self._label_depth > 0,
        ))

    def _close_form(self, state: dict[str, Any]) -> None:
        self.forms.append(Form(
            novalidate=state["novalidate"],
            required_fields=state["required"],
            error_containers=state["errors"],
        ))

    def _close_capture(self, tag: str) -> None:
        for idx in range(len(self._capture) - 1, -1, -1):
            item = self._capture[idx]
            if item["tag"] != tag:
                continue
            text = " ".join("".join(item["chunks"]).split())
            attrs = item["attrs"]
            if tag == "title":
                if self.title is None:
                    self.title = text
            elif tag == "a":
                self.links.append(Link(
                    href=attrs.get("href") if "href" in item["present"] else None,
                    text=text,
                    aria_label=attrs.get("aria-label", "").strip() or None,
                    title=attrs.get("title", "").strip() or None,
                ))
            else:
                self.buttons.append(Button(
                    text=text,
                    aria_label=bool(attrs.get("aria-label", "").strip()),
                    aria_labelledby=bool(attrs.get("aria-labelledby", "").strip()),
                ))
            self._capture.pop(idx)
            return

    def facts(self) -> MarkupFacts:
        has_skip_link = any(
            (link.href or "").startswith("#")
            and ("skip" in link.text.lower() or "jump to" in link.text.lower())
            for link in self.links
        )
        return MarkupFacts(
            images=tuple(self.images),
            image_inputs_without_alt=self.image_inputs_without_alt,
            click_targets=tuple(self.click_targets),
            role_buttons_without_tabindex=tuple(self.role_buttons_without_tabindex),
            has_main=self.has_main,
            has_nav=self.has_nav,
            has_header=self.has_header,
            container_count=self.container_count,
            headings=tuple(self.headings),
            videos_without_captions=self.videos_without_captions,
            audio_count=self.audio_count,
            has_skip_link=has_skip_link,
            has_html=self.has_html,
            has_head=self.has_head,
            title=self.title,
            html_lang=self.html_lang,
            links=tuple(self.links),
            form_controls=tuple(self.form_controls),
            label_targets=frozenset(self.label_targets),
            forms=tuple(self.forms),
            duplicate_ids=tuple(self.dup_ids),
            roles=tuple(self.roles),
            buttons=tuple(self.buttons),
        )


def _is_error_container(attrs: dict[str, str], role: str | None) -> bool:
    if role == "alert":
        return True
    if attrs.get("aria-live", "").strip().lower() in {"polite", "assertive"}:
        return True
    classes = (attrs.get("class") or attrs.get("classname") or "").split()
    return any(c in {"error", "error-message"} for c in classes)


@functools.lru_cache(maxsize=512)
def parse_markup(content: str) -> MarkupFacts:
    """Parse *content* and return its :class:`MarkupFacts`.

    Results are memoised per content string, so every accessibility
    detector can call this freely within one audit.
    """
    parser = _MarkupParser()
    try:
        parser.feed(content)
        parser.close()
    except (AssertionError, ValueError) as exc:
        # Keep whatever was collected before the parser gave up
        logger.debug("Markup parsing stopped early: %s", exc)
    return parser.facts()
