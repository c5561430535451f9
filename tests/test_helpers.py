"""Tests for the helper bundle handed to render functions."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt

import pytest
from bs4 import BeautifulSoup
from markupsafe import Markup

from agentstatic.partials import RenderContext, TemplateHelpers
from agentstatic.partials.helpers import normalize_url_path, slugify, truncate


@pytest.fixture
def helpers(context: RenderContext) -> TemplateHelpers:
    """Return helpers whose nested rendering echoes the requested partial."""
    return TemplateHelpers(
        context=context,
        render_partial=lambda name, props: Markup(f"<i>{name}</i>"),
        has_partial=lambda name: name == "card",
        scope_class="as-test",
    )


@pytest.mark.parametrize(
    ("text", "expected"),
    [("Hello World", "hello-world"), ("  Café & Bar!  ", "café-bar"), ("a__b--c", "a-b-c")],
)
def test_slugify(text: str, expected: str) -> None:
    assert slugify(text) == expected


def test_truncate() -> None:
    assert truncate("short", 10) == "short"
    assert truncate("The quick brown fox", 10, suffix="…") == "The quick…"


@pytest.mark.parametrize(
    ("path", "expected"),
    [("/", "/"), ("", "/"), ("docs/", "/docs"), ("//docs//guide/", "/docs//guide")],
)
def test_normalize_url_path(path: str, expected: str) -> None:
    assert normalize_url_path(path) == expected


def test_render_partial_and_has_partial_delegate(helpers: TemplateHelpers) -> None:
    assert helpers.render_partial("card", {}) == Markup("<i>card</i>")
    assert helpers.has_partial("card")
    assert not helpers.has_partial("hero")


def test_format_date(helpers: TemplateHelpers) -> None:
    assert helpers.format_date("2024-03-05") == "March 5, 2024"
    assert helpers.format_date(dt.date(2024, 1, 2), "%Y-%m-%d") == "2024-01-02"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-03-12T12:00:00Z", "3 days ago"),
        ("2024-03-15T11:59:30Z", "just now"),
        ("2023-03-15T12:00:00Z", "1 year ago"),
        ("2024-03-15T14:00:00Z", "in 2 hours"),
    ],
)
def test_time_ago_uses_build_time(helpers: TemplateHelpers, value: str, expected: str) -> None:
    assert helpers.time_ago(value) == expected


def test_time_ago_requires_a_build_time(context: RenderContext) -> None:
    helpers = TemplateHelpers(
        context=dc.replace(context, build_time=None),
        render_partial=lambda name, props: Markup(""),
        has_partial=lambda name: False,
        scope_class="as-test",
    )

    with pytest.raises(ValueError, match="build_time"):
        helpers.time_ago("2024-03-12T12:00:00Z")


def test_markdown_renders_highlighted_code(helpers: TemplateHelpers) -> None:
    html = helpers.markdown("# Title\n\n```python\nprint('hi')\n```\n")

    soup = BeautifulSoup(str(html), "html.parser")
    assert isinstance(html, Markup)
    assert soup.find("h1").get_text() == "Title"
    assert soup.find("div", class_="codehilite") is not None
    assert helpers.markdown("   ") == Markup("")


def test_highlight_tags_language(helpers: TemplateHelpers) -> None:
    soup = BeautifulSoup(str(helpers.highlight("x = 1", "python")), "html.parser")
    block = soup.find("div", class_="codehilite")

    assert block is not None
    assert block["data-language"] == "python"
    assert block.get_text().strip() == "x = 1"


def test_highlight_falls_back_to_plain_text(helpers: TemplateHelpers) -> None:
    soup = BeautifulSoup(str(helpers.highlight("hello", "no-such-lexer")), "html.parser")

    assert "hello" in soup.get_text()


def test_strip_html_and_escape(helpers: TemplateHelpers) -> None:
    assert helpers.strip_html("<p>Hello <b>there</b></p>") == "Hello there"
    assert helpers.escape("<script>") == Markup("&lt;script&gt;")


def test_urls(helpers: TemplateHelpers) -> None:
    assert helpers.url("docs") == "https://example.com/docs"
    assert helpers.asset_url("/img/logo.png") == "https://example.com/assets/img/logo.png"
    assert helpers.is_external("https://github.com/example")
    assert not helpers.is_external("https://example.com/about")
    assert not helpers.is_external("/about")


def test_is_active(helpers: TemplateHelpers) -> None:
    assert helpers.is_active("/guide/install")
    assert not helpers.is_active("/guide")


def test_class_helpers(helpers: TemplateHelpers) -> None:
    assert helpers.conditional_class(True, "open") == "open"
    assert helpers.conditional_class(False, "open") == ""
    assert helpers.class_names("card", None, "", is_open=True, hidden=False) == "card is-open"


def test_collection_helpers(helpers: TemplateHelpers) -> None:
    posts = [
        {"title": "b", "year": 2023},
        {"title": "a", "year": 2024},
        {"title": "c", "year": 2023},
    ]

    assert helpers.chunk(range(5), 2) == [[0, 1], [2, 3], [4]]
    assert helpers.group_by(posts, "year") == {"2023": [posts[0], posts[2]], "2024": [posts[1]]}
    assert [post["title"] for post in helpers.sort_by(posts, "title")] == ["a", "b", "c"]
    with pytest.raises(ValueError, match="chunk size"):
        helpers.chunk([1], 0)


def test_json_encode_is_script_safe(helpers: TemplateHelpers) -> None:
    encoded = helpers.json_encode({"b": "</script>", "a": 1})

    assert encoded == Markup('{"a": 1, "b": "\\u003c/script\\u003e"}')
