"""Tests for stylesheet parsing, global-selector checks, and scoping."""

from __future__ import annotations

import pytest

from agentstatic.partials.styles import (
    AtRule,
    StyleRule,
    StylesheetSyntaxError,
    find_global_selectors,
    find_unscoped_at_rules,
    is_global_selector,
    parse_stylesheet,
    scope_class_for,
    scope_stylesheet,
    serialize_stylesheet,
)


def test_parse_splits_selectors_and_normalises_declarations() -> None:
    rules = parse_stylesheet("/* card */ .card, .card--big {\n  padding: 1rem ;margin:0 }")

    assert rules == (
        StyleRule(selectors=(".card", ".card--big"), declarations="padding: 1rem; margin:0;"),
    )


def test_parse_keeps_grouping_and_raw_at_rules() -> None:
    rules = parse_stylesheet(
        """
        @import url("theme.css");
        @media (min-width: 768px) { .grid { display: grid; } }
        @keyframes fade { from { opacity: 0; } to { opacity: 1; } }
        """
    )

    statement, media, keyframes = rules
    assert statement == AtRule(name="import", prelude='url("theme.css")')
    assert media.name == "media"
    assert media.rules == (StyleRule(selectors=(".grid",), declarations="display: grid;"),)
    assert keyframes.rules is None
    assert keyframes.body == "from { opacity: 0; } to { opacity: 1; }"


def test_parse_ignores_braces_inside_strings() -> None:
    (rule,) = parse_stylesheet('.quote::before { content: "{"; }')

    assert rule.declarations == 'content: "{";'


@pytest.mark.parametrize(
    "css",
    [".a { color: red;", ".a { color: red; } }", "color: red;", "{ color: red; }", ".a, { x: y }"],
)
def test_parse_rejects_malformed_css(css: str) -> None:
    with pytest.raises(StylesheetSyntaxError):
        parse_stylesheet(css)


@pytest.mark.parametrize(
    ("selector", "expected"),
    [
        ("body", True),
        ("html", True),
        ("*", True),
        (":root", True),
        ("p", True),
        ("a:hover", True),
        ("> .child", True),
        (".card", False),
        (".card p", False),
        ("#main", False),
        ("[data-nav]", False),
        ("button.primary", False),
        (".card:not(p)", False),
    ],
)
def test_is_global_selector(selector: str, expected: bool) -> None:
    assert is_global_selector(selector) is expected


def test_find_global_selectors_looks_inside_media_queries() -> None:
    rules = parse_stylesheet(".ok { x: y; } @media print { body { margin: 0; } }")

    assert find_global_selectors(rules) == ["body"]


def test_scope_class_for_is_deterministic() -> None:
    assert scope_class_for("Card Grid", "as") == "as-card-grid"
    assert scope_class_for("nav-link", "site") == "site-nav-link"


def test_scope_and_serialize_nested_rules() -> None:
    rules = parse_stylesheet(
        ".grid, .grid--wide { gap: 1rem; } @media (min-width: 768px) { .grid { gap: 2rem; } }"
    )

    css = serialize_stylesheet(scope_stylesheet(rules, "as-grid"))

    assert css == (
        ".as-grid .grid, .as-grid .grid--wide { gap: 1rem; }\n"
        "@media (min-width: 768px) {\n"
        "  .as-grid .grid { gap: 2rem; }\n"
        "}"
    )


def test_scope_and_starting_style_blocks_are_checked_like_media_queries() -> None:
    rules = parse_stylesheet(
        "@starting-style { body { opacity: 0; } } "
        "@scope (html) { .card { margin: 0; } :scope { color: red; } }"
    )

    starting, scope = rules
    assert starting.rules == (StyleRule(selectors=("body",), declarations="opacity: 0;"),)
    assert scope.prelude == "(html)"
    assert find_global_selectors(rules) == ["body", ":scope"]


@pytest.mark.parametrize(
    ("css", "expected"),
    [
        ("@import url('reset.css');", ["@import url('reset.css')"]),
        ('@charset "utf-8";', ['@charset "utf-8"']),
        ("@font-palette-values --brand { font-family: Inter; }", ["@font-palette-values --brand"]),
        ("@media print { @import url(print.css); }", ["@import url(print.css)"]),
        ("@layer base, theme;", []),
        ("@keyframes fade { from { opacity: 0; } to { opacity: 1; } }", []),
        ("@font-face { font-family: Inter; src: url(inter.woff2); }", []),
        ("@supports (display: grid) { @property --gap { syntax: '<length>'; } }", []),
    ],
)
def test_find_unscoped_at_rules(css: str, expected: list[str]) -> None:
    assert find_unscoped_at_rules(parse_stylesheet(css)) == expected
