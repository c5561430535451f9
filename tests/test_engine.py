"""Tests for the rendering engine: validation, nesting, and collected assets."""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup
from pydantic import Field

from agentstatic.errors import (
    MaxDepthExceededError,
    NotFoundError,
    PropsValidationError,
    UndeclaredDependencyError,
)
from agentstatic.partials import (
    PartialProps,
    PartialRegistry,
    RenderContext,
    RenderingEngine,
    UsageExample,
    render,
)

if typ.TYPE_CHECKING:
    from agentstatic.partials import TemplateHelpers

    from .conftest import DefinitionFactory


class LevelProps(PartialProps):
    level: int = Field(default=0, description="Nesting level")


def _chain(registry: PartialRegistry, make_definition: DefinitionFactory, length: int) -> None:
    """Register ``p0 -> p1 -> ... -> p{length-1}``, each rendering the next."""
    for index in range(length):
        child = f"p{index + 1}" if index + 1 < length else None

        def _render(
            props: LevelProps, helpers: TemplateHelpers, child: str | None = child
        ) -> str:
            inner = helpers.render_partial(child, {"level": props.level + 1}) if child else ""
            return f'<div class="level" data-level="{props.level}">{inner}</div>'

        registry.register(
            f"p{index}",
            make_definition(
                schema=LevelProps,
                render=_render,
                styles=".level { margin: 0; }",
                dependencies=[child] if child else [],
                examples=[UsageExample("Top level", {})],
            ),
        )


@pytest.mark.parametrize(
    "name", ["hero", "card", "card-grid", "nav-link", "navigation", "breadcrumbs"]
)
def test_library_examples_render_structural_markup(
    engine: RenderingEngine, name: str
) -> None:
    results = engine.render_examples(name)

    assert results
    for result in results:
        soup = BeautifulSoup(result.html, "html.parser")
        wrapper = soup.find("div", class_=f"as-{name}")
        assert wrapper is not None, f"{name} output should be wrapped in its scope element"
        assert wrapper.find(["section", "article", "nav", "a"]) is not None, (
            f"{name} output should contain structural markup"
        )


def test_render_is_deterministic(engine: RenderingEngine, context: RenderContext) -> None:
    props = {"title": "Hello", "subtitle": "World"}

    first = engine.render("hero", props, context)
    second = engine.render("hero", dict(props), context)

    assert first == second
    assert len(first.props_hash) == 64


def test_props_hash_ignores_key_order_and_defaults(engine: RenderingEngine) -> None:
    explicit = engine.render("card", {"content": "Body", "title": "T", "variant": "default"})
    implicit = engine.render("card", {"title": "T", "content": "Body"})

    assert explicit.props_hash == implicit.props_hash


def test_invalid_props_raise_validation_error(engine: RenderingEngine) -> None:
    with pytest.raises(PropsValidationError) as excinfo:
        engine.render("hero", {"subtitle": "No title"})

    assert excinfo.value.name == "hero"
    assert [issue.location for issue in excinfo.value.issues] == ["title"]


def test_invalid_nested_props_name_the_nested_partial(
    registry: PartialRegistry, make_definition: DefinitionFactory
) -> None:
    registry.register("badge", make_definition())
    registry.register(
        "panel",
        make_definition(
            render=lambda props, h: str(h.render_partial("badge", {"label": 3})),
            dependencies=["badge"],
        ),
    )

    with pytest.raises(PropsValidationError) as excinfo:
        RenderingEngine(registry).render("panel", {"label": "x"})

    assert excinfo.value.name == "badge"


def test_unknown_partial_is_not_found(engine: RenderingEngine) -> None:
    with pytest.raises(NotFoundError):
        engine.render("carousel", {})


def test_undeclared_nested_render_is_refused(
    registry: PartialRegistry, make_definition: DefinitionFactory
) -> None:
    registry.register("badge", make_definition())
    registry.register(
        "panel",
        make_definition(render=lambda props, h: str(h.render_partial("badge", {"label": "x"}))),
    )

    with pytest.raises(UndeclaredDependencyError) as excinfo:
        RenderingEngine(registry).render("panel", {"label": "x"})

    assert (excinfo.value.name, excinfo.value.requested) == ("panel", "badge")


def test_transitive_dependencies_may_be_rendered(
    registry: PartialRegistry, make_definition: DefinitionFactory
) -> None:
    registry.register("badge", make_definition())
    registry.register("row", make_definition(dependencies=["badge"]))
    registry.register(
        "panel",
        make_definition(
            render=lambda props, h: str(h.render_partial("badge", {"label": "deep"})),
            dependencies=["row"],
        ),
    )

    result = RenderingEngine(registry, wrap_tag=None).render("panel", {"label": "x"})

    assert result.html == '<span class="label">deep</span>'
    assert result.dependencies == ("badge", "row")


def test_max_depth_is_enforced(
    registry: PartialRegistry, make_definition: DefinitionFactory
) -> None:
    _chain(registry, make_definition, 12)

    with pytest.raises(MaxDepthExceededError) as excinfo:
        RenderingEngine(registry).render("p0")

    assert excinfo.value.max_depth == 10
    assert excinfo.value.chain == tuple(f"p{index}" for index in range(12))


def test_nesting_at_max_depth_is_allowed(
    registry: PartialRegistry, make_definition: DefinitionFactory
) -> None:
    _chain(registry, make_definition, 11)

    result = RenderingEngine(registry).render("p0")

    soup = BeautifulSoup(result.html, "html.parser")
    assert len(soup.select("div.level")) == 11


def test_custom_max_depth(registry: PartialRegistry, make_definition: DefinitionFactory) -> None:
    _chain(registry, make_definition, 3)

    with pytest.raises(MaxDepthExceededError):
        render(registry, "p0", max_depth=1)


def test_styles_and_scripts_are_collected(engine: RenderingEngine) -> None:
    result = engine.render(
        "navigation",
        {"items": [{"title": "Guide", "url": "/guide"}]},
    )

    assert result.scope_classes == ("as-navigation", "as-nav-link")
    assert result.styles.index(".as-navigation .nav__list") < result.styles.index(
        ".as-nav-link .nav-link"
    )
    assert len(result.scripts) == 1
    assert "nav--enhanced" in result.scripts[0]


def test_helpers_receive_render_context(
    registry: PartialRegistry, make_definition: DefinitionFactory, context: RenderContext
) -> None:
    registry.register(
        "link",
        make_definition(
            render=lambda props, h: f'<a class="{h.scope_class}" href="{h.url("/docs")}">'
            f"{'here' if h.is_active('/guide/install/') else 'elsewhere'}</a>",
        ),
    )

    result = RenderingEngine(registry, wrap_tag="span").render("link", {"label": "x"}, context)

    assert result.html == (
        '<span class="as-link"><a class="as-link" href="https://example.com/docs">here</a></span>'
    )


def test_negative_max_depth_is_rejected(registry: PartialRegistry) -> None:
    with pytest.raises(ValueError, match="max_depth"):
        RenderingEngine(registry, max_depth=-1)
