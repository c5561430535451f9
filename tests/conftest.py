"""Shared fixtures for partial, navigation, and CLI tests."""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import typing as typ

import pytest
from pydantic import Field

from agentstatic.library import default_registry
from agentstatic.partials import (
    PartialDefinition,
    PartialMetadata,
    PartialProps,
    PartialRegistry,
    RenderContext,
    RenderingEngine,
    UsageExample,
)

if typ.TYPE_CHECKING:
    from agentstatic.partials import TemplateHelpers

BUILD_TIME = dt.datetime(2024, 3, 15, 12, 0, tzinfo=dt.UTC)


class LabelProps(PartialProps):
    label: str = Field(description="Text to show")


def _label_render(props: LabelProps, helpers: TemplateHelpers) -> str:
    return f'<span class="label">{helpers.escape(props.label)}</span>'


DefinitionFactory = cabc.Callable[..., PartialDefinition]


@pytest.fixture
def make_definition() -> DefinitionFactory:
    """Return a factory for small, valid partial definitions.

    Keyword arguments override the corresponding ``PartialDefinition`` or
    ``PartialMetadata`` fields so each test only spells out what it checks.
    """

    def _make(
        *,
        schema: type[PartialProps] = LabelProps,
        render: cabc.Callable[..., str] = _label_render,
        styles: str = ".label { font-weight: 600; }",
        dependencies: cabc.Sequence[str] = (),
        script: str | None = None,
        description: str = "A short label",
        category: str = "utility",
        keywords: cabc.Sequence[str] = ("label",),
        examples: cabc.Sequence[UsageExample] | None = None,
    ) -> PartialDefinition:
        return PartialDefinition(
            schema=schema,
            render=render,
            styles=styles,
            script=script,
            dependencies=dependencies,
            metadata=PartialMetadata(
                description=description,
                category=category,
                keywords=keywords,
                usage_examples=(
                    examples
                    if examples is not None
                    else [UsageExample("Simple label", {"label": "New"})]
                ),
            ),
        )

    return _make


@pytest.fixture
def registry() -> PartialRegistry:
    """Return an empty registry."""
    return PartialRegistry()


@pytest.fixture(scope="module")
def library_registry() -> PartialRegistry:
    """Return the validated built-in partial library."""
    return default_registry()


@pytest.fixture
def engine(library_registry: PartialRegistry) -> RenderingEngine:
    """Return an engine rendering from the built-in library."""
    return RenderingEngine(library_registry)


@pytest.fixture
def context() -> RenderContext:
    """Return a deterministic render context for ``/guide/install``."""
    return RenderContext(
        current_path="/guide/install",
        site_name="Example Docs",
        base_url="https://example.com",
        build_time=BUILD_TIME,
    )


@pytest.fixture
def content_records() -> list[dict[str, typ.Any]]:
    """Return a small documentation site as discovery would report it."""
    return [
        {"filePath": "index.md", "urlPath": "/", "title": "Home", "order": 0},
        {"filePath": "guide.md", "urlPath": "/guide", "title": "Guide", "order": 1},
        {
            "filePath": "guide/install.md",
            "urlPath": "/guide/install",
            "title": "Install",
            "order": 1,
        },
        {
            "filePath": "guide/configure.md",
            "urlPath": "/guide/configure",
            "title": "Configure",
            "order": 2,
        },
        {"filePath": "blog.md", "urlPath": "/blog", "title": "Blog", "order": 2},
        {
            "filePath": "blog/draft.md",
            "urlPath": "/blog/draft",
            "title": "Draft",
            "hidden": True,
        },
    ]
