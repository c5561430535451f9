"""Cyclopts CLI entrypoint for inspecting partials and navigation data.

The ``agentstatic`` console script loads the built-in partial library plus any
modules listed in ``agentstatic.yaml``, then lets authors (and AI assistants)
browse the catalog, read a partial's schema and usage examples as JSON,
preview the HTML of an example, and build a navigation tree from a list of
content records.

Examples
--------
List every registered partial:

>>> from agentstatic.cli import main
>>> main()  # doctest: +SKIP

Preview the second usage example of the hero partial:

>>> from agentstatic.cli import app
>>> app(["preview", "hero", "--example", "1"])  # doctest: +SKIP
"""

from __future__ import annotations

import datetime as dt
import json
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from ruamel.yaml import YAML

from .config import AgentStaticConfig, load_config
from .library import builtin_partials
from .navigation import breadcrumbs, build_navigation_tree, navigation_view
from .partials import (
    PartialRegistry,
    RenderContext,
    RenderingEngine,
    describe_schema,
    load_partials,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("agentstatic.yaml")

app = App(name="agentstatic", config=cyclopts.config.Env("AGENTSTATIC_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path,
    Parameter(help="Path to agentstatic config", env_var="AGENTSTATIC_CONFIG"),
]


def _load_settings(config: Path) -> AgentStaticConfig:
    """Return the parsed config, or defaults when the default file is absent."""
    if config == DEFAULT_CONFIG and not config.exists():
        logger.debug("No %s found; using default settings", config)
        return AgentStaticConfig()
    return load_config(config)


def build_registry(settings: AgentStaticConfig) -> PartialRegistry:
    """Register the built-in library and configured modules, then validate.

    Raises
    ------
    PartialConfigurationError
        If any definition is rejected or the dependency graph is broken.
    """
    registry = PartialRegistry(scope_prefix=settings.engine.scope_prefix)
    for name, definition in builtin_partials().items():
        registry.register(name, definition)
    for module_name in settings.partial_modules:
        load_partials(registry, module_name)
    registry.validate()
    return registry


def _dump(payload: object) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True, default=str))


@app.command(help="List registered partials with their category and description.")
def catalog(
    *,
    category: typ.Annotated[
        str | None, Parameter(help="Only list partials in this category")
    ] = None,
    config: ConfigOption = DEFAULT_CONFIG,
) -> None:
    """Print one line per partial: name, category, and description."""
    registry = build_registry(_load_settings(config))
    names = registry.by_category(category) if category else registry.names()
    for name in names:
        metadata = registry.get(name).metadata
        print(f"{name}\t{metadata.category}\t{metadata.description}")


@app.command(help="Print a partial's schema, metadata, and usage examples as JSON.")
def describe(
    name: str,
    /,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
) -> None:
    """Describe ``name`` for authoring tools.

    Raises
    ------
    NotFoundError
        If ``name`` is not registered.
    """
    registry = build_registry(_load_settings(config))
    entry = registry.entry(name)
    metadata = entry.definition.metadata
    _dump(
        {
            "name": entry.name,
            "description": metadata.description,
            "category": str(metadata.category),
            "keywords": list(metadata.keywords),
            "version": metadata.version,
            "author": metadata.author,
            "scopeClass": entry.scope_class,
            "dependencies": list(registry.resolve_dependencies(name)),
            "schema": describe_schema(entry.definition.schema),
            "examples": [
                {
                    "description": example.description,
                    "props": dict(example.props),
                    "notes": example.notes,
                }
                for example in metadata.usage_examples
            ],
        }
    )


@app.command(help="Render one usage example of a partial and print the HTML.")
def preview(
    name: str,
    /,
    *,
    example: typ.Annotated[int, Parameter(help="Index of the usage example")] = 0,
    styles: typ.Annotated[
        bool, Parameter(help="Print the scoped styles after the markup")
    ] = False,
    config: ConfigOption = DEFAULT_CONFIG,
) -> None:
    """Render usage example ``example`` of ``name``.

    Raises
    ------
    IndexError
        If ``example`` is not a valid example index.
    """
    settings = _load_settings(config)
    registry = build_registry(settings)
    examples = registry.get(name).metadata.usage_examples
    if not 0 <= example < len(examples):
        msg = f"Partial '{name}' has {len(examples)} usage examples; got index {example}."
        raise IndexError(msg)
    engine = RenderingEngine(
        registry,
        max_depth=settings.engine.max_depth,
        wrap_tag=settings.engine.wrap_tag,
    )
    result = engine.render(
        name,
        examples[example].props,
        RenderContext.from_config(
            settings.site, current_path="/", build_time=dt.datetime.now(dt.UTC)
        ),
    )
    print(result.html)
    if styles:
        print(result.styles)


def _read_records(path: Path) -> list[dict[str, typ.Any]]:
    """Load a YAML (or JSON) list of content records."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or []
    if not isinstance(loaded, list):
        msg = f"'{path}' must contain a list of content records."
        raise TypeError(msg)
    return loaded


@app.command(help="Build the navigation tree from a YAML or JSON list of records.")
def nav(
    records: Path,
    /,
    *,
    current: typ.Annotated[
        str | None,
        Parameter(help="Annotate the tree for the page at this URL path"),
    ] = None,
    include_hidden: typ.Annotated[
        bool, Parameter(help="Keep hidden pages in the annotated view")
    ] = False,
) -> None:
    """Print the tree, or the per-page view and breadcrumbs for ``current``."""
    tree = build_navigation_tree(_read_records(records))
    if current is None:
        _dump(tree.to_dicts())
        return
    _dump(
        {
            "current": current,
            "breadcrumbs": [item.to_dict() for item in breadcrumbs(tree, current)],
            "navigation": [
                view.to_dict()
                for view in navigation_view(tree, current, include_hidden=include_hidden)
            ],
        }
    )


def main() -> None:
    """Run the agentstatic CLI."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    app()


if __name__ == "__main__":
    main()


__all__ = ["app", "build_registry", "main"]
