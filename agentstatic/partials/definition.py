"""Immutable value types describing a partial.

A :class:`PartialDefinition` bundles everything the engine needs to render a
component: the pydantic schema for its props, a pure render function, the
CSS to scope, an optional script passed through untouched, the names of the
partials it may render, and metadata for tooling.

Example
-------
>>> from pydantic import Field
>>> from agentstatic.partials.schema import PartialProps
>>> class BadgeProps(PartialProps):
...     label: str = Field(description="Badge text")
>>> badge = PartialDefinition(
...     schema=BadgeProps,
...     render=lambda props, h: f"<span class='badge'>{h.escape(props.label)}</span>",
...     styles=".badge { font-weight: 600; }",
...     metadata=PartialMetadata(
...         description="Inline status badge",
...         category="utility",
...         keywords=["badge"],
...         usage_examples=[UsageExample("New badge", {"label": "New"})],
...     ),
... )
>>> badge.metadata.category
<PartialCategory.UTILITY: 'utility'>
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import types
import typing as typ

if typ.TYPE_CHECKING:
    from pydantic import BaseModel

    from .helpers import TemplateHelpers

RenderFunction = typ.Callable[[typ.Any, "TemplateHelpers"], str]


class PartialCategory(enum.StrEnum):
    """Organisational category of a partial."""

    LAYOUT = "layout"
    CONTENT = "content"
    MEDIA = "media"
    NAVIGATION = "navigation"
    INTERACTIVE = "interactive"
    UTILITY = "utility"


@dc.dataclass(frozen=True, slots=True)
class UsageExample:
    """A documented set of props showing how to use a partial.

    Attributes
    ----------
    description : str
        What the example demonstrates.
    props : Mapping[str, Any]
        Raw props; at least one example per partial must validate.
    notes : str, optional
        Extra guidance for readers.
    """

    description: str
    props: cabc.Mapping[str, typ.Any]
    notes: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "props", types.MappingProxyType(dict(self.props)))


@dc.dataclass(frozen=True, slots=True)
class PartialMetadata:
    """Descriptive metadata used by registries and tooling."""

    description: str
    category: PartialCategory | str
    keywords: cabc.Sequence[str] = ()
    usage_examples: cabc.Sequence[UsageExample] = ()
    version: str | None = None
    author: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "usage_examples", tuple(self.usage_examples))
        if self.category in PartialCategory.__members__.values():
            object.__setattr__(self, "category", PartialCategory(self.category))


@dc.dataclass(frozen=True, slots=True)
class PartialDefinition:
    """A complete, self-contained template component.

    Attributes
    ----------
    schema : type[BaseModel]
        Data contract for the props.
    render : RenderFunction
        Pure function ``(props, helpers) -> str``; must not perform I/O.
    styles : str
        CSS scoped to the partial at registration.
    metadata : PartialMetadata
        Description, category, keywords, and usage examples.
    script : str, optional
        Progressive-enhancement code, passed through untouched.
    dependencies : Sequence[str]
        Names of partials ``render`` may invoke via ``helpers.render_partial``.
    """

    schema: type[BaseModel]
    render: RenderFunction
    styles: str
    metadata: PartialMetadata
    script: str | None = None
    dependencies: cabc.Sequence[str] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", tuple(self.dependencies))


__all__ = [
    "PartialCategory",
    "PartialDefinition",
    "PartialMetadata",
    "RenderFunction",
    "UsageExample",
]
