"""Render registered partials into markup, styles, and scripts.

:class:`RenderingEngine` turns ``(partial, raw props, context)`` into a
:class:`RenderResult`. Each call validates props against the partial's
schema before anything is rendered, hands the render function a fresh
:class:`~agentstatic.partials.helpers.TemplateHelpers`, and collects the
scoped CSS and scripts of the partial and of every dependency it declares.

Nested rendering is synchronous. A :class:`_RenderFrame` travels down the
call chain carrying the current depth and the names already entered, so the
engine can refuse undeclared nested partials and stop runaway composition
at ``max_depth``.

Rendering is a pure function of the registry, the partial, its props, and
the context: the same inputs always produce byte-identical output, and a
frozen registry may be shared by concurrent renders.

Example
-------
>>> from agentstatic.library import default_registry
>>> engine = RenderingEngine(default_registry())
>>> result = engine.render("hero", {"title": "Welcome"})
>>> result.html.startswith('<div class="as-hero">')
True
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import hashlib
import json
import typing as typ

from markupsafe import Markup

from agentstatic._constants import DEFAULT_MAX_DEPTH, DEFAULT_WRAP_TAG
from agentstatic.errors import (
    MaxDepthExceededError,
    PropsValidationError,
    UndeclaredDependencyError,
)

from .helpers import TemplateHelpers
from .schema import validate

if typ.TYPE_CHECKING:
    from pydantic import BaseModel

    from agentstatic.config import SiteSettings

    from .registry import PartialHandle, PartialRegistry

HelpersFactory = typ.Callable[..., TemplateHelpers]


@dc.dataclass(frozen=True, slots=True)
class RenderContext:
    """Page-level values shared by every partial rendered for one page.

    Attributes
    ----------
    current_path : str
        URL path of the page being rendered.
    site_name : str
        Human-readable site name.
    base_url : str
        Prefix applied by ``helpers.url``.
    is_development : bool
        Whether the render happens in a development build.
    build_time : datetime, optional
        Reference time for relative dates. Renders stay byte-identical only
        when the caller fixes it; ``helpers.time_ago`` refuses to run without it.
    locale : str, optional
        Locale hint for partials.
    theme : str, optional
        Theme name hint for partials.
    """

    current_path: str = "/"
    site_name: str = ""
    base_url: str = ""
    is_development: bool = False
    build_time: dt.datetime | None = None
    locale: str | None = None
    theme: str | None = None

    @classmethod
    def from_config(
        cls,
        site: SiteSettings,
        *,
        current_path: str = "/",
        build_time: dt.datetime | None = None,
    ) -> RenderContext:
        """Build a context for ``current_path`` from configured site settings."""
        return cls(
            current_path=current_path,
            site_name=site.name,
            base_url=site.base_url,
            is_development=site.is_development,
            build_time=build_time,
            locale=site.locale,
            theme=site.theme,
        )


@dc.dataclass(frozen=True, slots=True)
class RenderResult:
    """Output of a render call.

    Attributes
    ----------
    name : str
        Partial that was rendered.
    html : str
        Rendered markup, wrapped in the scope element when wrapping is on.
    styles : str
        Scoped CSS of the partial followed by that of each dependency.
    scripts : tuple[str, ...]
        Script passthroughs in the same order; partials without one are skipped.
    scope_classes : tuple[str, ...]
        Scope classes of the partial and its dependencies.
    dependencies : tuple[str, ...]
        Resolved transitive dependencies.
    props_hash : str
        SHA-256 of the validated props, for caching layers.
    """

    name: str
    html: str
    styles: str
    scripts: tuple[str, ...]
    scope_classes: tuple[str, ...]
    dependencies: tuple[str, ...]
    props_hash: str


@dc.dataclass(frozen=True, slots=True)
class _RenderFrame:
    """Position of a render call within a nested composition."""

    chain: tuple[str, ...]
    context: RenderContext

    @property
    def depth(self) -> int:
        return len(self.chain) - 1

    def enter(self, name: str) -> _RenderFrame:
        return _RenderFrame(chain=(*self.chain, name), context=self.context)


class RenderingEngine:
    """Validate props and render partials from a registry."""

    def __init__(
        self,
        registry: PartialRegistry,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        wrap_tag: str | None = DEFAULT_WRAP_TAG,
        helpers_factory: HelpersFactory = TemplateHelpers,
    ) -> None:
        """Initialize the engine.

        Parameters
        ----------
        registry : PartialRegistry
            Registry to render from; treated as read-only.
        max_depth : int, optional
            Deepest allowed nesting of ``render_partial`` calls. The top-level
            partial is depth 0.
        wrap_tag : str or None, optional
            Element wrapped around each partial's markup carrying its scope
            class; ``None`` leaves the markup untouched.
        helpers_factory : callable, optional
            Builds the helper bundle; receives ``context``, ``render_partial``,
            ``has_partial`` and ``scope_class`` keyword arguments.
        """
        if max_depth < 0:
            msg = "max_depth must not be negative"
            raise ValueError(msg)
        self.registry = registry
        self.max_depth = max_depth
        self.wrap_tag = wrap_tag
        self.helpers_factory = helpers_factory

    def render(
        self,
        partial: str | PartialHandle,
        props: cabc.Mapping[str, typ.Any] | BaseModel | None = None,
        context: RenderContext | None = None,
    ) -> RenderResult:
        """Render ``partial`` with ``props`` for the page described by ``context``.

        Raises
        ------
        NotFoundError
            If ``partial`` is not registered.
        PropsValidationError
            If ``props`` (or the props of a nested render) fail validation.
        UndeclaredDependencyError
            If the partial renders a partial outside its dependency closure.
        MaxDepthExceededError
            If nested rendering goes deeper than ``max_depth``.
        MissingDependencyError, CyclicDependencyError
            If the partial's dependency graph is broken.
        """
        entry = self.registry.entry(partial)
        frame = _RenderFrame(chain=(entry.name,), context=context or RenderContext())
        html, validated = self._render_frame(entry.name, props, frame)
        dependencies = self.registry.resolve_dependencies(entry.name)
        involved = (entry.name, *dependencies)
        scripts = tuple(
            script
            for name in involved
            if (script := self.registry.get(name).script)
        )
        return RenderResult(
            name=entry.name,
            html=html,
            styles="\n".join(
                styles for name in involved if (styles := self.registry.scoped_styles(name))
            ),
            scripts=scripts,
            scope_classes=tuple(self.registry.scope_class(name) for name in involved),
            dependencies=dependencies,
            props_hash=_props_hash(validated),
        )

    def render_examples(self, partial: str | PartialHandle) -> list[RenderResult]:
        """Render every usage example of ``partial`` whose props validate."""
        definition = self.registry.get(partial)
        return [
            self.render(partial, example.props)
            for example in definition.metadata.usage_examples
            if validate(definition.schema, example.props).ok
        ]

    def _render_frame(
        self,
        name: str,
        raw_props: cabc.Mapping[str, typ.Any] | BaseModel | None,
        frame: _RenderFrame,
    ) -> tuple[str, BaseModel]:
        if frame.depth > self.max_depth:
            raise MaxDepthExceededError(self.max_depth, frame.chain)
        entry = self.registry.entry(name)
        allowed = self.registry.resolve_dependencies(name)
        result = validate(entry.definition.schema, {} if raw_props is None else raw_props)
        if not result.ok:
            raise PropsValidationError(name, result.issues)

        def _render_nested(
            child: str, child_props: cabc.Mapping[str, typ.Any] | None = None
        ) -> Markup:
            if child not in allowed:
                raise UndeclaredDependencyError(name, child)
            html, _ = self._render_frame(child, child_props, frame.enter(child))
            return Markup(html)

        helpers = self.helpers_factory(
            context=frame.context,
            render_partial=_render_nested,
            has_partial=self.registry.__contains__,
            scope_class=entry.scope_class,
        )
        html = str(entry.definition.render(result.data, helpers)).strip()
        return self._wrap(html, entry.scope_class), result.data

    def _wrap(self, html: str, scope_class: str) -> str:
        if not self.wrap_tag:
            return html
        return f'<{self.wrap_tag} class="{scope_class}">{html}</{self.wrap_tag}>'


def _props_hash(props: BaseModel) -> str:
    payload = json.dumps(props.model_dump(mode="json"), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def render(
    registry: PartialRegistry,
    partial: str | PartialHandle,
    props: cabc.Mapping[str, typ.Any] | BaseModel | None = None,
    context: RenderContext | None = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    wrap_tag: str | None = DEFAULT_WRAP_TAG,
) -> RenderResult:
    """Render ``partial`` from ``registry`` with a one-off engine."""
    engine = RenderingEngine(registry, max_depth=max_depth, wrap_tag=wrap_tag)
    return engine.render(partial, props, context)


__all__ = [
    "RenderContext",
    "RenderResult",
    "RenderingEngine",
    "render",
]
