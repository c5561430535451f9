"""Registry of partial definitions and their dependency graph.

The registry is an explicitly constructed object handed to every render
call; there is no module-level registry. It is filled during a sequential
startup phase, checked with :meth:`PartialRegistry.validate` (or
:meth:`PartialRegistry.freeze`, which also closes it to further
registration), and then only read while pages render.

Registration is all-or-nothing. Every check (name, metadata, usage examples,
styles, dependency cycles) runs before the registry is touched, so a
rejected partial leaves the registry exactly as it was.

Example
-------
>>> from agentstatic.library import builtin_partials
>>> registry = PartialRegistry()
>>> for name, definition in builtin_partials().items():
...     _ = registry.register(name, definition)
>>> registry.resolve_dependencies("card-grid")
('card',)
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import importlib
import logging
import re
import typing as typ

from agentstatic._constants import DEFAULT_SCOPE_PREFIX
from agentstatic.errors import (
    CyclicDependencyError,
    DuplicateNameError,
    InvalidCSSError,
    InvalidMetadataError,
    MissingDependencyError,
    NotFoundError,
    RegistryFrozenError,
)

from .definition import PartialCategory, PartialDefinition
from .schema import ensure_schema, validate
from .styles import (
    StylesheetSyntaxError,
    find_global_selectors,
    find_unscoped_at_rules,
    parse_stylesheet,
    scope_class_for,
    scope_stylesheet,
    serialize_stylesheet,
)

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_.-]*$")


class _Mark(enum.Enum):
    ACTIVE = "active"
    DONE = "done"


@dc.dataclass(frozen=True, slots=True)
class PartialHandle:
    """Opaque proof that a partial was registered in a specific registry."""

    name: str
    registry_id: int = dc.field(repr=False, compare=True)


@dc.dataclass(frozen=True, slots=True)
class RegisteredPartial:
    """A definition together with the values derived from it at registration."""

    name: str
    definition: PartialDefinition
    scope_class: str
    scoped_styles: str


class PartialRegistry:
    """Mapping of partial names to definitions with dependency checks."""

    def __init__(self, *, scope_prefix: str = DEFAULT_SCOPE_PREFIX) -> None:
        """Create an empty registry.

        Parameters
        ----------
        scope_prefix : str, optional
            Prefix of the CSS scope class generated for every partial.
        """
        self.scope_prefix = scope_prefix
        self._entries: dict[str, RegisteredPartial] = {}
        self._scope_owners: dict[str, str] = {}
        self._resolved: dict[str, tuple[str, ...]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        """Whether the registry has left its registration phase."""
        return self._frozen

    def register(self, name: str, definition: PartialDefinition) -> PartialHandle:
        """Add ``definition`` under ``name`` and return its handle.

        Raises
        ------
        RegistryFrozenError
            If :meth:`freeze` has already been called.
        DuplicateNameError
            If ``name`` is already registered; the first definition is kept.
        InvalidMetadataError
            If the name is malformed, the metadata is incomplete, or no usage
            example validates against the schema.
        InvalidCSSError
            If the styles cannot be parsed, contain an unscoped global
            selector or an at-rule whose contents cannot be scoped (such as
            ``@import``), or the scope class collides with another partial's.
        CyclicDependencyError
            If the new partial closes a cycle among registered partials.
        TypeError
            If ``definition`` is not a :class:`PartialDefinition` or its schema
            is not a pydantic model.
        """
        if self._frozen:
            raise RegistryFrozenError(name)
        if name in self._entries:
            raise DuplicateNameError(name)
        if not isinstance(definition, PartialDefinition):
            msg = f"Partial '{name}' must be a PartialDefinition, got {definition!r}."
            raise TypeError(msg)

        self._check_name(name)
        self._check_metadata(name, definition)
        entry = self._scope(name, definition)
        graph = self._graph()
        graph[name] = definition.dependencies
        _depth_first(graph, name, on_missing=None)

        self._entries[name] = entry
        self._scope_owners[entry.scope_class] = name
        self._resolved.clear()
        logger.debug(
            "Registered partial %s (%s, depends on %s)",
            name,
            entry.scope_class,
            ", ".join(definition.dependencies) or "nothing",
        )
        return PartialHandle(name=name, registry_id=id(self))

    def _check_name(self, name: str) -> None:
        if not isinstance(name, str) or not NAME_PATTERN.match(name):
            msg = "names must start with a letter and use letters, digits, '.', '_' or '-'"
            raise InvalidMetadataError(str(name), msg)

    def _check_metadata(self, name: str, definition: PartialDefinition) -> None:
        ensure_schema(definition.schema)
        if not callable(definition.render):
            msg = f"Partial '{name}' render must be callable."
            raise TypeError(msg)
        metadata = definition.metadata
        if not isinstance(metadata.category, PartialCategory):
            allowed = ", ".join(category.value for category in PartialCategory)
            raise InvalidMetadataError(
                name, f"unknown category '{metadata.category}' (expected one of {allowed})"
            )
        if not metadata.description.strip():
            raise InvalidMetadataError(name, "a description is required")
        if not metadata.usage_examples:
            raise InvalidMetadataError(name, "at least one usage example is required")
        first_failure = None
        for example in metadata.usage_examples:
            result = validate(definition.schema, example.props)
            if result.ok:
                return
            first_failure = first_failure or result
        raise InvalidMetadataError(
            name,
            "no usage example validates against the schema",
            first_failure.issues if first_failure else (),
        )

    def _scope(self, name: str, definition: PartialDefinition) -> RegisteredPartial:
        scope_class = scope_class_for(name, self.scope_prefix)
        owner = self._scope_owners.get(scope_class)
        if owner is not None:
            raise InvalidCSSError(
                name, None, f"scope class '{scope_class}' is already used by '{owner}'"
            )
        try:
            rules = parse_stylesheet(definition.styles)
        except StylesheetSyntaxError as exc:
            raise InvalidCSSError(name, None, str(exc)) from exc
        offenders = find_global_selectors(rules)
        if offenders:
            selector = offenders[0]
            raise InvalidCSSError(
                name, selector, f"selector '{selector}' is not scoped to the partial"
            )
        unscoped = find_unscoped_at_rules(rules)
        if unscoped:
            at_rule = unscoped[0]
            raise InvalidCSSError(
                name, at_rule, f"at-rule '{at_rule}' cannot be scoped to the partial"
            )
        scoped = serialize_stylesheet(scope_stylesheet(rules, scope_class))
        return RegisteredPartial(
            name=name,
            definition=definition,
            scope_class=scope_class,
            scoped_styles=scoped,
        )

    def _graph(self) -> dict[str, tuple[str, ...]]:
        return {
            name: tuple(entry.definition.dependencies)
            for name, entry in self._entries.items()
        }

    def resolve_dependencies(self, partial: str | PartialHandle) -> tuple[str, ...]:
        """Return the transitive dependencies of ``partial``.

        Dependencies are listed depth-first in declaration order, each one
        after the partials it depends on itself. ``partial`` is not included.

        Raises
        ------
        NotFoundError
            If ``partial`` is not registered.
        MissingDependencyError
            If any partial in the closure declares an unregistered dependency.
        CyclicDependencyError
            If the closure contains a cycle.
        """
        name = self._name_of(partial)
        cached = self._resolved.get(name)
        if cached is not None:
            return cached
        resolved = tuple(_depth_first(self._graph(), name, on_missing=MissingDependencyError))
        self._resolved[name] = resolved
        return resolved

    def validate(self) -> None:
        """Check that every declared dependency exists and the graph is acyclic."""
        for name in sorted(self._entries):
            self.resolve_dependencies(name)

    def freeze(self) -> None:
        """Validate the registry and reject any further registration."""
        self.validate()
        self._frozen = True
        logger.debug("Froze partial registry with %d partials", len(self._entries))

    def get(self, partial: str | PartialHandle) -> PartialDefinition:
        """Return the definition registered for ``partial``."""
        return self.entry(partial).definition

    def entry(self, partial: str | PartialHandle) -> RegisteredPartial:
        """Return the registration record for ``partial``."""
        return self._entries[self._name_of(partial)]

    def lookup(self, name: str) -> PartialHandle:
        """Resolve ``name`` to a handle, failing if it is not registered."""
        resolved = self._name_of(name)
        return PartialHandle(name=resolved, registry_id=id(self))

    def scope_class(self, partial: str | PartialHandle) -> str:
        """Return the CSS scope class of ``partial``."""
        return self.entry(partial).scope_class

    def scoped_styles(self, partial: str | PartialHandle) -> str:
        """Return the scoped CSS of ``partial``."""
        return self.entry(partial).scoped_styles

    def names(self) -> tuple[str, ...]:
        """Return every registered name in sorted order."""
        return tuple(sorted(self._entries))

    def by_category(self, category: PartialCategory | str) -> tuple[str, ...]:
        """Return the names of partials in ``category``."""
        wanted = PartialCategory(category)
        return tuple(
            name
            for name in self.names()
            if self._entries[name].definition.metadata.category == wanted
        )

    def search(self, keyword: str) -> tuple[str, ...]:
        """Return partials whose name, description, or keywords mention ``keyword``."""
        needle = keyword.strip().lower()
        matches: list[str] = []
        for name in self.names():
            metadata = self._entries[name].definition.metadata
            haystack = [name, metadata.description, *metadata.keywords]
            if any(needle in text.lower() for text in haystack):
                matches.append(name)
        return tuple(matches)

    def _name_of(self, partial: str | PartialHandle) -> str:
        match partial:
            case PartialHandle(name=name, registry_id=registry_id):
                if registry_id != id(self) or name not in self._entries:
                    raise NotFoundError(name)
                return name
            case str() as name if name in self._entries:
                return name
            case _:
                raise NotFoundError(str(partial))

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self.names())


def _depth_first(
    graph: cabc.Mapping[str, cabc.Sequence[str]],
    start: str,
    *,
    on_missing: typ.Callable[[str, str], Exception] | None,
) -> list[str]:
    """Walk ``graph`` from ``start`` with three-colour marking.

    Returns the reachable nodes in post-order, excluding ``start``. Unknown
    nodes raise the error built by ``on_missing``, or are skipped when it is
    ``None``. Reaching a node that is still on the stack raises
    :class:`CyclicDependencyError` with the stack slice that forms the cycle.
    """
    marks: dict[str, _Mark] = {}
    stack: list[str] = []
    order: list[str] = []

    def _visit(node: str) -> None:
        marks[node] = _Mark.ACTIVE
        stack.append(node)
        for dependency in graph[node]:
            if dependency not in graph:
                if on_missing is None:
                    continue
                raise on_missing(node, dependency)
            mark = marks.get(dependency)
            if mark is _Mark.ACTIVE:
                cycle = [*stack[stack.index(dependency) :], dependency]
                raise CyclicDependencyError(cycle)
            if mark is None:
                _visit(dependency)
        stack.pop()
        marks[node] = _Mark.DONE
        if node != start:
            order.append(node)

    _visit(start)
    return order


def load_partials(registry: PartialRegistry, module_name: str) -> list[PartialHandle]:
    """Import ``module_name`` and register every entry of its ``PARTIALS`` mapping.

    Raises
    ------
    ModuleNotFoundError
        If the module cannot be imported.
    TypeError
        If the module does not expose a ``PARTIALS`` mapping.
    """
    module = importlib.import_module(module_name)
    partials = getattr(module, "PARTIALS", None)
    if not isinstance(partials, cabc.Mapping):
        msg = f"Module '{module_name}' must define a PARTIALS mapping."
        raise TypeError(msg)
    handles = [registry.register(name, definition) for name, definition in partials.items()]
    logger.info("Loaded %d partials from %s", len(handles), module_name)
    return handles


__all__ = [
    "PartialHandle",
    "PartialRegistry",
    "RegisteredPartial",
    "load_partials",
]
