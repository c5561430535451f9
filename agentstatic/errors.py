"""Error taxonomy shared by the partial engine and the navigation builder.

Errors fall into three families, one per phase:

* :class:`PartialConfigurationError` is raised while partials are registered
  and is fatal to startup. The registry is left exactly as it was before the
  failing call.
* :class:`PartialRenderError` is raised while rendering. Only
  :class:`PropsValidationError` is meant to be recovered from per call; the
  structural errors point at a broken composition.
* :class:`NavigationBuildError` aborts a navigation tree build. No partial
  tree is ever returned.

Every error keeps the offending names, paths, or cycles as attributes so
callers can act on them without re-deriving state.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .partials.schema import Issue


class AgentStaticError(Exception):
    """Base class for every error raised by agentstatic."""


class PartialConfigurationError(AgentStaticError, ValueError):
    """Raised when a partial or the registry as a whole is misconfigured."""


class DuplicateNameError(PartialConfigurationError):
    """Raised when a partial name is registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        msg = f"Partial '{name}' is already registered."
        super().__init__(msg)


class InvalidMetadataError(PartialConfigurationError):
    """Raised when partial metadata is incomplete or its examples do not validate."""

    def __init__(
        self, name: str, reason: str, issues: cabc.Sequence[Issue] = ()
    ) -> None:
        self.name = name
        self.reason = reason
        self.issues = tuple(issues)
        msg = f"Partial '{name}' has invalid metadata: {reason}"
        super().__init__(msg)


class InvalidCSSError(PartialConfigurationError):
    """Raised when partial styles cannot be scoped safely."""

    def __init__(self, name: str, selector: str | None, reason: str) -> None:
        self.name = name
        self.selector = selector
        self.reason = reason
        msg = f"Partial '{name}' has invalid styles: {reason}"
        super().__init__(msg)


class MissingDependencyError(PartialConfigurationError):
    """Raised when a declared dependency is not registered."""

    def __init__(self, name: str, missing: str) -> None:
        self.name = name
        self.missing = missing
        msg = f"Partial '{name}' depends on '{missing}', which is not registered."
        super().__init__(msg)


class CyclicDependencyError(PartialConfigurationError):
    """Raised when partial dependencies form a cycle."""

    def __init__(self, cycle: cabc.Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        msg = f"Partial dependency cycle detected: {' -> '.join(self.cycle)}"
        super().__init__(msg)


class RegistryFrozenError(PartialConfigurationError):
    """Raised when registering into a registry that has left its startup phase."""

    def __init__(self, name: str) -> None:
        self.name = name
        msg = f"Cannot register '{name}': the registry is frozen."
        super().__init__(msg)


class PartialRenderError(AgentStaticError):
    """Base class for errors raised while rendering a partial."""


class NotFoundError(PartialRenderError, KeyError):
    """Raised when a partial name does not resolve to a registered definition."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Partial '{self.name}' is not registered."


class PropsValidationError(PartialRenderError, ValueError):
    """Raised when props do not satisfy a partial's schema."""

    def __init__(self, name: str, issues: cabc.Sequence[Issue]) -> None:
        self.name = name
        self.issues = tuple(issues)
        details = "; ".join(f"{issue.location}: {issue.message}" for issue in self.issues)
        msg = f"Invalid props for partial '{name}': {details}"
        super().__init__(msg)


class UndeclaredDependencyError(PartialRenderError):
    """Raised when a partial renders another partial it never declared."""

    def __init__(self, name: str, requested: str) -> None:
        self.name = name
        self.requested = requested
        msg = (
            f"Partial '{name}' tried to render '{requested}' without declaring it "
            "as a dependency."
        )
        super().__init__(msg)


class MaxDepthExceededError(PartialRenderError, RecursionError):
    """Raised when nested partial rendering goes deeper than allowed."""

    def __init__(self, max_depth: int, chain: cabc.Sequence[str]) -> None:
        self.max_depth = max_depth
        self.chain = tuple(chain)
        msg = (
            f"Partial nesting exceeded the maximum depth of {max_depth}: "
            f"{' -> '.join(self.chain)}"
        )
        super().__init__(msg)


class NavigationBuildError(AgentStaticError, ValueError):
    """Base class for errors that abort a navigation tree build."""


class InvalidContentRecordError(NavigationBuildError):
    """Raised when a content record payload is malformed."""

    def __init__(self, file_path: str | None, reason: str) -> None:
        self.file_path = file_path
        self.reason = reason
        label = file_path or "<unknown>"
        msg = f"Content record '{label}' is invalid: {reason}"
        super().__init__(msg)


class DuplicateNodeError(NavigationBuildError):
    """Raised when two content records map to the same node id or url path."""

    def __init__(self, key: str, field: str) -> None:
        self.key = key
        self.field = field
        msg = f"Duplicate navigation {field} '{key}'."
        super().__init__(msg)


class DanglingParentError(NavigationBuildError):
    """Raised when a record declares a parent that was not discovered."""

    def __init__(self, node: str, declared_parent: str) -> None:
        self.node = node
        self.declared_parent = declared_parent
        msg = (
            f"Navigation node '{node}' declares parent '{declared_parent}', "
            "which does not exist."
        )
        super().__init__(msg)


class CyclicHierarchyError(NavigationBuildError):
    """Raised when explicit parent declarations make a node its own ancestor."""

    def __init__(self, cycle: cabc.Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        msg = f"Navigation hierarchy cycle detected: {' -> '.join(self.cycle)}"
        super().__init__(msg)


__all__ = [
    "AgentStaticError",
    "CyclicDependencyError",
    "CyclicHierarchyError",
    "DanglingParentError",
    "DuplicateNameError",
    "DuplicateNodeError",
    "InvalidCSSError",
    "InvalidContentRecordError",
    "InvalidMetadataError",
    "MaxDepthExceededError",
    "MissingDependencyError",
    "NavigationBuildError",
    "NotFoundError",
    "PartialConfigurationError",
    "PartialRenderError",
    "PropsValidationError",
    "RegistryFrozenError",
    "UndeclaredDependencyError",
]
