"""Per-page views derived from a shared navigation tree.

Nothing here mutates the tree. "Active" state is computed into fresh,
render-local :class:`NavigationView` values, so one tree can serve every
page of a build, including pages rendered concurrently.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from agentstatic.partials.helpers import normalize_url_path

if typ.TYPE_CHECKING:
    from .models import NavigationNode, NavigationTree


@dc.dataclass(frozen=True, slots=True)
class BreadcrumbItem:
    """One step of a breadcrumb trail."""

    title: str
    url: str
    current: bool = False

    def to_dict(self) -> dict[str, typ.Any]:
        """Convert to dictionary for partial props or JSON."""
        return {"title": self.title, "url": self.url, "current": self.current}


@dc.dataclass(frozen=True, slots=True)
class NavigationView:
    """A node annotated for one page render.

    Attributes
    ----------
    node : NavigationNode
        The shared node this view refers to.
    active : bool
        Whether the node is the page being rendered.
    in_trail : bool
        Whether the node is the current page or one of its ancestors.
    children : tuple[NavigationView, ...]
        Views of the node's visible children.
    """

    node: NavigationNode
    active: bool
    in_trail: bool
    children: tuple[NavigationView, ...]

    def to_dict(self) -> dict[str, typ.Any]:
        """Convert to the link shape accepted by the ``navigation`` partial."""
        return {
            "title": self.node.title,
            "url": self.node.url_path,
            "active": self.active,
            "in_trail": self.in_trail,
            "children": [child.to_dict() for child in self.children],
        }


def active_trail(tree: NavigationTree, current_path: str) -> tuple[NavigationNode, ...]:
    """Return the nodes from a root down to the node at ``current_path``.

    Returns an empty tuple when no node is published at ``current_path``.
    Hidden nodes are included so the trail is never broken.
    """
    node = tree.find_by_path(current_path)
    trail: list[NavigationNode] = []
    while node is not None:
        trail.append(node)
        node = tree.parent_of(node)
    trail.reverse()
    return tuple(trail)


def breadcrumbs(tree: NavigationTree, current_path: str) -> tuple[BreadcrumbItem, ...]:
    """Return the active trail as display-ready breadcrumb items."""
    trail = active_trail(tree, current_path)
    last = len(trail) - 1
    return tuple(
        BreadcrumbItem(title=node.title, url=node.url_path, current=index == last)
        for index, node in enumerate(trail)
    )


def visible_children(node: NavigationNode) -> tuple[NavigationNode, ...]:
    """Return the children of ``node`` that are not hidden."""
    return tuple(child for child in node.children if not child.hidden)


def navigation_view(
    tree: NavigationTree, current_path: str, *, include_hidden: bool = False
) -> tuple[NavigationView, ...]:
    """Annotate the tree for the page at ``current_path``.

    Parameters
    ----------
    tree : NavigationTree
        Shared tree for the build.
    current_path : str
        URL path of the page being rendered.
    include_hidden : bool, optional
        Keep hidden nodes in the view; they are dropped by default.
    """
    current = normalize_url_path(current_path)
    trail_ids = {node.id for node in active_trail(tree, current)}

    def _view(node: NavigationNode) -> NavigationView:
        children = node.children if include_hidden else visible_children(node)
        return NavigationView(
            node=node,
            active=node.url_path == current,
            in_trail=node.id in trail_ids,
            children=tuple(_view(child) for child in children),
        )

    roots = tree.root if include_hidden else tuple(n for n in tree.root if not n.hidden)
    return tuple(_view(node) for node in roots)


__all__ = [
    "BreadcrumbItem",
    "NavigationView",
    "active_trail",
    "breadcrumbs",
    "navigation_view",
    "visible_children",
]
