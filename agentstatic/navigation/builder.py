"""Build the navigation tree from discovered content records.

The builder infers each page's parent from its URL path (the nearest
discovered ancestor path), lets an explicit ``parent`` override that, checks
the resulting hierarchy for cycles, numbers siblings, and finally freezes
the nodes leaves-first into a :class:`NavigationTree`.

Every failure aborts the build before any node is frozen, so callers either
get a structurally complete tree or an error that names the offending node.

Example
-------
>>> from agentstatic.navigation import ContentRecord
>>> tree = build_navigation_tree(
...     [
...         ContentRecord("a.md", "/a", "A"),
...         ContentRecord("a/b.md", "/a/b", "B"),
...         ContentRecord("a/b/c.md", "/a/b/c", "C"),
...     ]
... )
>>> [(node.url_path, node.depth) for node in tree.walk()]
[('/a', 0), ('/a/b', 1), ('/a/b/c', 2)]
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

from agentstatic._constants import HOME_PATH
from agentstatic.errors import CyclicHierarchyError, DanglingParentError, DuplicateNodeError
from agentstatic.partials.helpers import normalize_url_path

from .models import ContentRecord, NavigationNode, NavigationTree, Order, normalize_node_id

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class _Entry:
    """Working state for one record while the tree is assembled."""

    node_id: str
    url_path: str
    record: ContentRecord
    parent_id: str | None = None
    order: Order = 0


def build_navigation_tree(
    records: cabc.Iterable[ContentRecord | cabc.Mapping[str, typ.Any]],
) -> NavigationTree:
    """Build an immutable navigation tree from ``records``.

    Parameters
    ----------
    records : Iterable[ContentRecord | Mapping]
        Discovered content; mappings go through
        :meth:`ContentRecord.from_mapping`.

    Returns
    -------
    NavigationTree
        Tree whose roots and children are ordered by ``order`` then title.

    Raises
    ------
    InvalidContentRecordError
        If a mapping cannot be turned into a record.
    DuplicateNodeError
        If two records share a file path or a URL path.
    DanglingParentError
        If a record declares a parent URL that no record publishes.
    CyclicHierarchyError
        If explicit parents make a node its own ancestor.
    """
    entries = _index_entries(records)
    by_url = {entry.url_path: entry for entry in entries.values()}

    for entry in entries.values():
        entry.parent_id = _resolve_parent(entry, by_url)
    _check_acyclic(entries)

    children: dict[str | None, list[_Entry]] = {}
    for entry in entries.values():
        children.setdefault(entry.parent_id, []).append(entry)
    ordered = {parent: _order_siblings(siblings) for parent, siblings in children.items()}

    def _freeze(entry: _Entry, depth: int) -> NavigationNode:
        record = entry.record
        return NavigationNode(
            id=entry.node_id,
            title=record.title,
            url_path=entry.url_path,
            order=entry.order,
            depth=depth,
            parent_id=entry.parent_id,
            children=tuple(_freeze(child, depth + 1) for child in ordered.get(entry.node_id, ())),
            hidden=record.hidden,
            last_modified=record.last_modified,
            file_path=record.file_path,
        )

    tree = NavigationTree(_freeze(entry, 0) for entry in ordered.get(None, ()))
    logger.debug("Built navigation tree with %d nodes and %d roots", len(tree), len(tree.root))
    return tree


def _index_entries(
    records: cabc.Iterable[ContentRecord | cabc.Mapping[str, typ.Any]],
) -> dict[str, _Entry]:
    entries: dict[str, _Entry] = {}
    seen_urls: set[str] = set()
    for raw in records:
        record = raw if isinstance(raw, ContentRecord) else ContentRecord.from_mapping(raw)
        node_id = normalize_node_id(record.file_path)
        url_path = normalize_url_path(record.url_path)
        if node_id in entries:
            raise DuplicateNodeError(node_id, "id")
        if url_path in seen_urls:
            raise DuplicateNodeError(url_path, "url path")
        seen_urls.add(url_path)
        entries[node_id] = _Entry(node_id=node_id, url_path=url_path, record=record)
    return entries


def _resolve_parent(entry: _Entry, by_url: cabc.Mapping[str, _Entry]) -> str | None:
    """Return the parent id: the declared parent, else the nearest ancestor path."""
    declared = entry.record.parent
    if declared is not None:
        target = by_url.get(normalize_url_path(declared))
        if target is None:
            raise DanglingParentError(entry.node_id, declared)
        return target.node_id

    if entry.url_path == HOME_PATH:
        return None
    segments = entry.url_path.strip("/").split("/")
    for end in range(len(segments) - 1, 0, -1):
        candidate = by_url.get("/" + "/".join(segments[:end]))
        if candidate is not None:
            return candidate.node_id
    return None


def _check_acyclic(entries: cabc.Mapping[str, _Entry]) -> None:
    """Follow parent links from every node; revisiting the current path is a cycle."""
    settled: set[str] = set()
    for start in entries:
        path: list[str] = []
        on_path: set[str] = set()
        current: str | None = start
        while current is not None and current not in settled:
            if current in on_path:
                cycle = [*path[path.index(current) :], current]
                raise CyclicHierarchyError(cycle)
            path.append(current)
            on_path.add(current)
            current = entries[current].parent_id
        settled.update(path)


def _order_siblings(siblings: list[_Entry]) -> list[_Entry]:
    """Assign ``order`` to each sibling and return them sorted.

    Explicit orders are kept. The remaining siblings are ranked by title and
    numbered after the largest explicit order (or from 1), so re-running the
    build on unchanged content yields the same numbers.
    """
    explicit = [entry for entry in siblings if entry.record.order is not None]
    implicit = sorted(
        (entry for entry in siblings if entry.record.order is None),
        key=lambda entry: (entry.record.title.casefold(), entry.record.title, entry.node_id),
    )
    for entry in explicit:
        entry.order = typ.cast("Order", entry.record.order)
    base = max([0, *(entry.order for entry in explicit)])
    for rank, entry in enumerate(implicit, start=1):
        entry.order = base + rank
    return sorted(
        [*explicit, *implicit],
        key=lambda entry: (entry.order, entry.record.title, entry.node_id),
    )


__all__ = ["build_navigation_tree"]
