"""Content records and the immutable navigation tree built from them.

A :class:`ContentRecord` is what an external discovery step knows about one
content file. The builder turns a list of them into :class:`NavigationNode`
values, frozen leaves-first so each parent holds a tuple of finished
children. :class:`NavigationTree` owns the root nodes and keeps a read-only
id index for lookups; it is never mutated after construction and is safe to
share between concurrent page renders.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import math
import numbers
import types
import typing as typ
from pathlib import PurePosixPath

from agentstatic.errors import InvalidContentRecordError
from agentstatic.partials.helpers import normalize_url_path

Order = int | float


def normalize_node_id(file_path: str) -> str:
    """Return the stable node id for ``file_path``.

    >>> normalize_node_id("./content/blog/post.md")
    'content/blog/post.md'
    """
    text = file_path.strip().replace("\\", "/")
    parts = [part for part in PurePosixPath(text).parts if part not in ("/", ".")]
    return "/".join(parts)


@dc.dataclass(frozen=True, slots=True)
class ContentRecord:
    """A discovered content file as seen by the navigation builder.

    Attributes
    ----------
    file_path : str
        Source path; the node id is derived from it.
    url_path : str
        Public URL path of the page.
    title : str
        Display title.
    last_modified : datetime, optional
        Modification time reported by discovery.
    order : int or float, optional
        Explicit sort position among siblings; lower sorts first.
    hidden : bool
        Keep the page in the tree but out of visible listings.
    parent : str, optional
        URL path of an explicit parent, overriding the path-derived one.
    """

    file_path: str
    url_path: str
    title: str
    last_modified: dt.datetime | None = None
    order: Order | None = None
    hidden: bool = False
    parent: str | None = None

    @classmethod
    def from_mapping(cls, payload: cabc.Mapping[str, typ.Any]) -> ContentRecord:
        """Build a record from frontmatter-style data.

        Accepts ``filePath``/``file_path``, ``urlPath``/``url_path``/``path``
        and ``lastModified``/``last_modified`` spellings.

        Raises
        ------
        InvalidContentRecordError
            If required keys are missing or values have the wrong type.
        """
        file_path = _first(payload, "file_path", "filePath")
        url_path = _first(payload, "url_path", "urlPath", "path")
        if file_path is None and url_path is not None:
            file_path = str(url_path)
        if not file_path or url_path is None:
            raise InvalidContentRecordError(
                _optional_str(file_path), "both a file path and a url path are required"
            )
        title = payload.get("title")
        if title is None:
            title = PurePosixPath(normalize_url_path(str(url_path))).name or "Home"
        return cls(
            file_path=str(file_path),
            url_path=str(url_path),
            title=str(title),
            last_modified=_parse_timestamp(
                _first(payload, "last_modified", "lastModified"), str(file_path)
            ),
            order=_parse_order(payload.get("order"), str(file_path)),
            hidden=_parse_hidden(payload.get("hidden"), str(file_path)),
            parent=_optional_str(payload.get("parent")),
        )


def _first(payload: cabc.Mapping[str, typ.Any], *keys: str) -> typ.Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _optional_str(value: object | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_order(value: object, file_path: str) -> Order | None:
    match value:
        case None:
            return None
        case bool():
            raise InvalidContentRecordError(file_path, "order must be a number")
        case numbers.Real():
            number = typ.cast("Order", value)
        case str() as text:
            try:
                number = float(text)
            except ValueError as exc:
                raise InvalidContentRecordError(file_path, f"order {text!r} is not a number") from exc
            if number.is_integer():
                number = int(number)
        case _:
            raise InvalidContentRecordError(file_path, "order must be a number")
    # NaN and infinities do not compare consistently with sibling orders.
    if not math.isfinite(number):
        raise InvalidContentRecordError(file_path, f"order {value!r} is not a finite number")
    return number


def _parse_hidden(value: object, file_path: str) -> bool:
    match value:
        case None:
            return False
        case bool():
            return value
        case str() if value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        case _:
            raise InvalidContentRecordError(
                file_path, f"hidden must be true or false, got {value!r}"
            )


def _parse_timestamp(value: object, file_path: str) -> dt.datetime | None:
    match value:
        case None:
            return None
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime(value.year, value.month, value.day)
        case str() as text:
            sanitized = text.strip()
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(sanitized)
            except ValueError as exc:
                msg = f"lastModified {text!r} is not an ISO timestamp"
                raise InvalidContentRecordError(file_path, msg) from exc
        case _:
            raise InvalidContentRecordError(file_path, "lastModified must be a timestamp")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


@dc.dataclass(frozen=True, slots=True)
class NavigationNode:
    """One page (or grouping) in the site hierarchy.

    ``children`` are always ordered by ``order`` then ``title``; ``depth`` is
    0 for roots and one more than the parent's otherwise.
    """

    id: str
    title: str
    url_path: str
    order: Order
    depth: int
    parent_id: str | None
    children: tuple[NavigationNode, ...]
    hidden: bool
    last_modified: dt.datetime | None
    file_path: str

    def to_dict(self) -> dict[str, typ.Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url_path,
            "order": self.order,
            "depth": self.depth,
            "hidden": self.hidden,
            "lastModified": self.last_modified.isoformat() if self.last_modified else None,
            "children": [child.to_dict() for child in self.children],
        }


class NavigationTree:
    """Immutable site hierarchy with id and url lookups.

    The root tuple owns every node; ``nodes_by_id`` is only an index into it.
    """

    __slots__ = ("_by_id", "_by_url", "_root")

    def __init__(self, root: cabc.Iterable[NavigationNode]) -> None:
        self._root = tuple(root)
        by_id: dict[str, NavigationNode] = {}
        for node in _walk(self._root):
            by_id[node.id] = node
        self._by_id = types.MappingProxyType(by_id)
        self._by_url = types.MappingProxyType(
            {node.url_path: node.id for node in by_id.values()}
        )

    @property
    def root(self) -> tuple[NavigationNode, ...]:
        """Top-level nodes in sibling order."""
        return self._root

    @property
    def nodes_by_id(self) -> cabc.Mapping[str, NavigationNode]:
        """Read-only index from node id to node."""
        return self._by_id

    def get(self, node_id: str) -> NavigationNode | None:
        """Return the node with ``node_id``, if any."""
        return self._by_id.get(node_id)

    def find_by_path(self, url_path: str) -> NavigationNode | None:
        """Return the node published at ``url_path``, if any."""
        node_id = self._by_url.get(normalize_url_path(url_path))
        return None if node_id is None else self._by_id[node_id]

    def parent_of(self, node: NavigationNode) -> NavigationNode | None:
        """Return the parent of ``node``; ``None`` for roots."""
        if node.parent_id is None:
            return None
        return self._by_id[node.parent_id]

    def walk(self) -> cabc.Iterator[NavigationNode]:
        """Yield every node depth-first in sibling order."""
        return _walk(self._root)

    def to_dicts(self) -> list[dict[str, typ.Any]]:
        """Convert the root nodes (and their subtrees) to dictionaries."""
        return [node.to_dict() for node in self._root]

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def __repr__(self) -> str:
        return f"NavigationTree(nodes={len(self)}, roots={len(self._root)})"


def _walk(nodes: cabc.Iterable[NavigationNode]) -> cabc.Iterator[NavigationNode]:
    for node in nodes:
        yield node
        yield from _walk(node.children)


__all__ = [
    "ContentRecord",
    "NavigationNode",
    "NavigationTree",
    "normalize_node_id",
]
