"""Helper bundle handed to partial render functions.

The engine builds one :class:`TemplateHelpers` per render frame. Partials
treat it as an opaque capability set: nested rendering, date and text
formatting, URL construction, conditional classes, and a few collection
utilities. Callers may swap in their own bundle through the engine's
``helpers_factory`` as long as it accepts the same constructor arguments.

Everything here is a pure function of its inputs and the
:class:`~agentstatic.partials.engine.RenderContext`, so rendering stays
deterministic. Helpers that return markup return :class:`markupsafe.Markup`
so Jinja templates with autoescape enabled do not escape it twice.
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import itertools
import json
import re
import typing as typ
from html import escape as _escape_attr
from urllib.parse import urlsplit

from markdown import Markdown
from markupsafe import Markup, escape
from pygments import highlight as _pygments_highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from agentstatic._constants import ASSETS_PREFIX

if typ.TYPE_CHECKING:
    from .engine import RenderContext

T = typ.TypeVar("T")

SLUG_STRIP_PATTERN = re.compile(r"[^\w\s-]")
SLUG_SEPARATOR_PATTERN = re.compile(r"[\s_-]+")
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
DEFAULT_DATE_FORMAT = "%B {day}, %Y"
MARKDOWN_EXTENSIONS = ["fenced_code", "codehilite", "tables", "sane_lists"]
TIME_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
)


def slugify(text: str) -> str:
    """Return a lowercase, hyphen-separated slug for ``text``.

    >>> slugify("  Hello, World_again ")
    'hello-world-again'
    """
    lowered = SLUG_STRIP_PATTERN.sub("", text.lower().strip())
    return SLUG_SEPARATOR_PATTERN.sub("-", lowered).strip("-")


def truncate(text: str, length: int, suffix: str = "...") -> str:
    """Shorten ``text`` to ``length`` characters, appending ``suffix`` when cut.

    >>> truncate("The quick brown fox", 9)
    'The quick...'
    """
    if len(text) <= length:
        return text
    return text[:length].rstrip() + suffix


def normalize_url_path(path: str) -> str:
    """Return ``path`` with one leading slash and no trailing slash.

    >>> normalize_url_path("blog/posts/")
    '/blog/posts'
    >>> normalize_url_path("")
    '/'
    """
    stripped = path.strip().strip("/")
    return f"/{stripped}" if stripped else "/"


def _coerce_datetime(value: dt.date | dt.datetime | str) -> dt.datetime:
    match value:
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime(value.year, value.month, value.day)
        case str() as text:
            sanitized = text.strip()
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            parsed = dt.datetime.fromisoformat(sanitized)
        case _:
            msg = f"Cannot interpret {value!r} as a date."
            raise TypeError(msg)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed


class TemplateHelpers:
    """Capabilities available to a partial while it renders.

    Parameters
    ----------
    context : RenderContext
        Composition context of the current render call.
    render_partial : Callable[[str, Mapping | None], Markup]
        Callback rendering a declared dependency; supplied by the engine.
    has_partial : Callable[[str], bool]
        Callback reporting whether a partial is registered.
    scope_class : str
        Scope class of the partial being rendered.
    """

    def __init__(
        self,
        *,
        context: RenderContext,
        render_partial: cabc.Callable[[str, cabc.Mapping[str, typ.Any] | None], Markup],
        has_partial: cabc.Callable[[str], bool],
        scope_class: str,
    ) -> None:
        self.context = context
        self._render_partial = render_partial
        self._has_partial = has_partial
        self.scope_class = scope_class
        self._formatter = HtmlFormatter(cssclass="codehilite")

    def render_partial(
        self, name: str, props: cabc.Mapping[str, typ.Any] | None = None
    ) -> Markup:
        """Render a declared dependency and return its markup."""
        return self._render_partial(name, props)

    def has_partial(self, name: str) -> bool:
        """Return whether ``name`` is registered."""
        return self._has_partial(name)

    def format_date(
        self, value: dt.date | dt.datetime | str, fmt: str = DEFAULT_DATE_FORMAT
    ) -> str:
        """Format ``value`` with ``strftime`` codes; ``{day}`` is the unpadded day."""
        moment = _coerce_datetime(value)
        return moment.strftime(fmt.replace("{day}", str(moment.day)))

    def time_ago(self, value: dt.date | dt.datetime | str) -> str:
        """Describe ``value`` relative to the build time, e.g. ``"3 days ago"``.

        Raises
        ------
        ValueError
            If the render context has no ``build_time``.
        """
        now = self.context.build_time
        if now is None:
            msg = "time_ago needs RenderContext.build_time to be set."
            raise ValueError(msg)
        if now.tzinfo is None:
            now = now.replace(tzinfo=dt.UTC)
        delta = int((now - _coerce_datetime(value)).total_seconds())
        future = delta < 0
        seconds = abs(delta)
        for unit, size in TIME_UNITS:
            count = seconds // size
            if count:
                label = f"{count} {unit}{'s' if count != 1 else ''}"
                return f"in {label}" if future else f"{label} ago"
        return "just now"

    def truncate(self, text: str, length: int, suffix: str = "...") -> str:
        """Shorten ``text``; see :func:`truncate`."""
        return truncate(text, length, suffix)

    def slugify(self, text: str) -> str:
        """Slugify ``text``; see :func:`slugify`."""
        return slugify(text)

    def markdown(self, text: str) -> Markup:
        """Render trusted markdown into HTML with highlighted code blocks."""
        if not text.strip():
            return Markup("")
        md = Markdown(
            extensions=MARKDOWN_EXTENSIONS,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                }
            },
        )
        return Markup(md.convert(text))

    def highlight(self, code: str, language: str | None = None) -> Markup:
        """Highlight ``code`` with pygments, tagging the block with its language."""
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = _pygments_highlight(code, lexer, self._formatter)
        tag = f'<div class="codehilite" data-language="{_escape_attr(lang, quote=True)}">'
        return Markup(CODEHILITE_OPEN_TAG.sub(tag, html, 1))

    def strip_html(self, html: str) -> str:
        """Remove tags and collapse whitespace."""
        return Markup(html).striptags()

    def escape(self, value: object) -> Markup:
        """Escape ``value`` for safe inclusion in HTML."""
        return escape(value)

    def url(self, path: str) -> str:
        """Join ``path`` onto the site's base URL."""
        clean = path if path.startswith("/") else f"/{path}"
        return f"{self.context.base_url.rstrip('/')}{clean}"

    def asset_url(self, path: str) -> str:
        """Return the URL of a static asset."""
        return self.url(f"{ASSETS_PREFIX}/{path.lstrip('/')}")

    def is_active(self, path: str) -> bool:
        """Return whether ``path`` is the page being rendered."""
        return normalize_url_path(path) == normalize_url_path(self.context.current_path)

    def is_external(self, url: str) -> bool:
        """Return whether ``url`` points away from the site."""
        parts = urlsplit(url)
        if not parts.netloc:
            return False
        base = urlsplit(self.context.base_url).netloc
        return parts.netloc != base

    def conditional_class(self, condition: bool, class_name: str) -> str:
        """Return ``class_name`` when ``condition`` holds, else an empty string."""
        return class_name if condition else ""

    def class_names(self, *names: str | None, **conditions: bool) -> str:
        """Join truthy class names, adding each keyword whose value is true.

        Keyword names use underscores for hyphens, so ``is_open=True`` adds
        ``is-open``.
        """
        classes = [name for name in names if name]
        classes.extend(key.replace("_", "-") for key, enabled in conditions.items() if enabled)
        return " ".join(classes)

    def chunk(self, items: cabc.Iterable[T], size: int) -> list[list[T]]:
        """Split ``items`` into lists of ``size`` elements."""
        if size < 1:
            msg = "chunk size must be positive"
            raise ValueError(msg)
        iterator = iter(items)
        return [list(batch) for batch in iter(lambda: list(itertools.islice(iterator, size)), [])]

    def group_by(
        self, items: cabc.Iterable[T], key: str | cabc.Callable[[T], typ.Any]
    ) -> dict[str, list[T]]:
        """Group ``items`` by an attribute/key name or a callable, keeping order."""
        getter = _key_getter(key)
        groups: dict[str, list[T]] = {}
        for item in items:
            groups.setdefault(str(getter(item)), []).append(item)
        return groups

    def sort_by(
        self, items: cabc.Iterable[T], key: str | cabc.Callable[[T], typ.Any]
    ) -> list[T]:
        """Return ``items`` stably sorted by an attribute/key name or a callable."""
        return sorted(items, key=_key_getter(key))

    def json_encode(self, data: object) -> Markup:
        """Encode ``data`` as JSON safe to embed in a ``<script>`` element."""
        text = json.dumps(data, sort_keys=True, default=str)
        return Markup(
            text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")
        )


def _key_getter(key: str | cabc.Callable[[T], typ.Any]) -> cabc.Callable[[T], typ.Any]:
    if callable(key):
        return key

    def _get(item: T) -> typ.Any:
        if isinstance(item, cabc.Mapping):
            return item.get(key)
        return getattr(item, key, None)

    return _get


__all__ = [
    "TemplateHelpers",
    "normalize_url_path",
    "slugify",
    "truncate",
]
