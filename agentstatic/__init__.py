"""Schema-validated partials and content-driven navigation for static sites.

Partials are small, self-describing components: a pydantic schema for their
props, a pure render function, class-scoped CSS, and usage examples. They are
registered in a :class:`~agentstatic.partials.PartialRegistry` and rendered by
a :class:`~agentstatic.partials.RenderingEngine`. The navigation package turns
discovered content records into an immutable tree plus per-page views such as
breadcrumbs.

Exports
-------
- ``app``: Cyclopts application for the ``agentstatic`` console script.
- ``main``: Convenience function that invokes the app.

Examples
--------
>>> from agentstatic import app
>>> app(["catalog"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
