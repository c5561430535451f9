"""Load agentstatic configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_engine_settings,
    _build_partial_modules,
    _build_site_settings,
    _section,
)
from .models import AgentStaticConfig


def load_config(path: Path) -> AgentStaticConfig:
    """Load the YAML configuration for partial rendering and site context.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``agentstatic.yaml``).

    Returns
    -------
    AgentStaticConfig
        Engine options, site settings, and the partial modules to load.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ConfigError
        If a section or value is invalid (for example, a non-positive
        ``engine.max_depth``).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from agentstatic.config import load_config
    >>> config = load_config(Path("agentstatic.yaml"))  # doctest: +SKIP
    >>> config.engine.max_depth  # doctest: +SKIP
    10
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    return AgentStaticConfig(
        engine=_build_engine_settings(_section(raw, "engine")),
        site=_build_site_settings(_section(raw, "site")),
        partial_modules=_build_partial_modules(_section(raw, "partials")),
    )


__all__ = ["load_config"]
