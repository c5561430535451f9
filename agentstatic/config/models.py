"""Typed dataclasses describing agentstatic configuration."""

from __future__ import annotations

import dataclasses as dc

from agentstatic._constants import DEFAULT_MAX_DEPTH, DEFAULT_SCOPE_PREFIX, DEFAULT_WRAP_TAG


class ConfigError(ValueError):
    """Raised when the configuration file is invalid or incomplete."""


@dc.dataclass(slots=True)
class EngineSettings:
    """Options passed to the partial registry and rendering engine."""

    max_depth: int = DEFAULT_MAX_DEPTH
    scope_prefix: str = DEFAULT_SCOPE_PREFIX
    wrap_tag: str | None = DEFAULT_WRAP_TAG


@dc.dataclass(slots=True)
class SiteSettings:
    """Site-wide values copied into every render context."""

    name: str = ""
    base_url: str = ""
    locale: str | None = None
    theme: str | None = None
    is_development: bool = False


@dc.dataclass(slots=True)
class AgentStaticConfig:
    """Complete configuration for a build."""

    engine: EngineSettings = dc.field(default_factory=EngineSettings)
    site: SiteSettings = dc.field(default_factory=SiteSettings)
    partial_modules: list[str] = dc.field(default_factory=list)


__all__ = [
    "AgentStaticConfig",
    "ConfigError",
    "EngineSettings",
    "SiteSettings",
]
