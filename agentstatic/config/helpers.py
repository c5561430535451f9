"""Utility helpers shared by the configuration loader."""

from __future__ import annotations

import re
import typing as typ

from .models import ConfigError, EngineSettings, SiteSettings

SCOPE_PREFIX_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")
WRAP_TAG_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    """Return the mapping stored under ``key``, treating a missing key as empty."""
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        msg = f"Section '{key}' must be a mapping."
        raise ConfigError(msg)
    return value


def _build_engine_settings(payload: typ.Mapping[str, typ.Any]) -> EngineSettings:
    """Build EngineSettings from the ``engine`` mapping, validating each value."""
    base = EngineSettings()
    max_depth = payload.get("max_depth", base.max_depth)
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
        msg = f"engine.max_depth must be a positive integer, got {max_depth!r}."
        raise ConfigError(msg)

    scope_prefix = str(payload.get("scope_prefix", base.scope_prefix)).strip()
    if not SCOPE_PREFIX_PATTERN.match(scope_prefix):
        msg = f"engine.scope_prefix {scope_prefix!r} is not a valid CSS class prefix."
        raise ConfigError(msg)

    wrap_tag = _optional_str(payload.get("wrap_tag", base.wrap_tag))
    if wrap_tag is not None and not WRAP_TAG_PATTERN.match(wrap_tag):
        msg = f"engine.wrap_tag {wrap_tag!r} is not a valid element name."
        raise ConfigError(msg)

    return EngineSettings(max_depth=max_depth, scope_prefix=scope_prefix, wrap_tag=wrap_tag)


def _build_site_settings(payload: typ.Mapping[str, typ.Any]) -> SiteSettings:
    """Build SiteSettings from the ``site`` mapping."""
    return SiteSettings(
        name=str(payload.get("name", "")).strip(),
        base_url=str(payload.get("base_url", "")).strip().rstrip("/"),
        locale=_optional_str(payload.get("locale")),
        theme=_optional_str(payload.get("theme")),
        is_development=bool(payload.get("development", False)),
    )


def _build_partial_modules(payload: typ.Mapping[str, typ.Any]) -> list[str]:
    """Return the module names listed under ``partials.modules``."""
    modules = payload.get("modules") or []
    if isinstance(modules, str):
        modules = [modules]
    if not isinstance(modules, list):
        msg = "partials.modules must be a list of module names."
        raise ConfigError(msg)
    return [name for name in (_optional_str(module) for module in modules) if name]


__all__ = [
    "_build_engine_settings",
    "_build_partial_modules",
    "_build_site_settings",
    "_optional_str",
    "_section",
]
