"""Load and validate agentstatic configuration YAML.

This subpackage parses the project's ``agentstatic.yaml`` file into strongly
typed dataclasses: engine options (maximum nesting depth, CSS scope prefix,
wrapper element), site settings copied into every render context, and the
modules whose ``PARTIALS`` mappings should be registered at startup. The
primary entry point is :func:`load_config`.

Examples
--------
>>> from pathlib import Path
>>> from agentstatic.config import load_config
>>> config = load_config(Path("agentstatic.yaml"))  # doctest: +SKIP
>>> config.site.base_url  # doctest: +SKIP
'https://example.com'
"""

from .loader import load_config
from .models import AgentStaticConfig, ConfigError, EngineSettings, SiteSettings

__all__ = [
    "AgentStaticConfig",
    "ConfigError",
    "EngineSettings",
    "SiteSettings",
    "load_config",
]
