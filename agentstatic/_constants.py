"""Common literal values used across agentstatic.

These constants keep scope prefixes, depth limits, and selector rules
centralized so the registry, the engine, the config loader, and tests import
the same values without drifting. Intended for internal use within the
agentstatic package.

Examples
--------
>>> from agentstatic import _constants
>>> _constants.SCOPE_CLASS_TEMPLATE.format(prefix="as", slug="hero")
'as-hero'
>>> _constants.DEFAULT_MAX_DEPTH
10
"""

DEFAULT_MAX_DEPTH = 10
DEFAULT_SCOPE_PREFIX = "as"
DEFAULT_WRAP_TAG = "div"
SCOPE_CLASS_TEMPLATE = "{prefix}-{slug}"
ASSETS_PREFIX = "/assets"
HOME_PATH = "/"

# Selectors that always style the whole document, whatever they are nested in.
GLOBAL_SELECTORS = frozenset({"*", "html", "body", ":root"})

# At-rules whose block holds ordinary style rules that must be scoped.
GROUPING_AT_RULES = frozenset(
    {"media", "supports", "container", "layer", "document", "scope", "starting-style"}
)

# At-rules whose block holds descriptors rather than selectors.
DESCRIPTOR_AT_RULES = frozenset(
    {"keyframes", "font-face", "page", "property", "counter-style", "font-feature-values"}
)

# Statement at-rules allowed in partial styles (``@layer base, theme;``).
STATEMENT_AT_RULES = frozenset({"layer"})
