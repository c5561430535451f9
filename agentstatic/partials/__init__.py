"""Schema-validated partial definitions, their registry, and the render engine."""

from .definition import PartialCategory, PartialDefinition, PartialMetadata, UsageExample
from .engine import RenderContext, RenderingEngine, RenderResult, render
from .helpers import TemplateHelpers
from .registry import PartialHandle, PartialRegistry, RegisteredPartial, load_partials
from .schema import (
    Issue,
    PartialProps,
    SchemaFailure,
    SchemaSuccess,
    describe_schema,
    field_descriptions,
    validate,
)

__all__ = [
    "Issue",
    "PartialCategory",
    "PartialDefinition",
    "PartialHandle",
    "PartialMetadata",
    "PartialProps",
    "PartialRegistry",
    "RegisteredPartial",
    "RenderContext",
    "RenderResult",
    "RenderingEngine",
    "SchemaFailure",
    "SchemaSuccess",
    "TemplateHelpers",
    "UsageExample",
    "describe_schema",
    "field_descriptions",
    "load_partials",
    "render",
    "validate",
]
