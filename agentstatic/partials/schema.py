"""Validate partial props against pydantic data contracts.

Every partial carries a :class:`pydantic.BaseModel` subclass as its schema.
:func:`validate` checks a candidate mapping against that schema and never
raises for bad input: it returns :class:`SchemaSuccess` with the validated
model (defaults applied) or :class:`SchemaFailure` with one :class:`Issue` per
violation.

Examples
--------
>>> from pydantic import Field
>>> class Greeting(PartialProps):
...     name: str = Field(description="Who to greet")
...     punctuation: str = Field(default="!", description="Trailing mark")
>>> result = validate(Greeting, {"name": "Ada"})
>>> result.ok, result.data.punctuation
(True, '!')
>>> validate(Greeting, {}).issues[0].location
'name'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

import pydantic
from pydantic import BaseModel, ConfigDict

ROOT_LOCATION = "<root>"


class PartialProps(BaseModel):
    """Recommended base for partial schemas: immutable and strict about keys."""

    model_config = ConfigDict(frozen=True, extra="forbid")


@dc.dataclass(frozen=True, slots=True)
class Issue:
    """A single schema violation.

    Attributes
    ----------
    path : tuple[str | int, ...]
        Keys and list indices leading to the offending value; empty when the
        candidate as a whole is rejected.
    message : str
        Human-readable description of the violation.
    code : str
        Machine-readable pydantic error type (for example ``"missing"``).
    """

    path: tuple[str | int, ...]
    message: str
    code: str = "invalid"

    @property
    def location(self) -> str:
        """Return the dotted field path, or ``<root>`` for top-level issues."""
        if not self.path:
            return ROOT_LOCATION
        return ".".join(str(part) for part in self.path)


@dc.dataclass(frozen=True, slots=True)
class SchemaSuccess:
    """Validated, defaulted props."""

    data: BaseModel
    ok: typ.Literal[True] = True


@dc.dataclass(frozen=True, slots=True)
class SchemaFailure:
    """The list of violations found in a candidate."""

    issues: tuple[Issue, ...]
    ok: typ.Literal[False] = False


SchemaResult = SchemaSuccess | SchemaFailure


def ensure_schema(schema: object) -> type[BaseModel]:
    """Return ``schema`` when it is a pydantic model class.

    Raises
    ------
    TypeError
        If ``schema`` is not a :class:`pydantic.BaseModel` subclass. This is a
        programmer error rather than a validation outcome.
    """
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return schema
    msg = f"Partial schemas must be pydantic models, got {schema!r}."
    raise TypeError(msg)


def validate(schema: type[BaseModel], candidate: object) -> SchemaResult:
    """Check ``candidate`` against ``schema`` without side effects.

    Parameters
    ----------
    schema : type[BaseModel]
        The data contract to validate against.
    candidate : object
        Raw props, normally a mapping. An instance of ``schema`` is
        re-validated from its field values.

    Returns
    -------
    SchemaResult
        :class:`SchemaSuccess` holding the validated model, or
        :class:`SchemaFailure` listing every issue pydantic reported.
    """
    model = ensure_schema(schema)
    if isinstance(candidate, BaseModel):
        candidate = candidate.model_dump()
    elif isinstance(candidate, cabc.Mapping):
        candidate = dict(candidate)
    try:
        data = model.model_validate(candidate)
    except pydantic.ValidationError as exc:
        return SchemaFailure(issues=_issues_from(exc))
    return SchemaSuccess(data=data)


def _issues_from(exc: pydantic.ValidationError) -> tuple[Issue, ...]:
    return tuple(
        Issue(path=tuple(error["loc"]), message=error["msg"], code=error["type"])
        for error in exc.errors(include_url=False)
    )


def describe_schema(schema: type[BaseModel]) -> dict[str, typ.Any]:
    """Return the JSON Schema document describing ``schema``."""
    return ensure_schema(schema).model_json_schema()


def field_descriptions(schema: type[BaseModel]) -> dict[str, str | None]:
    """Map each field of ``schema`` to its human-readable description."""
    fields = ensure_schema(schema).model_fields
    return {name: info.description for name, info in fields.items()}


__all__ = [
    "Issue",
    "PartialProps",
    "SchemaFailure",
    "SchemaResult",
    "SchemaSuccess",
    "describe_schema",
    "ensure_schema",
    "field_descriptions",
    "validate",
]
