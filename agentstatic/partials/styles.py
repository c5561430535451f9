"""Parse, check, and scope partial stylesheets.

Partial styles are parsed into a small rule model instead of being rewritten
with regular expressions: a :class:`StyleRule` holds the comma-separated
selectors and the declaration block, an :class:`AtRule` holds either nested
rules (``@media``, ``@supports``, ...), a raw body (``@keyframes``,
``@font-face``, ...), or nothing at all (``@import ...;``).

With the model in hand the registry can reject selectors that would leak out
of a partial (:func:`find_global_selectors`), reject at-rules whose contents
cannot be scoped (:func:`find_unscoped_at_rules`), and prefix every remaining
selector with the partial's scope class (:func:`scope_stylesheet`).

Examples
--------
>>> rules = parse_stylesheet(".hero { padding: 4rem; } .hero h1 { margin: 0 }")
>>> find_global_selectors(rules)
[]
>>> print(serialize_stylesheet(scope_stylesheet(rules, "as-hero")))
.as-hero .hero { padding: 4rem; }
.as-hero .hero h1 { margin: 0; }
>>> find_global_selectors(parse_stylesheet("body { margin: 0 }"))
['body']
"""

from __future__ import annotations

import dataclasses as dc
import re

from agentstatic._constants import (
    DESCRIPTOR_AT_RULES,
    GLOBAL_SELECTORS,
    GROUPING_AT_RULES,
    SCOPE_CLASS_TEMPLATE,
    STATEMENT_AT_RULES,
)

from .helpers import slugify

COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)
AT_RULE_PATTERN = re.compile(r"@([-\w]+)\s*(.*)", re.DOTALL)
PSEUDO_PATTERN = re.compile(r"::?[-\w]+(?:\([^()]*\))?")
QUALIFIER_CHARS = frozenset(".#[")
COMBINATOR_CHARS = frozenset(">+~")


class StylesheetSyntaxError(ValueError):
    """Raised when a stylesheet cannot be parsed into rules."""


@dc.dataclass(frozen=True, slots=True)
class StyleRule:
    """A qualified rule: selectors plus their declaration block."""

    selectors: tuple[str, ...]
    declarations: str


@dc.dataclass(frozen=True, slots=True)
class AtRule:
    """An at-rule with nested rules, a raw body, or neither.

    Attributes
    ----------
    name : str
        Lower-cased at-keyword without the ``@``.
    prelude : str
        Text between the keyword and the block (or terminating ``;``).
    rules : tuple[StyleRule | AtRule, ...] | None
        Nested rules for grouping at-rules such as ``@media``.
    body : str | None
        Raw block contents for descriptor at-rules such as ``@keyframes``;
        ``None`` together with ``rules`` marks a statement like ``@import``.
    """

    name: str
    prelude: str
    rules: tuple[StyleRule | AtRule, ...] | None = None
    body: str | None = None


StyleNode = StyleRule | AtRule


def scope_class_for(name: str, prefix: str) -> str:
    """Return the deterministic scope class for partial ``name``."""
    return SCOPE_CLASS_TEMPLATE.format(prefix=prefix, slug=slugify(name) or "partial")


def parse_stylesheet(css: str) -> tuple[StyleNode, ...]:
    """Parse ``css`` into a tuple of rules.

    Raises
    ------
    StylesheetSyntaxError
        If braces are unbalanced, a selector is empty, or a declaration
        appears outside of any rule.
    """
    text = COMMENT_PATTERN.sub("", css)
    nodes, _ = _parse_block(text, 0, nested=False)
    return nodes


def _parse_block(text: str, pos: int, *, nested: bool) -> tuple[tuple[StyleNode, ...], int]:
    nodes: list[StyleNode] = []
    while True:
        pos = _skip_whitespace(text, pos)
        if pos >= len(text):
            if nested:
                msg = "unclosed block at end of stylesheet"
                raise StylesheetSyntaxError(msg)
            return tuple(nodes), pos
        if text[pos] == "}":
            if not nested:
                msg = "unexpected '}'"
                raise StylesheetSyntaxError(msg)
            return tuple(nodes), pos + 1

        end = _scan_until(text, pos, "{;}")
        prelude = text[pos:end].strip()
        terminator = text[end] if end < len(text) else ""

        if terminator == ";":
            if not prelude.startswith("@"):
                msg = f"declaration outside of a rule: {prelude!r}"
                raise StylesheetSyntaxError(msg)
            name, params = _split_at_rule(prelude)
            nodes.append(AtRule(name=name, prelude=params))
            pos = end + 1
            continue
        if terminator != "{":
            msg = f"expected '{{' after {prelude!r}"
            raise StylesheetSyntaxError(msg)
        if not prelude:
            msg = "rule without a selector"
            raise StylesheetSyntaxError(msg)

        if prelude.startswith("@"):
            name, params = _split_at_rule(prelude)
            if name in GROUPING_AT_RULES:
                children, pos = _parse_block(text, end + 1, nested=True)
                nodes.append(AtRule(name=name, prelude=params, rules=children))
            else:
                close = _find_block_end(text, end + 1)
                body = " ".join(text[end + 1 : close].split())
                nodes.append(AtRule(name=name, prelude=params, body=body))
                pos = close + 1
            continue

        close = _find_block_end(text, end + 1)
        nodes.append(
            StyleRule(
                selectors=_split_selectors(prelude),
                declarations=_normalize_declarations(text[end + 1 : close]),
            )
        )
        pos = close + 1


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _scan_until(text: str, pos: int, stops: str) -> int:
    """Return the index of the first top-level stop character, or ``len(text)``."""
    quote: str | None = None
    depth = 0
    while pos < len(text):
        char = text[pos]
        if quote:
            if char == "\\":
                pos += 1
            elif char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char in "([":
            depth += 1
        elif char in ")]":
            depth = max(depth - 1, 0)
        elif depth == 0 and char in stops:
            return pos
        pos += 1
    return pos


def _find_block_end(text: str, pos: int) -> int:
    """Return the index of the ``}`` closing the block that starts at ``pos``."""
    depth = 1
    while True:
        pos = _scan_until(text, pos, "{}")
        if pos >= len(text):
            msg = "unclosed block at end of stylesheet"
            raise StylesheetSyntaxError(msg)
        depth += 1 if text[pos] == "{" else -1
        if depth == 0:
            return pos
        pos += 1


def _split_at_rule(prelude: str) -> tuple[str, str]:
    match = AT_RULE_PATTERN.match(prelude)
    if match is None:
        msg = f"malformed at-rule {prelude!r}"
        raise StylesheetSyntaxError(msg)
    return match.group(1).lower(), " ".join(match.group(2).split())


def _split_top_level(text: str, separator: str) -> list[str]:
    parts: list[str] = []
    start = 0
    while True:
        end = _scan_until(text, start, separator)
        parts.append(text[start:end])
        if end >= len(text):
            return parts
        start = end + 1


def _split_selectors(prelude: str) -> tuple[str, ...]:
    selectors = tuple(" ".join(part.split()) for part in _split_top_level(prelude, ","))
    if not all(selectors):
        msg = f"empty selector in {prelude!r}"
        raise StylesheetSyntaxError(msg)
    return selectors


def _normalize_declarations(block: str) -> str:
    declarations = [
        " ".join(part.split()) for part in _split_top_level(block, ";") if part.strip()
    ]
    return " ".join(f"{declaration};" for declaration in declarations)


def _first_compound(selector: str) -> str:
    """Return the leading compound selector, ignoring combinators inside parens."""
    end = _scan_until(selector, 0, " >+~")
    return selector[:end]


def is_global_selector(selector: str) -> bool:
    """Return ``True`` when ``selector`` would style elements outside any scope.

    A selector is global when its first compound selector is ``*``, ``html``,
    ``body``, ``:root``, or a bare element type (pseudo classes aside) that is
    not narrowed by a class, id, or attribute.
    """
    stripped = selector.strip()
    if not stripped or stripped[0] in COMBINATOR_CHARS:
        return True
    compound = _first_compound(stripped)
    if compound.lower() in GLOBAL_SELECTORS:
        return True
    bare = PSEUDO_PATTERN.sub("", compound)
    return not any(char in QUALIFIER_CHARS for char in bare)


def find_global_selectors(nodes: tuple[StyleNode, ...]) -> list[str]:
    """Return every selector in ``nodes`` that :func:`is_global_selector` flags."""
    found: list[str] = []
    for node in nodes:
        match node:
            case StyleRule(selectors=selectors):
                found.extend(sel for sel in selectors if is_global_selector(sel))
            case AtRule(rules=rules) if rules is not None:
                found.extend(find_global_selectors(rules))
            case _:
                continue
    return found


def _describe_at_rule(node: AtRule) -> str:
    return f"@{node.name} {node.prelude}" if node.prelude else f"@{node.name}"


def find_unscoped_at_rules(nodes: tuple[StyleNode, ...]) -> list[str]:
    """Return the at-rules in ``nodes`` that cannot be kept inside a scope.

    Grouping at-rules are searched recursively and descriptor blocks such as
    ``@keyframes`` are allowed. Any other block at-rule keeps its body as raw
    text, so its selectors are never checked or prefixed. Statements other
    than ``@layer`` (``@import`` in particular) pull in unscoped styles.

    Examples
    --------
    >>> find_unscoped_at_rules(parse_stylesheet("@import url(reset.css);"))
    ['@import url(reset.css)']
    >>> fade = "@keyframes fade { to { opacity: 0; } }"
    >>> find_unscoped_at_rules(parse_stylesheet(fade))
    []
    """
    found: list[str] = []
    for node in nodes:
        match node:
            case AtRule(rules=rules) if rules is not None:
                found.extend(find_unscoped_at_rules(rules))
            case AtRule(name=name, body=body) if body is not None:
                if name not in DESCRIPTOR_AT_RULES:
                    found.append(_describe_at_rule(node))
            case AtRule(name=name):
                if name not in STATEMENT_AT_RULES:
                    found.append(_describe_at_rule(node))
            case _:
                continue
    return found


def scope_stylesheet(nodes: tuple[StyleNode, ...], scope_class: str) -> tuple[StyleNode, ...]:
    """Prefix every selector in ``nodes`` with ``.{scope_class}``."""
    scoped: list[StyleNode] = []
    for node in nodes:
        match node:
            case StyleRule(selectors=selectors, declarations=declarations):
                scoped.append(
                    StyleRule(
                        selectors=tuple(f".{scope_class} {sel}" for sel in selectors),
                        declarations=declarations,
                    )
                )
            case AtRule(rules=rules) if rules is not None:
                scoped.append(dc.replace(node, rules=scope_stylesheet(rules, scope_class)))
            case _:
                scoped.append(node)
    return tuple(scoped)


def serialize_stylesheet(nodes: tuple[StyleNode, ...], indent: str = "") -> str:
    """Render ``nodes`` back to CSS text in a stable layout."""
    lines: list[str] = []
    for node in nodes:
        match node:
            case StyleRule(selectors=selectors, declarations=declarations):
                block = f" {declarations} " if declarations else " "
                lines.append(f"{indent}{', '.join(selectors)} {{{block}}}")
            case AtRule(name=name, prelude=prelude, rules=rules, body=body):
                head = f"@{name} {prelude}" if prelude else f"@{name}"
                if rules is not None:
                    inner = serialize_stylesheet(rules, indent + "  ")
                    lines.append(f"{indent}{head} {{\n{inner}\n{indent}}}")
                elif body is not None:
                    block = f" {body} " if body else " "
                    lines.append(f"{indent}{head} {{{block}}}")
                else:
                    lines.append(f"{indent}{head};")
    return "\n".join(lines)


__all__ = [
    "AtRule",
    "StyleNode",
    "StyleRule",
    "StylesheetSyntaxError",
    "find_global_selectors",
    "find_unscoped_at_rules",
    "is_global_selector",
    "parse_stylesheet",
    "scope_class_for",
    "scope_stylesheet",
    "serialize_stylesheet",
]
