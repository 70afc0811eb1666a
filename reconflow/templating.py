"""Rendering of ``{{.Name}}`` placeholders against a mapping of values."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)

NO_VALUE = "<no value>"

_FIELD_RE = re.compile(r"(?:\.[A-Za-z_][A-Za-z0-9_]*)+")
_WHITESPACE = " \t\r\n"


class TemplateError(ValueError):
    """Raised when a template cannot be parsed."""


class _ExecError(Exception):
    """Raised when a parsed template cannot be rendered."""


@dataclass(frozen=True)
class _Field:
    path: tuple[str, ...]


@dataclass(frozen=True)
class _Literal:
    text: str


_Node = "str | _Field | _Literal"


def _parse_action(expr: str, template: str) -> _Field | _Literal | None:
    if expr == "":
        raise TemplateError(f"missing value for command in {template!r}")
    if expr.startswith("/*"):
        if len(expr) >= 4 and expr.endswith("*/"):
            return None
        raise TemplateError(f"unclosed comment in {template!r}")
    if expr == ".":
        return _Field(())
    if _FIELD_RE.fullmatch(expr):
        return _Field(tuple(expr[1:].split(".")))
    if len(expr) >= 2 and expr[0] == expr[-1] == "`":
        return _Literal(expr[1:-1])
    if len(expr) >= 2 and expr[0] == expr[-1] == '"':
        try:
            return _Literal(json.loads(expr))
        except ValueError:
            raise TemplateError(f"bad string literal {expr} in {template!r}") from None
    raise TemplateError(f"unsupported action {expr!r} in {template!r}")


@lru_cache(maxsize=1024)
def _parse(template: str, left: str, right: str) -> tuple:
    nodes: list = []
    pos = 0
    trim_next = False
    while True:
        start = template.find(left, pos)
        text = template[pos:] if start < 0 else template[pos:start]
        if trim_next:
            text = text.lstrip(_WHITESPACE)
        if start < 0:
            nodes.append(text)
            return tuple(nodes)

        end = template.find(right, start + len(left))
        if end < 0:
            raise TemplateError(f"unclosed action in {template!r}")
        inner = template[start + len(left):end]

        if len(inner) >= 2 and inner[0] == "-" and inner[1] in _WHITESPACE:
            text = text.rstrip(_WHITESPACE)
            inner = inner[2:]
        trim_next = len(inner) >= 2 and inner[-1] == "-" and inner[-2] in _WHITESPACE
        if trim_next:
            inner = inner[:-2]

        nodes.append(text)
        node = _parse_action(inner.strip(_WHITESPACE), template)
        if node is not None:
            nodes.append(node)
        pos = end + len(right)


def _format_map(data: Mapping[str, object]) -> str:
    items = " ".join(f"{key}:{data[key]}" for key in sorted(data))
    return f"map[{items}]"


def _render(nodes: tuple, data: Mapping[str, object]) -> str:
    out: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            out.append(node)
        elif isinstance(node, _Literal):
            out.append(node.text)
        elif not node.path:
            out.append(_format_map(data))
        elif len(node.path) == 1:
            key = node.path[0]
            out.append(str(data[key]) if key in data else NO_VALUE)
        else:
            raise _ExecError(f"can't evaluate field {'.'.join(node.path)}")
    return "".join(out)


def _resolve(template: str, data: Mapping[str, object], left: str, right: str) -> str:
    nodes = _parse(template, left, right)
    return _render(nodes, data)


def resolve_data(template: str, data: Mapping[str, object]) -> str:
    """Render ``{{.Key}}`` placeholders; on a render error return the template as is."""
    try:
        return _resolve(template, data, "{{", "}}")
    except _ExecError as exc:
        logger.error("Error render: %s -- %s", template, exc)
        return template


def resolve_slice(items, data: Mapping[str, object]) -> list[str]:
    """Render every template of ``items``."""
    return [resolve_data(item, data) for item in items]


def alt_resolve_variable(template: str, data: Mapping[str, object]) -> str:
    """Like :func:`resolve_data` but with ``[[.Key]]`` placeholders."""
    try:
        return _resolve(template, data, "[[", "]]")
    except _ExecError:
        return template