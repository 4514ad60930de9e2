"""Expression parsing and resolution for ``{{expr}}`` tokens.

A small recursive-descent parser turns the text inside a token into an
explicit AST, and :func:`resolve` evaluates it against a variable mapping.
Resolution precedence, first match wins:

1. exact key -- the whole expression is a key of the mapping;
2. dot path -- ``user.profile.name``;
3. array index -- ``items[2]`` (accessors may chain: ``items[0].name``);
4. ternary -- ``cond ? a : b`` where ``cond`` is a bare key or a binary
   comparison and the chosen branch is emitted as text.

Anything that cannot be resolved evaluates to :data:`UNRESOLVED`; nothing in
this module raises on bad input.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union


# ---------------------------------------------------------------------------
# Unresolved sentinel
# ---------------------------------------------------------------------------

class _Unresolved:
    """Marker for an expression that could not be resolved."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED = _Unresolved()


def is_resolved(value: Any) -> bool:
    return value is not UNRESOLVED


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class Path:
    target: "Node"
    attribute: str


@dataclass(frozen=True)
class Index:
    target: "Node"
    index: int


@dataclass(frozen=True)
class Literal:
    """Raw text; a fully quoted literal carries its unquoted text as ``value``."""

    value: str
    raw: str

    @classmethod
    def from_text(cls, text: str) -> "Literal":
        raw = text.strip()
        if len(raw) >= 2 and raw[0] in _QUOTES and raw[-1] == raw[0]:
            return cls(value=raw[1:-1], raw=raw)
        return cls(value=raw, raw=raw)


@dataclass(frozen=True)
class Comparison:
    left: Literal
    operator: str
    right: Literal


@dataclass(frozen=True)
class Ternary:
    condition: Union[Identifier, Comparison]
    when_true: Literal
    when_false: Literal


Node = Union[Identifier, Path, Index, Literal, Comparison, Ternary]


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

_QUOTES = ("'", '"', "`")
_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_SEGMENT = re.compile(r"[\w$]+")
_INDEX = re.compile(r"\s*(-?\d+)\s*\]")
_OPERATOR_CHARS = "=!<>"
COMPARISON_OPERATORS = ("===", "!==", "==", "!=", ">=", "<=", ">", "<")


def _find_top_level(text: str, chars: str, start: int = 0) -> int:
    """Index of the first of *chars* at or after *start* that is not inside quotes."""
    quote: Optional[str] = None
    for position in range(start, len(text)):
        current = text[position]
        if quote:
            if current == quote and text[position - 1] != "\\":
                quote = None
        elif current in _QUOTES:
            quote = current
        elif current in chars:
            return position
    return -1


class _AccessorParser:
    """Parses ``name``, ``a.b.c``, ``name[i]`` and chains of them."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def parse(self) -> Optional[Node]:
        match = _IDENTIFIER.match(self.text, self.pos)
        if not match:
            return None
        self.pos = match.end()
        node: Node = Identifier(match.group(0))

        while self.pos < len(self.text):
            current = self.text[self.pos]
            if current == ".":
                node = self._attribute(node)
            elif current == "[":
                node = self._index(node)
            else:
                return None
            if node is None:
                return None
        return node

    def _attribute(self, target: Node) -> Optional[Node]:
        match = _SEGMENT.match(self.text, self.pos + 1)
        if not match:
            return None
        self.pos = match.end()
        return Path(target=target, attribute=match.group(0))

    def _index(self, target: Node) -> Optional[Node]:
        match = _INDEX.match(self.text, self.pos + 1)
        if not match:
            return None
        self.pos = match.end()
        return Index(target=target, index=int(match.group(1), 10))


def _parse_condition(text: str) -> Union[Identifier, Comparison]:
    position = _find_top_level(text, _OPERATOR_CHARS)
    if position > 0:
        end = position
        while end < len(text) and text[end] in _OPERATOR_CHARS:
            end += 1
        left, operator, right = text[:position].strip(), text[position:end], text[end:].strip()
        if left and right:
            return Comparison(
                left=Literal.from_text(left),
                operator=operator,
                right=Literal.from_text(right),
            )
    return Identifier(text)


def parse_expression(text: str) -> Optional[Node]:
    """Parse the inside of a ``{{...}}`` token; ``None`` if it is not an expression."""
    expression = text.strip()
    if not expression:
        return None

    question = _find_top_level(expression, "?")
    if question >= 0:
        colon = _find_top_level(expression, ":", question + 1)
        condition = expression[:question].strip()
        if colon < 0 or not condition:
            return None
        return Ternary(
            condition=_parse_condition(condition),
            when_true=Literal.from_text(expression[question + 1:colon]),
            when_false=Literal.from_text(expression[colon + 1:]),
        )

    return _AccessorParser(expression).parse()


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def _member(value: Any, attribute: str) -> Any:
    if isinstance(value, Mapping):
        return value[attribute] if attribute in value else UNRESOLVED
    if isinstance(value, (list, tuple)):
        if attribute.isdigit() and int(attribute) < len(value):
            return value[int(attribute)]
        return UNRESOLVED
    if attribute.startswith("_") or not hasattr(value, "__dict__"):
        return UNRESOLVED
    member = getattr(value, attribute, UNRESOLVED)
    if callable(member):
        return UNRESOLVED
    return member


def _evaluate_accessor(node: Node, variables: Mapping[str, Any]) -> Any:
    if isinstance(node, Identifier):
        return variables[node.name] if node.name in variables else UNRESOLVED

    if isinstance(node, Path):
        target = _evaluate_accessor(node.target, variables)
        if target is UNRESOLVED or target is None:
            return UNRESOLVED
        return _member(target, node.attribute)

    if isinstance(node, Index):
        target = _evaluate_accessor(node.target, variables)
        if not isinstance(target, (list, tuple)):
            return UNRESOLVED
        if node.index < 0 or node.index >= len(target):
            return UNRESOLVED
        return target[node.index]

    return UNRESOLVED


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_number(value: Any) -> Optional[float]:
    if _is_number(value):
        return float(value)
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        if not value.strip():
            return 0.0
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _loose_equal(left: Any, right: Any) -> bool:
    # Booleans and text are compared as numbers: true == 1, true != "true".
    if left == right:
        return True
    if isinstance(left, str) and isinstance(right, str):
        return False
    if any(isinstance(value, (str, bool)) for value in (left, right)):
        left_number, right_number = _as_number(left), _as_number(right)
        return left_number is not None and left_number == right_number
    return False


def _strict_equal(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def _ordered(left: Any, right: Any, operator: str) -> bool:
    # Two strings compare as text, so "5" > "10" holds.
    mixed = any(isinstance(value, (str, bool)) for value in (left, right))
    if mixed and not (isinstance(left, str) and isinstance(right, str)):
        left, right = _as_number(left), _as_number(right)
        if left is None or right is None:
            return False
    try:
        if operator == ">":
            return left > right
        if operator == "<":
            return left < right
        if operator == ">=":
            return left >= right
        return left <= right
    except TypeError:
        return False


def _operand(literal: Literal, variables: Mapping[str, Any]) -> Any:
    if literal.raw in variables:
        return variables[literal.raw]
    return literal.value


def _compare(node: Comparison, variables: Mapping[str, Any]) -> bool:
    if node.operator not in COMPARISON_OPERATORS:
        return False
    left = _operand(node.left, variables)
    right = _operand(node.right, variables)

    if node.operator == "==":
        return _loose_equal(left, right)
    if node.operator == "!=":
        return not _loose_equal(left, right)
    if node.operator == "===":
        return _strict_equal(left, right)
    if node.operator == "!==":
        return not _strict_equal(left, right)
    return _ordered(left, right, node.operator)


def evaluate_condition(condition: Union[Identifier, Comparison], variables: Mapping[str, Any]) -> bool:
    if isinstance(condition, Identifier):
        return condition.name in variables and bool(variables[condition.name])
    return _compare(condition, variables)


def evaluate(node: Node, variables: Mapping[str, Any]) -> Any:
    """Evaluate a parsed expression; returns :data:`UNRESOLVED` on any miss."""
    if isinstance(node, Ternary):
        branch = node.when_true if evaluate_condition(node.condition, variables) else node.when_false
        return branch.value
    return _evaluate_accessor(node, variables)


def resolve(expression: str, variables: Mapping[str, Any]) -> Any:
    """Resolve one token's expression against *variables*."""
    expression = expression.strip()
    if expression in variables:
        return variables[expression]

    node = parse_expression(expression)
    if node is None:
        return UNRESOLVED
    return evaluate(node, variables)
