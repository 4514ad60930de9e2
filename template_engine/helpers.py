"""Built-in template helpers.

Helpers are invoked from templates as ``{{#name arg1 arg2}}``.  Arguments
arrive as the literal whitespace-separated words of the token, so every
helper here accepts strings; when called from Python they also accept real
values (``join`` a list, ``if`` a bool, ``indent`` an int).
"""

from __future__ import annotations

import re
from typing import Any, Callable

_SEPARATOR_RUN = re.compile(r"[-_\s]+(.)?")
_UPPER = re.compile(r"[A-Z]")

_FALSY_WORDS = {"", "false", "0", "no", "off", "null", "undefined", "none"}


def _truthy(value: Any) -> bool:
    """Truthiness that understands template words like ``false`` and ``0``."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSY_WORDS
    return bool(value)


# ---------------------------------------------------------------------------
# Case transforms
# ---------------------------------------------------------------------------

def uppercase(text: str) -> str:
    return str(text).upper()


def lowercase(text: str) -> str:
    return str(text).lower()


def capitalize(text: str) -> str:
    """``hELLO`` -> ``Hello``."""
    text = str(text)
    return text[:1].upper() + text[1:].lower()


def camel_case(text: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``.

    Characters outside separator runs are kept as written, so
    ``userProfile`` stays ``userProfile``.
    """
    return _SEPARATOR_RUN.sub(lambda m: (m.group(1) or "").upper(), str(text))


def pascal_case(text: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    camel = camel_case(text)
    return camel[:1].upper() + camel[1:]


def kebab_case(text: str) -> str:
    """Convert ``SomeThing`` to ``some-thing``."""
    kebab = _UPPER.sub(lambda m: "-" + m.group(0).lower(), str(text))
    return kebab[1:] if kebab.startswith("-") else kebab


# ---------------------------------------------------------------------------
# Array transforms
# ---------------------------------------------------------------------------

def join(items: Any, separator: str = ", ") -> str:
    """Join a list with *separator*; anything that is not a list joins to ``""``."""
    if not isinstance(items, (list, tuple)):
        return ""
    return separator.join(str(item) for item in items)


def length(items: Any) -> int:
    if not isinstance(items, (list, tuple)):
        return 0
    return len(items)


# ---------------------------------------------------------------------------
# Conditionals
# ---------------------------------------------------------------------------

def if_helper(condition: Any, true_value: Any, false_value: Any = "") -> Any:
    return true_value if _truthy(condition) else false_value


def unless_helper(condition: Any, true_value: Any, false_value: Any = "") -> Any:
    return true_value if not _truthy(condition) else false_value


# ---------------------------------------------------------------------------
# Code generation
# ---------------------------------------------------------------------------

def indent(text: str, spaces: Any = 2) -> str:
    """Prefix every line of *text* with *spaces* spaces."""
    pad = " " * int(spaces)
    return "\n".join(pad + line for line in str(text).split("\n"))


def comment(text: str, style: str = "//") -> str:
    return f"{style} {text}"


BUILTIN_HELPERS: dict[str, Callable[..., Any]] = {
    "uppercase": uppercase,
    "lowercase": lowercase,
    "capitalize": capitalize,
    "camelCase": camel_case,
    "pascalCase": pascal_case,
    "kebabCase": kebab_case,
    "join": join,
    "length": length,
    "if": if_helper,
    "unless": unless_helper,
    "indent": indent,
    "comment": comment,
}
