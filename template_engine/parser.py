"""Static analysis of code templates.

Scans raw template text for ``{{...}}`` expressions and infers a variable
contract for each base name, collects external module imports, and reads
the optional leading ``/** ... */`` metadata block.  Uses pure regex and
text scanning; the parser never raises and the same input always yields an
equal ``ParsedTemplate``.
"""

from __future__ import annotations

import re
from typing import Any

from .models import (
    Complexity,
    ParsedTemplate,
    TemplateMetadata,
    TemplateVariable,
    VariableType,
)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TOKEN_PATTERN = re.compile(r"\{\{([^}]+)\}\}")
_BASE_NAME_SPLIT = re.compile(r"[.\[?]")
_IMPORT_PATTERN = re.compile(r"import\s+.*?\s+from\s+['\"]([^'\"]+)['\"]")
_METADATA_BLOCK = re.compile(r"\A\s*/\*\*(.*?)\*/", re.DOTALL)
_COMMENT_LINE_PREFIX = re.compile(r"^\s*\*\s?")
_METADATA_TAGS = ("version", "author", "description", "tags", "complexity")
_METADATA_FIELD = re.compile(
    r"(?:^|\s)@(" + "|".join(_METADATA_TAGS) + r")\b(.*?)"
    r"(?=\s@(?:" + "|".join(_METADATA_TAGS) + r")\b|\Z)",
    re.DOTALL,
)


def _noop(*args: Any, **kwargs: Any) -> str:
    """Default value for function-typed variables."""
    return ""


_DEFAULT_VALUES: dict[VariableType, Any] = {
    VariableType.STRING: "",
    VariableType.BOOLEAN: False,
    VariableType.FUNCTION: _noop,
}


# ---------------------------------------------------------------------------
# Variable inference
# ---------------------------------------------------------------------------

def is_block_token(expression: str) -> bool:
    """True for helper (``#``) and partial (``>``) tokens."""
    return expression.startswith(("#", ">"))


def base_variable_name(expression: str) -> str:
    """Return the part of *expression* before the first ``.``, ``[`` or ``?``."""
    return _BASE_NAME_SPLIT.split(expression, maxsplit=1)[0].strip()


def infer_variable_type(expression: str) -> VariableType:
    """Guess a variable's type from how the template uses it.

    Examples::

        infer_variable_type("items[0]")           -> ARRAY
        infer_variable_type("user.name")          -> OBJECT
        infer_variable_type("isAdmin ? 'a' : 'b'") -> BOOLEAN
        infer_variable_type("onClick()")          -> FUNCTION
        infer_variable_type("title")              -> STRING
    """
    if "[" in expression:
        return VariableType.ARRAY
    if "." in expression and "?" not in expression:
        return VariableType.OBJECT
    if "?" in expression and ":" in expression:
        return VariableType.BOOLEAN
    if "()" in expression:
        return VariableType.FUNCTION
    return VariableType.STRING


def default_value_for(variable_type: VariableType) -> Any:
    """Zero value for *variable_type*; containers are fresh on every call."""
    if variable_type is VariableType.ARRAY:
        return []
    if variable_type is VariableType.OBJECT:
        return {}
    return _DEFAULT_VALUES[variable_type]


def extract_variables(template: str) -> list[TemplateVariable]:
    """Infer one contract per distinct base name, in order of first use."""
    variables: list[TemplateVariable] = []
    seen: set[str] = set()

    for match in TOKEN_PATTERN.finditer(template):
        expression = match.group(1).strip()
        if not expression or is_block_token(expression):
            continue
        name = base_variable_name(expression)
        if not name or name in seen:
            continue
        seen.add(name)
        variable_type = infer_variable_type(expression)
        variables.append(
            TemplateVariable(
                name=name,
                type=variable_type,
                description=f"Template variable: {name}",
                required=True,
                default_value=default_value_for(variable_type),
            )
        )

    return variables


# ---------------------------------------------------------------------------
# Dependencies & metadata
# ---------------------------------------------------------------------------

def extract_dependencies(template: str) -> list[str]:
    """Return external (non-relative, non-absolute) import sources, de-duplicated."""
    dependencies: list[str] = []
    for match in _IMPORT_PATTERN.finditer(template):
        module = match.group(1)
        if module.startswith((".", "/")):
            continue
        if module not in dependencies:
            dependencies.append(module)
    return dependencies


def _comment_body(block: str) -> str:
    lines = [_COMMENT_LINE_PREFIX.sub("", line) for line in block.splitlines()]
    return "\n".join(line.strip() for line in lines).strip()


def extract_metadata(template: str) -> TemplateMetadata:
    """Read ``@version``/``@author``/``@description``/``@tags``/``@complexity``.

    Only a ``/** ... */`` block at the very start of the template (after
    optional whitespace) is considered.  Both the JSDoc layout with one tag
    per line and the single-line ``/** @version 1.0 @author me */`` form are
    accepted.
    """
    metadata = TemplateMetadata(estimated_lines=len(template.split("\n")))

    match = _METADATA_BLOCK.match(template)
    if not match:
        return metadata

    fields: dict[str, Any] = {}
    for tag_match in _METADATA_FIELD.finditer(_comment_body(match.group(1))):
        tag = tag_match.group(1)
        value = " ".join(tag_match.group(2).split())
        if tag == "tags":
            fields["tags"] = [t.strip() for t in value.split(",") if t.strip()]
        elif tag == "complexity":
            try:
                fields["complexity"] = Complexity(value.lower())
            except ValueError:
                continue
        elif value:
            fields[tag] = value

    return metadata.model_copy(update=fields)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_template(raw: str) -> ParsedTemplate:
    """Parse *raw* template text into variables, dependencies and metadata."""
    return ParsedTemplate(
        content=raw,
        variables=extract_variables(raw),
        dependencies=extract_dependencies(raw),
        metadata=extract_metadata(raw),
    )
