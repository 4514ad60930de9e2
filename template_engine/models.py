"""Pydantic v2 models for the template engine.

Defines the data model shared by the parser, validator and renderer:
inferred variable contracts, validation rules, template metadata, the
per-render context, and the structured results handed back to callers.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class VariableType(str, Enum):
    """Closed set of variable types a template can declare."""
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    FUNCTION = "function"

    @classmethod
    def of(cls, value: Any) -> Optional["VariableType"]:
        """Return the type tag of a context value, or ``None`` if it has none.

        ``bool`` is checked before anything else because it is an ``int``
        subclass; strings are checked before sequences for the same reason.
        Plain objects (dataclasses, models) are ``object``, matching what
        dot paths can read.
        """
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, (list, tuple)):
            return cls.ARRAY
        if isinstance(value, Mapping):
            return cls.OBJECT
        if callable(value):
            return cls.FUNCTION
        if hasattr(value, "__dict__"):
            return cls.OBJECT
        return None


class RuleKind(str, Enum):
    """Kinds of validation rule that can be attached to a variable."""
    REGEX = "regex"
    LENGTH = "length"
    RANGE = "range"
    CUSTOM = "custom"


class Complexity(str, Enum):
    """Author-declared template complexity."""
    SIMPLE = "simple"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class DiagnosticKind(str, Enum):
    """Classification of non-fatal render problems."""
    UNKNOWN_PARTIAL = "unknown_partial"
    UNKNOWN_HELPER = "unknown_helper"
    HELPER_FAILED = "helper_failed"
    UNRESOLVED_EXPRESSION = "unresolved_expression"


# ---------------------------------------------------------------------------
# Variable contracts
# ---------------------------------------------------------------------------

class ValidationRule(BaseModel):
    """A single check applied to a context value.

    Payload by kind: ``regex`` takes a pattern string or compiled pattern,
    ``length`` an int, ``range`` a ``{"min", "max"}`` mapping or a
    ``(min, max)`` pair, ``custom`` a predicate callable.
    """
    kind: RuleKind = Field(..., description="Rule kind")
    value: Any = Field(..., description="Rule-specific payload")
    message: str = Field(..., description="Error reported when the rule fails")


class TemplateVariable(BaseModel):
    """A variable contract inferred from template usage."""
    name: str = Field(..., description="Base variable name")
    type: VariableType = Field(default=VariableType.STRING, description="Inferred type")
    description: str = Field(default="", description="Human-readable description")
    required: bool = Field(default=True, description="Whether the context must supply it")
    default_value: Any = Field(default=None, description="Type-appropriate zero value")
    validation: list[ValidationRule] = Field(
        default_factory=list, description="Rules evaluated against the supplied value"
    )


# ---------------------------------------------------------------------------
# Parsed template
# ---------------------------------------------------------------------------

class TemplateMetadata(BaseModel):
    """Metadata read from the template's leading doc comment."""
    version: str = Field(default="1.0.0")
    author: str = Field(default="AI Template Engine")
    description: str = Field(default="Generated template")
    tags: list[str] = Field(default_factory=list)
    complexity: Complexity = Field(default=Complexity.INTERMEDIATE)
    estimated_lines: int = Field(default=0, ge=0, description="Line count of the template")


class ParsedTemplate(BaseModel):
    """Static-analysis result for one template.

    A pure function of ``content``; instances are never mutated after the
    parser produces them.
    """
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Raw template text")
    variables: list[TemplateVariable] = Field(default_factory=list)
    dependencies: list[str] = Field(
        default_factory=list, description="External modules imported by the template"
    )
    metadata: TemplateMetadata = Field(default_factory=TemplateMetadata)

    def variable(self, name: str) -> Optional[TemplateVariable]:
        """Return the declared variable called *name*, if any."""
        for variable in self.variables:
            if variable.name == name:
                return variable
        return None

    def variable_names(self) -> list[str]:
        return [variable.name for variable in self.variables]


# ---------------------------------------------------------------------------
# Render context & results
# ---------------------------------------------------------------------------

_CONTEXT_KEYS = frozenset({"variables", "helpers", "partials"})


class TemplateContext(BaseModel):
    """Per-render bundle of values plus helper/partial overrides."""
    variables: dict[str, Any] = Field(default_factory=dict)
    helpers: dict[str, Callable[..., Any]] = Field(default_factory=dict)
    partials: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def coerce(cls, context: "TemplateContext | Mapping[str, Any] | None") -> "TemplateContext":
        """Accept a context instance, a mapping, or ``None``.

        A mapping with none of the ``variables``/``helpers``/``partials``
        keys is taken to be the variables themselves.
        """
        if context is None:
            return cls()
        if isinstance(context, cls):
            return context
        data = dict(context)
        if not _CONTEXT_KEYS.intersection(data):
            data = {"variables": data}
        return cls.model_validate(data)


class ValidationResult(BaseModel):
    """Advisory outcome of checking a context against a parsed template."""
    valid: bool = Field(default=True)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class Diagnostic(BaseModel):
    """A non-fatal problem encountered while rendering."""
    kind: DiagnosticKind
    token: str = Field(..., description="The literal token left in the output")
    message: str = Field(default="")


class RenderResult(BaseModel):
    """Rendered text paired with everything that could not be resolved."""
    output: str = Field(default="")
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def __str__(self) -> str:
        return self.output
