"""Template engine for code generation.

Parses ``{{...}}`` code templates, infers variable contracts, validates a
context against them, and renders source text through an ordered
partials -> helpers -> variables -> cleanup pipeline.

Quick usage::

    from template_engine import TemplateEngine

    engine = TemplateEngine()
    parsed = engine.parse_template("export const {{name}} = {{value}};")
    print(parsed.variables)
    print(engine.render("Hi {{name}}", {"variables": {"name": "Sam"}}))
"""

from template_engine.config import EngineConfig
from template_engine.engine import TemplateEngine
from template_engine.expressions import UNRESOLVED, parse_expression, resolve
from template_engine.models import (
    Complexity,
    Diagnostic,
    DiagnosticKind,
    ParsedTemplate,
    RenderResult,
    RuleKind,
    TemplateContext,
    TemplateMetadata,
    TemplateVariable,
    ValidationResult,
    ValidationRule,
    VariableType,
)
from template_engine.parser import parse_template
from template_engine.registry import HelperRegistry, PartialRegistry, Registry
from template_engine.renderer import Renderer, render
from template_engine.validator import validate_context

__all__ = [
    "Complexity",
    "Diagnostic",
    "DiagnosticKind",
    "EngineConfig",
    "HelperRegistry",
    "ParsedTemplate",
    "PartialRegistry",
    "Registry",
    "RenderResult",
    "Renderer",
    "RuleKind",
    "TemplateContext",
    "TemplateEngine",
    "TemplateMetadata",
    "TemplateVariable",
    "UNRESOLVED",
    "ValidationResult",
    "ValidationRule",
    "VariableType",
    "parse_expression",
    "parse_template",
    "render",
    "resolve",
    "validate_context",
]
