"""Context validation against a parsed template's variable contracts.

Validation is advisory: problems are returned as messages on a
``ValidationResult`` and the caller decides whether to abort.  Nothing here
raises, including custom rule predicates that blow up.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .models import (
    ParsedTemplate,
    RuleKind,
    TemplateContext,
    TemplateVariable,
    ValidationResult,
    ValidationRule,
    VariableType,
)


def _range_bounds(payload: Any) -> tuple[Any, Any]:
    if isinstance(payload, Mapping):
        return payload.get("min"), payload.get("max")
    low, high = payload
    return low, high


def check_rule(value: Any, rule: ValidationRule) -> bool:
    """Return ``True`` if *value* satisfies *rule*.

    Any exception raised while checking (a bad payload, a custom predicate
    that raises, an incomparable value) counts as a failed rule.
    """
    try:
        if rule.kind is RuleKind.REGEX:
            if not isinstance(value, str):
                return False
            pattern = rule.value if isinstance(rule.value, re.Pattern) else re.compile(rule.value)
            return pattern.search(value) is not None
        if rule.kind is RuleKind.LENGTH:
            return hasattr(value, "__len__") and len(value) == rule.value
        if rule.kind is RuleKind.RANGE:
            low, high = _range_bounds(rule.value)
            if low is not None and value < low:
                return False
            if high is not None and value > high:
                return False
            return True
        if rule.kind is RuleKind.CUSTOM:
            return bool(rule.value(value))
    except Exception:  # noqa: BLE001 - rule failures are reported, not raised
        return False
    return True


def validate_variable(variable: TemplateVariable, value: Any) -> list[str]:
    """Type and rule errors for one supplied value."""
    errors: list[str] = []

    actual = VariableType.of(value)
    if actual is not variable.type:
        errors.append(
            f"Variable '{variable.name}' expected {variable.type.value}, "
            f"got {type(value).__name__}"
        )

    for rule in variable.validation:
        if not check_rule(value, rule):
            errors.append(rule.message)

    return errors


def validate_context(
    parsed: ParsedTemplate,
    context: TemplateContext | Mapping[str, Any] | None,
    *,
    warn_unused: bool = True,
) -> ValidationResult:
    """Check *context* against every variable *parsed* declares.

    Args:
        parsed: Result of ``parse_template``.
        context: The context that will be rendered.
        warn_unused: Report context variables the template never references.

    Returns:
        A ``ValidationResult``; ``valid`` is ``False`` when any error was found.
    """
    ctx = TemplateContext.coerce(context)
    errors: list[str] = []
    warnings: list[str] = []

    for variable in parsed.variables:
        if variable.name not in ctx.variables:
            if variable.required:
                errors.append(f"Required variable '{variable.name}' is missing")
            continue
        errors.extend(validate_variable(variable, ctx.variables[variable.name]))

    if warn_unused:
        declared = set(parsed.variable_names())
        for name in ctx.variables:
            if name not in declared:
                warnings.append(f"Variable '{name}' is not used by the template")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
