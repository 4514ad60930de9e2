"""Template rendering pipeline.

Rendering runs four ordered, single-pass phases over the template text:

Phase 1: PARTIALS  -- ``{{> name}}`` is replaced by the partial's raw text.
Phase 2: HELPERS   -- ``{{#name a b}}`` calls the helper with literal words.
Phase 3: VARIABLES -- every other ``{{expr}}`` is resolved against the context.
Phase 4: CLEANUP   -- blank-line runs are collapsed and the ends normalised.

Nothing that goes wrong in a template stops a render.  Unknown partials and
helpers, failing helpers and unresolved expressions leave their token in
the output verbatim and are reported as diagnostics on the result.

Usage::

    from template_engine import Registry, Renderer, TemplateContext

    renderer = Renderer(Registry.with_builtins())
    result = renderer.render("Hi {{name}}", TemplateContext(variables={"name": "Sam"}))
    print(result.output)       # "Hi Sam"
    print(result.diagnostics)  # []
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any, Optional

from .config import EngineConfig
from .expressions import UNRESOLVED, resolve
from .models import Diagnostic, DiagnosticKind, RenderResult, TemplateContext
from .parser import TOKEN_PATTERN, is_block_token
from .registry import Registry
from .utils import print_warning

_PARTIAL_PATTERN = re.compile(r"\{\{>\s*([^}]+)\s*\}\}")
_HELPER_PATTERN = re.compile(r"\{\{#([^}]+)\}\}")
_BLANK_LINE_RUN = re.compile(r"\n\s*\n\s*\n")
_LEADING_BLANK = re.compile(r"^\s*\n")
_TRAILING_BLANK = re.compile(r"\n\s*\Z")


def format_value(value: Any, json_indent: int = 2) -> str:
    """Render a resolved value as text.

    Mappings and sequences become pretty-printed JSON, booleans become
    ``true``/``false``, everything else goes through ``str``.
    """
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, indent=json_indent, ensure_ascii=False, default=str)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def cleanup(text: str) -> str:
    """Collapse 3+ newlines to 2, drop leading blank lines, single trailing newline."""
    text = _BLANK_LINE_RUN.sub("\n\n", text)
    text = _LEADING_BLANK.sub("", text, count=1)
    return _TRAILING_BLANK.sub("\n", text, count=1)


class Renderer:
    """Runs the four-phase render pipeline against an injected registry.

    Attributes:
        registry: Helpers and partials available to every render.
        config: Formatting and reporting settings.
    """

    def __init__(
        self,
        registry: Optional[Registry] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.registry = registry if registry is not None else Registry.with_builtins()
        self.config = config or EngineConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(
        self,
        template: str,
        context: TemplateContext | Mapping[str, Any] | None = None,
    ) -> RenderResult:
        """Render *template* with *context*; never raises for template content."""
        ctx = TemplateContext.coerce(context)
        diagnostics: list[Diagnostic] = []

        rendered = self._expand_partials(template, ctx, diagnostics)
        rendered = self._expand_helpers(rendered, ctx, diagnostics)
        rendered = self._substitute_variables(rendered, ctx, diagnostics)
        rendered = cleanup(rendered)

        if self.config.verbose:
            for diagnostic in diagnostics:
                print_warning(f"  {diagnostic.message}")

        return RenderResult(output=rendered, diagnostics=diagnostics)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _expand_partials(
        self, template: str, ctx: TemplateContext, diagnostics: list[Diagnostic]
    ) -> str:
        def replace(match: re.Match[str]) -> str:
            name = match.group(1).strip()
            partial = self.registry.lookup_partial(name, ctx.partials)
            if partial is None:
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.UNKNOWN_PARTIAL,
                        token=match.group(0),
                        message=f"Partial '{name}' is not registered",
                    )
                )
                return match.group(0)
            return partial

        return _PARTIAL_PATTERN.sub(replace, template)

    def _expand_helpers(
        self, template: str, ctx: TemplateContext, diagnostics: list[Diagnostic]
    ) -> str:
        def replace(match: re.Match[str]) -> str:
            words = match.group(1).split()
            if not words:
                return match.group(0)
            name, args = words[0], words[1:]
            helper = self.registry.lookup_helper(name, ctx.helpers)
            if helper is None:
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.UNKNOWN_HELPER,
                        token=match.group(0),
                        message=f"Helper '{name}' is not registered",
                    )
                )
                return match.group(0)
            try:
                result = helper(*args)
            except Exception as exc:  # noqa: BLE001 - helpers are caller code
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.HELPER_FAILED,
                        token=match.group(0),
                        message=f"Helper '{name}' failed: {exc}",
                    )
                )
                return match.group(0)
            return "" if result is None else str(result)

        return _HELPER_PATTERN.sub(replace, template)

    def _substitute_variables(
        self, template: str, ctx: TemplateContext, diagnostics: list[Diagnostic]
    ) -> str:
        def replace(match: re.Match[str]) -> str:
            expression = match.group(1).strip()
            if is_block_token(expression):
                return match.group(0)
            value = resolve(expression, ctx.variables)
            if value is UNRESOLVED or value is None:
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.UNRESOLVED_EXPRESSION,
                        token=match.group(0),
                        message=f"Expression '{expression}' could not be resolved",
                    )
                )
                return match.group(0)
            return format_value(value, self.config.json_indent)

        return TOKEN_PATTERN.sub(replace, template)


def render(
    template: str,
    context: TemplateContext | Mapping[str, Any] | None = None,
    registry: Optional[Registry] = None,
) -> str:
    """Render *template* and return only the text.

    Uses a fresh registry with the built-in helpers when *registry* is not
    given.  Use :class:`Renderer` directly to inspect diagnostics.
    """
    return Renderer(registry).render(template, context).output
