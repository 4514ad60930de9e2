"""Template engine facade.

Bundles the parser, validator, renderer and a host-owned registry behind
one object.  Create one ``TemplateEngine`` per application, register
project helpers and partials at start-up, then parse/validate/render as
often as needed.

Quick usage::

    from template_engine import TemplateEngine

    engine = TemplateEngine()
    engine.register_helper("shout", lambda s: s.upper() + "!")
    parsed = engine.parse_template(source)
    report = engine.validate_context(parsed, {"variables": {"name": "Sam"}})
    if report.valid:
        code = engine.render(source, {"variables": {"name": "Sam"}})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from .config import EngineConfig
from .models import ParsedTemplate, RenderResult, TemplateContext, ValidationResult
from .parser import parse_template
from .registry import HelperFn, Registry
from .renderer import Renderer
from .validator import validate_context


class TemplateEngine:
    """Parse, validate and render code templates.

    Attributes:
        config: Engine settings.
        registry: Helpers and partials shared by every render of this engine.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        registry: Optional[Registry] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.registry = registry if registry is not None else Registry.with_builtins()
        self._renderer = Renderer(self.registry, self.config)

    # -- Registration ------------------------------------------------------

    def register_helper(self, name: str, fn: HelperFn) -> None:
        """Register (or replace) a helper for ``{{#name ...}}``."""
        self.registry.register_helper(name, fn)

    def register_partial(self, name: str, template: str) -> None:
        """Register (or replace) a partial for ``{{> name}}``."""
        self.registry.register_partial(name, template)

    def helpers(self) -> list[str]:
        return self.registry.helpers.names()

    def partials(self) -> list[str]:
        return self.registry.partials.names()

    # -- Analysis ------------------------------------------------------------

    def parse_template(self, raw: str) -> ParsedTemplate:
        return parse_template(raw)

    def validate_context(
        self,
        parsed: ParsedTemplate,
        context: TemplateContext | Mapping[str, Any] | None,
    ) -> ValidationResult:
        return validate_context(
            parsed, context, warn_unused=self.config.warn_unused_variables
        )

    # -- Rendering -----------------------------------------------------------

    def render(
        self,
        raw: str,
        context: TemplateContext | Mapping[str, Any] | None = None,
    ) -> str:
        """Render *raw* and return the text; see ``render_with_diagnostics``."""
        return self._renderer.render(raw, context).output

    def render_with_diagnostics(
        self,
        raw: str,
        context: TemplateContext | Mapping[str, Any] | None = None,
    ) -> RenderResult:
        """Render *raw* and return the text together with its diagnostics."""
        return self._renderer.render(raw, context)
