"""Shared pytest fixtures for the template engine test suite.

Provides reusable fixtures for:
- Registries and engines with the built-in helpers
- A realistic component template with a metadata header
- Template / context files written to a temporary directory
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any

import pytest

from template_engine.engine import TemplateEngine
from template_engine.registry import Registry
from template_engine.renderer import Renderer


# ---------------------------------------------------------------------------
# Engine objects
# ---------------------------------------------------------------------------

@pytest.fixture
def registry() -> Registry:
    """A fresh registry seeded with the built-in helpers."""
    return Registry.with_builtins()


@pytest.fixture
def renderer(registry: Registry) -> Renderer:
    return Renderer(registry)


@pytest.fixture
def engine() -> TemplateEngine:
    return TemplateEngine()


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

@pytest.fixture
def component_template() -> str:
    """A React component template with a JSDoc metadata header."""
    return textwrap.dedent("""\
        /**
         * @version 2.1.0
         * @author Jane Doe
         * @description Button component
         * @tags ui, button, form
         * @complexity simple
         */
        import React from 'react';
        import { cn } from '@/lib/utils';
        import { Icon } from './icon';
        import React from 'react';

        export const {{componentName}} = ({ children }) => (
          <button className={cn("{{className}}")} disabled={ {{disabled ? true : false}} }>
            {{> icon}}
            {{children.label}}
          </button>
        );
    """)


@pytest.fixture
def component_variables() -> dict[str, Any]:
    return {
        "componentName": "SubmitButton",
        "className": "btn-primary",
        "disabled": False,
        "children": {"label": "Submit"},
    }


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

@pytest.fixture
def write_file(tmp_path: Path):
    """Write *content* to ``tmp_path / name`` and return the path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def greeting_files(write_file) -> tuple[Path, Path]:
    """A ``Hi {{name}}`` template and a JSON context supplying ``name``."""
    template = write_file("greeting.txt", "Hi {{name}}")
    context = write_file("context.json", json.dumps({"name": "Sam"}))
    return template, context
