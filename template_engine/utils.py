"""Shared utility functions for the template engine.

Provides Rich-based console reporting and the small amount of file I/O the
CLI needs: reading templates, loading JSON/YAML context files, and writing
rendered output.  The engine core itself performs no I/O.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


class TemplateEngineError(Exception):
    """Raised when a template or context file cannot be loaded."""


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def read_template(path: str | Path) -> str:
    """Read a template file as UTF-8 text.

    Raises:
        TemplateEngineError: If the file does not exist or cannot be read.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise TemplateEngineError(f"Template file not found: {file_path}")
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateEngineError(f"Cannot read template {file_path}: {exc}") from exc


def load_context_file(path: str | Path) -> dict[str, Any]:
    """Load a context mapping from a JSON or YAML file.

    ``.yaml``/``.yml`` files are parsed with ``yaml.safe_load``; everything
    else is parsed as JSON.  The top level must be a mapping.  A mapping that
    has a ``variables`` key is returned as-is (a full context); any other
    mapping is treated as the variables themselves.

    Raises:
        TemplateEngineError: If the file is missing, malformed, or not a mapping.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise TemplateEngineError(f"Context file not found: {file_path}")

    raw = file_path.read_text(encoding="utf-8")
    try:
        if file_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise TemplateEngineError(f"Invalid context file {file_path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TemplateEngineError(
            f"Context file {file_path} must contain a mapping, got {type(data).__name__}"
        )
    if "variables" in data and isinstance(data["variables"], dict):
        return data
    return {"variables": data}


def write_output(path: str | Path, content: str) -> Path:
    """Write rendered text to *path*, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(content, encoding="utf-8")
    return out


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message to stderr."""
    err_console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
