"""Command-line interface for the template engine.

Usage::

    template-engine parse component.template.tsx
    template-engine parse component.template.tsx --json
    template-engine validate component.template.tsx --context ctx.yaml
    template-engine render component.template.tsx --context ctx.json \\
        --partial header=partials/header.tsx --output Button.tsx
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import Any, Optional

from rich.table import Table

from .config import EngineConfig
from .engine import TemplateEngine
from .models import ParsedTemplate
from .utils import (
    TemplateEngineError,
    console,
    load_context_file,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    read_template,
    write_output,
)


def _parse_partial_pairs(pairs: Sequence[str] | None) -> dict[str, str]:
    """Parse repeatable ``name=path`` pairs into ``{name: template text}``."""
    partials: dict[str, str] = {}
    for raw_pair in pairs or ():
        if "=" not in raw_pair:
            raise TemplateEngineError(f"Invalid --partial '{raw_pair}'. Expected name=path.")
        name, path = (part.strip() for part in raw_pair.split("=", 1))
        if not name:
            raise TemplateEngineError(f"Invalid --partial '{raw_pair}'. Name cannot be empty.")
        partials[name] = read_template(path)
    return partials


def _load_context(path: Optional[str]) -> dict[str, Any]:
    return load_context_file(path) if path else {"variables": {}}


def _print_parsed(parsed: ParsedTemplate) -> None:
    meta = parsed.metadata
    print_summary_table(
        {
            "Version": meta.version,
            "Author": meta.author,
            "Description": meta.description,
            "Tags": ", ".join(meta.tags) or "-",
            "Complexity": meta.complexity.value,
            "Lines": str(meta.estimated_lines),
            "Dependencies": ", ".join(parsed.dependencies) or "-",
        },
        title="Template",
    )

    table = Table(title="Variables", show_header=True, header_style="bold cyan")
    table.add_column("Name", no_wrap=True)
    table.add_column("Type")
    table.add_column("Required")
    for variable in parsed.variables:
        table.add_row(variable.name, variable.type.value, "yes" if variable.required else "no")
    console.print(table)


# ---------------------------------------------------------------------------
# Sub-commands
# ---------------------------------------------------------------------------


def _cmd_parse(engine: TemplateEngine, args: argparse.Namespace) -> int:
    parsed = engine.parse_template(read_template(args.template))
    if args.json:
        sys.stdout.write(
            parsed.model_dump_json(
                indent=2, exclude={"variables": {"__all__": {"default_value"}}}
            )
            + "\n"
        )
    else:
        _print_parsed(parsed)
    return 0


def _cmd_validate(engine: TemplateEngine, args: argparse.Namespace) -> int:
    parsed = engine.parse_template(read_template(args.template))
    result = engine.validate_context(parsed, _load_context(args.context))
    for warning in result.warnings:
        print_warning(f"warning: {warning}")
    for error in result.errors:
        print_error(f"error: {error}")
    if not result.valid:
        return 1
    print_success("Context is valid.")
    return 0


def _cmd_render(engine: TemplateEngine, args: argparse.Namespace) -> int:
    template = read_template(args.template)
    context = _load_context(args.context)
    context.setdefault("partials", {}).update(_parse_partial_pairs(args.partial))

    result = engine.render_with_diagnostics(template, context)
    if args.output:
        path = write_output(args.output, result.output)
        print_success(f"Rendered {args.template} -> {path}")
    else:
        sys.stdout.write(result.output)

    if not engine.config.verbose:
        for diagnostic in result.diagnostics:
            print_warning(f"warning: {diagnostic.message}")
    if args.strict and result.diagnostics:
        print_error(f"{len(result.diagnostics)} unresolved token(s) left in output.")
        return 1
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="template-engine",
        description="Parse, validate and render {{...}} code templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  template-engine parse button.template.tsx\n"
            "  template-engine validate button.template.tsx --context ctx.json\n"
            "  template-engine render button.template.tsx -c ctx.yaml -o Button.tsx\n"
        ),
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Report every render diagnostic as it happens",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Show inferred variables and metadata")
    parse_cmd.add_argument("template", help="Path to the template file")
    parse_cmd.add_argument("--json", action="store_true", help="Print the parse result as JSON")
    parse_cmd.set_defaults(handler=_cmd_parse)

    validate_cmd = subparsers.add_parser("validate", help="Check a context against a template")
    validate_cmd.add_argument("template", help="Path to the template file")
    validate_cmd.add_argument(
        "--context", "-c", required=True, help="JSON or YAML context file"
    )
    validate_cmd.set_defaults(handler=_cmd_validate)

    render_cmd = subparsers.add_parser("render", help="Render a template")
    render_cmd.add_argument("template", help="Path to the template file")
    render_cmd.add_argument("--context", "-c", default=None, help="JSON or YAML context file")
    render_cmd.add_argument(
        "--partial", "-p",
        action="append",
        default=None,
        help="Partial as name=path (repeatable)",
    )
    render_cmd.add_argument("--output", "-o", default=None, help="Write output to this file")
    render_cmd.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any token was left unresolved",
    )
    render_cmd.set_defaults(handler=_cmd_render)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``template-engine`` / ``python -m template_engine``."""
    args = build_parser().parse_args(argv)

    config = EngineConfig.from_env()
    if args.verbose:
        config.verbose = True
    engine = TemplateEngine(config)

    try:
        status = args.handler(engine, args)
    except TemplateEngineError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
