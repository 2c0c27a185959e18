"""
yangkit document commands: parse and check.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from yangkit.core.errors import ParseError
from yangkit.core.grammar import ParseResult, parse_file
from yangkit.core.ir.types import YangType
from yangkit.core.modules import build_module
from yangkit.core.schema_errors import SchemaError
from yangkit.core.validation import parse_value, validate_value

from .utils import resolve_settings

console = Console()
err_console = Console(stderr=True)


def _parse_or_exit(file: Path, config: Path | None) -> ParseResult:
    settings = resolve_settings(config, file)
    try:
        return parse_file(file, settings)
    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1) from e
    except OSError as e:
        typer.echo(f"Cannot read {file}: {e}", err=True)
        raise typer.Exit(code=1) from e


def _print_schema_errors(errors: list[SchemaError]) -> None:
    for error in errors:
        err_console.print(f"[red]error[/red] {escape(str(error))}", highlight=False)
    err_console.print(f"\n[dim]{len(errors)} schema error(s)[/dim]")


def parse_command(
    file: Annotated[Path, typer.Argument(help="Schema file to parse", dir_okay=False)],
    output_json: Annotated[bool, typer.Option("--json", help="Output the tree as JSON")] = False,
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to yangkit.toml")
    ] = None,
) -> None:
    """
    Parse a schema file and print its statement tree.

    The default output is the canonical rendering: one statement per line,
    two-space indentation and every argument double-quoted.
    """
    result = _parse_or_exit(file, config)

    if output_json:
        console.print_json(json.dumps(result.tree.to_dict()))
        return

    typer.echo(result.tree.render(), nl=False)


def _check_row(type_: YangType, value: str) -> dict[str, Any]:
    parsed = parse_value(type_, value)
    if parsed is None:
        return {
            "value": value,
            "valid": False,
            "detail": f"not a valid {type_.primitive_type.name.name} value",
        }

    result = validate_value(type_, value=parsed)
    if result.ok:
        return {"value": value, "valid": True, "detail": ""}

    restriction = result.violated
    detail = restriction.error_message or str(restriction)
    if result.level is not None:
        detail += f" (type {result.level.name.name})"
    return {"value": value, "valid": False, "detail": detail}


def check_command(
    file: Annotated[Path, typer.Argument(help="Module file defining the typedef", dir_okay=False)],
    typedef: Annotated[str, typer.Argument(help="Name of a top-level typedef")],
    values: Annotated[list[str], typer.Argument(help="Values to check")],
    output_json: Annotated[bool, typer.Option("--json", help="Output results as JSON")] = False,
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to yangkit.toml")
    ] = None,
) -> None:
    """
    Check values against a typedef of a module.

    Every top-level typedef of the module is built first; any schema error
    is reported and the command exits with code 1. Otherwise each value is
    parsed and validated, and the command exits with code 1 if any value is
    rejected.
    """
    result = _parse_or_exit(file, config)
    module, errors = build_module(result.tree)
    if errors:
        _print_schema_errors(errors)
        raise typer.Exit(code=1)
    assert module is not None

    types = {name.name: type_ for name, type_ in module.exported_types.items()}
    type_ = types.get(typedef)
    if type_ is None:
        known = ", ".join(sorted(types)) or "none"
        typer.echo(f"Unknown typedef '{typedef}' (known: {known})", err=True)
        raise typer.Exit(code=1)

    rows = [_check_row(type_, value) for value in values]

    if output_json:
        console.print_json(json.dumps(rows))
    else:
        table = Table(title=f"{module.unqualified_name}:{typedef}")
        table.add_column("Value")
        table.add_column("Valid")
        table.add_column("Detail")
        for row in rows:
            table.add_row(
                escape(row["value"]),
                "[green]yes[/green]" if row["valid"] else "[red]no[/red]",
                escape(row["detail"]),
            )
        console.print(table)

    if not all(row["valid"] for row in rows):
        raise typer.Exit(code=1)
