"""
yangkit command line application.
"""

import sys

import typer

from .commands import check_command, parse_command
from .utils import configure_logging, version_callback

# =============================================================================
# Main Application
# =============================================================================

app = typer.Typer(
    help="""yangkit - YANG statement parser and type checker

Commands:
  • parse: print the canonical statement tree of a file
  • check: validate values against a typedef of a module
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """yangkit CLI main callback for global options."""
    configure_logging(verbose)


# =============================================================================
# Document Commands
# =============================================================================

app.command(name="parse")(parse_command)
app.command(name="check")(check_command)


# =============================================================================
# Main Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
