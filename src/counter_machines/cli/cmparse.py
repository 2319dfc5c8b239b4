"""
cmparse - Counter Machine Parser Command-Line Interface
=======================================================

Runs the front end on a program file and reports the result. Useful when
writing programs or when changing the grammar.

Usage Examples
--------------
Check that a file parses:
    $ cmparse add.cm

Show the tokens:
    $ cmparse --tokens add.cm

Show the syntax tree:
    $ cmparse --ast add.cm

Trace every rule attempt (DEBUG logging):
    $ cmparse --trace add.cm
"""

import logging
from pathlib import Path

import click

from counter_machines import __version__
from counter_machines.ast import ASTPrinter
from counter_machines.cli.errors import handle_cli_exception
from counter_machines.config import ParserOptions
from counter_machines.lexer import tokenize
from counter_machines.parser import parse


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--tokens",
    "show_tokens",
    is_flag=True,
    help="Print the token list and exit",
)
@click.option(
    "--ast",
    "show_ast",
    is_flag=True,
    help="Print the syntax tree",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Log every grammar rule attempt (enables DEBUG logging)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="cmparse")
def main(
    input_file: Path,
    show_tokens: bool,
    show_ast: bool,
    trace: bool,
    verbose: bool,
) -> None:
    """
    Parse a counter machine program.

    INPUT_FILE is the program source to parse.

    \b
    Examples:
        cmparse add.cm              # Check the program parses
        cmparse --tokens add.cm     # Show tokens
        cmparse --ast add.cm        # Show the syntax tree
    """
    if verbose or trace:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    options = ParserOptions.from_env()
    options.filename = str(input_file)
    options.trace_rules = options.trace_rules or trace

    try:
        source = input_file.read_text(encoding="utf-8")
        tokens = tokenize(source)

        if show_tokens:
            for index, token in enumerate(tokens):
                click.echo(f"{index:5d}  {token!r}")
            return

        program = parse(tokens, options)

        if show_ast:
            click.echo(ASTPrinter().print(program))
            return

        click.echo(
            f"Parsed {input_file}: {len(tokens)} tokens, "
            f"{len(program.function_definitions)} functions, "
            f"{len(program.statements)} statements"
        )

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
