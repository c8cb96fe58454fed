# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import logging
import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError as PydanticValidationError

from .constants import CLI_NAME, PACKAGE_NAME, ExitCode
from .exceptions import CLIError, ConfigurationError, ValidationError
from .messages import CONFIG_HINTS, DEFINE_HINT, GRAMMAR_HINTS
from .utils import console

logger = logging.getLogger(__name__)


def _version_callback(ctx, param, value):
    if not value:
        return
    import importlib.metadata
    version = importlib.metadata.version(PACKAGE_NAME)
    console.print(f"[bold]{CLI_NAME}[/bold], version {version}")
    ctx.exit()


def _load_settings(config_file: Path | None, **overrides):
    from svreport.settings import load_config

    try:
        return load_config(config_file=config_file, **overrides)
    except PydanticValidationError as e:
        raise ConfigurationError("Invalid configuration", hints=CONFIG_HINTS) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(str(e).strip(), hints=CONFIG_HINTS) from e


def _create_frontend(grammar_path: Path | None):
    from svreport.errors import GrammarLoadError
    from svreport.parser.frontend import SvFrontend

    try:
        return SvFrontend(str(grammar_path) if grammar_path else None)
    except ImportError as e:
        raise ConfigurationError(f"SystemVerilog grammar unavailable: {e}", hints=GRAMMAR_HINTS) from e
    except GrammarLoadError as e:
        cause = f" ({e.__cause__})" if e.__cause__ else ""
        raise ConfigurationError(f"{e}{cause}", hints=GRAMMAR_HINTS) from e


@click.command(name=CLI_NAME, context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("files", nargs=-1, type=click.Path(path_type=Path))
@click.option("-d", "--define", "defines", multiple=True, metavar="NAME[=VALUE]",
              help="Define a macro (can specify multiple)")
@click.option("-i", "--include", "includes", multiple=True, type=click.Path(path_type=Path),
              help="Include search directory (can specify multiple)")
@click.option("--ignore-include", is_flag=True,
              help="Do not follow `include directives")
@click.option("--full-tree", is_flag=True,
              help="Dump the full syntax tree instead of module definitions")
@click.option("--include-whitespace", is_flag=True,
              help="Keep comments in the --full-tree dump")
@click.option("--separate", is_flag=True,
              help="Start every file from the command line macro definitions")
@click.option("--show-macro-defs", is_flag=True,
              help="Report the macro table after each file")
@click.option("--grammar", "grammar_path", type=click.Path(exists=True, path_type=Path),
              help="Compiled tree-sitter SystemVerilog grammar library")
@click.option("-c", "--config", "config_file", type=click.Path(exists=True, path_type=Path),
              help="Configuration file (default: nearest svreport.yaml)")
@click.option("-l", "--log-level", type=click.Choice(["error", "warning", "info", "debug"]),
              metavar="LEVEL", help="Set log verbosity (error|warning|info|debug)")
@click.option("--version", is_flag=True, expose_value=False, is_eager=True,
              callback=_version_callback, help="Show the version and exit.")
@click.pass_context
def svreport(
    ctx: click.Context,
    files: tuple[Path, ...],
    defines: tuple[str, ...],
    includes: tuple[Path, ...],
    ignore_include: bool,
    full_tree: bool,
    include_whitespace: bool,
    separate: bool,
    show_macro_defs: bool,
    grammar_path: Path | None,
    config_file: Path | None,
    log_level: str | None,
) -> None:
    """Report the module hierarchy of SystemVerilog FILES as YAML.

    For every file: module names, ports (name, direction, width) and
    submodule instances. Files are parsed in order and macro definitions
    carry over from one file to the next unless --separate is given.
    """
    from svreport._internal.logging import setup_logging
    from svreport.parser.defines import build_define_table
    from svreport.runner import RunOptions, run

    config = _load_settings(
        config_file,
        defines=list(defines) or None,
        includes=list(includes) or None,
        ignore_include=ignore_include or None,
        full_tree=full_tree or None,
        include_whitespace=include_whitespace or None,
        separate=separate or None,
        show_macro_defs=show_macro_defs or None,
        grammar_path=grammar_path,
        log_level=log_level,
    )

    setup_logging(level=config.log_level)
    logger.debug(f"{CLI_NAME} CLI initialized with log level {config.log_level}")

    try:
        define_table = build_define_table(config.defines)
    except ValueError as e:
        raise ValidationError(str(e), hints=[DEFINE_HINT]) from e

    frontend = _create_frontend(config.grammar_path)

    options = RunOptions(
        full_tree=config.full_tree,
        include_whitespace=config.include_whitespace,
        separate=config.separate,
        show_macro_defs=config.show_macro_defs,
        includes=list(config.includes),
        ignore_include=config.ignore_include,
    )

    status = run(
        files,
        define_table,
        options,
        frontend,
        out=sys.stdout,
        err=sys.stderr,
    )
    ctx.exit(status)


def main() -> None:
    """Run the CLI with consistent error handling."""
    try:
        status = svreport.main(standalone_mode=False)
    except click.exceptions.Abort:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(ExitCode.INTERRUPTED)
    except CLIError as e:
        console.print(e.format_for_console())
        sys.exit(e.exit_code)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        logging.exception(f"Unexpected error in {CLI_NAME} CLI")
        sys.exit(ExitCode.SOFTWARE)
    sys.exit(status or ExitCode.SUCCESS)


if __name__ == "__main__":
    main()
