# opdoc/cli.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from . import __version__
from .config import load_config
from .graph_template import emit_template, template_to_xml
from .registry import discover_operators
from .usage import operator_catalog_summary, usage_for_graph, usage_for_operator

# --- Initialize Rich Console ---
custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "dim blue",
})
console = Console(theme=custom_theme, stderr=True)


# --- Helper Function for Error Handling ---
def handle_error(e: Exception, command_name: str, quiet: bool):
    """Prints error messages using Rich console and exits with a non-zero status."""
    if not quiet:
        console.print(f"[error]Error during '{command_name}' command:[/error]")
        if isinstance(e, FileNotFoundError):
            console.print(f"  [error]File not found:[/error] {e}")
        elif isinstance(e, (ValueError, IOError)):
            console.print(f"  [error]Input/Output Error:[/error] {e}")
        else:
            console.print(f"  [error]An unexpected error occurred:[/error] {e}")
    raise click.exceptions.Exit(1)


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    if quiet:
        level = logging.ERROR
    logger = logging.getLogger("opdoc")
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_time=False, show_path=False))
    logger.setLevel(level)


def _parse_params(values: Tuple[str, ...]) -> dict:
    params = {}
    for value in values:
        if "=" not in value:
            raise click.BadParameter(f"expected <name>=<value>, got '{value}'", param_hint="-p")
        key, _, val = value.partition("=")
        params[key.strip()] = val
    return params


# --- Main CLI Group ---
@click.group(help="Usage text and graph XML templates from operator descriptors.")
@click.option(
    "--operators-dir",
    "operators_dirs",
    multiple=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Additional directory with operator descriptor files (*.yaml). Repeatable.",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.option("--quiet", is_flag=True, default=False, help="Only report errors.")
@click.version_option(version=__version__, package_name="opdoc")
@click.pass_context
def cli(ctx: click.Context, operators_dirs: Tuple[Path, ...], verbose: bool, quiet: bool):
    """
    Main entry point for the opdoc CLI. Handles global options and initializes context.
    """
    load_dotenv()
    _configure_logging(verbose, quiet)
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["verbose"] = verbose and not quiet
    ctx.obj["operators_dirs"] = operators_dirs


def _registry(ctx: click.Context):
    if "registry" not in ctx.obj:
        ctx.obj["registry"] = discover_operators(ctx.obj.get("operators_dirs", ()))
    return ctx.obj["registry"]


# --- Command Definitions ---

@cli.command("list")
@click.pass_context
def list_operators(ctx: click.Context) -> None:
    """Print the general usage text with all available operators."""
    quiet = ctx.obj.get("quiet", False)
    try:
        text = operator_catalog_summary(registry=_registry(ctx), config=load_config())
    except Exception as e:
        handle_error(e, "list", quiet)
    click.echo(text, nl=False)


@cli.command("usage")
@click.argument("operator")
@click.pass_context
def usage(ctx: click.Context, operator: str) -> None:
    """Print the usage text of OPERATOR."""
    quiet = ctx.obj.get("quiet", False)
    try:
        registry = _registry(ctx)
        text = usage_for_operator(operator, registry=registry, config=load_config())
    except Exception as e:
        handle_error(e, "usage", quiet)
    if operator not in registry:
        click.echo(text)
        ctx.exit(1)
    click.echo(text, nl=False)


@cli.command("graph")
@click.argument("graph_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "-p",
    "--param",
    "params",
    multiple=True,
    help="Graph variable in the form <name>=<value>, substituted for ${name}. Repeatable.",
)
@click.pass_context
def graph(ctx: click.Context, graph_file: Path, params: Tuple[str, ...]) -> None:
    """Print the usage text declared by the header of GRAPH_FILE."""
    quiet = ctx.obj.get("quiet", False)
    variables = _parse_params(params)
    try:
        text = usage_for_graph(graph_file, params=variables, config=load_config())
    except Exception as e:
        handle_error(e, "graph", quiet)
    click.echo(text, nl=not text.endswith("\n"))


@cli.command("template")
@click.argument("operator")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the graph XML template to this file instead of standard output.",
)
@click.pass_context
def template(ctx: click.Context, operator: str, output: Optional[Path]) -> None:
    """Print the graph XML template for OPERATOR."""
    quiet = ctx.obj.get("quiet", False)
    descriptor = _registry(ctx).lookup(operator)
    if descriptor is None:
        click.echo(f"Unknown operator '{operator}'.")
        ctx.exit(1)
    xml_text = template_to_xml(emit_template(descriptor)) + "\n"
    if output is None:
        click.echo(xml_text, nl=False)
        return
    try:
        output.write_text(xml_text, encoding="utf-8")
    except Exception as e:
        handle_error(e, "template", quiet)
    if not quiet:
        console.print(f"[success]Graph template written to[/success] [path]{output}[/path]")


# --- Entry Point ---
if __name__ == "__main__":
    cli()
