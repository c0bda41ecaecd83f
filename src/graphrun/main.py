"""CLI entry point for graphrun.

This module defines the Click-based command-line interface:

- ``graphrun run [FILE|-]``: load a graph document (from a file, or from
  stdin when FILE is ``-``, omitted, or ``--stdin`` is given), run it, and
  exit with the graph's exit code (1 on any failure).
- ``graphrun validate FILE``: check a document without running it.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from graphrun import __version__
from graphrun.config import RunnerSettings, load_settings
from graphrun.dsl.errors import GraphParseError
from graphrun.dsl.executor import GraphExecutor
from graphrun.dsl.serialization import (
    GraphConfig,
    find_reference_warnings,
    load_graph,
    load_graph_file,
)
from graphrun.exceptions import ConfigError, GraphRunError
from graphrun.logging import configure_logging, get_logger

logger = get_logger(__name__)

STDIN_SOURCE = "-"

VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def _load_env_file(env_file: str | None) -> None:
    """Load a .env file into the process environment.

    An explicit file must exist; the default ``./.env`` is optional.
    Existing environment variables are never overridden.
    """
    env_path = Path(env_file) if env_file else Path.cwd() / ".env"
    if not env_path.is_file():
        if env_file:
            raise click.ClickException(f"Environment file not found: {env_path}")
        return

    load_dotenv(dotenv_path=env_path, override=False)
    logger.info(f"Loaded environment variables from: {env_path}")


def _load_runner_settings(ctx: click.Context) -> RunnerSettings:
    settings_file = ctx.obj.get("settings_file")
    try:
        return load_settings(Path(settings_file) if settings_file else None)
    except ConfigError as e:
        error_parts = [f"Error: {e.message}"]
        if e.field:
            error_parts.append(f"  Field: {e.field}")
        if e.value is not None:
            error_parts.append(f"  Value: {e.value}")
        click.echo("\n".join(error_parts), err=True)
        ctx.exit(1)


def _log_level(settings: RunnerSettings, verbose: int, quiet: bool) -> int:
    # Priority: quiet > verbose > settings
    if quiet:
        return logging.ERROR
    if verbose > 0:
        return logging.INFO if verbose == 1 else logging.DEBUG
    return VERBOSITY_LEVELS.get(settings.verbosity, logging.INFO)


def _read_stdin() -> str:
    content = click.get_text_stream("stdin").read()
    if not content.strip():
        raise click.ClickException("No configuration content provided via stdin")
    logger.info(f"Config content received: {len(content)} bytes")
    return content


@click.group()
@click.version_option(version=__version__, prog_name="graphrun")
@click.option(
    "-s",
    "--settings",
    "settings_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to runner settings file (default: ./graphrun.yaml if present).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Only log errors.",
)
@click.pass_context
def cli(ctx: click.Context, settings_file: str | None, quiet: bool) -> None:
    """graphrun - run graph-described units of work."""
    ctx.ensure_object(dict)
    ctx.obj["settings_file"] = settings_file
    ctx.obj["quiet"] = quiet


@cli.command()
@click.argument("source", required=False, default=None)
@click.option("--start", "start_node", default=None, help="Start from this node.")
@click.option(
    "--env",
    "env_file",
    default=None,
    help="Load environment variables from this file (default: ./.env if present).",
)
@click.option(
    "--stdin",
    "from_stdin",
    is_flag=True,
    default=False,
    help="Read the graph document from standard input.",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Print the final state; -v logs INFO, -vv logs DEBUG.",
)
@click.option(
    "--json-logs",
    is_flag=True,
    default=False,
    help="Emit logs as JSON lines.",
)
@click.pass_context
def run(
    ctx: click.Context,
    source: str | None,
    start_node: str | None,
    env_file: str | None,
    from_stdin: bool,
    verbose: int,
    json_logs: bool,
) -> None:
    """Run a graph document and exit with its exit code.

    SOURCE is a .json/.yaml/.yml file, or '-' for standard input.
    """
    _load_env_file(env_file)
    settings = _load_runner_settings(ctx)
    configure_logging(
        force_json=json_logs,
        level=_log_level(settings, verbose, ctx.obj["quiet"]),
    )

    try:
        config: GraphConfig
        if from_stdin or source is None or source == STDIN_SOURCE:
            logger.info("Reading configuration from stdin")
            config = load_graph(_read_stdin())
        else:
            logger.info(f"Configuration: {source}")
            config = load_graph_file(source)

        if start_node:
            logger.info(f"Starting from node: {start_node}")

        executor = GraphExecutor(config, settings=settings)
        result = asyncio.run(executor.execute(start_node))
    except GraphRunError as e:
        logger.error(f"Execution failed: {e}")
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    logger.info(
        f"Graph execution completed with exit code {result.exit_code}",
        duration_ms=result.duration_ms,
        nodes=len(result.nodes_executed),
    )

    if verbose:
        click.echo(json.dumps(result.state, indent=2, default=str))

    ctx.exit(result.exit_code)


@cli.command()
@click.argument("file", type=click.Path(exists=False, path_type=str))
@click.pass_context
def validate(ctx: click.Context, file: str) -> None:
    """Validate a graph document without running it."""
    settings = _load_runner_settings(ctx)
    configure_logging(level=_log_level(settings, 0, ctx.obj["quiet"]))

    try:
        config = load_graph_file(file)
    except GraphParseError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    edge_count = sum(len(node.edges) for node in config.graph.values())
    click.echo(f"Valid graph: {len(config.graph)} nodes, {edge_count} edges")
    for warning in find_reference_warnings(config, settings.default_start_node):
        click.echo(f"Warning: {warning}", err=True)


if __name__ == "__main__":
    cli()
