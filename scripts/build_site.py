#!/usr/bin/env python3
"""
Site Build CLI

Loads the site configuration and content, then runs the configured writers to
produce the output tree.

Commands:
    build         - Build the site
    list-writers  - List registered writers

Examples:\n

    build_site.py build                                # Build using ./nico.yaml (or NICO_CONFIG_PATH)

    build_site.py build --config site/nico.yaml        # Explicit config file

    build_site.py build --set theme=themes/paper       # Override a config key

    build_site.py build --writer PostWriter --verbose  # Run a single writer with debug output
"""

import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from nico.config import ConfigurationError
from nico.contexts.writing import WRITERS, build_site
from nico.contexts.writing.logger import setup_writing_logger
from nico.site import load_site
from nico.utils.module_loading import ResolutionError
from nico.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


def display_path(path: Path) -> str:
    """Return path relative to the working directory for cleaner display."""
    try:
        return str(Path(path).resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


app = typer.Typer(
    help="Render a site's posts, pages and static files into the output directory",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("build")
def build_command(
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Site configuration file (default: NICO_CONFIG_PATH or ./nico.yaml)",
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output directory (overrides the configured output)",
        ),
    ] = None,
    overrides: Annotated[
        Optional[List[str]],
        typer.Option(
            "--set",
            "-s",
            help="Configuration override in key=value form (repeatable)",
        ),
    ] = None,
    writers: Annotated[
        Optional[List[str]],
        typer.Option(
            "--writer",
            "-w",
            help="Writer to run (repeatable; default: configured writers)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug output on the console",
        ),
    ] = False,
    no_log_file: Annotated[
        bool,
        typer.Option(
            "--no-log-file",
            help="Do not write a session log under LOGS_PATH",
        ),
    ] = False,
):
    """
    Build the site.

    Examples:\n

        $ build_site.py build                           # Build with defaults

        $ build_site.py build -o public                 # Write into ./public

        $ build_site.py build -s engine.tz_offset=480   # Override engine options
    """
    log_dir = None if no_log_file else LOGS_PATH / f"build_{now()}"
    log_file = setup_writing_logger(log_dir, config_path=config_path, verbose=verbose)

    dotlist = list(overrides or [])
    if output is not None:
        dotlist.append(f"output={output.resolve()}")

    typer.secho("\nBuilding site", fg=typer.colors.BLUE, bold=True)

    try:
        site = load_site(config_path, dotlist)
        typer.echo(f"Source: {display_path(site.config.source)}")
        typer.echo(f"Output: {display_path(site.config.output)}")
        typer.echo("")
        result = build_site(site, writers or None)
    except (ConfigurationError, ResolutionError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo("")
    if result.success:
        typer.secho(f"✓ Wrote {len(result.written)} file(s)", fg=typer.colors.GREEN, bold=True)
        for name, count in result.counts.items():
            typer.echo(f"  {name}: {count}")
    else:
        typer.secho("✗ Build failed", fg=typer.colors.RED, bold=True)
        typer.secho(f"  {result.error}", fg=typer.colors.RED)

    if log_file:
        typer.echo(f"  Log: {display_path(log_file)}")
    typer.echo("")

    raise typer.Exit(code=0 if result.success else 1)


@app.command("list-writers")
def list_writers_command():
    """List registered writers in registration order."""
    for name, cls in WRITERS.items():
        doc = (cls.__doc__ or "").strip().splitlines()
        typer.echo(f"{name:<14} {doc[0] if doc else ''}")


if __name__ == "__main__":
    app()
