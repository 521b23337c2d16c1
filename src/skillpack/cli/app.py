"""
Main Typer application for the skillpack CLI.

This module defines the root CLI application and registers all command groups.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from skillpack import __version__
from skillpack.cli.commands import config, plugin, skill
from skillpack.cli.output import configure_logging, console, print_error, print_info
from skillpack.config import ConfigurationError, clear_config_cache, get_config
from skillpack.skills import reset_skill_manager

app = typer.Typer(
    name="skillpack",
    help="Author, validate, index and route Agent Skills.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"skillpack version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log debug output to stderr.",
        ),
    ] = False,
    config_dir: Annotated[
        Path | None,
        typer.Option(
            "--config-dir",
            "--home",
            help="Use this directory instead of ~/.skillpack.",
        ),
    ] = None,
) -> None:
    """
    [bold blue]skillpack[/bold blue] - Agent Skills toolkit

    Discover skills from your home, project and plugin directories,
    lint them, and route requests to the ones that apply.
    """
    if config_dir is not None:
        os.environ["SKILLPACK_HOME"] = str(config_dir.expanduser().resolve())
        clear_config_cache()
        reset_skill_manager()

    try:
        settings = get_config().general
    except ConfigurationError as e:
        configure_logging("DEBUG" if verbose else "WARNING")
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    configure_logging("DEBUG" if verbose else settings.log_level)
    if settings.output == "plain":
        console.no_color = True


app.add_typer(skill.app, name="skill")
app.add_typer(plugin.app, name="plugin")
app.add_typer(config.app, name="config")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
