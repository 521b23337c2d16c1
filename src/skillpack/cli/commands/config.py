"""
skillpack config - Configuration management commands.

Usage:
    skillpack config show
    skillpack config show lint
    skillpack config set lint.max_body_lines 800
    skillpack config sources
    skillpack config init --project
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from pydantic import ValidationError
from rich.panel import Panel
from rich.syntax import Syntax

from skillpack.cli.output import console, print_error, print_success, print_table
from skillpack.config import (
    Config,
    ConfigurationError,
    deep_merge,
    get_config_sources,
    get_nested_value,
    load_config,
    load_yaml_file,
    save_yaml_file,
    set_nested_value,
)
from skillpack.storage import (
    PROJECT_DIR_NAME,
    ensure_directory,
    find_project_config,
    get_global_config_path,
    get_skills_dir,
)

app = typer.Typer(
    name="config",
    help="Configuration management.",
    no_args_is_help=True,
)

CONFIG_TEMPLATE = """\
# Skillpack configuration
#
# skills:
#   plugin_paths: []
# router:
#   max_terms: 5
# lint:
#   ignore: []
"""


def _parse_value(value: str) -> Any:
    """
    Parse a string value to the appropriate Python type.

    Args:
        value: String value to parse.

    Returns:
        Parsed value (bool, int, float, list, or string).
    """
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    # JSON (for arrays and objects)
    if value.startswith("[") or value.startswith("{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


@app.command()
def show(
    section: Annotated[
        str | None,
        typer.Argument(help="Config section or key to show (e.g., 'lint', 'router.max_terms')."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Show the effective configuration."""
    try:
        config_dict = load_config().model_dump(mode="json")
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    if section:
        config_dict = get_nested_value(config_dict, section)
        if config_dict is None:
            print_error(f"Section '{section}' not found in configuration.")
            raise typer.Exit(1)

    if json_output:
        console.print_json(json.dumps(config_dict))
        return

    output = yaml.dump(config_dict, default_flow_style=False, sort_keys=False, allow_unicode=True)
    if section:
        console.print(Panel(Syntax(output, "yaml"), title=f"[cyan]{section}[/cyan]"))
    else:
        console.print(Syntax(output, "yaml"))


@app.command()
def sources() -> None:
    """Show which configuration files are loaded."""
    rows = []
    for source_name, source_path in get_config_sources().items():
        if source_path:
            rows.append([source_name, str(source_path), "loaded"])
        else:
            rows.append([source_name, "-", "not found"])
    print_table(["Source", "Path", "Status"], rows, title="Configuration Sources")


@app.command("set")
def set_value(
    key: Annotated[str, typer.Argument(help="Configuration key (e.g., 'lint.max_body_lines').")],
    value: Annotated[str, typer.Argument(help="Value to set.")],
    scope: Annotated[
        str,
        typer.Option("--scope", "-s", help="Config scope: global or project."),
    ] = "global",
) -> None:
    """Set a configuration value."""
    if scope == "global":
        config_path = get_global_config_path()
    elif scope == "project":
        config_path = find_project_config()
        if not config_path:
            print_error("No project configuration found. Run 'skillpack config init --project' first.")
            raise typer.Exit(1)
    else:
        print_error(f"Invalid scope: {scope}. Use 'global' or 'project'.")
        raise typer.Exit(1)

    try:
        config_dict = load_yaml_file(config_path)
    except ConfigurationError as e:
        print_error(f"Cannot update {config_path}: {e}")
        raise typer.Exit(1)

    parsed_value = _parse_value(value)
    config_dict = set_nested_value(config_dict, key, parsed_value)

    try:
        Config.model_validate(deep_merge(Config().model_dump(), config_dict))
    except ValidationError as e:
        print_error(f"Invalid value for {key}: {e}")
        raise typer.Exit(1)

    try:
        save_yaml_file(config_path, config_dict)
    except ConfigurationError as e:
        print_error(f"Failed to save configuration: {e}")
        raise typer.Exit(1)

    print_success(f"Set {key} = {parsed_value!r} in {scope} config")
    console.print(f"[dim]File: {config_path}[/dim]")


@app.command()
def init(
    project: Annotated[
        bool,
        typer.Option("--project", help="Create .skillpack/ in the current directory."),
    ] = False,
) -> None:
    """Create a configuration file and the skills directory next to it."""
    if project:
        base = ensure_directory(Path.cwd() / PROJECT_DIR_NAME)
        skills_dir = ensure_directory(base / "skills")
        config_path = base / "config.yaml"
    else:
        skills_dir = ensure_directory(get_skills_dir())
        config_path = get_global_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
    else:
        config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
        print_success(f"Created {config_path}")
    console.print(f"[dim]Skills: {skills_dir}[/dim]")
