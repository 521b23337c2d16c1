"""
skillpack plugin - Plugin and marketplace commands.

Usage:
    skillpack plugin show ./my-marketplace
    skillpack plugin lint ./my-marketplace
    skillpack plugin init ./my-plugin my-plugin
    skillpack plugin install ./my-marketplace document-skills
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from skillpack.cli.output import (
    console,
    print_error,
    print_json,
    print_success,
    print_warning,
    truncate,
)
from skillpack.config import get_config
from skillpack.lint import LintReport, lint_path
from skillpack.plugins import (
    ManifestError,
    create_plugin,
    discover_plugin_skills,
    load_marketplace_manifest,
    load_plugin_manifest,
)
from skillpack.skills import SkillParseError, get_skill_manager

app = typer.Typer(
    name="plugin",
    help="Plugin and marketplace management.",
    no_args_is_help=True,
)


@app.command()
def show(
    path: Annotated[Path, typer.Argument(help="Plugin or marketplace root.")] = Path("."),
) -> None:
    """Show a plugin or marketplace and the skills it ships."""
    root = path.expanduser().resolve()

    try:
        marketplace = load_marketplace_manifest(root)
        plugin = None if marketplace else load_plugin_manifest(root)
        skills = list(discover_plugin_skills(root))
    except ManifestError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if marketplace is not None:
        console.print(f"[bold]Marketplace:[/bold] {marketplace.name}")
        if marketplace.owner:
            console.print(f"[bold]Owner:[/bold] {marketplace.owner.name}")

        table = Table(title="Plugins")
        table.add_column("Name", style="cyan")
        table.add_column("Source")
        table.add_column("Version", style="dim")
        table.add_column("Description")
        for entry in marketplace.plugins:
            source = entry.source if entry.is_local else "(remote)"
            table.add_row(
                entry.name,
                str(source),
                entry.version or "",
                truncate(entry.description, 50),
            )
        console.print(table)
    elif plugin is not None:
        console.print(f"[bold]Plugin:[/bold] {plugin.name}")
        if plugin.version:
            console.print(f"[bold]Version:[/bold] {plugin.version}")
        if plugin.description:
            console.print(f"[bold]Description:[/bold] {plugin.description}")
    else:
        print_warning(f"No manifest in {root}; using ./skills")

    if not skills:
        console.print("[yellow]No skills found.[/yellow]")
        return

    console.print(f"\n[bold]Skills ({len(skills)}):[/bold]")
    for skill_dir, source in skills:
        console.print(f"  [cyan]{skill_dir.name}[/cyan] [dim]{source}[/dim]")


def _print_report(report: LintReport) -> None:
    for issue in report.issues:
        style = "red" if issue.is_error else "yellow"
        console.print(issue.format(), style=style, markup=False)

    summary = (
        f"{report.checked_skills} skill(s), {report.checked_plugins} plugin(s): "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    if report.ok:
        print_success(summary)
    else:
        print_error(summary)


@app.command()
def lint(
    path: Annotated[Path, typer.Argument(help="Marketplace, plugin, skill or folder.")] = Path("."),
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the report as JSON."),
    ] = False,
    ignore: Annotated[
        list[str] | None,
        typer.Option(
            "--ignore",
            "-i",
            help="Issue code to ignore (repeatable).",
        ),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail on warnings too."),
    ] = False,
) -> None:
    """Lint skills and manifests under a path."""
    config = get_config()
    as_json = as_json or config.general.output == "json"
    settings = config.lint
    if ignore:
        settings = settings.model_copy(update={"ignore": [*settings.ignore, *ignore]})

    try:
        report = lint_path(path, settings)
    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(2)

    if as_json:
        print_json(report.model_dump(mode="json"))
    else:
        _print_report(report)

    if not report.ok or (strict and report.warnings):
        raise typer.Exit(1)


@app.command()
def init(
    path: Annotated[Path, typer.Argument(help="Plugin root to create.")] = Path("."),
    name: Annotated[
        str | None,
        typer.Argument(help="Plugin name (default: directory name)."),
    ] = None,
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="Plugin description."),
    ] = "",
) -> None:
    """Scaffold a plugin manifest and an empty skills directory."""
    root = path.expanduser().resolve()
    plugin_name = name or root.name

    try:
        manifest_path = create_plugin(root, plugin_name, description)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Plugin '{plugin_name}' created")
    console.print(f"[dim]Manifest: {manifest_path}[/dim]")
    console.print(f"  Add skills: [cyan]skillpack skill create my-skill[/cyan] under {root / 'skills'}")


@app.command()
def install(
    marketplace: Annotated[Path, typer.Argument(help="Marketplace root.")],
    plugin_name: Annotated[str, typer.Argument(help="Plugin to install.")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing skills."),
    ] = False,
) -> None:
    """Install every skill of a marketplace plugin into the global skills directory."""
    manager = get_skill_manager()

    try:
        installed = manager.install_plugin(marketplace, plugin_name, force=force)
    except NotImplementedError as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(1)
    except (ValueError, ManifestError, SkillParseError) as e:
        print_error(str(e))
        raise typer.Exit(1)
    except OSError as e:
        print_error(f"Failed to install plugin: {e}")
        raise typer.Exit(1)

    if not installed:
        print_warning(f"Plugin '{plugin_name}' ships no skills")
        return

    for skill_path in installed:
        print_success(f"Installed {skill_path.name}")
    console.print(f"[dim]Location: {installed[0].parent}[/dim]")
