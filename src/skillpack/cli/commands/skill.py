"""
skillpack skill - Skill management commands.

Usage:
    skillpack skill list
    skillpack skill search "api design"
    skillpack skill route "help me review this pull request"
    skillpack skill catalog
    skillpack skill show skill-name
    skillpack skill install ./path/to/skill
    skillpack skill remove skill-name
    skillpack skill create my-skill
    skillpack skill validate ./path/to/skill
    skillpack skill reindex
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from skillpack.cli.output import console, print_error, print_json, print_panel, truncate
from skillpack.skills import (
    SkillNotFoundError,
    SkillParseError,
    get_skill_manager,
)

app = typer.Typer(
    name="skill",
    help="Skill management.",
    no_args_is_help=True,
)


@app.command("list")
def list_skills(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show keywords and paths.",
        ),
    ] = False,
    global_only: Annotated[
        bool,
        typer.Option(
            "--global",
            "-g",
            help="Skip project skills.",
        ),
    ] = False,
) -> None:
    """List discoverable skills."""
    manager = get_skill_manager()
    skills = manager.list_skills(include_project=not global_only)

    if not skills:
        console.print("[yellow]No skills installed.[/yellow]")
        console.print("[dim]Create a skill: skillpack skill create my-skill[/dim]")
        return

    table = Table(title="Skills")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Source", style="dim")

    if verbose:
        table.add_column("Keywords", style="dim")
        table.add_column("Path", style="dim")

    for skill in skills:
        row = [skill.name, truncate(skill.description, 60), skill.source]
        if verbose:
            row.append(", ".join(skill.keywords[:5]))
            row.append(skill.path)
        table.add_row(*row)

    console.print(table)
    console.print(f"\n[dim]Total: {len(skills)} skill(s)[/dim]")


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Search query.")],
    max_results: Annotated[
        int,
        typer.Option(
            "--max",
            "-n",
            help="Maximum number of results.",
        ),
    ] = 10,
) -> None:
    """Search for skills by keyword."""
    manager = get_skill_manager()
    results = manager.search(query, max_results)

    if not results:
        console.print(f"[yellow]No skills found matching '{query}'[/yellow]")
        return

    table = Table(title=f"Search Results for '{query}'")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Keywords", style="dim")

    for skill in results:
        table.add_row(skill.name, truncate(skill.description, 50), ", ".join(skill.keywords[:3]))

    console.print(table)


@app.command()
def route(
    query: Annotated[str, typer.Argument(help="User request to route.")],
    max_skills: Annotated[
        int | None,
        typer.Option(
            "--max",
            "-n",
            help="Maximum number of skills (default from config).",
        ),
    ] = None,
    inject: Annotated[
        bool,
        typer.Option(
            "--inject",
            help="Print the full system prompt injection of each matched skill.",
        ),
    ] = False,
) -> None:
    """Show which skills a request would trigger."""
    manager = get_skill_manager()

    if inject:
        skills = manager.get_skills_for_query(query, max_skills)
        if not skills:
            console.print("[yellow]No skill matches this request.[/yellow]")
            return
        for skill in skills:
            console.print(skill.get_system_prompt_injection(), markup=False)
        return

    entries = manager.route(query, max_skills)
    if not entries:
        console.print("[yellow]No skill matches this request.[/yellow]")
        return

    for position, entry in enumerate(entries, start=1):
        console.print(f"{position}. [cyan]{entry.name}[/cyan] [dim]({entry.source})[/dim]")
        console.print(f"   {truncate(entry.description, 100)}", markup=False)


@app.command()
def catalog(
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print metadata as JSON."),
    ] = False,
) -> None:
    """Print the metadata-only catalog hosts load at startup."""
    manager = get_skill_manager()

    if as_json or manager.config.general.output == "json":
        print_json([entry.model_dump(mode="json") for entry in manager.get_catalog()])
        return

    prompt = manager.get_catalog_prompt()
    if not prompt:
        console.print("[yellow]No skills indexed.[/yellow]")
        return
    console.print(prompt, markup=False)


@app.command()
def show(
    name: Annotated[str, typer.Argument(help="Skill name or path.")],
) -> None:
    """Show skill details."""
    manager = get_skill_manager()

    try:
        info = manager.get_skill_info(name)
    except SkillNotFoundError:
        print_error(f"Skill not found: {name}")
        raise typer.Exit(1)
    except SkillParseError as e:
        print_error(f"Failed to parse skill: {e}")
        raise typer.Exit(1)

    lines = [
        f"[bold]Name:[/bold] {info['name']}",
        f"[bold]Description:[/bold] {info['description'] or '(none)'}",
    ]
    if info["version"]:
        lines.append(f"[bold]Version:[/bold] {info['version']}")
    if info["license"]:
        lines.append(f"[bold]License:[/bold] {info['license']}")

    lines.append("")
    lines.append(f"[bold]Keywords:[/bold] {', '.join(info['keywords']) or '(none)'}")
    lines.append(f"[bold]Allowed tools:[/bold] {', '.join(info['allowed_tools']) or '(any)'}")
    lines.append(f"[bold]Source:[/bold] {info['source']}")

    if info["path"]:
        lines.append(f"[bold]Path:[/bold] {info['path']}")

    if info["resources"]:
        lines.append("")
        lines.append("[bold]Resources:[/bold]")
        lines.extend(f"  {resource}" for resource in info["resources"])

    print_panel("\n".join(lines), title=f"Skill: {info['name']}")

    console.print("\n[bold]Instructions Preview:[/bold]")
    console.print(info["instructions_preview"], style="dim", markup=False)


@app.command()
def install(
    source: Annotated[str, typer.Argument(help="Skill source (local path).")],
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing skill.",
        ),
    ] = False,
) -> None:
    """Install a skill from a local path."""
    manager = get_skill_manager()

    try:
        dest_path = manager.install_skill(source, force=force)
    except NotImplementedError as e:
        console.print(f"[yellow]{e}[/yellow]")
        console.print("[dim]Currently only local path installation is supported.[/dim]")
        raise typer.Exit(1)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except SkillParseError as e:
        print_error(f"Invalid skill: {e}")
        raise typer.Exit(1)
    except OSError as e:
        print_error(f"Failed to install skill: {e}")
        raise typer.Exit(1)

    console.print("[green]Skill installed successfully![/green]")
    console.print(f"[dim]Location: {dest_path}[/dim]")


@app.command()
def remove(
    name: Annotated[str, typer.Argument(help="Skill name to remove.")],
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation.",
        ),
    ] = False,
) -> None:
    """Remove an installed skill."""
    manager = get_skill_manager()

    try:
        info = manager.get_skill_info(name)
    except (SkillNotFoundError, SkillParseError):
        info = None

    if info is not None and info["source"] not in ("global", "project"):
        print_error(f"Skill '{name}' comes from {info['source']} and cannot be removed here")
        raise typer.Exit(1)

    if not yes:
        location = info["path"] if info else name
        console.print(f"[yellow]This will remove skill '{name}' from {location}[/yellow]")
        if not typer.confirm("Are you sure?"):
            console.print("[dim]Cancelled.[/dim]")
            return

    try:
        manager.remove_skill(name)
    except SkillNotFoundError:
        print_error(f"Skill not found: {name}")
        raise typer.Exit(1)

    console.print(f"[green]Skill '{name}' removed successfully.[/green]")


@app.command()
def create(
    name: Annotated[str, typer.Argument(help="Name for the new skill.")],
    description: Annotated[
        str,
        typer.Option(
            "--description",
            "-d",
            help="What the skill does and when to use it.",
        ),
    ] = "A new skill",
    location: Annotated[
        str,
        typer.Option(
            "--location",
            "-l",
            help="Where to create (global or project).",
        ),
    ] = "global",
) -> None:
    """Create a new skill from template."""
    manager = get_skill_manager()

    try:
        skill_path = manager.create_skill(name, description=description, location=location)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print("[green]Skill created successfully![/green]")
    console.print(f"[dim]Location: {skill_path}[/dim]")
    console.print("\nNext steps:")
    console.print(f"  1. Edit [cyan]{skill_path}/SKILL.md[/cyan] to add instructions")
    console.print(f"  2. Validate: [cyan]skillpack skill validate {skill_path}[/cyan]")


@app.command("validate")
def validate_skill(
    path: Annotated[Path, typer.Argument(help="Path to skill directory.")],
) -> None:
    """Validate a skill."""
    manager = get_skill_manager()

    issues = manager.validate_skill(path)

    if not issues:
        console.print("[green]Skill is valid![/green]")
        return

    errors = [i for i in issues if not i.startswith("Warning:")]
    warnings = [i for i in issues if i.startswith("Warning:")]

    if errors:
        console.print("[red]Validation errors:[/red]")
        for error in errors:
            console.print(f"  - {error}", style="red", markup=False)

    if warnings:
        console.print("[yellow]Warnings:[/yellow]")
        for warning in warnings:
            console.print(f"  - {warning}", style="yellow", markup=False)

    if errors:
        raise typer.Exit(1)


@app.command()
def reindex() -> None:
    """Rebuild the skill index."""
    manager = get_skill_manager()

    console.print("[dim]Rebuilding skill index...[/dim]")
    index = manager.reindex()

    console.print("[green]Index rebuilt successfully![/green]")
    console.print(f"[dim]Indexed {len(index.skills)} skill(s)[/dim]")
