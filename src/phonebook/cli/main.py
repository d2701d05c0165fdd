"""Main CLI entry point for Phonebook."""

import typer
from typing import Optional
from rich.markup import escape
from rich.table import Table as RichTable

from phonebook.cli.utils import (
    console,
    get_config_with_data,
    get_store,
    setup_logging,
)
from phonebook.infrastructure.project_store import ProjectStoreError

app = typer.Typer(
    name="phonebook",
    help="Phonebook - browse, search and open your projects",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default: from config)"
    ),
):
    """
    Phonebook - browse, search and open your projects

    Run without a command to open the interactive screen.
    """
    config, config_data = get_config_with_data()
    level = log_level or config_data.log_level

    if ctx.invoked_subcommand is not None:
        setup_logging(level)
        return

    # The screen owns the terminal, so logs go to a file
    setup_logging(level, log_file=config.log_path)

    from phonebook.tui.app import run_app

    store = get_store(config)
    run_app(store, config_data)


@app.command(name="list")
def list_projects(
    query: Optional[str] = typer.Option(
        None, "--query", "-q", help="Only show projects matching this query"
    ),
):
    """List projects, best matches first when a query is given."""
    from phonebook.core.ranking import rank, score_project

    config, config_data = get_config_with_data()
    store = get_store(config)
    projects = store.list()

    order = rank(query or "", projects, config_data.path_weight_divisor)
    if not order:
        if query:
            console.print(f"[yellow]No projects match '{query}'[/yellow]")
        else:
            console.print("[yellow]No projects found. Add one with 'phonebook add'[/yellow]")
        return

    table = RichTable(title="Projects")
    table.add_column("Name", style="cyan")
    table.add_column("Tag", style="blue")
    table.add_column("Path", style="dim")
    table.add_column("Updated", style="green")
    if query:
        table.add_column("Score", justify="right")

    for index in order:
        project = projects[index]
        row = [
            project.name,
            project.tag,
            project.path,
            project.updated_at.astimezone().strftime("%b %d, %Y %H:%M"),
        ]
        if query:
            row.append(str(score_project(query.strip(), project, config_data.path_weight_divisor)))
        table.add_row(*row)

    console.print(table)


@app.command()
def add(
    name: str = typer.Argument(..., help="Project name"),
    path: str = typer.Argument(..., help="Project directory"),
    tag: str = typer.Option("", "--tag", "-t", help="Short label"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
):
    """Add a project to the catalogue."""
    from phonebook.models import Project
    from phonebook.core.form import REQUIRED_MESSAGE
    from phonebook.utils.path_validator import expand_path, validate_path

    name, path = name.strip(), path.strip()
    if not name or not path:
        console.print(f"[red]❌ {REQUIRED_MESSAGE}[/red]")
        raise typer.Exit(1)

    problem = validate_path(path)
    if problem:
        console.print(f"[red]❌ Cannot add project: {problem}[/red]")
        raise typer.Exit(1)

    config, config_data = get_config_with_data()
    store = get_store(config)

    try:
        project = store.append(
            Project(
                name=name,
                path=expand_path(path),
                tag=tag.strip(),
                description=description.strip(),
            )
        )
    except (ProjectStoreError, OSError) as e:
        console.print(f"[red]❌ Error saving projects: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Added '{project.name}'[/green]")
    console.print(f"   Path: {project.path}")


@app.command()
def remove(
    name: str = typer.Argument(..., help="Name of the project to remove"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Force removal without confirmation"
    ),
):
    """Remove a project from the catalogue (the directory is left alone)."""
    config, config_data = get_config_with_data()
    store = get_store(config)

    index = store.find(name)
    if index is None:
        console.print(f"[red]❌ Project '{name}' does not exist[/red]")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(f"Are you sure you want to remove project '{name}'?")
        if not confirm:
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    try:
        store.remove(index)
    except (ProjectStoreError, OSError) as e:
        console.print(f"[red]❌ Error saving projects: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Removed '{name}'[/green]")


@app.command(name="open")
def open_project(
    query: str = typer.Argument(..., help="Query matched against the catalogue"),
):
    """Open the best matching project in the editor."""
    from phonebook.core.editor import EditorLauncher
    from phonebook.core.ranking import rank

    config, config_data = get_config_with_data()
    store = get_store(config)

    order = rank(query, store.list(), config_data.path_weight_divisor)
    if not order:
        console.print(f"[red]❌ No project matches '{query}'[/red]")
        raise typer.Exit(1)

    try:
        project = store.touch_updated_at(order[0])
    except (ProjectStoreError, OSError) as e:
        console.print(f"[red]❌ Error saving projects: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print(f"[cyan]Opening '{project.name}'...[/cyan]")

    result = EditorLauncher(config_data.editor_command).launch(project.path)
    if not result.ok:
        console.print(f"[red]❌ Error: {result.error}[/red]")
        raise typer.Exit(1)


@app.command()
def complete(
    partial: str = typer.Argument("", help="Partial path to complete"),
):
    """Complete a path the way the add form does."""
    from phonebook.core.completion import PathCompleter

    completion = PathCompleter().complete(partial)
    typer.echo(completion.proposed)
    for candidate in completion.candidates:
        typer.echo(f"  {candidate}")


@app.command()
def init():
    """Write a default configuration file."""
    from phonebook.config import Config

    config = Config()
    try:
        config.init_config()
    except FileExistsError:
        console.print(f"[red]❌ Config already exists at {config.config_path}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Wrote {config.config_path}[/green]")


@app.command()
def version():
    """Show Phonebook version."""
    from phonebook import __version__

    typer.echo(f"Phonebook version {__version__}")


@app.command()
def status():
    """Show configuration, catalogue location and environment variables."""
    from phonebook.cli.utils import show_env_config

    config, config_data = get_config_with_data()
    store = get_store(config)

    console.print("\n[bold]Phonebook Status[/bold]")
    console.print(f"Config: {config.config_path}" + ("" if config.exists else " [dim](defaults)[/dim]"))
    console.print(f"Catalogue: {store.path}")
    console.print(f"Projects: {len(store)}")
    console.print(f"Editor: {' '.join(config_data.editor_command)}")
    console.print(f"Path weight divisor: {config_data.path_weight_divisor}")

    show_env_config()


if __name__ == "__main__":
    app()
