"""Utility functions for CLI commands."""

import logging
import os
import typer
from pathlib import Path
from typing import Optional, Tuple
from rich.console import Console
from rich.markup import escape

from phonebook.config import AppConfig, Config
from phonebook.infrastructure.project_store import ProjectStore, ProjectStoreError

console = Console()


def get_config_with_data() -> Tuple[Config, AppConfig]:
    """Get config and its loaded data.

    Returns:
        tuple: (config, config_data)
    """
    config = Config()
    try:
        config_data = config.load()
    except (ValueError, OSError) as e:
        console.print(f"[red]❌ Invalid configuration at {config.config_path}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    return config, config_data


def get_store(config: Config) -> ProjectStore:
    """Open and load the project catalogue.

    Raises:
        typer.Exit: If the catalogue cannot be read
    """
    store = ProjectStore(config.projects_path)
    try:
        store.load()
    except (ProjectStoreError, OSError) as e:
        console.print(f"[red]❌ Error loading projects: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    return store


def setup_logging(level: str, log_file: Optional[Path] = None) -> None:
    """Configure root logging.

    Args:
        level: Level name, e.g. "INFO"
        log_file: Write to this file instead of stderr
    """
    numeric = getattr(logging, level.upper(), logging.WARNING)
    handlers = None
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file, encoding="utf-8")]

    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def show_env_config():
    """Display active environment variable configuration."""
    env_vars = {
        "PHONEBOOK_CONFIG_DIR": os.environ.get("PHONEBOOK_CONFIG_DIR"),
        "PHONEBOOK_PROJECTS_FILE": os.environ.get("PHONEBOOK_PROJECTS_FILE"),
        "PHONEBOOK_EDITOR": os.environ.get("PHONEBOOK_EDITOR"),
        "PHONEBOOK_LOG_LEVEL": os.environ.get("PHONEBOOK_LOG_LEVEL"),
    }

    active = {k: v for k, v in env_vars.items() if v}
    if active:
        console.print("\n[yellow]Active environment variables:[/yellow]")
        for key, value in active.items():
            console.print(f"  {key}={value}")
    else:
        console.print("\n[dim]No Phonebook environment variables set[/dim]")
