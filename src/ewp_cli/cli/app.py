"""
Main CLI application for EWP CLI.

Provides a Typer-based command-line interface for inspecting and maintaining
the file list of IAR Embedded Workbench project files.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import get_config_manager, load_config
from ..converters.ewp_to_model import decode
from ..converters.model_to_ewp import encode
from ..core.project_model import EwpProject, PATH_SEPARATOR, make_file_entry
from ..exceptions import EwpError

# Initialize Typer app
app = typer.Typer(
    name="ewp-cli",
    help="Inspect and maintain IAR Embedded Workbench project files",
    add_completion=False,
    rich_markup_mode="rich"
)

# Global console for rich output
console = Console()

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else load_config().log_level
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True,
    )


def _load_project(file_path: Path) -> EwpProject:
    """Read and decode a project file, exiting on failure."""
    if not file_path.exists():
        console.print(f"[red]Error: File not found: {file_path}[/red]")
        raise typer.Exit(1)

    try:
        return decode(file_path.read_bytes())
    except EwpError as e:
        console.print(f"[red]Error reading project {file_path}: {e}[/red]")
        raise typer.Exit(1)


def _save_project(project: EwpProject, output_path: Path, backup: bool = False) -> None:
    """Encode and write a project file, exiting on failure."""
    try:
        data = encode(project)
    except EwpError as e:
        console.print(f"[red]Error writing project: {e}[/red]")
        raise typer.Exit(1)

    if backup and output_path.exists():
        backup_path = output_path.with_name(output_path.name + ".bak")
        shutil.copy2(output_path, backup_path)
        logger.info("Backed up %s to %s", output_path, backup_path)

    output_path.write_bytes(data)
    logger.info("Wrote %d bytes to %s", len(data), output_path)


def _entry_name(name: str) -> str:
    if load_config().convert_forward_slashes:
        return name.replace("/", PATH_SEPARATOR)
    return name


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    Inspect and maintain IAR Embedded Workbench project files.
    """
    _configure_logging(verbose)


@app.command("list")
def list_files(
    file_path: Path = typer.Argument(..., help="Path to the .ewp project"),
) -> None:
    """
    List the files in a project.
    """
    project = _load_project(file_path)

    table = Table(title=f"Files in {file_path.name}", show_header=True)
    table.add_column("Path", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Excluded From", style="yellow")

    for entry in project.files:
        if entry.exclusions is None:
            excluded = ""
        else:
            excluded = ", ".join(entry.exclusions) or "(none)"
        table.add_row(entry.path, entry.base_name, excluded)

    console.print(table)


@app.command()
def info(
    file_path: Path = typer.Argument(..., help="Path to the .ewp project"),
) -> None:
    """
    Show project version and content counts.
    """
    project = _load_project(file_path)
    stats = project.get_stats()

    panel = Panel.fit(
        f"""[bold cyan]{file_path.name}[/bold cyan]

[bold]File Version:[/bold] {stats['file_version']}
[bold]Encoding:[/bold] {stats['encoding'] or 'not declared'}
[bold]Files:[/bold] {stats['file_count']}
[bold]Excluded Files:[/bold] {stats['excluded_file_count']}
[bold]Configurations:[/bold] {stats['configuration_count']}
[bold]Groups:[/bold] {stats['group_count']}""",
        title="Project Information",
        border_style="blue"
    )
    console.print(panel)


@app.command()
def add(
    file_path: Path = typer.Argument(..., help="Path to the .ewp project"),
    name: str = typer.Argument(..., help="File path relative to the project directory"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-x", help="Configuration to exclude the file from"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Output path (default: overwrite original)"),
) -> None:
    """
    Add a file to a project, keeping the file list sorted.
    """
    config = load_config()
    project = _load_project(file_path)

    exclusions = exclude if exclude else config.default_exclusions
    entry = make_file_entry(_entry_name(name), *exclusions)

    if project.contains(entry) and not config.allow_duplicates:
        console.print(f"[yellow]{entry.path} is already in the project[/yellow]")
        raise typer.Exit(1)

    project.insert_file(entry)
    _save_project(project, output_path or file_path, backup=config.backup)
    console.print(f"[green]Added {entry.path}[/green]")


@app.command()
def contains(
    file_path: Path = typer.Argument(..., help="Path to the .ewp project"),
    name: str = typer.Argument(..., help="File path relative to the project directory"),
) -> None:
    """
    Check whether a file is in a project. Exits with 1 if it is not.
    """
    project = _load_project(file_path)
    entry = make_file_entry(_entry_name(name))

    if project.contains(entry):
        console.print(f"[green]{entry.path} is in the project[/green]")
        return

    console.print(f"[yellow]{entry.path} is not in the project[/yellow]")
    raise typer.Exit(1)


@app.command("sort")
def sort_files(
    file_path: Path = typer.Argument(..., help="Path to the .ewp project"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Output path (default: overwrite original)"),
) -> None:
    """
    Sort the file list of a project by path.
    """
    config = load_config()
    project = _load_project(file_path)
    project.sort_files()
    _save_project(project, output_path or file_path, backup=config.backup)
    console.print(f"[green]Sorted {len(project.files)} files[/green]")


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    create_default: bool = typer.Option(False, "--create-default", help="Create default config file"),
) -> None:
    """
    Manage EWP CLI configuration.
    """
    config_manager = get_config_manager()

    if create_default:
        config_manager.create_default_config()
        console.print(f"[green]Created default configuration at {config_manager.config_file}[/green]")
        return

    if show:
        config_info = config_manager.get_config_info()
        exclusions = ", ".join(config_info['default_exclusions']) or "none"

        config_display = f"""[bold]EWP CLI Configuration[/bold]

[bold cyan]Files:[/bold cyan]
• Default Exclusions: {exclusions}
• Convert Forward Slashes: {'✓' if config_info['convert_forward_slashes'] else '✗'}
• Allow Duplicates: {'✓' if config_info['allow_duplicates'] else '✗'}
• Backup: {'✓' if config_info['backup'] else '✗'}

[bold yellow]Logging:[/bold yellow]
• Level: {config_info['log_level']}

[bold magenta]Config File:[/bold magenta]
• Path: {config_info['config_file']}
• Exists: {'Yes' if config_info['config_exists'] else 'No'}"""

        console.print(Panel(config_display, border_style="green"))
        return

    # Default: show basic info
    console.print("Use [cyan]ewp-cli config --show[/cyan] to see full configuration")
    console.print("Use [cyan]ewp-cli config --create-default[/cyan] to create a default config file")


if __name__ == "__main__":
    app()
