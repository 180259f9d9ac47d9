"""
Pattern configuration CLI commands for Sakata.
"""

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ..exceptions import PatternConfigError
from ..patterns.config_manager import PatternConfigManager

console = Console()


def _manager(ctx: click.Context, path: Optional[Path]) -> PatternConfigManager:
    if path is None:
        config = (ctx.obj or {}).get("config")
        if config is not None and config.engine.pattern_config_path:
            path = Path(config.engine.pattern_config_path)
    return PatternConfigManager(path)


@click.group(name="config")
def config_group():
    """Pattern configuration file management."""
    pass


@config_group.command()
@click.option('--path', '-p', type=click.Path(path_type=Path), default=None, help='Config file to write')
@click.option('--force', is_flag=True, help='Overwrite an existing file (a backup is kept)')
@click.pass_context
def create(ctx: click.Context, path: Optional[Path], force: bool):
    """Create a pattern config file from the defaults."""
    manager = _manager(ctx, path)
    if manager.user_config_path.exists():
        if not force:
            console.print(f"[yellow]⚠️  {manager.user_config_path} already exists (use --force)[/yellow]")
            ctx.exit(1)
        manager.reset_to_default()
    else:
        manager.create_user_config_from_default()
    console.print(f"[green]✅ Created {manager.user_config_path}[/green]")


@config_group.command()
@click.option('--path', '-p', type=click.Path(path_type=Path), default=None, help='Config file to check')
@click.pass_context
def validate(ctx: click.Context, path: Optional[Path]):
    """Validate a pattern config file."""
    manager = _manager(ctx, path)
    if manager.validate_config():
        console.print(f"[green]✅ Configuration file is valid: {manager.user_config_path}[/green]")
    else:
        console.print(f"[red]❌ Configuration file is invalid: {manager.user_config_path}[/red]")
        ctx.exit(1)


@config_group.command()
@click.option('--path', '-p', type=click.Path(path_type=Path), default=None, help='Config file to describe')
@click.pass_context
def info(ctx: click.Context, path: Optional[Path]):
    """Show where the pattern config lives and what it covers."""
    details = _manager(ctx, path).get_config_info()

    table = Table(title="Pattern Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Config file", details["user_config_path"])
    table.add_row("Exists", "yes" if details["user_config_exists"] else "no")
    table.add_row("Sections", ", ".join(details["sections"]))
    table.add_row("Patterns", str(len(details["available_patterns"])))
    console.print(table)


@config_group.command()
@click.option('--path', '-p', type=click.Path(path_type=Path), default=None, help='Config file to show')
@click.pass_context
def show(ctx: click.Context, path: Optional[Path]):
    """Print the effective pattern configuration as JSON."""
    manager = _manager(ctx, path)
    try:
        config = manager.initialize_config()
    except PatternConfigError as e:
        console.print(f"[red]❌ {e}[/red]")
        ctx.exit(1)
    click.echo(json.dumps(config.to_dict(), indent=2))
