"""
Command-line interface for Sakata.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import Config
from .logger import setup_logger
from .models.signals import PatternType
from .patterns.engine import PatternRecognizer
from .patterns.labels import get_label
from .patterns.trend_gate import TREND_REQUIREMENTS
from .cli_commands.scan import scan
from .cli_commands.config import config_group

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="sakata")
@click.option(
    "--env-file",
    "-e",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a .env file"
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging"
)
@click.pass_context
def main(ctx: click.Context, env_file: Optional[Path], verbose: bool) -> None:
    """
    Sakata: Candlestick Pattern Recognition

    Detects Japanese candlestick patterns in OHLC bar files.
    """
    ctx.ensure_object(dict)

    try:
        ctx.obj["config"] = Config.load_from_env(str(env_file) if env_file else None)
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    if verbose:
        ctx.obj["config"].logging.level = "DEBUG"

    logging_config = ctx.obj["config"].logging
    ctx.obj["logger"] = setup_logger(
        "sakata",
        level=logging_config.level,
        log_file=logging_config.file_path,
        max_size=logging_config.max_size,
        backup_count=logging_config.backup_count
    )


main.add_command(scan)
main.add_command(config_group)


@main.command()
def patterns() -> None:
    """List every pattern the engine recognizes."""
    table = Table(title="Candlestick Patterns")
    table.add_column("Code", style="bold")
    table.add_column("Pattern")
    table.add_column("Bias")
    table.add_column("Bars", justify="right")
    table.add_column("Trend", style="dim")

    for detector in PatternRecognizer().detectors:
        label = get_label(detector.pattern_type)
        requirement = TREND_REQUIREMENTS.get(detector.pattern_type)
        trend = f"{requirement[0].value}, lag {requirement[1]}" if requirement else ""
        table.add_row(label.code, label.title, label.bias.value, str(detector.required_bars), trend)

    console.print(table)
    console.print(f"{len(PatternType)} patterns")


if __name__ == "__main__":
    main()
