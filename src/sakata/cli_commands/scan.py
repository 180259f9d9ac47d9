"""
Scan CLI command for Sakata.

Loads a bar series from CSV or JSON, runs the batch pattern engine over it and
prints the bars on which patterns resolved.
"""

import csv
import json
from pathlib import Path
from typing import List, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..config import Config
from ..exceptions import BarDataError, PatternConfigError
from ..logger import get_series_adapter
from ..models.market_data import Bar
from ..models.signals import PatternBias
from ..patterns.alerts import collect_alerts
from ..patterns.engine import PatternEngine
from ..patterns.labels import get_label
from ..patterns.pattern_config import PatternDetectionConfig

console = Console()

_BIAS_STYLES = {
    PatternBias.BULLISH: "blue",
    PatternBias.BEARISH: "red",
    PatternBias.NEUTRAL: "white",
}


def _records_from_json(path: Path) -> list:
    try:
        with open(path, 'r', encoding='utf-8-sig') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise BarDataError(f"Invalid JSON in {path}: {e}") from e
    except (UnicodeDecodeError, OSError) as e:
        raise BarDataError(f"Cannot read {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("bars", data.get("candles"))
    if not isinstance(data, list):
        raise BarDataError(f"{path} must contain a list of bars or an object with a 'bars' list")
    return data


def _records_from_csv(path: Path) -> list:
    # utf-8-sig drops the byte order mark spreadsheet exports put before the header
    try:
        with open(path, 'r', newline='', encoding='utf-8-sig') as f:
            reader = csv.DictReader(f)
            if not reader.fieldnames:
                raise BarDataError(f"{path} has no header row")
            return list(reader)
    except (UnicodeDecodeError, OSError, csv.Error) as e:
        raise BarDataError(f"Cannot read {path}: {e}") from e


def load_bars(path: Path) -> List[Bar]:
    """
    Load a chronological bar series from a CSV or JSON file.

    CSV files need a header row; JSON files hold a list of objects (or an
    object with a ``bars`` list). Column names follow Bar.from_record.

    Raises:
        BarDataError: unreadable file, unknown format or invalid bar
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == '.csv':
        records = _records_from_csv(path)
    elif suffix == '.json':
        records = _records_from_json(path)
    else:
        raise BarDataError(f"Unsupported bar file format: {path.suffix or '(none)'}")

    bars = []
    for number, record in enumerate(records, start=1):
        if not isinstance(record, dict):
            raise BarDataError(f"Bar {number} in {path} is not an object")
        try:
            bars.append(Bar.from_record(record))
        except ValidationError as e:
            raise BarDataError(f"Bar {number} in {path} is invalid: {e.errors()[0]['msg']}") from e
    return bars


def _pattern_codes(evaluation) -> str:
    codes = []
    for pattern in evaluation.detected:
        label = get_label(pattern)
        codes.append(f"[{_BIAS_STYLES[label.bias]}]{label.code}[/{_BIAS_STYLES[label.bias]}]")
    return " ".join(codes)


@click.command()
@click.argument('bar_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--symbol', '-s', default=None, help='Symbol shown in the output and log context')
@click.option('--all-bars', is_flag=True, help='Show every bar, not only bars with patterns')
@click.option(
    '--pattern-config', '-p',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='Pattern configuration JSON (overrides PATTERN_CONFIG_PATH)'
)
@click.option('--timeframe', '-t', default=None, help='Chart timeframe used in alert messages')
@click.option('--alerts', is_flag=True, help='Print alert messages for detected patterns')
@click.pass_context
def scan(
    ctx: click.Context,
    bar_file: Path,
    symbol: Optional[str],
    all_bars: bool,
    pattern_config: Optional[Path],
    timeframe: Optional[str],
    alerts: bool
):
    """Scan a CSV/JSON bar file for candlestick patterns."""
    config: Config = (ctx.obj or {}).get("config") or Config()
    timeframe = timeframe or config.engine.default_timeframe
    log = get_series_adapter(symbol=symbol, timeframe=timeframe, logger_name=__name__)

    try:
        if pattern_config:
            detection_config = PatternDetectionConfig.load_from_file(pattern_config)
        else:
            detection_config = config.build_pattern_config()
        bars = load_bars(bar_file)
    except (BarDataError, PatternConfigError) as e:
        console.print(f"[red]❌ {e}[/red]")
        ctx.exit(1)

    log.info(f"Scanning {len(bars)} bars from {bar_file}")
    evaluations = PatternEngine(detection_config, symbol=symbol, timeframe=timeframe).evaluate(bars)

    title = f"Patterns in {bar_file.name}" + (f" ({symbol})" if symbol else "")
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Time")
    table.add_column("Open", justify="right")
    table.add_column("High", justify="right")
    table.add_column("Low", justify="right")
    table.add_column("Close", justify="right")
    table.add_column("Patterns")

    hits = 0
    for evaluation in evaluations:
        if evaluation.detected:
            hits += 1
        elif not all_bars:
            continue
        bar = evaluation.bar
        table.add_row(
            str(evaluation.index),
            bar.timestamp.strftime("%Y-%m-%d %H:%M") if bar.timestamp else "",
            str(bar.open),
            str(bar.high),
            str(bar.low),
            str(bar.close),
            _pattern_codes(evaluation),
        )

    console.print(table)
    console.print(f"[green]✅ {hits} of {len(evaluations)} bars matched at least one pattern[/green]")

    if alerts:
        for evaluation in evaluations:
            for message in collect_alerts(evaluation, timeframe):
                console.print(f"[yellow]🔔 Bar {evaluation.index}: {message}[/yellow]")
