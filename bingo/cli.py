"""
CLI Interface
=============
Command-line interface for the bingo simulator.

Usage:
    python -m bingo part-one <input_path>
    python -m bingo part-two <input_path>
    python -m bingo solve <input_path> [--json-output]
    python -m bingo validate <input_path>
    python -m bingo info <input_path>

Use "-" as the input path to read from stdin.
"""

from __future__ import annotations

import functools
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .engine import BingoEngine, EngineConfig
from .errors import BingoError
from .models import Card, Game, ValidationReport, Win

console = Console()


def engine_options(func):
    """Options shared by every command that builds an engine."""

    @click.argument("input_path", type=click.Path(allow_dash=True))
    @click.option(
        "--log-level",
        default="WARNING",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
        help="Logging level",
    )
    @click.option(
        "--log-file",
        default=None,
        help="Path to log file",
    )
    @click.option(
        "--card-size",
        default=None,
        type=click.IntRange(min=1),
        help="Card side length (default: inferred from each card's first row)",
    )
    @click.option(
        "--no-strict-shape",
        is_flag=True,
        default=False,
        help="Allow non-square or mismatched cards",
    )
    @functools.wraps(func)
    def wrapper(input_path, log_level, log_file, card_size, no_strict_shape, **kwargs):
        config = EngineConfig(
            log_level=log_level,
            log_file=log_file,
            card_size=card_size,
            strict_shape=not no_strict_shape,
        )
        try:
            engine = BingoEngine(config)
            text = engine.load(input_path)
            return func(engine, text, **kwargs)
        except (BingoError, FileNotFoundError) as e:
            console.print(f"[red]Error:[/] {escape(str(e))}")
            sys.exit(1)

    return wrapper


@click.group()
@click.version_option(version=__version__, prog_name="bingo")
def cli():
    """Bingo simulator: find the first and last winning cards."""
    pass


@cli.command("part-one")
@engine_options
def part_one(engine: BingoEngine, text: str):
    """Score of the first card to complete a row or column."""
    console.print(f"Solution:\n{engine.part_one(text)}", highlight=False)


@cli.command("part-two")
@engine_options
def part_two(engine: BingoEngine, text: str):
    """Score of the last card to complete a row or column."""
    console.print(f"Solution:\n{engine.part_two(text)}", highlight=False)


@cli.command()
@engine_options
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only JSON result to stdout (for programmatic use)",
)
def solve(engine: BingoEngine, text: str, json_output: bool):
    """Run both replays and report the winning cards."""
    result = engine.solve(text)

    if json_output:
        print(result.model_dump_json(indent=2))
        return

    table = Table(title="Winners", border_style="cyan")
    table.add_column("Policy", style="bold")
    table.add_column("Card", justify="right")
    table.add_column("Call", justify="right")
    table.add_column("Unmarked Sum", justify="right")
    table.add_column("Score", justify="right")

    _add_win_row(table, "First winner", result.first_win)
    _add_win_row(table, "Last winner", result.last_win)

    console.print()
    console.print(table)
    console.print()
    _display_validation_table(result.validation)


@cli.command()
@engine_options
def validate(engine: BingoEngine, text: str):
    """Parse the input and print the validation report."""
    engine.config.strict_shape = False
    _, report = engine.parse_and_validate(text)

    console.print()
    console.print(
        Panel.fit("[bold cyan]Validation Report[/]", border_style="cyan")
    )
    _display_validation_table(report)

    if not report.is_valid:
        sys.exit(1)


@cli.command()
@engine_options
def info(engine: BingoEngine, text: str):
    """Display the parsed calls and cards."""
    game = engine.parse_game(text)

    console.print()
    table = Table(title="Game Information", border_style="cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value")
    table.add_row("Calls", str(len(game.calls)))
    table.add_row("Cards", str(len(game.cards)))
    table.add_row("Card Size", f"{game.side}x{game.side}")
    table.add_row("Call Order", _format_calls(game))
    console.print(table)
    console.print()

    for index, card in enumerate(game.cards):
        console.print(_card_table(index, card))
    console.print()


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _add_win_row(table: Table, label: str, win: Optional[Win]):
    if win is None:
        table.add_row(label, "-", "-", "-", "[red]no winner[/]")
        return
    table.add_row(
        label,
        str(win.card_index),
        str(win.status.call),
        str(win.status.sum),
        f"[green]{win.status.score}[/]",
    )


def _format_calls(game: Game, limit: int = 20) -> str:
    shown = ",".join(str(call) for call in game.calls[:limit])
    if len(game.calls) > limit:
        shown += ",…"
    return shown


def _card_table(index: int, card: Card) -> Table:
    table = Table(
        title=f"Card {index}",
        show_header=False,
        border_style="dim",
    )
    for _ in range(card.dimensions[1]):
        table.add_column(justify="right")
    for row in card.cells:
        table.add_row(*[
            f"[bold green]{cell.value}[/]" if cell.is_marked else str(cell.value)
            for cell in row
        ])
    return table


def _display_validation_table(report: ValidationReport):
    """Display validation report as a rich table."""
    table = Table(title="Validation Report", border_style="green")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Status", justify="center")

    table.add_row(
        "Cards",
        str(report.card_count),
        "[green]✓[/]" if report.card_count > 0 else "[red]✗[/]",
    )
    table.add_row("Calls", str(report.call_count), "[green]✓[/]")
    table.add_row(
        "Duplicate Calls",
        str(len(report.duplicate_calls)),
        "[green]✓[/]" if not report.duplicate_calls else "[yellow]⚠[/]",
    )
    table.add_row(
        "Anomalies",
        str(len(report.anomalies)),
        "[green]✓[/]" if report.is_valid else "[red]✗[/]",
    )

    console.print(table)
    console.print()

    if report.anomalies:
        anomaly_table = Table(
            title="Anomalies",
            border_style="yellow",
        )
        anomaly_table.add_column("Type", style="bold")
        anomaly_table.add_column("Severity")
        anomaly_table.add_column("Message")

        for anomaly in report.anomalies:
            anomaly_table.add_row(
                anomaly.type.value,
                anomaly.severity.value,
                escape(anomaly.message),
            )

        console.print(anomaly_table)
        console.print()


# ─── Entry point (for python -m bingo.cli) ────────────────────────────────────


if __name__ == "__main__":
    cli()
